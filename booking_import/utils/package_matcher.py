"""
Package bucket to yacht catalog resolution.

A bucket (e.g. 'adult_alc') is resolved against the yacht's package catalog:
1. Exact case-insensitive match on the bucket label ('ADULT ALC')
2. Structural match on a PackageProfile parsed from the catalog name

Profiles are compared field by field so a base package can never resolve
to a VIP, royal or top deck entry, and an alcohol bucket can never resolve
to a soft drinks or child entry.
"""

import logging
import re
from dataclasses import dataclass

from booking_import.config import PACKAGE_BUCKET_LABELS
from booking_import.models import PackageQuantityLine

logger = logging.getLogger(__name__)

TIER_BASE = 'base'
TIER_VIP = 'vip'
TIER_ROYAL = 'royal'
TIER_HOUR_CHARTER = 'hour_charter'

AUDIENCE_ADULT = 'adult'
AUDIENCE_CHILD = 'child'

# Catalog names that are exactly one of these words form their own tier
NAMED_TIERS = ('basic', 'standard', 'premium')


@dataclass(frozen=True)
class PackageProfile:
    tier: str
    audience: str
    alcohol: bool = False
    soft: bool = False
    top_deck: bool = False


# Bucket key -> profile the bucket asks for
BUCKET_PROFILES = {
    'child': PackageProfile(TIER_BASE, AUDIENCE_CHILD),
    'adult': PackageProfile(TIER_BASE, AUDIENCE_ADULT),
    'adult_alc': PackageProfile(TIER_BASE, AUDIENCE_ADULT, alcohol=True),
    'child_top_deck': PackageProfile(TIER_BASE, AUDIENCE_CHILD, top_deck=True),
    'adult_top_deck': PackageProfile(TIER_BASE, AUDIENCE_ADULT, top_deck=True),
    'adult_top_deck_alc': PackageProfile(TIER_BASE, AUDIENCE_ADULT, alcohol=True, top_deck=True),
    'vip_child': PackageProfile(TIER_VIP, AUDIENCE_CHILD),
    'vip_adult': PackageProfile(TIER_VIP, AUDIENCE_ADULT),
    'vip_alc': PackageProfile(TIER_VIP, AUDIENCE_ADULT, alcohol=True),
    'royal_child': PackageProfile(TIER_ROYAL, AUDIENCE_CHILD),
    'royal_adult': PackageProfile(TIER_ROYAL, AUDIENCE_ADULT),
    'royal_alc': PackageProfile(TIER_ROYAL, AUDIENCE_ADULT, alcohol=True),
    'basic': PackageProfile('basic', AUDIENCE_ADULT),
    'standard': PackageProfile('standard', AUDIENCE_ADULT),
    'premium': PackageProfile('premium', AUDIENCE_ADULT),
    'hour_charter': PackageProfile(TIER_HOUR_CHARTER, AUDIENCE_ADULT),
}


def profile_catalog_name(name):
    """
    Parse a catalog package name into a PackageProfile.

    Example:
        "VIP Unlimited Alcoholic Drinks" -> tier=vip, adult, alcohol
        "Food & Soft Drinks (Child)"     -> tier=base, child, soft
        "Top Deck Adult"                 -> tier=base, adult, top_deck
    """
    upper = re.sub(r'\s+', ' ', str(name or '')).strip().upper()
    words = set(re.findall(r'[A-Z]+', upper))

    if upper.lower() in NAMED_TIERS:
        tier = upper.lower()
    elif 'ROYAL' in upper:
        tier = TIER_ROYAL
    elif 'VIP' in words:
        tier = TIER_VIP
    elif 'HOUR' in upper or 'CHARTER' in upper:
        tier = TIER_HOUR_CHARTER
    else:
        tier = TIER_BASE

    soft = 'SOFT' in upper
    alcohol = (
        'ALC' in upper
        or 'BAR' in words
        or 'HARD' in words
        or ('DRINK' in upper and not soft)
    )

    return PackageProfile(
        tier=tier,
        audience=AUDIENCE_CHILD if ('CHILD' in upper or 'KID' in upper) else AUDIENCE_ADULT,
        alcohol=alcohol,
        soft=soft,
        top_deck=bool(re.search(r'TOP[\s\-]?DECK', upper)),
    )


def profile_matches(wanted, candidate):
    """
    Compare a bucket profile with a catalog profile.

    Tier, audience and top deck must be equal. Alcohol buckets need an
    alcohol entry that is neither soft nor for children; every other
    bucket needs an entry without alcohol.
    """
    if wanted.tier != candidate.tier:
        return False
    if wanted.top_deck != candidate.top_deck:
        return False
    if wanted.audience != candidate.audience:
        return False
    if wanted.alcohol:
        return candidate.alcohol and not candidate.soft and candidate.audience != AUDIENCE_CHILD
    return not candidate.alcohol


def find_catalog_entry(bucket, yacht):
    """
    Find the catalog entry a bucket resolves to on a yacht.

    Args:
        bucket: Bucket key without prefix (e.g. 'vip_alc')
        yacht: Yacht with its package catalog

    Returns:
        PackageCatalogEntry or None
    """
    label = PACKAGE_BUCKET_LABELS.get(bucket, bucket).lower()
    for entry in yacht.packages:
        if entry.name.strip().lower() == label:
            return entry

    wanted = BUCKET_PROFILES.get(bucket)
    if wanted is None:
        return None

    for entry in yacht.packages:
        if profile_matches(wanted, profile_catalog_name(entry.name)):
            return entry

    return None


def _add_line(lines, entry, quantity, rate=None):
    for line in lines:
        if line.package_id == entry.package_id:
            line.quantity += quantity
            return
    lines.append(PackageQuantityLine(
        package_id=entry.package_id,
        package_name=entry.name,
        quantity=quantity,
        rate=entry.rate if rate is None else rate,
    ))


def resolve_bucket_lines(bucket_counts, yacht):
    """
    Resolve aggregated bucket counts to package lines of a yacht.

    Buckets resolving to the same catalog entry are summed into one line.

    Args:
        bucket_counts: Dict of bucket key -> quantity
        yacht: Yacht with its package catalog

    Returns:
        tuple: (list of PackageQuantityLine, list of warning messages)
    """
    lines = []
    warnings = []

    for bucket in PACKAGE_BUCKET_LABELS:
        quantity = bucket_counts.get(bucket, 0)
        if quantity <= 0:
            continue

        entry = find_catalog_entry(bucket, yacht)
        if entry is None:
            warnings.append(
                f"No package on yacht '{yacht.name}' matches bucket "
                f"'{PACKAGE_BUCKET_LABELS[bucket]}', dropping quantity {quantity}"
            )
            continue

        logger.debug(f"Bucket {bucket} x{quantity} -> '{entry.name}' ({entry.package_id})")
        _add_line(lines, entry, quantity)

    return lines, warnings


def resolve_explicit_lines(details, yacht):
    """
    Resolve explicit package detail dicts by package id.

    Args:
        details: List of {'packageId', 'packageName', 'quantity', 'rate'} dicts
        yacht: Yacht with its package catalog

    Returns:
        tuple: (list of PackageQuantityLine, list of warning messages)
    """
    catalog = {entry.package_id: entry for entry in yacht.packages}
    lines = []
    warnings = []

    for item in details:
        quantity = max(int(item.get('quantity') or 0), 0)
        entry = catalog.get(item.get('packageId'))
        if entry is None:
            warnings.append(
                f"Package '{item.get('packageName')}' ({item.get('packageId')}) "
                f"is not in the catalog of yacht '{yacht.name}', dropping it"
            )
            continue
        if quantity == 0:
            continue
        rate = float(item.get('rate') or 0) or entry.rate
        _add_line(lines, entry, quantity, rate)

    return lines, warnings
