from __future__ import annotations

import pytest

from booking_import.models import PackageCatalogEntry, Yacht
from booking_import.utils.package_matcher import (
    PackageProfile,
    find_catalog_entry,
    profile_catalog_name,
    resolve_bucket_lines,
    resolve_explicit_lines,
)


@pytest.mark.parametrize('name, expected', [
    ('Food & Soft Drinks (Child)', PackageProfile('base', 'child', soft=True)),
    ('VIP Unlimited Alcoholic Drinks', PackageProfile('vip', 'adult', alcohol=True)),
    ('Top Deck Adult', PackageProfile('base', 'adult', top_deck=True)),
    ('ADULT TOP-DECK ALC', PackageProfile('base', 'adult', alcohol=True, top_deck=True)),
    ('Royale Standard', PackageProfile('royal', 'adult')),
    ('Standard', PackageProfile('standard', 'adult')),
    ('Hour Charter', PackageProfile('hour_charter', 'adult')),
    ('Kids Meal', PackageProfile('base', 'child')),
    ('Open Bar', PackageProfile('base', 'adult', alcohol=True)),
    ('Drinks', PackageProfile('base', 'adult', alcohol=True)),
])
def test_profile_catalog_name(name, expected):
    assert profile_catalog_name(name) == expected


@pytest.mark.parametrize('yacht_id, bucket, package_id', [
    ('y-lotus', 'adult', 'l-adult'),
    ('y-lotus', 'child', 'l-child'),
    ('y-lotus', 'adult_alc', 'l-alc'),
    ('y-lotus', 'vip_adult', 'l-vip-adult'),
    ('y-lotus', 'vip_child', 'l-vip-child'),
    ('y-lotus', 'vip_alc', 'l-vip-alc'),
    ('y-lotus', 'royal_adult', 'l-royal'),
    ('y-oe', 'adult', 'oe-adult'),
    ('y-oe', 'adult_top_deck', 'oe-top'),
    ('y-oe', 'adult_top_deck_alc', 'oe-top-alc'),
    ('y-dhow', 'child', 'd-child'),
    ('y-dhow', 'adult', 'd-food'),
    ('y-dhow', 'adult_alc', 'd-drinks'),
    ('y-dhow', 'vip_adult', 'd-vip'),
])
def test_find_catalog_entry(reference, yacht_id, bucket, package_id):
    entry = find_catalog_entry(bucket, reference.find_yacht(yacht_id))
    assert entry is not None
    assert entry.package_id == package_id


@pytest.mark.parametrize('yacht_id, bucket', [
    ('y-lotus', 'royal_alc'),
    ('y-lotus', 'adult_top_deck'),
    ('y-oe', 'vip_adult'),
    ('y-dhow', 'vip_alc'),
])
def test_find_catalog_entry_without_match(reference, yacht_id, bucket):
    assert find_catalog_entry(bucket, reference.find_yacht(yacht_id)) is None


def test_base_bucket_never_resolves_to_vip_or_top_deck():
    yacht = Yacht('y-x', 'Exclusive', packages=(
        PackageCatalogEntry('x-vip', 'VIP Soft (Adult)', 400),
        PackageCatalogEntry('x-top', 'Top Deck Adult', 300),
    ))
    assert find_catalog_entry('adult', yacht) is None


def test_alcohol_bucket_never_resolves_to_soft_or_child():
    yacht = Yacht('y-x', 'Family', packages=(
        PackageCatalogEntry('x-soft', 'Soft Drinks', 100),
        PackageCatalogEntry('x-kid', 'Child Alcohol Free', 50),
    ))
    assert find_catalog_entry('adult_alc', yacht) is None


def test_exact_label_wins_over_profile():
    yacht = Yacht('y-x', 'Labels', packages=(
        PackageCatalogEntry('x-food', 'Food Package', 120),
        PackageCatalogEntry('x-adult', 'adult', 150),
    ))
    assert find_catalog_entry('adult', yacht).package_id == 'x-adult'


def test_resolve_bucket_lines_drops_unmatched(reference):
    lotus = reference.find_yacht('y-lotus')
    lines, warnings = resolve_bucket_lines({'vip_child': 1, 'vip_adult': 2, 'adult_top_deck': 3}, lotus)

    assert [(line.package_id, line.quantity, line.rate) for line in lines] == [
        ('l-vip-child', 1, 299), ('l-vip-adult', 2, 399),
    ]
    assert warnings == [
        "No package on yacht 'Lotus Royale' matches bucket 'ADULT TOP DECK', dropping quantity 3"
    ]


def test_buckets_sharing_an_entry_are_summed():
    yacht = Yacht('y-x', 'Simple', packages=(PackageCatalogEntry('x-std', 'STANDARD', 200),))
    lines, warnings = resolve_bucket_lines({'standard': 2}, yacht)
    assert len(lines) == 1 and lines[0].quantity == 2
    assert warnings == []


def test_resolve_explicit_lines(reference):
    oe = reference.find_yacht('y-oe')
    details = [
        {'packageId': 'oe-adult', 'packageName': 'ADULT', 'quantity': 2, 'rate': 0},
        {'packageId': 'oe-alc', 'packageName': 'ADULT ALC', 'quantity': 1, 'rate': 200},
        {'packageId': 'oe-adult', 'packageName': 'ADULT', 'quantity': 1, 'rate': 0},
        {'packageId': 'oe-child', 'packageName': 'CHILD', 'quantity': 0, 'rate': 0},
        {'packageId': 'ghost', 'packageName': 'Ghost', 'quantity': 1, 'rate': 10},
    ]
    lines, warnings = resolve_explicit_lines(details, oe)

    assert [(line.package_id, line.quantity, line.rate) for line in lines] == [
        ('oe-adult', 3, 149), ('oe-alc', 1, 200.0),
    ]
    assert len(warnings) == 1
    assert 'Ghost' in warnings[0]
