"""
Configuration constants for the booking import pipeline.

This module contains all static configuration data including:
- Import source definitions
- Header alias table (vendor column name -> canonical field)
- Enumerated option lists and their defaults
- Package bucket labels
- Yacht name aliases and master sheet column layout
- Financial and transaction id policy constants
"""

# =======================
# IMPORT SOURCES
# =======================

SOURCE_DEFAULT = 'DEFAULT'
SOURCE_TICKETING = 'TICKETING'   # Reseller ticketing feed
SOURCE_MASTER = 'MASTER'         # Internal master spreadsheet

# Normalized headers that fingerprint the reseller ticketing export
TICKETING_HEADER_FINGERPRINT = {'ticketnumber'}
TICKETING_PRODUCT_HEADERS = {'yachtname', 'product_name'}


# =======================
# CANONICAL FIELDS
# =======================

PACKAGE_PREFIX = 'pkg_'
MASTER_COLUMN_PREFIX = 'mst_'

MONEY_FIELDS = [
    'total_amount',
    'commission_percentage',
    'commission_amount',
    'net_amount',
    'paid_amount',
    'balance_amount',
    'free_guest_count',
]

# Signed money field that defaults to None instead of 0
NULLABLE_MONEY_FIELDS = ['other_charge']

DATE_FIELDS = ['event_date', 'created_at', 'updated_at', 'check_in_time']

USER_FIELDS = ['owner_user_id', 'last_modified_by_user_id']

ENUM_FIELDS = ['mode_of_payment', 'status', 'type', 'payment_confirmation_status']


# =======================
# HEADER ALIAS TABLE
# =======================

# Keys are normalized header tokens. Existing keys must never be renamed,
# previously imported files have to keep mapping identically.
FIELD_ALIAS_TABLE = {
    'id': 'id',
    'status': 'status',

    # Event date
    'date': 'event_date', 'eventdate': 'event_date', 'event_date': 'event_date',
    'lead/event_date': 'event_date', 'travel_date': 'event_date', 'traveldate': 'event_date',
    'travel_date_': 'event_date', 'travel date': 'event_date',

    # Yacht / product
    'yacht': 'yacht', 'service_nam': 'yacht', 'service_name': 'yacht', 'yachtname': 'yacht',
    'option': 'yacht', 'service name': 'yacht', 'yacht_name': 'yacht',

    # Agent
    'agent': 'agent', 'agent_name': 'agent', 'company_na': 'agent', 'company_name': 'agent',
    'companyname': 'agent', 'agency_name': 'agent',

    # Client
    'client': 'client_name', 'client_name': 'client_name', 'customer_na': 'client_name',
    'customer_name': 'client_name', 'customer': 'client_name', 'pax_name': 'client_name',
    'paxname': 'client_name', 'customer name': 'client_name', 'guest_name': 'client_name',
    "traveler's_fi": 'client_first_name', "traveler's_first_name": 'client_first_name',
    "traveler's_la": 'client_last_name', "traveler's_last_name": 'client_last_name',

    # Enumerations
    'payment_status': 'payment_confirmation_status', 'pay_status': 'payment_confirmation_status',
    'payment_confirmation_status': 'payment_confirmation_status',
    'type': 'type', 'lead_type': 'type',
    'payment_mode': 'mode_of_payment', 'mode_of_payment': 'mode_of_payment',
    'transaction': 'mode_of_payment',

    # Identifiers
    'transaction_id': 'transaction_id', 'transaction id': 'transaction_id',
    'ticketnumber': 'transaction_id', 'ticket_number': 'transaction_id',
    'trn_number': 'transaction_id', 'trn_no': 'transaction_id',
    'confirmation number': 'transaction_id', 'confirmation_number': 'transaction_id',
    'booking_ref_no': 'booking_ref_no', 'booking ref no': 'booking_ref_no',
    'booking_refno': 'booking_ref_no', 'booking_ref': 'booking_ref_no',
    'booking_reff': 'booking_ref_no', 'ref_no.': 'booking_ref_no', 'ref_no': 'booking_ref_no',
    'ref no.': 'booking_ref_no', 'booking_ref_id': 'booking_ref_no',

    # Guests
    'free': 'free_guest_count', 'free_guests': 'free_guest_count',

    # Package count columns
    'ch': 'pkg_child', 'child': 'pkg_child', 'child_qty': 'pkg_child',
    'ad': 'pkg_adult', 'adult': 'pkg_adult', 'adult_qty': 'pkg_adult',
    'no._of_pax': 'pax_count', 'no.of_pax': 'pax_count', 'pax': 'pax_count',
    'no. of pax': 'pax_count', 'pax_count': 'pax_count',
    'quantity': 'pax_count', 'qty': 'pax_count',
    'chd_top': 'pkg_child_top_deck', 'child_top_deck': 'pkg_child_top_deck',
    'adt_top': 'pkg_adult_top_deck', 'adult_top_deck': 'pkg_adult_top_deck',
    'adt_top_alc': 'pkg_adult_top_deck_alc', 'adult_top_deck_alc': 'pkg_adult_top_deck_alc',
    'top_alc': 'pkg_adult_top_deck_alc',
    'ad_alc': 'pkg_adult_alc', 'adult_alc': 'pkg_adult_alc', 'alc': 'pkg_adult_alc',
    'alcoholic': 'pkg_adult_alc',
    'vip_ch': 'pkg_vip_child', 'vip_child': 'pkg_vip_child',
    'vip_ad': 'pkg_vip_adult', 'vip_adult': 'pkg_vip_adult',
    'vip_alc_pkg': 'pkg_vip_alc', 'vip_adult_alc': 'pkg_vip_alc', 'adult_vip_alc': 'pkg_vip_alc',
    'ryl_ch': 'pkg_royal_child', 'royal_child': 'pkg_royal_child',
    'ryl_ad': 'pkg_royal_adult', 'royal_adult': 'pkg_royal_adult',
    'ryl_alc': 'pkg_royal_alc', 'royal_alc': 'pkg_royal_alc',
    'basic': 'pkg_basic',
    'std': 'pkg_standard', 'standard': 'pkg_standard',
    'prem': 'pkg_premium', 'premium': 'pkg_premium',
    'vip': 'pkg_vip_adult',
    'hrchtr': 'pkg_hour_charter', 'hour_charter': 'pkg_hour_charter',
    'package_details_(json)': 'package_details', 'package_details_json': 'package_details',

    # Other charge (cake, add-ons)
    'addon_pack': 'other_charge', 'addon': 'other_charge', 'per_ticket_rate': 'other_charge',
    'others_amt_(cake)': 'other_charge', 'others_amt': 'other_charge',

    # Money
    'total_amt': 'total_amount', 'total_amount': 'total_amount', 'total_amount_aed': 'total_amount',
    'discount_%': 'commission_percentage', 'discount_rate': 'commission_percentage',
    'discount': 'commission_percentage',
    'commission': 'commission_amount', 'commission_amount': 'commission_amount',
    'net_amt': 'net_amount', 'net_amount': 'net_amount',
    'paid': 'paid_amount', 'paid_amount': 'paid_amount', 'sales_amount(aed)': 'paid_amount',
    'sales_amount': 'paid_amount', 'salesamount(aed)': 'paid_amount', 'grand_total': 'paid_amount',
    'balance': 'balance_amount', 'balance_amount': 'balance_amount',

    # Free text
    'note': 'notes', 'remarks': 'notes', 'booking_remarks': 'notes',
    'contactno': 'customer_phone', 'contact_no': 'customer_phone',

    # Audit
    'created_by': 'owner_user_id', 'created by': 'owner_user_id',
    'modified_by': 'last_modified_by_user_id', 'modified by': 'last_modified_by_user_id',
    'date_of_creation': 'created_at', 'creation_date': 'created_at', 'sales_date': 'created_at',
    'salesdate': 'created_at', 'booking_date': 'created_at', 'purchase_dat': 'created_at',
    'date_of_modification': 'updated_at', 'modification_date': 'updated_at',
    'scanned_on': 'check_in_time', 'scannedon': 'check_in_time',

    # Generic product text used by the source specific classifiers
    'product_name': 'package_text', 'product': 'package_text', 'item': 'package_text',
    'package': 'package_text',

    # Package SQL structure (direct bucket columns)
    'pkg_child': 'pkg_child', 'pkg_adult': 'pkg_adult', 'pkg_adult_alc': 'pkg_adult_alc',
    'pkg_child_top_deck': 'pkg_child_top_deck', 'pkg_adult_top_deck': 'pkg_adult_top_deck',
    'pkg_adult_top_deck_alc': 'pkg_adult_top_deck_alc',
    'pkg_vip_child': 'pkg_vip_child', 'pkg_vip_adult': 'pkg_vip_adult', 'pkg_vip_alc': 'pkg_vip_alc',
    'pkg_royal_child': 'pkg_royal_child', 'pkg_royal_adult': 'pkg_royal_adult',
    'pkg_royal_alc': 'pkg_royal_alc',

    # Ticketing system package names used as column headers
    'food_&_soft_drinks': 'pkg_adult', 'food_and_soft_drinks': 'pkg_adult',
    'food_&_soft_drinks_(adult)': 'pkg_adult',
    'food_&_soft_drinks_(child)': 'pkg_child', 'food_and_soft_drinks_(child)': 'pkg_child',
    'food_and_unlimited_alcoholic_drinks': 'pkg_adult_alc',
    'food_&_unlimited_alcoholic_drinks': 'pkg_adult_alc',
    'unlimited_alcoholic_drinks': 'pkg_adult_alc',
    'vip_soft': 'pkg_vip_adult', 'vip_soft_(adult)': 'pkg_vip_adult', 'vip_soft_(child)': 'pkg_vip_child',
    'vip_premium_alcoholic_drinks': 'pkg_vip_alc', 'vip_unlimited_alcoholic_drinks': 'pkg_vip_alc',
    'vip_alcoholic': 'pkg_vip_alc', 'vip_alc': 'pkg_vip_alc',
    'food_&_drinks': 'pkg_adult', 'food_and_drinks': 'pkg_adult',
    'food_&_drinks_(child)': 'pkg_child', 'food_and_drinks_(child)': 'pkg_child',
    'unlimited_soft_drinks': 'pkg_adult', 'soft_drinks_package': 'pkg_adult',
    'soft_drinks_package_pp': 'pkg_adult',
    'unlimited_alcoholic': 'pkg_adult_alc', 'premium_alcoholic': 'pkg_vip_alc',
    'soft_drinks': 'pkg_adult', 'soft_drink': 'pkg_adult', 'drinks': 'pkg_adult',

    # Numbered columns of the legacy sheet
    '1': 'pkg_adult', '2': 'pkg_child', '3': 'free_guest_count',

    # Master sheet fixed (yacht, package) columns
    'dhow_child_89': 'mst_dhow_child', 'dhowchild89': 'mst_dhow_child',
    'dhow_food_99': 'mst_dhow_food', 'dhowfood99': 'mst_dhow_food',
    'dhow_drinks_199': 'mst_dhow_drinks', 'dhowdrinks199': 'mst_dhow_drinks',
    'dhow_vip_299': 'mst_dhow_vip', 'dhowvip299': 'mst_dhow_vip',
    'oe_child_129': 'mst_oe_child', 'oechild129': 'mst_oe_child',
    'oe_food_149': 'mst_oe_food', 'oefood149': 'mst_oe_food',
    'oe_drinks_249': 'mst_oe_drinks', 'oedrinks249': 'mst_oe_drinks',
    'oe_vip_349': 'mst_oe_vip', 'oevip349': 'mst_oe_vip',
    'sunset_child_179': 'mst_sunset_child', 'sunsetchild179': 'mst_sunset_child',
    'sunset_food_199': 'mst_sunset_food', 'sunsetfood199': 'mst_sunset_food',
    'sunset_drinks_299': 'mst_sunset_drinks', 'sunsetdrinks299': 'mst_sunset_drinks',
    'lotus_food_249': 'mst_lotus_food', 'lotusfood249': 'mst_lotus_food',
    'lotus_drinks_349': 'mst_lotus_drinks', 'lotusdrinks349': 'mst_lotus_drinks',
    'lotus_vip_399': 'mst_lotus_vip', 'lotusvip399': 'mst_lotus_vip',
    'lotus_vip_499': 'mst_lotus_vip_alc', 'lotusvip499': 'mst_lotus_vip_alc',
}


# =======================
# PACKAGE BUCKETS
# =======================

# Bucket key (without prefix) -> canonical catalog label
PACKAGE_BUCKET_LABELS = {
    'child': 'CHILD',
    'adult': 'ADULT',
    'adult_alc': 'ADULT ALC',
    'child_top_deck': 'CHILD TOP DECK',
    'adult_top_deck': 'ADULT TOP DECK',
    'adult_top_deck_alc': 'ADULT TOP DECK ALC',
    'vip_child': 'VIP CHILD',
    'vip_adult': 'VIP ADULT',
    'vip_alc': 'VIP ALC',
    'royal_child': 'ROYAL CHILD',
    'royal_adult': 'ROYAL ADULT',
    'royal_alc': 'ROYAL ALC',
    'basic': 'BASIC',
    'standard': 'STANDARD',
    'premium': 'PREMIUM',
    'hour_charter': 'HOUR CHARTER',
}

PACKAGE_BUCKETS = list(PACKAGE_BUCKET_LABELS)


# =======================
# ENUMERATED FIELDS
# =======================

MODE_OF_PAYMENT_OPTIONS = ['CARD', 'CASH', 'BANK TRANSFER', 'CHEQUE']
MODE_OF_PAYMENT_ALIASES = {'credit': 'CARD', 'online': 'CARD'}

STATUS_OPTIONS = [
    'Confirmed', 'Balance', 'Deposit Paid', 'Full Payment',
    'Check-in', 'Closed (Won)', 'Closed (Lost)', 'Cancelled',
]
STATUS_ALIASES = {'confirm': 'Confirmed'}

BOOKING_TYPE_OPTIONS = [
    'Shared Cruise', 'Private Cruise', 'Sunset Cruise', 'Superyacht Sightseeing Cruise',
]

PAYMENT_CONFIRMATION_OPTIONS = ['CONFIRMED', 'UNCONFIRMED']
PAYMENT_CONFIRMATION_ALIASES = {'PAID': 'CONFIRMED', 'UNPAID': 'UNCONFIRMED'}

# field -> (value when the cell is empty, value when the cell is unrecognised)
ENUM_DEFAULTS = {
    'mode_of_payment': ('CARD', 'CARD'),
    'status': ('Confirmed', 'Balance'),
    'type': ('Shared Cruise', 'Private Cruise'),
    'payment_confirmation_status': ('CONFIRMED', 'CONFIRMED'),
}


# =======================
# DATES
# =======================

# Tried in order; ISO-8601 is attempted between the second and third pattern
DATE_FORMAT_DMY_DASH = '%d-%m-%Y'
DATE_FORMAT_DMY_SLASH = '%d/%m/%Y'
DATE_FORMAT_DMY_DASH_TIME = '%d-%m-%Y %H:%M:%S'

# Imported dates are pinned to local noon
NOON_HOUR = 12


# =======================
# YACHT NAMES
# =======================

# Known product-name prefixes -> canonical yacht name (checked case-insensitively)
YACHT_NAME_ALIASES = [
    ('lotus megayacht dinner cruise', 'Lotus Royale'),
    ('al mansour dinner', 'AL MANSOUR'),
    ('ocean empress dinner', 'OCEAN EMPRESS'),
    ('oe top deck', 'OCEAN EMPRESS'),
    ('calypso sunset', 'CALYPSO SUNSET'),
]

# Hyphen, en-dash and em-dash
DASH_SEPARATOR_PATTERN = r'\s*[-–—]\s*'

# Multi-word phrases recognised as a package type when no separator is present
KNOWN_PACKAGE_PHRASES = [
    'TOP DECK',
    'VIP SOFT',
    'VIP UNLIMITED',
    'UNLIMITED ALCOHOLIC',
    'FOOD AND SOFT DRINKS',
    'FOOD & SOFT DRINKS',
    'FOOD ONLY',
    'ROYALE STANDARD',
]


# =======================
# MASTER SHEET
# =======================

DHOW_YACHT = 'Al Mansour Dhow'
OCEAN_EMPRESS_YACHT = 'Ocean Empress'
SUNSET_YACHT = 'Calypso Sunset'
LOTUS_YACHT = 'Lotus Royale'

# Fixed column -> (yacht name, package bucket)
MASTER_SHEET_COLUMNS = {
    'mst_dhow_child': (DHOW_YACHT, 'child'),
    'mst_dhow_food': (DHOW_YACHT, 'adult'),
    'mst_dhow_drinks': (DHOW_YACHT, 'adult_alc'),
    'mst_dhow_vip': (DHOW_YACHT, 'vip_adult'),
    'mst_oe_child': (OCEAN_EMPRESS_YACHT, 'child'),
    'mst_oe_food': (OCEAN_EMPRESS_YACHT, 'adult'),
    'mst_oe_drinks': (OCEAN_EMPRESS_YACHT, 'adult_alc'),
    'mst_oe_vip': (OCEAN_EMPRESS_YACHT, 'vip_adult'),
    'mst_sunset_child': (SUNSET_YACHT, 'child'),
    'mst_sunset_food': (SUNSET_YACHT, 'adult'),
    'mst_sunset_drinks': (SUNSET_YACHT, 'adult_alc'),
    'mst_lotus_food': (LOTUS_YACHT, 'adult'),
    'mst_lotus_drinks': (LOTUS_YACHT, 'adult_alc'),
    'mst_lotus_vip': (LOTUS_YACHT, 'vip_adult'),
    'mst_lotus_vip_alc': (LOTUS_YACHT, 'vip_alc'),
}


# =======================
# FINANCIAL POLICY
# =======================

# Allow 1 cent difference for rounding
AMOUNT_TOLERANCE = 0.01

# A booking in one of these states with no paid amount is assumed fully paid
CONFIRMED_STATUSES = ('Confirmed',)

DIRECT_BOOKING_AGENT = 'Direct Booking'

# Suffixes ignored when fuzzy matching agent names
AGENT_NAME_NOISE_PATTERN = r'LLC|FZE|FZ'


# =======================
# TRANSACTION IDS
# =======================

TRANSACTION_ID_PREFIX = 'TRN'
TRANSACTION_ID_DIGITS = 5


# =======================
# NOTES BLOCKS
# =======================

NOTE_MERGED_TICKETS = '[Merged Tickets]'
NOTE_VALIDATION_WARNING = '[VALIDATION WARNING]'
NOTE_DUPLICATE_ALERT = '[DUPLICATE ALERT]'
