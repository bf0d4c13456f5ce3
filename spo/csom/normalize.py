"""
CSOM Result Normalizer

Turns entity snapshots returned by ProcessQuery into plain output records:
    - drop the _ObjectIdentity_ / _ObjectType_ bookkeeping fields
    - /Date(1536839573337)/  ->  2018-09-13T11:52:53.337Z
    - /Guid(a1b2...)/        ->  a1b2...
    - fill defaults for fields the caller expects but the server omitted

All functions are pure: inputs are never mutated.
"""

import re
from datetime import datetime, timedelta, timezone

DATE_PREFIX = "/Date("
GUID_PREFIX = "/Guid("
WRAPPED_SUFFIX = ")/"

IDENTITY_FIELDS = ("_ObjectIdentity_", "_ObjectType_")
CHILD_ITEMS = "_Child_Items_"

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_DATE_PATTERN = re.compile(r"^/Date\((-?\d+)\)/$")


# =============================================================================
# SCALARS
# =============================================================================


def unwrap_date(value):
    """Convert /Date(<epoch ms>)/ to an ISO-8601 UTC string with milliseconds."""
    if not isinstance(value, str):
        return value
    match = _DATE_PATTERN.match(value)
    if not match:
        return value
    try:
        moment = EPOCH + timedelta(milliseconds=int(match.group(1)))
    except OverflowError:
        # Outside datetime range
        return value
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def wrap_date(iso_value: str) -> str:
    """Inverse of unwrap_date."""
    moment = datetime.strptime(iso_value, "%Y-%m-%dT%H:%M:%S.%fZ").replace(tzinfo=timezone.utc)
    millis = (moment - EPOCH) // timedelta(milliseconds=1)
    return f"{DATE_PREFIX}{millis}{WRAPPED_SUFFIX}"


def unwrap_guid(value):
    if not isinstance(value, str):
        return value
    if value.startswith(GUID_PREFIX) and value.endswith(WRAPPED_SUFFIX):
        return value[len(GUID_PREFIX):-len(WRAPPED_SUFFIX)]
    return value


def wrap_guid(value: str) -> str:
    return f"{GUID_PREFIX}{value}{WRAPPED_SUFFIX}"


# =============================================================================
# ENTITIES
# =============================================================================


def strip_identity(snapshot: dict) -> dict:
    return {key: value for key, value in snapshot.items() if key not in IDENTITY_FIELDS}


def normalize_entity(snapshot: dict, date_fields=(), guid_fields=(), defaults=None) -> dict:
    """Return a user-facing copy of one entity snapshot.

    Args:
        snapshot: Raw entity as decoded from ProcessQuery.
        date_fields: Field names carrying /Date(...)/ values.
        guid_fields: Field names carrying /Guid(...)/ values.
        defaults: Values substituted when a field is missing or None.
    """
    record = strip_identity(snapshot)

    for field in date_fields:
        if field in record:
            record[field] = unwrap_date(record[field])
    for field in guid_fields:
        if field in record:
            record[field] = unwrap_guid(record[field])

    for field, default in (defaults or {}).items():
        if record.get(field) is None:
            record[field] = default

    return record


def normalize_collection(collection: dict, date_fields=(), guid_fields=(), defaults=None) -> list:
    """Normalize every child item of a collection result."""
    items = (collection or {}).get(CHILD_ITEMS) or []
    return [normalize_entity(item, date_fields, guid_fields, defaults) for item in items]
