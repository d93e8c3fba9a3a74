from __future__ import annotations

import re

from expressroute.core.config import get_settings
from expressroute.core.exceptions import ValidationException

LOCATION_ALIASES = {
    "east us": "eastus",
    "east us 2": "eastus2",
    "west us": "westus",
    "west us 2": "westus2",
    "central us": "centralus",
    "west europe": "westeurope",
    "north europe": "northeurope",
    "uk south": "uksouth",
}

_NAME_PATTERNS: dict[str, re.Pattern[str]] = {
    "resource_group": re.compile(r"^[-\w._()]{1,90}(?<!\.)$"),
    "vnet": re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_.-]{0,62}[a-zA-Z0-9_]$"),
    "generic": re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_.-]{0,78}[a-zA-Z0-9_]$"),
}


def validate_name(kind: str, value: str | None) -> bool:
    if not value:
        return False
    pat = _NAME_PATTERNS.get(kind) or _NAME_PATTERNS["generic"]
    return bool(pat.match(value))


def require_name(kind: str, value: str | None) -> str:
    if value and validate_name(kind, value):
        return value
    raise ValidationException(
        f"invalid {kind} name: {value!r}", details={"kind": kind, "name": value}
    )


def normalize_location(loc: str) -> str:
    loc_lower = loc.lower().strip()
    return LOCATION_ALIASES.get(loc_lower, loc_lower)


def validate_location(loc: str | None) -> bool:
    if not loc:
        return False
    return normalize_location(loc) in set(get_settings().azure.allowed_locations)


def validate_resource_id(resource_id: str | None) -> bool:
    if not resource_id:
        return False
    if not resource_id.startswith("/subscriptions/"):
        return False
    return "/resourceGroups/" in resource_id or "/resourcegroups/" in resource_id
