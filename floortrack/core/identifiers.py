"""
64-bit identifier handling.

Identifiers are plain ints inside the service and decimal strings on the
wire. Anything that is not a positive decimal integer is rejected before
it reaches a query.
"""

from __future__ import annotations

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer

from floortrack.core.errors import InvalidArgumentError

MAX_ID = 2**63 - 1

_DIGITS = re.compile(r"^[0-9]+$")


def parse_id(value: Any, field: str = "id") -> int:
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Invalid {field}")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and _DIGITS.match(value.strip()):
        parsed = int(value.strip())
    else:
        raise InvalidArgumentError(f"Invalid {field}")

    if parsed <= 0 or parsed > MAX_ID:
        raise InvalidArgumentError(f"Invalid {field}")
    return parsed


def normalize_mac(mac: str) -> str:
    return mac.strip().lower()


# Serialized as a JSON string so 64-bit values survive JavaScript clients
StrId = Annotated[int, PlainSerializer(lambda v: str(v), return_type=str, when_used="json")]


def _validate_id(value: Any) -> int:
    try:
        return parse_id(value)
    except InvalidArgumentError as exc:
        raise ValueError(exc.message) from exc


# Inbound id field on request bodies: "42" or 42, never 4.2, true or "abc"
IdIn = Annotated[int, BeforeValidator(_validate_id)]
