"""
Boundary validation for availability requests.

Malformed input is a client bug and fails the whole request; an unknown
room type is not validated here (it yields an empty result downstream).
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, List, Mapping, Sequence

from .dates import normalize_date


class AvailabilityValidationError(ValueError):
    """Request parameters are missing, malformed or inverted."""


@dataclass(frozen=True)
class AvailabilityCheck:
    room_type_id: str
    check_in: date
    check_out: date


def parse_stay(
    room_type_id: Any,
    check_in: Any,
    check_out: Any,
    prefix: str = ""
) -> AvailabilityCheck:
    """
    Validate one (room type, stay) triple.

    `prefix` names the entry in error messages, e.g. "checks[2]".
    """
    name = f"{prefix}.roomTypeId" if prefix else "roomTypeId"
    if room_type_id is None or (isinstance(room_type_id, str) and not room_type_id.strip()):
        raise AvailabilityValidationError(f"{name} is required")
    if not isinstance(room_type_id, str):
        raise AvailabilityValidationError(f"{name} must be a string")

    if check_in in (None, "") or check_out in (None, ""):
        if prefix:
            raise AvailabilityValidationError(f"{prefix}.checkIn and checkOut are required")
        raise AvailabilityValidationError("checkIn and checkOut dates are required")

    try:
        start = normalize_date(check_in)
        end = normalize_date(check_out)
    except (TypeError, ValueError):
        if prefix:
            raise AvailabilityValidationError(
                f"{prefix} has invalid date format. Use ISO 8601 format"
            )
        raise AvailabilityValidationError(
            "Invalid date format. Use ISO 8601 format (YYYY-MM-DD)"
        )

    if start >= end:
        name = f"{prefix}.checkOut" if prefix else "checkOut"
        raise AvailabilityValidationError(f"{name} must be after checkIn")

    return AvailabilityCheck(room_type_id.strip(), start, end)


def parse_checks(raw_checks: Any, field: str = "checks") -> List[AvailabilityCheck]:
    """
    Validate a batch of raw check objects, failing on the first bad entry.
    """
    if raw_checks is None or not isinstance(raw_checks, Sequence) or isinstance(raw_checks, (str, bytes)):
        raise AvailabilityValidationError(f"{field} array is required")

    parsed = []
    for index, raw in enumerate(raw_checks):
        if not isinstance(raw, Mapping):
            raise AvailabilityValidationError(f"{field}[{index}] must be an object")
        parsed.append(parse_stay(
            raw.get("roomTypeId"),
            raw.get("checkIn"),
            raw.get("checkOut"),
            prefix=f"{field}[{index}]"
        ))
    return parsed
