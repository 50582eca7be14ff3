"""
Booking validation against availability.

Each item of a cart is judged on its own: an item is valid only when its
room type still has a free unit for the stay.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..schemas.availability import (
    BookingValidationResult,
    BookingValidationSummary,
    UnitAvailabilityResult,
)

UNVERIFIABLE_MESSAGE = "Unable to verify availability for this room type"
FULLY_BOOKED_MESSAGE = "This room type is fully booked for your selected dates"


@dataclass(frozen=True)
class BookingItem:
    item_id: str
    room_type_id: str


def can_proceed_with_booking(available_units: int) -> bool:
    return available_units > 0


def validate_booking_items(
    items: List[BookingItem],
    availability: Sequence[Optional[UnitAvailabilityResult]]
) -> BookingValidationSummary:
    """
    Judge each item against the result at the same position.

    Item ids are only echoed back; they may repeat.
    """
    results = []
    for index, item in enumerate(items):
        result = availability[index] if index < len(availability) else None
        if result is None:
            results.append(BookingValidationResult(
                item_id=item.item_id,
                room_type_id=item.room_type_id,
                valid=False,
                available_units=0,
                error=UNVERIFIABLE_MESSAGE
            ))
            continue

        if not result.available or not can_proceed_with_booking(result.available_units):
            results.append(BookingValidationResult(
                item_id=item.item_id,
                room_type_id=item.room_type_id,
                valid=False,
                available_units=result.available_units,
                error=FULLY_BOOKED_MESSAGE
            ))
            continue

        results.append(BookingValidationResult(
            item_id=item.item_id,
            room_type_id=item.room_type_id,
            valid=True,
            available_units=result.available_units
        ))

    invalid_count = sum(1 for r in results if not r.valid)
    return BookingValidationSummary(
        all_valid=invalid_count == 0,
        invalid_count=invalid_count,
        results=results
    )

