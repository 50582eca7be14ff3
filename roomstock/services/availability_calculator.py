"""
Availability Calculator

Combines the active unit count of a room type with the number of blocking
stays overlapping a window. Every surface (point check, bulk, calendar)
derives its numbers through summarize() so the rules cannot drift apart.
"""

import time
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ..config import settings
from ..schemas.availability import UnitAvailabilityResult, DayStatus
from ..utils.dates import DateLike, normalize_date
from ..utils.logging_config import get_logger
from .inventory_reader import UnitInventoryReader
from .overlap_resolver import BookingOverlapResolver

logger = get_logger(__name__)


def summarize(
    room_type_id: str,
    total_units: int,
    booked_units: int,
    low_stock_threshold: Optional[int] = None
) -> UnitAvailabilityResult:
    if low_stock_threshold is None:
        low_stock_threshold = settings.low_stock_threshold

    available_units = max(0, total_units - booked_units)
    return UnitAvailabilityResult(
        room_type_id=room_type_id,
        total_units=total_units,
        booked_units=booked_units,
        available_units=available_units,
        available=available_units > 0,
        limited_availability=0 < available_units <= low_stock_threshold
    )


def classify_day(available_units: int, low_stock_threshold: Optional[int] = None) -> DayStatus:
    """Calendar status using the same threshold as limited_availability."""
    if low_stock_threshold is None:
        low_stock_threshold = settings.low_stock_threshold

    if available_units <= 0:
        return DayStatus.UNAVAILABLE
    if available_units <= low_stock_threshold:
        return DayStatus.LIMITED
    return DayStatus.AVAILABLE


class AvailabilityCalculator:

    def __init__(self, db: Session, low_stock_threshold: Optional[int] = None):
        self.db = db
        self.inventory = UnitInventoryReader(db)
        self.overlaps = BookingOverlapResolver(db)
        self.low_stock_threshold = (
            settings.low_stock_threshold if low_stock_threshold is None else low_stock_threshold
        )

    def summarize(self, room_type_id: str, total_units: int, booked_units: int) -> UnitAvailabilityResult:
        return summarize(room_type_id, total_units, booked_units, self.low_stock_threshold)

    def evaluate(self, room_type_id: str, check_in: DateLike, check_out: DateLike) -> UnitAvailabilityResult:
        """
        Free units of a room type for the stay [check_in, check_out).

        Requires check_in < check_out. Unknown room types and room types
        without active units yield the empty result; the overlap query is
        skipped for them.
        """
        start = normalize_date(check_in)
        end = normalize_date(check_out)
        if start >= end:
            raise ValueError("check_out must be after check_in")

        started = time.perf_counter()
        snapshot = self.inventory.describe(room_type_id)
        if snapshot.active_units == 0:
            logger.room_type_missing(room_type_id, snapshot.exists)
            return UnitAvailabilityResult.empty(room_type_id)

        booked = self.overlaps.count_overlapping(room_type_id, start, end)
        result = self.summarize(room_type_id, snapshot.active_units, booked)

        logger.availability_evaluated(
            room_type_id,
            result.total_units,
            result.booked_units,
            result.available_units,
            duration_ms=round((time.perf_counter() - started) * 1000, 2)
        )
        return result

    def is_available(self, room_type_id: str, check_in: date, check_out: date) -> bool:
        return self.evaluate(room_type_id, check_in, check_out).available
