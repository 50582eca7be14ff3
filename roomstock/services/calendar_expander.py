"""
Calendar Day Expander

Day-by-day availability for calendar widgets. The month's blocking stays
are fetched once and every day [D, D+1) is checked in memory, so nights
strictly inside a stay show as occupied too.
"""

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from ..schemas.availability import DateAvailabilityInfo, DayStatus
from ..utils.dates import date_range, month_bounds
from .availability_calculator import AvailabilityCalculator, classify_day
from .overlap_resolver import count_in_window

logger = logging.getLogger(__name__)


class CalendarDayExpander:

    def __init__(self, db: Session, calculator: Optional[AvailabilityCalculator] = None):
        self.db = db
        self.calculator = calculator or AvailabilityCalculator(db)

    def expand_range(self, room_type_id: str, start: date, end: date) -> List[DateAvailabilityInfo]:
        """One entry per day of [start, end), ascending."""
        return self.expand_range_many([room_type_id], start, end)[room_type_id]

    def expand_range_many(
        self,
        room_type_ids: Iterable[str],
        start: date,
        end: date
    ) -> Dict[str, List[DateAvailabilityInfo]]:
        """
        Day-level availability for several room types with two reads in
        total (unit counts, then blocking stays) regardless of range length.
        """
        ids = list(dict.fromkeys(room_type_ids))
        days = date_range(start, end)

        totals = self.calculator.inventory.count_active_units_many(ids)
        stocked = [room_type_id for room_type_id in ids if totals.get(room_type_id, 0) > 0]
        stays = self.calculator.overlaps.fetch_overlapping(stocked, start, end) if stocked and days else []

        calendars: Dict[str, List[DateAvailabilityInfo]] = {}
        for room_type_id in ids:
            total = totals.get(room_type_id, 0)
            entries = []
            for day in days:
                booked = count_in_window(stays, room_type_id, day, day + timedelta(days=1)) if total else 0
                result = self.calculator.summarize(room_type_id, total, booked)
                entries.append(DateAvailabilityInfo(
                    date=day,
                    available_units=result.available_units,
                    total_units=total,
                    status=classify_day(result.available_units, self.calculator.low_stock_threshold)
                ))
            calendars[room_type_id] = entries

        logger.debug(f"Expanded {len(days)} days for {len(ids)} room types from {len(stays)} stays")
        return calendars

    def expand_month(self, room_type_id: str, year: int, month: int) -> List[DateAvailabilityInfo]:
        start, end = month_bounds(year, month)
        return self.expand_range(room_type_id, start, end)


def has_unavailable_dates(days: Iterable[DateAvailabilityInfo]) -> bool:
    return any(day.status == DayStatus.UNAVAILABLE for day in days)
