"""
Bulk Dispatcher

Evaluates a batch of independent availability checks. Each check is
computed against stored state only, never against the other checks, and
results come back in input order (duplicates and unknown room types
included).
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from ..schemas.availability import UnitAvailabilityResult
from ..utils.validation import AvailabilityCheck
from .availability_calculator import AvailabilityCalculator
from .overlap_resolver import count_in_window

logger = logging.getLogger(__name__)


class BulkDispatcher:

    def __init__(self, db: Session, calculator: Optional[AvailabilityCalculator] = None):
        self.db = db
        self.calculator = calculator or AvailabilityCalculator(db)

    def evaluate_many(self, checks: Sequence[AvailabilityCheck]) -> List[UnitAvailabilityResult]:
        """
        Checks must already be validated (see utils.validation.parse_checks).

        Reads unit counts in one grouped query and the blocking stays of all
        stocked room types over the union window in one more.
        """
        if not checks:
            return []

        totals = self.calculator.inventory.count_active_units_many(c.room_type_id for c in checks)
        stocked = [c for c in checks if totals.get(c.room_type_id, 0) > 0]

        stays = []
        if stocked:
            window_start = min(c.check_in for c in stocked)
            window_end = max(c.check_out for c in stocked)
            stays = self.calculator.overlaps.fetch_overlapping(
                (c.room_type_id for c in stocked), window_start, window_end
            )

        results = []
        for check in checks:
            total = totals.get(check.room_type_id, 0)
            if total == 0:
                results.append(UnitAvailabilityResult.empty(check.room_type_id))
                continue
            booked = count_in_window(stays, check.room_type_id, check.check_in, check.check_out)
            results.append(self.calculator.summarize(check.room_type_id, total, booked))

        missing = {c.room_type_id for c in checks} - set(totals)
        if missing:
            known = self.calculator.inventory.existing_room_type_ids(missing)
            for room_type_id in sorted(missing):
                logger.info(
                    f"Bulk check for room type {room_type_id}: "
                    f"{'no active units' if room_type_id in known else 'not found'}"
                )

        return results
