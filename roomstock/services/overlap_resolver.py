"""
Booking Overlap Resolver

The one place that decides whether a stored stay collides with a
requested window. Stays are half-open [check_in, check_out): a departure
on day N and an arrival on day N do not collide. A zero-length stay
(check_in == check_out) is a single-day block occupying that day.

Only line-items whose reservation is in BLOCKING_STATUSES are seen.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from ..models.reservation import Reservation, ReservationLineItem, BLOCKING_STATUSES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockingStay:
    id: str
    room_type_id: str
    unit_id: Optional[str]
    check_in: date
    check_out: date
    status: str


def stays_overlap(stay_start: date, stay_end: date, query_start: date, query_end: date) -> bool:
    """In-memory counterpart of overlap_clause()."""
    if stay_start == stay_end:
        return query_start <= stay_start < query_end
    return stay_start < query_end and stay_end > query_start


def overlap_clause(query_start: date, query_end: date):
    """SQL filter matching line-items whose stay overlaps [query_start, query_end)."""
    item = ReservationLineItem
    return or_(
        and_(item.check_in < query_end, item.check_out > query_start),
        and_(
            item.check_in == item.check_out,
            item.check_in >= query_start,
            item.check_in < query_end
        )
    )


class BookingOverlapResolver:

    def __init__(self, db: Session):
        self.db = db

    def count_overlapping(self, room_type_id: str, check_in: date, check_out: date) -> int:
        """Blocking line-items of a room type overlapping [check_in, check_out)."""
        count = self.db.query(func.count(ReservationLineItem.id)).join(
            Reservation, ReservationLineItem.reservation_id == Reservation.id
        ).filter(
            ReservationLineItem.room_type_id == room_type_id,
            Reservation.status.in_(BLOCKING_STATUSES),
            overlap_clause(check_in, check_out)
        ).scalar()
        return count or 0

    def fetch_overlapping(
        self,
        room_type_ids: Iterable[str],
        start: date,
        end: date
    ) -> List[BlockingStay]:
        """
        All blocking line-items of the given room types overlapping
        [start, end), in a single query. Callers narrow per day or per
        check in memory with stays_overlap().
        """
        ids = list(set(room_type_ids))
        if not ids:
            return []

        rows = self.db.query(
            ReservationLineItem.id,
            ReservationLineItem.room_type_id,
            ReservationLineItem.unit_id,
            ReservationLineItem.check_in,
            ReservationLineItem.check_out,
            Reservation.status
        ).join(
            Reservation, ReservationLineItem.reservation_id == Reservation.id
        ).filter(
            ReservationLineItem.room_type_id.in_(ids),
            Reservation.status.in_(BLOCKING_STATUSES),
            overlap_clause(start, end)
        ).all()

        stays = [BlockingStay(*row) for row in rows]
        logger.debug(f"Fetched {len(stays)} blocking stays for {len(ids)} room types ({start}..{end})")
        return stays


def count_in_window(stays: Iterable[BlockingStay], room_type_id: str, check_in: date, check_out: date) -> int:
    """Count already-fetched stays of one room type overlapping a window."""
    return sum(
        1 for stay in stays
        if stay.room_type_id == room_type_id
        and stays_overlap(stay.check_in, stay.check_out, check_in, check_out)
    )
