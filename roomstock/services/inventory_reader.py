"""
Unit Inventory Reader

Reads how many physical units of a room type can be sold. A unit counts
only while it is active and not soft-deleted.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Set

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.property import RoomType
from ..models.unit import RoomUnit
from ..models.reservation import Reservation, ReservationLineItem, BLOCKING_STATUSES
from .overlap_resolver import overlap_clause

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InventorySnapshot:
    room_type_id: str
    exists: bool
    active_units: int


@dataclass
class UnitOccupancy:
    id: str
    number: str
    is_available: bool


@dataclass
class RoomTypeUnits:
    id: str
    name: str
    price: float
    units: List[UnitOccupancy] = field(default_factory=list)

    @property
    def free_units(self) -> int:
        return sum(1 for u in self.units if u.is_available)


def _active_unit_filter():
    return (RoomUnit.is_active == True, RoomUnit.deleted_at.is_(None))  # noqa: E712


class UnitInventoryReader:

    def __init__(self, db: Session):
        self.db = db

    def count_active_units(self, room_type_id: str) -> int:
        """Active units of a room type; 0 when it has none or does not exist."""
        count = self.db.query(func.count(RoomUnit.id)).filter(
            RoomUnit.room_type_id == room_type_id,
            *_active_unit_filter()
        ).scalar()
        return count or 0

    def count_active_units_many(self, room_type_ids: Iterable[str]) -> Dict[str, int]:
        """
        Active unit counts for many room types in one grouped query.
        Room types without active units are absent from the result.
        """
        ids = list(set(room_type_ids))
        if not ids:
            return {}

        rows = self.db.query(RoomUnit.room_type_id, func.count(RoomUnit.id)).filter(
            RoomUnit.room_type_id.in_(ids),
            *_active_unit_filter()
        ).group_by(RoomUnit.room_type_id).all()

        return {room_type_id: count for room_type_id, count in rows}

    def existing_room_type_ids(self, room_type_ids: Iterable[str]) -> Set[str]:
        """Which of the given ids name a room type at all."""
        ids = list(set(room_type_ids))
        if not ids:
            return set()
        rows = self.db.query(RoomType.id).filter(RoomType.id.in_(ids)).all()
        return {row[0] for row in rows}

    def room_type_ids_for_property(self, property_id: str) -> List[str]:
        rows = self.db.query(RoomType.id).filter(
            RoomType.property_id == property_id
        ).order_by(RoomType.name).all()
        return [row[0] for row in rows]

    def describe(self, room_type_id: str) -> InventorySnapshot:
        """
        Active unit count plus whether the room type exists, so an empty
        inventory can be reported as "not found" or "no active units".
        """
        active = self.count_active_units(room_type_id)
        if active > 0:
            return InventorySnapshot(room_type_id, True, active)
        exists = bool(self.existing_room_type_ids([room_type_id]))
        return InventorySnapshot(room_type_id, exists, 0)

    def list_units_with_availability(
        self,
        property_id: str,
        check_in: date,
        check_out: date
    ) -> List[RoomTypeUnits]:
        """
        Every room type of a property with its active units, each flagged
        free or occupied for [check_in, check_out).

        Only line-items assigned to a unit can occupy that unit; unassigned
        line-items still reduce the room type count elsewhere.
        """
        room_types = self.db.query(RoomType).filter(
            RoomType.property_id == property_id
        ).order_by(RoomType.name).all()
        if not room_types:
            return []

        type_ids = [rt.id for rt in room_types]
        units = self.db.query(RoomUnit).filter(
            RoomUnit.room_type_id.in_(type_ids),
            *_active_unit_filter()
        ).order_by(RoomUnit.number).all()

        occupied_rows = self.db.query(ReservationLineItem.unit_id).join(
            Reservation, ReservationLineItem.reservation_id == Reservation.id
        ).filter(
            ReservationLineItem.room_type_id.in_(type_ids),
            ReservationLineItem.unit_id.isnot(None),
            Reservation.status.in_(BLOCKING_STATUSES),
            overlap_clause(check_in, check_out)
        ).distinct().all()
        occupied = {row[0] for row in occupied_rows}

        by_type: Dict[str, RoomTypeUnits] = {
            rt.id: RoomTypeUnits(
                id=rt.id,
                name=rt.name,
                price=float(rt.price or 0)
            )
            for rt in room_types
        }
        for unit in units:
            by_type[unit.room_type_id].units.append(UnitOccupancy(
                id=unit.id,
                number=unit.number,
                is_available=unit.id not in occupied
            ))

        logger.debug(
            f"Unit occupancy for property {property_id}: "
            f"{len(units)} units, {len(occupied)} occupied"
        )
        return list(by_type.values())
