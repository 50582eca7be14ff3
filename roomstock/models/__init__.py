# Models package
from .property import Property, RoomType
from .unit import RoomUnit, UnitStatus
from .event import Event
from .reservation import Reservation, ReservationLineItem, ReservationStatus, BLOCKING_STATUSES

__all__ = [
    "Property", "RoomType",
    "RoomUnit", "UnitStatus",
    "Event",
    "Reservation", "ReservationLineItem", "ReservationStatus", "BLOCKING_STATUSES",
]
