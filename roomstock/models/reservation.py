import uuid
from datetime import datetime
from sqlalchemy import Column, String, Date, Integer, Numeric, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from ..database import Base
import enum


class ReservationStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CHECKED_IN = "CHECKED_IN"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


# Statuses that occupy inventory. Every availability query imports this set.
BLOCKING_STATUSES = frozenset({
    ReservationStatus.PENDING.value,
    ReservationStatus.CONFIRMED.value,
    ReservationStatus.CHECKED_IN.value,
})


class Reservation(Base):
    """One guest transaction grouping one or more stay line-items."""
    __tablename__ = "reservations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    property_id = Column(String(36), ForeignKey("properties.id", ondelete="SET NULL"), nullable=True)
    short_ref = Column(String(16), nullable=True, unique=True)
    guest_first_name = Column(String(100), nullable=False)
    guest_last_name = Column(String(100), nullable=True)
    guest_email = Column(String(255), nullable=True)
    status = Column(String(20), default=ReservationStatus.PENDING.value, nullable=False)
    total_amount = Column(Numeric(10, 2), default=0)

    # Set when the reservation is an event block
    event_id = Column(String(36), ForeignKey("events.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    items = relationship("ReservationLineItem", back_populates="reservation", cascade="all, delete-orphan")
    event = relationship("Event", back_populates="reservations")

    __table_args__ = (
        Index("ix_reservation_status", "status"),
    )

    @property
    def is_blocking(self) -> bool:
        return self.status in BLOCKING_STATUSES

    def __repr__(self):
        return f"<Reservation {self.short_ref or self.id} - {self.status}>"


class ReservationLineItem(Base):
    """
    One unit's occupation for one stay.

    check_in is the first night; check_out is the departure morning and is
    not a night stayed. check_in == check_out marks a single-day block.
    """
    __tablename__ = "reservation_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    reservation_id = Column(String(36), ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False)
    room_type_id = Column(String(36), ForeignKey("room_types.id", ondelete="RESTRICT"), nullable=False)
    unit_id = Column(String(36), ForeignKey("room_units.id", ondelete="SET NULL"), nullable=True)
    check_in = Column(Date, nullable=False)
    check_out = Column(Date, nullable=False)
    guests = Column(Integer, default=1)

    # Relationships
    reservation = relationship("Reservation", back_populates="items")
    room_type = relationship("RoomType")
    unit = relationship("RoomUnit")

    __table_args__ = (
        Index("ix_reservation_item_room_type", "room_type_id"),
        Index("ix_reservation_item_stay", "room_type_id", "check_in", "check_out"),
    )

    def __repr__(self):
        return f"<ReservationLineItem {self.room_type_id} {self.check_in}..{self.check_out}>"
