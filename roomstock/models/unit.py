import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from ..database import Base
import enum


class UnitStatus(str, enum.Enum):
    """Housekeeping state. Does not affect inventory; only is_active does."""
    CLEAN = "CLEAN"
    DIRTY = "DIRTY"
    OCCUPIED = "OCCUPIED"
    MAINTENANCE = "MAINTENANCE"
    OUT_OF_ORDER = "OUT_OF_ORDER"


class RoomUnit(Base):
    """One physical, bookable room belonging to a room type."""
    __tablename__ = "room_units"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    room_type_id = Column(String(36), ForeignKey("room_types.id", ondelete="CASCADE"), nullable=False)
    number = Column(String(20), nullable=False)
    floor = Column(Integer, nullable=True)
    status = Column(String(20), default=UnitStatus.CLEAN.value)
    is_active = Column(Boolean, default=True, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Soft Delete
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    room_type = relationship("RoomType", back_populates="units")

    __table_args__ = (
        Index("ix_room_unit_room_type", "room_type_id"),
        Index("ix_room_unit_active", "room_type_id", "is_active"),
    )

    def __repr__(self):
        return f"<RoomUnit {self.number}>"
