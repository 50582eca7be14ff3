import uuid
from datetime import datetime
from sqlalchemy import Column, String, Date, Integer, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from ..database import Base


class Event(Base):
    """
    A property event. Units it blocks are held by CONFIRMED reservations
    pointing back at the event, so they count like any other booking.
    """
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    property_id = Column(String(36), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    guest_count = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    reservations = relationship("Reservation", back_populates="event")

    def __repr__(self):
        return f"<Event {self.title} - {self.start_date}>"
