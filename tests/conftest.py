"""
Pytest configuration for roomstock tests

Each test gets a fresh in-memory SQLite database built from the ORM models.
"""
import pytest
from datetime import datetime
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from roomstock.database import Base, get_db
from roomstock.main import app
from roomstock.models import (
    Property, RoomType, RoomUnit, Reservation, ReservationLineItem, ReservationStatus
)
from roomstock.utils.rate_limiter import limiter


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    """Test client bound to the test database."""
    def override_get_db():
        yield db

    limiter.reset()
    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        limiter.reset()


class HotelFactory:
    """Small builder for properties, room types, units and reservations."""

    def __init__(self, db):
        self.db = db
        self.property = Property(name="Seaside Hotel")
        db.add(self.property)
        db.commit()

    def room_type(self, name="Executive Suite", units=0, inactive_units=0, deleted_units=0, price=150):
        room_type = RoomType(property_id=self.property.id, name=name, price=price)
        self.db.add(room_type)
        self.db.flush()

        number = 100
        for _ in range(units):
            number += 1
            self.db.add(RoomUnit(room_type_id=room_type.id, number=str(number)))
        for _ in range(inactive_units):
            number += 1
            self.db.add(RoomUnit(room_type_id=room_type.id, number=str(number), is_active=False))
        for _ in range(deleted_units):
            number += 1
            self.db.add(RoomUnit(room_type_id=room_type.id, number=str(number), deleted_at=datetime(2025, 1, 1)))

        self.db.commit()
        return room_type

    def book(self, room_type, check_in, check_out, status=ReservationStatus.CONFIRMED, unit=None):
        reservation = Reservation(
            property_id=self.property.id,
            guest_first_name="Guest",
            status=status.value if isinstance(status, ReservationStatus) else status
        )
        reservation.items.append(ReservationLineItem(
            room_type_id=room_type.id,
            unit_id=unit.id if unit is not None else None,
            check_in=check_in,
            check_out=check_out
        ))
        self.db.add(reservation)
        self.db.commit()
        return reservation


@pytest.fixture
def hotel(db):
    return HotelFactory(db)
