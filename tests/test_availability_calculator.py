"""
Tests for the Availability Calculator
"""

import pytest
from datetime import date, datetime
from unittest.mock import MagicMock

from roomstock.models import ReservationStatus
from roomstock.schemas.availability import DayStatus
from roomstock.services.availability_calculator import (
    AvailabilityCalculator, summarize, classify_day
)
from roomstock.services.inventory_reader import InventorySnapshot


class TestSummarize:
    """Derivation of the result fields from raw counts"""

    @pytest.mark.parametrize("total,booked", [(5, 0), (5, 1), (5, 3), (5, 5), (1, 1), (10, 7)])
    def test_available_units_is_total_minus_booked(self, total, booked):
        result = summarize("rt", total, booked, low_stock_threshold=2)
        assert result.available_units == total - booked
        assert result.available == (total - booked > 0)

    def test_never_negative(self):
        result = summarize("rt", 2, 5, low_stock_threshold=2)
        assert result.available_units == 0
        assert result.available is False

    @pytest.mark.parametrize("available,limited", [(0, False), (1, True), (2, True), (3, False)])
    def test_limited_availability_threshold(self, available, limited):
        result = summarize("rt", 10, 10 - available, low_stock_threshold=2)
        assert result.limited_availability is limited

    def test_threshold_comes_from_settings(self, monkeypatch):
        from roomstock.config import settings
        monkeypatch.setattr(settings, "low_stock_threshold", 4)
        assert summarize("rt", 10, 6).limited_availability is True

    def test_serializes_with_camel_case(self):
        payload = summarize("rt-1", 5, 1, low_stock_threshold=2).model_dump(by_alias=True)
        assert payload == {
            "roomTypeId": "rt-1",
            "totalUnits": 5,
            "bookedUnits": 1,
            "availableUnits": 4,
            "available": True,
            "limitedAvailability": False,
        }


class TestClassifyDay:

    def test_unavailable(self):
        assert classify_day(0, 2) == DayStatus.UNAVAILABLE

    def test_limited(self):
        assert classify_day(1, 2) == DayStatus.LIMITED
        assert classify_day(2, 2) == DayStatus.LIMITED

    def test_available(self):
        assert classify_day(3, 2) == DayStatus.AVAILABLE


class TestEvaluate:

    def test_one_confirmed_booking_of_five_units(self, db, hotel):
        suite = hotel.room_type(units=5)
        hotel.book(suite, date(2026, 1, 6), date(2026, 1, 9))

        result = AvailabilityCalculator(db, low_stock_threshold=2).evaluate(
            suite.id, date(2026, 1, 6), date(2026, 1, 9)
        )

        assert result.total_units == 5
        assert result.booked_units == 1
        assert result.available_units == 4
        assert result.available is True
        assert result.limited_availability is False

    def test_fully_booked(self, db, hotel):
        suite = hotel.room_type(units=2)
        hotel.book(suite, date(2026, 1, 6), date(2026, 1, 9))
        hotel.book(suite, date(2026, 1, 6), date(2026, 1, 9))

        result = AvailabilityCalculator(db).evaluate(suite.id, date(2026, 1, 6), date(2026, 1, 9))

        assert result.available_units == 0
        assert result.available is False

    def test_cancelled_and_completed_never_reduce_availability(self, db, hotel):
        suite = hotel.room_type(units=2)
        hotel.book(suite, date(2026, 1, 6), date(2026, 1, 9), status=ReservationStatus.CANCELLED)
        hotel.book(suite, date(2026, 1, 6), date(2026, 1, 9), status=ReservationStatus.COMPLETED)

        result = AvailabilityCalculator(db).evaluate(suite.id, date(2026, 1, 6), date(2026, 1, 9))

        assert result.booked_units == 0
        assert result.available_units == 2

    def test_inactive_and_deleted_units_excluded(self, db, hotel):
        suite = hotel.room_type(units=3, inactive_units=2, deleted_units=1)

        result = AvailabilityCalculator(db).evaluate(suite.id, date(2026, 1, 6), date(2026, 1, 9))

        assert result.total_units == 3

    def test_unknown_room_type_returns_empty_result(self, db):
        result = AvailabilityCalculator(db).evaluate("missing", date(2026, 1, 6), date(2026, 1, 9))

        assert result.model_dump() == {
            "room_type_id": "missing",
            "total_units": 0,
            "booked_units": 0,
            "available_units": 0,
            "available": False,
            "limited_availability": False,
        }

    def test_room_type_without_active_units_returns_empty_result(self, db, hotel):
        closed = hotel.room_type(units=0, inactive_units=2)

        result = AvailabilityCalculator(db).evaluate(closed.id, date(2026, 1, 6), date(2026, 1, 9))

        assert result.available is False
        assert result.total_units == 0

    def test_zero_inventory_skips_overlap_query(self, db):
        calculator = AvailabilityCalculator(db)
        calculator.inventory = MagicMock()
        calculator.inventory.describe.return_value = InventorySnapshot("rt", False, 0)
        calculator.overlaps = MagicMock()

        calculator.evaluate("rt", date(2026, 1, 6), date(2026, 1, 9))

        calculator.overlaps.count_overlapping.assert_not_called()

    def test_time_of_day_is_ignored(self, db, hotel):
        suite = hotel.room_type(units=1)
        hotel.book(suite, date(2026, 1, 5), date(2026, 1, 8))

        # Late-evening timestamps on the departure day still mean Jan 8
        result = AvailabilityCalculator(db).evaluate(
            suite.id, datetime(2026, 1, 8, 22, 30), datetime(2026, 1, 10, 9, 0)
        )

        assert result.available is True

    def test_inverted_range_rejected(self, db):
        with pytest.raises(ValueError):
            AvailabilityCalculator(db).evaluate("rt", date(2026, 1, 9), date(2026, 1, 9))

    def test_event_block_counts_like_a_booking(self, db, hotel):
        from roomstock.models import Event

        suite = hotel.room_type(units=3)
        event = Event(
            property_id=hotel.property.id,
            title="Wedding",
            start_date=date(2026, 6, 1),
            end_date=date(2026, 6, 3)
        )
        db.add(event)
        db.commit()
        block = hotel.book(suite, event.start_date, event.end_date, unit=suite.units[0])
        block.event_id = event.id
        db.commit()

        result = AvailabilityCalculator(db).evaluate(suite.id, date(2026, 6, 2), date(2026, 6, 4))

        assert result.booked_units == 1
        assert result.available_units == 2
