"""
Tests for cart validation against availability
"""

from roomstock.schemas.availability import UnitAvailabilityResult
from roomstock.services.availability_calculator import summarize
from roomstock.services.booking_validation import (
    BookingItem, validate_booking_items, can_proceed_with_booking,
    UNVERIFIABLE_MESSAGE, FULLY_BOOKED_MESSAGE
)


class TestValidateBookingItems:

    def test_all_items_available(self):
        items = [BookingItem("a", "rt-1"), BookingItem("b", "rt-2")]
        results = [summarize("rt-1", 3, 1), summarize("rt-2", 1, 0)]

        summary = validate_booking_items(items, results)

        assert summary.all_valid is True
        assert summary.invalid_count == 0
        assert [r.available_units for r in summary.results] == [2, 1]

    def test_each_item_judged_independently(self):
        items = [BookingItem("a", "rt-1"), BookingItem("b", "rt-2"), BookingItem("c", "rt-3")]
        results = [summarize("rt-1", 3, 3), summarize("rt-2", 3, 0), None]

        summary = validate_booking_items(items, results)

        assert summary.all_valid is False
        assert summary.invalid_count == 2
        assert summary.results[0].error == FULLY_BOOKED_MESSAGE
        assert summary.results[1].valid is True and summary.results[1].error is None
        assert summary.results[2].error == UNVERIFIABLE_MESSAGE
        assert summary.results[2].available_units == 0

    def test_missing_trailing_result_is_unverifiable(self):
        items = [BookingItem("a", "rt-1"), BookingItem("b", "rt-2")]

        summary = validate_booking_items(items, [summarize("rt-1", 2, 0)])

        assert summary.results[0].valid is True
        assert summary.results[1].error == UNVERIFIABLE_MESSAGE

    def test_duplicate_item_ids_keep_their_own_result(self):
        items = [BookingItem("x", "rt-1"), BookingItem("x", "ghost")]
        results = [summarize("rt-1", 3, 0), UnitAvailabilityResult.empty("ghost")]

        summary = validate_booking_items(items, results)

        assert summary.invalid_count == 1
        assert summary.results[0].valid is True
        assert summary.results[0].available_units == 3
        assert summary.results[1].valid is False
        assert summary.results[1].error == FULLY_BOOKED_MESSAGE

    def test_unknown_room_type_is_fully_booked(self):
        items = [BookingItem("a", "ghost")]
        summary = validate_booking_items(items, [UnitAvailabilityResult.empty("ghost")])
        assert summary.results[0].error == FULLY_BOOKED_MESSAGE

    def test_can_proceed(self):
        assert can_proceed_with_booking(1) is True
        assert can_proceed_with_booking(0) is False
