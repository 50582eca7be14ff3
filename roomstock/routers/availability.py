"""
Availability Router

Public and admin availability surfaces. Every endpoint validates its
input here and then goes through the shared engine services.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from ..database import get_db
from ..schemas.availability import (
    UnitAvailabilityResult,
    DateAvailabilityInfo,
    BulkAvailabilityRequest,
    BookingValidationRequest,
    BookingValidationSummary,
    RoomTypeUnitsResponse,
    UnitOccupancyResponse,
)
from ..services.availability_calculator import AvailabilityCalculator
from ..services.bulk_dispatcher import BulkDispatcher
from ..services.calendar_expander import CalendarDayExpander
from ..services.inventory_reader import UnitInventoryReader
from ..services.booking_validation import BookingItem, validate_booking_items
from ..utils.dates import parse_year_month
from ..utils.rate_limiter import limiter, availability_rate_limit
from ..utils.validation import AvailabilityValidationError, parse_stay, parse_checks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/availability", tags=["Availability"])


def _bad_request(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("", response_model=UnitAvailabilityResult)
@limiter.limit(availability_rate_limit)
def check_availability(
    request: Request,
    room_type_id: Optional[str] = Query(None, alias="roomTypeId"),
    check_in: Optional[str] = Query(None, alias="checkIn"),
    check_out: Optional[str] = Query(None, alias="checkOut"),
    db: Session = Depends(get_db)
):
    """Free units of one room type for a stay (checkIn inclusive, checkOut exclusive)."""
    try:
        check = parse_stay(room_type_id, check_in, check_out)
    except AvailabilityValidationError as e:
        raise _bad_request(e)

    calculator = AvailabilityCalculator(db)
    return calculator.evaluate(check.room_type_id, check.check_in, check.check_out)


@router.post("/bulk", response_model=List[UnitAvailabilityResult])
def check_bulk_availability(
    payload: BulkAvailabilityRequest,
    db: Session = Depends(get_db)
):
    """
    Availability for many independent checks, same order as the input.

    Any malformed entry rejects the whole batch; an unknown room type only
    gets an empty result at its position.
    """
    try:
        checks = parse_checks(payload.checks)
    except AvailabilityValidationError as e:
        raise _bad_request(e)

    if not checks:
        return []

    return BulkDispatcher(db).evaluate_many(checks)


@router.get("/calendar", response_model=List[DateAvailabilityInfo])
def get_calendar_availability(
    room_type_id: Optional[str] = Query(None, alias="roomTypeId"),
    month: Optional[str] = Query(None, description="YYYY-MM"),
    db: Session = Depends(get_db)
):
    """Daily availability for every day of a month."""
    if not room_type_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="roomTypeId is required")
    if not month:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="month is required (format: YYYY-MM)"
        )

    try:
        year, month_number = parse_year_month(month)
    except ValueError as e:
        raise _bad_request(e)

    return CalendarDayExpander(db).expand_month(room_type_id, year, month_number)


@router.get("/units", response_model=List[RoomTypeUnitsResponse])
def get_unit_availability(
    property_id: Optional[str] = Query(None, alias="propertyId"),
    check_in: Optional[str] = Query(None, alias="checkIn"),
    check_out: Optional[str] = Query(None, alias="checkOut"),
    db: Session = Depends(get_db)
):
    """Room types of a property with each active unit flagged free or occupied (event planning)."""
    if not property_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="propertyId is required")

    try:
        window = parse_stay(property_id, check_in, check_out)
    except AvailabilityValidationError as e:
        raise _bad_request(e)

    room_types = UnitInventoryReader(db).list_units_with_availability(
        property_id, window.check_in, window.check_out
    )
    return [
        RoomTypeUnitsResponse(
            id=rt.id,
            name=rt.name,
            price=rt.price,
            free_units=rt.free_units,
            units=[
                UnitOccupancyResponse(id=u.id, number=u.number, is_available=u.is_available)
                for u in rt.units
            ]
        )
        for rt in room_types
    ]


@router.post("/validate", response_model=BookingValidationSummary)
def validate_booking(
    payload: BookingValidationRequest,
    db: Session = Depends(get_db)
):
    """Check every cart item still has a free unit before a booking is placed."""
    try:
        checks = parse_checks(payload.items, field="items")
    except AvailabilityValidationError as e:
        raise _bad_request(e)

    items = []
    for index, (raw, check) in enumerate(zip(payload.items, checks)):
        item_id = raw.get("itemId")
        items.append(BookingItem(
            item_id=str(index) if item_id in (None, "") else str(item_id),
            room_type_id=check.room_type_id
        ))
    results = BulkDispatcher(db).evaluate_many(checks)
    return validate_booking_items(items, results)
