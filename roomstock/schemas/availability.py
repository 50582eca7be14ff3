from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, List, Optional
import datetime as dt
from enum import Enum


class CamelModel(BaseModel):
    """Serializes with camelCase keys; accepts either spelling on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DayStatus(str, Enum):
    AVAILABLE = "available"
    LIMITED = "limited"
    UNAVAILABLE = "unavailable"


class UnitAvailabilityResult(CamelModel):
    room_type_id: str
    total_units: int = 0
    booked_units: int = 0
    available_units: int = 0
    available: bool = False
    limited_availability: bool = False

    @classmethod
    def empty(cls, room_type_id: str) -> "UnitAvailabilityResult":
        """Result for an unknown room type or one without active units."""
        return cls(room_type_id=room_type_id)


class DateAvailabilityInfo(CamelModel):
    date: dt.date
    available_units: int
    total_units: int
    status: DayStatus


# ============ Requests ============
# Kept loose (Any) so that validation can fail with a 400 and an
# index-specific message instead of a generic 422.

class BulkAvailabilityRequest(BaseModel):
    checks: Any = None


class BookingValidationRequest(BaseModel):
    items: Any = None


# ============ Booking validation ============

class BookingValidationResult(CamelModel):
    item_id: str
    room_type_id: str
    valid: bool
    available_units: int
    error: Optional[str] = None


class BookingValidationSummary(CamelModel):
    all_valid: bool
    invalid_count: int
    results: List[BookingValidationResult] = Field(default_factory=list)


# ============ Unit occupancy ============

class UnitOccupancyResponse(CamelModel):
    id: str
    number: str
    is_available: bool


class RoomTypeUnitsResponse(CamelModel):
    id: str
    name: str
    price: float
    free_units: int
    units: List[UnitOccupancyResponse]
