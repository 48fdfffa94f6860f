from datetime import date, datetime, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from .config import get_settings
from .domain.services import AvailabilityView, ConflictResult
from .models import BookingFrequency, BookingRequest, BookingStatus, PitchType
from .utils.time import is_valid_slot, normalize_slots, venue_today


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _grid_slots(value: list[str]) -> list[str]:
    slots = normalize_slots(value)
    invalid = [slot for slot in slots if not is_valid_slot(slot)]
    if invalid:
        raise ValueError(f"time slots off the booking grid: {', '.join(invalid)}")
    return slots


class BookingRequestCreate(CamelModel):
    name: str = Field(min_length=2)
    email: EmailStr
    phone: str = Field(min_length=8)
    age: int = Field(ge=16, le=100)
    reason: str = Field(min_length=10)
    estimated_attendees: int = Field(ge=1, le=50)
    pitch_type: PitchType
    booking_date: date
    time_slots: list[str] = Field(min_length=1)
    frequency: BookingFrequency = BookingFrequency.ONE_OFF

    @field_validator("time_slots")
    @classmethod
    def _check_slots(cls, value: list[str]) -> list[str]:
        return _grid_slots(value)

    @field_validator("booking_date")
    @classmethod
    def _check_horizon(cls, value: date) -> date:
        settings = get_settings()
        today = venue_today(settings.venue_timezone)
        if value < today:
            raise ValueError("booking date is in the past")
        if value > today + timedelta(days=settings.booking_horizon_days):
            raise ValueError(f"booking date must be within {settings.booking_horizon_days} days")
        return value


class BookingRead(CamelModel):
    id: str
    name: str
    email: str
    phone: str
    age: int
    reason: str
    estimated_attendees: int
    pitch_type: PitchType
    booking_date: date
    time_slots: list[str]
    frequency: BookingFrequency
    status: BookingStatus
    admin_notes: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_db(cls, *, booking: BookingRequest) -> "BookingRead":
        return cls(
            id=booking.id,
            name=booking.name,
            email=booking.email,
            phone=booking.phone,
            age=booking.age,
            reason=booking.reason,
            estimated_attendees=booking.estimated_attendees,
            pitch_type=booking.pitch_type,
            booking_date=booking.booking_date,
            time_slots=normalize_slots(booking.time_slots),
            frequency=booking.frequency,
            status=booking.status,
            admin_notes=booking.admin_notes,
            created_at=booking.created_at,
        )


class BookingStatusUpdate(CamelModel):
    # Kept as a plain string; the workflow rejects values outside the closed set.
    status: str
    admin_notes: Optional[str] = None


class BookingReopen(CamelModel):
    admin_notes: Optional[str] = None


class ConflictCheckRequest(CamelModel):
    booking_date: date
    time_slots: list[str] = Field(min_length=1)
    pitch_type: PitchType
    exclude_booking_id: Optional[str] = None

    @field_validator("time_slots")
    @classmethod
    def _check_slots(cls, value: list[str]) -> list[str]:
        return _grid_slots(value)


class PublicBookingRead(CamelModel):
    """Booking fields safe to show unauthenticated callers: no requester contact details."""

    id: str
    pitch_type: PitchType
    booking_date: date
    time_slots: list[str]
    status: BookingStatus

    @classmethod
    def from_db(cls, *, booking: BookingRequest) -> "PublicBookingRead":
        return cls(
            id=booking.id,
            pitch_type=booking.pitch_type,
            booking_date=booking.booking_date,
            time_slots=normalize_slots(booking.time_slots),
            status=booking.status,
        )


class ConflictCheckResponse(CamelModel):
    has_conflict: bool
    conflicting_bookings: list[PublicBookingRead]
    conflicting_slots: list[str]

    @classmethod
    def from_result(cls, result: ConflictResult) -> "ConflictCheckResponse":
        return cls(
            has_conflict=result.has_conflict,
            conflicting_bookings=[PublicBookingRead.from_db(booking=b) for b in result.conflicting_bookings],
            conflicting_slots=result.conflicting_slots,
        )


class TakenSlotRead(CamelModel):
    time_slot: str
    pitch_type: PitchType
    status: BookingStatus


class AvailabilityRead(CamelModel):
    booking_date: date = Field(alias="date")
    taken_slots: list[TakenSlotRead]
    approved_bookings_count: int
    pending_bookings_count: int

    @classmethod
    def from_view(cls, view: AvailabilityView) -> "AvailabilityRead":
        return cls(
            booking_date=view.booking_date,
            taken_slots=[
                TakenSlotRead(time_slot=t.time_slot, pitch_type=t.pitch_type, status=t.status)
                for t in view.taken_slots
            ],
            approved_bookings_count=view.approved_count,
            pending_bookings_count=view.pending_count,
        )


class AdminLogin(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AdminTokenRead(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    admin_id: str
    username: str


class AdminMeRead(CamelModel):
    authenticated: bool = True
    admin_id: str
