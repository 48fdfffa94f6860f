from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable

import pytest
from pitch_booking.models import BookingFrequency, BookingRequest, BookingStatus, PitchType


def _utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class FakeBookingRepo:
    """In-memory BookingRepository; rows keep insertion order like created_at ordering."""

    def __init__(self, bookings: list[BookingRequest] | None = None) -> None:
        self.bookings: list[BookingRequest] = list(bookings or [])
        self.locked_dates: list[date] = []
        self.update_calls = 0
        self._seq = len(self.bookings)

    async def list_approved(self, booking_date: date) -> list[BookingRequest]:
        return await self.list_by_status(booking_date, BookingStatus.APPROVED)

    async def list_by_status(self, booking_date: date, status: BookingStatus) -> list[BookingRequest]:
        return [b for b in self.bookings if b.booking_date == booking_date and b.status == status]

    async def list_all(self) -> list[BookingRequest]:
        return sorted(self.bookings, key=lambda b: b.created_at, reverse=True)

    async def get_by_id(self, booking_id: str) -> BookingRequest | None:
        return next((b for b in self.bookings if b.id == booking_id), None)

    async def lock_date(self, booking_date: date) -> list[BookingRequest]:
        self.locked_dates.append(booking_date)
        return sorted((b for b in self.bookings if b.booking_date == booking_date), key=lambda b: b.id)

    async def create(self, **fields: Any) -> BookingRequest:
        self._seq += 1
        now = _utc_now_naive()
        booking = BookingRequest(
            id=f"b-{self._seq}",
            status=BookingStatus.PENDING,
            admin_notes=None,
            created_at=now,
            updated_at=now,
            **fields,
        )
        self.bookings.append(booking)
        return booking

    async def update_status(
        self,
        booking: BookingRequest,
        *,
        status: BookingStatus,
        admin_notes: str | None,
    ) -> BookingRequest:
        self.update_calls += 1
        booking.status = status
        if admin_notes is not None:
            booking.admin_notes = admin_notes
        booking.updated_at = _utc_now_naive()
        return booking


def build_booking(
    booking_id: str = "b-1",
    *,
    booking_date: date = date(2025, 6, 1),
    time_slots: list[str] | None = None,
    pitch_type: PitchType = PitchType.SINGLE_COURT,
    status: BookingStatus = BookingStatus.PENDING,
    created_offset: int = 0,
) -> BookingRequest:
    created = datetime(2025, 5, 1, 12, 0) + timedelta(minutes=created_offset)
    return BookingRequest(
        id=booking_id,
        name="Sam Carter",
        email="sam@example.com",
        phone="07700900123",
        age=30,
        reason="Weekly five-a-side with colleagues",
        estimated_attendees=10,
        pitch_type=pitch_type,
        booking_date=booking_date,
        time_slots=list(time_slots if time_slots is not None else ["18:00"]),
        frequency=BookingFrequency.ONE_OFF,
        status=status,
        admin_notes=None,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def make_booking() -> Callable[..., BookingRequest]:
    return build_booking


@pytest.fixture
def fake_repo_cls() -> type[FakeBookingRepo]:
    return FakeBookingRepo
