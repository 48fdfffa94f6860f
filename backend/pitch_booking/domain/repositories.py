from __future__ import annotations

from datetime import date
from typing import Protocol

from ..models import Admin, BookingFrequency, BookingRequest, BookingStatus, PitchType


class BookingRepository(Protocol):
    async def list_approved(self, booking_date: date) -> list[BookingRequest]: ...

    async def list_by_status(self, booking_date: date, status: BookingStatus) -> list[BookingRequest]: ...

    async def list_all(self) -> list[BookingRequest]: ...

    async def get_by_id(self, booking_id: str) -> BookingRequest | None: ...

    async def lock_date(self, booking_date: date) -> list[BookingRequest]: ...

    async def create(
        self,
        *,
        name: str,
        email: str,
        phone: str,
        age: int,
        reason: str,
        estimated_attendees: int,
        pitch_type: PitchType,
        booking_date: date,
        time_slots: list[str],
        frequency: BookingFrequency,
    ) -> BookingRequest: ...

    async def update_status(
        self,
        booking: BookingRequest,
        *,
        status: BookingStatus,
        admin_notes: str | None,
    ) -> BookingRequest: ...


class AdminRepository(Protocol):
    async def get_by_id(self, admin_id: str) -> Admin | None: ...

    async def get_by_username(self, username: str) -> Admin | None: ...

    async def create(self, *, username: str, password_hash: str) -> Admin: ...
