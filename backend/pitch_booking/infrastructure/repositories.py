from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.repositories import AdminRepository, BookingRepository
from ..models import Admin, BookingFrequency, BookingRequest, BookingStatus, PitchType
from ..utils.time import utc_now_naive


class SqlAlchemyBookingRepository(BookingRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _by_date_and_status(self, booking_date: date, status: BookingStatus) -> Select[tuple[BookingRequest]]:
        return (
            select(BookingRequest)
            .where(BookingRequest.booking_date == booking_date, BookingRequest.status == status)
            .order_by(BookingRequest.created_at, BookingRequest.id)
        )

    async def list_approved(self, booking_date: date) -> List[BookingRequest]:
        return await self.list_by_status(booking_date, BookingStatus.APPROVED)

    async def list_by_status(self, booking_date: date, status: BookingStatus) -> List[BookingRequest]:
        rows = await self.session.scalars(self._by_date_and_status(booking_date, status))
        return list(rows.all())

    async def list_all(self) -> List[BookingRequest]:
        stmt = select(BookingRequest).order_by(BookingRequest.created_at.desc())
        rows = await self.session.scalars(stmt)
        return list(rows.all())

    async def get_by_id(self, booking_id: str) -> Optional[BookingRequest]:
        result = await self.session.get(BookingRequest, booking_id)
        return result if isinstance(result, BookingRequest) else None

    async def lock_date(self, booking_date: date) -> List[BookingRequest]:
        # Locks every row on the date so status changes for that date run one at a time.
        # Concurrent callers on the same date wait on each other here; lock order follows the index scan.
        stmt = (
            select(BookingRequest)
            .where(BookingRequest.booking_date == booking_date)
            .order_by(BookingRequest.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        rows = await self.session.scalars(stmt)
        return list(rows.all())

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
    ) -> BookingRequest:
        now = utc_now_naive()
        booking = BookingRequest(
            name=name,
            email=email,
            phone=phone,
            age=age,
            reason=reason,
            estimated_attendees=estimated_attendees,
            pitch_type=pitch_type,
            booking_date=booking_date,
            time_slots=time_slots,
            frequency=frequency,
            status=BookingStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        self.session.add(booking)
        await self.session.flush()
        return booking

    async def update_status(
        self,
        booking: BookingRequest,
        *,
        status: BookingStatus,
        admin_notes: str | None,
    ) -> BookingRequest:
        booking.status = status
        if admin_notes is not None:
            booking.admin_notes = admin_notes
        booking.updated_at = utc_now_naive()
        self.session.add(booking)
        await self.session.flush()
        return booking


class SqlAlchemyAdminRepository(AdminRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, admin_id: str) -> Optional[Admin]:
        result = await self.session.get(Admin, admin_id)
        return result if isinstance(result, Admin) else None

    async def get_by_username(self, username: str) -> Optional[Admin]:
        result = await self.session.scalar(select(Admin).where(Admin.username == username))
        return result if isinstance(result, Admin) else None

    async def create(self, *, username: str, password_hash: str) -> Admin:
        admin = Admin(username=username, password_hash=password_hash, created_at=utc_now_naive())
        self.session.add(admin)
        await self.session.flush()
        return admin
