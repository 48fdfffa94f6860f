import logging
from typing import List, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_admin_id, get_session
from ..domain.errors import (
    BookingConflictError,
    BookingError,
    BookingNotFoundError,
    BookingValidationError,
    InvalidStatusError,
    TransitionNotAllowedError,
)
from ..infrastructure.repositories import SqlAlchemyBookingRepository
from ..models import BookingStatus
from ..schemas import (
    BookingRead,
    BookingReopen,
    BookingRequestCreate,
    BookingStatusUpdate,
    ConflictCheckRequest,
    ConflictCheckResponse,
)
from ..usecases import bookings as booking_usecase
from ..utils.audit_log import emit_audit_log

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bookings", tags=["bookings"])
admin_router = APIRouter(
    prefix="/api/bookings",
    tags=["bookings", "admin"],
    dependencies=[Depends(get_current_admin_id)],
)


def _raise_http(exc: BookingError) -> NoReturn:
    if isinstance(exc, BookingNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="booking not found") from exc
    if isinstance(exc, BookingConflictError):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": str(exc),
                "conflictingSlots": exc.conflict.conflicting_slots,
                "conflictingBookingIds": [b.id for b in exc.conflict.conflicting_bookings],
            },
        ) from exc
    if isinstance(exc, TransitionNotAllowedError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if isinstance(exc, InvalidStatusError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if isinstance(exc, BookingValidationError):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="booking operation failed") from exc


def _audit_failed(exc: RuntimeError) -> HTTPException:
    logger.error("audit log emission failed: %s", exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="audit log failure")


@router.post("", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingRequestCreate,
    session: AsyncSession = Depends(get_session),
) -> BookingRead:
    repo = SqlAlchemyBookingRepository(session)
    async with session.begin():
        try:
            booking = await booking_usecase.submit_booking(
                repo,
                name=payload.name,
                email=str(payload.email),
                phone=payload.phone,
                age=payload.age,
                reason=payload.reason,
                estimated_attendees=payload.estimated_attendees,
                pitch_type=payload.pitch_type,
                booking_date=payload.booking_date,
                time_slots=payload.time_slots,
                frequency=payload.frequency,
            )
        except BookingError as exc:
            _raise_http(exc)
        try:
            emit_audit_log(
                action="booking.created",
                initiator="requester",
                booking_id=booking.id,
                booking_date=booking.booking_date,
                pitch_type=booking.pitch_type,
                time_slots=booking.time_slots,
                status_from=None,
                status_to=booking.status,
            )
        except RuntimeError as exc:
            raise _audit_failed(exc) from exc

    return BookingRead.from_db(booking=booking)


@router.post("/check-conflicts", response_model=ConflictCheckResponse)
async def check_conflicts(
    payload: ConflictCheckRequest,
    session: AsyncSession = Depends(get_session),
) -> ConflictCheckResponse:
    repo = SqlAlchemyBookingRepository(session)
    try:
        result = await booking_usecase.check_conflicts(
            repo,
            booking_date=payload.booking_date,
            time_slots=payload.time_slots,
            pitch_type=payload.pitch_type,
            exclude_id=payload.exclude_booking_id,
        )
    except BookingError as exc:
        _raise_http(exc)
    return ConflictCheckResponse.from_result(result)


@admin_router.get("", response_model=List[BookingRead])
async def list_bookings(session: AsyncSession = Depends(get_session)) -> list[BookingRead]:
    repo = SqlAlchemyBookingRepository(session)
    rows = await booking_usecase.list_bookings(repo)
    return [BookingRead.from_db(booking=booking) for booking in rows]


@admin_router.get("/{booking_id}", response_model=BookingRead)
async def get_booking(
    booking_id: str = Path(..., min_length=1),
    session: AsyncSession = Depends(get_session),
) -> BookingRead:
    repo = SqlAlchemyBookingRepository(session)
    try:
        booking = await booking_usecase.get_booking(repo, booking_id=booking_id)
    except BookingError as exc:
        _raise_http(exc)
    return BookingRead.from_db(booking=booking)


@admin_router.patch("/{booking_id}/status", response_model=BookingRead)
async def update_booking_status(
    payload: BookingStatusUpdate,
    booking_id: str = Path(..., min_length=1),
    session: AsyncSession = Depends(get_session),
    admin_id: str = Depends(get_current_admin_id),
) -> BookingRead:
    repo = SqlAlchemyBookingRepository(session)
    async with session.begin():
        try:
            updated, previous = await booking_usecase.update_booking_status(
                repo,
                booking_id=booking_id,
                status=payload.status,
                admin_notes=payload.admin_notes,
            )
        except BookingError as exc:
            _raise_http(exc)
        try:
            emit_audit_log(
                action="booking.approved" if updated.status == BookingStatus.APPROVED else "booking.declined",
                initiator="admin",
                booking_id=updated.id,
                booking_date=updated.booking_date,
                pitch_type=updated.pitch_type,
                time_slots=updated.time_slots,
                status_from=previous,
                status_to=updated.status,
                admin_id=admin_id,
                message=payload.admin_notes,
            )
        except RuntimeError as exc:
            raise _audit_failed(exc) from exc

    return BookingRead.from_db(booking=updated)


@admin_router.post("/{booking_id}/reopen", response_model=BookingRead)
async def reopen_booking(
    payload: BookingReopen | None = None,
    booking_id: str = Path(..., min_length=1),
    session: AsyncSession = Depends(get_session),
    admin_id: str = Depends(get_current_admin_id),
) -> BookingRead:
    repo = SqlAlchemyBookingRepository(session)
    notes = payload.admin_notes if payload is not None else None
    async with session.begin():
        try:
            updated, previous = await booking_usecase.reopen_booking(repo, booking_id=booking_id, admin_notes=notes)
        except BookingError as exc:
            _raise_http(exc)
        try:
            emit_audit_log(
                action="booking.reopened",
                initiator="admin",
                booking_id=updated.id,
                booking_date=updated.booking_date,
                pitch_type=updated.pitch_type,
                time_slots=updated.time_slots,
                status_from=previous,
                status_to=updated.status,
                admin_id=admin_id,
                message=notes,
            )
        except RuntimeError as exc:
            raise _audit_failed(exc) from exc

    return BookingRead.from_db(booking=updated)
