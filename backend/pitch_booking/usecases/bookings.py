import logging
from datetime import date
from typing import Iterable

from ..domain.errors import BookingConflictError, BookingNotFoundError, BookingValidationError
from ..domain.repositories import BookingRepository
from ..domain.services import ConflictResult, find_conflicts, next_status, reopen_status
from ..models import BookingFrequency, BookingRequest, BookingStatus, PitchType
from ..utils.time import is_valid_slot, normalize_slots

logger = logging.getLogger(__name__)


def _clean_slots(time_slots: Iterable[str]) -> list[str]:
    slots = normalize_slots(time_slots)
    if not slots:
        raise BookingValidationError("at least one time slot is required")
    invalid = [slot for slot in slots if not is_valid_slot(slot)]
    if invalid:
        raise BookingValidationError(f"time slots off the booking grid: {', '.join(invalid)}")
    return slots


def _pitch_type(value: str | PitchType) -> PitchType:
    try:
        return PitchType(value)
    except ValueError as exc:
        raise BookingValidationError(f"unknown pitch type: {value!r}") from exc


async def submit_booking(
    repo: BookingRepository,
    *,
    name: str,
    email: str,
    phone: str,
    age: int,
    reason: str,
    estimated_attendees: int,
    pitch_type: PitchType,
    booking_date: date,
    time_slots: Iterable[str],
    frequency: BookingFrequency = BookingFrequency.ONE_OFF,
) -> BookingRequest:
    booking = await repo.create(
        name=name,
        email=email,
        phone=phone,
        age=age,
        reason=reason,
        estimated_attendees=estimated_attendees,
        pitch_type=_pitch_type(pitch_type),
        booking_date=booking_date,
        time_slots=_clean_slots(time_slots),
        frequency=frequency,
    )
    logger.info("booking %s submitted for %s", booking.id, booking.booking_date)
    return booking


async def check_conflicts(
    repo: BookingRepository,
    *,
    booking_date: date,
    time_slots: Iterable[str],
    pitch_type: str | PitchType,
    exclude_id: str | None = None,
) -> ConflictResult:
    requested = normalize_slots(time_slots)
    pitch = _pitch_type(pitch_type)
    if not requested:
        return ConflictResult(has_conflict=False)
    approved = await repo.list_approved(booking_date)
    return find_conflicts(approved, requested, pitch, exclude_id=exclude_id)


async def list_bookings(repo: BookingRepository) -> list[BookingRequest]:
    return await repo.list_all()


async def get_booking(repo: BookingRepository, *, booking_id: str) -> BookingRequest:
    booking = await repo.get_by_id(booking_id)
    if booking is None:
        raise BookingNotFoundError("booking not found")
    return booking


async def update_booking_status(
    repo: BookingRepository,
    *,
    booking_id: str,
    status: str | BookingStatus,
    admin_notes: str | None = None,
) -> tuple[BookingRequest, BookingStatus]:
    """
    Approve or decline a pending booking. Must run inside a transaction:
    the booking date is locked before the transition is validated, and an
    approval re-checks conflicts against the approved set before writing.
    Returns the updated booking and its previous status.
    """
    booking = await get_booking(repo, booking_id=booking_id)
    # Refreshes the booking itself, so the transition is validated against the locked state.
    on_date = await repo.lock_date(booking.booking_date)
    target = next_status(booking.status, status)

    if target == BookingStatus.APPROVED:
        approved = [b for b in on_date if b.status == BookingStatus.APPROVED]
        conflict = find_conflicts(approved, booking.time_slots, booking.pitch_type, exclude_id=booking.id)
        if conflict.has_conflict:
            logger.warning(
                "approval of booking %s blocked on %s: %s",
                booking.id,
                booking.booking_date,
                ", ".join(conflict.conflicting_slots),
            )
            raise BookingConflictError("booking conflicts with an approved booking", conflict)

    previous = booking.status
    updated = await repo.update_status(booking, status=target, admin_notes=admin_notes)
    logger.info("booking %s moved from %s to %s", updated.id, previous, target)
    return updated, previous


async def reopen_booking(
    repo: BookingRepository,
    *,
    booking_id: str,
    admin_notes: str | None = None,
) -> tuple[BookingRequest, BookingStatus]:
    """Administrative override returning an approved or declined booking to pending."""
    booking = await get_booking(repo, booking_id=booking_id)
    await repo.lock_date(booking.booking_date)
    target = reopen_status(booking.status)
    previous = booking.status
    updated = await repo.update_status(booking, status=target, admin_notes=admin_notes)
    logger.info("booking %s reopened from %s", updated.id, previous)
    return updated, previous
