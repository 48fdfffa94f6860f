from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Sequence

from ..models import BookingRequest, BookingStatus, PitchType
from ..utils.time import normalize_slots
from .errors import InvalidStatusError, TransitionNotAllowedError

WORKFLOW_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.APPROVED, BookingStatus.DECLINED}),
    BookingStatus.APPROVED: frozenset(),
    BookingStatus.DECLINED: frozenset(),
}


@dataclass(frozen=True)
class ConflictResult:
    has_conflict: bool
    conflicting_bookings: list[BookingRequest] = field(default_factory=list)
    conflicting_slots: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TakenSlot:
    time_slot: str
    pitch_type: PitchType
    status: BookingStatus


@dataclass(frozen=True)
class AvailabilityView:
    booking_date: date
    taken_slots: list[TakenSlot]
    approved_count: int
    pending_count: int


def pitch_types_conflict(a: PitchType, b: PitchType) -> bool:
    """Full pitch clashes with anything; a single court only clashes with another single court."""
    return a == PitchType.FULL_PITCH or b == PitchType.FULL_PITCH or a == b


def find_conflicts(
    approved: Iterable[BookingRequest],
    time_slots: Iterable[str],
    pitch_type: PitchType,
    *,
    exclude_id: str | None = None,
) -> ConflictResult:
    """
    Pure conflict check of a requested slot set against approved bookings.
    Callers pass only approved bookings; pending and declined ones never block.
    """
    requested = set(time_slots)
    if not requested:
        return ConflictResult(has_conflict=False)

    conflicting: list[BookingRequest] = []
    slots: set[str] = set()
    for booking in approved:
        if exclude_id is not None and booking.id == exclude_id:
            continue
        overlap = requested.intersection(booking.time_slots)
        if not overlap:
            continue
        if pitch_types_conflict(booking.pitch_type, pitch_type):
            conflicting.append(booking)
            slots.update(overlap)

    return ConflictResult(
        has_conflict=bool(conflicting),
        conflicting_bookings=conflicting,
        conflicting_slots=normalize_slots(slots),
    )


def build_availability(
    booking_date: date,
    approved: Sequence[BookingRequest],
    pending: Sequence[BookingRequest],
) -> AvailabilityView:
    taken: list[TakenSlot] = []
    for status, group in ((BookingStatus.APPROVED, approved), (BookingStatus.PENDING, pending)):
        for booking in group:
            taken.extend(
                TakenSlot(time_slot=slot, pitch_type=booking.pitch_type, status=status)
                for slot in normalize_slots(booking.time_slots)
            )
    return AvailabilityView(
        booking_date=booking_date,
        taken_slots=taken,
        approved_count=len(approved),
        pending_count=len(pending),
    )


def parse_status(value: str | BookingStatus) -> BookingStatus:
    try:
        return BookingStatus(value)
    except ValueError as exc:
        raise InvalidStatusError(f"unknown status: {value!r}") from exc


def next_status(current: BookingStatus, target: str | BookingStatus) -> BookingStatus:
    """
    Workflow state machine. Only pending bookings may be approved or declined;
    approved and declined are terminal here, and reopening goes through
    ``reopen_status``.
    """
    target_status = parse_status(target)
    if target_status == BookingStatus.PENDING:
        raise InvalidStatusError("pending is not a workflow target; reopen the booking instead")
    if target_status not in WORKFLOW_TRANSITIONS[current]:
        raise TransitionNotAllowedError(f"cannot move booking from {current} to {target_status}")
    return target_status


def reopen_status(current: BookingStatus) -> BookingStatus:
    if current == BookingStatus.PENDING:
        raise TransitionNotAllowedError("booking is already pending")
    return BookingStatus.PENDING
