from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .services import ConflictResult


class BookingError(Exception):
    """Base class for booking domain errors."""


class BookingNotFoundError(BookingError):
    pass


class InvalidStatusError(BookingError):
    """Status value or transition outside the workflow's closed set."""


class TransitionNotAllowedError(InvalidStatusError):
    pass


class BookingValidationError(BookingError):
    """Malformed input that got past the request schemas."""


class BookingConflictError(BookingError):
    def __init__(self, message: str, conflict: "ConflictResult") -> None:
        super().__init__(message)
        self.conflict = conflict
