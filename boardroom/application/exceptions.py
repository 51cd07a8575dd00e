from __future__ import annotations

from boardroom.domain.entities.booking import ConflictInfo


class BookingError(RuntimeError):
    """Base class for per-request booking failures."""
    pass


class BookingValidationError(BookingError):
    """Raised when a booking request breaks a booking rule."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class BookingConflictError(BookingError):
    """Raised when the requested interval overlaps a confirmed booking."""

    def __init__(self, conflict: ConflictInfo | None, reason: str = "Boardroom is already booked for this time slot") -> None:
        super().__init__(reason)
        self.reason = reason
        self.conflict = conflict


class NotFoundError(BookingError):
    pass


class PermissionDeniedError(BookingError):
    pass


class DuplicateError(BookingError):
    pass


class StoreUnavailableError(RuntimeError):
    """Raised when the backing store fails transiently (I/O, lock timeout)."""
    pass
