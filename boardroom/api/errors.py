from __future__ import annotations

import logging

from fastapi import HTTPException

from boardroom.api.v1.schemas import ConflictSchema
from boardroom.application.exceptions import (
    BookingConflictError,
    BookingError,
    BookingValidationError,
    DuplicateError,
    NotFoundError,
    PermissionDeniedError,
    StoreUnavailableError,
)


logger = logging.getLogger(__name__)


def to_http(error: Exception) -> HTTPException:
    """Translate a use-case exception into the HTTP error returned to the caller."""
    if isinstance(error, BookingConflictError):
        conflict = (
            ConflictSchema.model_validate(error.conflict).model_dump(mode="json") if error.conflict else None
        )
        return HTTPException(status_code=409, detail={"message": error.reason, "conflicting_booking": conflict})
    if isinstance(error, BookingValidationError):
        return HTTPException(status_code=400, detail=error.reason)
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, PermissionDeniedError):
        return HTTPException(status_code=403, detail=str(error))
    if isinstance(error, DuplicateError):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, StoreUnavailableError):
        logger.error("Store unavailable", extra={"reason": str(error)})
        return HTTPException(status_code=503, detail="Service temporarily unavailable")
    if isinstance(error, BookingError):
        return HTTPException(status_code=400, detail=str(error))
    raise error
