"""Map failed outcomes onto JSON error responses"""

from fastapi import Request
from fastapi.responses import JSONResponse

from perpus_portal.domain.exceptions import (
    AuthError,
    ConflictError,
    DomainException,
    NotFoundError,
    TransportError,
    ValidationError,
)
from perpus_portal.domain.models import Outcome

# Checked in order; subclasses resolve through isinstance
STATUS_BY_ERROR = (
    (ValidationError, 422),
    (AuthError, 401),
    (NotFoundError, 404),
    (ConflictError, 409),
    (TransportError, 503),
)


def status_for(failure: DomainException) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(failure, error_type):
            return status_code
    return 500


def failure_response(outcome: Outcome) -> JSONResponse:
    """{"success": false, "error": ..., "code": ...} with the matching status"""
    return JSONResponse(
        status_code=status_for(outcome.failure),
        content={"success": False, "error": outcome.error, "code": outcome.code},
    )


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Render a DomainException raised by a dependency like a failed outcome"""
    return failure_response(Outcome.fail(exc))
