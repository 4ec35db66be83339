"""Global exception handlers that map domain exceptions to HTTP responses."""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.errors import (
    BOOKING_CONFLICT,
    DUPLICATE_RESOURCE,
    INSUFFICIENT_TOKENS,
    INVALID_INPUT,
    NOT_FOUND,
    TIER_LIMIT,
    UNKNOWN_TIER,
    VALIDATION_ERROR,
    BookingConflictError,
    DomainValidationError,
    DuplicateResourceError,
    InsufficientTokensError,
    InvalidInputError,
    NotFoundError,
    TierLimitError,
    UnknownTierError,
)
from app.schemas.error import ErrorResponse


def _error_response(status_code: int, detail: str, code: str) -> JSONResponse:
    """Return a standardized error response with detail and machine-readable code."""
    body = ErrorResponse(detail=detail, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def unknown_tier_error_handler(_request: Request, exc: UnknownTierError) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        str(exc),
        UNKNOWN_TIER,
    )


def invalid_input_error_handler(_request: Request, exc: InvalidInputError) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        str(exc),
        INVALID_INPUT,
    )


def domain_validation_error_handler(
    _request: Request, exc: DomainValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        str(exc),
        VALIDATION_ERROR,
    )


def tier_limit_error_handler(_request: Request, exc: TierLimitError) -> JSONResponse:
    return _error_response(
        status.HTTP_403_FORBIDDEN,
        str(exc),
        TIER_LIMIT,
    )


def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(
        status.HTTP_404_NOT_FOUND,
        str(exc),
        NOT_FOUND,
    )


def duplicate_resource_error_handler(
    _request: Request, exc: DuplicateResourceError
) -> JSONResponse:
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        DUPLICATE_RESOURCE,
    )


def booking_conflict_error_handler(
    _request: Request, exc: BookingConflictError
) -> JSONResponse:
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        BOOKING_CONFLICT,
    )


def insufficient_tokens_error_handler(
    _request: Request, exc: InsufficientTokensError
) -> JSONResponse:
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        INSUFFICIENT_TOKENS,
    )


def register_exception_handlers(app):
    """Register domain exception handlers on the FastAPI app."""
    app.add_exception_handler(UnknownTierError, unknown_tier_error_handler)
    app.add_exception_handler(InvalidInputError, invalid_input_error_handler)
    app.add_exception_handler(DomainValidationError, domain_validation_error_handler)
    app.add_exception_handler(TierLimitError, tier_limit_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(DuplicateResourceError, duplicate_resource_error_handler)
    app.add_exception_handler(BookingConflictError, booking_conflict_error_handler)
    app.add_exception_handler(InsufficientTokensError, insufficient_tokens_error_handler)
