"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
VALIDATION_ERROR = "VALIDATION_ERROR"
UNKNOWN_TIER = "UNKNOWN_TIER"
INVALID_INPUT = "INVALID_INPUT"
TIER_LIMIT = "TIER_LIMIT"
INSUFFICIENT_TOKENS = "INSUFFICIENT_TOKENS"
BOOKING_CONFLICT = "BOOKING_CONFLICT"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class UnknownTierError(DomainError):
    """Raised when a value does not name one of the membership tiers."""

    pass


class InvalidInputError(DomainError):
    """Raised when a numeric argument violates its precondition (negative, zero, non-finite)."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    pass


class DuplicateResourceError(DomainError):
    """Raised when attempting to create or update a resource that would violate a uniqueness constraint."""

    pass


class DomainValidationError(DomainError):
    """Raised when business rules or domain validation fail (e.g. invalid dates, invalid state transitions)."""

    pass


class TierLimitError(DomainError):
    """Raised when a member's tier does not allow booking the requested yacht."""

    pass


class InsufficientTokensError(DomainError):
    """Raised when a token balance does not cover a booking."""

    pass


class BookingConflictError(DomainError):
    """Raised when a booking overlaps an existing confirmed booking for the same yacht."""

    pass
