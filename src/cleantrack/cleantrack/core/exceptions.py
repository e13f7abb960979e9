class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a session lacks permission for an action."""


class ScopeError(AuthorizationError):
    """Raised when no valid tenant scope exists for a role/identity pair."""


class SubscriptionError(DomainError):
    """Raised (or delivered to error callbacks) when a live query fails."""


class WorkflowConflictError(DomainError):
    """Raised when a deletion request targets a location that no longer exists."""


class AggregationInputError(ValidationError):
    """Raised when compliance inputs are malformed (bad range, bad target)."""
