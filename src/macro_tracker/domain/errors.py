"""Error taxonomy surfaced by the food API."""


class MacroTrackerError(Exception):
    """Base error carrying the HTTP status and client-facing message."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MacroTrackerError):
    """Malformed or out-of-range input."""

    status_code = 400
    default_message = "Invalid request"


class AuthorizationError(MacroTrackerError):
    """Missing caller identity."""

    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(MacroTrackerError):
    """No entry with the requested id exists for the caller."""

    status_code = 404
    default_message = "Food not found"


class ConflictError(MacroTrackerError):
    """An entry already occupies the target key."""

    status_code = 409
    default_message = "Food item already exists"


class TransientStorageError(MacroTrackerError):
    """Storage is throttling or unavailable; safe to retry."""

    status_code = 503
    default_message = "Service temporarily unavailable"


class InternalError(MacroTrackerError):
    """Unexpected failure; detail is logged, never returned."""


class ConfigurationError(InternalError):
    """Required server configuration is missing."""
