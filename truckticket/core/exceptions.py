"""Error taxonomy shared by the services and the HTTP layer."""


class TicketingError(Exception):
    """Base exception for ticketing, billing and settlement errors."""

    kind = "error"

    def __init__(self, message: str, **details) -> None:
        self.message = message
        self.details = details
        super().__init__(self.message)


class ValidationError(TicketingError):
    """Malformed or missing input. Never retried."""

    kind = "validation_error"


class FormatError(ValidationError):
    """Input that does not match a required textual format (dates)."""

    kind = "format_error"


class NotFoundError(TicketingError):
    """Referenced ticket, customer or driver does not exist."""

    kind = "not_found"


class ConflictError(TicketingError):
    """Uniqueness violation detected before anything is committed."""

    kind = "conflict"


class StorageError(TicketingError):
    """Persistence failure. The transaction has been rolled back."""

    kind = "storage_error"
