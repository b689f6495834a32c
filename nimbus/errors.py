"""Exception types raised by the weather client core."""


class NimbusError(Exception):
    """Base class for all weather client errors."""


class NetworkError(NimbusError):
    """Raised on transport failure, timeout, or an exhausted retry budget."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(NimbusError):
    """Raised when a provider response is missing required fields."""


class NotFoundError(NimbusError):
    """Raised when geocoding returned no candidates for a name."""
