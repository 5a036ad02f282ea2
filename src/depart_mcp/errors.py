"""Error types shared across validation, providers and configuration."""


class DepartError(Exception):
    """Base class for departure planning errors."""


class TripValidationError(DepartError):
    """A request field is missing or malformed.

    Attributes:
        field: Name of the offending request field (wire name, e.g. "airport").
        message: Human-readable description of the violated constraint.
    """

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class ProviderError(DepartError):
    """A geocoding, routing, weather or places call failed or returned no usable data."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class ConfigurationError(DepartError):
    """Required configuration (the provider API key) is missing."""
