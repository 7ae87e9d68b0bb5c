"""Custom exception hierarchy for prop-match."""


class PropMatchError(Exception):
    """Base exception for all prop-match errors."""


class ValidationFailure(PropMatchError):
    """Raised when search criteria lack a location or property data."""


class DataMalformedError(PropMatchError):
    """Raised when a raw field cannot be parsed into its structured form."""


class DependencyDegradedError(PropMatchError):
    """Raised when an external capability (e.g. trigram lookup) is unavailable."""


class ComputationFaultError(PropMatchError):
    """Raised when scoring or grouping a single record fails unexpectedly."""

    def __init__(self, message: str, record_id: str | None = None) -> None:
        super().__init__(message)
        self.record_id = record_id


class ConfigurationError(PropMatchError):
    """Raised when configuration is invalid or missing."""
