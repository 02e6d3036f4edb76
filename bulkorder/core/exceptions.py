"""Custom exceptions for the bulk order engine."""
from __future__ import annotations


class BulkOrderException(Exception):
    """Base exception for all bulk order errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class ValidationException(BulkOrderException):
    """Input validation errors."""

    pass


class ConfigurationException(BulkOrderException):
    """Configuration errors."""

    pass


class CartServiceException(BulkOrderException):
    """Transport failure or non-success response from the cart service."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        service_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.service_message = service_message


class ResolutionException(BulkOrderException):
    """Active cart lookup failed."""

    def __init__(self, message: str, *, service_message: str | None = None) -> None:
        super().__init__(message)
        self.service_message = service_message


class SubmissionException(BulkOrderException):
    """Create-cart or append-items call failed."""

    def __init__(self, message: str, *, service_message: str | None = None) -> None:
        super().__init__(message)
        self.service_message = service_message


class SubmissionStateError(BulkOrderException):
    """Illegal submission state transition."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Transition '{current} -> {target}' is not allowed")
        self.current = current
        self.target = target
