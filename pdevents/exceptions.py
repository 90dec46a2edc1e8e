"""Errors raised by pdevents."""

from typing import Any


class PagerDutyError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(PagerDutyError, ValueError):
    """Invalid connection configuration, detected before any request is sent."""


class InvalidArgument(PagerDutyError, ValueError):
    """Malformed call into an event's generic key access."""


class ServiceRejected(PagerDutyError):
    """The Events API rejected the event (HTTP 400)."""

    def __init__(self, message: str, errors: list[Any] | None = None):
        super().__init__(message)
        self.errors: list[Any] = list(errors or [])

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        return f"{self.message}: {'; '.join(str(e) for e in self.errors)}"


class TransportFailure(PagerDutyError):
    """The request never produced an HTTP response (DNS, TLS, connect, timeout)."""
