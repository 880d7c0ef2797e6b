"""Errors raised by the recipient step domain services."""

from __future__ import annotations


class RemoteServiceError(RuntimeError):
    """A call to an external collaborator failed.

    ``status_code`` carries the upstream HTTP status when one was received.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UnknownRecipientError(LookupError):
    """Raised when a selection operation names a recipient that is not loaded."""


class NoEligibleRecipientsError(ValueError):
    """Raised when an enrichment batch contains nobody with an external handle."""
