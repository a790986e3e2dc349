"""Mini README: Error taxonomy shared by the store, the gate and the web layer.

Every failure the ledger reports derives from ``DonationTrustError``. The web
interface translates each class into an HTTP status; nothing here knows about
HTTP so the store and the gate stay usable from the CLI and from tests.
"""

from __future__ import annotations


class DonationTrustError(Exception):
    """Base class for ledger failures."""


class InvalidCredentials(DonationTrustError):
    """Raised when a login names an unknown admin or the password is wrong."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class Unauthorized(DonationTrustError):
    """Raised when a protected operation is attempted without a credential."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class InvalidToken(Unauthorized):
    """Raised for credentials that are malformed, wrongly signed or expired."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class ConstraintViolation(DonationTrustError):
    """A write broke a uniqueness or foreign-key rule and was rolled back."""


class NotFound(DonationTrustError, LookupError):
    """The referenced record id does not exist."""


class StoreUnavailable(DonationTrustError):
    """The relational store could not be reached or failed mid-query."""
