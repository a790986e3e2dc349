"""Mini README: Tests for admin login and credential checks.

Structure:
    * test_login_issues_credential_accepted_by_authorize - login/authorize round trip.
    * test_wrong_password_and_unknown_admin_are_rejected - InvalidCredentials for bad logins.
    * test_expired_credential_is_rejected - credentials expire after 24 hours.
    * test_credentials_from_another_secret_or_garbage_are_rejected - forged or malformed tokens fail.
    * test_missing_credential_is_unauthorized - absent credential is plain Unauthorized.
    * test_passwords_are_stored_hashed - bcrypt hashes only.
    * test_default_admin_is_created_once - default admin seeding is idempotent.
    * test_duplicate_admin_username_is_rejected - unique admin usernames.

Confirms the login/authorize round trip, rejection of wrong passwords and
unknown admins, expiry after the validity window, and that passwords are
only ever stored as bcrypt hashes.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from donationtrust.auth import AccessGate, AdminIdentity, TokenIssuer, verify_password
from donationtrust.errors import ConstraintViolation, InvalidCredentials, InvalidToken, Unauthorized
from donationtrust.store import RecordStore


def test_login_issues_credential_accepted_by_authorize(gate: AccessGate) -> None:
    """A credential from login authorizes as the same admin."""

    created = gate.create_admin("treasurer", "s3cret-pass")

    token = gate.login("treasurer", "s3cret-pass")

    assert gate.authorize(token) == AdminIdentity(id=created.id, username="treasurer")


def test_wrong_password_and_unknown_admin_are_rejected(gate: AccessGate) -> None:
    """Bad passwords and unknown usernames both fail with InvalidCredentials."""

    gate.create_admin("treasurer", "s3cret-pass")

    with pytest.raises(InvalidCredentials):
        gate.login("treasurer", "wrong-pass")
    with pytest.raises(InvalidCredentials):
        gate.login("nobody", "s3cret-pass")


def test_expired_credential_is_rejected(gate: AccessGate, issuer: TokenIssuer) -> None:
    """A credential issued more than 24 hours ago is no longer valid."""

    identity = gate.create_admin("treasurer", "s3cret-pass")
    issued_at = datetime.now(timezone.utc) - timedelta(hours=25)
    stale = issuer.issue(identity, now=issued_at)

    with pytest.raises(Unauthorized) as excinfo:
        gate.authorize(stale)
    assert isinstance(excinfo.value, InvalidToken)


def test_credentials_from_another_secret_or_garbage_are_rejected(gate: AccessGate) -> None:
    """Tokens signed elsewhere or not tokens at all are invalid."""

    identity = gate.create_admin("treasurer", "s3cret-pass")
    forged = TokenIssuer("some-other-signing-secret-of-32-bytes").issue(identity)

    with pytest.raises(InvalidToken):
        gate.authorize(forged)
    with pytest.raises(InvalidToken):
        gate.authorize("not-a-token")


def test_missing_credential_is_unauthorized(gate: AccessGate) -> None:
    """No credential at all is plain Unauthorized, not an invalid token."""

    with pytest.raises(Unauthorized) as excinfo:
        gate.authorize(None)
    assert not isinstance(excinfo.value, InvalidToken)
    assert str(excinfo.value) == "Unauthorized"


def test_passwords_are_stored_hashed(gate: AccessGate, store: RecordStore) -> None:
    """Only the bcrypt hash of a password is persisted."""

    gate.create_admin("treasurer", "s3cret-pass")

    account = store.get_admin_by_username("treasurer")
    assert account is not None
    assert account.password_hash != "s3cret-pass"
    assert account.password_hash.startswith("$2")
    assert verify_password("s3cret-pass", account.password_hash)


def test_default_admin_is_created_once(gate: AccessGate) -> None:
    """The default admin is seeded on the first call only."""

    assert gate.ensure_default_admin("admin", "admin123") is True
    assert gate.ensure_default_admin("admin", "admin123") is False
    assert gate.authorize(gate.login("admin", "admin123")).username == "admin"


def test_duplicate_admin_username_is_rejected(gate: AccessGate) -> None:
    """Admin usernames are unique."""

    gate.create_admin("treasurer", "first")

    with pytest.raises(ConstraintViolation):
        gate.create_admin("treasurer", "second")
