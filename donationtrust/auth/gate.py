"""Mini README: Access control for the mutating ledger operations.

Structure:
    * AccessGate - login, credential checks and admin account creation.

The gate looks admins up by username through the injected store, so any
number of admin accounts can exist. Every valid credential authorises every
mutating operation; there are no roles beyond "is admin".
"""

from __future__ import annotations

from typing import Optional

from ..errors import InvalidCredentials, Unauthorized
from ..logging_utils import get_logger
from .passwords import hash_password, verify_password
from .tokens import AdminIdentity, TokenIssuer

LOGGER = get_logger(__name__)


class AccessGate:
    """Authenticate admins and authorise their credentials."""

    def __init__(self, store, issuer: TokenIssuer, *, bcrypt_rounds: int = 10) -> None:
        self._store = store
        self._issuer = issuer
        self._bcrypt_rounds = bcrypt_rounds

    def login(self, username: str, password: str) -> str:
        """Return a fresh credential or raise ``InvalidCredentials``."""

        account = self._store.get_admin_by_username(username)
        if account is None or not verify_password(password, account.password_hash):
            LOGGER.warning("Failed login attempt for '%s'", username)
            raise InvalidCredentials()
        LOGGER.info("Admin '%s' logged in", account.username)
        return self._issuer.issue(AdminIdentity(id=account.id, username=account.username))

    def authorize(self, credential: Optional[str]) -> AdminIdentity:
        """Return the identity behind ``credential``.

        Raises ``Unauthorized`` when no credential is presented and
        ``InvalidToken`` when it is malformed, wrongly signed or expired.
        """

        if not credential:
            raise Unauthorized()
        return self._issuer.verify(credential)

    def create_admin(self, username: str, password: str) -> AdminIdentity:
        """Store a new admin account; duplicates raise ``ConstraintViolation``."""

        if not username or not password:
            raise ValueError("Username and password are both required.")
        password_hash = hash_password(password, rounds=self._bcrypt_rounds)
        account = self._store.add_admin(username, password_hash)
        return AdminIdentity(id=account.id, username=account.username)

    def ensure_default_admin(self, username: str, password: str) -> bool:
        """Create the configured default admin unless it already exists."""

        if self._store.get_admin_by_username(username) is not None:
            return False
        self.create_admin(username, password)
        LOGGER.warning(
            "Default admin '%s' created; change its password before going public",
            username,
        )
        return True
