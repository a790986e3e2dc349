"""Mini README: Signed, time-limited admin credentials.

Structure:
    * AdminIdentity - the ``{id, username}`` pair carried by a credential.
    * TokenIssuer - signs and verifies HS256 JSON Web Tokens.

A credential is either valid (correct signature, inside its window) or
invalid. There is no revocation list and no refresh.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..errors import InvalidToken
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

ALGORITHM = "HS256"


@dataclass(frozen=True, slots=True)
class AdminIdentity:
    id: int
    username: str


class TokenIssuer:
    """Issue and verify credentials for admin identities."""

    def __init__(self, secret: str, *, ttl: timedelta = timedelta(hours=24)) -> None:
        if not secret:
            raise ValueError("A signing secret is required.")
        self._secret = secret
        self.ttl = ttl

    def issue(self, identity: AdminIdentity, *, now: Optional[datetime] = None) -> str:
        """Return a credential valid for ``ttl`` starting at ``now``."""

        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "id": identity.id,
            "username": identity.username,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> AdminIdentity:
        """Decode ``token`` or raise ``InvalidToken``."""

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as error:
            LOGGER.warning("Rejected expired credential")
            raise InvalidToken() from error
        except jwt.InvalidTokenError as error:
            LOGGER.warning("Rejected credential: %s", error)
            raise InvalidToken() from error

        try:
            return AdminIdentity(id=int(payload["id"]), username=str(payload["username"]))
        except (KeyError, TypeError, ValueError) as error:
            LOGGER.warning("Credential payload is missing the admin identity")
            raise InvalidToken() from error
