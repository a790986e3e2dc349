"""Mini README: bcrypt helpers for admin passwords.

Only salted bcrypt hashes are stored. Verification recomputes the hash with
the salt embedded in the stored value.
"""

from __future__ import annotations

import bcrypt


def hash_password(password: str, *, rounds: int = 10) -> str:
    """Return a salted bcrypt hash of ``password`` as text."""

    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored hash; malformed hashes never match."""

    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
