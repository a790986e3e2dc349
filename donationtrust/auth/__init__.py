"""Mini README: Admin authentication for DonationTrust.

``passwords`` wraps bcrypt, ``tokens`` signs the time-limited credentials
and ``gate`` combines both with the admin lookup of the record store.
"""

from .gate import AccessGate
from .passwords import hash_password, verify_password
from .tokens import AdminIdentity, TokenIssuer

__all__ = [
    "AccessGate",
    "AdminIdentity",
    "TokenIssuer",
    "hash_password",
    "verify_password",
]
