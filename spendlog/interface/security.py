"""Mini README: Password hashing for the web interface.

The ledger store keeps passwords exactly as handed to it, so the web layer
hashes them here before calling ``create_user`` and verifies logins
against the stored hash.
"""

from __future__ import annotations

from passlib.context import CryptContext

_PASSWORD_CONTEXT = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return _PASSWORD_CONTEXT.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Check a login attempt; malformed stored hashes count as a mismatch."""

    try:
        return _PASSWORD_CONTEXT.verify(password, hashed)
    except ValueError:
        return False
