"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks.
The work factor comes from settings (12 in production, lower in tests).
"""

from functools import lru_cache

import bcrypt

from pipecraft.config import settings


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password with bcrypt.

    Learn: bcrypt includes a random salt automatically and produces
    hashes starting with "$2b$". Hashing the same password twice gives
    two different digests. Passwords are truncated to 72 bytes
    (bcrypt's limit).
    """
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash.

    bcrypt.checkpw compares in constant time. A malformed digest is a
    mismatch, not an error.
    """
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False


@lru_cache(maxsize=1)
def dummy_password_hash() -> str:
    """A throwaway digest at the configured cost.

    Checking a password against it takes as long as a real check, so an
    unknown email costs the same as a wrong password.
    """
    return hash_password("not-a-real-password")
