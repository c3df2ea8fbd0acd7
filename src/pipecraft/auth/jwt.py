"""JWT token creation and verification.

Learn: Two independent signing contexts:
- Access token: short-lived, carries {sub, email, name, role}
- Refresh token: long-lived, carries only {sub}

Each kind has its own secret and TTL, and a "type" claim, so a token of
one kind can never be verified as the other. Every token gets a unique
jti, so two logins in the same second still yield different tokens.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt

from pipecraft.config import Settings

ACCESS = "access"
REFRESH = "refresh"


class TokenError(Exception):
    """Raised when token verification fails."""


class TokenExpiredError(TokenError):
    """Signature was fine, but the token is past its expiry."""


class TokenInvalidError(TokenError):
    """Bad signature, malformed token, or wrong token type."""


class TokenCodec:
    """Signs and verifies access and refresh tokens."""

    def __init__(self, settings: Settings):
        self.algorithm = settings.jwt_algorithm
        self._secrets = {
            ACCESS: settings.access_token_secret,
            REFRESH: settings.refresh_token_secret,
        }
        self._ttls = {
            ACCESS: timedelta(minutes=settings.access_token_expire_minutes),
            REFRESH: timedelta(days=settings.refresh_token_expire_days),
        }

    def _encode(self, kind: str, claims: dict[str, Any], ttl: Optional[timedelta]) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            **claims,
            "type": kind,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + (ttl or self._ttls[kind]),
        }
        return jwt.encode(payload, self._secrets[kind], algorithm=self.algorithm)

    def issue_access(
        self,
        user_id: str,
        email: str,
        name: str,
        role: str,
        ttl: Optional[timedelta] = None,
    ) -> str:
        """Create an access token."""
        return self._encode(
            ACCESS,
            {"sub": user_id, "email": email, "name": name, "role": role},
            ttl,
        )

    def issue_refresh(self, user_id: str, ttl: Optional[timedelta] = None) -> str:
        """Create a refresh token."""
        return self._encode(REFRESH, {"sub": user_id}, ttl)

    def verify(self, token: str, kind: str) -> dict:
        """Verify and decode a token of the given kind.

        Returns the payload dict on success.
        Raises TokenExpiredError or TokenInvalidError on failure.
        """
        try:
            payload = jwt.decode(
                token,
                self._secrets[kind],
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(f"Invalid token: {e}")

        if payload.get("type") != kind:
            raise TokenInvalidError(f"Expected a {kind} token")
        return payload
