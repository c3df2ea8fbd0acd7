"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to turn the incoming
access token into an IdentityContext, and to gate admin-only routes.

Token lookup order:
1. accessToken cookie (browser sessions)
2. Authorization: Bearer <token> header (API clients)

The token only proves WHO is calling. Everything else (role, email,
whether the account still exists) is re-read from the database on every
request, so a demoted or deleted user loses access immediately instead of
when their token expires.
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import Cookie, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.auth.jwt import ACCESS, TokenCodec, TokenError
from pipecraft.config import Settings, get_settings
from pipecraft.db.engine import get_db
from pipecraft.db.models import User
from pipecraft.errors import AuthenticationError, AuthorizationError
from pipecraft.services.credential_store import CredentialStore

logger = structlog.get_logger()

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


@dataclass(frozen=True)
class IdentityContext:
    """The authenticated caller, built once per request from the live user row.

    Learn: Immutable and passed explicitly to whatever needs it — nothing
    is stashed on a global or on the request object.
    """

    id: str
    email: str
    name: str
    role: str
    age: Optional[int] = None
    avatar: Optional[str] = None
    phone: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @classmethod
    def from_user(cls, user: User) -> "IdentityContext":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            age=user.age,
            avatar=user.avatar,
            phone=user.phone,
        )


def get_token_codec(settings: Settings = Depends(get_settings)) -> TokenCodec:
    return TokenCodec(settings)


def extract_token(cookie_token: Optional[str], authorization: Optional[str]) -> Optional[str]:
    """Prefer the cookie; fall back to a Bearer header."""
    if cookie_token:
        return cookie_token
    if authorization:
        scheme, _, token = authorization.strip().partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
    return None


async def get_current_user(
    access_token: Optional[str] = Cookie(None, alias=ACCESS_COOKIE),
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
) -> IdentityContext:
    """Resolve the caller (required — 401 if anything is off).

    Learn: Every failure, from a missing header to the database being
    down, is answered with the same 401 "Invalid token". Callers learn
    nothing about why.
    """
    token = extract_token(access_token, authorization)
    if not token:
        raise AuthenticationError()

    try:
        payload = codec.verify(token, ACCESS)
    except TokenError as e:
        logger.info("auth.token_rejected", reason=str(e))
        raise AuthenticationError()

    try:
        user = await CredentialStore(db).find_by_id(payload["sub"])
    except Exception as e:
        logger.warning("auth.identity_lookup_failed", error=str(e))
        raise AuthenticationError()

    if user is None:
        logger.info("auth.identity_missing", user_id=payload["sub"])
        raise AuthenticationError()

    return IdentityContext.from_user(user)


async def require_admin(
    identity: IdentityContext = Depends(get_current_user),
) -> IdentityContext:
    """Gate for admin-only routes — 403 for authenticated non-admins."""
    if not identity.is_admin:
        raise AuthorizationError("Admin access required")
    return identity
