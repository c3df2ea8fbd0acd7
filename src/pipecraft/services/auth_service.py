"""Auth service — registration, login, refresh, logout, password change.

Learn: One active session per user. The session IS the refresh token
stored on the user row:

    no session ──login──▶ active(T) ──login──▶ active(T′) ──logout──▶ no session

A refresh token is honoured only while it is exactly the stored value, so
a newer login or a logout revokes older refresh tokens immediately, even
though their signatures and expiry are still fine. Refreshing mints a new
access token but keeps the refresh token: rotation happens per login.
"""

import secrets
from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.auth.jwt import REFRESH, TokenCodec, TokenError
from pipecraft.auth.password import dummy_password_hash, hash_password, verify_password
from pipecraft.db.models import User, new_id
from pipecraft.errors import AuthenticationError, ConflictError, ValidationError
from pipecraft.services.credential_store import CredentialStore
from pipecraft.storage.blob import object_key
from pipecraft.storage.lifecycle import BlobLifecycle, UploadedFile

logger = structlog.get_logger()

# Same message for "no such email" and "wrong password"
INVALID_CREDENTIALS = "Invalid email or password"
INVALID_REFRESH = "Invalid refresh token or token has expired"


@dataclass(frozen=True)
class LoginSession:
    user: User
    access_token: str
    refresh_token: str


class AuthService:
    """Business logic for credentials and sessions."""

    def __init__(
        self,
        db: AsyncSession,
        codec: TokenCodec,
        blobs: Optional[BlobLifecycle] = None,
    ):
        self.db = db
        self.store = CredentialStore(db)
        self.codec = codec
        self.blobs = blobs

    def _access_token_for(self, user: User) -> str:
        return self.codec.issue_access(
            user_id=user.id, email=user.email, name=user.name, role=user.role
        )

    # ─── Registration ───────────────────────────────────

    async def register(
        self,
        email: str,
        name: str,
        password: str,
        phone: Optional[str] = None,
        age: Optional[int] = None,
        avatar: Optional[UploadedFile] = None,
        role: str = "user",
    ) -> User:
        """Create a user. ConflictError if the email is already registered.

        Learn: The avatar is uploaded before the insert (the row stores its
        ref). If the insert then loses on the email constraint, the fresh
        upload is removed again on a best-effort basis.
        """
        user_id = new_id("USR")
        avatar_ref = None
        if avatar is not None and self.blobs is not None:
            avatar_ref = await self.blobs.create(
                avatar, object_key("avatars", user_id, avatar.filename)
            )

        user = User(
            id=user_id,
            email=email,
            name=name,
            password_hash=hash_password(password),
            role=role,
            phone=phone,
            age=age,
            avatar=avatar_ref,
        )
        try:
            await self.store.create(user)
        except ConflictError:
            if self.blobs is not None:
                await self.blobs.remove_for_deleted_record(avatar_ref)
            raise
        await self.db.commit()
        logger.info("auth.user_registered", user_id=user.id, role=role)
        return user

    # ─── Sessions ───────────────────────────────────────

    async def login(self, email: str, password: str) -> LoginSession:
        """Check credentials and start a new session, ending any previous one."""
        user = await self.store.find_by_email(email)
        # Unknown emails still pay for one bcrypt check
        digest = user.password_hash if user is not None else dummy_password_hash()
        if not verify_password(password, digest) or user is None:
            logger.info("auth.login_failed")
            raise AuthenticationError(INVALID_CREDENTIALS)

        access_token = self._access_token_for(user)
        refresh_token = self.codec.issue_refresh(user.id)

        user = await self.store.patch(user.id, {"refresh_token": refresh_token})
        await self.db.commit()

        logger.info("auth.login_succeeded", user_id=user.id)
        return LoginSession(user=user, access_token=access_token, refresh_token=refresh_token)

    async def refresh(self, presented: str) -> tuple[str, str]:
        """Mint a new access token. Returns (access_token, refresh_token).

        The refresh token comes back unchanged.
        """
        try:
            payload = self.codec.verify(presented, REFRESH)
        except TokenError as e:
            logger.info("auth.refresh_rejected", reason=str(e))
            raise AuthenticationError(INVALID_REFRESH)

        user = await self.store.find_by_id(payload["sub"])
        if user is None:
            logger.info("auth.refresh_rejected", reason="user_missing")
            raise AuthenticationError(INVALID_REFRESH)

        if not user.refresh_token or not secrets.compare_digest(
            user.refresh_token, presented
        ):
            # Logged out, or superseded by a newer login
            logger.info("auth.refresh_rejected", user_id=user.id, reason="revoked")
            raise AuthenticationError(INVALID_REFRESH)

        return self._access_token_for(user), presented

    async def logout(self, user_id: str) -> None:
        """End the session: the stored refresh token is removed."""
        await self.store.patch(user_id, {"refresh_token": None})
        await self.db.commit()
        logger.info("auth.logout", user_id=user_id)

    # ─── Password ───────────────────────────────────────

    async def change_password(self, user_id: str, old_password: str, new_password: str) -> None:
        """Replace the password after checking the old one.

        The current refresh token stays valid (see DESIGN.md).
        """
        user = await self.store.find_by_id(user_id)
        if user is None:
            raise AuthenticationError()
        if not verify_password(old_password, user.password_hash):
            raise ValidationError("Old password is incorrect")

        await self.store.patch(user_id, {"password_hash": hash_password(new_password)})
        await self.db.commit()
        logger.info("auth.password_changed", user_id=user_id)
