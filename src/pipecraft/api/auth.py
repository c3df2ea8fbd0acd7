"""Users API — registration, sessions, profile, and account administration.

Learn: Routes for the user lifecycle:
- POST /users/register → create an account (optional avatar upload)
- POST /users/login → email/password → access + refresh tokens (cookies too)
- GET|POST /users/refresh-token → refresh token → new access token
- GET /users/me → the caller, as resolved from the live database row
- GET|POST /users/logout → end the session, clear cookies
- POST /users/change-password
- GET /users/users, PUT|DELETE /users/users/{id} → admin only
"""

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, File, Form, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from pipecraft.api.uploads import read_upload
from pipecraft.auth.dependencies import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    IdentityContext,
    get_current_user,
    get_token_codec,
    require_admin,
)
from pipecraft.auth.jwt import TokenCodec
from pipecraft.config import Settings, get_settings
from pipecraft.db.engine import get_db
from pipecraft.errors import AuthenticationError, envelope
from pipecraft.schemas.common import parse_form
from pipecraft.schemas.user import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResult,
    RefreshRequest,
    RegisterRequest,
    SessionTokens,
    UserRead,
    UserUpdate,
)
from pipecraft.services.auth_service import AuthService
from pipecraft.services.user_service import UserService
from pipecraft.storage.lifecycle import BlobLifecycle, get_blob_lifecycle

router = APIRouter(prefix="/users")

ACCESS_COOKIE_MAX_AGE = 24 * 60 * 60
REFRESH_COOKIE_MAX_AGE = 10 * 24 * 60 * 60


def _auth_svc(
    db: AsyncSession = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
    blobs: BlobLifecycle = Depends(get_blob_lifecycle),
) -> AuthService:
    return AuthService(db, codec, blobs)


def _user_svc(
    db: AsyncSession = Depends(get_db),
    blobs: BlobLifecycle = Depends(get_blob_lifecycle),
) -> UserService:
    return UserService(db, blobs)


# ─── Cookies ────────────────────────────────────────────


def _cookie_options(settings: Settings) -> dict:
    return {
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": settings.cookie_samesite,
        "path": "/",
    }


def set_session_cookies(
    response: Response, settings: Settings, access_token: str, refresh_token: str
) -> None:
    options = _cookie_options(settings)
    response.set_cookie(ACCESS_COOKIE, access_token, max_age=ACCESS_COOKIE_MAX_AGE, **options)
    response.set_cookie(REFRESH_COOKIE, refresh_token, max_age=REFRESH_COOKIE_MAX_AGE, **options)


def clear_session_cookies(response: Response, settings: Settings) -> None:
    options = _cookie_options(settings)
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)


# ─── Register / Login ───────────────────────────────────


@router.post("/register", status_code=201)
async def register(
    email: str = Form(...),
    name: str = Form(...),
    password: str = Form(...),
    phone: Optional[str] = Form(None),
    age: Optional[int] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    svc: AuthService = Depends(_auth_svc),
    settings: Settings = Depends(get_settings),
):
    """Create a new account. Accounts created here are always plain users."""
    body = parse_form(
        RegisterRequest,
        {"email": email, "name": name, "password": password, "phone": phone, "age": age},
    )
    user = await svc.register(
        email=body.email,
        name=body.name,
        password=body.password,
        phone=body.phone,
        age=body.age,
        avatar=await read_upload(avatar, settings),
    )
    return envelope("User created successfully", UserRead.model_validate(user))


@router.post("/login")
async def login(
    body: LoginRequest,
    response: Response,
    svc: AuthService = Depends(_auth_svc),
    settings: Settings = Depends(get_settings),
):
    session = await svc.login(body.email, body.password)
    set_session_cookies(response, settings, session.access_token, session.refresh_token)
    return envelope(
        "Login successful",
        LoginResult(
            user=UserRead.model_validate(session.user),
            access_token=session.access_token,
            refresh_token=session.refresh_token,
        ),
    )


# ─── Refresh ────────────────────────────────────────────


async def _refresh(presented: Optional[str], response: Response, svc: AuthService, settings: Settings):
    if not presented:
        raise AuthenticationError("Refresh token not found")
    access_token, refresh_token = await svc.refresh(presented)
    set_session_cookies(response, settings, access_token, refresh_token)
    return envelope(
        "Access token generated successfully",
        SessionTokens(access_token=access_token, refresh_token=refresh_token),
    )


@router.get("/refresh-token")
async def refresh_from_cookie(
    response: Response,
    refresh_cookie: Optional[str] = Cookie(None, alias=REFRESH_COOKIE),
    svc: AuthService = Depends(_auth_svc),
    settings: Settings = Depends(get_settings),
):
    """Exchange the refresh cookie for a new access token."""
    return await _refresh(refresh_cookie, response, svc, settings)


@router.post("/refresh-token")
async def refresh_from_body(
    response: Response,
    body: Optional[RefreshRequest] = None,
    refresh_cookie: Optional[str] = Cookie(None, alias=REFRESH_COOKIE),
    svc: AuthService = Depends(_auth_svc),
    settings: Settings = Depends(get_settings),
):
    """Same as GET, for clients that keep the refresh token themselves."""
    presented = body.refresh_token if body else refresh_cookie
    return await _refresh(presented, response, svc, settings)


# ─── Current user ───────────────────────────────────────


@router.get("/me")
async def get_me(identity: IdentityContext = Depends(get_current_user)):
    return envelope("User profile retrieved successfully", asdict(identity))


@router.api_route("/logout", methods=["GET", "POST"])
async def logout(
    response: Response,
    identity: IdentityContext = Depends(get_current_user),
    svc: AuthService = Depends(_auth_svc),
    settings: Settings = Depends(get_settings),
):
    await svc.logout(identity.id)
    clear_session_cookies(response, settings)
    return envelope("User logged out", {})


@router.post("/change-password")
async def change_password(
    body: ChangePasswordRequest,
    identity: IdentityContext = Depends(get_current_user),
    svc: AuthService = Depends(_auth_svc),
):
    await svc.change_password(identity.id, body.old_password, body.new_password)
    return envelope("Password changed successfully", {})


# ─── Administration ─────────────────────────────────────


@router.get("/users")
async def list_users(
    _admin: IdentityContext = Depends(require_admin),
    svc: UserService = Depends(_user_svc),
):
    users = await svc.list_users()
    return envelope(
        "Users retrieved successfully",
        [UserRead.model_validate(u) for u in users],
    )


@router.put("/users/{user_id}")
async def update_user(
    user_id: str,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    age: Optional[int] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    _admin: IdentityContext = Depends(require_admin),
    svc: UserService = Depends(_user_svc),
    settings: Settings = Depends(get_settings),
):
    body = parse_form(
        UserUpdate, {"name": name, "email": email, "phone": phone, "age": age}
    )
    user = await svc.update_user(
        user_id, body.changes(), avatar=await read_upload(avatar, settings)
    )
    return envelope("User profile updated successfully", UserRead.model_validate(user))


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    response: Response,
    admin: IdentityContext = Depends(require_admin),
    svc: UserService = Depends(_user_svc),
    settings: Settings = Depends(get_settings),
):
    await svc.delete_user(user_id)
    if admin.id == user_id:
        clear_session_cookies(response, settings)
    return envelope("User deleted successfully", {})
