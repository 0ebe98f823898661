"""Session lifecycle (register, login, refresh, logout) and user administration."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.deps import (
    get_cookie_manager,
    get_current_user,
    get_token_issuer,
    patch_fields,
    require_admin,
)
from app.core.cookies import SessionCookieManager
from app.core.database import get_db
from app.core.errors import NotFoundError, error_response
from app.core.security import TokenError, TokenIssuer, subject_id
from app.models.user import User
from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    TokenResponse,
    UserPublic,
    UserUpdate,
)
from app.services import users

logger = logging.getLogger(__name__)

router = APIRouter()

UserId = Annotated[int, Path(gt=0, description="User id")]


def _start_session(
    response: Response,
    user: User,
    issuer: TokenIssuer,
    cookies: SessionCookieManager,
) -> AuthResponse:
    """Issue an access/refresh pair; the refresh token goes only into the cookie."""
    cookies.set(response, issuer.issue_refresh(user))
    return AuthResponse(
        access_token=issuer.issue_access(user),
        expires_in=issuer.access_expires_in,
        user=UserPublic.model_validate(user),
    )


def _reject_refresh(cookies: SessionCookieManager, message: str, reason: str) -> JSONResponse:
    logger.info("Refresh rejected", extra={"reason": reason})
    response = error_response(status.HTTP_401_UNAUTHORIZED, message)
    cookies.clear(response)
    return response


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    cookies: Annotated[SessionCookieManager, Depends(get_cookie_manager)],
) -> AuthResponse:
    """
    Create a standard account and start a session.

    Returns the access token and the public user fields; the refresh token is
    set as an HTTP-only cookie. 409 when the email is already registered.
    """
    user = users.create_user(db, name=body.name, email=body.email, password=body.password)
    return _start_session(response, user, issuer, cookies)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    cookies: Annotated[SessionCookieManager, Depends(get_cookie_manager)],
) -> AuthResponse:
    """
    Authenticate with email and password.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    user = users.authenticate(db, body.email, body.password)
    return _start_session(response, user, issuer, cookies)


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    cookies: Annotated[SessionCookieManager, Depends(get_cookie_manager)],
):
    """
    Mint a new access token from the refresh cookie.

    The refresh token itself is not rotated and no cookie is set. Any failed
    check clears the cookie and returns 401.
    """
    token = cookies.read(request)
    if token is None:
        return error_response(status.HTTP_401_UNAUTHORIZED, "Missing refresh token.")
    try:
        claims = issuer.verify_refresh(token)
        user_id = subject_id(claims)
    except TokenError:
        return _reject_refresh(cookies, "Invalid or expired refresh token.", "invalid_token")

    user = users.get_by_id(db, user_id)
    if user is None:
        return _reject_refresh(cookies, "User no longer exists.", "user_missing")
    if claims.get("ver") != user.token_version:
        return _reject_refresh(cookies, "Invalid or expired refresh token.", "revoked")

    return TokenResponse(
        access_token=issuer.issue_access(user),
        expires_in=issuer.access_expires_in,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def logout(
    request: Request,
    cookies: Annotated[SessionCookieManager, Depends(get_cookie_manager)],
) -> Response:
    """Clear the session cookie. Always 204, with or without an active session."""
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    cookies.clear(response)
    logger.info("Logout", extra={"had_session": cookies.read(request) is not None})
    return response


@router.get("/me", response_model=UserPublic)
def read_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserPublic:
    user = users.get_by_id(db, current_user.id)
    if user is None:
        raise NotFoundError("User not found.")
    return UserPublic.model_validate(user)


@router.post("/me/password", response_model=AuthResponse)
def change_my_password(
    body: PasswordChangeRequest,
    response: Response,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    cookies: Annotated[SessionCookieManager, Depends(get_cookie_manager)],
) -> AuthResponse:
    """
    Change the caller's password. Refresh tokens issued before stop working;
    this session gets a fresh token pair.
    """
    user = users.get_by_id(db, current_user.id)
    if user is None:
        raise NotFoundError("User not found.")
    user = users.change_password(db, user, body.current_password, body.new_password)
    return _start_session(response, user, issuer, cookies)


@router.get("", response_model=list[UserPublic])
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserPublic]:
    """List all users (admin only), ordered by name."""
    return [UserPublic.model_validate(u) for u in users.list_users(db)]


@router.get("/{user_id}", response_model=UserPublic)
def get_user(
    user_id: UserId,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserPublic:
    user = users.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found.")
    return UserPublic.model_validate(user)


@router.patch("/{user_id}", response_model=UserPublic)
def update_user(
    user_id: UserId,
    body: UserUpdate,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserPublic:
    """Admin update of name, email, role or password. A password change revokes refresh tokens."""
    data = patch_fields(body)
    user = users.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found.")
    user = users.update_user(db, user, **data)
    return UserPublic.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_user(
    user_id: UserId,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Delete a user (admin only). Self-deletion and deleting another admin are forbidden."""
    users.delete_user(db, actor_id=admin.id, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
