"""Shared dependencies: token issuer, session cookie, bearer auth (get_current_user, require_admin)."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from app.core.config import get_settings
from app.core.cookies import SessionCookieManager
from app.core.errors import AuthenticationError, AuthorizationError, ValidationError
from app.core.security import TokenError, TokenIssuer, subject_id
from app.models.user import Role
from app.schemas.auth import CurrentUser
from app.services.storage import ImageStore

security = HTTPBearer(auto_error=False)

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


@lru_cache
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(get_settings())


@lru_cache
def get_cookie_manager() -> SessionCookieManager:
    return SessionCookieManager(get_settings())


@lru_cache
def get_image_store() -> ImageStore:
    return ImageStore(get_settings())


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer access token and return the identity in its claims.

    The credential store is not consulted; role changes apply once the
    current access token expires and the client refreshes.
    """
    # The header must read "Bearer <token>"; other schemes and casings count as absent.
    if credentials is None or credentials.scheme != "Bearer" or not credentials.credentials:
        raise AuthenticationError("Missing access token.", headers=BEARER_CHALLENGE)
    try:
        claims = issuer.verify_access(credentials.credentials)
        user_id = subject_id(claims)
        role = Role(claims["role"])
        name = str(claims.get("name", ""))
    except (TokenError, ValueError, TypeError):
        # Expired and malformed tokens get the same answer.
        raise AuthenticationError("Invalid or expired token.", headers=BEARER_CHALLENGE)
    return CurrentUser(id=user_id, role=role, name=name)


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with the admin role. Raises 403 for non-admin."""
    if not current_user.is_admin():
        raise AuthorizationError("Admin access required.")
    return current_user


def patch_fields(body: BaseModel, nullable: frozenset[str] = frozenset()) -> dict:
    """
    Fields explicitly sent in a PATCH body. Only fields in `nullable` may be
    sent as null; an empty body is rejected.
    """
    data = body.model_dump(exclude_unset=True)
    for key, value in data.items():
        if value is None and key not in nullable:
            raise ValidationError(f"Field '{key}' must not be null.")
    if not data:
        raise ValidationError("Send at least one field to update.")
    return data
