"""Password hashing and JWT issuance/verification for access and refresh tokens."""

import uuid
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

import bcrypt
import jwt

from app.core.config import Settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

REFRESH_PURPOSE = "refresh"


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenInvalid(TokenError):
    """Bad signature, malformed token or unexpected claims."""


class TokenExpired(TokenError):
    """Token was valid but its exp is in the past."""


class TokenSubject(Protocol):
    id: int
    name: str
    role: Any
    token_version: int


class TokenIssuer:
    """
    Creates and verifies signed access and refresh tokens.

    Access tokens carry sub/role/name and are signed with JWT_ACCESS_SECRET;
    refresh tokens carry sub/purpose/ver and are signed with JWT_REFRESH_SECRET.
    """

    def __init__(self, settings: Settings) -> None:
        self._algorithm = settings.JWT_ALGORITHM
        self._access_secret = settings.JWT_ACCESS_SECRET.get_secret_value()
        self._refresh_secret = settings.JWT_REFRESH_SECRET.get_secret_value()
        self._access_ttl = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self._refresh_ttl = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    @property
    def access_expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return int(self._access_ttl.total_seconds())

    @property
    def refresh_max_age(self) -> int:
        """Refresh token lifetime in seconds."""
        return int(self._refresh_ttl.total_seconds())

    def _encode(self, claims: dict[str, Any], ttl: timedelta, secret: str) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            **claims,
            "iat": now,
            "exp": now + ttl,
            # Unique per token even when two are issued within the same second.
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, secret, algorithm=self._algorithm)

    def _decode(self, token: str, secret: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired("token expired") from e
        except jwt.PyJWTError as e:
            raise TokenInvalid("token invalid") from e

    def issue_access(self, user: TokenSubject) -> str:
        return self._encode(
            {"sub": str(user.id), "role": int(user.role), "name": user.name},
            self._access_ttl,
            self._access_secret,
        )

    def issue_refresh(self, user: TokenSubject) -> str:
        return self._encode(
            {
                "sub": str(user.id),
                "purpose": REFRESH_PURPOSE,
                "ver": user.token_version,
            },
            self._refresh_ttl,
            self._refresh_secret,
        )

    def verify_access(self, token: str) -> dict[str, Any]:
        """
        Decode and validate an access token; return its claims.
        Raises TokenExpired or TokenInvalid.
        """
        claims = self._decode(token, self._access_secret)
        if "role" not in claims or "purpose" in claims:
            raise TokenInvalid("not an access token")
        return claims

    def verify_refresh(self, token: str) -> dict[str, Any]:
        """
        Decode and validate a refresh token; the purpose marker must be "refresh".
        Raises TokenExpired or TokenInvalid.
        """
        claims = self._decode(token, self._refresh_secret)
        if claims.get("purpose") != REFRESH_PURPOSE:
            raise TokenInvalid("not a refresh token")
        return claims


def subject_id(claims: dict[str, Any]) -> int:
    """Parse the numeric user id out of the sub claim; TokenInvalid if it is not one."""
    try:
        user_id = int(claims["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise TokenInvalid("invalid subject") from e
    if user_id <= 0:
        raise TokenInvalid("invalid subject")
    return user_id
