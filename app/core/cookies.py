"""Refresh-token session cookie: one attribute set shared by set and clear."""

from typing import Any

from fastapi import Request, Response

from app.core.config import Settings


class SessionCookieManager:
    """
    Binds the refresh token to an HTTP-only cookie scoped to the API root.

    Production deployments are cross-origin, so the cookie is Secure with
    SameSite=None there; development is same-origin and uses SameSite=Lax
    without Secure (plain http on localhost).
    """

    def __init__(self, settings: Settings) -> None:
        self.name = settings.REFRESH_COOKIE_NAME
        self._path = settings.API_PREFIX
        self._production = settings.is_production
        self._max_age = settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60

    def attributes(self) -> dict[str, Any]:
        """Attributes used both when setting and when clearing the cookie."""
        return {
            "path": self._path,
            "secure": self._production,
            "httponly": True,
            "samesite": "none" if self._production else "lax",
        }

    def set(self, response: Response, token: str) -> None:
        response.set_cookie(
            key=self.name,
            value=token,
            max_age=self._max_age,
            **self.attributes(),
        )

    def clear(self, response: Response) -> None:
        response.delete_cookie(key=self.name, **self.attributes())

    def read(self, request: Request) -> str | None:
        value = request.cookies.get(self.name)
        return value or None
