"""Bearer token authentication."""

import asyncio
from dataclasses import dataclass
from typing import Protocol

from photobooth.domain.models import UserRecord
from photobooth.errors import AuthError


class Authenticator(Protocol):
    """Interface for resolving access tokens to users."""

    def get_user(self, access_token: str) -> UserRecord | None:
        """Return the user for a valid token, otherwise None."""


@dataclass
class AuthService:
    """Resolves the caller from an Authorization header."""

    authenticator: Authenticator

    async def require_user(self, authorization: str | None) -> UserRecord:
        """Return the authenticated user or raise AuthError."""
        if not authorization or not authorization.startswith("Bearer "):
            raise AuthError(
                "Missing or invalid authorization header", code="MISSING_TOKEN"
            )
        token = authorization.removeprefix("Bearer ").strip()
        if not token:
            raise AuthError(
                "Missing or invalid authorization header", code="MISSING_TOKEN"
            )
        user = await asyncio.to_thread(self.authenticator.get_user, token)
        if user is None:
            raise AuthError("Invalid or expired token", code="INVALID_TOKEN")
        return user
