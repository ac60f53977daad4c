"""Supabase Auth token verification."""

import logging
from dataclasses import dataclass

from supabase import Client

from photobooth.domain.models import UserRecord
from photobooth.services.auth import Authenticator

logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthenticator(Authenticator):
    """Resolves access tokens through the Supabase Auth API."""

    client: Client

    def get_user(self, access_token: str) -> UserRecord | None:
        """Return the token's user, or None when Supabase rejects it."""
        try:
            response = self.client.auth.get_user(access_token)
        except Exception:
            logger.warning("Supabase rejected access token", exc_info=True)
            return None
        user = getattr(response, "user", None)
        if user is None:
            return None
        return UserRecord(id=str(user.id), email=getattr(user, "email", None))
