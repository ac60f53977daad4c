"""Expiring share links for styled artifacts."""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from photobooth.domain.models import ShareRecord
from photobooth.errors import NotFoundError, ValidationError
from photobooth.services.generation import (
    ArtifactRepository,
    EventRepository,
    SessionRepository,
    StorageGateway,
)

logger = logging.getLogger(__name__)


class ShareRepository(Protocol):
    """Persistence interface for shares."""

    def get_by_artifact(self, artifact_id: str) -> ShareRecord | None:
        """Return the share of an artifact, if present."""

    def create_share(
        self,
        artifact_id: str,
        event_id: str,
        selected_path: str,
        expires_at: datetime,
    ) -> ShareRecord:
        """Create a share row and return it."""


@dataclass(frozen=True)
class ShareLink:
    """Share returned to the caller."""

    share_id: str
    share_url: str
    expires_at: datetime
    reused: bool


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ShareService:
    """Creates signed share links for stored artifacts."""

    event_repository: EventRepository
    session_repository: SessionRepository
    artifact_repository: ArtifactRepository
    share_repository: ShareRepository
    storage: StorageGateway
    default_ttl_seconds: int
    now: Callable[[], datetime] = field(default=_utcnow)

    def create_share(
        self,
        user_id: str,
        event_id: str | None,
        artifact_id: str | None,
        expires_in_seconds: int | None = None,
    ) -> ShareLink:
        """Create a share, or reuse the artifact's share while it is unexpired."""
        if not event_id:
            raise ValidationError("Event ID is required", code="MISSING_EVENT_ID")
        if not artifact_id:
            raise ValidationError(
                "AI Photo ID is required", code="MISSING_AIPHOTO_ID"
            )
        ttl = expires_in_seconds or self.default_ttl_seconds
        if ttl <= 0:
            raise ValidationError(
                "expiresInSeconds must be positive", code="INVALID_EXPIRY"
            )

        if self.event_repository.get_event(event_id, user_id) is None:
            raise NotFoundError(
                "Event not found or access denied", code="EVENT_NOT_FOUND"
            )
        artifact = self.artifact_repository.get_artifact(artifact_id)
        session = (
            self.session_repository.get_session(artifact.session_id, user_id)
            if artifact
            else None
        )
        if artifact is None or session is None or session.event_id != event_id:
            raise NotFoundError(
                "AI Photo not found or access denied", code="AIPHOTO_NOT_FOUND"
            )
        if not artifact.storage_path:
            raise ValidationError(
                "AI Photo has not been generated yet", code="AIPHOTO_NOT_READY"
            )

        now = self.now()
        existing = self.share_repository.get_by_artifact(artifact_id)
        if existing and existing.expires_at > now:
            # The URL never outlives the share it belongs to.
            remaining = math.ceil((existing.expires_at - now).total_seconds())
            return ShareLink(
                share_id=existing.id,
                share_url=self.storage.create_signed_url(
                    artifact.storage_path, min(ttl, remaining)
                ),
                expires_at=existing.expires_at,
                reused=True,
            )

        share = self.share_repository.create_share(
            artifact_id=artifact_id,
            event_id=event_id,
            selected_path=artifact.storage_path,
            expires_at=now + timedelta(seconds=ttl),
        )
        logger.info("Created share %s for AI photo %s", share.id, artifact_id)
        return ShareLink(
            share_id=share.id,
            share_url=self.storage.create_signed_url(artifact.storage_path, ttl),
            expires_at=share.expires_at,
            reused=False,
        )
