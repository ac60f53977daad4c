"""Read access to styled artifacts."""

from dataclasses import dataclass

from photobooth.domain.models import STYLES, SessionRecord, StyledArtifact
from photobooth.errors import NotFoundError, ValidationError
from photobooth.services.generation import (
    ArtifactRepository,
    SessionRepository,
    StorageGateway,
)


@dataclass(frozen=True)
class SignedArtifact:
    """Artifact with a time-limited download URL."""

    artifact: StyledArtifact
    event_id: str
    signed_url: str | None


@dataclass
class ArtifactService:
    """Lists and resolves styled artifacts owned by a user."""

    session_repository: SessionRepository
    artifact_repository: ArtifactRepository
    storage: StorageGateway
    signed_url_ttl_seconds: int

    def list_session_artifacts(
        self, session_id: str | None, user_id: str
    ) -> tuple[SessionRecord, list[StyledArtifact]]:
        """Return a session and its artifacts in style order."""
        if not session_id:
            raise ValidationError("Session ID is required", code="MISSING_SESSION_ID")
        session = self.session_repository.get_session(session_id, user_id)
        if session is None:
            raise NotFoundError(
                "Session not found or access denied", code="SESSION_NOT_FOUND"
            )
        artifacts = self.artifact_repository.list_by_session(session_id)
        return session, sorted(artifacts, key=lambda item: STYLES.index(item.style))

    def get_artifact(self, artifact_id: str, user_id: str) -> SignedArtifact:
        """Return one artifact with a signed URL once it has been stored."""
        artifact = self.artifact_repository.get_artifact(artifact_id)
        session = (
            self.session_repository.get_session(artifact.session_id, user_id)
            if artifact
            else None
        )
        if artifact is None or session is None:
            raise NotFoundError(
                "AI photo not found or access denied", code="AI_PHOTO_NOT_FOUND"
            )
        signed_url = None
        if artifact.storage_path:
            signed_url = self.storage.create_signed_url(
                artifact.storage_path, self.signed_url_ttl_seconds
            )
        return SignedArtifact(
            artifact=artifact, event_id=session.event_id, signed_url=signed_url
        )
