"""Style fan-out orchestration for AI photo generation."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from photobooth.config import GenerationConfig
from photobooth.domain.generation import (
    GenerationJob,
    GenerationResult,
    JobPoll,
    JobStatus,
    Orientation,
    StyleOutcome,
)
from photobooth.domain.models import (
    STYLES,
    EventRecord,
    SessionRecord,
    Style,
    StyledArtifact,
)
from photobooth.errors import (
    ErrorKind,
    GenerationTimeoutError,
    NotFoundError,
    PhotoboothError,
    UpstreamError,
    ValidationError,
)
from photobooth.services.compositor import (
    add_border,
    detect_mime_type,
    merge_logo,
    read_orientation,
)

logger = logging.getLogger(__name__)

_UPLOAD_EXTENSIONS = {"jpg", "jpeg", "png", "webp"}
_MIME_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/webp": "webp"}


class GenerationClient(Protocol):
    """Interface for the third-party image generation service."""

    async def upload_source_image(self, data: bytes, extension: str) -> str:
        """Upload a source image and return its service-side id."""

    async def submit_generation(
        self, prompt: str, image_id: str, orientation: Orientation
    ) -> str:
        """Submit one stylized generation job and return its id."""

    async def poll_job_status(self, job_id: str) -> JobPoll:
        """Check a job's status once without waiting."""

    async def download_result(self, url: str) -> bytes:
        """Fetch generated image bytes from a result URL."""


class EventRepository(Protocol):
    """Persistence interface for events."""

    def get_event(self, event_id: str, user_id: str) -> EventRecord | None:
        """Return an event owned by the user, if present."""


class SessionRepository(Protocol):
    """Persistence interface for capture sessions."""

    def get_session(self, session_id: str, user_id: str) -> SessionRecord | None:
        """Return a session whose event is owned by the user, if present."""


class ArtifactRepository(Protocol):
    """Persistence interface for styled artifacts."""

    def create_artifact(self, session_id: str, style: Style) -> StyledArtifact:
        """Create a placeholder artifact with an empty storage path."""

    def update_artifact_path(self, artifact_id: str, storage_path: str) -> None:
        """Record the storage path of an uploaded artifact."""

    def get_artifact(self, artifact_id: str) -> StyledArtifact | None:
        """Return an artifact by id, if present."""

    def list_by_session(self, session_id: str) -> list[StyledArtifact]:
        """Return all artifacts of a session."""


class StorageGateway(Protocol):
    """Object storage capabilities."""

    def upload(self, data: bytes, path: str, content_type: str) -> str:
        """Store bytes at a path and return the stored path."""

    def download(self, path: str) -> bytes:
        """Return the bytes stored at a path."""

    def create_signed_url(self, path: str, ttl_seconds: int) -> str:
        """Return a time-limited URL for a stored path."""


def artifact_path(
    user_id: str, event_id: str, session_id: str, style: Style, extension: str = "jpg"
) -> str:
    """Build the storage path of a styled artifact."""
    return f"{user_id}/{event_id}/Photos/{session_id}/{style.slug}/{style.slug}.{extension}"


@dataclass(frozen=True)
class _RequestContext:
    """Read-only state shared by every style branch of one request."""

    user_id: str
    event_id: str
    session_id: str
    image_id: str
    orientation: Orientation
    logo: "asyncio.Task[bytes | None] | None"


@dataclass
class GenerationService:
    """Drives one generation job per style and persists each result."""

    client: GenerationClient
    event_repository: EventRepository
    session_repository: SessionRepository
    artifact_repository: ArtifactRepository
    storage: StorageGateway
    config: GenerationConfig

    async def generate_styled_photos(  # noqa: PLR0913
        self,
        *,
        user_id: str,
        event_id: str | None,
        session_id: str | None,
        image: bytes | None,
        filename: str | None = None,
    ) -> GenerationResult:
        """Generate, post-process and store every style for one source photo.

        Precondition failures raise before any external call. Failures after
        that point are isolated to the style they occur in and reported in
        that style's outcome.
        """
        if not event_id or not session_id:
            raise ValidationError(
                "Event ID and Session ID are required", code="MISSING_IDS"
            )
        if not image:
            raise ValidationError("Image is required", code="MISSING_IMAGE")
        orientation = read_orientation(image)

        event = await asyncio.to_thread(
            self.event_repository.get_event, event_id, user_id
        )
        if event is None:
            raise NotFoundError("Event not found", code="EVENT_NOT_FOUND")
        session = await asyncio.to_thread(
            self.session_repository.get_session, session_id, user_id
        )
        if session is None or session.event_id != event_id:
            raise NotFoundError("Photo session not found", code="SESSION_NOT_FOUND")

        artifacts = await asyncio.to_thread(self._create_placeholders, session_id)

        try:
            image_id = await self.client.upload_source_image(
                image, _upload_extension(filename, image)
            )
        except Exception as exc:
            logger.exception(
                "Source image upload failed", extra={"session_id": session_id}
            )
            return GenerationResult(
                image_id=None,
                session_id=session_id,
                event_id=event_id,
                outcomes=[
                    _failure(artifact.style, artifact.id, exc) for artifact in artifacts
                ],
            )

        logo_task = (
            asyncio.create_task(self._load_logo(event)) if event.has_logo else None
        )
        context = _RequestContext(
            user_id=user_id,
            event_id=event_id,
            session_id=session_id,
            image_id=image_id,
            orientation=orientation,
            logo=logo_task,
        )
        try:
            outcomes = await asyncio.gather(
                *(self._run_style(context, artifact) for artifact in artifacts)
            )
        finally:
            if logo_task is not None and not logo_task.done():
                logo_task.cancel()

        return GenerationResult(
            image_id=image_id,
            session_id=session_id,
            event_id=event_id,
            outcomes=list(outcomes),
        )

    def _create_placeholders(self, session_id: str) -> list[StyledArtifact]:
        return [
            self.artifact_repository.create_artifact(session_id, style)
            for style in STYLES
        ]

    async def _load_logo(self, event: EventRecord) -> bytes | None:
        try:
            logo = await asyncio.to_thread(self.storage.download, event.logo_path)
        except Exception:
            logger.warning(
                "Failed to download logo for event %s", event.id, exc_info=True
            )
            return None
        logger.info("Logo downloaded for event %s", event.id)
        return logo

    async def _run_style(
        self, context: _RequestContext, artifact: StyledArtifact
    ) -> StyleOutcome:
        style = artifact.style
        job: GenerationJob | None = None
        try:
            job_id = await self.client.submit_generation(
                prompt=self.config.prompt_for(style),
                image_id=context.image_id,
                orientation=context.orientation,
            )
            job = GenerationJob(job_id=job_id, style=style)
            await self._wait_for_job(job)
            generated = await self.client.download_result(job.result_url or "")
            logo = await context.logo if context.logo is not None else None
            data, has_logo = await asyncio.to_thread(
                _post_process, style, generated, logo, context.orientation
            )
            content_type = detect_mime_type(data) or "image/jpeg"
            path = artifact_path(
                context.user_id,
                context.event_id,
                context.session_id,
                style,
                _MIME_EXTENSIONS.get(content_type, "jpg"),
            )
            stored_path = await asyncio.to_thread(
                self.storage.upload, data, path, content_type
            )
            await asyncio.to_thread(
                self.artifact_repository.update_artifact_path, artifact.id, stored_path
            )
        except Exception as exc:
            logger.exception(
                "Failed to process %s photo",
                style,
                extra={"style": style.value, "session_id": context.session_id},
            )
            return _failure(style, artifact.id, exc, job)

        return StyleOutcome(
            style=style,
            artifact_id=artifact.id,
            storage_path=stored_path,
            upstream_result_url=job.result_url,
            generation_id=job.job_id,
            has_logo=has_logo,
        )

    async def _wait_for_job(self, job: GenerationJob) -> None:
        """Poll a job until it completes, fails or exceeds the poll timeout."""
        try:
            async with asyncio.timeout(self.config.poll_timeout_seconds):
                while True:
                    poll = await self.client.poll_job_status(job.job_id)
                    job.status = poll.status
                    if poll.status is JobStatus.COMPLETE:
                        if not poll.result_url:
                            raise UpstreamError(
                                f"Generation {job.job_id} completed without images",
                                code="MALFORMED_RESPONSE",
                            )
                        job.result_url = poll.result_url
                        return
                    if poll.status is JobStatus.FAILED:
                        raise UpstreamError(
                            f"Generation {job.job_id} failed",
                            code="GENERATION_FAILED",
                        )
                    await asyncio.sleep(self.config.poll_interval_seconds)
        except TimeoutError as exc:
            job.status = JobStatus.FAILED
            raise GenerationTimeoutError(
                f"Generation {job.job_id} did not finish within "
                f"{self.config.poll_timeout_seconds:g}s"
            ) from exc


def _post_process(
    style: Style, generated: bytes, logo: bytes | None, orientation: Orientation
) -> tuple[bytes, bool]:
    """Composite the logo or a border; fall back to the raw image on failure."""
    if logo is not None:
        try:
            return merge_logo(generated, logo, orientation).data, True
        except Exception:
            logger.warning("Failed to merge logo with %s photo", style, exc_info=True)
            return generated, False
    try:
        return add_border(generated, orientation).data, False
    except Exception:
        logger.warning("Failed to add border to %s photo", style, exc_info=True)
        return generated, False


def _failure(
    style: Style,
    artifact_id: str,
    exc: Exception,
    job: GenerationJob | None = None,
) -> StyleOutcome:
    if isinstance(exc, PhotoboothError):
        kind, message = exc.kind, exc.message
    else:
        kind, message = ErrorKind.INTERNAL, f"{type(exc).__name__}: {exc}"
    return StyleOutcome(
        style=style,
        artifact_id=artifact_id,
        generation_id=job.job_id if job else None,
        error_kind=kind,
        error_message=message,
    )


def _upload_extension(filename: str | None, data: bytes) -> str:
    if filename and "." in filename:
        extension = filename.rsplit(".", maxsplit=1)[-1].lower()
        if extension in _UPLOAD_EXTENSIONS:
            return extension
    return _MIME_EXTENSIONS.get(detect_mime_type(data) or "", "jpg")
