"""Photo generation, retrieval and sharing endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    Header,
    Query,
    Request,
    UploadFile,
)

from photobooth.api.models import ShareCreateRequest  # noqa: TC001
from photobooth.domain.generation import GenerationResult, StyleOutcome
from photobooth.domain.models import StyledArtifact, UserRecord

if TYPE_CHECKING:
    from photobooth.containers import AppContainer

router = APIRouter(prefix="/api/v1", tags=["photos"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_user(
    request: Request, authorization: str | None = Header(default=None)
) -> UserRecord:
    """Resolve the caller from the bearer token."""
    return await _container(request).auth_service.require_user(authorization)


@router.post("/leonardo/generate")
async def generate(  # noqa: PLR0913
    request: Request,
    user: UserRecord = Depends(require_user),
    event_id: str | None = Form(default=None, alias="eventId"),
    session_id: str | None = Form(default=None, alias="sessionId"),
    image: UploadFile | None = File(default=None),
) -> dict[str, object]:
    """Generate every style for an uploaded photo."""
    data = await image.read() if image is not None else None
    result = await _container(request).generation_service.generate_styled_photos(
        user_id=user.id,
        event_id=event_id,
        session_id=session_id,
        image=data,
        filename=image.filename if image is not None else None,
    )
    return _format_generation(result)


@router.get("/aiphoto/session")
def session_artifacts(
    request: Request,
    user: UserRecord = Depends(require_user),
    session_id: str | None = Query(default=None, alias="sessionId"),
) -> dict[str, object]:
    """List the styled artifacts of a session."""
    session, artifacts = _container(request).artifact_service.list_session_artifacts(
        session_id, user.id
    )
    return {
        "success": True,
        "data": {
            "sessionId": session.id,
            "eventId": session.event_id,
            "photos": [_format_artifact(artifact) for artifact in artifacts],
        },
        "message": "AI photos retrieved successfully",
    }


@router.get("/aiphoto/{artifact_id}")
def artifact_detail(
    artifact_id: str, request: Request, user: UserRecord = Depends(require_user)
) -> dict[str, object]:
    """Return one styled artifact with a signed URL."""
    signed = _container(request).artifact_service.get_artifact(artifact_id, user.id)
    return {
        "success": True,
        "data": {
            **_format_artifact(signed.artifact),
            "sessionId": signed.artifact.session_id,
            "eventId": signed.event_id,
            "signedUrl": signed.signed_url,
        },
        "message": "AI photo retrieved successfully",
    }


@router.post("/share/create")
def create_share(
    body: ShareCreateRequest,
    request: Request,
    user: UserRecord = Depends(require_user),
) -> dict[str, object]:
    """Create an expiring share link for a styled artifact."""
    link = _container(request).share_service.create_share(
        user_id=user.id,
        event_id=body.event_id,
        artifact_id=body.aiphoto_id,
        expires_in_seconds=body.expires_in_seconds,
    )
    return {
        "success": True,
        "data": {
            "shareId": link.share_id,
            "shareUrl": link.share_url,
            "expiresAt": link.expires_at.isoformat(),
        },
        "message": "Share already exists" if link.reused else "Share created successfully",
    }


def _format_generation(result: GenerationResult) -> dict[str, object]:
    return {
        "imageId": result.image_id,
        "sessionId": result.session_id,
        "eventId": result.event_id,
        "images": [_format_outcome(outcome) for outcome in result.outcomes],
    }


def _format_outcome(outcome: StyleOutcome) -> dict[str, object]:
    entry: dict[str, object] = {
        "style": outcome.style.value,
        "artifactId": outcome.artifact_id,
        "status": "complete" if outcome.ok else "failed",
        "storageUrl": outcome.storage_path,
        "publicUrl": outcome.upstream_result_url,
        "generationId": outcome.generation_id,
        "hasLogo": outcome.has_logo,
    }
    if not outcome.ok:
        entry["error"] = {
            "code": str(outcome.error_kind),
            "message": outcome.error_message,
        }
    return entry


def _format_artifact(artifact: StyledArtifact) -> dict[str, object]:
    return {
        "id": artifact.id,
        "style": artifact.style.value,
        "storageUrl": artifact.storage_path,
        "createdAt": artifact.created_at.isoformat() if artifact.created_at else None,
        "updatedAt": artifact.updated_at.isoformat() if artifact.updated_at else None,
    }
