"""Supabase-backed styled artifact repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import uuid4

from supabase import Client

from photobooth.domain.models import Style, StyledArtifact
from photobooth.services.generation import ArtifactRepository

_COLUMNS = "id, session_id, style, generated_url, created_at, updated_at"


@dataclass
class SupabaseArtifactRepository(ArtifactRepository):
    """Supabase implementation for the ai_photos table."""

    client: Client

    def create_artifact(self, session_id: str, style: Style) -> StyledArtifact:
        """Insert a placeholder row with an empty generated_url."""
        now = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table("ai_photos")
            .insert(
                {
                    "id": str(uuid4()),
                    "session_id": session_id,
                    "style": style.value,
                    "generated_url": "",
                    "updated_at": now,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create AI photo")
        return _to_artifact(response.data[0])

    def update_artifact_path(self, artifact_id: str, storage_path: str) -> None:
        """Set the stored path of an artifact."""
        self.client.table("ai_photos").update(
            {
                "generated_url": storage_path,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("id", artifact_id).execute()

    def get_artifact(self, artifact_id: str) -> StyledArtifact | None:
        response = (
            self.client.table("ai_photos")
            .select(_COLUMNS)
            .eq("id", artifact_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_artifact(response.data[0])

    def list_by_session(self, session_id: str) -> list[StyledArtifact]:
        response = (
            self.client.table("ai_photos")
            .select(_COLUMNS)
            .eq("session_id", session_id)
            .order("created_at")
            .execute()
        )
        return [_to_artifact(row) for row in response.data or []]


def _to_artifact(row: dict[str, object]) -> StyledArtifact:
    return StyledArtifact(
        id=str(row["id"]),
        session_id=str(row["session_id"]),
        style=Style(row["style"]),
        storage_path=str(row.get("generated_url") or ""),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )


def _parse_timestamp(value: object) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(str(value))
