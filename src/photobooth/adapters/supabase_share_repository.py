"""Supabase-backed share repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import uuid4

from supabase import Client

from photobooth.domain.models import ShareRecord
from photobooth.services.shares import ShareRepository

_COLUMNS = "id, ai_photo_id, event_id, selected_url, qr_expires_at, created_at"


@dataclass
class SupabaseShareRepository(ShareRepository):
    """Supabase implementation for the shared_photos table."""

    client: Client

    def get_by_artifact(self, artifact_id: str) -> ShareRecord | None:
        """Return the most recent share of an artifact."""
        response = (
            self.client.table("shared_photos")
            .select(_COLUMNS)
            .eq("ai_photo_id", artifact_id)
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_share(response.data[0])

    def create_share(
        self,
        artifact_id: str,
        event_id: str,
        selected_path: str,
        expires_at: datetime,
    ) -> ShareRecord:
        """Insert a share row and return it."""
        response = (
            self.client.table("shared_photos")
            .insert(
                {
                    "id": str(uuid4()),
                    "ai_photo_id": artifact_id,
                    "event_id": event_id,
                    "selected_url": selected_path,
                    "qr_code_url": "",
                    "qr_expires_at": expires_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create shared photo")
        return _to_share(response.data[0])


def _to_share(row: dict[str, object]) -> ShareRecord:
    created_at = row.get("created_at")
    return ShareRecord(
        id=str(row["id"]),
        artifact_id=str(row["ai_photo_id"]),
        event_id=str(row["event_id"]),
        selected_path=str(row["selected_url"]),
        expires_at=_parse_timestamp(row["qr_expires_at"]),
        created_at=_parse_timestamp(created_at) if created_at else None,
    )


def _parse_timestamp(value: object) -> datetime:
    """Parse a timestamp column; naive values are stored in UTC."""
    parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed
