"""Supabase-backed event and session repositories."""

from dataclasses import dataclass

from supabase import Client

from photobooth.domain.models import EventRecord, SessionRecord
from photobooth.services.generation import EventRepository, SessionRepository


@dataclass
class SupabaseEventRepository(EventRepository):
    """Supabase implementation for event lookups."""

    client: Client

    def get_event(self, event_id: str, user_id: str) -> EventRecord | None:
        """Return a non-deleted event owned by the user."""
        response = (
            self.client.table("events")
            .select('id, user_id, name, "logoUrl"')
            .eq("id", event_id)
            .eq("user_id", user_id)
            .eq("is_deleted", False)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return EventRecord(
            id=row["id"],
            user_id=str(row["user_id"]),
            name=row.get("name") or "",
            logo_path=row.get("logoUrl"),
        )


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for photo session lookups."""

    client: Client

    def get_session(self, session_id: str, user_id: str) -> SessionRecord | None:
        """Return a session whose event belongs to the user."""
        response = (
            self.client.table("photo_sessions")
            .select("id, event_id, photo_url, events!inner(user_id)")
            .eq("id", session_id)
            .eq("events.user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return SessionRecord(
            id=row["id"],
            event_id=row["event_id"],
            photo_path=row.get("photo_url"),
        )
