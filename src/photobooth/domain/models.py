"""Domain models for the photobooth."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class Style(StrEnum):
    """Fixed set of rendering presets, in generation order."""

    ANIME = "Anime"
    WATERCOLOR = "Watercolor"
    OIL = "Oil"
    DISNEY = "Disney"

    @property
    def slug(self) -> str:
        return self.value.lower()


STYLES: tuple[Style, ...] = tuple(Style)


@dataclass(frozen=True)
class UserRecord:
    """Authenticated platform user."""

    id: str
    email: str | None = None


@dataclass(frozen=True)
class EventRecord:
    """Event owned by a user, optionally branded with a logo."""

    id: str
    user_id: str
    name: str
    logo_path: str | None = None

    @property
    def has_logo(self) -> bool:
        return bool(self.logo_path and self.logo_path.strip())


@dataclass(frozen=True)
class SessionRecord:
    """Capture session belonging to an event."""

    id: str
    event_id: str
    photo_path: str | None = None


@dataclass(frozen=True)
class StyledArtifact:
    """Persisted record of one per-style generated image."""

    id: str
    session_id: str
    style: Style
    storage_path: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class ShareRecord:
    """Expiring share of a styled artifact."""

    id: str
    artifact_id: str
    event_id: str
    selected_path: str
    expires_at: datetime
    created_at: datetime | None = None
