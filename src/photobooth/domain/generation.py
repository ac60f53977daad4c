"""Models for the style generation pipeline."""

from dataclasses import dataclass
from enum import StrEnum

from photobooth.domain.models import Style
from photobooth.errors import ErrorKind


class Orientation(StrEnum):
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"

    @classmethod
    def from_size(cls, width: int, height: int) -> "Orientation":
        """Landscape when width is at least height."""
        return cls.LANDSCAPE if width >= height else cls.PORTRAIT


class JobStatus(StrEnum):
    PENDING = "pending"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class JobPoll:
    """Result of a single job status check."""

    status: JobStatus
    result_url: str | None = None


@dataclass
class GenerationJob:
    """One in-flight request to the generation service for one style."""

    job_id: str
    style: Style
    status: JobStatus = JobStatus.PENDING
    result_url: str | None = None


@dataclass(frozen=True)
class CompositeResult:
    """Encoded output of the compositor."""

    data: bytes
    mime_type: str
    width: int
    height: int


@dataclass(frozen=True)
class StyleOutcome:
    """Terminal result of one style branch: success record or error tag."""

    style: Style
    artifact_id: str | None
    storage_path: str | None = None
    upstream_result_url: str | None = None
    generation_id: str | None = None
    has_logo: bool = False
    error_kind: ErrorKind | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None


@dataclass(frozen=True)
class GenerationResult:
    """Aggregate result of one generation request."""

    image_id: str | None
    session_id: str
    event_id: str
    outcomes: list[StyleOutcome]

    @property
    def succeeded(self) -> list[StyleOutcome]:
        return [outcome for outcome in self.outcomes if outcome.ok]

    @property
    def failed(self) -> list[StyleOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]
