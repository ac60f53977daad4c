"""Application configuration."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from pydantic_settings import BaseSettings, SettingsConfigDict

from photobooth.domain.models import STYLES, Style

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_PROMPTS: Mapping[Style, str] = MappingProxyType(
    {
        Style.ANIME: (
            "Transform the people in this photo into a vibrant anime illustration, "
            "clean line art, expressive eyes, cel shading, keep poses and framing"
        ),
        Style.WATERCOLOR: (
            "Repaint this photo as a soft watercolor painting, loose brush strokes, "
            "paper texture, gentle color bleeding, keep composition"
        ),
        Style.OIL: (
            "Repaint this photo as a classical oil painting, rich impasto texture, "
            "warm lighting, visible brush strokes, keep composition"
        ),
        Style.DISNEY: (
            "Turn the people in this photo into 3D animated movie characters, "
            "playful proportions, soft studio lighting, keep poses and framing"
        ),
    }
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    storage_bucket: str = "PhotoBooth"
    leonardo_api_key: str
    leonardo_base_url: str = "https://cloud.leonardo.ai/api/rest/v1"
    leonardo_model_id: str
    leonardo_style_id: str
    leonardo_prompts: str | None = None
    leonardo_strength: float = 0.5
    poll_interval_seconds: float = 3.0
    poll_timeout_seconds: float = 300.0
    share_ttl_seconds: int = 7 * 24 * 60 * 60
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


@dataclass(frozen=True)
class GenerationConfig:
    """Immutable service constants for one generation pipeline."""

    model_id: str
    style_id: str
    prompts: Mapping[Style, str]
    strength: float = 0.5
    poll_interval_seconds: float = 3.0
    poll_timeout_seconds: float = 300.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerationConfig":
        """Build the generation config from application settings."""
        return cls(
            model_id=settings.leonardo_model_id,
            style_id=settings.leonardo_style_id,
            prompts=parse_prompts(settings.leonardo_prompts),
            strength=settings.leonardo_strength,
            poll_interval_seconds=settings.poll_interval_seconds,
            poll_timeout_seconds=settings.poll_timeout_seconds,
        )

    def prompt_for(self, style: Style) -> str:
        return self.prompts.get(style, DEFAULT_PROMPTS[style])


def parse_prompts(raw: str | None) -> Mapping[Style, str]:
    """Map `|`-separated prompts onto the fixed style order.

    Missing or blank entries fall back to the built-in prompt for that style.
    """
    prompts = dict(DEFAULT_PROMPTS)
    if raw is None:
        return MappingProxyType(prompts)
    for style, chunk in zip(STYLES, raw.split("|"), strict=False):
        value = chunk.strip()
        if value:
            prompts[style] = value
    return MappingProxyType(prompts)
