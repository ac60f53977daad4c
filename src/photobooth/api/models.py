"""Request models for the photobooth API."""

from pydantic import BaseModel, ConfigDict, Field


class ShareCreateRequest(BaseModel):
    """Body of a share creation request."""

    model_config = ConfigDict(populate_by_name=True)

    event_id: str | None = Field(default=None, alias="eventId")
    aiphoto_id: str | None = Field(default=None, alias="aiphotoId")
    expires_in_seconds: int | None = Field(default=None, alias="expiresInSeconds")
