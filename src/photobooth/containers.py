"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from photobooth.adapters.leonardo_client import HttpxLeonardoClient
from photobooth.adapters.supabase_artifact_repository import (
    SupabaseArtifactRepository,
)
from photobooth.adapters.supabase_auth import SupabaseAuthenticator
from photobooth.adapters.supabase_event_repository import (
    SupabaseEventRepository,
    SupabaseSessionRepository,
)
from photobooth.adapters.supabase_share_repository import SupabaseShareRepository
from photobooth.adapters.supabase_storage import SupabaseStorageGateway
from photobooth.config import GenerationConfig, Settings
from photobooth.services.artifacts import ArtifactService
from photobooth.services.auth import AuthService
from photobooth.services.generation import GenerationService
from photobooth.services.shares import ShareService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    generation_service: GenerationService
    artifact_service: ArtifactService
    share_service: ShareService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    event_repository = SupabaseEventRepository(supabase_client)
    session_repository = SupabaseSessionRepository(supabase_client)
    artifact_repository = SupabaseArtifactRepository(supabase_client)
    share_repository = SupabaseShareRepository(supabase_client)
    storage = SupabaseStorageGateway(
        client=supabase_client, bucket=resolved_settings.storage_bucket
    )
    generation_config = GenerationConfig.from_settings(resolved_settings)
    leonardo_client = HttpxLeonardoClient.create(
        api_key=resolved_settings.leonardo_api_key,
        base_url=resolved_settings.leonardo_base_url,
        config=generation_config,
    )
    generation_service = GenerationService(
        client=leonardo_client,
        event_repository=event_repository,
        session_repository=session_repository,
        artifact_repository=artifact_repository,
        storage=storage,
        config=generation_config,
    )
    artifact_service = ArtifactService(
        session_repository=session_repository,
        artifact_repository=artifact_repository,
        storage=storage,
        signed_url_ttl_seconds=resolved_settings.share_ttl_seconds,
    )
    share_service = ShareService(
        event_repository=event_repository,
        session_repository=session_repository,
        artifact_repository=artifact_repository,
        share_repository=share_repository,
        storage=storage,
        default_ttl_seconds=resolved_settings.share_ttl_seconds,
    )
    auth_service = AuthService(SupabaseAuthenticator(supabase_client))

    async def close_resources() -> None:
        await leonardo_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=auth_service,
        generation_service=generation_service,
        artifact_service=artifact_service,
        share_service=share_service,
        close_resources=close_resources,
    )
