"""Supabase Storage gateway."""

import logging
from dataclasses import dataclass

from supabase import Client

from photobooth.errors import StorageError
from photobooth.services.generation import StorageGateway

logger = logging.getLogger(__name__)


@dataclass
class SupabaseStorageGateway(StorageGateway):
    """Stores objects in a single Supabase Storage bucket."""

    client: Client
    bucket: str
    cache_control: str = "3600"

    def upload(self, data: bytes, path: str, content_type: str) -> str:
        """Upload bytes with upsert and return the stored path."""
        try:
            self.client.storage.from_(self.bucket).upload(
                path,
                data,
                {
                    "content-type": content_type,
                    "cache-control": self.cache_control,
                    "upsert": "true",
                },
            )
        except Exception as exc:
            logger.error("Supabase upload failed", extra={"path": path})
            raise StorageError(
                f"Upload failed: {exc}", code="STORAGE_UPLOAD_ERROR"
            ) from exc
        return path

    def download(self, path: str) -> bytes:
        """Download an object's bytes."""
        try:
            data = self.client.storage.from_(self.bucket).download(path)
        except Exception as exc:
            raise StorageError(
                f"Download failed: {exc}", code="STORAGE_DOWNLOAD_ERROR"
            ) from exc
        if not data:
            raise StorageError(
                f"Object not found: {path}", code="STORAGE_DOWNLOAD_ERROR"
            )
        return data

    def create_signed_url(self, path: str, ttl_seconds: int) -> str:
        """Create a signed URL valid for ttl_seconds."""
        try:
            response = self.client.storage.from_(self.bucket).create_signed_url(
                path, ttl_seconds
            )
        except Exception as exc:
            raise StorageError(
                f"Failed to create signed URL: {exc}", code="STORAGE_SIGN_ERROR"
            ) from exc
        signed_url = response.get("signedURL") or response.get("signedUrl")
        if not signed_url:
            raise StorageError(
                "Failed to create signed URL", code="STORAGE_SIGN_ERROR"
            )
        return signed_url
