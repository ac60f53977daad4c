"""Leonardo.ai REST API client."""

import json
import logging
from dataclasses import dataclass

import httpx

from photobooth.config import GenerationConfig
from photobooth.domain.generation import JobPoll, JobStatus, Orientation
from photobooth.errors import UpstreamError
from photobooth.services.compositor import canvas_size
from photobooth.services.generation import GenerationClient

logger = logging.getLogger(__name__)

_STATUS_MAP = {
    "PENDING": JobStatus.PENDING,
    "COMPLETE": JobStatus.COMPLETE,
    "FAILED": JobStatus.FAILED,
}


@dataclass
class HttpxLeonardoClient(GenerationClient):
    """Stateless Leonardo client using httpx."""

    api_key: str
    base_url: str
    config: GenerationConfig
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, api_key: str, base_url: str, config: GenerationConfig
    ) -> "HttpxLeonardoClient":
        """Create a Leonardo client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            config=config,
            http_client=httpx.AsyncClient(),
        )

    async def upload_source_image(self, data: bytes, extension: str) -> str:
        """Upload source bytes through a presigned init-image target."""
        payload = await self._request(
            "POST", "/init-image", payload={"extension": extension}
        )
        try:
            target = payload["uploadInitImage"]
            url = target["url"]
            fields = target["fields"]
            image_id = target["id"]
            if isinstance(fields, str):
                fields = json.loads(fields)
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamError(
                "Leonardo init-image response is malformed", code="MALFORMED_RESPONSE"
            ) from exc

        try:
            response = await self.http_client.post(
                url,
                data=fields,
                files={"file": (f"image.{extension}", data)},
                timeout=60,
            )
        except httpx.HTTPError as exc:
            raise UpstreamError(
                f"Upload to presigned URL failed: {exc}", code="UPLOAD_FAILED"
            ) from exc
        if not response.is_success:
            raise UpstreamError(
                f"Upload failed: {response.status_code}", code="UPLOAD_FAILED"
            )
        return str(image_id)

    async def submit_generation(
        self, prompt: str, image_id: str, orientation: Orientation
    ) -> str:
        """Submit an image-guided generation sized for the orientation."""
        width, height = canvas_size(orientation)
        payload = await self._request(
            "POST",
            "/generations",
            payload={
                "modelId": self.config.model_id,
                "prompt": prompt,
                "enhancePrompt": True,
                "width": width,
                "height": height,
                "num_images": 1,
                "styleUUID": self.config.style_id,
                "contrastRatio": self.config.strength,
                "contextImages": [{"type": "UPLOADED", "id": image_id}],
            },
        )
        try:
            return str(payload["sdGenerationJob"]["generationId"])
        except (KeyError, TypeError) as exc:
            raise UpstreamError(
                "Leonardo generation response is malformed",
                code="MALFORMED_RESPONSE",
            ) from exc

    async def poll_job_status(self, job_id: str) -> JobPoll:
        """Check a generation's status once."""
        payload = await self._request("GET", f"/generations/{job_id}")
        try:
            generation = payload["generations_by_pk"]
            status = _STATUS_MAP[str(generation["status"]).upper()]
        except (KeyError, TypeError) as exc:
            raise UpstreamError(
                "Leonardo status response is malformed", code="MALFORMED_RESPONSE"
            ) from exc
        if status is not JobStatus.COMPLETE:
            return JobPoll(status=status)
        images = generation.get("generated_images") or []
        url = images[0].get("url") if images else None
        return JobPoll(status=status, result_url=url)

    async def download_result(self, url: str) -> bytes:
        """Download generated image bytes with a plain GET."""
        try:
            response = await self.http_client.get(url, timeout=30)
        except httpx.HTTPError as exc:
            raise UpstreamError(
                f"Failed to download image: {exc}", code="DOWNLOAD_FAILED"
            ) from exc
        if not response.is_success:
            raise UpstreamError(
                f"Failed to download image: {response.status_code} "
                f"{response.reason_phrase}",
                code="DOWNLOAD_FAILED",
            )
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self, method: str, endpoint: str, payload: dict[str, object] | None = None
    ) -> dict:
        try:
            response = await self.http_client.request(
                method,
                f"{self.base_url}{endpoint}",
                json=payload,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Accept": "application/json",
                },
                timeout=30,
            )
        except httpx.HTTPError as exc:
            raise UpstreamError(
                f"Leonardo API request failed: {exc}", code="UPSTREAM_UNAVAILABLE"
            ) from exc
        if not response.is_success:
            logger.error(
                "Leonardo API error",
                extra={"endpoint": endpoint, "status": response.status_code},
            )
            raise UpstreamError(
                f"Leonardo API error: {response.status_code} "
                f"{response.reason_phrase} - {response.text}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                "Leonardo API returned invalid JSON", code="MALFORMED_RESPONSE"
            ) from exc
