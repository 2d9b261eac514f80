"""
Media Service.

Async client for the hosted image service (Cloudinary upload API).
Requests are signed with the account secret; the secret itself is never
sent.

Usage:
    media = MediaService.from_config(get_settings(), get_app_config())
    url = await media.upload_image(content, filename="me.png", content_type="image/png")
    await media.delete_image(media.public_id_from_url(old_url))
"""

import hashlib
import time
from typing import Any
from urllib.parse import urlparse

import httpx

from notely.core.exceptions import ExternalServiceError
from notely.core.logging import get_logger

logger = get_logger(__name__)


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """Cloudinary request signature: sha1 of sorted ``k=v`` pairs joined by ``&`` plus the secret."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, ""))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class MediaService:
    """
    Uploads and deletes avatar images on the hosted media service.

    Constructed from explicit credentials; one instance is shared by the
    application and closed on shutdown.
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        api_base_url: str = "https://api.cloudinary.com/v1_1",
        folder: str = "notely/avatars",
        transformation: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self._api_secret = api_secret
        self.base_url = f"{api_base_url.rstrip('/')}/{cloud_name}"
        self.folder = folder.strip("/")
        self.transformation = transformation
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, settings: Any, app_config: Any) -> "MediaService":
        media = app_config.media
        return cls(
            cloud_name=media.cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            api_base_url=media.api_base_url,
            folder=media.folder,
            transformation=media.transformation,
            timeout=media.timeout_seconds,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self._api_secret)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _signed(self, params: dict[str, Any]) -> dict[str, Any]:
        params = {k: v for k, v in params.items() if v not in (None, "")}
        params["timestamp"] = int(time.time())
        signature = sign_params(params, self._api_secret)
        return {**params, "api_key": self.api_key, "signature": signature}

    async def _post(self, path: str, data: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        if not self.configured:
            logger.error("Media service credentials are not configured")
            raise ExternalServiceError("Media service is not configured")

        client = await self._get_client()
        try:
            response = await client.post(path, data=data, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Media request failed", extra={"path": path, "error": str(e)})
            raise ExternalServiceError("Media service request failed") from e

        if response.status_code >= 400:
            logger.error(
                "Media service returned an error",
                extra={"path": path, "status_code": response.status_code, "body": response.text[:500]},
            )
            raise ExternalServiceError(f"Media service responded with {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise ExternalServiceError("Media service returned an invalid response") from e

    async def upload_image(
        self,
        content: bytes,
        filename: str = "avatar",
        content_type: str = "application/octet-stream",
    ) -> str:
        """
        Upload an image and return its HTTPS URL.

        Raises:
            ExternalServiceError: On transport failure or an error response
        """
        data = self._signed({"folder": self.folder, "transformation": self.transformation})
        body = await self._post(
            "/image/upload",
            data,
            files={"file": (filename, content, content_type)},
        )

        url = body.get("secure_url") or body.get("url")
        if not url:
            raise ExternalServiceError("Media service response did not include a URL")

        logger.info("Image uploaded", extra={"public_id": body.get("public_id"), "bytes": len(content)})
        return url

    async def delete_image(self, public_id: str) -> None:
        """
        Delete an image by public id.

        Raises:
            ExternalServiceError: On transport failure or an error response
        """
        body = await self._post("/image/destroy", self._signed({"public_id": public_id}))
        logger.info("Image deleted", extra={"public_id": public_id, "result": body.get("result")})

    def public_id_from_url(self, url: str) -> str | None:
        """
        Derive an asset's public id from its delivery URL.

        ``https://res.cloudinary.com/x/image/upload/v1/notely/avatars/abc.jpg``
        maps to ``notely/avatars/abc``.
        """
        path = urlparse(url).path
        last_segment = path.rstrip("/").rsplit("/", 1)[-1]
        if not last_segment:
            return None
        name = last_segment.rsplit(".", 1)[0]
        return f"{self.folder}/{name}"
