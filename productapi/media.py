"""Cloudinary upload client."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from .config import CloudinaryConfig

logger = logging.getLogger(__name__)

IMAGE = "image"
VIDEO = "video"


class MediaUploadError(Exception):
    """Raised when the media provider rejects or fails an upload."""
    pass


@dataclass(frozen=True)
class UploadedMedia:
    secure_url: str
    public_id: str
    resource_type: str


class CloudinaryUploader:
    def __init__(self, config: CloudinaryConfig):
        self.config = config
        if not config.is_complete:
            logger.warning("Cloudinary credentials are incomplete; uploads will fail")

    def _credentials(self) -> Dict[str, Any]:
        return {
            "cloud_name": self.config.cloud_name,
            "api_key": self.config.api_key,
            "api_secret": self.config.api_secret,
        }

    async def upload(self, path: Union[str, Path], resource_type: str = IMAGE) -> UploadedMedia:
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                str(path),
                resource_type=resource_type,
                **self._credentials(),
            )
        except CloudinaryError as e:
            raise MediaUploadError(f"upload of {path} failed: {e}") from e

        if not result or "secure_url" not in result:
            raise MediaUploadError(f"upload of {path} returned no secure_url")

        logger.info("uploaded %s (%s) -> %s", path, resource_type, result["secure_url"])
        return UploadedMedia(
            secure_url=result["secure_url"],
            public_id=result.get("public_id", ""),
            resource_type=result.get("resource_type", resource_type),
        )

    async def destroy(self, media: UploadedMedia) -> None:
        try:
            await asyncio.to_thread(
                cloudinary.uploader.destroy,
                media.public_id,
                resource_type=media.resource_type,
                invalidate=True,
                **self._credentials(),
            )
        except CloudinaryError as e:
            raise MediaUploadError(f"delete of {media.public_id} failed: {e}") from e
        logger.info("deleted remote %s %s", media.resource_type, media.public_id)
