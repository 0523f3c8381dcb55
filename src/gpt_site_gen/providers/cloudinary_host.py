from __future__ import annotations

from pathlib import Path
from typing import Any

import cloudinary.exceptions
import cloudinary.uploader

from gpt_site_gen.config import Settings
from gpt_site_gen.errors import UpstreamError
from gpt_site_gen.providers.base import HostedImage


class CloudinaryHost:
    """
    Uploads local image files to Cloudinary, converted to WebP.

    Credentials live on a per-instance config dict passed to every call
    rather than on the module-level `cloudinary.config()`.
    """

    name = "cloudinary"

    def __init__(self, settings: Settings) -> None:
        if not (settings.cloudinary_cloud_name and settings.cloudinary_api_key and settings.cloudinary_api_secret):
            raise UpstreamError("CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET must be set")
        self._credentials: dict[str, Any] = {
            "cloud_name": settings.cloudinary_cloud_name,
            "api_key": settings.cloudinary_api_key,
            "api_secret": settings.cloudinary_api_secret,
        }

    def upload(self, path: Path, folder: str) -> HostedImage:
        try:
            result = cloudinary.uploader.upload(
                str(path),
                folder=folder,
                format="webp",
                **self._credentials,
            )
        except cloudinary.exceptions.Error as exc:
            raise UpstreamError(f"Cloudinary upload failed: {exc}") from exc

        return HostedImage(
            url=result["secure_url"],
            width=result.get("width"),
            height=result.get("height"),
            format=result.get("format"),
        )
