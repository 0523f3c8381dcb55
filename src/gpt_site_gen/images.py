from __future__ import annotations

import logging
import uuid
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError
from starlette.concurrency import run_in_threadpool

from gpt_site_gen.config import Settings
from gpt_site_gen.errors import ImageProcessingError, UploadError
from gpt_site_gen.providers.base import HostedImage, ImageGenerator, ImageHost
from gpt_site_gen.storage import UploadStore

logger = logging.getLogger(__name__)


def verify_image(content: bytes, filename: str) -> tuple[int, int, str]:
    """Return (width, height, format) or raise UploadError if the bytes are not an image."""
    try:
        with Image.open(BytesIO(content)) as img:
            img.verify()
        with Image.open(BytesIO(content)) as img:
            return img.width, img.height, (img.format or "").lower()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise UploadError(f"{filename} is not a valid image") from exc


def _to_png_bytes(content: bytes) -> bytes:
    with Image.open(BytesIO(content)) as img:
        buf = BytesIO()
        img.convert("RGBA").save(buf, format="PNG")
    return buf.getvalue()


class ImageProcessor:
    """
    Upload and AI-generation flows that end with the image on the remote host.

    Local copies are always deleted. Any failure surfaces as a generic
    ImageProcessingError; the cause is logged and chained, never shown.
    """

    def __init__(
        self,
        settings: Settings,
        uploads: UploadStore,
        host: ImageHost | None = None,
        generator: ImageGenerator | None = None,
    ) -> None:
        self.settings = settings
        self.uploads = uploads
        self.folder = settings.cloudinary_folder
        self._host = host
        self._generator = generator

    def _get_host(self) -> ImageHost:
        if self._host is None:
            from gpt_site_gen.providers.cloudinary_host import CloudinaryHost

            self._host = CloudinaryHost(self.settings)
        return self._host

    def _get_generator(self) -> ImageGenerator:
        if self._generator is None:
            from gpt_site_gen.providers.openai_provider import OpenAIImageProvider

            self._generator = OpenAIImageProvider(self.settings)
        return self._generator

    async def process_uploaded_image(self, filename: str, content: bytes) -> HostedImage:
        local: Path | None = None
        try:
            local = await run_in_threadpool(self.uploads.save, filename, content, uuid.uuid4().hex)
            return await run_in_threadpool(self._get_host().upload, local, self.folder)
        except Exception as exc:
            logger.exception("Error processing uploaded image %s", filename)
            raise ImageProcessingError("Failed to process image") from exc
        finally:
            if local is not None:
                self.uploads.delete(local)

    async def generate_image(self, prompt: str) -> HostedImage:
        tmp: Path | None = None
        try:
            generated = await self._get_generator().generate(prompt)
            png = await run_in_threadpool(_to_png_bytes, generated.content)
            tmp = await run_in_threadpool(self.uploads.save, "generated.png", png, uuid.uuid4().hex)
            hosted = await run_in_threadpool(self._get_host().upload, tmp, f"{self.folder}/ai-generated")
        except Exception as exc:
            logger.exception("Error generating image for prompt %r", prompt[:80])
            raise ImageProcessingError("Failed to generate image") from exc
        finally:
            if tmp is not None:
                self.uploads.delete(tmp)
        logger.info("Generated image with %s/%s -> %s", generated.provider, generated.model, hosted.url)
        return hosted
