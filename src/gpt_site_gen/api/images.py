from __future__ import annotations

import asyncio
from dataclasses import asdict

from fastapi import APIRouter, File, Request, UploadFile

from gpt_site_gen.errors import UploadError, ValidationError
from gpt_site_gen.schemas import ImagePromptRequest

router = APIRouter()


async def read_uploads(
    files: list[UploadFile] | None,
    max_files: int,
    max_bytes: int,
    allowed_types: tuple[str, ...] | None = None,
) -> list[tuple[str, bytes]]:
    """
    Read and screen multipart uploads. `allowed_types=None` accepts any image/*.
    """
    if not files:
        raise UploadError("No files uploaded")
    if len(files) > max_files:
        raise UploadError(f"Too many files: at most {max_files} allowed")

    out: list[tuple[str, bytes]] = []
    for f in files:
        name = f.filename or "upload.bin"
        ctype = (f.content_type or "").lower()
        if allowed_types is None:
            if not ctype.startswith("image/"):
                raise UploadError("Only images are allowed")
        elif ctype not in allowed_types:
            raise UploadError("Invalid file type. Only JPEG, PNG and WebP are allowed.")
        content = await f.read()
        if len(content) > max_bytes:
            raise UploadError(f"{name} exceeds the {max_bytes // (1024 * 1024)}MB limit")
        out.append((name, content))
    return out


@router.post("/upload")
async def upload_to_host(request: Request, images: list[UploadFile] | None = File(None)):
    cfg = request.app.state.settings
    files = await read_uploads(images, cfg.max_upload_files, cfg.hosted_upload_max_bytes, tuple(cfg.hosted_upload_types))
    processor = request.app.state.images
    results = await asyncio.gather(
        *(processor.process_uploaded_image(name, content) for name, content in files),
        return_exceptions=True,
    )
    # All uploads settle before the first failure is raised.
    failed = next((r for r in results if isinstance(r, BaseException)), None)
    if failed is not None:
        raise failed
    return {"images": [asdict(h) for h in results]}


@router.post("/generate-image")
async def generate_image(body: ImagePromptRequest, request: Request):
    prompt = (body.prompt or "").strip()
    if not prompt:
        raise ValidationError("Image prompt is required")
    hosted = await request.app.state.images.generate_image(prompt)
    return {"image": asdict(hosted)}
