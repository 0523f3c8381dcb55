from __future__ import annotations

import logging
import os
import re
import shutil
import time
import uuid
import zipfile
from dataclasses import dataclass
from pathlib import Path

from gpt_site_gen.assembly.render import RenderedSite
from gpt_site_gen.config import Settings
from gpt_site_gen.errors import FilesystemError

logger = logging.getLogger(__name__)

# Leaves room for "_<request id>.zip" under the 255-byte filename limit.
SLUG_MAX_BYTES = 100


def _safe_filename(name: str) -> str:
    # Prevent path traversal; keep only the last path component.
    cleaned = os.path.basename((name or "").replace("\\", "/")).replace("..", "_")
    return cleaned.strip() or "upload.bin"


def site_slug(biz: str) -> str:
    """
    Business name with whitespace runs joined by '_' and path separators removed,
    cut to SLUG_MAX_BYTES of UTF-8 without splitting a character.
    """
    slug = re.sub(r"\s+", "_", biz.strip())
    slug = slug.replace("/", "_").replace("\\", "_").replace("..", "_")
    slug = slug.encode("utf-8")[:SLUG_MAX_BYTES].decode("utf-8", errors="ignore")
    return slug or "site"


@dataclass(frozen=True)
class PackagedArchive:
    site_dir: Path
    zip_path: Path

    @property
    def size(self) -> int:
        return self.zip_path.stat().st_size


class SitePackager:
    """
    Writes a RenderedSite into a per-request directory under `generated_dir`
    and zips it. Directory and archive names carry a request id so requests
    for the same business never share paths.
    """

    def __init__(self, settings: Settings) -> None:
        self.generated_dir = Path(settings.generated_dir).resolve()
        self.strict_images = settings.strict_image_copy

    def paths_for(self, biz: str, request_id: str) -> PackagedArchive:
        name = f"{site_slug(biz)}_{request_id}"
        return PackagedArchive(site_dir=self.generated_dir / name, zip_path=self.generated_dir / f"{name}.zip")

    def package(self, site: RenderedSite, biz: str, request_id: str | None = None) -> PackagedArchive:
        archive = self.paths_for(biz, request_id or uuid.uuid4().hex[:12])

        try:
            archive.site_dir.mkdir(parents=True, exist_ok=False)
        except (OSError, ValueError) as exc:
            raise FilesystemError(f"could not create output directory: {exc}") from exc

        try:
            self._write_pages(site, archive.site_dir)
            self._copy_images(site, archive.site_dir)
            self._zip_dir(archive.site_dir, archive.zip_path)
        except BaseException:
            remove_archive(archive)
            raise

        logger.info("Packaged %d page(s) for %s: %s (%d bytes)", len(site.pages), biz, archive.zip_path.name, archive.size)
        return archive

    def _write_pages(self, site: RenderedSite, site_dir: Path) -> None:
        for page in site.pages:
            try:
                (site_dir / page.filename).write_text(page.html, encoding="utf-8")
            except OSError as exc:
                raise FilesystemError(f"could not write {page.filename}: {exc}") from exc

    def _copy_images(self, site: RenderedSite, site_dir: Path) -> None:
        if not site.images:
            return
        images_dir = site_dir / "images"
        try:
            images_dir.mkdir(exist_ok=True)
            for img in site.images:
                if not img.source.is_file():
                    if self.strict_images:
                        raise FilesystemError(f"referenced image not found: {img.dest_name}")
                    logger.warning("Skipping missing upload %s", img.source)
                    continue
                shutil.copyfile(img.source, images_dir / img.dest_name)
        except OSError as exc:
            raise FilesystemError(f"could not copy images: {exc}") from exc

    def _zip_dir(self, site_dir: Path, zip_path: Path) -> None:
        try:
            with zipfile.ZipFile(zip_path, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
                for path in sorted(site_dir.rglob("*")):
                    if path.is_file():
                        zf.write(path, arcname=path.relative_to(site_dir).as_posix())
        except (OSError, zipfile.BadZipFile) as exc:
            raise FilesystemError(f"could not create archive: {exc}") from exc


def remove_archive(archive: PackagedArchive) -> None:
    """Best-effort removal of an archive and its output directory. Never raises."""
    try:
        archive.zip_path.unlink(missing_ok=True)
    except OSError:
        logger.warning("Failed to delete archive %s", archive.zip_path, exc_info=True)
    try:
        if archive.site_dir.exists():
            shutil.rmtree(archive.site_dir)
    except OSError:
        logger.warning("Failed to delete output directory %s", archive.site_dir, exc_info=True)


class UploadStore:
    """Local uploads area served under /uploads."""

    def __init__(self, settings: Settings) -> None:
        self.root_dir = Path(settings.uploads_dir).resolve()
        self.root_dir.mkdir(parents=True, exist_ok=True)

    def save(self, filename: str, content: bytes, unique: str | None = None) -> Path:
        prefix = unique or f"{int(time.time() * 1000)}{uuid.uuid4().hex[:4]}"
        path = self.root_dir / f"{prefix}-{_safe_filename(filename)}"
        try:
            path.write_bytes(content)
        except OSError as exc:
            raise FilesystemError(f"could not store upload: {exc}") from exc
        return path

    def public_url(self, path: Path) -> str:
        return f"/uploads/{path.name}"

    def delete(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Failed to delete local upload %s", path, exc_info=True)
