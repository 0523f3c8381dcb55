from __future__ import annotations

import asyncio
import zipfile
from pathlib import Path

import pytest

from gpt_site_gen import delivery
from gpt_site_gen.assembly.render import ImageCopy, RenderedPage, RenderedSite
from gpt_site_gen.config import Settings
from gpt_site_gen.delivery import iter_archive
from gpt_site_gen.errors import FilesystemError
from gpt_site_gen.storage import SLUG_MAX_BYTES, SitePackager, UploadStore, remove_archive, site_slug


def _site(*images: ImageCopy) -> RenderedSite:
    return RenderedSite(
        pages=(RenderedPage("index.html", "<h1>home</h1>"), RenderedPage("about.html", "<h1>about</h1>")),
        images=tuple(images),
    )


def _settings(tmp_path: Path, **overrides) -> Settings:
    return Settings(
        _env_file=None,
        uploads_dir=str(tmp_path / "uploads"),
        generated_dir=str(tmp_path / "generated"),
        **overrides,
    )


@pytest.mark.parametrize(
    "biz, slug",
    [
        ("Sunrise Bakery", "Sunrise_Bakery"),
        ("  Acme   Widgets  Co ", "Acme_Widgets_Co"),
        ("../etc/passwd", "__etc_passwd"),
        ("   ", "site"),
    ],
)
def test_site_slug(biz, slug):
    assert site_slug(biz) == slug


def test_site_slug_caps_utf8_bytes():
    assert site_slug("a" * 150) == "a" * SLUG_MAX_BYTES
    # Three bytes per character; a partial character is dropped.
    assert site_slug("\u9f99" * 100) == "\u9f99" * 33


def test_package_long_multibyte_name(tmp_path):
    packager = SitePackager(_settings(tmp_path))

    archive = packager.package(_site(), "\u9f99" * 100, "abc123")

    assert archive.site_dir.name == "\u9f99" * 33 + "_abc123"
    assert archive.zip_path.name == archive.site_dir.name + ".zip"
    assert archive.zip_path.is_file()


def test_unrepresentable_name_is_a_filesystem_error(tmp_path):
    packager = SitePackager(_settings(tmp_path))

    with pytest.raises(FilesystemError):
        packager.package(_site(), "Sun\x00rise")


def test_package_writes_pages_and_zip(tmp_path):
    packager = SitePackager(_settings(tmp_path))

    archive = packager.package(_site(), "Sunrise Bakery", "abc123")

    assert archive.site_dir.name == "Sunrise_Bakery_abc123"
    assert archive.zip_path.name == "Sunrise_Bakery_abc123.zip"
    assert (archive.site_dir / "index.html").read_text(encoding="utf-8") == "<h1>home</h1>"
    with zipfile.ZipFile(archive.zip_path) as zf:
        assert zf.namelist() == ["about.html", "index.html"]
        assert zf.read("about.html") == b"<h1>about</h1>"


def test_same_business_gets_distinct_paths(tmp_path):
    packager = SitePackager(_settings(tmp_path))

    first = packager.package(_site(), "Sunrise Bakery")
    second = packager.package(_site(), "Sunrise Bakery")

    assert first.site_dir != second.site_dir
    assert first.zip_path != second.zip_path
    assert first.zip_path.exists() and second.zip_path.exists()


def test_reused_request_id_is_a_filesystem_error(tmp_path):
    packager = SitePackager(_settings(tmp_path))
    packager.package(_site(), "Sunrise", "dup")

    with pytest.raises(FilesystemError):
        packager.package(_site(), "Sunrise", "dup")


def test_unwritable_output_root(tmp_path):
    blocker = tmp_path / "generated"
    blocker.write_text("not a directory")
    packager = SitePackager(_settings(tmp_path))

    with pytest.raises(FilesystemError):
        packager.package(_site(), "Sunrise")


def test_images_are_copied_and_missing_ones_skipped(tmp_path):
    uploads = tmp_path / "uploads"
    uploads.mkdir()
    (uploads / "logo.png").write_bytes(b"png-bytes")
    packager = SitePackager(_settings(tmp_path))
    site = _site(ImageCopy(uploads / "logo.png", "logo.png"), ImageCopy(uploads / "gone.png", "gone.png"))

    archive = packager.package(site, "Sunrise")

    with zipfile.ZipFile(archive.zip_path) as zf:
        assert zf.read("images/logo.png") == b"png-bytes"
        assert "images/gone.png" not in zf.namelist()


def test_strict_mode_fails_and_cleans_up(tmp_path):
    cfg = _settings(tmp_path, strict_image_copy=True)
    packager = SitePackager(cfg)
    site = _site(ImageCopy(tmp_path / "uploads" / "gone.png", "gone.png"))

    with pytest.raises(FilesystemError, match="gone.png"):
        packager.package(site, "Sunrise", "strict1")

    assert list(Path(cfg.generated_dir).iterdir()) == []


def test_remove_archive_is_idempotent(tmp_path):
    archive = SitePackager(_settings(tmp_path)).package(_site(), "Sunrise")

    remove_archive(archive)
    remove_archive(archive)

    assert not archive.site_dir.exists()
    assert not archive.zip_path.exists()


def test_iter_archive_streams_then_cleans_up(tmp_path, monkeypatch):
    archive = SitePackager(_settings(tmp_path)).package(_site(), "Sunrise")
    expected = archive.zip_path.read_bytes()

    async def collect() -> bytes:
        return b"".join([chunk async for chunk in iter_archive(archive, chunk_size=16)])

    threaded = []

    async def fake_threadpool(func, *args):
        threaded.append(func)
        return func(*args)

    monkeypatch.setattr(delivery, "run_in_threadpool", fake_threadpool)

    assert asyncio.run(collect()) == expected
    assert threaded == [remove_archive]
    assert not archive.site_dir.exists()
    assert not archive.zip_path.exists()


def test_iter_archive_cleans_up_when_abandoned(tmp_path, monkeypatch):
    archive = SitePackager(_settings(tmp_path)).package(_site(), "Sunrise")
    threaded = []

    async def fake_threadpool(func, *args):
        threaded.append(func)
        return func(*args)

    monkeypatch.setattr(delivery, "run_in_threadpool", fake_threadpool)

    async def read_one_chunk() -> None:
        stream = iter_archive(archive, chunk_size=16)
        await stream.__anext__()
        await stream.aclose()

    asyncio.run(read_one_chunk())
    assert threaded == []
    assert not archive.zip_path.exists()
    assert not archive.site_dir.exists()


def test_upload_store_sanitizes_names(tmp_path):
    store = UploadStore(_settings(tmp_path))

    path = store.save("../../evil.png", b"x", unique="42")

    assert path.parent == store.root_dir
    assert path.name == "42-evil.png"
    assert store.public_url(path) == "/uploads/42-evil.png"
    store.delete(path)
    store.delete(path)
    assert not path.exists()
