from __future__ import annotations

import logging
from collections.abc import AsyncIterator

import anyio
from starlette.background import BackgroundTask
from starlette.concurrency import run_in_threadpool
from starlette.responses import StreamingResponse

from gpt_site_gen.storage import PackagedArchive, remove_archive

logger = logging.getLogger(__name__)

DOWNLOAD_NAME = "website.zip"
CHUNK_SIZE = 64 * 1024


async def iter_archive(archive: PackagedArchive, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
    """
    Yield the archive in chunks and always clean up afterwards, whether the
    stream ran to completion, the client went away, or the task was cancelled.
    """
    sent = 0
    completed = False
    try:
        async with await anyio.open_file(archive.zip_path, "rb") as fh:
            while chunk := await fh.read(chunk_size):
                sent += len(chunk)
                yield chunk
        completed = True
    finally:
        if completed:
            await run_in_threadpool(remove_archive, archive)
        else:
            # Closed early or cancelled: an await here may never resume.
            remove_archive(archive)
        logger.info("Delivered %d bytes of %s (complete=%s), cleaned up", sent, archive.zip_path.name, completed)


def archive_response(archive: PackagedArchive) -> StreamingResponse:
    headers = {"Content-Disposition": f'attachment; filename="{DOWNLOAD_NAME}"'}
    return StreamingResponse(
        iter_archive(archive),
        media_type="application/zip",
        headers=headers,
        # Covers a stream that never started; removal is idempotent.
        background=BackgroundTask(remove_archive, archive),
    )
