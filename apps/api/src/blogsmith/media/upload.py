"""Upload boundary - accept a single video file onto local disk."""

import asyncio
import logging
import time
from pathlib import Path

from fastapi import UploadFile

logger = logging.getLogger(__name__)


class UploadRejected(Exception):
    """The uploaded file is not acceptable."""


class UploadTooLarge(UploadRejected):
    """The uploaded file exceeds the configured size limit."""

    def __init__(self, max_bytes: int):
        super().__init__(f"File exceeds the {max_bytes // (1024 * 1024)} MB limit")
        self.max_bytes = max_bytes


class UploadHandler:
    """
    Stream an uploaded file to the upload directory.

    Only one media type is accepted. Files are named
    "<epoch-ms>-<original basename>".
    """

    CHUNK_SIZE = 1024 * 1024

    def __init__(
        self,
        upload_dir: str | Path,
        max_bytes: int = 25 * 1024 * 1024,
        allowed_type: str = "video/mp4",
    ):
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes
        self.allowed_type = allowed_type

    def _destination(self, filename: str | None) -> Path:
        basename = Path(filename or "upload").name or "upload"
        return self.upload_dir / f"{int(time.time() * 1000)}-{basename}"

    async def save(self, upload: UploadFile) -> Path:
        """
        Persist the upload.

        Returns:
            Path of the stored file

        Raises:
            UploadRejected: wrong media type
            UploadTooLarge: more than max_bytes
        """
        if upload.content_type != self.allowed_type:
            raise UploadRejected(f"Only {self.allowed_type} files are allowed")

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        destination = self._destination(upload.filename)

        written = 0
        try:
            with destination.open("wb") as out:
                while chunk := await upload.read(self.CHUNK_SIZE):
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise UploadTooLarge(self.max_bytes)
                    await asyncio.to_thread(out.write, chunk)
        except BaseException:
            destination.unlink(missing_ok=True)
            raise

        logger.info(f"Stored upload {destination.name} ({written} bytes)")
        return destination
