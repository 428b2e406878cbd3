"""Local disk storage for uploaded images.

Every file in a batch is validated (content type, size, non-empty) before
any of them is written, so a rejected batch leaves nothing on disk.
Stored files are served by the static mount at /uploads.
"""

import secrets
import time
from dataclasses import dataclass
from pathlib import Path

import structlog
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from realfolio.config import Settings

logger = structlog.get_logger()


class UploadRejected(Exception):
    """A file in the batch broke the size or content-type rules."""


@dataclass(frozen=True)
class StoredFile:
    filename: str
    url: str


class LocalFileStorage:
    def __init__(
        self,
        root: str | Path,
        max_bytes: int = 5 * 1024 * 1024,
        allowed_types: tuple[str, ...] = ("image/jpeg", "image/png", "image/webp"),
        url_prefix: str = "/uploads",
    ):
        self.root = Path(root)
        self.max_bytes = max_bytes
        self.allowed_types = tuple(allowed_types)
        self.url_prefix = url_prefix.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalFileStorage":
        return cls(
            root=settings.upload_path,
            max_bytes=settings.max_file_size,
            allowed_types=tuple(settings.allowed_file_types),
        )

    def _max_mb(self) -> str:
        return f"{self.max_bytes / (1024 * 1024):g}MB"

    def _unique_name(self, field: str, original: str | None) -> str:
        suffix = Path(original or "").suffix.lower()
        stamp = int(time.time() * 1000)
        return f"{field}-{stamp}-{secrets.randbelow(10**9)}{suffix}"

    async def save(self, files: list[UploadFile], field: str = "images") -> list[StoredFile]:
        """Validate then write a batch of uploads. Returns their names and URLs."""
        payloads: list[tuple[UploadFile, bytes]] = []
        for upload in files:
            if upload.content_type not in self.allowed_types:
                raise UploadRejected(
                    "Invalid file type. Only JPEG, PNG, and WebP images are allowed."
                )
            if upload.size is not None and upload.size > self.max_bytes:
                raise UploadRejected(f"File too large. Maximum size is {self._max_mb()}.")
            # Never buffer more than one byte past the limit
            data = await upload.read(self.max_bytes + 1)
            if len(data) > self.max_bytes:
                raise UploadRejected(f"File too large. Maximum size is {self._max_mb()}.")
            if not data:
                raise UploadRejected(f"File is empty: {upload.filename}")
            payloads.append((upload, data))

        await run_in_threadpool(self.root.mkdir, parents=True, exist_ok=True)
        stored = []
        for upload, data in payloads:
            name = self._unique_name(field, upload.filename)
            await run_in_threadpool((self.root / name).write_bytes, data)
            stored.append(StoredFile(filename=name, url=f"{self.url_prefix}/{name}"))

        logger.info("uploads.stored", count=len(stored), root=str(self.root))
        return stored
