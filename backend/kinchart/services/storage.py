"""Filesystem-backed document bucket.

Objects live under ``<storage_root>/<bucket>/<path>`` where ``path`` has the
form ``<member_id>/<epoch_millis>.<ext>``. The bucket is private: the stored
public URL is the object's canonical address, and reading it requires a
signed URL carrying an expiry and an HMAC signature.
"""

from __future__ import annotations

import asyncio
import hashlib
import hmac
import logging
import time
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from pathlib import Path, PurePosixPath
from urllib.parse import quote, urlencode

from kinchart.config import settings
from kinchart.constants import DOCUMENTS_BUCKET

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class StorageError(Exception):
    """Raised when a bucket operation fails."""


def file_extension(filename: str) -> str | None:
    """Lower-cased extension without the dot, or None."""
    suffix = PurePosixPath(filename).suffix
    return suffix[1:].lower() if len(suffix) > 1 else None


def title_from_filename(filename: str) -> str:
    """Default document title: the name without extension, '_' and '-' as spaces."""
    name = PurePosixPath(filename).name
    stem = name[: name.rfind(".")] if "." in name[1:] else name
    return (stem or name).replace("_", " ").replace("-", " ").strip()


def build_object_path(member_id: str, filename: str, now: datetime | None = None) -> str:
    """Object path ``<member_id>/<epoch_millis>.<ext>`` for a new upload."""
    now = now or datetime.now(timezone.utc)
    ext = file_extension(filename) or "jpg"
    millis = (now - _EPOCH) // timedelta(milliseconds=1)
    return f"{member_id}/{millis}.{ext}"


class DocumentStorage:
    """Upload, download, remove and sign objects in one bucket."""

    def __init__(
        self,
        root: Path | str,
        public_base_url: str,
        signing_secret: str,
        bucket: str = DOCUMENTS_BUCKET,
    ):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")
        self.bucket = bucket
        self._secret = signing_secret.encode("utf-8")

    def _resolve(self, path: str) -> Path:
        parts = PurePosixPath(path).parts
        if not parts or PurePosixPath(path).is_absolute() or ".." in parts:
            raise StorageError(f"Invalid object path: {path!r}")
        return self.root / self.bucket / Path(*parts)

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: str | None = None,
        upsert: bool = False,
    ) -> str:
        """Write an object.

        Raises:
            StorageError: If the object exists and ``upsert`` is False, or the
                write fails.
        """
        target = self._resolve(path)
        if target.exists() and not upsert:
            raise StorageError(f"Object already exists: {path}")

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

        logger.info("Stored %s (%d bytes, %s)", path, len(data), content_type or "unknown type")
        return path

    async def download(self, path: str) -> bytes:
        target = self._resolve(path)
        try:
            return await asyncio.to_thread(target.read_bytes)
        except FileNotFoundError as e:
            raise StorageError(f"Object not found: {path}") from e
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    async def remove(self, paths: list[str]) -> None:
        """Delete objects; missing ones are ignored."""
        for path in paths:
            target = self._resolve(path)
            try:
                await asyncio.to_thread(target.unlink, True)
            except OSError as e:
                raise StorageError(f"Failed to remove {path}: {e}") from e

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def allocate_path(self, member_id: str, filename: str, now: datetime | None = None) -> str:
        """New object path for an upload, moving to the next free millisecond
        if another upload already took this one."""
        now = now or datetime.now(timezone.utc)
        path = build_object_path(member_id, filename, now)
        while self.exists(path):
            now += timedelta(milliseconds=1)
            path = build_object_path(member_id, filename, now)
        return path

    def get_public_url(self, path: str) -> str:
        return f"{self.public_base_url}/storage/{self.bucket}/{quote(path)}"

    def path_from_url(self, url: str) -> str | None:
        """Recover the object path from a public or signed URL."""
        marker = f"/{self.bucket}/"
        if marker not in url:
            return None
        return url.split(marker, 1)[1].split("?", 1)[0]

    def _sign(self, path: str, expires: int) -> str:
        message = f"{self.bucket}/{path}:{expires}".encode("utf-8")
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    def create_signed_url(self, path: str, expires_in: int, now: float | None = None) -> tuple[str, int]:
        """Time-limited URL for reading an object.

        Returns:
            The URL and its expiry as a Unix timestamp.
        """
        expires = int(now if now is not None else time.time()) + expires_in
        query = urlencode({"expires": expires, "signature": self._sign(path, expires)})
        return f"{self.get_public_url(path)}?{query}", expires

    def verify_signature(self, path: str, expires: int, signature: str, now: float | None = None) -> bool:
        if expires < int(now if now is not None else time.time()):
            return False
        return hmac.compare_digest(self._sign(path, expires), signature)


@lru_cache
def get_storage() -> DocumentStorage:
    """FastAPI dependency returning the configured bucket."""
    return DocumentStorage(
        root=settings.storage_root,
        public_base_url=settings.public_base_url,
        signing_secret=settings.storage_signing_secret,
    )
