"""Bucketed file storage on the local filesystem."""

import os
import uuid
from pathlib import Path
from typing import BinaryIO

from loguru import logger

from src.muslimhunt.runtime.config.config_data import StorageConfig
from src.muslimhunt.runtime.context import get_config

CHUNK_SIZE = 64 * 1024


class StorageError(ValueError):
    pass


class UploadTooLarge(StorageError):
    pass


class FileStorageService:
    def __init__(self, storage_config: StorageConfig | None = None):
        self._config = storage_config or get_config().storage
        self._root = Path(self._config.root)

    @property
    def root(self) -> Path:
        return self._root

    def ensure_buckets(self) -> None:
        for bucket in self._config.buckets:
            (self._root / bucket).mkdir(parents=True, exist_ok=True)

    def _resolve(self, bucket: str, path: str) -> Path:
        if bucket not in self._config.buckets:
            raise StorageError(f"Unknown bucket: {bucket}")
        bucket_dir = (self._root / bucket).resolve()
        target = (bucket_dir / path).resolve()
        if bucket_dir not in target.parents:
            raise StorageError(f"Invalid object path: {path}")
        return target

    def upload(self, bucket: str, path: str, fileobj: BinaryIO, max_bytes: int | None = None) -> str:
        """Copy ``fileobj`` to ``bucket/path`` and return the stored path.

        Raises:
            UploadTooLarge: When the content exceeds ``max_bytes``
            StorageError: For an unknown bucket or a path escaping the bucket
        """
        limit = max_bytes or self._config.max_upload_bytes
        target = self._resolve(bucket, path)
        target.parent.mkdir(parents=True, exist_ok=True)

        written = 0
        with open(target, "wb") as buffer:
            while chunk := fileobj.read(CHUNK_SIZE):
                written += len(chunk)
                if written > limit:
                    break
                buffer.write(chunk)

        if written > limit:
            os.remove(target)
            raise UploadTooLarge(f"File exceeds {limit} bytes")

        logger.info("Stored {} bytes at {}/{}", written, bucket, path)
        return path

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self._config.public_base_url.rstrip('/')}/{bucket}/{path}"

    def extension_allowed(self, filename: str | None) -> bool:
        return file_extension(filename) in self._config.allowed_extensions


def file_extension(filename: str | None) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def avatar_object_path(user_id: str, filename: str | None) -> str:
    """``{user_id}-{random}.{ext}``, the layout of the avatars bucket."""
    return f"{user_id}-{uuid.uuid4().hex[:12]}.{file_extension(filename) or 'png'}"
