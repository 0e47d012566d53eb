# User value: This file rejects unsupported or oversized uploads early and always cleans up temporary copies of user files.
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from typing import BinaryIO, Iterator

from config import Settings

logger = logging.getLogger("api.upload")


class UploadRejected(Exception):
    """Upload refused before processing. ``message`` is safe to show to the caller."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedFileType(UploadRejected):
    pass


class UploadTooLarge(UploadRejected):
    status_code = 413


def file_extension(filename: str | None) -> str:
    return os.path.splitext(str(filename or "").strip().lower())[1]


def get_upload_size_bytes(file_obj: BinaryIO) -> int:
    pos = file_obj.tell()
    file_obj.seek(0, os.SEEK_END)
    size = file_obj.tell()
    file_obj.seek(pos, os.SEEK_SET)
    return int(size)


# User value: blocks file types the service cannot read before any work is done on them.
def ensure_extension_allowed(filename: str | None, settings: Settings) -> str:
    ext = file_extension(filename)
    if ext not in settings.allowed_extensions:
        raise UnsupportedFileType(f"File extension not allowed: {filename}")
    return ext


# User value: blocks uploads above the size ceiling so one large file cannot stall the service.
def ensure_size_allowed(size_bytes: int, settings: Settings) -> None:
    if size_bytes > settings.max_upload_size_bytes:
        raise UploadTooLarge(f"File exceeds max {settings.max_upload_size_mb} MB")


@contextmanager
def materialized_upload(file_obj: BinaryIO, *, suffix: str, directory: str) -> Iterator[str]:
    """Copy an uploaded stream to a temporary file and yield its path.

    The file is removed on every exit path. A failed removal is logged, never raised.
    """
    fd, path = tempfile.mkstemp(suffix=suffix, prefix="upload-", dir=directory)
    try:
        with os.fdopen(fd, "wb") as out:
            file_obj.seek(0)
            shutil.copyfileobj(file_obj, out)
        yield path
    finally:
        try:
            os.remove(path)
        except OSError as exc:
            logger.error("upload_temp_delete_failed path=%s error=%s", path, exc)
