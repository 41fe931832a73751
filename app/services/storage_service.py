# app/services/storage_service.py
"""Attachment uploads.

An incoming file is written to a staging file under ``UPLOAD_DIR``, pushed to
the object store and the staging file is removed again, whatever happened to
the upload. Callers only ever see the permanent URL or a ``StorageError``.

Replacing an attachment does not delete the previous remote object.
"""

import enum
import logging
import os
import time
import uuid
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator

import cloudinary.uploader
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from app.core.config import Settings
from app.core.exceptions import StorageError

CHUNK_SIZE = 1024 * 1024


class AttachmentCategory(str, enum.Enum):
    PHOTO = "photo"
    LICENSE = "license"

    @property
    def folder(self) -> str:
        return CATEGORY_FOLDERS[self]


CATEGORY_FOLDERS = {
    AttachmentCategory.PHOTO: "driving_school/photos",
    AttachmentCategory.LICENSE: "driving_school/licenses",
}


class ObjectStorage(ABC):
    """Object store returning a permanent URL for every uploaded file."""

    @abstractmethod
    async def upload(self, path: str, folder: str) -> str:
        ...


class CloudinaryStorage(ObjectStorage):

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, timeout: float):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "CloudinaryStorage":
        return cls(
            cloud_name=settings.CLOUD_NAME,
            api_key=settings.CLOUD_API_KEY,
            api_secret=settings.CLOUD_API_SECRET,
            timeout=settings.STORAGE_TIMEOUT_SECONDS,
        )

    async def upload(self, path: str, folder: str) -> str:
        try:
            # the SDK is blocking
            result = await run_in_threadpool(
                cloudinary.uploader.upload,
                path,
                folder=folder,
                resource_type="auto",
                cloud_name=self.cloud_name,
                api_key=self.api_key,
                api_secret=self.api_secret,
                timeout=self.timeout,
            )
        except Exception as e:
            logging.error(f"Upload to {folder} failed: {e!r}")
            raise StorageError() from e

        url = result.get("secure_url") if isinstance(result, dict) else None
        if not url:
            logging.error(f"Upload to {folder} returned no secure_url")
            raise StorageError()
        return url


def staging_path(directory: str, filename: str | None) -> str:
    safe_name = os.path.basename(filename or "") or "upload"
    return os.path.join(directory, f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{safe_name}")


@asynccontextmanager
async def staging_file(upload: UploadFile, directory: str) -> AsyncIterator[str]:
    """Copy ``upload`` to a local file for the duration of the block."""
    os.makedirs(directory, exist_ok=True)
    path = staging_path(directory, upload.filename)
    try:
        with open(path, "wb") as out:
            while chunk := await upload.read(CHUNK_SIZE):
                out.write(chunk)
        yield path
    finally:
        if os.path.exists(path):
            os.remove(path)


class AttachmentUploader:

    def __init__(self, storage: ObjectStorage, staging_dir: str):
        self.storage = storage
        self.staging_dir = staging_dir

    async def upload(self, upload: UploadFile, category: AttachmentCategory) -> str:
        try:
            async with staging_file(upload, self.staging_dir) as path:
                url = await self.storage.upload(path, category.folder)
        except OSError as e:
            logging.error(f"Could not stage {category.value} upload: {e!r}")
            raise StorageError() from e
        logging.info(f"Uploaded {category.value} to {category.folder}")
        return url
