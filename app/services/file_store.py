import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict

import cloudinary
import cloudinary.uploader

from app.core.config import settings


class FileStore(ABC):
    @abstractmethod
    def store(self, data: bytes, filename: str) -> str:
        """Persist the bytes and return the URL they are served from."""

    @abstractmethod
    def discard(self, url: str) -> None:
        """Remove a file stored earlier by this store."""


class LocalFileStore(FileStore):
    def __init__(self, directory: str, url_prefix: str = "/uploads"):
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")

    def store(self, data: bytes, filename: str) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        safe_name = Path(filename or "upload").name.replace(" ", "_")
        file_id = f"{int(time.time() * 1000)}-{safe_name}"
        target = self.directory / file_id
        counter = 1
        while target.exists():
            target = self.directory / f"{counter}-{file_id}"
            counter += 1
        target.write_bytes(data)
        return f"{self.url_prefix}/{target.name}"

    def discard(self, url: str) -> None:
        target = self.directory / Path(url).name
        target.unlink(missing_ok=True)


class CloudinaryFileStore(FileStore):
    def __init__(self):
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
        )
        self._stored: Dict[str, tuple] = {}

    def store(self, data: bytes, filename: str) -> str:
        result = cloudinary.uploader.upload(data, resource_type="auto", use_filename=True, filename_override=filename)
        self._stored[result["secure_url"]] = (result["public_id"], result.get("resource_type", "image"))
        return result["secure_url"]

    def discard(self, url: str) -> None:
        public_id, resource_type = self._stored.pop(url)
        cloudinary.uploader.destroy(public_id, resource_type=resource_type)


def get_file_store() -> FileStore:
    if settings.FILE_STORE_BACKEND == "cloudinary":
        return CloudinaryFileStore()
    return LocalFileStore(settings.UPLOADS_DIR, settings.UPLOADS_URL_PREFIX)
