"""Blob storage for item photos.

put_bytes(path, data, content_type) uploads and resolves to a download URL.
"""
from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from threading import Lock
from urllib.parse import quote
from uuid import uuid4

from firebase_admin import storage

from grocery.infra.paths import join
from grocery.infra.Remote_Store import completed, failed
from grocery.utilities.constants import IMAGE_CONTENT_TYPE
from grocery.utilities.errors import BlobStoreError

logger = logging.getLogger(__name__)

DOWNLOAD_URL = "https://firebasestorage.googleapis.com/v0/b/{bucket}/o/{path}?alt=media&token={token}"


class BlobStore(ABC):
    @abstractmethod
    def put_bytes(self, path: str, data: bytes, content_type: str = IMAGE_CONTENT_TYPE) -> Future:
        """Upload data; the future resolves to the blob's download URL."""

    def put_file(self, path: str, file_path: str, content_type: str = IMAGE_CONTENT_TYPE) -> Future:
        try:
            with open(file_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            return failed(BlobStoreError(f"cannot read {file_path}: {e}"))
        return self.put_bytes(path, data, content_type)

    def close(self) -> None:
        pass


class InMemoryBlobStore(BlobStore):
    def __init__(self, base_url: str = "memory://blobs/"):
        self.base_url = base_url
        self._blobs: dict[str, tuple[bytes, str]] = {}
        self._lock = Lock()

    def put_bytes(self, path: str, data: bytes, content_type: str = IMAGE_CONTENT_TYPE) -> Future:
        if not data:
            return failed(BlobStoreError("empty upload"))
        path = join(path)
        with self._lock:
            self._blobs[path] = (bytes(data), content_type)
        logger.debug("stored blob %s (%d bytes)", path, len(data))
        return completed(self.base_url + path)

    def get(self, path: str):
        with self._lock:
            return self._blobs.get(join(path))

    def __len__(self) -> int:
        with self._lock:
            return len(self._blobs)


class FirebaseBlobStore(BlobStore):
    """Firebase Storage; URLs carry a download token like the client SDKs hand out."""

    def __init__(self, app=None, bucket_name: str | None = None, workers: int = 2):
        self._bucket = storage.bucket(bucket_name, app=app)
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="grocery-blobs")

    def _upload(self, path: str, data: bytes, content_type: str) -> str:
        blob = self._bucket.blob(path)
        token = str(uuid4())
        blob.metadata = {"firebaseStorageDownloadTokens": token}
        try:
            blob.upload_from_string(data, content_type=content_type)
        except Exception as e:  # google-cloud-storage raises api_core errors, not FirebaseError
            raise BlobStoreError(str(e)) from e
        logger.info("Uploaded %s (%d bytes)", path, len(data))
        return DOWNLOAD_URL.format(bucket=self._bucket.name, path=quote(path, safe=''), token=token)

    def put_bytes(self, path: str, data: bytes, content_type: str = IMAGE_CONTENT_TYPE) -> Future:
        if not data:
            return failed(BlobStoreError("empty upload"))
        return self._executor.submit(self._upload, join(path), data, content_type)

    def close(self) -> None:
        self._executor.shutdown(wait=False)


__all__ = ['BlobStore', 'InMemoryBlobStore', 'FirebaseBlobStore']
