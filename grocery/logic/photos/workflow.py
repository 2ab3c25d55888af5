"""Photo-attach workflow: capture an image, upload it, then create the item.

    IDLE -> PERMISSION_REQUESTED -> CAPTURE_PENDING -> CAPTURED -> UPLOADING -> UPLOADED_AND_SAVED

A denied permission, a cancelled capture, a missing item name or a failed
upload sends the workflow back to IDLE with a notice. While a capture is
pending a temporary file is reserved for the camera to write into; the capture
may instead hand over the image bytes directly. Every upload goes to a fresh
UUID-named blob, and the resulting download URL is saved through the mutation
gateway. There is no automatic retry.
"""
from __future__ import annotations
import logging
import os
import tempfile
from concurrent.futures import Future
from enum import Enum
from threading import Event, Lock
from typing import Optional

from grocery.events.Event_Bus import EventBus
from grocery.events.event_helpers import publish_notice
from grocery.infra import paths
from grocery.infra.Blob_Store import BlobStore
from grocery.logic.mutations.gateway import MutationGateway, MutationTicket
from grocery.utilities.constants import (
    IMAGE_CONTENT_TYPE, IMAGE_SUFFIX, NOTICE_CAMERA_DENIED, NOTICE_CAPTURE_CANCELLED,
    NOTICE_LOGIN_REQUIRED, NOTICE_PHOTO_NAME_REQUIRED, NOTICE_UPLOAD_FAILED,
)
from grocery.utilities.validators import clean_name

logger = logging.getLogger(__name__)


class PhotoState(Enum):
    IDLE = "idle"
    PERMISSION_REQUESTED = "permission_requested"
    CAPTURE_PENDING = "capture_pending"
    CAPTURED = "captured"
    UPLOADING = "uploading"
    UPLOADED_AND_SAVED = "uploaded_and_saved"


class WorkflowStateError(RuntimeError):
    """A step was called in a state that does not accept it."""


class PhotoAttachWorkflow:
    def __init__(self, gateway: MutationGateway, blob_store: BlobStore, list_id: str,
                 bus: Optional[EventBus] = None):
        self.gateway = gateway
        self.blob_store = blob_store
        self.list_id = list_id
        self.bus = bus if bus is not None else gateway.bus
        self.state = PhotoState.IDLE
        self.capture_path: Optional[str] = None
        self.upload_future: Optional[Future] = None
        self.ticket: Optional[MutationTicket] = None
        self.last_error: Optional[str] = None
        self._disposed = False
        self._attempt = 0
        self._lock = Lock()
        self._settled = Event()

    # --- helpers ------------------------------------------------------------
    def _user(self) -> Optional[str]:
        return self.gateway.auth.current_user_id()

    def _notify(self, message: str, level: str = "error"):
        if not self._disposed:
            publish_notice(self._user(), message, level, bus=self.bus)

    def _expect(self, *states: PhotoState):
        if self.state not in states:
            raise WorkflowStateError(f"not allowed in state {self.state.name}")

    def _release_capture_file(self):
        path, self.capture_path = self.capture_path, None
        if path and os.path.exists(path):
            try:
                os.remove(path)
            except OSError as e:
                logger.warning("Could not remove capture file %s: %s", path, e)

    def _fail(self, message: str):
        self.last_error = message
        self._release_capture_file()
        self.state = PhotoState.IDLE
        self._notify(message)

    # --- steps --------------------------------------------------------------
    def begin(self) -> PhotoState:
        """Ask for camera permission. Allowed from IDLE or after a finished upload."""
        with self._lock:
            self._expect(PhotoState.IDLE, PhotoState.UPLOADED_AND_SAVED)
            self.last_error = None
            self.ticket = None
            self.upload_future = None
            self._attempt += 1
            self._settled.clear()
            self.state = PhotoState.PERMISSION_REQUESTED
            return self.state

    def permission_result(self, granted: bool) -> PhotoState:
        with self._lock:
            self._expect(PhotoState.PERMISSION_REQUESTED)
            if not granted:
                logger.info("Camera permission denied for list %s", self.list_id)
                self._fail(NOTICE_CAMERA_DENIED)
                return self.state
            fd, self.capture_path = tempfile.mkstemp(prefix="grocery-capture-", suffix=IMAGE_SUFFIX)
            os.close(fd)
            self.state = PhotoState.CAPTURE_PENDING
            return self.state

    def capture_result(self, ok: bool, item_name, image_bytes: Optional[bytes] = None) -> PhotoState:
        """Camera returned. Without image_bytes the reserved capture file is read."""
        with self._lock:
            self._expect(PhotoState.CAPTURE_PENDING)
            if not ok:
                self._fail(NOTICE_CAPTURE_CANCELLED)
                return self.state
            self.state = PhotoState.CAPTURED

            name = clean_name(item_name)
            if name is None:
                self._fail(NOTICE_PHOTO_NAME_REQUIRED)
                return self.state
            user_id = self._user()
            if user_id is None:
                self._fail(NOTICE_LOGIN_REQUIRED)
                return self.state

            if image_bytes is None:
                try:
                    with open(self.capture_path, 'rb') as f:
                        image_bytes = f.read()
                except (OSError, TypeError) as e:
                    self._fail(NOTICE_UPLOAD_FAILED.format(reason=e))
                    return self.state
            if not image_bytes:
                self._fail(NOTICE_CAPTURE_CANCELLED)
                return self.state

            blob_path = paths.image_blob_path(user_id, self.list_id)
            logger.info("Uploading photo for %r to %s", name, blob_path)
            self.state = PhotoState.UPLOADING
            future = self.blob_store.put_bytes(blob_path, image_bytes, IMAGE_CONTENT_TYPE)
            self.upload_future = future
            attempt = self._attempt

        # Outside the lock: in-process stores complete immediately
        future.add_done_callback(lambda fut: self._uploaded(fut, name, attempt))
        return self.state

    def _uploaded(self, future: Future, name: str, attempt: int):
        try:
            self._finish_upload(future, name, attempt)
        finally:
            if attempt == self._attempt:
                self._settled.set()

    def _finish_upload(self, future: Future, name: str, attempt: int):
        error = future.exception()
        with self._lock:
            abandoned = attempt != self._attempt
            if error is not None:
                logger.error("Photo upload for list %s failed: %s", self.list_id, error)
                if not abandoned:
                    self._fail(NOTICE_UPLOAD_FAILED.format(reason=error))
                return
            url = future.result()
        # The item is saved even after dispose() or reset()
        ticket = self.gateway.create_item(self.list_id, name, image_url=url)
        with self._lock:
            if attempt != self._attempt:
                logger.info("Upload for list %s finished after reset", self.list_id)
                return
            self.ticket = ticket
            self._release_capture_file()
            if ticket.accepted:
                self.state = PhotoState.UPLOADED_AND_SAVED
            else:
                self.last_error = ticket.notice
                self.state = PhotoState.IDLE

    def wait(self, timeout: Optional[float] = None) -> PhotoState:
        """Block until a running upload (and its item write) has settled."""
        if self.upload_future is not None:
            self._settled.wait(timeout)
        ticket = self.ticket
        if ticket is not None:
            ticket.wait(timeout)
        return self.state

    def reset(self):
        """Abandon the current attempt without a notice.

        An upload still in flight completes in the background; its item is saved
        but the workflow stays IDLE.
        """
        with self._lock:
            self._attempt += 1
            self._release_capture_file()
            self.state = PhotoState.IDLE
            self._settled.set()

    def dispose(self):
        """Teardown: later upload completions still save the item but stay silent."""
        with self._lock:
            self._disposed = True
            if self.state in (PhotoState.PERMISSION_REQUESTED, PhotoState.CAPTURE_PENDING, PhotoState.CAPTURED):
                self._release_capture_file()
                self.state = PhotoState.IDLE


__all__ = ['PhotoAttachWorkflow', 'PhotoState', 'WorkflowStateError']
