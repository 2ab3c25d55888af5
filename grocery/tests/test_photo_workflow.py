import os
import tempfile
import unittest
from concurrent.futures import Future
from grocery.domain.GroceryItem import GroceryItem
from grocery.events.Event_Bus import EventBus, NOTICE
from grocery.infra import paths
from grocery.infra.Auth_Provider import StaticAuth
from grocery.infra.Blob_Store import InMemoryBlobStore
from grocery.infra.Remote_Store import InMemoryRemoteStore, failed
from grocery.logic.mutations.gateway import MutationGateway
from grocery.logic.photos.workflow import PhotoAttachWorkflow, PhotoState, WorkflowStateError
from grocery.utilities.errors import BlobStoreError


class BrokenBlobStore(InMemoryBlobStore):
    def put_bytes(self, path, data, content_type="image/jpeg"):
        return failed(BlobStoreError("bucket unavailable"))


class SlowBlobStore(InMemoryBlobStore):
    """Uploads stay pending until the test resolves them."""

    def __init__(self):
        super().__init__()
        self.pending = []

    def put_bytes(self, path, data, content_type="image/jpeg"):
        future = Future()
        self.pending.append(future)
        return future


class TestPhotoAttachWorkflow(unittest.TestCase):

    def setUp(self):
        self.store = InMemoryRemoteStore()
        self.blobs = InMemoryBlobStore()
        self.bus = EventBus()
        self.notices = []
        self.bus.subscribe(NOTICE, lambda name, payload: self.notices.append(payload['message']))
        self.gateway = MutationGateway(self.store, StaticAuth("u1"), bus=self.bus)

    def workflow(self, blobs=None):
        return PhotoAttachWorkflow(self.gateway, blobs if blobs is not None else self.blobs, "L1")

    def items(self):
        return self.store.get(paths.items_path("u1", "L1")) or {}

    def test_happy_path_saves_item_with_download_url(self):
        wf = self.workflow()
        self.assertEqual(wf.begin(), PhotoState.PERMISSION_REQUESTED)
        self.assertEqual(wf.permission_result(True), PhotoState.CAPTURE_PENDING)
        wf.capture_result(True, "Tomatoes", image_bytes=b"\xff\xd8jpeg")
        self.assertEqual(wf.wait(1), PhotoState.UPLOADED_AND_SAVED)

        items = [GroceryItem.from_dict(v, k) for k, v in self.items().items()]
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].name, "Tomatoes")
        self.assertTrue(items[0].image_url.startswith("memory://blobs/users/u1/groceryLists/L1/images/"))
        self.assertTrue(items[0].image_url.endswith(".jpg"))
        self.assertIn("Item added: Tomatoes", self.notices)

    def test_capture_file_is_read_and_removed(self):
        wf = self.workflow()
        wf.begin()
        wf.permission_result(True)
        capture_path = wf.capture_path
        self.assertTrue(os.path.exists(capture_path))
        with open(capture_path, 'wb') as f:
            f.write(b"photo-bytes")
        wf.capture_result(True, "Basil")
        self.assertEqual(wf.wait(1), PhotoState.UPLOADED_AND_SAVED)
        self.assertFalse(os.path.exists(capture_path))
        self.assertEqual(len(self.blobs), 1)

    def test_every_upload_uses_a_fresh_blob(self):
        wf = self.workflow()
        for name in ("Apples", "Pears"):
            wf.begin()
            wf.permission_result(True)
            wf.capture_result(True, name, image_bytes=b"img")
            wf.wait(1)
        self.assertEqual(len(self.blobs), 2)
        urls = {v["imageUrl"] for v in self.items().values()}
        self.assertEqual(len(urls), 2)

    def test_denied_permission_leaves_collection_unchanged(self):
        wf = self.workflow()
        wf.begin()
        self.assertEqual(wf.permission_result(False), PhotoState.IDLE)
        self.assertEqual(self.items(), {})
        self.assertEqual(len(self.blobs), 0)
        self.assertEqual(self.notices, ["Camera Permission Denied"])

    def test_cancelled_capture(self):
        wf = self.workflow()
        wf.begin()
        wf.permission_result(True)
        capture_path = wf.capture_path
        self.assertEqual(wf.capture_result(False, "Milk"), PhotoState.IDLE)
        self.assertFalse(os.path.exists(capture_path))
        self.assertEqual(self.notices, ["Photo capture cancelled"])

    def test_missing_name_uploads_nothing(self):
        wf = self.workflow()
        wf.begin()
        wf.permission_result(True)
        self.assertEqual(wf.capture_result(True, "  ", image_bytes=b"img"), PhotoState.IDLE)
        self.assertEqual(len(self.blobs), 0)
        self.assertEqual(self.notices, ["Please enter an item name before taking a photo"])

    def test_upload_failure_returns_to_idle(self):
        wf = self.workflow(BrokenBlobStore())
        wf.begin()
        wf.permission_result(True)
        wf.capture_result(True, "Milk", image_bytes=b"img")
        self.assertEqual(wf.wait(1), PhotoState.IDLE)
        self.assertEqual(self.items(), {})
        self.assertEqual(self.notices, ["Image upload failed: bucket unavailable"])

    def test_steps_out_of_order_raise(self):
        wf = self.workflow()
        with self.assertRaises(WorkflowStateError):
            wf.permission_result(True)
        wf.begin()
        with self.assertRaises(WorkflowStateError):
            wf.capture_result(True, "Milk", image_bytes=b"img")

    def test_reset_while_uploading_stays_idle(self):
        blobs = SlowBlobStore()
        wf = self.workflow(blobs)
        wf.begin()
        wf.permission_result(True)
        self.assertEqual(wf.capture_result(True, "Milk", image_bytes=b"img"), PhotoState.UPLOADING)
        wf.reset()
        self.assertEqual(wf.wait(1), PhotoState.IDLE)

        blobs.pending[0].set_result("https://img/late.jpg")
        self.assertEqual(wf.state, PhotoState.IDLE)
        self.assertIsNone(wf.ticket)
        self.assertEqual([v["imageUrl"] for v in self.items().values()], ["https://img/late.jpg"])

    def test_late_upload_does_not_touch_the_next_attempt(self):
        blobs = SlowBlobStore()
        wf = self.workflow(blobs)
        wf.begin()
        wf.permission_result(True)
        wf.capture_result(True, "Milk", image_bytes=b"img")
        wf.reset()
        wf.begin()
        wf.permission_result(True)
        wf.capture_result(True, "Eggs", image_bytes=b"img")

        blobs.pending[0].set_exception(BlobStoreError("timeout"))
        self.assertEqual(wf.state, PhotoState.UPLOADING)
        self.assertEqual(self.notices, [])
        blobs.pending[1].set_result("https://img/eggs.jpg")
        self.assertEqual(wf.wait(1), PhotoState.UPLOADED_AND_SAVED)

    def test_dispose_silences_workflow_notices(self):
        wf = self.workflow()
        wf.begin()
        wf.dispose()
        self.assertEqual(wf.state, PhotoState.IDLE)
        self.assertEqual(self.notices, [])


class TestInMemoryBlobStore(unittest.TestCase):

    def test_put_file(self):
        blobs = InMemoryBlobStore()
        fd, path = tempfile.mkstemp(suffix=".jpg")
        with os.fdopen(fd, 'wb') as f:
            f.write(b"jpeg")
        try:
            url = blobs.put_file("users/u1/groceryLists/L1/images/a.jpg", path).result()
        finally:
            os.remove(path)
        self.assertEqual(url, "memory://blobs/users/u1/groceryLists/L1/images/a.jpg")
        self.assertEqual(blobs.get("users/u1/groceryLists/L1/images/a.jpg"), (b"jpeg", "image/jpeg"))

    def test_missing_file_and_empty_data_fail(self):
        blobs = InMemoryBlobStore()
        with self.assertRaises(BlobStoreError):
            blobs.put_file("x.jpg", "/nonexistent/capture.jpg").result()
        with self.assertRaises(BlobStoreError):
            blobs.put_bytes("x.jpg", b"").result()
        self.assertEqual(len(blobs), 0)


if __name__ == '__main__':
    unittest.main()
