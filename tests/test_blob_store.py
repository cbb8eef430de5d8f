from __future__ import annotations

import pytest

from ecovive.services.errors import StorageError, ValidationError
from ecovive.storage.blob_store import LocalBlobStore


def test_upload_and_delete(tmp_path):
    store = LocalBlobStore(tmp_path / "uploads", "/uploads/", max_bytes=1024)
    stored = store.upload(b"png-bytes", "image/png", "river.PNG")

    assert stored.filename.endswith(".png")
    assert stored.url == f"/uploads/{stored.filename}"
    assert stored.size == len(b"png-bytes")
    assert (tmp_path / "uploads" / stored.filename).read_bytes() == b"png-bytes"

    assert store.delete(stored.filename) is True
    assert store.delete(stored.filename) is False


def test_unknown_extension_is_dropped(tmp_path):
    store = LocalBlobStore(tmp_path, "/uploads")
    stored = store.upload(b"data", "image/jpeg", "../../etc/passwd")
    assert "." not in stored.filename
    assert (tmp_path / stored.filename).exists()


@pytest.mark.parametrize(
    "data, content_type",
    [
        (b"", "image/png"),
        (b"text", "text/plain"),
        (b"x" * 11, "image/png"),
    ],
)
def test_upload_validation(tmp_path, data, content_type):
    store = LocalBlobStore(tmp_path, "/uploads", max_bytes=10)
    with pytest.raises(ValidationError):
        store.upload(data, content_type, "photo.png")
    assert list(tmp_path.iterdir()) == []


def test_write_failure_is_storage_error(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way")
    store = LocalBlobStore(blocker, "/uploads")
    with pytest.raises(StorageError):
        store.upload(b"data", "image/png", "photo.png")
