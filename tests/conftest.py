"""Pytest bootstrap for project imports and shared fixtures."""

from pathlib import Path
import sys

import pytest

# Ensure project root is on sys.path so `import ecovive` works
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ecovive import models  # noqa: F401  registers every table on Base.metadata
from ecovive.database import Base
from ecovive.storage.blob_store import BlobStore, StoredBlob
from ecovive.services.errors import StorageError


@pytest.fixture
def db_session():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


class FakeBlobStore(BlobStore):
    """In-memory photo store that records uploads and deletions."""

    def __init__(self, fail_uploads: bool = False):
        self.fail_uploads = fail_uploads
        self.blobs = {}
        self.deleted = []
        self._counter = 0

    def upload(self, data, content_type, filename):
        if self.fail_uploads:
            raise StorageError("blob store unavailable")
        self._counter += 1
        stored_name = f"blob-{self._counter}.jpg"
        self.blobs[stored_name] = data
        return StoredBlob(url=f"/uploads/{stored_name}", size=len(data), filename=stored_name)

    def delete(self, filename):
        self.deleted.append(filename)
        return self.blobs.pop(filename, None) is not None


@pytest.fixture
def blob_store():
    return FakeBlobStore()
