from .blob_store import BlobStore, LocalBlobStore, PhotoUpload, StoredBlob, get_blob_store

__all__ = ["BlobStore", "LocalBlobStore", "PhotoUpload", "StoredBlob", "get_blob_store"]
