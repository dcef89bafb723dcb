"""Resumable chunked upload core."""

from uploader.orchestrator import UploadOrchestrator
from uploader.storage_client import StorageClient
from uploader.store import SessionStore

__all__ = [
    "SessionStore",
    "StorageClient",
    "UploadOrchestrator",
]
