"""Shared pytest fixtures for all tests."""

import httpx
import pytest

from cli.config import Config
from common.types import LocalFile
from uploader.storage_client import StorageClient
from uploader.store import SessionStore


class FakeStorageService:
    """
    In-memory stand-in for the storage service behind an httpx.MockTransport.

    Records every request and stores uploaded part bodies by part number.
    """

    def __init__(self, head_status=404, create_status=201, existing_parts=None, failing_parts=()):
        self.head_status = head_status
        self.create_status = create_status
        self.existing_parts = existing_parts
        self.failing_parts = set(failing_parts)
        self.requests = []
        self.uploaded = {}

    def calls(self, method):
        return [r for r in self.requests if r.method == method]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.method == 'HEAD':
            headers = {}
            if self.existing_parts is not None:
                headers['partNumbers'] = ','.join(str(n) for n in self.existing_parts)
            return httpx.Response(self.head_status, headers=headers)

        if request.method == 'POST':
            file_name = request.headers['fileName']
            return httpx.Response(self.create_status, headers={'filedir': f'/data/{file_name}'})

        if request.method == 'PATCH':
            part_number = int(request.headers['partNumber'])
            if part_number in self.failing_parts:
                return httpx.Response(500, json={'detail': 'disk full'})
            self.uploaded[part_number] = request.content
            return httpx.Response(204)

        return httpx.Response(405)


def make_storage_client(handler) -> StorageClient:
    """Create a StorageClient whose HTTP session is served by handler."""
    client = StorageClient('http://test', user_name='tester')
    client.session = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url='http://test',
        timeout=client.session.timeout
    )
    return client


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .chunkup directory
    """
    config_dir = tmp_path / '.chunkup'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """Config instance backed by a temporary file."""
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def make_file(tmp_path):
    """
    Factory creating a file of the given content on disk.

    Returns:
        Callable (content, name) -> LocalFile
    """
    def _make(content: bytes, name: str = 'sample.bin') -> LocalFile:
        path = tmp_path / name
        path.write_bytes(content)
        return LocalFile.from_path(path, name=str(path))
    return _make


@pytest.fixture
def sample_file(make_file):
    """Ten-byte file with distinct byte values."""
    return make_file(bytes(range(10)), 'sample.bin')


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def service():
    return FakeStorageService()


@pytest.fixture
def storage_client(service):
    return make_storage_client(service.handler)


@pytest.fixture
def client_for():
    """Factory building a StorageClient around a custom request handler."""
    return make_storage_client


@pytest.fixture
def service_factory():
    """Factory building FakeStorageService instances with custom behavior."""
    return FakeStorageService
