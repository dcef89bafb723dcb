"""Async HTTP client for the remote part-storage service."""

import asyncio
import uuid
from typing import AsyncIterator, Callable, Iterable, Optional

import httpx

from common.constants import (
    DEFAULT_USER_NAME,
    HEADER_FILE_NAME,
    HEADER_PART_NUMBER,
    HEADER_PART_NUMBERS,
    HEADER_REQUEST_ID,
    HEADER_UPLOAD_LENGTH,
    HEADER_UPLOAD_OFFSET,
    HEADER_USER_NAME,
    UPLOAD_BASE_TIMEOUT_SECONDS,
    UPLOAD_TIMEOUT_PER_MB_SECONDS,
)
from common.logging_config import get_logger
from common.types import FilePart

logger = get_logger(__name__)

ProgressCallback = Callable[[int], None]


def format_part_numbers(part_numbers: Iterable[int]) -> str:
    """Serialize part numbers into the comma-separated header form."""
    return ','.join(str(n) for n in part_numbers)


def parse_part_numbers(value: Optional[str]) -> list[int]:
    """
    Parse a comma-separated part number header.

    Blank entries are ignored; a missing header yields an empty list.
    """
    if not value:
        return []
    return sorted({int(token) for token in value.split(',') if token.strip()})


class StorageClient:
    """HTTP client for the storage service's existence, create and part-upload endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = UPLOAD_BASE_TIMEOUT_SECONDS,
        user_name: str = DEFAULT_USER_NAME
    ):
        """
        Initialize storage client.

        Args:
            base_url: Service base URL (e.g., "http://localhost:8080")
            timeout: Default request timeout in seconds
            user_name: Uploader identity sent with every part
        """
        self.base_url = base_url
        self.user_name = user_name
        self.session = httpx.AsyncClient(base_url=base_url, timeout=timeout)
        logger.info(f"Initialized StorageClient [base_url={base_url}]")

    def _calculate_upload_timeout(self, payload_size: int) -> float:
        """
        Calculate timeout for a part upload based on its size.

        Args:
            payload_size: Part size in bytes

        Returns:
            Timeout in seconds (30s base + 0.1s per MB)
        """
        size_mb = payload_size / (1024 * 1024)
        return UPLOAD_BASE_TIMEOUT_SECONDS + size_mb * UPLOAD_TIMEOUT_PER_MB_SECONDS

    async def _request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """
        Send a single request, tagging it with a fresh request id.

        No retries are attempted; transport errors propagate as httpx exceptions.
        """
        request_id = str(uuid.uuid4())
        headers = kwargs.setdefault('headers', {})
        headers[HEADER_REQUEST_ID] = request_id

        logger.debug(f"Making request: {method} {endpoint} [request_id={request_id}]")
        response = await self.session.request(method, endpoint, **kwargs)
        logger.debug(
            f"Response received: {method} {endpoint} status={response.status_code} [request_id={request_id}]"
        )
        return response

    async def check_file(self, file_name: str, part_numbers: Iterable[int]) -> httpx.Response:
        """
        Ask the service whether a file record exists.

        Args:
            file_name: Normalized file name
            part_numbers: Every planned part number for the file

        Returns:
            Raw HEAD response
        """
        return await self._request(
            'HEAD',
            '/',
            headers={
                HEADER_FILE_NAME: file_name,
                HEADER_PART_NUMBERS: format_part_numbers(part_numbers),
            }
        )

    async def create_file(self, file_name: str) -> httpx.Response:
        """
        Create the upload directory for a file.

        Args:
            file_name: Normalized file name

        Returns:
            Raw POST response (carries the 'filedir' header on success)
        """
        return await self._request('POST', '/', headers={HEADER_FILE_NAME: file_name})

    async def upload_part(
        self,
        part: FilePart,
        on_progress: Optional[ProgressCallback] = None
    ) -> httpx.Response:
        """
        Upload one part, streaming its payload from disk.

        Args:
            part: Part to send
            on_progress: Called with the cumulative bytes handed to the transport

        Returns:
            Raw PATCH response
        """
        async def payload_stream() -> AsyncIterator[bytes]:
            chunks = part.iter_payload()
            sent = 0
            try:
                while True:
                    # Disk reads off the event loop
                    chunk = await asyncio.to_thread(next, chunks, None)
                    if chunk is None:
                        break
                    sent += len(chunk)
                    if on_progress is not None:
                        on_progress(sent)
                    yield chunk
            finally:
                chunks.close()

        headers = {
            'Content-Type': 'text/plain',
            'Content-Length': str(part.payload_size),
            HEADER_FILE_NAME: part.file_name,
            HEADER_PART_NUMBER: str(part.part_number),
            HEADER_UPLOAD_OFFSET: str(part.upload_offset),
            HEADER_UPLOAD_LENGTH: str(part.upload_length),
            HEADER_USER_NAME: self.user_name,
        }

        return await self._request(
            'PATCH',
            f'/{part.file_name}',
            content=payload_stream(),
            headers=headers,
            timeout=self._calculate_upload_timeout(part.payload_size)
        )

    async def close(self) -> None:
        """Close the HTTP session."""
        await self.session.aclose()

    async def __aenter__(self) -> 'StorageClient':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
