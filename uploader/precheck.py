"""Existence check against the storage service, with session creation for unknown files."""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import httpx

from common.constants import HEADER_FILE_DIR, HEADER_PART_NUMBERS
from common.exceptions import PrecheckError, SessionCreateError
from common.logging_config import get_logger
from common.types import FilePart, LocalFile, UploadSession
from uploader.storage_client import StorageClient, parse_part_numbers
from uploader.store import SessionStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class PrecheckOutcome:
    """
    Result of an existence check.

    Attributes:
        known: True if the server already has a record for the file
        existing_parts: Part numbers the server reports as stored
    """
    known: bool
    existing_parts: Tuple[int, ...] = ()


class ResumePrechecker:
    """Decides between resuming a known remote file and creating a new one."""

    def __init__(self, client: StorageClient, store: SessionStore):
        self.client = client
        self.store = store

    async def check(self, file_name: str, part_numbers: Sequence[int]) -> PrecheckOutcome:
        """
        Query the service for an existing file record.

        Args:
            file_name: Normalized file name
            part_numbers: Every planned part number

        Returns:
            PrecheckOutcome; known=False when the service answers 404

        Raises:
            PrecheckError: On transport failure, any other non-success status,
                or an unparseable part number list
        """
        try:
            response = await self.client.check_file(file_name, part_numbers)
        except httpx.HTTPError as e:
            logger.error(f"Existence check failed for {file_name}: {type(e).__name__}: {e}")
            raise PrecheckError(f"Existence check failed for {file_name}: {e}") from e

        if response.status_code == 404:
            logger.info(f"File not found on server: {file_name}")
            return PrecheckOutcome(known=False)

        if not response.is_success:
            logger.warning(f"Existence check rejected for {file_name} status={response.status_code}")
            raise PrecheckError(
                f"Existence check for {file_name} returned status {response.status_code}",
                status_code=response.status_code
            )

        try:
            stored = parse_part_numbers(response.headers.get(HEADER_PART_NUMBERS))
        except ValueError as e:
            logger.error(f"Malformed {HEADER_PART_NUMBERS} header for {file_name}: {e}")
            raise PrecheckError(
                f"Existence check for {file_name} returned malformed {HEADER_PART_NUMBERS} header",
                status_code=response.status_code
            ) from e

        planned = set(part_numbers)
        existing = tuple(n for n in stored if n in planned)
        logger.info(f"File known to server: {file_name} [{len(existing)} part(s) stored]")
        return PrecheckOutcome(known=True, existing_parts=existing)

    async def create_session(self, file_name: str) -> Optional[str]:
        """
        Create the remote upload directory for a file.

        Returns:
            Directory identifier from the 'filedir' response header, if any

        Raises:
            SessionCreateError: On transport failure or non-success status
        """
        logger.info(f"Creating directory for file, {file_name}")
        try:
            response = await self.client.create_file(file_name)
        except httpx.HTTPError as e:
            logger.error(f"Directory creation failed for {file_name}: {type(e).__name__}: {e}")
            raise SessionCreateError(f"Directory creation failed for {file_name}: {e}") from e

        if not response.is_success:
            logger.warning(f"Directory creation rejected for {file_name} status={response.status_code}")
            raise SessionCreateError(
                f"Directory creation for {file_name} returned status {response.status_code}",
                status_code=response.status_code
            )

        file_dir = response.headers.get(HEADER_FILE_DIR)
        logger.info(f"Created directory, {file_dir}")
        return file_dir

    async def prepare(self, file: LocalFile, file_name: str, parts: List[FilePart]) -> UploadSession:
        """
        Run the existence check and commit the planned parts to the store.

        Unknown files get a remote directory first. Known files are resumed:
        parts the server already holds are committed as skipped. Nothing is
        committed if either request fails.

        Raises:
            PrecheckError: If the existence check fails
            SessionCreateError: If directory creation fails
        """
        part_numbers = [part.part_number for part in parts]

        outcome = await self.check(file_name, part_numbers)

        if outcome.known:
            return self.store.add_file(file, parts, skipped_parts=outcome.existing_parts)

        file_dir = await self.create_session(file_name)
        return self.store.add_file(file, parts, file_dir=file_dir)
