"""Wires planning, the existence check and bounded concurrent part transmission."""

import asyncio
import time
from typing import Optional

from common.constants import DEFAULT_MAX_CONCURRENCY, DEFAULT_PART_SIZE_BYTES
from common.exceptions import TransferError, UploadError
from common.logging_config import get_logger
from common.types import FilePart, LocalFile, UploadReport, UploadSession
from uploader.planner import normalize_file_name, plan_parts
from uploader.precheck import ResumePrechecker
from uploader.progress import ProgressAggregator
from uploader.storage_client import StorageClient
from uploader.store import SessionStore
from uploader.transmitter import PartTransmitter

logger = get_logger(__name__)


class UploadOrchestrator:
    """
    Runs file selection and upload triggers against one storage service.

    Selection plans the parts and commits them through the prechecker.
    An upload trigger sends every outstanding part once, with at most
    max_concurrency transmissions in flight.
    """

    def __init__(
        self,
        client: StorageClient,
        store: SessionStore,
        part_size: int = DEFAULT_PART_SIZE_BYTES,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    ):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")
        self.store = store
        self.part_size = part_size
        self.max_concurrency = max_concurrency
        self.prechecker = ResumePrechecker(client, store)
        self.transmitter = PartTransmitter(client, store, ProgressAggregator(store))

    async def select_file(self, file: LocalFile) -> UploadSession:
        """
        Plan a file's parts and prepare the remote session.

        Raises:
            PlanningError: If the file cannot be partitioned
            PrecheckError: If the existence check fails
            SessionCreateError: If the remote directory cannot be created
        """
        file_name = normalize_file_name(file.name)
        parts = plan_parts(file, self.part_size)
        logger.info(f"Selected {file_name}: {file.size} bytes in {len(parts)} part(s)")
        return await self.prechecker.prepare(file, file_name, parts)

    async def start_upload(self, session: Optional[UploadSession] = None) -> UploadReport:
        """
        Transmit every outstanding part of the session.

        Failed parts do not stop the others; their errors are collected
        in the returned report.

        Args:
            session: Session to upload (defaults to the store's active session)

        Returns:
            UploadReport with completed and failed part numbers

        Raises:
            UploadError: If no file has been selected
        """
        if session is None:
            session = self.store.get_state()
        if session is None:
            raise UploadError("No file selected")

        parts = session.pending_parts
        session_start = time.monotonic()
        semaphore = asyncio.Semaphore(self.max_concurrency)

        logger.info(
            f"Uploading {len(parts)} part(s) of {session.file.name} "
            f"[max_concurrency={self.max_concurrency}]"
        )

        async def send_bounded(part: FilePart):
            async with semaphore:
                return await self.transmitter.send(part, session_start, session_id=session.session_id)

        results = await asyncio.gather(
            *(send_bounded(part) for part in parts),
            return_exceptions=True
        )

        completed = []
        failed = {}
        for part, result in zip(parts, results):
            if isinstance(result, TransferError):
                failed[part.part_number] = result
            elif isinstance(result, BaseException):
                raise result
            else:
                completed.append(part.part_number)

        elapsed = time.monotonic() - session_start
        logger.info(
            f"Upload finished: {len(completed)}/{len(parts)} part(s) succeeded in {elapsed:.2f}s"
        )
        return UploadReport(
            completed=tuple(completed),
            failed=failed,
            elapsed_seconds=elapsed,
        )
