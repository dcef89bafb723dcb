"""Single-part transmission with live progress reporting."""

from typing import Optional

import httpx

from common.exceptions import TransferError
from common.logging_config import get_logger
from common.types import FilePart, PartState
from uploader.progress import ProgressAggregator, compute_progress, compute_speed
from uploader.storage_client import StorageClient
from uploader.store import SessionStore

logger = get_logger(__name__)


class PartTransmitter:
    """
    Sends one part to the storage service.

    Drives the part through IN_FLIGHT to COMPLETED or FAILED in the store,
    based on the transport's outcome rather than on the last progress
    report. No retries are attempted.
    """

    def __init__(self, client: StorageClient, store: SessionStore, aggregator: ProgressAggregator):
        self.client = client
        self.store = store
        self.aggregator = aggregator

    async def send(
        self,
        part: FilePart,
        session_start: float,
        session_id: Optional[str] = None
    ) -> httpx.Response:
        """
        Upload a part and report progress as bytes are handed to the transport.

        Args:
            part: Part to upload
            session_start: time.monotonic() value captured when the upload was triggered
            session_id: Session the part belongs to; store writes for a replaced session are dropped

        Returns:
            The service's success response

        Raises:
            TransferError: On transport failure or non-success status
        """
        part_number = part.part_number

        def on_progress(bytes_sent: int) -> None:
            self.aggregator.on_update(
                part_number,
                compute_progress(bytes_sent, part.payload_size),
                compute_speed(bytes_sent, session_start),
                session_id=session_id,
            )

        self.store.set_part_state(part_number, PartState.IN_FLIGHT, session_id=session_id)
        if part.payload_size == 0:
            on_progress(0)

        try:
            response = await self.client.upload_part(part, on_progress=on_progress)
        except httpx.HTTPError as e:
            self.store.set_part_state(part_number, PartState.FAILED, session_id=session_id)
            logger.error(f"Upload of part {part_number} failed: {type(e).__name__}: {e}")
            raise TransferError(part_number, f"{type(e).__name__}: {e}") from e
        except OSError as e:
            self.store.set_part_state(part_number, PartState.FAILED, session_id=session_id)
            logger.error(f"Reading part {part_number} from {part.source} failed: {e}")
            raise TransferError(part_number, f"Cannot read payload: {e}") from e

        if not response.is_success:
            self.store.set_part_state(part_number, PartState.FAILED, session_id=session_id)
            logger.warning(f"Upload of part {part_number} rejected status={response.status_code}")
            raise TransferError(
                part_number,
                f"Server returned status {response.status_code}",
                status_code=response.status_code
            )

        self.store.set_part_state(part_number, PartState.COMPLETED, session_id=session_id)
        logger.debug(f"Part {part_number} uploaded [{part.payload_size} bytes]")
        return response
