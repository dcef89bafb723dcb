"""Shared data type definitions (LocalFile, FilePart, ProgressRecord, UploadSession)."""

import os
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from common.constants import STREAM_CHUNK_SIZE_BYTES
from common.exceptions import PlanningError, TransferError


class PartState(str, Enum):
    """Transmission state of a single part."""

    PENDING = "pending"
    IN_FLIGHT = "in-flight"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class LocalFile:
    """
    Handle to a local file selected for upload.

    Attributes:
        path: Location of the file on disk
        name: Raw name as given by the caller (may carry directory decorations)
        size: Size in bytes
    """
    path: Path
    name: str
    size: int

    @classmethod
    def from_path(cls, path, name: Optional[str] = None) -> 'LocalFile':
        """
        Build a LocalFile by stat-ing a path on disk.

        Raises:
            PlanningError: If the path is missing or not a regular file
        """
        file_path = Path(path)
        if not file_path.exists():
            raise PlanningError(f"File not found: {path}")
        if not file_path.is_file():
            raise PlanningError(f"Not a file: {path}")
        return cls(
            path=file_path,
            name=name if name is not None else str(path),
            size=os.path.getsize(file_path),
        )


@dataclass(frozen=True)
class FilePart:
    """
    One byte range of a file, the unit of upload and progress tracking.

    The range is [upload_offset, upload_length): upload_length is the
    exclusive end byte, used both for slicing the payload and as the
    metadata sent to the server.
    """
    file_name: str
    part_number: int
    upload_offset: int
    upload_length: int
    source: Path

    @property
    def payload_size(self) -> int:
        return self.upload_length - self.upload_offset

    def read_payload(self) -> bytes:
        """Read the whole payload of this part from disk."""
        return b"".join(self.iter_payload())

    def iter_payload(self, chunk_size: int = STREAM_CHUNK_SIZE_BYTES) -> Iterator[bytes]:
        """Yield the payload in chunks of at most chunk_size bytes."""
        remaining = self.payload_size
        with open(self.source, 'rb') as f:
            f.seek(self.upload_offset)
            while remaining > 0:
                chunk = f.read(min(chunk_size, remaining))
                if not chunk:
                    break
                remaining -= len(chunk)
                yield chunk


@dataclass
class ProgressRecord:
    """Latest progress report for one part."""
    part_number: int
    progress: int = 0
    speed: int = 0


@dataclass
class UploadSession:
    """
    In-memory record of a selected file, its planned parts and their progress.

    Replaced wholesale on every new file selection.
    """
    file: LocalFile
    parts: List[FilePart]
    progress_data: Dict[int, ProgressRecord] = field(default_factory=dict)
    part_states: Dict[int, PartState] = field(default_factory=dict)
    skipped_parts: Tuple[int, ...] = ()
    file_dir: Optional[str] = None
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    @property
    def pending_parts(self) -> List[FilePart]:
        """Parts not yet stored remotely (anything not completed or skipped)."""
        done = (PartState.COMPLETED, PartState.SKIPPED)
        return [p for p in self.parts if self.part_states.get(p.part_number) not in done]


@dataclass(frozen=True)
class UploadReport:
    """Outcome of one upload trigger."""
    completed: Tuple[int, ...]
    failed: Dict[int, TransferError]
    elapsed_seconds: float

    @property
    def success(self) -> bool:
        return not self.failed
