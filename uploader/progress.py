"""Progress and throughput arithmetic, republished into the session store."""

import math
import time
from typing import Optional

from uploader.store import SessionStore


def compute_progress(bytes_sent: int, payload_size: int) -> int:
    """
    Integer percentage of a payload handed to the transport, clamped to [0, 100].

    An empty payload is complete from the start.
    """
    if payload_size <= 0:
        return 100
    progress = bytes_sent * 100 // payload_size
    return max(0, min(100, progress))


def compute_elapsed_seconds(start_time: float, now: Optional[float] = None) -> int:
    """Whole seconds since start_time, never less than 1."""
    if now is None:
        now = time.monotonic()
    return max(1, math.floor(now - start_time))


def compute_speed(bytes_sent: int, start_time: float, now: Optional[float] = None) -> int:
    """Bytes per second since the upload started."""
    return max(0, bytes_sent // compute_elapsed_seconds(start_time, now))


class ProgressAggregator:
    """Forwards per-part progress reports into the session store."""

    def __init__(self, store: SessionStore):
        self.store = store

    def on_update(
        self,
        part_number: int,
        progress: int,
        speed: int,
        session_id: Optional[str] = None
    ) -> None:
        self.store.update_progress(part_number, progress, speed, session_id=session_id)
