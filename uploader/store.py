"""
In-process shared state for the active upload session.

Holds the selected file, its planned parts, per-part progress records and
per-part transmission states. Observers subscribe to be notified after
every change; the CLI renders live progress through this hook.
"""

import threading
from typing import Callable, Iterable, List, Optional

from common.logging_config import get_logger
from common.types import FilePart, LocalFile, PartState, ProgressRecord, UploadSession

logger = get_logger(__name__)

StoreListener = Callable[[UploadSession], None]


class SessionStore:
    """
    Thread-safe holder of the single active UploadSession.

    A new selection replaces the previous session wholesale. Progress and
    state updates for parts outside the active session are ignored.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._session: Optional[UploadSession] = None
        self._listeners: List[StoreListener] = []

    def get_state(self) -> Optional[UploadSession]:
        """
        Get the active session.

        Returns:
            Current UploadSession or None if no file has been selected
        """
        with self._lock:
            return self._session

    def add_file(
        self,
        file: LocalFile,
        parts: List[FilePart],
        skipped_parts: Iterable[int] = (),
        file_dir: Optional[str] = None
    ) -> UploadSession:
        """
        Commit planned parts as the new active session.

        Args:
            file: Selected file
            parts: Every planned part, in part-number order
            skipped_parts: Part numbers already stored remotely
            file_dir: Remote directory identifier, when one was created

        Returns:
            The newly created session
        """
        skipped = tuple(sorted(set(skipped_parts)))
        states = {
            part.part_number: PartState.SKIPPED if part.part_number in skipped else PartState.PENDING
            for part in parts
        }
        session = UploadSession(
            file=file,
            parts=list(parts),
            part_states=states,
            skipped_parts=skipped,
            file_dir=file_dir,
        )

        with self._lock:
            self._session = session

        logger.info(
            f"Session {session.session_id} ready: {len(parts)} part(s), {len(skipped)} already stored"
        )
        self._notify(session)
        return session

    def update_progress(
        self,
        part_number: int,
        progress: int,
        speed: int,
        session_id: Optional[str] = None
    ) -> None:
        """
        Overwrite the progress record for one part.

        Writes tagged with a session_id other than the active session's are dropped.
        """
        with self._lock:
            session = self._active_session(part_number, session_id)
            if session is None:
                return
            session.progress_data[part_number] = ProgressRecord(
                part_number=part_number,
                progress=progress,
                speed=speed,
            )
        self._notify(session)

    def set_part_state(
        self,
        part_number: int,
        state: PartState,
        session_id: Optional[str] = None
    ) -> None:
        """Record the transmission state of one part, unless its session was replaced."""
        with self._lock:
            session = self._active_session(part_number, session_id)
            if session is None:
                return
            session.part_states[part_number] = state
        logger.debug(f"Part {part_number} -> {state.value}")
        self._notify(session)

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """
        Register a listener called after every change.

        Returns:
            Callable that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _active_session(self, part_number: int, session_id: Optional[str]) -> Optional[UploadSession]:
        session = self._session
        if session is None or part_number not in session.part_states:
            return None
        if session_id is not None and session_id != session.session_id:
            logger.debug(f"Dropping update for part {part_number} of replaced session {session_id}")
            return None
        return session

    def _notify(self, session: UploadSession) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(session)
