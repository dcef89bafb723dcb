"""Utility functions for CLI output."""

import sys
from typing import Optional, TextIO

from cli.constants import GREEN, RED, RESET
from common.types import PartState, UploadReport, UploadSession


class ProgressLine:
    """Store listener that redraws a single aggregate progress line on stdout."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout
        self._drawn = False

    def __call__(self, session: UploadSession) -> None:
        total = session.file.size
        sent = 0
        speed = 0
        for part in session.parts:
            state = session.part_states.get(part.part_number)
            record = session.progress_data.get(part.part_number)
            if state in (PartState.COMPLETED, PartState.SKIPPED):
                sent += part.payload_size
            elif record is not None:
                sent += part.payload_size * record.progress // 100
            if state == PartState.IN_FLIGHT and record is not None:
                speed += record.speed

        progress = (sent / total) * 100 if total else 100.0
        name = session.parts[0].file_name if session.parts else session.file.name
        self.stream.write(
            f"\rUploading {name}: "
            f"{format_file_size(sent)} / {format_file_size(total)} "
            f"({GREEN}{progress:.1f}%{RESET}) {format_speed(speed)}   "
        )
        self.stream.flush()
        self._drawn = True

    def finish(self) -> None:
        """Finalize progress display with newline."""
        if self._drawn:
            self.stream.write('\n')
            self.stream.flush()
            self._drawn = False


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def format_speed(bytes_per_second: int) -> str:
    return f"{format_file_size(bytes_per_second)}/s"


def format_session(session: UploadSession) -> str:
    """
    Render the per-part status table of a session.

    Args:
        session: Session to render

    Returns:
        Multi-line table, one row per part
    """
    header = (
        f"File: {session.file.name} ({format_file_size(session.file.size)}), "
        f"{len(session.parts)} part(s)"
    )
    if session.file_dir:
        header += f", remote dir: {session.file_dir}"
    if not session.parts:
        return f"{header}\n  (nothing to upload)"

    lines = [header, f"  {'PART':>5}  {'RANGE':<25} {'STATE':<10} {'PROGRESS':>8}  SPEED"]
    for part in session.parts:
        state = session.part_states.get(part.part_number, PartState.PENDING)
        record = session.progress_data.get(part.part_number)
        if state == PartState.SKIPPED:
            progress, speed = "-", "-"
        elif record is None:
            progress, speed = "0%", "-"
        else:
            progress, speed = f"{record.progress}%", format_speed(record.speed)
        byte_range = f"[{part.upload_offset}, {part.upload_length})"
        lines.append(
            f"  {part.part_number:>5}  {byte_range:<25} {state.value:<10} {progress:>8}  {speed}"
        )
    return '\n'.join(lines)


def format_report(report: UploadReport) -> str:
    """Summarize an upload trigger's outcome."""
    total = len(report.completed) + len(report.failed)
    if total == 0:
        return "Nothing to upload. All parts are already stored."

    lines = [f"Uploaded {len(report.completed)}/{total} part(s) in {report.elapsed_seconds:.2f}s"]
    for part_number, error in sorted(report.failed.items()):
        lines.append(f"  {RED}Failed{RESET} part {part_number}: {error}")
    if report.failed:
        lines.append("Run 'upload' again to resend failed parts.")
    return '\n'.join(lines)
