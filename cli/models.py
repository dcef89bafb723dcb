"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class SelectCommand:
    """Select a file and prepare its upload session."""

    path: str
    command: Literal["select"] = "select"


@dataclass(frozen=True)
class UploadCommand:
    """Upload outstanding parts of the selected file."""

    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class StatusCommand:
    """Show per-part progress of the selected file."""

    command: Literal["status"] = "status"


@dataclass(frozen=True)
class ConfigCommand:
    """Show configuration, or set one key when key and value are given."""

    key: str | None = None
    value: str | None = None
    command: Literal["config"] = "config"


CommandRequest = (
    SelectCommand
    | UploadCommand
    | StatusCommand
    | ConfigCommand
)
