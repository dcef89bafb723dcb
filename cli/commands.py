"""Command handler functions for CLI operations."""

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, Optional, TypeVar

from common.exceptions import UploadError
from common.logging_config import get_logger, set_correlation_id
from common.types import LocalFile
from cli.config import Config
from cli.constants import CONFIG_KEYS
from cli.models import ConfigCommand, SelectCommand, StatusCommand, UploadCommand
from cli.utils import ProgressLine, format_file_size, format_report, format_session
from uploader.orchestrator import UploadOrchestrator
from uploader.storage_client import StorageClient
from uploader.store import SessionStore

logger = get_logger(__name__)

T = TypeVar('T')

_config: Optional[Config] = None
_store: Optional[SessionStore] = None


def get_config() -> Config:
    """
    Get or create global Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config(Path.home() / '.chunkup' / 'config.json')
    return _config


def get_store() -> SessionStore:
    """
    Get or create the global SessionStore shared by all commands.

    Returns:
        SessionStore instance
    """
    global _store
    if _store is None:
        logger.debug("Creating new SessionStore instance")
        _store = SessionStore()
    return _store


async def _with_orchestrator(
    action: Callable[[UploadOrchestrator], Awaitable[T]],
    orchestrator: Optional[UploadOrchestrator]
) -> T:
    if orchestrator is not None:
        return await action(orchestrator)

    config = get_config()
    async with StorageClient(
        config.get_base_url(),
        timeout=config.get_timeout(),
        user_name=config.get_user_name()
    ) as client:
        return await action(UploadOrchestrator(
            client,
            get_store(),
            part_size=config.get_part_size(),
            max_concurrency=config.get_max_concurrency()
        ))


def _run(
    action: Callable[[UploadOrchestrator], Awaitable[T]],
    orchestrator: Optional[UploadOrchestrator] = None
) -> T:
    return asyncio.run(_with_orchestrator(action, orchestrator))


def handle_select(cmd: SelectCommand, orchestrator: Optional[UploadOrchestrator] = None) -> str:
    """
    Handle 'select' command.

    Args:
        cmd: SelectCommand with the file path
        orchestrator: Optional UploadOrchestrator for dependency injection (testing)

    Returns:
        Session summary or error message
    """
    logger.info(f"Executing select command: path={cmd.path}")
    try:
        file = LocalFile.from_path(Path(cmd.path).expanduser(), name=cmd.path)
        session = _run(lambda orch: orch.select_file(file), orchestrator)
    except UploadError as e:
        logger.warning(f"Select failed: {e}")
        return f"Error: {e}"

    set_correlation_id(get_logger('uploader'), session.session_id)

    outstanding = len(session.pending_parts)
    message = (
        f"Selected {file.name} ({format_file_size(file.size)}): "
        f"{len(session.parts)} part(s), {outstanding} to upload"
    )
    if session.skipped_parts:
        message += f", {len(session.skipped_parts)} already on server"
    if session.file_dir:
        message += f"\nCreated remote directory: {session.file_dir}"
    return message


def handle_upload(cmd: UploadCommand, orchestrator: Optional[UploadOrchestrator] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand
        orchestrator: Optional UploadOrchestrator for dependency injection (testing)

    Returns:
        Upload summary or error message
    """
    store = orchestrator.store if orchestrator is not None else get_store()
    if store.get_state() is None:
        return "Error: No file selected. Please run: select <path>"

    progress_line = ProgressLine()
    unsubscribe = store.subscribe(progress_line)
    try:
        report = _run(lambda orch: orch.start_upload(), orchestrator)
    except UploadError as e:
        return f"Error: {e}"
    finally:
        unsubscribe()
        progress_line.finish()

    logger.debug("Upload command completed")
    return format_report(report)


def handle_status(cmd: StatusCommand, store: Optional[SessionStore] = None) -> str:
    """
    Handle 'status' command.

    Args:
        cmd: StatusCommand
        store: Optional SessionStore for dependency injection (testing)

    Returns:
        Per-part status table
    """
    if store is None:
        store = get_store()
    session = store.get_state()
    if session is None:
        return "No file selected."
    return format_session(session)


def handle_config(cmd: ConfigCommand, config: Optional[Config] = None) -> str:
    """
    Handle 'config' command.

    Args:
        cmd: ConfigCommand, with key and value when setting
        config: Optional Config for dependency injection (testing)

    Returns:
        Current settings or confirmation message
    """
    if config is None:
        config = get_config()

    if cmd.key is None:
        return '\n'.join(f"  {key} = {config.data.get(key)}" for key in CONFIG_KEYS)

    try:
        config.set(cmd.key, cmd.value)
    except ValueError as e:
        return f"Error: invalid value for {cmd.key}: {e}"

    logger.info(f"Config updated: {cmd.key}={config.data[cmd.key]}")
    return f"Set {cmd.key} = {config.data[cmd.key]} (applies to the next select/upload)"
