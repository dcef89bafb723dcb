"""Command parser for CLI input."""

import shlex

from cli.constants import CONFIG_KEYS
from cli.models import (
    CommandRequest,
    ConfigCommand,
    SelectCommand,
    StatusCommand,
    UploadCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Select/Upload/Status/Config)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]

    if command_name == "select":
        return _parse_select(tokens[1:])
    elif command_name == "upload":
        return _parse_no_args("upload", tokens[1:], UploadCommand)
    elif command_name == "status":
        return _parse_no_args("status", tokens[1:], StatusCommand)
    elif command_name == "config":
        return _parse_config(tokens[1:])
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _parse_select(args: list[str]) -> SelectCommand:
    """Parse 'select <path>' command."""
    if len(args) != 1:
        raise ParseError("select requires exactly 1 argument: <path>")

    return SelectCommand(path=args[0])


def _parse_no_args(name: str, args: list[str], command_type):
    if args:
        raise ParseError(f"{name} takes no arguments")
    return command_type()


def _parse_config(args: list[str]) -> ConfigCommand:
    """Parse 'config [key value]' command."""
    if not args:
        return ConfigCommand()
    if len(args) != 2:
        raise ParseError("config requires either no arguments or: <key> <value>")

    key, value = args
    if key not in CONFIG_KEYS:
        raise ParseError(f"Unknown config key: {key} (expected one of: {', '.join(CONFIG_KEYS)})")
    return ConfigCommand(key=key, value=value)
