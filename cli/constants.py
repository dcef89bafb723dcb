"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["select", "upload", "status", "config", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#F45935 bold",
        "command": "#0088ff bold",
    }
)

ACCENT = "\033[38;2;244;89;53m"
GREEN = "\033[32m"
RED = "\033[31m"
RESET = "\033[0m"

LOGO = f"""{ACCENT}
  ___| |__  _   _ _ __ | | ___   _ _ __
 / __| '_ \\| | | | '_ \\| |/ / | | | '_ \\
| (__| | | | |_| | | | |   <| |_| | |_) |
 \\___|_| |_|\\__,_|_| |_|_|\\_\\\\__,_| .__/
                                  |_|
{RESET}"""

WELCOME_TITLE = "chunkup - Resumable Chunked Uploader"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "chunkup> "

HELP_TEXT = """Available commands:
  select <path>          Select a file: split it into parts and check the server for it
  upload                 Upload every outstanding part of the selected file
  status                 Show per-part state, progress and speed
  config [key value]     Show configuration, or set one key
  clear                  Clear screen and redisplay welcome message
  help                   Show this help
  exit                   Exit REPL

Parts the server already stores are skipped on upload.
Failed parts stay outstanding; run 'upload' again to resend them.
Examples:
  select ~/videos/talk.mp4
  upload
  status
  config part_size 4194304
  config max_concurrency 8"""

CONFIG_KEYS = ("server_host", "server_port", "timeout", "part_size", "max_concurrency", "user_name")
