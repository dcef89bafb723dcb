"""Custom completer for the chunkup CLI with file path autocompletion."""

from typing import Iterable

from prompt_toolkit.completion import Completer, Completion, PathCompleter
from prompt_toolkit.document import Document

from cli.constants import COMMANDS, CONFIG_KEYS


class ChunkupCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local file path completion for the 'select' command
    - Setting name completion for the 'config' command
    """

    def __init__(self):
        self._path_completer = PathCompleter(expanduser=True)

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        current_word = "" if is_typing_new_token else tokens[-1]
        argument_index = len(tokens) - 1 if not is_typing_new_token else len(tokens)

        if command == "select" and argument_index == 1:
            yield from self._path_completer.get_completions(
                Document(current_word, len(current_word)), complete_event
            )
        elif command == "config" and argument_index == 1:
            for key in CONFIG_KEYS:
                if key.startswith(current_word):
                    yield Completion(key, start_position=-len(current_word))

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))
