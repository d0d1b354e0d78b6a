"""Custom completer for Filehost CLI with local file autocompletion."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS


class FilehostCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local file path completion for the 'upload' command
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on cursor position and context.

        For the first token, completes command names.
        For 'upload' arguments, completes paths relative to the working directory.
        """
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        if command != "upload":
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        already_typed = set(tokens[1:])
        if not is_typing_new_token:
            already_typed.discard(current_word)

        yield from self._complete_local_paths(current_word, already_typed)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_local_paths(
        self, partial: str, exclude: set
    ) -> Iterable[Completion]:
        """
        Complete file and directory paths under the working directory.

        Directories are offered with a trailing slash so completion can
        continue into them; hidden entries only show once a dot is typed.
        """
        if "/" in partial:
            parent_part, name_part = partial.rsplit("/", 1)
            prefix = parent_part + "/"
            search_dir = Path.cwd() / (parent_part or "/")
        else:
            prefix, name_part = "", partial
            search_dir = Path.cwd()

        if not search_dir.is_dir():
            return

        try:
            entries = sorted(search_dir.iterdir(), key=lambda p: p.name)
        except OSError:
            return

        for entry in entries:
            if not entry.name.startswith(name_part):
                continue
            if entry.name.startswith(".") and not name_part.startswith("."):
                continue

            if entry.is_dir():
                candidate = f"{prefix}{entry.name}/"
            elif entry.is_file():
                candidate = f"{prefix}{entry.name}"
            else:
                continue

            if candidate in exclude:
                continue
            yield Completion(candidate, start_position=-len(partial))
