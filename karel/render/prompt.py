"""Block between actions until the user presses Enter."""

from __future__ import annotations

from typing import TextIO

from rich.console import Console

PROMPT_TEXT = "Press Enter to continue to the next action..."


class Prompter:
    def __init__(
        self, *, console: Console | None = None, stream: TextIO | None = None
    ) -> None:
        self._console = console or Console()
        self._stream = stream

    def wait(self) -> str:
        return self._console.input(PROMPT_TEXT, stream=self._stream)
