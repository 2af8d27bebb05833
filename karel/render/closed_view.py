"""Keep the final frame on screen until the user dismisses it (Textual)."""

from __future__ import annotations

from rich.console import RenderableType
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import Footer, Static


class ClosedViewApp(App):
    """Hold one rendered world frame; any close key exits."""

    CSS = """
    Screen {
        layout: vertical;
        align: center middle;
    }
    #final-frame {
        width: auto;
        height: auto;
    }
    """

    BINDINGS = [
        ("q", "quit", "Close"),
        ("escape", "quit", "Close"),
        ("enter", "quit", "Close"),
    ]

    def __init__(self, frame: RenderableType, *, title: str = "Karel's World") -> None:
        super().__init__()
        self._frame = frame
        self.title = title

    def compose(self) -> ComposeResult:
        with Vertical(id="root"):
            yield Static(self._frame, id="final-frame")
        yield Footer()

    def action_quit(self) -> None:
        self.exit()


def show_until_closed(frame: RenderableType, *, title: str = "Karel's World") -> None:
    ClosedViewApp(frame, title=title).run()
