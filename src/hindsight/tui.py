from __future__ import annotations

import datetime as dt
import itertools
import sys
from collections.abc import Mapping

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widget import Widget

from .heatmap import DrawOp, layout_frame
from .models import DayStats

REFRESH_INTERVAL_S = 0.1

# Light-to-dark blue ramp on a dark background.
STYLES = {
    "text": "",
    "label": "bright_black",
    "empty": "rgb(48,54,61)",
    "level1": "rgb(144,202,249)",
    "level2": "rgb(66,165,245)",
    "level3": "rgb(30,136,229)",
    "level4": "rgb(21,101,192)",
}


class TerminalError(Exception):
    pass


def frame_text(ops: list[DrawOp], width: int, height: int) -> Text:
    """Paint draw operations onto a `width` x `height` canvas, clipping at the edges."""
    cells = [[(" ", "")] * width for _ in range(height)]
    for op in ops:
        if not 0 <= op.y < height:
            continue
        row = cells[op.y]
        for offset, char in enumerate(op.text):
            x = op.x + offset
            if 0 <= x < width:
                row[x] = (char, STYLES.get(op.style, ""))

    text = Text(no_wrap=True, overflow="crop")
    for y, row in enumerate(cells):
        if y:
            text.append("\n")
        for style, run in itertools.groupby(row, key=lambda cell: cell[1]):
            text.append("".join(char for char, _ in run), style=style or None)
    return text


class HeatmapView(Widget):
    """Both heatmaps, laid out for whatever size the widget currently has."""

    def __init__(self, stats: Mapping[dt.date, DayStats], days: int, *, today: dt.date | None = None) -> None:
        super().__init__(id="heatmap")
        self.stats = stats
        self.days = days
        self.today = today

    def render(self) -> Text:
        width, height = self.size.width, self.size.height
        frame_today = self.today or dt.date.today()
        return frame_text(layout_frame(self.stats, self.days, width, height, frame_today), width, height)


class HeatmapApp(App):
    CSS = """
    #heatmap {
        width: 100%;
        height: 100%;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("escape", "quit", "Quit", priority=True),
    ]

    def __init__(self, stats: Mapping[dt.date, DayStats], days: int, *, today: dt.date | None = None) -> None:
        super().__init__()
        self.stats = stats
        self.days = days
        self.today = today

    def compose(self) -> ComposeResult:
        yield HeatmapView(self.stats, self.days, today=self.today)

    def on_mount(self) -> None:
        self.set_interval(REFRESH_INTERVAL_S, self.redraw)

    def redraw(self) -> None:
        self.query_one(HeatmapView).refresh()


def run(stats: Mapping[dt.date, DayStats], days: int, *, today: dt.date | None = None) -> None:
    """Show the heatmaps full screen until `q` or Esc; the terminal is restored on every exit."""
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        raise TerminalError("heatmap view requires an interactive terminal")
    app = HeatmapApp(stats, days, today=today)
    app.run()
    if app.return_code:
        raise TerminalError(f"terminal UI exited with code {app.return_code}")
