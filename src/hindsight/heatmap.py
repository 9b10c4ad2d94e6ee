"""
Calendar heatmap layout.

Lays a day -> DayStats mapping out on a week-column / weekday-row grid
(Sunday on top) and returns the frame as a list of draw operations, so the
terminal loop only has to paint them.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
from collections.abc import Callable, Mapping
from typing import NamedTuple

from .models import DayStats

CELL_SYMBOL = "■"
CELL_STRIDE = 2
LABEL_MARGIN = 4  # room for Mon/Wed/Fri
TOP_MARGIN = 2  # header + month labels
HEATMAP_HEIGHT = 11
SPACER_HEIGHT = 1
FRAME_LEFT_PAD = 4
FRAME_TOP_PAD = 2

BUCKET_THRESHOLDS = (0.25, 0.5, 0.75)
BUCKET_STYLES = ("empty", "level1", "level2", "level3", "level4")
WEEKDAY_LABELS = ((1, "Mon"), (3, "Wed"), (5, "Fri"))


class Metric(NamedTuple):
    name: str
    value: Callable[[DayStats], int]


COMMITS = Metric("Commits", lambda s: s.commits)
LINES_CHANGED = Metric("Lines Changed", lambda s: s.lines_changed)


@dataclasses.dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


@dataclasses.dataclass(frozen=True)
class DrawOp:
    y: int
    x: int
    text: str
    style: str  # "text", "label", or one of BUCKET_STYLES


def sunday_weekday(day: dt.date) -> int:
    return (day.weekday() + 1) % 7


def grid_start(start_date: dt.date) -> dt.date:
    return start_date - dt.timedelta(days=sunday_weekday(start_date))


def grid_position(day: dt.date, start_date: dt.date) -> tuple[int, int]:
    """(row, column) of `day` in a grid whose first column holds `start_date`."""
    column = (day - grid_start(start_date)).days // 7
    return sunday_weekday(day), column


def max_value(stats: Mapping[dt.date, DayStats], metric: Metric) -> int:
    return max([metric.value(s) for s in stats.values()] + [1])


def total_value(stats: Mapping[dt.date, DayStats], metric: Metric) -> int:
    return sum(metric.value(s) for s in stats.values())


def color_bucket(value: int, max_val: int) -> int:
    if value <= 0:
        return 0
    ratio = value / max(1, max_val)
    for i, threshold in enumerate(BUCKET_THRESHOLDS, start=1):
        if ratio < threshold:
            return i
    return len(BUCKET_THRESHOLDS) + 1


def header_text(total: int, days: int, metric_name: str) -> str:
    return f"{total} contributions in the last {days} days ({metric_name})"


def month_labels(start_date: dt.date, days: int, max_columns: int) -> list[tuple[int, str]]:
    """Columns where a new month name starts, stepping a week at a time from `start_date`."""
    out: list[tuple[int, str]] = []
    current_month = 0
    for i in range(0, days, 7):
        column = i // 7
        if column >= max_columns:
            break
        day = start_date + dt.timedelta(days=i)
        if day.month != current_month:
            current_month = day.month
            out.append((column, day.strftime("%b")))
    return out


def _put(ops: list[DrawOp], area: Rect, x: int, y: int, text: str, style: str) -> None:
    if y < area.y or y >= area.bottom or x >= area.right:
        return
    text = text[: area.right - x]
    if text:
        ops.append(DrawOp(y=y, x=x, text=text, style=style))


def layout_heatmap(
    stats: Mapping[dt.date, DayStats],
    days: int,
    metric: Metric,
    area: Rect,
    today: dt.date,
) -> list[DrawOp]:
    ops: list[DrawOp] = []
    if area.width <= 0 or area.height <= 0:
        return ops

    max_val = max_value(stats, metric)
    start_date = today - dt.timedelta(days=days)

    _put(ops, area, area.x, area.y, header_text(total_value(stats, metric), days, metric.name), "text")

    graph_x = area.x + LABEL_MARGIN
    graph_y = area.y + TOP_MARGIN

    max_columns = max(0, (area.right - graph_x + CELL_STRIDE - 1) // CELL_STRIDE)
    for column, label in month_labels(start_date, days, max_columns):
        _put(ops, area, graph_x + column * CELL_STRIDE, area.y + 1, label, "label")

    for row, label in WEEKDAY_LABELS:
        _put(ops, area, area.x, graph_y + row, label, "label")

    for i in range(days + 1):
        day = start_date + dt.timedelta(days=i)
        row, column = grid_position(day, start_date)
        x = graph_x + column * CELL_STRIDE
        y = graph_y + row
        if x + 1 >= area.right or y >= area.bottom:
            continue
        st = stats.get(day)
        value = metric.value(st) if st is not None else 0
        _put(ops, area, x, y, CELL_SYMBOL, BUCKET_STYLES[color_bucket(value, max_val)])

    return ops


def layout_frame(
    stats: Mapping[dt.date, DayStats],
    days: int,
    width: int,
    height: int,
    today: dt.date,
) -> list[DrawOp]:
    """Commits heatmap above the lines-changed heatmap, inset from the screen edge."""
    padded = Rect(
        x=FRAME_LEFT_PAD,
        y=FRAME_TOP_PAD,
        width=max(0, width - FRAME_LEFT_PAD),
        height=max(0, height - FRAME_TOP_PAD),
    )
    first_height = min(HEATMAP_HEIGHT, padded.height)
    second_y = padded.y + HEATMAP_HEIGHT + SPACER_HEIGHT
    second_height = max(0, min(HEATMAP_HEIGHT, padded.bottom - second_y))

    ops = layout_heatmap(stats, days, COMMITS, Rect(padded.x, padded.y, padded.width, first_height), today)
    ops.extend(layout_heatmap(stats, days, LINES_CHANGED, Rect(padded.x, second_y, padded.width, second_height), today))
    return ops
