from __future__ import annotations

from .analysis_write import TSV_HEADER, stats_rows
from .models import AggregatedStats

NUMERIC_COLUMNS = frozenset({"Commits", "Lines"})


def trunc(s: str, max_len: int) -> str:
    if len(s) <= max_len:
        return s
    if max_len <= 1:
        return s[:max_len]
    return s[: max_len - 1] + "…"


def render_table(headers: list[str], rows: list[list[str]], *, max_cell: int = 48) -> str:
    """Box-drawn table, numeric columns right aligned."""
    cells = [[trunc(c, max_cell) for c in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in cells:
        for i, c in enumerate(row):
            widths[i] = max(widths[i], len(c))

    def rule(left: str, fill: str, mid: str, right: str) -> str:
        return left + mid.join(fill * (w + 2) for w in widths) + right

    def line(values: list[str], align_numbers: bool) -> str:
        out: list[str] = []
        for i, v in enumerate(values):
            if align_numbers and headers[i] in NUMERIC_COLUMNS:
                out.append(f" {v:>{widths[i]}} ")
            else:
                out.append(f" {v:<{widths[i]}} ")
        return "│" + "│".join(out) + "│"

    lines = [rule("┌", "─", "┬", "┐"), line(headers, False), rule("╞", "═", "╪", "╡")]
    for i, row in enumerate(cells):
        if i:
            lines.append(rule("├", "─", "┼", "┤"))
        lines.append(line(row, True))
    lines.append(rule("└", "─", "┴", "┘"))
    return "\n".join(lines)


def render_stats_table(total: AggregatedStats) -> str:
    return render_table(TSV_HEADER, stats_rows(total))
