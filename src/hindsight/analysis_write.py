from __future__ import annotations

from pathlib import Path

from .analysis_aggregate import sorted_entries
from .models import AggregatedStats

TSV_HEADER = ["Date", "Project", "Commits", "Lines", "Author"]


def stats_rows(total: AggregatedStats) -> list[list[str]]:
    rows: list[list[str]] = []
    for (day, project, author), st in sorted_entries(total):
        if st.is_empty:
            continue
        rows.append([day.isoformat(), project, str(st.commits), str(st.lines_changed), author])
    return rows


def format_tsv(total: AggregatedStats) -> str:
    lines = ["\t".join(TSV_HEADER)]
    lines.extend("\t".join(row) for row in stats_rows(total))
    return "\n".join(lines) + "\n"


def write_tsv(path: Path, total: AggregatedStats) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_tsv(total), encoding="utf-8")
