from __future__ import annotations

import datetime as dt
from collections import defaultdict
from collections.abc import Iterable

from .models import AggregatedStats, DayStats, RepoDayStats


def parse_author_filter(raw: str | Iterable[str] | None) -> list[str] | None:
    if raw is None:
        return None
    values = [raw] if isinstance(raw, str) else list(raw)
    out: list[str] = []
    for v in values:
        for part in str(v).split(","):
            part = part.strip()
            if part:
                out.append(part)
    return out or None


def author_allowed(author: str, allowed: list[str] | None) -> bool:
    if allowed is None:
        return True
    return author in allowed


def merge_repo_stats(
    total: AggregatedStats,
    project: str,
    repo_stats: RepoDayStats,
    allowed: list[str] | None = None,
) -> None:
    for (day, author), st in repo_stats.items():
        if not author_allowed(author, allowed):
            continue
        key = (day, project, author)
        cur = total.get(key)
        if cur is None:
            cur = DayStats()
            total[key] = cur
        cur.add(st)


def aggregate_repos(results: Iterable[tuple[str, RepoDayStats]], allowed: list[str] | None = None) -> AggregatedStats:
    total: AggregatedStats = {}
    for project, repo_stats in results:
        merge_repo_stats(total, project, repo_stats, allowed)
    return total


def sorted_entries(total: AggregatedStats) -> list[tuple[tuple[dt.date, str, str], DayStats]]:
    return sorted(total.items(), key=lambda kv: kv[0])


def daily_totals(total: AggregatedStats) -> dict[dt.date, DayStats]:
    out: dict[dt.date, DayStats] = defaultdict(DayStats)
    for (day, _project, _author), st in total.items():
        out[day].add(st)
    return dict(out)
