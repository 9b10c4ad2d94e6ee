from __future__ import annotations

import dataclasses
import datetime as dt

UNKNOWN_AUTHOR = "Unknown"


@dataclasses.dataclass
class DayStats:
    commits: int = 0
    lines_changed: int = 0  # insertions + deletions

    def add(self, other: DayStats) -> None:
        self.commits += other.commits
        self.lines_changed += other.lines_changed

    @property
    def is_empty(self) -> bool:
        return self.commits == 0 and self.lines_changed == 0


@dataclasses.dataclass(frozen=True)
class CommitRecord:
    sha: str
    author_name: str
    timestamp: int
    parents: tuple[str, ...]
    tree: str
    insertions: int = 0
    deletions: int = 0
    diff_ok: bool = True

    @property
    def parent_count(self) -> int:
        return len(self.parents)

    @property
    def first_parent(self) -> str | None:
        return self.parents[0] if self.parents else None

    @property
    def lines_changed(self) -> int:
        if not self.diff_ok:
            return 0
        return self.insertions + self.deletions

    @property
    def local_date(self) -> dt.date:
        return local_date(self.timestamp)


@dataclasses.dataclass(frozen=True)
class TimeWindow:
    lookback_days: int
    as_of: dt.date  # inclusive

    @classmethod
    def ending_today(cls, lookback_days: int, today: dt.date | None = None) -> TimeWindow:
        if lookback_days < 0:
            raise ValueError(f"lookback days must be >= 0, got {lookback_days}")
        return cls(lookback_days=lookback_days, as_of=today or dt.date.today())

    @property
    def start_date(self) -> dt.date:
        return self.as_of - dt.timedelta(days=self.lookback_days)


def local_date(timestamp: int) -> dt.date:
    return dt.datetime.fromtimestamp(int(timestamp)).date()


RepoDayStats = dict[tuple[dt.date, str], DayStats]  # (day, author) -> stats
AggregatedStats = dict[tuple[dt.date, str, str], DayStats]  # (day, project, author) -> stats
