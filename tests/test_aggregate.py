from __future__ import annotations

import datetime as dt

from hindsight.analysis_aggregate import (
    aggregate_repos,
    author_allowed,
    daily_totals,
    merge_repo_stats,
    parse_author_filter,
    sorted_entries,
)
from hindsight.models import DayStats

D1 = dt.date(2025, 3, 1)
D2 = dt.date(2025, 3, 2)


def _repo_a() -> dict:
    return {(D1, "Alice"): DayStats(2, 20), (D2, "Bob"): DayStats(1, 5)}


def _repo_b() -> dict:
    return {(D1, "Alice"): DayStats(1, 3), (D1, "Bob"): DayStats(4, 40)}


def test_parse_author_filter_trims_and_drops_empty() -> None:
    assert parse_author_filter(None) is None
    assert parse_author_filter("") is None
    assert parse_author_filter(" , ,") is None
    assert parse_author_filter(" Alice ,Bob Smith,, ") == ["Alice", "Bob Smith"]
    assert parse_author_filter(["Alice", " Bob, Carol "]) == ["Alice", "Bob", "Carol"]


def test_author_allowed_is_exact_and_case_sensitive() -> None:
    allowed = parse_author_filter("Alice")
    assert author_allowed("Alice", None)
    assert author_allowed("Alice", allowed)
    assert not author_allowed("alice", allowed)
    assert not author_allowed("Alice Smith", allowed)
    assert not author_allowed("Bob", allowed)


def test_two_projects_same_author_and_day_stay_distinct() -> None:
    day = dt.date(2025, 5, 5)
    total = aggregate_repos(
        [
            ("proj-a", {(day, "Bob"): DayStats(1, 5)}),
            ("proj-b", {(day, "Bob"): DayStats(1, 5)}),
        ]
    )

    assert total == {
        (day, "proj-a", "Bob"): DayStats(1, 5),
        (day, "proj-b", "Bob"): DayStats(1, 5),
    }


def test_aggregation_is_order_independent() -> None:
    forward = aggregate_repos([("a", _repo_a()), ("b", _repo_b()), ("a", _repo_b())])
    backward = aggregate_repos([("a", _repo_b()), ("b", _repo_b()), ("a", _repo_a())])

    assert forward == backward
    assert forward[(D1, "a", "Alice")] == DayStats(3, 23)


def test_merge_adds_and_never_overwrites() -> None:
    total: dict = {}
    merge_repo_stats(total, "a", _repo_a())
    merge_repo_stats(total, "a", _repo_a())

    assert total[(D1, "a", "Alice")] == DayStats(4, 40)
    assert total[(D2, "a", "Bob")] == DayStats(2, 10)


def test_merge_does_not_mutate_inputs() -> None:
    repo = _repo_a()
    total = aggregate_repos([("a", repo), ("a", repo)])

    assert repo[(D1, "Alice")] == DayStats(2, 20)
    assert total[(D1, "a", "Alice")] == DayStats(4, 40)


def test_author_filter_excludes_other_authors() -> None:
    total = aggregate_repos([("a", _repo_a()), ("b", _repo_b())], parse_author_filter("Alice"))

    assert {author for (_, _, author) in total} == {"Alice"}
    assert sum(st.commits for st in daily_totals(total).values()) == 3


def test_sorted_entries_orders_by_day_then_project_then_author() -> None:
    total = aggregate_repos([("zeta", _repo_a()), ("alpha", _repo_b())])

    keys = [k for k, _ in sorted_entries(total)]
    assert keys == [
        (D1, "alpha", "Alice"),
        (D1, "alpha", "Bob"),
        (D1, "zeta", "Alice"),
        (D2, "zeta", "Bob"),
    ]


def test_daily_totals_sum_projects_and_authors() -> None:
    total = aggregate_repos([("a", _repo_a()), ("b", _repo_b())])

    assert daily_totals(total) == {D1: DayStats(7, 63), D2: DayStats(1, 5)}
