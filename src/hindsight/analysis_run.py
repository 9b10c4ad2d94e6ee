from __future__ import annotations

import datetime as dt
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from . import tui
from .analysis_aggregate import aggregate_repos, daily_totals
from .analysis_render import render_stats_table
from .analysis_repo import RepoAnalysisError, analyze_repo
from .analysis_write import write_tsv
from .config import Settings
from .git import discover_git_roots, project_name
from .models import AggregatedStats, RepoDayStats


def analyze_repos(
    repos: list[Path],
    days: int,
    *,
    jobs: int,
    today: dt.date | None = None,
) -> tuple[list[tuple[str, RepoDayStats]], list[RepoAnalysisError]]:
    """Analyze every repository; failures are collected instead of raised."""
    results: list[tuple[str, RepoDayStats]] = []
    errors: list[RepoAnalysisError] = []
    with ThreadPoolExecutor(max_workers=max(1, jobs)) as ex:
        futs = {ex.submit(analyze_repo, repo, days, today=today): repo for repo in repos}
        for fut in as_completed(futs):
            repo = futs[fut]
            try:
                results.append((project_name(repo), fut.result()))
            except RepoAnalysisError as e:
                errors.append(e)
    results.sort(key=lambda t: t[0])
    errors.sort(key=lambda e: e.path)
    return results, errors


def collect_stats(settings: Settings, repos: list[Path], *, today: dt.date | None = None) -> AggregatedStats:
    results, errors = analyze_repos(repos, settings.days, jobs=settings.jobs, today=today)
    if settings.interactive:
        for e in errors:
            print(f"Warning: Failed to analyze {e.path}: {e.message}", file=sys.stderr)
    return aggregate_repos(results, settings.authors)


def run_analysis(settings: Settings, *, today: dt.date | None = None) -> int:
    try:
        root = settings.root.resolve(strict=True)
    except OSError as e:
        print(f"Error: cannot read root path {settings.root}: {e}", file=sys.stderr)
        return 2
    if not root.is_dir():
        print(f"Error: root path is not a directory: {root}", file=sys.stderr)
        return 2

    repos = discover_git_roots(root, settings.depth, settings.exclude_dirnames)
    if not repos:
        print(f"No git repositories found in {root}")
        return 0

    if settings.interactive:
        print(f"Analyzing {len(repos)} repositories...")

    total = collect_stats(settings, repos, today=today)

    if not settings.interactive:
        print(render_stats_table(total))
        if settings.export_tsv is not None:
            write_tsv(settings.export_tsv, total)
            print(f"Exported TSV to {settings.export_tsv}")
        return 0

    try:
        tui.run(daily_totals(total), settings.days, today=today)
    except tui.TerminalError as e:
        print(f"Error: terminal failure: {e}", file=sys.stderr)
    return 0
