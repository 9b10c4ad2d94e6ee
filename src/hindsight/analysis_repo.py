from __future__ import annotations

import dataclasses
import datetime as dt
import subprocess
import threading
from collections import defaultdict
from collections.abc import Iterator
from pathlib import Path

from .git import is_git_repo, resolve_head, run_git
from .models import UNKNOWN_AUTHOR, CommitRecord, DayStats, RepoDayStats, TimeWindow

COMMIT_MARKER = "@@@"


class RepoAnalysisError(Exception):
    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = str(path)
        self.message = message


def _parse_header(line: str) -> CommitRecord | None:
    parts = line[len(COMMIT_MARKER) :].split("\t", 4)
    if len(parts) < 4:
        return None
    sha, parents_s, tree, ts_s = parts[0], parts[1], parts[2], parts[3]
    author = parts[4] if len(parts) > 4 else ""
    try:
        ts = int(ts_s.strip())
    except ValueError:
        return None
    return CommitRecord(
        sha=sha.strip(),
        author_name=author.strip() or UNKNOWN_AUTHOR,
        timestamp=ts,
        parents=tuple(p for p in parents_s.split() if p),
        tree=tree.strip(),
    )


def _parse_numstat(line: str) -> tuple[int, int] | None:
    parts = line.split("\t", 2)
    if len(parts) < 3:
        return None
    added_s, deleted_s = parts[0], parts[1]
    if added_s == "-" or deleted_s == "-":
        # binary file
        return 0, 0
    try:
        return int(added_s), int(deleted_s)
    except ValueError:
        return None


def iter_commits(repo: Path, rev: str = "HEAD") -> Iterator[CommitRecord]:
    """
    Yield commits reachable from `rev`, newest commit time first.

    Records carry commit metadata only; see `with_diff_stats` for line
    counts. Callers stop the walk by breaking out of the loop, which
    terminates the underlying `git log`.
    """
    pretty = f"{COMMIT_MARKER}%H\t%P\t%T\t%ct\t%an"
    cmd = ["git", "log", rev, "--no-color", f"--pretty=format:{pretty}"]
    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(repo),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise RepoAnalysisError(repo, f"failed to start git log: {e}") from e

    stderr_chunks: list[str] = []
    stderr_chars = 0
    max_stderr_chars = 50_000

    def drain_stderr() -> None:
        nonlocal stderr_chars
        if proc.stderr is None:
            return
        while True:
            chunk = proc.stderr.read(8192)
            if not chunk:
                return
            if stderr_chars >= max_stderr_chars:
                continue
            take = chunk[: max_stderr_chars - stderr_chars]
            stderr_chunks.append(take)
            stderr_chars += len(take)

    stderr_thread = threading.Thread(target=drain_stderr, daemon=True)
    stderr_thread.start()

    finished = False
    try:
        assert proc.stdout is not None
        for raw_line in proc.stdout:
            line = raw_line.rstrip("\n")
            if not line:
                continue
            commit = _parse_header(line) if line.startswith(COMMIT_MARKER) else None
            if commit is None:
                raise RepoAnalysisError(repo, f"unreadable git log line: {line[:200]!r}")
            yield commit
        finished = True
    finally:
        if not finished and proc.poll() is None:
            proc.kill()
        if proc.stdout is not None:
            proc.stdout.close()
        code = proc.wait()
        stderr_thread.join()

    if code != 0:
        stderr = "".join(stderr_chunks).strip()
        raise RepoAnalysisError(repo, f"git log exited {code}: {stderr[:500]}")


def with_diff_stats(repo: Path, commit: CommitRecord) -> CommitRecord:
    """
    Fill in insertions and deletions against the first parent.

    A root commit is diffed against the empty tree. When git cannot produce
    the diff (missing or corrupt objects) the commit comes back with
    `diff_ok=False` and contributes no lines.
    """
    base = ["diff-tree", "-r", "--numstat", "--no-renames", "--no-color", "--no-ext-diff"]
    if commit.first_parent is None:
        args = [*base, "--root", "--no-commit-id", commit.sha]
    else:
        args = [*base, commit.first_parent, commit.sha]
    try:
        code, out, _ = run_git(args, cwd=repo)
    except OSError:
        code, out = -1, ""
    if code != 0:
        return dataclasses.replace(commit, insertions=0, deletions=0, diff_ok=False)

    insertions = deletions = 0
    for line in out.splitlines():
        if not line:
            continue
        counts = _parse_numstat(line)
        if counts is None:
            return dataclasses.replace(commit, insertions=0, deletions=0, diff_ok=False)
        insertions += counts[0]
        deletions += counts[1]
    return dataclasses.replace(commit, insertions=insertions, deletions=deletions, diff_ok=True)


def analyze_repo(repo: Path, lookback_days: int, *, today: dt.date | None = None) -> RepoDayStats:
    window = TimeWindow.ending_today(lookback_days, today)

    try:
        ok, err = is_git_repo(repo)
    except OSError as e:
        raise RepoAnalysisError(repo, f"cannot open repository: {e}") from e
    if not ok:
        raise RepoAnalysisError(repo, f"not a git repository: {err[:500]}")

    if resolve_head(repo) is None:
        # unborn or missing HEAD
        return {}

    stats: dict[tuple[dt.date, str], DayStats] = defaultdict(DayStats)
    commits = iter_commits(repo)
    try:
        for commit in commits:
            day = commit.local_date
            if day < window.start_date:
                break
            commit = with_diff_stats(repo, commit)
            entry = stats[(day, commit.author_name)]
            entry.commits += 1
            entry.lines_changed += commit.lines_changed
    finally:
        commits.close()

    return dict(stats)
