from __future__ import annotations

import os
import subprocess
from pathlib import Path

DEFAULT_EXCLUDE_DIRNAMES = frozenset(
    {
        "node_modules",
        ".venv",
        "vendor",
        "target",
        "dist",
        "build",
        "__pycache__",
    }
)


def run_git(args: list[str], cwd: Path, timeout_s: int | None = None) -> tuple[int, str, str]:
    proc = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        timeout=timeout_s,
    )
    return proc.returncode, proc.stdout, proc.stderr


def discover_git_roots(root: Path, max_depth: int, exclude_dirnames: frozenset[str] | set[str] = DEFAULT_EXCLUDE_DIRNAMES) -> list[Path]:
    """
    Walk `root` looking for directories that hold a `.git` entry.

    Depth follows the directory walk: `root` is depth 0, so a repository at
    depth `d` is found when its `.git` entry (depth `d + 1`) is within
    `max_depth`. Excluded directory names are never descended into, but one
    that itself holds `.git` is still reported.
    """
    roots: list[Path] = []
    base_depth = len(root.parts)

    def onerror(err: OSError) -> None:
        _ = err

    for dirpath, dirnames, filenames in os.walk(root, onerror=onerror):
        depth = len(Path(dirpath).parts) - base_depth
        has_git = ".git" in dirnames or ".git" in filenames
        if has_git and depth + 1 <= max_depth:
            roots.append(Path(dirpath))
        if depth + 1 >= max_depth:
            dirnames[:] = []
            continue
        for d in dirnames:
            if d in exclude_dirnames and (Path(dirpath, d) / ".git").exists():
                roots.append(Path(dirpath, d))
        dirnames[:] = [d for d in dirnames if d not in exclude_dirnames and d != ".git"]
    roots.sort(key=lambda p: p.as_posix())
    return roots


def is_git_repo(repo: Path) -> tuple[bool, str]:
    code, _, err = run_git(["rev-parse", "--git-dir"], cwd=repo)
    return code == 0, err.strip()


def resolve_head(repo: Path) -> str | None:
    code, out, _ = run_git(["rev-parse", "--verify", "-q", "HEAD^{commit}"], cwd=repo)
    if code != 0:
        return None
    sha = out.strip()
    return sha or None


def project_name(repo: Path) -> str:
    return repo.name or str(repo)
