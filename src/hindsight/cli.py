from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .analysis_run import run_analysis
from .config import DEFAULT_CONFIG_PATH, load_config, resolve_settings


def _non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"expected a value >= 0, got {value}")
    return n


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a value >= 1, got {value}")
    return n


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hindsight",
        description="Commit activity heatmap across the git repositories under a directory.",
    )
    parser.add_argument("path", type=Path, nargs="?", default=Path("."), help="Directory to scan.")
    parser.add_argument("-d", "--days", type=_non_negative_int, default=None, help="Number of days to look back (default: 365).")
    parser.add_argument("--depth", type=_positive_int, default=None, help="Max depth for recursive search (default: 3).")
    parser.add_argument("--list", action="store_true", help="List output as a table (Date, Project, Commits, Lines, Author).")
    parser.add_argument("--authors", type=str, default=None, help="Filter by authors (comma separated, exact names).")
    parser.add_argument("--export-tsv", type=Path, default=None, help="Export TSV to file (also prints the table to stdout).")
    parser.add_argument("--jobs", type=_positive_int, default=None, help="Repositories analyzed in parallel.")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to an optional JSON config file.")
    return parser


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        settings = resolve_settings(
            root=args.path,
            config=config,
            days=args.days,
            depth=args.depth,
            authors=args.authors,
            jobs=args.jobs,
            list_mode=bool(args.list),
            export_tsv=args.export_tsv,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return run_analysis(settings)


if __name__ == "__main__":
    raise SystemExit(main())
