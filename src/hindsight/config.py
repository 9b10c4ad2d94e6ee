from __future__ import annotations

import dataclasses
import json
import os
from pathlib import Path

from .analysis_aggregate import parse_author_filter
from .git import DEFAULT_EXCLUDE_DIRNAMES

DEFAULT_CONFIG_PATH = Path("hindsight.json")
DEFAULT_DAYS = 365
DEFAULT_DEPTH = 3


def default_jobs() -> int:
    return max(1, min(8, (os.cpu_count() or 4)))


@dataclasses.dataclass(frozen=True)
class Settings:
    root: Path
    days: int = DEFAULT_DAYS
    depth: int = DEFAULT_DEPTH
    authors: list[str] | None = None
    jobs: int = dataclasses.field(default_factory=default_jobs)
    exclude_dirnames: frozenset[str] = DEFAULT_EXCLUDE_DIRNAMES
    list_mode: bool = False
    export_tsv: Path | None = None

    @property
    def interactive(self) -> bool:
        return not (self.list_mode or self.export_tsv is not None)


def load_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config file {config_path}: expected a JSON object")
    return data


def _int_setting(config: dict, key: str, default: int, *, minimum: int) -> int:
    raw = config.get(key, default)
    try:
        value = int(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"config `{key}` must be an integer, got {raw!r}") from e
    if value < minimum:
        raise ValueError(f"config `{key}` must be >= {minimum}, got {value}")
    return value


def resolve_settings(
    *,
    root: Path,
    config: dict,
    days: int | None = None,
    depth: int | None = None,
    authors: str | None = None,
    jobs: int | None = None,
    list_mode: bool = False,
    export_tsv: Path | None = None,
) -> Settings:
    """Command-line values win over config.json, which wins over built-in defaults."""
    exclude_cfg = config.get("exclude_dirnames")
    exclude_dirnames = frozenset(str(d) for d in exclude_cfg) if exclude_cfg else DEFAULT_EXCLUDE_DIRNAMES

    return Settings(
        root=root,
        days=days if days is not None else _int_setting(config, "days", DEFAULT_DAYS, minimum=0),
        depth=depth if depth is not None else _int_setting(config, "depth", DEFAULT_DEPTH, minimum=1),
        authors=parse_author_filter(authors if authors is not None else config.get("authors")),
        jobs=jobs if jobs is not None else _int_setting(config, "jobs", default_jobs(), minimum=1),
        exclude_dirnames=exclude_dirnames,
        list_mode=list_mode,
        export_tsv=export_tsv,
    )
