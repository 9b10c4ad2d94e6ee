from __future__ import annotations

from pathlib import Path

import pytest

from hindsight.config import DEFAULT_DAYS, DEFAULT_DEPTH, load_config, resolve_settings
from hindsight.git import DEFAULT_EXCLUDE_DIRNAMES


def test_load_config_missing_file_is_empty(tmp_path: Path) -> None:
    assert load_config(tmp_path / "nope.json") == {}


def test_load_config_rejects_invalid_json(tmp_path: Path) -> None:
    p = tmp_path / "hindsight.json"
    p.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(p)


def test_load_config_rejects_non_object(tmp_path: Path) -> None:
    p = tmp_path / "hindsight.json"
    p.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(p)


def test_defaults_without_config(tmp_path: Path) -> None:
    s = resolve_settings(root=tmp_path, config={})

    assert s.days == DEFAULT_DAYS
    assert s.depth == DEFAULT_DEPTH
    assert s.authors is None
    assert s.jobs >= 1
    assert s.exclude_dirnames == DEFAULT_EXCLUDE_DIRNAMES
    assert s.interactive


def test_cli_values_override_config(tmp_path: Path) -> None:
    config = {"days": 30, "depth": 5, "authors": ["Alice", " Bob "], "jobs": 2, "exclude_dirnames": ["third_party"]}

    from_config = resolve_settings(root=tmp_path, config=config)
    assert (from_config.days, from_config.depth, from_config.jobs) == (30, 5, 2)
    assert from_config.authors == ["Alice", "Bob"]
    assert from_config.exclude_dirnames == frozenset({"third_party"})

    overridden = resolve_settings(root=tmp_path, config=config, days=7, depth=1, authors="Carol", jobs=1)
    assert (overridden.days, overridden.depth, overridden.jobs) == (7, 1, 1)
    assert overridden.authors == ["Carol"]


def test_list_and_export_disable_interactive_mode(tmp_path: Path) -> None:
    assert not resolve_settings(root=tmp_path, config={}, list_mode=True).interactive
    assert not resolve_settings(root=tmp_path, config={}, export_tsv=tmp_path / "out.tsv").interactive


@pytest.mark.parametrize("config", [{"days": -1}, {"depth": 0}, {"jobs": "many"}])
def test_bad_config_values(tmp_path: Path, config: dict) -> None:
    with pytest.raises(ValueError):
        resolve_settings(root=tmp_path, config=config)
