from __future__ import annotations

from pathlib import Path

import pytest

import fuzzyfind
from fuzzyfind import api
from fuzzyfind import config as config_module


@pytest.fixture(autouse=True)
def temp_config_home(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_dir / "config.json")


@pytest.fixture()
def tree(tmp_path: Path) -> Path:
    root = tmp_path / "tree"
    for rel in ("test.cpp", "testing.cpp", "readme.txt", "lib/test_utils.py", "scratch.tmp"):
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("x", encoding="utf-8")
    return root


def test_search_directory_returns_ranked_paths(tree):
    results = fuzzyfind.search_directory("test", tree, top=3)

    assert [Path(path).name for path in results] == ["test.cpp", "testing.cpp", "test_utils.py"]


def test_search_directory_uses_configured_defaults(tree):
    config_module.set_max_results(1)

    assert len(api.search_directory("test", tree)) == 1


def test_search_directory_applies_default_ignore_patterns(tree):
    default_names = [Path(path).name for path in api.search_directory("scratch", tree)]
    assert "scratch.tmp" not in default_names

    found = api.search_directory("scratch", tree, ignore_patterns=[])
    assert Path(found[0]).name == "scratch.tmp"


def test_search_directory_filters(tree):
    results = api.search_directory("test", tree, extensions="py")
    assert [Path(path).name for path in results] == ["test_utils.py"]

    dirs = api.search_directory("", tree, kind="dirs")
    assert [Path(path).name for path in dirs] == ["lib"]


def test_search_directory_rejects_invalid_input(tmp_path, tree):
    with pytest.raises(api.FuzzyFindError):
        api.search_directory("x", tmp_path / "missing")
    with pytest.raises(api.FuzzyFindError):
        api.search_directory("x", tree, top=0)
    with pytest.raises(api.FuzzyFindError):
        api.search_directory("x", tree, kind="sockets")


def test_fuzzyfind_error_is_value_error():
    assert issubclass(api.FuzzyFindError, ValueError)
