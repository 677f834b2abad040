from __future__ import annotations

from fuzzyfind import config as config_module
from fuzzyfind.services.config_service import apply_config_updates, get_config_snapshot


def _prepare_config(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_dir / "config.json")


def test_apply_config_updates_without_changes(tmp_path, monkeypatch):
    _prepare_config(tmp_path, monkeypatch)

    result = apply_config_updates()

    assert result.changed is False
    assert not (tmp_path / "config" / "config.json").exists()


def test_apply_config_updates_sets_fields(tmp_path, monkeypatch):
    _prepare_config(tmp_path, monkeypatch)

    result = apply_config_updates(
        max_results=5,
        batch_size=250,
        cache_capacity=12,
        max_workers=2,
        ignore_patterns="dist,*.bak",
        include_hidden=True,
        respect_gitignore=False,
    )

    assert result.changed is True
    assert result.max_results_set and result.batch_size_set
    assert result.cache_capacity_set and result.max_workers_set
    assert result.ignore_patterns_set and not result.ignore_patterns_cleared
    cfg = get_config_snapshot()
    assert cfg.max_results == 5
    assert cfg.batch_size == 250
    assert cfg.cache_capacity == 12
    assert cfg.max_workers == 2
    assert cfg.ignore_patterns == ("dist", "*.bak")
    assert cfg.include_hidden is True
    assert cfg.respect_gitignore is False


def test_apply_config_updates_clears_ignore_patterns(tmp_path, monkeypatch):
    _prepare_config(tmp_path, monkeypatch)

    result = apply_config_updates(clear_ignore_patterns=True)

    assert result.ignore_patterns_cleared is True
    assert get_config_snapshot().ignore_patterns == ()
