from __future__ import annotations

import logging
from pathlib import Path

import pytest
import typer

from fuzzyfind import cli
from fuzzyfind.config import Config
from fuzzyfind.services.search_service import EntryKind, SearchHit


def test_parse_boolean_variants():
    assert cli._parse_boolean("Yes") is True  # type: ignore[attr-defined]
    assert cli._parse_boolean(" off ") is False  # type: ignore[attr-defined]
    with pytest.raises(ValueError):
        cli._parse_boolean("maybe")  # type: ignore[attr-defined]


def test_format_patterns_display():
    assert cli._format_patterns_display(None) == "none"  # type: ignore[attr-defined]
    assert cli._format_patterns_display(("a", "*.tmp")) == "a, *.tmp"  # type: ignore[attr-defined]


def test_format_score_and_display_path(tmp_path):
    assert cli._format_score(None) == "-"  # type: ignore[attr-defined]
    assert cli._format_score(800) == "800"  # type: ignore[attr-defined]

    hit = SearchHit(path=str(tmp_path / "src"), is_dir=True)
    assert cli._display_path(hit, tmp_path) == "./src/"  # type: ignore[attr-defined]


def test_escape_porcelain_field():
    assert cli._escape_porcelain_field("a\tb\nc\\d") == "a\\tb\\nc\\\\d"  # type: ignore[attr-defined]


def _build(**overrides):
    params = dict(
        query="q",
        directory=Path("/tmp"),
        config=Config(),
        top=None,
        include_hidden=False,
        no_respect_gitignore=False,
        ignore_patterns=None,
        extensions=None,
        kind=EntryKind.ALL,
    )
    params.update(overrides)
    return cli._build_request(**params)  # type: ignore[attr-defined]


def test_build_request_uses_config_defaults():
    config = Config(max_results=4, include_hidden=True, respect_gitignore=False)

    request = _build(config=config)

    assert request.top_k == 4
    assert request.include_hidden is True
    assert request.respect_gitignore is False
    assert request.ignore_patterns == config.ignore_patterns


def test_build_request_overrides():
    request = _build(
        top=2,
        no_respect_gitignore=True,
        ignore_patterns=["dist,build"],
        extensions=["py", "MD"],
    )

    assert request.top_k == 2
    assert request.respect_gitignore is False
    assert request.ignore_patterns == ("dist", "build")
    assert request.extensions == (".md", ".py")


def test_build_request_rejects_bad_values():
    with pytest.raises(typer.BadParameter):
        _build(top=0)
    with pytest.raises(typer.BadParameter):
        _build(extensions=[" , "])


def test_configure_logging_attaches_single_handler(monkeypatch):
    package_logger = logging.getLogger("fuzzyfind")
    monkeypatch.setattr(package_logger, "handlers", [])
    original_level = package_logger.level

    try:
        cli._configure_logging(False)  # type: ignore[attr-defined]
        assert package_logger.handlers == []

        cli._configure_logging(True)  # type: ignore[attr-defined]
        cli._configure_logging(True)  # type: ignore[attr-defined]
        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.DEBUG
    finally:
        package_logger.setLevel(original_level)


def test_default_group_routes_unknown_tokens_to_search():
    group = typer.main.get_command(cli.app)
    ctx = group.context_class(group, info_name="fuzzyfind")

    name, command, args = group.resolve_command(ctx, ["main", "--top", "2"])
    assert name == "search"
    assert command is group.get_command(ctx, "search")
    assert args == ["main", "--top", "2"]

    name, command, args = group.resolve_command(ctx, ["config", "--show"])
    assert name == "config"
    assert args == ["--show"]


def test_default_group_keeps_errors_for_command_typos():
    group = typer.main.get_command(cli.app)
    ctx = group.context_class(group, info_name="fuzzyfind")

    with pytest.raises(Exception) as excinfo:
        group.resolve_command(ctx, ["confg"])

    assert excinfo.value.exit_code == 2
    assert "confg" in excinfo.value.format_message()
