from __future__ import annotations

from pathlib import Path

import pytest

from fuzzyfind import utils


def test_resolve_directory_errors(tmp_path):
    missing = tmp_path / "missing"
    with pytest.raises(FileNotFoundError):
        utils.resolve_directory(missing)

    file_path = tmp_path / "file.txt"
    file_path.write_text("x")
    with pytest.raises(NotADirectoryError):
        utils.resolve_directory(file_path)

    assert utils.resolve_directory(tmp_path) == tmp_path.resolve()


def test_normalize_extensions():
    assert utils.normalize_extensions(None) == ()
    assert utils.normalize_extensions(["py, .MD", "txt py", ".", None]) == (".md", ".py", ".txt")


def test_normalize_ignore_patterns_keeps_order():
    assert utils.normalize_ignore_patterns(["build, dist", "build", " *.log ,,"]) == (
        "build",
        "dist",
        "*.log",
    )
    assert utils.normalize_ignore_patterns([]) == ()


@pytest.mark.parametrize(
    ("rel_path", "name", "expected"),
    [
        ("node_modules/pkg/index.js", "index.js", "node_modules"),
        ("src/node_modules", "node_modules", "node_modules"),
        ("scratch.tmp", "scratch.tmp", "*.tmp"),
        ("src/main.py", "main.py", None),
        ("notes/tmp.txt", "tmp.txt", None),
        ("a.github/x", "x", ".git"),
    ],
)
def test_match_ignore_pattern(rel_path, name, expected):
    patterns = ("node_modules", ".git", ".svn", "*.tmp")
    assert utils.match_ignore_pattern(rel_path, name, patterns) == expected


def test_matches_extension_is_case_insensitive():
    assert utils.matches_extension("/a/README.MD", (".md",))
    assert not utils.matches_extension("/a/readme.txt", (".md", ".py"))


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/a/main.PY", "py"),
        ("/a/archive.tar.gz", "gz"),
        ("/a/Makefile", ""),
        ("/a/.bashrc", ""),
        ("/a/trailing.", ""),
    ],
)
def test_path_suffix(path, expected):
    assert utils.path_suffix(path) == expected


def test_format_path_relative_and_absolute(tmp_path):
    inner = tmp_path / "src" / "main.py"

    assert utils.format_path(inner, tmp_path) == "./src/main.py"
    assert utils.format_path(str(inner), tmp_path) == "./src/main.py"
    assert utils.format_path(inner) == str(inner)
    assert utils.format_path(Path("/elsewhere/x"), tmp_path) == "/elsewhere/x"


def test_ensure_positive():
    assert utils.ensure_positive(3, "top") == 3
    with pytest.raises(ValueError, match="top must be greater than 0"):
        utils.ensure_positive(0, "top")


def test_find_git_root(tmp_path):
    (tmp_path / ".git").mkdir()
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert utils.find_git_root(nested) == tmp_path


def test_scope_gitignore_line_variants():
    scope = utils._scope_gitignore_line  # type: ignore[attr-defined]

    assert scope("# comment", "sub") is None
    assert scope("   ", "sub") is None
    assert scope("*.log", "") == "*.log"
    assert scope("*.log", "sub") == "sub/**/*.log"
    assert scope("/build", "sub") == "sub/build"
    assert scope("docs/out", "sub") == "sub/docs/out"
    assert scope("!keep.log", "sub") == "!sub/**/keep.log"


def test_gitignore_spec_helpers(tmp_path):
    (tmp_path / ".gitignore").write_text("*.log\nbuild/\n", encoding="utf-8")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / ".gitignore").write_text("local.txt\n", encoding="utf-8")

    spec = utils.extend_gitignore_spec(utils.empty_gitignore_spec(), tmp_path, tmp_path)
    spec = utils.extend_gitignore_spec(spec, sub, tmp_path)

    assert utils.is_gitignored(spec, "app.log", is_dir=False)
    assert utils.is_gitignored(spec, "build", is_dir=True)
    assert not utils.is_gitignored(spec, "build", is_dir=False)
    assert utils.is_gitignored(spec, "sub/local.txt", is_dir=False)
    assert not utils.is_gitignored(spec, "local.txt", is_dir=False)
    assert not utils.is_gitignored(spec, "", is_dir=True)


def test_build_gitignore_base_detects_ignored_root(tmp_path):
    (tmp_path / ".git" / "info").mkdir(parents=True)
    (tmp_path / ".git" / "info" / "exclude").write_text("secret.txt\n", encoding="utf-8")
    (tmp_path / ".gitignore").write_text("generated/\n", encoding="utf-8")
    generated = tmp_path / "generated" / "deep"
    generated.mkdir(parents=True)
    plain = tmp_path / "plain"
    plain.mkdir()

    spec, ignored = utils.build_gitignore_base(tmp_path, generated)
    assert ignored is True

    spec, ignored = utils.build_gitignore_base(tmp_path, plain)
    assert ignored is False
    assert utils.is_gitignored(spec, "plain/secret.txt", is_dir=False)
