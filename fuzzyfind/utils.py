"""Utility helpers for filesystem access and path handling."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Sequence


def resolve_directory(path: Path | str) -> Path:
    """Resolve and validate a user supplied directory path."""
    dir_path = Path(path).expanduser().resolve()
    if not dir_path.exists():
        raise FileNotFoundError(f"Directory does not exist: {dir_path}")
    if not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")
    return dir_path


def _split_tokens(values: Iterable[str | None]) -> list[str]:
    tokens: list[str] = []
    for raw in values:
        if raw is None:
            continue
        tokens.extend(raw.replace(",", " ").split())
    return tokens


def normalize_extensions(values: Iterable[str | None] | None) -> tuple[str, ...]:
    """Return a sorted, deduplicated tuple of normalized file extensions."""

    if not values:
        return ()
    normalized: set[str] = set()
    for token in _split_tokens(values):
        token = token.lower()
        if not token.startswith("."):
            token = f".{token}"
        if token != ".":
            normalized.add(token)
    return tuple(sorted(normalized))


def normalize_ignore_patterns(values: Iterable[str | None] | None) -> tuple[str, ...]:
    """Return comma separated ignore patterns as a deduplicated tuple, order kept."""

    if not values:
        return ()
    patterns: list[str] = []
    for raw in values:
        if raw is None:
            continue
        for token in raw.split(","):
            cleaned = token.strip()
            if cleaned and cleaned not in patterns:
                patterns.append(cleaned)
    return tuple(patterns)


def match_ignore_pattern(
    rel_path: str, name: str, patterns: Sequence[str]
) -> str | None:
    """Return the first pattern that ignores an entry, or None.

    ``*suffix`` patterns match the end of the entry name; any other pattern
    matches when it occurs anywhere in the path relative to the scan root.
    """

    for pattern in patterns:
        if pattern.startswith("*"):
            if name.endswith(pattern[1:]):
                return pattern
        elif pattern in rel_path:
            return pattern
    return None


def matches_extension(path: str, extensions: Sequence[str]) -> bool:
    """Return True if the name of *path* ends with any of *extensions*."""

    filename = os.path.basename(path).lower()
    return any(filename.endswith(ext) for ext in extensions)


def path_suffix(path: str) -> str:
    """Return the lowercase extension of *path* without the dot, or ''."""

    name = os.path.basename(path)
    stem, dot, suffix = name.rpartition(".")
    if not dot or not stem:
        return ""
    return suffix.lower()


def find_git_root(path: Path) -> Path | None:
    for candidate in (path,) + tuple(path.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


def _read_lines(path: Path) -> list[str]:
    try:
        return path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return []


def _scope_gitignore_line(line: str, base_dir: str) -> str | None:
    """Rewrite a .gitignore line found in *base_dir* relative to the ignore root."""

    if not line.strip() or line.startswith("#"):
        return None
    if not base_dir:
        return line
    prefix = ""
    body = line
    if body.startswith("!"):
        prefix, body = "!", body[1:]
    if body.startswith("/"):
        return f"{prefix}{base_dir}/{body[1:]}"
    if "/" in body.rstrip("/"):
        return f"{prefix}{base_dir}/{body}"
    return f"{prefix}{base_dir}/**/{body}"


def relative_posix(path: Path, root: Path) -> str:
    rel = path.relative_to(root)
    if rel == Path("."):
        return ""
    return rel.as_posix()


def empty_gitignore_spec():
    from pathspec.gitignore import GitIgnoreSpec

    return GitIgnoreSpec.from_lines([])


def extend_gitignore_spec(spec, directory: Path, ignore_root: Path):
    """Return *spec* plus the rules of ``directory/.gitignore`` if present."""

    from pathspec.gitignore import GitIgnoreSpec

    gitignore_file = directory / ".gitignore"
    if not gitignore_file.is_file():
        return spec
    base_dir = relative_posix(directory, ignore_root)
    scoped = [
        scoped_line
        for scoped_line in (
            _scope_gitignore_line(line, base_dir) for line in _read_lines(gitignore_file)
        )
        if scoped_line is not None
    ]
    return spec + GitIgnoreSpec.from_lines(scoped)


def is_gitignored(spec, rel_path: str, *, is_dir: bool) -> bool:
    if not rel_path:
        return False
    candidate = f"{rel_path}/" if is_dir and not rel_path.endswith("/") else rel_path
    return bool(spec.match_file(candidate))


def build_gitignore_base(ignore_root: Path, scan_root: Path):
    """Collect the rules that apply above *scan_root*.

    Returns ``(spec, ignored)`` where *ignored* is True when *scan_root* is
    itself excluded. The scan root's own ``.gitignore`` is not included.
    """

    spec = empty_gitignore_spec()
    exclude_file = ignore_root / ".git" / "info" / "exclude"
    if exclude_file.is_file():
        from pathspec.gitignore import GitIgnoreSpec

        spec = spec + GitIgnoreSpec.from_lines(_read_lines(exclude_file))
    try:
        parts = scan_root.relative_to(ignore_root).parts
    except ValueError:
        return spec, False
    for depth in range(len(parts)):
        ancestor = ignore_root.joinpath(*parts[:depth])
        if depth and is_gitignored(spec, relative_posix(ancestor, ignore_root), is_dir=True):
            return spec, True
        spec = extend_gitignore_spec(spec, ancestor, ignore_root)
    if is_gitignored(spec, relative_posix(scan_root, ignore_root), is_dir=True):
        return spec, True
    return spec, False


def format_path(path: str | Path, base: Path | None = None) -> str:
    """Return a user friendly representation of *path* relative to *base* when possible."""
    if base:
        try:
            relative = Path(path).relative_to(base)
            return f"./{relative.as_posix()}"
        except ValueError:
            return str(path)
    return str(path)


def ensure_positive(value: int, name: str) -> int:
    """Validate that *value* is positive."""
    if value <= 0:
        raise ValueError(f"{name} must be greater than 0")
    return value
