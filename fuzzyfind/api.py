"""Public Python API for fuzzyfind."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from .config import load_config
from .services.search_service import EntryKind, SearchRequest, perform_search
from .utils import ensure_positive, normalize_extensions, normalize_ignore_patterns, resolve_directory


class FuzzyFindError(ValueError):
    """Raised when the fuzzyfind public API input is invalid."""


def search_directory(
    query: str,
    path: Path | str = ".",
    *,
    top: int | None = None,
    extensions: Sequence[str] | str | None = None,
    kind: EntryKind | str = EntryKind.ALL,
    ignore_patterns: Sequence[str] | str | None = None,
    include_hidden: bool | None = None,
    respect_gitignore: bool | None = None,
) -> list[str]:
    """Scan *path* and return the best matching paths for *query*.

    Unset options fall back to the stored configuration.
    """

    config = load_config()
    top_k = config.max_results if top is None else top
    try:
        ensure_positive(top_k, "top")
        directory = resolve_directory(path)
        entry_kind = EntryKind(kind)
    except (FileNotFoundError, NotADirectoryError, ValueError) as exc:
        raise FuzzyFindError(str(exc)) from exc

    request = SearchRequest(
        query=query,
        directory=directory,
        top_k=top_k,
        include_hidden=config.include_hidden if include_hidden is None else include_hidden,
        respect_gitignore=(
            config.respect_gitignore if respect_gitignore is None else respect_gitignore
        ),
        ignore_patterns=(
            tuple(config.ignore_patterns)
            if ignore_patterns is None
            else normalize_ignore_patterns(_as_list(ignore_patterns))
        ),
        extensions=normalize_extensions(_as_list(extensions)),
        kind=entry_kind,
        batch_size=config.batch_size,
        cache_capacity=config.cache_capacity,
        max_workers=config.max_workers,
    )
    response = perform_search(request)
    return [hit.path for hit in response.results]


def _as_list(values: Sequence[str] | str | None) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        return [values]
    return list(values)
