"""Logic helpers for the `fuzzyfind search` and `interactive` commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Sequence

from ..config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_CACHE_CAPACITY,
    DEFAULT_IGNORE_PATTERNS,
    DEFAULT_MAX_RESULTS,
    DEFAULT_MAX_WORKERS,
)
from ..matcher import FuzzyMatcher, normalize_query
from ..utils import ensure_positive, matches_extension, path_suffix, resolve_directory
from .scan_service import DirectoryScanner, ScanProgress, ScanResult

logger = logging.getLogger(__name__)

# Candidate pool requested from the matcher before result filters apply.
FILTER_CANDIDATE_LIMIT = 10_000


class EntryKind(str, Enum):
    ALL = "all"
    FILES = "files"
    DIRS = "dirs"


@dataclass(slots=True)
class SearchHit:
    path: str
    score: int | None = None
    is_dir: bool = False


@dataclass(slots=True)
class SearchRequest:
    query: str
    directory: Path
    top_k: int = DEFAULT_MAX_RESULTS
    include_hidden: bool = False
    respect_gitignore: bool = True
    ignore_patterns: tuple[str, ...] = DEFAULT_IGNORE_PATTERNS
    extensions: tuple[str, ...] = ()
    kind: EntryKind = EntryKind.ALL
    batch_size: int = DEFAULT_BATCH_SIZE
    cache_capacity: int = DEFAULT_CACHE_CAPACITY
    max_workers: int = DEFAULT_MAX_WORKERS


@dataclass(slots=True)
class SearchResponse:
    base_path: Path
    results: list[SearchHit] = field(default_factory=list)
    total_entries: int = 0
    scan_errors: int = 0

    @property
    def index_empty(self) -> bool:
        return self.total_entries == 0


class SearchSession:
    """A scanned directory bound to one matcher, queried repeatedly."""

    def __init__(
        self,
        directory: Path | str,
        *,
        scanner: DirectoryScanner | None = None,
        matcher: FuzzyMatcher | None = None,
    ) -> None:
        self.directory = resolve_directory(directory)
        self.scanner = scanner if scanner is not None else DirectoryScanner()
        self.matcher = matcher if matcher is not None else FuzzyMatcher()
        self._scan: ScanResult | None = None

    @classmethod
    def from_request(
        cls,
        request: SearchRequest,
        *,
        progress: ScanProgress | None = None,
    ) -> "SearchSession":
        scanner = DirectoryScanner(
            include_hidden=request.include_hidden,
            respect_gitignore=request.respect_gitignore,
            ignore_patterns=request.ignore_patterns,
            max_workers=request.max_workers,
            progress=progress,
        )
        matcher = FuzzyMatcher(
            batch_size=request.batch_size,
            cache_capacity=request.cache_capacity,
            max_workers=request.max_workers,
        )
        return cls(request.directory, scanner=scanner, matcher=matcher)

    @property
    def scan_result(self) -> ScanResult:
        if self._scan is None:
            return self.refresh()
        return self._scan

    def refresh(self) -> ScanResult:
        """Rescan the directory and replace the matcher collection."""

        scan = self.scanner.scan(self.directory)
        self.matcher.set_collection(scan.paths)
        self._scan = scan
        return scan

    def search(
        self,
        query: str,
        top_k: int = DEFAULT_MAX_RESULTS,
        *,
        extensions: Sequence[str] = (),
        kind: EntryKind = EntryKind.ALL,
    ) -> list[SearchHit]:
        ensure_positive(top_k, "top_k")
        scan = self.scan_result
        filtered = bool(extensions) or kind is not EntryKind.ALL
        limit = max(top_k, FILTER_CANDIDATE_LIMIT) if filtered else top_k
        matches = self.matcher.rank(query, limit)
        if filtered:
            matches = [
                match
                for match in matches
                if _accepts(match.path, scan.directories, extensions=extensions, kind=kind)
            ][:top_k]
        has_query = bool(normalize_query(query))
        return [
            SearchHit(
                path=match.path,
                score=match.score if has_query else None,
                is_dir=match.path in scan.directories,
            )
            for match in matches
        ]

    def extensions(self) -> tuple[str, ...]:
        scan = self.scan_result
        return list_extensions(path for path in scan.paths if path not in scan.directories)


def list_extensions(paths: Iterable[str]) -> tuple[str, ...]:
    """Return the sorted lowercase extensions present in *paths*."""

    return tuple(sorted({suffix for suffix in map(path_suffix, paths) if suffix}))


def _accepts(
    path: str,
    directories: frozenset[str],
    *,
    extensions: Sequence[str],
    kind: EntryKind,
) -> bool:
    is_dir = path in directories
    if kind is EntryKind.FILES and is_dir:
        return False
    if kind is EntryKind.DIRS and not is_dir:
        return False
    if extensions and not matches_extension(path, extensions):
        return False
    return True


def perform_search(
    request: SearchRequest,
    *,
    progress: ScanProgress | None = None,
) -> SearchResponse:
    """Scan ``request.directory`` and return the ranked hits for one query."""

    session = SearchSession.from_request(request, progress=progress)
    scan = session.refresh()
    if not scan.paths:
        return SearchResponse(base_path=session.directory, scan_errors=len(scan.errors))
    results = session.search(
        request.query,
        request.top_k,
        extensions=request.extensions,
        kind=request.kind,
    )
    logger.debug("Query %r returned %d hits", request.query, len(results))
    return SearchResponse(
        base_path=session.directory,
        results=results,
        total_entries=len(scan.paths),
        scan_errors=len(scan.errors),
    )
