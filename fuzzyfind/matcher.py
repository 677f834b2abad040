"""In-memory fuzzy matcher over a replaceable collection of paths."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from itertools import count
from threading import Lock
from typing import Iterable, Iterator, Sequence

import numpy as np

from .config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_CACHE_CAPACITY,
    DEFAULT_MAX_RESULTS,
    DEFAULT_MAX_WORKERS,
)
from .entries import FileEntry, build_entries
from .query_cache import QueryCache
from .scoring import NO_MATCH, calculate_score

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScoredMatch:
    path: str
    score: int


@dataclass(frozen=True, slots=True)
class _IndexSnapshot:
    entries: tuple[FileEntry, ...] = ()
    generation: int = 0


def normalize_query(query: str | None) -> str:
    return (query or "").lower()


def rank_entries(
    query_lower: str,
    entries: Sequence[FileEntry],
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_workers: int = 1,
    limit: int | None = None,
) -> list[ScoredMatch]:
    """Score *entries* in parallel batches and return matches best first.

    Equal scores keep their index order, so the result does not depend on
    which batch finished first.
    """

    order, scores = _rank_order(
        query_lower, entries, batch_size=batch_size, max_workers=max_workers
    )
    if limit is not None:
        order = order[: max(limit, 0)]
    return [ScoredMatch(path=entries[idx].full_path, score=int(scores[idx])) for idx in order]


def _rank_order(
    query_lower: str,
    entries: Sequence[FileEntry],
    *,
    batch_size: int,
    max_workers: int,
) -> tuple[np.ndarray, np.ndarray]:
    if not query_lower or not entries:
        empty = np.empty(0, dtype=np.int64)
        return empty, empty
    batches = list(_partition(entries, batch_size))
    score_batch = partial(_score_batch, query_lower)
    workers = max(int(max_workers or 1), 1)
    if workers <= 1 or len(batches) <= 1:
        batch_scores = [score_batch(batch) for batch in batches]
    else:
        with ThreadPoolExecutor(max_workers=min(workers, len(batches))) as executor:
            batch_scores = list(executor.map(score_batch, batches))
    scores = np.concatenate(batch_scores)
    matched = np.flatnonzero(scores)
    order = matched[np.argsort(-scores[matched], kind="stable")]
    logger.debug(
        "Scored %d entries in %d batches for %r: %d matches",
        len(entries),
        len(batches),
        query_lower,
        order.size,
    )
    return order, scores


def _score_batch(query_lower: str, batch: Sequence[FileEntry]) -> np.ndarray:
    return np.fromiter(
        (calculate_score(query_lower, entry) for entry in batch),
        dtype=np.int32,
        count=len(batch),
    )


def _partition(entries: Sequence[FileEntry], size: int) -> Iterator[Sequence[FileEntry]]:
    step = max(int(size or DEFAULT_BATCH_SIZE), 1)
    for idx in range(0, len(entries), step):
        yield entries[idx : idx + step]


class FuzzyMatcher:
    """Rank paths of one collection against interactive queries.

    ``set_collection`` swaps in a fully built index snapshot and invalidates
    the query cache; ``search`` reads the snapshot once, so concurrent
    searches always see a complete index.
    """

    def __init__(
        self,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        cache_capacity: int = DEFAULT_CACHE_CAPACITY,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self.batch_size = max(int(batch_size or DEFAULT_BATCH_SIZE), 1)
        self.max_workers = max(int(max_workers or 1), 1)
        self._cache = QueryCache(cache_capacity)
        self._snapshot = _IndexSnapshot(generation=self._cache.generation)
        self._swap_lock = Lock()
        self._tickets = count(1)
        self._installed_ticket = 0

    def __len__(self) -> int:
        return len(self._snapshot.entries)

    @property
    def entries(self) -> tuple[FileEntry, ...]:
        return self._snapshot.entries

    @property
    def cache(self) -> QueryCache:
        return self._cache

    def set_collection(self, paths: Iterable[str]) -> None:
        """Replace the searchable paths; an empty iterable clears the matcher.

        Overlapping calls apply in the order they were made: a build that
        finishes after a newer call has already swapped in is discarded.
        """

        with self._swap_lock:
            ticket = next(self._tickets)
        collection = list(paths)
        entries = build_entries(collection, max_workers=self.max_workers)
        with self._swap_lock:
            if ticket < self._installed_ticket:
                logger.debug("Dropped stale collection of %d entries", len(entries))
                return
            self._installed_ticket = ticket
            generation = self._cache.invalidate_all()
            self._snapshot = _IndexSnapshot(entries=entries, generation=generation)
        logger.debug("Indexed %d entries (generation %d)", len(entries), generation)

    def search(self, query: str, max_results: int = DEFAULT_MAX_RESULTS) -> list[str]:
        """Return up to *max_results* paths, best match first.

        An empty query lists the collection in its original order.
        """

        return [match.path for match in self.rank(query, max_results)]

    def rank(self, query: str, max_results: int = DEFAULT_MAX_RESULTS) -> list[ScoredMatch]:
        """Like :meth:`search`, keeping the score each path was ranked with.

        Browse-mode entries carry a score of 0.
        """

        snapshot = self._snapshot
        limit = max(int(max_results), 0)
        query_lower = normalize_query(query)
        if not query_lower:
            return [
                ScoredMatch(path=entry.full_path, score=NO_MATCH)
                for entry in snapshot.entries[:limit]
            ]

        cached = self._cache.lookup(query_lower, generation=snapshot.generation)
        if (
            cached is not None
            and cached.covers(limit)
            and len(cached.scores) == len(cached.paths)
        ):
            logger.debug("Query cache hit for %r", query_lower)
            return [
                ScoredMatch(path=path, score=score)
                for path, score in zip(cached.paths[:limit], cached.scores[:limit])
            ]
        if not snapshot.entries:
            return []

        order, scores = _rank_order(
            query_lower,
            snapshot.entries,
            batch_size=self.batch_size,
            max_workers=self.max_workers,
        )
        matches = [
            ScoredMatch(path=snapshot.entries[idx].full_path, score=int(scores[idx]))
            for idx in order[:limit]
        ]
        if matches:
            self._cache.insert(
                query_lower,
                [match.path for match in matches],
                scores=[match.score for match in matches],
                complete=order.size <= limit,
                generation=snapshot.generation,
            )
        return matches
