"""Bounded, thread-safe cache of ranked results keyed by normalized query."""

from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Sequence

from .config import DEFAULT_CACHE_CAPACITY


@dataclass(frozen=True, slots=True)
class CachedResult:
    paths: tuple[str, ...]
    # False when more matches existed than were stored.
    complete: bool = True
    # Ranking scores parallel to ``paths``; empty when none were stored.
    scores: tuple[int, ...] = ()

    def covers(self, limit: int) -> bool:
        return self.complete or len(self.paths) >= limit


class QueryCache:
    """Map normalized queries to the ranked paths computed for them.

    The cache never grows past ``capacity``: inserts are skipped once it is
    full. Every entry belongs to a generation; ``invalidate_all`` drops all
    entries and starts a new generation, so results computed against a
    replaced index can neither be served nor stored.
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_CAPACITY) -> None:
        self.capacity = max(int(capacity), 0)
        self._entries: dict[str, CachedResult] = {}
        self._generation = 0
        self._lock = Lock()

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, query: object) -> bool:
        with self._lock:
            return query in self._entries

    def lookup(self, query: str, *, generation: int | None = None) -> CachedResult | None:
        with self._lock:
            if generation is not None and generation != self._generation:
                return None
            return self._entries.get(query)

    def insert(
        self,
        query: str,
        results: Sequence[str],
        *,
        scores: Sequence[int] = (),
        complete: bool = True,
        generation: int | None = None,
    ) -> bool:
        """Store *results* for *query*; return False when nothing was stored."""

        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            if query not in self._entries and len(self._entries) >= self.capacity:
                return False
            self._entries[query] = CachedResult(
                paths=tuple(results), complete=complete, scores=tuple(scores)
            )
            return True

    def invalidate_all(self) -> int:
        """Clear every entry and return the new generation."""

        with self._lock:
            self._entries.clear()
            self._generation += 1
            return self._generation
