"""fuzzyfind package initialization."""

from __future__ import annotations

from .api import FuzzyFindError, search_directory
from .distance import bounded_levenshtein
from .entries import FileEntry, build_entries
from .matcher import FuzzyMatcher, ScoredMatch, rank_entries
from .query_cache import QueryCache
from .scoring import calculate_score

__all__ = [
    "__version__",
    "FileEntry",
    "FuzzyFindError",
    "FuzzyMatcher",
    "QueryCache",
    "ScoredMatch",
    "bounded_levenshtein",
    "build_entries",
    "calculate_score",
    "get_version",
    "rank_entries",
    "search_directory",
]

__version__ = "0.1.0"


def get_version() -> str:
    """Return the current package version."""
    return __version__
