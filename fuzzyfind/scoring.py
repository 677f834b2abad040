"""Layered heuristic scoring of a single entry against a query.

Stages run in strict priority order and the first one that applies decides
the score:

1. exact name match
2. name prefix
3. name substring
4. initialism (first letters of successive words)
5. bounded edit distance
6. in-order subsequence

A score of 0 means the entry is excluded from results.
"""

from __future__ import annotations

import re

from .distance import bounded_levenshtein
from .entries import FileEntry

EXACT_SCORE = 1000
PREFIX_SCORE = 800
SUBSTRING_SCORE = 600
INITIALISM_SCORE = 550
EDIT_DISTANCE_BASE = 500
EDIT_DISTANCE_PENALTY = 10
EDIT_DISTANCE_MIN_SCORE = 1
SUBSEQUENCE_BASE = 100
SUBSEQUENCE_MAX_PENALTY = 90
SUBSEQUENCE_MIN_SCORE = 10
NO_MATCH = 0

INITIALISM_MIN_QUERY = 2
INITIALISM_MAX_QUERY = 5
EDIT_DISTANCE_MIN_QUERY = 3
EDIT_DISTANCE_SHORT_NAME = 10

_WORD_SEPARATOR_RE = re.compile(r"[^a-zA-Z0-9]+")


def calculate_score(query_lower: str, entry: FileEntry) -> int:
    """Return the relevance of *entry* for a non-empty lowercase query."""

    name = entry.lower_name
    if name == query_lower:
        return EXACT_SCORE
    if name.startswith(query_lower):
        return PREFIX_SCORE
    if query_lower in name:
        return SUBSTRING_SCORE
    if matches_initialism(query_lower, name):
        return INITIALISM_SCORE
    edit_score = edit_distance_score(query_lower, name)
    if edit_score is not None:
        return edit_score
    return subsequence_score(query_lower, name)


def split_words(name: str) -> list[str]:
    return [word for word in _WORD_SEPARATOR_RE.split(name) if word]


def matches_initialism(query_lower: str, name: str) -> bool:
    """Return True when each query char starts the matching word of *name*."""

    if not INITIALISM_MIN_QUERY <= len(query_lower) <= INITIALISM_MAX_QUERY:
        return False
    words = split_words(name)
    if len(words) < len(query_lower):
        return False
    return all(word[0] == char for word, char in zip(words, query_lower))


def edit_distance_score(query_lower: str, name: str) -> int | None:
    """Return the edit-distance stage score, or None when the stage does not apply."""

    if len(query_lower) < EDIT_DISTANCE_MIN_QUERY and len(name) >= EDIT_DISTANCE_SHORT_NAME:
        return None
    distance = bounded_levenshtein(query_lower, name)
    if distance > 2 * len(query_lower):
        return None
    return max(EDIT_DISTANCE_MIN_SCORE, EDIT_DISTANCE_BASE - EDIT_DISTANCE_PENALTY * distance)


def subsequence_score(query_lower: str, name: str) -> int:
    """Score an in-order scattered match; tighter clusters score higher."""

    first = -1
    last = -1
    for char in query_lower:
        position = name.find(char, last + 1)
        if position == -1:
            return NO_MATCH
        if first == -1:
            first = position
        last = position
    span = last + 1 - first
    return max(SUBSEQUENCE_MIN_SCORE, SUBSEQUENCE_BASE - min(SUBSEQUENCE_MAX_PENALTY, span))
