from __future__ import annotations

import pytest

from fuzzyfind.distance import bounded_levenshtein


@pytest.mark.parametrize(
    ("a", "b", "expected"),
    [
        ("", "abc", 3),
        ("abc", "", 3),
        ("", "", 0),
        ("abc", "abc", 0),
        ("kitten", "sitting", 3),
        ("tset", "test", 2),
        ("log", "lgo", 2),
    ],
)
def test_bounded_levenshtein_small_cases(a, b, expected):
    assert bounded_levenshtein(a, b) == expected


def test_length_gap_beyond_query_returns_candidate_length():
    assert bounded_levenshtein("ab", "abcdefgh") == 8


def test_distance_is_capped_at_query_length_once_rows_exhaust():
    # The true distance is 4; every cell of the second row is >= 2.
    assert bounded_levenshtein("ab", "xyzw") == 2


def test_long_mismatch_caps_at_threshold():
    assert bounded_levenshtein("a" * 50, "b" * 50) == 50
    assert bounded_levenshtein("a" * 25, "b" * 50) == 25
