"""Bounded Levenshtein distance used by the edit-distance scoring stage."""

from __future__ import annotations


def bounded_levenshtein(a: str, b: str) -> int:
    """Return the edit distance between *a* and *b*, capped early at ``len(a)``.

    Only two rows of ``len(b) + 1`` cells are kept. Once a completed row has
    every computed cell at or above ``len(a)`` the distance cannot become
    useful any more and ``len(a)`` is returned straight away.
    """

    len_a = len(a)
    len_b = len(b)
    if len_a == 0:
        return len_b
    if len_b == 0:
        return len_a
    if abs(len_a - len_b) > len_a:
        return len_b

    threshold = len_a
    previous = list(range(len_b + 1))
    for i, char_a in enumerate(a):
        current = [i + 1]
        exhausted = True
        for j, char_b in enumerate(b):
            cost = 0 if char_a == char_b else 1
            value = min(current[j] + 1, previous[j + 1] + 1, previous[j] + cost)
            current.append(value)
            if value < threshold:
                exhausted = False
        if exhausted:
            return threshold
        previous = current
    return previous[len_b]
