"""Normalized path entries backing the in-memory match index."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterator, Sequence

DEFAULT_BUILD_CHUNK_SIZE = 4096


@dataclass(frozen=True, slots=True)
class FileEntry:
    """One indexed path with its base name precomputed for matching."""

    full_path: str
    file_name: str
    lower_name: str


def make_entry(path: str) -> FileEntry:
    file_name = os.path.basename(path)
    return FileEntry(full_path=path, file_name=file_name, lower_name=file_name.lower())


def build_entries(
    paths: Sequence[str],
    *,
    max_workers: int = 1,
    chunk_size: int = DEFAULT_BUILD_CHUNK_SIZE,
) -> tuple[FileEntry, ...]:
    """Return one entry per path, in the same order as *paths*."""

    if not paths:
        return ()
    workers = max(int(max_workers or 1), 1)
    chunks = list(_chunk(paths, chunk_size))
    if workers <= 1 or len(chunks) <= 1:
        return tuple(make_entry(path) for path in paths)
    with ThreadPoolExecutor(max_workers=min(workers, len(chunks))) as executor:
        built = executor.map(_build_chunk, chunks)
        return tuple(entry for chunk in built for entry in chunk)


def _build_chunk(paths: Sequence[str]) -> list[FileEntry]:
    return [make_entry(path) for path in paths]


def _chunk(items: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    if size <= 0:
        yield items
        return
    for idx in range(0, len(items), size):
        yield items[idx : idx + size]
