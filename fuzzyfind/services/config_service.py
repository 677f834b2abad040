"""Logic helpers for the `fuzzyfind config` command."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..config import (
    Config,
    load_config,
    set_batch_size,
    set_cache_capacity,
    set_ignore_patterns,
    set_include_hidden,
    set_max_results,
    set_max_workers,
    set_respect_gitignore,
)


@dataclass(slots=True)
class ConfigUpdateResult:
    max_results_set: bool = False
    batch_size_set: bool = False
    cache_capacity_set: bool = False
    max_workers_set: bool = False
    ignore_patterns_set: bool = False
    ignore_patterns_cleared: bool = False
    include_hidden_set: bool = False
    respect_gitignore_set: bool = False

    @property
    def changed(self) -> bool:
        return any(
            (
                self.max_results_set,
                self.batch_size_set,
                self.cache_capacity_set,
                self.max_workers_set,
                self.ignore_patterns_set,
                self.ignore_patterns_cleared,
                self.include_hidden_set,
                self.respect_gitignore_set,
            )
        )


def apply_config_updates(
    *,
    max_results: int | None = None,
    batch_size: int | None = None,
    cache_capacity: int | None = None,
    max_workers: int | None = None,
    ignore_patterns: Sequence[str] | str | None = None,
    clear_ignore_patterns: bool = False,
    include_hidden: bool | None = None,
    respect_gitignore: bool | None = None,
) -> ConfigUpdateResult:
    """Apply config mutations and report which fields were updated."""

    result = ConfigUpdateResult()
    if max_results is not None:
        set_max_results(max_results)
        result.max_results_set = True
    if batch_size is not None:
        set_batch_size(batch_size)
        result.batch_size_set = True
    if cache_capacity is not None:
        set_cache_capacity(cache_capacity)
        result.cache_capacity_set = True
    if max_workers is not None:
        set_max_workers(max_workers)
        result.max_workers_set = True
    if ignore_patterns is not None:
        set_ignore_patterns(ignore_patterns)
        result.ignore_patterns_set = True
    if clear_ignore_patterns:
        set_ignore_patterns(None)
        result.ignore_patterns_cleared = True
    if include_hidden is not None:
        set_include_hidden(include_hidden)
        result.include_hidden_set = True
    if respect_gitignore is not None:
        set_respect_gitignore(respect_gitignore)
        result.respect_gitignore_set = True
    return result


def get_config_snapshot() -> Config:
    """Return the current configuration dataclass."""

    return load_config()
