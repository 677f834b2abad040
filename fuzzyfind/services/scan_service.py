"""Directory scanning that produces the path collection for the matcher."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from threading import Lock
from typing import Protocol, Sequence

from ..config import DEFAULT_MAX_WORKERS
from ..utils import (
    build_gitignore_base,
    extend_gitignore_spec,
    find_git_root,
    is_gitignored,
    match_ignore_pattern,
    normalize_ignore_patterns,
    relative_posix,
    resolve_directory,
)

logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_INTERVAL = 1000


class ScanProgress(Protocol):
    """Receives the running number of entries found during a scan."""

    def __call__(self, entries_found: int) -> None:
        ...  # pragma: no cover


@dataclass(slots=True)
class ScanResult:
    root: Path
    paths: list[str] = field(default_factory=list)
    directories: frozenset[str] = frozenset()
    ignored: int = 0
    errors: list[str] = field(default_factory=list)


class _Verdict(str, Enum):
    KEEP = "keep"
    SKIP = "skip"
    PRUNE = "prune"


@dataclass(slots=True)
class _WalkOutput:
    paths: list[str] = field(default_factory=list)
    directories: list[str] = field(default_factory=list)
    ignored: int = 0
    errors: list[str] = field(default_factory=list)

    def extend(self, other: "_WalkOutput") -> None:
        self.paths.extend(other.paths)
        self.directories.extend(other.directories)
        self.ignored += other.ignored
        self.errors.extend(other.errors)


class _ProgressCounter:
    def __init__(self, callback: ScanProgress | None, interval: int) -> None:
        self._callback = callback
        self._interval = max(int(interval or 1), 1)
        self._count = 0
        self._lock = Lock()

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    def add(self, amount: int = 1) -> None:
        with self._lock:
            before = self._count
            self._count += amount
            current = self._count
        if self._callback is not None and current // self._interval > before // self._interval:
            self._callback(current)

    def finish(self) -> None:
        if self._callback is not None:
            self._callback(self.count)


class DirectoryScanner:
    """Enumerate files and directories below a root.

    Top-level directories are walked concurrently; the result order is
    deterministic: root entries by name, then each top-level subtree in
    name order.
    """

    def __init__(
        self,
        *,
        include_hidden: bool = False,
        respect_gitignore: bool = True,
        ignore_patterns: Sequence[str] = (),
        max_workers: int = DEFAULT_MAX_WORKERS,
        progress: ScanProgress | None = None,
        progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
    ) -> None:
        self.include_hidden = include_hidden
        self.respect_gitignore = respect_gitignore
        self.ignore_patterns = normalize_ignore_patterns(ignore_patterns)
        self.max_workers = max(int(max_workers or 1), 1)
        self.progress = progress
        self.progress_interval = progress_interval

    def scan(self, root: Path | str) -> ScanResult:
        directory = resolve_directory(root)
        counter = _ProgressCounter(self.progress, self.progress_interval)

        ignore_root: Path | None = None
        spec = None
        if self.respect_gitignore:
            ignore_root = find_git_root(directory) or directory
            spec, ignored = build_gitignore_base(ignore_root, directory)
            if ignored:
                counter.finish()
                return ScanResult(root=directory)
            spec = extend_gitignore_spec(spec, directory, ignore_root)

        output = _WalkOutput()
        top_dirs: list[Path] = []
        try:
            with os.scandir(directory) as iterator:
                children = sorted(iterator, key=lambda item: item.name)
        except OSError as exc:
            output.errors.append(str(exc.filename or directory))
            children = []
        for child in children:
            is_dir = child.is_dir()
            verdict = self._classify(
                Path(child.path), directory, child.name, is_dir, spec, ignore_root
            )
            if verdict is not _Verdict.KEEP:
                output.ignored += 1
                if verdict is _Verdict.PRUNE or not is_dir:
                    continue
            else:
                output.paths.append(child.path)
                counter.add()
                if is_dir:
                    output.directories.append(child.path)
            if is_dir and not child.is_symlink():
                top_dirs.append(Path(child.path))

        def _walk_one(top: Path) -> _WalkOutput:
            return self._walk(top, directory, spec, ignore_root, counter)

        if self.max_workers <= 1 or len(top_dirs) <= 1:
            walked = [_walk_one(top) for top in top_dirs]
        else:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(top_dirs))) as executor:
                walked = list(executor.map(_walk_one, top_dirs))
        for part in walked:
            output.extend(part)

        counter.finish()
        logger.debug(
            "Scanned %s: %d entries, %d ignored, %d errors",
            directory,
            len(output.paths),
            output.ignored,
            len(output.errors),
        )
        return ScanResult(
            root=directory,
            paths=output.paths,
            directories=frozenset(output.directories),
            ignored=output.ignored,
            errors=output.errors,
        )

    def _walk(
        self,
        top: Path,
        root: Path,
        spec,
        ignore_root: Path | None,
        counter: _ProgressCounter,
    ) -> _WalkOutput:
        output = _WalkOutput()
        spec_by_dir: dict[str, object] = {str(top): spec}

        def _on_error(exc: OSError) -> None:
            output.errors.append(str(exc.filename or exc))

        for dirpath, dirnames, filenames in os.walk(top, topdown=True, onerror=_on_error):
            current = Path(dirpath)
            current_spec = spec_by_dir.pop(dirpath, spec)
            if current_spec is not None and ignore_root is not None:
                current_spec = extend_gitignore_spec(current_spec, current, ignore_root)

            kept_dirs: list[str] = []
            for name in sorted(dirnames):
                child = current / name
                verdict = self._classify(child, root, name, True, current_spec, ignore_root)
                if verdict is _Verdict.PRUNE:
                    output.ignored += 1
                    continue
                if verdict is _Verdict.SKIP:
                    output.ignored += 1
                else:
                    output.paths.append(str(child))
                    output.directories.append(str(child))
                    counter.add()
                if not child.is_symlink():
                    kept_dirs.append(name)
                    spec_by_dir[str(child)] = current_spec
            dirnames[:] = kept_dirs

            for name in sorted(filenames):
                child = current / name
                verdict = self._classify(child, root, name, False, current_spec, ignore_root)
                if verdict is not _Verdict.KEEP:
                    output.ignored += 1
                    continue
                output.paths.append(str(child))
                counter.add()
        return output

    def _classify(
        self,
        path: Path,
        root: Path,
        name: str,
        is_dir: bool,
        spec,
        ignore_root: Path | None,
    ) -> _Verdict:
        if not self.include_hidden and name.startswith("."):
            return _Verdict.PRUNE
        if self.respect_gitignore and name == ".git":
            return _Verdict.PRUNE
        if spec is not None and ignore_root is not None:
            if is_gitignored(spec, relative_posix(path, ignore_root), is_dir=is_dir):
                return _Verdict.PRUNE
        if self.ignore_patterns:
            pattern = match_ignore_pattern(
                relative_posix(path, root), name, self.ignore_patterns
            )
            if pattern is not None:
                if is_dir and pattern.startswith("*"):
                    return _Verdict.SKIP
                return _Verdict.PRUNE
        return _Verdict.KEEP
