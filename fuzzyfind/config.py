"""Global configuration management for fuzzyfind."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from contextlib import contextmanager
from contextvars import ContextVar
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Sequence

from .text import Messages

DEFAULT_CONFIG_DIR = Path(os.path.expanduser("~")) / ".fuzzyfind"
CONFIG_DIR = DEFAULT_CONFIG_DIR
CONFIG_FILE = CONFIG_DIR / "config.json"
_CONFIG_DIR_OVERRIDE: ContextVar[Path | None] = ContextVar(
    "fuzzyfind_config_dir_override",
    default=None,
)
DEFAULT_MAX_RESULTS = 10
DEFAULT_BATCH_SIZE = 1000
DEFAULT_CACHE_CAPACITY = 1000
DEFAULT_MAX_WORKERS = max(1, min(8, os.cpu_count() or 1))
DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = ("node_modules", ".git", ".svn", "*.tmp")


@dataclass
class Config:
    max_results: int = DEFAULT_MAX_RESULTS
    batch_size: int = DEFAULT_BATCH_SIZE
    cache_capacity: int = DEFAULT_CACHE_CAPACITY
    max_workers: int = DEFAULT_MAX_WORKERS
    ignore_patterns: tuple[str, ...] = field(default_factory=lambda: DEFAULT_IGNORE_PATTERNS)
    include_hidden: bool = False
    respect_gitignore: bool = True


def _resolve_config_dir() -> Path:
    override = _CONFIG_DIR_OVERRIDE.get()
    return override if override is not None else CONFIG_DIR


def _resolve_config_file() -> Path:
    override = _CONFIG_DIR_OVERRIDE.get()
    if override is not None:
        return override / "config.json"
    return CONFIG_FILE


@contextmanager
def config_dir_context(path: Path | str | None):
    """Temporarily override the config directory for the current context."""

    if path is None:
        yield
        return
    dir_path = Path(path).expanduser().resolve()
    if dir_path.exists() and not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")
    token = _CONFIG_DIR_OVERRIDE.set(dir_path)
    try:
        yield
    finally:
        _CONFIG_DIR_OVERRIDE.reset(token)


def load_config() -> Config:
    config_file = _resolve_config_file()
    if not config_file.exists():
        return Config()
    raw = json.loads(config_file.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        return Config()
    ignore_raw = raw.get("ignore_patterns")
    return Config(
        max_results=_positive_or_default(raw.get("max_results"), DEFAULT_MAX_RESULTS),
        batch_size=_positive_or_default(raw.get("batch_size"), DEFAULT_BATCH_SIZE),
        cache_capacity=max(int(raw.get("cache_capacity", DEFAULT_CACHE_CAPACITY)), 0),
        max_workers=_positive_or_default(raw.get("max_workers"), DEFAULT_MAX_WORKERS),
        ignore_patterns=(
            DEFAULT_IGNORE_PATTERNS
            if ignore_raw is None
            else _split_patterns(ignore_raw)
        ),
        include_hidden=bool(raw.get("include_hidden", False)),
        respect_gitignore=bool(raw.get("respect_gitignore", True)),
    )


def save_config(config: Config) -> None:
    config_dir = _resolve_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    data: Dict[str, Any] = {
        "max_results": config.max_results,
        "batch_size": config.batch_size,
        "cache_capacity": config.cache_capacity,
        "max_workers": config.max_workers,
        "ignore_patterns": list(config.ignore_patterns),
        "include_hidden": bool(config.include_hidden),
        "respect_gitignore": bool(config.respect_gitignore),
    }
    config_file = _resolve_config_file()
    config_file.write_text(
        json.dumps(data, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )


def set_config_dir(path: Path | str | None) -> None:
    global CONFIG_DIR, CONFIG_FILE
    if path is None:
        CONFIG_DIR = DEFAULT_CONFIG_DIR
    else:
        dir_path = Path(path).expanduser().resolve()
        if dir_path.exists() and not dir_path.is_dir():
            raise NotADirectoryError(f"Path is not a directory: {dir_path}")
        CONFIG_DIR = dir_path
    CONFIG_FILE = CONFIG_DIR / "config.json"


def config_from_json(
    payload: str | Mapping[str, object], *, base: Config | None = None
) -> Config:
    """Return a Config from a JSON string or mapping without saving it."""
    data = _coerce_config_payload(payload)
    config = Config() if base is None else _clone_config(base)
    _apply_config_payload(config, data)
    return config


def update_config_from_json(
    payload: str | Mapping[str, object], *, replace: bool = False
) -> Config:
    """Update config from a JSON string or mapping and persist it."""
    base = None if replace else load_config()
    config = config_from_json(payload, base=base)
    save_config(config)
    return config


def set_max_results(value: int) -> None:
    config = load_config()
    config.max_results = value
    save_config(config)


def set_batch_size(value: int) -> None:
    config = load_config()
    config.batch_size = value
    save_config(config)


def set_cache_capacity(value: int) -> None:
    config = load_config()
    config.cache_capacity = value
    save_config(config)


def set_max_workers(value: int) -> None:
    config = load_config()
    config.max_workers = value
    save_config(config)


def set_ignore_patterns(values: Sequence[str] | str | None) -> None:
    config = load_config()
    config.ignore_patterns = _split_patterns(values)
    save_config(config)


def set_include_hidden(value: bool) -> None:
    config = load_config()
    config.include_hidden = bool(value)
    save_config(config)


def set_respect_gitignore(value: bool) -> None:
    config = load_config()
    config.respect_gitignore = bool(value)
    save_config(config)


def _split_patterns(values: object) -> tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]
    patterns: list[str] = []
    for raw in values:
        if not isinstance(raw, str):
            continue
        for token in raw.split(","):
            cleaned = token.strip()
            if cleaned and cleaned not in patterns:
                patterns.append(cleaned)
    return tuple(patterns)


def _positive_or_default(value: object, default: int) -> int:
    try:
        number = int(value) if value is not None else default
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _coerce_config_payload(payload: str | Mapping[str, object]) -> Mapping[str, object]:
    if isinstance(payload, str):
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise ValueError(Messages.ERROR_CONFIG_JSON_INVALID) from exc
    elif isinstance(payload, Mapping):
        data = dict(payload)
    else:
        raise ValueError(Messages.ERROR_CONFIG_JSON_INVALID)
    if not isinstance(data, Mapping):
        raise ValueError(Messages.ERROR_CONFIG_JSON_INVALID)
    return data


def _clone_config(config: Config) -> Config:
    return Config(
        max_results=config.max_results,
        batch_size=config.batch_size,
        cache_capacity=config.cache_capacity,
        max_workers=config.max_workers,
        ignore_patterns=tuple(config.ignore_patterns),
        include_hidden=config.include_hidden,
        respect_gitignore=config.respect_gitignore,
    )


def _apply_config_payload(config: Config, payload: Mapping[str, object]) -> None:
    if "max_results" in payload:
        config.max_results = _coerce_positive_int(
            payload["max_results"], "max_results", DEFAULT_MAX_RESULTS
        )
    if "batch_size" in payload:
        config.batch_size = _coerce_positive_int(
            payload["batch_size"], "batch_size", DEFAULT_BATCH_SIZE
        )
    if "cache_capacity" in payload:
        capacity = _coerce_int(
            payload["cache_capacity"], "cache_capacity", DEFAULT_CACHE_CAPACITY
        )
        if capacity < 0:
            raise ValueError(Messages.ERROR_CONFIG_VALUE_INVALID.format(field="cache_capacity"))
        config.cache_capacity = capacity
    if "max_workers" in payload:
        config.max_workers = _coerce_positive_int(
            payload["max_workers"], "max_workers", DEFAULT_MAX_WORKERS
        )
    if "ignore_patterns" in payload:
        config.ignore_patterns = _coerce_patterns(payload["ignore_patterns"])
    if "include_hidden" in payload:
        config.include_hidden = _coerce_bool(payload["include_hidden"], "include_hidden")
    if "respect_gitignore" in payload:
        config.respect_gitignore = _coerce_bool(
            payload["respect_gitignore"], "respect_gitignore"
        )


def _coerce_int(value: object, field: str, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError(Messages.ERROR_CONFIG_VALUE_INVALID.format(field=field))
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValueError(Messages.ERROR_CONFIG_VALUE_INVALID.format(field=field))
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return default
        try:
            return int(cleaned)
        except ValueError as exc:
            raise ValueError(Messages.ERROR_CONFIG_VALUE_INVALID.format(field=field)) from exc
    raise ValueError(Messages.ERROR_CONFIG_VALUE_INVALID.format(field=field))


def _coerce_positive_int(value: object, field: str, default: int) -> int:
    number = _coerce_int(value, field, default)
    if number <= 0:
        raise ValueError(Messages.ERROR_CONFIG_VALUE_INVALID.format(field=field))
    return number


def _coerce_bool(value: object, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        cleaned = value.strip().lower()
        if cleaned in {"true", "1", "yes", "on"}:
            return True
        if cleaned in {"false", "0", "no", "off"}:
            return False
    raise ValueError(Messages.ERROR_CONFIG_VALUE_INVALID.format(field=field))


def _coerce_patterns(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or (
        isinstance(value, Sequence) and all(isinstance(item, str) for item in value)
    ):
        return _split_patterns(value)
    raise ValueError(Messages.ERROR_CONFIG_VALUE_INVALID.format(field="ignore_patterns"))
