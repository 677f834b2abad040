"""Command line interface for fuzzyfind."""

from __future__ import annotations

import logging
import sys
from difflib import get_close_matches
from enum import Enum
from pathlib import Path
from typing import Sequence

import click
import typer
from rich.console import Console
from rich.prompt import Prompt
from rich.status import Status
from rich.table import Table
from rich.text import Text
from typer.core import TyperGroup

from . import __version__
from .config import Config, load_config
from .services.config_service import apply_config_updates, get_config_snapshot
from .services.scan_service import ScanResult
from .services.search_service import (
    EntryKind,
    SearchHit,
    SearchRequest,
    SearchSession,
    perform_search,
)
from .text import Messages, Styles
from .utils import (
    format_path,
    normalize_extensions,
    normalize_ignore_patterns,
    resolve_directory,
)

console = Console()


class DefaultSearchGroup(TyperGroup):
    """Treat unknown subcommands as search queries."""

    def resolve_command(
        self,
        ctx: click.Context,
        args: list[str],
    ) -> tuple[str | None, click.Command | None, list[str]]:
        if args and self._is_search_query(ctx, args[0]):
            command = self.get_command(ctx, "search")
            if command is not None:
                return "search", command, list(args)
        return super().resolve_command(ctx, args)

    def _is_search_query(self, ctx: click.Context, token: str) -> bool:
        if token.startswith("-"):
            return False
        name = ctx.token_normalize_func(token) if ctx.token_normalize_func else token
        if self.get_command(ctx, name) is not None:
            return False
        # Near misses of a command name still get click's "No such command" hint.
        if getattr(self, "suggest_commands", True) and self.commands:
            return not get_close_matches(token, list(self.commands.keys()), cutoff=0.8)
        return True


app = typer.Typer(
    help=Messages.APP_HELP,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=DefaultSearchGroup,
)


class SearchOutputFormat(str, Enum):
    rich = "rich"
    porcelain = "porcelain"
    porcelain_z = "porcelain-z"


class _StatusProgress:
    """Scan progress callback that redraws the active spinner, if any."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self.status: Status | None = None

    def __call__(self, entries_found: int) -> None:
        if self.status is None:
            return
        self.status.update(
            _styled(
                Messages.INFO_SCAN_PROGRESS.format(path=self.directory, count=entries_found),
                Styles.INFO,
            )
        )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"fuzzyfind v{__version__}")
        raise typer.Exit()


def _parse_boolean(value: str) -> bool:
    token = value.strip().lower()
    if token in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if token in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise ValueError(Messages.ERROR_BOOLEAN_INVALID.format(value=value))


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    from rich.logging import RichHandler

    package_logger = logging.getLogger("fuzzyfind")
    package_logger.setLevel(logging.DEBUG)
    if not any(isinstance(handler, RichHandler) for handler in package_logger.handlers):
        package_logger.addHandler(
            RichHandler(console=Console(stderr=True), show_path=False)
        )


def _format_patterns_display(values: Sequence[str] | None) -> str:
    if not values:
        return "none"
    return ", ".join(values)


def _resolve_directory_or_exit(path: Path) -> Path:
    try:
        return resolve_directory(path)
    except (FileNotFoundError, NotADirectoryError) as exc:
        console.print(_styled(str(exc), Styles.ERROR))
        raise typer.Exit(code=1)


def _build_request(
    *,
    query: str,
    directory: Path,
    config: Config,
    top: int | None,
    include_hidden: bool,
    no_respect_gitignore: bool,
    ignore_patterns: list[str] | None,
    extensions: list[str] | None,
    kind: EntryKind,
) -> SearchRequest:
    top_k = top if top is not None else config.max_results
    if top_k <= 0:
        raise typer.BadParameter(Messages.ERROR_TOP_INVALID, param_hint="--top")
    normalized_exts = normalize_extensions(extensions)
    if extensions and not normalized_exts:
        raise typer.BadParameter(Messages.ERROR_EXTENSIONS_EMPTY, param_hint="--ext")
    patterns = (
        normalize_ignore_patterns(ignore_patterns)
        if ignore_patterns is not None
        else tuple(config.ignore_patterns)
    )
    return SearchRequest(
        query=query,
        directory=directory,
        top_k=top_k,
        include_hidden=include_hidden or config.include_hidden,
        respect_gitignore=config.respect_gitignore and not no_respect_gitignore,
        ignore_patterns=patterns,
        extensions=normalized_exts,
        kind=kind,
        batch_size=config.batch_size,
        cache_capacity=config.cache_capacity,
        max_workers=config.max_workers,
    )


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    )
) -> None:
    """Global Typer callback for shared options."""
    return None


@app.command()
def search(
    query: str = typer.Argument("", help=Messages.HELP_QUERY),
    path: Path = typer.Option(
        Path.cwd(),
        "--path",
        "-p",
        help=Messages.HELP_SEARCH_PATH,
    ),
    top: int | None = typer.Option(None, "--top", "-k", help=Messages.HELP_SEARCH_TOP),
    include_hidden: bool = typer.Option(
        False,
        "--include-hidden",
        "-i",
        help=Messages.HELP_INCLUDE_HIDDEN,
    ),
    no_respect_gitignore: bool = typer.Option(
        False,
        "--no-respect-gitignore",
        help=Messages.HELP_RESPECT_GITIGNORE,
    ),
    ignore_patterns: list[str] | None = typer.Option(
        None,
        "--ignore",
        help=Messages.HELP_IGNORE_PATTERNS,
    ),
    extensions: list[str] | None = typer.Option(
        None,
        "--ext",
        "-e",
        help=Messages.HELP_EXTENSIONS,
    ),
    kind: EntryKind = typer.Option(EntryKind.ALL, "--kind", help=Messages.HELP_KIND),
    output_format: SearchOutputFormat = typer.Option(
        SearchOutputFormat.rich,
        "--format",
        help=Messages.HELP_SEARCH_FORMAT,
    ),
    verbose: bool = typer.Option(False, "--verbose", help=Messages.HELP_VERBOSE),
) -> None:
    """Scan a directory and rank its entries against QUERY."""
    _configure_logging(verbose)
    config = load_config()
    directory = _resolve_directory_or_exit(path)
    request = _build_request(
        query=query,
        directory=directory,
        config=config,
        top=top,
        include_hidden=include_hidden,
        no_respect_gitignore=no_respect_gitignore,
        ignore_patterns=ignore_patterns,
        extensions=extensions,
        kind=kind,
    )

    if output_format == SearchOutputFormat.rich:
        progress = _StatusProgress(directory)
        with console.status(
            _styled(Messages.INFO_SCAN_RUNNING.format(path=directory), Styles.INFO)
        ) as status:
            progress.status = status
            response = perform_search(request, progress=progress)
    else:
        response = perform_search(request)

    if response.scan_errors:
        _notify(
            Messages.INFO_SCAN_ERRORS.format(
                count=response.scan_errors,
                plural="y" if response.scan_errors == 1 else "ies",
            ),
            Styles.WARNING,
            output_format,
        )
    if response.index_empty:
        _notify(Messages.INFO_NO_ENTRIES, Styles.WARNING, output_format)
        raise typer.Exit(code=0)
    if not response.results:
        _notify(Messages.INFO_NO_RESULTS, Styles.WARNING, output_format)
        raise typer.Exit(code=0)

    if output_format == SearchOutputFormat.porcelain:
        _render_results_porcelain(response.results, response.base_path)
        return
    if output_format == SearchOutputFormat.porcelain_z:
        _render_results_porcelain_z(response.results, response.base_path)
        return
    _render_results(response.results, response.base_path, response.total_entries)


@app.command(help=Messages.HELP_INTERACTIVE)
def interactive(
    path: Path = typer.Option(
        Path.cwd(),
        "--path",
        "-p",
        help=Messages.HELP_SEARCH_PATH,
    ),
    top: int | None = typer.Option(None, "--top", "-k", help=Messages.HELP_SEARCH_TOP),
    include_hidden: bool = typer.Option(
        False,
        "--include-hidden",
        "-i",
        help=Messages.HELP_INCLUDE_HIDDEN,
    ),
    no_respect_gitignore: bool = typer.Option(
        False,
        "--no-respect-gitignore",
        help=Messages.HELP_RESPECT_GITIGNORE,
    ),
    ignore_patterns: list[str] | None = typer.Option(
        None,
        "--ignore",
        help=Messages.HELP_IGNORE_PATTERNS,
    ),
    extensions: list[str] | None = typer.Option(
        None,
        "--ext",
        "-e",
        help=Messages.HELP_EXTENSIONS,
    ),
    kind: EntryKind = typer.Option(EntryKind.ALL, "--kind", help=Messages.HELP_KIND),
    verbose: bool = typer.Option(False, "--verbose", help=Messages.HELP_VERBOSE),
) -> None:
    _configure_logging(verbose)
    config = load_config()
    directory = _resolve_directory_or_exit(path)
    request = _build_request(
        query="",
        directory=directory,
        config=config,
        top=top,
        include_hidden=include_hidden,
        no_respect_gitignore=no_respect_gitignore,
        ignore_patterns=ignore_patterns,
        extensions=extensions,
        kind=kind,
    )
    progress = _StatusProgress(directory)
    session = SearchSession.from_request(request, progress=progress)
    scan = _refresh_session(session, progress)
    if not scan.paths:
        console.print(_styled(Messages.INFO_NO_ENTRIES, Styles.WARNING))
        raise typer.Exit(code=0)
    console.print(_styled(Messages.INFO_INTERACTIVE_HINT, Styles.INFO))

    while True:
        try:
            raw = Prompt.ask(
                Messages.INFO_INTERACTIVE_PROMPT,
                console=console,
                default="",
                show_default=False,
            )
        except (EOFError, KeyboardInterrupt):
            break
        command = raw.strip()
        if command == ":q":
            break
        if command == ":r":
            _refresh_session(session, progress)
            continue
        hits = session.search(
            raw,
            request.top_k,
            extensions=request.extensions,
            kind=request.kind,
        )
        if not hits:
            console.print(_styled(Messages.INFO_NO_RESULTS, Styles.WARNING))
            continue
        _render_results(hits, session.directory, len(session.matcher))


@app.command(help=Messages.HELP_EXTENSIONS_COMMAND)
def extensions(
    path: Path = typer.Option(
        Path.cwd(),
        "--path",
        "-p",
        help=Messages.HELP_SEARCH_PATH,
    ),
    include_hidden: bool = typer.Option(
        False,
        "--include-hidden",
        "-i",
        help=Messages.HELP_INCLUDE_HIDDEN,
    ),
    no_respect_gitignore: bool = typer.Option(
        False,
        "--no-respect-gitignore",
        help=Messages.HELP_RESPECT_GITIGNORE,
    ),
    ignore_patterns: list[str] | None = typer.Option(
        None,
        "--ignore",
        help=Messages.HELP_IGNORE_PATTERNS,
    ),
) -> None:
    config = load_config()
    directory = _resolve_directory_or_exit(path)
    request = _build_request(
        query="",
        directory=directory,
        config=config,
        top=None,
        include_hidden=include_hidden,
        no_respect_gitignore=no_respect_gitignore,
        ignore_patterns=ignore_patterns,
        extensions=None,
        kind=EntryKind.ALL,
    )
    session = SearchSession.from_request(request)
    found = session.extensions()
    if not found:
        console.print(_styled(Messages.INFO_NO_EXTENSIONS, Styles.WARNING))
        raise typer.Exit(code=0)
    for suffix in found:
        typer.echo(suffix)


@app.command()
def config(
    set_top_option: int | None = typer.Option(
        None,
        "--set-top",
        help=Messages.HELP_SET_TOP,
    ),
    set_batch_option: int | None = typer.Option(
        None,
        "--set-batch-size",
        help=Messages.HELP_SET_BATCH,
    ),
    set_cache_capacity_option: int | None = typer.Option(
        None,
        "--set-cache-capacity",
        help=Messages.HELP_SET_CACHE_CAPACITY,
    ),
    set_workers_option: int | None = typer.Option(
        None,
        "--set-workers",
        help=Messages.HELP_SET_WORKERS,
    ),
    set_ignore_option: str | None = typer.Option(
        None,
        "--set-ignore",
        help=Messages.HELP_SET_IGNORE,
    ),
    clear_ignore: bool = typer.Option(
        False,
        "--clear-ignore",
        help=Messages.HELP_CLEAR_IGNORE,
    ),
    set_include_hidden_option: str | None = typer.Option(
        None,
        "--set-include-hidden",
        help=Messages.HELP_SET_INCLUDE_HIDDEN,
    ),
    set_respect_gitignore_option: str | None = typer.Option(
        None,
        "--set-respect-gitignore",
        help=Messages.HELP_SET_RESPECT_GITIGNORE,
    ),
    show: bool = typer.Option(False, "--show", help=Messages.HELP_SHOW_CONFIG),
) -> None:
    """Manage fuzzyfind configuration."""
    if set_top_option is not None and set_top_option < 1:
        raise typer.BadParameter(Messages.ERROR_TOP_INVALID)
    if set_batch_option is not None and set_batch_option < 1:
        raise typer.BadParameter(Messages.ERROR_BATCH_INVALID)
    if set_cache_capacity_option is not None and set_cache_capacity_option < 0:
        raise typer.BadParameter(Messages.ERROR_CACHE_CAPACITY_INVALID)
    if set_workers_option is not None and set_workers_option < 1:
        raise typer.BadParameter(Messages.ERROR_WORKERS_INVALID)
    if set_ignore_option is not None and clear_ignore:
        raise typer.BadParameter(Messages.ERROR_IGNORE_CONFLICT)

    include_hidden: bool | None = None
    respect_gitignore: bool | None = None
    try:
        if set_include_hidden_option is not None:
            include_hidden = _parse_boolean(set_include_hidden_option)
        if set_respect_gitignore_option is not None:
            respect_gitignore = _parse_boolean(set_respect_gitignore_option)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    updates = apply_config_updates(
        max_results=set_top_option,
        batch_size=set_batch_option,
        cache_capacity=set_cache_capacity_option,
        max_workers=set_workers_option,
        ignore_patterns=set_ignore_option,
        clear_ignore_patterns=clear_ignore,
        include_hidden=include_hidden,
        respect_gitignore=respect_gitignore,
    )

    if updates.max_results_set:
        console.print(
            _styled(Messages.INFO_TOP_SET.format(value=set_top_option), Styles.SUCCESS)
        )
    if updates.batch_size_set:
        console.print(
            _styled(Messages.INFO_BATCH_SET.format(value=set_batch_option), Styles.SUCCESS)
        )
    if updates.cache_capacity_set:
        console.print(
            _styled(
                Messages.INFO_CACHE_CAPACITY_SET.format(value=set_cache_capacity_option),
                Styles.SUCCESS,
            )
        )
    if updates.max_workers_set:
        console.print(
            _styled(Messages.INFO_WORKERS_SET.format(value=set_workers_option), Styles.SUCCESS)
        )
    if updates.ignore_patterns_set:
        stored = get_config_snapshot().ignore_patterns
        console.print(
            _styled(
                Messages.INFO_IGNORE_SET.format(value=_format_patterns_display(stored)),
                Styles.SUCCESS,
            )
        )
    if updates.ignore_patterns_cleared:
        console.print(_styled(Messages.INFO_IGNORE_CLEARED, Styles.SUCCESS))
    if updates.include_hidden_set and include_hidden is not None:
        state = "included" if include_hidden else "skipped"
        console.print(
            _styled(Messages.INFO_INCLUDE_HIDDEN_SET.format(value=state), Styles.SUCCESS)
        )
    if updates.respect_gitignore_set and respect_gitignore is not None:
        state = "applied" if respect_gitignore else "ignored"
        console.print(
            _styled(Messages.INFO_RESPECT_GITIGNORE_SET.format(value=state), Styles.SUCCESS)
        )

    if show or not updates.changed:
        cfg = get_config_snapshot()
        console.print(
            _styled(
                Messages.INFO_CONFIG_SUMMARY.format(
                    top=cfg.max_results,
                    batch=cfg.batch_size,
                    cache=cfg.cache_capacity,
                    workers=cfg.max_workers,
                    ignore=_format_patterns_display(cfg.ignore_patterns),
                    hidden="yes" if cfg.include_hidden else "no",
                    gitignore="yes" if cfg.respect_gitignore else "no",
                ),
                Styles.INFO,
            )
        )


def _refresh_session(session: SearchSession, progress: _StatusProgress) -> ScanResult:
    with console.status(
        _styled(Messages.INFO_SCAN_RUNNING.format(path=session.directory), Styles.INFO)
    ) as status:
        progress.status = status
        try:
            scan = session.refresh()
        finally:
            progress.status = None
    console.print(
        _styled(
            Messages.INFO_SCAN_DONE.format(count=len(scan.paths), path=session.directory),
            Styles.INFO,
        )
    )
    if scan.errors:
        console.print(
            _styled(
                Messages.INFO_SCAN_ERRORS.format(
                    count=len(scan.errors),
                    plural="y" if len(scan.errors) == 1 else "ies",
                ),
                Styles.WARNING,
            )
        )
    return scan


def _notify(message: str, style: str, output_format: SearchOutputFormat) -> None:
    if output_format == SearchOutputFormat.rich:
        console.print(_styled(message, style))
    else:
        typer.echo(message, err=True)


def _display_path(hit: SearchHit, base: Path) -> str:
    shown = format_path(hit.path, base)
    return f"{shown}/" if hit.is_dir else shown


def _format_score(score: int | None) -> str:
    return "-" if score is None else str(score)


def _render_results(results: Sequence[SearchHit], base: Path, total: int) -> None:
    console.print(_styled(Messages.TABLE_TITLE, Styles.TITLE))
    table = Table(show_header=True, header_style=Styles.TABLE_HEADER)
    table.add_column(Messages.TABLE_HEADER_INDEX, justify="right")
    table.add_column(Messages.TABLE_HEADER_SCORE, justify="right")
    table.add_column(Messages.TABLE_HEADER_PATH, overflow="fold")
    for idx, hit in enumerate(results, start=1):
        table.add_row(str(idx), _format_score(hit.score), Text(_display_path(hit, base)))
    console.print(table)
    console.print(
        _styled(Messages.TABLE_SUMMARY.format(shown=len(results), total=total), Styles.INFO)
    )


def _escape_porcelain_field(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace("\t", "\\t")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )


def _render_results_porcelain(results: Sequence[SearchHit], base: Path) -> None:
    for idx, hit in enumerate(results, start=1):
        fields = (
            str(idx),
            _format_score(hit.score),
            "d" if hit.is_dir else "f",
            _escape_porcelain_field(format_path(hit.path, base)),
        )
        typer.echo("\t".join(fields))


def _render_results_porcelain_z(results: Sequence[SearchHit], base: Path) -> None:
    for idx, hit in enumerate(results, start=1):
        fields = (
            str(idx),
            _format_score(hit.score),
            "d" if hit.is_dir else "f",
            format_path(hit.path, base).replace("\0", ""),
        )
        sys.stdout.write("\0".join(fields) + "\0")


def _styled(text: str, style: str) -> str:
    return f"[{style}]{text}[/{style}]"


def run(argv: list[str] | None = None) -> None:
    """Entry point wrapper allowing optional argument override."""
    if argv is None:
        app()
    else:
        app(args=list(argv))
