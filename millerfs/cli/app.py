from __future__ import annotations

import logging
import os
from dataclasses import replace
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from result import Err

from millerfs.config.defaults import default_config
from millerfs.config.loader import load_config, sample_config_json
from millerfs.config.schema import MIN_TICK_INTERVAL
from millerfs.services.engine import NavigationEngine
from millerfs.services.launcher import SubprocessLauncher
from millerfs.services.lister import EntryLister
from millerfs.ui.app import MillerApp

console = Console()
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def log_file_handler(log_file: str) -> logging.FileHandler:
    # Paths may carry surrogate-escaped bytes from undecodable names.
    return logging.FileHandler(log_file, encoding="utf-8", errors="backslashreplace")


def _setup_logging(log_file: str | None, verbose: bool) -> None:
    if log_file is None:
        logging.getLogger("millerfs").addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[log_file_handler(log_file)],
    )


def run(
    path: Annotated[str | None, typer.Argument(help="Directory to start in (default: current directory).")] = None,
    preview_lines: Annotated[
        int | None, typer.Option("--preview-lines", "-n", help="Lines shown in file previews.")
    ] = None,
    dirs_first: Annotated[bool, typer.Option("--dirs-first", "-d", help="List directories before files.")] = False,
    max_entries: Annotated[
        int | None, typer.Option("--max-entries", help="Truncate listings to this many entries.")
    ] = None,
    tick: Annotated[float | None, typer.Option("--tick", help="Redraw interval in seconds.")] = None,
    sample_config: Annotated[bool, typer.Option("--sample-config", help="Print sample config JSON.")] = False,
    log_file: Annotated[str | None, typer.Option("--log-file", help="Write a debug log to this file.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log at DEBUG level.")] = False,
) -> None:
    if sample_config:
        console.print(sample_config_json(), markup=False)
        raise typer.Exit(0)

    _setup_logging(log_file, verbose)

    config_result = load_config()
    if isinstance(config_result, Err):
        console.print(f"[yellow]{escape(config_result.unwrap_err())} Using defaults.[/]")
        config = default_config()
    else:
        config = config_result.unwrap()

    overrides: dict[str, object] = {}
    if preview_lines is not None:
        overrides["preview_lines"] = max(1, preview_lines)
    if dirs_first:
        overrides["dirs_first"] = True
    if max_entries is not None:
        overrides["max_entries"] = max(1, max_entries)
    if tick is not None:
        overrides["tick_interval"] = max(MIN_TICK_INTERVAL, tick)
    if overrides:
        config = replace(config, **overrides)

    start = path if path is not None else os.getcwd()
    lister = EntryLister(dirs_first=config.dirs_first, max_entries=config.max_entries)
    engine_result = NavigationEngine.open(
        start,
        lister=lister,
        launcher=SubprocessLauncher(config.opener or None),
        preview_lines=config.preview_lines,
    )
    if isinstance(engine_result, Err):
        error = engine_result.unwrap_err()
        logger.error("Startup failed: %s", error)
        console.print(f"[red]{escape(str(error))}[/]")
        raise typer.Exit(1)

    MillerApp(engine=engine_result.unwrap(), config=config).run()
    raise typer.Exit(0)


def cli() -> None:
    typer.run(run)


if __name__ == "__main__":
    cli()
