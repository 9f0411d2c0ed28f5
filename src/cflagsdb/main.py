import json
import os
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cflagsdb.exceptions import ConfigError
from cflagsdb.logging_config import logger, reset_logging, setup_logging
from cflagsdb.schemas import Record
from cflagsdb.storage import FlagStore, open_store
from cflagsdb.user_config import UserConfig

app = typer.Typer(help="Record and look up the compiler flags of source files.")
console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


@app.callback()
def global_options(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log debug output to stderr."
    ),
):
    """
    Per-file compiler flags database.
    """
    if verbose:
        reset_logging()
        setup_logging(level="DEBUG", suppress_console=False)


DB_OPTION = typer.Option(
    None,
    "--db",
    help="Flags database. Defaults to store.path from config (.cflagsdb/cflags.db).",
    dir_okay=False,
)


def _open(db: Optional[Path]) -> FlagStore:
    """Open the requested store or exit with code 1."""
    try:
        config = UserConfig(Path.cwd())
        timeout = config.busy_timeout_ms
        if db is None:
            db = config.db_path
            db.parent.mkdir(parents=True, exist_ok=True)
    except (ConfigError, OSError) as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    store = open_store(db, busy_timeout_ms=timeout)
    if store is None:
        err_console.print(f"[red]Error: flags database '{escape(str(db))}' is unavailable.[/red]")
        raise typer.Exit(code=1)
    return store


def _print_record(record: Record) -> None:
    console.print(f"{escape(record.file)}\t{escape(record.flags)}", highlight=False)


@app.command()
def record(
    files: List[str] = typer.Option(
        ..., "--file", "-F", help="Source file the flags apply to (repeatable)."
    ),
    flags: Optional[List[str]] = typer.Argument(
        None, help="Compiler flags, in order. Put them after '--'."
    ),
    base_dir: Optional[Path] = typer.Option(
        None, "--dir", "-C", help="Directory to record from. Defaults to CWD.", file_okay=False
    ),
    db: Optional[Path] = DB_OPTION,
):
    """
    Records one flag set for a list of files.

    Example: cflagsdb record -F main.c -F util.c -- -O2 -Wall
    """
    directory = str(base_dir) if base_dir is not None else os.getcwd()
    with _open(db) as store:
        written = store.insert(directory, files, flags or [])

    logger.debug(f"record: {written}/{len(files)} file(s) written")
    if written < len(files):
        err_console.print(f"[yellow]Recorded {written} of {len(files)} file(s).[/yellow]")


@app.command()
def query(
    pattern: str = typer.Argument(..., help="Glob pattern matched against recorded directories."),
    first: bool = typer.Option(False, "--first", help="Stop after the first match."),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON."),
    db: Optional[Path] = DB_OPTION,
):
    """
    Lists records whose directory matches a glob pattern.
    """
    collected: List[dict] = []

    def visit(rec: Record) -> bool:
        if json_output:
            collected.append(rec.model_dump())
        else:
            _print_record(rec)
        return not first

    with _open(db) as store:
        ok = store.query(pattern, visit)

    if not ok:
        err_console.print(f"[red]Error: query '{escape(pattern)}' failed.[/red]")
        raise typer.Exit(code=1)

    if json_output:
        typer.echo(json.dumps(collected, indent=2))


@app.command()
def lookup(
    file: str = typer.Argument(..., help="Source file to look up."),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON."),
    db: Optional[Path] = DB_OPTION,
):
    """
    Prints the flags a single file was recorded with.
    """
    with _open(db) as store:
        found = store.find(file)

    if found is None:
        err_console.print(f"[yellow]No flags recorded for '{escape(file)}'.[/yellow]")
        raise typer.Exit(code=1)

    if json_output:
        typer.echo(json.dumps(found.model_dump(), indent=2))
    else:
        console.print(escape(found.flags), highlight=False)


@app.command()
def stats(
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON."),
    db: Optional[Path] = DB_OPTION,
):
    """
    Displays summary statistics for a flags database.
    """
    with _open(db) as store:
        summary = store.get_stats()
        db_path = store.db_path

    if summary is None:
        err_console.print("[red]Error: could not read statistics.[/red]")
        raise typer.Exit(code=1)

    if json_output:
        typer.echo(json.dumps(summary.model_dump(), indent=2))
        return

    table = Table(title=f"Flags database '{escape(str(db_path))}'")
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")
    table.add_row("Files", str(summary.total_records))
    table.add_row("Directories", str(summary.total_directories))
    table.add_row("Size (bytes)", str(summary.db_size_bytes))
    console.print(table)


if __name__ == "__main__":
    app()
