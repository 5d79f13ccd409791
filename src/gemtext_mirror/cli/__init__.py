from __future__ import annotations

import sys
from pathlib import Path

import click
import typer
from rich.console import Console
from rich.table import Table

from ..config import AppConfig, load_config
from ..core import MirrorService
from ..logging import ProgressSink
from ..models import Entry, MirrorAction, MirrorError, MirrorSummary
from ..pool import default_parallelism

console = Console()
error_console = Console(stderr=True)

app = typer.Typer(help="Mirror a directory tree, rendering Gemtext pages as HTML", add_completion=False)


def _load_config(path: Path | None) -> AppConfig:
    return load_config(path)


def _print_summary(summary: MirrorSummary) -> None:
    table = Table(title="Mirror summary")
    table.add_column("Action")
    table.add_column("Count", justify="right")
    for action in MirrorAction:
        table.add_row(action.value, str(summary.count(action)))
    console.print(table)


@app.command()
def mirror(
    input_dir: Path = typer.Argument(..., help="Directory to mirror; must exist"),
    output_dir: Path = typer.Argument(..., help="Destination directory; created if missing"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Report every completed action"),
    config: Path | None = typer.Option(None, "--config", help="Path to gemtext-mirror.toml"),
) -> None:
    cfg = _load_config(config)
    verbose = verbose or cfg.runtime.verbose
    sink = ProgressSink(verbose=verbose, console=console, error_console=error_console)
    try:
        seed = Entry.seed(input_dir, output_dir)
        service = MirrorService(cfg, sink)
        if verbose:
            workers = cfg.runtime.parallelism if cfg.runtime.parallelism > 0 else default_parallelism()
            sink.emit(f"Starting with {workers} threads")
        summary = service.run(seed)
    except MirrorError as exc:
        sink.error(str(exc))
        raise typer.Exit(1) from exc
    if verbose:
        _print_summary(summary)
        sink.emit("Done")


def main(argv: list[str] | None = None, prog_name: str | None = None) -> int:
    prog_name = prog_name or Path(sys.argv[0]).name
    args = list(sys.argv[1:] if argv is None else argv)
    command = typer.main.get_command(app)
    try:
        result = command.main(args=args, prog_name=prog_name, standalone_mode=False)
    except click.UsageError:
        error_console.print(
            f"usage: {prog_name} <input_dir> <output_dir> [-v]",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        return 2
    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
