"""
itchtables CLI.

Commands:
- count: Per-type message counts of a capture file
- orders / trades / modifications: Decode one table and write it
- config: Configuration management
- version: Version information
"""

import json
import logging
from pathlib import Path
from typing import Optional
from enum import Enum

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.progress import BarColumn, DownloadColumn, Progress, SpinnerColumn, TextColumn

from .. import __version__
from ..config import ItchConfig, load_config, generate_default_config
from ..core.errors import ErrorCode, ItchDecodeError
from ..core.observer import DecodeObserver
from ..decoders import DECODERS
from ..formats.message_types import message_name
from ..pipeline.loader import count_messages, summarize_counts
from ..tables import get_messages, write_table


app = typer.Typer(
    name="itchtables",
    help="Decode NASDAQ ITCH 5.0 captures into tables",
    add_completion=False,
)
console = Console()


class OutputFormat(str, Enum):
    csv = "csv"
    json = "json"
    parquet = "parquet"


class Framing(str, Enum):
    raw = "raw"
    prefixed = "prefixed"


class RichProgressObserver(DecodeObserver):
    """Shows session events on a rich progress bar."""

    def __init__(self, progress: Progress, kind: str):
        self.progress = progress
        self.kind = kind
        self.task = progress.add_task(f"Loading {kind}", total=None)

    def on_counted(self, n_messages: int) -> None:
        self.progress.console.print(f"[bold]Counting:[/] {n_messages:,} {self.kind} messages found")

    def on_progress(self, bytes_read: int, total_bytes: Optional[int]) -> None:
        self.progress.update(self.task, completed=bytes_read, total=total_bytes)

    def on_done(self, n_rows: int) -> None:
        self.progress.update(self.task, description=f"Loaded {n_rows:,} {self.kind}")


@app.callback()
def main_callback(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Decode NASDAQ ITCH 5.0 captures into tables."""
    package_logger = logging.getLogger("itchtables")
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    package_logger.setLevel(logging.DEBUG if debug else logging.WARNING)


def _print_preview(df, rows: int):
    """Print the first rows of a table."""
    table = Table(title=f"{len(df):,} rows")
    for name in df.columns:
        table.add_column(str(name))
    for record in df.head(rows).itertuples(index=False):
        table.add_row(*(str(v) for v in record))
    console.print(table)


def _decode_table(
    kind: str,
    itch_file: Path,
    start: int,
    end: Optional[int],
    output: Optional[Path],
    format: Optional[OutputFormat],
    framing: Optional[Framing],
    buffer_size: Optional[int],
    config_path: Optional[Path],
    head: int,
    quiet: bool,
):
    cfg = load_config(config_path)
    errors = cfg.validate()
    if errors:
        for e in errors:
            console.print(f"[red]Config error:[/] {e}")
        raise typer.Exit(1)

    framing_value = framing.value if framing else cfg.decode.framing
    buffer_value = buffer_size if buffer_size is not None else cfg.decode.buffer_size
    quiet = quiet or cfg.decode.quiet

    options = dict(
        buffer_size=buffer_value,
        quiet=quiet,
        framing=framing_value,
        add_datetime=cfg.output.add_datetime,
    )

    try:
        if quiet:
            df = get_messages(kind, itch_file, start, end, **options)
        else:
            console.print(f"[bold blue]itchtables v{__version__}[/]")
            console.print(f"Decoding {kind}: {itch_file}")
            columns = [SpinnerColumn(), TextColumn("{task.description}"), BarColumn(), DownloadColumn()]
            with Progress(*columns, console=console) as progress:
                observer = RichProgressObserver(progress, kind)
                df = get_messages(kind, itch_file, start, end, observer=observer, **options)
    except (ItchDecodeError, OSError) as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    if output is None:
        _print_preview(df, head)
        return

    # Relative paths land in the configured output directory
    if not output.is_absolute():
        output = cfg.output.path / output

    fmt = format.value if format else (output.suffix.lstrip('.').lower() or cfg.output.format)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        write_table(df, output, fmt)
    except (ItchDecodeError, OSError, ImportError) as e:
        console.print(f"[red]Error ({ErrorCode.E4001_FILE_WRITE_FAILED.value}):[/] {e}")
        raise typer.Exit(1)

    if not quiet:
        console.print(f"[green]Written {len(df):,} rows to:[/] {output}")


def _register_table_command(kind: str, help_text: str):
    @app.command(kind, help=help_text)
    def command(
        itch_file: Path = typer.Argument(..., help="ITCH capture file (plain or .gz)", exists=True),
        start: int = typer.Option(0, "--start", min=0, help="First message index (0-based)"),
        end: Optional[int] = typer.Option(None, "--end", min=0, help="Last message index (inclusive)"),
        output: Optional[Path] = typer.Option(None, "-o", "--output", help="Output file"),
        format: Optional[OutputFormat] = typer.Option(None, "-f", "--format", help="Output format"),
        framing: Optional[Framing] = typer.Option(None, "--framing", help="Frame boundaries"),
        buffer_size: Optional[int] = typer.Option(None, "--buffer-size", min=1, help="Read buffer in bytes"),
        config_path: Optional[Path] = typer.Option(None, "-c", "--config"),
        head: int = typer.Option(10, "--head", min=0, help="Rows to preview without --output"),
        quiet: bool = typer.Option(False, "-q", "--quiet"),
    ):
        _decode_table(kind, itch_file, start, end, output, format, framing,
                      buffer_size, config_path, head, quiet)

    return command


for _kind, _help in (
    ('orders', "Decode add-order messages (A, F)."),
    ('trades', "Decode trade messages (P, Q, B)."),
    ('modifications', "Decode order modification messages (E, C, X, D, U)."),
):
    _register_table_command(_kind, _help)


# === COUNT COMMAND ===

@app.command()
def count(
    itch_file: Path = typer.Argument(..., help="ITCH capture file (plain or .gz)", exists=True),
    framing: Framing = typer.Option(Framing.raw, "--framing", help="Frame boundaries"),
    buffer_size: int = typer.Option(100_000_000, "--buffer-size", min=1, help="Read buffer in bytes"),
    as_json: bool = typer.Option(False, "--json", help="Print counts as JSON"),
):
    """Count messages per type without decoding them."""
    try:
        counts = count_messages(itch_file, buffer_size, framing.value)
    except (ItchDecodeError, OSError) as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    by_type = summarize_counts(counts)

    if as_json:
        console.print_json(json.dumps(by_type))
        return

    table = Table(title=f"Messages in {itch_file.name}")
    table.add_column("Type")
    table.add_column("Name")
    table.add_column("Count", justify="right")
    for code, n in sorted(by_type.items()):
        table.add_row(code, message_name(code), f"{n:,}")
    table.add_row("", "[bold]Total[/]", f"[bold]{sum(by_type.values()):,}[/]")

    for name, decoder_cls in DECODERS.items():
        table.add_row("", f"[cyan]{name}[/]", f"{decoder_cls().count_valid_messages(counts):,}")

    console.print(table)


# === CONFIG COMMAND ===

@app.command("config")
def config_cmd(
    action: str = typer.Argument(..., help="Action: init|validate|dump"),
    path: Optional[Path] = typer.Argument(None, help="Config file path"),
):
    """Configuration management."""
    if action == "init":
        console.print(generate_default_config())

    elif action == "validate":
        if not path:
            console.print("[red]Path required for validate[/]")
            raise typer.Exit(1)
        try:
            cfg = ItchConfig.load(path)
        except (OSError, TypeError, ValueError) as e:
            console.print(f"[red]Error:[/] {e}")
            raise typer.Exit(1)
        errors = cfg.validate()
        if errors:
            console.print("[red]Invalid configuration:[/]")
            for e in errors:
                console.print(f"  - {e}")
            raise typer.Exit(1)
        console.print(f"[green]Valid:[/] {path}")

    elif action == "dump":
        cfg = ItchConfig.load(path) if path else load_config()
        console.print(cfg.to_yaml())

    else:
        console.print(f"[red]Unknown action:[/] {action}")
        console.print("Valid actions: init, validate, dump")
        raise typer.Exit(1)


# === VERSION COMMAND ===

@app.command()
def version(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show decoder schemas"),
):
    """Show version information."""
    console.print(f"[bold blue]itchtables v{__version__}[/]")

    if verbose:
        console.print()
        table = Table(show_header=False, box=None)
        table.add_column("Decoder", style="cyan")
        table.add_column("Types", style="green")
        table.add_column("Columns")

        for name, decoder_cls in DECODERS.items():
            decoder = decoder_cls()
            table.add_row(name, ", ".join(decoder.valid_types), ", ".join(decoder.column_names))

        console.print(table)


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
