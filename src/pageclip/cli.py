"""Command-line interface for pageclip."""

import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .core.clipper import Clipper
from .exceptions import ConfigError
from .logging_config import setup_logging
from .models.config import ClipperConfig
from .models.events import ClipEvent, EventType
from .models.note import Note


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="pageclip",
        description="Clip web pages into offline Markdown notes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Clip a page
  pageclip add https://example.com/article

  # List stored notes, newest first
  pageclip list

  # Print a note as Markdown
  pageclip show 3f0c6a52-0f5e-4c1e-9a57-1a2b3c4d5e6f

  # Use a different notes directory
  pageclip --storage-dir ~/notes list
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML configuration file",
    )
    parser.add_argument(
        "--storage-dir",
        "-s",
        type=Path,
        default=None,
        metavar="DIR",
        help="Notes directory (default: ./offline-notes)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress output",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    add_parser = subparsers.add_parser("add", help="Clip a web page into a new note")
    add_parser.add_argument("url", help="URL of the page to clip")

    subparsers.add_parser("list", help="List stored notes")

    show_parser = subparsers.add_parser("show", help="Print a note's Markdown")
    show_parser.add_argument("note_id", metavar="ID", help="Note identifier")
    show_parser.add_argument(
        "--raw",
        action="store_true",
        help="Print the Markdown source instead of rendering it",
    )

    delete_parser = subparsers.add_parser("delete", help="Delete a note and its file")
    delete_parser.add_argument("note_id", metavar="ID", help="Note identifier")

    return parser


def build_config(args: argparse.Namespace) -> ClipperConfig:
    """
    Build configuration from a YAML file and command-line overrides.

    Raises:
        ConfigError: If the config file or the overrides are invalid
    """
    config = ClipperConfig.from_yaml_file(args.config) if args.config else ClipperConfig()

    overrides: dict = {}
    if args.storage_dir:
        overrides["storage"] = config.storage.model_copy(update={"directory": args.storage_dir})
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    elif args.quiet:
        overrides["log_level"] = "ERROR"
    elif not args.config:
        # Keep the terminal quiet unless asked; progress is shown through rich
        overrides["log_level"] = "WARNING"

    return config.model_copy(update=overrides) if overrides else config


def format_timestamp(millis: int) -> str:
    return datetime.fromtimestamp(millis / 1000).strftime("%Y-%m-%d %H:%M")


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def notes_table(notes: list[Note]) -> Table:
    """Render notes as a rich table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", no_wrap=True)
    table.add_column("Title")
    table.add_column("Modified", no_wrap=True)
    table.add_column("Size", justify="right", no_wrap=True)
    table.add_column("URL", overflow="fold")
    for note in notes:
        table.add_row(
            note.id,
            note.title,
            format_timestamp(note.date_modified),
            format_size(note.size),
            note.url,
        )
    return table


async def run_add(clipper: Clipper, args: argparse.Namespace, console: Console) -> int:
    if args.quiet:
        result = await clipper.add_note_from_url(args.url)
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Starting...", total=None)

            def on_event(event: ClipEvent) -> None:
                if event.type == EventType.CLIP_STARTED:
                    progress.update(task, description=f"[cyan]Fetching {event.url}")
                elif event.type == EventType.FETCH_COMPLETED:
                    progress.update(task, description=f"[cyan]Converting: {event.message}")
                elif event.type == EventType.PAGE_CONVERTED:
                    progress.update(task, description="[cyan]Saving...")

            clipper.on_event = on_event
            result = await clipper.add_note_from_url(args.url)

    if not result.is_success:
        console.print(f"[red]Error:[/red] {escape(result.message)}")
        return 1

    note = result.note
    if not args.quiet:
        console.print(f"[green]Saved:[/green] {escape(note.title)}")
        console.print(f"  ID: {note.id}")
        console.print(f"  File: {note.file_name} ({format_size(note.size)})")
    else:
        console.print(note.id)
    return 0


async def run_list(clipper: Clipper, args: argparse.Namespace, console: Console) -> int:
    notes = await clipper.list_notes()
    if args.quiet:
        for note in notes:
            console.print(note.id)
        return 0
    if not notes:
        console.print("No notes yet. Add one with: pageclip add URL")
        return 0
    console.print(notes_table(notes))
    console.print(f"{len(notes)} note(s)")
    return 0


async def run_show(clipper: Clipper, args: argparse.Namespace, console: Console) -> int:
    note = await clipper.get_note(args.note_id)
    if note is None:
        console.print(f"[red]Error:[/red] No note with ID {args.note_id}")
        return 1

    markdown = await clipper.read_markdown(note)
    if markdown is None:
        console.print(f"[red]Error:[/red] Markdown file missing for note {note.id}")
        return 1

    if args.raw:
        console.print(markdown, markup=False, highlight=False)
    else:
        console.print(f"[bold]{escape(note.title)}[/bold]")
        console.print(note.url, markup=False, highlight=False)
        console.print()
        console.print(Markdown(markdown))
    return 0


async def run_delete(clipper: Clipper, args: argparse.Namespace, console: Console) -> int:
    note = await clipper.get_note(args.note_id)
    if note is None:
        console.print(f"[red]Error:[/red] No note with ID {args.note_id}")
        return 1

    if not await clipper.delete_note(note):
        console.print(f"[red]Error:[/red] Could not delete note {note.id}")
        return 1

    if not args.quiet:
        console.print(f"[green]Deleted:[/green] {escape(note.title)}")
    return 0


COMMANDS = {
    "add": run_add,
    "list": run_list,
    "show": run_show,
    "delete": run_delete,
}


def run_command(args: argparse.Namespace) -> int:
    """Run a subcommand with given arguments."""
    console = Console()

    try:
        config = build_config(args)
    except (ConfigError, ValueError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    setup_logging(config.log_level, log_file=config.log_file)

    async def run() -> int:
        try:
            async with Clipper(config) as clipper:
                return await COMMANDS[args.command](clipper, args, console)
        except Exception as e:
            console.print(f"[red]Error:[/red] {e}")
            if args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    return asyncio.run(run())


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return run_command(args)


if __name__ == "__main__":
    sys.exit(main())
