"""
Main entry point for Rolodex.

Interactive CLI for importing, tagging, and browsing contacts.

File: main.py
Created: 2026-10-14
Last Modified: 2026-10-18
"""

import asyncio
import logging
import sys

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, Confirm
from rich.table import Table
from rich import box

from rolodex.config import RolodexConfig, configure_logging

console = Console()
log = logging.getLogger(__name__)

# Command definitions
COMMANDS = {
    "1": {
        "name": "Import contacts",
        "alias": "import",
        "description": "Read contacts, tag new/edited ones with the LLM, save to database",
        "requires": "Contact source + API key",
    },
    "2": {
        "name": "List contacts",
        "alias": "list",
        "description": "Show every contact with its tags",
        "requires": None,
    },
    "3": {
        "name": "Search by tag",
        "alias": "search",
        "description": "Find contacts whose tags match a query",
        "requires": None,
    },
    "4": {
        "name": "Tags",
        "alias": "tags",
        "description": "Show tag vocabulary with usage counts",
        "requires": None,
    },
    "5": {
        "name": "Stats",
        "alias": "stats",
        "description": "Show database counts and configuration",
        "requires": None,
    },
}

ALIASES = {info["alias"]: key for key, info in COMMANDS.items()}


def show_menu():
    """Display the main menu."""
    console.print()
    console.print(
        Panel.fit(
            "[bold cyan]Rolodex[/] - Contact Tagging via LLM",
            border_style="cyan",
        )
    )
    console.print()

    table = Table(box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("Cmd", style="cyan", width=4)
    table.add_column("Name", style="white")
    table.add_column("Description", style="dim")
    table.add_column("Requires", style="yellow")

    for key, command in COMMANDS.items():
        requires = command["requires"] or "-"
        table.add_row(key, command["name"], command["description"], requires)

    console.print(table)
    console.print()
    console.print("[dim]Commands:[/]")
    console.print("  [cyan]1-5[/]    Run a command")
    console.print("  [cyan]reset[/]  Drop all stored contacts and tags")
    console.print("  [cyan]q[/]      Quit")
    console.print()


def _print_contacts(contacts, title: str = "Contacts"):
    if not contacts:
        console.print("[dim]No contacts found. Please import them![/]")
        return

    table = Table(title=title, box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("Name", style="white")
    table.add_column("Tags", style="green")

    for contact in contacts:
        if not contact.name:
            continue
        table.add_row(contact.name, contact.tags_display or "[dim]None[/]")

    console.print(table)


async def _run_import(config: RolodexConfig):
    """Import and tag contacts."""
    from rolodex.models import ImportStatus
    from rolodex.sync import FileLock, run_import

    try:
        with FileLock():
            console.print("[dim]Importing contacts...[/]")
            report, contacts = await run_import(config, show_progress=True)
    except RuntimeError as e:
        if "already running" in str(e):
            console.print("[yellow]Another import is already running.[/]")
            return
        raise

    if report.status == ImportStatus.PERMISSION_DENIED:
        console.print("[red]Contacts permission not granted.[/]")
        return
    if report.status == ImportStatus.NO_CONTACTS:
        console.print("[dim]No contacts found in source.[/]")
        return
    if report.status == ImportStatus.UP_TO_DATE:
        console.print(
            f"[green]Up to date.[/] {report.contacts_read:,} contacts read, none new or edited."
        )
    else:
        console.print(
            f"[green]Import complete![/] "
            f"{report.new:,} new, {report.edited:,} edited, {report.unchanged:,} unchanged"
        )
        console.print(
            f"  Tags created: {report.tags_created:,}, links created: {report.links_created:,}"
        )
        if report.batches_failed:
            console.print(
                f"  [yellow]{report.batches_failed} of "
                f"{report.batches_failed + report.batches_succeeded} tagging batches failed[/]"
            )

    console.print()
    _print_contacts(contacts)


async def _run_list(config: RolodexConfig):
    """List contacts with their tags."""
    from rolodex.database import fetch_contacts_with_tags, init_local_database

    await init_local_database(config.db_path)
    _print_contacts(await fetch_contacts_with_tags(config.db_path))


async def _run_search(config: RolodexConfig, query: str = ""):
    """Search contacts by tag."""
    from rolodex.database import init_local_database, search_contacts_by_tag

    if not query:
        query = Prompt.ask("Tag contains")
    if not query.strip():
        console.print("[dim]Empty query.[/]")
        return

    await init_local_database(config.db_path)
    contacts = await search_contacts_by_tag(query, config.db_path)
    _print_contacts(contacts, title=f"Contacts tagged like '{query.strip()}'")


async def _run_tags(config: RolodexConfig):
    """Show the tag vocabulary."""
    from rolodex.database import get_tag_counts, init_local_database

    await init_local_database(config.db_path)
    counts = await get_tag_counts(config.db_path)
    if not counts:
        console.print("[dim]No tags yet.[/]")
        return

    table = Table(title="Tags", box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("Tag", style="green")
    table.add_column("Contacts", style="cyan", justify="right")
    for name, uses in counts:
        table.add_row(name, str(uses))
    console.print(table)


async def _run_stats(config: RolodexConfig):
    """Show database counts and configuration."""
    from rolodex.database import get_store_stats, init_local_database

    await init_local_database(config.db_path)
    stats = await get_store_stats(config.db_path)

    console.print(f"Contacts: {stats['contacts']:,}")
    console.print(f"  Untagged: {stats['untagged_contacts']:,}")
    console.print(f"Tags: {stats['tags']:,}")
    console.print(f"Links: {stats['links']:,}")
    console.print()
    console.print("[dim]Configuration:[/]")
    for key, value in config.to_dict().items():
        console.print(f"  [dim]{key}:[/] {value}")


async def _run_reset(config: RolodexConfig, assume_yes: bool = False):
    """Drop all stored data."""
    from rolodex.database import reset_local_database

    if not assume_yes and not Confirm.ask(
        f"Delete ALL contacts and tags in {config.db_path}?",
        default=False,
    ):
        console.print("[dim]Skipped.[/]")
        return

    await reset_local_database(config.db_path)
    console.print("[green]Database reset.[/]")


async def run_command(config: RolodexConfig, command: str, args=None):
    """Run a single command."""
    args = args or []
    command = ALIASES.get(command, command)

    if command in COMMANDS:
        console.rule(f"[bold]{COMMANDS[command]['name']}")

    try:
        if command == "1":
            await _run_import(config)
        elif command == "2":
            await _run_list(config)
        elif command == "3":
            await _run_search(config, " ".join(args))
        elif command == "4":
            await _run_tags(config)
        elif command == "5":
            await _run_stats(config)
        elif command == "reset":
            await _run_reset(config, assume_yes="--yes" in args)
        else:
            console.print(f"[red]Unknown command: {command}[/]")
            console.print("[dim]Valid commands: 1-5, import, list, search, tags, stats, reset[/]")
    except ValueError as e:
        # Configuration problems (missing API key, bad source name, ...)
        console.print(f"[red]{e}[/]")
    except Exception as e:
        log.error(f"Command {command!r} failed: {e}", exc_info=True)
        console.print(f"[red]Command failed:[/] {e}")


async def main():
    """Main entry point with interactive menu."""
    verbose = "--verbose" in sys.argv or "-v" in sys.argv
    argv = [a for a in sys.argv[1:] if a not in ("--verbose", "-v")]

    configure_logging(verbose=verbose)
    try:
        config = RolodexConfig.from_env()
    except ValueError as e:
        console.print(f"[red]Invalid configuration:[/] {e}")
        return

    # Command-line argument for non-interactive use
    if argv:
        await run_command(config, argv[0].lower(), argv[1:])
        return

    # Interactive mode
    while True:
        show_menu()

        choice = Prompt.ask(
            "Select command",
            choices=list(COMMANDS.keys()) + ["reset", "q"],
            default="q",
        )

        if choice == "q":
            console.print("[dim]Goodbye![/]")
            break

        await run_command(config, choice)

        console.print()
        if not Confirm.ask("Continue?", default=True):
            console.print("[dim]Goodbye![/]")
            break


if __name__ == "__main__":
    asyncio.run(main())
