"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from launcher_store.models.config import StoreConfig
from launcher_store.models.manifests import VersionIndex
from launcher_store.models.versions import Prefix
from launcher_store.utils.formatting import format_release_time, format_size
from launcher_store.versions.resolver import ResolveResult


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "TransportError": [
            "• Check your internet connection.",
            "• Verify the store URL with `launcher-store validate`.",
            "• The store might be temporarily unavailable; try again later.",
        ],
        "SchemaError": [
            "• The store returned a document this version cannot read.",
            "• Fetch the version again with `launcher-store fetch <prefix/version>`.",
        ],
        "StorageError": [
            "• Check that the data directory exists and is writable.",
            "• Check the free disk space.",
        ],
        "ConfigurationError": [
            "• Run `launcher-store init <STORE_URL>` to create a configuration.",
            "• Run `launcher-store validate` to see what is wrong.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration file contents."""
    console = Console()
    content = "\n".join(f"{key} = {value}" for key, value in config_data.items())
    console.print(
        Panel(
            content,
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_validation_table(config: StoreConfig):
    """Displays a summary of the effective settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Store URL:", f"[green]{config.store_url}[/green]")
    table.add_row("Data Directory:", str(config.data_path))
    table.add_row("Request Timeout:", f"{config.request_timeout}s")
    table.add_row("JSON Logs:", "✓ Enabled" if config.log_json else "✗ Disabled")

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def print_prefixes_table(prefixes: dict[str, Prefix]):
    """Displays known prefixes with their latest and known versions."""
    console = Console()
    if not prefixes:
        console.print(
            "[dim]No prefixes known yet. Run `launcher-store prefixes --fetch`.[/dim]"
        )
        return

    table = Table(title="Prefixes", box=box.ROUNDED)
    table.add_column("Prefix", style="bold cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Latest", style="green")
    table.add_column("Versions", justify="right")

    for prefix_id in sorted(prefixes):
        prefix = prefixes[prefix_id]
        table.add_row(
            prefix.id,
            prefix.about or "[dim]-[/dim]",
            prefix.latest_version_id or "[dim]-[/dim]",
            str(len(prefix.versions)),
        )
    console.print(table)


def print_manifest_summary(result: ResolveResult):
    """Displays the per-group breakdown of a resolved download manifest."""
    console = Console()
    stats = result.stats

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row("Main Archive:", str(stats.main_files))
    stats_table.add_row("Files:", str(stats.auxiliary_files))
    stats_table.add_row("Libraries:", f"[green]{stats.libraries}[/green]")
    if stats.libraries_filtered > 0:
        stats_table.add_row(
            "○ Other Platforms:", f"[dim]{stats.libraries_filtered}[/dim]"
        )
    if stats.libraries_missing > 0:
        stats_table.add_row(
            "⚠ Not In Data Index:", f"[yellow]{stats.libraries_missing}[/yellow]"
        )
    if stats.libraries_invalid > 0:
        stats_table.add_row(
            "⚠ Invalid Name:", f"[yellow]{stats.libraries_invalid}[/yellow]"
        )
    stats_table.add_row("Assets:", str(stats.assets))
    stats_table.add_row("", "")
    stats_table.add_row("Total Files:", f"[bold]{stats.total_files}[/bold]")
    stats_table.add_row("Total Size:", f"[cyan]{format_size(stats.total_size)}[/cyan]")

    console.print(
        Panel(
            stats_table,
            title=f"📦 [bold]{result.version}[/bold]",
            border_style="green",
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )


def print_version_info(version: str, version_index: VersionIndex):
    """Displays the normalized contents of a local version manifest."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Version:", version_index.id)
    table.add_row("Released:", format_release_time(version_index.release_time))
    table.add_row("Main Class:", version_index.main_class or "[dim]-[/dim]")
    table.add_row("Assets Index:", version_index.assets_index or "[red]missing[/red]")
    table.add_row("Libraries:", str(len(version_index.libraries)))
    table.add_row("Arguments:", " ".join(version_index.game_arguments) or "[dim]-[/dim]")

    console.print(Panel(table, title=f"[bold]{version}[/bold]", border_style="cyan"))
