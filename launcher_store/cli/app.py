"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import json
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from launcher_store import __version__
from launcher_store.api.client import StoreClient
from launcher_store.exceptions import LauncherStoreError
from launcher_store.models.config import StoreConfig
from launcher_store.models.manifests import VersionIndex
from launcher_store.models.versions import FullVersionId
from launcher_store.storage.config_manager import ConfigManager
from launcher_store.storage.documents import load_document
from launcher_store.utils.path import StoreLayout
from launcher_store.utils.structured_logger import create_structured_logger
from launcher_store.versions import FetchOrchestrator, ManifestResolver, VersionRegistry

from .formatters import (
    format_error_with_suggestions,
    print_config,
    print_manifest_summary,
    print_prefixes_table,
    print_validation_table,
    print_version_info,
)

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("launcher_store")

app = typer.Typer(
    name="launcher-store",
    help=(
        "Discover prefixes and versions of a launcher content store and resolve"
        " verified download plans. Use 'launcher-store <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "launcher-store"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


class Session:
    """Wires the registry, orchestrator and resolver for one CLI invocation."""

    def __init__(self, config: StoreConfig):
        self.config = config
        self.layout = StoreLayout(config.store_url, config.data_path)
        self.base_logger, registry_events, self.fetch_events, resolve_events = (
            create_structured_logger(
                log_dir=config.data_path / "logs", enable_json=config.log_json
            )
        )
        self.base_logger.set_session_context(store_url=config.store_url)
        self.registry = VersionRegistry(self.layout, registry_events)
        self.resolver = ManifestResolver(self.layout, resolve_events)

    async def run_fetch(self, version: FullVersionId | None = None) -> bool:
        """Runs prefix discovery, or the index chain of one version."""
        async with StoreClient(self.config.request_timeout) as client:
            orchestrator = FetchOrchestrator(self.registry, client, self.fetch_events)
            if version is None:
                result = await orchestrator.fetch_prefixes()
                error = orchestrator.last_prefixes_error
            else:
                result = await orchestrator.fetch_version_indexes(version)
                error = orchestrator.last_version_indexes_error
        if error:
            console.print(format_error_with_suggestions(error))
        return result

    def close(self) -> None:
        self.base_logger.close()


def _open_session(cli_options: dict | None = None) -> Session:
    try:
        config = ConfigManager(CONFIG_FILE).load_config(cli_options)
        return Session(config)
    except LauncherStoreError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e


def _parse_version(value: str) -> FullVersionId:
    try:
        return FullVersionId.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """Launcher Store CLI"""
    if version:
        console.print(f"[bold]launcher-store[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("launcher_store").setLevel(log_level)

    if show_config:
        if not CONFIG_FILE.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]launcher-store init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        config_manager = ConfigManager(CONFIG_FILE)
        config_manager.load_config()
        print_config(CONFIG_FILE, config_manager.get_config_as_dict())
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    store_url: str = typer.Argument(..., help="Base URL of the remote store."),
    data_dir: str | None = typer.Option(
        None, "--data-dir", help="Root storage directory (default: platform data dir)."
    ),
    timeout: int | None = typer.Option(
        None, "--timeout", help="Per-request timeout in seconds."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration without asking."
    ),
):
    """Initialize the configuration with the store URL."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings = {"store_url": store_url}
    if data_dir is not None:
        settings["data_dir"] = data_dir
    if timeout is not None:
        settings["request_timeout"] = timeout

    try:
        ConfigManager(CONFIG_FILE).save_new_config(settings)
    except LauncherStoreError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    console.print(f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")
    console.print("Next: [cyan]launcher-store prefixes --fetch[/cyan]")


@app.command()
def validate():
    """Validate the current configuration."""
    try:
        config = ConfigManager(CONFIG_FILE).load_config()
        print_validation_table(config)
    except LauncherStoreError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e


@app.command()
def prefixes(
    refresh: bool = typer.Option(
        False, "--fetch", help="Refresh prefixes and versions from the store first."
    ),
):
    """List known prefixes and their versions."""
    session = _open_session()
    try:
        if refresh and not asyncio.run(session.run_fetch()):
            console.print("[red]✗ Failed to fetch prefixes.[/red]")
            raise typer.Exit(code=1)
        print_prefixes_table(session.registry.get_prefixes())
    finally:
        session.close()


@app.command()
def fetch(
    version: str = typer.Argument(..., help="Version to fetch, as 'prefix/version'."),
):
    """Fetch the version manifest, assets index and data index of a version."""
    full_version = _parse_version(version)
    session = _open_session()
    try:
        if not asyncio.run(session.run_fetch(full_version)):
            console.print(f"[red]✗ Failed to fetch indexes for '{full_version}'.[/red]")
            raise typer.Exit(code=1)
        console.print(f"[green]✓ Indexes for '{full_version}' are up to date.[/green]")
    finally:
        session.close()


@app.command()
def info(
    version: str = typer.Argument(..., help="Version to show, as 'prefix/version'."),
):
    """Show the local manifest of a fetched version."""
    full_version = _parse_version(version)
    session = _open_session()
    try:
        version_index = load_document(
            VersionIndex, session.layout.version_index_path(full_version)
        )
    except LauncherStoreError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e
    finally:
        session.close()
    print_version_info(str(full_version), version_index)


@app.command()
def resolve(
    version: str = typer.Argument(..., help="Version to resolve, as 'prefix/version'."),
    fetch_first: bool = typer.Option(
        False, "--fetch", help="Fetch the version's indexes before resolving."
    ),
    json_output: Path | None = typer.Option(
        None, "--json", help="Write the resolved file list to this JSON file."
    ),
):
    """Resolve the list of files a version needs."""
    full_version = _parse_version(version)
    session = _open_session()
    try:
        if fetch_first and not asyncio.run(session.run_fetch(full_version)):
            console.print(f"[red]✗ Failed to fetch indexes for '{full_version}'.[/red]")
            raise typer.Exit(code=1)

        result = session.resolver.resolve_download_manifest(full_version)
    finally:
        session.close()

    if not result.ok:
        console.print(format_error_with_suggestions(result.error))
        raise typer.Exit(code=1)

    print_manifest_summary(result)

    if json_output:
        payload = [file_info.to_dict() for file_info in result.files]
        try:
            json_output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            console.print(f"[red]✗ Could not write '{json_output}': {e}[/red]")
            raise typer.Exit(code=1) from e
        console.print(f"[green]✓ Wrote {len(payload)} entries to '{json_output}'.[/green]")
