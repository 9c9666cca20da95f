"""
Entry point of the launcher-store command.

Commands report their own failures and exit through typer; anything that still
reaches this level is rendered as an error panel with exit status 1.
"""

import logging
import os
import sys

import typer
from rich.console import Console

from launcher_store.cli.app import app
from launcher_store.cli.formatters import format_error_with_suggestions
from launcher_store.exceptions import LauncherStoreError

log = logging.getLogger("launcher_store")


def _use_utf8_streams() -> None:
    """Switches the standard streams to UTF-8 so status glyphs print on Windows."""
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.reconfigure(encoding="utf-8")
        except (TypeError, AttributeError):
            pass


def main() -> None:
    if os.name == "nt":
        _use_utf8_streams()

    console = Console(stderr=True)
    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        sys.exit(130)
    except LauncherStoreError as e:
        console.print(format_error_with_suggestions(e))
        sys.exit(1)
    except Exception as e:
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
