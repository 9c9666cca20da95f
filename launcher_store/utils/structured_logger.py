"""
Structured logging for registry, fetch and resolve events.
Events go to the standard console logger and, optionally, to a JSONL file.
"""

import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any, TextIO

from rich.markup import escape


class StructuredLogger:
    """
    Logger that emits named events with key/value context.

    Usage:
        logger = StructuredLogger("launcher_store")
        logger.info("local_version_found", prefix="release", version="1.7.10")
    """

    def __init__(
        self,
        name: str,
        log_dir: Path | None = None,
        enable_json: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            log_dir: Directory for JSON log files (None = disabled)
            enable_json: Enable JSON file logging
            enable_console: Enable console output
        """
        self.name = name
        self.log_dir = log_dir
        self.enable_json = enable_json and log_dir is not None
        self.enable_console = enable_console

        self._logger = logging.getLogger(name)

        self._json_file: TextIO | None = None
        if self.enable_json:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            json_log_path = log_dir / f"launcher_store_{timestamp}.jsonl"
            self._json_file = open(json_log_path, "a", encoding="utf-8")  # noqa: SIM115

        self._session_context: dict[str, Any] = {
            "session_id": f"{int(time.time())}_{id(self)}",
        }

    def set_session_context(self, **kwargs) -> None:
        """Set session-level context that appears in all JSON entries."""
        self._session_context.update(kwargs)

    def _format_message(self, event: str, **context) -> str:
        """Format message for console output."""
        parts = [f"[{event}]"]
        parts.extend(f"{key}={value}" for key, value in context.items())
        # Console handlers render Rich markup.
        return escape(" ".join(parts))

    def _write_json(self, level: str, event: str, **context) -> None:
        """Write structured log entry to JSON file."""
        if not self._json_file or self._json_file.closed:
            return

        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "event": event,
            **self._session_context,
            **context,
        }

        try:
            self._json_file.write(json.dumps(entry, default=str) + "\n")
            self._json_file.flush()
        except (OSError, ValueError) as e:
            print(f"JSON logging failed: {e}", file=sys.stderr)

    def _emit(self, level: int, event: str, **context) -> None:
        if self.enable_console:
            self._logger.log(level, self._format_message(event, **context))
        if self.enable_json:
            self._write_json(logging.getLevelName(level), event, **context)

    def debug(self, event: str, **context) -> None:
        self._emit(logging.DEBUG, event, **context)

    def info(self, event: str, **context) -> None:
        self._emit(logging.INFO, event, **context)

    def warning(self, event: str, **context) -> None:
        self._emit(logging.WARNING, event, **context)

    def error(self, event: str, **context) -> None:
        self._emit(logging.ERROR, event, **context)

    def close(self) -> None:
        """Close JSON log file."""
        if self._json_file and not self._json_file.closed:
            self._json_file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class RegistryLogger:
    """Events raised while seeding prefixes and versions from local storage."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def index_created(self, path: Path):
        """No prefixes document on disk yet; expected on first run."""
        self.logger.info("prefixes_index_created", path=str(path))

    def index_unreadable(self, path: Path, error: str):
        self.logger.warning("prefixes_index_unreadable", path=str(path), error=error)

    def local_version_found(self, prefix: str, version: str):
        self.logger.info("local_version_found", prefix=prefix, version=version)

    def version_id_mismatch(self, path: Path, found_id: str):
        """A version folder whose manifest names a different version."""
        self.logger.warning("version_id_mismatch", path=str(path), found_id=found_id)

    def version_unreadable(self, path: Path, error: str):
        self.logger.warning("local_version_unreadable", path=str(path), error=error)

    def initialized(self, prefix_count: int):
        self.logger.info("registry_initialized", prefixes=prefix_count)


class FetchLogger:
    """Events raised by the prefix-discovery and version-index fetch chains."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def fetch_rejected(self, operation: str):
        self.logger.warning("fetch_rejected", operation=operation, reason="in_progress")

    def fetch_started(self, operation: str, target: str = ""):
        self.logger.info("fetch_started", operation=operation, target=target)

    def request_started(self, url: str):
        self.logger.debug("request_started", url=url)

    def document_saved(self, path: Path, size_bytes: int):
        self.logger.debug("document_saved", path=str(path), size_bytes=size_bytes)

    def prefix_merged(self, prefix: str, latest: str, version_count: int):
        self.logger.info(
            "prefix_versions_merged",
            prefix=prefix,
            latest=latest,
            version_count=version_count,
        )

    def fetch_failed(self, operation: str, error: str, error_type: str):
        self.logger.error(
            "fetch_failed", operation=operation, error=error, error_type=error_type
        )

    def fetch_completed(self, operation: str, duration_s: float):
        self.logger.info(
            "fetch_completed", operation=operation, duration_s=round(duration_s, 2)
        )


class ResolveLogger:
    """Events raised while resolving a version's download manifest."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def resolve_started(self, version: str):
        self.logger.info("resolve_started", version=version)

    def library_missing(self, version: str, library_path: str):
        """A wanted library that the data index does not describe."""
        self.logger.warning(
            "library_missing_in_data_index", version=version, library=library_path
        )

    def library_invalid(self, version: str, library_name: str, error: str):
        """A library whose coordinate yields no storage path."""
        self.logger.warning(
            "library_name_invalid", version=version, library=library_name, error=error
        )

    def resolve_failed(self, version: str, error: str):
        self.logger.error("resolve_failed", version=version, error=error)

    def resolve_completed(self, version: str, file_count: int, total_size: int):
        self.logger.info(
            "resolve_completed",
            version=version,
            file_count=file_count,
            total_size_mb=round(total_size / (1024 * 1024), 2),
        )


def create_structured_logger(
    log_dir: Path | None = None, enable_json: bool = False
) -> tuple[StructuredLogger, RegistryLogger, FetchLogger, ResolveLogger]:
    """
    Create all structured loggers.

    Returns:
        Tuple of (base_logger, registry_logger, fetch_logger, resolve_logger)
    """
    base = StructuredLogger("launcher_store", log_dir=log_dir, enable_json=enable_json)
    return base, RegistryLogger(base), FetchLogger(base), ResolveLogger(base)
