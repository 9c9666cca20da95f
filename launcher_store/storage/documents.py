"""
Reads and writes store documents on local storage.

Writes are plain overwrites: a crash mid-write can leave a truncated file, and
nothing here rolls back documents written by earlier steps.
"""

import logging
from pathlib import Path
from typing import TypeVar

import aiofiles
from pydantic import BaseModel

from launcher_store.exceptions import StorageError
from launcher_store.models.manifests import parse_document

log = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def read_document(path: Path) -> bytes:
    """Reads a document's raw bytes."""
    try:
        return path.read_bytes()
    except OSError as e:
        raise StorageError(f"Failed to read '{path}': {e}", path=str(path)) from e


def load_document(model: type[ModelT], path: Path) -> ModelT:
    """
    Reads and parses a local document.

    Raises:
        StorageError: If the file cannot be read.
        SchemaError: If its contents do not parse as the given model.
    """
    return parse_document(model, read_document(path), source=str(path))


async def write_document(path: Path, data: bytes) -> None:
    """Creates the parent directories and writes the document's bytes."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(path, "wb") as f:
            await f.write(data)
    except OSError as e:
        raise StorageError(f"Failed to save '{path}': {e}", path=str(path)) from e
    log.debug(f"Saved {len(data)} bytes to '{path}'.")
