"""
Pydantic models for the store's JSON documents.

Every model tolerates missing fields (they default to empty values) and ignores
unknown keys, so a partially filled document still parses. Structural problems,
such as a list where an object is expected, surface as SchemaError through
`parse_document`.

The version manifest exists in two schema generations. Both are folded into
one canonical shape by `VersionIndex.normalize_schema`, so no code outside this
module needs to know which generation a document came from.
"""

import json
from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from launcher_store.exceptions import SchemaError

ModelT = TypeVar("ModelT", bound=BaseModel)


class _Document(BaseModel):
    class Config:
        extra = "ignore"
        populate_by_name = True


class PrefixInfo(_Document):
    about: str = ""


class PrefixesIndex(_Document):
    """The root document listing which prefixes exist."""

    prefixes: dict[str, PrefixInfo] = Field(default_factory=dict)

    def to_json_bytes(self) -> bytes:
        return self.model_dump_json(indent=4).encode("utf-8")


class PrefixVersionsIndex(_Document):
    """A prefix's remote version list and its asserted latest version."""

    latest: str = ""
    versions: list[str] = Field(default_factory=list)


class OsRule(_Document):
    name: str = ""
    arch: str = ""
    version: str = ""


class LibraryRule(_Document):
    action: str = "allow"
    os: OsRule | None = None


class LibraryInfo(_Document):
    """A library descriptor as listed in a version manifest."""

    name: str = ""
    rules: list[LibraryRule] = Field(default_factory=list)
    natives: dict[str, str] = Field(default_factory=dict)


class VersionIndex(_Document):
    """A single version's manifest, normalized across both schema generations."""

    id: str = ""
    release_time: datetime | None = None
    assets_index: str = ""
    libraries: list[LibraryInfo] = Field(default_factory=list)
    main_class: str = ""
    game_arguments: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_schema(cls, data: Any) -> Any:
        """
        Maps a raw manifest onto the canonical field set.

        The current schema carries an `assetIndex` object and an `arguments.game`
        array; the legacy one carries a bare `assets` string and a space-delimited
        `minecraftArguments` string.
        """
        if not isinstance(data, dict):
            return data
        if "assets_index" in data or "main_class" in data:
            return data  # already canonical

        if "assetIndex" in data:
            info = data.get("assetIndex")
            info = info if isinstance(info, dict) else {}
            sha1 = _as_str(info.get("sha1"))
            asset_id = _as_str(info.get("id"))
            assets_index = f"{sha1}/{asset_id}" if sha1 and asset_id else ""
        else:
            assets_index = _as_str(data.get("assets"))

        if "arguments" in data:
            arguments = data.get("arguments")
            game = arguments.get("game") if isinstance(arguments, dict) else None
            if not isinstance(game, list):
                game = []
            # Non-string entries are conditional rule objects.
            game_arguments = [token for token in game if isinstance(token, str)]
        else:
            raw = _as_str(data.get("minecraftArguments"))
            # Runs of spaces produce no empty tokens.
            game_arguments = [token for token in raw.split(" ") if token]

        return {
            "id": _as_str(data.get("id")),
            "release_time": data.get("releaseTime"),
            "assets_index": assets_index,
            "libraries": data.get("libraries") or [],
            "main_class": _as_str(data.get("mainClass")),
            "game_arguments": game_arguments,
        }

    @field_validator("release_time", mode="before")
    @classmethod
    def parse_release_time(cls, v: Any) -> datetime | None:
        """Accepts ISO-8601 timestamps; anything unparsable becomes None."""
        if isinstance(v, datetime):
            return v
        if not isinstance(v, str) or not v:
            return None
        try:
            return datetime.fromisoformat(v.replace("Z", "+00:00"))
        except ValueError:
            return None


class CheckInfo(_Document):
    """Expected content hash and byte size of one file."""

    hash: str = ""
    size: int = 0


class DataIndex(_Document):
    """The authoritative hash/size catalogue for a version's archive, files and libraries."""

    main: CheckInfo = Field(default_factory=CheckInfo)
    files: dict[str, CheckInfo] = Field(default_factory=dict)
    libs: dict[str, CheckInfo] = Field(default_factory=dict)


class AssetInfo(_Document):
    hash: str = ""
    size: int = 0

    @property
    def storage_name(self) -> str:
        """The content-addressed location: two-character shard, then the full hash."""
        return f"{self.hash[:2]}/{self.hash}"


class AssetsIndex(_Document):
    objects: dict[str, AssetInfo] = Field(default_factory=dict)


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def parse_document(model: type[ModelT], data: bytes | str, source: str = "") -> ModelT:
    """
    Parses raw JSON into the given document model.

    Raises:
        SchemaError: If the payload is not a JSON object or fails validation.
    """
    where = f" '{source}'" if source else ""
    try:
        payload = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SchemaError(f"Document{where} is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise SchemaError(f"Document{where} must be a JSON object.")

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise SchemaError(f"Document{where} has an invalid structure:\n{e}") from e
    except (TypeError, ValueError, AttributeError) as e:
        raise SchemaError(f"Document{where} has an invalid structure: {e}") from e
