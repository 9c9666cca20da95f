"""
Core value types shared by the registry, the fetch orchestrator and the resolver.
"""

from dataclasses import dataclass, field


def sort_versions(versions: list[str]) -> list[str]:
    """
    Sorts version identifiers in descending lexicographic order.

    This is a plain string comparison: '1.10' sorts before '1.9'.
    """
    return sorted(versions, reverse=True)


@dataclass(frozen=True)
class FullVersionId:
    """The {prefix, version} compound key identifying exactly one version manifest."""

    prefix: str
    id: str

    @classmethod
    def parse(cls, value: str) -> "FullVersionId":
        """Parses a 'prefix/version' string."""
        prefix, sep, version_id = value.strip().partition("/")
        if not sep or not prefix or not version_id or "/" in version_id:
            raise ValueError(
                f"Invalid version '{value}'. Expected the form 'prefix/version'."
            )
        return cls(prefix, version_id)

    def __str__(self) -> str:
        return f"{self.prefix}/{self.id}"


@dataclass
class Prefix:
    """A named release channel and the versions known for it."""

    id: str
    about: str = ""
    versions: list[str] = field(default_factory=list)
    latest_version_id: str = ""

    def merge_versions(self, version_ids: list[str]) -> None:
        """Unions new version ids into the known set and re-sorts it."""
        known = set(self.versions)
        for version_id in version_ids:
            if version_id not in known:
                self.versions.append(version_id)
                known.add(version_id)
        self.versions = sort_versions(self.versions)

    def copy(self) -> "Prefix":
        return Prefix(self.id, self.about, list(self.versions), self.latest_version_id)


@dataclass(frozen=True)
class FileInfo:
    """A resolved download unit: where to fetch it, where to put it, how to check it."""

    url: str
    path: str
    hash: str
    size: int

    def to_dict(self) -> dict[str, str | int]:
        return {"url": self.url, "path": self.path, "hash": self.hash, "size": self.size}
