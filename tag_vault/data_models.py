"""Data models for vault configuration and tagged-section results."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from tag_vault.constants import TAG_PATTERN
from tag_vault.errors import InvalidTagError


class Tag(str):
    """A validated tag string such as ``#project-a``.

    Instances can only be created from strings that are already well-formed
    tags, so index lookups never see an unvalidated key. Equality and hashing
    are those of the underlying string.
    """

    __slots__ = ()

    def __new__(cls, value: str) -> "Tag":
        if isinstance(value, Tag):
            return value
        if not isinstance(value, str) or TAG_PATTERN.fullmatch(value) is None:
            raise InvalidTagError(str(value))
        return super().__new__(cls, value)

    @property
    def name(self) -> str:
        """Tag text without the leading ``#``."""
        return self[1:]


@dataclass(frozen=True)
class TaggedSection:
    """One contiguous run of lines owned by a tag within a single document.

    ``start_line`` and ``end_line`` are 0-based, inclusive indices of the body
    lines in the source document; the tag line itself sits at ``start_line - 1``.
    """

    tag: Tag
    content: str
    start_line: int
    end_line: int

    def as_payload(self) -> dict[str, Any]:
        return {
            "tag": str(self.tag),
            "content": self.content,
            "start_line": self.start_line,
            "end_line": self.end_line,
        }


@dataclass(frozen=True)
class ParsedNote:
    """Parse result for one document."""

    file_path: str
    date: Optional[str] = None
    sections: tuple[TaggedSection, ...] = ()

    @property
    def tags(self) -> list[Tag]:
        """Distinct tags that produced a section, in file order."""
        return list(dict.fromkeys(section.tag for section in self.sections))

    def as_payload(self) -> dict[str, Any]:
        return {
            "file_path": self.file_path,
            "date": self.date,
            "sections": [section.as_payload() for section in self.sections],
        }


@dataclass(frozen=True)
class TagHit:
    """A section located in the vault-wide index."""

    file_path: str
    section: TaggedSection
    date: Optional[str] = None


@dataclass(frozen=True)
class TaggedContent:
    """Aggregated entry returned for a tag lookup.

    ``date`` is ``None`` when the owning document is not a dated note.
    """

    date: Optional[str]
    file_path: str
    content: str

    def as_payload(self) -> dict[str, Any]:
        return {"date": self.date, "file_path": self.file_path, "content": self.content}


@dataclass
class DeleteResult:
    """Outcome of removing every section under a tag."""

    files_modified: list[str] = field(default_factory=list)
    sections_deleted: int = 0

    def as_payload(self) -> dict[str, Any]:
        return {
            "files_modified": list(self.files_modified),
            "sections_deleted": self.sections_deleted,
        }


@dataclass(frozen=True)
class VaultMetadata:
    """Normalized metadata describing a note vault."""

    name: str
    path: Path
    description: str
    exists: bool

    def as_payload(self) -> dict[str, Any]:
        """Return a serializable payload representation."""
        return {
            "name": self.name,
            "path": str(self.path),
            "description": self.description,
            "exists": self.path.is_dir(),
        }


class VaultConfiguration:
    """Holds vault metadata and default resolution helpers.

    Loaded lazily from vaults.yaml. Provides vault lookup by name and payload
    serialization for MCP responses.
    """

    def __init__(self, default_vault: str, vaults: dict[str, VaultMetadata]) -> None:
        self.default_vault = default_vault
        self.vaults = vaults

    def get(self, name: str) -> VaultMetadata:
        """Get vault metadata by name.

        Raises:
            ValueError: If the vault name is not found in configuration.
        """
        try:
            return self.vaults[name]
        except KeyError as exc:
            raise ValueError(f"Unknown vault '{name}'") from exc

    def as_payload(self) -> dict[str, Any]:
        return {
            "default": self.default_vault,
            "vaults": [vault.as_payload() for vault in self.vaults.values()],
        }
