"""Tag aggregation and deletion across a vault."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from tag_vault.constants import BYTE_ORDER_MARK
from tag_vault.core.tag_index import TagIndex, build_tag_index
from tag_vault.core.tag_parser import is_separator, is_tag, parse_tagged_sections
from tag_vault.core.vault_operations import (
    VaultDocumentStore,
    construct_note_path,
    ensure_vault_ready,
)
from tag_vault.data_models import DeleteResult, ParsedNote, Tag, TaggedContent, VaultMetadata
from tag_vault.errors import DocumentReadError, DocumentWriteError, TagVaultError

logger = logging.getLogger(__name__)


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def _tag_scope_open_before(lines: list[str], index: int) -> bool:
    """Return ``True`` when a tag is active on the line just above ``index``."""
    for line in reversed(lines[:index]):
        if is_tag(line):
            return True
        if is_separator(line):
            return False
    return False


def _excision_spans(lines: list[str], note: ParsedNote, tag: Tag) -> list[tuple[int, int]]:
    """Return inclusive ``(first, last)`` line ranges to drop for ``tag``.

    Each range covers the tag line and the section body. The separator that
    closed the section is dropped too, but only when no tag was active before
    the tag line; otherwise the preceding scope would run on into the lines
    after the section.
    """
    spans: list[tuple[int, int]] = []
    for section in note.sections:
        if section.tag != tag:
            continue
        first = section.start_line - 1
        last = section.end_line
        closer = last + 1
        if (
            closer < len(lines)
            and is_separator(lines[closer])
            and not _tag_scope_open_before(lines, first)
        ):
            last = closer
        spans.append((first, last))
    return spans


def excise_tag(content: str, note: ParsedNote, tag: Tag) -> tuple[str, int]:
    """Remove every section under ``tag`` from ``content``.

    Args:
        content: The exact text ``note`` was parsed from.
        note: Parse result of ``content``.
        tag: Tag whose sections are removed.

    Returns:
        ``(new_content, sections_removed)``. All lines outside the removed
        ranges are kept verbatim and in order; a trailing newline survives,
        as does a leading byte order mark.
    """
    lines = content.split("\n")
    spans = _excision_spans(lines, note, tag)
    if not spans:
        return content, 0

    dropped: set[int] = set()
    for first, last in spans:
        dropped.update(range(first, last + 1))

    kept = [line for index, line in enumerate(lines) if index not in dropped]
    if 0 in dropped and lines[0].startswith(BYTE_ORDER_MARK) and kept:
        kept[0] = BYTE_ORDER_MARK + kept[0]
    if content.endswith("\n") and kept and kept[-1] != "":
        kept.append("")
    return "\n".join(kept), len(spans)


# ==============================================================================
# TAG SERVICE
# ==============================================================================


class TagService:
    """Aggregates tagged sections for one vault and applies tag deletions.

    Holds a single :class:`TagIndex` snapshot. The snapshot is built on first use,
    replaced wholesale by :meth:`refresh`, and rebuilt after every deletion that
    rewrote a document. Callers serialize mutations; there is no locking.
    """

    def __init__(self, store: VaultDocumentStore) -> None:
        self.store = store
        self._index: Optional[TagIndex] = None

    @property
    def vault_name(self) -> str:
        return self.store.vault.name

    @property
    def is_indexed(self) -> bool:
        return self._index is not None

    @property
    def index(self) -> TagIndex:
        if self._index is None:
            return self.refresh()
        return self._index

    def refresh(self) -> TagIndex:
        """Rebuild the index from the vault's current contents.

        Raises:
            DocumentReadError: If any document cannot be read. The previous
                snapshot stays in place.
        """
        index = build_tag_index(self.store.iter_documents())
        self._index = index
        logger.info(
            "Indexed %d tag(s) across %d note(s) in vault '%s'",
            len(index.hits),
            len(index.notes),
            self.vault_name,
        )
        return index

    def status(self) -> dict[str, Any]:
        """Describe the current snapshot without building one."""
        if self._index is None:
            return {"indexed": False, "notes": None, "tags": None}
        return {"indexed": True, "notes": len(self._index.notes), "tags": len(self._index.hits)}

    def list_tags(self) -> list[Tag]:
        """Return every tag with at least one section, in first-seen order."""
        return self.index.tags

    def tag_counts(self) -> dict[Tag, int]:
        return {tag: len(hits) for tag, hits in self.index.hits.items()}

    def search_tags(self, query: str) -> list[Tag]:
        """Return tags containing ``query`` (case-insensitive), in index order."""
        needle = query.strip().lower()
        return [tag for tag in self.index.tags if needle in tag.lower()]

    def get_content(self, tag: str) -> list[TaggedContent]:
        """Return every section under ``tag`` across the vault.

        Raises:
            InvalidTagError: If ``tag`` is not a well-formed tag.
        """
        key = Tag(tag)
        return [
            TaggedContent(date=hit.date, file_path=hit.file_path, content=hit.section.content)
            for hit in self.index.hits_for(key)
        ]

    def delete_content(self, tag: str) -> DeleteResult:
        """Remove every section under ``tag`` from every document holding one.

        The index is rebuilt from disk first, so notes created or edited since
        the last refresh are included. A document whose write-back fails, or
        that changes on disk while the delete runs, is left alone and not
        reported. Documents already rewritten are not rolled back.

        Raises:
            InvalidTagError: If ``tag`` is not a well-formed tag.
            DocumentReadError: If the rebuild fails. Nothing is deleted and the
                previous index stays in place.
        """
        key = Tag(tag)
        index = self.refresh()
        result = DeleteResult()

        for file_path in index.files_with(key):
            original = index.sources[file_path]
            updated, removed = excise_tag(original, index.notes[file_path], key)
            if not removed:
                continue

            try:
                current = self.store.read(file_path)
            except DocumentReadError as exc:
                logger.warning("Skipping '%s' while deleting %s: %s", file_path, key, exc)
                continue
            if current != original:
                logger.warning(
                    "Skipping '%s' while deleting %s: note changed during the delete",
                    file_path,
                    key,
                )
                continue

            try:
                self.store.write(file_path, updated)
            except DocumentWriteError as exc:
                logger.warning("Failed to remove %s from '%s': %s", key, file_path, exc)
                continue

            result.files_modified.append(file_path)
            result.sections_deleted += removed

        if result.files_modified:
            try:
                self.refresh()
            except TagVaultError as exc:
                self._index = None
                logger.warning(
                    "Index rebuild after deleting %s failed in vault '%s': %s",
                    key,
                    self.vault_name,
                    exc,
                )

        logger.info(
            "Deleted %d section(s) tagged %s from %d note(s) in vault '%s'",
            result.sections_deleted,
            key,
            len(result.files_modified),
            self.vault_name,
        )
        return result


_TAG_SERVICES: Dict[str, TagService] = {}


def get_tag_service(vault: VaultMetadata) -> TagService:
    """Return the shared :class:`TagService` for ``vault``, creating it on first use."""
    service = _TAG_SERVICES.get(vault.name)
    if service is None or service.store.vault != vault:
        service = TagService(VaultDocumentStore(vault))
        _TAG_SERVICES[vault.name] = service
    return service


def peek_tag_service(vault: VaultMetadata) -> Optional[TagService]:
    """Return the cached service for ``vault`` without creating one."""
    service = _TAG_SERVICES.get(vault.name)
    if service is None or service.store.vault != vault:
        return None
    return service


def reset_tag_services() -> None:
    """Drop every cached service (and with it every index snapshot)."""
    _TAG_SERVICES.clear()


# ==============================================================================
# TAG OPERATIONS
# ==============================================================================


def list_vault_tags(vault: VaultMetadata, include_counts: bool = False) -> dict[str, Any]:
    """List the tags of a vault.

    Returns:
        ``{"vault": str, "tags": [str, ...]}``, or with ``include_counts`` each
        tag as ``{"tag": str, "count": int}``.
    """
    ensure_vault_ready(vault)
    service = get_tag_service(vault)
    if include_counts:
        tags: list[Any] = [
            {"tag": str(tag), "count": count} for tag, count in service.tag_counts().items()
        ]
    else:
        tags = [str(tag) for tag in service.list_tags()]
    return {"vault": vault.name, "tags": tags}


def search_vault_tags(vault: VaultMetadata, query: str) -> dict[str, Any]:
    """Filter a vault's tags by case-insensitive substring."""
    ensure_vault_ready(vault)
    trimmed = query.strip()
    if not trimmed:
        raise ValueError("Search query cannot be empty.")
    service = get_tag_service(vault)
    return {
        "vault": vault.name,
        "query": trimmed,
        "matches": [str(tag) for tag in service.search_tags(trimmed)],
    }


def get_tag_content(vault: VaultMetadata, tag: str) -> dict[str, Any]:
    """Aggregate every section under ``tag`` across the vault."""
    ensure_vault_ready(vault)
    entries = get_tag_service(vault).get_content(tag)
    return {
        "vault": vault.name,
        "tag": tag,
        "count": len(entries),
        "entries": [entry.as_payload() for entry in entries],
    }


def delete_tag_content(vault: VaultMetadata, tag: str) -> dict[str, Any]:
    """Delete every section under ``tag`` and report what changed."""
    ensure_vault_ready(vault)
    result = get_tag_service(vault).delete_content(tag)
    payload = {"vault": vault.name, "tag": tag}
    payload.update(result.as_payload())
    return payload


def refresh_vault_tags(vault: VaultMetadata) -> dict[str, Any]:
    """Rebuild the tag index of a vault from disk."""
    ensure_vault_ready(vault)
    index = get_tag_service(vault).refresh()
    return {
        "vault": vault.name,
        "notes": len(index.notes),
        "tags": len(index.hits),
        "status": "refreshed",
    }


def vault_index_status(vault: VaultMetadata, build: bool = False) -> dict[str, Any]:
    """Report the tag index state of ``vault``.

    With ``build`` the index is built first if it is not already; otherwise no
    document is read.

    Raises:
        FileNotFoundError: If ``build`` is set and the vault is not accessible.
        DocumentReadError: If ``build`` is set and a document cannot be read.
    """
    if build:
        ensure_vault_ready(vault)
        service = get_tag_service(vault)
        if not service.is_indexed:
            service.refresh()
    else:
        service = peek_tag_service(vault)
    if service is None:
        return {"indexed": False, "notes": None, "tags": None}
    return service.status()


def parse_tagged_note(vault: VaultMetadata, title: str) -> dict[str, Any]:
    """Parse a single note into its tagged sections.

    Raises:
        FileNotFoundError: If the note does not exist.
    """
    ensure_vault_ready(vault)
    store = get_tag_service(vault).store
    relative_path = construct_note_path(title).as_posix()
    try:
        content = store.read(relative_path)
    except DocumentReadError as exc:
        if isinstance(exc.__cause__, FileNotFoundError):
            raise FileNotFoundError(
                f"Note '{title}' not found in vault '{vault.name}'."
            ) from exc
        raise
    note = parse_tagged_sections(content, relative_path)
    payload = {"vault": vault.name}
    payload.update(note.as_payload())
    payload["tags"] = [str(tag) for tag in note.tags]
    return payload
