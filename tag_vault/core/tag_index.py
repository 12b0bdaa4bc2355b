"""Vault-wide index from tag to the sections that carry it."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from tag_vault.core.tag_parser import parse_tagged_sections
from tag_vault.data_models import ParsedNote, Tag, TagHit

logger = logging.getLogger(__name__)


@dataclass
class TagIndex:
    """Snapshot of every tagged section in a vault.

    ``hits`` is insertion ordered: tags appear in the order they were first seen
    during the walk, and each tag's hits follow document order, then file order.
    ``notes`` and ``sources`` keep the parse result and the exact text each
    document was parsed from, keyed by document path.
    """

    hits: dict[Tag, list[TagHit]] = field(default_factory=dict)
    notes: dict[str, ParsedNote] = field(default_factory=dict)
    sources: dict[str, str] = field(default_factory=dict)

    @property
    def tags(self) -> list[Tag]:
        return list(self.hits)

    def hits_for(self, tag: Tag) -> list[TagHit]:
        return list(self.hits.get(tag, ()))

    def files_with(self, tag: Tag) -> list[str]:
        """Document paths holding at least one section under ``tag``, in index order."""
        return list(dict.fromkeys(hit.file_path for hit in self.hits.get(tag, ())))

    def __len__(self) -> int:
        return len(self.hits)


def build_tag_index(documents: Iterable[tuple[str, str]]) -> TagIndex:
    """Parse every ``(path, content)`` pair and merge the sections by tag.

    Any exception raised while iterating ``documents`` propagates; no partial
    index is returned.
    """
    index = TagIndex()
    for file_path, content in documents:
        note = parse_tagged_sections(content, file_path)
        index.notes[file_path] = note
        index.sources[file_path] = content
        for section in note.sections:
            index.hits.setdefault(section.tag, []).append(
                TagHit(file_path=file_path, section=section, date=note.date)
            )

    logger.debug(
        "Indexed %d tag(s) across %d document(s)", len(index.hits), len(index.notes)
    )
    return index
