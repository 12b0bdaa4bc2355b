"""Tag-line parsing for plain-text notes.

A note is split into sections by tag lines and separator lines::

    #project-a
    Content for project A...
    ---
    #errands
    Buy milk.

Only a line that is a tag on its own (after trimming) opens a section; tags
embedded in prose are ordinary text.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Optional

from tag_vault.constants import (
    BYTE_ORDER_MARK,
    DAILY_NOTE_PATTERN,
    SEPARATOR_PATTERN,
    TAG_PATTERN,
)
from tag_vault.data_models import ParsedNote, Tag, TaggedSection

logger = logging.getLogger(__name__)


# ==============================================================================
# PREDICATES
# ==============================================================================


def trim_line(line: str) -> str:
    """Trim a line for classification, including a leading byte order mark."""
    return line.strip().lstrip(BYTE_ORDER_MARK).strip()


def is_valid_tag(tag: str) -> bool:
    """Return ``True`` when ``tag`` is exactly a well-formed tag (no trimming)."""
    return isinstance(tag, str) and TAG_PATTERN.fullmatch(tag) is not None


def is_tag(line: str) -> bool:
    """Return ``True`` when ``line``, trimmed, is a tag line."""
    return is_valid_tag(trim_line(line))


def is_separator(line: str) -> bool:
    """Return ``True`` when ``line``, trimmed, is a ``---`` separator."""
    return SEPARATOR_PATTERN.fullmatch(trim_line(line)) is not None


def note_date(file_path: str) -> Optional[str]:
    """Return ``YYYY-MM-DD`` when the file's base name is a daily note name.

    The match is syntactic only; ``2024-13-45.md`` still yields a date string.
    """
    name = PurePosixPath(file_path.replace("\\", "/")).name
    match = DAILY_NOTE_PATTERN.fullmatch(name)
    return match.group(1) if match else None


# ==============================================================================
# PARSING
# ==============================================================================


def extract_tags(content: str) -> list[Tag]:
    """Return the distinct tag lines of ``content`` in first-seen order.

    Unlike :func:`parse_tagged_sections` this counts every tag line, including
    ones that never accumulate any content.
    """
    tags: dict[Tag, None] = {}
    for line in content.split("\n"):
        trimmed = trim_line(line)
        if is_valid_tag(trimmed):
            tags.setdefault(Tag(trimmed), None)
    return list(tags)


def _close_section(
    tag: Optional[Tag],
    body: list[str],
    start_line: int,
    end_line: int,
) -> Optional[TaggedSection]:
    if tag is None or not body:
        return None
    content = "\n".join(body).strip()
    if not content:
        return None
    return TaggedSection(tag=tag, content=content, start_line=start_line, end_line=end_line)


def parse_tagged_sections(content: str, file_path: str) -> ParsedNote:
    """Partition ``content`` into tagged sections.

    Args:
        content: Full document text.
        file_path: Vault-relative path of the document; used for the daily-note date.

    Returns:
        A :class:`ParsedNote` whose sections appear in file order. Tag lines with
        no (non-blank) body before the next tag, separator or end of file do not
        produce a section.
    """
    lines = content.split("\n")
    sections: list[TaggedSection] = []
    current_tag: Optional[Tag] = None
    body: list[str] = []
    start_line = 0

    for index, line in enumerate(lines):
        trimmed = trim_line(line)

        if is_valid_tag(trimmed):
            section = _close_section(current_tag, body, start_line, index - 1)
            if section is not None:
                sections.append(section)
            current_tag = Tag(trimmed)
            body = []
            start_line = index + 1
            continue

        if SEPARATOR_PATTERN.fullmatch(trimmed):
            section = _close_section(current_tag, body, start_line, index - 1)
            if section is not None:
                sections.append(section)
            current_tag = None
            body = []
            continue

        if current_tag is not None:
            body.append(line)

    section = _close_section(current_tag, body, start_line, len(lines) - 1)
    if section is not None:
        sections.append(section)

    logger.debug("Parsed %d tagged section(s) from '%s'", len(sections), file_path)
    return ParsedNote(file_path=file_path, date=note_date(file_path), sections=tuple(sections))
