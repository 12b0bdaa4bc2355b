"""Tag aggregation MCP tools.

This module provides MCP tool wrappers for tag operations:
- list_vault_tags: Every tag that owns at least one section
- search_vault_tags: Tags filtered by substring
- get_tag_content: All sections under a tag, across notes
- delete_tag_content: Remove all sections under a tag
- refresh_vault_tags: Rebuild the tag index from disk
- parse_tagged_note: Tagged sections of a single note

All tools delegate to core operations in tag_vault.core.tag_operations.
"""
from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import Context

from tag_vault.server import mcp
from tag_vault.session import resolve_vault
from tag_vault.models import (
    ListTagsInput,
    SearchTagsInput,
    GetTagContentInput,
    DeleteTagContentInput,
    RefreshTagsInput,
    ParseTaggedNoteInput,
)
from tag_vault.core.tag_operations import (
    list_vault_tags as list_vault_tags_core,
    search_vault_tags as search_vault_tags_core,
    get_tag_content as get_tag_content_core,
    delete_tag_content as delete_tag_content_core,
    refresh_vault_tags as refresh_vault_tags_core,
    parse_tagged_note as parse_tagged_note_core,
)

logger = logging.getLogger(__name__)


# ==============================================================================
# TAG DISCOVERY
# ==============================================================================


@mcp.tool()
async def list_vault_tags(
    input: ListTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """List every tag that labels at least one section in the vault.

    A tag counts only when a line holding nothing but the tag is followed by
    some content. Order is the order tags are first met walking notes by path.

    Args:
        input (ListTagsInput): Validated input containing:
            - vault (str, optional): Vault name (omit to use active vault)
            - include_counts (bool): Include the number of sections per tag

    Returns (without counts):
        {"vault": str, "tags": [str, ...]}

    Returns (with counts):
        {"vault": str, "tags": [{"tag": str, "count": int}, ...]}
    """
    metadata = resolve_vault(input.vault, ctx)
    return list_vault_tags_core(metadata, include_counts=input.include_counts)


@mcp.tool()
async def search_vault_tags(
    input: SearchTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Find tags whose text contains the query (case-insensitive).

    Returns:
        {"vault": str, "query": str, "matches": [str, ...]}
    """
    metadata = resolve_vault(input.vault, ctx)
    return search_vault_tags_core(metadata, input.query)


@mcp.tool()
async def get_tag_content(
    input: GetTagContentInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Collect every section written under a tag, across all notes.

    Entries are ordered by note path, then by position within the note.
    ``date`` is set only for daily notes named ``YYYY-MM-DD.md``.

    Args:
        input (GetTagContentInput): Validated input containing:
            - tag (str): Tag including '#', e.g. "#work"
            - vault (str, optional): Vault name (omit to use active vault)

    Returns:
        {
            "vault": str,
            "tag": str,
            "count": int,
            "entries": [{"date": str | None, "file_path": str, "content": str}, ...]
        }

    Error Handling:
        - ValidationError: Malformed tag
        - Unused tag → empty entries list, not an error
    """
    metadata = resolve_vault(input.vault, ctx)
    return get_tag_content_core(metadata, input.tag)


# ==============================================================================
# TAG MUTATION
# ==============================================================================


@mcp.tool()
async def delete_tag_content(
    input: DeleteTagContentInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Delete every section under a tag from every note. DESTRUCTIVE.

    Removes the tag line and its body. All other lines are left as they are.
    Notes that could not be rewritten are skipped and left untouched.

    Returns:
        {"vault": str, "tag": str, "files_modified": [str, ...], "sections_deleted": int}

    Error Handling:
        - ValidationError: Malformed tag
        - Write failure on a note → note omitted from files_modified
    """
    metadata = resolve_vault(input.vault, ctx)
    result = delete_tag_content_core(metadata, input.tag)
    logger.info(
        "delete_tag_content removed %s from %d note(s) in vault '%s'",
        input.tag,
        len(result["files_modified"]),
        metadata.name,
    )
    return result


@mcp.tool()
async def refresh_vault_tags(
    input: RefreshTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Rebuild the tag index after notes were edited outside this server.

    Returns:
        {"vault": str, "notes": int, "tags": int, "status": "refreshed"}

    Error Handling:
        - Unreadable note → Error naming the note; previous index kept
    """
    metadata = resolve_vault(input.vault, ctx)
    return refresh_vault_tags_core(metadata)


@mcp.tool()
async def parse_tagged_note(
    input: ParseTaggedNoteInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Split one note into its tagged sections.

    Returns:
        {
            "vault": str,
            "file_path": str,
            "date": str | None,
            "tags": [str, ...],
            "sections": [{"tag": str, "content": str, "start_line": int, "end_line": int}]
        }

    Error Handling:
        - Note not found → Error with note path
    """
    metadata = resolve_vault(input.vault, ctx)
    return parse_tagged_note_core(metadata, input.title)
