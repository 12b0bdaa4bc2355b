"""Pydantic input models for tag operations.

This module defines input models for tag tools:
- List the tags of a vault
- Search tags by substring
- Aggregate content for one tag
- Delete all content for one tag
- Rebuild the tag index
- Parse a single note into tagged sections
"""

from __future__ import annotations

from pydantic import Field, field_validator

from .base import BaseNoteInput, BaseTagInput, BaseVaultInput


class ListTagsInput(BaseVaultInput):
    """Input model for list_vault_tags tool.

    Examples:
        >>> ListTagsInput()
        >>> ListTagsInput(vault="journal", include_counts=True)
    """

    include_counts: bool = Field(
        False,
        description="If True, return each tag with the number of sections it owns."
    )

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"vault": None, "include_counts": False},
                {"vault": "journal", "include_counts": True}
            ]
        }


class SearchTagsInput(BaseVaultInput):
    """Input model for search_vault_tags tool.

    Examples:
        >>> SearchTagsInput(query="proj")
    """

    query: str = Field(
        min_length=1,
        description=(
            "Case-insensitive substring matched against tag text, "
            "e.g. 'proj' matches '#project-a'."
        )
    )

    @field_validator('query')
    @classmethod
    def validate_query(cls, v: str) -> str:
        """Reject whitespace-only queries."""
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("Search query cannot be empty or only whitespace.")
        return cleaned


class GetTagContentInput(BaseTagInput):
    """Input model for get_tag_content tool.

    Examples:
        >>> GetTagContentInput(tag="#work")
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"tag": "#work", "vault": None},
                {"tag": "#project-a", "vault": "journal"}
            ]
        }


class DeleteTagContentInput(BaseTagInput):
    """Input model for delete_tag_content tool.

    Removes every section under the tag, and its tag line, from every note.

    Examples:
        >>> DeleteTagContentInput(tag="#scratch")
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"tag": "#scratch", "vault": None}
            ]
        }


class RefreshTagsInput(BaseVaultInput):
    """Input model for refresh_vault_tags tool."""


class ParseTaggedNoteInput(BaseNoteInput):
    """Input model for parse_tagged_note tool.

    Examples:
        >>> ParseTaggedNoteInput(title="Journal/2024-01-15")
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"title": "2024-01-15", "vault": None},
                {"title": "Journal/2024-01-15.md", "vault": "journal"}
            ]
        }
