"""Base Pydantic models for MCP tool input validation.

Base Models:
- BaseVaultInput: Optional vault selection shared by every vault-scoped tool
- BaseTagInput: Adds tag validation for tag lookups and deletions
- BaseNoteInput: Adds note identifier validation for single-note tools
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from tag_vault.core.tag_parser import is_valid_tag


class BaseVaultInput(BaseModel):
    """Base model for vault-scoped operations."""

    vault: Optional[str] = Field(
        None,
        description=(
            "Vault name (omit to use active vault). "
            "Use list_vaults() to discover available vaults."
        )
    )

    @field_validator('vault')
    @classmethod
    def validate_vault(cls, v: Optional[str]) -> Optional[str]:
        """Reject blank vault names; strip surrounding whitespace."""
        if v is not None and not v.strip():
            raise ValueError(
                "Vault name cannot be empty. "
                "Either omit the vault parameter to use the active vault, "
                "or provide a valid vault name from list_vaults()."
            )

        return v.strip() if v else None


class BaseTagInput(BaseVaultInput):
    """Base model for operations addressing one tag.

    The tag must be written exactly as it appears on its own line in a note,
    including the leading ``#``.
    """

    tag: str = Field(
        min_length=2,
        description=(
            "Tag including the leading '#'. Letters, digits and '-' only; "
            "case-sensitive. Examples: '#work', '#project-a'."
        ),
        examples=["#work", "#project-a", "#2024-goals"]
    )

    @field_validator('tag')
    @classmethod
    def validate_tag(cls, v: str) -> str:
        """Validate the tag against the tag-line pattern.

        Surrounding whitespace is stripped; anything else that does not match
        ``#[a-zA-Z0-9-]+`` is rejected.

        Raises:
            ValueError: If the tag is malformed.
        """
        cleaned = v.strip()

        if cleaned and not cleaned.startswith("#") and is_valid_tag(f"#{cleaned}"):
            raise ValueError(
                f"Tag '{cleaned}' is missing its leading '#'. Use '#{cleaned}'."
            )

        if not is_valid_tag(cleaned):
            raise ValueError(
                f"Invalid tag '{cleaned}'. Tags are '#' followed by letters, digits "
                "or '-' with no spaces (for example '#project-a')."
            )

        return cleaned


class BaseNoteInput(BaseVaultInput):
    """Base model for operations on a single note."""

    title: str = Field(
        min_length=1,
        description=(
            "Note identifier (path without .md extension). "
            "Examples: '2024-01-15', 'Journal/2024-01-15'. "
            "Forward slashes for folders, case-sensitive."
        ),
        examples=["2024-01-15", "Journal/2024-01-15", "Inbox"]
    )

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate note title for safety and format.

        Enforces:
        - Non-empty title
        - No path traversal attempts (.., .)
        - Relative path only (no absolute paths)
        - Strips .md extension if present (normalized internally)
        """
        cleaned = v.strip()

        if not cleaned:
            raise ValueError(
                "Note title cannot be empty. "
                "Provide a valid note identifier like 'Journal/2024-01-15'."
            )

        parts = cleaned.split("/")
        if any(part in {".", ".."} for part in parts):
            raise ValueError(
                "Note title cannot contain '.' or '..' path segments. "
                f"Invalid title: '{cleaned}'"
            )

        if cleaned.startswith("/"):
            raise ValueError(
                "Note title must be a relative path within the vault. "
                "Do not start with '/'. "
                f"Invalid title: '{cleaned}'"
            )

        if cleaned.lower().endswith(".md"):
            cleaned = cleaned[:-3]

        if not cleaned:
            raise ValueError(
                "Note title cannot be just '.md'. "
                "Provide a valid note name."
            )

        return cleaned
