"""Pydantic input models for vault selection tools."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class ListVaultsInput(BaseModel):
    """Input model for list_vaults tool.

    Examples:
        >>> ListVaultsInput()
        >>> ListVaultsInput(include_index_status=False)
    """

    include_index_status: bool = Field(
        True,
        description=(
            "Report, per vault, whether its tag index is built and how many "
            "notes and tags it holds. Never triggers a build."
        ),
    )

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [{}, {"include_index_status": False}]
        }


class SetActiveVaultInput(BaseModel):
    """Input model for set_active_vault tool.

    Examples:
        >>> SetActiveVaultInput(vault="journal")
        >>> SetActiveVaultInput(vault="journal", build_index=True)
    """

    vault: str = Field(
        min_length=1,
        description="Vault name to pin for this session. Use list_vaults() to discover names.",
        examples=["journal", "work"]
    )
    build_index: bool = Field(
        False,
        description="Build the vault's tag index now instead of on the first tag lookup.",
    )

    @field_validator('vault')
    @classmethod
    def validate_vault(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError(
                "Vault name cannot be empty. Use list_vaults() to see available vaults."
            )
        return cleaned

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"vault": "journal"},
                {"vault": "work", "build_index": True}
            ]
        }
