"""Pydantic input models for MCP tool validation.

Each model is the input schema of one or more tools, with field-level
validation and descriptive error messages.

Architecture:
- base: Base models (BaseVaultInput, BaseTagInput, BaseNoteInput)
- tag_models: Input models for tag listing, aggregation and deletion
- vault_models: Input models for vault management operations
"""

from .base import BaseVaultInput, BaseTagInput, BaseNoteInput
from .tag_models import (
    ListTagsInput,
    SearchTagsInput,
    GetTagContentInput,
    DeleteTagContentInput,
    RefreshTagsInput,
    ParseTaggedNoteInput,
)
from .vault_models import (
    ListVaultsInput,
    SetActiveVaultInput,
)

__all__ = [
    # Base models
    "BaseVaultInput",
    "BaseTagInput",
    "BaseNoteInput",
    # Tag models
    "ListTagsInput",
    "SearchTagsInput",
    "GetTagContentInput",
    "DeleteTagContentInput",
    "RefreshTagsInput",
    "ParseTaggedNoteInput",
    # Vault models
    "ListVaultsInput",
    "SetActiveVaultInput",
]
