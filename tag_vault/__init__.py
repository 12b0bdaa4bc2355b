"""Tag Vault MCP Server

Tagged-section aggregation over plain-text note vaults via Model Context Protocol.
"""

from tag_vault.data_models import (
    DeleteResult,
    ParsedNote,
    Tag,
    TaggedContent,
    TaggedSection,
    VaultConfiguration,
    VaultMetadata,
)
from tag_vault.errors import (
    DocumentReadError,
    DocumentWriteError,
    InvalidTagError,
    TagVaultError,
)
from tag_vault.core.tag_parser import (
    extract_tags,
    is_separator,
    is_tag,
    is_valid_tag,
    parse_tagged_sections,
)
from tag_vault.core.tag_index import TagIndex, build_tag_index
from tag_vault.core.tag_operations import TagService, get_tag_service
from tag_vault.core.vault_operations import VaultDocumentStore
from tag_vault.config import get_vault_configuration, load_vault_configuration
from tag_vault.session import pin_vault, pinned_vault_name, resolve_vault
from tag_vault.server import mcp, run_server

# Import tools to register them with the MCP server
from tag_vault import tools  # noqa: F401

__version__ = "1.0.0"
__all__ = [
    "DeleteResult",
    "ParsedNote",
    "Tag",
    "TaggedContent",
    "TaggedSection",
    "VaultConfiguration",
    "VaultMetadata",
    "DocumentReadError",
    "DocumentWriteError",
    "InvalidTagError",
    "TagVaultError",
    "extract_tags",
    "is_separator",
    "is_tag",
    "is_valid_tag",
    "parse_tagged_sections",
    "TagIndex",
    "build_tag_index",
    "TagService",
    "get_tag_service",
    "VaultDocumentStore",
    "get_vault_configuration",
    "load_vault_configuration",
    "pin_vault",
    "pinned_vault_name",
    "resolve_vault",
    "mcp",
    "run_server",
]
