"""MCP tools for choosing which vault the tag tools run against."""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import Context

from tag_vault.server import mcp
from tag_vault.models import ListVaultsInput, SetActiveVaultInput
from tag_vault.config import get_vault_configuration
from tag_vault.session import pin_vault, resolve_vault
from tag_vault.core.tag_operations import vault_index_status

logger = logging.getLogger(__name__)


@mcp.tool()
async def list_vaults(
    input: ListVaultsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """List configured vaults and the state of their tag indexes.

    Args:
        input (ListVaultsInput): Validated input containing:
            - include_index_status (bool): Attach per-vault index state
        ctx (Context, optional): FastMCP context for the session's pinned vault

    Returns:
        {
            "default": str,   # Configured default vault
            "active": str,    # Vault used when a tag tool omits `vault`
            "vaults": [{
                "name": str, "path": str, "description": str, "exists": bool,
                "index": {"indexed": bool, "notes": int | None, "tags": int | None}
            }]
        }

    Error Handling:
        - Config file missing → Error with expected config path
        - Invalid config format → Error describing expected YAML structure
    """
    configuration = get_vault_configuration()
    vaults = []
    for metadata in configuration.vaults.values():
        entry = metadata.as_payload()
        if input.include_index_status:
            entry["index"] = vault_index_status(metadata)
        vaults.append(entry)

    return {
        "default": configuration.default_vault,
        "active": resolve_vault(None, ctx).name,
        "vaults": vaults,
    }


@mcp.tool()
async def set_active_vault(
    input: SetActiveVaultInput,
    ctx: Context,
) -> dict[str, Any]:
    """Pin a vault for this session so tag tools can omit `vault`.

    With `build_index` the vault's tag index is built before pinning, so a
    vault that cannot be read is reported here and is not pinned.

    Args:
        input (SetActiveVaultInput): Validated input containing:
            - vault (str): Vault name from vaults.yaml
            - build_index (bool): Build the tag index now
        ctx (Context): FastMCP context for session state

    Returns:
        {"vault": str, "path": str, "status": "active",
         "index": {"indexed": bool, "notes": int | None, "tags": int | None}}

    Error Handling:
        - Unknown vault → Error, suggest list_vaults()
        - build_index on a missing vault directory → FileNotFoundError
        - build_index with an unreadable note → DocumentReadError
    """
    metadata = resolve_vault(input.vault)
    index = vault_index_status(metadata, build=input.build_index)
    pin_vault(ctx, metadata.name)
    if index["indexed"]:
        logger.info(
            "Vault '%s' active with %d tag(s) across %d note(s)",
            metadata.name,
            index["tags"],
            index["notes"],
        )
    return {
        "vault": metadata.name,
        "path": str(metadata.path),
        "status": "active",
        "index": index,
    }
