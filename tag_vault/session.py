"""Per-session vault pinning for the tag tools.

A session may pin one vault. Tools that omit ``vault`` use the pinned vault,
then the configured default. Pins are keyed by the identity of the MCP session
object and live for the lifetime of the process.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from mcp.server.fastmcp import Context

from tag_vault.config import get_vault_configuration
from tag_vault.data_models import VaultMetadata

logger = logging.getLogger(__name__)

_PINNED_VAULTS: Dict[int, str] = {}


def _session_key(ctx: Context) -> int:
    return id(ctx.session)


def pin_vault(ctx: Context, vault_name: str) -> VaultMetadata:
    """Pin ``vault_name`` for the session behind ``ctx``.

    Raises:
        ValueError: If ``vault_name`` is not configured.
    """
    metadata = get_vault_configuration().get(vault_name)
    _PINNED_VAULTS[_session_key(ctx)] = metadata.name
    logger.info("Session %s pinned vault '%s'", _session_key(ctx), metadata.name)
    return metadata


def pinned_vault_name(ctx: Optional[Context]) -> Optional[str]:
    """Return the vault pinned by this session, if any."""
    if ctx is None:
        return None
    return _PINNED_VAULTS.get(_session_key(ctx))


def clear_pinned_vaults() -> None:
    _PINNED_VAULTS.clear()


def resolve_vault(vault: Optional[str], ctx: Optional[Context] = None) -> VaultMetadata:
    """Pick the vault a tag operation runs against.

    An explicit ``vault`` wins, then the session's pinned vault, then the
    configured default.

    Raises:
        ValueError: If the chosen name is not configured.
    """
    configuration = get_vault_configuration()
    name = vault or pinned_vault_name(ctx) or configuration.default_vault
    return configuration.get(name)
