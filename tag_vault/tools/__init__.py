"""MCP tool definitions for tag vault operations.

This module imports all tool submodules to register them with the MCP server.
Each tool module uses the @mcp.tool() decorator to auto-register its tools.
"""

# Import all tool modules to register their @mcp.tool() decorated functions
from tag_vault.tools import vault_tools
from tag_vault.tools import tag_tools

__all__ = [
    "vault_tools",
    "tag_tools",
]
