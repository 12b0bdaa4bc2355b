"""FastMCP server initialization and tool registration."""

import logging
from mcp.server.fastmcp import FastMCP

from tag_vault.constants import LOG_LEVEL

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("tag_vault")

# Tool modules are imported in __init__.py to register all @mcp.tool() decorators


def run_server():
    """Start the MCP server with stdio transport."""
    logging.basicConfig(level=LOG_LEVEL)
    logger.info("Starting Tag Vault MCP Server")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
