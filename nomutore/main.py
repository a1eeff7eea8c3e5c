"""NomuTore MCP Server - Entry point.

Runs the MCP server over stdio for a local assistant client.
"""

import logging
import os

from .shell.mcp_server import mcp, get_store


logging.basicConfig(
    level=os.environ.get("NOMUTORE_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run the server."""
    logger.info("Starting NomuTore MCP server (data file: %s)", get_store().path)
    mcp.run()


if __name__ == "__main__":
    main()
