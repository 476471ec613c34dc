"""FastMCP server exposing the duck discovery tools."""

import logging
import os

from fastmcp import FastMCP

from kubectl_duck_hunter.tools import register_duck_tools

logger = logging.getLogger("mcp-server")


def create_server(name: str = "kubectl-duck-hunter", non_destructive: bool = True) -> FastMCP:
    server = FastMCP(name=name)
    register_duck_tools(server, non_destructive)
    return server


def main():
    logging.basicConfig(
        level=os.environ.get("MCP_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    logger.info("Starting kubectl-duck-hunter MCP server")
    create_server().run()


if __name__ == "__main__":
    main()
