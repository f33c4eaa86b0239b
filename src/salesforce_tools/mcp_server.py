#!/usr/bin/env python3
"""
Salesforce Tools MCP Server

Exposes the Salesforce tools via Model Context Protocol using FastMCP.

Usage:
    # Run with HTTP transport (default)
    python -m salesforce_tools.mcp_server

    # Run with custom port
    python -m salesforce_tools.mcp_server --port 8001

    # Run with STDIO transport (for local testing)
    python -m salesforce_tools.mcp_server --stdio

Environment Variables:
    MCP_PORT                 - Server port (default: 4001)
    SALESFORCE_ACCESS_TOKEN  - OAuth2 access token (validated when a tool runs)
    SALESFORCE_INSTANCE_URL  - Instance URL, e.g. https://acme.my.salesforce.com
    SALESFORCE_ID_TOKEN      - Identity token, used when no instance URL is set

Note:
    Credentials are read per call (environment first, then .env), so a token
    can be rotated without restarting the server.
"""

from __future__ import annotations

import argparse
import os
import sys

from salesforce_tools.utils import get_logger

logger = get_logger(__name__)

from fastmcp import FastMCP  # noqa: E402
from starlette.requests import Request  # noqa: E402
from starlette.responses import PlainTextResponse  # noqa: E402

from salesforce_tools.credentials import CredentialError, CredentialManager  # noqa: E402
from salesforce_tools.tools import register_all_tools  # noqa: E402


def create_server(credentials: CredentialManager | None = None) -> tuple[FastMCP, list[str]]:
    """Build the FastMCP server and register every Salesforce tool on it."""
    credentials = credentials or CredentialManager()

    try:
        credentials.validate_startup()
    except CredentialError as e:
        logger.warning(str(e))

    # Tools still run when the token is passed per call
    if not credentials.is_available("salesforce_access_token"):
        logger.warning("SALESFORCE_ACCESS_TOKEN is not set; tools need an access_token argument")

    server = FastMCP("salesforce-tools")
    names = register_all_tools(server, credentials=credentials)
    if "--stdio" not in sys.argv:
        logger.info("Registered %d Salesforce tools", len(names))
    return server, names


mcp, tools = create_server()


@mcp.custom_route("/health", methods=["GET"])
async def health_check(request: Request) -> PlainTextResponse:
    """Health check endpoint for container orchestration."""
    return PlainTextResponse("OK")


@mcp.custom_route("/", methods=["GET"])
async def index(request: Request) -> PlainTextResponse:
    """Landing page for browser visits."""
    return PlainTextResponse("Welcome to the Salesforce Tools MCP Server")


def main() -> None:
    """Entry point for the MCP server."""
    parser = argparse.ArgumentParser(description="Salesforce Tools MCP Server")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("MCP_PORT", "4001")),
        help="HTTP server port (default: 4001)",
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="HTTP server host (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--stdio",
        action="store_true",
        help="Use STDIO transport instead of HTTP",
    )
    args = parser.parse_args()

    if args.stdio:
        mcp.run(transport="stdio")
    else:
        logger.info("Starting HTTP server on %s:%s", args.host, args.port)
        mcp.run(transport="http", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
