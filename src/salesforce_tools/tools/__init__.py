"""
Salesforce Tools - Tool implementations for FastMCP.

Usage:
    from fastmcp import FastMCP
    from salesforce_tools.tools import register_all_tools
    from salesforce_tools.credentials import CredentialManager

    mcp = FastMCP("my-server")
    credentials = CredentialManager()
    register_all_tools(mcp, credentials=credentials)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastmcp import FastMCP

from .salesforce_tool import TOOLS
from .salesforce_tool import register_tools as register_salesforce

if TYPE_CHECKING:
    from salesforce_tools.credentials import CredentialManager


def register_all_tools(
    mcp: FastMCP,
    credentials: CredentialManager | None = None,
) -> list[str]:
    """
    Register all tools with a FastMCP server.

    Args:
        mcp: FastMCP server instance
        credentials: Optional CredentialManager for centralized credential access.
                     If not provided, tools fall back to direct os.getenv() calls.

    Returns:
        List of registered tool names
    """
    register_salesforce(mcp, credentials=credentials)

    return [
        *TOOLS,
        "salesforce_operation",
        "salesforce_list_operations",
    ]


__all__ = ["register_all_tools"]
