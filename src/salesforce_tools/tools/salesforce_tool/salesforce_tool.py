"""
Salesforce Tool - Accounts, contacts, leads, opportunities, cases, tasks,
reports and dashboards via the Salesforce REST and Analytics APIs.

Supports:
- OAuth2 Access Tokens (SALESFORCE_ACCESS_TOKEN)
- Instance URL (SALESFORCE_INSTANCE_URL), or an OpenID Connect identity
  token (SALESFORCE_ID_TOKEN) from which the instance URL is derived

Every descriptor in the registry becomes one MCP tool. ``salesforce_operation``
runs any of them by operation tag, the way the Salesforce block does.

API Reference: https://developer.salesforce.com/docs/atlas.en-us.api_rest.meta/api_rest/
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import httpx
from fastmcp import FastMCP

from salesforce_tools.errors import RemoteApiError, SalesforceToolError
from salesforce_tools.utils.logging import get_logger

from .descriptor import ToolDescriptor, execute_tool
from .registry import TOOLS, get_tool

if TYPE_CHECKING:
    from salesforce_tools.credentials import CredentialManager

logger = get_logger(__name__)

# credential name -> (parameter name in the bag, environment variable)
_AUTH_SOURCES = {
    "salesforce_access_token": ("accessToken", "SALESFORCE_ACCESS_TOKEN"),
    "salesforce_id_token": ("idToken", "SALESFORCE_ID_TOKEN"),
    "salesforce_instance_url": ("instanceUrl", "SALESFORCE_INSTANCE_URL"),
}

# Sub-blocks that are inputs of the block itself rather than operation fields
_BLOCK_INPUTS = ("operation", "credential")


def _tool_doc(descriptor: ToolDescriptor) -> str:
    lines = [f"{descriptor.description}.", "", "Args:"]
    lines.append("    params: Operation parameters:")
    for spec in descriptor.user_params:
        required = " (required)" if spec.required and "(required)" not in spec.description else ""
        lines.append(f"        {spec.name}: {spec.description or spec.name}{required}")
    lines.append("    access_token: Optional access token override")
    lines.append("    id_token: Optional identity token override")
    lines.append("    instance_url: Optional instance URL override")
    return "\n".join(lines)


def register_tools(mcp: FastMCP, credentials: CredentialManager | None = None) -> None:
    """Register Salesforce tools with the MCP server."""
    # Imported here: the block module itself imports the tool registry
    from salesforce_tools.blocks.salesforce_block import (
        OPERATION_LABELS,
        resolve_tool,
        run_operation,
        visible_fields,
    )

    def _resolve(name: str, *candidates: str | None) -> str | None:
        if credentials is not None:
            return credentials.resolve(name, *candidates)
        return next((v for v in candidates if v), None) or os.getenv(_AUTH_SOURCES[name][1])

    def _with_auth(
        params: dict[str, Any],
        access_token: str | None,
        id_token: str | None,
        instance_url: str | None,
    ) -> dict[str, Any]:
        """
        Fill accessToken, idToken and instanceUrl into the bag.

        Order: explicit argument, value already in the bag, the host-supplied
        ``credential`` (access token only), then the credential manager or env.
        A per-call identity token without a per-call instance URL is never
        paired with the configured instance URL: the org comes from the token.
        """
        bag = dict(params)
        credential = bag.pop("credential", None)
        candidates = {
            "accessToken": (access_token, bag.get("accessToken"), credential),
            "idToken": (id_token, bag.get("idToken")),
            "instanceUrl": (instance_url, bag.get("instanceUrl")),
        }
        token_only = any(candidates["idToken"]) and not any(candidates["instanceUrl"])
        for cred_name, (key, _) in _AUTH_SOURCES.items():
            if key == "instanceUrl" and token_only:
                continue
            value = _resolve(cred_name, *candidates[key])
            if value:
                bag[key] = value
        return bag

    def _run(
        tool_id: str,
        params: dict[str, Any] | None,
        access_token: str | None = None,
        id_token: str | None = None,
        instance_url: str | None = None,
    ) -> dict[str, Any]:
        bag = _with_auth(params or {}, access_token, id_token, instance_url)
        if not bag.get("accessToken"):
            return {
                "error": "Salesforce credentials not configured",
                "help": (
                    "Set SALESFORCE_ACCESS_TOKEN and either SALESFORCE_INSTANCE_URL "
                    "or SALESFORCE_ID_TOKEN"
                ),
            }
        try:
            return execute_tool(get_tool(tool_id), bag, log=logger)
        except RemoteApiError as e:
            result: dict[str, Any] = {"error": str(e)}
            if e.status_code is not None:
                result["status_code"] = e.status_code
            return result
        except SalesforceToolError as e:
            return {"error": str(e)}
        except httpx.TimeoutException:
            return {"error": "Request timed out"}
        except httpx.RequestError as e:
            return {"error": f"Network error: {e}"}

    def _make_tool(descriptor: ToolDescriptor):
        def tool(
            params: dict[str, Any] | None = None,
            access_token: str | None = None,
            id_token: str | None = None,
            instance_url: str | None = None,
        ) -> dict:
            return _run(descriptor.id, params, access_token, id_token, instance_url)

        tool.__name__ = descriptor.id
        tool.__doc__ = _tool_doc(descriptor)
        return tool

    for descriptor in TOOLS.values():
        mcp.tool()(_make_tool(descriptor))

    @mcp.tool()
    def salesforce_operation(
        operation: str,
        params: dict[str, Any] | None = None,
        credential: str | None = None,
        access_token: str | None = None,
        id_token: str | None = None,
        instance_url: str | None = None,
    ) -> dict:
        """
        Run any Salesforce operation by its tag.

        Args:
            operation: Operation tag (e.g., "get_accounts", "run_report", "clone_dashboard").
                       Use salesforce_list_operations to see all tags and their fields.
            params: Field values for the operation (e.g., {"accountId": "001..."})
            credential: Access token supplied by the host for the selected account
            access_token: Optional access token override
            id_token: Optional identity token override
            instance_url: Optional instance URL override

        Returns:
            Dict with success and output, or error
        """
        bag = {**(params or {}), "operation": operation}
        if credential is not None:
            bag["credential"] = credential
        try:
            return run_operation(
                bag,
                lambda tool_id, clean: _run(tool_id, clean, access_token, id_token, instance_url),
            )
        except SalesforceToolError as e:
            return {"error": str(e)}

    @mcp.tool()
    def salesforce_list_operations() -> dict:
        """
        List every Salesforce operation with its tool and the fields it uses.

        Returns:
            Dict with an "operations" list of {operation, label, tool, fields}
        """
        return {
            "operations": [
                {
                    "operation": op.value,
                    "label": label,
                    "tool": resolve_tool(op),
                    "fields": [f for f in visible_fields(op) if f not in _BLOCK_INPUTS],
                }
                for op, label in OPERATION_LABELS.items()
            ]
        }
