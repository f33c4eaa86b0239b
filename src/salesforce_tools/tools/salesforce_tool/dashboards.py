"""
Salesforce Analytics dashboard tools.
"""

from __future__ import annotations

from typing import Any

import httpx

from .descriptor import (
    AUTH_PARAMS,
    Params,
    ParamSpec,
    ToolDescriptor,
    api_url,
    auth_headers,
    ensure_ok,
    ensure_ok_no_body,
    envelope,
    segment,
)

DASHBOARD_ID = ParamSpec("dashboardId", required=True, description="Dashboard ID (required)")


def _dashboards_url(instance_url: str, *parts: Any) -> str:
    path = "/".join(["analytics/dashboards", *(segment(p) for p in parts)])
    return api_url(instance_url, path)


def _clone_body(params: Params) -> dict[str, Any]:
    body = {"name": params.get("name"), "sourceId": params.get("dashboardId")}
    if params.get("folderId"):
        body["folderId"] = params["folderId"]
    return body


def _list_dashboards(response: httpx.Response, params: Params) -> dict[str, Any]:
    data = ensure_ok(response, "Failed to list dashboards")
    return envelope(
        {"dashboards": data, "metadata": {"operation": "list_dashboards"}, "success": True}
    )


def _get_dashboard(response: httpx.Response, params: Params) -> dict[str, Any]:
    data = ensure_ok(response, "Failed to get dashboard")
    return envelope(
        {
            "dashboardId": params["dashboardId"],
            "dashboard": data,
            "metadata": {"operation": "get_dashboard"},
            "success": True,
        }
    )


def _refresh_dashboard(response: httpx.Response, params: Params) -> dict[str, Any]:
    data = ensure_ok(response, "Failed to refresh dashboard")
    return envelope(
        {
            "dashboardId": params["dashboardId"],
            "dashboardData": data,
            "metadata": {"operation": "refresh_dashboard"},
            "success": True,
        }
    )


def _clone_dashboard(response: httpx.Response, params: Params) -> dict[str, Any]:
    data = ensure_ok(response, "Failed to clone dashboard")
    return envelope(
        {
            "sourceDashboardId": params["dashboardId"],
            "newDashboardId": data.get("id"),
            "name": params["name"],
            "dashboard": data,
            "metadata": {"operation": "clone_dashboard"},
            "success": True,
        }
    )


def _delete_dashboard(response: httpx.Response, params: Params) -> dict[str, Any]:
    ensure_ok_no_body(response, "Failed to delete dashboard")
    return envelope(
        {
            "dashboardId": params["dashboardId"],
            "deleted": True,
            "metadata": {"operation": "delete_dashboard"},
        }
    )


def _get_dashboard_component(response: httpx.Response, params: Params) -> dict[str, Any]:
    data = ensure_ok(response, "Failed to get dashboard component")
    return envelope(
        {
            "dashboardId": params["dashboardId"],
            "componentId": params["componentId"],
            "componentData": data,
            "metadata": {"operation": "get_dashboard_component"},
            "success": True,
        }
    )


DASHBOARD_TOOLS = [
    ToolDescriptor(
        id="salesforce_list_dashboards",
        name="List Dashboards from Salesforce",
        description="Get a list of all available dashboards in Salesforce",
        operation="list_dashboards",
        method="GET",
        url=lambda base, p: _dashboards_url(base),
        transform=_list_dashboards,
    ),
    ToolDescriptor(
        id="salesforce_get_dashboard",
        name="Get Dashboard from Salesforce",
        description="Get the metadata and structure of a specific dashboard",
        operation="get_dashboard",
        method="GET",
        params=(*AUTH_PARAMS, DASHBOARD_ID),
        url=lambda base, p: _dashboards_url(base, p["dashboardId"], "describe"),
        transform=_get_dashboard,
    ),
    ToolDescriptor(
        id="salesforce_refresh_dashboard",
        name="Refresh Dashboard in Salesforce",
        description="Refresh and get the latest data for a dashboard",
        operation="refresh_dashboard",
        method="GET",
        params=(*AUTH_PARAMS, DASHBOARD_ID),
        url=lambda base, p: _dashboards_url(base, p["dashboardId"]),
        transform=_refresh_dashboard,
    ),
    ToolDescriptor(
        id="salesforce_clone_dashboard",
        name="Clone Dashboard in Salesforce",
        description="Create a copy of an existing dashboard",
        operation="clone_dashboard",
        method="POST",
        params=(
            *AUTH_PARAMS,
            ParamSpec("dashboardId", required=True, description="Dashboard ID to clone (required)"),
            ParamSpec("name", required=True, description="Name for the new dashboard (required)"),
            ParamSpec("folderId", description="Folder ID for the cloned dashboard"),
        ),
        url=lambda base, p: _dashboards_url(base),
        body=_clone_body,
        transform=_clone_dashboard,
    ),
    ToolDescriptor(
        id="salesforce_delete_dashboard",
        name="Delete Dashboard from Salesforce",
        description="Delete a specific dashboard",
        operation="delete_dashboard",
        method="DELETE",
        params=(*AUTH_PARAMS, DASHBOARD_ID),
        url=lambda base, p: _dashboards_url(base, p["dashboardId"]),
        headers=auth_headers,
        transform=_delete_dashboard,
    ),
    ToolDescriptor(
        id="salesforce_get_dashboard_component",
        name="Get Dashboard Component from Salesforce",
        description="Get data for a specific component within a dashboard",
        operation="get_dashboard_component",
        method="GET",
        params=(
            *AUTH_PARAMS,
            DASHBOARD_ID,
            ParamSpec("componentId", required=True, description="Component ID (required)"),
        ),
        url=lambda base, p: _dashboards_url(
            base, p["dashboardId"], "components", p["componentId"]
        ),
        transform=_get_dashboard_component,
    ),
]
