"""
Salesforce Analytics report tools.

API Reference: https://developer.salesforce.com/docs/atlas.en-us.api_analytics.meta/api_analytics/
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
    parse_json_param,
    segment,
)

REPORT_ID = ParamSpec("reportId", required=True, description="Report ID (required)")
INSTANCE_ID = ParamSpec("instanceId", required=True, description="Report instance ID (required)")
INCLUDE_DETAILS = ParamSpec(
    "includeDetails", description="Include detailed data (true/false, default: true)"
)


def _reports_url(instance_url: str, *parts: Any) -> str:
    path = "/".join(["analytics/reports", *(segment(p) for p in parts)])
    return api_url(instance_url, path)


def _include_details(params: Params) -> str:
    value = params.get("includeDetails")
    return "false" if value is False or value == "false" else "true"


def _report_metadata_body(params: Params) -> Any:
    parsed = parse_json_param(params, "reportMetadata")
    # Accept metadata that is already wrapped in {"reportMetadata": ...}
    if isinstance(parsed, dict) and parsed.get("reportMetadata"):
        return parsed
    return {"reportMetadata": parsed}


# --- Transformers ---


def _list_reports(response: httpx.Response, params: Params) -> dict[str, Any]:
    data = ensure_ok(response, "Failed to list reports")
    return envelope(
        {"reports": data, "metadata": {"operation": "list_reports"}, "success": True}
    )


def _get_report_metadata(response: httpx.Response, params: Params) -> dict[str, Any]:
    data = ensure_ok(response, "Failed to get report metadata")
    return envelope(
        {
            "reportId": params["reportId"],
            "metadata": data,
            "operation": "get_report_metadata",
            "success": True,
        }
    )


def _run_report(response: httpx.Response, params: Params) -> dict[str, Any]:
    data = ensure_ok(response, "Failed to run report")
    return envelope(
        {
            "reportId": params["reportId"],
            "reportData": data,
            "metadata": {"operation": "run_report"},
            "success": True,
        }
    )


def _run_report_async(response: httpx.Response, params: Params) -> dict[str, Any]:
    data = ensure_ok(response, "Failed to run report asynchronously")
    return envelope(
        {
            "reportId": params["reportId"],
            "instanceId": data.get("id"),
            "status": data.get("status"),
            "requestDate": data.get("requestDate"),
            "metadata": {"operation": "run_report_async"},
            "success": True,
        }
    )


def _get_report_instance(response: httpx.Response, params: Params) -> dict[str, Any]:
    data = ensure_ok(response, "Failed to get report instance")
    return envelope(
        {
            "reportId": params["reportId"],
            "instanceId": params["instanceId"],
            "reportData": data,
            "metadata": {"operation": "get_report_instance"},
            "success": True,
        }
    )


def _list_report_instances(response: httpx.Response, params: Params) -> dict[str, Any]:
    data = ensure_ok(response, "Failed to list report instances")
    return envelope(
        {
            "reportId": params["reportId"],
            "instances": data,
            "metadata": {"operation": "list_report_instances"},
            "success": True,
        }
    )


def _delete_report_instance(response: httpx.Response, params: Params) -> dict[str, Any]:
    ensure_ok_no_body(response, "Failed to delete report instance")
    return envelope(
        {
            "reportId": params["reportId"],
            "instanceId": params["instanceId"],
            "deleted": True,
            "metadata": {"operation": "delete_report_instance"},
        }
    )


def _run_report_with_filters(response: httpx.Response, params: Params) -> dict[str, Any]:
    data = ensure_ok(response, "Failed to run report with filters")
    return envelope(
        {
            "reportId": params["reportId"],
            "reportData": data,
            "metadata": {"operation": "run_report_with_filters"},
            "success": True,
        }
    )


def _create_report(response: httpx.Response, params: Params) -> dict[str, Any]:
    data = ensure_ok(response, "Failed to create report")
    return envelope(
        {
            "reportId": data.get("id"),
            "report": data,
            "created": True,
            "metadata": {"operation": "create_report"},
            "success": True,
        }
    )


def _update_report(response: httpx.Response, params: Params) -> dict[str, Any]:
    data = ensure_ok(response, "Failed to update report")
    return envelope(
        {
            "reportId": params["reportId"],
            "report": data,
            "updated": True,
            "metadata": {"operation": "update_report"},
            "success": True,
        }
    )


def _delete_report(response: httpx.Response, params: Params) -> dict[str, Any]:
    ensure_ok_no_body(response, "Failed to delete report")
    return envelope(
        {
            "reportId": params["reportId"],
            "deleted": True,
            "metadata": {"operation": "delete_report"},
        }
    )


# --- Descriptors ---

REPORT_TOOLS = [
    ToolDescriptor(
        id="salesforce_list_reports",
        name="List Reports from Salesforce",
        description="Get a list of all available reports in Salesforce",
        operation="list_reports",
        method="GET",
        url=lambda base, p: _reports_url(base),
        transform=_list_reports,
    ),
    ToolDescriptor(
        id="salesforce_get_report_metadata",
        name="Get Report Metadata from Salesforce",
        description="Get the metadata for a specific report",
        operation="get_report_metadata",
        method="GET",
        params=(*AUTH_PARAMS, REPORT_ID),
        url=lambda base, p: _reports_url(base, p["reportId"], "describe"),
        transform=_get_report_metadata,
    ),
    ToolDescriptor(
        id="salesforce_run_report",
        name="Run Report in Salesforce",
        description="Execute a report and get its results synchronously",
        operation="run_report",
        method="GET",
        params=(*AUTH_PARAMS, REPORT_ID, INCLUDE_DETAILS),
        url=lambda base, p: (
            f"{_reports_url(base, p['reportId'])}?includeDetails={_include_details(p)}"
        ),
        transform=_run_report,
    ),
    ToolDescriptor(
        id="salesforce_run_report_async",
        name="Run Report Asynchronously in Salesforce",
        description="Execute a report asynchronously for large data sets",
        operation="run_report_async",
        method="POST",
        params=(*AUTH_PARAMS, REPORT_ID, INCLUDE_DETAILS),
        url=lambda base, p: (
            f"{_reports_url(base, p['reportId'], 'instances')}"
            f"?includeDetails={_include_details(p)}"
        ),
        body=lambda p: {},
        transform=_run_report_async,
    ),
    ToolDescriptor(
        id="salesforce_get_report_instance",
        name="Get Report Instance from Salesforce",
        description="Get the results of a specific asynchronous report execution by instance ID",
        operation="get_report_instance",
        method="GET",
        params=(*AUTH_PARAMS, REPORT_ID, INSTANCE_ID),
        url=lambda base, p: _reports_url(base, p["reportId"], "instances", p["instanceId"]),
        transform=_get_report_instance,
    ),
    ToolDescriptor(
        id="salesforce_list_report_instances",
        name="List Report Instances from Salesforce",
        description="Get a list of all asynchronous execution instances for a specific report",
        operation="list_report_instances",
        method="GET",
        params=(*AUTH_PARAMS, REPORT_ID),
        url=lambda base, p: _reports_url(base, p["reportId"], "instances"),
        transform=_list_report_instances,
    ),
    ToolDescriptor(
        id="salesforce_delete_report_instance",
        name="Delete Report Instance from Salesforce",
        description="Delete a specific report instance",
        operation="delete_report_instance",
        method="DELETE",
        params=(*AUTH_PARAMS, REPORT_ID, INSTANCE_ID),
        url=lambda base, p: _reports_url(base, p["reportId"], "instances", p["instanceId"]),
        headers=auth_headers,
        transform=_delete_report_instance,
    ),
    ToolDescriptor(
        id="salesforce_run_report_with_filters",
        name="Run Report with Filters in Salesforce",
        description="Execute a report with custom filters and parameters",
        operation="run_report_with_filters",
        method="POST",
        params=(
            *AUTH_PARAMS,
            REPORT_ID,
            ParamSpec(
                "reportMetadata",
                required=True,
                description="JSON string containing report metadata with filters",
            ),
        ),
        url=lambda base, p: _reports_url(base, p["reportId"]),
        body=lambda p: parse_json_param(p, "reportMetadata"),
        transform=_run_report_with_filters,
    ),
    ToolDescriptor(
        id="salesforce_create_report",
        name="Create Report in Salesforce",
        description="Create a new report with custom metadata",
        operation="create_report",
        method="POST",
        params=(
            *AUTH_PARAMS,
            ParamSpec(
                "reportMetadata",
                required=True,
                description=(
                    "JSON string containing complete report metadata including name, "
                    "reportType, etc."
                ),
            ),
        ),
        url=lambda base, p: _reports_url(base),
        body=_report_metadata_body,
        transform=_create_report,
    ),
    ToolDescriptor(
        id="salesforce_update_report",
        name="Update Report in Salesforce",
        description="Update an existing report metadata",
        operation="update_report",
        method="PATCH",
        params=(
            *AUTH_PARAMS,
            REPORT_ID,
            ParamSpec(
                "reportMetadata",
                required=True,
                description="JSON string containing updated report metadata",
            ),
        ),
        url=lambda base, p: _reports_url(base, p["reportId"]),
        body=_report_metadata_body,
        transform=_update_report,
    ),
    ToolDescriptor(
        id="salesforce_delete_report",
        name="Delete Report from Salesforce",
        description="Delete a specific report permanently",
        operation="delete_report",
        method="DELETE",
        params=(*AUTH_PARAMS, REPORT_ID),
        url=lambda base, p: _reports_url(base, p["reportId"]),
        headers=auth_headers,
        transform=_delete_report,
    ),
]
