"""Tests for the Salesforce report tools."""

import json
from unittest.mock import patch

import pytest
from conftest import API_BASE, INSTANCE_URL, json_response

from salesforce_tools.errors import InvalidJsonError, RemoteApiError
from salesforce_tools.tools.salesforce_tool import execute_tool, get_tool

REQUEST = "salesforce_tools.tools.salesforce_tool.descriptor.httpx.request"
REPORTS = f"{API_BASE}/analytics/reports"


def run(tool_id, response, **params):
    bag = {"accessToken": "tok", "instanceUrl": INSTANCE_URL, **params}
    with patch(REQUEST, return_value=response) as mock_request:
        result = execute_tool(get_tool(tool_id), bag)
    return result, mock_request


class TestListAndMetadata:
    def test_list_reports(self):
        reports = [{"id": "00O1", "name": "Pipeline"}]
        result, mock_request = run("salesforce_list_reports", json_response(200, reports))

        assert mock_request.call_args.args == ("GET", REPORTS)
        assert result == {
            "success": True,
            "output": {
                "reports": reports,
                "metadata": {"operation": "list_reports"},
                "success": True,
            },
        }

    def test_list_reports_error_message(self):
        response = json_response(401, [{"message": "Session expired", "errorCode": "X"}])
        with pytest.raises(RemoteApiError, match="Session expired"):
            run("salesforce_list_reports", response)

    def test_list_reports_fallback_message(self):
        with pytest.raises(RemoteApiError, match="^Failed to list reports$"):
            run("salesforce_list_reports", json_response(500, {}))

    def test_get_report_metadata(self):
        data = {"reportMetadata": {"name": "Pipeline"}}
        result, mock_request = run(
            "salesforce_get_report_metadata", json_response(200, data), reportId="00O1"
        )

        assert mock_request.call_args.args[1] == f"{REPORTS}/00O1/describe"
        output = result["output"]
        assert output["reportId"] == "00O1"
        assert output["metadata"] == data
        assert output["operation"] == "get_report_metadata"


class TestRunReport:
    @pytest.mark.parametrize(
        "include,expected",
        [(None, "true"), ("true", "true"), ("false", "false"), (False, "false"), ("no", "true")],
    )
    def test_include_details(self, include, expected):
        params = {"reportId": "00O1"}
        if include is not None:
            params["includeDetails"] = include
        result, mock_request = run("salesforce_run_report", json_response(200, {"f": 1}), **params)

        assert mock_request.call_args.args[1] == f"{REPORTS}/00O1?includeDetails={expected}"
        assert result["output"]["reportData"] == {"f": 1}

    def test_run_report_async(self):
        data = {"id": "0LG1", "status": "New", "requestDate": "2024-01-01T00:00:00Z"}
        result, mock_request = run(
            "salesforce_run_report_async", json_response(200, data), reportId="00O1"
        )

        args, kwargs = mock_request.call_args
        assert args == ("POST", f"{REPORTS}/00O1/instances?includeDetails=true")
        assert kwargs["json"] == {}
        assert result["output"] == {
            "reportId": "00O1",
            "instanceId": "0LG1",
            "status": "New",
            "requestDate": "2024-01-01T00:00:00Z",
            "metadata": {"operation": "run_report_async"},
            "success": True,
        }

    def test_run_report_with_filters_sends_parsed_metadata(self):
        metadata = {"reportMetadata": {"reportFilters": [{"column": "STAGE_NAME"}]}}
        result, mock_request = run(
            "salesforce_run_report_with_filters",
            json_response(200, {"factMap": {}}),
            reportId="00O1",
            reportMetadata=json.dumps(metadata),
        )

        args, kwargs = mock_request.call_args
        assert args == ("POST", f"{REPORTS}/00O1")
        assert kwargs["json"] == metadata
        assert result["output"]["reportData"] == {"factMap": {}}

    def test_run_report_with_filters_invalid_json(self):
        with patch(REQUEST) as mock_request:
            with pytest.raises(InvalidJsonError, match="reportMetadata"):
                execute_tool(
                    get_tool("salesforce_run_report_with_filters"),
                    {
                        "accessToken": "tok",
                        "instanceUrl": INSTANCE_URL,
                        "reportId": "00O1",
                        "reportMetadata": "{broken",
                    },
                )
        mock_request.assert_not_called()


class TestReportInstances:
    def test_get_report_instance(self):
        result, mock_request = run(
            "salesforce_get_report_instance",
            json_response(200, {"attributes": {"status": "Success"}}),
            reportId="00O1",
            instanceId="0LG1",
        )

        assert mock_request.call_args.args[1] == f"{REPORTS}/00O1/instances/0LG1"
        assert result["output"]["instanceId"] == "0LG1"
        assert result["output"]["reportData"] == {"attributes": {"status": "Success"}}

    def test_list_report_instances(self):
        result, _ = run(
            "salesforce_list_report_instances", json_response(200, [{"id": "0LG1"}]), reportId="1"
        )
        assert result["output"]["instances"] == [{"id": "0LG1"}]

    def test_delete_report_instance(self):
        result, mock_request = run(
            "salesforce_delete_report_instance",
            json_response(204),
            reportId="00O1",
            instanceId="0LG1",
        )

        args, kwargs = mock_request.call_args
        assert args == ("DELETE", f"{REPORTS}/00O1/instances/0LG1")
        assert kwargs["headers"] == {"Authorization": "Bearer tok"}
        assert result["output"] == {
            "reportId": "00O1",
            "instanceId": "0LG1",
            "deleted": True,
            "metadata": {"operation": "delete_report_instance"},
        }


class TestReportCrud:
    @pytest.mark.parametrize(
        "metadata",
        ['{"name": "New", "reportType": {"type": "Opportunity"}}', {"name": "New"}],
    )
    def test_create_report_wraps_metadata(self, metadata):
        result, mock_request = run(
            "salesforce_create_report",
            json_response(200, {"id": "00O9"}),
            reportMetadata=metadata,
        )

        args, kwargs = mock_request.call_args
        assert args == ("POST", REPORTS)
        assert list(kwargs["json"]) == ["reportMetadata"]
        assert kwargs["json"]["reportMetadata"]["name"] == "New"
        assert result["output"]["reportId"] == "00O9"
        assert result["output"]["created"] is True

    def test_create_report_keeps_wrapped_metadata(self):
        wrapped = {"reportMetadata": {"name": "New"}}
        _, mock_request = run(
            "salesforce_create_report",
            json_response(200, {"id": "00O9"}),
            reportMetadata=json.dumps(wrapped),
        )
        assert mock_request.call_args.kwargs["json"] == wrapped

    def test_update_report(self):
        result, mock_request = run(
            "salesforce_update_report",
            json_response(200, {"reportMetadata": {"name": "Renamed"}}),
            reportId="00O1",
            reportMetadata='{"name": "Renamed"}',
        )

        args, kwargs = mock_request.call_args
        assert args == ("PATCH", f"{REPORTS}/00O1")
        assert kwargs["json"] == {"reportMetadata": {"name": "Renamed"}}
        assert result["output"]["updated"] is True

    def test_delete_report(self):
        result, mock_request = run("salesforce_delete_report", json_response(204), reportId="00O1")

        assert mock_request.call_args.args == ("DELETE", f"{REPORTS}/00O1")
        assert result["output"]["deleted"] is True
        assert "success" not in result["output"]

    def test_report_id_is_quoted(self):
        _, mock_request = run(
            "salesforce_get_report_metadata", json_response(200, {}), reportId="a/b c"
        )
        assert mock_request.call_args.args[1] == f"{REPORTS}/a%2Fb%20c/describe"
