"""Tests for descriptor execution and the shared response helpers."""

from unittest.mock import patch

import httpx
import pytest
from conftest import API_BASE, INSTANCE_URL, json_response, make_id_token

from salesforce_tools.errors import (
    ConfigurationError,
    InvalidJsonError,
    MissingParameterError,
    RemoteApiError,
)
from salesforce_tools.tools.salesforce_tool import execute_tool, get_tool
from salesforce_tools.tools.salesforce_tool.descriptor import (
    ensure_ok,
    error_message,
    parse_json_param,
)

REQUEST = "salesforce_tools.tools.salesforce_tool.descriptor.httpx.request"


class TestErrorMessage:
    def test_array_message_first(self):
        data = [{"message": "Array message", "errorCode": "INVALID_FIELD"}]
        assert error_message(data, "fallback") == "Array message"

    def test_object_message(self):
        assert error_message({"message": "Object message"}, "fallback") == "Object message"

    @pytest.mark.parametrize("data", [{}, [], [{}], [{"message": ""}], "text", None, [1, 2]])
    def test_fallback(self, data):
        assert error_message(data, "Failed to list reports") == "Failed to list reports"


class TestEnsureOk:
    def test_error_body_message(self):
        response = json_response(400, [{"message": "Bad field", "errorCode": "INVALID_FIELD"}])
        with pytest.raises(RemoteApiError) as exc:
            ensure_ok(response, "Failed to run report")
        assert str(exc.value) == "Bad field"
        assert exc.value.status_code == 400

    def test_unparseable_error_body_uses_fallback(self):
        response = httpx.Response(
            502, text="<html>Bad gateway</html>", request=httpx.Request("GET", INSTANCE_URL)
        )
        with pytest.raises(RemoteApiError, match="^Failed to list dashboards$"):
            ensure_ok(response, "Failed to list dashboards")

    def test_unparseable_success_body(self):
        response = httpx.Response(200, text="oops", request=httpx.Request("GET", INSTANCE_URL))
        with pytest.raises(RemoteApiError, match="not valid JSON"):
            ensure_ok(response, "Failed to list reports")


class TestParseJsonParam:
    def test_parses_string(self):
        assert parse_json_param({"m": '{"a": 1}'}, "m") == {"a": 1}

    def test_passes_structured_value_through(self):
        assert parse_json_param({"m": {"a": 1}}, "m") == {"a": 1}

    @pytest.mark.parametrize("value", ["{not json", None, 42])
    def test_invalid(self, value):
        with pytest.raises(InvalidJsonError, match="Invalid JSON in m parameter"):
            parse_json_param({"m": value}, "m")


class TestExecuteTool:
    def test_missing_required_params(self):
        tool = get_tool("salesforce_get_report_metadata")
        with pytest.raises(MissingParameterError) as exc:
            execute_tool(tool, {"accessToken": "tok", "instanceUrl": INSTANCE_URL})
        assert exc.value.missing == ["reportId"]
        assert "reportId" in str(exc.value)

    def test_empty_string_counts_as_missing(self):
        tool = get_tool("salesforce_list_reports")
        with pytest.raises(MissingParameterError):
            execute_tool(tool, {"accessToken": "", "instanceUrl": INSTANCE_URL})

    def test_no_instance_url(self):
        tool = get_tool("salesforce_list_reports")
        with patch(REQUEST) as mock_request:
            with pytest.raises(ConfigurationError):
                execute_tool(tool, {"accessToken": "tok"})
        mock_request.assert_not_called()

    def test_instance_url_from_id_token(self):
        tool = get_tool("salesforce_list_reports")
        token = make_id_token({"profile": f"{INSTANCE_URL}/005xx"})
        with patch(REQUEST, return_value=json_response(200, [])) as mock_request:
            execute_tool(tool, {"accessToken": "tok", "idToken": token})

        args, kwargs = mock_request.call_args
        assert args == ("GET", f"{API_BASE}/analytics/reports")
        assert kwargs["headers"] == {
            "Authorization": "Bearer tok",
            "Content-Type": "application/json",
        }
        assert kwargs["timeout"] == 30.0
        assert "json" not in kwargs

    def test_trailing_slash_on_instance_url(self):
        tool = get_tool("salesforce_list_dashboards")
        with patch(REQUEST, return_value=json_response(200, [])) as mock_request:
            execute_tool(tool, {"accessToken": "tok", "instanceUrl": f"{INSTANCE_URL}/"})
        assert mock_request.call_args.args[1] == f"{API_BASE}/analytics/dashboards"

    def test_transport_errors_propagate(self):
        tool = get_tool("salesforce_list_reports")
        with patch(REQUEST, side_effect=httpx.ConnectTimeout("slow")):
            with pytest.raises(httpx.TimeoutException):
                execute_tool(tool, {"accessToken": "tok", "instanceUrl": INSTANCE_URL})


class TestDescriptorRegistry:
    def test_get_unknown_tool(self):
        with pytest.raises(KeyError, match="Unknown Salesforce tool"):
            get_tool("salesforce_nothing")

    def test_auth_params_are_hidden(self):
        tool = get_tool("salesforce_run_report")
        assert [p.name for p in tool.user_params] == ["reportId", "includeDetails"]
        assert tool.required_params == ["accessToken", "reportId"]
