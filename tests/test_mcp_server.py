"""
Integration tests for the Salesforce Tools MCP Server.

Tests the MCP server setup, tool registration, and HTTP endpoints.
"""

import importlib

from starlette.testclient import TestClient


class TestPackage:
    def test_package_importable(self):
        from salesforce_tools import __version__, register_all_tools

        assert __version__
        assert callable(register_all_tools)

    def test_register_all_tools_returns_list(self, mcp, mock_credentials):
        from salesforce_tools.tools import register_all_tools

        tools = register_all_tools(mcp, credentials=mock_credentials)

        assert isinstance(tools, list)
        assert len(tools) == 43
        assert "salesforce_operation" in tools
        assert "salesforce_list_operations" in tools
        assert set(tools) <= set(mcp._tool_manager._tools)


class TestServerModule:
    def test_server_module(self):
        server = importlib.import_module("salesforce_tools.mcp_server")

        assert server.mcp.name == "salesforce-tools"
        assert callable(server.main)
        assert "salesforce_get_accounts" in server.tools

    def test_create_server_with_credentials(self, mock_credentials):
        server_module = importlib.import_module("salesforce_tools.mcp_server")

        server, names = server_module.create_server(mock_credentials)

        assert server is not server_module.mcp
        assert set(names) <= set(server._tool_manager._tools)

    def test_health_and_index_routes(self):
        server = importlib.import_module("salesforce_tools.mcp_server")
        client = TestClient(server.mcp.http_app())

        response = client.get("/health")
        assert response.status_code == 200
        assert response.text == "OK"

        response = client.get("/")
        assert response.status_code == 200
        assert "Salesforce Tools" in response.text
