"""Shared fixtures for Salesforce tools tests."""

import base64
import json

import httpx
import pytest
from fastmcp import FastMCP

from salesforce_tools.credentials import CredentialManager

INSTANCE_URL = "https://acme.my.salesforce.com"
API_BASE = f"{INSTANCE_URL}/services/data/v59.0"


def make_id_token(claims) -> str:
    """Build an unsigned identity token whose payload carries ``claims``."""
    payload = base64.urlsafe_b64encode(json.dumps(claims).encode()).decode().rstrip("=")
    return f"eyJhbGciOiJSUzI1NiJ9.{payload}.signature"


def json_response(status_code: int, body=None) -> httpx.Response:
    request = httpx.Request("GET", INSTANCE_URL)
    if body is None:
        return httpx.Response(status_code, request=request)
    return httpx.Response(status_code, json=body, request=request)


@pytest.fixture
def mcp():
    """Create a FastMCP instance for testing."""
    return FastMCP("test-server")


@pytest.fixture
def mock_credentials():
    return CredentialManager.for_testing(
        {
            "salesforce_access_token": "test-token",
            "salesforce_instance_url": INSTANCE_URL,
            "salesforce_id_token": "",
        }
    )


@pytest.fixture(autouse=True)
def _clean_salesforce_env(monkeypatch, tmp_path):
    """Keep the developer's environment and .env out of the tests."""
    for var in (
        "SALESFORCE_ACCESS_TOKEN",
        "SALESFORCE_INSTANCE_URL",
        "SALESFORCE_ID_TOKEN",
        "SALESFORCE_TOOLS_LOG_LEVEL",
        "SALESFORCE_TOOLS_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
