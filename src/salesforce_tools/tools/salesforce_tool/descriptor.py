"""
Tool descriptors for the Salesforce REST and Analytics APIs.

A descriptor is a static definition of one operation's HTTP contract: which
parameters it needs, how the URL, headers and body are built, and how the
response is turned into the ``{"success": True, "output": {...}}`` envelope.
``execute_tool`` is the single place where a descriptor meets the network.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from salesforce_tools.errors import InvalidJsonError, MissingParameterError, RemoteApiError
from salesforce_tools.instance import resolve_instance_url

logger = logging.getLogger(__name__)

API_VERSION = "v59.0"
REQUEST_TIMEOUT = 30.0

Params = Mapping[str, Any]


@dataclass(frozen=True)
class ParamSpec:
    """One entry of a tool's parameter schema."""

    name: str
    required: bool = False
    visibility: str = "user-only"
    """'hidden' for values supplied by the credential layer, 'user-only' otherwise"""
    description: str = ""


AUTH_PARAMS = (
    ParamSpec("accessToken", required=True, visibility="hidden", description="OAuth access token"),
    ParamSpec("idToken", visibility="hidden", description="OpenID Connect identity token"),
    ParamSpec("instanceUrl", visibility="hidden", description="Salesforce instance URL"),
)


def bearer_headers(params: Params) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {params.get('accessToken')}",
        "Content-Type": "application/json",
    }


def auth_headers(params: Params) -> dict[str, str]:
    """Headers for requests without a body (DELETE)."""
    return {"Authorization": f"Bearer {params.get('accessToken')}"}


@dataclass(frozen=True)
class ToolDescriptor:
    """Immutable definition of a single Salesforce operation."""

    id: str
    name: str
    description: str
    operation: str
    method: str
    url: Callable[[str, Params], str]
    transform: Callable[[httpx.Response, Params], dict[str, Any]]
    params: tuple[ParamSpec, ...] = AUTH_PARAMS
    headers: Callable[[Params], dict[str, str]] = bearer_headers
    body: Callable[[Params], Any] | None = None
    query: Callable[[Params], dict[str, Any] | None] | None = None
    version: str = "1.0.0"

    @property
    def required_params(self) -> list[str]:
        return [p.name for p in self.params if p.required]

    @property
    def user_params(self) -> list[ParamSpec]:
        return [p for p in self.params if p.visibility != "hidden"]

    def missing_params(self, params: Params) -> list[str]:
        """Required parameters that are absent, None or empty."""
        return [name for name in self.required_params if params.get(name) in (None, "")]


# -----------------------------------------------------------------------------
# Building blocks shared by the tool catalogues
# -----------------------------------------------------------------------------


def api_url(instance_url: str, path: str) -> str:
    return f"{instance_url}/services/data/{API_VERSION}/{path}"


def segment(value: Any) -> str:
    """Quote a record ID for use as a single URL path segment."""
    return quote(str(value), safe="")


def is_ok(response: httpx.Response) -> bool:
    return 200 <= response.status_code < 300


def error_message(data: Any, fallback: str) -> str:
    """Pick the error message: body[0].message, then body.message, then fallback."""
    if isinstance(data, list) and data and isinstance(data[0], dict):
        message = data[0].get("message")
        if message:
            return str(message)
    if isinstance(data, dict):
        message = data.get("message")
        if message:
            return str(message)
    return fallback


def read_json(response: httpx.Response) -> Any:
    """Parse a response body, falling back to {} when it is not JSON."""
    try:
        return response.json()
    except ValueError:
        return {}


def ensure_ok(response: httpx.Response, fallback: str) -> Any:
    """Return the parsed body of a 2xx response; raise RemoteApiError otherwise."""
    if not is_ok(response):
        raise RemoteApiError(error_message(read_json(response), fallback), response.status_code)
    try:
        return response.json()
    except ValueError as e:
        raise RemoteApiError(f"{fallback}: response is not valid JSON", response.status_code) from e


def ensure_ok_no_body(response: httpx.Response, fallback: str) -> None:
    """Like ensure_ok, for endpoints that answer 204 No Content."""
    if not is_ok(response):
        raise RemoteApiError(error_message(read_json(response), fallback), response.status_code)


def envelope(output: dict[str, Any]) -> dict[str, Any]:
    return {"success": True, "output": output}


def parse_json_param(params: Params, name: str) -> Any:
    value = params.get(name)
    if not isinstance(value, str):
        # Already-structured values are passed through as-is
        if isinstance(value, (dict, list)):
            return value
        raise InvalidJsonError(f"Invalid JSON in {name} parameter")
    try:
        return json.loads(value)
    except ValueError as e:
        raise InvalidJsonError(f"Invalid JSON in {name} parameter") from e


# -----------------------------------------------------------------------------
# Execution
# -----------------------------------------------------------------------------


def execute_tool(
    descriptor: ToolDescriptor,
    params: Params,
    log: logging.Logger | None = None,
) -> dict[str, Any]:
    """
    Run one descriptor against Salesforce.

    Args:
        descriptor: The tool to run
        params: Sanitized parameter bag, including accessToken and idToken/instanceUrl
        log: Logger passed to the instance resolver for token diagnostics

    Returns:
        The descriptor's response envelope

    Raises:
        SalesforceToolError subclasses for configuration, parameter and API errors;
        httpx.TimeoutException / httpx.RequestError for transport failures
    """
    missing = descriptor.missing_params(params)
    if missing:
        raise MissingParameterError(descriptor.id, missing)

    instance_url = resolve_instance_url(params.get("instanceUrl"), params.get("idToken"), log=log)
    url = descriptor.url(instance_url.rstrip("/"), params)

    kwargs: dict[str, Any] = {}
    if descriptor.body is not None:
        kwargs["json"] = descriptor.body(params)
    if descriptor.query is not None:
        query = descriptor.query(params)
        if query:
            kwargs["params"] = query

    logger.debug("%s %s (%s)", descriptor.method, url, descriptor.id)
    response = httpx.request(
        descriptor.method,
        url,
        headers=descriptor.headers(params),
        timeout=REQUEST_TIMEOUT,
        **kwargs,
    )
    return descriptor.transform(response, params)
