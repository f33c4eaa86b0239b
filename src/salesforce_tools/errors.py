"""
Exceptions raised by the Salesforce tools.

The core modules raise these; the MCP layer turns them into ``{"error": ...}``
responses.
"""

from __future__ import annotations


class SalesforceToolError(Exception):
    """Base class for all Salesforce tool errors."""

    pass


class ConfigurationError(SalesforceToolError):
    """Raised when no instance URL can be derived from the configuration."""

    pass


class UnknownOperationError(SalesforceToolError):
    """Raised when an operation tag is not in the dispatch table."""

    def __init__(self, operation: object):
        self.operation = operation
        super().__init__(f"Unknown operation: {operation}")


class MalformedTokenError(SalesforceToolError):
    """Raised when an identity token cannot be decoded."""

    pass


class InvalidJsonError(SalesforceToolError):
    """Raised when a JSON string parameter does not parse."""

    pass


class InvalidParameterError(SalesforceToolError):
    """Raised when a parameter value cannot be converted for the request body."""

    pass


class MissingParameterError(SalesforceToolError):
    """Raised when required tool parameters are missing from the bag."""

    def __init__(self, tool_id: str, missing: list[str]):
        self.tool_id = tool_id
        self.missing = missing
        super().__init__(f"Missing required parameter(s) for {tool_id}: {', '.join(missing)}")


class RemoteApiError(SalesforceToolError):
    """Raised when Salesforce answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
