"""
Registry of every Salesforce tool descriptor, keyed by tool id.
"""

from __future__ import annotations

from .dashboards import DASHBOARD_TOOLS
from .descriptor import ToolDescriptor
from .records import RECORD_TOOLS
from .reports import REPORT_TOOLS

TOOLS: dict[str, ToolDescriptor] = {
    tool.id: tool for tool in (*RECORD_TOOLS, *REPORT_TOOLS, *DASHBOARD_TOOLS)
}


def get_tool(tool_id: str) -> ToolDescriptor:
    """Get a tool descriptor by id."""
    if tool_id not in TOOLS:
        raise KeyError(f"Unknown Salesforce tool '{tool_id}'")
    return TOOLS[tool_id]
