"""
Salesforce Tools - Salesforce CRM, reports and dashboards for FastMCP agents.
"""

__version__ = "0.1.0"

from .tools import register_all_tools  # noqa: E402

__all__ = ["__version__", "register_all_tools"]
