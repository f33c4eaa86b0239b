"""
Salesforce Tool - Manage accounts, contacts, leads, opportunities, cases and tasks,
and run reports and dashboards via the Salesforce REST and Analytics APIs.

Supports OAuth2 access tokens, with the instance URL configured directly or
derived from an OpenID Connect identity token.
"""

from .descriptor import execute_tool
from .registry import TOOLS, get_tool
from .salesforce_tool import register_tools

__all__ = ["register_tools", "TOOLS", "get_tool", "execute_tool"]
