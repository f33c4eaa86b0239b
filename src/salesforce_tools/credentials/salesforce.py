"""
Salesforce credential specifications.

The access token is always needed. The instance URL and the OpenID Connect
identity token are alternatives: the instance URL wins, and the identity token
is only decoded when no instance URL is configured.
"""

from __future__ import annotations

from .base import CredentialSpec

_HELP_URL = "https://help.salesforce.com/s/articleView?id=sf.connected_app_create.htm"

SALESFORCE_TOOLS = [
    "salesforce_get_accounts",
    "salesforce_create_account",
    "salesforce_update_account",
    "salesforce_delete_account",
    "salesforce_get_contacts",
    "salesforce_create_contact",
    "salesforce_update_contact",
    "salesforce_delete_contact",
    "salesforce_get_leads",
    "salesforce_create_lead",
    "salesforce_update_lead",
    "salesforce_delete_lead",
    "salesforce_get_opportunities",
    "salesforce_create_opportunity",
    "salesforce_update_opportunity",
    "salesforce_delete_opportunity",
    "salesforce_get_cases",
    "salesforce_create_case",
    "salesforce_update_case",
    "salesforce_delete_case",
    "salesforce_get_tasks",
    "salesforce_create_task",
    "salesforce_update_task",
    "salesforce_delete_task",
    "salesforce_list_reports",
    "salesforce_get_report_metadata",
    "salesforce_run_report",
    "salesforce_run_report_async",
    "salesforce_get_report_instance",
    "salesforce_list_report_instances",
    "salesforce_delete_report_instance",
    "salesforce_run_report_with_filters",
    "salesforce_create_report",
    "salesforce_update_report",
    "salesforce_delete_report",
    "salesforce_list_dashboards",
    "salesforce_get_dashboard",
    "salesforce_refresh_dashboard",
    "salesforce_clone_dashboard",
    "salesforce_delete_dashboard",
    "salesforce_get_dashboard_component",
    "salesforce_operation",
]

SALESFORCE_CREDENTIALS = {
    "salesforce_access_token": CredentialSpec(
        env_var="SALESFORCE_ACCESS_TOKEN",
        tools=SALESFORCE_TOOLS,
        required=True,
        help_url=_HELP_URL,
        description="Salesforce OAuth2 access token (scopes: api, refresh_token, openid)",
    ),
    "salesforce_instance_url": CredentialSpec(
        env_var="SALESFORCE_INSTANCE_URL",
        tools=SALESFORCE_TOOLS,
        required=False,
        help_url=_HELP_URL,
        description="Salesforce instance URL (e.g., https://acme.my.salesforce.com)",
    ),
    "salesforce_id_token": CredentialSpec(
        env_var="SALESFORCE_ID_TOKEN",
        tools=SALESFORCE_TOOLS,
        required=False,
        help_url=_HELP_URL,
        description="OpenID Connect identity token, used to find the instance URL",
    ),
}
