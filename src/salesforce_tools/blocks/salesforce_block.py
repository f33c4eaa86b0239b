"""
Salesforce block - the UI-facing description of the Salesforce integration.

The block is pure data: an operation dropdown, the input fields and the
operations each field is shown for. The only behaviour lives in the
dispatcher functions at the bottom, which map the selected operation to a
tool id and clean the parameter bag before the tool runs.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from salesforce_tools.errors import UnknownOperationError
from salesforce_tools.tools.salesforce_tool.registry import TOOLS

T = TypeVar("T")


class Operation(str, Enum):
    GET_ACCOUNTS = "get_accounts"
    CREATE_ACCOUNT = "create_account"
    UPDATE_ACCOUNT = "update_account"
    DELETE_ACCOUNT = "delete_account"
    GET_CONTACTS = "get_contacts"
    CREATE_CONTACT = "create_contact"
    UPDATE_CONTACT = "update_contact"
    DELETE_CONTACT = "delete_contact"
    GET_LEADS = "get_leads"
    CREATE_LEAD = "create_lead"
    UPDATE_LEAD = "update_lead"
    DELETE_LEAD = "delete_lead"
    GET_OPPORTUNITIES = "get_opportunities"
    CREATE_OPPORTUNITY = "create_opportunity"
    UPDATE_OPPORTUNITY = "update_opportunity"
    DELETE_OPPORTUNITY = "delete_opportunity"
    GET_CASES = "get_cases"
    CREATE_CASE = "create_case"
    UPDATE_CASE = "update_case"
    DELETE_CASE = "delete_case"
    GET_TASKS = "get_tasks"
    CREATE_TASK = "create_task"
    UPDATE_TASK = "update_task"
    DELETE_TASK = "delete_task"
    LIST_REPORTS = "list_reports"
    GET_REPORT_METADATA = "get_report_metadata"
    RUN_REPORT = "run_report"
    RUN_REPORT_ASYNC = "run_report_async"
    GET_REPORT_INSTANCE = "get_report_instance"
    LIST_REPORT_INSTANCES = "list_report_instances"
    DELETE_REPORT_INSTANCE = "delete_report_instance"
    RUN_REPORT_WITH_FILTERS = "run_report_with_filters"
    CREATE_REPORT = "create_report"
    UPDATE_REPORT = "update_report"
    DELETE_REPORT = "delete_report"
    LIST_DASHBOARDS = "list_dashboards"
    GET_DASHBOARD = "get_dashboard"
    REFRESH_DASHBOARD = "refresh_dashboard"
    CLONE_DASHBOARD = "clone_dashboard"
    DELETE_DASHBOARD = "delete_dashboard"
    GET_DASHBOARD_COMPONENT = "get_dashboard_component"


# Dropdown order and labels
OPERATION_LABELS: dict[Operation, str] = {
    Operation.GET_ACCOUNTS: "Get Accounts",
    Operation.CREATE_ACCOUNT: "Create Account",
    Operation.UPDATE_ACCOUNT: "Update Account",
    Operation.DELETE_ACCOUNT: "Delete Account",
    Operation.GET_CONTACTS: "Get Contacts",
    Operation.CREATE_CONTACT: "Create Contact",
    Operation.UPDATE_CONTACT: "Update Contact",
    Operation.DELETE_CONTACT: "Delete Contact",
    Operation.GET_LEADS: "Get Leads",
    Operation.CREATE_LEAD: "Create Lead",
    Operation.UPDATE_LEAD: "Update Lead",
    Operation.DELETE_LEAD: "Delete Lead",
    Operation.GET_OPPORTUNITIES: "Get Opportunities",
    Operation.CREATE_OPPORTUNITY: "Create Opportunity",
    Operation.UPDATE_OPPORTUNITY: "Update Opportunity",
    Operation.DELETE_OPPORTUNITY: "Delete Opportunity",
    Operation.GET_CASES: "Get Cases",
    Operation.CREATE_CASE: "Create Case",
    Operation.UPDATE_CASE: "Update Case",
    Operation.DELETE_CASE: "Delete Case",
    Operation.GET_TASKS: "Get Tasks",
    Operation.CREATE_TASK: "Create Task",
    Operation.UPDATE_TASK: "Update Task",
    Operation.DELETE_TASK: "Delete Task",
    Operation.LIST_REPORTS: "List Reports",
    Operation.GET_REPORT_METADATA: "Get Report Metadata",
    Operation.RUN_REPORT: "Run Report",
    Operation.RUN_REPORT_ASYNC: "Run Report Async",
    Operation.GET_REPORT_INSTANCE: "Get Report Instance",
    Operation.LIST_REPORT_INSTANCES: "List Report Instances",
    Operation.DELETE_REPORT_INSTANCE: "Delete Report Instance",
    Operation.RUN_REPORT_WITH_FILTERS: "Run Report with Filters",
    Operation.CREATE_REPORT: "Create Report",
    Operation.UPDATE_REPORT: "Update Report",
    Operation.DELETE_REPORT: "Delete Report",
    Operation.LIST_DASHBOARDS: "List Dashboards",
    Operation.GET_DASHBOARD: "Get Dashboard",
    Operation.REFRESH_DASHBOARD: "Refresh Dashboard",
    Operation.CLONE_DASHBOARD: "Clone Dashboard",
    Operation.DELETE_DASHBOARD: "Delete Dashboard",
    Operation.GET_DASHBOARD_COMPONENT: "Get Dashboard Component",
}

OPERATION_TOOLS: dict[Operation, str] = {
    Operation.GET_ACCOUNTS: "salesforce_get_accounts",
    Operation.CREATE_ACCOUNT: "salesforce_create_account",
    Operation.UPDATE_ACCOUNT: "salesforce_update_account",
    Operation.DELETE_ACCOUNT: "salesforce_delete_account",
    Operation.GET_CONTACTS: "salesforce_get_contacts",
    Operation.CREATE_CONTACT: "salesforce_create_contact",
    Operation.UPDATE_CONTACT: "salesforce_update_contact",
    Operation.DELETE_CONTACT: "salesforce_delete_contact",
    Operation.GET_LEADS: "salesforce_get_leads",
    Operation.CREATE_LEAD: "salesforce_create_lead",
    Operation.UPDATE_LEAD: "salesforce_update_lead",
    Operation.DELETE_LEAD: "salesforce_delete_lead",
    Operation.GET_OPPORTUNITIES: "salesforce_get_opportunities",
    Operation.CREATE_OPPORTUNITY: "salesforce_create_opportunity",
    Operation.UPDATE_OPPORTUNITY: "salesforce_update_opportunity",
    Operation.DELETE_OPPORTUNITY: "salesforce_delete_opportunity",
    Operation.GET_CASES: "salesforce_get_cases",
    Operation.CREATE_CASE: "salesforce_create_case",
    Operation.UPDATE_CASE: "salesforce_update_case",
    Operation.DELETE_CASE: "salesforce_delete_case",
    Operation.GET_TASKS: "salesforce_get_tasks",
    Operation.CREATE_TASK: "salesforce_create_task",
    Operation.UPDATE_TASK: "salesforce_update_task",
    Operation.DELETE_TASK: "salesforce_delete_task",
    Operation.LIST_REPORTS: "salesforce_list_reports",
    Operation.GET_REPORT_METADATA: "salesforce_get_report_metadata",
    Operation.RUN_REPORT: "salesforce_run_report",
    Operation.RUN_REPORT_ASYNC: "salesforce_run_report_async",
    Operation.GET_REPORT_INSTANCE: "salesforce_get_report_instance",
    Operation.LIST_REPORT_INSTANCES: "salesforce_list_report_instances",
    Operation.DELETE_REPORT_INSTANCE: "salesforce_delete_report_instance",
    Operation.RUN_REPORT_WITH_FILTERS: "salesforce_run_report_with_filters",
    Operation.CREATE_REPORT: "salesforce_create_report",
    Operation.UPDATE_REPORT: "salesforce_update_report",
    Operation.DELETE_REPORT: "salesforce_delete_report",
    Operation.LIST_DASHBOARDS: "salesforce_list_dashboards",
    Operation.GET_DASHBOARD: "salesforce_get_dashboard",
    Operation.REFRESH_DASHBOARD: "salesforce_refresh_dashboard",
    Operation.CLONE_DASHBOARD: "salesforce_clone_dashboard",
    Operation.DELETE_DASHBOARD: "salesforce_delete_dashboard",
    Operation.GET_DASHBOARD_COMPONENT: "salesforce_get_dashboard_component",
}


# -----------------------------------------------------------------------------
# Block definition
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Condition:
    """Show a field only while another field holds one of the given values."""

    field: str
    value: tuple[str, ...]

    def matches(self, values: Mapping[str, Any]) -> bool:
        current = values.get(self.field)
        if isinstance(current, Enum):
            current = current.value
        return current in self.value


@dataclass(frozen=True)
class SubBlock:
    id: str
    title: str
    type: str
    placeholder: str = ""
    required: bool = False
    condition: Condition | None = None
    options: tuple[tuple[str, str], ...] = ()
    """(id, label) pairs for dropdowns"""
    provider: str | None = None
    required_scopes: tuple[str, ...] = ()


@dataclass(frozen=True)
class BlockConfig:
    type: str
    name: str
    description: str
    long_description: str
    docs_link: str
    category: str
    auth_mode: str
    sub_blocks: tuple[SubBlock, ...]
    tools: tuple[str, ...]
    default_operation: Operation
    inputs: dict[str, dict[str, str]] = field(default_factory=dict)
    outputs: dict[str, dict[str, str]] = field(default_factory=dict)


def _when(*operations: str) -> Condition:
    return Condition(field="operation", value=operations)


_GET = _when(
    "get_accounts", "get_contacts", "get_leads", "get_opportunities", "get_cases", "get_tasks"
)
_ACCOUNT_EDIT = _when("create_account", "update_account")
_PERSON_EDIT = _when("create_contact", "update_contact", "create_lead", "update_lead")
_LEAD_EDIT = _when("create_lead", "update_lead")
_OPPORTUNITY_EDIT = _when("create_opportunity", "update_opportunity")
_CASE_TASK_EDIT = _when("create_case", "update_case", "create_task", "update_task")
_TASK_EDIT = _when("create_task", "update_task")

SUB_BLOCKS: tuple[SubBlock, ...] = (
    SubBlock(
        id="operation",
        title="Operation",
        type="dropdown",
        options=tuple((op.value, label) for op, label in OPERATION_LABELS.items()),
    ),
    SubBlock(
        id="credential",
        title="Salesforce Account",
        type="oauth-input",
        placeholder="Select Salesforce account",
        required=True,
        provider="salesforce",
        required_scopes=("api", "refresh_token", "openid"),
    ),
    # Common fields for GET operations
    SubBlock("fields", "Fields to Return", "short-input", "Comma-separated fields", condition=_GET),
    SubBlock("limit", "Limit", "short-input", "Max results (default: 100)", condition=_GET),
    SubBlock(
        "orderBy",
        "Order By",
        "short-input",
        'Field and direction (e.g., "Name ASC")',
        condition=_GET,
    ),
    # Account fields
    SubBlock(
        "accountId",
        "Account ID",
        "short-input",
        "Salesforce Account ID",
        condition=_when(
            "update_account", "delete_account", "create_contact", "update_contact", "create_case"
        ),
    ),
    SubBlock(
        "name",
        "Name",
        "short-input",
        "Name",
        condition=_when(
            "create_account",
            "update_account",
            "create_opportunity",
            "update_opportunity",
            "clone_dashboard",
        ),
    ),
    SubBlock("type", "Type", "short-input", "Type", condition=_ACCOUNT_EDIT),
    SubBlock("industry", "Industry", "short-input", "Industry", condition=_ACCOUNT_EDIT),
    SubBlock(
        "phone",
        "Phone",
        "short-input",
        "Phone",
        condition=_when(
            "create_account",
            "update_account",
            "create_contact",
            "update_contact",
            "create_lead",
            "update_lead",
        ),
    ),
    SubBlock("website", "Website", "short-input", "Website", condition=_ACCOUNT_EDIT),
    # Contact fields
    SubBlock(
        "contactId",
        "Contact ID",
        "short-input",
        "Contact ID",
        condition=_when("get_contacts", "update_contact", "delete_contact", "create_case"),
    ),
    SubBlock("lastName", "Last Name", "short-input", "Last name", condition=_PERSON_EDIT),
    SubBlock("firstName", "First Name", "short-input", "First name", condition=_PERSON_EDIT),
    SubBlock("email", "Email", "short-input", "Email", condition=_PERSON_EDIT),
    SubBlock("title", "Job Title", "short-input", "Job title", condition=_PERSON_EDIT),
    # Lead fields
    SubBlock(
        "leadId",
        "Lead ID",
        "short-input",
        "Lead ID",
        condition=_when("get_leads", "update_lead", "delete_lead"),
    ),
    SubBlock("company", "Company", "short-input", "Company name", condition=_LEAD_EDIT),
    SubBlock(
        "status",
        "Status",
        "short-input",
        "Status",
        condition=_when(
            "create_lead", "update_lead", "create_case", "update_case", "create_task", "update_task"
        ),
    ),
    SubBlock("leadSource", "Lead Source", "short-input", "Lead source", condition=_LEAD_EDIT),
    # Opportunity fields
    SubBlock(
        "opportunityId",
        "Opportunity ID",
        "short-input",
        "Opportunity ID",
        condition=_when("get_opportunities", "update_opportunity", "delete_opportunity"),
    ),
    SubBlock("stageName", "Stage Name", "short-input", "Stage name", condition=_OPPORTUNITY_EDIT),
    SubBlock(
        "closeDate",
        "Close Date",
        "short-input",
        "YYYY-MM-DD (required for create)",
        required=True,
        condition=_OPPORTUNITY_EDIT,
    ),
    SubBlock("amount", "Amount", "short-input", "Deal amount", condition=_OPPORTUNITY_EDIT),
    SubBlock(
        "probability",
        "Probability",
        "short-input",
        "Win probability (0-100)",
        condition=_OPPORTUNITY_EDIT,
    ),
    # Case fields
    SubBlock(
        "caseId",
        "Case ID",
        "short-input",
        "Case ID",
        condition=_when("get_cases", "update_case", "delete_case"),
    ),
    SubBlock("subject", "Subject", "short-input", "Subject", condition=_CASE_TASK_EDIT),
    SubBlock("priority", "Priority", "short-input", "Priority", condition=_CASE_TASK_EDIT),
    SubBlock(
        "origin",
        "Origin",
        "short-input",
        "Origin (e.g., Phone, Email, Web)",
        condition=_when("create_case"),
    ),
    # Task fields
    SubBlock(
        "taskId",
        "Task ID",
        "short-input",
        "Task ID",
        condition=_when("get_tasks", "update_task", "delete_task"),
    ),
    SubBlock("activityDate", "Due Date", "short-input", "YYYY-MM-DD", condition=_TASK_EDIT),
    SubBlock(
        "whoId",
        "Related Contact/Lead ID",
        "short-input",
        "Contact or Lead ID",
        condition=_when("create_task"),
    ),
    SubBlock(
        "whatId",
        "Related Account/Opportunity ID",
        "short-input",
        "Account or Opportunity ID",
        condition=_when("create_task"),
    ),
    # Report fields
    SubBlock(
        "reportId",
        "Report ID",
        "short-input",
        "Salesforce Report ID (e.g., 00Og5000000rk0nEAA)",
        required=True,
        condition=_when(
            "get_report_metadata",
            "run_report",
            "run_report_async",
            "get_report_instance",
            "list_report_instances",
            "delete_report_instance",
            "run_report_with_filters",
            "update_report",
            "delete_report",
        ),
    ),
    SubBlock(
        "instanceId",
        "Report Instance ID",
        "short-input",
        "Instance ID from async report execution",
        required=True,
        condition=_when("get_report_instance", "delete_report_instance"),
    ),
    SubBlock(
        "includeDetails",
        "Include Details",
        "short-input",
        "true or false (default: true)",
        condition=_when("run_report", "run_report_async"),
    ),
    # Dashboard fields
    SubBlock(
        "dashboardId",
        "Dashboard ID",
        "short-input",
        "Salesforce Dashboard ID",
        required=True,
        condition=_when(
            "get_dashboard",
            "refresh_dashboard",
            "clone_dashboard",
            "delete_dashboard",
            "get_dashboard_component",
        ),
    ),
    SubBlock(
        "componentId",
        "Component ID",
        "short-input",
        "Dashboard Component ID",
        required=True,
        condition=_when("get_dashboard_component"),
    ),
    SubBlock(
        "folderId",
        "Folder ID",
        "short-input",
        "Destination Folder ID",
        condition=_when("clone_dashboard"),
    ),
    # Long-input fields at the bottom
    SubBlock(
        "description",
        "Description",
        "long-input",
        "Description",
        condition=_when(
            "create_account",
            "update_account",
            "create_contact",
            "update_contact",
            "create_lead",
            "update_lead",
            "create_opportunity",
            "update_opportunity",
            "create_case",
            "update_case",
            "create_task",
            "update_task",
        ),
    ),
    SubBlock(
        "reportMetadata",
        "Report Metadata (JSON)",
        "long-input",
        "JSON string containing report metadata with filters",
        required=True,
        condition=_when("run_report_with_filters", "create_report", "update_report"),
    ),
)

SALESFORCE_BLOCK = BlockConfig(
    type="salesforce",
    name="Salesforce",
    description="Interact with Salesforce CRM",
    long_description=(
        "Integrate Salesforce into your workflow. Manage accounts, contacts, leads, "
        "opportunities, cases, tasks, reports, and dashboards."
    ),
    docs_link="https://developer.salesforce.com/docs/atlas.en-us.api_rest.meta/api_rest/",
    category="tools",
    auth_mode="oauth",
    sub_blocks=SUB_BLOCKS,
    tools=tuple(OPERATION_TOOLS.values()),
    default_operation=Operation.GET_ACCOUNTS,
    inputs={
        "operation": {"type": "string", "description": "Operation to perform"},
        "credential": {"type": "string", "description": "Salesforce credential"},
    },
    outputs={
        "success": {"type": "boolean", "description": "Operation success status"},
        "output": {"type": "json", "description": "Operation result data"},
    },
)


def _validate_dispatch_table() -> None:
    """Every operation maps to exactly one registered tool of the same operation."""
    missing = [op.value for op in Operation if op not in OPERATION_TOOLS]
    if missing:
        raise RuntimeError(f"Operations without a tool: {missing}")
    unlabeled = [op.value for op in Operation if op not in OPERATION_LABELS]
    if unlabeled:
        raise RuntimeError(f"Operations without a label: {unlabeled}")
    for op, tool_id in OPERATION_TOOLS.items():
        tool = TOOLS.get(tool_id)
        if tool is None:
            raise RuntimeError(f"Operation '{op.value}' maps to unregistered tool '{tool_id}'")
        if tool.operation != op.value:
            raise RuntimeError(f"Tool '{tool_id}' implements '{tool.operation}', not '{op.value}'")


_validate_dispatch_table()


# -----------------------------------------------------------------------------
# Dispatcher
# -----------------------------------------------------------------------------


def _as_operation(operation: str | Operation | None) -> Operation:
    try:
        return Operation(operation)
    except ValueError:
        raise UnknownOperationError(operation) from None


def resolve_tool(operation: str | Operation) -> str:
    """Map an operation tag to its tool id. Raises UnknownOperationError."""
    return OPERATION_TOOLS[_as_operation(operation)]


def sanitize_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """
    Clean a parameter bag before it is handed to a tool.

    ``credential`` is always kept (first, unfiltered), ``operation`` is dropped,
    and every other entry whose value is None or "" is removed. Values are not
    coerced and input order is preserved.
    """
    clean: dict[str, Any] = {"credential": params.get("credential")}
    for key, value in params.items():
        if key in ("credential", "operation"):
            continue
        if value is None or value == "":
            continue
        clean[key] = value
    return clean


def visible_fields(operation: str | Operation) -> list[str]:
    """Ids of the sub-blocks shown for an operation, in display order."""
    values = {"operation": _as_operation(operation).value}
    return [
        block.id
        for block in SUB_BLOCKS
        if block.condition is None or block.condition.matches(values)
    ]


def run_operation(
    params: Mapping[str, Any],
    execute: Callable[[str, dict[str, Any]], T],
) -> T:
    """Resolve the tool for ``params["operation"]`` and run it on the cleaned bag."""
    tool_id = resolve_tool(params.get("operation"))
    return execute(tool_id, sanitize_params(params))
