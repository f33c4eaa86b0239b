"""
Salesforce sObject record tools (Account, Contact, Lead, Opportunity, Case, Task).

Every object gets the same four tools: get (SOQL list, or a single record when
its ID is given), create, update and delete. The UI field ids are mapped to
Salesforce API field names here.

API Reference: https://developer.salesforce.com/docs/atlas.en-us.api_rest.meta/api_rest/
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx

from salesforce_tools.errors import InvalidParameterError

from .descriptor import (
    AUTH_PARAMS,
    Params,
    ParamSpec,
    ToolDescriptor,
    api_url,
    auth_headers,
    ensure_ok,
    ensure_ok_no_body,
    envelope,
    segment,
)

DEFAULT_LIMIT = 100


@dataclass(frozen=True)
class SObject:
    """Static description of one sObject and how the UI fields map onto it."""

    api_name: str
    singular: str
    plural: str
    id_param: str
    fields: dict[str, str]
    default_fields: tuple[str, ...]
    create_required: tuple[str, ...]
    get_by_id: bool = True


ACCOUNT = SObject(
    api_name="Account",
    singular="account",
    plural="accounts",
    id_param="accountId",
    fields={
        "name": "Name",
        "type": "Type",
        "industry": "Industry",
        "phone": "Phone",
        "website": "Website",
        "description": "Description",
    },
    default_fields=("Id", "Name", "Type", "Industry", "Phone", "Website"),
    create_required=("name",),
    get_by_id=False,
)

CONTACT = SObject(
    api_name="Contact",
    singular="contact",
    plural="contacts",
    id_param="contactId",
    fields={
        "lastName": "LastName",
        "firstName": "FirstName",
        "email": "Email",
        "phone": "Phone",
        "title": "Title",
        "accountId": "AccountId",
        "description": "Description",
    },
    default_fields=("Id", "FirstName", "LastName", "Email", "Phone", "Title", "AccountId"),
    create_required=("lastName",),
)

LEAD = SObject(
    api_name="Lead",
    singular="lead",
    plural="leads",
    id_param="leadId",
    fields={
        "lastName": "LastName",
        "firstName": "FirstName",
        "company": "Company",
        "email": "Email",
        "phone": "Phone",
        "title": "Title",
        "status": "Status",
        "leadSource": "LeadSource",
        "description": "Description",
    },
    default_fields=("Id", "FirstName", "LastName", "Company", "Email", "Status", "LeadSource"),
    create_required=("lastName", "company"),
)

OPPORTUNITY = SObject(
    api_name="Opportunity",
    singular="opportunity",
    plural="opportunities",
    id_param="opportunityId",
    fields={
        "name": "Name",
        "accountId": "AccountId",
        "stageName": "StageName",
        "closeDate": "CloseDate",
        "amount": "Amount",
        "probability": "Probability",
        "description": "Description",
    },
    default_fields=("Id", "Name", "AccountId", "StageName", "CloseDate", "Amount", "Probability"),
    create_required=("name", "stageName", "closeDate"),
)

CASE = SObject(
    api_name="Case",
    singular="case",
    plural="cases",
    id_param="caseId",
    fields={
        "subject": "Subject",
        "status": "Status",
        "priority": "Priority",
        "origin": "Origin",
        "contactId": "ContactId",
        "accountId": "AccountId",
        "description": "Description",
    },
    default_fields=("Id", "CaseNumber", "Subject", "Status", "Priority", "Origin", "AccountId"),
    create_required=("subject",),
)

TASK = SObject(
    api_name="Task",
    singular="task",
    plural="tasks",
    id_param="taskId",
    fields={
        "subject": "Subject",
        "status": "Status",
        "priority": "Priority",
        "activityDate": "ActivityDate",
        "whoId": "WhoId",
        "whatId": "WhatId",
        "description": "Description",
    },
    default_fields=("Id", "Subject", "Status", "Priority", "ActivityDate", "WhoId", "WhatId"),
    create_required=("subject",),
)

SOBJECTS = (ACCOUNT, CONTACT, LEAD, OPPORTUNITY, CASE, TASK)

# Salesforce rejects numeric fields sent as strings
_CONVERTERS: dict[str, Callable[[float], Any]] = {
    "Amount": float,
    "Probability": int,
}


def _convert(ui_field: str, api_field: str, value: Any) -> Any:
    converter = _CONVERTERS.get(api_field)
    if converter is None:
        return value
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidParameterError(f"Invalid value for {ui_field}: {value!r}") from e
    # nan and inf cannot be encoded as JSON
    if not math.isfinite(number):
        raise InvalidParameterError(f"Invalid value for {ui_field}: {value!r}")
    return converter(number)


def _record_body(sobject: SObject, params: Params) -> dict[str, Any]:
    return {
        api_field: _convert(ui_field, api_field, params[ui_field])
        for ui_field, api_field in sobject.fields.items()
        if params.get(ui_field) not in (None, "")
    }


def _field_list(params: Params, default: tuple[str, ...]) -> list[str]:
    raw = params.get("fields")
    if not raw:
        return list(default)
    if isinstance(raw, str):
        raw = raw.split(",")
    return [f.strip() for f in raw if f and f.strip()] or list(default)


def _limit(params: Params) -> int:
    raw = params.get("limit")
    if raw in (None, ""):
        return DEFAULT_LIMIT
    try:
        return int(raw)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidParameterError(f"Invalid value for limit: {raw!r}") from e


def build_soql(sobject: SObject, params: Params) -> str:
    """SELECT <fields> FROM <object> [ORDER BY <orderBy>] LIMIT <limit>"""
    fields = ", ".join(_field_list(params, sobject.default_fields))
    soql = f"SELECT {fields} FROM {sobject.api_name}"
    if params.get("orderBy"):
        soql += f" ORDER BY {params['orderBy']}"
    return f"{soql} LIMIT {_limit(params)}"


def _id_param(sobject: SObject) -> ParamSpec:
    return ParamSpec(
        sobject.id_param, required=True, description=f"{sobject.api_name} ID (required)"
    )


def _single(sobject: SObject, params: Params) -> bool:
    return sobject.get_by_id and bool(params.get(sobject.id_param))


# -----------------------------------------------------------------------------
# Factories
# -----------------------------------------------------------------------------


def _get_tool(sobject: SObject) -> ToolDescriptor:
    operation = f"get_{sobject.plural}"
    fallback = f"Failed to get {sobject.plural}"

    def url(base: str, p: Params) -> str:
        if _single(sobject, p):
            return api_url(base, f"sobjects/{sobject.api_name}/{segment(p[sobject.id_param])}")
        return api_url(base, "query")

    def query(p: Params) -> dict[str, Any] | None:
        if _single(sobject, p):
            if p.get("fields"):
                return {"fields": ",".join(_field_list(p, sobject.default_fields))}
            return None
        return {"q": build_soql(sobject, p)}

    def transform(response: httpx.Response, p: Params) -> dict[str, Any]:
        data = ensure_ok(response, fallback)
        if _single(sobject, p):
            return envelope(
                {
                    sobject.singular: data,
                    f"single{sobject.api_name}": True,
                    "metadata": {"operation": operation},
                    "success": True,
                }
            )
        records = data.get("records", [])
        done = data.get("done", True)
        return envelope(
            {
                sobject.plural: records,
                "paging": {
                    "nextRecordsUrl": data.get("nextRecordsUrl"),
                    "totalSize": data.get("totalSize", len(records)),
                    "done": done,
                },
                "metadata": {
                    "operation": operation,
                    "totalReturned": len(records),
                    "hasMore": not done,
                },
                "success": True,
            }
        )

    params = [
        *AUTH_PARAMS,
        ParamSpec("fields", description="Comma-separated list of fields to return"),
        ParamSpec("limit", description=f"Maximum number of results (default: {DEFAULT_LIMIT})"),
        ParamSpec("orderBy", description='Field and direction (e.g., "Name ASC")'),
    ]
    if sobject.get_by_id:
        params.append(
            ParamSpec(sobject.id_param, description=f"{sobject.api_name} ID (optional)")
        )

    return ToolDescriptor(
        id=f"salesforce_{operation}",
        name=f"Get {sobject.plural.title()} from Salesforce",
        description=f"Get {sobject.plural} from Salesforce CRM",
        operation=operation,
        method="GET",
        params=tuple(params),
        url=url,
        query=query,
        transform=transform,
    )


def _create_tool(sobject: SObject) -> ToolDescriptor:
    operation = f"create_{sobject.singular}"

    def transform(response: httpx.Response, p: Params) -> dict[str, Any]:
        data = ensure_ok(response, f"Failed to create {sobject.singular}")
        return envelope(
            {
                "id": data.get("id"),
                "success": True,
                "created": True,
                "metadata": {"operation": operation},
            }
        )

    params = tuple(
        ParamSpec(ui_field, required=ui_field in sobject.create_required)
        for ui_field in sobject.fields
    )
    return ToolDescriptor(
        id=f"salesforce_{operation}",
        name=f"Create {sobject.api_name} in Salesforce",
        description=f"Create a new {sobject.singular} in Salesforce CRM",
        operation=operation,
        method="POST",
        params=(*AUTH_PARAMS, *params),
        url=lambda base, p: api_url(base, f"sobjects/{sobject.api_name}"),
        body=lambda p: _record_body(sobject, p),
        transform=transform,
    )


def _update_tool(sobject: SObject) -> ToolDescriptor:
    operation = f"update_{sobject.singular}"

    def transform(response: httpx.Response, p: Params) -> dict[str, Any]:
        # 204 No Content on success
        ensure_ok_no_body(response, f"Failed to update {sobject.singular}")
        return envelope(
            {
                "id": p[sobject.id_param],
                "updated": True,
                "metadata": {"operation": operation},
            }
        )

    params = tuple(ParamSpec(ui_field) for ui_field in sobject.fields)
    return ToolDescriptor(
        id=f"salesforce_{operation}",
        name=f"Update {sobject.api_name} in Salesforce",
        description=f"Update an existing {sobject.singular} in Salesforce CRM",
        operation=operation,
        method="PATCH",
        params=(
            *AUTH_PARAMS,
            _id_param(sobject),
            *params,
        ),
        url=lambda base, p: api_url(
            base, f"sobjects/{sobject.api_name}/{segment(p[sobject.id_param])}"
        ),
        body=lambda p: _record_body(sobject, p),
        transform=transform,
    )


def _delete_tool(sobject: SObject) -> ToolDescriptor:
    operation = f"delete_{sobject.singular}"

    def transform(response: httpx.Response, p: Params) -> dict[str, Any]:
        ensure_ok_no_body(response, f"Failed to delete {sobject.singular}")
        return envelope(
            {
                "id": p[sobject.id_param],
                "deleted": True,
                "metadata": {"operation": operation},
            }
        )

    return ToolDescriptor(
        id=f"salesforce_{operation}",
        name=f"Delete {sobject.api_name} from Salesforce",
        description=f"Delete a {sobject.singular} from Salesforce CRM",
        operation=operation,
        method="DELETE",
        params=(
            *AUTH_PARAMS,
            _id_param(sobject),
        ),
        url=lambda base, p: api_url(
            base, f"sobjects/{sobject.api_name}/{segment(p[sobject.id_param])}"
        ),
        headers=auth_headers,
        transform=transform,
    )


RECORD_TOOLS = [
    factory(sobject)
    for sobject in SOBJECTS
    for factory in (_get_tool, _create_tool, _update_tool, _delete_tool)
]
