"""
UI blocks and the operation dispatcher.
"""

from .salesforce_block import (
    OPERATION_LABELS,
    OPERATION_TOOLS,
    SALESFORCE_BLOCK,
    BlockConfig,
    Condition,
    Operation,
    SubBlock,
    resolve_tool,
    run_operation,
    sanitize_params,
    visible_fields,
)

__all__ = [
    "BlockConfig",
    "Condition",
    "OPERATION_LABELS",
    "OPERATION_TOOLS",
    "Operation",
    "SALESFORCE_BLOCK",
    "SubBlock",
    "resolve_tool",
    "run_operation",
    "sanitize_params",
    "visible_fields",
]
