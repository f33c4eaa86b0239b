"""
Centralized credential management for Salesforce Tools.

Usage:
    from salesforce_tools.credentials import CredentialManager

    credentials = CredentialManager()
    token = credentials.get("salesforce_access_token")

    # In tests
    credentials = CredentialManager.for_testing({"salesforce_access_token": "test-token"})
"""

from .base import CredentialError, CredentialManager, CredentialSpec
from .salesforce import SALESFORCE_CREDENTIALS, SALESFORCE_TOOLS

CREDENTIAL_SPECS = {
    **SALESFORCE_CREDENTIALS,
}

__all__ = [
    "CredentialSpec",
    "CredentialManager",
    "CredentialError",
    "CREDENTIAL_SPECS",
    "SALESFORCE_CREDENTIALS",
    "SALESFORCE_TOOLS",
]
