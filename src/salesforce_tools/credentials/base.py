"""
Credential specs and the manager that reads them.

A credential is looked up by logical name (``salesforce_access_token``) and read
from, in order: test overrides, the process environment, then the ``.env`` file
in the working directory. The ``.env`` file is re-read on every lookup, so a
rotated token is picked up without restarting the server.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from dotenv import dotenv_values


@dataclass
class CredentialSpec:
    """How one credential is configured and which tools use it."""

    env_var: str
    """Environment variable name (e.g., 'SALESFORCE_ACCESS_TOKEN')"""

    tools: List[str] = field(default_factory=list)
    """Tool names that read this credential"""

    required: bool = True
    """Whether the tools above fail without it"""

    startup_required: bool = False
    """Whether the server refuses to start without it"""

    help_url: str = ""
    """Where to obtain the credential"""

    description: str = ""


class CredentialError(Exception):
    """Raised when required credentials are missing."""

    pass


class CredentialManager:
    """
    Tool-aware access to credentials.

    Usage:
        credentials = CredentialManager()
        token = credentials.resolve("salesforce_access_token", explicit_token)

        # In tests
        credentials = CredentialManager.for_testing({"salesforce_access_token": "tok"})
    """

    _specs: Dict[str, CredentialSpec]
    _overrides: Dict[str, str]
    _tool_to_creds: Dict[str, List[str]]
    _dotenv_path: Optional[Path]

    def __init__(
        self,
        specs: Optional[Dict[str, CredentialSpec]] = None,
        _overrides: Optional[Dict[str, str]] = None,
        dotenv_path: Optional[Path] = None,
    ):
        """
        Args:
            specs: Credential specs by logical name (defaults to CREDENTIAL_SPECS)
            _overrides: Values injected by for_testing(); they shadow every other source
            dotenv_path: .env file to read (defaults to ./.env at lookup time)
        """
        if specs is None:
            from . import CREDENTIAL_SPECS

            specs = CREDENTIAL_SPECS

        self._specs = specs
        self._overrides = dict(_overrides or {})
        self._dotenv_path = dotenv_path

        # A tool may read several credentials (token plus instance URL or ID token)
        self._tool_to_creds = {}
        for cred_name, spec in self._specs.items():
            for tool_name in spec.tools:
                self._tool_to_creds.setdefault(tool_name, []).append(cred_name)

    @classmethod
    def for_testing(
        cls,
        overrides: Dict[str, str],
        specs: Optional[Dict[str, CredentialSpec]] = None,
        dotenv_path: Optional[Path] = None,
    ) -> "CredentialManager":
        """Create a manager whose values come from ``overrides`` first."""
        return cls(specs=specs, _overrides=overrides, dotenv_path=dotenv_path)

    def _dotenv_value(self, env_var: str) -> Optional[str]:
        path = self._dotenv_path or Path.cwd() / ".env"
        if not path.exists():
            return None
        return dotenv_values(path).get(env_var)

    def get(self, name: str) -> Optional[str]:
        """Get a credential value by logical name. Raises KeyError for unknown names."""
        spec = self._specs.get(name)
        if spec is None:
            raise KeyError(f"Unknown credential '{name}'. Available: {sorted(self._specs)}")

        if name in self._overrides:
            return self._overrides[name]
        return os.environ.get(spec.env_var) or self._dotenv_value(spec.env_var)

    def resolve(self, name: str, *candidates: Optional[str]) -> Optional[str]:
        """
        Return the first non-empty candidate, else the configured value.

        Callers pass their higher-priority sources (an explicit tool argument,
        a value already in the parameter bag) in order.
        """
        for value in candidates:
            if value:
                return value
        return self.get(name) or None

    def get_spec(self, name: str) -> CredentialSpec:
        if name not in self._specs:
            raise KeyError(f"Unknown credential '{name}'")
        return self._specs[name]

    def is_available(self, name: str) -> bool:
        """Check if a credential is set and non-empty."""
        return bool(self.get(name))

    def get_credentials_for_tool(self, tool_name: str) -> List[str]:
        """Logical credential names read by a tool, in spec order."""
        return list(self._tool_to_creds.get(tool_name, []))

    def get_missing_for_tools(self, tool_names: List[str]) -> List[Tuple[str, CredentialSpec]]:
        """Required credentials that the given tools need but are not set."""
        needed: Dict[str, CredentialSpec] = {}
        for tool_name in tool_names:
            for cred_name in self._tool_to_creds.get(tool_name, []):
                needed.setdefault(cred_name, self._specs[cred_name])

        return [
            (cred_name, spec)
            for cred_name, spec in needed.items()
            if spec.required and not self.is_available(cred_name)
        ]

    def validate_for_tools(self, tool_names: List[str]) -> None:
        """Raise CredentialError when a tool in ``tool_names`` would run without credentials."""
        missing = self.get_missing_for_tools(tool_names)
        if missing:
            raise CredentialError(self._format_missing_error(missing, tool_names))

    def validate_startup(self) -> None:
        """Raise CredentialError when a startup-required credential is not set."""
        missing = [
            (cred_name, spec)
            for cred_name, spec in self._specs.items()
            if spec.startup_required and not self.is_available(cred_name)
        ]
        if missing:
            raise CredentialError(self._format_startup_error(missing))

    @staticmethod
    def _describe(spec: CredentialSpec) -> List[str]:
        lines = []
        if spec.description:
            lines.append(f"    {spec.description}")
        if spec.help_url:
            lines.append(f"    See: {spec.help_url}")
        lines.append(f"    Set via: export {spec.env_var}=your_value\n")
        return lines

    def _format_missing_error(
        self,
        missing: List[Tuple[str, CredentialSpec]],
        tool_names: List[str],
    ) -> str:
        lines = ["Missing Salesforce credentials", "The following tools cannot run:\n"]
        for _, spec in missing:
            affected = [t for t in tool_names if t in spec.tools]
            shown = ", ".join(affected[:3])
            if len(affected) > 3:
                shown += f" (+{len(affected) - 3} more)"
            lines.append(f"  {shown} requires {spec.env_var}")
            lines.extend(self._describe(spec))
        lines.append("Set these environment variables (or add them to .env) and retry.")
        return "\n".join(lines)

    def _format_startup_error(self, missing: List[Tuple[str, CredentialSpec]]) -> str:
        lines = ["Server startup failed: Missing required credentials"]
        for _, spec in missing:
            lines.append(f"  {spec.env_var}")
            lines.extend(self._describe(spec))
        lines.append("Set these environment variables and restart the server.")
        return "\n".join(lines)
