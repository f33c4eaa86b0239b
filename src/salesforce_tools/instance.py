"""
Resolve the Salesforce instance URL used as the base of every API call.

An explicitly configured instance URL always wins. Otherwise the OpenID Connect
identity token issued with the access token is decoded, and the tenant origin
is read from its ``profile`` or ``sub`` claim.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from typing import Any

from salesforce_tools.errors import ConfigurationError, MalformedTokenError

logger = logging.getLogger(__name__)

LOGIN_HOST = "https://login.salesforce.com"

_ORIGIN_RE = re.compile(r"^(https://[^/]+)")


def decode_id_token(id_token: str) -> dict[str, Any]:
    """Decode the payload segment of an identity token. The signature is not checked."""
    try:
        segment = id_token.split(".")[1]
        b64 = segment.replace("-", "+").replace("_", "/")
        b64 += "=" * (-len(b64) % 4)
        payload = json.loads(base64.b64decode(b64, validate=True).decode("utf-8"))
    except (IndexError, AttributeError, binascii.Error, ValueError) as e:
        raise MalformedTokenError(f"Failed to decode Salesforce idToken: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedTokenError("Salesforce idToken payload is not a JSON object")
    return payload


def _match_origin(claim: str, value: Any) -> str | None:
    if not isinstance(value, str):
        raise MalformedTokenError(f"Salesforce idToken claim '{claim}' is not a string")
    match = _ORIGIN_RE.match(value)
    return match.group(1) if match else None


def _instance_url_from_token(id_token: str) -> str | None:
    claims = decode_id_token(id_token)

    # profile takes precedence; sub is only read when profile is absent
    if claims.get("profile"):
        return _match_origin("profile", claims["profile"])
    if claims.get("sub"):
        origin = _match_origin("sub", claims["sub"])
        if origin and origin != LOGIN_HOST:
            return origin
    return None


def resolve_instance_url(
    explicit_url: str | None = None,
    id_token: str | None = None,
    log: logging.Logger | None = None,
) -> str:
    """
    Return the base URL for Salesforce API calls.

    Args:
        explicit_url: Configured instance URL; returned unchanged when non-empty
        id_token: Identity token whose claims may carry the instance origin
        log: Receives token decode diagnostics (defaults to this module's logger)

    Raises:
        ConfigurationError: When neither source yields a URL
    """
    if explicit_url:
        return explicit_url

    if id_token:
        try:
            origin = _instance_url_from_token(id_token)
        except MalformedTokenError as e:
            (log or logger).error("Could not read instance URL from idToken: %s", e)
            origin = None
        if origin:
            return origin

    raise ConfigurationError("Salesforce instance URL is required but not provided")
