"""
Request assembly: credential choice, mandatory fields, GET query strings.
"""

from __future__ import annotations
import copy, json
from typing import Any, Dict, Mapping, Optional, Tuple
from .config import Preferences
from .constants import APP_ID, BRANCH_KEY, RETRY_NUMBER_FIELD, SDK_FIELD, SDK_TAG


def resolve_credentials(prefs: Preferences) -> Optional[Tuple[str, str]]:
    """Return (field_name, key) for the request, or None if nothing is configured.

    The branch key wins; the app key is only used when no branch key is set.
    """
    if prefs.branch_key:
        return BRANCH_KEY, prefs.branch_key
    if prefs.app_key:
        return APP_ID, prefs.app_key
    return None


def add_common_params(params: Dict[str, Any], credential: Tuple[str, str], retry_number: int) -> Dict[str, Any]:
    field, key = credential
    params[SDK_FIELD] = SDK_TAG
    params[RETRY_NUMBER_FIELD] = retry_number
    params[field] = key
    return params


def _as_string(value: Any) -> str:
    # JSON-ish rendering so booleans and nulls read the same on the server
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def build_get_params(params: Optional[Mapping[str, Any]], credential: Tuple[str, str],
                     retry_number: int) -> Dict[str, Any]:
    """Mandatory fields first, then caller params (stringified) in their order."""
    out = add_common_params({}, credential, retry_number)
    for key, value in (params or {}).items():
        out[str(key)] = _as_string(value)
    return out


def build_post_body(body: Optional[Mapping[str, Any]], credential: Tuple[str, str],
                    retry_number: int) -> Dict[str, Any]:
    """Copy of the caller's body with the mandatory fields added on top.

    The caller's mapping (and anything nested in it) is never modified.
    """
    out: Dict[str, Any] = {}
    for key, value in (body or {}).items():
        out[key] = copy.deepcopy(value)
    return add_common_params(out, credential, retry_number)


def to_query_string(params: Mapping[str, Any]) -> str:
    """'?a=1&b=2' in insertion order.

    Keys and values are inserted verbatim: no percent-encoding is applied,
    matching the raw form the API has always received.
    """
    parts = []
    for i, (key, value) in enumerate(params.items()):
        parts.append(("?" if i == 0 else "&") + f"{key}={_as_string(value)}")
    return "".join(parts)
