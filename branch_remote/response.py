"""
Response envelope and the first-line JSON parser.

The API answers with a single line of JSON, either an object or an array.
Only that first line is ever read; anything after it is ignored.
"""

from __future__ import annotations
import json, logging
from typing import Any, Dict, List, Optional, Union
from .link_data import BranchLinkData

logger = logging.getLogger(__name__)

Payload = Union[Dict[str, Any], List[Any]]


class ServerResponse:
    """Result of one logical request. Always returned, never raised.

    status_code is the HTTP status, or one of the negative client-local
    sentinels. The payload is a dict, a list, or absent (None).
    """

    def __init__(self, tag: str, status_code: int, link_data: Optional[BranchLinkData] = None):
        self.tag = tag
        self.status_code = status_code
        self.link_data = link_data
        self._post: Optional[Payload] = None

    def set_post(self, post: Optional[Payload]) -> None:
        if post is not None and not isinstance(post, (dict, list)):
            raise TypeError(f"payload must be a dict or list, got {type(post).__name__}")
        self._post = post

    @property
    def post(self) -> Optional[Payload]:
        return self._post

    def get_object(self) -> Optional[Dict[str, Any]]:
        return self._post if isinstance(self._post, dict) else None

    def get_array(self) -> Optional[List[Any]]:
        return self._post if isinstance(self._post, list) else None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "status_code": self.status_code,
            "post": self._post,
            "link_data": self.link_data.to_dict() if self.link_data is not None else None,
        }

    def __repr__(self) -> str:
        kind = "object" if isinstance(self._post, dict) else "array" if isinstance(self._post, list) else "none"
        return f"ServerResponse(tag={self.tag!r}, status_code={self.status_code}, post={kind})"


def _decode(line: str) -> Any:
    try:
        return json.loads(line)
    except ValueError:
        return None


def process_entity_for_json(line: Optional[str], status_code: int, tag: str, log: bool = True,
                            link_data: Optional[BranchLinkData] = None) -> ServerResponse:
    """Wrap the first body line in a ServerResponse.

    Tries a JSON object first, then a JSON array. When neither decodes, the
    payload stays absent and the status code is kept as received.
    """
    result = ServerResponse(tag, status_code, link_data)
    if log:
        logger.debug(f"returned {line}")
    if line is None:
        return result

    value = _decode(line)
    if isinstance(value, (dict, list)):
        result.set_post(value)
    elif log:
        logger.debug(f"JSON exception: could not decode {line[:200]!r} as object or array")
    return result
