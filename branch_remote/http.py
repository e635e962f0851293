"""
HTTP transport: one request per call, one session per request.

No pooling: each attempt opens its own requests.Session and closes it
(together with the response) before returning, whatever happens.
"""

from __future__ import annotations
import json
from typing import Any, Callable, Dict, Optional, Tuple
import requests
from .constants import DEFAULT_TIMEOUT

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}
READ_CHUNK = 512


def timeout_seconds(timeout_ms: Optional[int]) -> Tuple[float, float]:
    """(connect, read) timeout for requests; <= 0 falls back to DEFAULT_TIMEOUT."""
    if timeout_ms is None or timeout_ms <= 0:
        timeout_ms = DEFAULT_TIMEOUT
    sec = timeout_ms / 1000.0
    return sec, sec


def _ensure_encoding(response: requests.Response) -> None:
    # the body is UTF-8 unless the server names a charset
    content_type = response.headers.get("Content-Type", "") or ""
    if response.encoding is None or "charset=" not in content_type.lower():
        response.encoding = "utf-8"


def read_first_line(response: requests.Response) -> Optional[str]:
    """First line of the body, or None when the body is empty.

    A line ends at the first \\n or \\r only. Other Unicode line separators
    (U+2028 and friends) are legal inside JSON strings and are kept.
    Reading stops as soon as the terminator arrives.
    """
    _ensure_encoding(response)
    parts = []
    seen = False
    for chunk in response.iter_content(chunk_size=READ_CHUNK, decode_unicode=True):
        if not chunk:
            continue
        seen = True
        cut = min((i for i in (chunk.find("\n"), chunk.find("\r")) if i >= 0), default=-1)
        if cut >= 0:
            parts.append(chunk[:cut])
            break
        parts.append(chunk)
    return "".join(parts) if seen else None


def execute(method: str, url: str, timeout_ms: Optional[int],
            body: Optional[Dict[str, Any]] = None,
            session_factory: Callable[[], requests.Session] = requests.Session) -> Tuple[int, Optional[str]]:
    """Send one request and return (status_code, first_line).

    For POST the body is sent as JSON with JSON content headers. Error bodies
    (4xx/5xx) are read the same way as success bodies. Transport errors
    propagate to the caller for classification; failures while reading the
    body surface as requests.exceptions.ChunkedEncodingError.
    """
    kwargs: Dict[str, Any] = {"timeout": timeout_seconds(timeout_ms), "stream": True}
    if method.upper() == "POST":
        kwargs["data"] = json.dumps(body if body is not None else {}).encode("utf-8")
        kwargs["headers"] = dict(JSON_HEADERS)

    session = session_factory()
    response = None
    try:
        response = session.request(method.upper(), url, **kwargs)
        try:
            line = read_first_line(response)
        except (requests.exceptions.ConnectionError, ConnectionError) as e:
            # requests raises ConnectionError for a read timeout mid-body;
            # past the status line that is a stream fault, not an unreachable host
            raise requests.exceptions.ChunkedEncodingError(f"error reading response body: {e}") from e
        return response.status_code, line
    finally:
        if response is not None:
            response.close()
        session.close()
