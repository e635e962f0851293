"""
Synchronous RESTful client for the Branch API.

Every call blocks the calling thread for the connection, the transfer and any
retry sleeps, and always returns a ServerResponse. Failures become status
codes on the envelope; exception text only goes to the log.
"""

from __future__ import annotations
import json, logging, socket, threading, time
from typing import Any, Callable, Dict, Mapping, Optional, Tuple
import requests
from .config import Preferences
from .constants import IO_ERROR_STATUS, NO_BRANCH_KEY_STATUS, NO_CONNECTIVITY_STATUS
from .http import execute
from .link_data import BranchLinkData
from .params import build_get_params, build_post_body, resolve_credentials, to_query_string
from .response import ServerResponse, process_entity_for_json

logger = logging.getLogger(__name__)

Sender = Callable[[Tuple[str, str], int], Tuple[int, Optional[str]]]


def classify_exception(exc: BaseException) -> int:
    """Map a transport exception to the status reported on the envelope.

    Unreachable host or refused connection -> NO_CONNECTIVITY_STATUS.
    Timeouts, TLS failures, errors while streaming the response body
    (execute re-raises those as ChunkedEncodingError, even when requests
    reported a read timeout as ConnectionError) and every other I/O or
    request error -> 500.
    """
    if isinstance(exc, (requests.exceptions.Timeout, requests.exceptions.SSLError)):
        return IO_ERROR_STATUS
    if isinstance(exc, (requests.exceptions.ConnectionError, socket.gaierror, ConnectionError)):
        return NO_CONNECTIVITY_STATUS
    return IO_ERROR_STATUS


class RemoteInterface:
    """
    Sends GET/POST requests with the SDK identification fields attached.

    Responses with status >= 500 are retried up to prefs.retry_count times,
    sleeping prefs.retry_interval milliseconds between attempts. `sleep` and
    `session_factory` can be swapped out (tests pass fakes for both).

    Do not call from a UI or event-loop thread: calls block until the server
    answers or the timeouts expire.
    """

    def __init__(self, prefs: Optional[Preferences] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 session_factory: Callable[[], requests.Session] = requests.Session):
        self.prefs = prefs if prefs is not None else Preferences.from_env()
        self._sleep = sleep
        self._session_factory = session_factory

    def make_restful_get(self, url: str, params: Optional[Mapping[str, Any]] = None, tag: str = "",
                         timeout: Optional[int] = None, log: bool = True) -> ServerResponse:
        """GET `url` with the merged parameters appended as an unescaped query string."""
        timeout = self.prefs.timeout if timeout is None else timeout

        def send(credential: Tuple[str, str], retry_number: int) -> Tuple[int, Optional[str]]:
            full_url = url + to_query_string(build_get_params(params, credential, retry_number))
            if log:
                logger.debug(f"getting {full_url}")
            return execute("GET", full_url, timeout, session_factory=self._session_factory)

        return self._run(send, tag, log, None)

    def make_restful_post(self, body: Optional[Mapping[str, Any]], url: str, tag: str = "",
                          timeout: Optional[int] = None, link_data: Optional[BranchLinkData] = None,
                          log: bool = True) -> ServerResponse:
        """POST a copy of `body` plus the identification fields as JSON.

        link_data is handed back unchanged on the resulting ServerResponse.
        """
        timeout = self.prefs.timeout if timeout is None else timeout

        def send(credential: Tuple[str, str], retry_number: int) -> Tuple[int, Optional[str]]:
            payload = build_post_body(body, credential, retry_number)
            if log:
                logger.debug(f"posting to {url}")
                logger.debug(f"Post value = {_pretty(payload)}")
            return execute("POST", url, timeout, payload, session_factory=self._session_factory)

        return self._run(send, tag, log, link_data)

    def _run(self, send: Sender, tag: str, log: bool,
             link_data: Optional[BranchLinkData]) -> ServerResponse:
        self._check_thread()
        credential = resolve_credentials(self.prefs)
        if credential is None:
            if log:
                logger.warning("No branch key or app key configured; request not sent")
            return ServerResponse(tag, NO_BRANCH_KEY_STATUS, link_data)

        retry_number = 0
        while True:
            try:
                status, line = send(credential, retry_number)
            except Exception as e:
                status = classify_exception(e)
                if log:
                    kind = "Http connect" if status == NO_CONNECTIVITY_STATUS else "IO"
                    logger.warning(f"{kind} exception ({tag or 'untagged'}): {e}")
                return ServerResponse(tag, status, link_data)

            if status >= 500 and retry_number < self.prefs.retry_count:
                if log:
                    logger.debug(f"server returned {status}; retry {retry_number + 1}/{self.prefs.retry_count} "
                                 f"in {self.prefs.retry_interval}ms")
                self._sleep(self.prefs.retry_interval / 1000.0)
                retry_number += 1
                continue
            return process_entity_for_json(line, status, tag, log, link_data)

    def _check_thread(self) -> None:
        if self.prefs.warn_on_main_thread and threading.current_thread() is threading.main_thread():
            logger.warning("Branch Error: Don't call our synchronous methods on the main thread!!!")


def _pretty(payload: Dict[str, Any]) -> str:
    try:
        return json.dumps(payload, indent=4)
    except (TypeError, ValueError):
        return repr(payload)
