"""
Preferences consumed by the client: credentials, timeout and retry policy.

Values come from the environment (optionally a .env file) or are passed in
explicitly. The client never reads process-wide state on its own; build a
Preferences and hand it to RemoteInterface.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

DEFAULT_TIMEOUT_MS = 5500
DEFAULT_RETRY_COUNT = 3
DEFAULT_RETRY_INTERVAL_MS = 1000

_FALSY = {"0", "false", "no", "off", ""}


def load_env(dotenv_path: Optional[str] = None) -> None:
    """Load a .env file into os.environ without overriding real variables.

    With no explicit path, the nearest .env walking up from the CWD wins.
    """
    if dotenv_path is not None:
        load_dotenv(Path(dotenv_path))
        return
    here = Path.cwd()
    for p in (here, *here.parents):
        f = p / ".env"
        if f.exists():
            load_dotenv(f)
            break


def _flag(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() not in _FALSY


def _key(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


class Preferences:
    """Read-only settings for one RemoteInterface.

    branch_key is the primary credential, app_key the legacy fallback.
    timeout and retry_interval are milliseconds; retry_count bounds how many
    times a 5xx response is retried.
    """

    def __init__(self,
                 branch_key: Optional[str] = None,
                 app_key: Optional[str] = None,
                 timeout: int = DEFAULT_TIMEOUT_MS,
                 retry_count: int = DEFAULT_RETRY_COUNT,
                 retry_interval: int = DEFAULT_RETRY_INTERVAL_MS,
                 debug: bool = False,
                 warn_on_main_thread: bool = False):
        self.branch_key = branch_key
        self.app_key = app_key
        self.timeout = timeout
        self.retry_count = max(0, retry_count)
        self.retry_interval = max(0, retry_interval)
        self.debug = debug
        self.warn_on_main_thread = warn_on_main_thread

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None, **overrides) -> "Preferences":
        """Build preferences from BRANCH_* environment variables.

        Keyword overrides that are not None win over the environment.
        Raises ValueError when a numeric variable is not an integer.
        """
        load_env(dotenv_path)
        values = dict(
            branch_key=_key(os.getenv("BRANCH_KEY")),
            app_key=_key(os.getenv("BRANCH_APP_KEY")),
            timeout=int(os.getenv("BRANCH_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS))),
            retry_count=int(os.getenv("BRANCH_RETRY_COUNT", str(DEFAULT_RETRY_COUNT))),
            retry_interval=int(os.getenv("BRANCH_RETRY_INTERVAL_MS", str(DEFAULT_RETRY_INTERVAL_MS))),
            debug=_flag(os.getenv("BRANCH_DEBUG")),
            warn_on_main_thread=_flag(os.getenv("BRANCH_WARN_MAIN_THREAD")),
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def __repr__(self) -> str:
        # keys stay out of reprs and logs
        return (f"Preferences(branch_key={'set' if self.branch_key else None}, "
                f"app_key={'set' if self.app_key else None}, timeout={self.timeout}, "
                f"retry_count={self.retry_count}, retry_interval={self.retry_interval})")
