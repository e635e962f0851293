"""
Wire-level constants shared by the request builders and the client.
"""

from __future__ import annotations

SDK_PLATFORM = "android"
SDK_VERSION = "1.10.1"
SDK_TAG = f"{SDK_PLATFORM}{SDK_VERSION}"

# Field names written into every outgoing request
SDK_FIELD = "sdk"
RETRY_NUMBER_FIELD = "retryNumber"
BRANCH_KEY = "branch_key"
APP_ID = "app_id"

# Client-local statuses, disjoint from HTTP codes
NO_CONNECTIVITY_STATUS = -1009
NO_BRANCH_KEY_STATUS = -1234
IO_ERROR_STATUS = 500

DEFAULT_TIMEOUT = 3000  # ms, used when a caller asks for <= 0
