"""
Synchronous REST client for the Branch attribution API.
"""

from .config import Preferences
from .constants import NO_BRANCH_KEY_STATUS, NO_CONNECTIVITY_STATUS, SDK_VERSION
from .link_data import BranchLinkData
from .remote import RemoteInterface
from .response import ServerResponse

__all__ = [
    "BranchLinkData",
    "NO_BRANCH_KEY_STATUS",
    "NO_CONNECTIVITY_STATUS",
    "Preferences",
    "RemoteInterface",
    "SDK_VERSION",
    "ServerResponse",
]
