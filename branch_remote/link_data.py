"""
Link metadata attached to link-creation requests so a response can be matched
back to the link it describes. The client passes it through untouched.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, Optional


class BranchLinkData:
    def __init__(self,
                 tags: Optional[Iterable[str]] = None,
                 alias: Optional[str] = None,
                 type: int = 0,
                 duration: int = 0,
                 channel: Optional[str] = None,
                 feature: Optional[str] = None,
                 stage: Optional[str] = None,
                 params: Optional[Dict[str, Any]] = None):
        self.tags = list(tags) if tags else []
        self.alias = alias
        self.type = type
        self.duration = duration
        self.channel = channel
        self.feature = feature
        self.stage = stage
        self.params = dict(params) if params else {}

    def to_dict(self) -> Dict[str, Any]:
        """Only the fields that were set, in request-body form."""
        out: Dict[str, Any] = {}
        if self.tags:
            out["tags"] = list(self.tags)
        if self.alias:
            out["alias"] = self.alias
        if self.type:
            out["type"] = self.type
        if self.duration:
            out["duration"] = self.duration
        for key in ("channel", "feature", "stage"):
            value = getattr(self, key)
            if value:
                out[key] = value
        if self.params:
            out["data"] = dict(self.params)
        return out

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BranchLinkData):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(repr(sorted(self.to_dict().items(), key=lambda kv: kv[0])))

    def __repr__(self) -> str:
        return f"BranchLinkData({self.to_dict()!r})"
