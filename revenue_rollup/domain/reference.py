"""Static reference tables: target revenue and stack/manager metadata per ET."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from revenue_rollup.domain.tags import is_combined_tag, normalize_tag, split_combined_tag


DEFAULT_TARGET_REVENUE: dict[str, str] = {
    "JSG21": "$1100",
    "P24": "$1100",
    "JSG41": "$1100",
    "CM41": "JSG41",
    "JSG34": "$1100",
    "JSG36": "$800",
    "C36": "JSG36",
    "JSG26": "$1800",
    "JSG29": "$1800",
    "JSG30PM": "$1800",
    "JSG22": "0",
    "JSG32": "$1100",
    "EX32": "JSG32",
    "JSG20": "$1800",
    "JSG38": "$1100",
    "JSG40": "$1100",
    "JSG43": "$750",
    "JSG44": "$1100",
}

DEFAULT_TAG_INFO: dict[str, dict[str, str]] = {
    "JSG21": {"stack": "S1", "manager": "Aditya G."},
    "24MC": {"stack": "S1", "manager": "Abhay S.", "type": "COM"},
    "P24": {"stack": "S1", "manager": "Abhay S."},
    "JSG41": {"stack": "S1", "manager": "Aditya G."},
    "CM41": {"stack": "S1", "manager": "Aditya G."},
    "JSG34": {"stack": "S4", "manager": "Satyam S."},
    "JSG36": {"stack": "S6", "manager": "Nikhil T."},
    "C36": {"stack": "S6", "manager": "Nikhil T."},
    "JSG26": {"stack": "S7", "manager": "Nikhil T."},
    "JSG29": {"stack": "S7", "manager": "Keshav T."},
    "JSG30PM": {"stack": "S7", "manager": "Aditya S."},
    "C18": {"stack": "S10", "manager": "Aditya S.", "type": "COM"},
    "22MB": {"stack": "S10", "manager": "Keshav T.", "type": "N-C"},
    "JSG22": {"stack": "S10", "manager": "Kaif K."},
    "JSG32": {"stack": "S11", "manager": "Kaif K."},
    "EX32": {"stack": "S11", "manager": "Kaif K."},
    "JSG20": {"stack": "S11", "manager": "Harsh G."},
    "JSG44": {"stack": "S11", "manager": "Harsh G."},
    "JSG38": {"stack": "S12", "manager": "Kaif K."},
    "JSG40": {"stack": "S12", "manager": "Keshav T."},
    "JSG43": {"stack": "S13", "manager": "Aditya S."},
}


@dataclass(frozen=True)
class TagInfo:
    stack: str
    manager: str
    type: str | None = None


def _freeze_targets(raw: Mapping[str, Any]) -> Mapping[str, str]:
    return MappingProxyType({normalize_tag(key): str(value) for key, value in raw.items()})


def _freeze_tag_info(raw: Mapping[str, Mapping[str, Any]]) -> Mapping[str, TagInfo]:
    frozen: dict[str, TagInfo] = {}
    for key, info in raw.items():
        frozen[normalize_tag(key)] = TagInfo(
            stack=str(info.get("stack", "")),
            manager=str(info.get("manager", "")),
            type=str(info["type"]) if info.get("type") else None,
        )
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class ReferenceTables:
    """Read-only lookup tables, loaded once and passed to whoever needs them."""

    target_revenue: Mapping[str, str] = field(default_factory=lambda: _freeze_targets({}))
    tag_info: Mapping[str, TagInfo] = field(default_factory=lambda: _freeze_tag_info({}))

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ReferenceTables":
        targets = payload.get("target_revenue", {})
        tag_info = payload.get("tag_info", {})
        if not isinstance(targets, Mapping) or not isinstance(tag_info, Mapping):
            raise ValueError("Reference tables require 'target_revenue' and 'tag_info' objects")
        return cls(target_revenue=_freeze_targets(targets), tag_info=_freeze_tag_info(tag_info))

    @classmethod
    def default(cls) -> "ReferenceTables":
        return cls.from_mapping({"target_revenue": DEFAULT_TARGET_REVENUE, "tag_info": DEFAULT_TAG_INFO})

    def lookup_key(self, tag_name: str) -> str:
        """Key used for a tag name; combined names fall back to their first constituent."""
        key = normalize_tag(tag_name)
        if is_combined_tag(key):
            parts = split_combined_tag(key)
            if parts:
                return parts[0]
        return key

    def raw_target(self, tag_name: str) -> str | None:
        if not tag_name or not tag_name.strip():
            return None
        return self.target_revenue.get(self.lookup_key(tag_name))

    def tag_info_for(self, tag_name: str) -> TagInfo | None:
        if not tag_name or not tag_name.strip():
            return None
        return self.tag_info.get(self.lookup_key(tag_name))
