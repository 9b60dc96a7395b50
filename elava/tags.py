"""Structured resource tags and their mapping to cloud-provider tag keys."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

# Field name -> provider tag key, in the order tags are emitted.
_PROVIDER_KEYS: dict[str, str] = {
    "elava_owner": "elava:owner",
    "elava_managed": "elava:managed",
    "elava_blessed": "elava:blessed",
    "elava_generation": "elava:generation",
    "elava_claimed_at": "elava:claimed_at",
    "name": "Name",
    "environment": "Environment",
    "team": "Team",
    "project": "Project",
    "cost_center": "CostCenter",
    "application": "Application",
    "owner": "Owner",
    "contact": "Contact",
    "created_by": "CreatedBy",
    "created_date": "CreatedDate",
}

_BOOL_FIELDS = frozenset({"elava_managed", "elava_blessed"})

# Lookup aliases accepted by Tags.get in addition to provider keys.
_KEY_ALIASES: dict[str, str] = {
    "elava_owner": "elava:owner",
    "elava_generation": "elava:generation",
    "elava_claimed_at": "elava:claimed_at",
    "name": "Name",
    "environment": "Environment",
    "team": "Team",
}


@dataclass
class Tags:
    """Explicit, typed set of the tags a resource may carry."""

    elava_owner: str = ""
    elava_managed: bool = False
    elava_blessed: bool = False
    elava_generation: str = ""
    elava_claimed_at: str = ""

    name: str = ""
    environment: str = ""
    team: str = ""
    project: str = ""
    cost_center: str = ""

    application: str = ""
    owner: str = ""
    contact: str = ""
    created_by: str = ""
    created_date: str = ""

    def is_managed(self) -> bool:
        """True when the resource is under management."""
        return bool(self.elava_owner) or self.elava_managed

    def is_blessed(self) -> bool:
        """True when the resource is protected from automatic deletion."""
        return self.elava_blessed

    def get_owner(self) -> str:
        """The managing owner, falling back to the team."""
        return self.elava_owner or self.team

    def get(self, key: str) -> str:
        """Value of a tag by provider key or a known alias; empty if absent."""
        tag_map = self.to_map()
        if key in tag_map:
            return tag_map[key]
        return tag_map.get(_KEY_ALIASES.get(key, key), "")

    def to_map(self) -> dict[str, str]:
        """Provider-style tag map holding only the tags that are set."""
        tag_map: dict[str, str] = {}
        for field_name, provider_key in _PROVIDER_KEYS.items():
            value = getattr(self, field_name)
            if field_name in _BOOL_FIELDS:
                if value:
                    tag_map[provider_key] = "true"
            elif value:
                tag_map[provider_key] = value
        return tag_map

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form holding only the fields that are set."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name)}


def tags_from_map(tag_map: Mapping[str, str]) -> Tags:
    """Build tags from a provider-style tag map; unknown keys are ignored."""
    values: dict[str, Any] = {}
    for field_name, provider_key in _PROVIDER_KEYS.items():
        if provider_key not in tag_map:
            continue
        value = tag_map[provider_key]
        if field_name in _BOOL_FIELDS:
            values[field_name] = value == "true"
        else:
            values[field_name] = value
    return Tags(**values)


def tags_from_dict(data: Mapping[str, Any] | None) -> Tags:
    """Build tags from the form produced by Tags.to_dict."""
    if not data:
        return Tags()
    values: dict[str, Any] = {}
    for f in fields(Tags):
        if f.name in data and data[f.name] is not None:
            raw = data[f.name]
            values[f.name] = bool(raw) if f.name in _BOOL_FIELDS else str(raw)
    return Tags(**values)