"""Cloud resources, their desired specifications and query filters."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from elava.tags import Tags, tags_from_dict


def _format_time(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_time(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    # The year-one instant marks an unset time.
    return None if parsed.year == 1 else parsed


@dataclass
class Resource:
    """A cloud resource as observed."""

    id: str = ""
    type: str = ""
    provider: str = ""
    region: str = ""
    account_id: str = ""
    name: str = ""
    status: str = ""
    tags: Tags = field(default_factory=Tags)
    created_at: datetime | None = None
    last_seen_at: datetime | None = None
    is_orphaned: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_managed(self) -> bool:
        """True when the resource is under management."""
        return self.tags.is_managed()

    def is_blessed(self) -> bool:
        """True when the resource is protected."""
        return self.tags.is_blessed()

    def matches(self, resource_filter: ResourceFilter) -> bool:
        """True when the resource satisfies every criterion of the filter."""
        f = resource_filter
        if f.type and self.type != f.type:
            return False
        if f.region and self.region != f.region:
            return False
        if f.provider and self.provider != f.provider:
            return False
        if f.ids and self.id not in f.ids:
            return False
        if f.owner and self.tags.get_owner() != f.owner:
            return False
        if f.managed and not self.tags.is_managed():
            return False
        return True

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form of the resource."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "provider": self.provider,
            "region": self.region,
            "account_id": self.account_id,
            "name": self.name,
            "status": self.status,
            "tags": self.tags.to_dict(),
            "created_at": _format_time(self.created_at),
            "last_seen_at": _format_time(self.last_seen_at),
            "is_orphaned": self.is_orphaned,
        }
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


def resource_from_dict(data: Mapping[str, Any]) -> Resource:
    """Build a resource from the form produced by Resource.to_dict."""
    return Resource(
        id=str(data.get("id") or ""),
        type=str(data.get("type") or ""),
        provider=str(data.get("provider") or ""),
        region=str(data.get("region") or ""),
        account_id=str(data.get("account_id") or ""),
        name=str(data.get("name") or ""),
        status=str(data.get("status") or ""),
        tags=tags_from_dict(data.get("tags")),
        created_at=_parse_time(data.get("created_at")),
        last_seen_at=_parse_time(data.get("last_seen_at")),
        is_orphaned=bool(data.get("is_orphaned", False)),
        metadata=dict(data.get("metadata") or {}),
    )


@dataclass
class ResourceSpec:
    """Desired configuration for one kind of resource."""

    type: str = ""
    count: int = 0
    size: str = ""
    region: str = ""
    tags: Tags = field(default_factory=Tags)


@dataclass(frozen=True)
class ResourceFilter:
    """Criteria for selecting resources; empty criteria match everything."""

    type: str = ""
    region: str = ""
    provider: str = ""
    owner: str = ""
    managed: bool = False
    ids: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "ids", tuple(self.ids))