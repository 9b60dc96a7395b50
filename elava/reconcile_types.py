"""Shared types of the reconciliation loop."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Iterable, Mapping, Protocol

from elava.decision import Decision
from elava.resource import Resource, ResourceFilter, ResourceSpec


class Observer(Protocol):
    """Polls a cloud provider for the resources that currently exist."""

    def observe(self, resource_filter: ResourceFilter) -> list[Resource]: ...


class Comparator(Protocol):
    """Finds the differences between current and desired state."""

    def compare(self, current: list[Resource], desired: list[Resource]) -> list[Diff]: ...


class DecisionMaker(Protocol):
    """Turns differences into decisions."""

    def decide(self, diffs: Iterable[Diff]) -> list[Decision]: ...


class Coordinator(Protocol):
    """Keeps several instances from acting on the same resources."""

    def claim_resources(self, resource_ids: Iterable[str], ttl: timedelta) -> None: ...

    def release_resources(self, resource_ids: Iterable[str]) -> None: ...

    def is_resource_claimed(self, resource_id: str) -> bool: ...


@dataclass
class Config:
    """What infrastructure should exist."""

    version: str = ""
    provider: str = ""
    region: str = ""
    resources: list[ResourceSpec] = field(default_factory=list)


class DiffType(str, Enum):
    """Category of a difference between current and desired state."""

    MISSING = "missing"
    UNWANTED = "unwanted"
    DRIFTED = "drifted"
    UNMANAGED = "unmanaged"


@dataclass
class Diff:
    """One difference between current and desired state."""

    type: DiffType
    resource_id: str
    current: Resource | None = None
    desired: Resource | None = None
    reason: str = ""


def _parse_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Claim:
    """A time-limited claim of a resource by one instance."""

    resource_id: str
    instance_id: str
    claimed_at: datetime
    expires_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "resource_id": self.resource_id,
            "instance_id": self.instance_id,
            "claimed_at": self.claimed_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }


def claim_from_dict(data: Mapping[str, Any]) -> Claim:
    """Build a claim from the form produced by Claim.to_dict; ValueError if malformed."""
    try:
        return Claim(
            resource_id=str(data["resource_id"]),
            instance_id=str(data["instance_id"]),
            claimed_at=_parse_time(data["claimed_at"]),
            expires_at=_parse_time(data["expires_at"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"malformed claim: {exc}") from exc


@dataclass
class ReconcileResult:
    """Outcome of one reconciliation cycle."""

    timestamp: datetime
    resources_found: int = 0
    diffs_detected: int = 0
    decisions_made: int = 0
    execution_errors: list[str] = field(default_factory=list)
    duration: timedelta = timedelta(0)
    decisions: list[Decision] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form; the duration is given in nanoseconds."""
        data: dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(),
            "resources_found": self.resources_found,
            "diffs_detected": self.diffs_detected,
            "decisions_made": self.decisions_made,
        }
        if self.execution_errors:
            data["execution_errors"] = list(self.execution_errors)
        data["duration"] = self.duration // timedelta(microseconds=1) * 1000
        data["decisions"] = [decision.to_dict() for decision in self.decisions]
        return data


@dataclass
class ReconcilerOptions:
    """Settings that shape reconciler behaviour."""

    dry_run: bool = False
    max_concurrency: int = 0
    claim_ttl: timedelta = timedelta(0)
    skip_destructive: bool = False