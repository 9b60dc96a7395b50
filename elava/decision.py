"""Decisions: actions to take on resources."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping


class Action(str, Enum):
    """Known decision actions."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    TERMINATE = "terminate"
    NOTIFY = "notify"
    TAG = "tag"
    NOOP = "noop"


_DESTRUCTIVE = frozenset({Action.DELETE.value, Action.TERMINATE.value})


class DecisionValidationError(ValueError):
    """A decision is missing a required field."""


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
    return None if parsed.year == 1 else parsed


@dataclass
class Decision:
    """An action to take on a resource, with the reason for it."""

    action: str = ""
    resource_id: str = ""
    resource_type: str = ""
    reason: str = ""
    is_blessed: bool = False
    created_at: datetime | None = None
    executed_at: datetime | None = None

    def __post_init__(self) -> None:
        if isinstance(self.action, Action):
            self.action = self.action.value

    def validate(self) -> Decision:
        """Check required fields; return the decision itself."""
        if not self.action:
            raise DecisionValidationError("decision action cannot be empty")
        # A create decision has no resource id yet.
        if self.action != Action.CREATE.value and not self.resource_id:
            raise DecisionValidationError("decision resource ID cannot be empty")
        if not self.reason:
            raise DecisionValidationError("decision reason cannot be empty")
        return self

    def is_destructive(self) -> bool:
        """True when the action removes resources."""
        return self.action in _DESTRUCTIVE

    def requires_confirmation(self) -> bool:
        """True when a user must confirm the action."""
        return self.is_destructive() or self.is_blessed

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form of the decision."""
        data: dict[str, Any] = {
            "action": self.action,
            "resource_id": self.resource_id,
        }
        if self.resource_type:
            data["resource_type"] = self.resource_type
        data["reason"] = self.reason
        if self.is_blessed:
            data["is_blessed"] = True
        data["created_at"] = _format_time(self.created_at)
        data["executed_at"] = _format_time(self.executed_at)
        return data


def decision_from_dict(data: Mapping[str, Any]) -> Decision:
    """Build a decision from the form produced by Decision.to_dict."""
    return Decision(
        action=str(data.get("action") or ""),
        resource_id=str(data.get("resource_id") or ""),
        resource_type=str(data.get("resource_type") or ""),
        reason=str(data.get("reason") or ""),
        is_blessed=bool(data.get("is_blessed", False)),
        created_at=_parse_time(data.get("created_at")),
        executed_at=_parse_time(data.get("executed_at")),
    )