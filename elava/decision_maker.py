"""Turning state differences into decisions."""

from __future__ import annotations

from typing import Iterable

from elava.decision import Action, Decision
from elava.reconcile_types import Diff, DiffType


class DecisionError(ValueError):
    """A difference cannot be turned into a decision."""


class SimpleDecisionMaker:
    """Decides one action per difference."""

    def __init__(self, skip_destructive: bool = False) -> None:
        self.skip_destructive = skip_destructive

    def decide(self, diffs: Iterable[Diff]) -> list[Decision]:
        """One decision per diff, in order; DecisionError on the first bad diff."""
        decisions: list[Decision] = []
        for diff in diffs:
            try:
                decisions.append(self.decide_single(diff))
            except DecisionError as exc:
                raise DecisionError(f"failed to decide for diff {diff.resource_id}: {exc}") from exc
        return decisions

    def decide_single(self, diff: Diff) -> Decision:
        """The decision for one diff."""
        try:
            diff_type = DiffType(diff.type)
        except ValueError:
            raise DecisionError(f"unknown diff type: {diff.type}") from None
        handlers = {
            DiffType.MISSING: self._decide_missing,
            DiffType.UNWANTED: self._decide_unwanted,
            DiffType.DRIFTED: self._decide_drifted,
            DiffType.UNMANAGED: self._decide_unmanaged,
        }
        return handlers[diff_type](diff)

    def _decide_missing(self, diff: Diff) -> Decision:
        if diff.desired is None:
            raise DecisionError("missing diff without desired state")
        return Decision(action=Action.CREATE, resource_id=diff.resource_id, reason=diff.reason)

    def _decide_unwanted(self, diff: Diff) -> Decision:
        if diff.current is None:
            raise DecisionError("unwanted diff without current state")
        if diff.current.is_blessed():
            return Decision(
                action=Action.NOTIFY,
                resource_id=diff.resource_id,
                reason="Resource is blessed and cannot be deleted automatically",
            )
        if self.skip_destructive:
            return Decision(
                action=Action.NOTIFY,
                resource_id=diff.resource_id,
                reason="Skipping destructive action due to configuration",
            )
        return Decision(action=Action.DELETE, resource_id=diff.resource_id, reason=diff.reason)

    def _decide_drifted(self, diff: Diff) -> Decision:
        if diff.current is None or diff.desired is None:
            raise DecisionError("drifted diff without both current and desired state")
        return Decision(action=Action.UPDATE, resource_id=diff.resource_id, reason=diff.reason)

    def _decide_unmanaged(self, diff: Diff) -> Decision:
        if diff.current is None:
            raise DecisionError("unmanaged diff without current state")
        return Decision(
            action=Action.NOTIFY,
            resource_id=diff.resource_id,
            reason="Resource exists but is not managed by Elava",
        )