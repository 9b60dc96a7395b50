import pytest

from elava.decision_maker import DecisionError, SimpleDecisionMaker
from elava.reconcile_types import Diff, DiffType
from elava.resource import Resource
from elava.tags import Tags


def _unwanted(resource_id="i-unwanted", blessed=False):
    return Diff(
        type=DiffType.UNWANTED,
        resource_id=resource_id,
        current=Resource(id=resource_id, type="ec2", tags=Tags(elava_managed=True, elava_blessed=blessed)),
        reason="Resource not in config",
    )


@pytest.mark.parametrize(
    "skip_destructive, diffs, expected_actions",
    [
        (False, [], []),
        (
            False,
            [
                Diff(
                    type=DiffType.MISSING,
                    resource_id="i-missing",
                    desired=Resource(id="i-missing", type="ec2", tags=Tags(elava_managed=True)),
                    reason="Resource specified in config but not found",
                )
            ],
            ["create"],
        ),
        (False, [_unwanted()], ["delete"]),
        (True, [_unwanted()], ["notify"]),
        (False, [_unwanted("i-blessed", blessed=True)], ["notify"]),
        (
            False,
            [
                Diff(
                    type=DiffType.DRIFTED,
                    resource_id="i-drifted",
                    current=Resource(id="i-drifted", type="ec2", tags=Tags(environment="prod")),
                    desired=Resource(id="i-drifted", type="ec2", tags=Tags(environment="staging")),
                    reason="Configuration differs",
                )
            ],
            ["update"],
        ),
        (
            False,
            [
                Diff(
                    type=DiffType.UNMANAGED,
                    resource_id="i-unmanaged",
                    current=Resource(id="i-unmanaged", type="ec2"),
                    reason="Not managed by Elava",
                )
            ],
            ["notify"],
        ),
    ],
    ids=["no diffs", "missing", "unwanted", "unwanted skipped", "blessed", "drifted", "unmanaged"],
)
def test_decide(skip_destructive, diffs, expected_actions):
    decisions = SimpleDecisionMaker(skip_destructive).decide(diffs)
    assert [d.action for d in decisions] == expected_actions


@pytest.mark.parametrize(
    "diff, expected_action",
    [
        (
            Diff(
                type=DiffType.MISSING,
                resource_id="i-missing",
                desired=Resource(id="i-missing", type="ec2"),
                reason="Test missing",
            ),
            "create",
        ),
        (
            Diff(
                type=DiffType.UNWANTED,
                resource_id="i-unwanted",
                current=Resource(id="i-unwanted", type="ec2", tags=Tags(elava_managed=True)),
                reason="Test unwanted",
            ),
            "delete",
        ),
        (
            Diff(
                type=DiffType.DRIFTED,
                resource_id="i-drifted",
                current=Resource(id="i-drifted", type="ec2"),
                desired=Resource(id="i-drifted", type="ec2"),
                reason="Test drifted",
            ),
            "update",
        ),
        (
            Diff(
                type=DiffType.UNMANAGED,
                resource_id="i-unmanaged",
                current=Resource(id="i-unmanaged", type="ec2"),
                reason="Test unmanaged",
            ),
            "notify",
        ),
    ],
    ids=["missing", "unwanted", "drifted", "unmanaged"],
)
def test_decide_single(diff, expected_action):
    decision = SimpleDecisionMaker(False).decide_single(diff)
    assert decision.action == expected_action
    assert decision.resource_id == diff.resource_id


def test_missing_without_desired_state():
    diff = Diff(type=DiffType.MISSING, resource_id="i-missing", reason="Test missing")
    with pytest.raises(DecisionError, match="missing diff without desired state"):
        SimpleDecisionMaker(False).decide_single(diff)


def test_missing_keeps_reason():
    diff = Diff(
        type=DiffType.MISSING,
        resource_id="i-test",
        desired=Resource(id="i-test", type="ec2", tags=Tags(elava_managed=True)),
        reason="Test reason",
    )
    decision = SimpleDecisionMaker(False).decide_single(diff)
    assert decision.action == "create"
    assert decision.resource_id == "i-test"
    assert decision.reason == "Test reason"


def test_blessed_unwanted_notifies():
    decision = SimpleDecisionMaker(False).decide_single(_unwanted("i-blessed", blessed=True))
    assert decision.action == "notify"
    assert decision.reason == "Resource is blessed and cannot be deleted automatically"


def test_skip_destructive_reason():
    decision = SimpleDecisionMaker(True).decide_single(_unwanted())
    assert decision.reason == "Skipping destructive action due to configuration"


def test_unmanaged_reason():
    diff = Diff(type=DiffType.UNMANAGED, resource_id="x", current=Resource(id="x"), reason="ignored")
    assert SimpleDecisionMaker().decide_single(diff).reason == "Resource exists but is not managed by Elava"


def test_unwanted_without_current_state():
    with pytest.raises(DecisionError, match="unwanted diff without current state"):
        SimpleDecisionMaker().decide_single(Diff(type=DiffType.UNWANTED, resource_id="x"))


def test_drifted_without_both_states():
    diff = Diff(type=DiffType.DRIFTED, resource_id="x", current=Resource(id="x"))
    with pytest.raises(DecisionError, match="drifted diff without both"):
        SimpleDecisionMaker().decide_single(diff)


def test_unmanaged_without_current_state():
    with pytest.raises(DecisionError, match="unmanaged diff without current state"):
        SimpleDecisionMaker().decide_single(Diff(type=DiffType.UNMANAGED, resource_id="x"))


def test_unknown_diff_type():
    with pytest.raises(DecisionError, match="unknown diff type: bogus"):
        SimpleDecisionMaker().decide_single(Diff(type="bogus", resource_id="x"))


def test_decide_wraps_error_with_resource_id():
    diffs = [_unwanted("ok"), Diff(type=DiffType.MISSING, resource_id="bad")]
    with pytest.raises(DecisionError, match="failed to decide for diff bad"):
        SimpleDecisionMaker().decide(diffs)