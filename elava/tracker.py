"""Detection of resources that lack ownership, project or management tracking."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Sequence

from elava.resource import Resource

_IAC_INDICATORS = (
    "terraform",
    "cloudformation",
    "cdk",
    "pulumi",
    "ansible",
    "managed-by",
    "created-by",
    "stack-name",
)
_DEAD_STATES = frozenset({"stopped", "terminated", "shutting-down"})
_DEAD_AFTER = timedelta(days=7)


@dataclass(frozen=True)
class TrackingRule:
    """A named check that flags a resource as untracked when it returns True."""

    name: str
    description: str
    check: Callable[[Resource], bool]
    severity: str  # "low", "medium" or "high"


@dataclass
class UntrackedResource:
    """A resource that failed at least one tracking rule."""

    resource: Resource
    issues: list[str] = field(default_factory=list)
    risk: str = "low"
    action: str = "investigate"


def has_iac_tags(resource: Resource) -> bool:
    """True when any descriptive tag mentions an infrastructure-as-code tool."""
    tags = resource.tags
    text = " ".join((tags.name, tags.project, tags.environment, tags.elava_owner)).lower()
    return any(indicator in text for indicator in _IAC_INDICATORS)


def _missing_owner(resource: Resource) -> bool:
    return not resource.tags.elava_owner and not resource.tags.team


def _missing_project(resource: Resource) -> bool:
    return not resource.tags.project and not resource.tags.name


def _no_iac_management(resource: Resource) -> bool:
    if resource.tags.elava_managed:
        return False
    return not has_iac_tags(resource)


def _dead_resource(resource: Resource) -> bool:
    if resource.status not in _DEAD_STATES or resource.created_at is None:
        return False
    created = resource.created_at
    now = datetime.now(timezone.utc) if created.tzinfo is not None else datetime.now()
    return now - created > _DEAD_AFTER


def default_rules() -> list[TrackingRule]:
    """The standard tracking rules."""
    return [
        TrackingRule("missing_owner", "No owner or team assigned", _missing_owner, "high"),
        TrackingRule("missing_project", "No project or name tags", _missing_project, "medium"),
        TrackingRule("no_iac_management", "Not managed by IaC tools", _no_iac_management, "medium"),
        TrackingRule("dead_resource", "Stopped/terminated but still exists", _dead_resource, "high"),
    ]


class Tracker:
    """Applies tracking rules to resources."""

    def __init__(self, rules: Sequence[TrackingRule] | None = None) -> None:
        self.rules = list(rules) if rules is not None else default_rules()

    def tracking_issues(self, resource: Resource) -> list[str]:
        """Descriptions of every rule the resource fails."""
        return [rule.description for rule in self.rules if rule.check(resource)]

    def find_untracked(self, resources: Iterable[Resource]) -> list[UntrackedResource]:
        """Resources failing any rule, with their issues, risk and suggested action."""
        untracked: list[UntrackedResource] = []
        for resource in resources:
            issues = self.tracking_issues(resource)
            if issues:
                untracked.append(
                    UntrackedResource(
                        resource=resource,
                        issues=issues,
                        risk=self.assess_risk(resource),
                        action=self.recommend_action(resource),
                    )
                )
        return untracked

    def assess_risk(self, resource: Resource) -> str:
        """Risk level of an untracked resource: "high", "medium" or "low"."""
        if resource.type == "rds" or resource.status == "stopped":
            return "high"
        if resource.type == "ec2" and not resource.tags.elava_owner:
            return "medium"
        return "low"

    def recommend_action(self, resource: Resource) -> str:
        """What to do about an untracked resource."""
        if resource.status in ("stopped", "terminated"):
            return "cleanup"
        if not resource.tags.elava_owner and not resource.tags.team:
            return "tag_owner"
        if not has_iac_tags(resource):
            return "verify_management"
        return "investigate"


def scan_for_untracked(resources: Iterable[Resource]) -> list[UntrackedResource]:
    """Find untracked resources with the default rules."""
    return Tracker().find_untracked(resources)