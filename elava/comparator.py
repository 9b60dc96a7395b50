"""Comparison of observed resources with the desired state."""

from __future__ import annotations

from typing import Iterable

from elava.reconcile_types import Diff, DiffType
from elava.resource import Resource
from elava.tags import Tags


def build_resource_map(resources: Iterable[Resource]) -> dict[str, Resource]:
    """Resources keyed by id; a later resource with the same id wins."""
    return {resource.id: resource for resource in resources}


def is_tags_drifted(current: Tags, desired: Tags) -> bool:
    """True when management or standard infrastructure tags differ."""
    return (
        current.elava_owner != desired.elava_owner
        or current.elava_managed != desired.elava_managed
        or current.environment != desired.environment
        or current.team != desired.team
        or current.project != desired.project
    )


def is_drifted(current: Resource, desired: Resource) -> bool:
    """True when a resource differs from its desired form."""
    if current.type != desired.type:
        return True
    if current.provider != desired.provider:
        return True
    if current.region != desired.region:
        return True
    return is_tags_drifted(current.tags, desired.tags)


class SimpleComparator:
    """Finds missing, unwanted, unmanaged and drifted resources."""

    def compare(self, current: Iterable[Resource], desired: Iterable[Resource]) -> list[Diff]:
        current_map = build_resource_map(current)
        desired_map = build_resource_map(desired)
        diffs: list[Diff] = []

        for resource_id, wanted in desired_map.items():
            if resource_id not in current_map:
                diffs.append(
                    Diff(
                        type=DiffType.MISSING,
                        resource_id=resource_id,
                        desired=wanted,
                        reason="Resource specified in config but not found in cloud",
                    )
                )

        for resource_id, found in current_map.items():
            if resource_id in desired_map:
                continue
            if found.is_managed():
                diffs.append(
                    Diff(
                        type=DiffType.UNWANTED,
                        resource_id=resource_id,
                        current=found,
                        reason="Resource managed by Elava but not in current config",
                    )
                )
            else:
                diffs.append(
                    Diff(
                        type=DiffType.UNMANAGED,
                        resource_id=resource_id,
                        current=found,
                        reason="Resource exists but not managed by Elava",
                    )
                )

        for resource_id, wanted in desired_map.items():
            found = current_map.get(resource_id)
            if found is not None and is_drifted(found, wanted):
                diffs.append(
                    Diff(
                        type=DiffType.DRIFTED,
                        resource_id=resource_id,
                        current=found,
                        desired=wanted,
                        reason="Resource configuration differs from desired state",
                    )
                )

        return diffs