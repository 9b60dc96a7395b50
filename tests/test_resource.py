from datetime import datetime, timezone

import pytest

from elava.resource import Resource, ResourceFilter, ResourceSpec, resource_from_dict
from elava.tags import Tags


@pytest.mark.parametrize(
    "resource, expected",
    [
        (Resource(tags=Tags(elava_owner="team-web")), True),
        (Resource(tags=Tags(elava_managed=True)), True),
        (Resource(tags=Tags(name="test")), False),
        (Resource(tags=Tags()), False),
    ],
)
def test_is_managed(resource, expected):
    assert resource.is_managed() is expected


@pytest.mark.parametrize(
    "resource, expected",
    [
        (Resource(tags=Tags(elava_blessed=True)), True),
        (Resource(tags=Tags(elava_blessed=False)), False),
        (Resource(tags=Tags(name="test")), False),
        (Resource(tags=Tags()), False),
    ],
)
def test_is_blessed(resource, expected):
    assert resource.is_blessed() is expected


TEST_RESOURCE = Resource(
    id="i-123456",
    type="ec2",
    provider="aws",
    region="us-east-1",
    tags=Tags(environment="prod", team="platform"),
)


@pytest.mark.parametrize(
    "resource_filter, expected",
    [
        (ResourceFilter(type="ec2"), True),
        (ResourceFilter(type="rds"), False),
        (ResourceFilter(region="us-east-1"), True),
        (ResourceFilter(provider="aws"), True),
        (ResourceFilter(ids=["i-123456", "i-789"]), True),
        (ResourceFilter(ids=["i-789", "i-456"]), False),
        (ResourceFilter(owner="platform"), True),
        (ResourceFilter(owner="web"), False),
        (ResourceFilter(type="ec2", region="us-east-1", owner="platform"), True),
        (ResourceFilter(), True),
    ],
)
def test_matches(resource_filter, expected):
    assert TEST_RESOURCE.matches(resource_filter) is expected


def test_matches_managed_filter():
    assert TEST_RESOURCE.matches(ResourceFilter(managed=True)) is False
    managed = Resource(id="i-1", tags=Tags(elava_managed=True))
    assert managed.matches(ResourceFilter(managed=True)) is True


def test_filter_ids_stored_as_tuple():
    assert ResourceFilter(ids=["a", "b"]).ids == ("a", "b")


def test_resource_dict_round_trip():
    created = datetime(2024, 1, 8, 10, 0, tzinfo=timezone.utc)
    resource = Resource(
        id="i-123456",
        type="ec2",
        provider="aws",
        region="us-east-1",
        name="web-server-1",
        status="running",
        created_at=created,
        last_seen_at=created,
        tags=Tags(elava_owner="team-web", environment="prod"),
        metadata={"instance_type": "m5.xlarge"},
    )
    assert resource_from_dict(resource.to_dict()) == resource


def test_to_dict_omits_empty_metadata():
    data = Resource(id="i-1").to_dict()
    assert "metadata" not in data
    assert data["created_at"] is None


def test_from_dict_reads_utc_suffix_and_zero_time():
    resource = resource_from_dict(
        {
            "id": "i-1",
            "created_at": "2024-01-08T10:00:00Z",
            "last_seen_at": "0001-01-01T00:00:00Z",
        }
    )
    assert resource.created_at == datetime(2024, 1, 8, 10, 0, tzinfo=timezone.utc)
    assert resource.last_seen_at is None


def test_resource_spec_defaults():
    spec = ResourceSpec(type="ec2")
    assert spec.count == 0
    assert spec.tags == Tags()