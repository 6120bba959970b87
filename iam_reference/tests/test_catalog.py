from __future__ import annotations

import dataclasses

import pytest

from iam_reference.policy_catalog.catalog import Catalog
from iam_reference.policy_catalog.models import (
    ActionRecord,
    ResourceTypeRecord,
    ResourceTypeReference,
    Service,
)


def test_build_sorts_services_by_name(s3_service: Service, ec2_service: Service) -> None:
    lower = Service(url="u", name="amazon lowercase", prefix="low")
    catalog = Catalog.build([s3_service, lower, ec2_service])
    assert [service.name for service in catalog] == ["Amazon EC2", "Amazon S3", "amazon lowercase"]
    assert len(catalog) == 3
    assert catalog.action_count == 6


def test_catalog_is_frozen(s3_service: Service) -> None:
    catalog = Catalog.build([s3_service])
    with pytest.raises(dataclasses.FrozenInstanceError):
        catalog.services = ()  # type: ignore[misc]
    assert isinstance(catalog.services, tuple)


def test_referenced_resource_types_follow_reference_order(s3_service: Service) -> None:
    catalog = Catalog.build([s3_service])
    action = ActionRecord(
        name="Copy",
        resource_type_refs=(
            ResourceTypeReference("object"),
            ResourceTypeReference("missing"),
            ResourceTypeReference("bucket"),
        ),
    )
    names = [rt.name for rt in catalog.resource_types_referenced_by(s3_service, action)]
    assert names == ["object", "bucket"]


def test_co_named_resource_types_are_all_returned() -> None:
    service = Service(
        url="u",
        name="Dup",
        prefix="dup",
        resource_types=(
            ResourceTypeRecord("thing", arn="arn:one"),
            ResourceTypeRecord("thing", arn="arn:two"),
        ),
    )
    catalog = Catalog.build([service])
    action = ActionRecord(name="Use", resource_type_refs=(ResourceTypeReference("thing"),))
    arns = [rt.arn for rt in catalog.resource_types_referenced_by(service, action)]
    assert arns == ["arn:one", "arn:two"]


def test_unknown_condition_keys_are_skipped(s3_service: Service) -> None:
    catalog = Catalog.build([s3_service])
    keys = catalog.condition_keys_named(s3_service, ["s3:unknown-key", "s3:x-amz-acl"])
    assert [key.name for key in keys] == ["s3:x-amz-acl"]


def test_relevant_condition_keys_include_resource_type_keys(s3_service: Service) -> None:
    catalog = Catalog.build([s3_service])
    create_bucket = s3_service.actions[0]
    assert catalog.relevant_condition_key_names(s3_service, create_bucket) == [
        "s3:x-amz-acl",
        "aws:ResourceTag/${TagKey}",
    ]


def test_services_with_prefix(s3_service: Service, ec2_service: Service) -> None:
    catalog = Catalog.build([s3_service, ec2_service])
    assert catalog.services_with_prefix("s3") == [s3_service]
    assert catalog.services_with_prefix("iam") == []


def test_queries_work_for_equal_service_copies(s3_service: Service) -> None:
    catalog = Catalog.build([s3_service])
    copy = dataclasses.replace(s3_service)
    action = s3_service.actions[0]
    assert catalog.resource_types_referenced_by(copy, action) == [s3_service.resource_types[0]]
