from __future__ import annotations

import pytest

from iam_reference.policy_catalog.models import (
    ActionRecord,
    ConditionKeyRecord,
    ResourceTypeRecord,
    ResourceTypeReference,
    Service,
)

S3_PAGE = """<html><head>
<link rel="canonical" href="https://docs.example.com/list_amazons3.html"/>
</head><body><div id="main-content">
<p>Amazon S3 (service prefix: <code>s3</code>) provides the following resources.</p>
<div class="table-container"><table>
<thead><tr><th>Actions</th><th>Description</th><th>Access level</th>
<th>Resource types (*required)</th><th>Condition keys</th><th>Dependent actions</th></tr></thead>
<tbody>
<tr><td rowspan="2">GetObject</td><td rowspan="2">Grants permission to read</td>
<td rowspan="2">Read</td><td>
<p>object*</p>
</td><td></td><td></td></tr>
<tr><td>
<p>accesspoint</p>
</td><td>
<p>s3:AccessPointNetworkOrigin</p>
</td><td></td></tr>
<tr><td>PutObject</td><td>Grants permission to add an object</td><td>Write</td>
<td>
<p>object*</p>
</td><td>
<p>s3:x-amz-acl</p>
<p>s3:x-amz-server-side-encryption</p>
</td><td>
<p>s3:PutObjectAcl</p>
</td></tr>
</tbody></table></div>
<div class="table-container"><table>
<thead><tr><th>Resource types</th><th>ARN</th><th>Condition keys</th></tr></thead>
<tbody><tr><td>object</td><td>arn:${Partition}:s3:::${BucketName}/${ObjectName}</td><td></td></tr></tbody>
</table></div>
<div class="table-container"><table>
<thead><tr><th>Condition keys</th><th>Description</th><th>Type</th></tr></thead>
<tbody><tr><td>s3:x-amz-acl</td><td>Filters by canned ACL</td><td>String</td></tr></tbody>
</table></div>
<div class="table-container"><table>
<thead><tr><th>Unrelated</th></tr></thead><tbody><tr><td>ignored</td></tr></tbody>
</table></div>
</div></body></html>
"""

EC2_PAGE = """<html><body><div id="main-content">
<p>Amazon EC2 (service prefix: <code>ec2</code>) provides the following resources.</p>
<div class="table-container"><table>
<tr><th>Actions</th></tr>
<tr><td>RunInstances</td><td>Launch</td><td>Write</td><td></td><td></td><td></td></tr>
</table></div>
</div></body></html>
"""


@pytest.fixture()
def s3_page() -> str:
    return S3_PAGE


@pytest.fixture()
def ec2_page() -> str:
    return EC2_PAGE


@pytest.fixture()
def s3_service() -> Service:
    return Service(
        url="https://docs.example.com/list_amazons3.html",
        name="Amazon S3",
        prefix="s3",
        actions=(
            ActionRecord(
                name="CreateBucket",
                description="Grants permission to create a new bucket",
                access_level="Write",
                resource_type_refs=(ResourceTypeReference("bucket", required=True),),
                condition_key_names=("s3:x-amz-acl",),
            ),
            ActionRecord(
                name="DeleteBucket",
                description="Grants permission to delete the bucket",
                access_level="Write",
                resource_type_refs=(ResourceTypeReference("bucket", required=True),),
            ),
            ActionRecord(
                name="PutObject",
                description="Grants permission to add an object to a bucket",
                access_level="Write",
                resource_type_refs=(ResourceTypeReference("bucket"),),
                condition_key_names=("s3:x-amz-acl",),
            ),
            ActionRecord(
                name="PutObject",
                description="Second table fragment",
                access_level="Write",
                resource_type_refs=(ResourceTypeReference("object", required=True),),
                condition_key_names=("s3:x-amz-acl", "s3:unknown-key"),
                dependent_action_names=("s3:PutObjectAcl",),
            ),
        ),
        resource_types=(
            ResourceTypeRecord(
                name="bucket",
                arn="arn:${Partition}:s3:::${BucketName}",
                condition_key_names=("aws:ResourceTag/${TagKey}",),
            ),
            ResourceTypeRecord(
                name="object",
                arn="arn:${Partition}:s3:::${BucketName}/${ObjectName}",
            ),
        ),
        condition_keys=(
            ConditionKeyRecord("aws:ResourceTag/${TagKey}", "Filters by tag", "String"),
            ConditionKeyRecord("s3:x-amz-acl", "Filters by canned ACL", "String"),
        ),
    )


@pytest.fixture()
def ec2_service() -> Service:
    return Service(
        url="https://docs.example.com/list_amazonec2.html",
        name="Amazon EC2",
        prefix="ec2",
        actions=(
            ActionRecord(name="RunInstances", access_level="Write"),
            ActionRecord(name="CreateTags", access_level="Tagging"),
        ),
    )
