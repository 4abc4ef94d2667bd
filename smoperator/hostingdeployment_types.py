"""Resource types for hosting deployments."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from smoperator.api_common import (
    GROUP_VERSION,
    ApiObject,
    KeyValuePair,
    Model,
    ObjectMeta,
    ProductionVariant,
    ProductionVariantSummary,
    Tag,
)

_REQUIRED = {"required": True}


@dataclass
class HostingDeploymentSpec(ApiObject):
    """Desired state of a hosting deployment."""

    region: str | None = field(default=None, metadata=_REQUIRED)
    # A custom SageMaker endpoint to use when communicating with SageMaker.
    sage_maker_endpoint: str | None = None
    kms_key_id: str | None = None
    production_variants: list[ProductionVariant] | None = field(default=None, metadata=_REQUIRED)
    models: list[Model] | None = field(default=None, metadata=_REQUIRED)
    tags: list[Tag] | None = None


@dataclass
class HostingDeploymentStatus(ApiObject):
    """Observed state of a hosting deployment."""

    endpoint_name: str = ""
    endpoint_config_name: str = ""
    endpoint_url: str = ""
    endpoint_status: str = ""
    endpoint_arn: str = ""
    creation_time: datetime | None = None
    failure_reason: str = ""
    additional: str = ""
    last_check_time: datetime | None = None
    last_modified_time: datetime | None = None
    production_variants: list[ProductionVariantSummary | None] | None = None
    model_names: list[KeyValuePair | None] | None = None


@dataclass
class HostingDeployment(ApiObject):
    """A hosting deployment resource."""

    api_version: str = GROUP_VERSION.api_version
    kind: str = "HostingDeployment"
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: HostingDeploymentSpec = field(default_factory=HostingDeploymentSpec)
    status: HostingDeploymentStatus = field(default_factory=HostingDeploymentStatus)


@dataclass
class HostingDeploymentList(ApiObject):
    """A list of hosting deployment resources."""

    api_version: str = GROUP_VERSION.api_version
    kind: str = "HostingDeploymentList"
    metadata: dict[str, str] | None = None
    items: list[HostingDeployment] | None = field(default_factory=list, metadata=_REQUIRED)