"""Resource types for SageMaker models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from smoperator.api_common import (
    GROUP_VERSION,
    ApiObject,
    ContainerDefinition,
    ObjectMeta,
    Tag,
    VpcConfig,
)

_REQUIRED = {"required": True}


@dataclass
class ModelSpec(ApiObject):
    """Desired state of a model."""

    containers: list[ContainerDefinition | None] | None = None
    enable_network_isolation: bool | None = None
    execution_role_arn: str | None = field(default=None, metadata=_REQUIRED)
    primary_container: ContainerDefinition | None = None
    tags: list[Tag] | None = None
    vpc_config: VpcConfig | None = None
    region: str | None = field(default=None, metadata=_REQUIRED)
    sage_maker_endpoint: str | None = None


@dataclass
class ModelStatus(ApiObject):
    """Observed state of a model."""

    status: str = ""
    sage_maker_model_name: str = ""
    last_check_time: datetime | None = field(default=None, metadata={"json": "lastUpdateTime"})
    model_arn: str = ""
    additional: str = ""


@dataclass
class ModelResource(ApiObject):
    """A model resource (kind ``Model``)."""

    api_version: str = GROUP_VERSION.api_version
    kind: str = "Model"
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ModelSpec = field(default_factory=ModelSpec)
    status: ModelStatus = field(default_factory=ModelStatus)


@dataclass
class ModelList(ApiObject):
    """A list of model resources."""

    api_version: str = GROUP_VERSION.api_version
    kind: str = "ModelList"
    metadata: dict[str, str] | None = None
    items: list[ModelResource] | None = field(default_factory=list, metadata=_REQUIRED)