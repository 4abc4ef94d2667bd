"""Resource types for endpoint configurations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from smoperator.api_common import GROUP_VERSION, ApiObject, ObjectMeta, ProductionVariant, Tag

_REQUIRED = {"required": True}


@dataclass
class EndpointConfigSpec(ApiObject):
    """Desired state of an endpoint configuration."""

    production_variants: list[ProductionVariant] | None = field(default=None, metadata=_REQUIRED)
    kms_key_id: str = ""
    tags: list[Tag] | None = None
    region: str | None = field(default=None, metadata=_REQUIRED)
    sage_maker_endpoint: str | None = None


@dataclass
class EndpointConfigStatus(ApiObject):
    """Observed state of an endpoint configuration."""

    status: str = ""
    sage_maker_endpoint_config_name: str = ""
    last_check_time: datetime | None = field(default=None, metadata={"json": "lastUpdateTime"})
    endpoint_config_arn: str = ""
    additional: str = ""


@dataclass
class EndpointConfig(ApiObject):
    """An endpoint configuration resource."""

    api_version: str = GROUP_VERSION.api_version
    kind: str = "EndpointConfig"
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: EndpointConfigSpec = field(default_factory=EndpointConfigSpec)
    status: EndpointConfigStatus = field(default_factory=EndpointConfigStatus)


@dataclass
class EndpointConfigList(ApiObject):
    """A list of endpoint configuration resources."""

    api_version: str = GROUP_VERSION.api_version
    kind: str = "EndpointConfigList"
    metadata: dict[str, str] | None = None
    items: list[EndpointConfig] | None = field(default_factory=list, metadata=_REQUIRED)