"""Resource types for batch transform jobs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from smoperator.api_common import (
    GROUP_VERSION,
    ApiObject,
    DataProcessing,
    KeyValuePair,
    ObjectMeta,
    Tag,
    TransformInput,
    TransformOutput,
    TransformResources,
)

_REQUIRED = {"required": True}


@dataclass
class BatchTransformJobSpec(ApiObject):
    """Desired state of a batch transform job.

    ``transform_job_name`` is optional; when it is empty the operator fills
    in a generated name of at most 63 characters.
    """

    transform_job_name: str | None = None
    batch_strategy: str = ""
    data_processing: DataProcessing | None = None
    environment: list[KeyValuePair | None] | None = None
    max_concurrent_transforms: int | None = None
    max_payload_in_mb: int | None = field(default=None, metadata={"json": "maxPayloadInMB"})
    model_name: str | None = field(default=None, metadata=_REQUIRED)
    tags: list[Tag] | None = None
    transform_input: TransformInput | None = field(default=None, metadata=_REQUIRED)
    transform_output: TransformOutput | None = field(default=None, metadata=_REQUIRED)
    transform_resources: TransformResources | None = field(default=None, metadata=_REQUIRED)
    region: str | None = field(default=None, metadata=_REQUIRED)
    # A custom SageMaker endpoint to use when communicating with SageMaker.
    sage_maker_endpoint: str | None = None


@dataclass
class BatchTransformJobStatus(ApiObject):
    """Observed state of a batch transform job."""

    transform_job_status: str = ""
    additional: str = ""
    last_check_time: datetime | None = None
    sage_maker_transform_job_name: str = ""


@dataclass
class BatchTransformJob(ApiObject):
    """A batch transform job resource."""

    api_version: str = GROUP_VERSION.api_version
    kind: str = "BatchTransformJob"
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: BatchTransformJobSpec = field(default_factory=BatchTransformJobSpec)
    status: BatchTransformJobStatus = field(default_factory=BatchTransformJobStatus)


@dataclass
class BatchTransformJobList(ApiObject):
    """A list of batch transform job resources."""

    api_version: str = GROUP_VERSION.api_version
    kind: str = "BatchTransformJobList"
    metadata: dict[str, str] | None = None
    items: list[BatchTransformJob] | None = field(default_factory=list, metadata=_REQUIRED)