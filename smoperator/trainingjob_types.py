"""Resource types for training jobs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from smoperator.api_common import (
    GROUP_VERSION,
    AlgorithmSpecification,
    ApiObject,
    Channel,
    CheckpointConfig,
    KeyValuePair,
    ObjectMeta,
    OutputDataConfig,
    ResourceConfig,
    StoppingCondition,
    Tag,
    VpcConfig,
)

_REQUIRED = {"required": True}


@dataclass
class TrainingJobSpec(ApiObject):
    """Desired state of a training job.

    ``training_job_name`` is optional; when it is empty the operator fills
    in a generated name of at most 63 characters.
    """

    algorithm_specification: AlgorithmSpecification | None = field(default=None, metadata=_REQUIRED)
    enable_inter_container_traffic_encryption: bool | None = None
    enable_network_isolation: bool | None = None
    enable_managed_spot_training: bool | None = None
    hyper_parameters: list[KeyValuePair | None] | None = None
    input_data_config: list[Channel] | None = None
    output_data_config: OutputDataConfig | None = field(default=None, metadata=_REQUIRED)
    checkpoint_config: CheckpointConfig | None = None
    resource_config: ResourceConfig | None = field(default=None, metadata=_REQUIRED)
    role_arn: str | None = field(default=None, metadata=_REQUIRED)
    region: str | None = field(default=None, metadata=_REQUIRED)
    # A custom SageMaker endpoint to use when communicating with SageMaker.
    sage_maker_endpoint: str | None = None
    stopping_condition: StoppingCondition | None = field(default=None, metadata=_REQUIRED)
    tags: list[Tag] | None = None
    training_job_name: str | None = None
    vpc_config: VpcConfig | None = None


@dataclass
class TrainingJobStatus(ApiObject):
    """Observed state of a training job."""

    training_job_status: str = ""
    secondary_status: str = ""
    additional: str = ""
    last_check_time: datetime | None = None
    cloud_watch_log_url: str = ""
    sage_maker_training_job_name: str = ""
    model_path: str = ""


@dataclass
class TrainingJob(ApiObject):
    """A training job resource."""

    api_version: str = GROUP_VERSION.api_version
    kind: str = "TrainingJob"
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: TrainingJobSpec = field(default_factory=TrainingJobSpec, metadata=_REQUIRED)
    status: TrainingJobStatus = field(default_factory=TrainingJobStatus)


@dataclass
class TrainingJobList(ApiObject):
    """A list of training job resources."""

    api_version: str = GROUP_VERSION.api_version
    kind: str = "TrainingJobList"
    metadata: dict[str, str] | None = None
    items: list[TrainingJob] | None = field(default_factory=list, metadata=_REQUIRED)