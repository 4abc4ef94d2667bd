"""Resource types for hyperparameter tuning jobs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from smoperator.api_common import (
    GROUP_VERSION,
    ApiObject,
    HyperParameterTrainingJobDefinition,
    HyperParameterTrainingJobSummary,
    HyperParameterTuningJobConfig,
    HyperParameterTuningJobWarmStartConfig,
    ObjectMeta,
    Tag,
    TrainingJobStatusCounters,
)

_REQUIRED = {"required": True}


@dataclass
class HyperparameterTuningJobSpec(ApiObject):
    """Desired state of a hyperparameter tuning job."""

    hyper_parameter_tuning_job_config: HyperParameterTuningJobConfig | None = field(
        default=None, metadata=_REQUIRED
    )
    hyper_parameter_tuning_job_name: str | None = None
    tags: list[Tag] | None = None
    training_job_definition: HyperParameterTrainingJobDefinition | None = None
    warm_start_config: HyperParameterTuningJobWarmStartConfig | None = None
    region: str | None = field(default=None, metadata=_REQUIRED)
    # A custom SageMaker endpoint to use when communicating with SageMaker.
    sage_maker_endpoint: str | None = None


@dataclass
class HyperparameterTuningJobStatus(ApiObject):
    """Observed state of a hyperparameter tuning job."""

    additional: str = ""
    hyper_parameter_tuning_job_status: str = ""
    best_training_job: HyperParameterTrainingJobSummary | None = None
    last_check_time: datetime | None = None
    sage_maker_hyper_parameter_tuning_job_name: str = ""
    training_job_status_counters: TrainingJobStatusCounters | None = None


@dataclass
class HyperparameterTuningJob(ApiObject):
    """A hyperparameter tuning job resource."""

    api_version: str = GROUP_VERSION.api_version
    kind: str = "HyperparameterTuningJob"
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: HyperparameterTuningJobSpec = field(default_factory=HyperparameterTuningJobSpec)
    status: HyperparameterTuningJobStatus = field(default_factory=HyperparameterTuningJobStatus)


@dataclass
class HyperparameterTuningJobList(ApiObject):
    """A list of hyperparameter tuning job resources."""

    api_version: str = GROUP_VERSION.api_version
    kind: str = "HyperparameterTuningJobList"
    metadata: dict[str, str] | None = None
    items: list[HyperparameterTuningJob] | None = field(default_factory=list, metadata=_REQUIRED)