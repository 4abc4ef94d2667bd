"""Shared SageMaker API value types and their JSON mapping."""

import copy
import dataclasses
import functools
import inspect
import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, TypeVar, Union

_T = TypeVar("_T", bound="ApiObject")


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with its version."""

    group: str
    version: str

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}"

    def __str__(self) -> str:
        return self.api_version


GROUP_VERSION = GroupVersion(group="sagemaker.aws.amazon.com", version="v1")


def _required(default: Any = None) -> Any:
    return field(default=default, metadata={"required": True})


def _json_name(name: str, *, required: bool = False, default: Any = None) -> Any:
    return field(default=default, metadata={"json": name, "required": required})


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _json_key(f: dataclasses.Field) -> str:
    return f.metadata.get("json") or _camel(f.name)


_BUILTIN_TYPES: dict[str, Any] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "datetime": datetime,
    "None": type(None),
    "NoneType": type(None),
    "Any": Any,
}


def _split_top(text: str, sep: str) -> list[str]:
    """Split text on sep, ignoring separators nested inside brackets."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
        if ch == sep and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    parts.append("".join(current).strip())
    return parts


def _lookup_name(name: str, namespace: Mapping[str, Any]) -> Any:
    if name in _BUILTIN_TYPES:
        return _BUILTIN_TYPES[name]
    head, *rest = name.split(".")
    if head not in namespace:
        raise TypeError(f"cannot resolve type name {name!r}")
    value = namespace[head]
    for attr in rest:
        value = getattr(value, attr)
    return value


def _resolve_annotation(text: str, namespace: Mapping[str, Any]) -> Any:
    text = text.strip().strip("'\"")
    options = _split_top(text, "|")
    if len(options) > 1:
        return Union[tuple(_resolve_annotation(option, namespace) for option in options)]
    if text.endswith("]") and "[" in text:
        head, inner = text[:-1].split("[", 1)
        head = head.strip().rsplit(".", 1)[-1]
        args = [_resolve_annotation(arg, namespace) for arg in _split_top(inner, ",")]
        if head in ("list", "List"):
            return list[args[0]]
        if head in ("dict", "Dict"):
            return dict[args[0], args[1]]
        if head == "Optional":
            return Union[args[0], None]
        if head == "Union":
            return Union[tuple(args)]
        raise TypeError(f"unsupported type annotation {text!r}")
    return _lookup_name(text, namespace)


@functools.lru_cache(maxsize=None)
def _field_types(cls: type) -> dict[str, Any]:
    namespace: dict[str, Any] = {}
    own_module = inspect.getmodule(ApiObject)
    if own_module is not None:
        namespace.update(vars(own_module))
    cls_module = inspect.getmodule(cls)
    if cls_module is not None:
        namespace.update(vars(cls_module))
    return {
        f.name: _resolve_annotation(f.type, namespace) if isinstance(f.type, str) else f.type
        for f in dataclasses.fields(cls)
    }


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, (str, list, tuple, dict)) and len(value) == 0


def _format_time(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _parse_time(text: Any, path: str) -> datetime:
    if not isinstance(text, str):
        raise TypeError(f"{path}: expected a timestamp string, got {type(text).__name__}")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _encode(value: Any) -> Any:
    if isinstance(value, ApiObject):
        return value.to_dict()
    if isinstance(value, datetime):
        return _format_time(value)
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _encode(item) for key, item in value.items()}
    return value


def _decode(tp: Any, data: Any, path: str) -> Any:
    if data is None:
        return None
    origin = typing.get_origin(tp)
    if origin is Union or origin is types.UnionType:
        options = [arg for arg in typing.get_args(tp) if arg is not type(None)]
        return _decode(options[0], data, path)
    if origin is list:
        if not isinstance(data, list):
            raise TypeError(f"{path}: expected a list, got {type(data).__name__}")
        (item_type,) = typing.get_args(tp)
        return [_decode(item_type, item, f"{path}[{i}]") for i, item in enumerate(data)]
    if origin is dict:
        if not isinstance(data, Mapping):
            raise TypeError(f"{path}: expected an object, got {type(data).__name__}")
        _, value_type = typing.get_args(tp)
        return {str(key): _decode(value_type, item, f"{path}.{key}") for key, item in data.items()}
    if isinstance(tp, type):
        if issubclass(tp, ApiObject):
            return tp._from_mapping(data, path)
        if tp is datetime:
            return _parse_time(data, path)
        if tp is bool:
            if not isinstance(data, bool):
                raise TypeError(f"{path}: expected a boolean, got {type(data).__name__}")
            return data
        if tp is int:
            if isinstance(data, bool) or not isinstance(data, int):
                raise TypeError(f"{path}: expected an integer, got {type(data).__name__}")
            return data
        if tp is float:
            if isinstance(data, bool) or not isinstance(data, (int, float)):
                raise TypeError(f"{path}: expected a number, got {type(data).__name__}")
            return float(data)
        if tp is str:
            if not isinstance(data, str):
                raise TypeError(f"{path}: expected a string, got {type(data).__name__}")
            return data
    return data


class ApiObject:
    """Base for API dataclasses that map to and from JSON-style dicts.

    Field names map to lowerCamelCase keys unless the field metadata holds a
    "json" key. Empty values are left out unless the metadata marks the field
    as "required".
    """

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if _is_empty(value) and not f.metadata.get("required"):
                continue
            result[_json_key(f)] = _encode(value)
        return result

    @classmethod
    def from_dict(cls: type[_T], data: Mapping[str, Any]) -> _T:
        return cls._from_mapping(data, cls.__name__)

    @classmethod
    def _from_mapping(cls: type[_T], data: Any, path: str) -> _T:
        if not isinstance(data, Mapping):
            raise TypeError(f"{path}: expected an object, got {type(data).__name__}")
        field_types = _field_types(cls)
        kwargs: dict[str, Any] = {}
        for f in dataclasses.fields(cls):
            if not f.init:
                continue
            key = _json_key(f)
            if key not in data:
                continue
            raw = data[key]
            if raw is None and f.default is not None and f.default is not dataclasses.MISSING:
                continue
            kwargs[f.name] = _decode(field_types[f.name], raw, f"{path}.{key}")
        return cls(**kwargs)

    def deep_copy(self: _T) -> _T:
        return copy.deepcopy(self)


@dataclass
class ObjectMeta(ApiObject):
    name: str = ""
    namespace: str = ""
    uid: str = ""
    resource_version: str = ""
    generation: int = 0
    finalizers: list[str] | None = None
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None
    creation_timestamp: datetime | None = None
    deletion_timestamp: datetime | None = None


@dataclass
class MetricDefinition(ApiObject):
    name: str | None = _required()
    regex: str | None = _required()


@dataclass
class AlgorithmSpecification(ApiObject):
    algorithm_name: str | None = None
    metric_definitions: list[MetricDefinition] | None = None
    training_image: str | None = None
    training_input_mode: str = _required("")


@dataclass
class S3DataSource(ApiObject):
    attribute_names: list[str] | None = None
    s3_data_distribution_type: str = ""
    s3_data_type: str = _required("")
    s3_uri: str | None = _required()


@dataclass
class FileSystemDataSource(ApiObject):
    directory_path: str | None = _required()
    file_system_access_mode: str | None = _required()
    file_system_id: str | None = _required()
    file_system_type: str | None = _required()


@dataclass
class DataSource(ApiObject):
    file_system_data_source: FileSystemDataSource | None = None
    s3_data_source: S3DataSource | None = None


@dataclass
class ShuffleConfig(ApiObject):
    seed: int | None = _required()


@dataclass
class Channel(ApiObject):
    channel_name: str | None = _required()
    compression_type: str = ""
    content_type: str | None = None
    data_source: DataSource | None = _required()
    input_mode: str = ""
    record_wrapper_type: str = ""
    shuffle_config: ShuffleConfig | None = None


@dataclass
class OutputDataConfig(ApiObject):
    kms_key_id: str | None = None
    s3_output_path: str | None = _required()


@dataclass
class CheckpointConfig(ApiObject):
    local_path: str | None = None
    s3_uri: str | None = _required()


@dataclass
class ResourceConfig(ApiObject):
    instance_count: int | None = _required()
    instance_type: str = _required("")
    volume_kms_key_id: str | None = None
    volume_size_in_gb: int | None = _json_name("volumeSizeInGB", required=True)


@dataclass
class StoppingCondition(ApiObject):
    max_runtime_in_seconds: int | None = None
    max_wait_time_in_seconds: int | None = None


@dataclass
class Tag(ApiObject):
    key: str | None = _required()
    value: str | None = _required()


@dataclass
class KeyValuePair(ApiObject):
    """A name/value pair, used to describe maps."""

    name: str = ""
    value: str = ""


@dataclass
class VpcConfig(ApiObject):
    security_group_ids: list[str] | None = _required()
    subnets: list[str] | None = _required()


@dataclass
class HyperParameterTuningJobObjective(ApiObject):
    metric_name: str | None = _required()
    type: str = _required("")


@dataclass
class CategoricalParameterRange(ApiObject):
    name: str | None = _required()
    values: list[str] | None = _required()


@dataclass
class ContinuousParameterRange(ApiObject):
    max_value: str | None = _required()
    min_value: str | None = _required()
    name: str | None = _required()
    scaling_type: str = _required("")


@dataclass
class IntegerParameterRange(ApiObject):
    max_value: str | None = _required()
    min_value: str | None = _required()
    name: str | None = _required()
    scaling_type: str = _required("")


@dataclass
class ParameterRanges(ApiObject):
    categorical_parameter_ranges: list[CategoricalParameterRange] | None = None
    continuous_parameter_ranges: list[ContinuousParameterRange] | None = None
    integer_parameter_ranges: list[IntegerParameterRange] | None = None


@dataclass
class ResourceLimits(ApiObject):
    max_number_of_training_jobs: int | None = _required()
    max_parallel_training_jobs: int | None = _required()


@dataclass
class HyperParameterTuningJobConfig(ApiObject):
    hyper_parameter_tuning_job_objective: HyperParameterTuningJobObjective | None = None
    parameter_ranges: ParameterRanges | None = None
    resource_limits: ResourceLimits | None = _required()
    strategy: str = _required("")
    training_job_early_stopping_type: str = ""


@dataclass
class HyperParameterAlgorithmSpecification(ApiObject):
    algorithm_name: str | None = None
    metric_definitions: list[MetricDefinition] | None = None
    training_image: str | None = None
    training_input_mode: str = _required("")


@dataclass
class HyperParameterTrainingJobDefinition(ApiObject):
    algorithm_specification: HyperParameterAlgorithmSpecification | None = _required()
    enable_inter_container_traffic_encryption: bool | None = None
    enable_network_isolation: bool | None = None
    enable_managed_spot_training: bool | None = None
    input_data_config: list[Channel] | None = None
    output_data_config: OutputDataConfig | None = _required()
    checkpoint_config: CheckpointConfig | None = None
    resource_config: ResourceConfig | None = _required()
    role_arn: str | None = _required()
    static_hyper_parameters: list[KeyValuePair | None] | None = None
    stopping_condition: StoppingCondition | None = _required()
    vpc_config: VpcConfig | None = None


@dataclass
class ParentHyperParameterTuningJob(ApiObject):
    hyper_parameter_tuning_job_name: str | None = None


@dataclass
class HyperParameterTuningJobWarmStartConfig(ApiObject):
    parent_hyper_parameter_tuning_jobs: list[ParentHyperParameterTuningJob] | None = _required()
    warm_start_type: str = _required("")


@dataclass
class FinalHyperParameterTuningJobObjectiveMetric(ApiObject):
    metric_name: str | None = None
    type: str = ""
    # Kept as a string so that values survive serialisation unchanged.
    value: str | None = None


@dataclass
class HyperParameterTrainingJobSummary(ApiObject):
    creation_time: datetime | None = None
    failure_reason: str | None = None
    final_hyper_parameter_tuning_job_objective_metric: FinalHyperParameterTuningJobObjectiveMetric | None = None
    objective_status: str = ""
    training_end_time: datetime | None = None
    training_job_arn: str | None = None
    training_job_name: str | None = None
    training_job_status: str = ""
    training_start_time: datetime | None = None
    tuned_hyper_parameters: list[KeyValuePair | None] | None = None
    tuning_job_name: str | None = None


@dataclass
class TrainingJobStatusCounters(ApiObject):
    """Counts of the training jobs a tuning job launched, by status."""

    completed: int | None = None
    in_progress: int | None = None
    non_retryable_error: int | None = None
    retryable_error: int | None = None
    total_error: int | None = None
    stopped: int | None = None


@dataclass
class ProductionVariant(ApiObject):
    accelerator_type: str = ""
    initial_instance_count: int | None = _required()
    initial_variant_weight: int | None = None
    instance_type: str = _required("")
    model_name: str | None = _required()
    variant_name: str | None = _required()


@dataclass
class ContainerDefinition(ApiObject):
    container_hostname: str | None = None
    environment: list[KeyValuePair | None] | None = None
    image: str | None = None
    model_data_url: str | None = None
    model_package_name: str | None = None


@dataclass
class Model(ApiObject):
    """A model definition as part of a hosting deployment."""

    name: str | None = _required()
    containers: list[ContainerDefinition | None] | None = None
    primary_container: str | None = None
    execution_role_arn: str | None = _required()
    enable_network_isolation: bool | None = None
    vpc_config: VpcConfig | None = None


@dataclass
class DeployedImage(ApiObject):
    resolution_time: datetime | None = None
    resolved_image: str | None = None
    specified_image: str | None = None


@dataclass
class ProductionVariantSummary(ApiObject):
    current_instance_count: int | None = None
    current_weight: int | None = None
    deployed_images: list[DeployedImage] | None = None
    desired_instance_count: int | None = None
    desired_weight: int | None = None
    variant_name: str | None = _required()


@dataclass
class DataProcessing(ApiObject):
    input_filter: str | None = None
    join_source: str = _json_name("JoinSource", default="")
    output_filter: str | None = _json_name("OutputFilter")


@dataclass
class TransformS3DataSource(ApiObject):
    s3_data_type: str = _required("")
    s3_uri: str | None = _required()


@dataclass
class TransformDataSource(ApiObject):
    s3_data_source: TransformS3DataSource | None = _required()


@dataclass
class TransformInput(ApiObject):
    compression_type: str = ""
    content_type: str | None = None
    data_source: TransformDataSource | None = _required()
    split_type: str = ""


@dataclass
class TransformOutput(ApiObject):
    accept: str | None = None
    assemble_with: str = ""
    kms_key_id: str | None = None
    s3_output_path: str | None = _required()


@dataclass
class TransformResources(ApiObject):
    instance_count: int | None = _required()
    instance_type: str = _required("")
    volume_kms_key_id: str | None = None


def deep_copy_tag_slice(tags: list[Tag] | None) -> list[Tag] | None:
    """Return independent copies of the given tags, keeping None as None."""
    if tags is None:
        return None
    return [tag.deep_copy() for tag in tags]