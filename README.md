# smoperator

`smoperator` models SageMaker workloads as Kubernetes-style custom resources and
reconciles batch transform jobs against SageMaker. It has no dependencies
outside the standard library.

## What is in the package

- `smoperator.api_common` holds the shared value types of the
  `sagemaker.aws.amazon.com/v1` group (`GROUP_VERSION`). Examples are
  `TransformInput`, `ResourceConfig`, `Tag`, `ProductionVariant` and
  `ObjectMeta`. It also has `deep_copy_tag_slice()`. Every type derives from
  `ApiObject`, which provides three methods:
  - `to_dict()` produces camelCase keys and leaves out empty optional fields.
  - `from_dict()` checks the type of each value.
  - `deep_copy()`
- There are resource types, each with a spec, a status and a list type:
  - `smoperator.batchtransformjob_types`: `BatchTransformJob`
  - `smoperator.trainingjob_types`: `TrainingJob`
  - `smoperator.hyperparametertuningjob_types`: `HyperparameterTuningJob`
  - `smoperator.hostingdeployment_types`: `HostingDeployment`
  - `smoperator.endpointconfig_types`: `EndpointConfig`
  - `smoperator.model_types`: `ModelResource`, whose kind is `Model`
- `smoperator.common` holds the reconciliation helpers:
  - `Result`, built with `no_requeue()`, `requeue_immediately()`,
    `requeue_after_interval()` or
    `requeue_immediately_unless_generation_changed()`.
  - `get_generated_job_name()` builds deterministic names within a length
    limit.
  - `parse_duration()` parses strings such as `"300ms"` or `"2h45m"`.
  - Smaller helpers: `remove_string()`, `get_or_default()`,
    `ignore_not_found()`, `has_deletion_timestamp()` and `now()`.
  - Constants such as `SAGEMAKER_RESOURCE_FINALIZER_NAME` and
    `INITIALIZING_JOB_STATUS`.
- `smoperator.aws_config` holds `AwsConfigLoader`.
  - It reads a region, static keys and web identity settings from a mapping,
    which is `os.environ` by default.
  - `load_aws_config_with_overrides()` sets the region and picks the SageMaker
    endpoint. An endpoint set on the job wins over the
    `AWS_DEFAULT_SAGEMAKER_ENDPOINT` variable.
  - `AwsConfig.resolve_endpoint()` returns that endpoint for the
    `api.sagemaker` service. For any other service it returns the standard
    `amazonaws.com` address.
- `smoperator.kube_client` provides two clients:
  - `InMemoryKubeClient` is an in-memory object store. It follows API server
    rules for status updates, generations, finalizers and deletion timestamps.
  - `FailingKubeClient` wraps another client and raises `KubeClientError` on
    the operations you name.
- `smoperator.batchtransformjob_controller` holds
  `BatchTransformJobReconciler`, which manages the whole life cycle of a job:
  - It sets an initial status and adds its finalizer.
  - It generates a job name when the spec has none.
  - It describes the job in SageMaker and creates it if SageMaker has no such
    job.
  - It tracks the job's status.
  - When the resource is deleted, it stops a running job and removes the
    finalizer.
  - It handles throttling and HTTP 400 errors.

## Example: generating job names

```python
from smoperator.common import get_generated_job_name

name = get_generated_job_name("1b4e28ba-2fa1-11d2-883f-0016d3cca427", "my-transform", 63)
# "my-transform-1b4e28ba2fa111d2883f0016d3cca427"
```

When the combined name is too long, the object name is shortened first. If the
name cannot fit at all, the name is left out and the UID without hyphens is
used alone, truncated if need be.

## Example: reconciling a batch transform job

The reconciler needs a SageMaker client object with three methods:

- `describe_transform_job(name)` returns a mapping that holds
  `"TransformJobStatus"`.
- `stop_transform_job(name)`
- `create_transform_job(request, user_agent)`

Failures are raised as `SageMakerApiError`. A `ValidationException` from
describe means the job does not exist.

```python
from smoperator.api_common import ObjectMeta, TransformResources
from smoperator.aws_config import AwsConfigLoader
from smoperator.batchtransformjob_controller import BatchTransformJobReconciler, SageMakerApiError
from smoperator.batchtransformjob_types import BatchTransformJob, BatchTransformJobSpec
from smoperator.kube_client import InMemoryKubeClient, NamespacedName


class FakeSageMaker:
    def __init__(self):
        self.jobs = {}

    def describe_transform_job(self, name):
        if name not in self.jobs:
            raise SageMakerApiError("ValidationException", 400, message="Could not find job")
        return {"TransformJobStatus": self.jobs[name]}

    def stop_transform_job(self, name):
        self.jobs[name] = "Stopping"

    def create_transform_job(self, request, user_agent):
        self.jobs[request["transformJobName"]] = "InProgress"


client = InMemoryKubeClient()
client.create(BatchTransformJob(
    metadata=ObjectMeta(name="example", namespace="default"),
    spec=BatchTransformJobSpec(
        model_name="model-abc",
        region="us-east-1",
        transform_resources=TransformResources(instance_count=1, instance_type="ml.m4.xlarge"),
    ),
))

sagemaker = FakeSageMaker()
reconciler = BatchTransformJobReconciler(
    client,
    poll_interval=60.0,
    sagemaker_client_provider=lambda config: sagemaker,
    aws_config_loader=AwsConfigLoader({}),
)
key = NamespacedName(namespace="default", name="example")
for _ in range(5):
    result = reconciler.reconcile(key)

print(client.get(key).status.transform_job_status)  # InProgress
print(result.requeue_after)                          # 0:01:00
```

Each pass does one step:

1. It sets the initializing status.
2. It adds the finalizer.
3. It writes a generated job name into the spec.
4. It creates the job in SageMaker.
5. It records the job's status.

A pass that raises `KubeClientError` means a Kubernetes write failed, and the
caller should retry.

The reconciler takes two further optional arguments:

- `spec_comparator` returns a `SpecComparison`. By default every description is
  taken to match its spec.
- `input_builder` turns a spec into the create request. By default the request
  is the spec's `to_dict()`.

## What the package does not do

- It has no command and no long-running manager process.
- It does not connect to a real Kubernetes API server. The only client provided
  is `InMemoryKubeClient`.
- It does not contain a SageMaker API client; you supply one. It does not
  obtain AWS credentials either. `AwsConfigLoader` only records where they come
  from, and `CredentialsSource.read_token()` reads the web identity token file.
- Only batch transform jobs have a reconciler. The other resource types are
  data types only.

## Running the tests

```
pip install ".[test]"
pytest
```