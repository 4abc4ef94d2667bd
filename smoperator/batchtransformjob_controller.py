"""Reconciler that keeps batch transform job resources in step with SageMaker."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Protocol

from smoperator.aws_config import AwsConfig, AwsConfigLoader
from smoperator.batchtransformjob_types import (
    BatchTransformJob,
    BatchTransformJobSpec,
    BatchTransformJobStatus,
)
from smoperator.common import (
    INITIALIZING_JOB_STATUS,
    SAGEMAKER_ON_KUBERNETES_USER_AGENT_ADDITION,
    SAGEMAKER_RESOURCE_FINALIZER_NAME,
    Result,
    create_spec_differs_from_description_error_message,
    get_generated_job_name,
    has_deletion_timestamp,
    ignore_not_found,
    no_requeue,
    now,
    remove_string,
    requeue_after_interval,
    requeue_immediately,
    requeue_immediately_unless_generation_changed,
)
from smoperator.kube_client import KubeClientError, NamespacedName

_log = logging.getLogger(__name__)

# DescribeTransformJob answers a missing job with HTTP 400 and this code.
TRANSFORM_RESOURCE_NOT_FOUND_API_CODE = "ValidationException"

MAX_TRANSFORM_JOB_NAME_LENGTH = 63


class TransformJobStatus(str, Enum):
    """Statuses SageMaker reports for a transform job."""

    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    FAILED = "Failed"
    STOPPING = "Stopping"
    STOPPED = "Stopped"


class SageMakerApiError(Exception):
    """A failed SageMaker request, with its error code and HTTP status."""

    def __init__(self, code: str, status_code: int, request_id: str = "", message: str = "") -> None:
        self.code = code
        self.status_code = status_code
        self.request_id = request_id
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        return (
            f"{self.code}: {self.message}\n\tstatus code: {self.status_code}, "
            f"request id: {self.request_id}"
        )


@dataclass(frozen=True)
class SpecComparison:
    """Whether a spec matches a SageMaker description, and how it differs."""

    equal: bool
    differences: str = ""


class _SageMakerClient(Protocol):
    def describe_transform_job(self, name: str) -> Mapping[str, Any]: ...

    def stop_transform_job(self, name: str) -> Any: ...

    def create_transform_job(self, request: Mapping[str, Any], user_agent: str) -> Any: ...


SpecComparator = Callable[[Mapping[str, Any], BatchTransformJobSpec], SpecComparison]
InputBuilder = Callable[[BatchTransformJobSpec], Mapping[str, Any]]


def _always_matches(description: Mapping[str, Any], spec: BatchTransformJobSpec) -> SpecComparison:
    return SpecComparison(equal=True)


def _spec_as_request(spec: BatchTransformJobSpec) -> Mapping[str, Any]:
    return spec.to_dict()


@dataclass
class _ReconcileContext:
    job: BatchTransformJob
    sagemaker_client: Any = None
    description: Mapping[str, Any] | None = None

    @property
    def key(self) -> NamespacedName:
        return NamespacedName(self.job.metadata.namespace, self.job.metadata.name)


def _status_of(description: Mapping[str, Any]) -> str:
    value = description.get("TransformJobStatus", "")
    return value.value if isinstance(value, Enum) else str(value)


class BatchTransformJobReconciler:
    """Drives a batch transform job towards the state its spec asks for.

    ``reconcile`` returns a :class:`Result` and raises where a Kubernetes
    write fails, so that the caller retries. Without a ``spec_comparator``
    every description is taken to match its spec; without an
    ``input_builder`` the create request is the spec's dictionary form.
    """

    def __init__(
        self,
        client: Any,
        poll_interval: timedelta | float,
        sagemaker_client_provider: Callable[[AwsConfig], _SageMakerClient],
        aws_config_loader: AwsConfigLoader | None = None,
        spec_comparator: SpecComparator | None = None,
        input_builder: InputBuilder | None = None,
    ) -> None:
        if not isinstance(poll_interval, timedelta):
            poll_interval = timedelta(seconds=poll_interval)
        self.client = client
        self.poll_interval = poll_interval
        self.sagemaker_client_provider = sagemaker_client_provider
        self.aws_config_loader = aws_config_loader or AwsConfigLoader()
        self.spec_comparator = spec_comparator or _always_matches
        self.input_builder = input_builder or _spec_as_request

    def reconcile(self, request: NamespacedName) -> Result:
        """Reconcile the job named by ``request``."""
        try:
            job = self.client.get(request)
        except KubeClientError as err:
            _log.info("Unable to fetch batch transform job %s: %s", request, err)
            remaining = ignore_not_found(err)
            if remaining is not None:
                raise
            return no_requeue()
        return self._reconcile_job(_ReconcileContext(job=job))

    def _reconcile_job(self, ctx: _ReconcileContext) -> Result:
        job = ctx.job
        if not job.status.transform_job_status:
            _log.info("Job %s has no status, setting %s", ctx.key, INITIALIZING_JOB_STATUS)
            self._update_job_status(
                ctx,
                BatchTransformJobStatus(
                    transform_job_status=INITIALIZING_JOB_STATUS, last_check_time=now()
                ),
            )
            return requeue_immediately()

        try:
            config = self.aws_config_loader.load_aws_config_with_overrides(
                job.spec.region, job.spec.sage_maker_endpoint
            )
        except Exception:
            _log.exception("Error loading AWS config for %s", ctx.key)
            return no_requeue()
        ctx.sagemaker_client = self.sagemaker_client_provider(config)
        _log.info("Loaded AWS config for %s", ctx.key)

        if has_deletion_timestamp(job.metadata):
            return self._reconcile_job_deletion(ctx)

        if SAGEMAKER_RESOURCE_FINALIZER_NAME not in (job.metadata.finalizers or []):
            return self._add_finalizer_and_requeue(ctx)

        if not job.spec.transform_job_name:
            job_name = get_generated_job_name(
                job.metadata.uid, job.metadata.name, MAX_TRANSFORM_JOB_NAME_LENGTH
            )
            job.spec.transform_job_name = job_name
            _log.info("Adding generated name %s to spec of %s", job_name, ctx.key)
            # The spec update triggers a new reconciliation, so no requeue here.
            self.client.update(job)
            return no_requeue()

        ctx.description, error = self._describe(ctx)
        if ctx.description is None and error is None:
            return self._create_transform_job(ctx)
        if ctx.description is not None:
            return self._reconcile_spec_with_description(ctx)
        _log.info("Error getting state of %s from SageMaker: %s", ctx.key, error)
        return self._handle_api_failure(ctx, error, allow_remove_finalizer=False)

    def _reconcile_job_deletion(self, ctx: _ReconcileContext) -> Result:
        ctx.description, error = self._describe(ctx)
        if ctx.description is None:
            if error is None:
                _log.info("Job %s does not exist in SageMaker, removing finalizer", ctx.key)
                return self._remove_finalizer_and_update(ctx)
            _log.info("SageMaker returned an error while deleting %s", ctx.key)
            return self._handle_api_failure(ctx, error, allow_remove_finalizer=True)
        return self._delete_if_finalizer_exists(ctx)

    def _remove_finalizer_and_update(self, ctx: _ReconcileContext) -> Result:
        meta = ctx.job.metadata
        meta.finalizers = remove_string(meta.finalizers, SAGEMAKER_RESOURCE_FINALIZER_NAME)
        try:
            self.client.update(ctx.job)
        except KubeClientError as err:
            _log.info("Failed to remove finalizer from %s: %s", ctx.key, err)
            raise
        _log.info("Finalizer removed from %s", ctx.key)
        return no_requeue()

    def _delete_if_finalizer_exists(self, ctx: _ReconcileContext) -> Result:
        if SAGEMAKER_RESOURCE_FINALIZER_NAME not in (ctx.job.metadata.finalizers or []):
            _log.info("Job %s has no finalizer, nothing to do", ctx.key)
            return no_requeue()

        status = _status_of(ctx.description)
        if status == TransformJobStatus.IN_PROGRESS:
            _log.info("Stopping in-progress job %s", ctx.key)
            try:
                ctx.sagemaker_client.stop_transform_job(ctx.job.spec.transform_job_name)
            except Exception as err:
                _log.error("Unable to stop job %s in SageMaker: %s", ctx.key, err)
                return self._handle_api_failure(ctx, err, allow_remove_finalizer=False)
            return requeue_immediately()
        if status == TransformJobStatus.STOPPING:
            _log.info("Job %s is stopping", ctx.key)
            self._update_job_status(
                ctx,
                BatchTransformJobStatus(
                    last_check_time=now(),
                    sage_maker_transform_job_name=ctx.job.spec.transform_job_name,
                    transform_job_status=status,
                ),
            )
            return requeue_after_interval(self.poll_interval)
        if status in (
            TransformJobStatus.COMPLETED,
            TransformJobStatus.FAILED,
            TransformJobStatus.STOPPED,
        ):
            _log.info("Job %s is in a terminal state", ctx.key)
            return self._remove_finalizer_and_update(ctx)
        _log.info("Job %s is in unknown status %r", ctx.key, status)
        return no_requeue()

    def _add_finalizer_and_requeue(self, ctx: _ReconcileContext) -> Result:
        meta = ctx.job.metadata
        meta.finalizers = [*(meta.finalizers or []), SAGEMAKER_RESOURCE_FINALIZER_NAME]
        _log.info("Adding finalizer to %s", ctx.key)
        prev_generation = meta.generation
        self.client.update(ctx.job)
        return requeue_immediately_unless_generation_changed(
            prev_generation, ctx.job.metadata.generation
        )

    def _reconcile_spec_with_description(self, ctx: _ReconcileContext) -> Result:
        name = ctx.job.spec.transform_job_name
        comparison = self.spec_comparator(ctx.description, ctx.job.spec)
        if not comparison.equal:
            _log.info("Spec of %s does not match its SageMaker description", ctx.key)
            failed = TransformJobStatus.FAILED.value
            self._update_job_status(
                ctx,
                BatchTransformJobStatus(
                    last_check_time=now(),
                    sage_maker_transform_job_name=name,
                    transform_job_status=failed,
                    additional=create_spec_differs_from_description_error_message(
                        ctx.job, failed, comparison.differences
                    ),
                ),
            )

        observed = _status_of(ctx.description)
        self._update_job_status(
            ctx,
            BatchTransformJobStatus(
                last_check_time=now(),
                transform_job_status=observed,
                sage_maker_transform_job_name=name,
            ),
        )
        if observed in (TransformJobStatus.IN_PROGRESS, TransformJobStatus.STOPPING):
            return requeue_after_interval(self.poll_interval)
        return no_requeue()

    def _handle_api_failure(
        self, ctx: _ReconcileContext, error: BaseException, allow_remove_finalizer: bool
    ) -> Result:
        self._update_job_status(
            ctx,
            BatchTransformJobStatus(
                additional=str(error),
                last_check_time=now(),
                transform_job_status=TransformJobStatus.FAILED.value,
                sage_maker_transform_job_name=ctx.job.spec.transform_job_name or "",
            ),
        )
        if not isinstance(error, SageMakerApiError):
            _log.info("Unknown request failure for %s: %s", ctx.key, error)
            return requeue_after_interval(self.poll_interval)
        if self._is_throttled(error):
            _log.info("SageMaker rate limit exceeded for %s, will retry", ctx.key)
            return requeue_after_interval(self.poll_interval)
        if error.status_code == 400:
            if allow_remove_finalizer:
                return self._remove_finalizer_and_update(ctx)
            return no_requeue()
        return requeue_after_interval(self.poll_interval)

    def _update_job_status(self, ctx: _ReconcileContext, desired: BatchTransformJobStatus) -> None:
        _log.info("Updating status of %s to %s", ctx.key, desired)
        root = ctx.job.deep_copy()
        root.status = desired
        try:
            self.client.update_status(root)
        except KubeClientError as err:
            _log.error("Error updating status of %s: %s", ctx.key, err)
            raise

    def _create_transform_job(self, ctx: _ReconcileContext) -> Result:
        request = self.input_builder(ctx.job.spec)
        _log.info("Creating transform job for %s: %s", ctx.key, request)
        try:
            ctx.sagemaker_client.create_transform_job(
                request, user_agent=SAGEMAKER_ON_KUBERNETES_USER_AGENT_ADDITION
            )
        except Exception as err:
            _log.info("Unable to create transform job for %s: %s", ctx.key, err)
            return self._handle_api_failure(ctx, err, allow_remove_finalizer=False)
        _log.info("Transform job for %s created in SageMaker", ctx.key)
        return requeue_immediately()

    def _describe(
        self, ctx: _ReconcileContext
    ) -> tuple[Mapping[str, Any] | None, SageMakerApiError | None]:
        try:
            description = ctx.sagemaker_client.describe_transform_job(ctx.job.spec.transform_job_name)
        except SageMakerApiError as err:
            if err.code == TRANSFORM_RESOURCE_NOT_FOUND_API_CODE:
                _log.info("Job %s does not exist in SageMaker", ctx.key)
                return None, None
            _log.info("Error response from DescribeTransformJob for %s", ctx.key)
            return None, err
        except Exception as err:
            # An unparseable failure is reported as a missing job.
            _log.info("Failed to read describe error for %s: %s", ctx.key, err)
            return None, None
        return description, None

    @staticmethod
    def _is_throttled(error: SageMakerApiError) -> bool:
        # Throttling arrives as HTTP 400 rather than 429.
        return error.code == "ThrottlingException" and error.message == "Rate exceeded"