"""Helpers shared by the reconcilers: requeue results, job names and durations."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from fractions import Fraction
from typing import Any, TypeVar

from smoperator.kube_client import NotFoundError

_T = TypeVar("_T")

# The finalizer installed onto managed resources.
SAGEMAKER_RESOURCE_FINALIZER_NAME = "sagemaker-operator-finalizer"

# Environment variable naming the default SageMaker endpoint. When set to a
# non-empty value, the controllers talk to SageMaker through that endpoint.
DEFAULT_SAGEMAKER_ENDPOINT_ENV_KEY = "AWS_DEFAULT_SAGEMAKER_ENDPOINT"

# Status stored on first touch of a job, kept until the job has a real status.
INITIALIZING_JOB_STATUS = "SynchronizingK8sJobWithSageMaker"

# Added to the user agent so that jobs created from Kubernetes can be told apart.
SAGEMAKER_ON_KUBERNETES_USER_AGENT_ADDITION = "sagemaker-on-kubernetes"

_SPEC_DIFFERS_MESSAGE = (
    "Updates to {kind} are not supported; the resource no longer matches the "
    "SageMaker resource. The job will be marked as \"{status}\" and no "
    "modifications to the existing SageMaker job will be made until the update "
    "is reverted. The differences that prevent tracking of the SageMaker "
    "resource are:\n{differences}"
)


class ReconcileAction(str, Enum):
    """The action to perform on a resource."""

    NEEDS_CREATE = "NeedsCreate"
    NEEDS_DELETE = "NeedsDelete"
    NEEDS_NOOP = "NeedsNoop"
    NEEDS_UPDATE = "NeedsUpdate"


@dataclass(frozen=True)
class Result:
    """The outcome of one reconciliation.

    With ``requeue`` set the request is always queued again. Otherwise it is
    queued again after ``requeue_after`` when that is positive, and not at all
    when it is zero.
    """

    requeue: bool = False
    requeue_after: timedelta = timedelta(0)


def create_spec_differs_from_description_error_message(job: Any, status: str, differences: str) -> str:
    """The message used when a spec no longer matches its SageMaker description."""
    return _SPEC_DIFFERS_MESSAGE.format(
        kind=type(job).__name__, status=status, differences=differences
    )


def no_requeue() -> Result:
    return Result()


def requeue_immediately() -> Result:
    return Result(requeue=True)


def requeue_after_interval(interval: timedelta | float) -> Result:
    if not isinstance(interval, timedelta):
        interval = timedelta(seconds=interval)
    return Result(requeue_after=interval)


def requeue_immediately_unless_generation_changed(prev_generation: int, cur_generation: int) -> Result:
    """Requeue at once unless the generation changed.

    A generation change triggers a new reconciliation anyway, so requeueing
    as well would start two loops.
    """
    if prev_generation == cur_generation:
        return requeue_immediately()
    return no_requeue()


def ignore_not_found(error: BaseException | None) -> BaseException | None:
    """Drop not-found errors so that they do not cause reconcile loops."""
    if isinstance(error, NotFoundError):
        return None
    return error


def remove_string(items: list[str] | None, s: str) -> list[str]:
    """Return the items without any occurrence of ``s``."""
    return [item for item in items or () if item != s]


def get_or_default(value: _T | None, default: _T) -> _T:
    return default if value is None else value


def now() -> datetime:
    """The current time in UTC, to the second."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def get_generated_job_name(uid: str, name: str, max_name_len: int) -> str:
    """Build a deterministic SageMaker name from an object's UID and name.

    The result is the name and the hyphen-less UID joined by a hyphen. When
    that is too long the name is shortened first; if the name cannot fit at
    all only the UID is used, truncated to ``max_name_len`` if need be.
    """
    postfix = uid.replace("-", "")
    delimiter = "-"
    job_name = name + delimiter + postfix
    if len(job_name) <= max_name_len:
        return job_name

    excess = len(job_name) - max_name_len
    if excess < len(name):
        return name[: len(name) - excess] + delimiter + postfix

    if len(postfix) <= max_name_len:
        return postfix
    return postfix[:max_name_len]


def has_deletion_timestamp(meta: Any) -> bool:
    return meta.deletion_timestamp is not None


_UNIT_NANOS = {
    "ns": 1,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_NUMBER = r"(?:\d+\.?\d*|\.\d+)"
_UNIT = "(?:ns|us|\u00b5s|\u03bcs|ms|s|m|h)"
_DURATION = re.compile(rf"([-+]?)((?:{_NUMBER}{_UNIT})+)")
_COMPONENT = re.compile(rf"({_NUMBER})({_UNIT})")
_MAX_NANOS = 2**63 - 1


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``"300ms"``, ``"-1.5h"`` or ``"2h45m"``.

    Units are ns, us (or µs), ms, s, m and h. A bare ``"0"`` is allowed.
    Raises ValueError for anything else.
    """
    if text in ("0", "+0", "-0"):
        return timedelta(0)
    match = _DURATION.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid duration: {text!r}")
    sign, body = match.groups()
    total = sum(
        (Fraction(number) * _UNIT_NANOS[unit] for number, unit in _COMPONENT.findall(body)),
        Fraction(0),
    )
    nanos = int(total)
    if nanos > _MAX_NANOS:
        raise ValueError(f"invalid duration: {text!r}")
    result = timedelta(seconds=nanos // 1_000_000_000, microseconds=(nanos % 1_000_000_000) / 1000)
    return -result if sign == "-" else result