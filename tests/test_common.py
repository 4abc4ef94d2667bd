import uuid
from datetime import datetime, timedelta, timezone

import pytest

from smoperator.api_common import ObjectMeta
from smoperator.batchtransformjob_types import BatchTransformJob
from smoperator.common import (
    ReconcileAction,
    Result,
    create_spec_differs_from_description_error_message,
    get_generated_job_name,
    get_or_default,
    has_deletion_timestamp,
    ignore_not_found,
    no_requeue,
    now,
    parse_duration,
    remove_string,
    requeue_after_interval,
    requeue_immediately,
    requeue_immediately_unless_generation_changed,
)
from smoperator.kube_client import KubeClientError, NotFoundError


@pytest.fixture
def uid():
    return str(uuid.uuid4())


def _plain(uid):
    return uid.replace("-", "")


class TestGetGeneratedJobName:
    def test_large_max_len_concatenates(self, uid):
        name = get_generated_job_name(uid, "object.meta.name", 64)
        assert "object.meta.name" in name
        assert _plain(uid) in name
        assert len(name) <= 64

    def test_exactly_enough(self, uid):
        meta_name = "A" * (64 - (32 + 1))
        name = get_generated_job_name(uid, meta_name, 64)
        assert meta_name in name
        assert _plain(uid) in name
        assert len(name) == 64

    def test_max_len_smaller_than_name(self, uid):
        name = get_generated_job_name(uid, "object.meta.name", 32)
        assert _plain(uid) in name
        assert len(name) <= 32
        assert name[0] != "-"

    def test_name_larger(self, uid):
        name = get_generated_job_name(uid, "A" * 253, 64)
        assert _plain(uid) in name
        assert len(name) <= 64
        assert name[0] != "-"

    def test_not_enough_for_full_uid(self, uid):
        name = get_generated_job_name(uid, "object.meta.name", 30)
        assert name == _plain(uid)[:30]
        assert len(name) <= 30
        assert name in _plain(uid)

    def test_truncates_prefix_partially(self):
        uid = "aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee"
        name = get_generated_job_name(uid, "abcdef", 36)
        assert name == "abc-aaaaaaaabbbbccccddddeeeeeeeeeeee"


def test_requeue_helpers():
    assert no_requeue() == Result(requeue=False, requeue_after=timedelta(0))
    assert requeue_immediately() == Result(requeue=True)
    assert requeue_after_interval(timedelta(seconds=5)).requeue_after == timedelta(seconds=5)
    assert requeue_after_interval(2).requeue_after == timedelta(seconds=2)
    assert requeue_after_interval(2).requeue is False


def test_requeue_unless_generation_changed():
    assert requeue_immediately_unless_generation_changed(3, 3) == requeue_immediately()
    assert requeue_immediately_unless_generation_changed(3, 4) == no_requeue()


def test_ignore_not_found():
    assert ignore_not_found(NotFoundError("gone")) is None
    other = KubeClientError("boom")
    assert ignore_not_found(other) is other
    assert ignore_not_found(None) is None


def test_remove_string():
    assert remove_string(["a", "b", "a", "c"], "a") == ["b", "c"]
    assert remove_string(None, "a") == []
    assert remove_string(["x"], "y") == ["x"]


def test_get_or_default():
    assert get_or_default(None, "d") == "d"
    assert get_or_default("v", "d") == "v"
    assert get_or_default("", "d") == ""


def test_now_is_utc_and_recent():
    value = now()
    assert value.tzinfo is not None
    assert abs(datetime.now(timezone.utc) - value) < timedelta(seconds=5)
    assert value.microsecond == 0


def test_has_deletion_timestamp():
    assert has_deletion_timestamp(ObjectMeta()) is False
    assert has_deletion_timestamp(ObjectMeta(deletion_timestamp=now())) is True


def test_spec_differs_message():
    message = create_spec_differs_from_description_error_message(
        BatchTransformJob(), "Failed", "field x differs"
    )
    assert message.startswith("Updates to BatchTransformJob are not supported")
    assert 'marked as "Failed"' in message
    assert message.endswith(":\nfield x differs")


def test_reconcile_action_values():
    assert ReconcileAction("NeedsCreate") is ReconcileAction.NEEDS_CREATE
    assert ReconcileAction.NEEDS_UPDATE == "NeedsUpdate"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0", timedelta(0)),
        ("5s", timedelta(seconds=5)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("300ms", timedelta(milliseconds=300)),
        ("-1.5h", -timedelta(hours=1, minutes=30)),
        ("+2m", timedelta(minutes=2)),
        ("10us", timedelta(microseconds=10)),
        (".5s", timedelta(milliseconds=500)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "5", "abc", "1x", "s", "1.s.", "-"])
def test_parse_duration_invalid(text):
    with pytest.raises(ValueError):
        parse_duration(text)