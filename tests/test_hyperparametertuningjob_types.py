import pytest

from smoperator.api_common import (
    GROUP_VERSION,
    ObjectMeta,
    ResourceLimits,
    Tag,
    HyperParameterTuningJobConfig,
    TrainingJobStatusCounters,
)
from smoperator.hyperparametertuningjob_types import (
    HyperparameterTuningJob,
    HyperparameterTuningJobList,
    HyperparameterTuningJobSpec,
    HyperparameterTuningJobStatus,
)
from smoperator.kube_client import InMemoryKubeClient, NamespacedName, NotFoundError


def _make_job():
    return HyperparameterTuningJob(
        metadata=ObjectMeta(name="foo", namespace="default"),
        spec=HyperparameterTuningJobSpec(
            hyper_parameter_tuning_job_config=HyperParameterTuningJobConfig(
                resource_limits=ResourceLimits(
                    max_number_of_training_jobs=10,
                    max_parallel_training_jobs=10,
                ),
                strategy="Bayesian",
            ),
            hyper_parameter_tuning_job_name="hpo-job-name",
            region="us-east-1",
        ),
    )


def test_create_get_and_delete_through_client():
    client = InMemoryKubeClient()
    key = NamespacedName(namespace="default", name="foo")
    created = _make_job()

    client.create(created)
    fetched = client.get(key)
    assert fetched == created

    client.delete(created)
    with pytest.raises(NotFoundError):
        client.get(key)


def test_round_trip_through_dict():
    job = _make_job()
    job.status = HyperparameterTuningJobStatus(
        hyper_parameter_tuning_job_status="InProgress",
        sage_maker_hyper_parameter_tuning_job_name="hpo-job-name",
        training_job_status_counters=TrainingJobStatusCounters(completed=3, in_progress=2),
    )
    restored = HyperparameterTuningJob.from_dict(job.to_dict())
    assert restored == job


def test_json_keys_follow_resource_schema():
    data = _make_job().to_dict()
    assert data["apiVersion"] == GROUP_VERSION.api_version
    assert data["kind"] == "HyperparameterTuningJob"
    spec = data["spec"]
    assert spec["hyperParameterTuningJobName"] == "hpo-job-name"
    assert spec["hyperParameterTuningJobConfig"]["strategy"] == "Bayesian"
    limits = spec["hyperParameterTuningJobConfig"]["resourceLimits"]
    assert limits == {"maxNumberOfTrainingJobs": 10, "maxParallelTrainingJobs": 10}


def test_status_keys():
    status = HyperparameterTuningJobStatus(
        hyper_parameter_tuning_job_status="Completed",
        sage_maker_hyper_parameter_tuning_job_name="hpo-job-name",
    )
    assert status.to_dict() == {
        "hyperParameterTuningJobStatus": "Completed",
        "sageMakerHyperParameterTuningJobName": "hpo-job-name",
    }


def test_empty_spec_keeps_required_fields_only():
    data = HyperparameterTuningJobSpec().to_dict()
    assert set(data) == {"hyperParameterTuningJobConfig", "region"}


def test_deep_copy_is_independent():
    job = _make_job()
    job.spec.tags = [Tag(key="k", value="v")]
    copied = job.deep_copy()
    copied.spec.tags[0].value = "changed"
    assert job.spec.tags[0].value == "v"


def test_list_round_trip():
    listing = HyperparameterTuningJobList(items=[_make_job()])
    restored = HyperparameterTuningJobList.from_dict(listing.to_dict())
    assert restored.items == listing.items
    assert restored.kind == "HyperparameterTuningJobList"