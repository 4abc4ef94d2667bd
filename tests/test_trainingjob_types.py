import pytest

from smoperator.api_common import (
    AlgorithmSpecification,
    KeyValuePair,
    ObjectMeta,
    OutputDataConfig,
    ResourceConfig,
    StoppingCondition,
)
from smoperator.kube_client import InMemoryKubeClient, NamespacedName, NotFoundError
from smoperator.trainingjob_types import (
    TrainingJob,
    TrainingJobList,
    TrainingJobSpec,
    TrainingJobStatus,
)


def _make_job():
    return TrainingJob(
        metadata=ObjectMeta(name="foo", namespace="default"),
        spec=TrainingJobSpec(
            algorithm_specification=AlgorithmSpecification(training_input_mode="File"),
            output_data_config=OutputDataConfig(s3_output_path="s3://outputpath"),
            resource_config=ResourceConfig(
                instance_count=1,
                instance_type="xyz",
                volume_size_in_gb=50,
            ),
            role_arn="xxxxxxxxxxxxxxxxxxxx",
            region="region-xyz",
            stopping_condition=StoppingCondition(),
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
    job.spec.hyper_parameters = [KeyValuePair(name="epochs", value="5")]
    job.status = TrainingJobStatus(
        training_job_status="InProgress",
        secondary_status="Training",
        sage_maker_training_job_name="foo-job",
        model_path="s3://outputpath/model.tar.gz",
    )
    assert TrainingJob.from_dict(job.to_dict()) == job


def test_json_keys_follow_resource_schema():
    spec = _make_job().to_dict()["spec"]
    assert spec["algorithmSpecification"] == {"trainingInputMode": "File"}
    assert spec["outputDataConfig"] == {"s3OutputPath": "s3://outputpath"}
    assert spec["resourceConfig"] == {
        "instanceCount": 1,
        "instanceType": "xyz",
        "volumeSizeInGB": 50,
    }
    assert spec["roleArn"] == "xxxxxxxxxxxxxxxxxxxx"
    assert spec["stoppingCondition"] == {}


def test_status_keys():
    status = TrainingJobStatus(
        training_job_status="Completed",
        cloud_watch_log_url="https://logs.example.com/x",
        sage_maker_training_job_name="foo-job",
    )
    assert status.to_dict() == {
        "trainingJobStatus": "Completed",
        "cloudWatchLogUrl": "https://logs.example.com/x",
        "sageMakerTrainingJobName": "foo-job",
    }


def test_empty_spec_keeps_required_fields_only():
    data = TrainingJobSpec().to_dict()
    assert set(data) == {
        "algorithmSpecification",
        "outputDataConfig",
        "resourceConfig",
        "roleArn",
        "region",
        "stoppingCondition",
    }


def test_list_round_trip():
    listing = TrainingJobList(items=[_make_job()])
    restored = TrainingJobList.from_dict(listing.to_dict())
    assert restored.items == listing.items