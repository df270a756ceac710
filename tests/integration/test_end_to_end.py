"""End-to-end lifecycle runs against moto."""
import boto3
import pytest
from moto import mock_aws

from machete.application.lifecycle.provisioner import new_machine_request
from machete.config.manager import ConfigurationManager
from machete.domain.instance.value_objects import ErrorKind, LifecycleOperation
from machete.providers.aws.registration import build_provisioner, create_aws_provisioner


@pytest.fixture
def network(aws_credentials):
    with mock_aws():
        ec2_client = boto3.client("ec2", region_name="us-east-1")
        vpc_id = ec2_client.create_vpc(CidrBlock="10.0.0.0/16")["Vpc"]["VpcId"]
        subnet_id = ec2_client.create_subnet(VpcId=vpc_id, CidrBlock="10.0.0.0/24")["Subnet"]["SubnetId"]
        sg_id = ec2_client.create_security_group(
            GroupName="machete-sg", Description="machete", VpcId=vpc_id
        )["GroupId"]
        yield {"ec2_client": ec2_client, "subnet_id": subnet_id, "security_group_id": sg_id}


@pytest.fixture
def aws_provisioner(network, recording_observer, fake_sleep):
    config = ConfigurationManager({"provider": {"region": "us-east-1"}}).app_config
    provisioner = create_aws_provisioner(config, observer=recording_observer, validate_credentials=True)
    provisioner.sleep_function = fake_sleep
    return provisioner


@pytest.mark.aws
class TestEndToEnd:
    """Create and destroy through the EC2-backed provisioner."""

    def test_create_then_destroy(self, aws_provisioner, network, recording_observer, types_of):
        request = new_machine_request(
            image_id="ami-12345678",
            instance_type="t2.micro",
            subnet_id=network["subnet_id"],
            security_group_ids=(network["security_group_id"],),
            tags={"team": "ops", "env": "dev"},
        )

        create_events = aws_provisioner.create_instance(request).collect()

        assert types_of(create_events) == ["LifecycleStarted", "LifecycleCompleted"]
        instance_id = create_events[-1].instance_id
        tags = network["ec2_client"].describe_tags(
            Filters=[{"Name": "resource-id", "Values": [instance_id]}]
        )["Tags"]
        assert {tag["Key"]: tag["Value"] for tag in tags} == {"env": "dev", "team": "ops"}

        destroy_events = aws_provisioner.destroy_instance(instance_id).collect()

        assert types_of(destroy_events) == ["LifecycleStarted", "LifecycleCompleted"]
        assert all(event.operation == LifecycleOperation.DESTROY for event in destroy_events)
        state = network["ec2_client"].describe_instances(
            InstanceIds=[instance_id]
        )["Reservations"][0]["Instances"][0]["State"]["Name"]
        assert state == "terminated"
        assert len(recording_observer.events) == 4

    def test_destroy_unknown_instance(self, aws_provisioner, types_of):
        events = aws_provisioner.destroy_instance("i-0123456789abcdef0").collect()

        assert types_of(events) == ["LifecycleStarted", "LifecycleError"]
        assert events[-1].error_kind == ErrorKind.INVALID_REQUEST

    def test_build_provisioner_from_params(self, network, fake_sleep, types_of):
        provisioner = build_provisioner({"REGION": "us-east-1", "RETRIES": "2"})
        provisioner.sleep_function = fake_sleep

        events = provisioner.create_instance(
            new_machine_request(image_id="ami-12345678", instance_type="t2.micro")
        ).collect()

        assert types_of(events) == ["LifecycleStarted", "LifecycleCompleted"]
        assert provisioner.get_task_handler("create-instance") is not None
