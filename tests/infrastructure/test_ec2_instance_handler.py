"""Tests for EC2InstanceHandler against moto and a mocked EC2 client."""
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from machete.application.lifecycle.provisioner import Provisioner
from machete.config.schemas import AWSProviderConfig
from machete.domain.core.exceptions import UnexpectedResponseError
from machete.domain.instance.request import CreateInstanceRequest
from machete.domain.instance.value_objects import ErrorKind
from machete.providers.aws.exceptions import AWSEntityNotFoundError, AuthorizationError
from machete.providers.aws.infrastructure.aws_client import AWSClient
from machete.providers.aws.infrastructure.handlers import EC2InstanceHandler


@pytest.fixture
def aws_setup(aws_credentials):
    """Setup the network resources a launch needs."""
    with mock_aws():
        ec2_client = boto3.client("ec2", region_name="us-east-1")

        vpc = ec2_client.create_vpc(CidrBlock="10.0.0.0/16")
        vpc_id = vpc["Vpc"]["VpcId"]

        subnet = ec2_client.create_subnet(
            VpcId=vpc_id,
            CidrBlock="10.0.0.0/24",
            AvailabilityZone="us-east-1a"
        )

        sg = ec2_client.create_security_group(
            GroupName="test-sg",
            Description="Test security group",
            VpcId=vpc_id
        )

        yield {
            "ec2_client": ec2_client,
            "subnet_id": subnet["Subnet"]["SubnetId"],
            "security_group_id": sg["GroupId"],
        }


@pytest.fixture
def handler(aws_setup):
    return EC2InstanceHandler(AWSClient(AWSProviderConfig(region="us-east-1")))


@pytest.fixture
def launch_request(aws_setup):
    return CreateInstanceRequest(
        image_id="ami-12345678",
        instance_type="t2.micro",
        subnet_id=aws_setup["subnet_id"],
        security_group_ids=(aws_setup["security_group_id"],),
        block_device_name="/dev/xvda",
        root_size=20,
        volume_type="gp3",
        delete_on_termination=True,
        tags={"env": "dev"},
    )


def client_error(code, operation):
    return ClientError({'Error': {'Code': code, 'Message': f"{code} raised"}}, operation)


@pytest.mark.aws
class TestEC2InstanceHandlerMoto:
    """Handler round trips against moto."""

    def test_create_describe_tag_terminate(self, handler, launch_request, aws_setup):
        instance_id = handler.create_instance(launch_request)

        assert instance_id.startswith("i-")
        assert handler.describe_instance(instance_id) in ("pending", "running")

        handler.create_tags(instance_id, launch_request.sorted_tags())
        tags = aws_setup["ec2_client"].describe_tags(
            Filters=[{"Name": "resource-id", "Values": [instance_id]}]
        )["Tags"]
        assert {(tag["Key"], tag["Value"]) for tag in tags} == {("env", "dev")}

        assert handler.terminate_instance(instance_id) == 1
        assert handler.describe_instance(instance_id) in ("shutting-down", "terminated")

    def test_launch_requests_one_instance(self, handler, launch_request, aws_setup):
        instance_id = handler.create_instance(launch_request)

        reservations = aws_setup["ec2_client"].describe_instances(InstanceIds=[instance_id])["Reservations"]
        assert len(reservations) == 1
        assert [instance["InstanceId"] for instance in reservations[0]["Instances"]] == [instance_id]
        assert reservations[0]["Instances"][0]["InstanceType"] == "t2.micro"

    def test_terminate_unknown_instance_affects_nothing(self, handler):
        assert handler.terminate_instance("i-0123456789abcdef0") == 0

    def test_describe_unknown_instance(self, handler):
        with pytest.raises(AWSEntityNotFoundError):
            handler.describe_instance("i-0123456789abcdef0")


@pytest.mark.unit
class TestEC2InstanceHandlerResponses:
    """Response-shape checks with a mocked EC2 client."""

    def setup_method(self):
        self.aws_client = MagicMock()
        self.ec2 = self.aws_client.ec2_client
        self.handler = EC2InstanceHandler(self.aws_client)
        self.request = CreateInstanceRequest(image_id="img-1", instance_type="t.small", tags={"env": "dev"})

    def test_create_returns_single_instance_id(self):
        self.ec2.run_instances.return_value = {'Instances': [{'InstanceId': 'i-1'}], 'ReservationId': 'r-1'}

        assert self.handler.create_instance(self.request) == 'i-1'
        kwargs = self.ec2.run_instances.call_args[1]
        assert kwargs['MinCount'] == 1
        assert kwargs['MaxCount'] == 1
        assert kwargs['ImageId'] == 'img-1'

    @pytest.mark.parametrize("instances", [[], [{'InstanceId': 'i-1'}, {'InstanceId': 'i-2'}]])
    def test_create_rejects_other_instance_counts(self, instances):
        self.ec2.run_instances.return_value = {'Instances': instances}

        with pytest.raises(UnexpectedResponseError) as exc_info:
            self.handler.create_instance(self.request)

        assert exc_info.value.resource_count == len(instances)

    def test_workflow_never_tags_after_unexpected_launch(self, fake_sleep, types_of):
        self.ec2.run_instances.return_value = {'Instances': [{'InstanceId': 'i-1'}, {'InstanceId': 'i-2'}]}
        provisioner = Provisioner(self.handler, sleep_function=fake_sleep)

        events = provisioner.create_instance(self.request).collect()

        assert types_of(events) == ["LifecycleStarted", "LifecycleError"]
        assert events[-1].error_kind == ErrorKind.UNEXPECTED_RESPONSE
        self.ec2.describe_instances.assert_not_called()
        self.ec2.create_tags.assert_not_called()

    def test_describe_returns_state_name(self):
        self.ec2.describe_instances.return_value = {
            'Reservations': [{'Instances': [{'InstanceId': 'i-1', 'State': {'Name': 'running'}}]}]
        }

        assert self.handler.describe_instance('i-1') == 'running'
        self.ec2.describe_instances.assert_called_once_with(InstanceIds=['i-1'])

    @pytest.mark.parametrize("response", [
        {'Reservations': []},
        {'Reservations': [{'Instances': []}, {'Instances': []}]},
        {'Reservations': [{'Instances': []}]},
        {'Reservations': [{'Instances': [{'State': {'Name': 'running'}}, {'State': {'Name': 'running'}}]}]},
    ])
    def test_describe_rejects_other_counts(self, response):
        self.ec2.describe_instances.return_value = response

        with pytest.raises(UnexpectedResponseError):
            self.handler.describe_instance('i-1')

    @pytest.mark.parametrize("terminating,expected", [
        ([], 0),
        ([{'InstanceId': 'i-1'}], 1),
        ([{'InstanceId': 'i-1'}, {'InstanceId': 'i-2'}], 2),
    ])
    def test_terminate_counts_affected_instances(self, terminating, expected):
        self.ec2.terminate_instances.return_value = {'TerminatingInstances': terminating}

        assert self.handler.terminate_instance('i-1') == expected

    def test_terminate_not_found_is_zero(self):
        self.ec2.terminate_instances.side_effect = client_error('InvalidInstanceID.NotFound', 'TerminateInstances')

        assert self.handler.terminate_instance('i-1') == 0

    def test_client_errors_are_converted(self):
        original = client_error('UnauthorizedOperation', 'RunInstances')
        self.ec2.run_instances.side_effect = original

        with pytest.raises(AuthorizationError) as exc_info:
            self.handler.create_instance(self.request)

        assert exc_info.value.error_code == 'UnauthorizedOperation'
        assert exc_info.value.__cause__ is original

    def test_create_tags_sends_pairs_in_order(self):
        self.handler.create_tags('i-1', [('a', '1'), ('b', '2')])

        self.ec2.create_tags.assert_called_once_with(
            Resources=['i-1'],
            Tags=[{'Key': 'a', 'Value': '1'}, {'Key': 'b', 'Value': '2'}]
        )
