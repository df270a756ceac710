"""Builds RunInstances parameters for a single-instance launch."""
from typing import Any, Dict

from machete.domain.instance.request import CreateInstanceRequest


class RunInstancesConfigBuilder:
    """Map a CreateInstanceRequest onto ``ec2.run_instances`` keyword arguments.

    Exactly one instance is requested. Empty optional fields are left out so
    that EC2 applies its own defaults instead of rejecting blank values.
    """

    @staticmethod
    def build(request: CreateInstanceRequest) -> Dict[str, Any]:
        config: Dict[str, Any] = {
            'ImageId': request.image_id,
            'InstanceType': request.instance_type,
            'MinCount': 1,
            'MaxCount': 1,
            'Monitoring': {'Enabled': request.monitoring},
            'EbsOptimized': request.ebs_optimized,
        }

        if request.availability_zone:
            config['Placement'] = {'AvailabilityZone': request.availability_zone}

        if request.key_name:
            config['KeyName'] = request.key_name

        if request.iam_instance_profile:
            config['IamInstanceProfile'] = {'Name': request.iam_instance_profile}

        network_interface = RunInstancesConfigBuilder._build_network_interface(request)
        if network_interface:
            config['NetworkInterfaces'] = [network_interface]

        if request.block_device_name:
            ebs: Dict[str, Any] = {'DeleteOnTermination': request.delete_on_termination}
            if request.root_size > 0:
                ebs['VolumeSize'] = request.root_size
            if request.volume_type:
                ebs['VolumeType'] = request.volume_type
            config['BlockDeviceMappings'] = [{
                'DeviceName': request.block_device_name,
                'Ebs': ebs,
            }]

        return config

    @staticmethod
    def _build_network_interface(request: CreateInstanceRequest) -> Dict[str, Any]:
        """Primary interface (eth0); empty when the request sets no network options."""
        if not (request.subnet_id or request.security_group_ids or request.associate_public_ip_address):
            return {}

        network_interface: Dict[str, Any] = {
            'DeviceIndex': 0,
            'AssociatePublicIpAddress': request.associate_public_ip_address,
            'DeleteOnTermination': request.delete_on_termination,
        }
        if request.subnet_id:
            network_interface['SubnetId'] = request.subnet_id
        if request.security_group_ids:
            network_interface['Groups'] = list(request.security_group_ids)
        return network_interface
