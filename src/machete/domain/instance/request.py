"""Instance creation request."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from machete.domain.core.exceptions import RequestValidationError
from machete.domain.instance.value_objects import TaskType

VALID_VOLUME_TYPES = ("standard", "io1", "io2", "gp2", "gp3", "sc1", "st1")
MAX_TAG_KEY_LENGTH = 128
MAX_TAG_VALUE_LENGTH = 256
RESERVED_TAG_PREFIX = "aws:"

# Wire (camelCase) names accepted by from_dict, mapped to field names
_FIELD_ALIASES = {
    "imageId": "image_id",
    "availabilityZone": "availability_zone",
    "keyName": "key_name",
    "instanceType": "instance_type",
    "subnetId": "subnet_id",
    "securityGroupIds": "security_group_ids",
    "associatePublicIpAddress": "associate_public_ip_address",
    "deleteOnTermination": "delete_on_termination",
    "monitoring": "monitoring",
    "iamInstanceProfile": "iam_instance_profile",
    "ebsOptimized": "ebs_optimized",
    "blockDeviceName": "block_device_name",
    "rootSize": "root_size",
    "volumeType": "volume_type",
    "tags": "tags",
    "provisioner": "provisioner",
    "provisionerVersion": "provisioner_version",
    "workflow": "workflow",
}


@dataclass(frozen=True)
class CreateInstanceRequest:
    """Immutable description of a single EC2 instance to create.

    The tag mapping is stored read-only. Tags are applied in ascending key
    order, see ``sorted_tags``.
    """
    image_id: str = ""
    availability_zone: str = ""
    key_name: str = ""
    instance_type: str = ""
    subnet_id: str = ""
    security_group_ids: Tuple[str, ...] = ()
    associate_public_ip_address: bool = False
    delete_on_termination: bool = False
    monitoring: bool = False
    iam_instance_profile: str = ""
    ebs_optimized: bool = False
    block_device_name: str = ""
    root_size: int = 0
    volume_type: str = ""
    tags: Mapping[str, str] = field(default_factory=dict, hash=False)
    provisioner: str = ""
    provisioner_version: str = ""
    workflow: Tuple[TaskType, ...] = ()

    def __post_init__(self):
        if not isinstance(self.security_group_ids, str):
            object.__setattr__(self, "security_group_ids", tuple(self.security_group_ids))
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))
        object.__setattr__(self, "workflow", tuple(self.workflow))

    def validate(self) -> None:
        """
        Check the request before any provider call is made.

        Raises:
            RequestValidationError: With one entry per failing field
        """
        errors: Dict[str, str] = {}

        if not self.image_id:
            errors["imageId"] = "Image ID is required"
        if not self.instance_type:
            errors["instanceType"] = "Instance type is required"
        if not isinstance(self.root_size, int) or isinstance(self.root_size, bool):
            errors["rootSize"] = "Root volume size must be an integer"
        elif self.root_size < 0:
            errors["rootSize"] = "Root volume size cannot be negative"
        if self.volume_type and self.volume_type not in VALID_VOLUME_TYPES:
            errors["volumeType"] = f"Volume type must be one of {list(VALID_VOLUME_TYPES)}"
        if isinstance(self.security_group_ids, str):
            errors["securityGroupIds"] = "Security group IDs must be a list, not a single string"
        elif any(not isinstance(group, str) for group in self.security_group_ids):
            errors["securityGroupIds"] = "Security group IDs must be strings"
        elif any(not group for group in self.security_group_ids):
            errors["securityGroupIds"] = "Security group IDs cannot be empty"

        for key, value in self.tags.items():
            if not isinstance(key, str) or not isinstance(value, str):
                errors["tags"] = f"Tag {key!r} must have a string key and value"
            elif not key:
                errors["tags"] = "Tag keys cannot be empty"
            elif key.lower().startswith(RESERVED_TAG_PREFIX):
                errors["tags"] = f"Tag key {key} uses the reserved '{RESERVED_TAG_PREFIX}' prefix"
            elif len(key) > MAX_TAG_KEY_LENGTH:
                errors["tags"] = f"Tag key {key} exceeds {MAX_TAG_KEY_LENGTH} characters"
            elif len(value) > MAX_TAG_VALUE_LENGTH:
                errors["tags"] = f"Tag value for {key} exceeds {MAX_TAG_VALUE_LENGTH} characters"

        for task in self.workflow:
            if not isinstance(task, TaskType):
                errors["workflow"] = f"Unknown task type: {task}"

        if errors:
            raise RequestValidationError(errors)

    def sorted_tags(self) -> List[Tuple[str, str]]:
        """Return the tags as (key, value) pairs in ascending key order."""
        return [(key, self.tags[key]) for key in sorted(self.tags)]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CreateInstanceRequest:
        """Build a request from its camelCase or snake_case dictionary form."""
        field_names = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _FIELD_ALIASES.get(key, key)
            if name not in field_names:
                raise RequestValidationError({key: "Unknown request field"})
            kwargs[name] = value

        if isinstance(kwargs.get("security_group_ids"), str):
            raise RequestValidationError({"securityGroupIds": "Security group IDs must be a list, not a single string"})
        if "workflow" in kwargs:
            try:
                kwargs["workflow"] = tuple(TaskType(task) for task in kwargs["workflow"])
            except ValueError as e:
                raise RequestValidationError({"workflow": str(e)}) from e
        if kwargs.get("tags") is None:
            kwargs.pop("tags", None)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Camel-cased dictionary form, the inverse of ``from_dict``."""
        result: Dict[str, Any] = {}
        for alias, name in _FIELD_ALIASES.items():
            value = getattr(self, name)
            if name == "tags":
                value = dict(value)
            elif name == "security_group_ids":
                value = list(value)
            elif name == "workflow":
                value = [task.value for task in value]
            result[alias] = value
        return result
