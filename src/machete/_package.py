"""Package metadata and naming constants."""

PACKAGE_NAME = "machete"
__version__ = "0.1.0"

# Identity reported on machine requests built by the AWS provisioner
PROVISIONER_NAME = "aws"
PROVISIONER_VERSION = "0.1.0"
