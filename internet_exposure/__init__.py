"""
Internet exposure package.

Provision an Apigee environment, environment group and external HTTPS load
balancer so an Apigee runtime instance can be reached from the internet.
"""

from . import (
    apigee_client,
    args_parser,
    command_runner,
    config,
    constants,
    exceptions,
    gcloud_client,
    preflight,
    provisioning,
    resources,
    verification,
    waiter,
)
from .exceptions import ExposureError, OperationTimeoutError
from .waiter import wait_for_certificate, wait_for_operation, wait_for_state

__all__ = [
    "ExposureError",
    "OperationTimeoutError",
    "apigee_client",
    "args_parser",
    "command_runner",
    "config",
    "constants",
    "exceptions",
    "gcloud_client",
    "preflight",
    "provisioning",
    "resources",
    "verification",
    "wait_for_certificate",
    "wait_for_operation",
    "wait_for_state",
    "waiter",
]
