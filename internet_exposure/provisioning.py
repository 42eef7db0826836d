"""
Provisioning steps for exposing an Apigee runtime through an external HTTPS load balancer.

Each step is a small function over a shared DeploymentContext. Steps are run
in order by run_steps, which stops at the first failed StepResult.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence

from . import constants
from .apigee_client import ApigeeCli, ApigeeInstance, install_apigeecli
from .command_runner import CommandRunner
from .config import DeploymentSettings
from .exceptions import ExposureError
from .gcloud_client import GcloudCli
from .resources import LoadBalancerNames, runtime_host_alias
from .verification import build_test_instructions, integration_test_env, run_integration_tests
from .waiter import wait_for_certificate, wait_for_operation

COMPUTE_SERVICE = "compute.googleapis.com"


@dataclass
class DeploymentContext:  # pylint: disable=too-many-instance-attributes
    """State shared by the provisioning steps"""

    settings: DeploymentSettings
    runner: CommandRunner
    gcloud: GcloudCli
    names: LoadBalancerNames = field(default_factory=LoadBalancerNames)
    apigee_home: Optional[Path] = None
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], None] = time.sleep
    apigee_runner: Optional[CommandRunner] = None
    token: Optional[str] = None
    apigee: Optional[ApigeeCli] = None
    instance: Optional[ApigeeInstance] = None
    runtime_ip: Optional[str] = None
    host_alias: Optional[str] = None


@dataclass(frozen=True)
class StepResult:
    """Outcome of one provisioning step"""

    name: str
    ok: bool
    error: Optional[ExposureError] = None
    detail: Optional[str] = None


@dataclass(frozen=True)
class ProvisioningStep:
    """A named action over the deployment context"""

    name: str
    description: str
    action: Callable[[DeploymentContext], Optional[str]]

    def execute(self, ctx: DeploymentContext) -> StepResult:
        try:
            detail = self.action(ctx)
        except ExposureError as exc:
            return StepResult(self.name, ok=False, error=exc)
        return StepResult(self.name, ok=True, detail=detail)


def run_steps(steps: Sequence[ProvisioningStep], ctx: DeploymentContext) -> list[StepResult]:
    """
    Run steps in order, stopping at the first failure.

    Returns:
        Results of the steps that ran; the last one is the failure, if any
    """
    results = []
    total = len(steps)
    for index, step in enumerate(steps, start=1):
        print(f"→ Step {index}/{total}: {step.description}")
        result = step.execute(ctx)
        results.append(result)
        if not result.ok:
            logging.error("Step %s failed: %s", step.name, result.error)
            return results
        if result.detail:
            print(f"  ✓ {result.detail}")
    return results


def _wait(ctx: DeploymentContext, operation_id: str) -> None:
    wait_for_operation(ctx.apigee, operation_id, clock=ctx.clock, sleep=ctx.sleep)


def install_cli(ctx: DeploymentContext) -> str:
    bin_dir = install_apigeecli(ctx.runner, ctx.apigee_home)
    ctx.apigee_runner = ctx.runner.with_extra_path(bin_dir)
    return f"apigeecli available in {bin_dir}"


def fetch_token(ctx: DeploymentContext) -> None:
    ctx.token = ctx.gcloud.print_access_token()
    ctx.apigee = ApigeeCli(ctx.apigee_runner or ctx.runner, ctx.settings.project, ctx.token)


def describe_instance(ctx: DeploymentContext) -> str:
    ctx.instance = ctx.apigee.first_instance()
    return f"Instance {ctx.instance.name} in {ctx.instance.location}"


def create_environment(ctx: DeploymentContext) -> str:
    environment = ctx.settings.environment_name
    _wait(ctx, ctx.apigee.create_environment(environment))
    return f"Environment {environment} created"


def attach_environment(ctx: DeploymentContext) -> str:
    environment = ctx.settings.environment_name
    _wait(ctx, ctx.apigee.attach_environment_to_instance(environment, ctx.instance.name))
    return f"Environment {environment} attached to {ctx.instance.name}"


def enable_compute(ctx: DeploymentContext) -> None:
    ctx.gcloud.enable_service(COMPUTE_SERVICE)


def reserve_address(ctx: DeploymentContext) -> str:
    ctx.gcloud.create_global_address(ctx.names.address)
    ctx.runtime_ip = ctx.gcloud.describe_global_address(ctx.names.address)
    try:
        ctx.host_alias = runtime_host_alias(ctx.settings.environment_group_name, ctx.runtime_ip)
    except ValueError as exc:
        raise ExposureError(str(exc)) from exc
    return f"Runtime IP {ctx.runtime_ip}, host alias {ctx.host_alias}"


def create_environment_group(ctx: DeploymentContext) -> str:
    group = ctx.settings.environment_group_name
    _wait(ctx, ctx.apigee.create_environment_group(group, ctx.host_alias))
    return f"Environment group {group} created"


def attach_environment_to_group(ctx: DeploymentContext) -> None:
    _wait(
        ctx,
        ctx.apigee.attach_environment_to_group(
            ctx.settings.environment_name, ctx.settings.environment_group_name
        ),
    )


def create_certificate(ctx: DeploymentContext) -> None:
    ctx.gcloud.create_ssl_certificate(ctx.names.certificate, ctx.host_alias)


def create_neg(ctx: DeploymentContext) -> None:
    ctx.gcloud.create_psc_neg(
        ctx.names.neg,
        ctx.instance.service_attachment,
        ctx.instance.location,
        ctx.settings.network,
        ctx.settings.subnet,
    )


def create_backend(ctx: DeploymentContext) -> None:
    ctx.gcloud.create_backend_service(ctx.names.backend_service)
    ctx.gcloud.add_backend(ctx.names.backend_service, ctx.names.neg, ctx.instance.location)


def create_url_map(ctx: DeploymentContext) -> None:
    ctx.gcloud.create_url_map(ctx.names.url_map, ctx.names.backend_service)


def create_https_proxy(ctx: DeploymentContext) -> None:
    ctx.gcloud.create_https_proxy(ctx.names.https_proxy, ctx.names.url_map, ctx.names.certificate)


def create_forwarding_rule(ctx: DeploymentContext) -> None:
    ctx.gcloud.create_forwarding_rule(ctx.names.forwarding_rule, ctx.names.address, ctx.names.https_proxy)


def wait_for_tls(ctx: DeploymentContext) -> str:
    wait_for_certificate(ctx.gcloud, ctx.names.certificate, clock=ctx.clock, sleep=ctx.sleep)
    # Pause to allow TLS setup to complete
    ctx.sleep(constants.TLS_SETTLE_SECONDS)
    return f"Certificate {ctx.names.certificate} is ACTIVE"


def run_tests(ctx: DeploymentContext) -> str:
    if not ctx.settings.run_tests:
        return "Integration tests skipped"
    run_integration_tests(
        ctx.runner, ctx.settings.tests_dir, env=integration_test_env(ctx.settings, ctx.host_alias)
    )
    return "Integration tests passed"


def print_instructions(ctx: DeploymentContext) -> None:
    print(build_test_instructions(ctx.host_alias))


def build_provisioning_steps() -> list[ProvisioningStep]:
    """Return the deployment steps in execution order."""
    return [
        ProvisioningStep("install-apigeecli", "Installing apigeecli", install_cli),
        ProvisioningStep("access-token", "Fetching access token", fetch_token),
        ProvisioningStep("describe-instance", "Getting Apigee instance information", describe_instance),
        ProvisioningStep("create-environment", "Creating environment", create_environment),
        ProvisioningStep(
            "attach-environment",
            "Attaching environment to instance (may take a few minutes)",
            attach_environment,
        ),
        ProvisioningStep("enable-compute", "Enabling Compute Engine API", enable_compute),
        ProvisioningStep("reserve-address", "Reserving load balancer IP address", reserve_address),
        ProvisioningStep("create-environment-group", "Creating environment group", create_environment_group),
        ProvisioningStep("attach-environment-group", "Attaching environment to group", attach_environment_to_group),
        ProvisioningStep("create-certificate", "Creating SSL certificate", create_certificate),
        ProvisioningStep("create-neg", "Creating PSC network endpoint group", create_neg),
        ProvisioningStep("create-backend", "Creating backend service", create_backend),
        ProvisioningStep("create-url-map", "Creating URL map", create_url_map),
        ProvisioningStep("create-https-proxy", "Creating target HTTPS proxy", create_https_proxy),
        ProvisioningStep("create-forwarding-rule", "Creating global forwarding rule", create_forwarding_rule),
        ProvisioningStep(
            "wait-for-certificate",
            "Waiting for certificate provisioning to complete (may take some time)",
            wait_for_tls,
        ),
        ProvisioningStep("integration-tests", "Running integration tests", run_tests),
        ProvisioningStep("instructions", "Printing test instructions", print_instructions),
    ]
