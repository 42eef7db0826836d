"""Post-deployment checks: the integration test suite and manual test instructions."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional

from .command_runner import CommandRunner
from .config import DeploymentSettings

NPM = "npm"
HOST_ALIAS_VAR = "RUNTIME_HOST_ALIAS"


def integration_test_env(settings: DeploymentSettings, host_alias: Optional[str]) -> dict[str, str]:
    """Variables the test suite needs to reach the new endpoint."""
    env = {
        "PROJECT": settings.project,
        "NETWORK": settings.network,
        "SUBNET": settings.subnet,
    }
    if host_alias:
        env[HOST_ALIAS_VAR] = host_alias
    return env


def run_integration_tests(
    runner: CommandRunner, tests_dir: Path, env: Optional[Mapping[str, str]] = None
) -> None:
    """Install the test suite's dependencies and run it against the new endpoint."""
    print("Installing dependencies and running tests...")
    runner.run_streaming([NPM, "install"], cwd=tests_dir, env=env)
    runner.run_streaming([NPM, "run", "test"], cwd=tests_dir, env=env)


def build_test_instructions(host_alias: str) -> str:
    """Return the commands for sending an external test request."""
    return "\n".join(
        [
            "# To send an EXTERNAL test request, execute the following commands:",
            f'export {HOST_ALIAS_VAR}="{host_alias}"',
            f'curl -v "https://${HOST_ALIAS_VAR}/"',
        ]
    )
