"""
apigeecli wrapper.

Installs apigeecli when missing and exposes the Apigee calls the deployment
makes: instance lookup, environment and environment group management, and
long-running operation lookups.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import constants
from .command_runner import CommandRunner
from .exceptions import CommandOutputError, MissingToolError, ResourceNotFoundError

APIGEECLI = "apigeecli"

# organizations/{org}/operations/{operation_id}
OPERATION_NAME_SEGMENTS = 4


@dataclass(frozen=True)
class ApigeeInstance:
    """An Apigee runtime instance"""

    name: str
    location: str
    service_attachment: str

    @classmethod
    def from_api(cls, payload: dict) -> "ApigeeInstance":
        """Build an instance from an instances list entry"""
        missing = [key for key in ("name", "location", "serviceAttachment") if not payload.get(key)]
        if missing:
            raise CommandOutputError(
                f"{APIGEECLI} instances list", f"instance missing fields: {', '.join(missing)}"
            )
        return cls(
            name=payload["name"],
            location=payload["location"],
            service_attachment=payload["serviceAttachment"],
        )


def apigeecli_bin_dir(home: Optional[Path] = None) -> Path:
    """Return the directory the upstream installer puts apigeecli in"""
    return (home or Path.home()) / constants.APIGEECLI_HOME_DIRNAME / "bin"


def installer_script() -> str:
    """Return the upstream install pipeline; a failed download fails the pipeline"""
    return f"set -o pipefail; curl -fsSL {constants.APIGEECLI_INSTALL_URL} | bash"


def install_apigeecli(runner: CommandRunner, home: Optional[Path] = None) -> Path:
    """
    Install apigeecli with the upstream script unless it is already present.

    Raises:
        CommandError: If the download or the installer fails
        MissingToolError: If the installer finishes without leaving the binary behind
    """
    bin_dir = apigeecli_bin_dir(home)
    if (bin_dir / APIGEECLI).exists():
        logging.info("apigeecli already installed in %s", bin_dir)
        return bin_dir

    print("Installing apigeecli")
    runner.run_shell(installer_script())
    if not (bin_dir / APIGEECLI).exists():
        raise MissingToolError(APIGEECLI)
    return bin_dir


def operation_id_from_name(name: Optional[str]) -> str:
    """Extract the operation id from an operation resource name"""
    parts = (name or "").split("/")
    if len(parts) < OPERATION_NAME_SEGMENTS or parts[2] != "operations" or not parts[3]:
        raise CommandOutputError(APIGEECLI, f"unexpected operation name {name!r}")
    return parts[3]


class ApigeeCli:
    """Calls apigeecli for a single organization with a bearer token"""

    def __init__(self, runner: CommandRunner, project: str, token: str):
        self.runner = runner
        self.project = project
        self.token = token

    def _run(self, *args: str):
        return self.runner.run_json([APIGEECLI, *args, "-o", self.project, "-t", self.token])

    def _run_operation(self, *args: str) -> str:
        response = self._run(*args)
        return operation_id_from_name(response.get("name") if isinstance(response, dict) else None)

    def list_instances(self) -> list[ApigeeInstance]:
        """List runtime instances in the organization"""
        response = self._run("instances", "list")
        entries = response.get("instances", []) if isinstance(response, dict) else []
        return [ApigeeInstance.from_api(entry) for entry in entries]

    def first_instance(self) -> ApigeeInstance:
        """Return the organization's first instance"""
        instances = self.list_instances()
        if not instances:
            raise ResourceNotFoundError("Apigee instance", self.project)
        return instances[0]

    def create_environment(self, environment: str) -> str:
        """Create a programmable proxy environment; returns the operation id"""
        return self._run_operation(
            "environments", "create", "-e", environment, "-d", "PROXY", "-p", "PROGRAMMABLE"
        )

    def attach_environment_to_instance(self, environment: str, instance: str) -> str:
        """Attach an environment to an instance; returns the operation id"""
        return self._run_operation("instances", "attachments", "attach", "-e", environment, "-n", instance)

    def create_environment_group(self, group: str, hostname: str) -> str:
        """Create an environment group serving hostname; returns the operation id"""
        return self._run_operation("envgroups", "create", "-d", hostname, "-n", group)

    def attach_environment_to_group(self, environment: str, group: str) -> str:
        """Attach an environment to an environment group; returns the operation id"""
        return self._run_operation("envgroups", "attach", "-e", environment, "-n", group)

    def get_operation(self, operation_id: str) -> dict:
        """Fetch a long-running operation"""
        response = self._run("operations", "get", "-n", operation_id)
        if not isinstance(response, dict):
            raise CommandOutputError(f"{APIGEECLI} operations get", "expected a JSON object")
        return response
