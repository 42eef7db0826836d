"""
Configuration and environment resolution for the internet exposure deployment.

Loads an optional .env file and validates the variables the deployment needs.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from . import constants
from .exceptions import MissingEnvironmentVariableError


@dataclass(frozen=True)
class DeploymentSettings:
    """Inputs for a single deployment run."""

    project: str
    network: str
    subnet: str
    environment_name: str = constants.DEFAULT_ENVIRONMENT_NAME
    environment_group_name: str = constants.DEFAULT_ENVIRONMENT_GROUP_NAME
    tests_dir: Path = Path(".")
    run_tests: bool = True


def resolve_env_path(env_path: Optional[str] = None) -> Path:
    """
    Determine which .env file should be loaded.

    Priority order:
      1. Explicit parameter
      2. EXPOSURE_ENV_FILE environment variable
      3. .env in the current working directory
    """
    if env_path:
        return Path(env_path).expanduser()
    override = os.environ.get(constants.ENV_FILE_VAR)
    if override:
        return Path(override).expanduser()
    return Path.cwd() / ".env"


def load_env_file(env_path: Optional[str] = None) -> bool:
    """Load variables from the resolved .env file without overriding the environment."""
    resolved_path = resolve_env_path(env_path)
    if not resolved_path.is_file():
        logging.debug("No .env file at %s", resolved_path)
        return False
    load_dotenv(resolved_path, override=False)
    logging.info("Loaded environment from %s", resolved_path)
    return True


def require_env_vars(
    names: tuple[str, ...] = constants.REQUIRED_ENV_VARS,
    environ: Optional[Mapping[str, str]] = None,
) -> dict[str, str]:
    """
    Return the values of the required variables.

    Raises:
        MissingEnvironmentVariableError: For the first variable that is unset or empty
    """
    source = os.environ if environ is None else environ
    values = {}
    for name in names:
        value = source.get(name, "")
        if not value:
            raise MissingEnvironmentVariableError(name)
        values[name] = value
    return values


def load_settings(
    overrides: Optional[Mapping[str, Optional[str]]] = None,
    env_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    **options,
) -> DeploymentSettings:
    """Build DeploymentSettings from command-line overrides, the .env file and the environment."""
    load_env_file(env_path)
    source = dict(os.environ if environ is None else environ)
    for name, value in (overrides or {}).items():
        if value:
            source[name] = value

    values = require_env_vars(environ=source)
    return DeploymentSettings(
        project=values["PROJECT"],
        network=values["NETWORK"],
        subnet=values["SUBNET"],
        **options,
    )
