"""
Argument parsing for the deployment CLI.

Every setting can also come from the environment or a .env file; flags win.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from . import constants


def add_target_arguments(parser: argparse.ArgumentParser) -> None:
    """Add project and network arguments."""
    parser.add_argument("--project", help="Google Cloud project / Apigee organization (default: $PROJECT).")
    parser.add_argument("--network", help="VPC network for the PSC endpoint (default: $NETWORK).")
    parser.add_argument("--subnet", help="Subnetwork for the PSC endpoint (default: $SUBNET).")
    parser.add_argument(
        "--env-file",
        help=f"Path to a .env file (default: ${constants.ENV_FILE_VAR} or ./.env).",
    )


def add_apigee_arguments(parser: argparse.ArgumentParser) -> None:
    """Add Apigee naming arguments."""
    parser.add_argument(
        "--environment-name",
        default=constants.DEFAULT_ENVIRONMENT_NAME,
        help=f"Apigee environment to create (default: {constants.DEFAULT_ENVIRONMENT_NAME}).",
    )
    parser.add_argument(
        "--environment-group-name",
        default=constants.DEFAULT_ENVIRONMENT_GROUP_NAME,
        help=f"Apigee environment group to create (default: {constants.DEFAULT_ENVIRONMENT_GROUP_NAME}).",
    )


def add_test_arguments(parser: argparse.ArgumentParser) -> None:
    """Add integration test arguments."""
    parser.add_argument(
        "--tests-dir",
        type=Path,
        default=Path("."),
        help="Directory holding the npm integration test suite (default: current directory).",
    )
    parser.add_argument("--skip-tests", action="store_true", help="Do not run the integration test suite.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command-line arguments for the deployment."""
    parser = argparse.ArgumentParser(
        description="Expose an Apigee runtime to the internet through an external HTTPS load balancer."
    )
    add_target_arguments(parser)
    add_apigee_arguments(parser)
    add_test_arguments(parser)
    return parser.parse_args(argv)
