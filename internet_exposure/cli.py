"""
Command-line interface and main entry point for the internet exposure deployment.

Validates preconditions, then runs the provisioning steps in order.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from .args_parser import parse_args
from .command_runner import CommandRunner
from .config import DeploymentSettings, load_settings
from .exceptions import PreconditionError
from .gcloud_client import GcloudCli
from .preflight import check_required_tools, required_tools
from .provisioning import DeploymentContext, build_provisioning_steps, run_steps


def _settings_from_args(args: argparse.Namespace) -> DeploymentSettings:
    return load_settings(
        overrides={"PROJECT": args.project, "NETWORK": args.network, "SUBNET": args.subnet},
        env_path=args.env_file,
        environment_name=args.environment_name,
        environment_group_name=args.environment_group_name,
        tests_dir=args.tests_dir,
        run_tests=not args.skip_tests,
    )


def prepare(args: argparse.Namespace) -> DeploymentSettings:
    """
    Resolve settings and check required tools.

    Raises:
        PreconditionError: If a variable or tool is missing
    """
    settings = _settings_from_args(args)
    check_required_tools(required_tools(settings.run_tests))
    return settings


def build_context(settings: DeploymentSettings, runner: Optional[CommandRunner] = None) -> DeploymentContext:
    runner = runner or CommandRunner()
    return DeploymentContext(
        settings=settings,
        runner=runner,
        gcloud=GcloudCli(runner, settings.project),
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the deployment CLI."""
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )

    try:
        settings = prepare(args)
    except PreconditionError as exc:
        logging.error("%s", exc)
        return 1

    ctx = build_context(settings)
    try:
        results = run_steps(build_provisioning_steps(), ctx)
    except KeyboardInterrupt:
        logging.error("Interrupted; resources created so far are left in place.")
        return 1

    if not results[-1].ok:
        return 1
    print("✓ Deployment complete")
    return 0
