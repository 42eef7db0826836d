"""Checks that must pass before any cloud resource is touched."""

from __future__ import annotations

import logging
import shutil

from .exceptions import MissingToolError

JSON_QUERY_TOOL = "jq"
BASE_REQUIRED_TOOLS = (JSON_QUERY_TOOL, "gcloud")
TEST_RUNNER_TOOL = "npm"


def required_tools(run_tests: bool = True) -> tuple[str, ...]:
    """Return the commands the deployment needs on PATH."""
    if run_tests:
        return (*BASE_REQUIRED_TOOLS, TEST_RUNNER_TOOL)
    return BASE_REQUIRED_TOOLS


def check_required_tools(tools: tuple[str, ...]) -> dict[str, str]:
    """
    Ensure every tool resolves on PATH.

    Returns:
        dict: Mapping of tool name to resolved executable path

    Raises:
        MissingToolError: For the first tool that cannot be found
    """
    resolved = {}
    for tool in tools:
        path = shutil.which(tool)
        if not path:
            raise MissingToolError(tool)
        logging.debug("Found %s at %s", tool, path)
        resolved[tool] = path
    return resolved
