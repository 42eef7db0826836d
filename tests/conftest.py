"""Shared pytest fixtures for test files."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from internet_exposure.command_runner import CommandRunner
from tests.cli_test_utils import completed


@pytest.fixture(autouse=True)
def stub_subprocess_run(monkeypatch):
    """Replace subprocess.run so tests never invoke real CLIs."""
    fake_run = MagicMock(return_value=completed(json.dumps({})))
    monkeypatch.setattr("internet_exposure.command_runner.subprocess.run", fake_run)
    return fake_run


@pytest.fixture(name="mock_runner")
def fixture_mock_runner():
    """A CommandRunner mock with the same interface as the real one."""
    runner = MagicMock(spec=CommandRunner)
    runner.with_extra_path.return_value = runner
    return runner


@pytest.fixture(name="quiet_progress")
def fixture_quiet_progress():
    """Progress reporter that records ticks without writing to stdout."""
    return MagicMock()
