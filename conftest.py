"""Pytest configuration and shared fixtures for the internet exposure deployment."""

# pylint: disable=wrong-import-position

import sys
from pathlib import Path
from unittest import mock

PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from internet_exposure.config import DeploymentSettings


class FakeClock:
    """Monotonic clock that only advances when sleep is called."""

    def __init__(self, start: float = 1000.0):
        self.start = start
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    @property
    def elapsed(self) -> float:
        return self.now - self.start


@pytest.fixture(name="fake_clock")
def fixture_fake_clock():
    """Provide a FakeClock whose sleep advances time instantly."""
    return FakeClock()


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Clear deployment variables and point the .env lookup at an empty temp dir."""
    for name in ("PROJECT", "NETWORK", "SUBNET", "EXPOSURE_ENV_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path


@pytest.fixture(name="settings")
def fixture_settings(tmp_path):
    """DeploymentSettings for a sample project."""
    return DeploymentSettings(
        project="demo-project",
        network="default",
        subnet="default-subnet",
        tests_dir=tmp_path,
    )


@pytest.fixture(name="mock_print")
def fixture_mock_print(monkeypatch):
    """Patch builtins.print and return the mock for assertions."""
    patched = mock.Mock()
    monkeypatch.setattr("builtins.print", patched)
    return patched
