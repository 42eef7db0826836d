"""Run CLI commands and decode their output"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence

from .exceptions import CommandError, CommandOutputError

SECRET_FLAGS = {"-t", "--token"}
MASK = "****"


def mask_secrets(args: Sequence[str]) -> list[str]:
    """Replace values following secret-bearing flags."""
    masked = []
    hide_next = False
    for arg in args:
        if hide_next:
            masked.append(MASK)
            hide_next = False
            continue
        masked.append(arg)
        if arg in SECRET_FLAGS:
            hide_next = True
    return masked


def format_command(args: Sequence[str]) -> str:
    """Render a command for messages, with secrets masked"""
    return " ".join(mask_secrets(args))


def collect_error_lines(stderr_output: Optional[str]) -> list[str]:
    """Return the non-blank lines of stderr"""
    if not stderr_output:
        return []
    return [line for line in stderr_output.split("\n") if line.strip()]


class CommandRunner:
    """Runs commands synchronously, optionally with extra PATH entries"""

    def __init__(self, extra_path: Optional[Path] = None, cwd: Optional[Path] = None):
        self.extra_path = extra_path
        self.cwd = cwd

    def _child_env(self, extra_env: Optional[Mapping[str, str]] = None) -> Optional[dict[str, str]]:
        if self.extra_path is None and not extra_env:
            return None
        env = dict(os.environ)
        env.update(extra_env or {})
        if self.extra_path is not None:
            env["PATH"] = os.pathsep.join([env.get("PATH", ""), str(self.extra_path)])
        return env

    def with_extra_path(self, extra_path: Path) -> "CommandRunner":
        """Return a runner that also searches extra_path for executables."""
        return CommandRunner(extra_path=extra_path, cwd=self.cwd)

    def run(self, args: Sequence[str], cwd: Optional[Path] = None) -> str:
        """
        Run a command and return its stdout.

        Raises:
            CommandError: If the command exits non-zero or cannot be started
        """
        command = format_command(args)
        logging.debug("Running: %s", command)
        try:
            result = subprocess.run(
                list(args),
                capture_output=True,
                text=True,
                check=False,
                cwd=cwd or self.cwd,
                env=self._child_env(),
            )
        except FileNotFoundError as exc:
            raise CommandError(command, 127, [str(exc)]) from exc
        if result.returncode != 0:
            raise CommandError(command, result.returncode, collect_error_lines(result.stderr))
        return result.stdout

    def run_json(self, args: Sequence[str], cwd: Optional[Path] = None):
        """Run a command and decode its stdout as JSON"""
        output = self.run(args, cwd=cwd)
        try:
            return json.loads(output)
        except json.JSONDecodeError as exc:
            raise CommandOutputError(format_command(args), f"invalid JSON ({exc.msg})") from exc

    def run_shell(self, script: str, cwd: Optional[Path] = None) -> str:
        """Run a bash pipeline, e.g. for the upstream installer"""
        return self.run(["bash", "-c", script], cwd=cwd)

    def run_streaming(
        self,
        args: Sequence[str],
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Run a command with output passed straight through to the terminal.

        env entries are added to the inherited environment.
        """
        command = format_command(args)
        logging.debug("Running: %s", command)
        try:
            result = subprocess.run(
                list(args),
                check=False,
                cwd=cwd or self.cwd,
                env=self._child_env(env),
            )
        except FileNotFoundError as exc:
            raise CommandError(command, 127, [str(exc)]) from exc
        if result.returncode != 0:
            raise CommandError(command, result.returncode)
