"""Custom exceptions for the internet exposure deployment."""

from __future__ import annotations


class ExposureError(Exception):
    """Base class for every error raised by the deployment."""


class PreconditionError(ExposureError):
    """Raised before any side effect when the deployment cannot start"""


class MissingEnvironmentVariableError(PreconditionError):
    """Raised when a required environment variable is unset or empty"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Error: No {name} variable set")


class MissingToolError(PreconditionError):
    """Raised when a required command is not on PATH"""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"Error: {tool} command is not on your PATH")


class CommandError(ExposureError):
    """Raised when a CLI command exits with a non-zero status"""

    def __init__(self, command: str, returncode: int, error_lines: list[str] | None = None):
        self.command = command
        self.returncode = returncode
        self.error_lines = error_lines or []
        message = f"{command} failed with return code {returncode}"
        if self.error_lines:
            message += "\n\nError details:\n" + "\n".join(self.error_lines)
        super().__init__(message)


class CommandOutputError(ExposureError):
    """Raised when a CLI command returns output that cannot be interpreted"""

    def __init__(self, command: str, reason: str):
        self.command = command
        super().__init__(f"Unexpected output from {command}: {reason}")


class ResourceNotFoundError(ExposureError):
    """Raised when an expected cloud resource does not exist"""

    def __init__(self, description: str, project: str):
        super().__init__(f"No {description} found in project {project}")


class StatusQueryError(ExposureError):
    """Raised when a status query keeps failing while polling"""

    def __init__(self, description: str, attempts: int, last_error: Exception):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Could not determine status of {description} after {attempts} attempts: {last_error}")


class OperationTimeoutError(ExposureError):
    """Raised when a long-running operation does not finish in time"""

    def __init__(self, description: str, timeout: float):
        self.description = description
        self.timeout = timeout
        super().__init__(f"Error: {description} did not complete in time ({timeout:g}s)")


class CertificateTimeoutError(OperationTimeoutError):
    """Raised when a managed certificate is not provisioned in time"""


class OperationFailedError(ExposureError):
    """Raised when a long-running operation finishes with an error"""

    def __init__(self, operation_id: str, error: dict):
        self.operation_id = operation_id
        self.error = error
        detail = error.get("message") or error
        super().__init__(f"Error: Operation {operation_id} failed: {detail}")
