"""
Polling helpers for long-running cloud operations.

wait_for_state is the shared loop: query a status, return when it reaches the
terminal value, otherwise sleep and retry until the deadline. Query failures
(CLI errors, unparseable or incomplete responses) are counted separately from
"still running" and abort the wait once the retry budget is exhausted.

wait_for_operation and wait_for_certificate specialise it for Apigee
long-running operations and Google-managed SSL certificates.
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TextIO

from . import constants
from .exceptions import (
    CertificateTimeoutError,
    CommandError,
    CommandOutputError,
    OperationFailedError,
    OperationTimeoutError,
    StatusQueryError,
)

QUERY_ERRORS = (CommandError, CommandOutputError)


class ProgressDots:
    """Writes a dot per poll and a newline when the wait ends"""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def _stream(self) -> TextIO:
        return self.stream or sys.stdout

    def tick(self) -> None:
        print(".", end="", file=self._stream(), flush=True)

    def done(self) -> None:
        print(file=self._stream(), flush=True)


@dataclass
class PollResult:
    """Outcome of a successful wait"""

    state: str
    value: Any
    polls: int
    elapsed: float


@dataclass(frozen=True)
class OperationStatus:
    """Snapshot of an Apigee long-running operation"""

    operation_id: str
    owner: str
    state: str
    error: Optional[dict] = None
    document: dict = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_document(cls, operation_id: str, owner: str, document: dict) -> "OperationStatus":
        metadata = document.get("metadata") or {}
        state = metadata.get("state") if isinstance(metadata, dict) else None
        if not state:
            raise CommandOutputError(f"operation {operation_id}", "missing metadata.state")
        return cls(
            operation_id=operation_id,
            owner=owner,
            state=state,
            error=document.get("error"),
            document=document,
        )


def wait_for_state(  # pylint: disable=too-many-arguments
    description: str,
    fetch_state: Callable[[], tuple[str, Any]],
    terminal_state: str,
    *,
    timeout: float,
    interval: float,
    query_retries: int = constants.STATUS_QUERY_RETRIES,
    timeout_error: type[OperationTimeoutError] = OperationTimeoutError,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    progress: Optional[ProgressDots] = None,
) -> PollResult:
    """
    Poll fetch_state until it reports terminal_state.

    Args:
        description: Human-readable name used in log and error messages
        fetch_state: Returns (state, value); raises CommandError/CommandOutputError
            when the status cannot be determined
        terminal_state: State that ends the wait successfully
        timeout: Seconds since the first poll after which the wait fails
        interval: Seconds to sleep between polls
        query_retries: Consecutive failed queries tolerated before giving up

    Returns:
        PollResult for the terminal poll

    Raises:
        OperationTimeoutError (or timeout_error): If the deadline passes first
        StatusQueryError: If more than query_retries consecutive queries fail
    """
    progress = progress or ProgressDots()
    start = clock()
    polls = 0
    failures = 0

    while clock() - start < timeout:
        polls += 1
        try:
            state, value = fetch_state()
        except QUERY_ERRORS as exc:
            failures += 1
            if failures > query_retries:
                progress.done()
                raise StatusQueryError(description, failures, exc) from exc
            logging.warning("Status query for %s failed (%d/%d): %s", description, failures, query_retries, exc)
        else:
            failures = 0
            if state == terminal_state:
                progress.done()
                return PollResult(state=state, value=value, polls=polls, elapsed=clock() - start)
            logging.debug("%s is %s after %.0fs", description, state, clock() - start)

        progress.tick()
        sleep(interval)

    progress.done()
    raise timeout_error(description, timeout)


def wait_for_operation(  # pylint: disable=too-many-arguments
    apigee,
    operation_id: str,
    *,
    timeout: float = constants.OPERATION_TIMEOUT_SECONDS,
    interval: float = constants.OPERATION_POLL_INTERVAL_SECONDS,
    query_retries: int = constants.STATUS_QUERY_RETRIES,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    progress: Optional[ProgressDots] = None,
) -> PollResult:
    """
    Block until an Apigee long-running operation is FINISHED.

    apigee is an ApigeeCli bound to the owning organization and bearer token.

    Raises:
        ValueError: If operation_id is empty
        OperationTimeoutError: If the operation does not finish within timeout
        OperationFailedError: If the operation finishes with an error
        StatusQueryError: If the operation status keeps failing to load
    """
    if not operation_id:
        raise ValueError("operation_id must be a non-empty string")

    def fetch_state():
        status = OperationStatus.from_document(operation_id, apigee.project, apigee.get_operation(operation_id))
        return status.state, status

    result = wait_for_state(
        f"Operation {operation_id}",
        fetch_state,
        constants.OPERATION_FINISHED_STATE,
        timeout=timeout,
        interval=interval,
        query_retries=query_retries,
        clock=clock,
        sleep=sleep,
        progress=progress,
    )
    if result.value.error:
        raise OperationFailedError(operation_id, result.value.error)
    return result


def certificate_status(document: dict, certificate: str) -> str:
    """Return managed.status of an SSL certificate resource"""
    managed = document.get("managed") or {}
    status = managed.get("status") if isinstance(managed, dict) else None
    if not status:
        raise CommandOutputError(f"ssl-certificates describe {certificate}", "missing managed.status")
    return status


def wait_for_certificate(  # pylint: disable=too-many-arguments
    gcloud,
    certificate: str,
    *,
    timeout: float = constants.CERTIFICATE_TIMEOUT_SECONDS,
    interval: float = constants.CERTIFICATE_POLL_INTERVAL_SECONDS,
    query_retries: int = constants.STATUS_QUERY_RETRIES,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    progress: Optional[ProgressDots] = None,
) -> PollResult:
    """
    Block until a Google-managed certificate is ACTIVE.

    gcloud is a GcloudCli bound to the certificate's project.

    Raises:
        CertificateTimeoutError: If provisioning does not complete within timeout
        StatusQueryError: If the certificate status keeps failing to load
    """

    def fetch_state():
        document = gcloud.describe_ssl_certificate(certificate)
        return certificate_status(document, certificate), document

    return wait_for_state(
        f"Certificate {certificate}",
        fetch_state,
        constants.CERTIFICATE_ACTIVE_STATUS,
        timeout=timeout,
        interval=interval,
        query_retries=query_retries,
        timeout_error=CertificateTimeoutError,
        clock=clock,
        sleep=sleep,
        progress=progress,
    )
