"""Tests for internet_exposure/waiter.py polling loops."""

from __future__ import annotations

import io
from unittest.mock import MagicMock

import pytest

from internet_exposure.exceptions import (
    CertificateTimeoutError,
    CommandError,
    CommandOutputError,
    OperationFailedError,
    OperationTimeoutError,
    StatusQueryError,
)
from internet_exposure.waiter import (
    OperationStatus,
    ProgressDots,
    certificate_status,
    wait_for_certificate,
    wait_for_operation,
    wait_for_state,
)
from tests.assertions import assert_equal
from tests.cli_test_utils import operation_document


def _apigee(*documents):
    apigee = MagicMock()
    apigee.project = "demo-project"
    apigee.get_operation.side_effect = list(documents)
    return apigee


class TestWaitForOperation:
    """wait_for_operation polling behaviour"""

    def test_finished_on_first_poll_does_not_sleep(self, fake_clock, quiet_progress):
        """A terminal state on the first poll returns without sleeping."""
        apigee = _apigee(operation_document("FINISHED"))

        result = wait_for_operation(
            apigee, "op-1", clock=fake_clock, sleep=fake_clock.sleep, progress=quiet_progress
        )

        assert_equal(result.polls, 1)
        assert_equal(fake_clock.sleeps, [])
        apigee.get_operation.assert_called_once_with("op-1")
        quiet_progress.tick.assert_not_called()
        quiet_progress.done.assert_called_once()

    def test_running_running_finished(self, fake_clock, quiet_progress):
        """RUNNING, RUNNING, FINISHED at 5s intervals succeeds after 3 polls and ~10s."""
        apigee = _apigee(
            operation_document("RUNNING"),
            operation_document("RUNNING"),
            operation_document("FINISHED"),
        )

        result = wait_for_operation(
            apigee,
            "op-1",
            timeout=600,
            interval=5,
            clock=fake_clock,
            sleep=fake_clock.sleep,
            progress=quiet_progress,
        )

        assert_equal(result.polls, 3)
        assert_equal(result.elapsed, 10)
        assert_equal(result.state, "FINISHED")
        assert_equal(fake_clock.sleeps, [5, 5])
        assert_equal(quiet_progress.tick.call_count, 2)

    @pytest.mark.parametrize("pending", [1, 4, 20])
    def test_n_pending_polls_then_finished(self, fake_clock, quiet_progress, pending):
        """N non-terminal responses followed by a terminal one take exactly N+1 polls."""
        documents = [operation_document("IN_PROGRESS")] * pending + [operation_document("FINISHED")]
        apigee = _apigee(*documents)

        result = wait_for_operation(
            apigee, "op-1", clock=fake_clock, sleep=fake_clock.sleep, progress=quiet_progress
        )

        assert_equal(result.polls, pending + 1)
        assert_equal(apigee.get_operation.call_count, pending + 1)

    def test_times_out_without_polling_again(self, fake_clock, quiet_progress):
        """A wait that never finishes fails at the deadline and stops polling."""
        apigee = MagicMock()
        apigee.project = "demo-project"
        apigee.get_operation.return_value = operation_document("IN_PROGRESS")

        with pytest.raises(OperationTimeoutError) as excinfo:
            wait_for_operation(
                apigee,
                "op-stuck",
                timeout=600,
                interval=5,
                clock=fake_clock,
                sleep=fake_clock.sleep,
                progress=quiet_progress,
            )

        assert "Operation op-stuck did not complete in time" in str(excinfo.value)
        assert_equal(apigee.get_operation.call_count, 120)
        assert_equal(fake_clock.elapsed, 600)

    def test_finished_with_error_raises(self, fake_clock, quiet_progress):
        """A finished operation that carries an error document fails."""
        apigee = _apigee(operation_document("FINISHED", error={"code": 6, "message": "already exists"}))

        with pytest.raises(OperationFailedError, match="already exists"):
            wait_for_operation(apigee, "op-1", clock=fake_clock, sleep=fake_clock.sleep, progress=quiet_progress)

    def test_transient_query_failures_are_retried(self, fake_clock, quiet_progress):
        """Query failures within the retry budget do not abort the wait."""
        apigee = _apigee(
            CommandError("apigeecli operations get", 1, ["connection reset"]),
            {"metadata": {}},
            operation_document("FINISHED"),
        )

        result = wait_for_operation(
            apigee, "op-1", clock=fake_clock, sleep=fake_clock.sleep, progress=quiet_progress
        )

        assert_equal(result.polls, 3)

    def test_persistent_query_failures_raise(self, fake_clock, quiet_progress):
        """More consecutive query failures than the budget raise StatusQueryError."""
        apigee = MagicMock()
        apigee.project = "demo-project"
        apigee.get_operation.side_effect = CommandError("apigeecli operations get", 1)

        with pytest.raises(StatusQueryError) as excinfo:
            wait_for_operation(
                apigee,
                "op-1",
                query_retries=2,
                clock=fake_clock,
                sleep=fake_clock.sleep,
                progress=quiet_progress,
            )

        assert_equal(excinfo.value.attempts, 3)
        assert_equal(apigee.get_operation.call_count, 3)

    def test_successful_query_resets_failure_count(self, fake_clock, quiet_progress):
        """Failures separated by a good response never exhaust the budget."""
        failure = CommandError("apigeecli operations get", 1)
        apigee = _apigee(
            failure,
            operation_document("IN_PROGRESS"),
            failure,
            operation_document("IN_PROGRESS"),
            failure,
            operation_document("FINISHED"),
        )

        result = wait_for_operation(
            apigee,
            "op-1",
            query_retries=1,
            clock=fake_clock,
            sleep=fake_clock.sleep,
            progress=quiet_progress,
        )

        assert_equal(result.polls, 6)

    def test_empty_operation_id_rejected(self, quiet_progress):
        """An empty identifier is rejected before any query."""
        apigee = MagicMock()

        with pytest.raises(ValueError):
            wait_for_operation(apigee, "", progress=quiet_progress)

        apigee.get_operation.assert_not_called()


class TestWaitForCertificate:
    """wait_for_certificate polling behaviour"""

    def test_active_after_provisioning(self, fake_clock, quiet_progress):
        """PROVISIONING then ACTIVE succeeds at the certificate interval."""
        gcloud = MagicMock()
        gcloud.describe_ssl_certificate.side_effect = [
            {"managed": {"status": "PROVISIONING"}},
            {"managed": {"status": "ACTIVE"}},
        ]

        result = wait_for_certificate(
            gcloud, "cert", clock=fake_clock, sleep=fake_clock.sleep, progress=quiet_progress
        )

        assert_equal(result.polls, 2)
        assert_equal(fake_clock.sleeps, [10])
        gcloud.describe_ssl_certificate.assert_called_with("cert")

    def test_certificate_wait_is_bounded(self, fake_clock, quiet_progress):
        """A certificate that never becomes ACTIVE times out."""
        gcloud = MagicMock()
        gcloud.describe_ssl_certificate.return_value = {"managed": {"status": "PROVISIONING"}}

        with pytest.raises(CertificateTimeoutError):
            wait_for_certificate(
                gcloud,
                "cert",
                timeout=100,
                interval=10,
                clock=fake_clock,
                sleep=fake_clock.sleep,
                progress=quiet_progress,
            )

        assert_equal(gcloud.describe_ssl_certificate.call_count, 10)


class TestWaitForState:
    """Generic loop details"""

    def test_custom_terminal_state(self, fake_clock, quiet_progress):
        """The terminal value is whatever the caller passes."""
        fetch = MagicMock(side_effect=[("PENDING", 1), ("DONE", 2)])

        result = wait_for_state(
            "job",
            fetch,
            "DONE",
            timeout=30,
            interval=1,
            clock=fake_clock,
            sleep=fake_clock.sleep,
            progress=quiet_progress,
        )

        assert_equal(result.value, 2)

    def test_zero_timeout_never_polls(self, fake_clock, quiet_progress):
        """With no time budget the wait fails without querying."""
        fetch = MagicMock()

        with pytest.raises(OperationTimeoutError):
            wait_for_state(
                "job",
                fetch,
                "DONE",
                timeout=0,
                interval=1,
                clock=fake_clock,
                sleep=fake_clock.sleep,
                progress=quiet_progress,
            )

        fetch.assert_not_called()


def test_operation_status_requires_state():
    """Documents without metadata.state are treated as query failures."""
    with pytest.raises(CommandOutputError):
        OperationStatus.from_document("op-1", "demo-project", {"name": "x"})


def test_operation_status_fields():
    """The snapshot carries the owner, state and error document."""
    document = operation_document("FINISHED", error={"code": 9})

    status = OperationStatus.from_document("op-1", "demo-project", document)

    assert_equal(status.owner, "demo-project")
    assert_equal(status.state, "FINISHED")
    assert_equal(status.error, {"code": 9})


def test_certificate_status_missing_managed_block():
    """A self-managed certificate has no managed.status."""
    with pytest.raises(CommandOutputError):
        certificate_status({"type": "SELF_MANAGED"}, "cert")


def test_progress_dots_write_to_stream():
    """ProgressDots prints a dot per tick and a newline when done."""
    stream = io.StringIO()
    progress = ProgressDots(stream)

    progress.tick()
    progress.tick()
    progress.done()

    assert_equal(stream.getvalue(), "..\n")
