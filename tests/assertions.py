"""Shared assertion helpers with clearer failure messages."""

from __future__ import annotations


def assert_equal(actual, expected, *, message: str | None = None) -> None:
    """Assert equality with a clearer error message."""
    failure_message = message or f"Expected {expected!r} but received {actual!r}"
    assert actual == expected, failure_message


def assert_no_calls(mock_obj, *, message: str | None = None) -> None:
    """Assert a mock was never called, listing the calls it did receive."""
    failure_message = message or f"Expected no calls but received {mock_obj.call_args_list!r}"
    assert not mock_obj.called, failure_message
