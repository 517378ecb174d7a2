"""Lifecycle callbacks a test framework drives a reporter with."""

from __future__ import annotations

from typing import Protocol

from presenter.models import SuiteContext
from presenter.trace import RaisedCondition


class TestListener(Protocol):
    """Receives test lifecycle events, one at a time and in run order.

    Order: suite start, then for each test a start, any failures or errors and
    an end, then suite end. Suites may nest.
    """

    __test__ = False  # Prevent pytest from collecting this as a test class

    def on_suite_start(self, suite: SuiteContext) -> None:
        ...

    def on_suite_end(self, suite: SuiteContext) -> None:
        ...

    def on_test_start(self, test: str, suite: str | None = None) -> None:
        """``suite`` names the owning suite when it is not the active one."""
        ...

    def on_test_end(self, test: str, duration: float, assertion_count: int = 0) -> None:
        ...

    def on_failure(self, test: str, condition: RaisedCondition) -> None:
        ...

    def on_error(self, test: str, condition: RaisedCondition) -> None:
        ...

    def on_warning(self, test: str, condition: RaisedCondition) -> None:
        ...

    def on_incomplete(self, test: str, condition: RaisedCondition) -> None:
        ...

    def on_risky(self, test: str, condition: RaisedCondition) -> None:
        ...

    def on_skipped(self, test: str, reason: str) -> None:
        ...

    def flush(self) -> None:
        """Called once when the run is over."""
        ...
