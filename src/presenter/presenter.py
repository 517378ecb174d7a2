"""Event ingestion: turns lifecycle callbacks into outcomes and output."""

from __future__ import annotations

import logging

from rich.console import Console

from presenter.config import PresenterSettings, load_settings
from presenter.errors import NoActiveSuiteError
from presenter.models import Diagnostic, OutcomeIndex, SuiteContext, TestOutcome, make_signature
from presenter.renderer import Renderer
from presenter.terminal import Terminal
from presenter.trace import RaisedCondition, extract_diff, locate_assertion_site


logger = logging.getLogger(__name__)


class Presenter:
    """Reporter that records every test of a run and presents the results.

    Implements :class:`presenter.protocol.TestListener`. Outcomes are kept in
    :attr:`outcomes` for the lifetime of the run and summarised by :meth:`flush`.
    """

    def __init__(
        self,
        settings: PresenterSettings | None = None,
        console: Console | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.outcomes = OutcomeIndex()
        self.renderer = Renderer(Terminal(console, colours=self.settings.colours), self.settings)
        self._suites: list[SuiteContext] = []
        self._running: dict[str, TestOutcome] = {}
        self._begun = False

    @property
    def current_suite(self) -> SuiteContext | None:
        return self._suites[-1] if self._suites else None

    def _signature(self, test: str) -> str:
        suite = self.current_suite
        if suite is None:
            raise NoActiveSuiteError(test)
        return make_signature(suite.name, test)

    def _outcome(self, test: str) -> TestOutcome:
        running = self._running.get(test)
        if running is not None:
            return running
        return self.outcomes.get(self._signature(test))

    def on_suite_start(self, suite: SuiteContext) -> None:
        if not self._begun:
            self.renderer.render_header(self.settings.title)
            self._begun = True

        self._suites.append(suite)
        self.renderer.render_suite_header(suite)

    def on_suite_end(self, suite: SuiteContext) -> None:
        if self._suites:
            self._suites.pop()

    def on_test_start(self, test: str, suite: str | None = None) -> None:
        """Open the outcome of a test in the active suite, or in ``suite`` when given."""
        if suite is None:
            active = self.current_suite
            if active is None:
                raise NoActiveSuiteError(test)
            suite = active.name
        self._running[test] = self.outcomes.open(suite, test)
        self.renderer.render_test_started(test)

    def on_test_end(self, test: str, duration: float, assertion_count: int = 0) -> None:
        outcome = self._outcome(test)
        self._running.pop(test, None)
        outcome.assertion_count = assertion_count
        outcome.duration = duration
        self.renderer.render_test_finished(outcome)

    def on_failure(self, test: str, condition: RaisedCondition) -> None:
        outcome = self._outcome(test)
        site = locate_assertion_site(condition.frames, outcome.suite)

        if site is not None:
            file, line = site.file, site.line
        elif condition.frames and condition.frames[0].belongs_to(outcome.suite):
            # Raised directly in the test method, e.g. a bare assert
            file, line = condition.file, condition.line
        else:
            file, line = None, None

        outcome.record(
            Diagnostic.failure(
                message=condition.message,
                file=file,
                line=line,
                diff=extract_diff(site),
            )
        )

    def on_error(self, test: str, condition: RaisedCondition) -> None:
        outcome = self._outcome(test)
        outcome.record(
            Diagnostic.error(
                message=condition.summary,
                file=condition.file,
                line=condition.line,
                stack_trace=condition.trace_text or None,
            )
        )

    def on_warning(self, test: str, condition: RaisedCondition) -> None:
        pass

    def on_incomplete(self, test: str, condition: RaisedCondition) -> None:
        pass

    def on_risky(self, test: str, condition: RaisedCondition) -> None:
        pass

    def on_skipped(self, test: str, reason: str) -> None:
        pass

    def flush(self) -> None:
        """Render the results report."""
        logger.debug(
            "Run finished: %d tests, %d failures, %d errors",
            self.outcomes.num_tests,
            self.outcomes.num_failures,
            self.outcomes.num_errors,
        )
        self.renderer.render_report(self.outcomes)
