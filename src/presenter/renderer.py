"""Terminal rendering of test progress and the final report."""

from __future__ import annotations

import logging

from presenter.config import OutputFormat, PresenterSettings
from presenter.models import Diagnostic, OutcomeIndex, SuiteContext, TestOutcome, TestStatus
from presenter.source import get_source_line
from presenter.terminal import Terminal
from presenter.timing import classify_time


logger = logging.getLogger(__name__)


_STATUS_CONFIG: dict[TestStatus, tuple[str, str]] = {
    TestStatus.SUCCESS: ("✔", "green"),
    TestStatus.FAILURE: ("✗", "red"),
    TestStatus.ERROR: ("E", "red"),
}

DIVIDER = "-----"


class Renderer:
    """Writes per-test lines as a run progresses, then the results report.

    In the default format each started test gets a placeholder line that is
    redrawn with its status when it ends. When the terminal cannot redraw lines
    the default format behaves exactly like ``feed``.
    """

    def __init__(self, terminal: Terminal, settings: PresenterSettings) -> None:
        self.terminal = terminal
        self.settings = settings
        self.format = settings.format
        self.live = self.format == OutputFormat.DEFAULT and terminal.supports_overwrite
        self._placeholder_open = False

        if self.format == OutputFormat.DEFAULT and not self.live:
            logger.debug("Output is not interactive, falling back to feed output")

    @property
    def condensed(self) -> bool:
        return self.format == OutputFormat.CONDENSED

    def _status_symbol(self, status: TestStatus) -> str:
        return _STATUS_CONFIG[status][0]

    def _status_color(self, status: TestStatus) -> str:
        return _STATUS_CONFIG[status][1]

    def _heading(self, title: str, color: str) -> None:
        self.terminal.line(self.terminal.style(f"bold underline {color}", title))

    def render_header(self, title: str) -> None:
        """Clear the screen and show the run title."""
        self.terminal.clear()
        self._heading(title, "blue")
        self.terminal.blank()

    def render_suite_header(self, suite: SuiteContext) -> None:
        style = self.terminal.style
        if not suite.is_test_class:
            self.terminal.line(style("bold yellow", suite.display_name))
            return

        self.terminal.blank()
        if self.condensed:
            self.terminal.inline(style("bold", f"{suite.display_name} "))
            return

        header = style("bold", suite.display_name)
        if suite.test_count is not None:
            count = "1 test" if suite.test_count == 1 else f"{suite.test_count} tests"
            header += " " + style("bold yellow", f"({count})")
        self.terminal.line(header)

    def render_test_started(self, test: str) -> None:
        """Show a placeholder for a running test, in live output only."""
        if not self.live or self.settings.hide_successful:
            return
        self.terminal.line(f"[ ] {self.terminal.style('', test)}")
        self._placeholder_open = True

    def render_test_finished(self, outcome: TestOutcome) -> None:
        """Show the final status of a test."""
        placeholder_open, self._placeholder_open = self._placeholder_open, False
        if self.settings.hide_successful and outcome.status == TestStatus.SUCCESS:
            return

        style = self.terminal.style
        glyph = style(self._status_color(outcome.status), self._status_symbol(outcome.status))
        if self.condensed:
            self.terminal.inline(glyph)
            return

        text = f"[{glyph}] {style('', outcome.test)}"
        if self.settings.display_times:
            elapsed = classify_time(outcome.duration)
            text += " " + style(elapsed.colour.style, f"({elapsed.label})")

        if placeholder_open:
            self.terminal.overwrite_last_line(text)
        else:
            self.terminal.line(text)

    def render_report(self, index: OutcomeIndex) -> None:
        """Render the results summary followed by failure and error details."""
        if self.condensed:
            self.terminal.blank()
        self.terminal.blank()
        self._heading("Results", "blue")
        self.terminal.blank()

        self._render_stats(index)
        self._render_outcomes("Failures", index.with_status(TestStatus.FAILURE))
        self._render_outcomes("Errors", index.with_status(TestStatus.ERROR))

    def _render_stats(self, index: OutcomeIndex) -> None:
        style = self.terminal.style
        average = classify_time(index.average_duration)
        failures = index.num_failures
        errors = index.num_errors

        self.terminal.line(style("blue", "Tests run: ") + str(index.num_tests))
        self.terminal.line(style("blue", "Assertions made: ") + str(index.num_assertions))
        self.terminal.line(style("blue", "Avg. test time: ") + style(average.colour.style, average.label))
        self.terminal.line(style("blue", "Failures: ") + (style("red", failures) if failures else "0"))
        self.terminal.line(style("blue", "Errors: ") + (style("red", errors) if errors else "0"))

    def _render_outcomes(self, title: str, outcomes: list[TestOutcome]) -> None:
        if not outcomes:
            return

        self.terminal.blank()
        self._heading(title, "red")
        self.terminal.blank()

        for position, outcome in enumerate(outcomes):
            if position:
                self.terminal.blank()
                self.terminal.line(DIVIDER)
                self.terminal.blank()
            self._render_outcome(outcome)

    def _render_outcome(self, outcome: TestOutcome) -> None:
        style = self.terminal.style
        self.terminal.inline(style("bold", f"{outcome.suite}::"))
        self.terminal.line(style("", outcome.test))

        diagnostic = outcome.primary_diagnostic
        if diagnostic is None:
            return

        if diagnostic.file:
            self.terminal.line(style("bright_black", diagnostic.file))
        self.terminal.line(style("red", diagnostic.message))
        self.terminal.blank()
        self._render_location(diagnostic)

        if diagnostic.kind == TestStatus.FAILURE and diagnostic.diff is not None:
            self.terminal.line(style("green", f"Expected: {diagnostic.diff.expected}"))
            self.terminal.line(style("red", f"Actual:   {diagnostic.diff.actual}"))
        elif diagnostic.kind == TestStatus.ERROR and diagnostic.stack_trace:
            self.terminal.blank()
            self.terminal.line(style("bright_black", diagnostic.stack_trace))

    def _render_location(self, diagnostic: Diagnostic) -> None:
        if diagnostic.line is None:
            return
        excerpt = get_source_line(diagnostic.file, diagnostic.line) or ""
        self.terminal.line(self.terminal.style("", f"Line {diagnostic.line} | {excerpt}"))
