"""Tests for presenter.renderer and presenter.terminal modules."""

import io

import pytest
from rich.console import Console

from presenter.config import OutputFormat, PresenterSettings
from presenter.models import Diagnostic, OutcomeIndex, SuiteContext, TestOutcome, TestStatus, ValueDiff
from presenter.renderer import Renderer
from presenter.terminal import Terminal


def make_settings(**overrides) -> PresenterSettings:
    values = {
        "format": OutputFormat.FEED,
        "show_times": True,
        "colours": False,
        "hide_successful": False,
        "title": "Running tests",
    }
    values.update(overrides)
    return PresenterSettings(**values)


def make_renderer(console, **overrides) -> Renderer:
    settings = make_settings(**overrides)
    return Renderer(Terminal(console, colours=settings.colours), settings)


def outcome(test="test_add", status=TestStatus.SUCCESS, duration=0.01, suite="CalcTest") -> TestOutcome:
    result = TestOutcome(suite=suite, test=test, duration=duration)
    if status == TestStatus.FAILURE:
        result.record(Diagnostic.failure("4 != 5"))
    elif status == TestStatus.ERROR:
        result.record(Diagnostic.error("ValueError: boom"))
    return result


@pytest.fixture
def tty(monkeypatch):
    """Interactive console writing to an in-memory stream."""
    monkeypatch.setenv("TERM", "xterm-256color")
    monkeypatch.delenv("NO_COLOR", raising=False)
    stream = io.StringIO()
    return Console(file=stream, force_terminal=True, width=120), stream


class TestTerminal:
    def test_style_with_colours(self, console):
        terminal = Terminal(console, colours=True)
        assert terminal.style("red", "boom") == "[red]boom[/red]"

    def test_style_without_colours_is_plain(self, console):
        terminal = Terminal(console, colours=False)
        assert terminal.style("red", "boom") == "boom"

    def test_style_escapes_markup(self, console, output):
        terminal = Terminal(console, colours=True)
        terminal.line(terminal.style("bold", "test_add[bold]"))
        assert output.getvalue() == "test_add[bold]\n"

    def test_inline_then_line(self, console, output):
        terminal = Terminal(console, colours=False)
        terminal.inline("CalcTest ")
        terminal.inline("✔")
        terminal.line()
        assert output.getvalue() == "CalcTest ✔\n"

    def test_non_interactive_output_cannot_overwrite(self, console, output):
        terminal = Terminal(console)
        assert terminal.supports_overwrite is False
        terminal.clear()
        terminal.overwrite_last_line("done")
        assert output.getvalue() == "done\n"

    def test_overwrite_moves_cursor_up_and_erases(self, tty):
        console, stream = tty
        terminal = Terminal(console, colours=False)
        assert terminal.supports_overwrite is True
        terminal.line("pending")
        terminal.overwrite_last_line("done")
        value = stream.getvalue()
        assert "\x1b[1A" in value
        assert "\x1b[2K" in value
        assert value.endswith("done\n")


class TestTestLines:
    def test_feed_line_with_time(self, console, output):
        renderer = make_renderer(console)
        renderer.render_test_started("test_add")
        renderer.render_test_finished(outcome())
        assert output.getvalue() == "[✔] test_add (10ms)\n"

    def test_status_symbols(self, console, output):
        renderer = make_renderer(console, show_times=False)
        renderer.render_test_finished(outcome("test_a"))
        renderer.render_test_finished(outcome("test_b", TestStatus.FAILURE))
        renderer.render_test_finished(outcome("test_c", TestStatus.ERROR))
        assert output.getvalue().splitlines() == ["[✔] test_a", "[✗] test_b", "[E] test_c"]

    def test_slow_test_time_label(self, console, output):
        renderer = make_renderer(console)
        renderer.render_test_finished(outcome(duration=90))
        assert output.getvalue() == "[✔] test_add (1.5mins)\n"

    def test_coloured_line(self, tty):
        console, stream = tty
        renderer = make_renderer(console, colours=True)
        renderer.render_test_finished(outcome(status=TestStatus.FAILURE))
        assert "\x1b[31m" in stream.getvalue()

    def test_no_colour_codes_when_colours_are_off(self, tty):
        console, stream = tty
        renderer = make_renderer(console, colours=False)
        renderer.render_suite_header(SuiteContext("CalcTest", is_test_class=True, test_count=2))
        renderer.render_test_finished(outcome(status=TestStatus.FAILURE))
        renderer.render_report(OutcomeIndex())
        value = stream.getvalue()
        assert "\x1b[3" not in value
        assert "\x1b[1m" not in value
        assert "CalcTest (2 tests)" in value

    def test_hide_successful_skips_passing_tests(self, console, output):
        renderer = make_renderer(console, hide_successful=True)
        renderer.render_test_finished(outcome("test_a"))
        renderer.render_test_finished(outcome("test_b", TestStatus.FAILURE))
        assert output.getvalue() == "[✗] test_b (10ms)\n"

    def test_test_names_are_not_markup(self, console, output):
        renderer = make_renderer(console, show_times=False, colours=True)
        renderer.render_test_finished(outcome("test_add[red]"))
        assert output.getvalue() == "[✔] test_add[red]\n"


class TestLiveOutput:
    def test_placeholder_is_overwritten(self, tty):
        console, stream = tty
        renderer = make_renderer(console, format=OutputFormat.DEFAULT)
        assert renderer.live is True
        renderer.render_test_started("test_add")
        renderer.render_test_finished(outcome())
        value = stream.getvalue()
        assert value.startswith("[ ] test_add\n")
        assert "\x1b[1A" in value
        assert value.endswith("[✔] test_add (10ms)\n")

    def test_hide_successful_prints_no_placeholder(self, tty):
        console, stream = tty
        renderer = make_renderer(console, format=OutputFormat.DEFAULT, hide_successful=True)
        renderer.render_test_started("test_a")
        renderer.render_test_finished(outcome("test_a"))
        renderer.render_test_started("test_b")
        renderer.render_test_finished(outcome("test_b", TestStatus.FAILURE))
        value = stream.getvalue()
        assert "[ ]" not in value
        assert "\x1b[1A" not in value
        assert value == "[✗] test_b (10ms)\n"

    def test_degrades_to_feed_when_not_interactive(self, console, output):
        renderer = make_renderer(console, format=OutputFormat.DEFAULT)
        assert renderer.live is False
        renderer.render_test_started("test_add")
        renderer.render_test_finished(outcome())
        assert output.getvalue() == "[✔] test_add (10ms)\n"

    def test_feed_never_prints_placeholders(self, tty):
        console, stream = tty
        renderer = make_renderer(console, format=OutputFormat.FEED)
        renderer.render_test_started("test_add")
        assert stream.getvalue() == ""


class TestCondensedOutput:
    def test_suite_name_then_glyphs_inline(self, console, output):
        renderer = make_renderer(console, format=OutputFormat.CONDENSED, show_times=True)
        renderer.render_suite_header(SuiteContext("CalcTest", is_test_class=True, test_count=3))
        for status in (TestStatus.SUCCESS, TestStatus.FAILURE, TestStatus.ERROR):
            renderer.render_test_started("test_x")
            renderer.render_test_finished(outcome(status=status, duration=5))
        assert output.getvalue() == "\nCalcTest ✔✗E"

    def test_report_closes_inline_run(self, console, output):
        renderer = make_renderer(console, format=OutputFormat.CONDENSED)
        renderer.render_suite_header(SuiteContext("CalcTest", is_test_class=True, test_count=1))
        renderer.render_test_finished(outcome())
        renderer.render_report(OutcomeIndex())
        assert output.getvalue().splitlines()[:4] == ["", "CalcTest ✔", "", "Results"]


class TestSuiteHeaders:
    def test_class_suite_with_count(self, console, output):
        renderer = make_renderer(console)
        renderer.render_suite_header(SuiteContext("CalcTest", is_test_class=True, test_count=1))
        renderer.render_suite_header(SuiteContext("OtherTest", is_test_class=True, test_count=4))
        assert output.getvalue() == "\nCalcTest (1 test)\n\nOtherTest (4 tests)\n"

    def test_logical_suite_has_no_count(self, console, output):
        renderer = make_renderer(console)
        renderer.render_suite_header(SuiteContext("tests"))
        assert output.getvalue() == "tests\n"

    def test_header_title(self, console, output):
        renderer = make_renderer(console)
        renderer.render_header("Running calc tests")
        assert output.getvalue() == "Running calc tests\n\n"


class TestReport:
    def test_statistics(self, console, output):
        index = OutcomeIndex()
        first = index.open("CalcTest", "test_a")
        first.assertion_count, first.duration = 2, 0.5
        second = index.open("CalcTest", "test_b")
        second.assertion_count, second.duration = 1, 0.3

        make_renderer(console).render_report(index)

        assert output.getvalue().splitlines() == [
            "",
            "Results",
            "",
            "Tests run: 2",
            "Assertions made: 3",
            "Avg. test time: 400ms",
            "Failures: 0",
            "Errors: 0",
        ]

    def test_empty_run(self, console, output):
        make_renderer(console).render_report(OutcomeIndex())
        assert "Avg. test time: 0ms" in output.getvalue().splitlines()

    def test_failure_block(self, console, output, tmp_path):
        source = tmp_path / "calc_test.py"
        source.write_text("\n" * 9 + "        self.assertEqual(4, add(2, 3))\n")
        index = OutcomeIndex()
        failed = index.open("CalcTest", "testAdd")
        failed.record(Diagnostic.failure("4 != 5", str(source), 10, ValueDiff(expected="4", actual="5")))

        make_renderer(console).render_report(index)

        lines = output.getvalue().splitlines()
        assert lines[lines.index("Failures"):] == [
            "Failures",
            "",
            "CalcTest::testAdd",
            str(source),
            "4 != 5",
            "",
            "Line 10 | self.assertEqual(4, add(2, 3))",
            "Expected: 4",
            "Actual:   5",
        ]
        assert "Errors" not in lines
        assert "Failures: 1" in lines

    def test_error_block_with_trace(self, console, output):
        index = OutcomeIndex()
        errored = index.open("CalcTest", "test_div")
        errored.record(
            Diagnostic.error("ZeroDivisionError: division by zero", "/missing/calc.py", 3, "Traceback (most recent call last):")
        )

        make_renderer(console).render_report(index)

        lines = [line.rstrip() for line in output.getvalue().splitlines()]
        assert lines[lines.index("Errors"):] == [
            "Errors",
            "",
            "CalcTest::test_div",
            "/missing/calc.py",
            "ZeroDivisionError: division by zero",
            "",
            "Line 3 |",
            "",
            "Traceback (most recent call last):",
        ]
        assert "Failures" not in lines

    def test_outcomes_are_separated_by_divider(self, console, output):
        index = OutcomeIndex()
        index.open("CalcTest", "test_a").record(Diagnostic.failure("first"))
        index.open("CalcTest", "test_b").record(Diagnostic.failure("second"))

        make_renderer(console).render_report(index)

        lines = output.getvalue().splitlines()
        assert lines[lines.index("CalcTest::test_a"):] == [
            "CalcTest::test_a",
            "first",
            "",
            "",
            "-----",
            "",
            "CalcTest::test_b",
            "second",
            "",
        ]

    def test_unknown_location_is_omitted(self, console, output):
        index = OutcomeIndex()
        index.open("CalcTest", "test_a").record(Diagnostic.failure("4 != 5"))

        make_renderer(console).render_report(index)

        value = output.getvalue()
        assert "Line" not in value
        assert value.endswith("CalcTest::test_a\n4 != 5\n\n")

    def test_failure_then_error_is_reported_as_error(self, console, output):
        index = OutcomeIndex()
        outcome_ = index.open("CalcTest", "test_a")
        outcome_.record(Diagnostic.failure("assertion"))
        outcome_.record(Diagnostic.error("RuntimeError: teardown"))

        make_renderer(console).render_report(index)

        lines = output.getvalue().splitlines()
        assert "Failures: 0" in lines
        assert "Errors: 1" in lines
        assert "RuntimeError: teardown" in lines
        assert "assertion" not in lines
