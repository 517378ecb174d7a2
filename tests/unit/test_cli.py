"""Tests for presenter.cli module."""

import textwrap

import pytest
from click.testing import CliRunner

from presenter import cli


ENV_VARS = [
    "PRESENTER_FORMAT",
    "PRESENTER_SHOW_TIMES",
    "PRESENTER_COLOURS",
    "PRESENTER_HIDE_SUCCESSFUL",
    "PRESENTER_TITLE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def write_tests(directory, module_name, body):
    (directory / f"{module_name}.py").write_text(textwrap.dedent(body))


PASSING = """
    import unittest


    class CliPassTest(unittest.TestCase):
        def test_one(self):
            self.assertEqual(1, 1)

        def test_two(self):
            self.assertTrue(True)
"""

FAILING = """
    import unittest


    class CliFailTest(unittest.TestCase):
        def test_one(self):
            self.assertEqual(1, 2)
"""


def test_passing_run_exits_zero(tmp_path):
    write_tests(tmp_path, "test_cli_pass", PASSING)

    result = CliRunner().invoke(cli.main, [str(tmp_path), "--no-colours", "--format", "feed"])

    assert result.exit_code == 0, result.output
    assert "CliPassTest (2 tests)" in result.output
    assert "Tests run: 2" in result.output


def test_failing_run_exits_one(tmp_path):
    write_tests(tmp_path, "test_cli_fail", FAILING)

    result = CliRunner().invoke(cli.main, [str(tmp_path), "--no-colours", "--no-times"])

    assert result.exit_code == 1
    assert "[✗] test_one" in result.output
    assert "Expected: 1" in result.output
    assert "Actual:   2" in result.output


def test_condensed_format_option(tmp_path):
    write_tests(tmp_path, "test_cli_condensed", PASSING)

    result = CliRunner().invoke(cli.main, [str(tmp_path), "--no-colours", "--format", "condensed"])

    assert result.exit_code == 0, result.output
    assert "CliPassTest ✔✔" in result.output


def test_pattern_option(tmp_path):
    write_tests(tmp_path, "check_cli_pattern", PASSING)

    result = CliRunner().invoke(cli.main, [str(tmp_path), "--no-colours", "--pattern", "check_*.py"])

    assert result.exit_code == 0, result.output
    assert "Tests run: 2" in result.output


def test_environment_configures_run(tmp_path, monkeypatch):
    write_tests(tmp_path, "test_cli_env", PASSING)
    monkeypatch.setenv("PRESENTER_COLOURS", "0")
    monkeypatch.setenv("PRESENTER_HIDE_SUCCESSFUL", "1")

    result = CliRunner().invoke(cli.main, [str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "[✔]" not in result.output
    assert "Tests run: 2" in result.output


def test_invalid_configuration_aborts(tmp_path, monkeypatch):
    monkeypatch.setenv("PRESENTER_SHOW_TIMES", "sometimes")

    result = CliRunner().invoke(cli.main, [str(tmp_path)])

    assert result.exit_code == 1
    assert "invalid presenter configuration" in result.output


def test_rejects_unknown_format(tmp_path):
    result = CliRunner().invoke(cli.main, [str(tmp_path), "--format", "fancy"])

    assert result.exit_code == 2
