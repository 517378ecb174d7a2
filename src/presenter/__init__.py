"""Presenter - live, colourized test results for unittest runs."""

from .assertions import AssertionCountingMixin
from .config import OutputFormat, PresenterSettings, load_settings
from .models import Diagnostic, OutcomeIndex, SuiteContext, TestOutcome, TestStatus, ValueDiff
from .presenter import Presenter
from .runner import PresentedSuite, PresenterResult, PresenterTestRunner, present_suite
from .source import get_source_line
from .timing import ElapsedTime, TimeColour, classify_time
from .trace import RaisedCondition, TraceFrame
from .version import __version__


__all__ = [
    # Reporting
    "Presenter",
    "PresenterSettings",
    "OutputFormat",
    "load_settings",
    # unittest integration
    "AssertionCountingMixin",
    "PresentedSuite",
    "PresenterResult",
    "PresenterTestRunner",
    "present_suite",
    # Records
    "Diagnostic",
    "OutcomeIndex",
    "SuiteContext",
    "TestOutcome",
    "TestStatus",
    "ValueDiff",
    "RaisedCondition",
    "TraceFrame",
    # Helpers
    "ElapsedTime",
    "TimeColour",
    "classify_time",
    "get_source_line",
]
