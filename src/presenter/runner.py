"""Runs unittest suites with a presenter attached.

unittest has no suite-level callbacks, so loaded suites are rebuilt as
:class:`PresentedSuite` nodes that announce themselves to the result.
"""

from __future__ import annotations

import logging
import re
import time
import unittest
from itertools import groupby
from types import TracebackType
from typing import Any

from rich.console import Console

from presenter.config import PresenterSettings
from presenter.models import SuiteContext
from presenter.presenter import Presenter
from presenter.protocol import TestListener
from presenter.trace import RaisedCondition


logger = logging.getLogger(__name__)

ExcInfo = tuple[type[BaseException], BaseException, TracebackType | None]

DEFAULT_SUITE_NAME = "tests"

_CLASS_FIXTURE = re.compile(r"^(?:setUpClass|tearDownClass) \((?P<owner>.+)\)$")


class PresentedSuite(unittest.TestSuite):
    """A test suite that reports when it starts and stops."""

    def __init__(self, context: SuiteContext, tests: Any = ()) -> None:
        super().__init__(tests)
        self.context = context

    def run(self, result: unittest.TestResult, debug: bool = False) -> unittest.TestResult:
        start_suite = getattr(result, "startSuite", None)
        stop_suite = getattr(result, "stopSuite", None)
        if start_suite is not None:
            start_suite(self.context)
        try:
            return super().run(result, debug)
        finally:
            if stop_suite is not None:
                stop_suite(self.context)


def _leaf_tests(test: unittest.TestSuite | unittest.TestCase) -> list[unittest.TestCase]:
    if isinstance(test, unittest.TestSuite):
        return [leaf for child in test for leaf in _leaf_tests(child)]
    return [test]


def _logical_name(tests: list[unittest.TestCase]) -> str:
    modules = {type(test).__module__ for test in tests}
    if len(modules) == 1:
        return modules.pop()
    return DEFAULT_SUITE_NAME


def _grouping_key(test: unittest.TestSuite | unittest.TestCase) -> object:
    # Consecutive tests of the same class share a suite, nested suites stand alone
    if isinstance(test, unittest.TestSuite):
        return id(test)
    return type(test)


def _class_suite(tests: list[unittest.TestCase]) -> PresentedSuite:
    test_class = type(tests[0])
    context = SuiteContext(
        name=f"{test_class.__module__}.{test_class.__qualname__}",
        is_test_class=True,
        test_count=len(tests),
        label=test_class.__name__,
    )
    return PresentedSuite(context, tests)


def present_suite(
    test: unittest.TestSuite | unittest.TestCase, name: str | None = None
) -> PresentedSuite:
    """Rebuild a loaded suite tree so that every suite reports itself.

    A suite made only of tests from one class becomes a test class suite with a
    known count. Any other suite becomes a logical suite named after the module
    its tests come from. Empty suites are dropped and a logical suite holding a
    single suite is replaced by it.
    """
    if not isinstance(test, unittest.TestSuite):
        return _class_suite([test])

    children = list(test)
    nested: list[PresentedSuite] = []
    for key, group in groupby(children, key=_grouping_key):
        members = list(group)
        if isinstance(key, type):
            nested.append(_class_suite(members))
            continue
        for child in members:
            if child.countTestCases():
                nested.append(present_suite(child))

    if name is None and len(nested) == 1:
        return nested[0]

    context = SuiteContext(name=name or _logical_name(_leaf_tests(test)))
    return PresentedSuite(context, nested)


def _test_name(test: Any) -> str:
    method_name = getattr(test, "_testMethodName", None)
    if method_name is not None:
        return method_name
    # Errors in class and module fixtures arrive on a placeholder with a description
    return getattr(test, "description", None) or str(test)


def _fixture_owner(test: Any) -> str | None:
    """Qualified name of the class whose class fixture raised, if that is what ``test`` is.

    unittest runs a class's ``tearDownClass`` when the next class starts, so the
    owner is taken from the placeholder's description rather than the active suite.
    """
    if isinstance(test, unittest.TestCase):
        return None
    match = _CLASS_FIXTURE.match(getattr(test, "description", "") or "")
    return match.group("owner") if match else None


class PresenterResult(unittest.TestResult):
    """Test result that forwards unittest's callbacks to a listener."""

    def __init__(
        self,
        listener: TestListener,
        stream: Any = None,
        descriptions: bool | None = None,
        verbosity: int | None = None,
    ) -> None:
        super().__init__(stream, descriptions, verbosity)
        self.listener = listener
        self._started: dict[str, float] = {}

    def startSuite(self, suite: SuiteContext) -> None:
        self.listener.on_suite_start(suite)

    def stopSuite(self, suite: SuiteContext) -> None:
        self.listener.on_suite_end(suite)

    def startTest(self, test: unittest.TestCase) -> None:
        super().startTest(test)
        name = _test_name(test)
        self._started[name] = time.perf_counter()
        self.listener.on_test_start(name)

    def stopTest(self, test: unittest.TestCase) -> None:
        super().stopTest(test)
        name = _test_name(test)
        started = self._started.pop(name, None)
        duration = time.perf_counter() - started if started is not None else 0.0
        self.listener.on_test_end(name, duration, getattr(test, "assertion_count", 0))

    def _report(self, test: Any, err: ExcInfo, failure: bool) -> None:
        name = _test_name(test)
        condition = RaisedCondition.from_exc_info(*err)
        standalone = name not in self._started
        if standalone:
            logger.debug("Reporting %s raised outside of a running test", name)
            self.listener.on_test_start(name, suite=_fixture_owner(test))
        if failure:
            self.listener.on_failure(name, condition)
        else:
            self.listener.on_error(name, condition)
        if standalone:
            self.listener.on_test_end(name, 0.0)

    def addError(self, test: Any, err: ExcInfo) -> None:
        super().addError(test, err)
        self._report(test, err, failure=False)

    def addFailure(self, test: unittest.TestCase, err: ExcInfo) -> None:
        super().addFailure(test, err)
        self._report(test, err, failure=True)

    def addSubTest(self, test: unittest.TestCase, subtest: unittest.TestCase, err: ExcInfo | None) -> None:
        super().addSubTest(test, subtest, err)
        if err is not None:
            self._report(test, err, failure=issubclass(err[0], test.failureException))

    def addSkip(self, test: unittest.TestCase, reason: str) -> None:
        super().addSkip(test, reason)
        self.listener.on_skipped(_test_name(test), reason)

    def addExpectedFailure(self, test: unittest.TestCase, err: ExcInfo) -> None:
        super().addExpectedFailure(test, err)
        self.listener.on_incomplete(_test_name(test), RaisedCondition.from_exc_info(*err))

    def addUnexpectedSuccess(self, test: unittest.TestCase) -> None:
        super().addUnexpectedSuccess(test)
        self.listener.on_risky(_test_name(test), RaisedCondition(message="unexpected success"))


class PresenterTestRunner:
    """Drop-in replacement for :class:`unittest.TextTestRunner`.

    Examples:
        runner = PresenterTestRunner()
        result = runner.run(unittest.defaultTestLoader.discover("tests"))

        unittest.main(testRunner=PresenterTestRunner)
    """

    resultclass = PresenterResult

    def __init__(
        self,
        presenter: Presenter | None = None,
        *,
        settings: PresenterSettings | None = None,
        console: Console | None = None,
        failfast: bool = False,
        **options: Any,
    ) -> None:
        # unittest.main passes its own runner options as keywords
        if options:
            logger.debug("Ignoring runner options: %s", ", ".join(sorted(options)))
        self.presenter = presenter or Presenter(settings, console)
        self.failfast = failfast

    def run(self, test: unittest.TestSuite | unittest.TestCase, name: str | None = None) -> PresenterResult:
        """Run a test or suite and render the report."""
        suite = present_suite(test, name=name)
        result = self.resultclass(self.presenter)
        result.failfast = self.failfast
        unittest.registerResult(result)

        result.startTestRun()
        try:
            suite(result)
        finally:
            result.stopTestRun()

        self.presenter.flush()
        return result
