"""Test outcome records and the signature-keyed index that holds them."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from presenter.errors import DuplicateTestError, UnknownTestError


class TestStatus(Enum):
    """Outcome of a single test."""

    __test__ = False  # Prevent pytest from collecting this as a test class

    SUCCESS = "success"
    FAILURE = "failure"
    ERROR = "error"


def make_signature(suite: str, test: str) -> str:
    """Build the ``suite::test`` key for a test."""
    return f"{suite}::{test}"


@dataclass(frozen=True)
class ValueDiff:
    """Operands of a failed equality assertion."""

    expected: str
    actual: str


@dataclass
class Diagnostic:
    """Detail captured for a failure or an error.

    Tagged by ``kind``: failures may carry a ``diff``, errors carry the full
    ``stack_trace``. ``file`` and ``line`` are None when no location is known.
    """

    kind: TestStatus
    message: str
    file: str | None = None
    line: int | None = None
    diff: ValueDiff | None = None
    stack_trace: str | None = None

    @classmethod
    def failure(
        cls,
        message: str,
        file: str | None = None,
        line: int | None = None,
        diff: ValueDiff | None = None,
    ) -> Diagnostic:
        return cls(kind=TestStatus.FAILURE, message=message, file=file, line=line, diff=diff)

    @classmethod
    def error(
        cls,
        message: str,
        file: str | None = None,
        line: int | None = None,
        stack_trace: str | None = None,
    ) -> Diagnostic:
        return cls(
            kind=TestStatus.ERROR, message=message, file=file, line=line, stack_trace=stack_trace
        )


@dataclass
class TestOutcome:
    """Mutable record of one test, created when the test starts."""

    __test__ = False  # Prevent pytest from collecting this as a test class

    suite: str
    test: str
    assertion_count: int = 0
    duration: float = 0.0
    status: TestStatus = TestStatus.SUCCESS
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def signature(self) -> str:
        return make_signature(self.suite, self.test)

    def record(self, diagnostic: Diagnostic) -> None:
        """Append a diagnostic; the latest one decides the status."""
        self.status = diagnostic.kind
        self.diagnostics.append(diagnostic)

    @property
    def primary_diagnostic(self) -> Diagnostic | None:
        """The diagnostic shown in the report for this outcome's status."""
        for diagnostic in self.diagnostics:
            if diagnostic.kind == self.status:
                return diagnostic
        return self.diagnostics[0] if self.diagnostics else None


class OutcomeIndex:
    """Outcomes of a run, keyed by signature in the order tests started."""

    def __init__(self) -> None:
        self._outcomes: dict[str, TestOutcome] = {}

    def open(self, suite: str, test: str) -> TestOutcome:
        """Create the outcome for a newly started test."""
        signature = make_signature(suite, test)
        if signature in self._outcomes:
            raise DuplicateTestError(signature)
        outcome = TestOutcome(suite=suite, test=test)
        self._outcomes[signature] = outcome
        return outcome

    def get(self, signature: str) -> TestOutcome:
        try:
            return self._outcomes[signature]
        except KeyError:
            raise UnknownTestError(signature) from None

    def lookup(self, suite: str, test: str) -> TestOutcome:
        return self.get(make_signature(suite, test))

    def __contains__(self, signature: object) -> bool:
        return signature in self._outcomes

    def __iter__(self) -> Iterator[TestOutcome]:
        return iter(self._outcomes.values())

    def __len__(self) -> int:
        return len(self._outcomes)

    def with_status(self, status: TestStatus) -> list[TestOutcome]:
        """Outcomes currently in the given status."""
        return [o for o in self._outcomes.values() if o.status == status]

    @property
    def num_tests(self) -> int:
        """Count of tests started."""
        return len(self._outcomes)

    @property
    def num_assertions(self) -> int:
        """Total assertions made across all tests."""
        return sum(o.assertion_count for o in self._outcomes.values())

    @property
    def num_failures(self) -> int:
        """Count of failed tests."""
        return sum(1 for o in self._outcomes.values() if o.status == TestStatus.FAILURE)

    @property
    def num_errors(self) -> int:
        """Count of errored tests."""
        return sum(1 for o in self._outcomes.values() if o.status == TestStatus.ERROR)

    @property
    def total_duration(self) -> float:
        """Sum of test durations in seconds."""
        return sum(o.duration for o in self._outcomes.values())

    @property
    def average_duration(self) -> float:
        """Mean test duration in seconds, 0.0 for an empty run."""
        if not self._outcomes:
            return 0.0
        return self.total_duration / len(self._outcomes)


@dataclass(frozen=True)
class SuiteContext:
    """A suite as announced by the host framework.

    ``name`` identifies the suite and prefixes the signatures of its tests, so
    test class suites use the module-qualified class name. ``label`` is the
    shorter name shown in headers. ``is_test_class`` marks a concrete test case
    class whose ``test_count`` is known; logical group suites leave it False.
    """

    name: str
    is_test_class: bool = False
    test_count: int | None = None
    label: str | None = None

    @property
    def display_name(self) -> str:
        return self.label or self.name
