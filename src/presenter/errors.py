"""Exceptions raised on misuse of the reporting protocol."""


class PresenterError(Exception):
    """Base class for presenter errors."""


class NoActiveSuiteError(PresenterError):
    """A test was started while no suite was open."""

    def __init__(self, test: str) -> None:
        self.test = test
        super().__init__(f"Test {test!r} started outside of a suite")


class UnknownTestError(PresenterError, KeyError):
    """An event referenced a test that was never started."""

    def __init__(self, signature: str) -> None:
        self.signature = signature
        super().__init__(signature)

    def __str__(self) -> str:
        return f"No test recorded for signature {self.signature!r}"


class DuplicateTestError(PresenterError):
    """A test signature was started twice."""

    def __init__(self, signature: str) -> None:
        self.signature = signature
        super().__init__(f"Test {signature!r} was already started")
