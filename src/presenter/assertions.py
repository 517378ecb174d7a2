"""Assertion counting for unittest test cases."""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any


class AssertionCountingMixin:
    """Counts the ``assert*`` calls a test makes in ``assertion_count``.

    Mix into a :class:`unittest.TestCase` subclass, before ``TestCase``::

        class CalcTest(AssertionCountingMixin, unittest.TestCase):
            ...

    Assertions made by other assertion methods (``assertEqual`` delegating to
    ``assertListEqual``) are not counted twice.
    """

    assertion_count = 0
    _assertion_depth = 0

    def run(self, result: Any = None) -> Any:
        self.assertion_count = 0
        self._assertion_depth = 0
        return super().run(result)  # type: ignore[misc]

    def __getattribute__(self, name: str) -> Any:
        attr = super().__getattribute__(name)
        if name.startswith("assert") and callable(attr):
            return self._count_calls(attr)
        return attr

    def _count_calls(self, method: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(method)
        def counted(*args: Any, **kwargs: Any) -> Any:
            __tracebackhide__ = True
            depth = self._assertion_depth
            if depth == 0:
                self.assertion_count += 1
            self._assertion_depth = depth + 1
            try:
                return method(*args, **kwargs)
            finally:
                self._assertion_depth = depth

        return counted
