"""Typed view of a raised exception's call stack.

A :class:`TraceFrame` describes one call: the callee's class, function name and
positional arguments, together with the call site (file and line in the caller).
Frames are ordered innermost call first, so the frame just before the test
method's own frame is the call the test made, typically an assertion.
Frames that set ``__tracebackhide__`` are left out, as pytest does.
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Sequence
from dataclasses import dataclass, field
from types import CodeType, FrameType, TracebackType
from typing import Any

from presenter.models import ValueDiff


logger = logging.getLogger(__name__)

EQUALITY_ASSERTIONS = frozenset({"assertEqual", "assertNotEqual", "assertEquals", "assertNotEquals"})

_BOUND_NAMES = ("self", "cls")


@dataclass(frozen=True)
class TraceFrame:
    """A single call in a stack trace.

    ``class_name`` is the class part of the callee's qualified name and
    ``module`` the module the callee was defined in.
    """

    class_name: str | None
    function: str
    file: str
    line: int
    args: tuple[Any, ...] = ()
    module: str | None = None

    def belongs_to(self, suite_name: str) -> bool:
        """Whether the callee is a method of the class ``suite_name`` names.

        Accepts the bare class name or the module-qualified one.
        """
        if self.class_name is None:
            return False
        if suite_name == self.class_name:
            return True
        return self.module is not None and suite_name == f"{self.module}.{self.class_name}"


@dataclass(frozen=True)
class AssertionSite:
    """Where a test called the assertion that raised."""

    function: str
    file: str
    line: int
    args: tuple[Any, ...] = ()


@dataclass
class RaisedCondition:
    """An exception as seen by the reporter."""

    message: str
    exc_type: str = "Exception"
    file: str | None = None
    line: int | None = None
    frames: list[TraceFrame] = field(default_factory=list)
    trace_text: str = ""

    @property
    def summary(self) -> str:
        """Exception type and message, e.g. ``ValueError: bad input``."""
        if not self.message:
            return self.exc_type
        return f"{self.exc_type}: {self.message}"

    @classmethod
    def from_exception(cls, exc: BaseException) -> RaisedCondition:
        return cls.from_exc_info(type(exc), exc, exc.__traceback__)

    @classmethod
    def from_exc_info(
        cls,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> RaisedCondition:
        """Build a condition from the triple returned by ``sys.exc_info()``."""
        entries: list[tuple[FrameType, int]] = []
        current = tb
        while current is not None:
            if not current.tb_frame.f_locals.get("__tracebackhide__"):
                entries.append((current.tb_frame, current.tb_lineno))
            current = current.tb_next

        frames = [
            TraceFrame(
                class_name=_class_name(callee.f_code),
                function=callee.f_code.co_name,
                file=caller.f_code.co_filename,
                line=call_line,
                args=_call_args(callee),
                module=callee.f_globals.get("__name__"),
            )
            for (caller, call_line), (callee, _) in zip(entries, entries[1:])
        ]
        frames.reverse()

        file: str | None = None
        line: int | None = None
        if entries:
            raised_in, line = entries[-1]
            file = raised_in.f_code.co_filename

        lines = traceback.format_exception(exc_type, exc, _relevant_tb(tb))
        return cls(
            message=str(exc),
            exc_type=exc_type.__name__,
            file=file,
            line=line,
            frames=frames,
            trace_text="".join(lines).rstrip("\n"),
        )


def _class_name(code: CodeType) -> str | None:
    """Name of the class a function was defined in, if any."""
    owner, _, _ = code.co_qualname.rpartition(".")
    if not owner or owner.endswith("<locals>"):
        return None
    return owner


def _call_args(frame: FrameType) -> tuple[Any, ...]:
    code = frame.f_code
    names = code.co_varnames[: code.co_argcount]
    local_vars = frame.f_locals
    return tuple(local_vars.get(name) for name in names if name not in _BOUND_NAMES)


def _relevant_tb(tb: TracebackType | None) -> TracebackType | None:
    # Drop the leading frames of the unittest machinery, as unittest itself does.
    current = tb
    while current is not None and "__unittest" in current.tb_frame.f_globals:
        current = current.tb_next
    return current or tb


def locate_assertion_site(frames: Sequence[TraceFrame], suite_name: str) -> AssertionSite | None:
    """Find the call made from the test class that led to the exception.

    Scans innermost first for the first frame belonging to ``suite_name`` and
    returns the call just inside it. Returns None when the suite class is not
    on the stack or nothing was called from it.
    """
    for index, frame in enumerate(frames):
        if not frame.belongs_to(suite_name):
            continue
        if index == 0:
            break
        call = frames[index - 1]
        return AssertionSite(function=call.function, file=call.file, line=call.line, args=call.args)

    logger.debug("No assertion site for suite %s in %d frames", suite_name, len(frames))
    return None


def extract_diff(site: AssertionSite | None) -> ValueDiff | None:
    """Expected and actual operands of an equality assertion, if that is what failed."""
    if site is None or site.function not in EQUALITY_ASSERTIONS or len(site.args) < 2:
        return None
    return ValueDiff(expected=repr(site.args[0]), actual=repr(site.args[1]))
