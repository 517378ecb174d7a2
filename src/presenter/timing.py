"""Duration classification for test timings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


WARN_THRESHOLD_MS = 400
DANGER_THRESHOLD_MS = 1000


class TimeColour(Enum):
    """Severity of a duration, with the colour it is displayed in."""

    OK = "green"
    WARN = "yellow"
    DANGER = "red"

    @property
    def style(self) -> str:
        return self.value


@dataclass(frozen=True)
class ElapsedTime:
    """A duration scaled to a displayable unit."""

    amount: float
    unit: str
    colour: TimeColour

    @property
    def label(self) -> str:
        """Amount and unit as shown in the report, e.g. ``399ms`` or ``1.2secs``."""
        amount = self.amount
        if float(amount).is_integer():
            amount = int(amount)
        return f"{amount}{self.unit}"


def classify_time(seconds: float) -> ElapsedTime:
    """Classify a duration in seconds.

    Below 400ms a duration is OK, below one second it is a warning, and from one
    second up it is shown in red as seconds, or as minutes from sixty seconds.
    """
    if seconds < 0:
        msg = f"Duration cannot be negative: {seconds}"
        raise ValueError(msg)

    value = seconds * 1000
    unit = "ms"
    colour = TimeColour.OK

    if value >= WARN_THRESHOLD_MS:
        colour = TimeColour.WARN

    if value >= DANGER_THRESHOLD_MS:
        colour = TimeColour.DANGER
        value = value / 1000
        unit = "secs"

        if value >= 60:
            value = value / 60
            unit = "mins"

    return ElapsedTime(amount=round(value, 2), unit=unit, colour=colour)
