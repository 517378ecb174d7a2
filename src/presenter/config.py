"""Presenter configuration, read from ``PRESENTER_*`` environment variables."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    """How test progress is written to the terminal.

    ``default`` overwrites each test's line in place as it finishes, ``feed``
    only ever appends (safe for CI logs) and ``condensed`` prints one glyph per
    test. The condensed format never shows test times.
    """

    DEFAULT = "default"
    FEED = "feed"
    CONDENSED = "condensed"


class PresenterSettings(BaseSettings):
    """Configuration for the presenter.

    Loads from environment variables automatically:
        PRESENTER_FORMAT, PRESENTER_SHOW_TIMES, PRESENTER_COLOURS,
        PRESENTER_HIDE_SUCCESSFUL, PRESENTER_TITLE
    """

    format: OutputFormat = Field(default=OutputFormat.DEFAULT, description="Output format")
    show_times: bool = Field(default=True, description="Show the time taken by each test")
    colours: bool = Field(default=True, description="Use colours and text styles")
    hide_successful: bool = Field(default=False, description="Only show tests that did not pass")
    title: str = Field(default="Running tests", description="Heading shown when the run starts")

    model_config = SettingsConfigDict(
        env_prefix="PRESENTER_",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    @field_validator("format", mode="before")
    @classmethod
    def _fallback_format(cls, value: Any) -> Any:
        if isinstance(value, OutputFormat):
            return value
        normalized = str(value).strip().lower()
        if normalized not in {f.value for f in OutputFormat}:
            logger.warning("Unknown PRESENTER_FORMAT %r, using 'default'", value)
            return OutputFormat.DEFAULT
        return normalized

    @property
    def display_times(self) -> bool:
        """Whether per-test times are rendered."""
        return self.show_times and self.format != OutputFormat.CONDENSED


def load_settings(**overrides: Any) -> PresenterSettings:
    """Read settings from the environment, then apply non-None overrides."""
    explicit = {key: value for key, value in overrides.items() if value is not None}
    return PresenterSettings(**explicit)
