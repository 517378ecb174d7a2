"""Line-oriented terminal writer over a Rich console."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.control import Control
from rich.markup import escape
from rich.segment import ControlType


logger = logging.getLogger(__name__)


class Terminal:
    """Writes styled text a line, or part of a line, at a time.

    Text is Rich markup. With colours disabled, :meth:`style` returns escaped
    plain text, so the same calls produce the same structure without styling.
    """

    def __init__(self, console: Console | None = None, *, colours: bool = True) -> None:
        self.console = console or Console(highlight=False)
        self.colours = colours

    @property
    def supports_overwrite(self) -> bool:
        """Whether the cursor can be moved back to redraw a line."""
        return self.console.is_terminal and not self.console.is_dumb_terminal

    def style(self, style: str, text: object) -> str:
        """Wrap text in a style, escaping it so it is never read as markup."""
        content = escape(str(text))
        if not self.colours or not style:
            return content
        return f"[{style}]{content}[/{style}]"

    def inline(self, markup: str) -> None:
        """Write without ending the line."""
        self.console.print(markup, end="", highlight=False, emoji=False, soft_wrap=True)

    def line(self, markup: str = "") -> None:
        """Write and end the line."""
        self.console.print(markup, highlight=False, emoji=False, soft_wrap=True)

    def blank(self) -> None:
        """End the current line, leaving a blank one if nothing was written on it."""
        self.console.print(highlight=False)

    def clear(self) -> None:
        """Clear the screen when writing to an interactive terminal."""
        if self.supports_overwrite:
            self.console.clear()

    def overwrite_last_line(self, markup: str) -> None:
        """Redraw the previous line.

        Degrades to writing a fresh line when the output is not interactive.
        """
        if self.supports_overwrite:
            self.console.control(
                Control.move_to_column(0, y=-1),
                Control((ControlType.ERASE_IN_LINE, 2)),
            )
        else:
            logger.debug("Terminal cannot overwrite lines, appending instead")
        self.line(markup)
