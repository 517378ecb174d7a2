"""Source line lookup for failure excerpts."""

import logging
from pathlib import Path


logger = logging.getLogger(__name__)


def get_source_line(path: str | Path | None, lineno: int | None) -> str | None:
    """Return the stripped text of a 1-based line in a file.

    The file is scanned line by line. Returns None if the file is missing or
    unreadable, or if it has fewer than ``lineno`` lines.
    """
    if path is None or lineno is None or lineno < 1:
        return None

    source = Path(path)
    if not source.is_file():
        return None

    try:
        with source.open(encoding="utf-8", errors="replace") as fh:
            for current, line in enumerate(fh, start=1):
                if current == lineno:
                    return line.strip()
    except OSError as e:
        logger.debug("Cannot read source line %s:%s: %s", source, lineno, e)
        return None

    return None
