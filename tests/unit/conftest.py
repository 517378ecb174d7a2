import io
from pathlib import Path

import pytest
from rich.console import Console

import sample_cases


@pytest.fixture
def output():
    """In-memory stream for console output."""
    return io.StringIO()


@pytest.fixture
def console(output):
    """Non-interactive console writing to ``output``."""
    return Console(file=output, width=120, highlight=False)


@pytest.fixture
def sample_line():
    """Line number of a snippet in sample_cases.py."""

    def find(snippet: str) -> int:
        path = Path(sample_cases.__file__)
        for lineno, line in enumerate(path.read_text().splitlines(), start=1):
            if snippet in line:
                return lineno
        raise LookupError(snippet)

    return find
