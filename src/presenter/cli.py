"""Command-line interface for running unittest suites with the presenter."""

import logging
import sys
import unittest
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from presenter.config import OutputFormat, load_settings
from presenter.runner import PresenterTestRunner


@click.command()
@click.argument('start_dir', default='.', type=click.Path(exists=True, file_okay=False, dir_okay=True))
@click.option('--pattern', '-p',
              default='test*.py',
              show_default=True,
              help='Pattern to match test files')
@click.option('--top-level-dir', '-t',
              default=None,
              type=click.Path(exists=True, file_okay=False, dir_okay=True),
              help='Top level directory of the project (defaults to START_DIR)')
@click.option('--format', 'output_format',
              default=None,
              type=click.Choice([f.value for f in OutputFormat]),
              help='Output format (overrides PRESENTER_FORMAT)')
@click.option('--times/--no-times',
              default=None,
              help='Show the time taken by each test (overrides PRESENTER_SHOW_TIMES)')
@click.option('--colours/--no-colours',
              default=None,
              help='Use colours (overrides PRESENTER_COLOURS)')
@click.option('--hide-successful/--show-successful',
              default=None,
              help='Only list tests that did not pass (overrides PRESENTER_HIDE_SUCCESSFUL)')
@click.option('--log-level',
              default='WARNING',
              show_default=True,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging level for diagnostics written to stderr')
def main(start_dir: str,
         pattern: str,
         top_level_dir: Optional[str],
         output_format: Optional[str],
         times: Optional[bool],
         colours: Optional[bool],
         hide_successful: Optional[bool],
         log_level: str):
    """
    Discover unittest tests under START_DIR and run them with live results.

    Options left unset fall back to the PRESENTER_* environment variables.

    Examples:

    \b
    # Run everything under ./tests
    presenter tests

    \b
    # CI friendly output without colours
    presenter tests --format feed --no-colours
    """
    logging.basicConfig(level=log_level.upper(), stream=sys.stderr,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        settings = load_settings(
            format=output_format,
            show_times=times,
            colours=colours,
            hide_successful=hide_successful,
        )
    except ValidationError as e:
        click.echo(f"Error: invalid presenter configuration\n{e}", err=True)
        raise click.Abort()

    loader = unittest.TestLoader()
    suite = loader.discover(start_dir, pattern=pattern, top_level_dir=top_level_dir)

    runner = PresenterTestRunner(settings=settings)
    result = runner.run(suite, name=Path(start_dir).resolve().name)

    sys.exit(0 if result.wasSuccessful() else 1)


if __name__ == '__main__':
    main()
