"""Allow ``python -m presenter``."""

from presenter.cli import main


main(prog_name="presenter")
