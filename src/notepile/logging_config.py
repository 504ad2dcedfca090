"""Logging configuration for the notepile CLI."""

import logging
import sys


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Send notepile's log records to stderr at the requested level."""
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname).1s %(name)s: %(message)s"))

    root = logging.getLogger("notepile")
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
