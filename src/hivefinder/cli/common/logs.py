"""Logging setup for the CLI."""

import logging

from rich.logging import RichHandler

from hivefinder.cli.common.output import console


def setup_logging(verbose: bool = False) -> None:
    """Route log records through Rich on the shared console."""
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=verbose)
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    # Suppress noisy loggers
    logging.getLogger("databricks.sdk").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
