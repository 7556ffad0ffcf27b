"""Logging setup shared by the CLI and the web server."""

import logging

from rich.logging import RichHandler


def setup_logging(verbose: bool = False) -> None:
    """Route the ``lingoweb`` loggers through a rich console handler.

    Args:
        verbose: Log at DEBUG instead of INFO.
    """
    logger = logging.getLogger("lingoweb")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.propagate = False
