import logging
import sys
from typing import Optional, TextIO

from rich.console import Console
from rich.logging import RichHandler


logger = logging.getLogger("incbundler")


def configure_logging(debug: bool, stream: Optional[TextIO] = None):
    """
    Route the ``incbundler`` logger to the terminal.

    Interactive terminals get rich formatting; anything else (pipes, test
    runners) gets bare messages.
    """
    stream = stream or sys.stdout
    if stream.isatty():
        handler: logging.Handler = RichHandler(
            console=Console(file=stream), show_time=False, show_path=False
        )
    else:
        handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
