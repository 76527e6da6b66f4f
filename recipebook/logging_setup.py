"""Console logging for the recipe service.

Gunicorn and container runtimes collect stdout/stderr, so a single stream
handler on the root logger is all that is configured.
"""

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger to write to the console.

    Args:
        level: Name of the root log level, e.g. ``"DEBUG"`` or ``"INFO"``.
    """
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not any(isinstance(h, logging.StreamHandler) for h in root_logger.handlers):
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        root_logger.addHandler(console)
