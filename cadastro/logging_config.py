"""
Process logging for the cadastro API server.

One line per record on stdout. Store client and uvicorn access chatter is
kept at WARNING so request failures logged by handlers.py stand out.
Request bodies and Firebase credentials are never logged.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger.

    Args:
        level: Name of the log level (DEBUG, INFO, WARNING, ERROR).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    for noisy in ("urllib3", "google.auth", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
