"""Logging configuration helpers."""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once for the server process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the server's namespace."""
    return logging.getLogger(name or "quantmodel_server")
