"""Logging setup for the application."""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a deterministic stdout format."""
    level_value = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    logging.basicConfig(level=level_value, handlers=[handler])
