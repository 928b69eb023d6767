"""Logging configuration helpers."""

import logging

LOGGER_NAME = "macro_prep"


def configure_logging(level: int = logging.INFO) -> None:
    """Attach one stream handler to the package logger.

    Calling this again only updates the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
