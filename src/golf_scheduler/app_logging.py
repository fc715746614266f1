"""Logging configuration helpers."""

import logging


def configure_logging(level: int | str = logging.INFO) -> None:
    """Route ``golf_scheduler`` records to one stream handler.

    Retry warnings and reconciliation failures are logged below this
    logger; repeated calls only update the level.
    """
    logger = logging.getLogger("golf_scheduler")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
