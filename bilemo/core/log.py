import logging
from typing import Optional

from bilemo.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Attach a stream handler to the ``bilemo`` logger and set its level.

    Calling it again only updates the level.
    """
    logger = logging.getLogger("bilemo")
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
