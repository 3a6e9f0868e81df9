"""
Logging configuration.

Console logging is always on. When LOG_DIR is set a file
handler is added as well; if the file cannot be opened the
application keeps running with console output only.
"""

import logging
import os
import time

from grc_backoffice.config import Settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s: %(name)s: %(message)s"


class UTCFormatter(logging.Formatter):
    """Formatter that stamps every record in UTC."""

    converter = time.gmtime


def configure_logging(settings: Settings) -> None:
    """Install console (and optional file) handlers on the root logger."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if settings.LOG_DIR:
        try:
            os.makedirs(settings.LOG_DIR, exist_ok=True)
            log_file = os.path.join(settings.LOG_DIR, "grc-backoffice.log")
            handlers.append(
                logging.FileHandler(log_file, mode="a", encoding="utf-8")
            )
        except OSError as e:
            logger.warning(
                "Cannot open log file in %s, logging to console only: %s",
                settings.LOG_DIR,
                e,
            )

    formatter = UTCFormatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        handlers=handlers,
        force=True,
    )
    logger.info("Logging configured with %d handlers", len(handlers))
