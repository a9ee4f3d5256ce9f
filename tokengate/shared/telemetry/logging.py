"""Process-wide logging setup, called once from create_app."""

import logging
import sys

from tokengate.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Client libraries whose INFO lines include full request URLs; /verify links
# carry the one-time token in the query string.
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def setup_logging() -> None:
    """Send records to stdout at DEBUG (settings.debug) or INFO."""
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
