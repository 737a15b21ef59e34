"""
Application logging setup.

The request log goes to the ``money_management`` logger; modules log through
``logging.getLogger(__name__)``, which lands under the ``backend`` package
logger configured alongside it.
"""

import logging

from backend.app.core.config import settings

LOG_NAME = "money_management"

# Log format with ISO-like timestamp including milliseconds
LOG_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(funcName)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def setup_logging(level: str = None) -> logging.Logger:
    """
    Configure the application logger and the ``backend`` package logger.

    Safe to call more than once; handlers are only attached the first time.

    Args:
        level: Log level name, defaults to ``settings.log_level``

    Returns:
        The configured application logger
    """
    level_name = (level or settings.log_level).upper()
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    app_logger = logging.getLogger(LOG_NAME)
    package_logger = logging.getLogger("backend")

    for target in (app_logger, package_logger):
        target.setLevel(level_name)
        if not target.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            target.addHandler(console_handler)
        # Avoid duplicate logs through the root logger
        target.propagate = False

    return app_logger
