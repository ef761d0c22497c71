import logging
import os
from typing import Any

DEFAULT_LOG_LEVEL = "WARNING"

logger = logging.getLogger("html_nlcst")

# Create a custom logging level
DETAIL = 15
logging.addLevelName(DETAIL, "DETAIL")


# Create a custom log method for the "DETAIL" level
def detail(self: logging.Logger, message: str, *args: Any, **kwargs: Any):
    if self.isEnabledFor(DETAIL):
        self._log(DETAIL, message, args, **kwargs)


# Add the custom log method to the logging.Logger class
logging.Logger.detail = detail  # type: ignore


def get_logger() -> logging.Logger:
    """The package logger with its level taken from the `LOG_LEVEL` environment variable."""
    level = os.environ.get("LOG_LEVEL", "").upper() or DEFAULT_LOG_LEVEL
    logger.setLevel(getattr(logging, level, None) or DEFAULT_LOG_LEVEL)
    return logger


get_logger()
