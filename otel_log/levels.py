"""
Severity levels accepted by ``LoggerManager.init``.

The five names follow the usual logging facade set and map onto the standard
library's numeric levels. TRACE has no stdlib equivalent, so it is registered
below DEBUG.
"""
import logging
from enum import IntEnum

from otel_log.errors import ConfigError

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class Level(IntEnum):
    """Severity filter, ordered from least to most verbose."""

    ERROR = logging.ERROR
    WARN = logging.WARNING
    INFO = logging.INFO
    DEBUG = logging.DEBUG
    TRACE = TRACE


_NAMES = {
    "error": Level.ERROR,
    "warn": Level.WARN,
    "info": Level.INFO,
    "debug": Level.DEBUG,
    "trace": Level.TRACE,
}


def parse_level(value: str) -> Level:
    """
    Parse a level name, ignoring case.

    Example:
        parse_level("Info") → Level.INFO

    Raises:
        ConfigError: if ``value`` is not one of error, warn, info, debug, trace
    """
    if isinstance(value, Level):
        return value
    try:
        return _NAMES[value.lower()]
    except (KeyError, AttributeError):
        raise ConfigError(
            f"unknown log level {value!r}; expected one of {', '.join(_NAMES)}"
        ) from None
