"""
Process-wide log sink.

Python's ``logging`` has a single global dispatch point, the root logger. This
module owns the one slot for an OpenTelemetry bridge on it:

    handle = try_install(owner, provider, Level.INFO)
    ...
    uninstall(handle)

``try_install`` assigns the slot once. Any later install, from whatever owner,
raises SinkConflictError and leaves the installed bridge untouched until its
owner releases it with ``uninstall`` (or ``reset`` clears it).
"""
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler

from otel_log.diagnostics import BridgeFilter
from otel_log.diagnostics import logger as _diagnostics
from otel_log.errors import SinkConflictError
from otel_log.levels import Level

logger = _diagnostics.getChild("sink")


@dataclass(frozen=True)
class SinkHandle:
    """Proof of installation; pass it back to ``uninstall``."""

    owner: str
    handler: LoggingHandler
    level: Level
    previous_level: int


_lock = threading.Lock()
_active: Optional[SinkHandle] = None


def current() -> Optional[SinkHandle]:
    """The installed sink, or None."""
    return _active


def try_install(owner: str, provider: LoggerProvider, level: Level) -> SinkHandle:
    """
    Bridge the root logger to ``provider`` and set the process-wide level.

    Records below ``level`` are dropped by the root logger before they reach
    the bridge.

    Raises:
        SinkConflictError: if a sink is already installed
    """
    global _active

    with _lock:
        if _active is not None:
            raise SinkConflictError(
                f"a log sink is already installed by {_active.owner}; "
                f"shut it down before installing another"
            )

        root = logging.getLogger()
        handler = LoggingHandler(level=level, logger_provider=provider)
        handler.addFilter(BridgeFilter())
        handle = SinkHandle(
            owner=owner,
            handler=handler,
            level=level,
            previous_level=root.level,
        )
        root.addHandler(handler)
        root.setLevel(level)
        _active = handle

    logger.debug(f"Installed log sink for {owner} at level {level.name}")
    return handle


def uninstall(handle: SinkHandle) -> bool:
    """
    Remove the bridge installed with ``handle`` and restore the root level.

    Returns False when ``handle`` is no longer the installed sink.
    """
    global _active

    with _lock:
        if _active is not handle:
            return False
        root = logging.getLogger()
        root.removeHandler(handle.handler)
        root.setLevel(handle.previous_level)
        _active = None

    logger.debug(f"Uninstalled log sink for {handle.owner}")
    return True


def reset() -> None:
    """Drop whatever sink is installed without touching its provider."""
    handle = _active
    if handle is not None:
        uninstall(handle)


