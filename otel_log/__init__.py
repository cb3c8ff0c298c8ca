"""
otel-log — ship Python logging to an OpenTelemetry collector

Usage:
    pip install otel-log

    from otel_log import LoggerManager

    with LoggerManager() as manager:
        manager.init("my_app", "info", "http://localhost:4318")
        logging.getLogger(__name__).info("hello")

Keep the manager alive for as long as the application logs; leaving the
``with`` block (or calling ``shutdown()``) flushes pending batches.
"""

__version__ = "0.1.0"

from otel_log.config import BatchConfig, ExporterConfig, Protocol
from otel_log.errors import (
    BuildError,
    ConfigError,
    OtelLogError,
    ShutdownError,
    ShutdownTimeoutError,
    SinkConflictError,
)
from otel_log.exporter import OTLPJsonLogExporter
from otel_log.levels import Level, parse_level
from otel_log.manager import LoggerManager, ManagerState

__all__ = [
    "BatchConfig",
    "BuildError",
    "ConfigError",
    "ExporterConfig",
    "Level",
    "LoggerManager",
    "ManagerState",
    "OTLPJsonLogExporter",
    "OtelLogError",
    "Protocol",
    "ShutdownError",
    "ShutdownTimeoutError",
    "SinkConflictError",
    "__version__",
    "parse_level",
]
