"""Exceptions raised by otel-log."""


class OtelLogError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(OtelLogError):
    """Invalid user input: unknown level, empty tag, unsupported protocol."""


class BuildError(OtelLogError):
    """The exporter, batch processor or logger provider could not be built."""


class SinkConflictError(OtelLogError):
    """The process-wide log sink is already held by another owner."""


class ShutdownError(OtelLogError):
    """Flushing or closing a logger provider failed."""


class ShutdownTimeoutError(ShutdownError):
    """Pending batches were not flushed within the shutdown timeout."""
