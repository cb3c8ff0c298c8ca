"""
LoggerManager — owns one OpenTelemetry logging pipeline from init to shutdown.

    manager = LoggerManager()
    manager.init("my_app", "info", "http://localhost:4318")
    ...
    manager.shutdown()

or, so the flush cannot be forgotten:

    with LoggerManager() as manager:
        manager.init("my_app", "info", "http://localhost:4318")

Keep the manager alive for the lifetime of the application: discarding it
flushes pending batches and removes the bridge from the root logger.
"""
from enum import Enum
from typing import Optional

from opentelemetry.sdk._logs import LoggerProvider

from otel_log import sink
from otel_log.config import ExporterConfig, build_logger_provider, logs_endpoint
from otel_log.diagnostics import configure as _configure_diagnostics
from otel_log.diagnostics import logger as _diagnostics
from otel_log.errors import ConfigError, ShutdownError, ShutdownTimeoutError, SinkConflictError
from otel_log.levels import parse_level

logger = _diagnostics.getChild("manager")


class ManagerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    SHUT_DOWN = "shut_down"


class LoggerManager:
    """
    Lifecycle owner for a LoggerProvider.

    States go UNINITIALIZED → INITIALIZED → SHUT_DOWN. ``init`` is accepted in
    every state: on an initialized manager the running pipeline is flushed and
    shut down before the new one is installed, and a shut down manager simply
    starts over.
    """

    def __init__(self, config: Optional[ExporterConfig] = None, debug: bool = False):
        """
        Args:
            config: Exporter, batching and flush settings (defaults if None)
            debug: If True, shows otel-log debug logs on stderr
        """
        self.config = config or ExporterConfig()
        self._provider: Optional[LoggerProvider] = None
        self._sink_handle: Optional[sink.SinkHandle] = None
        self._state = ManagerState.UNINITIALIZED

        if debug:
            _configure_diagnostics(debug=True)

    @property
    def provider(self) -> Optional[LoggerProvider]:
        return self._provider

    @property
    def state(self) -> ManagerState:
        return self._state

    @property
    def initialized(self) -> bool:
        return self._state is ManagerState.INITIALIZED

    def init(self, tag: str, level: str, endpoint: str) -> None:
        """
        Build a pipeline for ``tag`` and make it the process-wide log sink.

        Args:
            tag: service.name resource attribute
            level: error, warn, info, debug or trace
            endpoint: collector base URL; /v1/logs is appended

        Raises:
            ConfigError: unknown level or empty tag
            BuildError: exporter or provider could not be built
            SinkConflictError: another owner holds the process-wide sink
        """
        parsed = parse_level(level)
        if not tag:
            raise ConfigError("tag must be a non-empty service name")
        logs_endpoint(endpoint)

        if self._provider is not None:
            logger.debug("Re-initializing — shutting down the previous provider first")
            self.close()

        provider = build_logger_provider(tag, endpoint, self.config)

        try:
            handle = sink.try_install(f"LoggerManager@{id(self):#x}", provider, parsed)
        except SinkConflictError:
            provider.shutdown()
            raise

        self._provider = provider
        self._sink_handle = handle
        self._state = ManagerState.INITIALIZED

        logger.debug(f"Logger initialized — service.name={tag}, level={parsed.name}, endpoint={endpoint}")

    def shutdown(self) -> None:
        """
        Remove the bridge, flush pending batches and close the exporter.

        No-op when there is no provider. The manager is SHUT_DOWN afterwards
        even if flushing failed.

        Raises:
            ShutdownTimeoutError: pending batches were not flushed in time
            ShutdownError: the provider failed while shutting down
        """
        provider, handle = self._provider, self._sink_handle
        if provider is None:
            return

        self._provider = None
        self._sink_handle = None
        self._state = ManagerState.SHUT_DOWN

        if handle is not None:
            sink.uninstall(handle)

        timeout = self.config.flush_timeout_millis
        try:
            try:
                flushed = provider.force_flush(timeout_millis=timeout)
            finally:
                provider.shutdown()
        except Exception as e:
            raise ShutdownError(f"Failed to shutdown logger provider: {e}") from e

        if not flushed:
            raise ShutdownTimeoutError(f"Pending log batches not flushed within {timeout}ms")

        logger.debug("Logger provider shutdown complete")

    def close(self) -> None:
        """shutdown() for disposal paths: errors are reported, never raised."""
        try:
            self.shutdown()
        except ShutdownError as e:
            logger.error(f"Failed to shutdown logger: {e}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __del__(self):
        """Best-effort shutdown when the manager is garbage collected."""
        try:
            self.close()
        except (AttributeError, TypeError, RuntimeError):
            # Interpreter shutdown: module globals may already be gone
            pass

    def __repr__(self):
        return f"LoggerManager(state={self._state.value})"
