"""
otel-log Config — build the OpenTelemetry logging pipeline

Everything heavy is done by the OpenTelemetry SDK; this module only forwards
configuration to it:

    provider = build_logger_provider("my_app", "http://localhost:4318")

gives a LoggerProvider with:
    - an OTLP/HTTP exporter posting to http://localhost:4318/v1/logs
    - a BatchLogRecordProcessor in front of it
    - a Resource carrying service.name=my_app
"""
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional
from urllib.parse import urlsplit

import requests
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor, LogExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.util.re import parse_env_headers

from otel_log.diagnostics import logger as _diagnostics
from otel_log.errors import BuildError, ConfigError
from otel_log.exporter import OTLPJsonLogExporter

logger = _diagnostics.getChild("config")

LOGS_PATH = "/v1/logs"

DEFAULT_TIMEOUT = 10              # seconds per HTTP export request
DEFAULT_FLUSH_TIMEOUT = 30000     # ms, matches the SDK's batch export timeout


class Protocol(str, Enum):
    """OTLP/HTTP body encodings."""

    HTTP_PROTOBUF = "http/protobuf"
    HTTP_JSON = "http/json"

    @classmethod
    def parse(cls, value) -> "Protocol":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigError(
                f"unsupported OTLP protocol {value!r}; expected "
                f"{cls.HTTP_PROTOBUF.value} or {cls.HTTP_JSON.value}"
            ) from None


@dataclass
class BatchConfig:
    """
    Settings forwarded to BatchLogRecordProcessor.

    None leaves the value to the SDK, which reads OTEL_BLRP_* or falls back to
    its own defaults (queue 2048, batch 512, export timeout 30s, delay 1s).
    """

    max_queue_size: Optional[int] = None
    max_export_batch_size: Optional[int] = None
    export_timeout_millis: Optional[float] = None
    schedule_delay_millis: Optional[float] = None


@dataclass
class ExporterConfig:
    """Exporter and lifecycle settings used by LoggerManager.init()."""

    protocol: Protocol = Protocol.HTTP_PROTOBUF
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT
    batch: BatchConfig = field(default_factory=BatchConfig)
    flush_timeout_millis: int = DEFAULT_FLUSH_TIMEOUT
    max_retries: int = 3

    def __post_init__(self):
        self.protocol = Protocol.parse(self.protocol)

    @classmethod
    def from_env(cls, environ=None) -> "ExporterConfig":
        """
        Read the standard OTLP exporter variables.

        Logs-specific variables win over the generic OTEL_EXPORTER_OTLP_* ones.
        OTEL_EXPORTER_OTLP_*_TIMEOUT is in milliseconds, following the usual
        OpenTelemetry environment conventions.
        """
        env = os.environ if environ is None else environ

        def _get(name):
            for var in (f"OTEL_EXPORTER_OTLP_LOGS_{name}", f"OTEL_EXPORTER_OTLP_{name}"):
                if env.get(var):
                    return var, env[var]
            return None, None

        config = cls()

        _, protocol = _get("PROTOCOL")
        if protocol:
            config.protocol = Protocol.parse(protocol)

        _, headers = _get("HEADERS")
        if headers:
            config.headers = parse_env_headers(headers, liberal=True)

        timeout_var, timeout = _get("TIMEOUT")
        if timeout:
            config.timeout = _parse_number(timeout_var, timeout) / 1000

        flush_timeout = env.get("OTEL_LOG_FLUSH_TIMEOUT")
        if flush_timeout:
            config.flush_timeout_millis = int(_parse_number("OTEL_LOG_FLUSH_TIMEOUT", flush_timeout))

        return config


def _parse_number(name: str, value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number of milliseconds, got {value!r}") from None
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {value!r}")
    return number


def logs_endpoint(endpoint: str) -> str:
    """
    Append the OTLP logs path to a collector base URL.

    Example:
        "http://localhost:4318/" → "http://localhost:4318/v1/logs"

    Raises:
        BuildError: if ``endpoint`` is not an absolute http(s) URL
    """
    parts = urlsplit(endpoint or "")
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise BuildError(f"invalid collector endpoint {endpoint!r}: expected an http(s) URL")
    return f"{endpoint.rstrip('/')}{LOGS_PATH}"


def build_exporter(endpoint: str, config: ExporterConfig) -> LogExporter:
    """Create the OTLP exporter for ``config.protocol`` aimed at ``endpoint``/v1/logs."""
    target = logs_endpoint(endpoint)

    try:
        if config.protocol is Protocol.HTTP_JSON:
            return OTLPJsonLogExporter(
                endpoint=target,
                headers=config.headers,
                timeout=config.timeout,
                max_retries=config.max_retries,
            )

        return OTLPLogExporter(
            endpoint=target,
            headers=config.headers or None,
            timeout=config.timeout,
            session=requests.Session(),
        )
    except Exception as e:
        raise BuildError(f"could not create {config.protocol.value} exporter for {target}: {e}") from e


def build_logger_provider(tag: str, endpoint: str, config: Optional[ExporterConfig] = None) -> LoggerProvider:
    """
    Build exporter → batch processor → provider, tagged with service.name.

    Raises:
        ConfigError: if ``tag`` is empty
        BuildError: if any stage cannot be constructed
    """
    if not tag:
        raise ConfigError("tag must be a non-empty service name")

    config = config or ExporterConfig()

    exporter = build_exporter(endpoint, config)
    try:
        processor = BatchLogRecordProcessor(
            exporter,
            schedule_delay_millis=config.batch.schedule_delay_millis,
            max_export_batch_size=config.batch.max_export_batch_size,
            export_timeout_millis=config.batch.export_timeout_millis,
            max_queue_size=config.batch.max_queue_size,
        )
    except Exception as e:
        exporter.shutdown()
        raise BuildError(f"could not create batch processor: {e}") from e

    try:
        provider = LoggerProvider(
            resource=Resource.create({SERVICE_NAME: tag}),
            shutdown_on_exit=False,
        )
        provider.add_log_record_processor(processor)
    except Exception as e:
        processor.shutdown()
        raise BuildError(f"could not create logger provider: {e}") from e

    logger.debug(f"Built logger provider — service.name={tag}, endpoint={logs_endpoint(endpoint)}, protocol={config.protocol.value}")
    return provider
