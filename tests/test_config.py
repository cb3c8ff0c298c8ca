"""Tests for exporter configuration and provider construction."""

import pytest
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
from opentelemetry.sdk._logs import LoggerProvider

from otel_log.config import (
    BatchConfig,
    ExporterConfig,
    Protocol,
    build_exporter,
    build_logger_provider,
    logs_endpoint,
)
from otel_log.errors import BuildError, ConfigError
from otel_log.exporter import OTLPJsonLogExporter


class TestLogsEndpoint:
    """Test the /v1/logs suffix."""

    @pytest.mark.parametrize(
        "endpoint, expected",
        [
            ("http://localhost:4317", "http://localhost:4317/v1/logs"),
            ("http://collector:4318/", "http://collector:4318/v1/logs"),
            ("https://otel.example.com/ingest", "https://otel.example.com/ingest/v1/logs"),
            ("https://otel.example.com/ingest//", "https://otel.example.com/ingest/v1/logs"),
        ],
    )
    def test_appends_path_once(self, endpoint, expected):
        assert logs_endpoint(endpoint) == expected

    @pytest.mark.parametrize("endpoint", ["", "localhost:4318", "collector", "ftp://host/", "http://"])
    def test_malformed_endpoint_raises_build_error(self, endpoint):
        with pytest.raises(BuildError):
            logs_endpoint(endpoint)


class TestExporterConfig:
    """Test ExporterConfig defaults and environment loading."""

    def test_defaults(self):
        config = ExporterConfig()

        assert config.protocol is Protocol.HTTP_PROTOBUF
        assert config.headers == {}
        assert config.flush_timeout_millis == 30000
        assert config.batch == BatchConfig()

    def test_protocol_string_is_parsed(self):
        assert ExporterConfig(protocol="http/json").protocol is Protocol.HTTP_JSON

    def test_grpc_protocol_rejected(self):
        with pytest.raises(ConfigError):
            ExporterConfig(protocol="grpc")

    def test_from_empty_env(self):
        assert ExporterConfig.from_env({}) == ExporterConfig()

    def test_from_env(self):
        config = ExporterConfig.from_env({
            "OTEL_EXPORTER_OTLP_LOGS_PROTOCOL": "http/json",
            "OTEL_EXPORTER_OTLP_HEADERS": "api-key=abc,tenant=t1",
            "OTEL_EXPORTER_OTLP_LOGS_TIMEOUT": "5000",
            "OTEL_LOG_FLUSH_TIMEOUT": "2000",
        })

        assert config.protocol is Protocol.HTTP_JSON
        assert config.headers == {"api-key": "abc", "tenant": "t1"}
        assert config.timeout == 5.0
        assert config.flush_timeout_millis == 2000

    def test_logs_variables_win_over_generic(self):
        config = ExporterConfig.from_env({
            "OTEL_EXPORTER_OTLP_PROTOCOL": "http/json",
            "OTEL_EXPORTER_OTLP_LOGS_PROTOCOL": "http/protobuf",
        })

        assert config.protocol is Protocol.HTTP_PROTOBUF

    def test_bad_timeout_raises_config_error(self):
        with pytest.raises(ConfigError):
            ExporterConfig.from_env({"OTEL_EXPORTER_OTLP_TIMEOUT": "soon"})

    @pytest.mark.parametrize(
        "name", ["OTEL_EXPORTER_OTLP_LOGS_TIMEOUT", "OTEL_EXPORTER_OTLP_TIMEOUT", "OTEL_LOG_FLUSH_TIMEOUT"]
    )
    def test_bad_value_error_names_variable(self, name):
        with pytest.raises(ConfigError) as exc_info:
            ExporterConfig.from_env({name: "-5"})

        assert str(exc_info.value).startswith(f"{name} ")


class TestBuildExporter:
    """Test exporter selection by protocol."""

    def test_protobuf_exporter(self):
        exporter = build_exporter("http://localhost:4318", ExporterConfig())
        try:
            assert isinstance(exporter, OTLPLogExporter)
        finally:
            exporter.shutdown()

    def test_json_exporter(self):
        config = ExporterConfig(protocol=Protocol.HTTP_JSON, headers={"x-tenant": "t1"})
        exporter = build_exporter("http://localhost:4318/", config)
        try:
            assert isinstance(exporter, OTLPJsonLogExporter)
            assert exporter.endpoint == "http://localhost:4318/v1/logs"
            assert exporter.headers == {"x-tenant": "t1"}
        finally:
            exporter.shutdown()

    def test_malformed_endpoint(self):
        with pytest.raises(BuildError):
            build_exporter("not a url", ExporterConfig())


class TestBuildLoggerProvider:
    """Test provider construction."""

    def test_service_name_resource(self, memory_exporters):
        provider = build_logger_provider("svc-a", "http://collector:4318")
        try:
            assert isinstance(provider, LoggerProvider)
            assert provider.resource.attributes["service.name"] == "svc-a"
            assert len(memory_exporters) == 1
        finally:
            provider.shutdown()

    def test_empty_tag_raises_config_error(self, memory_exporters):
        with pytest.raises(ConfigError):
            build_logger_provider("", "http://collector:4318")

        assert memory_exporters == []

    def test_invalid_batch_settings_raise_build_error(self, memory_exporters):
        config = ExporterConfig(batch=BatchConfig(max_queue_size=10, max_export_batch_size=100))

        with pytest.raises(BuildError):
            build_logger_provider("svc-a", "http://collector:4318", config)

    def test_malformed_endpoint_raises_build_error(self):
        with pytest.raises(BuildError):
            build_logger_provider("svc-a", "collector")
