"""Shared fixtures for otel-log tests."""

import pytest
from opentelemetry.sdk._logs.export import InMemoryLogExporter

from otel_log import config as config_module
from otel_log import sink


@pytest.fixture(autouse=True)
def clean_sink():
    """Every test starts and ends without a process-wide sink."""
    sink.reset()
    yield
    sink.reset()


@pytest.fixture
def memory_exporters(monkeypatch):
    """Replace the OTLP exporter with in-memory ones, one per built provider."""
    exporters = []

    def fake_build_exporter(endpoint, config):
        config_module.logs_endpoint(endpoint)
        exporter = InMemoryLogExporter()
        exporters.append(exporter)
        return exporter

    monkeypatch.setattr(config_module, "build_exporter", fake_build_exporter)
    return exporters


def finished(exporter, logger_name):
    """Records exported for ``logger_name``, ignoring anything else on the root logger."""
    return [
        log_data.log_record
        for log_data in exporter.get_finished_logs()
        if log_data.instrumentation_scope.name == logger_name
    ]
