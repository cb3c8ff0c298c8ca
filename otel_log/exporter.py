"""
OTLP/JSON Log Exporter — sends OpenTelemetry log batches as OTLP/HTTP JSON

The SDK ships an OTLP/HTTP exporter for protobuf bodies only. Collectors also
accept the JSON encoding on the same /v1/logs route, which is easier to read
in proxies and request logs. This exporter produces it without encoding
anything by hand:

    - Records are turned into an ExportLogsServiceRequest by the OTLP common
      encoder, then rendered with protobuf's JSON mapping
    - Trace and span ids are rewritten as hex (OTLP/JSON differs from the
      canonical protobuf JSON mapping there)
    - Retry with exponential backoff on 429/5xx and connection errors
    - Clean shutdown closes the HTTP session

Usage:
    from otel_log.exporter import OTLPJsonLogExporter

    exporter = OTLPJsonLogExporter(endpoint="http://localhost:4318/v1/logs")

    processor = BatchLogRecordProcessor(exporter)
    logger_provider.add_log_record_processor(processor)
"""
import base64
import json
import time
import threading
from typing import Dict, Optional, Sequence

import requests
from google.protobuf.json_format import MessageToDict
from opentelemetry.exporter.otlp.proto.common._log_encoder import encode_logs
from opentelemetry.sdk._logs.export import LogExporter, LogExportResult

from otel_log import __version__
from otel_log.diagnostics import logger as _diagnostics

logger = _diagnostics.getChild("exporter")

_TOO_MANY_REQUESTS = 429
_HEX_ID_FIELDS = ("traceId", "spanId")


class OTLPJsonLogExporter(LogExporter):
    """
    OTEL Log Exporter for the OTLP/HTTP JSON encoding.

    Stateless apart from the HTTP session: batching belongs to the
    processor in front of it.
    """

    def __init__(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 10,
        max_retries: int = 3,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            endpoint: Full logs URL, e.g. "http://localhost:4318/v1/logs"
            headers: Extra HTTP headers (auth tokens, tenant ids)
            timeout: HTTP request timeout in seconds
            max_retries: Number of attempts per batch on retryable failures
            session: requests.Session to send with (a new one by default)
        """
        self.endpoint = endpoint
        self.headers = dict(headers or {})
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.client = session or requests.Session()

        self._shutdown = False
        self._send_lock = threading.Lock()

    # ====================================================================
    # Headers
    # ====================================================================
    def _build_headers(self):
        """Build HTTP headers for export calls."""
        headers = {
            "Content-Type": "application/json",
            "User-Agent": f"otel-log-python/{__version__}",
        }
        headers.update(self.headers)
        return headers

    # ====================================================================
    # Encoding
    # ====================================================================
    def _encode(self, batch: Sequence) -> dict:
        """
        Render a batch as an OTLP/JSON request body.

        protobuf's JSON mapping writes bytes as base64; OTLP/JSON wants
        traceId and spanId as lowercase hex.
        """
        body = MessageToDict(encode_logs(batch), use_integers_for_enums=True)

        for resource_logs in body.get("resourceLogs", []):
            for scope_logs in resource_logs.get("scopeLogs", []):
                for record in scope_logs.get("logRecords", []):
                    for key in _HEX_ID_FIELDS:
                        if key in record:
                            record[key] = base64.b64decode(record[key]).hex()

        return body

    # ====================================================================
    # Core: Export (called by the batch processor)
    # ====================================================================
    def export(self, batch: Sequence) -> LogExportResult:
        if self._shutdown:
            logger.warning("Exporter already shutdown, ignoring batch")
            return LogExportResult.FAILURE

        if not batch:
            return LogExportResult.SUCCESS

        try:
            payload = json.dumps(self._encode(batch))
        except Exception as e:
            logger.error(f"Failed to encode {len(batch)} log record(s): {e}")
            return LogExportResult.FAILURE

        with self._send_lock:
            return self._send(payload, len(batch))

    # ====================================================================
    # Core: Send to the collector
    # ====================================================================
    def _send(self, payload: str, count: int) -> LogExportResult:
        """POST one encoded batch, retrying with exponential backoff."""
        headers = self._build_headers()

        for attempt in range(self.max_retries):
            last_attempt = attempt == self.max_retries - 1
            try:
                response = self.client.post(
                    self.endpoint,
                    data=payload,
                    headers=headers,
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                if last_attempt or self._shutdown:
                    logger.error(f"Export failed after {attempt + 1} attempt(s): {e}")
                    return LogExportResult.FAILURE
                wait = 2 ** attempt
                logger.debug(f"Export error: {e}, retry {attempt + 1}/{self.max_retries} in {wait}s")
                time.sleep(wait)
                continue

            if 200 <= response.status_code < 300:
                logger.debug(f"Exported {count} log record(s) to {self.endpoint}")
                return LogExportResult.SUCCESS

            retryable = response.status_code >= 500 or response.status_code == _TOO_MANY_REQUESTS
            if retryable and not last_attempt and not self._shutdown:
                wait = 2 ** attempt
                logger.debug(
                    f"Export failed (HTTP {response.status_code}), "
                    f"retry {attempt + 1}/{self.max_retries} in {wait}s"
                )
                time.sleep(wait)
                continue

            # Client error (4xx), or retries exhausted
            logger.error(f"Export failed (HTTP {response.status_code}): {response.text}")
            return LogExportResult.FAILURE

        return LogExportResult.FAILURE

    # ====================================================================
    # Core: Shutdown
    # ====================================================================
    def shutdown(self):
        """Refuse further exports and close the HTTP session."""
        if self._shutdown:
            return
        self._shutdown = True

        # Wait for any in-progress send to finish
        with self._send_lock:
            self.client.close()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Nothing is buffered here; the processor owns the queue."""
        return True
