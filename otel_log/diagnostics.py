"""
Diagnostics for otel-log itself.

The package reports on the ``otel_log`` logger hierarchy. Records propagate
like any library's, so the application's logging config decides where they
go; the bridge handler drops them (see ``BridgeFilter``) so that records about
the export pipeline are never fed back into it. Teardown errors are reported
here too, since disposal paths cannot raise.
"""
import logging

LOGGER_NAME = "otel_log"

logger = logging.getLogger(LOGGER_NAME)


class BridgeFilter(logging.Filter):
    """Keeps otel-log's own records out of the OpenTelemetry bridge."""

    def filter(self, record):
        return not (record.name == LOGGER_NAME or record.name.startswith(LOGGER_NAME + "."))


def configure(debug: bool = False) -> logging.Logger:
    """When ``debug`` is set, show otel-log's debug logs on stderr."""
    if debug:
        logger.setLevel(logging.DEBUG)
        if not logger.handlers:
            _handler = logging.StreamHandler()
            _handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
            logger.addHandler(_handler)

    return logger
