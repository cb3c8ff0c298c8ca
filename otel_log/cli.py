"""
otel-log CLI — send one log message through the OpenTelemetry pipeline

    otel-log --url http://localhost:4318 --message "hello" --level info

Settings can also come from the environment or a .env file in the working
directory (OTEL_LOG_URL, OTEL_LOG_LEVEL and the standard OTEL_EXPORTER_OTLP_*
variables).
"""
import logging

import click
from dotenv import load_dotenv

from otel_log import __version__
from otel_log.config import ExporterConfig, Protocol
from otel_log.errors import OtelLogError
from otel_log.levels import parse_level
from otel_log.manager import LoggerManager

load_dotenv()


@click.command(name="otel-log")
@click.version_option(__version__, prog_name="otel-log")
@click.option("--url", "-u", required=True, envvar="OTEL_LOG_URL", help="Collector base URL; /v1/logs is appended.")
@click.option("--message", "-m", required=True, help="Message to log.")
@click.option("--level", "-l", default="info", show_default=True, envvar="OTEL_LOG_LEVEL",
              help="error, warn, info, debug or trace.")
@click.option("--tag", "-t", default="example", show_default=True, help="service.name of the emitting process.")
@click.option("--protocol", type=click.Choice([p.value for p in Protocol]), default=None,
              help="OTLP body encoding (default from OTEL_EXPORTER_OTLP_LOGS_PROTOCOL, else http/protobuf).")
@click.option("--debug/--no-debug", default=False, help="Show otel-log diagnostics on stderr.")
def main(url, message, level, tag, protocol, debug):
    """Log MESSAGE at LEVEL and flush it to the collector at URL."""
    try:
        parsed = parse_level(level)
        config = ExporterConfig.from_env()
        if protocol:
            config.protocol = Protocol.parse(protocol)

        manager = LoggerManager(config, debug=debug)
        manager.init(tag, level, url)
    except OtelLogError as e:
        raise click.ClickException(str(e)) from e

    try:
        logging.getLogger(tag).log(parsed, message)
    finally:
        manager.close()


if __name__ == "__main__":
    main()
