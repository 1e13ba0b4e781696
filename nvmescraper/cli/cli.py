###############################################################################
#
# MIT License
#
# Copyright (c) 2025 Advanced Micro Devices, Inc.
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
#
###############################################################################
import argparse
import logging
import os
import sys
import time
from typing import Optional

from prometheus_client import CollectorRegistry, generate_latest, start_http_server

from nvmescraper.connection.inband import InBandConnection, LocalShell
from nvmescraper.constants import DEFAULT_LOGGER
from nvmescraper.enums import TemperatureScale
from nvmescraper.exceptions import NvmeScraperError, PreflightError
from nvmescraper.models import ExporterConfig
from nvmescraper.nvme import HealthLogExtractor, MetricCatalogue, NvmeCli, NvmeCollector, NvmePoller

from .inputargtypes import ModelArgHandler, log_path_arg, port_arg

# config fields which can be overridden from the command line
CONFIG_ARGS = (
    "port",
    "listen_address",
    "temperature_scale",
    "nvme_binary",
    "sudo",
    "command_timeout",
)


def build_parser() -> argparse.ArgumentParser:
    """Build an argument parser

    Options which map to ExporterConfig fields default to None so that values from a config
    file are only overridden when given explicitly.

    Returns:
        argparse.ArgumentParser: argument parser
    """
    parser = argparse.ArgumentParser(
        description="Export nvme smart-log metrics in prometheus format",
        epilog=(
            "Counter metrics are exposed with a _total suffix, e.g. nvme_data_units_read_total "
            "for the smart-log data_units_read field."
        ),
    )

    parser.add_argument(
        "--config",
        type=ModelArgHandler(ExporterConfig).process_file_arg,
        required=False,
        help="Path to exporter config json",
        metavar="STRING",
    )

    parser.add_argument("--port", type=port_arg, help="port to listen on (default: 9998)")

    parser.add_argument(
        "--listen-address",
        type=str,
        help="address to bind, all interfaces when not set",
        metavar="STRING",
    )

    parser.add_argument(
        "--temperature-scale",
        type=str.lower,
        choices=[scale.value for scale in TemperatureScale],
        help="Scale for reported temperatures (default: celsius). The NVMe standard recommends Kelvin.",
    )

    parser.add_argument(
        "--nvme-binary",
        type=str,
        help="nvme-cli executable (default: nvme)",
        metavar="STRING",
    )

    parser.add_argument(
        "--sudo",
        action="store_true",
        default=None,
        help="run nvme commands with sudo instead of requiring root",
    )

    parser.add_argument(
        "--command-timeout",
        type=int,
        help="timeout for each nvme command in seconds (default: 300)",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="poll the devices once, print the metrics and exit",
    )

    parser.add_argument(
        "--log-path",
        default="none",
        type=log_path_arg,
        help="Specifies local path for nvme scraper logs, use 'None' to disable file logging",
        metavar="STRING",
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=logging._nameToLevel,
        help="Change python log level",
    )

    return parser


def setup_logger(log_level: str = "INFO", log_path: str | None = None) -> logging.Logger:
    """set up root logger when using the CLI

    Args:
        log_level (str): log level to use
        log_path (str | None): optional path to filesystem log location

    Returns:
        logging.Logger: logger intstance
    """
    log_level = getattr(logging, log_level, logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(stream=sys.stdout)]

    if log_path:
        os.makedirs(log_path, exist_ok=True)
        log_file_name = os.path.join(log_path, "nvmescraper.log")
        handlers.append(
            logging.FileHandler(filename=log_file_name, mode="at", encoding="utf-8"),
        )

    logging.basicConfig(
        force=True,
        level=log_level,
        format="%(asctime)25s %(levelname)10s %(name)25s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S %Z",
        handlers=handlers,
        encoding="utf-8",
    )

    logger = logging.getLogger(DEFAULT_LOGGER)

    return logger


def build_config(args: argparse.Namespace) -> ExporterConfig:
    """build the exporter config from a config file and command line overrides

    Args:
        args (argparse.Namespace): parsed args

    Returns:
        ExporterConfig: exporter config
    """
    config = args.config if args.config else ExporterConfig()

    overrides = {
        field: getattr(args, field)
        for field in CONFIG_ARGS
        if getattr(args, field, None) is not None
    }
    if overrides:
        config = ExporterConfig(**{**config.model_dump(), **overrides})

    return config


def check_prerequisites(
    config: ExporterConfig, connection: InBandConnection, euid: Optional[int] = None
) -> None:
    """Make sure nvme commands can be run on this host

    Args:
        config (ExporterConfig): exporter config
        connection (InBandConnection): connection used to run nvme commands
        euid (Optional[int], optional): effective user id, defaults to the id of this process

    Raises:
        PreflightError: if not running as root without sudo, or nvme-cli cannot be found
    """
    if euid is None:
        euid = os.geteuid()

    if euid != 0 and not config.sudo:
        raise PreflightError("you must be root to use nvme-cli, or run with --sudo")

    if connection.which(config.nvme_binary) is None:
        raise PreflightError(f"Cannot find {config.nvme_binary} command in path")


def build_registry(
    config: ExporterConfig,
    connection: InBandConnection,
    logger: Optional[logging.Logger] = None,
) -> CollectorRegistry:
    """Wire up the collector for a config in a dedicated registry

    Args:
        config (ExporterConfig): exporter config
        connection (InBandConnection): connection used to run nvme commands
        logger (Optional[logging.Logger], optional): logger. Defaults to None.

    Returns:
        CollectorRegistry: registry holding the nvme collector
    """
    catalogue = MetricCatalogue(config.temperature_scale)
    nvme_cli = NvmeCli(
        connection,
        nvme_binary=config.nvme_binary,
        sudo=config.sudo,
        timeout=config.command_timeout,
    )
    poller = NvmePoller(nvme_cli, HealthLogExtractor(config.temperature_scale), logger=logger)

    registry = CollectorRegistry()
    registry.register(NvmeCollector(poller, catalogue))
    return registry


def main(arg_input: Optional[list[str]] = None):
    if arg_input is None:
        arg_input = sys.argv[1:]

    parser = build_parser()
    parsed_args = parser.parse_args(arg_input)

    logger = setup_logger(parsed_args.log_level, parsed_args.log_path)
    if parsed_args.log_path:
        logger.info("Log path: %s", parsed_args.log_path)

    config = build_config(parsed_args)
    connection = LocalShell()

    try:
        check_prerequisites(config, connection)
    except PreflightError as e:
        logger.error("Error: %s", e)
        sys.exit(1)

    registry = build_registry(config, connection, logger=logger)

    if parsed_args.once:
        try:
            sys.stdout.write(generate_latest(registry).decode("utf-8"))
        except NvmeScraperError:
            sys.exit(1)
        sys.exit(0)

    start_http_server(config.port, addr=config.listen_address or "0.0.0.0", registry=registry)
    logger.info(
        "Serving nvme metrics on %s:%s (temperatures in %s)",
        config.listen_address or "*",
        config.port,
        config.temperature_scale.value,
    )

    try:
        while True:
            time.sleep(3600)
    except KeyboardInterrupt:
        logger.info("Received Ctrl+C. Shutting down...")
        sys.exit(130)


if __name__ == "__main__":
    main()
