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
from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from nvmescraper.cli import cli, inputargtypes
from nvmescraper.enums import TemperatureScale
from nvmescraper.exceptions import PreflightError
from nvmescraper.models import ExporterConfig


@pytest.fixture
def root_logger():
    """Restore root logger handlers changed by setup_logger"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_log_path_arg():
    assert inputargtypes.log_path_arg("test") == "test"
    assert inputargtypes.log_path_arg("none") is None
    assert inputargtypes.log_path_arg("None") is None


@pytest.mark.parametrize("arg_input, exp_output", [("9998", 9998), ("1", 1), ("65535", 65535)])
def test_port_arg(arg_input, exp_output):
    assert inputargtypes.port_arg(arg_input) == exp_output


@pytest.mark.parametrize("arg_input", ["0", "65536", "http", "-1"])
def test_port_arg_exception(arg_input):
    with pytest.raises(argparse.ArgumentTypeError):
        inputargtypes.port_arg(arg_input)


def test_json_arg(framework_fixtures_path):
    assert inputargtypes.json_arg(
        os.path.join(framework_fixtures_path, "exporter_config.json")
    ) == {"port": 9100, "temperature_scale": "kelvin", "sudo": True}
    with pytest.raises(argparse.ArgumentTypeError):
        inputargtypes.json_arg(os.path.join(framework_fixtures_path, "invalid.json"))
    with pytest.raises(argparse.ArgumentTypeError):
        inputargtypes.json_arg(os.path.join(framework_fixtures_path, "missing.json"))


def test_model_arg(framework_fixtures_path):
    class TestArg(BaseModel):
        port: int

    arg_handler = inputargtypes.ModelArgHandler(TestArg)
    assert arg_handler.process_file_arg(
        os.path.join(framework_fixtures_path, "exporter_config.json")
    ) == TestArg(port=9100)

    with pytest.raises(argparse.ArgumentTypeError):
        inputargtypes.ModelArgHandler(ExporterConfig).process_file_arg(
            os.path.join(framework_fixtures_path, "invalid_exporter_config.json")
        )


def test_default_config():
    args = cli.build_parser().parse_args([])
    assert cli.build_config(args) == ExporterConfig()
    assert args.log_path is None
    assert not args.once


def test_config_from_args():
    args = cli.build_parser().parse_args(
        [
            "--port",
            "9200",
            "--temperature-scale",
            "Fahrenheit",
            "--sudo",
            "--nvme-binary",
            "/usr/sbin/nvme",
            "--command-timeout",
            "10",
        ]
    )
    config = cli.build_config(args)
    assert config.port == 9200
    assert config.temperature_scale == TemperatureScale.FAHRENHEIT
    assert config.sudo
    assert config.nvme_binary == "/usr/sbin/nvme"
    assert config.command_timeout == 10


def test_config_file_with_overrides(framework_fixtures_path):
    args = cli.build_parser().parse_args(
        [
            "--config",
            os.path.join(framework_fixtures_path, "exporter_config.json"),
            "--port",
            "9300",
        ]
    )
    config = cli.build_config(args)
    assert config.port == 9300
    assert config.temperature_scale == TemperatureScale.KELVIN
    assert config.sudo


def test_invalid_temperature_scale():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--temperature-scale", "rankine"])


def test_check_prerequisites():
    connection = MagicMock()
    connection.which.return_value = "/usr/sbin/nvme"

    cli.check_prerequisites(ExporterConfig(), connection, euid=0)
    cli.check_prerequisites(ExporterConfig(sudo=True), connection, euid=1000)

    with pytest.raises(PreflightError, match="root"):
        cli.check_prerequisites(ExporterConfig(), connection, euid=1000)

    connection.which.return_value = None
    with pytest.raises(PreflightError, match="Cannot find nvme"):
        cli.check_prerequisites(ExporterConfig(), connection, euid=0)


def test_setup_logger(tmp_path, root_logger):
    logger = cli.setup_logger("DEBUG", str(tmp_path / "logs"))
    assert logger.name == "nvmescraper"
    assert root_logger.level == logging.DEBUG
    logger.info("hello")
    assert os.path.exists(tmp_path / "logs" / "nvmescraper.log")


def test_build_registry(conn_mock, command_outputs):
    conn_mock.run_command.side_effect = command_outputs(
        {
            "list": "nvme_list_controller.json",
            "id-ctrl": "id_ctrl.json",
            "smart-log": "smart_log_expanded.json",
        }
    )
    registry = cli.build_registry(
        ExporterConfig(temperature_scale=TemperatureScale.FAHRENHEIT), conn_mock
    )

    assert registry.get_sample_value(
        "nvme_temperature", {"device": "/dev/nvme2n1"}
    ) == pytest.approx(73.13)
    assert registry.get_sample_value("nvme_total_capacity", {"controller": "nvme2"}) == (
        960197124096
    )


def test_main_preflight_failure(monkeypatch, root_logger):
    monkeypatch.setattr(cli.os, "geteuid", lambda: 1000)
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--log-level", "ERROR"])
    assert exc_info.value.code == 1


def test_help_documents_counter_suffix():
    assert "nvme_data_units_read_total" in cli.build_parser().format_help()
