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
import subprocess

import pytest

from nvmescraper.connection.inband import CommandArtifact
from nvmescraper.exceptions import CommandExecutionError
from nvmescraper.nvme.nvmecli import NvmeCli


@pytest.fixture
def nvme_cli(conn_mock):
    return NvmeCli(conn_mock, sudo=True, timeout=30)


def test_commands(nvme_cli, conn_mock):
    conn_mock.run_command.return_value = CommandArtifact(
        exit_code=0, stdout="{}", stderr="", command="nvme"
    )

    assert nvme_cli.fetch_topology() == "{}"
    conn_mock.run_command.assert_called_with("nvme list -o json", sudo=True, timeout=30)

    nvme_cli.fetch_controller_capacity("nvme3")
    conn_mock.run_command.assert_called_with(
        "nvme id-ctrl -o json /dev/nvme3", sudo=True, timeout=30
    )

    nvme_cli.fetch_health_log("/dev/nvme3n1")
    conn_mock.run_command.assert_called_with(
        "nvme smart-log /dev/nvme3n1 -o json", sudo=True, timeout=30
    )


def test_custom_binary(conn_mock):
    conn_mock.run_command.return_value = CommandArtifact(
        exit_code=0, stdout="{}", stderr="", command="nvme"
    )
    NvmeCli(conn_mock, nvme_binary="/usr/sbin/nvme").fetch_topology()
    conn_mock.run_command.assert_called_with("/usr/sbin/nvme list -o json", sudo=False, timeout=300)


def test_controller_capacity(nvme_cli, conn_mock, read_fixture):
    conn_mock.run_command.return_value = CommandArtifact(
        exit_code=0, stdout=read_fixture("id_ctrl.json"), stderr="", command="nvme id-ctrl"
    )
    assert nvme_cli.controller_capacity("nvme3") == 960197124096


def test_non_zero_exit(nvme_cli, conn_mock):
    conn_mock.run_command.return_value = CommandArtifact(
        exit_code=2,
        stdout="",
        stderr="open: No such file or directory",
        command="sudo nvme smart-log /dev/nvme9n1 -o json",
    )
    with pytest.raises(CommandExecutionError) as exc_info:
        nvme_cli.fetch_health_log("/dev/nvme9n1")

    assert exc_info.value.exit_code == 2
    assert "No such file or directory" in str(exc_info.value)


def test_timeout(nvme_cli, conn_mock):
    conn_mock.run_command.side_effect = subprocess.TimeoutExpired("nvme list -o json", 30)
    with pytest.raises(CommandExecutionError, match="timed out"):
        nvme_cli.fetch_topology()
