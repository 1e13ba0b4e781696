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
import logging
import shlex
import subprocess
from typing import Optional

from nvmescraper.connection.inband import CommandArtifact, InBandConnection
from nvmescraper.constants import DEFAULT_COMMAND_TIMEOUT, DEFAULT_LOGGER, DEFAULT_NVME_BINARY
from nvmescraper.exceptions import CommandExecutionError

from .capacity import parse_controller_capacity


class NvmeCli:
    """Runs nvme-cli commands in JSON output mode"""

    def __init__(
        self,
        connection: InBandConnection,
        nvme_binary: str = DEFAULT_NVME_BINARY,
        sudo: bool = False,
        timeout: int = DEFAULT_COMMAND_TIMEOUT,
        logger: Optional[logging.Logger] = None,
    ):
        self.connection = connection
        self.nvme_binary = nvme_binary
        self.sudo = sudo
        self.timeout = timeout
        self.logger = logger or logging.getLogger(f"{DEFAULT_LOGGER}.nvmecli")

    def _run(self, *args: str) -> str:
        command = " ".join(shlex.quote(arg) for arg in (self.nvme_binary, *args))
        self.logger.debug("Running: %s", command)
        try:
            res: CommandArtifact = self.connection.run_command(
                command, sudo=self.sudo, timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            raise CommandExecutionError(command, stderr=f"timed out after {self.timeout}s") from e

        if res.exit_code != 0:
            raise CommandExecutionError(res.command, exit_code=res.exit_code, stderr=res.stderr)
        return res.stdout

    def fetch_topology(self) -> str:
        """Run 'nvme list'

        Returns:
            str: raw JSON output
        """
        return self._run("list", "-o", "json")

    def fetch_controller_capacity(self, controller_id: str) -> str:
        """Run 'nvme id-ctrl' for a controller

        Args:
            controller_id (str): controller name, e.g. 'nvme0'

        Returns:
            str: raw JSON output
        """
        return self._run("id-ctrl", "-o", "json", f"/dev/{controller_id}")

    def fetch_health_log(self, device_path: str) -> str:
        """Run 'nvme smart-log' for a namespace

        Args:
            device_path (str): namespace device, e.g. '/dev/nvme0n1'

        Returns:
            str: raw JSON output
        """
        return self._run("smart-log", device_path, "-o", "json")

    def controller_capacity(self, controller_id: str) -> int:
        """Total NVM capacity of a controller in bytes

        Args:
            controller_id (str): controller name

        Returns:
            int: total capacity in bytes
        """
        return parse_controller_capacity(self.fetch_controller_capacity(controller_id))
