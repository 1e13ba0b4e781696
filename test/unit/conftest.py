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
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from nvmescraper.connection.inband import CommandArtifact


@pytest.fixture
def conn_mock():
    return MagicMock()


@pytest.fixture
def logger():
    return logging.getLogger("test_logger")


@pytest.fixture
def nvme_fixtures_path():
    return Path(__file__).parent / "nvme" / "fixtures"


@pytest.fixture
def framework_fixtures_path():
    return Path(__file__).parent / "framework" / "fixtures"


@pytest.fixture
def read_fixture(nvme_fixtures_path):
    def _read(name: str) -> str:
        return (nvme_fixtures_path / name).read_text(encoding="utf-8")

    return _read


@pytest.fixture
def command_outputs(read_fixture):
    """Map of command substring to fixture, used to fake nvme-cli on a connection mock"""

    def _build(outputs: dict[str, str]):
        def mock_run_command(command, **kwargs):
            for key, fixture in outputs.items():
                if key in command:
                    return CommandArtifact(
                        exit_code=0, stdout=read_fixture(fixture), stderr="", command=command
                    )
            return CommandArtifact(
                exit_code=1, stdout="", stderr="unexpected command", command=command
            )

        return mock_run_command

    return _build
