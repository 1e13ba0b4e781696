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

from nvmescraper.connection.inband import LocalShell


@pytest.fixture
def shell():
    return LocalShell()


def test_run_command(shell):
    res = shell.run_command("echo ' hello '")
    assert res.exit_code == 0
    assert res.stdout == "hello"
    assert res.command == "echo ' hello '"

    res = shell.run_command("echo hello", strip=False)
    assert res.stdout == "hello\n"


def test_run_command_failure(shell):
    res = shell.run_command("echo oops 1>&2; exit 3")
    assert res.exit_code == 3
    assert res.stderr == "oops"


def test_run_command_timeout(shell):
    with pytest.raises(subprocess.TimeoutExpired):
        shell.run_command("sleep 5", timeout=1)


def test_which(shell):
    assert shell.which("sh") is not None
    assert shell.which("surely-not-an-executable-name") is None


def test_run_command_invalid_utf8(shell):
    res = shell.run_command("printf 'temp\\377'")
    assert res.exit_code == 0
    assert res.stdout == "temp\ufffd"
