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
class NvmeScraperError(Exception):
    """Base class for all nvme scraper errors"""


class InvalidJsonError(NvmeScraperError):
    """Raised when command output is not valid JSON"""


class TopologyError(NvmeScraperError):
    """Raised when the device topology cannot be resolved"""


class NoDevicesFoundError(TopologyError):
    """Raised when none of the known 'nvme list' shapes yields a device"""


class MissingControllerError(TopologyError):
    """Raised when a controller entry does not declare its name"""


class ControllerInferenceError(TopologyError):
    """Raised when a controller cannot be inferred from a device name"""


class CommandExecutionError(NvmeScraperError):
    """Raised when an nvme command fails to run or exits with a non-zero code"""

    def __init__(self, command: str, exit_code: int | None = None, stderr: str = ""):
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        msg = f"Command '{command}' failed"
        if exit_code is not None:
            msg += f" with exit code {exit_code}"
        if stderr:
            msg += f": {stderr}"
        super().__init__(msg)


class PreflightError(NvmeScraperError):
    """Raised when the host is not able to run nvme commands"""
