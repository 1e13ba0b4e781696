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
from pydantic import BaseModel, Field

from nvmescraper.constants import DEFAULT_COMMAND_TIMEOUT, DEFAULT_NVME_BINARY, DEFAULT_PORT
from nvmescraper.enums import TemperatureScale


class ExporterConfig(BaseModel):
    """Runtime settings of the exporter"""

    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="Port to listen on.")
    listen_address: str = Field(default="", description="Address to bind, empty for all.")
    temperature_scale: TemperatureScale = Field(
        default=TemperatureScale.CELSIUS,
        description="Scale for reported temperatures. The NVMe standard recommends Kelvin.",
    )
    nvme_binary: str = Field(default=DEFAULT_NVME_BINARY, description="nvme-cli executable.")
    sudo: bool = Field(default=False, description="Run nvme commands through sudo.")
    command_timeout: int = Field(
        default=DEFAULT_COMMAND_TIMEOUT, gt=0, description="Timeout for one nvme command, in seconds."
    )
