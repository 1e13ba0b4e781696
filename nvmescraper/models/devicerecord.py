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

# sentinel for size fields that the 'nvme list' generation does not report
UNKNOWN_SIZE = -1


class DeviceRecord(BaseModel):
    """One NVMe namespace exposed as a block device"""

    device_path: str = Field(description="Block device node, e.g. /dev/nvme2n1.")
    controller_id: str = Field(min_length=1, description="Owning controller, e.g. nvme2.")
    physical_size: int = Field(default=UNKNOWN_SIZE, description="Namespace size in bytes.")
    used_bytes: int = Field(default=UNKNOWN_SIZE, description="Bytes used in the namespace.")
    sector_size: int = Field(default=UNKNOWN_SIZE, description="Sector size in bytes.")
    maximum_lba: int = Field(default=UNKNOWN_SIZE, description="Maximum LBA, in blocks.")
    total_capacity: int = Field(
        default=0, description="Total NVM capacity of the controller in bytes (id-ctrl tnvmcap)."
    )
