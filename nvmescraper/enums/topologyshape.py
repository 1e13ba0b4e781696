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
from enum import auto, unique

from nvmescraper.utils import AutoNameStrEnum


@unique
class TopologyShape(AutoNameStrEnum):
    """Known shapes of the 'nvme list -o json' output
    - NAMESPACE_UNDER_SUBSYSTEM
        namespaces listed directly under a subsystem, without a controller layer
        (e.g. remote namespaces that are not attached to a local controller)
    - NAMESPACE_UNDER_CONTROLLER
        namespaces listed under a named controller, newer nvme-cli versions
    - FLAT_LEGACY
        older nvme-cli versions, a flat list of devices exposing only a 'DevicePath'
    """

    NAMESPACE_UNDER_SUBSYSTEM = auto()
    NAMESPACE_UNDER_CONTROLLER = auto()
    FLAT_LEGACY = auto()
