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
from .capacity import build_controller_capacity, enrich, parse_controller_capacity
from .collector import NvmeCollector
from .healthlog import HealthLogExtractor, classify_health_log, convert_temperature
from .metrics import MetricCatalogue
from .nvmecli import NvmeCli
from .poller import NvmePoller
from .topology import infer_controller, parse_topology

__all__ = [
    "HealthLogExtractor",
    "MetricCatalogue",
    "NvmeCli",
    "NvmeCollector",
    "NvmePoller",
    "build_controller_capacity",
    "classify_health_log",
    "convert_temperature",
    "enrich",
    "infer_controller",
    "parse_controller_capacity",
    "parse_topology",
]
