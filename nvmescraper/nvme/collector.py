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
from typing import Iterable, Optional

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric
from prometheus_client.registry import Collector

from nvmescraper.constants import DEFAULT_LOGGER
from nvmescraper.enums import MetricKind
from nvmescraper.models import HealthSample, MetricDescriptor

from .metrics import MetricCatalogue
from .poller import NvmePoller


def build_family(descriptor: MetricDescriptor) -> Metric:
    """Create an empty metric family for a descriptor

    Args:
        descriptor (MetricDescriptor): metric descriptor

    Returns:
        Metric: gauge or counter family
    """
    if descriptor.kind == MetricKind.COUNTER:
        family_class = CounterMetricFamily
    else:
        family_class = GaugeMetricFamily
    return family_class(descriptor.name, descriptor.documentation, labels=list(descriptor.labels))


class NvmeCollector(Collector):
    """Prometheus collector which polls the NVMe devices on every scrape"""

    def __init__(
        self,
        poller: NvmePoller,
        catalogue: MetricCatalogue,
        logger: Optional[logging.Logger] = None,
    ):
        self.poller = poller
        self.catalogue = catalogue
        self.logger = logger or logging.getLogger(f"{DEFAULT_LOGGER}.collector")

    def describe(self) -> Iterable[Metric]:
        """Declare the exported metrics without polling the devices"""
        for descriptor in self.catalogue:
            yield build_family(descriptor)

    def families(self, samples: list[HealthSample]) -> list[Metric]:
        """Group samples into one metric family per metric, in catalogue order

        Args:
            samples (list[HealthSample]): samples of one poll

        Raises:
            KeyError: if a sample names a metric which is not in the catalogue

        Returns:
            list[Metric]: families with at least one sample
        """
        families: dict[str, Metric] = {}
        for sample in samples:
            descriptor = self.catalogue.get(sample.metric)
            family = families.get(descriptor.name)
            if family is None:
                family = families[descriptor.name] = build_family(descriptor)
            family.add_metric(
                [sample.labels[label] for label in descriptor.labels], sample.value
            )
        return [
            families[descriptor.name] for descriptor in self.catalogue if descriptor.name in families
        ]

    def collect(self) -> Iterable[Metric]:
        """Poll the devices and yield the resulting metric families

        Poll errors propagate, which fails the whole scrape.
        """
        _, snapshot = self.poller.poll()
        yield from self.families(snapshot.samples)
