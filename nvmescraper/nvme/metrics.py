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
"""Catalogue of the metrics exported for NVMe devices.

Field descriptions follow the SMART / Health Information log page of the NVM Express
Base Specification 2.0 (section 5.16.1.3).
"""

from types import MappingProxyType
from typing import Iterator, Mapping

from nvmescraper.constants import MAX_TEMP_SENSORS, METRIC_PREFIX
from nvmescraper.enums import MetricKind, TemperatureScale
from nvmescraper.models import MetricDescriptor

LABELS_DEVICE = ("device",)
LABELS_DEVICE_CONTROLLER = ("device", "controller")
LABELS_CONTROLLER = ("controller",)

# sub fields of an expanded 'critical_warning' object -> (metric suffix, help)
CRITICAL_WARNING_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("value", "critical_warning", "Critical warnings for the state of the controller"),
    (
        "available_spare",
        "available_spare_critical",
        "Has the 'available_spare' value dropped below 'spare_thresh'",
    ),
    ("temp_threshold", "temp_threshold_exceeded", "Temperature has exceeded the safe threshold"),
    (
        "reliability_degraded",
        "reliability_degraded",
        "Device has degraded reliability due to excessive media/internal errors",
    ),
    ("ro", "readonly", "NVMe device is currently read-only"),
    ("vmbu_failed", "vmbu_failed", "The 'Volatile Memory Backup Device' has failed, if present"),
    ("pmr_ro", "pmr_ro", "The Persistent Memory Region is currently read-only"),
)

# top level smart-log fields read for every schema -> (metric suffix, kind, help)
HEALTH_LOG_FIELDS: tuple[tuple[str, str, MetricKind, str], ...] = (
    ("temperature", "temperature", MetricKind.GAUGE, "Temperature in degrees {scale}"),
    (
        "avail_spare",
        "avail_spare",
        MetricKind.GAUGE,
        "Normalized percentage of remaining spare capacity available",
    ),
    (
        "spare_thresh",
        "spare_thresh",
        MetricKind.GAUGE,
        "Async event completion may occur when avail spare < threshold",
    ),
    (
        "percent_used",
        "percent_used",
        MetricKind.GAUGE,
        "Vendor specific estimate of the percentage of life used",
    ),
    (
        "endurance_grp_critical_warning_summary",
        "endurance_grp_critical_warning_summary",
        MetricKind.GAUGE,
        "Critical warnings for the state of endurance groups",
    ),
    (
        "data_units_read",
        "data_units_read",
        MetricKind.COUNTER,
        "Number of 512 byte data units host has read",
    ),
    (
        "data_units_written",
        "data_units_written",
        MetricKind.COUNTER,
        "Number of 512 byte data units the host has written",
    ),
    ("host_read_commands", "host_read_commands", MetricKind.COUNTER, "Number of read commands completed"),
    (
        "host_write_commands",
        "host_write_commands",
        MetricKind.COUNTER,
        "Number of write commands completed",
    ),
    (
        "controller_busy_time",
        "controller_busy_time",
        MetricKind.COUNTER,
        "Amount of time in minutes controller busy with IO commands",
    ),
    ("power_cycles", "power_cycles", MetricKind.COUNTER, "Number of power cycles"),
    ("power_on_hours", "power_on_hours", MetricKind.COUNTER, "Number of power on hours"),
    ("unsafe_shutdowns", "unsafe_shutdowns", MetricKind.COUNTER, "Number of unsafe shutdowns"),
    (
        "media_errors",
        "media_errors",
        MetricKind.COUNTER,
        "Number of unrecovered data integrity errors",
    ),
    (
        "num_err_log_entries",
        "num_err_log_entries",
        MetricKind.COUNTER,
        "Lifetime number of error log entries",
    ),
    (
        "warning_temp_time",
        "warning_temp_time",
        MetricKind.COUNTER,
        "Amount of time in minutes temperature > warning threshold",
    ),
    (
        "critical_comp_time",
        "critical_comp_time",
        MetricKind.COUNTER,
        "Amount of time in minutes temperature > critical threshold",
    ),
    (
        "thm_temp1_trans_count",
        "thm_temp1_trans_count",
        MetricKind.COUNTER,
        "Number of times controller transitioned to lower power",
    ),
    (
        "thm_temp2_trans_count",
        "thm_temp2_trans_count",
        MetricKind.COUNTER,
        "Number of times controller transitioned to lower power",
    ),
    (
        "thm_temp1_total_time",
        "thm_temp1_trans_time",
        MetricKind.COUNTER,
        "Total number of seconds controller transitioned to lower power",
    ),
    (
        "thm_temp2_total_time",
        "thm_temp2_trans_time",
        MetricKind.COUNTER,
        "Total number of seconds controller transitioned to lower power",
    ),
)

# DeviceRecord attribute -> (metric suffix, help)
NAMESPACE_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("physical_size", "namespace_physical_size", "Size of a namespace in bytes"),
    ("maximum_lba", "namespace_maximum_lba", "Maximum LBA of a namespace, in blocks"),
    ("used_bytes", "namespace_used_bytes", "Number of bytes used in this namespace"),
    ("sector_size", "namespace_sector_size", "Size of a sector in bytes"),
)

TOTAL_CAPACITY = "total_capacity"


def metric_name(suffix: str) -> str:
    return f"{METRIC_PREFIX}_{suffix}"


def sensor_field(index: int) -> str:
    return f"temperature_sensor_{index}"


def sensor_metric_name(index: int) -> str:
    return metric_name(f"temperature_sensor{index}")


class MetricCatalogue:
    """Immutable set of metric descriptors, built once at startup

    Help strings of temperature metrics name the configured scale, so a catalogue is
    bound to one temperature scale.
    """

    def __init__(self, temperature_scale: TemperatureScale | str = TemperatureScale.CELSIUS):
        if isinstance(temperature_scale, TemperatureScale):
            temperature_scale = temperature_scale.value
        self._temperature_scale = temperature_scale

        descriptors: dict[str, MetricDescriptor] = {}

        def add(name: str, documentation: str, kind: MetricKind, labels: tuple[str, ...]):
            if name in descriptors:
                raise ValueError(f"Duplicate metric descriptor: {name}")
            descriptors[name] = MetricDescriptor(
                name=name, documentation=documentation, kind=kind, labels=labels
            )

        for _, suffix, documentation in CRITICAL_WARNING_FIELDS:
            add(metric_name(suffix), documentation, MetricKind.GAUGE, LABELS_DEVICE)

        for _, suffix, kind, documentation in HEALTH_LOG_FIELDS:
            add(
                metric_name(suffix),
                documentation.format(scale=temperature_scale),
                kind,
                LABELS_DEVICE,
            )

        for index in range(1, MAX_TEMP_SENSORS + 1):
            add(
                sensor_metric_name(index),
                f"Temperature reported by thermal sensor #{index} in degrees {temperature_scale}",
                MetricKind.GAUGE,
                LABELS_DEVICE,
            )

        for _, suffix, documentation in NAMESPACE_FIELDS:
            add(metric_name(suffix), documentation, MetricKind.GAUGE, LABELS_DEVICE_CONTROLLER)

        add(
            metric_name(TOTAL_CAPACITY),
            "Total capacity of an nvme device in bytes",
            MetricKind.GAUGE,
            LABELS_CONTROLLER,
        )

        self._descriptors: Mapping[str, MetricDescriptor] = MappingProxyType(descriptors)

    @property
    def temperature_scale(self) -> str:
        return self._temperature_scale

    @property
    def descriptors(self) -> Mapping[str, MetricDescriptor]:
        return self._descriptors

    def get(self, name: str) -> MetricDescriptor:
        """Get the descriptor of a metric

        Args:
            name (str): metric name

        Raises:
            KeyError: if no metric with this name is exported

        Returns:
            MetricDescriptor: metric descriptor
        """
        return self._descriptors[name]

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __iter__(self) -> Iterator[MetricDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)
