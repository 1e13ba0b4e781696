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
from typing import Any

from nvmescraper.constants import DEFAULT_LOGGER, MAX_TEMP_SENSORS
from nvmescraper.enums import HealthLogSchema, MetricKind, TemperatureScale
from nvmescraper.models import HealthSample
from nvmescraper.utils import load_json, to_float

from .metrics import (
    CRITICAL_WARNING_FIELDS,
    HEALTH_LOG_FIELDS,
    metric_name,
    sensor_field,
    sensor_metric_name,
)

logger = logging.getLogger(f"{DEFAULT_LOGGER}.healthlog")

CELSIUS_OFFSET = 273
FAHRENHEIT_OFFSET = 273.15


def convert_temperature(kelvin: float, temperature_scale: TemperatureScale | str) -> float:
    """Convert a temperature reported by nvme-cli in Kelvin

    Unrecognized scales are passed through unchanged.

    Args:
        kelvin (float): temperature in Kelvin
        temperature_scale (TemperatureScale | str): target scale

    Returns:
        float: converted temperature
    """
    if isinstance(temperature_scale, TemperatureScale):
        temperature_scale = temperature_scale.value

    if temperature_scale == TemperatureScale.CELSIUS.value:
        return kelvin - CELSIUS_OFFSET
    if temperature_scale == TemperatureScale.FAHRENHEIT.value:
        return (kelvin - FAHRENHEIT_OFFSET) * 9 / 5 + 32
    return kelvin


def classify_health_log(document: Any) -> HealthLogSchema:
    """Determine the smart-log generation from the JSON kind of 'critical_warning'

    Args:
        document (Any): decoded smart-log output

    Returns:
        HealthLogSchema: smart-log generation
    """
    if isinstance(document, dict) and isinstance(document.get("critical_warning"), dict):
        return HealthLogSchema.EXPANDED
    return HealthLogSchema.SCALAR


class HealthLogExtractor:
    """Turn 'nvme smart-log -o json' output into labeled samples"""

    def __init__(self, temperature_scale: TemperatureScale | str = TemperatureScale.CELSIUS):
        self.temperature_scale = temperature_scale

    def _sample(
        self, metric: str, field: str, value: Any, kind: MetricKind, device_path: str
    ) -> HealthSample:
        number = to_float(value)
        if "temperature" in field:
            number = convert_temperature(number, self.temperature_scale)
        return HealthSample(metric=metric, labels={"device": device_path}, value=number, kind=kind)

    def _extract_expanded(self, document: dict, device_path: str) -> list[HealthSample]:
        critical_warning = document["critical_warning"]
        samples = [
            self._sample(
                metric_name(suffix),
                field,
                critical_warning.get(field),
                MetricKind.GAUGE,
                device_path,
            )
            for field, suffix, _ in CRITICAL_WARNING_FIELDS
        ]

        # sensors are numbered contiguously from 1, the first gap ends the scan
        for index in range(1, MAX_TEMP_SENSORS + 1):
            field = sensor_field(index)
            if field not in document:
                break
            samples.append(
                self._sample(
                    sensor_metric_name(index),
                    field,
                    document[field],
                    MetricKind.GAUGE,
                    device_path,
                )
            )
        return samples

    def _extract_scalar(self, document: Any, device_path: str) -> list[HealthSample]:
        value = document.get("critical_warning") if isinstance(document, dict) else None
        return [
            self._sample(
                metric_name("critical_warning"),
                "critical_warning",
                value,
                MetricKind.GAUGE,
                device_path,
            )
        ]

    def extract(self, raw_json: str, device_path: str) -> list[HealthSample]:
        """Extract the health samples of one device

        Fields missing from the document read as 0.

        Args:
            raw_json (str): smart-log output
            device_path (str): device the log was read from, used as 'device' label

        Raises:
            InvalidJsonError: if the output is not valid JSON

        Returns:
            list[HealthSample]: samples for the device
        """
        document = load_json(raw_json, f"nvme smart-log {device_path}")
        schema = classify_health_log(document)
        logger.debug("smart-log of %s uses schema %s", device_path, schema.value)

        if schema == HealthLogSchema.EXPANDED:
            samples = self._extract_expanded(document, device_path)
        else:
            samples = self._extract_scalar(document, device_path)

        fields = document if isinstance(document, dict) else {}
        for field, suffix, kind, _ in HEALTH_LOG_FIELDS:
            samples.append(
                self._sample(metric_name(suffix), field, fields.get(field), kind, device_path)
            )
        return samples
