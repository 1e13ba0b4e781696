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
from typing import Optional

from nvmescraper.constants import DEFAULT_LOGGER
from nvmescraper.enums import EventCategory, EventPriority, ExecutionStatus, MetricKind
from nvmescraper.exceptions import CommandExecutionError, NvmeScraperError
from nvmescraper.models import DeviceRecord, Event, HealthSample, NvmeSnapshot, PollResult
from nvmescraper.utils import get_exception_details, get_exception_traceback

from .capacity import build_controller_capacity, enrich
from .healthlog import HealthLogExtractor
from .metrics import NAMESPACE_FIELDS, TOTAL_CAPACITY, metric_name
from .nvmecli import NvmeCli
from .topology import parse_topology


class NvmePoller:
    """Runs one full, stateless enumeration of the NVMe devices per call to poll"""

    def __init__(
        self,
        nvme_cli: NvmeCli,
        extractor: HealthLogExtractor,
        logger: Optional[logging.Logger] = None,
    ):
        self.nvme_cli = nvme_cli
        self.extractor = extractor
        self.logger = logger or logging.getLogger(f"{DEFAULT_LOGGER}.poller")

    def _log_event(
        self,
        result: PollResult,
        category: EventCategory,
        description: str,
        priority: EventPriority,
        data: Optional[dict] = None,
        device: Optional[str] = None,
    ) -> None:
        event = Event(
            category=category,
            description=description,
            priority=priority,
            data=data or {},
            device=device,
        )
        result.events.append(event)
        self.logger.log(
            logging.ERROR if priority >= EventPriority.ERROR else logging.INFO,
            "%s%s",
            f"[{device}] " if device else "",
            description,
        )

    def _log_failure(
        self, result: PollResult, exception: NvmeScraperError, device: Optional[str] = None
    ) -> None:
        self._log_event(
            result,
            category=(
                EventCategory.APPLICATION
                if isinstance(exception, CommandExecutionError)
                else EventCategory.STORAGE
            ),
            description=str(exception),
            priority=EventPriority.CRITICAL,
            data=get_exception_details(exception),
            device=device,
        )

    def _device_samples(self, device: DeviceRecord) -> list[HealthSample]:
        samples = self.extractor.extract(
            self.nvme_cli.fetch_health_log(device.device_path), device.device_path
        )
        labels = {"device": device.device_path, "controller": device.controller_id}
        for attribute, suffix, _ in NAMESPACE_FIELDS:
            samples.append(
                HealthSample(
                    metric=metric_name(suffix),
                    labels=labels,
                    value=float(getattr(device, attribute)),
                    kind=MetricKind.GAUGE,
                )
            )
        return samples

    def _collect(self, result: PollResult) -> NvmeSnapshot:
        devices = parse_topology(self.nvme_cli.fetch_topology())
        result.device_count = len(devices)

        enrich(devices, self.nvme_cli.controller_capacity)
        controller_capacity = build_controller_capacity(devices)
        result.controller_count = len(controller_capacity)

        snapshot = NvmeSnapshot(devices=devices, controller_capacity=controller_capacity)
        for device in devices:
            try:
                # all samples of a device or none of them
                snapshot.samples.extend(self._device_samples(device))
            except NvmeScraperError as e:
                self._log_failure(result, e, device=device.device_path)
                raise

        for controller_id, capacity in controller_capacity.items():
            snapshot.samples.append(
                HealthSample(
                    metric=metric_name(TOTAL_CAPACITY),
                    labels={"controller": controller_id},
                    value=float(capacity),
                    kind=MetricKind.GAUGE,
                )
            )
        result.sample_count = len(snapshot.samples)
        return snapshot

    def poll(self) -> tuple[PollResult, NvmeSnapshot]:
        """Enumerate the devices and read their health logs

        Any error aborts the whole poll, no partial results are returned.

        Raises:
            NvmeScraperError: if any nvme command fails or its output cannot be resolved

        Returns:
            tuple[PollResult, NvmeSnapshot]: poll result and gathered data
        """
        result = PollResult()
        try:
            snapshot = self._collect(result)
        except NvmeScraperError as e:
            if not result.events:
                self._log_failure(result, e)
            result.status = ExecutionStatus.EXECUTION_FAILURE
            result.finalize(self.logger)
            raise
        except Exception as e:
            self._log_event(
                result,
                category=EventCategory.RUNTIME,
                description=f"Exception: {str(e)}",
                priority=EventPriority.CRITICAL,
                data=get_exception_traceback(e),
            )
            result.status = ExecutionStatus.EXECUTION_FAILURE
            result.finalize(self.logger)
            raise

        result.finalize(self.logger)
        return result, snapshot
