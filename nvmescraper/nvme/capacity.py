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
from typing import Callable

from nvmescraper.constants import DEFAULT_LOGGER
from nvmescraper.models import DeviceRecord
from nvmescraper.utils import load_json, to_int

logger = logging.getLogger(f"{DEFAULT_LOGGER}.capacity")


def parse_controller_capacity(raw_json: str) -> int:
    """Read the total NVM capacity from the output of 'nvme id-ctrl -o json'

    Args:
        raw_json (str): id-ctrl output

    Raises:
        InvalidJsonError: if the output is not valid JSON

    Returns:
        int: total capacity in bytes, 0 if not reported
    """
    document = load_json(raw_json, "nvme id-ctrl")
    if not isinstance(document, dict):
        return 0
    return to_int(document.get("tnvmcap"))


def enrich(records: list[DeviceRecord], capacity_lookup: Callable[[str], int]) -> None:
    """Set the total capacity of every record, looking up each controller once

    Args:
        records (list[DeviceRecord]): namespaces to update in place
        capacity_lookup (Callable[[str], int]): returns the total capacity of a controller,
            any exception it raises is propagated
    """
    controllers: dict[str, list[DeviceRecord]] = {}
    for record in records:
        controllers.setdefault(record.controller_id, []).append(record)

    for controller_id, controller_records in controllers.items():
        capacity = capacity_lookup(controller_id)
        logger.debug("Controller %s total capacity: %s", controller_id, capacity)
        for record in controller_records:
            record.total_capacity = capacity


def build_controller_capacity(records: list[DeviceRecord]) -> dict[str, int]:
    """Map each controller to its total capacity, later records win

    Args:
        records (list[DeviceRecord]): enriched namespaces

    Returns:
        dict[str, int]: controller name to total capacity in bytes
    """
    capacity = {}
    for record in records:
        capacity[record.controller_id] = record.total_capacity
    return capacity
