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
"""Resolve the 'nvme list -o json' output into a flat list of namespaces.

nvme-cli changed the layout of this document several times:

- older versions print a flat list of devices, each with a 'DevicePath' and no usable sizes
- newer versions group namespaces by subsystem and controller
- namespaces that are not attached to a local controller (e.g. remote lightbits volumes) are
  listed directly under their subsystem
"""

import logging
import re
from typing import Any, Callable, Optional

from nvmescraper.constants import DEFAULT_LOGGER
from nvmescraper.enums import TopologyShape
from nvmescraper.exceptions import (
    ControllerInferenceError,
    MissingControllerError,
    NoDevicesFoundError,
    TopologyError,
)
from nvmescraper.models import DeviceRecord
from nvmescraper.models.devicerecord import UNKNOWN_SIZE
from nvmescraper.utils import get_list, load_json, to_int

logger = logging.getLogger(f"{DEFAULT_LOGGER}.topology")

CONTROLLER_REGEX = re.compile(r"^.*(nvme\d+).*\d+$")

DEVICE_DIR = "/dev/"


def infer_controller(name_or_path: str) -> str:
    """Guess the controller of a namespace from its device name

    Args:
        name_or_path (str): namespace name or device path, e.g. 'nvme4n1' or '/dev/nvme4n1'

    Raises:
        ControllerInferenceError: if the name does not look like an nvme namespace

    Returns:
        str: controller name, e.g. 'nvme4'
    """
    match = CONTROLLER_REGEX.match(name_or_path or "")
    if not match:
        raise ControllerInferenceError(
            f"nvme device file [{name_or_path}] does not match expected format"
        )
    return match.group(1)


def classify_subsystem(subsystem: Any) -> Optional[TopologyShape]:
    """Determine how a subsystem entry lists its namespaces

    Args:
        subsystem (Any): one element of 'Devices[].Subsystems'

    Returns:
        Optional[TopologyShape]: shape of the entry, None if it holds no namespaces
    """
    if get_list(subsystem, "Namespaces"):
        return TopologyShape.NAMESPACE_UNDER_SUBSYSTEM
    if any(get_list(controller, "Namespaces") for controller in get_list(subsystem, "Controllers")):
        return TopologyShape.NAMESPACE_UNDER_CONTROLLER
    return None


def classify_flat_entry(device: Any) -> Optional[TopologyShape]:
    """Determine if an element of 'Devices' is a legacy flat device entry

    Args:
        device (Any): one element of 'Devices'

    Returns:
        Optional[TopologyShape]: FLAT_LEGACY or None
    """
    if isinstance(device, dict) and isinstance(device.get("DevicePath"), str):
        return TopologyShape.FLAT_LEGACY
    return None


def _build_namespace_record(namespace: Any, controller_id: Optional[str]) -> DeviceRecord:
    name = namespace.get("NameSpace") if isinstance(namespace, dict) else None
    if not isinstance(name, str) or not name:
        raise TopologyError(f"Namespace entry has no 'NameSpace' name: {namespace}")

    if controller_id is None:
        controller_id = infer_controller(name)

    return DeviceRecord(
        device_path=DEVICE_DIR + name,
        controller_id=controller_id,
        physical_size=to_int(namespace.get("PhysicalSize")),
        used_bytes=to_int(namespace.get("UsedBytes")),
        sector_size=to_int(namespace.get("SectorSize")),
        maximum_lba=to_int(namespace.get("MaximumLBA")),
    )


def _parse_subsystem_namespaces(subsystem: dict) -> list[DeviceRecord]:
    return [
        _build_namespace_record(namespace, None)
        for namespace in get_list(subsystem, "Namespaces")
    ]


def _controller_ids(subsystem: Any) -> list[str]:
    """Names of all controllers of a subsystem

    Raises:
        MissingControllerError: if any controller entry has no name
    """
    controller_ids = []
    for controller in get_list(subsystem, "Controllers"):
        controller_id = controller.get("Controller") if isinstance(controller, dict) else None
        if not isinstance(controller_id, str) or not controller_id:
            raise MissingControllerError(
                f"No controller found in {get_list(subsystem, 'Controllers')}"
            )
        controller_ids.append(controller_id)
    return controller_ids


def _parse_controller_namespaces(subsystem: dict) -> list[DeviceRecord]:
    records = []
    for controller, controller_id in zip(
        get_list(subsystem, "Controllers"), _controller_ids(subsystem)
    ):
        for namespace in get_list(controller, "Namespaces"):
            records.append(_build_namespace_record(namespace, controller_id))
    return records


def _parse_flat_device(device: dict) -> list[DeviceRecord]:
    device_path = device["DevicePath"]
    return [
        DeviceRecord(
            device_path=device_path,
            controller_id=infer_controller(device_path),
            physical_size=UNKNOWN_SIZE,
            used_bytes=UNKNOWN_SIZE,
            sector_size=UNKNOWN_SIZE,
            maximum_lba=UNKNOWN_SIZE,
        )
    ]


SHAPE_HANDLERS: dict[TopologyShape, Callable[[dict], list[DeviceRecord]]] = {
    TopologyShape.NAMESPACE_UNDER_SUBSYSTEM: _parse_subsystem_namespaces,
    TopologyShape.NAMESPACE_UNDER_CONTROLLER: _parse_controller_namespaces,
    TopologyShape.FLAT_LEGACY: _parse_flat_device,
}


def _unique_paths(records: list[DeviceRecord]) -> list[DeviceRecord]:
    seen = set()
    unique = []
    for record in records:
        if record.device_path in seen:
            logger.debug("Skipping duplicate namespace %s", record.device_path)
            continue
        seen.add(record.device_path)
        unique.append(record)
    return unique


def parse_topology(raw_json: str) -> list[DeviceRecord]:
    """Build the list of namespaces from the output of 'nvme list -o json'

    Subsystem based shapes are resolved per subsystem, namespaces listed directly under a
    subsystem take priority over namespaces listed under its controllers. The legacy flat
    shape is only used when no subsystem yields a namespace.

    Args:
        raw_json (str): 'nvme list -o json' output

    Raises:
        InvalidJsonError: if the output is not valid JSON
        NoDevicesFoundError: if no known shape yields a device
        MissingControllerError: if a controller entry has no name
        ControllerInferenceError: if a controller cannot be inferred from a device name

    Returns:
        list[DeviceRecord]: namespaces in the order they are listed
    """
    document = load_json(raw_json, "nvme list")
    devices = get_list(document, "Devices")

    records: list[DeviceRecord] = []
    for device in devices:
        for subsystem in get_list(device, "Subsystems"):
            # every controller must be named, whichever shape the subsystem uses
            _controller_ids(subsystem)
            shape = classify_subsystem(subsystem)
            if shape is None:
                continue
            logger.debug("Subsystem %s uses shape %s", subsystem.get("Subsystem"), shape.value)
            records.extend(SHAPE_HANDLERS[shape](subsystem))

    if not records:
        for device in devices:
            shape = classify_flat_entry(device)
            if shape is not None:
                records.extend(SHAPE_HANDLERS[shape](device))

    if not records:
        raise NoDevicesFoundError("No NVMe devices found")

    return _unique_paths(records)
