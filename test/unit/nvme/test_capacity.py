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
from unittest.mock import MagicMock

import pytest

from nvmescraper.exceptions import CommandExecutionError, InvalidJsonError
from nvmescraper.models import DeviceRecord
from nvmescraper.nvme.capacity import (
    build_controller_capacity,
    enrich,
    parse_controller_capacity,
)


@pytest.fixture
def records():
    return [
        DeviceRecord(device_path="/dev/nvme0n1", controller_id="nvme0"),
        DeviceRecord(device_path="/dev/nvme0n2", controller_id="nvme0"),
        DeviceRecord(device_path="/dev/nvme1n1", controller_id="nvme1"),
    ]


def test_one_lookup_per_controller(records):
    lookup = MagicMock(side_effect=lambda controller: {"nvme0": 1000, "nvme1": 2000}[controller])

    enrich(records, lookup)

    assert [call.args[0] for call in lookup.call_args_list] == ["nvme0", "nvme1"]
    assert [r.total_capacity for r in records] == [1000, 1000, 2000]


def test_shared_controller_single_lookup():
    records = [
        DeviceRecord(device_path="/dev/nvme3n1", controller_id="nvme3"),
        DeviceRecord(device_path="/dev/nvme3n2", controller_id="nvme3"),
    ]
    lookup = MagicMock(return_value=960197124096)

    enrich(records, lookup)

    lookup.assert_called_once_with("nvme3")
    assert records[0].total_capacity == records[1].total_capacity == 960197124096


def test_lookup_failure_propagates(records):
    lookup = MagicMock(side_effect=CommandExecutionError("nvme id-ctrl", exit_code=1))

    with pytest.raises(CommandExecutionError):
        enrich(records, lookup)

    assert all(r.total_capacity == 0 for r in records)


def test_build_controller_capacity_last_write_wins():
    records = [
        DeviceRecord(device_path="/dev/nvme0n1", controller_id="nvme0", total_capacity=10),
        DeviceRecord(device_path="/dev/nvme1n1", controller_id="nvme1", total_capacity=20),
        DeviceRecord(device_path="/dev/nvme0n2", controller_id="nvme0", total_capacity=30),
    ]
    assert build_controller_capacity(records) == {"nvme0": 30, "nvme1": 20}


def test_parse_controller_capacity(read_fixture):
    assert parse_controller_capacity(read_fixture("id_ctrl.json")) == 960197124096
    assert parse_controller_capacity('{"tnvmcap": "2000398934016"}') == 2000398934016
    assert parse_controller_capacity('{"sn": "X"}') == 0


def test_parse_controller_capacity_invalid_json():
    with pytest.raises(InvalidJsonError):
        parse_controller_capacity("not json")
