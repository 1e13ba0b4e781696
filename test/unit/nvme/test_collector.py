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
import pytest
from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.parser import text_string_to_metric_families

from nvmescraper.enums import MetricKind, TemperatureScale
from nvmescraper.exceptions import CommandExecutionError
from nvmescraper.models import HealthSample, NvmeSnapshot, PollResult
from nvmescraper.nvme.collector import NvmeCollector
from nvmescraper.nvme.healthlog import HealthLogExtractor
from nvmescraper.nvme.metrics import MetricCatalogue
from nvmescraper.nvme.nvmecli import NvmeCli
from nvmescraper.nvme.poller import NvmePoller


@pytest.fixture
def catalogue():
    return MetricCatalogue(TemperatureScale.CELSIUS)


@pytest.fixture
def collector(conn_mock, catalogue):
    poller = NvmePoller(NvmeCli(conn_mock), HealthLogExtractor(TemperatureScale.CELSIUS))
    return NvmeCollector(poller, catalogue)


def test_describe_does_not_poll(collector, conn_mock, catalogue):
    families = list(collector.describe())
    assert len(families) == len(catalogue)
    assert all(not family.samples for family in families)
    conn_mock.run_command.assert_not_called()


def test_families_group_samples(collector):
    samples = [
        HealthSample(metric="nvme_temperature", labels={"device": "/dev/nvme0n1"}, value=23),
        HealthSample(metric="nvme_temperature", labels={"device": "/dev/nvme1n1"}, value=25),
        HealthSample(
            metric="nvme_power_cycles",
            labels={"device": "/dev/nvme0n1"},
            value=47,
            kind=MetricKind.COUNTER,
        ),
        HealthSample(metric="nvme_total_capacity", labels={"controller": "nvme0"}, value=1000),
    ]

    families = {family.name: family for family in collector.families(samples)}

    assert families["nvme_temperature"].type == "gauge"
    assert [s.labels for s in families["nvme_temperature"].samples] == [
        {"device": "/dev/nvme0n1"},
        {"device": "/dev/nvme1n1"},
    ]
    assert families["nvme_power_cycles"].type == "counter"
    assert families["nvme_power_cycles"].samples[0].name == "nvme_power_cycles_total"
    assert families["nvme_total_capacity"].samples[0].value == 1000


def test_unknown_metric(collector):
    with pytest.raises(KeyError):
        collector.families([HealthSample(metric="nvme_unknown", value=1)])


def test_scrape(conn_mock, catalogue, command_outputs):
    conn_mock.run_command.side_effect = command_outputs(
        {
            "list": "nvme_list_controller.json",
            "id-ctrl": "id_ctrl.json",
            "smart-log": "smart_log_expanded.json",
        }
    )
    poller = NvmePoller(NvmeCli(conn_mock), HealthLogExtractor(TemperatureScale.CELSIUS))
    registry = CollectorRegistry()
    registry.register(NvmeCollector(poller, catalogue))

    output = generate_latest(registry).decode("utf-8")
    families = {family.name: family for family in text_string_to_metric_families(output)}

    temperature = families["nvme_temperature"].samples[0]
    assert temperature.labels == {"device": "/dev/nvme2n1"}
    assert temperature.value == 23
    assert families["nvme_temperature_sensor3"].samples[0].value == 26
    assert "nvme_temperature_sensor4" not in families

    capacity = families["nvme_total_capacity"].samples[0]
    assert capacity.labels == {"controller": "nvme2"}
    assert capacity.value == 960197124096

    sector_size = families["nvme_namespace_sector_size"].samples[0]
    assert sector_size.labels == {"device": "/dev/nvme2n1", "controller": "nvme2"}
    assert sector_size.value == 512

    assert families["nvme_media_errors"].type == "counter"
    assert families["nvme_num_err_log_entries"].samples[0].value == 12


def test_scrape_failure_propagates(catalogue):
    class FailingPoller:
        def poll(self) -> tuple[PollResult, NvmeSnapshot]:
            raise CommandExecutionError("nvme list -o json", exit_code=1)

    registry = CollectorRegistry()
    registry.register(NvmeCollector(FailingPoller(), catalogue))

    with pytest.raises(CommandExecutionError):
        generate_latest(registry)
