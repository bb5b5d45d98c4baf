"""
Tests for the NUT collection pass.
"""

import asyncio
from unittest.mock import AsyncMock, call, patch

import pytest

from nut_exporter.metrics import ObservationBuffer
from nut_exporter.nut.client import NUTConnectionError, NUTProtocolError, NUTServerError, NUTTransportError
from nut_exporter.nut.collector import NUTCollector, describe_all
from nut_exporter.nut.registry import DESCRIPTORS

UPS_VARS = {
    "battery.charge": "100",
    "battery.runtime": "3600",
    "device.model": "Smart-UPS 1500",
    "device.mfr": "APC",
    "device.serial": "AS1234567890",
    "device.type": "ups",
    "ups.load": "50",
    "ups.status": "OL",
}


def make_client():
    client = AsyncMock()
    client.list_ups.return_value = ["ups1", "ups2"]
    client.list_vars.return_value = dict(UPS_VARS)
    return client


@pytest.fixture
def mock_nut_client():
    """Fixture to mock the NUTClient."""
    with patch('nut_exporter.nut.collector.NUTClient') as mock_client_class:
        mock_client_instance = make_client()
        mock_client_class.return_value = mock_client_instance
        yield mock_client_instance


def test_describe_all():
    descriptors = describe_all()
    assert isinstance(descriptors, frozenset)
    assert len(descriptors) == len(DESCRIPTORS)
    assert len({d.name for d in descriptors}) == len(descriptors)
    assert all(d.kind == "gauge" for d in descriptors)


@pytest.mark.asyncio
async def test_collect_single_host(mock_nut_client):
    """Test a pass over one host with two UPSs."""
    sink = ObservationBuffer()
    with patch('nut_exporter.nut.collector.NUTClient') as mock_client_class:
        mock_client_class.return_value = mock_nut_client
        report = await NUTCollector(timeout=5.0).collect(["nut1"], sink)
        mock_client_class.assert_called_once_with("nut1", timeout=5.0)

    mock_nut_client.open.assert_awaited_once()
    assert mock_nut_client.list_vars.await_args_list == [call("ups1"), call("ups2")]
    mock_nut_client.close.assert_awaited_once()

    assert len(sink) == 2 * len(DESCRIPTORS)
    charge = [o for o in sink if o.name == "battery_charge_percent"]
    assert [o.value for o in charge] == [100, 100]
    assert charge[0].labels == {"model": "Smart-UPS 1500", "mfr": "APC", "serial": "AS1234567890", "type": "ups"}
    assert (report.hosts_polled, report.hosts_failed, report.ups_polled, report.ups_failed) == (1, 0, 2, 0)
    assert report.ok


@pytest.mark.asyncio
async def test_failed_ups_does_not_stop_the_host(mock_nut_client):
    """Test that a protocol error on one UPS still collects the next one on the same connection."""
    mock_nut_client.list_vars.side_effect = [NUTProtocolError("bad framing"), dict(UPS_VARS)]
    sink = ObservationBuffer()

    report = await NUTCollector().collect(["nut1"], sink)

    assert mock_nut_client.list_vars.await_args_list == [call("ups1"), call("ups2")]
    mock_nut_client.open.assert_awaited_once()
    mock_nut_client.close.assert_awaited_once()
    assert len(sink) == len(DESCRIPTORS)
    assert report.ups_failed == 1
    assert report.hosts_failed == 0


@pytest.mark.asyncio
async def test_server_error_on_ups_continues(mock_nut_client):
    mock_nut_client.list_vars.side_effect = [NUTServerError("LIST VAR ups1", "DATA-STALE"), dict(UPS_VARS)]
    sink = ObservationBuffer()
    await NUTCollector().collect(["nut1"], sink)
    assert len(sink) == len(DESCRIPTORS)


@pytest.mark.asyncio
async def test_transport_error_abandons_host(mock_nut_client):
    """Test that a broken connection skips the remaining UPSs of that host."""
    mock_nut_client.list_vars.side_effect = [NUTTransportError("reset"), dict(UPS_VARS)]
    sink = ObservationBuffer()

    report = await NUTCollector().collect(["nut1"], sink)

    mock_nut_client.list_vars.assert_awaited_once_with("ups1")
    mock_nut_client.close.assert_awaited_once()
    assert len(sink) == 0
    assert report.ups_failed == 1


@pytest.mark.asyncio
async def test_list_ups_failure_closes_and_skips_host(mock_nut_client):
    mock_nut_client.list_ups.side_effect = NUTProtocolError("expected 'BEGIN LIST UPS'")
    sink = ObservationBuffer()

    report = await NUTCollector().collect(["nut1"], sink)

    mock_nut_client.list_vars.assert_not_awaited()
    mock_nut_client.close.assert_awaited_once()
    assert report.hosts_failed == 1
    assert not report.ok


@pytest.mark.asyncio
async def test_connection_failure_skips_to_next_host():
    """Test that an unreachable host does not abort the pass."""
    unreachable = make_client()
    unreachable.open.side_effect = NUTConnectionError("refused")
    reachable = make_client()
    reachable.list_ups.return_value = ["ups1"]
    sink = ObservationBuffer()

    with patch('nut_exporter.nut.collector.NUTClient', side_effect=[unreachable, reachable]):
        report = await NUTCollector().collect(["down.lan", "up.lan"], sink)

    unreachable.list_ups.assert_not_awaited()
    unreachable.close.assert_not_awaited()
    reachable.close.assert_awaited_once()
    assert len(sink) == len(DESCRIPTORS)
    assert (report.hosts_polled, report.hosts_failed) == (2, 1)
    assert report.ok


@pytest.mark.asyncio
async def test_sink_failure_still_closes_connection(mock_nut_client):
    class BrokenSink:
        def observe(self, *args, **kwargs):
            raise RuntimeError("sink full")

    with pytest.raises(RuntimeError):
        await NUTCollector().collect(["nut1"], BrokenSink())
    mock_nut_client.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_collect_no_hosts():
    report = await NUTCollector().collect([], ObservationBuffer())
    assert report.hosts_polled == 0
    assert report.ok


@pytest.mark.asyncio
async def test_collect_from_local_server(fake_nut_server):
    """End-to-end pass: one UPS answers with an error, the other is collected."""
    server = await fake_nut_server({
        "LIST UPS": [
            "BEGIN LIST UPS",
            'UPS ups1 "Main rack"',
            'UPS ups2 "Backup power"',
            "END LIST UPS",
        ],
        "LIST VAR ups1": ["ERR DATA-STALE"],
        "LIST VAR ups2": [
            "BEGIN LIST VAR ups2",
            'VAR ups2 battery.charge "87.5"',
            'VAR ups2 battery.charger.status "resting"',
            'VAR ups2 device.model "Back-UPS \\"Pro\\""',
            'VAR ups2 ups.beeper.status "muted"',
            'VAR ups2 ups.load "N/A"',
            "END LIST VAR ups2",
        ],
    })
    sink = ObservationBuffer()

    report = await NUTCollector(timeout=5.0).collect([server.address], sink)
    await asyncio.wait_for(server.disconnected.wait(), timeout=5.0)

    assert server.connections == 1
    assert server.requests == ["LIST UPS", "LIST VAR ups1", "LIST VAR ups2"]
    assert report.ups_failed == 1
    values = {o.name: o.value for o in sink}
    assert len(sink) == len(DESCRIPTORS)
    assert values["battery_charge_percent"] == 87.5
    assert values["battery_charger_status"] == 3
    assert values["ups_beeper_status"] == 2
    assert values["ups_load_percent"] == 0
    assert all(o.labels["model"] == 'Back-UPS "Pro"' for o in sink)


@pytest.mark.asyncio
async def test_bad_line_in_one_ups_does_not_break_the_next(fake_nut_server):
    """A malformed reply for one UPS is drained, so the next UPS on the connection still parses."""
    server = await fake_nut_server({
        "LIST UPS": [
            "BEGIN LIST UPS",
            'UPS ups1 "Main rack"',
            'UPS ups2 "Backup power"',
            "END LIST UPS",
        ],
        "LIST VAR ups1": [
            "BEGIN LIST VAR ups1",
            'VAR ups1 battery.charge "1"',
            'VAR ups9 battery.charge "3"',
            'VAR ups1 ups.load "2"',
            "END LIST VAR ups1",
        ],
        "LIST VAR ups2": [
            "BEGIN LIST VAR ups2",
            'VAR ups2 battery.charge "64"',
            "END LIST VAR ups2",
        ],
    })
    sink = ObservationBuffer()

    report = await NUTCollector(timeout=5.0).collect([server.address], sink)
    await asyncio.wait_for(server.disconnected.wait(), timeout=5.0)

    assert server.connections == 1
    assert server.requests == ["LIST UPS", "LIST VAR ups1", "LIST VAR ups2"]
    assert report.ups_failed == 1
    assert len(sink) == len(DESCRIPTORS)
    values = {o.name: o.value for o in sink}
    assert values["battery_charge_percent"] == 64
    assert values["ups_load_percent"] == 0
