from pathlib import Path

import pytest

from bitrate.data.network_throughput import CounterSample


class FakeInterface:
    def __init__(
        self,
        up: bool = True,
        carrier: bool = True,
        received: int | None = 0,
        sent: int | None = 0,
        wireless: bool = False,
    ):
        self.up = up
        self.carrier = carrier
        self.received = received
        self.sent = sent
        self.wireless = wireless


class FakeSource:
    """In-memory counter source, mutated by tests between ticks."""

    def __init__(self, **interfaces: FakeInterface):
        self.devices = dict(interfaces)

    def interfaces(self) -> list[str]:
        return list(self.devices)

    def is_up(self, interface: str) -> bool:
        return interface in self.devices and self.devices[interface].up

    def is_wireless(self, interface: str) -> bool:
        return interface in self.devices and self.devices[interface].wireless

    def has_carrier(self, interface: str) -> bool:
        return interface in self.devices and self.devices[interface].carrier

    def get_received_bytes(self, interface: str) -> int | None:
        device = self.devices.get(interface)
        return device.received if device else None

    def get_sent_bytes(self, interface: str) -> int | None:
        device = self.devices.get(interface)
        return device.sent if device else None

    def read_counters(self, interface: str) -> CounterSample:
        return CounterSample(
            received=self.get_received_bytes(interface),
            sent=self.get_sent_bytes(interface),
        )


def write_interface(
    root: Path,
    name: str,
    operstate: str | None = "up\n",
    carrier: str | None = "1\n",
    rx_bytes: str | None = "0\n",
    tx_bytes: str | None = "0\n",
    wireless: bool = False,
) -> Path:
    """Lay out a fake /sys/class/net/<name> directory."""
    path = root / name
    (path / "statistics").mkdir(parents=True)
    for filename, contents in [
        ("operstate", operstate),
        ("carrier", carrier),
        ("statistics/rx_bytes", rx_bytes),
        ("statistics/tx_bytes", tx_bytes),
    ]:
        if contents is not None:
            (path / filename).write_text(contents)
    if wireless:
        (path / "wireless").mkdir()
    return path


@pytest.fixture
def sysfs(tmp_path: Path) -> Path:
    root = tmp_path / "net"
    root.mkdir()
    return root
