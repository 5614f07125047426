import logging
import os
import re
from pathlib import Path
from typing import Protocol

import psutil

from bitrate import glyphs
from bitrate.data.network_throughput import CounterSample

logger = logging.getLogger(__name__)

LOOPBACK_INTERFACE = "lo"
SYSFS_NET_ROOT = Path("/sys/class/net")
U64_MAX = 2**64 - 1


def operstate_is_up(text: str) -> bool:
    return "up" in text


def carrier_is_connected(text: str) -> bool:
    return text.strip() == "1"


def parse_counter(text: str) -> int | None:
    """
    Parse a cumulative byte counter as exposed by the kernel.

    Only plain decimal digits that fit in an unsigned 64-bit integer are
    accepted; anything else means the counter is unavailable.
    """
    text = text.rstrip()
    if not re.fullmatch(r"[0-9]+", text):
        return None

    value = int(text)
    return value if value <= U64_MAX else None


class CounterSource(Protocol):
    def interfaces(self) -> list[str]: ...

    def is_up(self, interface: str) -> bool: ...

    def is_wireless(self, interface: str) -> bool: ...

    def has_carrier(self, interface: str) -> bool: ...

    def get_received_bytes(self, interface: str) -> int | None: ...

    def get_sent_bytes(self, interface: str) -> int | None: ...

    def read_counters(self, interface: str) -> CounterSample: ...


class SysfsCounterSource:
    """
    Read interface state and counters from /sys/class/net.

    Every call goes back to the filesystem, nothing is cached.
    """

    def __init__(self, root: Path = SYSFS_NET_ROOT):
        self.root = Path(root)

    def _read(self, interface: str, *parts: str) -> str | None:
        filename = self.root.joinpath(interface, *parts)
        try:
            with open(filename, "r") as fh:
                return fh.read()
        except OSError as e:
            logger.debug(f"failed to read {filename}: {e}")
            return None

    def interfaces(self) -> list[str]:
        try:
            return sorted(os.listdir(self.root))
        except OSError as e:
            logger.debug(f"failed to list {self.root}: {e}")
            return []

    def is_wireless(self, interface: str) -> bool:
        return (self.root / interface / "wireless").is_dir()

    def is_up(self, interface: str) -> bool:
        return operstate_is_up(self._read(interface, "operstate") or "")

    def has_carrier(self, interface: str) -> bool:
        return carrier_is_connected(self._read(interface, "carrier") or "")

    def get_received_bytes(self, interface: str) -> int | None:
        contents = self._read(interface, "statistics", "rx_bytes")
        return parse_counter(contents) if contents is not None else None

    def get_sent_bytes(self, interface: str) -> int | None:
        contents = self._read(interface, "statistics", "tx_bytes")
        return parse_counter(contents) if contents is not None else None

    def read_counters(self, interface: str) -> CounterSample:
        return CounterSample(
            received=self.get_received_bytes(interface),
            sent=self.get_sent_bytes(interface),
        )


class PsutilCounterSource:
    """
    Interface state and counters via psutil, for hosts without sysfs.

    psutil only reports a single "isup" flag, so it stands in for both the
    operational state and the carrier.
    """

    def interfaces(self) -> list[str]:
        return sorted(psutil.net_if_stats().keys())

    def is_wireless(self, interface: str) -> bool:
        return False

    def is_up(self, interface: str) -> bool:
        stats = psutil.net_if_stats().get(interface)
        return bool(stats and stats.isup)

    def has_carrier(self, interface: str) -> bool:
        return self.is_up(interface)

    def read_counters(self, interface: str) -> CounterSample:
        counters = psutil.net_io_counters(pernic=True).get(interface)
        if counters is None:
            logger.debug(f"no counters reported for {interface}")
            return CounterSample()
        return CounterSample(received=counters.bytes_recv, sent=counters.bytes_sent)

    def get_received_bytes(self, interface: str) -> int | None:
        return self.read_counters(interface).received

    def get_sent_bytes(self, interface: str) -> int | None:
        return self.read_counters(interface).sent


def select_default(source: CounterSource) -> str | None:
    """
    Pick the interface to monitor: the first one, in enumeration order, that
    is not loopback, is up and has a carrier.
    """
    for interface in source.interfaces():
        if interface == LOOPBACK_INTERFACE:
            continue

        if not source.is_up(interface):
            continue

        if source.has_carrier(interface):
            return interface

    return None


def get_icon(source: CounterSource, interface: str | None) -> str:
    if interface is None:
        return glyphs.md_network_off

    if source.is_wireless(interface):
        return glyphs.md_wifi_strength_4

    return glyphs.md_network
