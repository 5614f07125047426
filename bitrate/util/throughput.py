import logging

from bitrate.data.network_throughput import (
    CounterSample,
    RateSample,
    SpeedDisplay,
    Unit,
)
from bitrate.util import conversion, network

logger = logging.getLogger(__name__)

BITS_PER_BYTE = 8


def compute_rate(
    current: int, previous: int | None, interval_seconds: int, unit: Unit
) -> int | None:
    """
    Turn two cumulative byte counter readings into a per-second rate.

    Returns None when there is no baseline to compare against. A reading
    lower than the baseline (counter reset, interface swap, wraparound)
    yields 0 rather than a wrapped-around difference.
    """
    if previous is None:
        return None

    if current < previous:
        return 0

    rate = (current - previous) // interval_seconds
    if unit is Unit.BITS:
        rate *= BITS_PER_BYTE

    return rate


class ThroughputTracker:
    """
    Holds the monitored interface, the previous counter reading and the
    current download/upload speeds, and turns ticks into display strings.

    Speeds are stored in whichever unit is configured at the time they are
    computed. Not thread safe: one owner drives all the ticks.
    """

    def __init__(self, source: network.CounterSource, unit: Unit = Unit.BITS):
        self.source = source
        self.unit = unit
        self.interface: str | None = None
        self.previous = CounterSample()
        self.download_speed = 0
        self.upload_speed = 0
        self.download = SpeedDisplay()
        self.upload = SpeedDisplay()

        self.on_interface_tick()
        self._render()

    @property
    def rate(self) -> RateSample:
        return RateSample(download=self.download_speed, upload=self.upload_speed)

    def on_interface_tick(self) -> str | None:
        interface = network.select_default(self.source)
        if interface != self.interface:
            logger.info(
                f"default interface changed from {self.interface} to {interface}"
            )
            self.interface = interface
            if interface is None:
                self.previous = CounterSample()
            else:
                self.previous = self.source.read_counters(interface)

        return self.interface

    def on_sample_tick(self, interval_seconds: int) -> bool:
        """
        Read fresh counters and update both speeds.

        Returns False when there is no interface to sample. Directions whose
        counter cannot be read keep their previous speed and baseline.
        """
        if interval_seconds < 1:
            raise ValueError(
                f"interval_seconds must be at least 1, got {interval_seconds}"
            )

        if self.interface is None:
            logger.debug("no interface selected, keeping previous speeds")
            return False

        current = self.source.read_counters(self.interface)

        if current.received is not None:
            if current.received < (self.previous.received or 0):
                logger.debug(
                    f"received counter on {self.interface} went from {self.previous.received} to {current.received}, resynchronizing"
                )
            rate = compute_rate(
                current.received, self.previous.received, interval_seconds, self.unit
            )
            if rate is not None:
                self.download_speed = rate
            self.previous.received = current.received
        else:
            logger.debug(f"received counter unavailable for {self.interface}")

        if current.sent is not None:
            if current.sent < (self.previous.sent or 0):
                logger.debug(
                    f"sent counter on {self.interface} went from {self.previous.sent} to {current.sent}, resynchronizing"
                )
            rate = compute_rate(
                current.sent, self.previous.sent, interval_seconds, self.unit
            )
            if rate is not None:
                self.upload_speed = rate
            self.previous.sent = current.sent
        else:
            logger.debug(f"sent counter unavailable for {self.interface}")

        self._render()
        return True

    def set_unit(self, unit: Unit):
        """
        Switch between bits and bytes, rescaling the stored speeds in place.

        Going back to bytes floor-divides by 8, so speeds that were not a
        multiple of 8 bits lose their remainder.
        """
        if unit is self.unit:
            return

        if unit is Unit.BITS:
            self.download_speed *= BITS_PER_BYTE
            self.upload_speed *= BITS_PER_BYTE
        else:
            self.download_speed //= BITS_PER_BYTE
            self.upload_speed //= BITS_PER_BYTE

        logger.info(f"unit changed from {self.unit.value} to {unit.value}")
        self.unit = unit
        self._render()

    def _render(self):
        self.download = conversion.format_speed(self.download_speed, self.unit)
        self.upload = conversion.format_speed(self.upload_speed, self.unit)
