from bitrate.data.network_throughput import (
    DisplayMagnitude,
    Prefix,
    SpeedDisplay,
    Unit,
)

MAX_DISPLAY_WIDTH = 5


def rebase(raw_rate: int) -> DisplayMagnitude:
    """
    Express a raw rate as a value scaled by a power of 1024 plus its prefix.
    """
    power = raw_rate.bit_length() - 1 if raw_rate > 0 else 0
    prefix_power = power - power % 10
    scaled = raw_rate / 2**prefix_power

    # Rates of 2^30 and up are rebased further but keep the M prefix
    if power >= 20:
        prefix = Prefix.MEGA
    elif power >= 10:
        prefix = Prefix.KILO
    else:
        prefix = Prefix.NONE

    return DisplayMagnitude(scaled=scaled, prefix=prefix)


def trim_speed(value: float) -> str:
    """
    Format a rebased speed so it fits a fixed-width panel slot.

    Values of 100 and above get one decimal, everything else two. Trailing
    zeros and a dangling decimal point are removed, and the result is cut
    to five characters, which can drop digits of a valid number.
    """
    if value >= 100:
        formatted = f"{value:.1f}"
    else:
        formatted = f"{value:.2f}"

    result = formatted.rstrip("0").rstrip(".")

    return result[:MAX_DISPLAY_WIDTH]


def format_speed(raw_rate: int, unit: Unit) -> SpeedDisplay:
    """
    Turn a raw rate (bits or bytes per second) into a value and unit suffix.
    """
    magnitude = rebase(raw_rate)
    if magnitude.prefix is Prefix.NONE:
        value = f"{magnitude.scaled:.0f}"
    else:
        value = trim_speed(magnitude.scaled)

    return SpeedDisplay(value=value, unit=f"{magnitude.prefix.value}{unit.suffix}")
