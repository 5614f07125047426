from dataclasses import dataclass
from enum import Enum


class Unit(Enum):
    BITS = "bits"
    BYTES = "bytes"

    @property
    def suffix(self) -> str:
        return "b/s" if self is Unit.BITS else "B/s"

    def toggled(self) -> "Unit":
        return Unit.BYTES if self is Unit.BITS else Unit.BITS


class Prefix(Enum):
    NONE = ""
    KILO = "K"
    MEGA = "M"


@dataclass
class CounterSample:
    received: int | None = None
    sent: int | None = None


@dataclass
class RateSample:
    download: int = 0
    upload: int = 0


@dataclass
class DisplayMagnitude:
    scaled: float = 0.0
    prefix: Prefix = Prefix.NONE


@dataclass
class SpeedDisplay:
    value: str = "0"
    unit: str = "b/s"

    def __str__(self) -> str:
        return f"{self.value} {self.unit}"
