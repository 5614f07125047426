from dataclasses import dataclass

from bitrate.data.network_throughput import Unit

UPDATE_RATE_MIN = 1
UPDATE_RATE_MAX = 10


@dataclass
class BitrateConfig:
    unit: Unit = Unit.BITS
    update_rate: int = 1
    show_download_speed: bool = True
    show_upload_speed: bool = True

    def __post_init__(self):
        if not UPDATE_RATE_MIN <= self.update_rate <= UPDATE_RATE_MAX:
            raise ValueError(
                f"update_rate must be between {UPDATE_RATE_MIN} and {UPDATE_RATE_MAX}, got {self.update_rate}"
            )
