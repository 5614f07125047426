import json
import os
import time
from datetime import datetime
from pathlib import Path
from typing import cast

from dacite import Config, from_dict

from bitrate import glyphs
from bitrate.data.config import BitrateConfig
from bitrate.data.network_throughput import Unit

APP_NAME = "bitrate"


def error_exit(icon: str, message: str):
    print(
        json.dumps(
            {
                "text": f"{icon} {message}",
                "class": "error",
            }
        )
    )


def get_cache_directory() -> Path:
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        cache_dir = Path(xdg_cache) / APP_NAME
    else:
        cache_dir = Path.home() / ".cache" / APP_NAME

    if not os.path.exists(cache_dir):
        try:
            os.makedirs(cache_dir, mode=0o700)
        except OSError:
            error_exit(icon=glyphs.md_alert, message=f'Couldn\'t create "{cache_dir}"')

    return cache_dir


def get_config_directory() -> Path:
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_config_file() -> Path:
    return get_config_directory() / "config.json"


def load_config(filename: str | Path | None = None) -> BitrateConfig:
    """
    Load the applet configuration, falling back to the defaults when the
    file does not exist.
    """
    if filename is None:
        filename = get_config_file()

    if not os.path.exists(filename):
        return BitrateConfig()

    with open(filename, "r") as fh:
        json_data = cast(dict[str, object], json.load(fh))

    return from_dict(
        data_class=BitrateConfig,
        data=json_data,
        config=Config(cast=[Unit]),
    )


def get_human_timestamp() -> str:
    now = int(time.time())
    dt = datetime.fromtimestamp(now)
    return dt.strftime("%Y-%m-%d %H:%M:%S")
