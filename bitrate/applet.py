#!/usr/bin/env python3

import dataclasses
import json
import logging
import signal
import sys
import threading
import time

import click
from dacite import DaciteError

from bitrate import glyphs
from bitrate.data.config import UPDATE_RATE_MAX, UPDATE_RATE_MIN, BitrateConfig
from bitrate.data.network_throughput import Unit
from bitrate.util import log, network, system
from bitrate.util.throughput import ThroughputTracker

context_settings = dict(help_option_names=["-h", "--help"])
logger = logging.getLogger(__name__)

INTERFACE_CHECK_INTERVAL = 5

SOURCES: dict[str, type] = {
    "sysfs": network.SysfsCounterSource,
    "psutil": network.PsutilCounterSource,
}


class Applet:
    """
    Drives a ThroughputTracker from two periodic ticks and prints one waybar
    JSON object per redraw.

    SIGUSR1 toggles between bits and bytes, SIGHUP forces an interface
    re-check. Handlers only raise flags; all state changes happen in run().
    """

    def __init__(self, tracker: ThroughputTracker, config: BitrateConfig):
        self.tracker = tracker
        self.config = config
        self.condition = threading.Condition()
        self.needs_toggle = False
        self.needs_refresh = False
        self.next_sample = 0.0
        self.next_interface_check = 0.0

    def toggle_unit_handler(self, _signum: int, _frame: object | None):
        logger.info("received SIGUSR1, toggling unit")
        with self.condition:
            self.needs_toggle = True
            self.condition.notify()

    def refresh_handler(self, _signum: int, _frame: object | None):
        logger.info("received SIGHUP, re-checking interface")
        with self.condition:
            self.needs_refresh = True
            self.condition.notify()

    def schedule(self, now: float):
        self.next_sample = now + self.config.update_rate
        self.next_interface_check = now + INTERFACE_CHECK_INTERVAL

    def step(self, now: float) -> bool:
        """
        Run whichever ticks are due at `now`. Returns True if the output
        should be redrawn.
        """
        redraw = False

        if now >= self.next_interface_check:
            previous = self.tracker.interface
            redraw = self.tracker.on_interface_tick() != previous
            self.next_interface_check = now + INTERFACE_CHECK_INTERVAL

        if now >= self.next_sample:
            self.tracker.on_sample_tick(self.config.update_rate)
            self.next_sample += self.config.update_rate
            if self.next_sample <= now:
                self.next_sample = now + self.config.update_rate
            redraw = True

        return redraw

    def handle_signals(self) -> bool:
        with self.condition:
            toggle, refresh = self.needs_toggle, self.needs_refresh
            self.needs_toggle = False
            self.needs_refresh = False

        if toggle:
            self.tracker.set_unit(self.tracker.unit.toggled())
            self.config.unit = self.tracker.unit

        if refresh:
            self.tracker.on_interface_tick()

        return toggle or refresh

    def seconds_until_next_tick(self, now: float) -> float:
        return max(0.0, min(self.next_sample, self.next_interface_check) - now)

    def render_output(self) -> tuple[str, str, str]:
        interface = self.tracker.interface
        icon = network.get_icon(self.tracker.source, interface)

        speeds: list[str] = []
        if self.config.show_download_speed:
            speeds.append(f"{glyphs.cod_arrow_small_down}{self.tracker.download}")
        if self.config.show_upload_speed:
            speeds.append(f"{glyphs.cod_arrow_small_up}{self.tracker.upload}")

        text = f"{icon}{glyphs.icon_spacer}{' '.join(speeds)}" if speeds else icon

        if interface:
            output_class = "success"
            tooltip = "\n".join(
                [
                    f"Interface : {interface}",
                    f"Download  : {self.tracker.download}",
                    f"Upload    : {self.tracker.upload}",
                    "",
                    f"Last updated {system.get_human_timestamp()}",
                ]
            )
        else:
            output_class = "disconnected"
            tooltip = "No active network interface"

        return text, output_class, tooltip

    def emit(self):
        text, output_class, tooltip = self.render_output()
        print(
            json.dumps({"text": text, "class": output_class, "tooltip": tooltip}),
            flush=True,
        )

    def run(self):
        _ = signal.signal(signal.SIGUSR1, self.toggle_unit_handler)
        _ = signal.signal(signal.SIGHUP, self.refresh_handler)

        self.schedule(time.monotonic())
        self.emit()

        while True:
            redraw = self.step(time.monotonic())
            redraw = self.handle_signals() or redraw
            if redraw:
                self.emit()

            with self.condition:
                if not (self.needs_toggle or self.needs_refresh):
                    _ = self.condition.wait(
                        timeout=self.seconds_until_next_tick(time.monotonic())
                    )


def build_config(
    config_file: str | None,
    unit: str | None,
    update_rate: int | None,
    show_download: bool | None,
    show_upload: bool | None,
) -> BitrateConfig:
    config = system.load_config(filename=config_file)
    overrides: dict[str, object] = {}
    if unit:
        overrides["unit"] = Unit(unit)
    if update_rate:
        overrides["update_rate"] = update_rate
    if show_download is not None:
        overrides["show_download_speed"] = show_download
    if show_upload is not None:
        overrides["show_upload_speed"] = show_upload

    return dataclasses.replace(config, **overrides)


@click.command(
    name="bitrate",
    help="Show the current download and upload rate of the active network interface",
    context_settings=context_settings,
)
@click.option(
    "-u",
    "--unit",
    type=click.Choice([u.value for u in Unit]),
    default=None,
    help="Show rates in bits or bytes per second",
)
@click.option(
    "-r",
    "--update-rate",
    type=click.IntRange(UPDATE_RATE_MIN, UPDATE_RATE_MAX),
    default=None,
    help="The sampling interval (in seconds)",
)
@click.option(
    "--show-download/--hide-download",
    default=None,
    help="Show or hide the download rate (default: from the config file)",
)
@click.option(
    "--show-upload/--hide-upload",
    default=None,
    help="Show or hide the upload rate (default: from the config file)",
)
@click.option(
    "-s",
    "--source",
    type=click.Choice(list(SOURCES)),
    default="sysfs",
    help="Where to read interface counters from",
)
@click.option(
    "-c",
    "--config",
    "config_file",
    default=None,
    help="Path to a JSON configuration file",
)
@click.option(
    "-t", "--test", default=False, is_flag=True, help="Print the output and exit"
)
@click.option("-d", "--debug", default=False, is_flag=True, help="Enable debug logging")
def main(
    unit: str | None,
    update_rate: int | None,
    show_download: bool | None,
    show_upload: bool | None,
    source: str,
    config_file: str | None,
    test: bool,
    debug: bool,
):
    _ = log.configure(
        debug=debug,
        name="bitrate",
        logfile=system.get_cache_directory() / "bitrate.log",
    )

    try:
        config = build_config(
            config_file, unit, update_rate, show_download, show_upload
        )
    except (OSError, ValueError, DaciteError) as e:
        logger.error(f"invalid configuration: {e}")
        system.error_exit(icon=glyphs.md_alert, message=f"invalid configuration: {e}")
        sys.exit(1)

    logger.info(
        f"starting with source={source} unit={config.unit.value} update_rate={config.update_rate}"
    )
    tracker = ThroughputTracker(source=SOURCES[source](), unit=config.unit)
    applet = Applet(tracker=tracker, config=config)

    if test:
        time.sleep(config.update_rate)
        tracker.on_sample_tick(config.update_rate)
        text, output_class, tooltip = applet.render_output()
        print(text)
        print(output_class)
        print(tooltip)
        return

    applet.run()


if __name__ == "__main__":
    main()
