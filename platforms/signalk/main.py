#!/usr/bin/env python3
"""
Rate of Turn Application
Input: NMEA 0183 heading/course sentences (serial port or recorded log)
Output: navigation.rateOfTurn
"""

import sys
import os
import csv
import time
import signal
import logging
import argparse
from typing import Optional

# Add repository root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from core.math.constants import PATH_RATE_OF_TURN, RAD_TO_DEG
from core.sensors import NMEAParser, HeadingProcessor
from platforms.signalk.bus import PluginHost, PathValue, timestamp_to_ms
from platforms.signalk.plugin import RateOfTurnPlugin
from platforms.signalk.config import Config
from platforms.signalk.hardware import NMEAReader


def configure_logging(config: Config):
    """Set up the root logger from the configuration."""
    level = getattr(logging, str(config.log_level).upper(), logging.INFO)
    handlers = [logging.StreamHandler()]
    if config.enable_logging and config.log_file:
        handlers.append(logging.FileHandler(config.log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers
    )


class RateOfTurnSystem:
    """Main rate of turn system."""

    def __init__(self, config_file: str = "config.json", replay_file: Optional[str] = None):
        """Initialize the rate of turn system."""

        # Load configuration
        self.config = Config(config_file)
        configure_logging(self.config)
        self.config.validate()

        # NMEA source
        self.reader = NMEAReader(
            serial_port=self.config.nmea_serial_port,
            baud_rate=self.config.nmea_baud_rate,
            replay_file=replay_file,
            replay_interval_s=self.config.replay_interval_s
        )

        # Sentence processing
        self.parser = NMEAParser()
        self.heading_processor = HeadingProcessor()

        # Host and plugin
        self.host = PluginHost()
        self.plugin = RateOfTurnPlugin(self.host)

        self.running = False

        # Data storage
        self.last_heading: Optional[float] = None
        self.last_rate: Optional[float] = None
        self.csv_file = None
        self.csv_writer = None
        self._disposers = []

        # Statistics
        self.start_time = time.time()

        # Setup signal handlers
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

        print("Rate of Turn System initialized")
        print(f"Input: {self.config.input_path}, window {self.config.window_size} samples")
        if replay_file:
            print(f"Source: replay of {replay_file}")
        else:
            print(f"Source: {self.config.nmea_serial_port} at {self.config.nmea_baud_rate} baud")

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals."""
        print("\nShutdown signal received, stopping system...")
        self.running = False

    def start(self) -> bool:
        """Start the rate of turn system."""
        if self.running:
            print("System already running")
            return True

        print("Starting rate of turn system...")

        if not self.reader.initialize():
            print("ERROR: Failed to open NMEA source")
            return False

        if self.config.csv_log_file:
            self._open_csv_log(self.config.csv_log_file)

        bus = self.host.streambundle
        self._disposers.append(bus.get_self_bus(self.config.input_path).on_value(self._on_heading))
        self._disposers.append(bus.get_self_bus(PATH_RATE_OF_TURN).on_value(self._on_rate))

        if not self.plugin.start(self.config.plugin_settings):
            print("ERROR: Failed to start plugin")
            self.reader.cleanup()
            return False

        self.running = True
        print("Rate of turn system started successfully")
        return True

    def stop(self):
        """Stop the rate of turn system."""
        print("Stopping rate of turn system...")

        self.running = False
        self.plugin.stop()

        for disposer in self._disposers:
            disposer()
        self._disposers.clear()

        self.reader.cleanup()

        if self.csv_file:
            self.csv_file.close()
            self.csv_file = None
            self.csv_writer = None

        print("Rate of turn system stopped")

    def _open_csv_log(self, path: str):
        self.csv_file = open(path, "w", newline="")
        self.csv_writer = csv.writer(self.csv_file)
        self.csv_writer.writerow(["timestamp_ms", "heading_rad", "rot_rad_s"])

    def _on_heading(self, update: PathValue):
        self.last_heading = update.value

    def _on_rate(self, update: PathValue):
        self.last_rate = update.value
        if self.csv_writer:
            self.csv_writer.writerow([timestamp_to_ms(update.timestamp),
                                      self.last_heading, update.value])

    def process_sentence(self, sentence: str, timestamp: Optional[float] = None):
        """
        Parse one NMEA sentence and publish its heading values.

        Args:
            sentence: NMEA sentence
            timestamp: Receive time in seconds since epoch (defaults to now)
        """
        fix = self.parser.parse_sentence(sentence, timestamp=timestamp)
        if fix is None:
            return

        for path, value in self.heading_processor.to_values(fix).items():
            self.host.streambundle.push(path, value, fix.timestamp_ms, source=f"nmea.{fix.sentence_type}")

    def run(self):
        """Read and process sentences until stopped."""
        last_status_time = time.time()

        while self.running:
            entry = self.reader.read_sentence(timeout=0.5)
            if entry:
                received_at, sentence = entry
                self.process_sentence(sentence, timestamp=received_at)
            elif self.reader.exhausted:
                print("Replay complete")
                break

            current_time = time.time()
            if current_time - last_status_time >= self.config.status_interval_s:
                self._print_status()
                last_status_time = current_time

    def _print_status(self):
        """Print current system status."""
        uptime = time.time() - self.start_time

        print(f"\n=== Rate of Turn Status (Uptime: {uptime:.1f}s) ===")
        if self.last_heading is not None:
            print(f"Heading: {self.last_heading:.3f} rad ({self.last_heading * RAD_TO_DEG:.1f}°)")
        if self.last_rate is not None:
            print(f"ROT:     {self.last_rate:.5f} rad/s ({self.last_rate * RAD_TO_DEG * 60:.1f}°/min)")

        parser_stats = self.parser.get_statistics()
        reader_stats = self.reader.get_statistics()
        plugin_stats = self.plugin.get_statistics()

        print(f"NMEA: {parser_stats['sentences_processed']} sentences, "
              f"{parser_stats['parse_errors']} errors, "
              f"data age {reader_stats['data_age']:.1f}s")
        for stats in plugin_stats['estimators']:
            print(f"Estimator: {stats['state']}, {stats['samples']} samples, "
                  f"{stats['estimates']} estimates, {stats['sink_errors']} publish errors")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Compute rate of turn from NMEA heading data")
    parser.add_argument("--config", default="config.json", help="JSON configuration file")
    parser.add_argument("--replay", help="Replay a recorded NMEA log instead of the serial port")
    args = parser.parse_args()

    print("Rate of Turn System")
    print("=" * 50)

    rot_system = RateOfTurnSystem(args.config, replay_file=args.replay)

    if not rot_system.start():
        print("Failed to start system")
        return 1

    try:
        rot_system.run()

    except KeyboardInterrupt:
        print("\nKeyboard interrupt received")

    finally:
        rot_system.stop()

    return 0


if __name__ == "__main__":
    sys.exit(main())
