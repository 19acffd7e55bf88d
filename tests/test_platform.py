#!/usr/bin/env python3
"""
Tests for the NMEA reader and the rate of turn application.
"""

import unittest
import csv
import itertools
import json
import math
import signal
import numpy as np
import sys
import os
import tempfile
from unittest import mock

# Add core modules to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from core.math.constants import PATH_HEADING_TRUE
from platforms.signalk.hardware import NMEAReader
from platforms.signalk.main import RateOfTurnSystem

TURN_SENTENCES = ["$HCHDT,358.0,T*27", "$HCHDT,0.0,T*29", "$HCHDT,2.0,T*2B",
                  "$HCHDT,4.0,T*2D", "$HCHDT,6.0,T*2F"]

EPOCH_S = 1_700_000_000


def fake_clock(start=EPOCH_S, step=1):
    """time.time replacement ticking one step per call."""
    clock = itertools.count(start, step)
    return lambda: float(next(clock))


class TestNMEAReader(unittest.TestCase):
    """Test sentence framing and replay."""

    def setUp(self):
        """Set up test fixtures."""
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def write_log(self, lines):
        path = os.path.join(self.tmpdir.name, "log.nmea")
        with open(path, 'w') as f:
            f.write("\n".join(lines) + "\n")
        return path

    def drain(self, reader):
        entries = []
        while not reader.sentence_queue.empty():
            entries.append(reader.sentence_queue.get_nowait())
        return entries

    def test_partial_lines(self):
        """Test only complete '$' sentences are queued."""
        reader = NMEAReader()

        reader.receive_buffer += "$HCHDT,0.0,T*29\r\n$HCHD"
        reader._extract_sentences()
        self.assertEqual(reader.sentence_queue.qsize(), 1)
        self.assertEqual(reader.receive_buffer, "$HCHD")

        reader.receive_buffer += "T,2.0,T*2B\r\nnoise\n\n"
        reader._extract_sentences()

        sentences = [sentence for _, sentence in self.drain(reader)]
        self.assertEqual(sentences, ["$HCHDT,0.0,T*29", "$HCHDT,2.0,T*2B"])
        self.assertEqual(reader.receive_buffer, "")
        self.assertEqual(reader.sentences_received, 2)

    def test_receive_time_survives_backlog(self):
        """Test queued sentences keep their arrival time, not the read time."""
        reader = NMEAReader()

        with mock.patch('platforms.signalk.hardware.nmea_reader.time') as mock_time:
            mock_time.time.side_effect = fake_clock(100)
            reader.receive_buffer = "\r\n".join(TURN_SENTENCES[:3]) + "\r\n"
            reader._extract_sentences()

        reader.initialized = True
        entries = [reader.read_sentence(timeout=0.1) for _ in range(3)]

        self.assertEqual([t for t, _ in entries], [100.0, 101.0, 102.0])
        self.assertEqual([s for _, s in entries], TURN_SENTENCES[:3])
        self.assertEqual(reader.last_sentence_time, 102.0)

    def test_full_queue_drops(self):
        """Test sentences beyond the queue size are counted as dropped."""
        reader = NMEAReader()
        for _ in range(reader.sentence_queue.maxsize + 5):
            reader._enqueue("$HCHDT,0.0,T*29")

        self.assertEqual(reader.sentences_dropped, 5)
        self.assertEqual(reader.sentences_received, reader.sentence_queue.maxsize)

    def test_replay(self):
        """Test a recorded log is replayed in order and then exhausted."""
        path = self.write_log(["# recorded at sea", TURN_SENTENCES[0], "", "garbage",
                               TURN_SENTENCES[1]])
        reader = NMEAReader(replay_file=path, replay_interval_s=0)

        self.assertTrue(reader.initialize())
        first = reader.read_sentence(timeout=2.0)
        second = reader.read_sentence(timeout=2.0)
        reader.reader_thread.join(timeout=2.0)

        self.assertEqual(first[1], TURN_SENTENCES[0])
        self.assertEqual(second[1], TURN_SENTENCES[1])
        self.assertLessEqual(first[0], second[0])
        self.assertTrue(reader.exhausted)
        self.assertIsNone(reader.read_sentence(timeout=0.01))

        stats = reader.get_statistics()
        self.assertTrue(stats['replay_mode'])
        self.assertEqual(stats['sentences_read'], 2)

        reader.cleanup()
        self.assertFalse(reader.initialized)

    def test_missing_replay_file(self):
        """Test an unreadable log fails initialization."""
        reader = NMEAReader(replay_file=os.path.join(self.tmpdir.name, "missing.nmea"))

        with self.assertLogs('platforms.signalk.hardware.nmea_reader', level='ERROR'):
            self.assertFalse(reader.initialize())
        self.assertIsNone(reader.read_sentence(timeout=0.01))


class TestRateOfTurnSystem(unittest.TestCase):
    """Test the application from NMEA log to CSV output."""

    def setUp(self):
        """Set up test fixtures."""
        self.saved_handlers = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}
        self.tmpdir = tempfile.TemporaryDirectory()
        self.csv_file = os.path.join(self.tmpdir.name, "rot.csv")
        self.config_file = os.path.join(self.tmpdir.name, "config.json")

        with open(self.config_file, 'w') as f:
            json.dump({
                "input_path": PATH_HEADING_TRUE,
                "window_size": 3,
                "replay_interval_s": 0,
                "enable_logging": False,
                "csv_log_file": self.csv_file,
                "status_interval_s": 3600
            }, f)

    def tearDown(self):
        for sig, handler in self.saved_handlers.items():
            signal.signal(sig, handler)
        self.tmpdir.cleanup()

    def write_log(self, lines):
        path = os.path.join(self.tmpdir.name, "turn.nmea")
        with open(path, 'w') as f:
            f.write("\n".join(lines) + "\n")
        return path

    def read_rows(self):
        with open(self.csv_file, newline="") as f:
            return list(csv.reader(f))

    def test_process_sentence_csv_log(self):
        """Test parsed sentences produce CSV rows of heading and rate."""
        system = RateOfTurnSystem(self.config_file, replay_file=self.write_log([]))
        self.assertTrue(system.start())

        for i, sentence in enumerate(TURN_SENTENCES):
            system.process_sentence(sentence, timestamp=EPOCH_S + i)
        system.process_sentence("$HCHDT,8.0,T*00")  # bad checksum
        system.stop()

        rows = self.read_rows()
        self.assertEqual(rows[0], ["timestamp_ms", "heading_rad", "rot_rad_s"])
        self.assertEqual(len(rows), 3)

        for row, heading in zip(rows[1:], [4.0, 6.0]):
            int(row[0])
            self.assertAlmostEqual(float(row[1]), np.radians(heading), places=9)
            self.assertAlmostEqual(float(row[2]), np.radians(2), places=9)

        self.assertEqual(system.parser.get_statistics()['parse_errors'], 1)
        self.assertIsNone(system.csv_file)

    def test_replay_backlog_uses_receive_time(self):
        """Test a replayed log drained in a burst still yields the turn rate."""
        replay_file = self.write_log(TURN_SENTENCES)

        with mock.patch('platforms.signalk.hardware.nmea_reader.time') as mock_time:
            mock_time.time.side_effect = fake_clock()
            system = RateOfTurnSystem(self.config_file, replay_file=replay_file)
            self.assertTrue(system.start())
            system.run()
            system.stop()

        rows = self.read_rows()[1:]
        self.assertEqual(len(rows), 2)
        for row in rows:
            rate = float(row[2])
            self.assertFalse(math.isinf(rate))
            self.assertAlmostEqual(rate, np.radians(2), places=9)

        self.assertAlmostEqual(system.last_rate, np.radians(2), places=9)

    def test_start_fails_without_source(self):
        """Test start reports a source that cannot be opened."""
        system = RateOfTurnSystem(self.config_file,
                                  replay_file=os.path.join(self.tmpdir.name, "missing.nmea"))
        self.assertFalse(system.start())
        self.assertFalse(system.running)


if __name__ == '__main__':
    # Run tests with verbose output
    unittest.main(verbosity=2)
