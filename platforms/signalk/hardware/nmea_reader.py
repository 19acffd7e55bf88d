"""
NMEA 0183 sentence reader for a serial port or a recorded log file.
"""

import logging
import time
import threading
from typing import Optional, Tuple
from queue import Queue, Empty, Full

import serial

logger = logging.getLogger(__name__)


class NMEAReader:
    """
    Reads NMEA sentences from a compass or GNSS receiver.

    With replay_file set, sentences come from a text log instead of the
    serial port, one every replay_interval_s seconds.
    """

    def __init__(self, serial_port: str = "/dev/ttyUSB0", baud_rate: int = 4800,
                 replay_file: Optional[str] = None, replay_interval_s: float = 0.1):
        """
        Initialize NMEA reader.

        Args:
            serial_port: Serial port device (e.g., "/dev/ttyUSB0")
            baud_rate: Baud rate (4800 for NMEA 0183, 38400 for high speed)
            replay_file: Optional recorded NMEA log to replay
            replay_interval_s: Delay between replayed sentences
        """
        self.serial_port = serial_port
        self.baud_rate = baud_rate
        self.serial_conn = None
        self.initialized = False

        # Threading for continuous reading
        self.reader_thread = None
        self.running = False

        # Data buffer
        self.sentence_queue = Queue(maxsize=100)
        self.receive_buffer = ""

        # Replay mode
        self.replay_file = replay_file
        self.replay_interval_s = replay_interval_s
        self.replay_finished = False

        # Statistics
        self.sentences_received = 0
        self.sentences_read = 0
        self.sentences_dropped = 0
        self.last_sentence_time = 0

    @property
    def replay_mode(self) -> bool:
        return self.replay_file is not None

    def initialize(self) -> bool:
        """
        Open the source and start the reader thread.

        Returns:
            True if initialization successful
        """
        if self.replay_mode:
            if not self._open_replay():
                return False
            target = self._replay_loop
        else:
            try:
                self.serial_conn = serial.Serial(
                    port=self.serial_port,
                    baudrate=self.baud_rate,
                    bytesize=serial.EIGHTBITS,
                    parity=serial.PARITY_NONE,
                    stopbits=serial.STOPBITS_ONE,
                    timeout=1.0
                )
            except serial.SerialException as e:
                logger.error("NMEA: Failed to open %s: %s", self.serial_port, e)
                return False

            # Clear any existing data
            self.serial_conn.reset_input_buffer()
            target = self._reader_loop
            logger.info("NMEA: Reading %s at %d baud", self.serial_port, self.baud_rate)

        self.running = True
        self.reader_thread = threading.Thread(target=target, daemon=True)
        self.reader_thread.start()

        self.initialized = True
        return True

    def _open_replay(self) -> bool:
        try:
            self._replay_handle = open(self.replay_file, 'r', encoding='ascii', errors='ignore')
        except OSError as e:
            logger.error("NMEA: Cannot open replay file %s: %s", self.replay_file, e)
            return False
        logger.info("NMEA: Replaying %s", self.replay_file)
        return True

    def _reader_loop(self):
        """Main reader loop for serial data."""
        while self.running and self.serial_conn:
            try:
                if self.serial_conn.in_waiting > 0:
                    # Read available data
                    data = self.serial_conn.read(self.serial_conn.in_waiting)

                    # Decode to string
                    text = data.decode('ascii', errors='ignore')
                    self.receive_buffer += text

                    # Extract complete sentences
                    self._extract_sentences()

                else:
                    time.sleep(0.01)  # Small delay when no data

            except serial.SerialException as e:
                logger.warning("NMEA: Reader error: %s", e)
                time.sleep(0.1)

    def _replay_loop(self):
        """Feed sentences from the replay file at a fixed pace."""
        with self._replay_handle as f:
            for line in f:
                if not self.running:
                    break

                sentence = line.strip()
                if not sentence.startswith(('$', '!')):
                    continue

                self._enqueue(sentence, block=True)
                time.sleep(self.replay_interval_s)

        self.replay_finished = True
        logger.info("NMEA: Replay finished")

    def _extract_sentences(self):
        """Extract complete NMEA sentences from receive buffer."""
        while '\n' in self.receive_buffer:
            line_end = self.receive_buffer.find('\n')
            sentence = self.receive_buffer[:line_end].strip()
            self.receive_buffer = self.receive_buffer[line_end + 1:]

            if sentence and sentence.startswith('$'):
                self._enqueue(sentence)

    def _enqueue(self, sentence: str, block: bool = False):
        # Receive time, not parse time
        received_at = time.time()
        try:
            if block:
                self.sentence_queue.put((received_at, sentence), timeout=1.0)
            else:
                self.sentence_queue.put_nowait((received_at, sentence))
        except Full:
            self.sentences_dropped += 1
            return

        self.sentences_received += 1
        self.last_sentence_time = received_at

    def read_sentence(self, timeout: float = 1.0) -> Optional[Tuple[float, str]]:
        """
        Read next NMEA sentence.

        Args:
            timeout: Timeout in seconds

        Returns:
            (receive time in seconds since epoch, sentence), or None on timeout
        """
        if not self.initialized:
            return None

        try:
            entry = self.sentence_queue.get(timeout=timeout)
        except Empty:
            return None

        self.sentences_read += 1
        return entry

    @property
    def exhausted(self) -> bool:
        """True once a replay has been fully consumed."""
        return self.replay_finished and self.sentence_queue.empty()

    def flush_buffer(self):
        """Clear all buffered sentences."""
        while not self.sentence_queue.empty():
            try:
                self.sentence_queue.get_nowait()
            except Empty:
                break

    def get_data_age(self) -> float:
        """
        Get age of last received data.

        Returns:
            Age in seconds since last sentence received
        """
        if self.last_sentence_time == 0:
            return float('inf')

        return time.time() - self.last_sentence_time

    def get_statistics(self) -> dict:
        """Get reader statistics."""
        return {
            'initialized': self.initialized,
            'replay_mode': self.replay_mode,
            'sentences_received': self.sentences_received,
            'sentences_read': self.sentences_read,
            'sentences_dropped': self.sentences_dropped,
            'queue_size': self.sentence_queue.qsize(),
            'data_age': self.get_data_age(),
            'serial_port': self.serial_port,
            'baud_rate': self.baud_rate
        }

    def cleanup(self):
        """Cleanup resources."""
        self.running = False

        # Wait for reader thread to finish
        if self.reader_thread and self.reader_thread.is_alive():
            self.reader_thread.join(timeout=2.0)

        # Close serial connection
        if self.serial_conn:
            try:
                self.serial_conn.close()
            except serial.SerialException as e:
                logger.warning("NMEA: Error closing %s: %s", self.serial_port, e)
            self.serial_conn = None

        # Clear queue
        self.flush_buffer()

        self.initialized = False
        logger.info("NMEA: Cleanup completed")
