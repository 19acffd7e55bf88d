"""
NMEA sentence parsing for heading and course data.
"""

import time
import math
from typing import Optional, Dict, Any
from dataclasses import dataclass


@dataclass
class HeadingFix:
    """Heading and course values carried by one NMEA sentence."""

    sentence_type: str = ""

    # Heading (degrees)
    heading_true_degrees: Optional[float] = None
    heading_magnetic_degrees: Optional[float] = None

    # Course over ground (degrees)
    cog_true_degrees: Optional[float] = None
    cog_magnetic_degrees: Optional[float] = None

    # Magnetic variation, east positive (degrees)
    variation_degrees: Optional[float] = None

    # Time
    timestamp: Optional[float] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = time.time()

    @property
    def timestamp_ms(self) -> int:
        """Receive time in milliseconds since epoch (parse time when not given)."""
        return int(round(self.timestamp * 1000.0))

    @property
    def is_empty(self) -> bool:
        """True when the sentence carried no heading or course."""
        return all(v is None for v in (self.heading_true_degrees,
                                       self.heading_magnetic_degrees,
                                       self.cog_true_degrees,
                                       self.cog_magnetic_degrees))

    @staticmethod
    def _radians(degrees: Optional[float]) -> Optional[float]:
        if degrees is None:
            return None
        return math.radians(degrees % 360.0)

    @property
    def heading_true_radians(self) -> Optional[float]:
        return self._radians(self.heading_true_degrees)

    @property
    def heading_magnetic_radians(self) -> Optional[float]:
        return self._radians(self.heading_magnetic_degrees)

    @property
    def cog_true_radians(self) -> Optional[float]:
        return self._radians(self.cog_true_degrees)

    @property
    def cog_magnetic_radians(self) -> Optional[float]:
        return self._radians(self.cog_magnetic_degrees)


class NMEAParser:
    """
    Parser for NMEA 0183 heading and course sentences.

    Supports:
    - HDT: Heading, true
    - HDM: Heading, magnetic
    - HDG: Heading, deviation and variation
    - RMC: Recommended Minimum Navigation Information (course over ground)
    - VTG: Track made good and ground speed
    """

    def __init__(self):
        # Last variation seen, applied to sentences that do not carry one
        self.variation_degrees: Optional[float] = None
        self.sentence_count = 0
        self.parse_errors = 0

    def calculate_checksum(self, sentence: str) -> str:
        """Calculate NMEA checksum."""
        checksum = 0
        for char in sentence:
            checksum ^= ord(char)
        return f"{checksum:02X}"

    def validate_checksum(self, sentence: str) -> bool:
        """Validate NMEA sentence checksum."""
        if '*' not in sentence:
            return False

        data, checksum = sentence.split('*', 1)
        data = data[1:]  # Remove '$' prefix

        calculated = self.calculate_checksum(data)
        return calculated == checksum.strip().upper()

    @staticmethod
    def parse_float(value: str) -> Optional[float]:
        """Parse an optional numeric field."""
        if not value:
            return None
        return float(value)

    def parse_signed(self, value: str, direction: str) -> Optional[float]:
        """
        Parse a magnitude with an E/W direction letter.

        Returns:
            East positive, west negative
        """
        magnitude = self.parse_float(value)
        if magnitude is None:
            return None
        if direction.startswith('W'):
            return -magnitude
        return magnitude

    def parse_hdt(self, fields: list, fix: HeadingFix) -> bool:
        """
        Parse HDT sentence: Heading, true.

        Format: $--HDT,heading,T*checksum
        """
        if len(fields) < 2:
            return False

        try:
            fix.heading_true_degrees = self.parse_float(fields[1])
            return True
        except ValueError:
            return False

    def parse_hdm(self, fields: list, fix: HeadingFix) -> bool:
        """
        Parse HDM sentence: Heading, magnetic.

        Format: $--HDM,heading,M*checksum
        """
        if len(fields) < 2:
            return False

        try:
            fix.heading_magnetic_degrees = self.parse_float(fields[1])
            if fix.heading_magnetic_degrees is not None and self.variation_degrees is not None:
                fix.heading_true_degrees = fix.heading_magnetic_degrees + self.variation_degrees
            return True
        except ValueError:
            return False

    def parse_hdg(self, fields: list, fix: HeadingFix) -> bool:
        """
        Parse HDG sentence: Heading, deviation and variation.

        Format: $--HDG,sensor_heading,deviation,dev_dir,variation,var_dir*checksum

        Magnetic heading is the sensor heading corrected for deviation;
        true heading additionally applies the variation.
        """
        if len(fields) < 6:
            return False

        try:
            sensor_heading = self.parse_float(fields[1])
            deviation = self.parse_signed(fields[2], fields[3])
            variation = self.parse_signed(fields[4], fields[5])

            if variation is not None:
                self.variation_degrees = variation
            fix.variation_degrees = self.variation_degrees

            if sensor_heading is None:
                return True

            magnetic = sensor_heading + (deviation or 0.0)
            fix.heading_magnetic_degrees = magnetic
            if self.variation_degrees is not None:
                fix.heading_true_degrees = magnetic + self.variation_degrees

            return True

        except ValueError:
            return False

    def parse_rmc(self, fields: list, fix: HeadingFix) -> bool:
        """
        Parse RMC sentence: Recommended Minimum Navigation Information.

        Format: $GPRMC,time,status,lat,lat_dir,lon,lon_dir,speed,course,date,mag_var,mag_var_dir*checksum
        """
        if len(fields) < 12:
            return False

        try:
            # Status (A=active, V=void)
            if fields[2] != 'A':
                return True

            variation = self.parse_signed(fields[10], fields[11])
            if variation is not None:
                self.variation_degrees = variation
            fix.variation_degrees = self.variation_degrees

            fix.cog_true_degrees = self.parse_float(fields[8])
            if fix.cog_true_degrees is not None and self.variation_degrees is not None:
                fix.cog_magnetic_degrees = fix.cog_true_degrees - self.variation_degrees

            return True

        except ValueError:
            return False

    def parse_vtg(self, fields: list, fix: HeadingFix) -> bool:
        """
        Parse VTG sentence: Track made good and ground speed.

        Format: $--VTG,course_true,T,course_mag,M,speed_kn,N,speed_kmh,K,mode*checksum
        """
        if len(fields) < 5:
            return False

        try:
            # NMEA 4.1 mode indicator N means data not valid
            if len(fields) > 9 and fields[9] == 'N':
                return True

            fix.cog_true_degrees = self.parse_float(fields[1])
            fix.cog_magnetic_degrees = self.parse_float(fields[3])
            return True

        except ValueError:
            return False

    def parse_sentence(self, sentence: str,
                       timestamp: Optional[float] = None) -> Optional[HeadingFix]:
        """
        Parse a single NMEA sentence.

        Args:
            sentence: NMEA sentence string
            timestamp: Receive time in seconds since epoch (defaults to now)

        Returns:
            HeadingFix if the sentence carried a heading or course, None otherwise
        """
        self.sentence_count += 1

        # Clean up sentence
        sentence = sentence.strip()

        # Validate format
        if not sentence.startswith('$') or '*' not in sentence:
            self.parse_errors += 1
            return None

        # Validate checksum
        if not self.validate_checksum(sentence):
            self.parse_errors += 1
            return None

        # Split sentence
        data_part = sentence.split('*')[0]
        fields = data_part.split(',')

        sentence_type = fields[0][1:]  # Remove '$' prefix
        fix = HeadingFix(sentence_type=sentence_type[-3:], timestamp=timestamp)

        # Parse based on sentence type
        if sentence_type.endswith('HDT'):
            success = self.parse_hdt(fields, fix)
        elif sentence_type.endswith('HDM'):
            success = self.parse_hdm(fields, fix)
        elif sentence_type.endswith('HDG'):
            success = self.parse_hdg(fields, fix)
        elif sentence_type.endswith('RMC'):
            success = self.parse_rmc(fields, fix)
        elif sentence_type.endswith('VTG'):
            success = self.parse_vtg(fields, fix)
        else:
            # Unsupported sentence type, but not an error
            return None

        if not success:
            self.parse_errors += 1
            return None

        if fix.is_empty:
            return None

        return fix

    def get_statistics(self) -> Dict[str, Any]:
        """Get parser statistics."""
        return {
            'sentences_processed': self.sentence_count,
            'parse_errors': self.parse_errors,
            'error_rate': self.parse_errors / max(1, self.sentence_count),
            'variation_degrees': self.variation_degrees
        }
