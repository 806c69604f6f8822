"""
Line-oriented reader for "lat,lon" position records.
"""

import logging
import re
from typing import Iterable, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)

_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"

# Leading whitespace, a number, a comma, optional whitespace, a number.
# Anything after the second number is ignored.
_LAT_LON = re.compile(rf"^\s*({_NUMBER}),\s*({_NUMBER})")


class LatLonReader:
    """
    Parser for text records holding a latitude,longitude pair.

    Each line that starts with two comma-separated decimal numbers yields
    one pair. Other lines (headers, comments, garbage) are skipped and
    counted as parse errors; blank lines are skipped silently.
    """

    def __init__(self):
        self.line_count = 0
        self.record_count = 0
        self.parse_errors = 0

    def parse_line(self, line: str) -> Optional[Tuple[float, float]]:
        """
        Parse a single line.

        Args:
            line: Text line, with or without terminator

        Returns:
            (lat, lon) in degrees, or None if the line holds no record
        """
        match = _LAT_LON.match(line)
        if match is None:
            return None
        return float(match.group(1)), float(match.group(2))

    def read(self, lines: Iterable[str]) -> Iterator[Tuple[float, float]]:
        """
        Yield every (lat, lon) pair from an iterable of lines.

        Iteration ends when the input is exhausted.

        Args:
            lines: Open text file or any iterable of strings
        """
        for line in lines:
            self.line_count += 1

            record = self.parse_line(line)
            if record is None:
                if line.strip():
                    self.parse_errors += 1
                    logger.warning("Skipping malformed line %d: %r", self.line_count, line.rstrip("\n"))
                continue

            self.record_count += 1
            yield record

    def get_statistics(self) -> dict:
        """Get reader statistics."""
        return {
            'lines': self.line_count,
            'records': self.record_count,
            'parse_errors': self.parse_errors,
        }


def read_lat_long(lines: Iterable[str]) -> Iterator[Tuple[float, float]]:
    """Yield (lat, lon) pairs from lines, skipping malformed ones."""
    return LatLonReader().read(lines)
