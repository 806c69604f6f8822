#!/usr/bin/env python3
"""
Command line front end: smooth "lat,lon" lines read from files or stdin.

Sample run:
    gpskalman --noise 2.0 track.txt > smoothed.csv
"""

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from .config import Config
from .errors import GPSKalmanError, InvalidInputError, SingularMatrixError
from .sensors import GPSTrack, LatLonReader, DerivedKinematics

logger = logging.getLogger(__name__)

FIELD_GETTERS = {
    "lat": lambda k: k.lat,
    "lon": lambda k: k.lon,
    "vlat": lambda k: k.velocity_lat,
    "vlon": lambda k: k.velocity_lon,
    "bearing": lambda k: k.bearing_degrees,
    "mph": lambda k: k.speed_mph,
}


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None):
    """Configure root logging for command line use."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        filename=log_file,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gpskalman",
        description="Smooth a GPS track with a constant velocity Kalman filter.",
    )
    parser.add_argument("files", nargs="*", help="Input files of lat,lon lines (default: stdin)")
    parser.add_argument("--config", help="JSON configuration file")
    parser.add_argument("--noise", type=float, help="Observation noise multiplier (> 0)")
    parser.add_argument("--interval", type=float,
                        help="Seconds between consecutive observations (> 0)")
    parser.add_argument("--skip-singular", action="store_true", default=None,
                        help="Drop observations that make the filter singular instead of failing")
    parser.add_argument("--precision", type=int, help="Decimal places in the output")
    parser.add_argument("--fields", help=f"Comma separated output fields from {sorted(FIELD_GETTERS)}")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)")
    return parser


def format_kinematics(kinematics: DerivedKinematics, fields: List[str], precision: int) -> str:
    """One CSV output line."""
    return ",".join(f"{FIELD_GETTERS[name](kinematics):.{precision}f}" for name in fields)


def run(streams: List[TextIO], out: TextIO, config: Config) -> int:
    """
    Filter every record of the given streams as one track.

    Returns:
        Process exit code
    """
    fields = config.output_fields
    unknown = [f for f in fields if f not in FIELD_GETTERS]
    if unknown:
        logger.error("Unknown output fields: %s", ", ".join(unknown))
        return 2

    track = GPSTrack(config.noise)
    reader = LatLonReader()
    interval = config.seconds_per_observation

    for stream in streams:
        for lat, lon in reader.read(stream):
            try:
                applied = track.observe(lat, lon, interval, skip_singular=config.skip_singular)
            except InvalidInputError as e:
                logger.error("Line %d: %s", reader.line_count, e)
                return 1
            except SingularMatrixError as e:
                logger.error("Line %d: filter update failed: %s", reader.line_count, e)
                return 1

            if applied:
                out.write(format_kinematics(track.kinematics(), fields, config.precision) + "\n")

    logger.info("Reader: %s", reader.get_statistics())
    logger.info("Track: %s", track.get_statistics())
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = Config(args.config)
    except GPSKalmanError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    # Command line overrides the configuration file
    if args.noise is not None:
        config.set("noise", args.noise)
    if args.interval is not None:
        config.set("seconds_per_observation", args.interval)
    if args.skip_singular is not None:
        config.set("skip_singular", args.skip_singular)
    if args.precision is not None:
        config.set("output.precision", args.precision)
    if args.fields is not None:
        config.set("output.fields", [f.strip() for f in args.fields.split(",") if f.strip()])
    if args.log_level is not None:
        config.set("log_level", args.log_level)

    setup_logging(config.log_level, config.log_file)

    if not config.noise > 0:
        logger.error("Noise multiplier must be positive, got %s", config.noise)
        return 2
    if not config.seconds_per_observation > 0:
        logger.error("Interval must be positive, got %s", config.seconds_per_observation)
        return 2

    if not args.files:
        return run([sys.stdin], sys.stdout, config)

    streams = []
    try:
        for path in args.files:
            streams.append(open(path, "r"))
        return run(streams, sys.stdout, config)
    except OSError as e:
        logger.error("Cannot read input: %s", e)
        return 1
    finally:
        for stream in streams:
            stream.close()


if __name__ == "__main__":
    sys.exit(main())
