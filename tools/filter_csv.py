#!/usr/bin/env python3
"""
Batch-filter a CSV track with pandas.

Input columns: lat, lon and optionally dt (seconds since previous fix;
1.0 when missing). Output adds filt_lat, filt_lon, bearing_deg, speed_mph.

Sample run: python3 filter_csv.py track.csv track_filtered.csv --noise 2.0
"""

import argparse
import os
import sys

import pandas as pd

# Add package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from gpskalman import GPSTrack


def filter_track(df: pd.DataFrame, noise: float = 1.0, skip_singular: bool = True) -> pd.DataFrame:
    """
    Run a GPSTrack over every row of df.

    Rows whose update is skipped repeat the previous estimate.
    """
    if "lat" not in df.columns or "lon" not in df.columns:
        raise ValueError("CSV must have 'lat' and 'lon' columns")

    track = GPSTrack(noise)
    dts = df["dt"] if "dt" in df.columns else pd.Series(1.0, index=df.index)

    rows = []
    for lat, lon, dt in zip(df["lat"], df["lon"], dts):
        track.observe(float(lat), float(lon), float(dt), skip_singular=skip_singular)
        k = track.kinematics()
        rows.append((k.lat, k.lon, k.bearing_degrees, k.speed_mph))

    out = df.copy()
    filtered = pd.DataFrame(rows, columns=["filt_lat", "filt_lon", "bearing_deg", "speed_mph"], index=df.index)
    return pd.concat([out, filtered], axis=1)


def main():
    parser = argparse.ArgumentParser(description="Kalman-filter a lat/lon CSV track")
    parser.add_argument("input", help="CSV with lat, lon[, dt] columns")
    parser.add_argument("output", help="Destination CSV")
    parser.add_argument("--noise", type=float, default=1.0, help="Observation noise multiplier")
    args = parser.parse_args()

    df = pd.read_csv(args.input)
    result = filter_track(df, noise=args.noise)
    result.to_csv(args.output, index=False)

    print(f"Saved {len(result)} rows to {args.output}")


if __name__ == "__main__":
    main()
