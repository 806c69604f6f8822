#!/usr/bin/env python3
"""
Plot raw fixes against the filtered track produced by filter_csv.py.

Sample run: python3 plot_track.py track_filtered.csv
"""

import sys

import matplotlib.pyplot as plt
import pandas as pd

if len(sys.argv) < 2:
    print("Usage: plot_track.py <filtered.csv>")
    sys.exit(1)

df = pd.read_csv(sys.argv[1])

fig, (ax_track, ax_speed) = plt.subplots(1, 2, figsize=(14, 7))

# ------------------------------------------
# Track
# ------------------------------------------
ax_track.scatter(df["lon"], df["lat"], s=12, c='red', label="GPS Fix", alpha=0.7)
ax_track.plot(df["filt_lon"], df["filt_lat"], 'b-', label="Kalman Filter", linewidth=2)
ax_track.set_xlabel("Longitude (deg)")
ax_track.set_ylabel("Latitude (deg)")
ax_track.set_title("Track (raw vs filtered)")
ax_track.grid(True)
ax_track.axis('equal')
ax_track.legend()

# ------------------------------------------
# Speed and bearing
# ------------------------------------------
ax_speed.plot(df.index, df["speed_mph"], 'g-', label="Speed (mph)")
ax_speed.set_xlabel("Observation")
ax_speed.set_ylabel("Speed (mph)")
ax_bearing = ax_speed.twinx()
ax_bearing.plot(df.index, df["bearing_deg"], 'k.', markersize=3, label="Bearing (deg)")
ax_bearing.set_ylabel("Bearing (deg)")
ax_bearing.set_ylim(0, 360)
ax_speed.set_title("Derived kinematics")
ax_speed.grid(True)

plt.tight_layout()
plt.show()
