#!/usr/bin/env python3
import sys
import csv
import numpy as np
import matplotlib.pyplot as plt

RAD_TO_DEG = 180.0 / np.pi

# ------------------------------------------
# Read CSV file
# ------------------------------------------
if len(sys.argv) < 2:
    print("Usage: plot_rot.py <rotlog.csv>")
    sys.exit(1)

csvfile = sys.argv[1]

# Columns (in order)
# timestamp_ms, heading_rad, rot_rad_s

t_ms = []
heading = []
rot = []

with open(csvfile, "r") as f:
    reader = csv.reader(f)
    header = next(reader, None)   # skip header

    for row in reader:
        if len(row) < 3:
            continue

        try:
            t_ms.append(int(row[0]))
        except ValueError:
            continue

        # Heading is empty until the first input value arrives
        try:
            heading.append(float(row[1]))
        except ValueError:
            heading.append(np.nan)

        try:
            rot.append(float(row[2]))
        except ValueError:
            rot.append(np.nan)

if not t_ms:
    print("No rate of turn rows found in log!")
    sys.exit(1)

t_s = (np.array(t_ms) - t_ms[0]) / 1000.0
heading_deg = np.array(heading) * RAD_TO_DEG

# Degenerate windows are logged as inf
rot = np.array(rot)
rot[~np.isfinite(rot)] = np.nan
rot_deg_min = rot * RAD_TO_DEG * 60.0

# ------------------------------------------
# Plot
# ------------------------------------------
fig, (ax_heading, ax_rot) = plt.subplots(2, 1, sharex=True, figsize=(10, 7))

ax_heading.plot(t_s, heading_deg, 'b.', markersize=3, label="Heading")
ax_heading.set_ylabel("Heading (°)")
ax_heading.set_ylim(0, 360)
ax_heading.grid(True)
ax_heading.legend()

ax_rot.plot(t_s, rot_deg_min, 'r-', linewidth=1.5, label="Rate of turn")
ax_rot.axhline(0.0, color='k', linewidth=0.5)
ax_rot.set_xlabel("Time (s)")
ax_rot.set_ylabel("ROT (°/min)")
ax_rot.grid(True)
ax_rot.legend()

fig.suptitle("Heading and Rate of Turn")
plt.tight_layout()
plt.show()


#Sample run command: python3 plot_rot.py rotlog.csv
