#!/usr/bin/env python3
"""
Basic usage example of the rate of turn estimator.

This example demonstrates how to use the core estimation algorithms
without specific hardware dependencies.
"""

import sys
import os
import numpy as np

# Add core modules to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from core.rot import RateOfTurnEstimator
from core.math import wrap_angle

def simulate_vessel_heading(duration=120, dt=1.0):
    """
    Simulate a vessel turning through north for testing.

    Args:
        duration: Simulation duration in seconds
        dt: Time step in seconds

    Yields:
        (timestamp_ms, heading, true_rate) tuples
    """
    # Starting heading 300°, turning to starboard
    heading = np.radians(300.0)

    # Noise parameters
    compass_noise = np.radians(0.5)  # rad

    t = 0.0
    while t < duration:
        # Slow turn for the first minute, then steady at a faster rate
        true_rate = np.radians(1.5) if t < 60 else np.radians(3.0)  # rad/s

        measured = wrap_angle(heading + np.random.normal(0, compass_noise))
        yield int(t * 1000), measured, true_rate

        heading = wrap_angle(heading + true_rate * dt)
        t += dt

def main():
    """Main example function."""
    print("Rate of Turn Estimator - Basic Usage Example")
    print("=" * 50)

    estimates = []
    estimator = RateOfTurnEstimator(capacity=10, sink=estimates.append)

    print(f"Initialized estimator with a {estimator.capacity} sample window")
    print()

    print("Starting simulation (turn through north, 120 seconds)...")

    for timestamp, heading, true_rate in simulate_vessel_heading(duration=120, dt=1.0):
        rate = estimator.update(timestamp, heading)

        if rate is not None and timestamp % 10000 == 0:
            print(f"Time: {timestamp / 1000:5.1f}s  "
                  f"Heading: {np.degrees(heading):6.1f}°  "
                  f"ROT: {np.degrees(rate):5.2f}°/s (true {np.degrees(true_rate):4.2f}°/s)")

    print("\nSimulation completed!")

    # Final statistics
    stats = estimator.get_statistics()
    print("\n=== Final Statistics ===")
    print(f"Samples: {stats['samples']}")
    print(f"Estimates: {stats['estimates']}")
    print(f"Mean ROT: {np.degrees(np.mean(estimates)):.2f}°/s")

    estimator.close()

if __name__ == "__main__":
    main()
