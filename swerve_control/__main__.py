"""
Main entry point when running the swerve_control module with python -m.

Runs a simulated drive to position and logs the run to a results directory.
"""

import argparse
import logging
import sys

from .data_collector import DataCollector
from .geometry import Pose
from .runner import SimulationRunner, setup_logging


def parse_args(args=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Simulate the swerve motion core driving to a target pose"
    )
    parser.add_argument("--target-x", type=float, default=2.0, help="Target x position (m)")
    parser.add_argument("--target-y", type=float, default=0.0, help="Target y position (m)")
    parser.add_argument(
        "--target-heading", type=float, default=0.0, help="Target heading (degrees)"
    )
    parser.add_argument(
        "--speed", type=float, default=None, help="Target linear speed (m/s, default from config)"
    )
    parser.add_argument(
        "--max-cycles", type=int, default=None, help="Cycle limit (default from config)"
    )
    parser.add_argument(
        "--realtime", action="store_true", help="Pace the control loop to wall-clock time"
    )
    parser.add_argument(
        "--output-dir", type=str, default=".", help="Base directory for run output"
    )
    parser.add_argument("--no-log", action="store_true", help="Do not write CSV run data")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging with timestamps"
    )
    return parser.parse_args(args)


def main(args=None) -> int:
    options = parse_args(args)
    setup_logging(options.verbose)

    target = Pose.from_degrees(options.target_x, options.target_y, options.target_heading)

    try:
        if options.no_log:
            runner = SimulationRunner(target, options.speed, max_cycles=options.max_cycles, realtime=options.realtime)
            result = runner.run()
        else:
            with DataCollector(output_dir=options.output_dir) as collector:
                runner = SimulationRunner(
                    target,
                    options.speed,
                    max_cycles=options.max_cycles,
                    realtime=options.realtime,
                    data_collector=collector,
                )
                result = runner.run()
    except ValueError as e:
        logging.error(f"Error: {e}")
        return 1

    return 0 if result.finished else 2


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logging.info("\nExiting...")
        sys.exit(0)
