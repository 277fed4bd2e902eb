"""
Airport Control Tower Simulation - Main Entry Point

This module serves as the command line entry point for the simulation.
The code is split into separate modules:

- tasks.py: Task types and circular task lists
- aircraft.py: Aircraft classes, characteristics, fuel and cargo
- ground_operations.py: Gates and terminals
- aircraft_queue.py: Landing (priority) and takeoff (FIFO) queues
- control_tower.py: Per-tick arbitration of runway and gates
- save_files.py: Plain-text save/load of a whole tower
- statistical_analysis.py: Per-tick statistics, JSON reports and charts
- terminal_feed.py: Console status feed
- simulation.py: Demo airport and simulation loop

Examples
--------
    python main.py --ticks 20
    python main.py --load-dir saves/default --ticks 50 --save-dir saves/after
    python main.py --ticks 100 --quiet --stats-json stats.json --plot-file activity.png
"""

import argparse
import sys
from typing import List, Optional

from control_tower import ControlTower
from save_files import MalformedSaveError, load_control_tower, save_control_tower
from simulation import create_default_tower, run_simulation
from terminal_feed import TerminalFeed


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Airport control tower simulation")
    parser.add_argument("--ticks", type=int, default=20, help="Number of ticks to simulate")
    parser.add_argument("--load-dir", default=None,
                        help="Directory holding a saved tower (default: built-in demo airport)")
    parser.add_argument("--save-dir", default=None,
                        help="Directory to write the tower to after the run")
    parser.add_argument("--stats-json", default=None, help="Write per-tick statistics to this JSON file")
    parser.add_argument("--plot", action="store_true", help="Show queue and gate charts after the run")
    parser.add_argument("--plot-file", default=None, help="Save queue and gate charts to this image file")
    parser.add_argument("--quiet", action="store_true", help="Suppress the per-event status feed")
    parser.add_argument(
        "--emergency",
        action="append",
        default=[],
        metavar="CALLSIGN",
        help="Declare an emergency on this aircraft before the run (repeatable)",
    )
    return parser.parse_args(argv)


def build_tower(args: argparse.Namespace, feed: TerminalFeed) -> ControlTower:
    if args.load_dir:
        tower = load_control_tower(args.load_dir, feed=feed)
    else:
        tower = create_default_tower(feed=feed)
    for callsign in args.emergency:
        aircraft = tower.get_aircraft(callsign)
        if aircraft is None:
            raise ValueError(f"No aircraft with callsign {callsign}")
        aircraft.declare_emergency()
        feed.announce_clearance(f"{callsign} declared an emergency")
    return tower


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    feed = TerminalFeed(echo=not args.quiet)

    print("=" * 60)
    print(" AIRPORT CONTROL TOWER SIMULATION")
    print("=" * 60)

    try:
        tower = build_tower(args, feed)
    except (MalformedSaveError, OSError, ValueError) as e:
        print(f"✗ Error: could not set up the tower: {e}", file=sys.stderr)
        return 1

    print(tower)
    statistics = run_simulation(tower, args.ticks)
    print(tower)
    statistics.print_summary()

    if args.stats_json:
        statistics.to_json(args.stats_json)
    if args.save_dir:
        try:
            save_control_tower(tower, args.save_dir)
        except OSError as e:
            print(f"✗ Error: could not save the tower: {e}", file=sys.stderr)
            return 1
        print(f"✓ Tower saved to: {args.save_dir}")
    if args.plot or args.plot_file:
        statistics.plot_history(save_path=args.plot_file, show=args.plot)
    return 0


if __name__ == '__main__':
    sys.exit(main())
