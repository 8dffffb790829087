"""
Command-line interface for the orrery engine.

Usage:
    # Positions of every body today
    python -m orrery positions

    # Selected bodies on a given date, in AU
    python -m orrery positions --date 2024-03-20 --bodies earth mars --units AU

    # Run the clock for 10 real seconds at 60 frames per second and 100x acceleration
    python -m orrery simulate --date 2024-01-01 --acceleration 100 --seconds 10 --fps 60

    # Comet radii and activity
    python -m orrery comets --date 1986-02-09
"""

import argparse
import logging
import sys

from orrery.bodies import SUN_KEY
from orrery.clock import ClockConfig, SimulationClock
from orrery.constants import COMET_ACTIVITY_RADIUS, DAYS_PER_SECOND, MAX_DAYS_PER_TICK, SCENE_UNITS_PER_AU
from orrery.engine import OrbitalEngine
from orrery.errors import OrreryError, UnknownBody
from orrery.time_base import date_to_julian, now

logger = logging.getLogger('orrery')


def _add_common_args(parser):
    parser.add_argument(
        '--date',
        type=str,
        default=None,
        help='Simulated date as YYYY-MM-DD (default: today, UTC)'
    )
    parser.add_argument(
        '--bodies',
        type=str,
        nargs='+',
        default=None,
        help='Body keys to report (default: every tracked body)'
    )
    parser.add_argument(
        '--units',
        choices=['scene', 'AU'],
        default='scene',
        help='Distance units of the printed positions'
    )


def _setup_positions_parser(subparsers):
    """
    Set up the positions subcommand parser.

    Parameters
    ----------
    subparsers : argparse._SubParsersAction
        The subparsers object from the main parser

    Returns
    -------
    argparse.ArgumentParser
        The configured positions parser
    """
    positions_parser = subparsers.add_parser(
        'positions',
        help='Print heliocentric positions for a date',
        description='Resolve the heliocentric position of each tracked body at 00:00 UTC of a date.'
    )
    _add_common_args(positions_parser)
    return positions_parser


def _setup_simulate_parser(subparsers):
    """
    Set up the simulate subcommand parser.

    Parameters
    ----------
    subparsers : argparse._SubParsersAction
        The subparsers object from the main parser

    Returns
    -------
    argparse.ArgumentParser
        The configured simulate parser
    """
    simulate_parser = subparsers.add_parser(
        'simulate',
        help='Advance the simulation clock tick by tick',
        description='Advance the simulation clock at a fixed frame rate and print the final state.'
    )
    _add_common_args(simulate_parser)
    simulate_parser.add_argument(
        '--acceleration',
        type=float,
        default=1.0,
        help='Time acceleration factor (0 freezes time)'
    )
    simulate_parser.add_argument(
        '--seconds',
        type=float,
        default=10.0,
        help='Real seconds to simulate'
    )
    simulate_parser.add_argument(
        '--fps',
        type=float,
        default=60.0,
        help='Ticks per real second'
    )
    simulate_parser.add_argument(
        '--days-per-second',
        type=float,
        default=DAYS_PER_SECOND,
        help='Simulated days per real second at 1x acceleration'
    )
    simulate_parser.add_argument(
        '--cap',
        type=float,
        default=MAX_DAYS_PER_TICK,
        help='Maximum simulated days per tick'
    )
    return simulate_parser


def _setup_comets_parser(subparsers):
    comets_parser = subparsers.add_parser(
        'comets',
        help='Print comet radii and activity',
        description='Resolve each comet and report whether it is inside the activity radius.'
    )
    comets_parser.add_argument('--date', type=str, default=None, help='Simulated date as YYYY-MM-DD')
    comets_parser.add_argument(
        '--threshold',
        type=float,
        default=COMET_ACTIVITY_RADIUS,
        help='Activity radius in scene units'
    )
    return comets_parser


def _start_date(args):
    return date_to_julian(now() if args.date is None else args.date)


def _print_positions(engine, julian_date, keys, units):
    scale = 1.0 if units == 'scene' else 1.0 / SCENE_UNITS_PER_AU
    positions = engine.resolve_all(julian_date)
    print(f"# {engine.format_date(julian_date)} (JD {julian_date:.5f}), units: {units}")
    print(f"# {'body':<16s} {'x':>14s} {'y':>14s} {'z':>14s} {'r':>14s}")
    for key in keys:
        if key not in engine:
            raise UnknownBody(f"Unknown body '{key}'")
        x, y, z = positions[key] * scale
        r = 0.0 if key == SUN_KEY else float(engine.resolve(key, julian_date).r) * scale
        print(f"  {key:<16s} {x:14.6f} {y:14.6f} {z:14.6f} {r:14.6f}")


def positions(args):
    engine = OrbitalEngine(clock=SimulationClock(julian_date=_start_date(args)))
    keys = engine.keys if args.bodies is None else args.bodies
    _print_positions(engine, engine.clock.julian_date, keys, args.units)


def simulate(args):
    config = ClockConfig(days_per_second=args.days_per_second, max_days_per_tick=args.cap)
    clock = SimulationClock(julian_date=_start_date(args), acceleration=args.acceleration, config=config)
    engine = OrbitalEngine(clock=clock)

    if args.fps <= 0.0:
        raise OrreryError(f"--fps must be positive, got {args.fps}")
    dt = 1.0 / args.fps
    n_ticks = int(round(args.seconds * args.fps))

    start = clock.julian_date
    for _ in range(n_ticks):
        engine.advance_clock(dt)
    logger.info("Advanced %d ticks: %.3f simulated days", n_ticks, clock.julian_date - start)

    keys = engine.keys if args.bodies is None else args.bodies
    _print_positions(engine, clock.julian_date, keys, args.units)


def comets(args):
    engine = OrbitalEngine(clock=SimulationClock(julian_date=_start_date(args)))
    activity = engine.comet_activity(threshold=args.threshold)
    print(f"# {engine.format_date()} (JD {engine.clock.julian_date:.5f}), threshold: {args.threshold} scene units")
    for key, comet in engine.comets.items():
        r = float(engine.resolve(key).r)
        state = 'active' if activity[key] else 'inactive'
        print(f"  {key:<16s} {comet.name:<16s} r={r:10.4f} {state}")


def main(argv=None):
    """Main entry point for the orrery CLI."""
    parser = argparse.ArgumentParser(
        description="Orrery - heliocentric Kepler positions of planets, dwarf planets, asteroids and comets",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    # Create subparsers for different commands
    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    subparsers.required = True

    # Set up subcommand parsers
    _setup_positions_parser(subparsers)
    _setup_simulate_parser(subparsers)
    _setup_comets_parser(subparsers)

    # Parse arguments
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s')

    # Route to appropriate command handler
    try:
        if args.command == 'positions':
            positions(args)
        elif args.command == 'simulate':
            simulate(args)
        elif args.command == 'comets':
            comets(args)
    except (OrreryError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == '__main__':
    sys.exit(main())
