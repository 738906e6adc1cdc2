"""
Command line entry point.

Usage:
    python -m healthagg sources/HKStepCount.csv sources/HKSleepAnalysis.csv
    python -m healthagg sources/HK*.csv --weekly --verbose
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .engine import HealthEngine
from .reader import read_health_csv
from .summary import group_by_week

logger = logging.getLogger('healthagg')


def create_parser() -> argparse.ArgumentParser:
    """Create and return the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog='healthagg',
        description='Merge Health Export CSV files into per-day health records.',
    )
    parser.add_argument(
        'paths',
        nargs='+',
        type=Path,
        help='Health Export CSV files to aggregate (one metric per file)'
    )
    parser.add_argument(
        '--weekly',
        action='store_true',
        help='Print weekly summaries instead of daily records'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Log every skipped row'
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = create_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    rows = []
    for path in args.paths:
        try:
            rows.extend(read_health_csv(path))
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not read {path}: {e}")
            return 1

    result = HealthEngine().process(rows)

    if result.unclaimed:
        logger.warning(f"{result.unclaimed} rows had a metric type no parser handles")
    if result.errors:
        logger.warning(f"{len(result.errors)} rows skipped")

    if args.weekly:
        output = [week.to_dict() for week in group_by_week(result.days)]
    else:
        output = [day.to_dict() for day in result.days]

    print(json.dumps(output, indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
