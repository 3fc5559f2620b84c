#!/usr/bin/env python3
"""
Rocket League Fantasy score publisher CLI

Scores every fantasy team for a week from the JSON data directory and
publishes the results to data/scores/week_{N}.json.

Usage:
    python publish_scores.py --week 3
    python publish_scores.py --week 3 --data-dir data --standings
"""

import argparse
import logging
import sys
from pathlib import Path

from rlfantasy import LeagueStore, PreconditionError, build_standings, publish_week_scores
from rlfantasy.logging_config import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Rocket League Fantasy score publisher")
    parser.add_argument(
        "--week", "-w",
        type=int,
        required=True,
        help="Week number to publish",
    )
    parser.add_argument(
        "--data-dir", "-d",
        default="data",
        help="Path to data directory",
    )
    parser.add_argument(
        "--standings",
        action="store_true",
        help="Print season standings after publishing",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Do not write an audit log under <data-dir>/logs",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress detailed output",
    )

    args = parser.parse_args()

    data_dir = Path(args.data_dir)
    logger = setup_logging(
        log_dir=data_dir / "logs",
        job="publish",
        week=args.week,
        console_level=logging.WARNING if args.quiet else logging.INFO,
        log_to_file=not args.no_log_file,
    )
    if not (data_dir / "rosters.json").exists():
        logger.error(f"Rosters file not found: {data_dir / 'rosters.json'}")
        sys.exit(1)

    store = LeagueStore(data_dir)

    try:
        scores = publish_week_scores(store, args.week)
    except KeyError as e:
        logger.error(str(e))
        sys.exit(1)
    except PreconditionError as e:
        logger.error(f"Publish aborted: {e}")
        sys.exit(1)

    print("\n" + "=" * 60)
    print(f"WEEK {args.week} SCORES")
    print("=" * 60)

    for rank, score in enumerate(sorted(scores, key=lambda s: -s.total_points), 1):
        print(f"  {rank}. {score.team_name}: {score.total_points} pts")
        if args.quiet:
            continue
        for entry in score.breakdown:
            line = (
                f"      {entry.role}: {entry.player_name} {entry.total_points} "
                f"({entry.games_used} games, base {entry.base_points}, bonus {entry.role_bonus})"
            )
            if entry.substitution:
                line += (
                    f" <- {entry.substitution.player_name} "
                    f"(sub-{entry.substitution.sub_order}, {entry.substitution.games_filled} games)"
                )
            print(line)

    if args.standings:
        print("\n" + "=" * 60)
        print("STANDINGS")
        print("=" * 60)
        for entry in build_standings(store):
            print(f"  {entry['rank']}. {entry['team_name']}: {entry['total_points']} pts")


if __name__ == "__main__":
    main()
