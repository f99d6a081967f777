"""
Seed a demo weight log: ~6 months of noisy, downward-trending weigh-ins with a
few multi-day gaps, plus a goal 10 kg under the starting weight.

Usage:
    python generatedata.py [path/to/weights.json] [--force]

An existing log is left alone unless --force is given, in which case it is
replaced by the demo data.
"""
import argparse
import logging
import random
import sys
from datetime import timedelta

from config import Config
from storage import InMemoryRepository, JsonFileRepository
from tracker import WeightTracker

logger = logging.getLogger(__name__)


def generate_series(start_date, days=180, start_weight=90.0, total_loss=7.0, rng=random):
    """Return a list of (date, weight) tuples with random logging gaps."""
    gap_starts = set(rng.sample(range(0, days - 15), 5))
    series = []
    i = 0
    while i < days:
        if i in gap_starts:
            i += rng.randint(7, 10)  # skip 7-10 days for a gap
            continue
        trend = -total_loss * (i / days)
        noise = rng.uniform(-0.7, 0.7)
        series.append((start_date + timedelta(days=i), round(start_weight + trend + noise, 1)))
        i += 1
    return series


def seed(tracker, series, goal=None):
    for d, w in series:
        tracker.add_entry(d, w)
    if goal is not None:
        tracker.set_goal(goal)
    return tracker


def main(argv=None):
    config = Config.from_env()
    ap = argparse.ArgumentParser(description="Seed a demo weight log")
    ap.add_argument("path", nargs="?", default=config.data_path, help="JSON file to write (default: %(default)s)")
    ap.add_argument("--force", action="store_true", help="Replace an existing log")
    args = ap.parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.WARNING)

    target = JsonFileRepository(args.path)
    existing = len(target.load_entries())
    if existing and not args.force:
        print(f"{args.path} already holds {existing} entries; use --force to replace them", file=sys.stderr)
        return 1

    start_weight = 90.0
    series = generate_series(config.today() - timedelta(days=180), start_weight=start_weight)
    # build in memory, then write the file once
    staging = InMemoryRepository()
    seed(WeightTracker.load(staging), series, goal=start_weight - 10.0)
    target.save_all(staging.load_entries(), staging.load_goal())
    print(f"Wrote {len(series)} entries to {args.path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
