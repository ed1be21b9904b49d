#!/usr/bin/env python3
"""
Summarize a Strong CSV export for one year. Uses liftwrap directly.
Usage: python scripts/summarize_export.py path/to/strong.csv [year] [kg|lbs]
"""
from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from liftwrap.ingest import ParseError, available_years, build_sessions, parse_rows
from liftwrap.metrics import aggregate_year


def main() -> None:
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    path = Path(sys.argv[1])
    content = path.read_text(encoding="utf-8", errors="replace")
    try:
        rows = parse_rows(content)
    except ParseError as exc:
        print(f"Could not read {path}: {exc}")
        sys.exit(1)

    sessions = build_sessions(rows)
    years = available_years(sessions)
    print(f"Rows: {len(rows)}  sessions: {len(sessions)}  years: {years}")
    if not years:
        print("No dated sessions found. Exiting.")
        sys.exit(1)

    year = int(sys.argv[2]) if len(sys.argv) > 2 else years[0]
    units = sys.argv[3] if len(sys.argv) > 3 else "lbs"
    stats = aggregate_year(sessions, year, units)

    print("\n" + "=" * 60)
    print(f"YEAR IN REVIEW {stats.year}")
    print("=" * 60)
    print(f"Workouts: {stats.total_workouts}  time: {stats.total_hours}h  volume: {stats.total_volume:,.0f} {stats.units}")
    if stats.has_lift_data:
        print(f"Heaviest lift: {stats.heaviest_lift.name} @ {stats.heaviest_lift.weight} {stats.units}")
    if stats.most_reps_set.exercise_name:
        m = stats.most_reps_set
        print(f"Most reps: {m.exercise_name} {m.reps} x {m.weight} {stats.units}")
    if stats.longest_workout.name:
        print(f"Longest workout: {stats.longest_workout.name} ({stats.longest_workout.duration_minutes} min)")
    streak = stats.longest_week_streak
    print(f"Longest weekly streak: {streak.weeks} weeks ({streak.start} to {streak.end})")
    print(f"Most active month: {stats.most_active_month or '-'}")
    print("\nTop exercises:")
    for ex in stats.top_exercises:
        print(f"  {ex.name}: {ex.count} sessions")
    print("\nBody part split:")
    for part, count in stats.body_part_split.items():
        print(f"  {part}: {count}")


if __name__ == "__main__":
    main()
