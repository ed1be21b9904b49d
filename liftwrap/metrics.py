"""Deterministic year summary over built sessions: totals, rankings, distributions, bests, streaks."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from functools import reduce
from typing import Hashable, Iterable, Optional, TypeVar

from .config import settings
from .heatmap import heatmap_grid
from .ingest import ParseError, available_years, build_sessions, parse_rows
from .models import (
    BODY_PARTS,
    BodyPart,
    ExerciseCount,
    HeaviestLift,
    LongestWorkout,
    MostRepsSet,
    Units,
    WeekStreak,
    WorkoutSession,
    YearInReviewInput,
    YearInReviewOutput,
    YearStats,
)

K = TypeVar("K", bound=Hashable)

TOP_EXERCISES_LIMIT = 5
WEEK = timedelta(days=7)
# A week-to-week gap may drift by a DST shift and still count as consecutive.
STREAK_TOLERANCE = timedelta(hours=2)

# Fixed English names; strftime("%B") follows the process locale.
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def _tally(keys: Iterable[K]) -> list[tuple[K, int]]:
    """Count keys into (key, count) pairs kept in first-seen order."""
    counts: list[tuple[K, int]] = []
    position: dict[K, int] = {}
    for key in keys:
        i = position.get(key)
        if i is None:
            position[key] = len(counts)
            counts.append((key, 1))
        else:
            counts[i] = (key, counts[i][1] + 1)
    return counts


def _distinct(keys: Iterable[K]) -> list[K]:
    return list(dict.fromkeys(keys))


# --- Running-best reducers (first seen wins unless strictly beaten) ---

def heavier(best: HeaviestLift, candidate: HeaviestLift) -> HeaviestLift:
    return candidate if candidate.weight > best.weight else best


def more_reps(best: MostRepsSet, candidate: MostRepsSet) -> MostRepsSet:
    """More reps wins; equal reps fall back to strictly heavier weight."""
    if candidate.reps > best.reps:
        return candidate
    if candidate.reps == best.reps and candidate.weight > best.weight:
        return candidate
    return best


def longer(best: LongestWorkout, candidate: LongestWorkout) -> LongestWorkout:
    return candidate if candidate.duration_minutes > best.duration_minutes else best


# --- Weekly streak ---

def week_start(moment: datetime) -> datetime:
    """Monday 00:00 of the ISO week containing moment."""
    monday = moment.date() - timedelta(days=moment.weekday())
    return datetime.combine(monday, time.min)


def longest_week_streak(sessions: Iterable[WorkoutSession], today: Optional[date] = None) -> WeekStreak:
    """
    Longest run of consecutive active weeks. Ties keep the earliest run.
    No sessions -> zero weeks, both bounds today.
    """
    starts = sorted({week_start(s.date) for s in sessions if s.date is not None})
    if not starts:
        d = today or date.today()
        return WeekStreak(weeks=0, start=d, end=d)

    best_len, best_start = 1, starts[0]
    run_len, run_start = 1, starts[0]
    for prev, cur in zip(starts, starts[1:]):
        if abs((cur - prev) - WEEK) <= STREAK_TOLERANCE:
            run_len += 1
        else:
            run_len, run_start = 1, cur
        if run_len > best_len:
            best_len, best_start = run_len, run_start

    return WeekStreak(
        weeks=best_len,
        start=best_start.date(),
        end=(best_start + best_len * WEEK).date(),
    )


# --- Aggregation ---

def aggregate_year(
    sessions: Iterable[WorkoutSession],
    year: int,
    units: Units = "lbs",
    today: Optional[date] = None,
) -> YearStats:
    """
    Summarize one calendar year. Sessions are expected in date order (as build_sessions returns);
    order decides ties for bests, most active month and top exercises.
    units is a display label only; no conversion happens here.
    """
    target = [s for s in sessions if s.date is not None and s.date.year == year]

    total_duration = sum(s.duration_minutes for s in target)
    # Volume only counts sets that moved a load for reps.
    total_volume = sum(
        st.weight * st.reps
        for s in target
        for st in s.sets
        if st.weight > 0 and st.reps > 0
    )

    # Session presence: an exercise or body part counts once per session.
    exercise_counts = _tally(
        name for s in target for name in _distinct(st.exercise_name for st in s.sets)
    )
    body_part_counts = _tally(
        part for s in target for part in _distinct(st.body_part for st in s.sets)
    )
    month_counts = _tally(MONTH_NAMES[s.date.month - 1] for s in target)
    date_counts = _tally(s.date.date().isoformat() for s in target)

    # Stable sort: equal counts stay in first-seen order.
    top = sorted(exercise_counts, key=lambda kc: kc[1], reverse=True)[:TOP_EXERCISES_LIMIT]

    split: dict[BodyPart, int] = {part: 0 for part in BODY_PARTS}
    for part, count in body_part_counts:
        split[part] = count

    most_active_month = ""
    max_month_count = 0
    for month, count in month_counts:
        if count > max_month_count:
            max_month_count = count
            most_active_month = month

    heaviest = reduce(
        heavier,
        (
            HeaviestLift(name=st.exercise_name, weight=st.weight, date=s.date)
            for s in target
            for st in s.sets
            if st.weight > 0
        ),
        HeaviestLift(),
    )
    most_reps = reduce(
        more_reps,
        (
            MostRepsSet(exercise_name=st.exercise_name, weight=st.weight, reps=st.reps, date=s.date)
            for s in target
            for st in s.sets
        ),
        MostRepsSet(),
    )
    longest = reduce(
        longer,
        (
            LongestWorkout(name=s.name, duration_minutes=s.duration_minutes, date=s.date)
            for s in target
        ),
        LongestWorkout(),
    )

    return YearStats(
        year=year,
        units=units,
        total_workouts=len(target),
        total_duration_minutes=total_duration,
        total_volume=total_volume,
        top_exercises=tuple(ExerciseCount(name=name, count=count) for name, count in top),
        body_part_split=split,
        active_months=dict(month_counts),
        most_active_month=most_active_month,
        heaviest_lift=heaviest,
        longest_workout=longest,
        most_reps_set=most_reps,
        longest_week_streak=longest_week_streak(target, today=today),
        workouts_by_date=dict(date_counts),
    )


def year_in_review_impl(payload: YearInReviewInput, today: Optional[date] = None) -> YearInReviewOutput:
    """Parse an export and summarize one year (newest year in the data when not given)."""
    try:
        rows = parse_rows(payload.content)
    except ParseError as exc:
        return YearInReviewOutput(status="error", error=str(exc))

    sessions = build_sessions(rows)
    year = payload.year
    if year is None:
        years = available_years(sessions)
        year = years[0] if years else (today or date.today()).year
    units = payload.units or settings.default_units

    stats = aggregate_year(sessions, year, units, today=today)
    return YearInReviewOutput(
        status="ok",
        sessions_detected=len(sessions),
        stats=stats,
        heatmap=heatmap_grid(stats) if payload.include_heatmap else None,
    )
