"""Ingest: parse a Strong-style CSV export into rows, then fold rows into dated sessions. Stateless."""

from __future__ import annotations

import csv
import io
import logging
import math
import re
from datetime import datetime
from typing import Any, Iterable

from .classify import DEFAULT_CLASSIFIER, ExerciseClassifier
from .models import ListYearsInput, ListYearsOutput, RawRow, WorkoutSession, WorkoutSet

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """The input could not be tokenized as CSV at all."""


# RawRow field -> export header (matched case-insensitively, whitespace ignored)
STRONG_COLUMNS: dict[str, str] = {
    "date": "Date",
    "workout_name": "Workout Name",
    "duration": "Duration",
    "exercise_name": "Exercise Name",
    "set_order": "Set Order",
    "weight": "Weight",
    "reps": "Reps",
    "distance": "Distance",
    "seconds": "Seconds",
    "notes": "Notes",
    "workout_notes": "Workout Notes",
    "rpe": "RPE",
}

_HOURS_RE = re.compile(r"(\d+)h")
_MINUTES_RE = re.compile(r"(\d+)m")
_LEADING_BLANK_LINES_RE = re.compile(r"\A(?:[ \t]*\r?\n)+")

_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    # 12-hour clock, as written by some locales of the app
    "%Y-%m-%d %I:%M:%S %p",
    "%Y-%m-%d %I:%M %p",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %I:%M %p",
    # Spelled-out months: "May 8 2024 9:38 PM", "May 8, 2024"
    "%b %d %Y %I:%M %p",
    "%b %d, %Y %I:%M %p",
    "%B %d %Y %I:%M %p",
    "%B %d, %Y %I:%M %p",
    "%b %d %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)


def parse_duration(value: str | None) -> int:
    """'1h 30m' -> 90, '45m' -> 45, '2h' -> 120; anything else -> 0."""
    if not value:
        return 0
    minutes = 0
    hours_match = _HOURS_RE.search(value)
    minutes_match = _MINUTES_RE.search(value)
    if hours_match:
        minutes += int(hours_match.group(1)) * 60
    if minutes_match:
        minutes += int(minutes_match.group(1))
    return minutes


def coerce_float(value: Any) -> float:
    """Best-effort number; empty, non-numeric, NaN and infinity become 0."""
    if value is None:
        return 0.0
    s = str(value).strip()
    if not s:
        return 0.0
    try:
        f = float(s)
    except ValueError:
        return 0.0
    if not math.isfinite(f):
        return 0.0
    return f


def coerce_int(value: Any) -> int:
    """Like coerce_float, truncated toward zero. Set-order markers ('W', 'D', 'F') -> 0."""
    return int(coerce_float(value))


def parse_date(value: str | None) -> datetime | None:
    """Return a naive datetime for an export date string, or None if no format matches."""
    if not value or not value.strip():
        return None
    s = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    try:
        parsed = datetime.fromisoformat(s)
    except ValueError:
        return None
    # Keep local wall-clock time; drop any offset rather than converting.
    return parsed.replace(tzinfo=None)


def _decode(content: str | bytes) -> str:
    if isinstance(content, bytes):
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Input is not UTF-8 text: {exc}") from exc
    if not isinstance(content, str):
        raise ParseError(f"Expected CSV text, got {type(content).__name__}")
    return content


def parse_rows(content: str | bytes) -> list[RawRow]:
    """
    Parse CSV text into RawRows. Header names select the columns; column order does not matter.
    Rows without a date or workout name are dropped. Short/long rows are kept with what they have.
    Raises ParseError only when the text cannot be read as CSV at all.
    """
    text = _decode(content).lstrip("\ufeff")
    if not text.strip():
        return []
    # The header is the first non-blank line.
    text = _LEADING_BLANK_LINES_RE.sub("", text)

    reader = csv.DictReader(io.StringIO(text, newline=""))
    try:
        fieldnames = reader.fieldnames
    except csv.Error as exc:
        raise ParseError(f"Unreadable CSV header: {exc}") from exc
    if not fieldnames:
        return []

    # Normalize header names (case-insensitive)
    by_lower = {(name or "").strip().lower(): name for name in fieldnames}
    col_map = {
        field: by_lower.get(header.lower())
        for field, header in STRONG_COLUMNS.items()
    }

    rows: list[RawRow] = []
    malformed = 0
    unreadable = 0
    dropped = 0
    while True:
        try:
            record = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            unreadable += 1
            logger.debug("Skipping unreadable CSV line %d: %s", reader.line_num, exc)
            continue

        # DictReader files extra cells under None and pads missing ones with None
        if None in record or any(v is None for v in record.values()):
            malformed += 1

        def cell(field: str) -> str:
            col = col_map[field]
            if col is None:
                return ""
            return record.get(col) or ""

        date_val = cell("date")
        name_val = cell("workout_name")
        if not date_val or not name_val:
            dropped += 1
            logger.debug("Dropping row at line %d: missing date or workout name", reader.line_num)
            continue

        duration = cell("duration")
        rows.append(RawRow(
            date=date_val,
            workout_name=name_val,
            duration=duration,
            duration_minutes=parse_duration(duration),
            exercise_name=cell("exercise_name"),
            set_order=coerce_int(cell("set_order")),
            weight=coerce_float(cell("weight")),
            reps=coerce_int(cell("reps")),
            distance=coerce_float(cell("distance")),
            seconds=coerce_float(cell("seconds")),
            notes=cell("notes"),
            workout_notes=cell("workout_notes"),
            rpe=coerce_float(cell("rpe")),
        ))

    if malformed or unreadable:
        logger.warning(
            "CSV had %d row(s) with a mismatched column count and %d unreadable line(s)",
            malformed,
            unreadable,
        )
    if dropped:
        logger.debug("Dropped %d row(s) without date or workout name", dropped)
    return rows


def build_sessions(
    rows: Iterable[RawRow],
    classifier: ExerciseClassifier = DEFAULT_CLASSIFIER,
) -> list[WorkoutSession]:
    """
    Fold rows into sessions keyed by (raw date string, workout name), in row order.
    The first row of a session fixes its duration and notes. Result is sorted by date (stable).
    A session whose date matches no known format is kept with date=None and sorted last.
    """
    sessions: dict[tuple[str, str], WorkoutSession] = {}
    for row in rows:
        if not row.date or not row.workout_name:
            continue
        # Exact string key: "2024-05-08 21:38:05" and "2024-05-08 21:38:05 " are different sessions.
        key = (row.date, row.workout_name)
        session = sessions.get(key)
        if session is None:
            parsed = parse_date(row.date)
            if parsed is None:
                logger.debug("Session %r has an unparseable date; keeping it undated", row.date)
            session = WorkoutSession(
                id=f"{row.date}-{row.workout_name}",
                date=parsed,
                name=row.workout_name,
                duration_minutes=row.duration_minutes,
                notes=row.workout_notes,
            )
            sessions[key] = session
        session.sets.append(WorkoutSet(
            exercise_name=row.exercise_name,
            order=row.set_order,
            weight=row.weight,
            reps=row.reps,
            distance=row.distance,
            seconds=row.seconds,
            notes=row.notes,
            rpe=row.rpe,
            body_part=classifier.classify(row.exercise_name),
        ))
    return sorted(sessions.values(), key=lambda s: (s.date is None, s.date or datetime.min))


def available_years(sessions: Iterable[WorkoutSession]) -> list[int]:
    """Distinct calendar years present, newest first. Undated sessions have no year."""
    return sorted({s.date.year for s in sessions if s.date is not None}, reverse=True)


def list_years_impl(payload: ListYearsInput) -> ListYearsOutput:
    """Parse an export and report which years it covers; default_year is the newest."""
    try:
        rows = parse_rows(payload.content)
    except ParseError as exc:
        return ListYearsOutput(status="error", error=str(exc))
    years = available_years(build_sessions(rows))
    return ListYearsOutput(
        status="ok",
        years=years,
        default_year=years[0] if years else None,
    )
