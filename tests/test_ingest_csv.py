"""CSV parsing and session building for Strong exports."""

import csv
from datetime import datetime

import pytest

from liftwrap.ingest import (
    ParseError,
    available_years,
    build_sessions,
    coerce_float,
    coerce_int,
    list_years_impl,
    parse_date,
    parse_duration,
    parse_rows,
)
from liftwrap.models import ListYearsInput

HEADER = "Date,Workout Name,Duration,Exercise Name,Set Order,Weight,Reps,Distance,Seconds,Notes,Workout Notes,RPE"


def _csv(*rows: str) -> str:
    return "\n".join((HEADER,) + rows) + "\n"


def test_parse_rows_typed_fields() -> None:
    content = _csv(
        "2025-01-06 18:00:00,Leg Day,1h 30m,Squat (Barbell),1,100,5,0,0,felt good,heavy day,8.5",
    )
    rows = parse_rows(content)
    assert len(rows) == 1
    row = rows[0]
    assert row.date == "2025-01-06 18:00:00"
    assert row.workout_name == "Leg Day"
    assert row.duration == "1h 30m"
    assert row.duration_minutes == 90
    assert row.exercise_name == "Squat (Barbell)"
    assert row.set_order == 1
    assert row.weight == 100.0 and row.reps == 5
    assert row.notes == "felt good"
    assert row.workout_notes == "heavy day"
    assert row.rpe == 8.5


def test_parse_rows_matches_columns_by_name_not_position() -> None:
    content = """Reps,Weight,Exercise Name,Workout Name,Date
5,100,Squat (Barbell),Leg Day,2025-01-06 18:00:00
"""
    rows = parse_rows(content)
    assert len(rows) == 1
    assert rows[0].exercise_name == "Squat (Barbell)"
    assert rows[0].weight == 100.0 and rows[0].reps == 5
    # Absent columns read as empty / zero
    assert rows[0].duration_minutes == 0
    assert rows[0].rpe == 0.0


def test_parse_rows_header_case_and_whitespace() -> None:
    content = """ date , WORKOUT NAME ,exercise name,weight,reps
2025-01-06 18:00:00,Leg Day,Squat (Barbell),100,5
"""
    rows = parse_rows(content)
    assert len(rows) == 1
    assert rows[0].workout_name == "Leg Day"
    assert rows[0].weight == 100.0


@pytest.mark.parametrize(
    "value,expected",
    [
        ("1h 30m", 90),
        ("45m", 45),
        ("2h", 120),
        ("", 0),
        (None, 0),
        ("about an hour", 0),
    ],
)
def test_parse_duration(value, expected) -> None:
    assert parse_duration(value) == expected


def test_set_order_and_rpe_markers_fall_back_to_zero() -> None:
    content = _csv(
        "2025-01-06 18:00:00,Push,45m,Bench Press (Barbell),W,60,10,,,,,",
        "2025-01-06 18:00:00,Push,45m,Bench Press (Barbell),3,100,5,,,,,x",
    )
    rows = parse_rows(content)
    assert [r.set_order for r in rows] == [0, 3]
    assert [r.rpe for r in rows] == [0.0, 0.0]


def test_bad_numbers_coerce_to_zero() -> None:
    assert coerce_float("abc") == 0.0
    assert coerce_float("") == 0.0
    assert coerce_float(None) == 0.0
    assert coerce_float("nan") == 0.0
    assert coerce_float("inf") == 0.0
    assert coerce_float(" 62.5 ") == 62.5
    assert coerce_int("12.9") == 12
    assert coerce_int("W") == 0


def test_rows_missing_date_or_name_are_dropped() -> None:
    content = _csv(
        ",Leg Day,1h,Squat (Barbell),1,100,5,,,,,",
        "2025-01-06 18:00:00,,1h,Squat (Barbell),1,100,5,,,,,",
        "2025-01-06 18:00:00,Leg Day,1h,Squat (Barbell),1,100,5,,,,,",
    )
    rows = parse_rows(content)
    assert len(rows) == 1
    assert rows[0].workout_name == "Leg Day"


def test_ragged_rows_are_tolerated() -> None:
    content = _csv(
        "2025-01-06 18:00:00,Leg Day,1h,Squat (Barbell),1,100",
        "2025-01-06 18:00:00,Leg Day,1h,Squat (Barbell),2,100,5,0,0,,,8,extra,cells",
    )
    rows = parse_rows(content)
    assert len(rows) == 2
    assert rows[0].weight == 100.0 and rows[0].reps == 0
    assert rows[1].reps == 5 and rows[1].rpe == 8.0


def test_quoted_fields_with_commas_and_newlines() -> None:
    content = _csv(
        '2025-01-06 18:00:00,"Legs, Heavy",1h,Squat (Barbell),1,100,5,,,"left knee,\nsore",,',
    )
    rows = parse_rows(content)
    assert len(rows) == 1
    assert rows[0].workout_name == "Legs, Heavy"
    assert rows[0].notes == "left knee,\nsore"


def test_empty_input_is_not_an_error() -> None:
    assert parse_rows("") == []
    assert parse_rows("   \n") == []
    assert parse_rows(HEADER + "\n") == []


def test_blank_lines_before_header_are_skipped() -> None:
    content = "\n  \r\n" + _csv("2025-01-06 18:00:00,Leg Day,1h,Squat (Barbell),1,100,5,,,,,")
    rows = parse_rows(content)
    assert len(rows) == 1
    assert rows[0].workout_name == "Leg Day"
    assert rows[0].weight == 100


def test_bytes_input_with_bom() -> None:
    content = ("\ufeff" + _csv("2025-01-06 18:00:00,Leg Day,1h,Squat (Barbell),1,100,5,,,,,")).encode("utf-8")
    rows = parse_rows(content)
    assert len(rows) == 1
    assert rows[0].date == "2025-01-06 18:00:00"


def test_unreadable_input_raises_parse_error() -> None:
    with pytest.raises(ParseError):
        parse_rows(b"\xff\xfe\xfa not utf-8")
    with pytest.raises(ParseError):
        parse_rows(None)  # type: ignore[arg-type]
    # A header cell beyond the csv field limit cannot be tokenized
    with pytest.raises(ParseError):
        parse_rows("x" * (csv.field_size_limit() + 10))


def test_parse_date_formats() -> None:
    assert parse_date("2025-01-06 18:00:00") == datetime(2025, 1, 6, 18, 0, 0)
    assert parse_date("2025-01-06") == datetime(2025, 1, 6)
    assert parse_date("01/06/2025 18:00") == datetime(2025, 1, 6, 18, 0)
    assert parse_date("May 8 2024 9:38 PM") == datetime(2024, 5, 8, 21, 38)
    assert parse_date("May 8, 2024") == datetime(2024, 5, 8)
    assert parse_date("01/06/2025 6:00 PM") == datetime(2025, 1, 6, 18, 0)
    assert parse_date(" 2025-01-06 18:00:00 ") == datetime(2025, 1, 6, 18, 0, 0)
    assert parse_date("yesterday") is None
    assert parse_date("") is None


def test_build_sessions_groups_rows_and_tags_sets() -> None:
    """Two rows for the same (date, name) -> one session with two tagged sets."""
    content = _csv(
        "2025-01-06 18:00:00,Leg Day,1h 30m,Squat (Barbell),1,100,5,,,,,",
        "2025-01-06 18:00:00,Leg Day,1h 30m,Leg Press,1,200,10,,,,,",
    )
    sessions = build_sessions(parse_rows(content))
    assert len(sessions) == 1
    s = sessions[0]
    assert s.id == "2025-01-06 18:00:00-Leg Day"
    assert s.date == datetime(2025, 1, 6, 18, 0, 0)
    assert s.duration_minutes == 90
    assert [st.exercise_name for st in s.sets] == ["Squat (Barbell)", "Leg Press"]
    assert [st.body_part for st in s.sets] == ["Legs", "Legs"]


def test_build_sessions_round_trip_counts() -> None:
    content = _csv(
        "2025-01-08 07:00:00,Push,1h,Bench Press (Barbell),1,100,5,,,,,",
        "2025-01-06 18:00:00,Leg Day,1h,Squat (Barbell),1,100,5,,,,,",
        "2025-01-08 07:00:00,Push,1h,Bench Press (Barbell),2,100,5,,,,,",
        "2025-01-06 18:00:00,Leg Day,1h,Squat (Barbell),2,100,5,,,,,",
        "2025-01-08 07:00:00,Push,1h,Overhead Press (Barbell),1,50,8,,,,,",
        "2025-01-08 07:00:00,Pull,1h,Seated Row (Cable),1,70,10,,,,,",
    )
    sessions = build_sessions(parse_rows(content))
    assert len(sessions) == 3
    counts = {(s.date.isoformat(), s.name): len(s.sets) for s in sessions}
    assert counts == {
        ("2025-01-06T18:00:00", "Leg Day"): 2,
        ("2025-01-08T07:00:00", "Push"): 3,
        ("2025-01-08T07:00:00", "Pull"): 1,
    }
    # Sorted by date; equal dates keep first-seen order
    assert [s.name for s in sessions] == ["Leg Day", "Push", "Pull"]
    # Set order follows row order
    assert [st.order for st in sessions[1].sets] == [1, 2, 1]


def test_first_row_fixes_duration_and_notes() -> None:
    content = _csv(
        "2025-01-06 18:00:00,Leg Day,1h,Squat (Barbell),1,100,5,,,,first,",
        "2025-01-06 18:00:00,Leg Day,2h,Squat (Barbell),2,100,5,,,,second,",
    )
    sessions = build_sessions(parse_rows(content))
    assert len(sessions) == 1
    assert sessions[0].duration_minutes == 60
    assert sessions[0].notes == "first"


def test_grouping_uses_raw_date_string() -> None:
    """Date strings that differ only by whitespace are separate sessions."""
    content = _csv(
        "2025-01-06 18:00:00,Leg Day,1h,Squat (Barbell),1,100,5,,,,,",
        "2025-01-06 18:00:00 ,Leg Day,1h,Squat (Barbell),2,100,5,,,,,",
    )
    sessions = build_sessions(parse_rows(content))
    assert len(sessions) == 2
    assert sessions[0].date == sessions[1].date


def test_unparseable_dates_keep_their_session() -> None:
    """An unrecognized date still yields a session; it just has no place on the calendar."""
    content = _csv(
        "not a date,Leg Day,1h,Squat (Barbell),1,100,5,,,,,",
        "not a date,Leg Day,1h,Squat (Barbell),2,100,5,,,,,",
        "2025-01-06 18:00:00,Leg Day,1h,Squat (Barbell),1,100,5,,,,,",
    )
    sessions = build_sessions(parse_rows(content))
    assert len(sessions) == 2
    # Undated sessions sort after dated ones
    assert sessions[0].date == datetime(2025, 1, 6, 18, 0)
    assert sessions[1].date is None
    assert sessions[1].id == "not a date-Leg Day"
    assert len(sessions[1].sets) == 2
    assert available_years(sessions) == [2025]


def test_spelled_out_and_twelve_hour_dates_round_trip() -> None:
    content = _csv(
        '"May 8 2024 9:38 PM",Push,1h,Bench Press (Barbell),1,100,5,,,,,',
        '"May 8 2024 9:38 PM",Push,1h,Bench Press (Barbell),2,100,5,,,,,',
        "2024-05-10 07:15 AM,Pull,1h,Seated Row (Cable),1,70,10,,,,,",
    )
    sessions = build_sessions(parse_rows(content))
    assert len(sessions) == 2
    assert sessions[0].date == datetime(2024, 5, 8, 21, 38)
    assert len(sessions[0].sets) == 2
    assert sessions[1].date == datetime(2024, 5, 10, 7, 15)
    assert available_years(sessions) == [2024]


def test_available_years_newest_first() -> None:
    content = _csv(
        "2023-12-31 10:00:00,A,1h,Squat (Barbell),1,100,5,,,,,",
        "2025-01-06 18:00:00,B,1h,Squat (Barbell),1,100,5,,,,,",
        "2024-06-01 09:00:00,C,1h,Squat (Barbell),1,100,5,,,,,",
        "2025-03-01 09:00:00,D,1h,Squat (Barbell),1,100,5,,,,,",
    )
    assert available_years(build_sessions(parse_rows(content))) == [2025, 2024, 2023]


def test_list_years_impl() -> None:
    content = _csv(
        "2024-06-01 09:00:00,A,1h,Squat (Barbell),1,100,5,,,,,",
        "2025-01-06 18:00:00,B,1h,Squat (Barbell),1,100,5,,,,,",
    )
    out = list_years_impl(ListYearsInput(content=content))
    assert out.status == "ok"
    assert out.years == [2025, 2024]
    assert out.default_year == 2025

    empty = list_years_impl(ListYearsInput(content=""))
    assert empty.status == "ok"
    assert empty.years == [] and empty.default_year is None

    bad = list_years_impl(ListYearsInput(content="x" * (csv.field_size_limit() + 10)))
    assert bad.status == "error"
    assert bad.error
