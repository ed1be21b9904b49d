"""Calendar heatmap data: every day of a year with its session count and intensity bucket."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Literal

from .models import HeatmapDay, YearStats

HeatmapLevel = Literal[0, 1, 2, 3]


def year_days(year: int) -> list[date]:
    """All calendar dates of year, Jan 1 through Dec 31."""
    first = date(year, 1, 1)
    last = date(year, 12, 31)
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def heatmap_level(count: int) -> HeatmapLevel:
    """0 for rest days, then 1, 2, and 3 for three or more sessions."""
    if count <= 0:
        return 0
    if count >= 3:
        return 3
    return 1 if count == 1 else 2


def heatmap_grid(stats: YearStats) -> list[HeatmapDay]:
    """Dense version of stats.workouts_by_date; rest days are present with count 0."""
    grid: list[HeatmapDay] = []
    for d in year_days(stats.year):
        count = stats.workouts_by_date.get(d.isoformat(), 0)
        grid.append(HeatmapDay(day=d, count=count, level=heatmap_level(count)))
    return grid
