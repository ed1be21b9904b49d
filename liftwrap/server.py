"""MCP server: liftwrap.year_in_review, liftwrap.list_years, liftwrap.classify_exercise."""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from .classify import classify
from .config import settings
from .ingest import list_years_impl
from .metrics import year_in_review_impl
from .models import (
    ClassifyExerciseInput,
    ClassifyExerciseOutput,
    ListYearsInput,
    YearInReviewInput,
)

mcp = FastMCP(name="liftwrap")


@mcp.tool(name="liftwrap.year_in_review")
def liftwrap_year_in_review(payload: dict) -> dict:
    """
    Summarize one year of a Strong CSV export: totals, top exercises, body-part split,
    monthly counts, heaviest lift, longest workout, most-reps set, weekly streak, per-day counts.
    Optional `year` (defaults to the newest year in the file), `units` ("kg" | "lbs", label only)
    and `include_heatmap` (adds every day of the year with an intensity level 0-3).
    Returns status "error" with a message when the CSV cannot be read at all.
    """
    inp = YearInReviewInput.model_validate(payload)
    result = year_in_review_impl(inp)
    return result.model_dump(mode="json")


@mcp.tool(name="liftwrap.list_years")
def liftwrap_list_years(payload: dict) -> dict:
    """List the calendar years present in a Strong CSV export, newest first, with the default pick."""
    inp = ListYearsInput.model_validate(payload)
    return list_years_impl(inp).model_dump(mode="json")


@mcp.tool(name="liftwrap.classify_exercise")
def liftwrap_classify_exercise(payload: dict) -> dict:
    """Return the body part (Legs, Chest, Back, Shoulders, Arms, Core, Cardio, Other) for an exercise name."""
    inp = ClassifyExerciseInput.model_validate(payload)
    out = ClassifyExerciseOutput(name=inp.name, body_part=classify(inp.name))
    return out.model_dump()


def run() -> None:
    """Run the MCP server with stdio transport (default)."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    mcp.run()


if __name__ == "__main__":
    run()
