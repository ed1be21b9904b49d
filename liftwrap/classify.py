"""Exercise name -> body part. Exact table first, then ordered keyword scan, then Other."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from .models import BodyPart

# Canonical Strong export names.
EXACT_BODY_PARTS: dict[str, BodyPart] = {
    "Squat (Barbell)": "Legs",
    "Deadlift (Barbell)": "Legs",  # posterior chain, counted with legs
    "Leg Press": "Legs",
    "Hip Thrust (Barbell)": "Legs",
    "Lying Leg Curl (Machine)": "Legs",
    "Leg Extension (Machine)": "Legs",
    "Bench Press (Barbell)": "Chest",
    "Bench Press (Dumbbell)": "Chest",
    "Incline Bench Press (Dumbbell)": "Chest",
    "Chest Press (Machine)": "Chest",
    "Lat Pulldown (Cable)": "Back",
    "Lat Pulldown (Machine)": "Back",
    "Seated Row (Cable)": "Back",
    "Bent Over Row (Dumbbell)": "Back",
    "Bent Over One Arm Row (Dumbbell)": "Back",
    "Pull Up (Assisted)": "Back",
    "Overhead Press (Barbell)": "Shoulders",
    "Seated Overhead Press (Dumbbell)": "Shoulders",
    "Lateral Raise (Dumbbell)": "Shoulders",
    "Shrug (Dumbbell)": "Shoulders",
    "Bicep Curl (Cable)": "Arms",
    "Triceps Pushdown (Cable - Straight Bar)": "Arms",
    "Stretching": "Other",
}

# Scanned in this order; the first keyword contained in the name wins.
# "Leg" precedes "Press" and "Extension", so "Leg Press" and "Leg Extension" land in Legs.
KEYWORD_BODY_PARTS: tuple[tuple[str, BodyPart], ...] = (
    ("Squat", "Legs"),
    ("Leg", "Legs"),
    ("Calf", "Legs"),
    ("Glute", "Legs"),
    ("Bench", "Chest"),
    ("Chest", "Chest"),
    ("Fly", "Chest"),
    ("Press", "Shoulders"),
    ("Row", "Back"),
    ("Pull", "Back"),
    ("Chin", "Back"),
    ("Lat", "Back"),
    ("Shoulder", "Shoulders"),
    ("Raise", "Shoulders"),
    ("Curl", "Arms"),
    ("Tricep", "Arms"),
    ("Bicep", "Arms"),
    ("Extension", "Arms"),
    ("Dip", "Arms"),
    ("Pushdown", "Arms"),
    ("Abs", "Core"),
    ("Crunch", "Core"),
    ("Plank", "Core"),
    ("Run", "Cardio"),
    ("Cycle", "Cardio"),
    ("Treadmill", "Cardio"),
)


class ExerciseClassifier:
    """
    Immutable lookup over an exact-name table and an ordered keyword table.
    Matching is case-sensitive substring containment, as exported names are title-cased.
    """

    __slots__ = ("_exact", "_keywords")

    def __init__(
        self,
        exact: Mapping[str, BodyPart] | None = None,
        keywords: Iterable[tuple[str, BodyPart]] | None = None,
    ):
        self._exact: Mapping[str, BodyPart] = MappingProxyType(dict(exact or {}))
        self._keywords: tuple[tuple[str, BodyPart], ...] = tuple(keywords or ())

    @property
    def exact(self) -> Mapping[str, BodyPart]:
        return self._exact

    @property
    def keywords(self) -> tuple[tuple[str, BodyPart], ...]:
        return self._keywords

    def __call__(self, exercise_name: str) -> BodyPart:
        return self.classify(exercise_name)

    def classify(self, exercise_name: str) -> BodyPart:
        name = exercise_name or ""
        # 1) Exact canonical name
        part = self._exact.get(name)
        if part is not None:
            return part
        # 2) Keyword scan, declared order
        for keyword, part in self._keywords:
            if keyword in name:
                return part
        # 3) Fallback
        return "Other"


DEFAULT_CLASSIFIER = ExerciseClassifier(EXACT_BODY_PARTS, KEYWORD_BODY_PARTS)


def classify(exercise_name: str) -> BodyPart:
    """Classify with the built-in Strong tables."""
    return DEFAULT_CLASSIFIER.classify(exercise_name)
