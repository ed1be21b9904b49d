"""Environment-driven settings for LiftWrap."""

from __future__ import annotations

import logging
import os

from .models import Units


class Settings:
    """Process settings; read once at import, re-read by constructing a new instance."""

    default_units: Units = "lbs"
    log_level: int = logging.WARNING

    def __init__(self) -> None:
        units = os.environ.get("LIFTWRAP_DEFAULT_UNITS", "lbs").strip().lower()
        if units in ("kg", "kgs", "kilogram", "kilograms"):
            self.default_units = "kg"
        else:
            self.default_units = "lbs"

        level_name = os.environ.get("LIFTWRAP_LOG_LEVEL", "WARNING").strip().upper()
        level = logging.getLevelName(level_name)
        self.log_level = level if isinstance(level, int) else logging.WARNING


settings = Settings()
