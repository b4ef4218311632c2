"""JSON settings for the mini calendar (read at start-up, never written)."""

import calendar
import json
import logging
import os

from calendar_engine import CalendarConfig
from selection import SelectionMode

log = logging.getLogger(__name__)

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".mini-calendar-settings.json")

_WEEKDAYS = {name.lower(): i for i, name in enumerate(calendar.day_name)}

_DEFAULTS = {
    "first_day_of_week": "monday",
    "show_weekends": True,
    "show_days_from_other_months": True,
    "selection_mode": "single",
    "dark_mode": False,
}

_BOOL_KEYS = ("show_weekends", "show_days_from_other_months", "dark_mode")


def load_settings(path: str | None = None) -> dict:
    """Load settings from disk, returning defaults for missing or bad keys."""
    settings = dict(_DEFAULTS)
    path = path or _SETTINGS_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return settings
    except (json.JSONDecodeError, OSError) as e:
        log.warning("Ignoring unreadable settings file %s: %s", path, e)
        return settings
    if not isinstance(stored, dict):
        log.warning("Ignoring settings file %s: not a JSON object", path)
        return settings

    for key in _BOOL_KEYS:
        if key in stored:
            if isinstance(stored[key], bool):
                settings[key] = stored[key]
            else:
                log.warning("Ignoring %s=%r, expected true/false", key, stored[key])
    day = stored.get("first_day_of_week")
    if day is not None:
        if isinstance(day, str) and day.lower() in _WEEKDAYS:
            settings["first_day_of_week"] = day.lower()
        else:
            log.warning("Ignoring first_day_of_week=%r", day)
    mode = stored.get("selection_mode")
    if mode is not None:
        if mode in ("single", "multi"):
            settings["selection_mode"] = mode
        else:
            log.warning("Ignoring selection_mode=%r", mode)
    return settings


def config_from_settings(settings: dict, **overrides) -> CalendarConfig:
    """Build the engine config described by a loaded settings dict."""
    return CalendarConfig(
        first_day_of_week=_WEEKDAYS[settings["first_day_of_week"]],
        show_weekends=settings["show_weekends"],
        show_days_from_other_months=settings["show_days_from_other_months"],
        selection_mode=SelectionMode(settings["selection_mode"]),
        **overrides,
    ).normalized()
