"""Pure calendar calculations — no UI dependencies."""

import calendar
from datetime import date, timedelta
from typing import NamedTuple

DAY_ABBR = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
WEEKEND = (calendar.SATURDAY, calendar.SUNDAY)


class Placement(NamedTuple):
    """One date positioned in the month grid."""

    date: date
    row: int
    column: int
    visible: bool


def check_weekday(weekday: int) -> int:
    """Return *weekday* if it is 0 (Monday) .. 6 (Sunday), else raise ValueError."""
    if isinstance(weekday, bool) or not isinstance(weekday, int) or not 0 <= weekday <= 6:
        raise ValueError(f"Not a weekday: {weekday!r}")
    return weekday


def is_weekend(weekday: int) -> bool:
    return weekday in WEEKEND


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def visible_columns(show_weekends: bool) -> int:
    return 7 if show_weekends else 5


def week_of_month(d: date, first_day_of_week: int) -> int:
    """Return the 0-based week row of *d* within its own month."""
    offset = (d.replace(day=1).weekday() - first_day_of_week) % 7
    return (d.day - 1 + offset) // 7


def weeks_in_month(year: int, month: int, first_day_of_week: int) -> int:
    """Return how many week rows the month needs (4, 5 or 6)."""
    last = date(year, month, days_in_month(year, month))
    return week_of_month(last, first_day_of_week) + 1


def column_of(weekday: int, first_day_of_week: int, show_weekends: bool) -> int | None:
    """Return the grid column for *weekday*, or None for a hidden weekend day.

    Columns follow the cyclic order starting at *first_day_of_week*. With
    weekends hidden the five working days are packed into columns 0..4.
    """
    distance = (weekday - first_day_of_week) % 7
    if show_weekends:
        return distance
    if is_weekend(weekday):
        return None
    return sum(1 for k in range(distance)
               if not is_weekend((first_day_of_week + k) % 7))


def compute_headers(first_day_of_week: int, show_weekends: bool) -> list[int]:
    """Return the weekdays of the header row, left to right.

    Walks forward from *first_day_of_week*; hidden weekend days are skipped,
    never emitted, so a Sunday start with weekends hidden begins on Monday.
    """
    check_weekday(first_day_of_week)
    wanted = visible_columns(show_weekends)
    headers: list[int] = []
    weekday = first_day_of_week
    while len(headers) < wanted:
        if show_weekends or not is_weekend(weekday):
            headers.append(weekday)
        weekday = (weekday + 1) % 7
    return headers


def compute_placements(month: date, first_day_of_week: int,
                       show_weekends: bool, show_adjacent: bool) -> list[Placement]:
    """Lay out *month* as a list of placements in chronological order.

    Leading days of the previous month fill row 0 back to the first day of
    the week; trailing days of the next month fill the last row up to the
    weekday before it. Filler placements carry ``visible=show_adjacent``.
    Hidden weekend days get no placement at all.
    """
    check_weekday(first_day_of_week)
    year, mon = month.year, month.month
    first = date(year, mon, 1)
    last = date(year, mon, days_in_month(year, mon))
    last_row = weeks_in_month(year, mon, first_day_of_week) - 1
    last_day_of_week = (first_day_of_week - 1) % 7

    def place(d: date, row: int, visible: bool) -> Placement | None:
        col = column_of(d.weekday(), first_day_of_week, show_weekends)
        if col is None:
            return None
        return Placement(d, row, col, visible)

    leading: list[Placement | None] = []
    d = first
    while d.weekday() != first_day_of_week:
        d -= timedelta(days=1)
        leading.append(place(d, 0, show_adjacent))
    leading.reverse()

    in_month: list[Placement | None] = []
    for day in range(1, last.day + 1):
        d = date(year, mon, day)
        in_month.append(place(d, week_of_month(d, first_day_of_week), True))

    trailing: list[Placement | None] = []
    d = last
    while d.weekday() != last_day_of_week:
        d += timedelta(days=1)
        trailing.append(place(d, last_row, show_adjacent))

    return [p for p in leading + in_month + trailing if p is not None]


def grid_bounds(placements: list[Placement]) -> tuple[date, date]:
    """Return the first and last date shown by *placements*."""
    dates = [p.date for p in placements]
    return min(dates), max(dates)


def month_title(month: date) -> str:
    return f"{calendar.month_name[month.month]} {month.year}"


def day_of_year(d: date) -> int:
    """Return the 1-based day-of-year for the given date."""
    return d.timetuple().tm_yday


def prev_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month earlier."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month later."""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def shift_month(month: date, delta: int) -> date:
    """Return the first day of the month *delta* months from *month*."""
    year, mon = month.year, month.month
    step = next_month if delta > 0 else prev_month
    for _ in range(abs(delta)):
        year, mon = step(year, mon)
    return date(year, mon, 1)
