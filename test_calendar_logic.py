import calendar
import math
from datetime import date, timedelta

import pytest

from calendar_logic import (
    Placement,
    column_of,
    compute_headers,
    compute_placements,
    days_in_month,
    grid_bounds,
    next_month,
    prev_month,
    shift_month,
    week_of_month,
    weeks_in_month,
)

MONTHS = [date(y, m, 1) for y in (2020, 2021, 2023, 2024) for m in range(1, 13)]


def test_june_2023_monday_layout():
    placements = compute_placements(date(2023, 6, 1), calendar.MONDAY, True, True)

    first_row = [p for p in placements if p.row == 0]
    assert [p.date for p in first_row] == [date(2023, 5, 29) + timedelta(days=i) for i in range(7)]
    assert [p.column for p in first_row] == list(range(7))
    assert max(p.row for p in placements) + 1 == 5
    assert Placement(date(2023, 6, 1), 0, 3, True) in placements


def test_june_2023_trailing_filler():
    placements = compute_placements(date(2023, 6, 1), calendar.MONDAY, True, False)

    last_row = [p for p in placements if p.row == 4]
    assert [p.date for p in last_row][-2:] == [date(2023, 7, 1), date(2023, 7, 2)]
    assert [p.visible for p in last_row] == [True] * 5 + [False] * 2


@pytest.mark.parametrize("month, first, rows", [
    (date(2021, 2, 1), calendar.MONDAY, 4),
    (date(2023, 6, 1), calendar.MONDAY, 5),
    (date(2021, 5, 1), calendar.MONDAY, 6),
    (date(2015, 2, 1), calendar.SUNDAY, 4),
])
def test_four_five_and_six_row_months(month, first, rows):
    assert weeks_in_month(month.year, month.month, first) == rows
    placements = compute_placements(month, first, True, True)
    assert max(p.row for p in placements) + 1 == rows


@pytest.mark.parametrize("first", range(7))
def test_row_count_matches_leading_offset(first):
    for month in MONTHS:
        n = days_in_month(month.year, month.month)
        offset = (month.weekday() - first) % 7
        assert weeks_in_month(month.year, month.month, first) == math.ceil((n + offset) / 7)


def test_week_of_month_counts_boundaries():
    # 2023-06-01 is a Thursday
    assert week_of_month(date(2023, 6, 4), calendar.MONDAY) == 0
    assert week_of_month(date(2023, 6, 5), calendar.MONDAY) == 1
    assert week_of_month(date(2023, 6, 1), calendar.THURSDAY) == 0
    assert week_of_month(date(2023, 6, 8), calendar.THURSDAY) == 1


@pytest.mark.parametrize("first", range(7))
def test_total_coverage_with_weekends(first):
    for month in MONTHS:
        placements = compute_placements(month, first, True, True)
        rows = weeks_in_month(month.year, month.month, first)
        lo, hi = grid_bounds(placements)

        positions = [(p.row, p.column) for p in placements]
        assert len(set(positions)) == len(positions)
        assert set(positions) == {(r, c) for r in range(rows) for c in range(7)}
        assert [p.date for p in placements] == [lo + timedelta(days=i) for i in range((hi - lo).days + 1)]
        assert placements[0].date.weekday() == first


@pytest.mark.parametrize("first", range(5))
def test_total_coverage_without_weekends(first):
    for month in MONTHS:
        placements = compute_placements(month, first, False, True)
        rows = weeks_in_month(month.year, month.month, first)
        lo, hi = grid_bounds(placements)

        positions = [(p.row, p.column) for p in placements]
        assert len(set(positions)) == len(positions)
        assert set(positions) == {(r, c) for r in range(rows) for c in range(5)}
        expected = [lo + timedelta(days=i) for i in range((hi - lo).days + 1)]
        assert [p.date for p in placements] == [d for d in expected if d.weekday() < 5]


def test_hidden_weekend_days_get_no_placement():
    placements = compute_placements(date(2023, 7, 1), calendar.MONDAY, False, True)
    dates = {p.date for p in placements}

    assert date(2023, 7, 1) not in dates
    assert date(2023, 7, 2) not in dates
    # Row 0 is entirely June filler
    assert [p.date for p in placements if p.row == 0] == [date(2023, 6, d) for d in range(26, 31)]


def test_filler_visibility_follows_option():
    hidden = compute_placements(date(2023, 6, 1), calendar.MONDAY, True, False)
    shown = compute_placements(date(2023, 6, 1), calendar.MONDAY, True, True)

    assert [(p.date, p.row, p.column) for p in hidden] == [(p.date, p.row, p.column) for p in shown]
    for p in hidden:
        assert p.visible == (p.date.month == 6)
    assert all(p.visible for p in shown)


def test_month_starting_on_first_day_has_no_leading_filler():
    placements = compute_placements(date(2021, 2, 1), calendar.MONDAY, True, True)
    assert placements[0].date == date(2021, 2, 1)
    assert placements[-1].date == date(2021, 2, 28)


def test_weekday_columns_compress_in_cyclic_order():
    # Thursday start, weekends hidden: Thu Fri Mon Tue Wed
    cols = {wd: column_of(wd, calendar.THURSDAY, False) for wd in range(7)}
    assert cols == {3: 0, 4: 1, 0: 2, 1: 3, 2: 4, 5: None, 6: None}


@pytest.mark.parametrize("first, show_weekends, expected", [
    (calendar.MONDAY, True, [0, 1, 2, 3, 4, 5, 6]),
    (calendar.SUNDAY, True, [6, 0, 1, 2, 3, 4, 5]),
    (calendar.MONDAY, False, [0, 1, 2, 3, 4]),
    (calendar.THURSDAY, False, [3, 4, 0, 1, 2]),
    (calendar.SUNDAY, False, [0, 1, 2, 3, 4]),
    (calendar.SATURDAY, False, [0, 1, 2, 3, 4]),
])
def test_headers(first, show_weekends, expected):
    assert compute_headers(first, show_weekends) == expected


@pytest.mark.parametrize("show_weekends", [True, False])
@pytest.mark.parametrize("first", range(7))
def test_headers_match_placement_columns(first, show_weekends):
    headers = compute_headers(first, show_weekends)
    for month in MONTHS:
        for p in compute_placements(month, first, show_weekends, True):
            assert headers[p.column] == p.date.weekday()


def test_invalid_weekday_is_rejected():
    with pytest.raises(ValueError):
        compute_placements(date(2023, 6, 1), 7, True, True)
    with pytest.raises(ValueError):
        compute_headers(-1, True)


def test_month_stepping():
    assert prev_month(2024, 1) == (2023, 12)
    assert next_month(2023, 12) == (2024, 1)
    assert shift_month(date(2023, 11, 15), 3) == date(2024, 2, 1)
    assert shift_month(date(2023, 1, 31), -13) == date(2021, 12, 1)
    assert shift_month(date(2023, 6, 30), 0) == date(2023, 6, 1)
