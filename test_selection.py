from datetime import date, datetime

import pytest

from grid_sync import CellRecord
from selection import InvalidConfiguration, SelectionController, SelectionMode

D1 = date(2023, 6, 1)
D2 = date(2023, 6, 2)
D3 = date(2023, 7, 14)


def _records():
    return [CellRecord(0, 3, D1, True), CellRecord(0, 4, D2, True)]


def _make(mode=SelectionMode.SINGLE):
    records = _records()
    changes = []
    controller = SelectionController(lambda: records, mode, on_changed=changes.append)
    return controller, records, changes


def test_single_select_rejects_two_dates_without_mutation():
    controller, records, changes = _make()
    controller.set_selected_dates([D1])

    with pytest.raises(InvalidConfiguration):
        controller.set_selected_dates([D1, D2])

    assert controller.selected_dates == {D1}
    assert [r.selected for r in records] == [True, False]
    assert changes == [frozenset({D1})]


def test_duplicate_dates_count_once():
    controller, records, _ = _make()
    controller.set_selected_dates([D2, D2])
    assert controller.selected_dates == {D2}
    assert [r.selected for r in records] == [False, True]

    controller.set_selected_dates([D1, datetime(2023, 6, 1, 8, 0)])
    assert controller.selected_dates == {D1}


def test_datetimes_are_reduced_to_dates():
    controller, records, _ = _make()
    controller.set_selected_dates([datetime(2023, 6, 1, 14, 30)])
    assert controller.selected_dates == {D1}
    assert records[0].selected


def test_tap_in_single_mode_replaces_selection():
    controller, records, _ = _make()
    controller.on_tap(records[0])
    controller.on_tap(records[1])

    assert controller.selected_dates == {D2}
    assert [r.selected for r in records] == [False, True]


def test_tap_in_multi_mode_toggles():
    controller, records, changes = _make(SelectionMode.MULTI)

    controller.on_tap(records[0])
    assert controller.selected_dates == {D1}
    assert records[0].selected

    controller.on_tap(records[0])
    assert controller.selected_dates == frozenset()
    assert not records[0].selected
    assert len(changes) == 2


def test_tap_on_unselectable_cell_is_ignored():
    controller, records, changes = _make()
    records[0].selectable = False

    assert controller.on_tap(records[0]) is False
    assert controller.selected_dates == frozenset()
    assert changes == []


def test_mode_change_clears_selection():
    controller, records, _ = _make(SelectionMode.MULTI)
    controller.set_selected_dates([D1, D2])

    controller.set_mode(SelectionMode.SINGLE)

    assert controller.mode is SelectionMode.SINGLE
    assert controller.selected_dates == frozenset()
    assert not any(r.selected for r in records)


def test_dates_without_cells_are_kept():
    controller, records, _ = _make(SelectionMode.MULTI)
    controller.set_selected_dates([D1, D3])

    assert controller.selected_dates == {D1, D3}
    assert [r.selected for r in records] == [True, False]

    records[1].date = D3
    controller.apply()
    assert records[1].selected


def test_unknown_mode_is_rejected():
    with pytest.raises(ValueError):
        SelectionController(list, "range")
