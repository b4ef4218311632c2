"""Cell arena that keeps the live grid in step with the computed placements."""

from __future__ import annotations

import logging
from datetime import date
from functools import partial
from typing import Any, Callable, Iterable

from calendar_logic import Placement

log = logging.getLogger(__name__)


def apply_now(fn: Callable[[], None]) -> None:
    """Default ``post``: run the visibility change immediately."""
    fn()


class CellRecord:
    """The persistent day cell at one (row, column) of the grid."""

    __slots__ = ("row", "column", "date", "visible", "selectable",
                 "selected", "handle", "attached")

    def __init__(self, row: int, column: int, d: date, visible: bool) -> None:
        self.row = row
        self.column = column
        self.date = d
        self.visible = visible
        self.selectable = True
        self.selected = False
        self.handle: Any = None
        self.attached = False

    @property
    def position(self) -> tuple[int, int]:
        return self.row, self.column

    def __repr__(self) -> str:
        flags = "".join((
            "v" if self.visible else "-",
            "s" if self.selected else "-",
            "a" if self.attached else "-",
        ))
        return f"<CellRecord ({self.row}, {self.column}) {self.date.isoformat()} {flags}>"


class GridSynchronizer:
    """Owns every CellRecord ever created, keyed by grid position.

    Records are updated in place on each reconcile. Rows that drop out of
    the grid are detached (their widget destroyed) but the records stay in
    the arena and come back with the same identity when the row returns.
    """

    def __init__(self, host, post: Callable[[Callable[[], None]], None] | None = None,
                 on_day_updated: Callable[[CellRecord], None] | None = None,
                 is_selected: Callable[[date], bool] | None = None) -> None:
        self._host = host
        self._post = post or apply_now
        self._on_day_updated = on_day_updated or (lambda _record: None)
        self._is_selected = is_selected or (lambda _d: False)
        self._arena: dict[tuple[int, int], CellRecord] = {}
        self._row_count = 0
        self._template: Any = None

    @property
    def row_count(self) -> int:
        return self._row_count

    def record_at(self, row: int, column: int) -> CellRecord | None:
        """Return the live record at (row, column), or None."""
        record = self._arena.get((row, column))
        if record is None or not record.attached:
            return None
        return record

    def live_records(self) -> list[CellRecord]:
        """Return the attached records in row-major order."""
        return sorted((r for r in self._arena.values() if r.attached),
                      key=lambda r: r.position)

    # ------------------------------------------------------------------
    # Reconcile
    # ------------------------------------------------------------------
    def reconcile(self, placements: Iterable[Placement], template: Any = None) -> list[CellRecord]:
        """Bring the live grid in line with *placements* and return it."""
        placements = list(placements)
        self._template = template
        wanted = {(p.row, p.column) for p in placements}
        desired_rows = max((p.row for p in placements), default=-1) + 1

        reattached: set[tuple[int, int]] = set()
        while self._row_count < desired_rows:
            row = self._row_count
            self._row_count += 1
            for record in self._arena_row(row):
                if record.position in wanted and not record.attached:
                    self._attach(record)
                    reattached.add(record.position)
            log.debug("grid grew to %d rows", self._row_count)

        while self._row_count > desired_rows:
            self._row_count -= 1
            for record in self._arena_row(self._row_count):
                if record.attached:
                    self._detach(record)
            log.debug("grid shrank to %d rows", self._row_count)

        # Columns that left the layout (weekends hidden)
        for record in self.live_records():
            if record.position not in wanted:
                self._detach(record)

        for p in placements:
            self._place(p, reattached)
        return self.live_records()

    def refresh_templates(self, template: Any) -> None:
        """Re-attach every live cell with a new day template."""
        self._template = template
        for record in self.live_records():
            record.handle = self._host.create_or_attach_cell_widget(
                record.row, record.column, template)
            self._host.set_cell_visibility(record.handle, record.visible)
            if record.visible:
                self._on_day_updated(record)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _arena_row(self, row: int) -> list[CellRecord]:
        return [r for pos, r in sorted(self._arena.items()) if pos[0] == row]

    def _attach(self, record: CellRecord) -> None:
        record.handle = self._host.create_or_attach_cell_widget(
            record.row, record.column, self._template)
        record.attached = True

    def _detach(self, record: CellRecord) -> None:
        self._host.destroy_cell_widget(record.handle)
        record.handle = None
        record.attached = False

    def _apply_visibility(self, record: CellRecord, handle: Any, visible: bool) -> None:
        # Skip posts for widgets destroyed or replaced since they were queued
        if record.attached and record.handle is handle:
            self._host.set_cell_visibility(handle, visible)

    def _place(self, p: Placement, reattached: set[tuple[int, int]]) -> None:
        record = self._arena.get((p.row, p.column))
        if record is None:
            record = CellRecord(p.row, p.column, p.date, p.visible)
            self._arena[record.position] = record
            record.selected = self._is_selected(p.date)
            self._attach(record)
            self._host.set_cell_visibility(record.handle, p.visible)
            if p.visible:
                self._on_day_updated(record)
            return

        if not record.attached:
            self._attach(record)
            reattached.add(record.position)
        changed = (record.date != p.date
                   or (p.visible and not record.visible)
                   or record.position in reattached)
        record.date = p.date
        record.visible = p.visible
        record.selected = self._is_selected(p.date)
        self._post(partial(self._apply_visibility, record, record.handle, p.visible))
        if p.visible and changed:
            self._on_day_updated(record)
