"""Month-grid engine: configuration, reconcile pipeline and events."""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Callable, Iterable, Protocol

from calendar_logic import (
    check_weekday,
    compute_headers,
    compute_placements,
    is_weekend,
    shift_month,
)
from grid_sync import CellRecord, GridSynchronizer
from selection import SelectionController, SelectionMode

log = logging.getLogger(__name__)

# Passes a single reconcile may run when handlers keep changing the config
_MAX_PASSES = 8


def _first_of_month(d: date) -> date:
    return date(d.year, d.month, 1)


@dataclass(frozen=True)
class CalendarConfig:
    displayed_month: date = field(default_factory=lambda: _first_of_month(date.today()))
    first_day_of_week: int = calendar.MONDAY
    show_weekends: bool = True
    show_days_from_other_months: bool = True
    selection_mode: SelectionMode = SelectionMode.SINGLE
    day_template: Any = None
    header_template: Any = None

    def normalized(self) -> CalendarConfig:
        """Return a consistent copy: day-1 month, no hidden first weekday."""
        check_weekday(self.first_day_of_week)
        first = self.first_day_of_week
        if not self.show_weekends and is_weekend(first):
            log.debug("first day %s hidden with weekends, using Monday",
                      calendar.day_name[first])
            first = calendar.MONDAY
        return replace(
            self,
            displayed_month=_first_of_month(self.displayed_month),
            first_day_of_week=first,
            selection_mode=SelectionMode(self.selection_mode),
        )


class CalendarHost(Protocol):
    """View layer that owns the actual widgets."""

    def create_or_attach_cell_widget(self, row: int, column: int, template: Any) -> Any: ...

    def set_cell_visibility(self, handle: Any, visible: bool) -> None: ...

    def destroy_cell_widget(self, handle: Any) -> None: ...

    def create_or_attach_header_widget(self, column: int, weekday: int, template: Any) -> None: ...

    def destroy_header_widget(self, column: int) -> None: ...


class NullHost:
    """Host without widgets, for headless use."""

    def create_or_attach_cell_widget(self, row, column, template):
        return None

    def set_cell_visibility(self, handle, visible):
        pass

    def destroy_cell_widget(self, handle):
        pass

    def create_or_attach_header_widget(self, column, weekday, template):
        pass

    def destroy_header_widget(self, column):
        pass


class Event:
    """Minimal multicast callback list."""

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: list[Callable[..., None]] = []

    def connect(self, handler: Callable[..., None]) -> None:
        self._handlers.append(handler)

    def disconnect(self, handler: Callable[..., None]) -> None:
        self._handlers.remove(handler)

    def emit(self, *args) -> None:
        for handler in list(self._handlers):
            handler(*args)


class CalendarEngine:
    """Keeps grid, headers and selection consistent after every change.

    Each setter validates, stores the new config and runs reconcile():
    placements -> grid sync -> selection reapply, plus the header row when
    its inputs changed. Setters may be called from event handlers; the
    running reconcile picks up the new config in a further pass.
    """

    def __init__(self, host: CalendarHost | None = None,
                 config: CalendarConfig | None = None,
                 post: Callable[[Callable[[], None]], None] | None = None) -> None:
        self._host = host or NullHost()
        self._config = (config or CalendarConfig()).normalized()

        self.day_tapped = Event()
        self.day_updated = Event()
        self.selection_changed = Event()

        self._grid = GridSynchronizer(self._host, post=post,
                                      on_day_updated=self._emit_day_updated,
                                      is_selected=self._is_selected)
        self._selection = SelectionController(
            self._grid.live_records, self._config.selection_mode,
            on_changed=self.selection_changed.emit)

        self._headers: list[int] = []
        self._header_key: tuple | None = None
        self._reconciling = False
        self._dirty = False
        self._quiet = False

        self.reconcile()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def config(self) -> CalendarConfig:
        return self._config

    @property
    def days(self) -> tuple[CellRecord, ...]:
        """Live, visible records in row-major order."""
        return tuple(r for r in self._grid.live_records() if r.visible)

    @property
    def records(self) -> list[CellRecord]:
        return self._grid.live_records()

    @property
    def headers(self) -> list[int]:
        return list(self._headers)

    @property
    def row_count(self) -> int:
        return self._grid.row_count

    def record_at(self, row: int, column: int) -> CellRecord | None:
        return self._grid.record_at(row, column)

    # ------------------------------------------------------------------
    # Config setters
    # ------------------------------------------------------------------
    @property
    def displayed_month(self) -> date:
        return self._config.displayed_month

    @displayed_month.setter
    def displayed_month(self, value: date) -> None:
        self._update(displayed_month=value)

    @property
    def first_day_of_week(self) -> int:
        return self._config.first_day_of_week

    @first_day_of_week.setter
    def first_day_of_week(self, value: int) -> None:
        self._update(first_day_of_week=value)

    @property
    def show_weekends(self) -> bool:
        return self._config.show_weekends

    @show_weekends.setter
    def show_weekends(self, value: bool) -> None:
        self._update(show_weekends=bool(value))

    @property
    def show_days_from_other_months(self) -> bool:
        return self._config.show_days_from_other_months

    @show_days_from_other_months.setter
    def show_days_from_other_months(self, value: bool) -> None:
        self._update(show_days_from_other_months=bool(value))

    @property
    def day_template(self) -> Any:
        return self._config.day_template

    @day_template.setter
    def day_template(self, value: Any) -> None:
        self._config = replace(self._config, day_template=value)
        self._grid.refresh_templates(value)
        self.reconcile()

    @property
    def header_template(self) -> Any:
        return self._config.header_template

    @header_template.setter
    def header_template(self, value: Any) -> None:
        self._update(header_template=value)

    @property
    def selection_mode(self) -> SelectionMode:
        return self._selection.mode

    @selection_mode.setter
    def selection_mode(self, value: SelectionMode) -> None:
        mode = SelectionMode(value)
        self._config = replace(self._config, selection_mode=mode)
        self._selection.set_mode(mode)
        self.reconcile()

    @property
    def selected_dates(self) -> frozenset[date]:
        return self._selection.selected_dates

    @selected_dates.setter
    def selected_dates(self, dates: Iterable[date]) -> None:
        self._selection.set_selected_dates(dates)

    def navigate(self, months: int) -> None:
        """Move the displayed month forwards or backwards."""
        self.displayed_month = shift_month(self.displayed_month, months)

    def go_to(self, d: date) -> None:
        self.displayed_month = d

    # ------------------------------------------------------------------
    # Taps
    # ------------------------------------------------------------------
    def tap(self, record: CellRecord) -> None:
        """Entry point for the host when a day widget was tapped."""
        self._selection.on_tap(record)
        self.day_tapped.emit(record)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def _update(self, **changes) -> None:
        # normalized() raises before anything is stored
        self._config = replace(self._config, **changes).normalized()
        self.reconcile()

    def reconcile(self) -> None:
        """Recompute the grid from the current config until it is stable."""
        if self._reconciling:
            self._dirty = True
            return
        self._reconciling = True
        try:
            for n in range(1, _MAX_PASSES + 1):
                self._dirty = False
                self._reconcile_once()
                if not self._dirty:
                    break
                log.debug("config changed during reconcile, pass %d", n + 1)
            else:
                log.warning("reconcile did not settle after %d passes", _MAX_PASSES)
                # Final pass without notifications so the grid matches the config
                self._quiet = True
                try:
                    self._reconcile_once()
                finally:
                    self._quiet = False
        finally:
            self._reconciling = False

    def _emit_day_updated(self, record: CellRecord) -> None:
        if not self._quiet:
            self.day_updated.emit(record)

    def _is_selected(self, d: date) -> bool:
        return d in self._selection.selected_dates

    def _reconcile_once(self) -> None:
        cfg = self._config
        self._sync_headers(cfg)
        placements = compute_placements(
            cfg.displayed_month, cfg.first_day_of_week,
            cfg.show_weekends, cfg.show_days_from_other_months)
        self._grid.reconcile(placements, cfg.day_template)
        self._selection.apply()

    def _sync_headers(self, cfg: CalendarConfig) -> None:
        key = (cfg.first_day_of_week, cfg.show_weekends, cfg.header_template)
        if self._header_key is not None and key == self._header_key:
            return
        headers = compute_headers(cfg.first_day_of_week, cfg.show_weekends)
        for column, weekday in enumerate(headers):
            self._host.create_or_attach_header_widget(column, weekday, cfg.header_template)
        for column in range(len(headers), len(self._headers)):
            self._host.destroy_header_widget(column)
        self._headers = headers
        self._header_key = key
