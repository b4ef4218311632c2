"""Selected-date bookkeeping for single and multi select."""

import enum
import logging
from datetime import date, datetime
from typing import Callable, Iterable

from grid_sync import CellRecord

log = logging.getLogger(__name__)


class SelectionMode(enum.Enum):
    SINGLE = "single"
    MULTI = "multi"


class InvalidConfiguration(ValueError):
    """Raised when a selection would break the current selection mode."""


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


class SelectionController:
    """Holds the selected dates and mirrors them onto the live cells.

    Selection is kept as dates, not cells, so a date stays selected while
    its month is not displayed and lights up again once a matching cell is
    back. Taps and programmatic changes both end in set_selected_dates().
    """

    def __init__(self, live_records: Callable[[], Iterable[CellRecord]],
                 mode: SelectionMode = SelectionMode.SINGLE,
                 on_changed: Callable[[frozenset[date]], None] | None = None) -> None:
        self._live_records = live_records
        self._mode = SelectionMode(mode)
        self._selected: frozenset[date] = frozenset()
        self._on_changed = on_changed or (lambda _dates: None)

    @property
    def mode(self) -> SelectionMode:
        return self._mode

    @property
    def selected_dates(self) -> frozenset[date]:
        return self._selected

    def set_mode(self, mode: SelectionMode) -> None:
        """Switch mode; the selection always starts empty afterwards."""
        self._mode = SelectionMode(mode)
        log.debug("selection mode -> %s", self._mode.value)
        self.set_selected_dates(())

    def set_selected_dates(self, dates: Iterable[date]) -> None:
        new = frozenset(_as_date(d) for d in dates)
        # Single mode limits distinct dates, so [d, d] is accepted
        if self._mode is SelectionMode.SINGLE and len(new) > 1:
            raise InvalidConfiguration(
                f"Cannot select {len(new)} days in {self._mode.value} select mode")
        changed = new != self._selected
        self._selected = new
        self.apply()
        if changed:
            self._on_changed(new)

    def on_tap(self, record: CellRecord) -> bool:
        """Update the selection for a tapped cell. Returns False if ignored."""
        if not record.selectable:
            return False
        if self._mode is SelectionMode.SINGLE:
            self.set_selected_dates((record.date,))
        else:
            self.set_selected_dates(self._selected ^ {record.date})
        return True

    def apply(self) -> None:
        """Mark each live record selected when its date is in the selection."""
        for record in self._live_records():
            record.selected = record.date in self._selected
