"""Single-month calendar window (tkinter) driving a CalendarEngine."""

import calendar as _cal
import logging
import threading
from datetime import date
from tkinter import font as tkfont
import tkinter as tk

from calendar_engine import CalendarConfig, CalendarEngine
from calendar_logic import DAY_ABBR, day_of_year, is_weekend, month_title
from selection import SelectionMode

log = logging.getLogger(__name__)

# Palettes double as the engine's day/header templates
LIGHT = {
    "bg": "white", "fg": "black", "accent": "#0078D4", "sel_bg": "#B3D7F2",
    "weekend_fg": "#CC0000", "other_fg": "#AAAAAA", "header_fg": "#333333",
    "footer_fg": "#555555",
}
DARK = {
    "bg": "#202020", "fg": "#EEEEEE", "accent": "#3A96DD", "sel_bg": "#264F78",
    "weekend_fg": "#FF6B6B", "other_fg": "#666666", "header_fg": "#CCCCCC",
    "footer_fg": "#AAAAAA",
}


class CalendarWindow:
    """Month calendar that appears above the taskbar."""

    def __init__(self, config: CalendarConfig | None = None, dark_mode: bool = False) -> None:
        self.root = tk.Tk()
        self.root.title(self._title())
        self.root.resizable(False, False)

        self._palette = DARK if dark_mode else LIGHT
        self.root.configure(bg=self._palette["bg"])
        self.root.attributes("-topmost", True)

        self._setup_fonts()

        # Widget pools, filled on demand by the engine
        self._cells: dict[tuple[int, int], tk.Canvas] = {}
        self._cell_pos: dict[int, tuple[int, int]] = {}
        self._headers: dict[int, tk.Label] = {}
        self._engine: CalendarEngine | None = None

        _tmp = tk.Label(self.root, text="00", font=self.font_normal, width=3)
        _tmp.update_idletasks()
        self._cell_w = _tmp.winfo_reqwidth()
        self._cell_h = _tmp.winfo_reqheight()
        _tmp.destroy()

        self._build_shell()

        config = config or CalendarConfig()
        engine = CalendarEngine(self, config, post=self._post)
        engine.day_updated.connect(self._draw_record)
        engine.day_tapped.connect(self._on_day_tapped)
        engine.selection_changed.connect(lambda _dates: self._redraw_all())
        self._engine = engine
        self._apply_palette(self._palette)

        self.root.bind("<Escape>", self._on_escape)
        self.root.protocol("WM_DELETE_WINDOW", self.hide)
        self.root.withdraw()

    @property
    def engine(self) -> CalendarEngine:
        return self._engine

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def _setup_fonts(self) -> None:
        families = tkfont.families(self.root)
        base = "Segoe UI" if "Segoe UI" in families else "TkDefaultFont"
        self.font_normal = tkfont.Font(family=base, size=9)
        self.font_bold = tkfont.Font(family=base, size=9, weight="bold")
        self.font_header = tkfont.Font(family=base, size=10, weight="bold")
        self.font_nav = tkfont.Font(family=base, size=12, weight="bold")
        self.font_footer = tkfont.Font(family=base, size=9)

    @staticmethod
    def _title() -> str:
        return f"Mini Calendar  Day: {day_of_year(date.today())}"

    # ------------------------------------------------------------------
    # Build shell (once): nav bar, title, header/day grids, footer
    # ------------------------------------------------------------------
    def _build_shell(self) -> None:
        bg = self._palette["bg"]
        self._outer = tk.Frame(self.root, bg=bg)
        self._outer.pack(padx=6, pady=4)

        # Navigation row: ◀◀  ◀  Today  ▶  ▶▶
        self._nav = tk.Frame(self._outer, bg=bg)
        self._nav.pack(fill="x", pady=(0, 2))
        self._nav_buttons: list[tk.Label] = []
        for text, side, action in (
            ("◀◀", "left", lambda: self._navigate(-12)),
            ("◀", "left", lambda: self._navigate(-1)),
            ("▶▶", "right", lambda: self._navigate(12)),
            ("▶", "right", lambda: self._navigate(1)),
        ):
            btn = tk.Label(self._nav, text=text, font=self.font_nav, bg=bg, cursor="hand2")
            btn.pack(side=side, padx=6)
            btn.bind("<Button-1>", lambda _e, a=action: a())
            self._nav_buttons.append(btn)

        self._btn_today = tk.Label(
            self._nav, text="Today", font=self.font_bold, bg=bg, cursor="hand2",
        )
        self._btn_today.pack(side="left", padx=6)
        self._btn_today.bind("<Button-1>", lambda _e: self._go_today())

        self._month_label = tk.Label(self._outer, font=self.font_header, bg=bg)
        self._month_label.pack(fill="x", pady=(0, 2))

        self._header_frame = tk.Frame(self._outer, bg=bg)
        self._header_frame.pack()
        self._days_frame = tk.Frame(self._outer, bg=bg)
        self._days_frame.pack()

        self._footer_label = tk.Label(self._outer, font=self.font_footer, bg=bg)
        self._footer_label.pack(pady=(4, 0))

    def _apply_palette(self, palette: dict) -> None:
        self._palette = palette
        bg = palette["bg"]
        for w in (self.root, self._outer, self._nav, self._header_frame, self._days_frame):
            w.configure(bg=bg)
        for btn in self._nav_buttons:
            btn.configure(bg=bg, fg=palette["fg"])
        self._btn_today.configure(bg=bg, fg=palette["accent"])
        self._month_label.configure(bg=bg, fg=palette["header_fg"])
        self._footer_label.configure(bg=bg, fg=palette["footer_fg"])
        self.engine.header_template = palette
        self.engine.day_template = palette
        self._refresh_chrome()

    # ------------------------------------------------------------------
    # CalendarHost
    # ------------------------------------------------------------------
    def create_or_attach_cell_widget(self, row: int, column: int, template) -> tk.Canvas:
        cell = self._cells.get((row, column))
        if cell is None:
            cell = tk.Canvas(
                self._days_frame, width=self._cell_w, height=self._cell_h,
                highlightthickness=0, borderwidth=0,
            )
            cell.bind("<ButtonPress-1>", self._on_press)
            self._cells[(row, column)] = cell
            self._cell_pos[id(cell)] = (row, column)
        cell.configure(bg=(template or self._palette)["bg"])
        cell.grid(row=row, column=column)
        return cell

    def set_cell_visibility(self, handle: tk.Canvas | None, visible: bool) -> None:
        if handle is None or self._engine is None:
            return
        record = self._engine.record_at(*self._cell_pos[id(handle)])
        if record is not None and record.handle is handle:
            self._draw_record(record)

    def destroy_cell_widget(self, handle: tk.Canvas | None) -> None:
        if handle is not None:
            handle.grid_remove()

    def create_or_attach_header_widget(self, column: int, weekday: int, template) -> None:
        palette = template or self._palette
        lbl = self._headers.get(column)
        if lbl is None:
            lbl = tk.Label(self._header_frame, font=self.font_bold, width=3)
            self._headers[column] = lbl
        fg = palette["weekend_fg"] if is_weekend(weekday) else palette["header_fg"]
        lbl.configure(text=DAY_ABBR[weekday], bg=palette["bg"], fg=fg)
        lbl.grid(row=0, column=column)

    def destroy_header_widget(self, column: int) -> None:
        lbl = self._headers.get(column)
        if lbl is not None:
            lbl.grid_remove()

    def _post(self, fn) -> None:
        if threading.current_thread() is threading.main_thread():
            fn()
        else:
            self.root.after(0, fn)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def _day_colors(self, d: date, in_month: bool, selected: bool) -> tuple[str, str]:
        p = self._palette
        if selected:
            return p["sel_bg"], p["fg"]
        if d == date.today():
            return p["accent"], "white"
        if not in_month:
            return p["bg"], p["other_fg"]
        if is_weekend(d.weekday()):
            return p["bg"], p["weekend_fg"]
        return p["bg"], p["fg"]

    def _draw_record(self, record) -> None:
        cell: tk.Canvas | None = record.handle
        if cell is None:
            return
        cell.delete("all")
        if not record.visible:
            cell.configure(bg=self._palette["bg"], cursor="")
            return
        month = self.engine.displayed_month
        in_month = (record.date.year, record.date.month) == (month.year, month.month)
        bg, fg = self._day_colors(record.date, in_month, record.selected)
        w = cell.winfo_width()
        h = cell.winfo_height()
        if w <= 1:
            w = int(cell["width"]) + 2
        if h <= 1:
            h = int(cell["height"]) + 2
        font = self.font_bold if record.date == date.today() else self.font_normal
        cell.configure(bg=bg, cursor="hand2" if record.selectable else "")
        cell.create_text(w // 2, h // 2, text=str(record.date.day), fill=fg, font=font)

    def _redraw_all(self) -> None:
        for record in self.engine.records:
            self._draw_record(record)
        self._refresh_chrome()

    def _refresh_chrome(self) -> None:
        self._month_label.configure(text=month_title(self.engine.displayed_month))
        self._footer_label.configure(text=self._footer_text())

    def _footer_text(self) -> str:
        today_str = f"Today: {date.today().strftime('%d.%m.%Y')}"
        selected = sorted(self.engine.selected_dates)
        if not selected:
            return today_str
        if len(selected) == 1:
            return f"Selected: {selected[0].strftime('%d.%m.%Y')}     {today_str}"
        return f"{len(selected)} days selected     {today_str}"

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def _on_press(self, event: tk.Event) -> None:
        pos = self._cell_pos.get(id(event.widget))
        if pos is None:
            return
        record = self.engine.record_at(*pos)
        if record is not None and record.visible:
            self.engine.tap(record)

    def _on_day_tapped(self, record) -> None:
        log.debug("tapped %s", record)
        self._refresh_chrome()

    def _on_escape(self, _event: tk.Event) -> None:
        if self.engine.selected_dates:
            self.engine.selected_dates = ()
        else:
            self.hide()

    # ------------------------------------------------------------------
    # Options (session only)
    # ------------------------------------------------------------------
    def set_multi_select(self, enabled: bool) -> None:
        self.engine.selection_mode = SelectionMode.MULTI if enabled else SelectionMode.SINGLE
        self._redraw_all()

    def toggle_weekends(self) -> None:
        self.engine.show_weekends = not self.engine.show_weekends
        self._redraw_all()

    def toggle_other_months(self) -> None:
        self.engine.show_days_from_other_months = not self.engine.show_days_from_other_months
        self._redraw_all()

    def open_settings(self) -> None:
        dlg = tk.Toplevel(self.root)
        dlg.title("Options")
        dlg.resizable(False, False)
        dlg.attributes("-topmost", True)
        dlg.grab_set()

        frame = tk.Frame(dlg, padx=12, pady=8)
        frame.pack()

        tk.Label(frame, text="First day of week:", font=self.font_normal).grid(
            row=0, column=0, sticky="w", pady=4,
        )
        day_names = list(_cal.day_name)
        first_var = tk.StringVar(value=day_names[self.engine.first_day_of_week])
        tk.OptionMenu(frame, first_var, *day_names).grid(
            row=0, column=1, padx=(8, 0), pady=4, sticky="we",
        )

        weekends_var = tk.BooleanVar(value=self.engine.show_weekends)
        other_var = tk.BooleanVar(value=self.engine.show_days_from_other_months)
        multi_var = tk.BooleanVar(value=self.engine.selection_mode is SelectionMode.MULTI)
        for row, (text, var) in enumerate((
            ("Show weekends", weekends_var),
            ("Show days from other months", other_var),
            ("Select several days", multi_var),
        ), start=1):
            tk.Checkbutton(
                frame, text=text, variable=var, font=self.font_normal,
            ).grid(row=row, column=0, columnspan=2, sticky="w", pady=2)

        btn_frame = tk.Frame(frame)
        btn_frame.grid(row=4, column=0, columnspan=2, pady=(8, 0))

        def on_ok() -> None:
            engine = self.engine
            # Weekends first so a Sat/Sun start is coerced consistently
            engine.show_weekends = weekends_var.get()
            engine.first_day_of_week = day_names.index(first_var.get())
            engine.show_days_from_other_months = other_var.get()
            multi = multi_var.get()
            if multi != (engine.selection_mode is SelectionMode.MULTI):
                self.set_multi_select(multi)
            dlg.destroy()
            self._redraw_all()

        tk.Button(btn_frame, text="OK", width=8, command=on_ok).pack(
            side="left", padx=4,
        )
        tk.Button(btn_frame, text="Cancel", width=8, command=dlg.destroy).pack(
            side="left", padx=4,
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def _navigate(self, months: int) -> None:
        self.engine.navigate(months)
        self._redraw_all()

    def _go_today(self) -> None:
        self.engine.selected_dates = ()
        self.engine.go_to(date.today())
        self._redraw_all()

    # ------------------------------------------------------------------
    # Show / Hide / Toggle
    # ------------------------------------------------------------------
    def toggle(self) -> None:
        if self.root.state() == "withdrawn" or not self.root.winfo_viewable():
            self.show()
        else:
            self.hide()

    def show(self) -> None:
        self.root.title(self._title())
        self._go_today()
        self.root.deiconify()
        self._position_window()
        self.root.lift()
        self.root.focus_force()

    def hide(self) -> None:
        self.root.withdraw()

    def _position_window(self) -> None:
        """Place the window at the bottom-right corner of the screen."""
        self.root.update_idletasks()
        win_w = self.root.winfo_reqwidth()
        win_h = self.root.winfo_reqheight()
        x = self.root.winfo_screenwidth() - win_w - 12
        y = self.root.winfo_screenheight() - win_h - 60
        self.root.geometry(f"+{x}+{y}")
