"""Entry point — glues pystray (daemon thread) with tkinter (main thread)."""

import logging
import threading

from calendar_window import CalendarWindow
from icon_gen import create_icon_image
from selection import SelectionMode
from settings import config_from_settings, load_settings
from tray_icon import create_tray

log = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = load_settings()
    cal_win = CalendarWindow(config_from_settings(settings),
                             dark_mode=settings["dark_mode"])
    engine = cal_win.engine

    # Callbacks marshalled onto the tkinter main thread
    def on_main(fn):
        return lambda: cal_win.root.after(0, fn)

    def on_exit() -> None:
        def _quit() -> None:
            tray.stop()
            cal_win.root.destroy()
        cal_win.root.after(0, _quit)

    toggles = [
        ("Select several days",
         lambda: engine.selection_mode is SelectionMode.MULTI,
         on_main(lambda: cal_win.set_multi_select(
             engine.selection_mode is not SelectionMode.MULTI))),
        ("Show weekends",
         lambda: engine.show_weekends,
         on_main(cal_win.toggle_weekends)),
        ("Show days from other months",
         lambda: engine.show_days_from_other_months,
         on_main(cal_win.toggle_other_months)),
    ]

    tray = create_tray(create_icon_image(), on_main(cal_win.toggle), on_exit,
                       on_settings=on_main(cal_win.open_settings),
                       toggles=toggles)

    # Run pystray in a daemon thread so it doesn't block tkinter
    tray_thread = threading.Thread(target=tray.run, daemon=True)
    tray_thread.start()
    log.info("Mini calendar running, first day %d", engine.first_day_of_week)

    # tkinter main loop on the main thread
    cal_win.root.mainloop()


if __name__ == "__main__":
    main()
