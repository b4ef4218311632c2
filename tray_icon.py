"""System-tray icon setup via pystray."""

from datetime import date
from typing import Callable

import pystray
from PIL import Image
from pystray import MenuItem, Menu


def create_tray(
    icon_image: Image.Image,
    on_show: Callable[[], None],
    on_exit: Callable[[], None],
    on_settings: Callable[[], None] | None = None,
    toggles: list[tuple[str, Callable[[], bool], Callable[[], None]]] | None = None,
) -> pystray.Icon:
    """Build and return a pystray Icon (not yet started).

    *toggles* are ``(label, is_checked, on_toggle)`` triples shown as check
    items. The callbacks run on pystray's thread; callers marshal them.
    """
    items: list[MenuItem | Menu] = [
        MenuItem("Show Calendar", lambda _icon, _item: on_show(), default=True),
    ]
    if toggles:
        items.append(Menu.SEPARATOR)
        for label, is_checked, on_toggle in toggles:
            items.append(MenuItem(
                label,
                lambda _icon, _item, fn=on_toggle: fn(),
                checked=lambda _item, fn=is_checked: fn(),
            ))
        items.append(Menu.SEPARATOR)
    if on_settings is not None:
        items.append(MenuItem("Options", lambda _icon, _item: on_settings()))
    items.append(Menu.SEPARATOR)
    items.append(MenuItem("Exit", lambda _icon, _item: on_exit()))
    menu = Menu(*items)
    today = date.today()
    return pystray.Icon("mini-calendar", icon_image,
                        f"Mini Calendar – {today.strftime('%d.%m.%Y')}", menu)
