# pmdock/core/xprops.py
# Propriedades e hints X11 usados pelo dock: WM check, WM_HINTS, WM_CLASS,
# Motif hints, _NET_WM_DESKTOP e _NET_WM_STATE_ABOVE

import logging
import time

from Xlib import X, Xatom, Xutil, error

logger = logging.getLogger("pmdock.xprops")
logger.addHandler(logging.NullHandler())

# janelas podem sumir entre o CreateNotify e a consulta: não é falha
X_ERRORS = (error.BadWindow, error.BadDrawable, error.BadMatch)

MWM_HINTS_FUNCTIONS = 1 << 0
MWM_HINTS_DECORATIONS = 1 << 1


def window_id(window):
    return getattr(window, "id", window)


class XProps:
    """Requisições stateless de propriedades sobre a conexão do display."""

    def __init__(self, dpy, root):
        self.dpy = dpy
        self.root = root

        # =======================
        # ATOMS
        # =======================
        self.NET_SUPPORTING_WM_CHECK = dpy.intern_atom("_NET_SUPPORTING_WM_CHECK")
        self.NET_WM_DESKTOP = dpy.intern_atom("_NET_WM_DESKTOP")
        self.NET_WM_STATE = dpy.intern_atom("_NET_WM_STATE")
        self.NET_WM_STATE_ABOVE = dpy.intern_atom("_NET_WM_STATE_ABOVE")
        self.MOTIF_WM_HINTS = dpy.intern_atom("_MOTIF_WM_HINTS")

    # -----------------------
    # Consultas
    # -----------------------
    def check_window_manager(self):
        try:
            prop = self.root.get_full_property(self.NET_SUPPORTING_WM_CHECK, Xatom.WINDOW)
        except X_ERRORS:
            return False
        return bool(prop is not None and len(prop.value))

    def get_icon_window(self, window):
        try:
            hints = window.get_wm_hints()
        except X_ERRORS:
            return None
        if hints is None or not hints.flags & Xutil.IconWindowHint:
            return None
        # icon_window = X.NONE chega como inteiro 0
        if not hints.icon_window:
            return None
        return hints.icon_window

    def get_icon_window_waiting(self, window, attempts=2, delay=0.1):
        for _ in range(attempts):
            icon = self.get_icon_window(window)
            if icon is not None:
                return icon
            logger.debug("Waiting for icon window of 0x%x", window_id(window))
            time.sleep(delay)
        return None

    def get_window_size(self, window):
        try:
            geom = window.get_geometry()
        except X_ERRORS:
            logger.debug("Failed to get geometry of window 0x%x", window_id(window))
            return 0, 0
        logger.debug("Window 0x%x has size %dx%d, border %d, depth %d",
                     window_id(window), geom.width, geom.height, geom.border_width, geom.depth)
        return geom.width, geom.height

    def get_res_name(self, window):
        try:
            wm_class = window.get_wm_class()
        except X_ERRORS:
            return None
        if not wm_class:
            return None
        return wm_class[0]

    # -----------------------
    # Escritas (idempotentes)
    # -----------------------
    def set_class_hint(self, window, res_name, res_class):
        window.set_wm_class(res_name, res_class)

    def set_mwm_hints(self, window, flags, funcs, decor):
        window.change_property(self.MOTIF_WM_HINTS, self.MOTIF_WM_HINTS, 32,
                               [flags, funcs, decor, 0, 0])

    def set_desktop_hint(self, window, value):
        # -1 = todos os desktops, gravado como 0xFFFFFFFF
        window.change_property(self.NET_WM_DESKTOP, Xatom.CARDINAL, 32,
                               [value & 0xFFFFFFFF], X.PropModeReplace)
        logger.debug("Set _NET_WM_DESKTOP hint for window 0x%x to %d", window_id(window), value)

    def set_above_hint(self, window):
        window.change_property(self.NET_WM_STATE, Xatom.ATOM, 32,
                               [self.NET_WM_STATE_ABOVE], X.PropModeReplace)
        logger.debug("Set _NET_WM_STATE_ABOVE hint for window 0x%x", window_id(window))
