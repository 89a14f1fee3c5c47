# pmdock/managers/swallow.py
# Adoção ("swallow") de dockapps: match por res_name, icon window com retry,
# reparent no container com workaround para WM, detecção de conclusão

import logging
import time

from Xlib import X

from pmdock.core import geometry
from pmdock.core.xprops import window_id
from pmdock.managers import daemon

logger = logging.getLogger("pmdock.swallow")
logger.addHandler(logging.NullHandler())

PENDING = "pending"
ADOPTED = "adopted"
ABANDONED = "abandoned"


class Swallower:
    def __init__(self, dock):
        """ dock: referência ao PMDock (dpy, root, xprops, registry, config, dock_window) """
        self.dock = dock
        self.completed = False

    def state(self, index):
        tile = self.dock.registry.get(index)
        if tile.window is not None:
            return ADOPTED
        if tile.abandoned:
            return ABANDONED
        return PENDING

    # =======================
    # CREATE NOTIFY
    # =======================
    def handle_create(self, window):
        res_name = self.dock.xprops.get_res_name(window)
        if res_name is None:
            return False

        logger.debug("Created window 0x%x with res_name '%s'", window_id(window), res_name)

        index = self.dock.registry.find_pending_by_resource_name(res_name)
        if index is None:
            return False
        return self.swallow(window, index)

    # =======================
    # SWALLOW
    # =======================
    def swallow(self, main_window, index):
        cfg = self.dock.config
        xprops = self.dock.xprops
        dpy = self.dock.dpy
        dock_window = self.dock.dock_window
        size = cfg.tile_size

        logger.debug("Swallowing dockapp with main window 0x%x at index %d", window_id(main_window), index)

        wm_running = xprops.check_window_manager()
        if wm_running:
            logger.warning("Window manager detected, swallowing dockapp with workaround")
            # tempo para o WM tratar a janela nova
            time.sleep(cfg.wm_grace_delay)

        icon_window = xprops.get_icon_window_waiting(
            main_window, attempts=cfg.icon_attempts, delay=cfg.icon_retry_delay)
        if icon_window is None:
            logger.warning("Window 0x%x has no icon window, skipping", window_id(main_window))
            self.dock.registry.mark_abandoned(index)
            return False

        icon_window.configure(border_width=0)

        icon_pos = geometry.icon_position(index, size, cfg.horizontal, xprops.get_window_size(icon_window))
        main_pos = geometry.main_window_position(icon_pos, size, cfg.horizontal)

        if wm_running:
            # unmap + reparent e espera o WM soltar a janela
            main_window.unmap()
            icon_window.unmap()
            dpy.flush()
            time.sleep(cfg.reparent_delay)
            main_window.reparent(dock_window, *main_pos)
            icon_window.reparent(dock_window, *icon_pos)
            dpy.flush()
            time.sleep(cfg.reparent_delay)

        main_window.reparent(dock_window, *main_pos)
        icon_window.reparent(dock_window, *icon_pos)
        for w in (main_window, icon_window):
            w.configure(stack_mode=X.Above)
            w.map()
        dpy.flush()

        self.dock.registry.mark_adopted(index, icon_window)
        logger.debug("Swallowed window 0x%x at %dx%d", window_id(icon_window), *icon_pos)

        if self.dock.registry.all_dockapps_adopted():
            self.on_complete()
        return True

    def on_complete(self):
        if self.completed:
            return
        self.completed = True
        logger.debug("All dockapps swallowed")

        # nada mais para casar: para de escutar CreateNotify no root
        self.dock.root.change_attributes(event_mask=X.NoEventMask)
        self.dock.dpy.flush()

        if self.dock.parent_pid:
            daemon.notify_parent(self.dock.parent_pid)
