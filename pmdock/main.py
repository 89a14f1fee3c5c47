#!/usr/bin/env python3
# pmdock/main.py - Inicialização e loop de eventos do pmdock

import logging
import os
import select
import signal
import sys

from Xlib import X, display, error

from pmdock.config import ConfigError
from pmdock.config.cli import parse_args
from pmdock.core.geometry import container_size, tile_position
from pmdock.core.xprops import MWM_HINTS_DECORATIONS, MWM_HINTS_FUNCTIONS, XProps
from pmdock.managers import daemon
from pmdock.managers.processes import ProcessSupervisor, SpawnError
from pmdock.managers.renderer import ImageError, Renderer, load_image
from pmdock.managers.swallow import Swallower
from pmdock.managers.tiles import DOCKAPP, Tile, TileRegistry

logger = logging.getLogger("pmdock")

LOG_FORMAT = "pmdock (%(levelname)s): %(message)s"
SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class PMDock:
    def __init__(self, config, parent_pid=None):
        self.config = config
        self.parent_pid = parent_pid
        self.dpy = None
        self.screen = None
        self.root = None
        self.xprops = None
        self.dock_window = None

        # Imagens primeiro: falha aqui aborta antes de qualquer fork/janela
        self.registry = TileRegistry(self.load_tiles())
        self.background = load_image(config.background)

        # Módulos
        self.processes = ProcessSupervisor(self.registry)
        self.swallower = Swallower(self)
        self.renderer = Renderer(self, self.background)

        self.shutdown_signal = None
        self._wakeup_r = None

    def load_tiles(self):
        tiles = []
        for i, spec in enumerate(self.config.tiles):
            if spec.kind == DOCKAPP:
                tiles.append(Tile(i, spec.kind, spec.command, res_name=spec.res_name))
            else:
                tiles.append(Tile(i, spec.kind, spec.command, icon=load_image(spec.icon_path)))
        return tiles

    # =======================
    # DISPLAY
    # =======================
    def setup_display(self, dpy=None):
        self.dpy = dpy or display.Display()
        self.dpy.set_error_handler(self.x_error_handler)
        self.screen = self.dpy.screen()
        self.root = self.screen.root
        self.xprops = XProps(self.dpy, self.root)

        # captura criação de janelas para achar os dockapps
        self.root.change_attributes(event_mask=X.SubstructureNotifyMask)

    def x_error_handler(self, err, request):
        # janela destruída pelo próprio dono entre o evento e a consulta
        if isinstance(err, (error.BadWindow, error.BadDrawable)):
            return
        logger.debug("X11 Error: %s", err)

    def create_dock_window(self):
        cfg = self.config
        width, height = container_size(len(self.registry), cfg.tile_size, cfg.horizontal)

        self.dock_window = self.root.create_window(
            cfg.x, cfg.y, width, height, 0,
            self.screen.root_depth, X.InputOutput, X.CopyFromParent,
            background_pixel=self.screen.white_pixel,
            border_pixel=self.screen.black_pixel,
            event_mask=X.ExposureMask | X.StructureNotifyMask,
        )
        self.dock_window.set_wm_name("PMDock")
        self.xprops.set_mwm_hints(self.dock_window, MWM_HINTS_FUNCTIONS | MWM_HINTS_DECORATIONS,
                                  cfg.mwm_funcs, cfg.mwm_decor)
        self.xprops.set_class_hint(self.dock_window, "pmdock", "PMDock")
        if cfg.above_all:
            self.xprops.set_above_hint(self.dock_window)
        if cfg.all_desktops:
            self.xprops.set_desktop_hint(self.dock_window, -1)

        self.dock_window.map()
        self.dock_window.configure(x=cfg.x, y=cfg.y, width=width, height=height)

        logger.debug("Created dock window 0x%x at %dx%d+%d+%d", self.dock_window.id, width, height, cfg.x, cfg.y)

    def create_launchers(self):
        size = self.config.tile_size
        for tile in self.registry.launchers():
            x, y = tile_position(tile.index, size, self.config.horizontal)
            tile.window = self.dock_window.create_window(
                x, y, size, size, 0,
                self.screen.root_depth, X.InputOutput, X.CopyFromParent,
                background_pixel=self.screen.white_pixel,
                border_pixel=self.screen.black_pixel,
                event_mask=X.ExposureMask | X.ButtonPressMask,
            )
            tile.window.map()
            logger.debug("Created launcher window 0x%x at %dx%d", tile.window.id, x, y)

    # =======================
    # INICIALIZAÇÃO
    # =======================
    def start(self, dpy=None):
        # antes de qualquer fork: SIGTERM no meio do startup ainda passa pelo loop
        self.install_signal_handlers()
        self.setup_display(dpy)
        self.create_dock_window()
        self.create_launchers()
        self.dpy.flush()

        self.processes.start_dockapps()

        # só launchers: não há o que esperar
        if self.registry.all_dockapps_adopted():
            self.swallower.on_complete()

    # =======================
    # EVENTOS
    # =======================
    def handle_event(self, ev):
        if ev.type == X.CreateNotify:
            if self.dock_window is not None and ev.window.id == self.dock_window.id:
                return
            self.swallower.handle_create(ev.window)
        elif ev.type == X.Expose:
            if ev.count == 0:
                self.renderer.handle_expose(ev.window)
        elif ev.type == X.ButtonPress:
            tile = self.registry.find_launcher_by_window(ev.window)
            if tile is not None:
                self.processes.execute_launcher_command(tile)

    def process_pending_events(self):
        while self.shutdown_signal is None and self.dpy.pending_events():
            self.handle_event(self.dpy.next_event())

    # -----------------------
    # Sinais -> loop
    # -----------------------
    def _on_signal(self, signum, frame):
        # só marca; o trabalho é feito no loop
        self.shutdown_signal = signum

    def install_signal_handlers(self):
        self._wakeup_r, wakeup_w = os.pipe()
        os.set_blocking(self._wakeup_r, False)
        os.set_blocking(wakeup_w, False)
        signal.set_wakeup_fd(wakeup_w)
        for signum in SHUTDOWN_SIGNALS:
            signal.signal(signum, self._on_signal)

    def _drain_wakeup(self):
        try:
            while os.read(self._wakeup_r, 512):
                pass
        except BlockingIOError:
            pass

    def run(self):
        """Loop principal; retorna o status de saída do processo."""
        if self._wakeup_r is None:
            self.install_signal_handlers()
        try:
            while True:
                self.process_pending_events()
                if self.shutdown_signal is not None:
                    break
                readable, _, _ = select.select([self.dpy, self._wakeup_r], [], [])
                if self._wakeup_r in readable:
                    self._drain_wakeup()
        except error.ConnectionClosedError:
            logger.debug("X11 IO Error")
            self.processes.terminate_all()
            return 1

        logger.debug("Received signal %d, shutting down", self.shutdown_signal)
        self.processes.terminate_all()
        return 0


def setup_logging(verbose=False):
    logging.basicConfig(stream=sys.stderr, format=LOG_FORMAT)
    logging.getLogger("pmdock").setLevel(logging.DEBUG if verbose else logging.WARNING)


def main(argv=None):
    setup_logging()
    dock = None
    try:
        config = parse_args(argv)
        setup_logging(config.verbose)

        dock = PMDock(config)
        if config.daemon:
            dock.parent_pid = daemon.daemonize(config.daemon_timeout)
        dock.start()
    except (ConfigError, ImageError, SpawnError, daemon.DaemonError,
            error.DisplayError, error.ConnectionClosedError) as e:
        logger.error("%s", e)
        if dock is not None:
            dock.processes.terminate_all()
        return 1

    return dock.run()


if __name__ == "__main__":
    sys.exit(main())
