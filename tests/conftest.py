"""
Shared pytest fixtures for pmdock tests: fake python-xlib display/windows
that record every request.
"""

from types import SimpleNamespace

import pytest
from PIL import Image
from Xlib import Xutil, error

from pmdock.config import DockConfig, TileSpec
from pmdock.core.xprops import XProps
from pmdock.managers.tiles import Tile, TileRegistry


def bad_window():
    # XError normalmente é montado a partir do pacote de erro do servidor
    return error.BadWindow.__new__(error.BadWindow)


class FakeWindow:
    def __init__(self, dpy, wid, wm_class=None, icon_window=None, size=(0, 0)):
        self.dpy = dpy
        self.id = wid
        self.wm_class = wm_class
        self.icon_window = icon_window
        self.size = size
        self.props = {}
        self.children = []
        self.parent = None
        self.destroyed = False
        self.hints_queries = 0
        self.images = []

    def _log(self, *entry):
        self.dpy.calls.append(entry)

    def _check(self):
        if self.destroyed:
            raise bad_window()

    # consultas
    def get_wm_class(self):
        self._check()
        return self.wm_class

    def get_wm_hints(self):
        self._check()
        self.hints_queries += 1
        if self.icon_window is None:
            return None
        return SimpleNamespace(flags=Xutil.IconWindowHint, icon_window=self.icon_window)

    def get_geometry(self):
        self._check()
        return SimpleNamespace(x=0, y=0, width=self.size[0], height=self.size[1], border_width=0, depth=24)

    def get_full_property(self, atom, prop_type):
        return self.props.get(atom)

    # escritas
    def change_property(self, atom, prop_type, fmt, data, mode=0):
        self.props[atom] = SimpleNamespace(type=prop_type, format=fmt, value=list(data))

    def change_attributes(self, **kw):
        self._log("change_attributes", self.id, kw)

    def set_wm_class(self, res_name, res_class):
        self.wm_class = (res_name, res_class)

    def set_wm_name(self, name):
        self.wm_name = name

    def configure(self, **kw):
        self._log("configure", self.id, kw)

    def map(self):
        self._log("map", self.id)

    def unmap(self):
        self._log("unmap", self.id)

    def reparent(self, parent, x, y):
        self.parent = parent
        self._log("reparent", self.id, parent.id, x, y)

    def create_window(self, x, y, width, height, border, depth, window_class, visual, **kw):
        win = self.dpy.new_window()
        win.size = (width, height)
        win.parent = self
        win.position = (x, y)
        win.attributes = kw
        self.children.append(win)
        return win

    def create_gc(self, **kw):
        return SimpleNamespace(window=self.id)

    def put_pil_image(self, gc, x, y, image):
        self.images.append((x, y, image))


class FakeDisplay:
    def __init__(self):
        self.calls = []
        self.atoms = {}
        self.events = []
        self.error_handler = None
        self._next_id = 0x100
        self.root = self.new_window()
        self._screen = SimpleNamespace(root=self.root, root_depth=24, white_pixel=0xFFFFFF, black_pixel=0)

    def new_window(self, **kw):
        self._next_id += 1
        return FakeWindow(self, self._next_id, **kw)

    def intern_atom(self, name):
        return self.atoms.setdefault(name, len(self.atoms) + 1)

    def screen(self):
        return self._screen

    def set_error_handler(self, handler):
        self.error_handler = handler

    def flush(self):
        self.calls.append(("flush",))

    def pending_events(self):
        return len(self.events)

    def next_event(self):
        return self.events.pop(0)


@pytest.fixture
def dpy():
    return FakeDisplay()


@pytest.fixture
def no_sleep(monkeypatch):
    """Replaces time.sleep, returns the list of requested delays."""
    delays = []
    monkeypatch.setattr("time.sleep", delays.append)
    return delays


@pytest.fixture
def set_wm_running():
    def _set(dpy, running=True):
        xprops = XProps(dpy, dpy.root)
        if running:
            dpy.root.change_property(xprops.NET_SUPPORTING_WM_CHECK, 33, 32, [0x42])
        else:
            dpy.root.props.pop(xprops.NET_SUPPORTING_WM_CHECK, None)
    return _set


@pytest.fixture
def icon():
    return Image.new("RGBA", (32, 32), (255, 0, 0, 255))


@pytest.fixture
def make_dock(dpy):
    """Factory: minimal dock context around a fake display, no X connection."""

    def _make(specs, **options):
        config = DockConfig(dict(options, tiles=specs))
        tiles = []
        for i, spec in enumerate(specs):
            if spec.kind == "dockapp":
                tiles.append(Tile(i, spec.kind, spec.command, res_name=spec.res_name))
            else:
                tiles.append(Tile(i, spec.kind, spec.command,
                                  icon=Image.new("RGBA", (32, 32), (0, 0, 255, 255))))
        return SimpleNamespace(
            config=config,
            registry=TileRegistry(tiles),
            dpy=dpy,
            root=dpy.root,
            xprops=XProps(dpy, dpy.root),
            dock_window=dpy.new_window(),
            parent_pid=None,
        )

    return _make


def dockapp(res_name, command=None):
    return TileSpec("dockapp", command or res_name, res_name=res_name)


def launcher(command, icon_path="icon.png"):
    return TileSpec("launcher", command, icon_path=icon_path)
