# =======================
# Configuração do pmdock
# =======================
# Arquivo opcional do usuário: ~/.config/pmdock/config.py, definindo um dict
# `config` com as mesmas chaves de DEFAULTS. Exemplo:
#
# config = {
#     "tile_size": 64,
#     "horizontal": True,
#     "tiles": [
#         {"type": "dockapp", "command": "wmclock", "res_name": "wmclock"},
#         {"type": "launcher", "command": "xterm", "icon": "~/icons/term.png"},
#     ],
# }

import importlib.util
import os

from pmdock.managers.tiles import DOCKAPP, LAUNCHER, TILE_KINDS

CONFIG_PATH = "~/.config/pmdock/config.py"

DEFAULTS = {
    # =======================
    # Layout
    # =======================
    "tile_size": 64,
    "horizontal": False,
    "x": 0,
    "y": 0,
    "background": "tile-default.png",

    # =======================
    # Hints para o WM
    # =======================
    "all_desktops": False,
    "above_all": False,
    "mwm_decor": 0x00,
    "mwm_funcs": 0x00,

    # =======================
    # Processo
    # =======================
    "daemon": False,
    "daemon_timeout": None,  # segundos; None = espera para sempre
    "verbose": False,

    # =======================
    # Adoção de dockapps
    # =======================
    "icon_attempts": 2,
    "icon_retry_delay": 0.1,
    "wm_grace_delay": 0.1,
    "reparent_delay": 0.05,

    "tiles": [],
}


class ConfigError(Exception):
    pass


class TileSpec:
    """Um tile já validado, antes de decodificar imagens."""
    def __init__(self, kind, command, res_name=None, icon_path=None):
        self.kind = kind
        self.command = command
        self.res_name = res_name
        self.icon_path = icon_path

    def __eq__(self, other):
        if not isinstance(other, TileSpec):
            return NotImplemented
        return vars(self) == vars(other)

    def __repr__(self):
        return f"<TileSpec {self.kind} {self.command!r} res={self.res_name!r} icon={self.icon_path!r}>"


def make_tile_spec(kind, command, res_name=None, icon=None):
    if not command:
        raise ConfigError("tile requires a command")
    if kind not in TILE_KINDS:
        raise ConfigError(f"invalid type '{kind}' (must be 'dockapp' or 'launcher')")
    if kind == DOCKAPP:
        if not res_name:
            raise ConfigError("dockapp type requires a resource name")
        return TileSpec(DOCKAPP, command, res_name=res_name)
    if not icon:
        raise ConfigError("launcher type requires an icon")
    return TileSpec(LAUNCHER, command, icon_path=os.path.expanduser(icon))


class DockConfig:
    def __init__(self, options=None):
        opts = dict(DEFAULTS)
        opts.update(options or {})
        unknown = set(opts) - set(DEFAULTS)
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(sorted(unknown))}")

        self.tile_size = opts["tile_size"]
        if isinstance(self.tile_size, bool) or not isinstance(self.tile_size, int) or self.tile_size <= 0:
            raise ConfigError(f"Invalid tile size: {self.tile_size}")
        self.horizontal = bool(opts["horizontal"])
        self.x = int(opts["x"])
        self.y = int(opts["y"])
        self.background = os.path.expanduser(opts["background"])
        self.all_desktops = bool(opts["all_desktops"])
        self.above_all = bool(opts["above_all"])
        self.mwm_decor = int(opts["mwm_decor"])
        self.mwm_funcs = int(opts["mwm_funcs"])
        self.daemon = bool(opts["daemon"])
        self.daemon_timeout = opts["daemon_timeout"]
        if self.daemon_timeout is not None and (
                isinstance(self.daemon_timeout, bool)
                or not isinstance(self.daemon_timeout, (int, float))
                or self.daemon_timeout <= 0):
            raise ConfigError(f"Invalid daemon timeout: {self.daemon_timeout}")
        self.verbose = bool(opts["verbose"])
        self.icon_attempts = int(opts["icon_attempts"])
        self.icon_retry_delay = float(opts["icon_retry_delay"])
        self.wm_grace_delay = float(opts["wm_grace_delay"])
        self.reparent_delay = float(opts["reparent_delay"])

        self.tiles = [t if isinstance(t, TileSpec) else tile_from_dict(t) for t in opts["tiles"]]
        if not self.tiles:
            raise ConfigError("No tiles specified")


def tile_from_dict(d):
    return make_tile_spec(d.get("type"), d.get("command"), d.get("res_name"), d.get("icon"))


def load_config_file(path=CONFIG_PATH):
    """Carrega o dict `config` do arquivo do usuário; sem arquivo = {}"""
    path = os.path.expanduser(path)
    if not os.path.exists(path):
        return {}
    spec = importlib.util.spec_from_file_location("pmdock_user_config", path)
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigError(f"Failed to load config file {path}: {e}") from e
    config = getattr(module, "config", {})
    if not isinstance(config, dict):
        raise ConfigError(f"{path}: `config` must be a dict")
    return config
