# pmdock/config/cli.py
# Opções de linha de comando; os tiles são montados na ordem em que
# aparecem: -c/-r/-i ficam pendentes até o próximo -t

import argparse

from pmdock.config.config import CONFIG_PATH, ConfigError, DockConfig, load_config_file, make_tile_spec

PENDING = ("pending_command", "pending_res_name", "pending_icon")


def positive_int(value):
    try:
        size = int(value)
    except ValueError:
        size = 0
    if size <= 0:
        raise argparse.ArgumentTypeError(f"Invalid tile size: {value}")
    return size


def positive_float(value):
    try:
        seconds = float(value)
    except ValueError:
        seconds = 0
    if not seconds > 0:
        raise argparse.ArgumentTypeError(f"Invalid timeout: {value}")
    return seconds


def c_int(value):
    # mesmo formato do strtoul(..., 0): 0x.., 0o.., decimal
    try:
        return int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value}")


class AddTileAction(argparse.Action):
    def __call__(self, parser, namespace, values, option_string=None):
        command = getattr(namespace, "pending_command", None)
        if not command:
            raise argparse.ArgumentError(self, "-t requires preceding -c to specify command")
        try:
            spec = make_tile_spec(values, command,
                                  res_name=getattr(namespace, "pending_res_name", None),
                                  icon=getattr(namespace, "pending_icon", None))
        except ConfigError as e:
            raise argparse.ArgumentError(self, str(e))
        tiles = getattr(namespace, "tiles", None) or []
        tiles.append(spec)
        namespace.tiles = tiles
        for name in PENDING:
            setattr(namespace, name, None)


def build_parser():
    p = argparse.ArgumentParser(
        prog="pmdock",
        description="An X11 panel for hosting dockapps and app launchers",
        argument_default=argparse.SUPPRESS,
    )
    p.add_argument("-a", dest="all_desktops", action="store_true", help="Show on all virtual desktops")
    p.add_argument("-A", dest="above_all", action="store_true", help="Show on top of all windows")
    p.add_argument("-x", dest="x", type=int, metavar="POSITION", help="X coordinate (default: 0)")
    p.add_argument("-y", dest="y", type=int, metavar="POSITION", help="Y coordinate (default: 0)")
    p.add_argument("-s", dest="tile_size", type=positive_int, metavar="SIZE",
                   help="Tile size in pixels (default: 64)")
    p.add_argument("-b", dest="background", metavar="IMAGE",
                   help="Tile background image (default: tile-default.png)")
    p.add_argument("-H", dest="horizontal", action="store_true", help="Use horizontal layout")
    p.add_argument("-D", dest="mwm_decor", type=c_int, metavar="DECOR",
                   help="Window decorations hints (default: 0x00)")
    p.add_argument("-f", dest="mwm_funcs", type=c_int, metavar="FUNCS",
                   help="Window functions hints (default: 0x00)")
    p.add_argument("-d", dest="daemon", action="store_true", help="Daemonize after swallowing all dockapps")
    p.add_argument("-T", dest="daemon_timeout", type=positive_float, metavar="SECONDS",
                   help="Give up daemonizing if dockapps are not swallowed in time")
    p.add_argument("-r", dest="pending_res_name", metavar="NAME", help="Resource name for dockapp in the next tile")
    p.add_argument("-i", dest="pending_icon", metavar="ICON", help="Icon path for launcher in the next tile")
    p.add_argument("-c", dest="pending_command", metavar="COMMAND", help="Command to execute in the next tile")
    p.add_argument("-t", dest="tiles", action=AddTileAction, metavar="TYPE",
                   help="Add tile (dockapp or launcher)")
    p.add_argument("-v", dest="verbose", action="store_true", help="Show debug messages")
    p.add_argument("--config", dest="config", metavar="PATH", help=f"Config file (default: {CONFIG_PATH})")
    return p


def parse_args(argv=None):
    """Arquivo de config primeiro, linha de comando por cima."""
    args = vars(build_parser().parse_args(argv))
    options = load_config_file(args.pop("config", CONFIG_PATH))
    for name in PENDING:
        args.pop(name, None)
    options.update(args)
    return DockConfig(options)
