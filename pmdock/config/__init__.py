from pmdock.config.config import (
    CONFIG_PATH,
    DEFAULTS,
    ConfigError,
    DockConfig,
    TileSpec,
    load_config_file,
    make_tile_spec,
)
