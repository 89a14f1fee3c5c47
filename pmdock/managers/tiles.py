# pmdock/managers/tiles.py
# Registro de tiles do dock: dockapps e launchers, fixos desde o startup

DOCKAPP = "dockapp"
LAUNCHER = "launcher"
TILE_KINDS = (DOCKAPP, LAUNCHER)


class Tile:
    """Um slot do dock.
    - dockapp: res_name é a chave de match, window = icon window adotada
    - launcher: icon é a imagem decodificada, window = janela criada pelo dock
    """
    def __init__(self, index, kind, command, res_name=None, icon=None):
        if kind not in TILE_KINDS:
            raise ValueError(f"invalid tile type '{kind}'")
        if (kind == DOCKAPP) != bool(res_name):
            raise ValueError("res_name must be set exactly for dockapp tiles")
        if (kind == LAUNCHER) != (icon is not None):
            raise ValueError("icon must be set exactly for launcher tiles")
        self.index = index
        self.kind = kind
        self.command = command
        self.res_name = res_name
        self.icon = icon
        self.window = None
        self.pid = 0
        self.abandoned = False

    @property
    def is_dockapp(self):
        return self.kind == DOCKAPP

    @property
    def is_launcher(self):
        return self.kind == LAUNCHER

    def __repr__(self):
        wid = getattr(self.window, "id", self.window)
        return f"<Tile {self.index} {self.kind} cmd={self.command!r} window={wid} pid={self.pid}>"


class TileRegistry:
    def __init__(self, tiles=None):
        self.tiles = []
        if tiles:
            self.allocate(tiles)

    def allocate(self, tiles):
        """Aloca uma única vez; a ordem da configuração é o desempate do match."""
        if self.tiles:
            raise RuntimeError("tile registry already allocated")
        self.tiles = list(tiles)
        for i, tile in enumerate(self.tiles):
            tile.index = i

    def get(self, index):
        return self.tiles[index]

    def __len__(self):
        return len(self.tiles)

    def __iter__(self):
        return iter(self.tiles)

    def dockapps(self):
        return [t for t in self.tiles if t.is_dockapp]

    def launchers(self):
        return [t for t in self.tiles if t.is_launcher]

    # -------------------------
    # Adoção
    # -------------------------
    def find_pending_by_resource_name(self, name):
        for tile in self.tiles:
            if (tile.is_dockapp and tile.window is None and not tile.abandoned
                    and tile.res_name == name):
                return tile.index
        return None

    def mark_adopted(self, index, window):
        tile = self.tiles[index]
        if not tile.is_dockapp:
            raise RuntimeError(f"tile {index} is not a dockapp")
        if tile.window is not None:
            raise RuntimeError(f"tile {index} already adopted")
        tile.window = window

    def mark_abandoned(self, index):
        # icon window nunca apareceu: o tile fica sem janela para sempre
        self.tiles[index].abandoned = True

    def all_dockapps_adopted(self):
        return all(t.window is not None for t in self.tiles if t.is_dockapp)

    def find_launcher_by_window(self, window):
        wid = getattr(window, "id", window)
        for tile in self.tiles:
            if tile.is_launcher and tile.window is not None and tile.window.id == wid:
                return tile
        return None
