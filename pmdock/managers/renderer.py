# pmdock/managers/renderer.py
# Desenho dos tiles: fundo no container (atrás dos dockapps) e
# fundo + ícone nas janelas dos launchers

import logging

from PIL import Image

from pmdock.core import geometry

logger = logging.getLogger("pmdock.renderer")
logger.addHandler(logging.NullHandler())

WINDOW_BACKGROUND = (255, 255, 255, 255)


class ImageError(Exception):
    pass


def load_image(path):
    try:
        with Image.open(path) as img:
            return img.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageError(f"Failed to load image {path}: {e}") from e


class Renderer:
    def __init__(self, dock, background):
        """ dock: referência ao PMDock
            background: imagem PIL do fundo dos tiles
        """
        self.dock = dock
        self.background = background
        self._background_rgb = background.convert("RGB")
        self._gcs = {}

    def _gc(self, window):
        gc = self._gcs.get(window.id)
        if gc is None:
            gc = window.create_gc()
            self._gcs[window.id] = gc
        return gc

    # =======================
    # EXPOSE
    # =======================
    def handle_expose(self, window):
        dock_window = self.dock.dock_window
        if dock_window is not None and window.id == dock_window.id:
            self.draw_container()
            return
        tile = self.dock.registry.find_launcher_by_window(window)
        if tile is not None:
            self.draw_launcher(tile)

    def draw_container(self):
        cfg = self.dock.config
        dock_window = self.dock.dock_window
        gc = self._gc(dock_window)
        for tile in self.dock.registry:
            if tile.is_launcher:
                continue
            x, y = geometry.tile_position(tile.index, cfg.tile_size, cfg.horizontal)
            # a icon window do dockapp fica por cima, quem pinta é o próprio dockapp
            dock_window.put_pil_image(gc, x, y, self._background_rgb)

    def compose_launcher(self, tile):
        size = self.dock.config.tile_size
        canvas = Image.new("RGBA", (size, size), WINDOW_BACKGROUND)
        canvas.alpha_composite(self.background)
        icon = tile.icon
        x = geometry.center_offset(size, icon.width)
        y = geometry.center_offset(size, icon.height)
        canvas.alpha_composite(icon, dest=(x, y))
        return canvas.convert("RGB")

    def draw_launcher(self, tile):
        tile.window.put_pil_image(self._gc(tile.window), 0, 0, self.compose_launcher(tile))
