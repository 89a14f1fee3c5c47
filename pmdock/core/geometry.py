# pmdock/core/geometry.py
# Geometria dos tiles: posição de cada tile, tamanho do container e centralização

# =======================
# TILES
# =======================
def tile_position(index, tile_size, horizontal=False):
    """Retorna (x, y) da origem do tile `index` dentro do container."""
    if horizontal:
        return index * tile_size, 0
    return 0, index * tile_size


def container_size(tile_count, tile_size, horizontal=False):
    """Eixo longo cresce com o número de tiles, eixo curto = 1 tile."""
    if horizontal:
        return tile_count * tile_size, tile_size
    return tile_size, tile_count * tile_size


# =======================
# CENTRALIZAÇÃO
# =======================
def center_offset(tile_size, dimension):
    # dimensão 0 (geometria falhou) ou maior que o tile: cola na origem
    if 0 < dimension < tile_size:
        return (tile_size - dimension) // 2
    return 0


def icon_position(index, tile_size, horizontal, size):
    """Posição da icon window centralizada no tile. size = (width, height)"""
    x, y = tile_position(index, tile_size, horizontal)
    width, height = size
    return x + center_offset(tile_size, width), y + center_offset(tile_size, height)


def main_window_position(icon_pos, tile_size, horizontal=False):
    """A janela principal vai para 2 tiles fora da grade, no eixo cruzado."""
    icon_x, icon_y = icon_pos
    if horizontal:
        return icon_x, tile_size * 2
    return tile_size * 2, icon_y
