"""Parsing of ``.cub`` scene description files."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .colors import parse_color
from .textures import load_texture, parse_texture_path
from .utils import SceneError, get_rgba, is_player, is_valid_content

Grid = list[list[str]]
TextureLoader = Callable[[str, str], Any]

_COLOR_KEYS = {"F ": "floor", "C ": "ceiling"}
_TEXTURE_KEYS = {"NO ": "north", "SO ": "south", "WE ": "west", "EA ": "east"}
_ELEMENT_COUNT = len(_COLOR_KEYS) + len(_TEXTURE_KEYS)
_MAP_START = frozenset("01NSEW ")


@dataclass
class Scene:
    """Everything a scene description file defines."""

    north: Any
    south: Any
    west: Any
    east: Any
    floor_color: tuple[int, int, int]
    ceiling_color: tuple[int, int, int]
    grid: Grid
    map_width: int
    player_pos: tuple[int, int]

    @property
    def map_height(self) -> int:
        return len(self.grid)

    @property
    def floor_rgba(self) -> int:
        return get_rgba(*self.floor_color, 255)

    @property
    def ceiling_rgba(self) -> int:
        return get_rgba(*self.ceiling_color, 255)


def check_map_content(map_text: str) -> tuple[int, int, tuple[int, int]]:
    """Validate the map text.

    Returns ``(height, width, (row, col))`` where ``(row, col)`` is the
    player spawn. Raises SceneError on invalid characters, a missing or
    repeated player, or anything following the map after a blank line.
    """
    pos = 0
    end = len(map_text)
    height = 0
    width = 0
    players = 0
    player_pos = (0, 0)
    while pos < end:
        line_width = 0
        while pos < end and map_text[pos] != "\n":
            char = map_text[pos]
            pos += 1
            if not is_valid_content(char):
                raise SceneError("invalid map content")
            if is_player(char):
                players += 1
                if players > 1:
                    raise SceneError("multiple players found")
                player_pos = (height, line_width)
            line_width += 1
        width = max(width, line_width)
        height += 1
        if pos < end:
            pos += 1
            if pos < end and map_text[pos] == "\n":
                break
    if players == 0:
        raise SceneError("no player found")
    rest = map_text[pos:].lstrip("\n")
    if rest:
        if rest[0] not in _MAP_START:
            raise SceneError("map has to be the last element in file")
        raise SceneError("map can't be seperated by newline")
    return height, width, player_pos


def _valid_door_position(grid: Grid, x: int, y: int) -> bool:
    row, above, below = grid[y], grid[y - 1], grid[y + 1]
    above_end = len(above) - 1
    below_end = len(below) - 1
    if not (0 < x < len(row) - 1 and 0 < y < len(grid) - 1):
        return False
    diagonals_open = (
        x - 1 < above_end and above[x - 1] != "1"
        and x + 1 < above_end and above[x + 1] != "1"
        and x - 1 < below_end and below[x - 1] != "1"
        and x + 1 < below_end and below[x + 1] != "1"
    )
    if not diagonals_open:
        return False
    across_row = (
        row[x - 1] == "1" and row[x + 1] == "1"
        and x < above_end and above[x] == "0"
        and x < below_end and below[x] == "0"
    )
    across_column = (
        x < above_end and above[x] == "1"
        and x < below_end and below[x] == "1"
        and row[x - 1] == "0" and row[x + 1] == "0"
    )
    return across_row or across_column


def _place_doors(grid: Grid) -> None:
    """Mark every cell that suits a door with an open door ``d``."""
    for y in range(1, len(grid) - 3):
        for x in range(1, len(grid[y]) - 3):
            if _valid_door_position(grid, x, y):
                grid[y][x] = "d"


def build_grid(map_text: str, height: int) -> Grid:
    """Split the first ``height`` map lines into a grid and place the doors."""
    rows = map_text.split("\n")
    if len(rows) < height:
        raise ValueError("map text has fewer lines than the given height")
    grid = [list(row) for row in rows[:height]]
    _place_doors(grid)
    return grid


def find_player(grid: Grid) -> tuple[int, int]:
    """Return ``(row, col)`` of the first player spawn in the grid."""
    for row_index, row in enumerate(grid):
        for col_index, char in enumerate(row):
            if is_player(char):
                return row_index, col_index
    raise SceneError("no player found")


def _cell(grid: Grid, x: int, y: int) -> str:
    if 0 <= y < len(grid) and 0 <= x < len(grid[y]):
        return grid[y][x]
    return ""


def flood_fill(grid: Grid, x: int, y: int) -> None:
    """Fill the area reachable from ``(x, y)`` with ``.``.

    Player and open door cells keep their character. Raises SceneError if
    the area reaches the map border, i.e. is not enclosed by walls.
    """
    height = len(grid)
    stack = [(x, y)]
    seen: set[tuple[int, int]] = set()
    while stack:
        cx, cy = stack.pop()
        if (cx, cy) in seen:
            continue
        seen.add((cx, cy))
        if cy in (0, height - 1) or cx == 0 or not _cell(grid, cx, cy):
            raise SceneError("map not surrounded by walls")
        char = grid[cy][cx]
        if not is_player(char) and char != "d":
            grid[cy][cx] = "."
        for nx, ny in ((cx, cy + 1), (cx, cy - 1), (cx + 1, cy), (cx - 1, cy)):
            neighbour = _cell(grid, nx, ny)
            if neighbour not in ("1", ".") and not is_player(neighbour):
                stack.append((nx, ny))


def _is_element(line: str) -> bool:
    return any(line.startswith(key) for key in (*_COLOR_KEYS, *_TEXTURE_KEYS))


def _read_element(line: str, colors: dict[str, tuple[int, int, int]],
                  textures: dict[str, Any], loader: TextureLoader) -> None:
    for key, name in _COLOR_KEYS.items():
        if line.startswith(key):
            if name in colors:
                raise SceneError(f"multiple {name} colors found")
            colors[name] = parse_color(line[1:], name)
            return
    for key, name in _TEXTURE_KEYS.items():
        if line.startswith(key):
            textures[name] = loader(parse_texture_path(line[2:]), name)
            return


def parse_scene(lines: Iterable[str],
                loader: TextureLoader = load_texture) -> Scene:
    """Parse scene lines (each with its newline) into a Scene.

    ``loader(path, name)`` loads a texture; ``name`` is one of north,
    south, west or east.
    """
    line_iter = iter(lines)
    colors: dict[str, tuple[int, int, int]] = {}
    textures: dict[str, Any] = {}
    elements = 0
    line = next(line_iter, None)
    while line is not None and (_is_element(line) or line.startswith("\n")):
        if not line.startswith("\n"):
            _read_element(line, colors, textures, loader)
            elements += 1
        line = next(line_iter, None)
    if elements != _ELEMENT_COUNT:
        if line is not None:
            raise SceneError("(textures/colors first, then a map)")
        raise SceneError("missing info (textures, colors, and a map needed)")
    if len(colors) != len(_COLOR_KEYS) or len(textures) != len(_TEXTURE_KEYS):
        raise SceneError("missing info (textures, colors, and a map needed)")
    if line is None:
        raise SceneError("missing map")
    map_text = line + "".join(line_iter)
    height, width, _ = check_map_content(map_text)
    grid = build_grid(map_text, height)
    row, col = find_player(grid)
    flood_fill(grid, col, row)
    return Scene(
        north=textures["north"],
        south=textures["south"],
        west=textures["west"],
        east=textures["east"],
        floor_color=colors["floor"],
        ceiling_color=colors["ceiling"],
        grid=grid,
        map_width=width,
        player_pos=(row, col),
    )


def load_scene(path: str, loader: TextureLoader = load_texture) -> Scene:
    """Read and parse the scene description file at ``path``."""
    try:
        with open(path, encoding="utf-8", errors="replace", newline="") as handle:
            return parse_scene(handle, loader)
    except OSError as exc:
        raise SceneError("cannot open scene description file") from exc