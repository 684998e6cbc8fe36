"""The minimap overlay: wall tiles, frame and door tiles, and their scrolling."""

from __future__ import annotations

from dataclasses import dataclass, field

from .player import Player
from .utils import is_player
from .world import World

MINIMAP_ORIGIN = 250
TILE_SIZE = 16
ICON_HALF = TILE_SIZE // 2
FRAME_MIN = 100
FRAME_MAX = 420
FRAME_TILES = 82
SHIFT = 2
BACKGROUND_POS = 116
BACKGROUND_SIZE = 320
BACKGROUND_DEPTH = 5
FRAME_DEPTH = 100
TILE_DEPTH = 10
DOOR_LOOKAHEAD = 0.1

_DIRECTIONS = ((0, 1), (0, -1), (1, 0), (-1, 0))


def is_filled(char: str, filling: str) -> bool:
    """Return True if the minimap walk should not enter a cell holding ``char``."""
    return char == filling or is_player(char) or char == "D"


@dataclass
class Instance:
    """One placement of a minimap image: screen position, depth and visibility."""

    x: int
    y: int
    z: int = 0
    enabled: bool = True


def _in_view(instance: Instance) -> bool:
    return (FRAME_MIN < instance.y < FRAME_MAX
            and FRAME_MIN < instance.x < FRAME_MAX)


@dataclass
class Minimap:
    """Placements of the minimap images.

    ``frames`` holds the border tiles first (``FRAME_TILES`` of them) and
    the door tiles after them; both use the same image.
    """

    walls: list[Instance] = field(default_factory=list)
    frames: list[Instance] = field(default_factory=list)
    player_icon: Instance = field(
        default_factory=lambda: Instance(MINIMAP_ORIGIN, MINIMAP_ORIGIN))
    background: Instance = field(
        default_factory=lambda: Instance(BACKGROUND_POS, BACKGROUND_POS,
                                         BACKGROUND_DEPTH))

    def build(self, world: World) -> None:
        """Lay out the whole minimap for ``world`` from scratch."""
        self.walls = []
        self.frames = []
        self.background = Instance(BACKGROUND_POS, BACKGROUND_POS,
                                   BACKGROUND_DEPTH)
        self.player_icon = Instance(MINIMAP_ORIGIN, MINIMAP_ORIGIN)
        self.draw_frame()
        self.draw_cells(world, MINIMAP_ORIGIN, MINIMAP_ORIGIN)
        self.arrange_depths()

    def draw_frame(self) -> None:
        """Place the border tiles around the minimap."""
        position = FRAME_MIN
        while position < FRAME_MAX:
            self.frames.append(Instance(position, FRAME_MIN))
            self.frames.append(Instance(FRAME_MIN, position))
            position += TILE_SIZE
        while position >= FRAME_MIN:
            self.frames.append(Instance(position, FRAME_MAX))
            self.frames.append(Instance(FRAME_MAX, position))
            position -= TILE_SIZE

    @staticmethod
    def _grid_pos(world: World, x: int, y: int) -> tuple[int, int]:
        row, col = world.player_pos
        return row + (y - MINIMAP_ORIGIN) // TILE_SIZE, col + (x - MINIMAP_ORIGIN) // TILE_SIZE

    def _cell(self, world: World, x: int, y: int) -> str:
        row, col = self._grid_pos(world, x, y)
        grid = world.grid
        if 0 <= row < len(grid) and 0 <= col < len(grid[row]):
            return grid[row][col]
        raise ValueError("minimap walked off the map")

    def _visit(self, world: World, x: int, y: int) -> bool:
        row, col = self._grid_pos(world, x, y)
        cell = self._cell(world, x, y)
        if not is_player(cell) and cell not in ("1", "D", "d"):
            world.grid[row][col] = "0"
        elif cell == "1":
            self.walls.append(Instance(x, y))
            return False
        if cell == "d":
            self.frames.append(Instance(x, y))
            world.grid[row][col] = "D"
        return True

    def draw_cells(self, world: World, x: int, y: int) -> None:
        """Walk the reachable map from screen position ``(x, y)``.

        Walls get wall tiles and open doors get door tiles (and are
        closed); other walked cells become floor. Raises ValueError if
        the walk leaves the map.
        """
        if not self._visit(world, x, y):
            return
        stack = [[x, y, 0]]
        while stack:
            top = stack[-1]
            if top[2] == len(_DIRECTIONS):
                stack.pop()
                continue
            dx, dy = _DIRECTIONS[top[2]]
            top[2] += 1
            nx, ny = top[0] + dx * TILE_SIZE, top[1] + dy * TILE_SIZE
            if (not is_filled(self._cell(world, nx, ny), "0")
                    and self._visit(world, nx, ny)):
                stack.append([nx, ny, 0])

    def arrange_depths(self) -> None:
        """Set the drawing depths and refresh which tiles are visible."""
        for instance in self.frames[:FRAME_TILES]:
            instance.z = FRAME_DEPTH
        for instance in self.frames[FRAME_TILES:]:
            instance.z = TILE_DEPTH
        for instance in self.walls:
            instance.z = TILE_DEPTH
        self.shift_y(1)
        self.shift_y(-1)

    def _shift_walls(self, axis: str, direction: float) -> None:
        delta = -SHIFT if direction > 0 else SHIFT
        for instance in self.walls:
            setattr(instance, axis, getattr(instance, axis) + delta)
            instance.enabled = _in_view(instance)

    def _shift_doors(self, axis: str, direction: float) -> None:
        delta = -SHIFT if direction > 0 else SHIFT
        for instance in self.frames[FRAME_TILES:]:
            setattr(instance, axis, getattr(instance, axis) + delta)
            instance.enabled = _in_view(instance) and instance.z == TILE_DEPTH

    def shift_y(self, direction: float) -> None:
        """Scroll walls and doors vertically against the player's movement."""
        self.shift_doors_y(direction)
        self._shift_walls("y", direction)

    def shift_x(self, direction: float) -> None:
        """Scroll walls and doors horizontally against the player's movement."""
        self.shift_doors_x(direction)
        self._shift_walls("x", direction)

    def shift_doors_y(self, direction: float) -> None:
        """Scroll the door tiles vertically; open doors stay hidden."""
        self._shift_doors("y", direction)

    def shift_doors_x(self, direction: float) -> None:
        """Scroll the door tiles horizontally; open doors stay hidden."""
        self._shift_doors("x", direction)

    def door_index(self, player: Player) -> int | None:
        """Return the index in ``frames`` of the door tile the player faces."""
        cx = self.player_icon.x + ICON_HALF + player.dir_x / DOOR_LOOKAHEAD
        cy = self.player_icon.y + ICON_HALF + player.dir_y / DOOR_LOOKAHEAD
        for index in range(FRAME_TILES, len(self.frames)):
            tile = self.frames[index]
            if (tile.y <= cy <= tile.y + TILE_SIZE
                    and tile.x <= cx <= tile.x + TILE_SIZE):
                return index
        return None

    def toggle_door(self, index: int | None, closed: bool) -> None:
        """Show a door tile as closed or hide it as open; ``None`` does nothing."""
        if index is None:
            return
        tile = self.frames[index]
        tile.enabled = closed
        tile.z = TILE_DEPTH if closed else FRAME_DEPTH