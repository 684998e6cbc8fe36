"""Game world state: the map grid, the player, doors and enemies."""

from __future__ import annotations

from dataclasses import dataclass, field

from .player import Player
from .scene import Grid, Scene, _place_doors, flood_fill
from .utils import is_player

WALL = "1"
FLOOR = "0"
CLOSED_DOOR = "D"
OPEN_DOOR = "d"
ENEMY = "X"

DOOR_REACH = 0.5
DOOR_FACING = 0.6
WALL_MARGIN = 0.375
ENEMY_RANGE = 4
ENEMY_STEP_DIVISOR = 20
MOVE_SCALE = 2 / 20.0
PIXEL_SCALE = 2 / 1.25
PIXEL_STEP = 2

_BLOCKING = frozenset((WALL, CLOSED_DOOR, ENEMY))


@dataclass
class World:
    """The mutable state of a running game.

    ``player_pos`` is the spawn cell as ``(row, col)``.
    """

    grid: Grid
    player: Player
    map_width: int
    player_pos: tuple[int, int] = (0, 0)
    enemy_count: int = 0
    changed: bool = True
    _pixels: dict[str, float] = field(
        default_factory=lambda: {"x": 0.0, "y": 0.0}, init=False, repr=False)

    @classmethod
    def from_scene(cls, scene: Scene) -> World:
        """Create a world from a parsed scene, copying its grid."""
        grid = [list(row) for row in scene.grid]
        row, col = scene.player_pos
        player = Player.from_spawn(grid[row][col], row, col)
        return cls(grid=grid, player=player, map_width=scene.map_width,
                   player_pos=(row, col))

    @property
    def map_height(self) -> int:
        return len(self.grid)

    def _cell(self, row: int, col: int) -> str:
        if 0 <= row < len(self.grid) and 0 <= col < len(self.grid[row]):
            return self.grid[row][col]
        return ""

    def reset(self) -> None:
        """Put the player back at the spawn and restore doors and the fill."""
        row, col = self.player_pos
        self.player = Player.from_spawn(self.grid[row][col], row, col)
        self.place_doors()
        flood_fill(self.grid, col, row)
        self.changed = True

    def place_doors(self) -> None:
        """Mark every cell that suits a door with an open door."""
        _place_doors(self.grid)

    def _valid_enemy_position(self, x: int, y: int) -> bool:
        row = self.grid[y]
        if not (0 < y < self.map_height - 1 and 0 < x < len(row) - 1):
            return False
        if is_player(row[x]):
            return False
        neighbours = (
            (y, x - 1), (y, x + 1),
            (y - 1, x), (y + 1, x),
            (y - 1, x - 1), (y - 1, x + 1),
            (y + 1, x - 1), (y + 1, x + 1),
        )
        if any(self._cell(r, c) != FLOOR for r, c in neighbours):
            return False
        return (x - 2 > 0 and y - 2 >= 0
                and self._cell(y - 2, x - 2) == FLOOR
                and self._cell(y - 2, x + 2) == FLOOR)

    def place_enemies(self) -> None:
        """Place an enemy on every cell surrounded by open floor."""
        count = 0
        for y in range(1, self.map_height - 1):
            for x in range(1, self.map_width - 1):
                if self._valid_enemy_position(x, y):
                    self.grid[y][x] = ENEMY
                    count += 1
        self.enemy_count = count

    def near_door(self, axis: str, direction: float) -> str | None:
        """Return the door character next to the player along an axis, if any."""
        x, y = self.player.pos_x, self.player.pos_y
        if direction > 0:
            offset = DOOR_REACH
        elif direction < 0:
            offset = -DOOR_REACH
        else:
            return None
        if axis == "y":
            cell = self._cell(int(y + offset), int(x))
        elif axis == "x":
            cell = self._cell(int(y), int(x + offset))
        else:
            return None
        return cell if cell in (CLOSED_DOOR, OPEN_DOOR) else None

    def door_interaction(self) -> bool | None:
        """Open or close the door the player faces.

        Returns True if a door was closed, False if one was opened and
        None if nothing changed.
        """
        near = any(self.near_door(axis, step)
                   for axis in ("y", "x") for step in (1, -1))
        if not near:
            return None
        player = self.player
        door_y = int(player.pos_y + player.dir_y * DOOR_FACING)
        door_x = int(player.pos_x + player.dir_x * DOOR_FACING)
        cell = self._cell(door_y, door_x)
        result = None
        if cell == CLOSED_DOOR:
            self.grid[door_y][door_x] = OPEN_DOOR
            result = False
        elif (cell == OPEN_DOOR and
              self._cell(int(player.pos_y), int(player.pos_x)) != OPEN_DOOR):
            self.grid[door_y][door_x] = CLOSED_DOOR
            result = True
        self.changed = True
        return result

    def enemies_interaction(self) -> bool:
        """Shoot along the view direction; return True if an enemy was hit."""
        player = self.player
        enemy_y = float(int(player.pos_y))
        enemy_x = float(int(player.pos_x))
        while (-ENEMY_RANGE < enemy_y - player.pos_y < ENEMY_RANGE
               and -ENEMY_RANGE < enemy_x - player.pos_x < ENEMY_RANGE
               and 0 < enemy_y < self.map_height - 1
               and 0 < enemy_x < len(self.grid[int(enemy_y)]) - 1
               and self._cell(int(enemy_y), int(enemy_x))
               not in (ENEMY, WALL, CLOSED_DOOR)):
            enemy_y += player.dir_y / ENEMY_STEP_DIVISOR
            enemy_x += player.dir_x / ENEMY_STEP_DIVISOR
        row, col = int(enemy_y), int(enemy_x)
        if self._cell(row, col) != ENEMY:
            return False
        self.grid[row][col] = FLOOR
        self.enemy_count -= 1
        self.changed = True
        return True

    def near_wall(self, axis: str, direction: float) -> bool:
        """Return True if a wall, closed door or enemy blocks the player."""
        x, y = self.player.pos_x, self.player.pos_y
        offset = WALL_MARGIN if direction > 0 else -WALL_MARGIN
        if axis == "y":
            cell = self._cell(int(y + offset), int(x))
        elif axis == "x":
            cell = self._cell(int(y), int(x + offset))
        else:
            raise ValueError(f"unknown axis {axis!r}")
        return cell in _BLOCKING

    def _move_axis(self, axis: str, direction: float) -> bool:
        if direction < 0:
            step = -1
        elif direction > 0:
            step = 1
        else:
            return False
        if self.near_wall(axis, step):
            return False
        if axis == "y":
            self.player.pos_y += direction * MOVE_SCALE
        else:
            self.player.pos_x += direction * MOVE_SCALE
        self._pixels[axis] += direction * PIXEL_SCALE
        if step < 0 and self._pixels[axis] <= -PIXEL_STEP:
            self._pixels[axis] += PIXEL_STEP
            return True
        if step > 0 and self._pixels[axis] >= PIXEL_STEP:
            self._pixels[axis] -= PIXEL_STEP
            return True
        return False

    def move_player(self, dir_y: float, dir_x: float) -> list[tuple[str, float]]:
        """Move the player, y first, then x.

        Returns the minimap shifts due as ``(axis, direction)`` pairs.
        """
        shifts = []
        if self._move_axis("y", dir_y):
            shifts.append(("y", dir_y))
        if self._move_axis("x", dir_x):
            shifts.append(("x", dir_x))
        self.changed = True
        return shifts

    def rotate_player(self, direction: str) -> None:
        """Turn the player left (``'l'``) or right (``'r'``)."""
        self.player.rotate(direction)
        self.changed = True

    def kill_count_text(self) -> str:
        """Return the text shown for the enemies still alive."""
        return f"{self.enemy_count} enemies left"

    def has_won(self) -> bool:
        """Return True once every enemy is gone."""
        return self.enemy_count == 0