"""Player position, facing and camera plane."""

from __future__ import annotations

import math
from dataclasses import dataclass

ROTATION_STEP = math.pi / 90 * 2
PLANE_LENGTH = 0.66

_SPAWN_ANGLES = {
    "N": 3 * math.pi / 2,
    "S": math.pi / 2,
    "W": math.pi,
    "E": 0.0,
}


@dataclass
class Player:
    """A player in map coordinates; ``x`` is the column, ``y`` the row."""

    angle: float = 0.0
    pos_x: float = 0.0
    pos_y: float = 0.0
    dir_x: float = 1.0
    dir_y: float = 0.0
    plane_x: float = 0.0
    plane_y: float = PLANE_LENGTH
    moved: bool = False

    @classmethod
    def from_spawn(cls, facing: str, row: int, col: int) -> Player:
        """Create a player centred in cell ``(row, col)`` facing N, S, E or W."""
        try:
            angle = _SPAWN_ANGLES[facing]
        except KeyError:
            raise ValueError(f"unknown spawn direction {facing!r}") from None
        player = cls(pos_x=col + 0.5, pos_y=row + 0.5)
        player.set_angle(angle)
        return player

    def set_angle(self, angle: float) -> None:
        """Face ``angle`` radians and update the direction and camera plane."""
        self.angle = angle
        self.dir_x = math.cos(angle)
        self.dir_y = math.sin(angle)
        self.plane_x = -math.sin(angle) * PLANE_LENGTH
        self.plane_y = math.cos(angle) * PLANE_LENGTH

    def rotate(self, direction: str) -> None:
        """Turn one step left (``'l'``) or right (``'r'``); other values do nothing."""
        if direction == "l":
            angle = self.angle - ROTATION_STEP
            if angle < 0:
                angle += 2 * math.pi
            self.set_angle(angle)
        elif direction == "r":
            angle = self.angle + ROTATION_STEP
            if angle > 2 * math.pi:
                angle -= 2 * math.pi
            self.set_angle(angle)