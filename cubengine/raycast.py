"""Grid ray casting with the DDA algorithm."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .player import Player
from .scene import Grid

WIDTH = 1920
HEIGHT = 1440
TEX_SIZE = 64

_STOPS = frozenset("1DX")
_MIN_DISTANCE = 1e-9


@dataclass
class Ray:
    """One screen column's ray and the wall slice it hits."""

    camera_x: float = 0.0
    ray_dir_x: float = 0.0
    ray_dir_y: float = 0.0
    map_x: int = 0
    map_y: int = 0
    side_dist_x: float = 0.0
    side_dist_y: float = 0.0
    delta_dist_x: float = 0.0
    delta_dist_y: float = 0.0
    perp_wall_dist: float = 0.0
    step_x: int = 0
    step_y: int = 0
    side: int = 0
    line_height: int = 0
    draw_start: int = 0
    draw_end: int = 0
    wall_x: float = 0.0
    tex_x: int = 0
    tex_y: int = 0
    step: float = 0.0
    tex_pos: float = 0.0


def _inverse_abs(value: float) -> float:
    return math.inf if value == 0 else abs(1 / value)


def init_ray(player: Player, x: int, width: int = WIDTH) -> Ray:
    """Create the ray for screen column ``x`` of a ``width`` wide view."""
    camera_x = 2 * x / width - 1
    ray_dir_x = player.dir_x + player.plane_x * camera_x
    ray_dir_y = player.dir_y + player.plane_y * camera_x
    return Ray(
        camera_x=camera_x,
        ray_dir_x=ray_dir_x,
        ray_dir_y=ray_dir_y,
        map_x=int(player.pos_x),
        map_y=int(player.pos_y),
        delta_dist_x=_inverse_abs(ray_dir_x),
        delta_dist_y=_inverse_abs(ray_dir_y),
    )


def set_dda(ray: Ray, player: Player) -> None:
    """Set the step directions and the distances to the first grid lines."""
    if ray.ray_dir_x < 0:
        ray.step_x = -1
        ray.side_dist_x = (player.pos_x - ray.map_x) * ray.delta_dist_x
    else:
        ray.step_x = 1
        ray.side_dist_x = (ray.map_x + 1.0 - player.pos_x) * ray.delta_dist_x
    if ray.ray_dir_y < 0:
        ray.step_y = -1
        ray.side_dist_y = (player.pos_y - ray.map_y) * ray.delta_dist_y
    else:
        ray.step_y = 1
        ray.side_dist_y = (ray.map_y + 1.0 - player.pos_y) * ray.delta_dist_y


def _step_ray(ray: Ray) -> None:
    if ray.side_dist_x < ray.side_dist_y:
        ray.side_dist_x += ray.delta_dist_x
        ray.map_x += ray.step_x
        ray.side = 0
    else:
        ray.side_dist_y += ray.delta_dist_y
        ray.map_y += ray.step_y
        ray.side = 1


def perform_dda(ray: Ray, grid: Grid) -> None:
    """Step the ray through the grid until it hits a wall, closed door or enemy.

    The ray is clamped to the map. Raises ValueError if it cannot hit
    anything that stops it.
    """
    if not grid:
        raise ValueError("empty map")
    height = len(grid)
    limit = 4 * (height + max(len(row) for row in grid)) + 4
    for _ in range(limit):
        _step_ray(ray)
        ray.map_y = min(max(ray.map_y, 0), height - 1)
        row = grid[ray.map_y]
        if ray.map_x < 0:
            ray.map_x = 0
        elif ray.map_x > len(row) - 1:
            ray.map_x = len(row) - 1
        if 0 <= ray.map_x < len(row) and row[ray.map_x] in _STOPS:
            return
    raise ValueError("ray left the map without hitting a wall")


def calc_wall(ray: Ray, player: Player, height: int = HEIGHT) -> None:
    """Compute the wall distance, the slice to draw and the texture column."""
    if ray.side == 0:
        ray.perp_wall_dist = ray.side_dist_x - ray.delta_dist_x
    else:
        ray.perp_wall_dist = ray.side_dist_y - ray.delta_dist_y
    distance = ray.perp_wall_dist
    if not distance > _MIN_DISTANCE:
        distance = _MIN_DISTANCE
    ray.line_height = int(height / distance)
    ray.draw_start = -(ray.line_height // 2) + height // 2
    if ray.draw_start < 0:
        ray.draw_start = 0
    ray.draw_end = ray.line_height // 2 + height // 2
    if ray.draw_end >= height:
        ray.draw_end = height - 1
    if ray.side == 0:
        wall_x = player.pos_y + ray.perp_wall_dist * ray.ray_dir_y
    else:
        wall_x = player.pos_x + ray.perp_wall_dist * ray.ray_dir_x
    ray.wall_x = wall_x - math.floor(wall_x)
    ray.tex_x = int(ray.wall_x * TEX_SIZE)
    if ray.side == 0 and ray.ray_dir_x > 0:
        ray.tex_x = TEX_SIZE - ray.tex_x - 1
    if ray.side == 1 and ray.ray_dir_y < 0:
        ray.tex_x = TEX_SIZE - ray.tex_x - 1


def cast_ray(grid: Grid, player: Player, x: int, width: int = WIDTH,
             height: int = HEIGHT) -> Ray:
    """Cast the ray for screen column ``x`` and return it with its wall slice."""
    ray = init_ray(player, x, width)
    set_dda(ray, player)
    perform_dda(ray, grid)
    calc_wall(ray, player, height)
    return ray