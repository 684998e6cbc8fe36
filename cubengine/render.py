"""Frame rendering: ceiling and floor, textured walls and the minimap rays."""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache

import numpy as np

from .colors import apply_lighting, color_palette
from .raycast import HEIGHT, TEX_SIZE, WIDTH, Ray, cast_ray
from .textures import Texture
from .utils import get_rgba
from .world import World

FOV = math.pi / 3
MINIMAP_CENTER = 258
MINIMAP_RADIUS = 64
RAY_ANGLE_STEP = 0.001
MINIMAP_RAY_COLOR = color_palette()[12]

_MINIMAP_STEP_LIMIT = 8
_MINIMAP_STOPS = frozenset("1D")


@dataclass
class TextureSet:
    """The textures and colours a frame is drawn with."""

    north: Texture
    south: Texture
    west: Texture
    east: Texture
    door: Texture
    enemy: Texture
    ceiling_rgba: int = 0
    floor_rgba: int = 0

    def select(self, ray: Ray, cell: str) -> Texture:
        """Return the texture for the wall side the ray hit and the cell it is on."""
        if cell == "D":
            return self.door
        if cell == "X":
            return self.enemy
        if ray.side == 1 and ray.ray_dir_y < 0:
            return self.south
        if ray.side == 1 and ray.ray_dir_y > 0:
            return self.north
        if ray.side == 0 and ray.ray_dir_x < 0:
            return self.east
        return self.west


def draw_ceiling_and_floor(image: np.ndarray, ceiling_rgba: int,
                           floor_rgba: int) -> None:
    """Fill the upper half of ``image`` with the ceiling, the rest with the floor."""
    half = image.shape[0] // 2
    image[:half] = ceiling_rgba
    image[half:] = floor_rgba


def _lighting_factor(ray: Ray) -> float:
    return 1.0 / (1.0 + ray.perp_wall_dist * 0.5)


def texture_color(textures: TextureSet, ray: Ray, cell: str) -> int:
    """Return the shaded RGBA colour at the ray's texture coordinates."""
    texture = textures.select(ray, cell)
    index = TEX_SIZE * ray.tex_y + (TEX_SIZE - ray.tex_x - 1)
    r, g, b, _ = texture.pixel(index % texture.width, index // texture.width)
    return apply_lighting(get_rgba(r, g, b, 255), _lighting_factor(ray))


@lru_cache(maxsize=32)
def _texture_array(texture: Texture) -> np.ndarray:
    return np.frombuffer(texture.pixels, dtype=np.uint8).reshape(-1, 4)


def render_walls(image: np.ndarray, world: World, textures: TextureSet) -> None:
    """Draw one textured, distance-shaded wall slice per column of ``image``."""
    height, width = image.shape
    for x in range(width):
        ray = cast_ray(world.grid, world.player, x, width, height)
        count = ray.draw_end - ray.draw_start
        if count <= 0:
            continue
        ray.step = TEX_SIZE / ray.line_height
        increments = np.full(count, ray.step)
        increments[0] = (ray.draw_start - height // 2
                         + ray.line_height // 2) * ray.step
        positions = np.cumsum(increments)
        tex_y = np.trunc(positions).astype(np.int64) & (TEX_SIZE - 1)
        ray.tex_y = int(tex_y[-1])
        ray.tex_pos = float(positions[-1] + ray.step)
        texture = textures.select(ray, world.grid[ray.map_y][ray.map_x])
        indices = TEX_SIZE * tex_y + (TEX_SIZE - ray.tex_x - 1)
        channels = _texture_array(texture)[indices, :3].astype(np.float64)
        channels = (channels * _lighting_factor(ray)).astype(np.int64)
        channels = np.clip(channels, 0, 255).astype(np.uint32)
        image[ray.draw_start:ray.draw_end, x] = (
            (channels[:, 0] << 24) | (channels[:, 1] << 16)
            | (channels[:, 2] << 8) | 255)


@dataclass
class _MinimapStepper:
    """Sub-cell progress of minimap rays, carried over between rays and frames."""

    x_step: float = 0.0
    y_step: float = 0.0


_stepper = _MinimapStepper()


def _advance(progress: float, direction: float) -> tuple[float, int]:
    progress += direction
    if direction > 0 and progress > _MINIMAP_STEP_LIMIT:
        return -float(_MINIMAP_STEP_LIMIT), 1
    if direction < 0 and progress < -_MINIMAP_STEP_LIMIT:
        return float(_MINIMAP_STEP_LIMIT), -1
    return progress, 0


def _ray_open(grid, x: float, y: float) -> bool:
    row_index, col_index = int(y), int(x)
    if not 0 < row_index < len(grid) - 1:
        return False
    row = grid[row_index]
    return 0 < col_index < len(row) - 1 and row[col_index] not in _MINIMAP_STOPS


def minimap_ray_pixels(world: World) -> set[tuple[int, int]]:
    """Return the ``(x, y)`` screen pixels of the field-of-view fan on the minimap."""
    player = world.player
    grid = world.grid
    pixels: set[tuple[int, int]] = set()
    angle = player.angle - FOV / 2
    end = player.angle + FOV / 2
    while angle < end:
        x_draw = y_draw = float(MINIMAP_CENTER)
        x, y = player.pos_x, player.pos_y
        dir_x, dir_y = math.cos(angle), math.sin(angle)
        while _ray_open(grid, x, y):
            if math.hypot(MINIMAP_CENTER - x_draw,
                          MINIMAP_CENTER - y_draw) < MINIMAP_RADIUS:
                pixels.add((int(x_draw), int(y_draw)))
            _stepper.y_step, moved = _advance(_stepper.y_step, dir_y)
            y_draw += dir_y
            y += moved
            _stepper.x_step, moved = _advance(_stepper.x_step, dir_x)
            x_draw += dir_x
            x += moved
        angle += RAY_ANGLE_STEP
    return pixels


def render_frame(world: World, textures: TextureSet, width: int = WIDTH,
                 height: int = HEIGHT) -> np.ndarray:
    """Render a full frame as a ``(height, width)`` array of packed RGBA values."""
    image = np.zeros((height, width), dtype=np.uint32)
    draw_ceiling_and_floor(image, textures.ceiling_rgba, textures.floor_rgba)
    render_walls(image, world, textures)
    for px, py in minimap_ray_pixels(world):
        if 0 <= px < width and 0 <= py < height:
            image[py, px] = MINIMAP_RAY_COLOR
    world.changed = False
    return image