"""The interactive game: input handling, the shooting animation and the main loop."""

from __future__ import annotations

import sys
from collections.abc import Collection, Sequence
from dataclasses import dataclass, field

import numpy as np
import pygame

from .minimap import Instance, Minimap, TILE_SIZE
from .raycast import HEIGHT, WIDTH
from .render import TextureSet, render_frame
from .scene import load_scene
from .textures import Texture, load_texture
from .utils import SceneError
from .world import World

FRAME_WAIT = 5
GUN_FRAMES = 5
GUN_SCALE = 6
GUN_SHIFTED_FRAME = 1
GUN_SHIFT = -60
CURSOR_THRESHOLD = 40
CURSOR_MARGIN = 100
MOUSE_WAIT = 4
MINIMAP_BACKGROUND_SIZE = 320
MINIMAP_BACKGROUND_SHADE = 124

DOOR_TEXTURE = "textures/eagle.png"
ENEMY_TEXTURE = "textures/creeper.png"
PLAYER_ICON = "./textures/player1.png"
GUN_TEXTURES = tuple(f"textures/gun/frame_{i}.png" for i in range(GUN_FRAMES))

_MOVE_KEYS = ("w", "a", "s", "d", "left", "right", "space")
_MOUSE_NAMES = ("left", "middle", "right")


def _initial_visibility() -> list[bool]:
    return [index == 0 for index in range(GUN_FRAMES)]


@dataclass
class Gun:
    """The gun's animation: which frame shows and whether a shot is running."""

    frame: int = 0
    shooting: bool = False
    visible: list[bool] = field(default_factory=_initial_visibility)

    def trigger(self) -> bool:
        """Start a shot; return False if one is already running."""
        if self.shooting:
            return False
        self.shooting = True
        return True

    def advance(self) -> None:
        """Step the shot animation by one frame; idle guns stay as they are."""
        if not self.shooting:
            return
        if self.frame != 0:
            self.visible[self.frame] = False
        if self.frame == 1:
            self.visible[0] = False
        self.frame += 1
        if self.frame >= GUN_FRAMES:
            self.frame = 0
            self.shooting = False
        self.visible[self.frame] = True


@dataclass
class _Assets:
    wall_tile: pygame.Surface
    frame_tile: pygame.Surface
    background: pygame.Surface
    player_icon: pygame.Surface
    gun: list[tuple[pygame.Surface, tuple[int, int]]]
    font: pygame.font.Font


def _texture_surface(texture: Texture) -> pygame.Surface:
    return pygame.image.frombuffer(
        texture.pixels, (texture.width, texture.height), "RGBA").copy()


def _tile(texture: Texture) -> pygame.Surface:
    return pygame.transform.scale(_texture_surface(texture),
                                  (TILE_SIZE, TILE_SIZE))


def _load_assets(textures: TextureSet) -> _Assets:
    background = pygame.Surface(
        (MINIMAP_BACKGROUND_SIZE, MINIMAP_BACKGROUND_SIZE), pygame.SRCALPHA)
    background.fill((MINIMAP_BACKGROUND_SHADE,) * 4)
    gun = []
    for index, path in enumerate(GUN_TEXTURES):
        texture = load_texture(path, "gun")
        size = (texture.width * GUN_SCALE, texture.height * GUN_SCALE)
        surface = pygame.transform.scale(_texture_surface(texture), size)
        offset = GUN_SHIFT if index == GUN_SHIFTED_FRAME else 0
        position = (WIDTH // 2 - size[0] // 2 + offset, HEIGHT - size[1])
        gun.append((surface, position))
    return _Assets(
        wall_tile=_tile(textures.east),
        frame_tile=_tile(textures.north),
        background=background,
        player_icon=_tile(load_texture(PLAYER_ICON, "player")),
        gun=gun,
        font=pygame.font.Font(None, 32),
    )


def _frame_surface(image: np.ndarray) -> pygame.Surface:
    rgb = np.empty(image.shape + (3,), dtype=np.uint8)
    for channel, shift in enumerate((24, 16, 8)):
        rgb[..., channel] = (image >> shift) & 0xFF
    return pygame.surfarray.make_surface(rgb.swapaxes(0, 1))


class Game:
    """A running game: the world, its minimap, the gun and input state."""

    def __init__(self, world: World, textures: TextureSet | None = None) -> None:
        self.world = world
        self.textures = textures
        self.gun = Gun()
        self.running = True
        self._last_cursor: int | None = None
        self._mouse_wait = 0
        self._frames = 0
        self.minimap = Minimap()
        self.minimap.build(world)
        world.place_enemies()

    def _interact_door(self) -> None:
        closed = self.world.door_interaction()
        if closed is not None:
            index = self.minimap.door_index(self.world.player)
            self.minimap.toggle_door(index, closed)

    def _move(self, dir_y: float, dir_x: float) -> None:
        for axis, direction in self.world.move_player(dir_y, dir_x):
            if axis == "y":
                self.minimap.shift_y(direction)
            else:
                self.minimap.shift_x(direction)

    def handle_key(self, key: str) -> None:
        """React to a key press: ``escape`` quits, ``r`` resets, ``f`` uses a door."""
        if key == "escape":
            self.running = False
        if key == "r":
            self.reset()
        if key == "f":
            self._interact_door()
        self.world.changed = True

    def handle_cursor(self, xpos: float) -> bool:
        """Turn the player by mouse movement; return True if the cursor needs recentring."""
        if self._last_cursor is None:
            self._last_cursor = int(xpos)
        if xpos - self._last_cursor > CURSOR_THRESHOLD:
            self.world.rotate_player("r")
            self._last_cursor = int(xpos)
        elif xpos - self._last_cursor < -CURSOR_THRESHOLD:
            self.world.rotate_player("l")
            self._last_cursor = int(xpos)
        return xpos < CURSOR_MARGIN or xpos > WIDTH - CURSOR_MARGIN

    def update(self, pressed: Collection[str],
               mouse_buttons: Collection[str]) -> None:
        """Apply one frame of held keys and mouse buttons."""
        player = self.world.player
        if "w" in pressed:
            self._move(player.dir_y, player.dir_x)
        if "a" in pressed:
            self._move(-player.dir_x, player.dir_y)
        if "s" in pressed:
            self._move(-player.dir_y, -player.dir_x)
        if "d" in pressed:
            self._move(player.dir_x, -player.dir_y)
        if "left" in pressed:
            self.world.rotate_player("l")
        if "right" in pressed:
            self.world.rotate_player("r")
        if "right" in mouse_buttons and self._mouse_wait == 0:
            self._interact_door()
            self._mouse_wait = 1
        if self._mouse_wait > 0:
            self._mouse_wait += 1
            if self._mouse_wait > MOUSE_WAIT:
                self._mouse_wait = 0
        if ("space" in pressed or "left" in mouse_buttons) and self.gun.trigger():
            self.world.enemies_interaction()
        self.gun.advance()
        self.world.changed = True

    def reset(self) -> None:
        """Restart the level: player, doors, minimap and enemies."""
        self.world.reset()
        self.minimap = Minimap()
        self.minimap.build(self.world)
        self.world.place_enemies()

    def _should_render(self) -> bool:
        if self.world.changed:
            return True
        self._frames += 1
        return self._frames > FRAME_WAIT

    def _draw_overlay(self, screen: pygame.Surface, assets: _Assets) -> None:
        minimap = self.minimap
        screen.blit(assets.background,
                    (minimap.background.x, minimap.background.y))
        tiles: list[tuple[Instance, pygame.Surface]] = [
            (instance, assets.wall_tile) for instance in minimap.walls]
        tiles += [(instance, assets.frame_tile) for instance in minimap.frames]
        for instance, surface in sorted(tiles, key=lambda item: item[0].z):
            if instance.enabled:
                screen.blit(surface, (instance.x, instance.y))
        screen.blit(assets.player_icon,
                    (minimap.player_icon.x, minimap.player_icon.y))
        for visible, (surface, position) in zip(self.gun.visible, assets.gun):
            if visible:
                screen.blit(surface, position)
        text = assets.font.render(self.world.kill_count_text(), True,
                                  (255, 255, 255))
        text = pygame.transform.scale(
            text, (text.get_width() + 500, text.get_height() + 50))
        screen.blit(text, (WIDTH // 2, 30))
        if self.world.has_won():
            banner = assets.font.render("YOU WIN!", True, (255, 255, 255))
            banner = pygame.transform.scale(banner, (500, 200))
            screen.blit(banner, (int(WIDTH / 2.5), int(HEIGHT / 2.5)))

    def run(self) -> None:
        """Open the window and play until the window is closed or escape is pressed."""
        if self.textures is None:
            raise ValueError("textures are needed to run the game")
        pygame.init()
        try:
            screen = pygame.display.set_mode((WIDTH, HEIGHT))
            pygame.display.set_caption("Cub3d")
            pygame.mouse.set_visible(False)
            pygame.mouse.set_pos(WIDTH // 2, HEIGHT // 2)
            assets = _load_assets(self.textures)
            key_codes = {name: pygame.key.key_code(name) for name in _MOVE_KEYS}
            clock = pygame.time.Clock()
            frame: pygame.Surface | None = None
            while self.running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                    elif event.type == pygame.KEYDOWN:
                        self.handle_key(pygame.key.name(event.key))
                    elif event.type == pygame.MOUSEMOTION:
                        if self.handle_cursor(event.pos[0]):
                            pygame.mouse.set_pos(WIDTH // 2, HEIGHT // 2)
                if not self.running:
                    break
                if frame is None or self._should_render():
                    frame = _frame_surface(render_frame(self.world, self.textures))
                    self._frames = 0
                self.world.changed = False
                screen.blit(frame, (0, 0))
                self._draw_overlay(screen, assets)
                pygame.display.flip()
                state = pygame.key.get_pressed()
                pressed = {name for name, code in key_codes.items() if state[code]}
                buttons = pygame.mouse.get_pressed(3)
                mouse = {name for name, down in zip(_MOUSE_NAMES, buttons) if down}
                self.update(pressed, mouse)
                clock.tick(60)
        finally:
            pygame.quit()


def check_arguments(argv: Sequence[str]) -> str:
    """Return the scene path from the arguments; raise ValueError if they are wrong."""
    if len(argv) != 1:
        raise ValueError("Please run with one scene description file")
    path = argv[0]
    if len(path) < 4 or not path.endswith(".cub"):
        raise ValueError("Scene description file of type .cub wanted")
    return path


def main(argv: Sequence[str] | None = None) -> int:
    """Start the game with the scene file named on the command line."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        path = check_arguments(args)
        scene = load_scene(path)
        textures = TextureSet(
            north=scene.north,
            south=scene.south,
            west=scene.west,
            east=scene.east,
            door=load_texture(DOOR_TEXTURE, "door"),
            enemy=load_texture(ENEMY_TEXTURE, "enemy"),
            ceiling_rgba=scene.ceiling_rgba,
            floor_rgba=scene.floor_rgba,
        )
        game = Game(World.from_scene(scene), textures)
        game.run()
    except (ValueError, pygame.error) as exc:
        print(f"Error\n{exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())