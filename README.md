# cubengine

A small raycasting first-person game. A level is described by a `.cub`
scene file that names four wall textures, a floor colour, a ceiling colour
and a grid map. The game draws the level column by column with a DDA
raycaster, shows a minimap with the field of view, places doors and enemies
on the map by itself, and counts the enemies you have left to shoot.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Running

```
cubengine path/to/level.cub
```

Exactly one argument is accepted, and it must end in `.cub`. Any problem
with the arguments, the scene file or a texture is printed to standard
error after a line `Error`, and the command exits with status 1.

The game opens a 1920×1440 window. Besides the textures named in the
scene file, it loads these PNG files, relative to the current directory:

* `textures/eagle.png` – the closed-door texture
* `textures/creeper.png` – the enemy texture
* `textures/player1.png` – the player icon on the minimap
* `textures/gun/frame_0.png` … `textures/gun/frame_4.png` – the gun animation

### Controls

| Input                     | Action                             |
|---------------------------|------------------------------------|
| `W` `A` `S` `D`           | move forward / left / back / right |
| `←` `→` or mouse movement | turn                               |
| `Space` or left mouse     | shoot                              |
| `F` or right mouse        | open / close the door ahead        |
| `R`                       | reset the level                    |
| `Esc` or closing the window | quit                             |

The number of enemies left is shown at the top of the screen; shoot every
enemy to get the "YOU WIN!" banner.

## Scene files

```
NO textures/north.png
SO textures/south.png
WE textures/west.png
EA textures/east.png

F 220,100,0
C 225,30,0

111111
100001
10N001
111111
```

* The six elements (`NO`, `SO`, `WE`, `EA`, `F`, `C`) come first, each
  exactly once, in any order; empty lines between them are allowed.
  Textures must be PNG files.
* Colours are three integers from 0 to 255 separated by commas.
* The map comes last. It may contain `0` (floor), `1` (wall), `D` (door),
  spaces, and exactly one player start: `N`, `S`, `E` or `W`, giving the
  direction the player faces.
* The map must be closed by walls and may not be split by empty lines.

Doors are also placed automatically on floor cells that sit between two
walls with open space on either side. Enemies are placed on floor cells
surrounded by open floor.

## Using it as a library

* `cubengine.scene.load_scene(path)` reads and validates a scene file into
  a `Scene`; `cubengine.scene.parse_scene(lines, loader)` does the same for
  lines already in memory, with `loader(path, name)` supplying textures.
  Invalid scenes raise `cubengine.utils.SceneError`.
* `cubengine.world.World.from_scene(scene)` builds the playable state, with
  `move_player`, `rotate_player`, `door_interaction`,
  `enemies_interaction`, `place_enemies` and `reset`.
* `cubengine.raycast.cast_ray(grid, player, x, width, height)` casts the
  ray of one screen column and returns a `Ray` with its wall slice.
* `cubengine.render.render_frame(world, textures, width, height)` renders a
  whole frame into a numpy array of packed RGBA values, given a
  `TextureSet`.
* `cubengine.minimap.Minimap` lays out and scrolls the minimap tiles.
* `cubengine.game.Game` ties these together with input handling;
  `Game.run()` opens the window.

## What it does not do

There is no sound, and enemies do not move or attack: they stand still
until shot. The window size is fixed, and there is no menu, saving or
level selection beyond the scene file given on the command line.