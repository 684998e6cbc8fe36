import pytest

from cubengine.minimap import (
    FRAME_MAX,
    FRAME_MIN,
    FRAME_TILES,
    MINIMAP_ORIGIN,
    TILE_SIZE,
    Instance,
    Minimap,
    is_filled,
)
from cubengine.player import Player
from cubengine.world import World


def _world(rows, row, col):
    grid = [list(line) for line in rows]
    player = Player.from_spawn(grid[row][col], row, col)
    return World(grid=grid, player=player,
                 map_width=max(len(r) for r in rows), player_pos=(row, col))


@pytest.mark.parametrize("char,expected", [
    ("0", True), ("N", True), ("W", True), ("D", True),
    ("1", False), ("d", False), (".", False),
])
def test_is_filled(char, expected):
    assert is_filled(char, "0") is expected


def test_draw_frame_places_border_tiles():
    minimap = Minimap()
    minimap.draw_frame()
    assert len(minimap.frames) == FRAME_TILES
    for tile in minimap.frames:
        assert tile.x in (FRAME_MIN, FRAME_MAX) or tile.y in (FRAME_MIN, FRAME_MAX)


def test_draw_cells_small_room():
    world = _world(["111", "1N1", "111"], 1, 1)
    minimap = Minimap()
    minimap.draw_cells(world, MINIMAP_ORIGIN, MINIMAP_ORIGIN)
    positions = [(w.x, w.y) for w in minimap.walls]
    o, t = MINIMAP_ORIGIN, TILE_SIZE
    assert positions == [(o, o + t), (o, o - t), (o + t, o), (o - t, o)]


def test_draw_cells_marks_floor_and_walls_match_grid():
    rows = ["111111", "1....1", "1.N..1", "1....1", "111111"]
    world = _world(rows, 2, 2)
    minimap = Minimap()
    minimap.draw_cells(world, MINIMAP_ORIGIN, MINIMAP_ORIGIN)
    assert all(c != "." for row in world.grid for c in row)
    assert world.grid[2][2] == "N"
    for wall in minimap.walls:
        r = 2 + (wall.y - MINIMAP_ORIGIN) // TILE_SIZE
        c = 2 + (wall.x - MINIMAP_ORIGIN) // TILE_SIZE
        assert world.grid[r][c] == "1"
    corners = {(MINIMAP_ORIGIN - 2 * TILE_SIZE, MINIMAP_ORIGIN - 2 * TILE_SIZE)}
    assert not corners & {(w.x, w.y) for w in minimap.walls}


def test_draw_cells_off_map_raises():
    world = _world(["1N."], 0, 1)
    with pytest.raises(ValueError):
        Minimap().draw_cells(world, MINIMAP_ORIGIN, MINIMAP_ORIGIN)


def _door_world():
    return _world(["11111", "1Nd.1", "11111"], 1, 1)


def test_build_places_door_and_closes_it():
    world = _door_world()
    minimap = Minimap()
    minimap.build(world)
    assert len(minimap.frames) == FRAME_TILES + 1
    door = minimap.frames[FRAME_TILES]
    assert (door.x, door.y) == (MINIMAP_ORIGIN + TILE_SIZE, MINIMAP_ORIGIN)
    assert world.grid[1][2] == "D"
    assert world.grid[1][3] == "."


def test_build_depths_and_positions_restored():
    world = _door_world()
    minimap = Minimap()
    minimap.build(world)
    assert all(t.z == 100 for t in minimap.frames[:FRAME_TILES])
    assert minimap.frames[FRAME_TILES].z == 10
    assert all(w.z == 10 for w in minimap.walls)
    fresh = Minimap()
    fresh.draw_cells(_door_world(), MINIMAP_ORIGIN, MINIMAP_ORIGIN)
    assert [(w.x, w.y) for w in minimap.walls] == [(w.x, w.y) for w in fresh.walls]
    assert all(w.enabled for w in minimap.walls)


def test_shift_y_round_trip_and_visibility():
    minimap = Minimap(walls=[Instance(200, FRAME_MIN + 2)])
    minimap.shift_y(1)
    assert minimap.walls[0].y == FRAME_MIN
    assert minimap.walls[0].enabled is False
    minimap.shift_y(-1)
    assert minimap.walls[0].y == FRAME_MIN + 2
    assert minimap.walls[0].enabled is True


def test_shift_x_moves_walls_against_direction():
    minimap = Minimap(walls=[Instance(200, 200)])
    minimap.shift_x(0.5)
    minimap.shift_x(0.5)
    assert minimap.walls[0].x == 196
    minimap.shift_x(-1)
    minimap.shift_x(-1)
    assert minimap.walls[0].x == 200


def test_shift_doors_skips_frame_and_hides_open_doors():
    minimap = Minimap()
    minimap.draw_frame()
    before = [(t.x, t.y) for t in minimap.frames]
    minimap.frames.append(Instance(200, 200, z=10, enabled=False))
    minimap.frames.append(Instance(220, 220, z=100))
    minimap.shift_doors_x(1)
    assert [(t.x, t.y) for t in minimap.frames[:FRAME_TILES]] == before
    closed, opened = minimap.frames[FRAME_TILES:]
    assert closed.x == 198 and closed.enabled is True
    assert opened.x == 218 and opened.enabled is False
    minimap.shift_doors_y(-1)
    assert closed.y == 202


def test_door_index_and_toggle():
    world = _door_world()
    minimap = Minimap()
    minimap.build(world)
    assert minimap.door_index(world.player) is None
    world.player.set_angle(0.0)
    index = minimap.door_index(world.player)
    assert index == FRAME_TILES
    minimap.toggle_door(index, False)
    door = minimap.frames[index]
    assert door.enabled is False and door.z == 100
    minimap.shift_doors_y(1)
    assert door.enabled is False
    minimap.toggle_door(index, True)
    assert door.enabled is True and door.z == 10


def test_toggle_door_none_changes_nothing():
    minimap = Minimap()
    minimap.draw_frame()
    before = list(minimap.frames)
    minimap.toggle_door(None, True)
    assert minimap.frames == before