import math

import pytest

from cubengine.game import GUN_FRAMES, Game, Gun, check_arguments, main
from cubengine.minimap import FRAME_TILES, SHIFT
from cubengine.player import ROTATION_STEP, Player
from cubengine.scene import parse_scene
from cubengine.world import World

ENEMY_MAP = [
    "1111111",
    "1000001",
    "1000001",
    "1000001",
    "1000001",
    "100N001",
    "1111111",
]

DOOR_MAP = [
    "11111111",
    "10000001",
    "11101111",
    "10000001",
    "100N0001",
    "11111111",
]


def _scene(rows):
    lines = [
        "NO ./north.png\n",
        "SO ./south.png\n",
        "WE ./west.png\n",
        "EA ./east.png\n",
        "F 10,20,30\n",
        "C 40,50,60\n",
        "\n",
    ]
    lines += [row + "\n" for row in rows]
    return parse_scene(lines, loader=lambda path, name: name)


def _game(rows):
    return Game(World.from_scene(_scene(rows)))


def test_gun_trigger_only_once_per_shot():
    gun = Gun()
    assert gun.trigger() is True
    assert gun.trigger() is False
    assert gun.shooting


def test_gun_full_cycle_returns_to_idle():
    gun = Gun()
    initial = list(gun.visible)
    gun.trigger()
    for _ in range(GUN_FRAMES - 1):
        gun.advance()
        assert gun.shooting
        assert gun.visible[gun.frame]
    gun.advance()
    assert not gun.shooting
    assert gun.frame == 0
    assert gun.visible == initial


def test_gun_idle_advance_changes_nothing():
    gun = Gun()
    before = list(gun.visible)
    gun.advance()
    assert gun.frame == 0
    assert gun.visible == before


def test_game_places_enemy_and_builds_minimap():
    game = _game(ENEMY_MAP)
    assert game.world.enemy_count == 1
    assert game.world.grid[3][3] == "X"
    assert len(game.minimap.frames) >= FRAME_TILES
    assert game.minimap.walls


def test_shooting_kills_enemy_in_view():
    game = _game(ENEMY_MAP)
    game.update({"space"}, set())
    assert game.world.enemy_count == 0
    assert game.world.grid[3][3] == "0"
    assert game.world.has_won()
    assert game.gun.shooting


def test_left_mouse_also_shoots():
    game = _game(ENEMY_MAP)
    game.update(set(), {"left"})
    assert game.world.has_won()


def test_reset_restores_enemies_and_player():
    game = _game(ENEMY_MAP)
    game.update({"space"}, set())
    game.update({"w"}, set())
    game.handle_key("r")
    spawn = Player.from_spawn("N", 5, 3)
    assert game.world.enemy_count == 1
    assert game.world.grid[3][3] == "X"
    assert game.world.player.pos_x == pytest.approx(spawn.pos_x)
    assert game.world.player.pos_y == pytest.approx(spawn.pos_y)


def test_escape_stops_game():
    game = _game(ENEMY_MAP)
    game.handle_key("escape")
    assert game.running is False


def test_moving_forward_moves_player_and_scrolls_minimap():
    game = _game(ENEMY_MAP)
    start_x = game.world.player.pos_x
    start_y = game.world.player.pos_y
    walls_before = [wall.y for wall in game.minimap.walls]
    game.update({"w"}, set())
    game.update({"w"}, set())
    assert game.world.player.pos_y < start_y
    assert game.world.player.pos_x == pytest.approx(start_x)
    assert [wall.y for wall in game.minimap.walls] == [y + SHIFT for y in walls_before]


def test_arrow_keys_rotate():
    game = _game(ENEMY_MAP)
    start = game.world.player.angle
    game.update({"right"}, set())
    assert game.world.player.angle == pytest.approx(start + ROTATION_STEP)
    game.update({"left"}, set())
    assert game.world.player.angle == pytest.approx(start)


def test_cursor_rotation_and_recentre():
    game = _game(ENEMY_MAP)
    start = game.world.player.angle
    assert game.handle_cursor(500) is False
    assert game.world.player.angle == pytest.approx(start)
    game.handle_cursor(541)
    assert game.world.player.angle == pytest.approx(start + ROTATION_STEP)
    assert game.handle_cursor(50) is True
    assert math.isclose(game.world.player.angle, start, abs_tol=1e-9)


def test_small_cursor_moves_do_not_rotate():
    game = _game(ENEMY_MAP)
    start = game.world.player.angle
    game.handle_cursor(500)
    game.handle_cursor(530)
    game.handle_cursor(470)
    assert game.world.player.angle == start


def test_door_key_opens_and_closes():
    game = _game(DOOR_MAP)
    assert game.world.grid[2][3] == "D"
    game.world.player.pos_y = 3.3
    game.handle_key("f")
    assert game.world.grid[2][3] == "d"
    game.handle_key("f")
    assert game.world.grid[2][3] == "D"


def test_right_mouse_door_waits_between_clicks():
    game = _game(DOOR_MAP)
    game.world.player.pos_y = 3.3
    game.update(set(), {"right"})
    assert game.world.grid[2][3] == "d"
    game.update(set(), {"right"})
    assert game.world.grid[2][3] == "d"


def test_reset_closes_doors_again():
    game = _game(DOOR_MAP)
    game.world.player.pos_y = 3.3
    game.handle_key("f")
    game.handle_key("r")
    assert game.world.grid[2][3] == "D"
    assert game.world.player.pos_y == pytest.approx(4.5)


def test_check_arguments_accepts_cub_file():
    assert check_arguments(["maps/level.cub"]) == "maps/level.cub"


@pytest.mark.parametrize("argv", [[], ["a.cub", "b.cub"], ["level.txt"], ["cub"]])
def test_check_arguments_rejects(argv):
    with pytest.raises(ValueError):
        check_arguments(argv)


def test_main_reports_wrong_file_type(capsys):
    assert main(["level.txt"]) == 1
    assert ".cub" in capsys.readouterr().err


def test_main_reports_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "absent.cub")]) == 1
    assert "Error" in capsys.readouterr().err