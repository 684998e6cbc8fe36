import pytest

from cubengine.utils import SceneError, altoi, get_rgba, is_player, is_valid_content


@pytest.mark.parametrize(
    "text,length,expected",
    [
        ("123", 3, 123),
        ("-42", 3, -42),
        ("+7", 2, 7),
        ("12abc", 5, 12),
        ("12345", 2, 12),
        ("0", 1, 0),
    ],
)
def test_altoi_parses_prefix(text, length, expected):
    assert altoi(text, length) == expected


def test_altoi_length_counts_sign():
    assert altoi("-123", 2) == -1


def test_altoi_overflow_positive_gives_minus_one():
    assert altoi("9" * 25, 25) == -1


def test_altoi_overflow_negative_gives_zero():
    assert altoi("-" + "9" * 25, 26) == 0


def test_altoi_non_digit_start():
    assert altoi("abc", 3) == 0


@pytest.mark.parametrize("char", list("NSEW"))
def test_is_player_true(char):
    assert is_player(char) is True


@pytest.mark.parametrize("char", list("01D X"))
def test_is_player_false(char):
    assert is_player(char) is False


@pytest.mark.parametrize("char", list("01 \nNSEWD"))
def test_valid_content(char):
    assert is_valid_content(char) is True


@pytest.mark.parametrize("char", list("2Xd\t."))
def test_invalid_content(char):
    assert is_valid_content(char) is False


def test_get_rgba_packs_red_first():
    assert get_rgba(255, 0, 0, 255) == 0xFF0000FF


@pytest.mark.parametrize("channels", [(1, 2, 3, 4), (200, 100, 50, 255), (0, 0, 0, 0)])
def test_get_rgba_round_trip(channels):
    packed = get_rgba(*channels)
    unpacked = tuple((packed >> shift) & 0xFF for shift in (24, 16, 8, 0))
    assert unpacked == channels
    assert 0 <= packed < 2**32


def test_scene_error_message():
    error = SceneError("no player found")
    assert error.message == "no player found"
    assert str(error) == "no player found"
    assert isinstance(error, ValueError)