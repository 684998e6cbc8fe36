"""Small helpers shared by the scene parser and the renderer."""

from __future__ import annotations

PLAYER_CHARS = frozenset("NSEW")
MAP_CHARS = frozenset("01 \nNSEWD")

_SIZE_MAX = 2**64 - 1


class SceneError(ValueError):
    """Raised when a scene description is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 2**32 if value >= 2**31 else value


def altoi(text: str, length: int) -> int:
    """Convert at most ``length`` leading characters of ``text`` to an int.

    A leading sign counts towards ``length``. Parsing stops at the first
    non-digit. On overflow a positive number gives -1 and a negative one 0;
    the result is wrapped to a signed 32-bit integer.
    """
    sign = -1 if text[:1] == "-" else 1
    start = 1 if text[:1] in ("-", "+") else 0
    result = 0
    for char in text[start:max(length, start)]:
        if not ("0" <= char <= "9"):
            break
        digit = ord(char)
        if result > _SIZE_MAX // 10 - digit - 48:
            return 0 if sign == -1 else -1
        result = result * 10 + digit - 48
    return _to_int32(result * sign)


def is_player(char: str) -> bool:
    """Return True for a player spawn character (N, S, E or W)."""
    return char in PLAYER_CHARS


def is_valid_content(char: str) -> bool:
    """Return True if ``char`` may appear in a map."""
    return char in MAP_CHARS


def get_rgba(r: int, g: int, b: int, a: int) -> int:
    """Pack four channels into one unsigned 32-bit RGBA value."""
    return ((r << 24) | (g << 16) | (b << 8) | a) & 0xFFFFFFFF