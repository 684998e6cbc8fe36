"""Floor and ceiling colours, the minimap palette and distance shading."""

from __future__ import annotations

from .utils import SceneError, altoi, get_rgba

ITER = 69
DEFAULT_TINT = (9.0, 15.0, 8.5)


def parse_color(text: str, name: str) -> tuple[int, int, int]:
    """Parse an ``R,G,B`` colour line (leading spaces, trailing newline).

    Raises SceneError naming the colour (``floor`` or ``ceiling``) if the
    text is not three comma separated values in 0..255 ending in a newline.
    """
    rest = text.lstrip(" ")
    channels: list[int] = []
    while len(channels) < 3 and rest[:1].isdigit():
        length = 0
        while length < len(rest) and rest[length].isdigit():
            length += 1
        terminator = rest[length:length + 1]
        expected = "," if len(channels) < 2 else "\n"
        value = altoi(rest, length)
        if terminator != expected or not 0 <= value <= 255:
            break
        channels.append(value)
        rest = rest[length + 1:]
    if len(channels) != 3:
        raise SceneError(f"invalid {name} color")
    return channels[0], channels[1], channels[2]


def color_palette(r_o: float = DEFAULT_TINT[0], g_o: float = DEFAULT_TINT[1],
                  b_o: float = DEFAULT_TINT[2]) -> list[int]:
    """Build the gradient palette of ``ITER`` packed RGBA colours."""
    palette = [0xAA]
    for i in range(1, ITER):
        t = i / (ITER // 5)
        r = int(r_o * (1 - t) * t * t * t * 255)
        g = int(g_o * (1 - t) * (1 - t) * t * t * 255)
        b = int(b_o * (1 - t) * (1 - t) * (1 - t) * t * 255)
        palette.append(((r << 24) | (g << 16) | (b << 8) | 255) & 0xFFFFFFFF)
    return palette


def apply_lighting(color: int, factor: float) -> int:
    """Scale the RGB channels of ``color`` by ``factor``, keeping alpha."""
    color &= 0xFFFFFFFF
    r, g, b = ((color >> shift) & 0xFF for shift in (24, 16, 8))
    a = color & 0xFF
    r, g, b = (min(255, max(0, int(c * factor))) for c in (r, g, b))
    return get_rgba(r, g, b, a)