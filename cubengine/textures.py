"""Wall and sprite textures loaded from PNG files."""

from __future__ import annotations

from dataclasses import dataclass

from PIL import Image

from .utils import SceneError


@dataclass(frozen=True)
class Texture:
    """An RGBA image stored row by row, four bytes per pixel."""

    width: int
    height: int
    pixels: bytes

    def __post_init__(self) -> None:
        if len(self.pixels) != self.width * self.height * 4:
            raise ValueError("pixel data does not match texture size")

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Return the (r, g, b, a) channels of the pixel at column x, row y."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside texture")
        offset = (y * self.width + x) * 4
        r, g, b, a = self.pixels[offset:offset + 4]
        return r, g, b, a


def load_texture(path: str, name: str) -> Texture:
    """Load a PNG file as a Texture; raise SceneError naming ``name`` on failure."""
    try:
        with Image.open(path) as image:
            is_png = image.format == "PNG"
            rgba = image.convert("RGBA") if is_png else None
    except (OSError, ValueError) as exc:
        raise SceneError(f"invalid {name} texture") from exc
    if rgba is None:
        raise SceneError(f"invalid {name} texture")
    return Texture(rgba.width, rgba.height, rgba.tobytes())


def parse_texture_path(text: str) -> str:
    """Extract a texture path: drop the final character and leading spaces."""
    return text[:-1].lstrip(" ")