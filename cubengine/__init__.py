"""Raycasting first-person game for .cub scene files: parsing, world, rendering and the game loop."""

__version__ = "0.1.0"
__all__ = ["__version__"]