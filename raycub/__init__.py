"""Textured raycasting engine for .cub scene files, with XPM textures and BMP snapshots."""

__version__ = "0.1.0"
__all__ = ["__version__"]