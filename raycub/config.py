"""Reading scene description files: resolution, textures, colours and map."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Union

from raycub.textutil import atoi, is_digits, split

MAP_CHARS = frozenset("012NSWE ")
SPAWN_CHARS = frozenset("NSWE")

_TEXTURE_KEYS = {
    "NO": "no_path",
    "SO": "so_path",
    "WE": "we_path",
    "EA": "ea_path",
    "S": "sp_path",
}
_COLOR_KEYS = {"F": "floor", "C": "ceiling"}


class ConfigError(ValueError):
    """Raised when a scene description is invalid."""


@dataclass
class Config:
    """Everything a scene description file sets up.

    Unset numbers are -1 and unset paths are None, as before parsing.
    """

    x_res: int = -1
    y_res: int = -1
    no_path: Optional[str] = None
    so_path: Optional[str] = None
    we_path: Optional[str] = None
    ea_path: Optional[str] = None
    sp_path: Optional[str] = None
    floor: int = -1
    ceiling: int = -1
    grid: list[str] = field(default_factory=list)
    spawn: Optional[tuple[int, int, str]] = None
    sprite_count: int = 0
    save: bool = False

    def is_complete(self) -> bool:
        """Tell whether every setting that precedes the map has been given."""
        return not (
            self.x_res == -1
            or self.y_res == -1
            or self.no_path is None
            or self.so_path is None
            or self.we_path is None
            or self.ea_path is None
            or self.sp_path is None
            or self.floor == -1
            or self.ceiling == -1
        )


def encode_color(r: int, g: int, b: int) -> int:
    """Pack three channels into 0xRRGGBB; a channel above 255 is an error."""
    if r > 255 or g > 255 or b > 255:
        raise ConfigError("Invalid Color")
    return (r << 16) | (g << 8) | b


def is_map_line(line: str) -> bool:
    """Tell whether a line is kept for the map.

    Only a line holding nothing but spaces before a newline is refused.
    """
    return line.lstrip(" ")[:1] != "\n"


def parse_resolution(args: list[str], config: Config) -> None:
    """Handle an "R <width> <height>" line."""
    if len(args) != 3:
        raise ConfigError("Invalid Resolution")
    if not (is_digits(args[1]) and is_digits(args[2])):
        raise ConfigError("Invalid Configuration")
    if config.x_res > 0 or config.y_res > 0:
        raise ConfigError("Two or More Resolutions Specified")
    config.x_res = atoi(args[1])
    if config.x_res <= 0:
        raise ConfigError("Invalid Resolution")
    config.y_res = atoi(args[2])
    if config.y_res <= 0:
        raise ConfigError("Invalid Resolution")


def _check_readable(path: str) -> None:
    try:
        fd = os.open(path, os.O_RDONLY)
    except OSError:
        raise ConfigError("Texture File Is Invalid For Some Reason") from None
    os.close(fd)


def parse_path(args: list[str], config: Config) -> None:
    """Handle a texture line: NO, SO, WE, EA or S followed by one path."""
    if len(args) != 2:
        raise ConfigError("Specify Only 1 Path")
    _check_readable(args[1])
    attr = _TEXTURE_KEYS.get(args[0])
    if attr is None or getattr(config, attr) is not None:
        raise ConfigError("Invalid Configuration")
    setattr(config, attr, args[1])


def _check_commas(text: str) -> None:
    if ",," in text or text.endswith(","):
        raise ConfigError("Invalid Color")


def parse_color(args: list[str], config: Config) -> None:
    """Handle a colour line: F or C followed by "R,G,B"."""
    channels = split(args[1], ",")
    if len(args) != 2 or len(channels) != 3 or not all(map(is_digits, channels)):
        raise ConfigError("Invalid Color")
    if not is_digits(args[1][:1]) or not args[1]:
        raise ConfigError("Invalid Color")
    _check_commas(args[1])
    attr = _COLOR_KEYS.get(args[0])
    if attr is None or getattr(config, attr) >= 0:
        raise ConfigError("Invalid Configuration")
    setattr(config, attr, encode_color(*(atoi(part) for part in channels)))


_HANDLERS: dict[str, Callable[[list[str], Config], None]] = {
    "R": parse_resolution,
    **{key: parse_path for key in _TEXTURE_KEYS},
    **{key: parse_color for key in _COLOR_KEYS},
}


def parse_settings(lines: Iterable[str], config: Config) -> None:
    """Read setting lines until every setting is known.

    Lines with fewer than two words are skipped. When given an iterator,
    reading stops right after the line that completes the settings, so
    the rest is left for the map.
    """
    if not config.is_complete():
        for line in lines:
            args = split(line, " ")
            if len(args) > 1:
                handler = _HANDLERS.get(args[0])
                if handler is None:
                    raise ConfigError("Invalid Configuration")
                handler(args, config)
            if config.is_complete():
                break
    if not config.is_complete():
        raise ConfigError("Invalid Configuration")


def parse_map(lines: Iterable[str], config: Config) -> None:
    """Read the remaining lines as map rows, dropping empty ones, and check them."""
    config.grid = [line for line in lines if is_map_line(line) and line]
    check_map(config)


def _cell(row: str, j: int) -> str:
    return row[j] if 0 <= j < len(row) else "\0"


def _check_open_cell(grid: list[str], i: int, j: int) -> None:
    row = grid[i]
    if i == 0 or j == 0 or j == len(row) - 1 or i == len(grid) - 1:
        raise ConfigError("Map is Invalid")
    neighbours = (
        _cell(row, j - 1),
        _cell(row, j + 1),
        _cell(grid[i - 1], j),
        _cell(grid[i + 1], j),
    )
    if " " in neighbours:
        raise ConfigError("Map is Invalid")


def check_map(config: Config) -> None:
    """Validate the map, find the spawn point and count the sprites.

    Every walkable cell must be enclosed: not on the border and not next to
    a space. Exactly one spawn cell (N, S, W or E) must exist.
    """
    spawn: Optional[tuple[int, int, str]] = None
    spawn_count = 0
    sprites = 0
    for i, row in enumerate(config.grid):
        for j, ch in enumerate(row):
            if ch not in MAP_CHARS:
                raise ConfigError("Invalid Configuration")
            if ch not in "1 ":
                _check_open_cell(config.grid, i, j)
                if ch in SPAWN_CHARS:
                    spawn = (i, j, ch)
                    spawn_count += 1
            if ch == "2":
                sprites += 1
    config.sprite_count = sprites
    if spawn is None:
        raise ConfigError("No Spawn Point Set")
    if spawn_count != 1:
        raise ConfigError(f"{spawn_count} Spawn Points Set")
    config.spawn = spawn


def parse_config(lines: Iterable[str]) -> Config:
    """Parse a scene description given as lines without newlines."""
    config = Config()
    it: Iterator[str] = iter(lines)
    parse_settings(it, config)
    parse_map(it, config)
    return config


def load_config(path: Union[str, Path]) -> Config:
    """Read and parse a scene description file."""
    try:
        text = Path(path).read_bytes().decode("latin-1")
    except OSError:
        raise ConfigError("Invalid Config File") from None
    return parse_config(text.split("\n"))