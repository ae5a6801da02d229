"""Reading XPM images into pixel buffers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from raycub.colors import lookup_color
from raycub.textutil import atoi

TRANSPARENT = 0xFF000000

_QUOTED = re.compile(r'"([^"]*)"')
_HEX_PREFIX = re.compile(r"[0-9a-fA-F]*")
_WORD_SEP = re.compile(r"[ \t]+")


class XpmError(ValueError):
    """Raised when an XPM image cannot be read."""


@dataclass
class Image:
    """A width x height grid of 32-bit 0xAARRGGBB pixels, stored row by row."""

    width: int
    height: int
    pixels: Optional[list[int]] = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"invalid image size {self.width}x{self.height}")
        size = self.width * self.height
        if self.pixels is None:
            self.pixels = [0] * size
        elif len(self.pixels) != size:
            raise ValueError(f"expected {size} pixels, got {len(self.pixels)}")

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        return y * self.width + x

    def get(self, x: int, y: int) -> int:
        """Return the pixel at column x, row y."""
        return self.pixels[self._index(x, y)]

    def put(self, x: int, y: int, color: int) -> None:
        """Set the pixel at column x, row y to a 32-bit colour."""
        self.pixels[self._index(x, y)] = color & 0xFFFFFFFF


def _blank_comments(text: str, opener: str, closer: str) -> str:
    out: list[str] = []
    quoted = False
    i = 0
    size = len(text)
    while i < size:
        ch = text[i]
        if ch == '"':
            quoted = not quoted
        elif not quoted and text.startswith(opener, i):
            end = text.find(closer, i + len(opener))
            stop = size if end == -1 else end + len(closer)
            out.append(" " * (stop - i))
            i = stop
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def strip_comments(text: str) -> str:
    """Blank out C comments lying outside quoted strings.

    Block comments go first, then line comments including their newline.
    Every blanked character becomes a space, so the length is kept.
    """
    return _blank_comments(_blank_comments(text, "/*", "*/"), "//", "\n")


def text_to_rgb(name: str, end: Optional[str]) -> int:
    """Turn an XPM colour value into 0xRRGGBB.

    "#..." is read as hexadecimal. Otherwise the name, joined with the word
    after it when given, is looked up in the colour table; "None" gives -1
    and unknown names give 0.
    """
    if name.startswith("#"):
        digits = _HEX_PREFIX.match(name, 1).group()
        return int(digits, 16) if digits else 0
    if end is not None:
        name = f"{name} {end}"
    value = lookup_color(name)
    return 0 if value is None else value


def _words(line: str) -> list[str]:
    return [word for word in _WORD_SEP.split(line) if word]


def _next_line(lines, what: str) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise XpmError(f"missing {what}") from None


def parse_xpm_lines(lines: Iterable[str]) -> Image:
    """Build an image from the quoted strings of an XPM file, in order."""
    it = iter(lines)
    header = _words(_next_line(it, "header"))
    if len(header) < 4:
        raise XpmError("header needs width, height, colour count and chars per pixel")
    width, height, ncolors, cpp = (atoi(word) for word in header[:4])
    if width <= 0 or height <= 0 or ncolors <= 0 or cpp <= 0:
        raise XpmError(f"invalid header {' '.join(header[:4])!r}")

    # With one or two characters per pixel a later definition of a key
    # replaces an earlier one; with more, the first definition stays.
    later_wins = cpp <= 2
    palette: dict[str, int] = {}
    for _ in range(ncolors):
        line = _next_line(it, "colour definition")
        if len(line) < cpp:
            raise XpmError(f"colour line too short: {line!r}")
        key = line[:cpp]
        words = _words(line[cpp:])
        try:
            at = words.index("c") + 1
        except ValueError:
            raise XpmError(f"no colour value in {line!r}") from None
        if at >= len(words):
            raise XpmError(f"no colour value in {line!r}")
        end = words[at + 1] if at + 1 < len(words) else None
        rgb = text_to_rgb(words[at], end)
        if later_wins:
            palette[key] = rgb
        else:
            palette.setdefault(key, rgb)

    pixels: list[int] = []
    for row in range(height):
        line = _next_line(it, f"pixel row {row}")
        if len(line) < cpp * width:
            raise XpmError(f"pixel row {row} too short")
        for x in range(width):
            color = palette.get(line[x * cpp:(x + 1) * cpp], 0)
            pixels.append(TRANSPARENT if color == -1 else color & 0xFFFFFFFF)
    return Image(width, height, pixels)


def parse_xpm(text: str) -> Image:
    """Parse the full text of an XPM file."""
    return parse_xpm_lines(_QUOTED.findall(strip_comments(text)))


def load_xpm(path: Union[str, Path]) -> Image:
    """Read and parse an XPM file."""
    try:
        text = Path(path).read_bytes().decode("latin-1")
    except OSError as exc:
        raise XpmError(f"cannot read {path}: {exc}") from exc
    return parse_xpm(text)