"""Small text helpers used when reading configuration and image files."""

from __future__ import annotations

from typing import Iterable, Iterator

_SPACES = " \t\v\r\n\f"
_DIGITS = "0123456789"


def atoi(text: str) -> int:
    """Read a leading decimal integer the way C's atoi does.

    Leading whitespace is skipped, one optional sign is accepted, and digits
    are read until the first non-digit. Text without digits gives 0. The
    result wraps to a signed 32-bit integer.
    """
    rest = text.lstrip(_SPACES)
    sign = 1
    if rest[:1] == "-":
        sign = -1
        rest = rest[1:]
    elif rest[:1] == "+":
        rest = rest[1:]
    number = 0
    for ch in rest:
        if ch not in _DIGITS:
            break
        number = number * 10 + (ord(ch) - ord("0"))
    value = (number * sign) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 1 << 32
    return value


def split(text: str, sep: str) -> list[str]:
    """Split text on a separator character, dropping empty words."""
    return [word for word in text.split(sep) if word]


def is_digits(text: str) -> bool:
    """Tell whether every character is a decimal digit (true for "")."""
    return all(ch in _DIGITS for ch in text)


def iter_lines(stream: Iterable[str]) -> Iterator[str]:
    """Yield the lines of a text stream without their newlines.

    The text after the last newline is always yielded as a final line, so a
    stream ending in a newline (or an empty stream) ends with "".
    """
    ended_with_newline = True
    for raw in stream:
        if raw.endswith("\n"):
            yield raw[:-1]
            ended_with_newline = True
        else:
            yield raw
            ended_with_newline = False
    if ended_with_newline:
        yield ""