"""Writing rendered frames as 32-bit BMP files."""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Union

from raycub.xpm import Image

HEADER_SIZE = 54
INFO_SIZE = 40
_MASK = 0xFFFFFFFF


def bmp_header(width: int, height: int, bpp: int) -> bytes:
    """Build the 54-byte file and info header for a bottom-up 32-bit image."""
    header = bytearray(HEADER_SIZE)
    header[0:2] = b"BM"
    struct.pack_into("<I", header, 2, (width * height * (bpp // 8) + HEADER_SIZE) & _MASK)
    header[10] = HEADER_SIZE
    header[14] = INFO_SIZE
    struct.pack_into("<I", header, 18, width & _MASK)
    struct.pack_into("<I", header, 22, height & _MASK)
    header[26] = 1
    header[28] = 32
    struct.pack_into("<I", header, 34, (width * height) & _MASK)
    return bytes(header)


def encode_bmp(image: Image) -> bytes:
    """Encode an image as BMP bytes, rows written from bottom to top."""
    width = image.width
    row_format = f"<{width}I"
    rows = (
        struct.pack(row_format, *image.pixels[y * width:(y + 1) * width])
        for y in reversed(range(image.height))
    )
    return bmp_header(width, image.height, 32) + b"".join(rows)


def save_bmp(image: Image, path: Union[str, Path]) -> None:
    """Write an image to a BMP file, replacing any existing file."""
    Path(path).write_bytes(encode_bmp(image))