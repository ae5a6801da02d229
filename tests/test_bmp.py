import struct

from raycub.bmp import bmp_header, encode_bmp, save_bmp
from raycub.xpm import Image


def test_header_fields():
    header = bmp_header(7, 5, 32)
    assert len(header) == 54
    assert header[:2] == b"BM"
    (size,) = struct.unpack_from("<I", header, 2)
    assert size == 7 * 5 * 4 + 54
    assert struct.unpack_from("<I", header, 10)[0] == 54
    assert struct.unpack_from("<I", header, 14)[0] == 40
    assert struct.unpack_from("<ii", header, 18) == (7, 5)
    assert struct.unpack_from("<H", header, 26)[0] == 1
    assert struct.unpack_from("<H", header, 28)[0] == 32
    assert struct.unpack_from("<I", header, 34)[0] == 35


def test_header_size_follows_bpp_but_depth_stays_32():
    header = bmp_header(4, 3, 24)
    assert struct.unpack_from("<I", header, 2)[0] == 4 * 3 * 3 + 54
    assert header[28] == 32


def test_encode_rows_bottom_up():
    image = Image(2, 3, [1, 2, 3, 4, 5, 6])
    data = encode_bmp(image)
    assert len(data) == 54 + 2 * 3 * 4
    assert data[:54] == bmp_header(2, 3, 32)
    assert struct.unpack_from("<6I", data, 54) == (5, 6, 3, 4, 1, 2)


def test_save_writes_encoded_bytes(tmp_path):
    image = Image(3, 2, [0xFF0000, 0x00FF00, 0x0000FF, 0xFF000000, 0, 0xFFFFFF])
    path = tmp_path / "frame.bmp"
    save_bmp(image, path)
    assert path.read_bytes() == encode_bmp(image)