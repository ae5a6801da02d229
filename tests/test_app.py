import pytest

from raycub.app import (
    MAX_HEIGHT,
    MAX_WIDTH,
    SNAPSHOT_NAME,
    clamp_resolution,
    load_textures,
    main,
    render_snapshot,
)
from raycub.bmp import encode_bmp
from raycub.config import Config, ConfigError, load_config
from raycub.xpm import XpmError

COLORS = {
    "no.xpm": "#FF0000",
    "so.xpm": "#00FF00",
    "we.xpm": "#0000FF",
    "ea.xpm": "#FFFFFF",
    "sp.xpm": "#FFFF00",
}

SCENE = """R 8 6
NO ./no.xpm
SO ./so.xpm
WE ./we.xpm
EA ./ea.xpm
S ./sp.xpm
F 10,20,30
C 40,50,60

111111
100001
10N201
100001
111111
"""


def _xpm(color):
    rows = "".join('"aaaa",\n' for _ in range(4))
    return (
        "/* XPM */\nstatic char *t[] = {\n"
        '"4 4 1 1",\n'
        f'"a c {color}",\n'
        f"{rows}"
        "};\n"
    )


@pytest.fixture
def scene_dir(tmp_path, monkeypatch):
    for name, color in COLORS.items():
        (tmp_path / name).write_text(_xpm(color))
    (tmp_path / "scene.cub").write_text(SCENE)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_clamp_resolution_limits_large_values():
    config = Config(x_res=4000, y_res=3000)
    clamp_resolution(config)
    assert (config.x_res, config.y_res) == (MAX_WIDTH, MAX_HEIGHT)


def test_clamp_resolution_keeps_small_values():
    config = Config(x_res=640, y_res=480)
    clamp_resolution(config)
    assert (config.x_res, config.y_res) == (640, 480)


def test_load_textures_maps_paths_to_sides(scene_dir):
    config = load_config("scene.cub")
    textures = load_textures(config)
    assert textures.north.get(0, 0) == 0xFF0000
    assert textures.south.get(1, 1) == 0x00FF00
    assert textures.west.get(2, 2) == 0x0000FF
    assert textures.east.get(3, 3) == 0xFFFFFF
    assert textures.sprite.get(0, 3) == 0xFFFF00


def test_load_textures_missing_file(tmp_path):
    missing = str(tmp_path / "missing.xpm")
    config = Config(no_path=missing, so_path=missing, we_path=missing,
                    ea_path=missing, sp_path=missing)
    with pytest.raises(XpmError):
        load_textures(config)


def test_render_snapshot_writes_bmp_of_frame(scene_dir):
    config = load_config("scene.cub")
    textures = load_textures(config)
    out = scene_dir / "shot.bmp"
    image = render_snapshot(config, textures, out)
    data = out.read_bytes()
    assert (image.width, image.height) == (config.x_res, config.y_res)
    assert data == encode_bmp(image)
    assert data[:2] == b"BM"
    assert len(data) == 54 + config.x_res * config.y_res * 4


def test_render_snapshot_uses_only_scene_colors(scene_dir):
    config = load_config("scene.cub")
    image = render_snapshot(config, load_textures(config), scene_dir / "shot.bmp")
    allowed = {int(c[1:], 16) for c in COLORS.values()} | {config.floor, config.ceiling, 0}
    assert set(image.pixels) <= allowed


def test_render_snapshot_without_spawn(scene_dir):
    config = load_config("scene.cub")
    config.spawn = None
    with pytest.raises(ConfigError):
        render_snapshot(config, load_textures(config), scene_dir / "x.bmp")


def test_main_without_arguments(capsys):
    assert main([]) != 0
    assert "No Config File Specified" in capsys.readouterr().err


def test_main_unknown_command(capsys):
    assert main(["scene.cub", "--play"]) != 0
    assert "Unknown Command" in capsys.readouterr().err


def test_main_too_many_arguments(capsys):
    assert main(["a", "b", "c"]) != 0
    assert "Too Many Arguments" in capsys.readouterr().err


def test_main_missing_config_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.cub")]) != 0
    err = capsys.readouterr().err
    assert err.startswith("Error\n")
    assert "Invalid Config File" in err


def test_main_invalid_configuration(tmp_path, capsys):
    bad = tmp_path / "bad.cub"
    bad.write_text("X 1 2\n")
    assert main([str(bad), "--save"]) != 0
    assert "Invalid Configuration" in capsys.readouterr().err


def test_main_save_writes_snapshot(scene_dir):
    assert main(["scene.cub", "--save"]) == 0
    data = (scene_dir / SNAPSHOT_NAME).read_bytes()
    assert data[:2] == b"BM"
    assert len(data) == 54 + 8 * 6 * 4