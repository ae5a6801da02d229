import pytest

from raycub.config import (
    Config,
    ConfigError,
    check_map,
    encode_color,
    is_map_line,
    parse_color,
    parse_config,
    parse_map,
    parse_path,
    parse_resolution,
    parse_settings,
    load_config,
)

MAP = [
    "111111",
    "100201",
    "10N001",
    "111111",
]

TEXTURES = ["no.xpm", "so.xpm", "we.xpm", "ea.xpm", "sp.xpm"]


@pytest.fixture
def textures(tmp_path, monkeypatch):
    for name in TEXTURES:
        (tmp_path / name).write_text("x")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def settings():
    return [
        "R 640 480",
        "NO no.xpm",
        "SO so.xpm",
        "WE we.xpm",
        "EA ea.xpm",
        "S sp.xpm",
        "F 220,100,0",
        "C 225,30,0",
    ]


def test_full_parse(textures):
    config = parse_config(settings() + ["", *MAP])
    assert (config.x_res, config.y_res) == (640, 480)
    assert config.no_path == "no.xpm"
    assert config.sp_path == "sp.xpm"
    assert config.grid == MAP
    assert config.spawn == (2, 2, "N")
    assert config.sprite_count == 1
    assert config.floor == encode_color(220, 100, 0)
    assert config.ceiling >> 16 == 225
    assert config.is_complete()


def test_load_config_from_file(textures):
    path = textures / "scene.cub"
    path.write_text("\n".join(settings() + ["", *MAP]) + "\n")
    config = load_config(path)
    assert config.grid == MAP
    assert config.spawn == (2, 2, "N")


def test_load_config_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="Invalid Config File"):
        load_config(tmp_path / "absent.cub")


def test_encode_color_channels_round_trip():
    for r, g, b in [(0, 0, 0), (1, 2, 3), (255, 128, 7), (10, 255, 255)]:
        value = encode_color(r, g, b)
        assert (value >> 16 & 255, value >> 8 & 255, value & 255) == (r, g, b)
    assert encode_color(255, 255, 255) == 0xFFFFFF


@pytest.mark.parametrize("rgb", [(256, 0, 0), (0, 256, 0), (0, 0, 300)])
def test_encode_color_rejects_large_channel(rgb):
    with pytest.raises(ConfigError, match="Invalid Color"):
        encode_color(*rgb)


def test_is_map_line():
    assert is_map_line("1111") is True
    assert is_map_line("   ") is True
    assert is_map_line("") is True
    assert is_map_line("   \n") is False


def test_empty_config_is_incomplete():
    assert Config().is_complete() is False


def test_resolution_parsed():
    config = Config()
    parse_resolution(["R", "800", "600"], config)
    assert (config.x_res, config.y_res) == (800, 600)


@pytest.mark.parametrize(
    "args, message",
    [
        (["R", "640"], "Invalid Resolution"),
        (["R", "0", "480"], "Invalid Resolution"),
        (["R", "640", "0"], "Invalid Resolution"),
        (["R", "64a", "480"], "Invalid Configuration"),
        (["R", "640", "-1"], "Invalid Configuration"),
    ],
)
def test_resolution_errors(args, message):
    with pytest.raises(ConfigError, match=message):
        parse_resolution(args, Config())


def test_second_resolution_rejected():
    config = Config()
    parse_resolution(["R", "640", "480"], config)
    with pytest.raises(ConfigError, match="Two or More Resolutions Specified"):
        parse_resolution(["R", "800", "600"], config)


def test_path_errors(textures):
    with pytest.raises(ConfigError, match="Specify Only 1 Path"):
        parse_path(["NO", "no.xpm", "so.xpm"], Config())
    with pytest.raises(ConfigError, match="Texture File Is Invalid"):
        parse_path(["NO", "missing.xpm"], Config())
    config = Config()
    parse_path(["NO", "no.xpm"], config)
    assert config.no_path == "no.xpm"
    with pytest.raises(ConfigError, match="Invalid Configuration"):
        parse_path(["NO", "so.xpm"], config)


@pytest.mark.parametrize(
    "args",
    [
        ["F", "1,2"],
        ["F", "1,,2,3"],
        ["F", "1,2,3,"],
        ["F", "a,1,2"],
        ["F", ",1,2,3"],
        ["F", "256,0,0"],
        ["F", "1,", "2,3"],
    ],
)
def test_color_errors(args):
    with pytest.raises(ConfigError, match="Invalid Color"):
        parse_color(args, Config())


def test_color_given_twice():
    config = Config()
    parse_color(["C", "1,2,3"], config)
    assert config.ceiling == encode_color(1, 2, 3)
    with pytest.raises(ConfigError, match="Invalid Configuration"):
        parse_color(["C", "4,5,6"], config)


def test_unknown_key_rejected(textures):
    with pytest.raises(ConfigError, match="Invalid Configuration"):
        parse_config(["X 1"] + settings() + MAP)


def test_single_words_are_skipped(textures):
    config = parse_config(["hello", *settings()[:3], "R"] + settings()[3:] + MAP)
    assert config.grid == MAP


def test_incomplete_settings():
    with pytest.raises(ConfigError, match="Invalid Configuration"):
        parse_settings(iter(["R 1 1", "", "F 1,2,3"]), Config())


def test_settings_stop_after_completion(textures):
    lines = iter(settings() + ["rest"])
    config = Config()
    parse_settings(lines, config)
    assert config.is_complete()
    assert list(lines) == ["rest"]


def test_lines_after_settings_belong_to_map(textures):
    with pytest.raises(ConfigError, match="Invalid Configuration"):
        parse_config(settings() + ["R 1 1", *MAP])


def test_blank_lines_dropped_from_map(textures):
    config = parse_config(settings() + ["", MAP[0], "", *MAP[1:], ""])
    assert config.grid == MAP


def test_space_only_line_kept(textures):
    config = parse_config(settings() + ["   ", *MAP])
    assert config.grid == ["   ", *MAP]
    assert config.spawn == (3, 2, "N")


def test_parse_map_directly():
    config = Config()
    parse_map(iter(MAP), config)
    assert config.grid == MAP
    assert config.spawn == (2, 2, "N")
    assert config.sprite_count == 1


def test_no_spawn():
    config = Config(grid=["111", "101", "111"])
    with pytest.raises(ConfigError, match="No Spawn Point Set"):
        check_map(config)


def test_two_spawns():
    config = Config(grid=["1111", "1NS1", "1111"])
    with pytest.raises(ConfigError, match="2 Spawn Points Set"):
        check_map(config)


@pytest.mark.parametrize(
    "grid",
    [
        ["111111", "100200", "10N001", "111111"],
        ["111111", "10 201", "10N001", "111111"],
        ["101111", "100201", "10N001", "111111"],
    ],
)
def test_open_map_rejected(grid):
    with pytest.raises(ConfigError, match="Map is Invalid"):
        check_map(Config(grid=grid))


def test_invalid_map_character():
    with pytest.raises(ConfigError, match="Invalid Configuration"):
        check_map(Config(grid=["1111", "1NX1", "1111"]))


def test_sprite_count_matches_cells():
    grid = ["11111", "12221", "1N021", "11111"]
    config = Config(grid=grid)
    check_map(config)
    assert config.sprite_count == sum(row.count("2") for row in grid)
    assert config.spawn == (2, 1, "N")


def test_empty_map_has_no_spawn(textures):
    with pytest.raises(ConfigError, match="No Spawn Point Set"):
        parse_config(settings())