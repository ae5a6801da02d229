# raycub

raycub is a first-person raycasting engine. It reads a `.cub` scene file,
which holds settings lines followed by a map grid. It draws textured
walls, flat floor and ceiling colours and billboard sprites into a pygame
window. It can also write one rendered frame to a BMP file.

## Installing

```
pip install .
```

pip also installs pygame, which draws the window. To install with the
test dependencies:

```
pip install .[test]
```

## Running

```
raycub scene.cub
raycub scene.cub --save
```

With `--save`, raycub renders the first frame seen from the spawn point.
It writes that frame to `deepthought.bmp` in the current directory and
exits without opening a window. Any second argument other than `--save`
is an error.

The resolution is capped at 2560 × 1440.

The window is redrawn at most 60 times a second. These keys control it:

| Key          | Action            |
|--------------|-------------------|
| W / S        | forward / back    |
| A / D        | strafe            |
| Left / Right | turn              |
| Esc          | quit              |

Closing the window also quits.

When something is wrong, raycub writes `Error` and a message to standard
error and exits with status 255. That happens on bad arguments, an
unreadable or invalid scene, or a texture that cannot be read.

## Scene files

```
R 1024 768
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
S ./textures/sprite.xpm
F 220,100,0
C 225,30,0

111111
100201
10N001
111111
```

- `R` gives the resolution as width and height. Both must be positive
  decimal numbers.
- `NO`, `SO`, `WE` and `EA` give the wall textures, and `S` gives the
  sprite texture. All five are XPM files. Each file must be readable when
  the scene is loaded.
- `F` gives the floor colour and `C` the ceiling colour, written as
  `r,g,b`. The value has no spaces and each channel is 0 to 255.

Each setting must appear exactly once, in any order. Lines with fewer than
two words are skipped. An unknown key is an error. Every line after the
last setting is part of the map, except empty lines. The map uses these
characters:

- `1` is a wall.
- `0` is empty floor.
- `2` is a sprite.
- `N`, `S`, `W` or `E` marks the spawn point. There must be exactly one.
- A space is void.

Every cell that is not a wall or a space must be enclosed. It may not lie
on the edge of the map, and it may not touch a space.

Texture notes:

- Wall textures are sampled vertically with a bit mask, so their heights
  should be powers of two.
- In the sprite texture, pixels whose colour is exactly 0 (black) are not
  drawn.

## Library use

```python
from raycub.config import load_config
from raycub.app import clamp_resolution, load_textures, render_snapshot

config = load_config("scene.cub")
clamp_resolution(config)
image = render_snapshot(config, load_textures(config), "frame.bmp")
print(image.width, image.height, hex(image.get(0, 0)))
```

The parts can also be used on their own:

- `raycub.config`
  - `parse_config(lines)` and `load_config(path)` return a `Config`.
  - They raise `ConfigError` on an invalid scene.
- `raycub.xpm`
  - `parse_xpm(text)` and `load_xpm(path)` return an `Image`, a grid of
    0xAARRGGBB pixels read with `get(x, y)` and written with
    `put(x, y, color)`.
  - They raise `XpmError` on an image that cannot be read.
- `raycub.colors.lookup_color(name)` returns the value of an X11 colour
  name, ignoring case.
- `raycub.engine`
  - `camera_from_spawn`, `find_sprites`, `sort_sprites`, `move` and
    `render(config, camera, textures, sprites)` draw one frame into an
    `Image`.
  - `Controls` turns key codes into movement.
- `raycub.bmp`
  - `encode_bmp(image)` returns 32-bit BMP bytes.
  - `save_bmp(image, path)` writes them to a file.

## What it does not do

raycub has only walls, sprites and flat colours. It has no sound, no
mouse look, no doors, no enemies or game logic, and no minimap. Sprites
are static billboards. Snapshots are always written as uncompressed 32-bit
BMP.