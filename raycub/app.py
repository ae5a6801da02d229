"""Command-line entry point: load a scene, then play it or save a snapshot."""

from __future__ import annotations

import struct
import sys
from pathlib import Path
from typing import Optional, Sequence, Union

from raycub.bmp import save_bmp
from raycub.config import Config, ConfigError, load_config
from raycub.engine import (
    Controls,
    Key,
    Textures,
    camera_from_spawn,
    find_sprites,
    move,
    render,
    sort_sprites,
)
from raycub.xpm import Image, XpmError, load_xpm

MAX_WIDTH = 2560
MAX_HEIGHT = 1440
SNAPSHOT_NAME = "deepthought.bmp"
SAVE_FLAG = "--save"
WINDOW_TITLE = "Cub3D"
EXIT_FAILURE = 255


def clamp_resolution(config: Config) -> Config:
    """Limit the resolution to what the screen can show, in place."""
    config.x_res = min(config.x_res, MAX_WIDTH)
    config.y_res = min(config.y_res, MAX_HEIGHT)
    return config


def load_textures(config: Config) -> Textures:
    """Load the five textures named by the configuration."""
    return Textures(
        north=load_xpm(config.no_path),
        south=load_xpm(config.so_path),
        west=load_xpm(config.we_path),
        east=load_xpm(config.ea_path),
        sprite=load_xpm(config.sp_path),
    )


def render_snapshot(config: Config, textures: Textures, path: Union[str, Path]) -> Image:
    """Render the first frame seen from the spawn point and save it as BMP."""
    if config.spawn is None:
        raise ConfigError("No Spawn Point Set")
    camera = camera_from_spawn(*config.spawn)
    controls = Controls()
    move(camera, controls, config.grid)
    sprites = sort_sprites(find_sprites(config.grid), camera.pos_x, camera.pos_y)
    image = render(config, camera, textures, sprites)
    save_bmp(image, path)
    return image


def _to_rgb_bytes(image: Image) -> bytes:
    argb = struct.pack(f">{len(image.pixels)}I", *image.pixels)
    rgb = bytearray(len(image.pixels) * 3)
    rgb[0::3] = argb[1::4]
    rgb[1::3] = argb[2::4]
    rgb[2::3] = argb[3::4]
    return bytes(rgb)


def run(config: Config) -> None:
    """Open a window and play the scene until it is closed or Escape is pressed."""
    import pygame

    if config.spawn is None:
        raise ConfigError("No Spawn Point Set")
    textures = load_textures(config)
    camera = camera_from_spawn(*config.spawn)
    sprites = find_sprites(config.grid)
    controls = Controls()
    keymap = {
        pygame.K_w: Key.W,
        pygame.K_s: Key.S,
        pygame.K_a: Key.A,
        pygame.K_d: Key.D,
        pygame.K_LEFT: Key.LEFT,
        pygame.K_RIGHT: Key.RIGHT,
        pygame.K_ESCAPE: Key.ESCAPE,
    }
    size = (config.x_res, config.y_res)
    pygame.init()
    try:
        screen = pygame.display.set_mode(size)
        pygame.display.set_caption(WINDOW_TITLE)
        clock = pygame.time.Clock()
        while not controls.quit:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    controls.quit = True
                elif event.type == pygame.KEYDOWN and event.key in keymap:
                    controls.key_press(keymap[event.key])
                elif event.type == pygame.KEYUP and event.key in keymap:
                    controls.key_release(keymap[event.key])
            if controls.quit:
                break
            move(camera, controls, config.grid)
            sprites = sort_sprites(sprites, camera.pos_x, camera.pos_y)
            frame = render(config, camera, textures, sprites)
            surface = pygame.image.frombuffer(_to_rgb_bytes(frame), size, "RGB")
            screen.blit(surface, (0, 0))
            pygame.display.flip()
            clock.tick(60)
    finally:
        pygame.quit()


def _fail(message: str) -> int:
    sys.stderr.write(f"Error\n{message}\n")
    return EXIT_FAILURE


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the program: `<scene file> [--save]`. Returns the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    save = False
    if len(args) == 2:
        if args[1] != SAVE_FLAG:
            return _fail("Unknown Command")
        save = True
    if len(args) < 1:
        return _fail("No Config File Specified")
    if len(args) > 2:
        return _fail("Too Many Arguments")
    try:
        config = load_config(args[0])
        config.save = save
        clamp_resolution(config)
        if config.save:
            render_snapshot(config, load_textures(config), SNAPSHOT_NAME)
            config.save = False
        else:
            run(config)
    except ConfigError as exc:
        return _fail(str(exc))
    except XpmError as exc:
        return _fail(f"Invalid Texture: {exc}")
    return 0


if __name__ == "__main__":
    sys.exit(main())