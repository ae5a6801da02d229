"""Ray-casting renderer, camera movement and sprites."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Sequence

from raycub.config import Config
from raycub.xpm import Image

SPEED = 0.07
PLANE = 0.66


class Key(IntEnum):
    """Key codes understood by the controls."""

    A = 0
    S = 1
    D = 2
    W = 13
    ESCAPE = 53
    LEFT = 123
    RIGHT = 124


@dataclass
class Camera:
    """Player position, view direction and camera plane, in map cells."""

    pos_x: float
    pos_y: float
    dir_x: float = 0.0
    dir_y: float = 0.0
    plane_x: float = 0.0
    plane_y: float = 0.0


@dataclass
class Controls:
    """Movement currently requested by held keys."""

    forward: float = 0.0
    strafe: float = 0.0
    turn: float = 0.0
    quit: bool = False

    def key_press(self, keycode: int) -> None:
        """Start the movement bound to a key; Escape asks to quit."""
        if keycode == Key.ESCAPE:
            self.quit = True
        elif keycode == Key.W:
            self.forward = -SPEED
        elif keycode == Key.S:
            self.forward = SPEED
        elif keycode == Key.A:
            self.strafe = -SPEED
        elif keycode == Key.D:
            self.strafe = SPEED
        elif keycode == Key.LEFT:
            self.turn = -SPEED
        elif keycode == Key.RIGHT:
            self.turn = SPEED

    def key_release(self, keycode: int) -> None:
        """Stop the movement bound to a key."""
        if keycode in (Key.W, Key.S):
            self.forward = 0.0
        if keycode in (Key.LEFT, Key.RIGHT):
            self.turn = 0.0
        if keycode in (Key.A, Key.D):
            self.strafe = 0.0


@dataclass
class Textures:
    """Wall textures for each side, plus the sprite texture."""

    north: Image
    south: Image
    west: Image
    east: Image
    sprite: Image


@dataclass
class Sprite:
    """A sprite standing at the centre of a map cell."""

    x: float
    y: float


@dataclass
class _Hit:
    side: int
    distance: float
    ray_x: float
    ray_y: float


def camera_from_spawn(row: int, col: int, facing: str) -> Camera:
    """Place a camera at the centre of the spawn cell, facing N, S, W or E."""
    camera = Camera(row + 0.5, col + 0.5)
    if facing == "N":
        camera.dir_x = 1.0
        camera.plane_y = PLANE
    elif facing == "S":
        camera.dir_x = -1.0
        camera.plane_y = -PLANE
    elif facing == "W":
        camera.dir_y = 1.0
        camera.plane_x = -PLANE
    else:
        camera.dir_y = -1.0
        camera.plane_x = PLANE
    return camera


def _is_wall(grid: Sequence[str], i: int, j: int) -> bool:
    if 0 <= i < len(grid) and 0 <= j < len(grid[i]):
        return grid[i][j] == "1"
    return True


def move(camera: Camera, controls: Controls, grid: Sequence[str]) -> None:
    """Apply one frame of walking, strafing and turning, stopping at walls."""
    forward = controls.forward
    if forward:
        if not _is_wall(grid, int(camera.pos_x + camera.dir_x * forward), int(camera.pos_y)):
            camera.pos_x += camera.dir_x * forward
        if not _is_wall(grid, int(camera.pos_x), int(camera.pos_y + camera.dir_y * forward)):
            camera.pos_y += camera.dir_y * forward
    strafe = controls.strafe
    if strafe:
        if not _is_wall(grid, int(camera.pos_x - camera.dir_y * strafe), int(camera.pos_y)):
            camera.pos_x -= camera.dir_y * strafe
        if not _is_wall(grid, int(camera.pos_x), int(camera.pos_y + camera.dir_x * strafe)):
            camera.pos_y += camera.dir_x * strafe
    if controls.turn:
        c = math.cos(-controls.turn)
        s = math.sin(-controls.turn)
        camera.dir_x, camera.dir_y = (
            camera.dir_x * c - camera.dir_y * s,
            camera.dir_x * s + camera.dir_y * c,
        )
        camera.plane_x, camera.plane_y = (
            camera.plane_x * c - camera.plane_y * s,
            camera.plane_x * s + camera.plane_y * c,
        )


def find_sprites(grid: Iterable[str]) -> list[Sprite]:
    """Return a sprite for every "2" cell, row by row."""
    return [
        Sprite(i + 0.5, j + 0.5)
        for i, row in enumerate(grid)
        for j, ch in enumerate(row)
        if ch == "2"
    ]


def sort_sprites(sprites: Iterable[Sprite], x: float, y: float) -> list[Sprite]:
    """Return the sprites ordered from farthest to nearest to (x, y)."""
    return sorted(
        sprites,
        key=lambda s: (s.x - x) * (s.x - x) + (s.y - y) * (s.y - y),
        reverse=True,
    )


def _cast(camera: Camera, grid: Sequence[str], cam_x: float) -> _Hit:
    ray_x = -camera.dir_x + camera.plane_x * cam_x
    ray_y = -camera.dir_y + camera.plane_y * cam_x
    map_x = int(camera.pos_x)
    map_y = int(camera.pos_y)
    delta_x = abs(1 / ray_x) if ray_x else math.inf
    delta_y = abs(1 / ray_y) if ray_y else math.inf
    if ray_x < 0:
        step_x = -1
        side_x = (camera.pos_x - map_x) * delta_x
    else:
        step_x = 1
        side_x = (map_x + 1.0 - camera.pos_x) * delta_x
    if ray_y < 0:
        step_y = -1
        side_y = (camera.pos_y - map_y) * delta_y
    else:
        step_y = 1
        side_y = (map_y + 1.0 - camera.pos_y) * delta_y
    while True:
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = 0
        else:
            side_y += delta_y
            map_y += step_y
            side = 1
        if _is_wall(grid, map_x, map_y):
            break
    if side == 0:
        distance = (map_x - camera.pos_x + (1 - step_x) // 2) / ray_x
    else:
        distance = (map_y - camera.pos_y + (1 - step_y) // 2) / ray_y
    if distance <= 0:
        distance = 1e-9
    return _Hit(side, distance, ray_x, ray_y)


def _wall_texture(textures: Textures, hit: _Hit) -> Image:
    if hit.side == 1:
        return textures.west if hit.ray_y < 0 else textures.east
    return textures.north if hit.ray_x < 0 else textures.south


def _draw_wall(image: Image, x: int, hit: _Hit, camera: Camera, textures: Textures,
               line_height: int, start: int, end: int) -> None:
    texture = _wall_texture(textures, hit)
    if hit.side == 0:
        wall_x = camera.pos_y + hit.distance * hit.ray_y
    else:
        wall_x = camera.pos_x + hit.distance * hit.ray_x
    wall_x -= math.floor(wall_x)
    tex_x = int(wall_x * texture.width)
    if (hit.side == 0 and hit.ray_x > 0) or (hit.side == 1 and hit.ray_y < 0):
        tex_x = texture.width - tex_x - 1
    if line_height <= 0:
        return
    step = texture.height / line_height
    tex_pos = (start - image.height // 2 + line_height // 2) * step
    for y in range(start, end):
        tex_pos += step
        image.put(x, y, texture.get(tex_x, int(tex_pos) & (texture.height - 1)))


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


def _draw_sprite(image: Image, sprite: Sprite, camera: Camera, texture: Image,
                 z_buffer: Sequence[float]) -> None:
    width, height = image.width, image.height
    rel_x = sprite.x - camera.pos_x
    rel_y = sprite.y - camera.pos_y
    inv_det = 1.0 / (camera.plane_x * camera.dir_y - camera.dir_x * camera.plane_y)
    across = inv_det * (camera.dir_y * rel_x - camera.dir_x * rel_y)
    depth = -inv_det * (-camera.plane_y * rel_x + camera.plane_x * rel_y)
    if depth <= 0:
        return
    screen_x = int((width // 2) * (1 + across / depth))
    size = abs(int(height / depth))
    if size == 0:
        return
    left = -(size // 2) + screen_x
    start_x = max(left, 0)
    start_y = max(-(size // 2) + height // 2, 0)
    end_x = min(size // 2 + screen_x, width - 1)
    end_y = min(size // 2 + height // 2, height - 1)
    for stripe in range(start_x, end_x):
        tex_x = (256 * (stripe - left) * texture.width // size) // 256
        if not (0 < stripe < width and depth <= z_buffer[stripe]):
            continue
        for y in range(start_y, end_y):
            d = y * 256 - height * 128 + size * 128
            tex_y = _trunc_div(_trunc_div(d * texture.height, size), 256)
            color = texture.get(tex_x, tex_y)
            if color != 0:
                image.put(stripe, y, color)


def render(config: Config, camera: Camera, textures: Textures,
           sprites: Iterable[Sprite]) -> Image:
    """Draw one frame: textured walls, ceiling, floor, then sprites in order."""
    width, height = config.x_res, config.y_res
    image = Image(width, height)
    z_buffer = [0.0] * width
    for x in range(width):
        hit = _cast(camera, config.grid, 2 * x / width - 1)
        line_height = int(height / hit.distance)
        start = max(-(line_height // 2) + height // 2, 0)
        end = line_height // 2 + height // 2
        if end > height:
            end = height - 1
        _draw_wall(image, x, hit, camera, textures, line_height, start, end)
        for y in range(start):
            image.put(x, y, config.ceiling)
        for y in range(end, height):
            image.put(x, y, config.floor)
        z_buffer[x] = hit.distance
    for sprite in sprites:
        _draw_sprite(image, sprite, camera, textures.sprite, z_buffer)
    return image