from __future__ import annotations

import math
from collections import OrderedDict
from typing import Iterable, TYPE_CHECKING

import numpy as np
import pygame

from .disc import surface_from_rgba
from .textures import PlanetTextures

if TYPE_CHECKING:  # pragma: no cover
    from starseed.core.config import RenderCfg
    from starseed.explorer import VisibleStar


MAX_STAR_RADIUS = 4
# Light direction for the globe, up and to the left of the viewer
_LIGHT_DIR = np.array([-0.4, -0.4, 0.82])


def star_alpha(seed: int) -> int:
    """Per-star brightness taken from the planet seed bits, so it never flickers."""
    return 140 + (int(seed) >> 8) % 116


def star_screen_radius(star_radius: float, scale: float) -> int:
    return max(1, min(MAX_STAR_RADIUS, int(round(star_radius * math.sqrt(scale)))))


_STAR_SPRITES: dict[tuple[int, int, tuple[int, int, int]], pygame.Surface] = {}


def _star_sprite(radius: int, alpha: int, color: tuple[int, int, int]) -> pygame.Surface:
    key = (radius, alpha, color)
    sprite = _STAR_SPRITES.get(key)
    if sprite is None:
        sprite = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
        pygame.draw.circle(sprite, (*color, alpha), (radius, radius), radius)
        _STAR_SPRITES[key] = sprite
    return sprite


def draw_starfield(
    surface: pygame.Surface,
    stars: Iterable[VisibleStar],
    scale: float,
    star_radius: float,
    *,
    render_cfg: RenderCfg,
) -> int:
    """Blit every visible star; returns how many were drawn."""
    radius = star_screen_radius(star_radius, scale)
    width, height = surface.get_size()
    drawn = 0
    for visible in stars:
        sx, sy = int(visible.screen_x), int(visible.screen_y)
        if sx < -radius or sy < -radius or sx > width + radius or sy > height + radius:
            continue
        sprite = _star_sprite(radius, star_alpha(visible.star.seed), render_cfg.star_color)
        surface.blit(sprite, (sx - radius, sy - radius))
        drawn += 1
    return drawn


def draw_highlight(
    surface: pygame.Surface,
    screen_pos: tuple[float, float],
    *,
    render_cfg: RenderCfg,
) -> None:
    center = (int(screen_pos[0]), int(screen_pos[1]))
    pygame.draw.circle(surface, render_cfg.highlight_color, center, render_cfg.highlight_ring_radius, 1)


def textures_to_surfaces(textures: PlanetTextures) -> tuple[pygame.Surface, pygame.Surface]:
    """Colour and elevation buffers as opaque pygame surfaces."""
    size = (textures.width, textures.height)
    color = pygame.image.frombuffer(textures.color_bytes(alpha=True), size, "RGBA").copy()
    elevation = pygame.image.frombuffer(textures.elevation_bytes(channels=4), size, "RGBA").copy()
    return color, elevation


# =======================
#   GLOBE PROJECTION
# =======================
_GLOBE_GEOMETRY: OrderedDict[int, tuple[np.ndarray, ...]] = OrderedDict()
_GLOBE_GEOMETRY_MAX_SIZE = 8


def _globe_geometry(diameter: int) -> tuple[np.ndarray, ...]:
    cached = _GLOBE_GEOMETRY.get(diameter)
    if cached is not None:
        _GLOBE_GEOMETRY.move_to_end(diameter)
        return cached
    r = diameter / 2.0
    px = (np.arange(diameter, dtype=float) + 0.5 - r) / r
    nx, ny = np.meshgrid(px, px)
    d2 = nx * nx + ny * ny
    inside = d2 <= 1.0
    nz = np.sqrt(np.clip(1.0 - d2, 0.0, 1.0))
    lon = np.arctan2(nx, nz)
    lat = np.arcsin(np.clip(ny, -1.0, 1.0))
    light = 0.25 + 0.75 * np.clip(nx * _LIGHT_DIR[0] + ny * _LIGHT_DIR[1] + nz * _LIGHT_DIR[2], 0.0, 1.0)
    geometry = (inside, lon, lat, light)
    _GLOBE_GEOMETRY[diameter] = geometry
    if len(_GLOBE_GEOMETRY) > _GLOBE_GEOMETRY_MAX_SIZE:
        _GLOBE_GEOMETRY.popitem(last=False)
    return geometry


def project_globe(textures: PlanetTextures, diameter: int, angle: float) -> np.ndarray:
    """
    Orthographic view of the equirectangular textures wrapped on a sphere.

    Args:
        textures: Colour and elevation maps (periodic maps hide the wrap seam)
        diameter: Output size in pixels
        angle: Rotation about the polar axis in radians

    Returns:
        ``(diameter, diameter, 4)`` uint8 RGBA, transparent outside the sphere
    """
    if diameter <= 0:
        raise ValueError("Globe diameter must be positive")
    inside, lon, lat, light = _globe_geometry(int(diameter))
    u = (((lon - angle) / (2.0 * math.pi) + 0.5) % 1.0) * textures.width
    v = (lat / math.pi + 0.5) * textures.height
    ui = np.clip(u.astype(np.int64), 0, textures.width - 1)
    vi = np.clip(v.astype(np.int64), 0, textures.height - 1)

    # Elevation acts as a faint bump term on top of the lambert light
    bump = 0.9 + 0.2 * textures.elevation[vi, ui] / 255.0
    rgb = textures.color[vi, ui].astype(float) * (light * bump)[..., None]
    alpha = np.where(inside, 255, 0).astype(np.uint8)
    rgba = np.concatenate([np.clip(rgb, 0, 255).astype(np.uint8), alpha[..., None]], axis=2)
    return rgba


def draw_globe(
    surface: pygame.Surface,
    textures: PlanetTextures,
    center: tuple[float, float],
    diameter: int,
    angle: float,
) -> pygame.Rect:
    globe = surface_from_rgba(project_globe(textures, diameter, angle))
    rect = globe.get_rect(center=(int(center[0]), int(center[1])))
    surface.blit(globe, rect)
    return rect


__all__ = [
    "draw_globe",
    "draw_highlight",
    "draw_starfield",
    "project_globe",
    "star_alpha",
    "star_screen_radius",
    "textures_to_surfaces",
]
