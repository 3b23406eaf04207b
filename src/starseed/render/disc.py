# src/starseed/render/disc.py
"""Flat planet disc for 2D presentation, with polar caps, clouds, glow and rings."""

from __future__ import annotations

import math
from collections import OrderedDict

import numpy as np
import pygame

from starseed.core.config import TEXTURE_CFG, TextureCfg
from starseed.core.noise import fbm
from starseed.core.planet import PlanetParams, get_planet
from starseed.core.rng import hsl_to_rgb

from .textures import (
    CLOUD_SEED_OFFSET,
    SWIRL_SEED_OFFSET,
    check_texture_size,
    expand_blocks,
    gaseous_color,
    gaseous_mix,
    make_sampler,
    rocky_surface,
    to_rgb8,
)


# =======================
#   OVERLAY CONSTANTS
# =======================
CAP_OFFSET = 0.85          # cap centres at +/- 0.85 r from the equator
CAP_RADIUS = 0.2
CAP_ALPHA = int(round(0.25 * 255))
GLOW_ALPHA = int(round(0.08 * 255))
GLOW_WIDTH = 3
CLOUD_ARCS = 180
CLOUD_ARC_SPAN = 0.02      # radians per arc
RING_ASPECT = 0.6
RING_COLORS = (
    (200, 200, 200, int(round(0.5 * 255))),
    (160, 160, 160, int(round(0.35 * 255))),
)


def _apply_circular_mask(surface: pygame.Surface, center: tuple[float, float], radius: float) -> pygame.Surface:
    """Clip an overlay layer to the planet disc."""
    mask = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    mask.fill((0, 0, 0, 0))
    pygame.draw.circle(mask, (255, 255, 255, 255), (int(center[0]), int(center[1])), int(radius))
    surface.blit(mask, (0, 0), special_flags=pygame.BLEND_RGBA_MULT)
    return surface


def surface_from_rgba(rgba: np.ndarray) -> pygame.Surface:
    """Copy a ``(height, width, 4)`` uint8 array into a new SRCALPHA surface."""
    height, width = rgba.shape[:2]
    data = np.ascontiguousarray(rgba, dtype=np.uint8).tobytes()
    return pygame.image.frombuffer(data, (width, height), "RGBA").copy()


def surface_to_bytes(surface: pygame.Surface) -> bytes:
    """Row-major RGBA bytes of ``surface``."""
    return pygame.image.tobytes(surface, "RGBA")


# =======================
#   DISC PIXELS
# =======================
def disc_pixels(
    seed: int,
    params: PlanetParams,
    size: int,
    radius: float,
    *,
    stride: int = TEXTURE_CFG.stride,
    cfg: TextureCfg = TEXTURE_CFG,
) -> np.ndarray:
    """
    RGBA pixels of the lit planet disc without overlays.

    Uses the plain (non-periodic) noise: a flat disc has no wrap seam.
    """
    check_texture_size(size, size, stride)
    cx = cy = size / 2.0
    r = radius

    # Full resolution disc mask keeps the rim smooth under strided sampling
    px = np.arange(size, dtype=float) + 0.5
    full_x, full_y = np.meshgrid(px, px)
    inside = (full_x - cx) ** 2 + (full_y - cy) ** 2 <= r * r

    xs = np.arange(0, size, stride, dtype=float)
    x, y = np.meshgrid(xs, xs)

    if params.is_rocky:
        # 0 at the poles, 1 at the equator
        lat = 1.0 - np.minimum(1.0, np.abs(y - cy) / r)
        sample = make_sampler(False, float(size))
        rgb, _ = rocky_surface(x, y, lat - 0.5, seed, params, sample, cfg)
    else:
        rows = np.arange(size, dtype=float)
        band_lat = (rows - (cy - r)) / (2.0 * r)
        swirl = fbm(rows * 1.7, cx * 0.6, seed + SWIRL_SEED_OFFSET, 0.01, cfg.swirl_octaves)
        mix = gaseous_mix(band_lat, swirl, params)
        row_rgb = gaseous_color(mix, params)
        rgb = np.repeat(row_rgb[::stride, None, :], len(xs), axis=1)

    # Radial light-to-dark shading, highlight up and to the left
    lighter = np.array(hsl_to_rgb(params.hue, params.saturation, min(1.0, params.lightness + 0.1)), dtype=float)
    darker = np.array(hsl_to_rgb(params.hue, params.saturation, max(0.0, params.lightness - 0.15)), dtype=float)
    hx, hy = cx - r * 0.4, cy - r * 0.4
    t = np.clip((np.hypot(x - hx, y - hy) - r * 0.1) / (r * 1.5), 0.0, 1.0)
    shading = 1.1 - 0.35 * t
    rgb = rgb * shading[..., None]
    tint = lighter[None, None, :] * (1.0 - t[..., None]) + darker[None, None, :] * t[..., None]
    rgb = rgb * 0.85 + tint * 0.15

    color = expand_blocks(to_rgb8(rgb), stride, size, size)
    alpha = np.where(inside, 255, 0).astype(np.uint8)
    return np.concatenate([color, alpha[..., None]], axis=2)


# =======================
#   OVERLAYS
# =======================
def draw_polar_caps(surface: pygame.Surface, center: tuple[float, float], radius: float) -> None:
    cx, cy = center
    layer = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    cap_radius = max(1, int(radius * CAP_RADIUS))
    for sign in (-1, 1):
        pygame.draw.circle(
            layer,
            (255, 255, 255, CAP_ALPHA),
            (int(cx), int(cy + sign * radius * CAP_OFFSET)),
            cap_radius,
        )
    surface.blit(_apply_circular_mask(layer, center, radius), (0, 0))


def draw_glow(
    surface: pygame.Surface,
    center: tuple[float, float],
    radius: float,
    color: tuple[int, int, int],
) -> None:
    layer = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    # Ring starts one pixel outside the rim
    outer = int(math.ceil(radius)) + 1 + GLOW_WIDTH
    pygame.draw.circle(layer, (*color, GLOW_ALPHA), (int(center[0]), int(center[1])), outer, GLOW_WIDTH)
    surface.blit(layer, (0, 0))


def cloud_radii(seed: int, radius: float) -> np.ndarray:
    angles = np.arange(CLOUD_ARCS) / CLOUD_ARCS * math.pi * 2.0
    jitter = fbm(np.cos(angles) * 120.0, np.sin(angles) * 120.0, seed + CLOUD_SEED_OFFSET, 0.01, 3)
    return radius * (0.5 + 0.4 * jitter)


def draw_clouds(
    surface: pygame.Surface,
    seed: int,
    params: PlanetParams,
    center: tuple[float, float],
    radius: float,
) -> None:
    alpha = int(round(min(0.5, params.clouds * 0.6) * 255))
    if alpha <= 0:
        return
    layer = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    cx, cy = center
    for i, arc_radius in enumerate(cloud_radii(seed, radius)):
        angle = i / CLOUD_ARCS * math.pi * 2.0
        rect = pygame.Rect(0, 0, int(arc_radius * 2), int(arc_radius * 2))
        rect.center = (int(cx), int(cy))
        # pygame measures angles counter-clockwise; mirror to run clockwise
        pygame.draw.arc(layer, (255, 255, 255, alpha), rect, -angle - CLOUD_ARC_SPAN, -angle, 1)
    surface.blit(_apply_circular_mask(layer, center, radius), (0, 0))


def draw_rings(
    surface: pygame.Surface,
    params: PlanetParams,
    center: tuple[float, float],
    radius: float,
    *,
    count: int = TEXTURE_CFG.ring_count,
) -> None:
    layer = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    mid = (layer.get_width() / 2.0, layer.get_height() / 2.0)
    for i in range(count):
        ring_radius = radius * (1.2 + i * 0.04)
        rect = pygame.Rect(0, 0, int(ring_radius * 2), int(ring_radius * 2 * RING_ASPECT))
        rect.center = (int(mid[0]), int(mid[1]))
        pygame.draw.ellipse(layer, RING_COLORS[i % 2], rect, 1)
    # pygame rotates counter-clockwise; positive tilt turns clockwise on screen
    rotated = pygame.transform.rotate(layer, -params.ring_tilt)
    surface.blit(rotated, rotated.get_rect(center=(int(center[0]), int(center[1]))))


# =======================
#   DISC RENDERING
# =======================
def render_planet_disc(
    seed: int,
    params: PlanetParams | None = None,
    size: int = TEXTURE_CFG.disc_size,
    *,
    stride: int = TEXTURE_CFG.stride,
    cfg: TextureCfg = TEXTURE_CFG,
) -> pygame.Surface:
    """
    Render the planet as a lit disc centred on a transparent square canvas.

    Args:
        seed: Planet seed
        params: Planet parameters (derived from ``seed`` if None)
        size: Canvas size in pixels
        stride: Sampling stride for the surface pixels

    Returns:
        A ``size`` x ``size`` SRCALPHA surface

    Raises:
        ValueError: If the size or stride is out of range
    """
    if params is None:
        params = get_planet(seed)
    radius = size * cfg.disc_radius_ratio
    center = (size / 2.0, size / 2.0)

    surface = surface_from_rgba(disc_pixels(seed, params, size, radius, stride=stride, cfg=cfg))

    draw_polar_caps(surface, center, radius)
    lighter = hsl_to_rgb(params.hue, params.saturation, min(1.0, params.lightness + 0.1))
    draw_glow(surface, center, radius, lighter)
    if params.clouds > cfg.cloud_threshold:
        draw_clouds(surface, seed, params, center, radius)
    if params.has_rings:
        draw_rings(surface, params, center, radius, count=cfg.ring_count)
    return surface


# Cache discs by (seed, size, cfg) so reopening a planet is instant
_DISC_CACHE: OrderedDict[tuple[int, int, TextureCfg], pygame.Surface] = OrderedDict()
_DISC_CACHE_MAX_SIZE = 24


def get_planet_disc(
    seed: int,
    size: int = TEXTURE_CFG.disc_size,
    *,
    cfg: TextureCfg = TEXTURE_CFG,
) -> pygame.Surface:
    key = (int(seed), int(size), cfg)
    cached = _DISC_CACHE.get(key)
    if cached is not None:
        _DISC_CACHE.move_to_end(key)
        return cached
    disc = render_planet_disc(seed, get_planet(seed), size, stride=cfg.stride, cfg=cfg)
    _DISC_CACHE[key] = disc
    if len(_DISC_CACHE) > _DISC_CACHE_MAX_SIZE:
        _DISC_CACHE.popitem(last=False)
    return disc


def clear_disc_cache() -> None:
    _DISC_CACHE.clear()


__all__ = [
    "clear_disc_cache",
    "cloud_radii",
    "disc_pixels",
    "draw_clouds",
    "draw_glow",
    "draw_polar_caps",
    "draw_rings",
    "get_planet_disc",
    "render_planet_disc",
    "surface_from_rgba",
    "surface_to_bytes",
]
