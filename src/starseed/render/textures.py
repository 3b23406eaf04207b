# src/starseed/render/textures.py
"""Procedural colour and elevation textures for a planet seed."""

from __future__ import annotations

import math
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

import numpy as np

from starseed.core.config import TEXTURE_CFG, TextureCfg
from starseed.core.noise import fbm, periodic_fbm
from starseed.core.planet import PlanetParams, get_planet
from starseed.core.rng import hsl_to_rgb, hsl_to_rgb_array


# Larger strides turn into visible blocks on a sphere at typical sizes
MAX_STRIDE = 4

# Noise seed offsets per layer
TERRAIN_SEED_OFFSET = 0
SHADE_SEED_OFFSET = 999
SWIRL_SEED_OFFSET = 555
CLOUD_SEED_OFFSET = 4321

# Gas giant channel deltas: value = base + mix * GAIN - BIAS
GAS_CHANNEL_GAIN = np.array([25.0, 15.0, 12.0])
GAS_CHANNEL_BIAS = np.array([8.0, 6.0, 6.0])

Sampler = Callable[[np.ndarray, np.ndarray, int, float, int], np.ndarray]


# =======================
#   TEXTURE CONTAINER
# =======================
@dataclass(frozen=True)
class PlanetTextures:
    """
    Equal-size colour and elevation buffers.

    Attributes:
        color: ``(height, width, 3)`` uint8 RGB
        elevation: ``(height, width)`` uint8 grey levels
        periodic: True if the left and right edges match when wrapped
    """
    color: np.ndarray
    elevation: np.ndarray
    periodic: bool = True

    @property
    def width(self) -> int:
        return int(self.color.shape[1])

    @property
    def height(self) -> int:
        return int(self.color.shape[0])

    def color_bytes(self, *, alpha: bool = False) -> bytes:
        """Row-major RGB (or opaque RGBA) bytes."""
        if not alpha:
            return self.color.tobytes()
        opaque = np.full((self.height, self.width, 1), 255, dtype=np.uint8)
        return np.concatenate([self.color, opaque], axis=2).tobytes()

    def elevation_bytes(self, *, channels: int = 1) -> bytes:
        """Row-major grey bytes, repeated over ``channels`` (1, 3 or 4)."""
        if channels == 1:
            return self.elevation.tobytes()
        if channels == 3:
            return np.repeat(self.elevation[:, :, None], 3, axis=2).tobytes()
        if channels == 4:
            grey = np.repeat(self.elevation[:, :, None], 3, axis=2)
            opaque = np.full((self.height, self.width, 1), 255, dtype=np.uint8)
            return np.concatenate([grey, opaque], axis=2).tobytes()
        raise ValueError("channels must be 1, 3 or 4")


# =======================
#   SAMPLING HELPERS
# =======================
def check_texture_size(width: int, height: int, stride: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError("Texture size must be positive")
    if not 1 <= stride <= MAX_STRIDE:
        raise ValueError(f"Texture stride must be between 1 and {MAX_STRIDE}")


def make_sampler(periodic: bool, period: float) -> Sampler:
    if periodic:
        def sample(x, y, seed, scale, octaves):
            return periodic_fbm(x, y, seed, scale, octaves, period)
    else:
        def sample(x, y, seed, scale, octaves):
            return fbm(x, y, seed, scale, octaves)
    return sample


def expand_blocks(values: np.ndarray, stride: int, height: int, width: int) -> np.ndarray:
    """Flat-fill each sampled value over a ``stride`` x ``stride`` block."""
    if stride > 1:
        values = np.repeat(np.repeat(values, stride, axis=0), stride, axis=1)
    return values[:height, :width]


def to_grey8(values: np.ndarray) -> np.ndarray:
    return np.clip(np.round(values * 255.0), 0, 255).astype(np.uint8)


def to_rgb8(values: np.ndarray) -> np.ndarray:
    return np.clip(np.round(values), 0, 255).astype(np.uint8)


# =======================
#   SURFACE ALGORITHMS
# =======================
def rocky_surface(
    x: np.ndarray,
    y: np.ndarray,
    latitude: np.ndarray,
    seed: int,
    params: PlanetParams,
    sample: Sampler,
    cfg: TextureCfg = TEXTURE_CFG,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Land/ocean colouring for rocky worlds.

    Args:
        x, y: Sample coordinates (pixels)
        latitude: Climate term added to lightness, roughly in [-1, 1]
        seed: Planet seed
        params: Planet parameters
        sample: fbm flavour (periodic for spheres, plain for flat discs)

    Returns:
        ``(rgb, elevation)`` with rgb as floats in [0, 255] and elevation in [0, 1]
    """
    threshold = 0.5 - params.ocean * 0.25
    terrain = sample(x, y, seed + TERRAIN_SEED_OFFSET, 0.006 + params.noise * 0.006, cfg.terrain_octaves)
    # Water fills the noise above the threshold
    is_ocean = terrain > threshold
    height = 1.0 - terrain

    hue = np.where(is_ocean, (params.hue + 200.0) % 360.0, (params.hue + 20.0) % 360.0)
    saturation = np.where(is_ocean, params.saturation * 0.7, params.saturation * 0.9)
    lightness = np.where(is_ocean, params.lightness * 0.6, params.lightness * 0.55)

    # Biome variation
    shade = sample(x + 1000.0, y - 500.0, seed + SHADE_SEED_OFFSET, 0.012, cfg.shade_octaves)
    lightness = lightness + (shade - 0.5) * 0.18 + latitude * 0.12
    hue = np.where(is_ocean, hue, hue + (shade - 0.5) * 30.0)

    rgb = hsl_to_rgb_array(hue, saturation, np.clip(lightness, 0.0, 1.0))
    elevation = np.where(is_ocean, 0.4 + height * 0.2, 0.6 + height * 0.4)
    return rgb, elevation


def gaseous_swirl(
    x: np.ndarray,
    y: np.ndarray,
    seed: int,
    width: float,
    periodic: bool,
    cfg: TextureCfg = TEXTURE_CFG,
) -> np.ndarray:
    """Horizontally stretched swirl noise; wraps at ``x = width`` when periodic."""
    # x is squashed by 0.6, so the period shrinks with it
    if periodic:
        return periodic_fbm(x * 0.6, y * 1.4, seed + SWIRL_SEED_OFFSET, 0.01, cfg.swirl_octaves, width * 0.6)
    return fbm(x * 0.6, y * 1.4, seed + SWIRL_SEED_OFFSET, 0.01, cfg.swirl_octaves)


def gaseous_mix(band_latitude: np.ndarray, swirl: np.ndarray, params: PlanetParams) -> np.ndarray:
    band = np.sin(band_latitude * math.pi * 2.0 * (3.0 + params.banding * 8.0)) * 0.5 + 0.5
    return np.minimum(1.0, 0.5 * (params.noise * swirl + params.banding * band))


def gaseous_color(mix: np.ndarray, params: PlanetParams) -> np.ndarray:
    base = np.array(hsl_to_rgb(params.hue, params.saturation, params.lightness), dtype=float)
    return base + mix[..., None] * GAS_CHANNEL_GAIN - GAS_CHANNEL_BIAS


# =======================
#   EQUIRECTANGULAR TEXTURES
# =======================
def synthesize_textures(
    seed: int,
    params: PlanetParams | None = None,
    size: int = TEXTURE_CFG.size,
    *,
    height: int | None = None,
    stride: int = TEXTURE_CFG.stride,
    periodic: bool = True,
    cfg: TextureCfg = TEXTURE_CFG,
) -> PlanetTextures:
    """
    Build colour and elevation maps over the whole equirectangular area.

    Args:
        seed: Planet seed
        params: Planet parameters (derived from ``seed`` if None)
        size: Texture width in pixels
        height: Texture height (defaults to ``size``)
        stride: Sample every ``stride`` pixels and flat-fill the block
        periodic: Use noise that repeats across the width, for wrapping onto a sphere

    Returns:
        A :class:`PlanetTextures` pair of equal dimensions

    Raises:
        ValueError: If the size or stride is out of range
    """
    width = int(size)
    height = width if height is None else int(height)
    check_texture_size(width, height, stride)
    if params is None:
        params = get_planet(seed)

    xs = np.arange(0, width, stride, dtype=float)
    ys = np.arange(0, height, stride, dtype=float)
    x, y = np.meshgrid(xs, ys)
    lat_norm = y / height
    sample = make_sampler(periodic, float(width))

    if params.is_rocky:
        latitude = (lat_norm - 0.5) * 2.0
        rgb, elevation = rocky_surface(x, y, latitude, seed, params, sample, cfg)
    else:
        swirl = gaseous_swirl(x, y, seed, float(width), periodic, cfg)
        mix = gaseous_mix(lat_norm, swirl, params)
        rgb = gaseous_color(mix, params)
        # Bands read as shallow relief
        elevation = 0.5 + mix * 0.5

    color = expand_blocks(to_rgb8(rgb), stride, height, width)
    grey = expand_blocks(to_grey8(elevation), stride, height, width)
    return PlanetTextures(
        color=np.ascontiguousarray(color),
        elevation=np.ascontiguousarray(grey),
        periodic=periodic,
    )


# =======================
#   TEXTURE CACHE
# =======================
# Cache textures by (seed, width, height, stride, periodic, cfg); synthesis is
# the slowest step of opening a planet
_TEXTURE_CACHE: OrderedDict[tuple[int, int, int, int, bool, TextureCfg], PlanetTextures] = OrderedDict()
_CACHE_MAX_SIZE = 16


def get_planet_textures(
    seed: int,
    size: int = TEXTURE_CFG.size,
    *,
    height: int | None = None,
    stride: int = TEXTURE_CFG.stride,
    periodic: bool = True,
    cfg: TextureCfg = TEXTURE_CFG,
) -> PlanetTextures:
    """Cached :func:`synthesize_textures` for the parameters of ``seed``."""
    key = (int(seed), int(size), int(height or size), int(stride), bool(periodic), cfg)
    cached = _TEXTURE_CACHE.get(key)
    if cached is not None:
        _TEXTURE_CACHE.move_to_end(key)
        return cached
    textures = synthesize_textures(
        seed, get_planet(seed), size, height=height, stride=stride, periodic=periodic, cfg=cfg
    )
    _TEXTURE_CACHE[key] = textures
    if len(_TEXTURE_CACHE) > _CACHE_MAX_SIZE:
        _TEXTURE_CACHE.popitem(last=False)
    return textures


def clear_texture_cache() -> None:
    """Clear all cached textures."""
    _TEXTURE_CACHE.clear()


def get_cache_size() -> int:
    """Return the current number of cached textures."""
    return len(_TEXTURE_CACHE)


__all__ = [
    "MAX_STRIDE",
    "PlanetTextures",
    "clear_texture_cache",
    "expand_blocks",
    "gaseous_color",
    "gaseous_mix",
    "gaseous_swirl",
    "get_cache_size",
    "get_planet_textures",
    "make_sampler",
    "rocky_surface",
    "synthesize_textures",
]
