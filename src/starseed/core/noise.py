"""Coherent value noise and fractal sums.

Every function here is pure: lattice values come from an integer hash of
``(grid_x, grid_y, seed)`` rather than from a random stream, so samples can be
evaluated in any order, in parallel, or one at a time with identical results.

Inputs may be Python floats or NumPy arrays (any broadcastable shapes). Scalar
inputs return a ``float``; array inputs return a ``float64`` array.
"""
from __future__ import annotations

import math

import numpy as np

from .rng import U32_MASK

OCTAVE_SEED_STEP = 1337
DEFAULT_SCALE = 0.008
DEFAULT_OCTAVES = 4

_M32 = np.uint64(U32_MASK)
_PRIME_X = np.uint64(0x85EBCA6B)
_PRIME_Y = np.uint64(0xC2B2AE35)
_TWO_POW_32 = 4294967296.0


def _fmix32(h: int) -> int:
    h &= U32_MASK
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & U32_MASK
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & U32_MASK
    h ^= h >> 16
    return h


def _to_u32(values: np.ndarray) -> np.ndarray:
    return (values.astype(np.int64) & U32_MASK).astype(np.uint64)


def lattice_hash(ix, iy, seed: int) -> np.ndarray:
    """Hash integer lattice coordinates to floats in ``[0, 1)``."""

    ix = _to_u32(np.asarray(ix))
    iy = _to_u32(np.asarray(iy))
    h = np.uint64(_fmix32(int(seed) ^ 0x9E3779B9))
    h = h ^ ((ix * _PRIME_X) & _M32) ^ ((iy * _PRIME_Y) & _M32)
    h = h ^ (h >> np.uint64(16))
    h = (h * _PRIME_X) & _M32
    h = h ^ (h >> np.uint64(13))
    h = (h * _PRIME_Y) & _M32
    h = h ^ (h >> np.uint64(16))
    return h.astype(np.float64) / _TWO_POW_32


def smoothstep(t):
    return t * t * (3.0 - 2.0 * t)


def _is_scalar(*values) -> bool:
    return all(np.ndim(v) == 0 for v in values)


def _finish(value: np.ndarray, scalar: bool):
    return float(value) if scalar else value


def _check_scale(scale: float) -> None:
    if not scale > 0.0:
        raise ValueError("Noise scale must be positive")


def _check_octaves(octaves: int) -> None:
    if octaves < 1:
        raise ValueError("fbm needs at least one octave")


def _interpolate(ix0, ix1, gy, lx, ly, seed: int) -> np.ndarray:
    iy0 = gy
    iy1 = gy + 1
    h00 = lattice_hash(ix0, iy0, seed)
    h10 = lattice_hash(ix1, iy0, seed)
    h01 = lattice_hash(ix0, iy1, seed)
    h11 = lattice_hash(ix1, iy1, seed)
    tx = smoothstep(lx)
    ty = smoothstep(ly)
    a = h00 * (1.0 - tx) + h10 * tx
    b = h01 * (1.0 - tx) + h11 * tx
    return a * (1.0 - ty) + b * ty


# =======================
#   PLANE NOISE
# =======================
def value_noise_2d(x, y, seed: int, scale: float = DEFAULT_SCALE):
    """Smoothstep-eased bilinear value noise in ``[0, 1]``."""

    _check_scale(scale)
    scalar = _is_scalar(x, y)
    xs = np.asarray(x, dtype=float) * scale
    ys = np.asarray(y, dtype=float) * scale
    gx = np.floor(xs)
    gy = np.floor(ys)
    ix = gx.astype(np.int64)
    iy = gy.astype(np.int64)
    value = _interpolate(ix, ix + 1, iy, xs - gx, ys - gy, seed)
    return _finish(value, scalar)


def fbm(x, y, seed: int, base_scale: float = DEFAULT_SCALE, octaves: int = DEFAULT_OCTAVES):
    """Fractal sum of :func:`value_noise_2d`, clamped to ``[0, 1]``.

    Octave ``i`` samples seed ``seed + i * 1337`` at ``base_scale * 2**i`` with
    amplitude ``0.5 ** (i + 1)``.
    """

    _check_scale(base_scale)
    _check_octaves(octaves)
    scalar = _is_scalar(x, y)
    value = np.zeros(np.broadcast(np.asarray(x), np.asarray(y)).shape)
    amplitude = 0.5
    scale = base_scale
    for i in range(octaves):
        value = value + amplitude * value_noise_2d(
            np.asarray(x, dtype=float), np.asarray(y, dtype=float), seed + i * OCTAVE_SEED_STEP, scale
        )
        amplitude *= 0.5
        scale *= 2.0
    return _finish(np.clip(value, 0.0, 1.0), scalar)


# =======================
#   PERIODIC NOISE
# =======================
def period_cells(period_size: float, scale: float) -> int:
    """Number of lattice cells spanning one period (never less than one)."""

    _check_scale(scale)
    if not period_size > 0.0:
        raise ValueError("Noise period must be positive")
    return max(1, int(math.floor(period_size * scale)))


def periodic_noise_2d(x, y, seed: int, scale: float, period_size: float):
    """Value noise that repeats along x every ``period_size`` units.

    The x frequency is snapped to ``period_cells / period_size`` so that a whole
    number of lattice cells fits one period; this makes ``f(0, y)`` and
    ``f(period_size, y)`` sample the same lattice values.
    """

    cells = period_cells(period_size, scale)
    scalar = _is_scalar(x, y)
    xs = np.asarray(x, dtype=float) * (cells / period_size)
    ys = np.asarray(y, dtype=float) * scale
    gx = np.floor(xs)
    gy = np.floor(ys)
    ix = gx.astype(np.int64)
    iy = gy.astype(np.int64)
    value = _interpolate(np.mod(ix, cells), np.mod(ix + 1, cells), iy, xs - gx, ys - gy, seed)
    return _finish(value, scalar)


def periodic_fbm(x, y, seed: int, base_scale: float, octaves: int, period_size: float):
    """Fractal sum of :func:`periodic_noise_2d`; every octave shares the period."""

    _check_scale(base_scale)
    _check_octaves(octaves)
    scalar = _is_scalar(x, y)
    value = np.zeros(np.broadcast(np.asarray(x), np.asarray(y)).shape)
    amplitude = 0.5
    scale = base_scale
    for i in range(octaves):
        value = value + amplitude * periodic_noise_2d(
            np.asarray(x, dtype=float),
            np.asarray(y, dtype=float),
            seed + i * OCTAVE_SEED_STEP,
            scale,
            period_size,
        )
        amplitude *= 0.5
        scale *= 2.0
    return _finish(np.clip(value, 0.0, 1.0), scalar)


__all__ = [
    "DEFAULT_OCTAVES",
    "DEFAULT_SCALE",
    "OCTAVE_SEED_STEP",
    "fbm",
    "lattice_hash",
    "period_cells",
    "periodic_fbm",
    "periodic_noise_2d",
    "smoothstep",
    "value_noise_2d",
]
