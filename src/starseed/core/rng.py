"""Seeded pseudo-random streams and small sampling helpers.

All procedural content hangs off :class:`Mulberry32`. The generator is a
32-bit integer algorithm, so a given seed yields the same sequence on every
platform and interpreter.
"""
from __future__ import annotations

from typing import Sequence, TypeVar

import numpy as np

U32_MASK = 0xFFFFFFFF
_GOLDEN_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0

T = TypeVar("T")


def _imul(a: int, b: int) -> int:
    return (a * b) & U32_MASK


def mulberry32_step(state: int) -> tuple[int, int]:
    """Advance a mulberry32 state once.

    Returns ``(output, next_state)`` where ``output`` is the raw 32-bit value.
    The function is pure; :class:`Mulberry32` is a thin mutable wrapper.
    """

    state = (state + _GOLDEN_INCREMENT) & U32_MASK
    r = _imul(state ^ (state >> 15), 1 | state)
    r ^= (r + _imul(r ^ (r >> 7), 61 | r)) & U32_MASK
    return (r ^ (r >> 14)) & U32_MASK, state


class Mulberry32:
    """Stateful float stream in ``[0, 1)``.

    A stream belongs to the computation that created it. Build a new one with
    the same seed to replay a sequence instead of sharing an instance.
    """

    __slots__ = ("_seed", "_state", "_draws")

    def __init__(self, seed: int) -> None:
        self._seed = int(seed) & U32_MASK
        self._state = self._seed
        self._draws = 0

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def draws(self) -> int:
        return self._draws

    def next_u32(self) -> int:
        value, self._state = mulberry32_step(self._state)
        self._draws += 1
        return value

    def next(self) -> float:
        return self.next_u32() / _TWO_POW_32

    __call__ = next

    def fork(self) -> "Mulberry32":
        """Return an independent copy positioned at the same point."""

        clone = Mulberry32(self._seed)
        clone._state = self._state
        clone._draws = self._draws
        return clone


def rand_range(rng: Mulberry32, lo: float, hi: float) -> float:
    return lo + (hi - lo) * rng.next()


def choice(rng: Mulberry32, items: Sequence[T]) -> T:
    if not items:
        raise ValueError("choice() requires a non-empty sequence")
    return items[int(rng.next() * len(items))]


def sample(rng: Mulberry32, items: Sequence[T], count: int) -> list[T]:
    """Draw ``count`` distinct items with a partial Fisher-Yates shuffle."""

    pool = list(items)
    count = max(0, min(count, len(pool)))
    for i in range(count):
        j = i + int(rng.next() * (len(pool) - i))
        pool[i], pool[j] = pool[j], pool[i]
    return pool[:count]


# =======================
#   COLOUR HELPERS
# =======================
def hsl_to_rgb(h: float, s: float, l: float) -> tuple[int, int, int]:
    """Convert HSL (hue in degrees) to an 8-bit RGB triple."""

    h = h % 360.0
    s = max(0.0, min(1.0, s))
    l = max(0.0, min(1.0, l))
    c = (1.0 - abs(2.0 * l - 1.0)) * s
    hp = h / 60.0
    x = c * (1.0 - abs(hp % 2.0 - 1.0))
    if hp < 1.0:
        r, g, b = c, x, 0.0
    elif hp < 2.0:
        r, g, b = x, c, 0.0
    elif hp < 3.0:
        r, g, b = 0.0, c, x
    elif hp < 4.0:
        r, g, b = 0.0, x, c
    elif hp < 5.0:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x
    m = l - c / 2.0
    return (
        int(round((r + m) * 255)),
        int(round((g + m) * 255)),
        int(round((b + m) * 255)),
    )


def hsl_to_rgb_array(h: np.ndarray, s: np.ndarray, l: np.ndarray) -> np.ndarray:
    """Vectorised :func:`hsl_to_rgb`; returns float RGB in ``[0, 255]`` with a trailing axis of 3."""

    h = np.mod(np.asarray(h, dtype=float), 360.0)
    s = np.clip(np.asarray(s, dtype=float), 0.0, 1.0)
    l = np.clip(np.asarray(l, dtype=float), 0.0, 1.0)
    h, s, l = np.broadcast_arrays(h, s, l)
    c = (1.0 - np.abs(2.0 * l - 1.0)) * s
    hp = h / 60.0
    x = c * (1.0 - np.abs(np.mod(hp, 2.0) - 1.0))
    zero = np.zeros_like(c)
    sector = np.clip(np.floor(hp).astype(int), 0, 5)
    r = np.choose(sector, [c, x, zero, zero, x, c])
    g = np.choose(sector, [x, c, c, x, zero, zero])
    b = np.choose(sector, [zero, zero, x, c, c, x])
    m = l - c / 2.0
    return np.stack([r + m, g + m, b + m], axis=-1) * 255.0


__all__ = [
    "Mulberry32",
    "U32_MASK",
    "choice",
    "hsl_to_rgb",
    "hsl_to_rgb_array",
    "mulberry32_step",
    "rand_range",
    "sample",
]
