"""Deterministic tiled star world.

The plane is cut into square tiles of ``tile_size`` world units. The stars of a
tile depend only on ``(world_seed, tx, ty)``; no tile ever looks at another
tile or at the viewport, so any tile can be regenerated at any time.
"""
from __future__ import annotations

import math
from collections import OrderedDict
from dataclasses import dataclass
from typing import Iterable, Iterator

from .config import WORLD_CFG, WorldCfg
from .rng import Mulberry32, U32_MASK

_TILE_X_MULTIPLIER = 0x9E3779B1
_TILE_Y_MULTIPLIER = 0x85EBCA77

TileKey = tuple[int, int]
TileRange = tuple[int, int, int, int]


@dataclass(frozen=True)
class Star:
    """A selectable point in the world."""

    id: int
    x: float
    y: float
    seed: int
    tile: TileKey = (0, 0)

    @property
    def key(self) -> tuple[int, int, int]:
        return (self.tile[0], self.tile[1], self.id)

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)


def _avalanche(h: int) -> int:
    h &= U32_MASK
    h ^= h >> 16
    h = (h * 0x7FEB352D) & U32_MASK
    h ^= h >> 15
    h = (h * 0x846CA68B) & U32_MASK
    h ^= h >> 16
    return h


def tile_seed(world_seed: int, tx: int, ty: int) -> int:
    """Mix the world seed and tile coordinates into a 32-bit tile seed."""

    mixed = (int(world_seed) & U32_MASK) ^ ((tx * _TILE_X_MULTIPLIER) & U32_MASK) ^ (
        (ty * _TILE_Y_MULTIPLIER) & U32_MASK
    )
    return _avalanche(mixed)


def tile_of(x: float, y: float, tile_size: float) -> TileKey:
    return (math.floor(x / tile_size), math.floor(y / tile_size))


def stars_in_tile(
    world_seed: int,
    tx: int,
    ty: int,
    *,
    stars_per_tile: int = WORLD_CFG.stars_per_tile,
    tile_size: float = WORLD_CFG.tile_size,
) -> list[Star]:
    """Generate the stars of tile ``(tx, ty)``.

    Each star consumes three draws in order: x, y and its planet seed.
    """

    rng = Mulberry32(tile_seed(world_seed, tx, ty))
    origin_x = tx * tile_size
    origin_y = ty * tile_size
    stars: list[Star] = []
    for index in range(stars_per_tile):
        x = origin_x + rng.next() * tile_size
        y = origin_y + rng.next() * tile_size
        seed = rng.next_u32()
        stars.append(Star(id=index, x=x, y=y, seed=seed, tile=(tx, ty)))
    return stars


def scatter_stars(world_seed: int, count: int, width: float, height: float) -> list[Star]:
    """Stars for a fixed-size canvas, drawn from a single stream."""

    if count < 0:
        raise ValueError("Star count must not be negative")
    rng = Mulberry32(world_seed)
    stars: list[Star] = []
    for index in range(count):
        x = rng.next() * width
        y = rng.next() * height
        seed = rng.next_u32()
        stars.append(Star(id=index, x=x, y=y, seed=seed))
    return stars


def iter_tiles(tile_range: TileRange) -> Iterator[TileKey]:
    tx0, ty0, tx1, ty1 = tile_range
    for ty in range(ty0, ty1 + 1):
        for tx in range(tx0, tx1 + 1):
            yield tx, ty


def neighbourhood(tx: int, ty: int, radius: int = 1) -> TileRange:
    return (tx - radius, ty - radius, tx + radius, ty + radius)


class TileCache:
    """LRU cache in front of :func:`stars_in_tile`.

    Eviction only costs regeneration time; a cached tile and a regenerated
    tile are always equal.
    """

    def __init__(self, cfg: WorldCfg = WORLD_CFG, *, max_tiles: int | None = None) -> None:
        self._cfg = cfg
        self._max_tiles = max(1, cfg.cache_tiles if max_tiles is None else max_tiles)
        self._tiles: OrderedDict[TileKey, tuple[Star, ...]] = OrderedDict()
        self.hits = 0
        self.misses = 0

    @property
    def cfg(self) -> WorldCfg:
        return self._cfg

    @property
    def tile_size(self) -> float:
        return self._cfg.tile_size

    def __len__(self) -> int:
        return len(self._tiles)

    def tile(self, tx: int, ty: int) -> tuple[Star, ...]:
        key = (tx, ty)
        cached = self._tiles.get(key)
        if cached is not None:
            self.hits += 1
            self._tiles.move_to_end(key)
            return cached
        self.misses += 1
        stars = tuple(
            stars_in_tile(
                self._cfg.seed,
                tx,
                ty,
                stars_per_tile=self._cfg.stars_per_tile,
                tile_size=self._cfg.tile_size,
            )
        )
        self._tiles[key] = stars
        if len(self._tiles) > self._max_tiles:
            self._tiles.popitem(last=False)
        return stars

    def stars_in_range(self, tile_range: TileRange) -> list[Star]:
        stars: list[Star] = []
        for tx, ty in iter_tiles(tile_range):
            stars.extend(self.tile(tx, ty))
        return stars

    def stars_near(self, x: float, y: float, radius: int = 1) -> list[Star]:
        """Stars in the ``(2 * radius + 1)`` square of tiles around a world point."""

        tx, ty = tile_of(x, y, self._cfg.tile_size)
        return self.stars_in_range(neighbourhood(tx, ty, radius))

    def clear(self) -> None:
        self._tiles.clear()


def find_star(stars: Iterable[Star], key: tuple[int, int, int]) -> Star | None:
    for star in stars:
        if star.key == key:
            return star
    return None


__all__ = [
    "Star",
    "TileCache",
    "TileKey",
    "TileRange",
    "find_star",
    "iter_tiles",
    "neighbourhood",
    "scatter_stars",
    "stars_in_tile",
    "tile_of",
    "tile_seed",
]
