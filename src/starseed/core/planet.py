# src/starseed/core/planet.py
"""Seed-driven planet attributes, descriptive facts and spin parameters."""

from __future__ import annotations

import math
from collections import OrderedDict
from dataclasses import asdict, dataclass
from enum import Enum

from .rng import Mulberry32, U32_MASK, choice, rand_range, sample


# =======================
#   PLANET CATEGORIES
# =======================
class PlanetCategory(str, Enum):
    """Visual families with distinct texture algorithms."""
    ROCKY = "rocky"      # Land/ocean terrain, polar climate gradient
    GASEOUS = "gaseous"  # Latitudinal bands perturbed by swirls


GASEOUS_PROBABILITY = 0.8
RING_PROBABILITY = 0.35
RING_TILT_RANGE = (-35.0, 35.0)


# =======================
#   PLANET PARAMETERS
# =======================
@dataclass(frozen=True)
class PlanetParams:
    """
    Visual parameters derived from a single seed.

    Attributes:
        hue: Base hue in degrees, [0, 360)
        saturation: Base saturation, [0.4, 0.9)
        lightness: Base lightness, [0.35, 0.65)
        banding: Strength and frequency of latitudinal bands, [0, 1)
        noise: Terrain/swirl intensity, [0.2, 0.8)
        clouds: Cloud coverage, [0, 0.7)
        ocean: Ocean coverage; wide for rocky worlds, near zero for gas giants
        has_rings: Whether a ring system is drawn
        ring_tilt: Ring tilt in degrees, [-35, 35)
        category: Texture family
    """
    hue: float
    saturation: float
    lightness: float
    banding: float
    noise: float
    clouds: float
    ocean: float
    has_rings: bool
    ring_tilt: float
    category: PlanetCategory

    @property
    def is_rocky(self) -> bool:
        return self.category is PlanetCategory.ROCKY

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["category"] = self.category.value
        return data


def generate_planet(seed: int) -> PlanetParams:
    """
    Derive planet parameters from ``seed``.

    Draws happen in a fixed order: category, hue, saturation, lightness,
    banding, noise, clouds, ocean, rings flag, ring tilt. Changing the order
    changes the appearance of every planet.
    """
    rng = Mulberry32(seed)

    category = PlanetCategory.GASEOUS if rng.next() < GASEOUS_PROBABILITY else PlanetCategory.ROCKY
    hue = rand_range(rng, 0.0, 360.0)
    saturation = rand_range(rng, 0.4, 0.9)
    lightness = rand_range(rng, 0.35, 0.65)
    banding = rand_range(rng, 0.0, 1.0)
    noise = rand_range(rng, 0.2, 0.8)
    clouds = rand_range(rng, 0.0, 0.7)
    if category is PlanetCategory.ROCKY:
        ocean = rand_range(rng, 0.2, 0.8)
    else:
        ocean = rand_range(rng, 0.0, 0.3)
    has_rings = rng.next() < RING_PROBABILITY
    ring_tilt = rand_range(rng, *RING_TILT_RANGE)

    return PlanetParams(
        hue=hue,
        saturation=saturation,
        lightness=lightness,
        banding=banding,
        noise=noise,
        clouds=clouds,
        ocean=ocean,
        has_rings=has_rings,
        ring_tilt=ring_tilt,
        category=category,
    )


# Parameters are tiny, but selection and hover both ask for them every frame
_PARAMS_CACHE: OrderedDict[int, PlanetParams] = OrderedDict()
_PARAMS_CACHE_MAX_SIZE = 128


def get_planet(seed: int) -> PlanetParams:
    """Cached :func:`generate_planet`."""
    key = int(seed) & U32_MASK
    cached = _PARAMS_CACHE.get(key)
    if cached is not None:
        _PARAMS_CACHE.move_to_end(key)
        return cached
    params = generate_planet(key)
    _PARAMS_CACHE[key] = params
    if len(_PARAMS_CACHE) > _PARAMS_CACHE_MAX_SIZE:
        _PARAMS_CACHE.popitem(last=False)
    return params


def clear_planet_cache() -> None:
    _PARAMS_CACHE.clear()


# =======================
#   SPIN
# =======================
@dataclass(frozen=True)
class SpinParams:
    direction: int   # +1 left-to-right, -1 right-to-left
    speed: float     # radians per frame

    def angle_at(self, frame: int) -> float:
        return (self.direction * self.speed * frame) % (2.0 * math.pi)


def spin_params(seed: int) -> SpinParams:
    """Rotation for the planet view, replayed from a fresh stream of ``seed``."""
    rng = Mulberry32(seed)
    direction = 1 if rng.next() < 0.95 else -1
    speed = rand_range(rng, 0.006, 0.016)
    return SpinParams(direction=direction, speed=speed)


# =======================
#   DESCRIPTIVE FACTS
# =======================
_FACTS_STREAM_SALT = 0x5F3759DF

NAME_PREFIXES = ("Nova", "Zeta", "Alpha", "Theta", "Omega", "Kappa", "Delta", "Sigma", "Vega", "Orin")
NAME_SUFFIXES = ("Prime", "Minor", "Major", "VII", "IX", "III", "X", "")

ROCKY_ELEMENTS = ("Iron", "Silicon", "Oxygen", "Magnesium", "Nickel", "Sulfur", "Aluminium", "Calcium")
GASEOUS_ELEMENTS = ("Hydrogen", "Helium", "Methane", "Ammonia", "Water vapour", "Neon")

EARTH_RADIUS_KM = 6_371.0
EARTH_MASS_KG = 5.972e24


@dataclass(frozen=True)
class PlanetFacts:
    name: str
    category: str
    radius_km: int
    mass_kg: float
    avg_temp_k: int
    elements: tuple[str, ...]


def generate_planet_facts(seed: int, params: PlanetParams) -> PlanetFacts:
    """
    Generate flavour facts for the planet info panel.

    Uses its own salted stream so the attribute draw order is untouched.
    Values are plausible rather than physical.
    """
    rng = Mulberry32((int(seed) ^ _FACTS_STREAM_SALT) & U32_MASK)

    name = f"{choice(rng, NAME_PREFIXES)}-{100 + int(rng.next() * 900)}{choice(rng, NAME_SUFFIXES)}"

    if params.is_rocky:
        # 0.3 to 2 Earth radii with Earth-like density
        radius_factor = rand_range(rng, 0.3, 2.0)
        mass = EARTH_MASS_KG * radius_factor ** 3 * rand_range(rng, 0.8, 1.2)
        # Wetter worlds sit in a milder band
        avg_temp = rand_range(rng, 180.0, 420.0) - params.ocean * 60.0
        elements = sample(rng, ROCKY_ELEMENTS, 3)
    else:
        # 3 to 15 Earth radii, much less dense
        radius_factor = rand_range(rng, 3.0, 15.0)
        mass = EARTH_MASS_KG * radius_factor ** 3 * rand_range(rng, 0.1, 0.3)
        avg_temp = rand_range(rng, 60.0, 180.0)
        elements = sample(rng, GASEOUS_ELEMENTS, 3)

    return PlanetFacts(
        name=name,
        category="Rocky" if params.is_rocky else "Gas giant",
        radius_km=int(round(EARTH_RADIUS_KM * radius_factor)),
        mass_kg=mass,
        avg_temp_k=int(round(avg_temp)),
        elements=tuple(elements),
    )


__all__ = [
    "GASEOUS_PROBABILITY",
    "PlanetCategory",
    "PlanetFacts",
    "PlanetParams",
    "SpinParams",
    "clear_planet_cache",
    "generate_planet",
    "generate_planet_facts",
    "get_planet",
    "spin_params",
]
