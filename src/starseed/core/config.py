"""Configuration dataclasses for the starfield explorer."""
from __future__ import annotations

import json
import math
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping


@dataclass(frozen=True)
class WorldCfg:
    seed: int = 123456789
    tile_size: float = 512.0
    stars_per_tile: int = 40
    star_radius: float = 1.2
    cache_tiles: int = 256


@dataclass(frozen=True)
class ViewCfg:
    initial_scale: float = 1.0
    min_zoom: float = 0.25
    max_zoom: float = 8.0
    zoom_speed: float = 0.1
    tile_padding: int = 1


@dataclass(frozen=True)
class PickCfg:
    click_threshold: float = 8.0
    hover_threshold: float = 14.0
    drag_threshold: float = 5.0


@dataclass(frozen=True)
class TextureCfg:
    size: int = 256
    stride: int = 2
    disc_size: int = 360
    disc_radius_ratio: float = 0.3
    terrain_octaves: int = 5
    shade_octaves: int = 3
    swirl_octaves: int = 4
    cloud_threshold: float = 0.15
    ring_count: int = 12


@dataclass(frozen=True)
class RenderCfg:
    width: int = 1200
    height: int = 800
    fps: int = 60
    background_color: tuple[int, int, int] = (0, 0, 0)
    star_color: tuple[int, int, int] = (255, 255, 255)
    highlight_color: tuple[int, int, int] = (46, 209, 195)
    highlight_ring_radius: int = 7
    panel_color: tuple[int, int, int, int] = (8, 16, 32, 210)
    panel_border_color: tuple[int, int, int, int] = (88, 140, 255, 140)
    text_color: tuple[int, int, int] = (234, 241, 255)
    hint_color: tuple[int, int, int] = (150, 168, 198)
    font_names: tuple[str, ...] = ("Inter", "Segoe UI", "Helvetica", "Arial")


@dataclass(frozen=True)
class ExplorerCfg:
    world: WorldCfg = field(default_factory=WorldCfg)
    view: ViewCfg = field(default_factory=ViewCfg)
    pick: PickCfg = field(default_factory=PickCfg)
    texture: TextureCfg = field(default_factory=TextureCfg)
    render: RenderCfg = field(default_factory=RenderCfg)

    def __post_init__(self) -> None:
        view = self.view
        if not (math.isfinite(view.min_zoom) and math.isfinite(view.max_zoom)):
            raise ValueError("Zoom bounds must be finite")
        if not 0.0 < view.min_zoom <= view.max_zoom:
            raise ValueError("Zoom bounds must satisfy 0 < min_zoom <= max_zoom")
        if self.world.tile_size <= 0:
            raise ValueError("Tile size must be positive")
        if self.world.stars_per_tile < 0:
            raise ValueError("Stars per tile must not be negative")
        if self.texture.stride < 1:
            raise ValueError("Texture stride must be at least 1")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None = None) -> "ExplorerCfg":
        """Build a configuration from a flat mapping of tunables.

        Keys are the field names of the section dataclasses (``seed``,
        ``tile_size``, ``click_threshold``, ...). Missing keys keep their
        defaults; unknown keys raise ``ValueError``.
        """

        mapping = dict(mapping or {})
        if "star_count" in mapping:
            mapping.setdefault("stars_per_tile", mapping.pop("star_count"))
        sections: dict[str, object] = {}
        for section_field in fields(cls):
            default_section = section_field.default_factory()  # type: ignore[misc]
            updates: dict[str, Any] = {}
            for option in fields(default_section):
                if option.name in mapping:
                    updates[option.name] = _coerce(getattr(default_section, option.name), mapping.pop(option.name))
            sections[section_field.name] = replace(default_section, **updates)
        if mapping:
            unknown = ", ".join(sorted(mapping))
            raise ValueError(f"Unknown configuration keys: {unknown}")
        return cls(**sections)  # type: ignore[arg-type]

    def to_flat_dict(self) -> dict[str, object]:
        flat: dict[str, object] = {}
        for section_field in fields(self):
            section = getattr(self, section_field.name)
            for option in fields(section):
                flat[option.name] = getattr(section, option.name)
        return flat


def _coerce(default: object, value: object) -> object:
    if isinstance(default, bool):
        return bool(value)
    if isinstance(default, int):
        return int(value)  # type: ignore[arg-type]
    if isinstance(default, float):
        return float(value)  # type: ignore[arg-type]
    if isinstance(default, tuple):
        return tuple(value)  # type: ignore[arg-type]
    return value


SETTINGS_PATH = Path.home() / ".starseed" / "settings.json"


def load_settings(path: str | Path | None = None) -> dict[str, object]:
    """Return a flat settings mapping if the JSON file is readable."""

    settings_path = Path(path) if path is not None else SETTINGS_PATH
    try:
        with settings_path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


WORLD_CFG = WorldCfg()
VIEW_CFG = ViewCfg()
PICK_CFG = PickCfg()
TEXTURE_CFG = TextureCfg()
RENDER_CFG = RenderCfg()
EXPLORER_CFG = ExplorerCfg()


__all__ = [
    "EXPLORER_CFG",
    "ExplorerCfg",
    "PICK_CFG",
    "PickCfg",
    "RENDER_CFG",
    "RenderCfg",
    "SETTINGS_PATH",
    "TEXTURE_CFG",
    "TextureCfg",
    "VIEW_CFG",
    "ViewCfg",
    "WORLD_CFG",
    "WorldCfg",
    "load_settings",
]
