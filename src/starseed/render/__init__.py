"""Viewport, picking, pixel synthesis and drawing helpers for the explorer."""

from .camera import Viewport, ViewportState
from .picking import Gesture, Hit, PointerTracker, StarPicker, nearest_star
from .textures import (
    MAX_STRIDE,
    PlanetTextures,
    clear_texture_cache,
    get_planet_textures,
    synthesize_textures,
)
from .disc import (
    get_planet_disc,
    render_planet_disc,
    surface_to_bytes,
)
from .draw import (
    draw_globe,
    draw_highlight,
    draw_starfield,
    project_globe,
    textures_to_surfaces,
)
from .assets import TextCache, get_text_surface, load_font
from .ui import Button, ButtonStyle, build_text_panel, planet_info_lines

__all__ = [
    "Button",
    "ButtonStyle",
    "Gesture",
    "Hit",
    "MAX_STRIDE",
    "PlanetTextures",
    "PointerTracker",
    "StarPicker",
    "TextCache",
    "Viewport",
    "ViewportState",
    "build_text_panel",
    "clear_texture_cache",
    "draw_globe",
    "draw_highlight",
    "draw_starfield",
    "get_planet_disc",
    "get_planet_textures",
    "get_text_surface",
    "load_font",
    "nearest_star",
    "planet_info_lines",
    "project_globe",
    "render_planet_disc",
    "surface_to_bytes",
    "synthesize_textures",
    "textures_to_surfaces",
]
