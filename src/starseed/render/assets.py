"""Fonts and rendered text shared by the starfield and the planet view."""
from __future__ import annotations

from collections import OrderedDict
from typing import Iterable

import pygame


Color = tuple[int, int, int] | tuple[int, int, int, int]

TextKey = tuple[int, int, str, Color]


class TextCache:
    """LRU of rendered text surfaces.

    Keys combine the font object's id with its line height, so a font that is
    garbage collected and replaced at the same address by a different size
    does not hand back stale glyphs.
    """

    def __init__(self, max_size: int = 256) -> None:
        if max_size < 1:
            raise ValueError("Text cache size must be at least 1")
        self._max_size = max_size
        self._surfaces: OrderedDict[TextKey, pygame.Surface] = OrderedDict()

    def __len__(self) -> int:
        return len(self._surfaces)

    def render(self, font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
        key = (id(font), font.get_height(), text, color)
        cached = self._surfaces.get(key)
        if cached is not None:
            self._surfaces.move_to_end(key)
            return cached
        rendered = font.render(text, True, color)
        self._surfaces[key] = rendered
        if len(self._surfaces) > self._max_size:
            self._surfaces.popitem(last=False)
        return rendered

    def clear(self) -> None:
        self._surfaces.clear()


TEXT_CACHE = TextCache()

_FONT_CACHE: dict[tuple[tuple[str, ...], int, bool], pygame.font.Font] = {}


def get_text_surface(font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
    """Rendered ``text`` from the shared cache."""
    return TEXT_CACHE.render(font, text, color)


def load_font(preferred_names: Iterable[str], size: int, *, bold: bool = False) -> pygame.font.Font:
    """First installed font of ``preferred_names``, or pygame's bundled font."""
    names = tuple(preferred_names)
    key = (names, int(size), bool(bold))
    cached = _FONT_CACHE.get(key)
    if cached is not None:
        return cached
    font = None
    for name in names:
        match = pygame.font.match_font(name, bold=bold)
        if match:
            font = pygame.font.Font(match, size)
            break
    if font is None:
        font = pygame.font.Font(None, size)
        font.set_bold(bold)
    _FONT_CACHE[key] = font
    return font


def clear_asset_caches() -> None:
    """Drop cached text and fonts; needed after ``pygame.quit``."""
    TEXT_CACHE.clear()
    _FONT_CACHE.clear()


__all__ = [
    "Color",
    "TEXT_CACHE",
    "TextCache",
    "clear_asset_caches",
    "get_text_surface",
    "load_font",
]
