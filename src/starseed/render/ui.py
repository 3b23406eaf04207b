"""Zoom buttons and the planet info panel."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import pygame

from starseed.core.planet import PlanetFacts, PlanetParams, SpinParams
from starseed.render.assets import Color, get_text_surface


@dataclass(frozen=True)
class ButtonStyle:
    fill: Color
    hover_fill: Color
    label_color: tuple[int, int, int]
    corner_radius: int = 8
    outline: Color | None = None
    outline_width: int = 1

    def fill_for(self, hovered: bool) -> Color:
        return self.hover_fill if hovered else self.fill


class Button:
    """Rounded button with hover feedback, used for the zoom controls."""

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        callback: Callable[[], None],
        *,
        style: ButtonStyle,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self._callback = callback
        self._style = style

    def contains(self, pos: tuple[float, float]) -> bool:
        return self.rect.collidepoint(int(pos[0]), int(pos[1]))

    def draw(self, surface: pygame.Surface, font: pygame.font.Font, mouse_pos: tuple[int, int]) -> None:
        style = self._style
        button_surface = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        outline_rect = button_surface.get_rect()
        pygame.draw.rect(button_surface, style.fill_for(self.contains(mouse_pos)), outline_rect, border_radius=style.corner_radius)
        if style.outline is not None and style.outline_width > 0:
            pygame.draw.rect(button_surface, style.outline, outline_rect, style.outline_width, border_radius=style.corner_radius)
        surface.blit(button_surface, self.rect.topleft)
        text_surf = get_text_surface(font, self.text, style.label_color)
        surface.blit(text_surf, text_surf.get_rect(center=self.rect.center))

    def handle_click(self, pos: tuple[float, float]) -> bool:
        """Run the callback if ``pos`` is inside; returns whether it was consumed."""
        if self.contains(pos):
            self._callback()
            return True
        return False


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[tuple[str, tuple[int, int, int]]],
    *,
    background_color: Color,
    border_color: Color | None = None,
    padding: tuple[int, int] = (14, 14),
) -> pygame.Surface:
    if not lines:
        raise ValueError("lines must not be empty")
    padding_x, padding_y = padding
    line_height = font.get_linesize()
    width = max(font.size(text)[0] for text, _ in lines) + padding_x * 2
    height = line_height * len(lines) + padding_y * 2
    panel_surface = pygame.Surface((width, height), pygame.SRCALPHA)
    pygame.draw.rect(panel_surface, background_color, panel_surface.get_rect(), border_radius=12)
    if border_color is not None:
        pygame.draw.rect(panel_surface, border_color, panel_surface.get_rect(), 1, border_radius=12)
    for idx, (text, color) in enumerate(lines):
        if not text:
            continue
        panel_surface.blit(get_text_surface(font, text, color), (padding_x, padding_y + idx * line_height))
    return panel_surface


def planet_info_lines(
    facts: PlanetFacts,
    params: PlanetParams,
    spin: SpinParams,
    *,
    text_color: tuple[int, int, int],
    hint_color: tuple[int, int, int],
) -> list[tuple[str, tuple[int, int, int]]]:
    """Lines of the planet info panel."""

    direction = "prograde" if spin.direction > 0 else "retrograde"
    lines = [
        (facts.name, text_color),
        (f"Type: {facts.category}", text_color),
        (f"Radius: {facts.radius_km:,} km", text_color),
        (f"Mass: {facts.mass_kg:.3e} kg", text_color),
        (f"Avg. temperature: {facts.avg_temp_k} K", text_color),
        (f"Elements: {', '.join(facts.elements)}", text_color),
        (f"Rings: {'yes' if params.has_rings else 'no'}", text_color),
        (f"Spin: {direction}", text_color),
        ("", hint_color),
        ("Esc to return to the starfield", hint_color),
    ]
    return lines


__all__ = [
    "Button",
    "ButtonStyle",
    "build_text_panel",
    "planet_info_lines",
]
