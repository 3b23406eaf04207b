"""Star hit-testing and pointer gesture classification."""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from starseed.core.config import PICK_CFG, PickCfg
from starseed.core.world import Star, TileCache

from .camera import Viewport


@dataclass(frozen=True)
class Hit:
    star: Star
    distance: float  # screen pixels


def nearest_star(
    stars: Iterable[Star],
    viewport: Viewport,
    screen_pos: tuple[float, float],
    threshold: float,
) -> Hit | None:
    """Nearest star to ``screen_pos`` if it lies within ``threshold`` pixels."""

    px, py = screen_pos
    best: Star | None = None
    best_dist = math.inf
    for star in stars:
        sx, sy = viewport.world_to_screen(star.x, star.y)
        dist = math.hypot(sx - px, sy - py)
        if dist < best_dist:
            best_dist = dist
            best = star
    if best is not None and best_dist <= threshold:
        return Hit(best, best_dist)
    return None


class StarPicker:
    """Click selection and hover highlight against the tiled world.

    Only the 3x3 block of tiles around the pointer's world position is
    searched. While a star is highlighted a click selects it regardless of the
    exact click position.
    """

    def __init__(self, tiles: TileCache, viewport: Viewport, cfg: PickCfg = PICK_CFG) -> None:
        self._tiles = tiles
        self._viewport = viewport
        self._cfg = cfg
        self._highlighted: Star | None = None

    @property
    def highlighted(self) -> Star | None:
        return self._highlighted

    def clear_highlight(self) -> None:
        self._highlighted = None

    def candidates(self, screen_pos: tuple[float, float]) -> list[Star]:
        wx, wy = self._viewport.screen_to_world(*screen_pos)
        return self._tiles.stars_near(wx, wy)

    def hit_test(self, screen_pos: tuple[float, float], threshold: float) -> Hit | None:
        return nearest_star(self.candidates(screen_pos), self._viewport, screen_pos, threshold)

    def update_hover(self, screen_pos: tuple[float, float]) -> Star | None:
        hit = self.hit_test(screen_pos, self._cfg.hover_threshold)
        self._highlighted = hit.star if hit else None
        return self._highlighted

    def pick(self, screen_pos: tuple[float, float]) -> Star | None:
        if self._highlighted is not None:
            return self._highlighted
        hit = self.hit_test(screen_pos, self._cfg.click_threshold)
        return hit.star if hit else None


class Gesture(str, Enum):
    NONE = "none"
    CLICK = "click"
    DRAG = "drag"


class PointerTracker:
    """Classifies a down/move/up sequence as a click or a drag.

    Displacement is the path length travelled since pointer-down, so a drag
    that returns to its starting point is still a drag.
    """

    def __init__(self, cfg: PickCfg = PICK_CFG) -> None:
        self._cfg = cfg
        self._anchor: tuple[float, float] | None = None
        self._last: tuple[float, float] | None = None
        self._travel = 0.0
        self._dragging = False

    @property
    def pressed(self) -> bool:
        return self._anchor is not None

    @property
    def dragging(self) -> bool:
        return self._dragging

    @property
    def travel(self) -> float:
        return self._travel

    def down(self, position: tuple[float, float]) -> None:
        self._anchor = position
        self._last = position
        self._travel = 0.0
        self._dragging = False

    def move(self, position: tuple[float, float]) -> tuple[float, float]:
        """Record a move; returns the screen delta to pan by (zero until dragging)."""
        anchor = self._anchor
        if anchor is None or self._last is None:
            return (0.0, 0.0)
        dx = position[0] - self._last[0]
        dy = position[1] - self._last[1]
        self._last = position
        self._travel += math.hypot(dx, dy)
        if not self._dragging and self._travel > self._cfg.drag_threshold:
            self._dragging = True
            # catch up with the motion that happened below the threshold
            return (position[0] - anchor[0], position[1] - anchor[1])
        if self._dragging:
            return (dx, dy)
        return (0.0, 0.0)

    def up(self, position: tuple[float, float]) -> Gesture:
        if self._anchor is None:
            return Gesture.NONE
        self.move(position)
        gesture = Gesture.DRAG if self._dragging else Gesture.CLICK
        self._anchor = None
        self._last = None
        self._dragging = False
        return gesture


__all__ = [
    "Gesture",
    "Hit",
    "PointerTracker",
    "StarPicker",
    "nearest_star",
]
