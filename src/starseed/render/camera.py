from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from starseed.core.config import VIEW_CFG, ViewCfg


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


@dataclass
class ViewportState:
    scale: float
    offset: np.ndarray  # world coordinate under the screen's top-left corner


class Viewport:
    """Pan/zoom transform between screen pixels and world units.

    Screen y grows downward and so does world y. Panning is unbounded: the
    world is infinite and the offset may take any finite value.
    """

    def __init__(
        self,
        size: tuple[int, int],
        scale: float = VIEW_CFG.initial_scale,
        *,
        offset: tuple[float, float] = (0.0, 0.0),
        cfg: ViewCfg = VIEW_CFG,
    ) -> None:
        if not math.isfinite(scale) or scale <= 0.0:
            raise ValueError("Viewport scale must be finite and positive")
        self._size = size
        self._cfg = cfg
        self._min_zoom = cfg.min_zoom
        self._max_zoom = cfg.max_zoom
        self._state = ViewportState(
            scale=_clamp(scale, cfg.min_zoom, cfg.max_zoom),
            offset=np.array(offset, dtype=float),
        )

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def update_size(self, size: tuple[int, int]) -> None:
        self._size = size

    @property
    def min_zoom(self) -> float:
        return self._min_zoom

    @property
    def max_zoom(self) -> float:
        return self._max_zoom

    @property
    def scale(self) -> float:
        return self._state.scale

    @property
    def offset(self) -> np.ndarray:
        return self._state.offset

    def set_offset(self, offset: tuple[float, float]) -> None:
        self._state.offset[:] = offset

    def set_scale(self, scale: float) -> None:
        if not math.isfinite(scale):
            raise ValueError("Viewport scale must be finite")
        self._state.scale = _clamp(scale, self._min_zoom, self._max_zoom)

    def center_on(self, position: tuple[float, float]) -> None:
        """Place world ``position`` at the middle of the screen."""
        width, height = self._size
        scale = self._state.scale
        self._state.offset[0] = position[0] - width / (2.0 * scale)
        self._state.offset[1] = position[1] - height / (2.0 * scale)

    def screen_to_world(self, sx: float, sy: float) -> tuple[float, float]:
        scale = self._state.scale
        ox, oy = self._state.offset
        return sx / scale + float(ox), sy / scale + float(oy)

    def world_to_screen(self, wx: float, wy: float) -> tuple[float, float]:
        scale = self._state.scale
        ox, oy = self._state.offset
        return (wx - float(ox)) * scale, (wy - float(oy)) * scale

    def pan(self, delta: tuple[float, float]) -> None:
        """Drag the view by a screen-space ``delta``."""
        dx, dy = delta
        if dx == 0 and dy == 0:
            return
        scale = self._state.scale
        self._state.offset[0] -= dx / scale
        self._state.offset[1] -= dy / scale

    def zoom_at(self, anchor: tuple[float, float], direction: float) -> bool:
        """Zoom one step while keeping the world point under ``anchor`` fixed.

        Returns ``False`` when the scale is already pinned at a bound.
        """
        state = self._state
        target = _clamp(state.scale * (1.0 + direction * self._cfg.zoom_speed), self._min_zoom, self._max_zoom)
        if target == state.scale:
            return False
        wx, wy = self.screen_to_world(*anchor)
        state.scale = target
        state.offset[0] = wx - anchor[0] / target
        state.offset[1] = wy - anchor[1] / target
        return True

    def zoom_at_cursor(self, cursor: tuple[float, float], direction: float) -> bool:
        return self.zoom_at(cursor, direction)

    def zoom_at_center(self, direction: float) -> bool:
        width, height = self._size
        return self.zoom_at((width / 2.0, height / 2.0), direction)

    def view_rect(self) -> tuple[float, float, float, float]:
        width, height = self._size
        x0, y0 = self.screen_to_world(0.0, 0.0)
        x1, y1 = self.screen_to_world(float(width), float(height))
        return x0, y0, x1, y1

    def visible_tile_range(
        self,
        tile_size: float,
        size: tuple[int, int] | None = None,
        *,
        padding: int | None = None,
    ) -> tuple[int, int, int, int]:
        """Inclusive ``(tx0, ty0, tx1, ty1)`` of tiles touching the screen, padded."""
        if size is not None:
            self._size = size
        pad = self._cfg.tile_padding if padding is None else padding
        x0, y0, x1, y1 = self.view_rect()
        tx0 = math.floor(x0 / tile_size)
        ty0 = math.floor(y0 / tile_size)
        # The right and bottom edges are exclusive; a tile starting exactly there is not visible
        tx1 = max(tx0, math.ceil(x1 / tile_size) - 1)
        ty1 = max(ty0, math.ceil(y1 / tile_size) - 1)
        return tx0 - pad, ty0 - pad, tx1 + pad, ty1 + pad
