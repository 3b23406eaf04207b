"""Explorer session: the boundary between the generators and a presentation layer.

The presentation layer feeds pointer events, viewport resizes and zoom button
presses into an :class:`Explorer` and draws whatever :meth:`Explorer.frame`
returns. Everything here is headless; pygame is only needed for the lazily
rendered planet disc of a :class:`Selection`.
"""
from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Callable, Optional

import pygame

from starseed.core.config import EXPLORER_CFG, TEXTURE_CFG, ExplorerCfg, TextureCfg
from starseed.core.logging_utils import ExplorationLogger
from starseed.core.planet import (
    PlanetFacts,
    PlanetParams,
    SpinParams,
    generate_planet_facts,
    get_planet,
    spin_params,
)
from starseed.core.world import Star, TileCache
from starseed.render.camera import Viewport
from starseed.render.disc import get_planet_disc
from starseed.render.picking import Gesture, PointerTracker, StarPicker
from starseed.render.textures import PlanetTextures, get_planet_textures


POINTER_KINDS = ("down", "move", "up", "wheel")


@dataclass(frozen=True)
class VisibleStar:
    star: Star
    screen_x: float
    screen_y: float


@dataclass(frozen=True)
class Frame:
    """What the presentation layer needs to draw one starfield frame."""

    stars: tuple[VisibleStar, ...]
    highlighted: Optional[VisibleStar]
    scale: float
    offset: tuple[float, float]


@dataclass(frozen=True)
class Selection:
    """A chosen star and everything derived from its planet seed."""

    star: Star
    params: PlanetParams
    facts: PlanetFacts
    spin: SpinParams
    texture_cfg: TextureCfg = TEXTURE_CFG

    @classmethod
    def for_star(cls, star: Star, texture_cfg: TextureCfg = TEXTURE_CFG) -> "Selection":
        params = get_planet(star.seed)
        return cls(
            star=star,
            params=params,
            facts=generate_planet_facts(star.seed, params),
            spin=spin_params(star.seed),
            texture_cfg=texture_cfg,
        )

    @property
    def seed(self) -> int:
        return self.star.seed

    def textures(self, size: int | None = None, *, stride: int | None = None) -> PlanetTextures:
        """Sphere-ready colour and elevation maps, synthesized on first use."""
        cfg = self.texture_cfg
        return get_planet_textures(
            self.star.seed,
            cfg.size if size is None else size,
            stride=cfg.stride if stride is None else stride,
            periodic=True,
            cfg=cfg,
        )

    def disc(self, size: int | None = None) -> pygame.Surface:
        cfg = self.texture_cfg
        return get_planet_disc(self.star.seed, cfg.disc_size if size is None else size, cfg=cfg)


class Explorer:
    """Pan/zoom/select state machine over the infinite tiled starfield."""

    def __init__(
        self,
        size: tuple[int, int],
        cfg: ExplorerCfg = EXPLORER_CFG,
        *,
        logger: ExplorationLogger | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.cfg = cfg
        self.viewport = Viewport(size, cfg.view.initial_scale, cfg=cfg.view)
        self.tiles = TileCache(cfg.world)
        self.picker = StarPicker(self.tiles, self.viewport, cfg.pick)
        self.pointer = PointerTracker(cfg.pick)
        self.selection: Selection | None = None
        self.last_pointer: tuple[float, float] | None = None
        self._logger = logger
        self._clock = clock
        self._t0 = clock()
        if logger is not None:
            logger.write_meta(
                {
                    "config": cfg.to_flat_dict(),
                    "viewport": list(size),
                    "started": time.strftime("%Y-%m-%dT%H:%M:%S"),
                }
            )

    @property
    def size(self) -> tuple[int, int]:
        return self.viewport.size

    # ----- input -----
    def handle_pointer(
        self,
        kind: str,
        position: tuple[float, float],
        wheel_delta: float = 0.0,
    ) -> Selection | None:
        """Dispatch one pointer event; returns a new selection if one was made."""
        if kind not in POINTER_KINDS:
            raise ValueError(f"Unknown pointer event kind: {kind!r}")
        if kind == "down":
            self.pointer_down(position)
        elif kind == "move":
            self.pointer_move(position)
        elif kind == "up":
            return self.pointer_up(position)
        else:
            self.wheel(position, wheel_delta)
        return None

    def pointer_down(self, position: tuple[float, float]) -> None:
        self.last_pointer = position
        self.pointer.down(position)
        self._log_event("down", position)

    def pointer_move(self, position: tuple[float, float]) -> None:
        self.last_pointer = position
        delta = self.pointer.move(position)
        if self.pointer.dragging:
            self.viewport.pan(delta)
            self.picker.clear_highlight()
            return
        self.picker.update_hover(position)

    def pointer_up(self, position: tuple[float, float]) -> Selection | None:
        self.last_pointer = position
        if self.pointer.pressed:
            delta = self.pointer.move(position)
            if self.pointer.dragging:
                self.viewport.pan(delta)
        gesture = self.pointer.up(position)
        if gesture is Gesture.NONE:
            return None
        if gesture is Gesture.DRAG:
            offset = self.viewport.offset
            self._log_event("drag", position, {"offset": [float(offset[0]), float(offset[1])]})
            self.picker.update_hover(position)
            return None
        self._log_event("click", position)
        star = self.picker.pick(position)
        if star is None:
            return None
        return self.select(star)

    def wheel(self, position: tuple[float, float], delta: float) -> bool:
        """Zoom one step at the cursor; wheel up (positive delta) zooms in."""
        self.last_pointer = position
        if delta == 0:
            return False
        changed = self.viewport.zoom_at_cursor(position, 1.0 if delta > 0 else -1.0)
        if changed:
            self._log_event("wheel", position, {"scale": self.viewport.scale})
            self.picker.update_hover(position)
        return changed

    def zoom_in(self) -> bool:
        return self._zoom_center(1.0)

    def zoom_out(self) -> bool:
        return self._zoom_center(-1.0)

    def _zoom_center(self, direction: float) -> bool:
        changed = self.viewport.zoom_at_center(direction)
        if changed:
            width, height = self.size
            self._log_event("zoom", (width / 2.0, height / 2.0), {"scale": self.viewport.scale})
            self.refresh_hover()
        return changed

    def resize(self, size: tuple[int, int]) -> None:
        # Negative sizes come from minimised windows on some platforms
        width, height = max(0, int(size[0])), max(0, int(size[1]))
        self.viewport.update_size((width, height))
        self._log_event("resize", (float(width), float(height)))
        self.refresh_hover()

    # ----- selection -----
    def select(self, star: Star) -> Selection:
        selection = Selection.for_star(star, self.cfg.texture)
        self.selection = selection
        self.picker.clear_highlight()
        self._log_event("select", self.viewport.world_to_screen(star.x, star.y), {"seed": star.seed})
        if self._logger is not None:
            params = selection.params
            self._logger.log_selection(
                [
                    self._elapsed(),
                    star.tile[0],
                    star.tile[1],
                    star.id,
                    star.seed,
                    params.category.value,
                    params.hue,
                    params.ocean,
                    params.has_rings,
                ]
            )
        return selection

    def close_selection(self, position: tuple[float, float] | None = None) -> bool:
        """Leave the planet view; ``position`` is where the pointer is now, if known."""
        if self.selection is None:
            return False
        self.selection = None
        if position is not None:
            self.last_pointer = position
        self.refresh_hover()
        return True

    def refresh_hover(self) -> None:
        """Re-evaluate the highlight at the last pointer position after the view changed."""
        if self.selection is not None or self.pointer.dragging or self.last_pointer is None:
            self.picker.clear_highlight()
            return
        self.picker.update_hover(self.last_pointer)

    # ----- output -----
    def visible_stars(self) -> list[VisibleStar]:
        width, height = self.size
        margin = self.cfg.pick.hover_threshold
        tile_range = self.viewport.visible_tile_range(self.tiles.tile_size)
        visible: list[VisibleStar] = []
        for star in self.tiles.stars_in_range(tile_range):
            sx, sy = self.viewport.world_to_screen(star.x, star.y)
            if -margin <= sx <= width + margin and -margin <= sy <= height + margin:
                visible.append(VisibleStar(star, sx, sy))
        return visible

    def frame(self) -> Frame:
        highlighted = None
        star = self.picker.highlighted
        if star is not None:
            sx, sy = self.viewport.world_to_screen(star.x, star.y)
            highlighted = VisibleStar(star, sx, sy)
        offset = self.viewport.offset
        return Frame(
            stars=tuple(self.visible_stars()),
            highlighted=highlighted,
            scale=self.viewport.scale,
            offset=(float(offset[0]), float(offset[1])),
        )

    # ----- logging -----
    def _elapsed(self) -> float:
        return self._clock() - self._t0

    def _log_event(self, kind: str, position: tuple[float, float], details: dict | None = None) -> None:
        if self._logger is None:
            return
        payload = json.dumps(details, sort_keys=True) if details else ""
        self._logger.log_event([self._elapsed(), kind, float(position[0]), float(position[1]), payload])

    def close(self) -> None:
        if self._logger is not None:
            self._logger.close()


__all__ = [
    "Explorer",
    "Frame",
    "POINTER_KINDS",
    "Selection",
    "VisibleStar",
]
