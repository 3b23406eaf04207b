"""Interactive pygame front end for the starfield explorer."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

import pygame
from pygame.locals import DOUBLEBUF, RESIZABLE

from starseed.core.config import ExplorerCfg, load_settings
from starseed.core.logging_utils import ExplorationLogger
from starseed.explorer import Explorer, Selection
from starseed.render.assets import clear_asset_caches, load_font
from starseed.render.draw import draw_globe, draw_highlight, draw_starfield
from starseed.render.ui import Button, ButtonStyle, build_text_panel, planet_info_lines


THUMBNAIL_SIZE = 120
ZOOM_BUTTON_SIZE = 36


# =======================
#   DISPLAY SETUP
# =======================
def _set_display_mode_with_vsync(size: tuple[int, int], flags: int = 0) -> pygame.Surface:
    """Create the display surface with double buffering and vsync when available."""
    flags |= DOUBLEBUF
    try:
        return pygame.display.set_mode(size, flags, vsync=1)
    except pygame.error:
        return pygame.display.set_mode(size, flags)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Explore an infinite seeded starfield")
    parser.add_argument("--seed", type=int, default=None, help="World seed (overrides settings)")
    parser.add_argument("--settings", type=Path, default=None, help="JSON file with tunables")
    parser.add_argument("--log-dir", type=Path, default=Path("data/sessions"), help="Session log root")
    parser.add_argument("--no-log", action="store_true", help="Do not record the session")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ExplorerCfg:
    settings = load_settings(args.settings)
    if args.seed is not None:
        settings["seed"] = args.seed
    return ExplorerCfg.from_mapping(settings)


# =======================
#   PLANET VIEW
# =======================
def draw_planet_view(
    screen: pygame.Surface,
    selection: Selection,
    frame_index: int,
    font: pygame.font.Font,
    cfg: ExplorerCfg,
) -> None:
    width, height = screen.get_size()
    shade = pygame.Surface((width, height), pygame.SRCALPHA)
    shade.fill((0, 0, 0, 200))
    screen.blit(shade, (0, 0))

    diameter = max(32, int(min(width * 0.5, height * 0.7)))
    textures = selection.textures(cfg.texture.size, stride=cfg.texture.stride)
    center = (width * 0.35, height * 0.5)
    draw_globe(screen, textures, center, diameter, selection.spin.angle_at(frame_index))

    render_cfg = cfg.render
    lines = planet_info_lines(
        selection.facts,
        selection.params,
        selection.spin,
        text_color=render_cfg.text_color,
        hint_color=render_cfg.hint_color,
    )
    panel = build_text_panel(
        font,
        lines,
        background_color=render_cfg.panel_color,
        border_color=render_cfg.panel_border_color,
    )
    panel_x = int(width * 0.62)
    panel_y = max(16, int(height * 0.5 - panel.get_height() / 2))
    screen.blit(panel, (panel_x, panel_y))
    # Flat overview with rings and clouds above the facts
    thumbnail = selection.disc(THUMBNAIL_SIZE)
    screen.blit(thumbnail, (panel_x, max(0, panel_y - THUMBNAIL_SIZE)))


def make_zoom_buttons(explorer: Explorer, size: tuple[int, int], cfg: ExplorerCfg) -> list[Button]:
    render_cfg = cfg.render
    style = ButtonStyle(
        fill=render_cfg.panel_color,
        hover_fill=(24, 40, 72, 230),
        label_color=render_cfg.text_color,
        outline=render_cfg.panel_border_color,
    )
    width, height = size
    x = width - ZOOM_BUTTON_SIZE - 16
    y = height - 2 * ZOOM_BUTTON_SIZE - 24
    return [
        Button((x, y, ZOOM_BUTTON_SIZE, ZOOM_BUTTON_SIZE), "+", explorer.zoom_in, style=style),
        Button((x, y + ZOOM_BUTTON_SIZE + 8, ZOOM_BUTTON_SIZE, ZOOM_BUTTON_SIZE), "-", explorer.zoom_out, style=style),
    ]


# =======================
#   MAIN LOOP
# =======================
def run(cfg: ExplorerCfg, logger: ExplorationLogger | None = None) -> None:
    pygame.init()
    pygame.display.set_caption("Starseed - Starfield Explorer")
    render_cfg = cfg.render
    screen = _set_display_mode_with_vsync((render_cfg.width, render_cfg.height), RESIZABLE)
    font = load_font(render_cfg.font_names, 18)
    button_font = load_font(render_cfg.font_names, 22, bold=True)
    clock = pygame.time.Clock()

    explorer = Explorer(screen.get_size(), cfg, logger=logger)
    buttons = make_zoom_buttons(explorer, screen.get_size(), cfg)
    planet_frame = 0
    running = True

    try:
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    screen = _set_display_mode_with_vsync((event.w, event.h), RESIZABLE)
                    explorer.resize(screen.get_size())
                    buttons = make_zoom_buttons(explorer, screen.get_size(), cfg)
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        if not explorer.close_selection(pygame.mouse.get_pos()):
                            running = False
                    elif explorer.selection is None and event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                        explorer.zoom_in()
                    elif explorer.selection is None and event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                        explorer.zoom_out()
                elif explorer.selection is not None:
                    # The planet view is modal
                    continue
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    if any(button.handle_click(event.pos) for button in buttons):
                        continue
                    explorer.handle_pointer("down", event.pos)
                elif event.type == pygame.MOUSEMOTION:
                    explorer.handle_pointer("move", event.pos)
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                    if explorer.handle_pointer("up", event.pos) is not None:
                        planet_frame = 0
                elif event.type == pygame.MOUSEWHEEL:
                    explorer.handle_pointer("wheel", pygame.mouse.get_pos(), event.y)

            screen.fill(render_cfg.background_color)
            frame = explorer.frame()
            draw_starfield(screen, frame.stars, frame.scale, cfg.world.star_radius, render_cfg=render_cfg)
            if frame.highlighted is not None:
                draw_highlight(
                    screen,
                    (frame.highlighted.screen_x, frame.highlighted.screen_y),
                    render_cfg=render_cfg,
                )
            if explorer.selection is not None:
                draw_planet_view(screen, explorer.selection, planet_frame, font, cfg)
                planet_frame += 1
            else:
                mouse_pos = pygame.mouse.get_pos()
                for button in buttons:
                    button.draw(screen, button_font, mouse_pos)

            pygame.display.flip()
            clock.tick(render_cfg.fps)
    finally:
        explorer.close()
        clear_asset_caches()
        pygame.quit()


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        cfg = build_config(args)
    except ValueError as exc:
        print(f"Invalid settings: {exc}", file=sys.stderr)
        return 2
    logger = None if args.no_log else ExplorationLogger(args.log_dir)
    if logger is not None:
        print(f"Recording session to {logger.session_dir}")
    run(cfg, logger)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
