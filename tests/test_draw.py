import numpy as np
import pygame
import pytest

from starseed.core.config import RENDER_CFG
from starseed.core.world import Star
from starseed.explorer import VisibleStar
from starseed.render.draw import (
    draw_globe,
    draw_highlight,
    draw_starfield,
    project_globe,
    star_alpha,
    star_screen_radius,
    textures_to_surfaces,
)
from starseed.render.textures import synthesize_textures


def test_star_alpha_is_stable_and_bounded():
    for seed in (0, 1, 255, 2**32 - 1, 3372958138):
        assert 140 <= star_alpha(seed) <= 255
        assert star_alpha(seed) == star_alpha(seed)


def test_star_radius_grows_with_zoom_but_is_capped():
    assert star_screen_radius(1.2, 0.25) == 1
    assert star_screen_radius(1.2, 1.0) == 1
    assert star_screen_radius(1.2, 8.0) == 3
    assert star_screen_radius(10.0, 8.0) == 4


def test_draw_starfield_skips_offscreen_stars():
    surface = pygame.Surface((100, 100), pygame.SRCALPHA)
    stars = [
        VisibleStar(Star(id=0, x=0.0, y=0.0, seed=12345), 50.0, 50.0),
        VisibleStar(Star(id=1, x=0.0, y=0.0, seed=54321), 500.0, 50.0),
    ]
    drawn = draw_starfield(surface, stars, 1.0, 1.2, render_cfg=RENDER_CFG)
    assert drawn == 1
    assert surface.get_at((50, 50)).a > 0
    assert surface.get_at((10, 10)).a == 0


def test_draw_highlight_draws_ring():
    surface = pygame.Surface((40, 40))
    draw_highlight(surface, (20, 20), render_cfg=RENDER_CFG)
    ring = RENDER_CFG.highlight_ring_radius
    edge = [tuple(surface.get_at((x, 20)))[:3] for x in range(20 + ring - 2, 20 + ring + 1)]
    assert RENDER_CFG.highlight_color in edge
    assert tuple(surface.get_at((20, 20)))[:3] == (0, 0, 0)


def test_textures_to_surfaces():
    textures = synthesize_textures(42, size=32, height=16)
    color, elevation = textures_to_surfaces(textures)
    assert color.get_size() == (32, 16)
    assert elevation.get_size() == (32, 16)
    assert tuple(color.get_at((3, 5)))[:3] == tuple(int(v) for v in textures.color[5, 3])
    grey = int(textures.elevation[5, 3])
    assert tuple(elevation.get_at((3, 5))) == (grey, grey, grey, 255)


def test_project_globe_masks_the_sphere():
    textures = synthesize_textures(42, size=64)
    rgba = project_globe(textures, 50, 0.0)
    assert rgba.shape == (50, 50, 4)
    assert rgba[25, 25, 3] == 255
    assert rgba[0, 0, 3] == 0


def test_globe_rotation_is_periodic():
    textures = synthesize_textures(42, size=64)
    a = project_globe(textures, 40, 0.5)
    b = project_globe(textures, 40, 0.5 + 2.0 * np.pi)
    assert np.array_equal(a, b)


def test_project_globe_rejects_empty_diameter():
    textures = synthesize_textures(42, size=16)
    with pytest.raises(ValueError):
        project_globe(textures, 0, 0.0)


def test_draw_globe_blits_centred():
    surface = pygame.Surface((100, 80), pygame.SRCALPHA)
    rect = draw_globe(surface, synthesize_textures(3, size=32), (50, 40), 30, 1.0)
    assert rect.center == (50, 40)
    assert surface.get_at((50, 40)).a == 255
