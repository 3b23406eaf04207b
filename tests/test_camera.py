import math

import numpy as np
import pytest

from starseed.core.config import ViewCfg
from starseed.render.camera import Viewport


def test_transform_round_trip():
    viewport = Viewport((800, 600), 2.5, offset=(-1234.5, 987.25))
    for point in [(0.0, 0.0), (400.0, 300.0), (799.0, 13.0), (-50.0, 1000.0)]:
        wx, wy = viewport.screen_to_world(*point)
        sx, sy = viewport.world_to_screen(wx, wy)
        assert sx == pytest.approx(point[0])
        assert sy == pytest.approx(point[1])


def test_screen_to_world_formula():
    viewport = Viewport((800, 600), 2.0, offset=(10.0, -20.0))
    assert viewport.screen_to_world(100.0, 50.0) == pytest.approx((60.0, 5.0))
    assert viewport.world_to_screen(60.0, 5.0) == pytest.approx((100.0, 50.0))


def test_pan_moves_offset_inversely_scaled():
    viewport = Viewport((800, 600), 4.0)
    viewport.pan((40.0, -20.0))
    assert np.allclose(viewport.offset, [-10.0, 5.0])


@pytest.mark.parametrize("direction", [1.0, -1.0])
def test_zoom_keeps_world_point_under_cursor(direction):
    viewport = Viewport((1024, 768), 1.3, offset=(250.0, -75.0))
    cursor = (317.0, 641.0)
    before = viewport.screen_to_world(*cursor)
    assert viewport.zoom_at_cursor(cursor, direction)
    after = viewport.screen_to_world(*cursor)
    assert after == pytest.approx(before, abs=1e-9)
    assert viewport.scale == pytest.approx(1.3 * (1.0 + direction * 0.1))


def test_zoom_at_center_anchors_middle():
    viewport = Viewport((600, 400), 1.0, offset=(5.0, 5.0))
    before = viewport.screen_to_world(300.0, 200.0)
    viewport.zoom_at_center(1.0)
    assert viewport.screen_to_world(300.0, 200.0) == pytest.approx(before)


def test_scale_stays_within_bounds():
    cfg = ViewCfg(min_zoom=0.5, max_zoom=3.0, zoom_speed=0.25)
    viewport = Viewport((640, 480), 1.0, cfg=cfg)
    for _ in range(50):
        viewport.zoom_at_cursor((10.0, 20.0), 1.0)
        assert cfg.min_zoom <= viewport.scale <= cfg.max_zoom
    assert viewport.scale == cfg.max_zoom
    assert viewport.zoom_at_cursor((10.0, 20.0), 1.0) is False
    for _ in range(50):
        viewport.zoom_at_center(-1.0)
        assert cfg.min_zoom <= viewport.scale <= cfg.max_zoom
    assert viewport.scale == cfg.min_zoom


def test_initial_scale_is_clamped_and_validated():
    assert Viewport((10, 10), 100.0).scale == 8.0
    with pytest.raises(ValueError):
        Viewport((10, 10), 0.0)
    with pytest.raises(ValueError):
        Viewport((10, 10), math.nan)
    viewport = Viewport((10, 10))
    with pytest.raises(ValueError):
        viewport.set_scale(math.inf)


def test_visible_tile_range_is_padded():
    viewport = Viewport((1024, 512), 1.0)
    assert viewport.visible_tile_range(512.0) == (-1, -1, 2, 1)
    assert viewport.visible_tile_range(512.0, padding=0) == (0, 0, 1, 0)


def test_visible_tile_range_follows_pan_and_resize():
    viewport = Viewport((512, 512), 2.0, offset=(-300.0, 700.0))
    # world extent is [-300, -44] x [700, 956]
    assert viewport.visible_tile_range(256.0, padding=0) == (-2, 2, -1, 3)
    assert viewport.visible_tile_range(256.0, (1024, 512), padding=0) == (-2, 2, 0, 3)
    assert viewport.size == (1024, 512)


def test_center_on_places_point_mid_screen():
    viewport = Viewport((800, 600), 2.0)
    viewport.center_on((1000.0, -500.0))
    assert viewport.world_to_screen(1000.0, -500.0) == pytest.approx((400.0, 300.0))
