import pytest

from starseed.core.config import PickCfg, WorldCfg
from starseed.core.world import Star, TileCache
from starseed.render.camera import Viewport
from starseed.render.picking import Gesture, PointerTracker, StarPicker, nearest_star


def _star(x, y, seed=1, id=0):
    return Star(id=id, x=x, y=y, seed=seed)


def test_click_within_threshold_selects_star():
    viewport = Viewport((800, 600), 1.0)
    star = _star(200.0, 150.0)
    hit = nearest_star([star], viewport, (205.0, 150.0), 8.0)
    assert hit is not None
    assert hit.star is star
    assert hit.distance == pytest.approx(5.0)


def test_click_outside_threshold_selects_nothing():
    viewport = Viewport((800, 600), 1.0)
    star = _star(200.0, 150.0)
    assert nearest_star([star], viewport, (210.0, 150.0), 8.0) is None


def test_threshold_is_measured_in_screen_pixels():
    viewport = Viewport((800, 600), 4.0)
    star = _star(50.0, 50.0)
    # 2 world units apart is 8 screen pixels at scale 4
    assert nearest_star([star], viewport, (208.0, 200.0), 8.0) is not None
    assert nearest_star([star], viewport, (212.0, 200.0), 8.0) is None


def test_nearest_of_several_wins():
    viewport = Viewport((800, 600), 1.0)
    far = _star(100.0, 100.0, id=0)
    near = _star(104.0, 100.0, id=1)
    hit = nearest_star([far, near], viewport, (105.0, 100.0), 8.0)
    assert hit.star is near


def _picker():
    cfg = WorldCfg(seed=2024, stars_per_tile=1)
    tiles = TileCache(cfg)
    viewport = Viewport((1200, 800), 1.0)
    star = tiles.tile(0, 0)[0]
    return StarPicker(tiles, viewport, PickCfg()), viewport, star


def test_picker_scenario_on_tiled_world():
    picker, _, star = _picker()
    assert picker.pick((star.x + 5.0, star.y)) == star
    assert picker.pick((star.x, star.y + 10.0)) is None


def test_hover_uses_larger_threshold():
    picker, _, star = _picker()
    assert picker.update_hover((star.x + 12.0, star.y)) == star
    assert picker.highlighted == star
    picker.clear_highlight()
    assert picker.highlighted is None


def test_highlighted_star_wins_click_anywhere():
    picker, _, star = _picker()
    picker.update_hover((star.x, star.y + 3.0))
    assert picker.pick((star.x + 300.0, star.y + 300.0)) == star


def test_candidates_follow_viewport():
    picker, viewport, star = _picker()
    viewport.set_offset((star.x - 40.0, star.y - 60.0))
    assert star in picker.candidates((40.0, 60.0))
    assert picker.pick((43.0, 60.0)) == star


def test_pointer_tracker_click():
    tracker = PointerTracker(PickCfg(drag_threshold=5.0))
    tracker.down((10.0, 10.0))
    assert tracker.move((12.0, 10.0)) == (0.0, 0.0)
    assert tracker.up((10.0, 10.0)) is Gesture.CLICK
    assert not tracker.pressed


def test_pointer_tracker_drag_reports_pan_deltas():
    tracker = PointerTracker(PickCfg(drag_threshold=5.0))
    tracker.down((0.0, 0.0))
    assert tracker.move((3.0, 0.0)) == (0.0, 0.0)
    # crossing the threshold catches up from the anchor
    assert tracker.move((6.0, 0.0)) == (6.0, 0.0)
    assert tracker.dragging
    assert tracker.move((8.0, 1.0)) == (2.0, 1.0)
    assert tracker.up((8.0, 1.0)) is Gesture.DRAG


def test_return_trip_counts_as_drag():
    tracker = PointerTracker(PickCfg(drag_threshold=5.0))
    tracker.down((100.0, 100.0))
    tracker.move((110.0, 100.0))
    assert tracker.up((100.0, 100.0)) is Gesture.DRAG
    assert tracker.travel == pytest.approx(20.0)


def test_up_without_down_is_ignored():
    assert PointerTracker().up((0.0, 0.0)) is Gesture.NONE
