import pygame
import pytest

from starseed.core.planet import generate_planet, generate_planet_facts, spin_params
from starseed.render.assets import TextCache, get_text_surface, load_font
from starseed.render.ui import Button, ButtonStyle, build_text_panel, planet_info_lines


@pytest.fixture
def font():
    return load_font(("NoSuchFontFamily",), 14)


def test_load_font_falls_back_to_default(font):
    assert isinstance(font, pygame.font.Font)


def test_text_surfaces_are_cached(font):
    first = get_text_surface(font, "Nova-123", (255, 255, 255))
    assert get_text_surface(font, "Nova-123", (255, 255, 255)) is first


def test_text_panel_sizes_to_content(font):
    lines = [("short", (255, 255, 255)), ("a somewhat longer line", (200, 200, 200))]
    panel = build_text_panel(font, lines, background_color=(0, 0, 0, 200), padding=(10, 8))
    assert panel.get_width() == font.size("a somewhat longer line")[0] + 20
    assert panel.get_height() == font.get_linesize() * 2 + 16
    with pytest.raises(ValueError):
        build_text_panel(font, [], background_color=(0, 0, 0))


def test_planet_info_lines_describe_the_planet():
    params = generate_planet(42)
    facts = generate_planet_facts(42, params)
    lines = planet_info_lines(facts, params, spin_params(42), text_color=(1, 1, 1), hint_color=(2, 2, 2))
    texts = [text for text, _ in lines]
    assert texts[0] == facts.name
    assert "Type: Gas giant" in texts
    assert "Rings: no" in texts
    assert "Spin: prograde" in texts


def test_button_click_runs_callback(font):
    clicks = []
    style = ButtonStyle(fill=(0, 0, 0), hover_fill=(9, 9, 9), label_color=(255, 255, 255), corner_radius=4)
    button = Button((10, 10, 30, 30), "+", lambda: clicks.append(1), style=style)
    assert button.handle_click((20, 20))
    assert not button.handle_click((100, 100))
    assert clicks == [1]
    surface = pygame.Surface((60, 60))
    button.draw(surface, font, (20, 20))
    assert tuple(surface.get_at((25, 12)))[:3] == (9, 9, 9)


def test_fonts_are_loaded_once():
    assert load_font(("NoSuchFontFamily",), 15) is load_font(("NoSuchFontFamily",), 15)


def test_text_cache_evicts_oldest(font):
    cache = TextCache(max_size=2)
    first = cache.render(font, "a", (255, 255, 255))
    cache.render(font, "b", (255, 255, 255))
    cache.render(font, "c", (255, 255, 255))
    assert len(cache) == 2
    assert cache.render(font, "a", (255, 255, 255)) is not first
    with pytest.raises(ValueError):
        TextCache(max_size=0)


def test_button_outline_uses_its_own_colour(font):
    style = ButtonStyle(fill=(0, 0, 0), hover_fill=(9, 9, 9), label_color=(255, 255, 255), outline=(200, 0, 0))
    button = Button((0, 0, 40, 40), "-", lambda: None, style=style)
    surface = pygame.Surface((40, 40))
    button.draw(surface, font, (100, 100))
    assert tuple(surface.get_at((20, 0)))[:3] == (200, 0, 0)
    assert tuple(surface.get_at((20, 5)))[:3] == (0, 0, 0)
    assert style.fill_for(True) == (9, 9, 9)
