import numpy as np
import pytest

from starseed.core.rng import (
    Mulberry32,
    choice,
    hsl_to_rgb,
    hsl_to_rgb_array,
    mulberry32_step,
    rand_range,
    sample,
)


SEED_42_U32 = [
    2581720956,
    1925393290,
    3661312704,
    2876485805,
    750819978,
    2261697747,
    1173505300,
    2683257857,
    3717185310,
    2028586305,
]


def test_known_first_value_for_seed_one():
    assert Mulberry32(1).next() == pytest.approx(0.6270739405881613, abs=1e-15)


def test_seed_42_raw_sequence():
    rng = Mulberry32(42)
    assert [rng.next_u32() for _ in range(10)] == SEED_42_U32
    assert rng.draws == 10


def test_floats_are_raw_values_over_two_pow_32():
    rng = Mulberry32(42)
    for raw in SEED_42_U32:
        value = rng.next()
        assert 0.0 <= value < 1.0
        assert value == raw / 4294967296.0


def test_step_function_matches_stream():
    state = 42
    outputs = []
    for _ in range(5):
        value, state = mulberry32_step(state)
        outputs.append(value)
    assert outputs == SEED_42_U32[:5]


def test_seed_is_reduced_to_32_bits():
    assert Mulberry32(42 + 2**32).next_u32() == SEED_42_U32[0]
    assert Mulberry32(-1).seed == 0xFFFFFFFF


def test_fork_is_independent():
    rng = Mulberry32(7)
    rng.next()
    clone = rng.fork()
    expected = [rng.next() for _ in range(3)]
    assert [clone.next() for _ in range(3)] == expected
    # advancing the clone does not move the original
    clone.next()
    assert rng.draws == 4


def test_rand_range_and_choice():
    rng = Mulberry32(42)
    value = rand_range(rng, 10.0, 20.0)
    assert value == pytest.approx(10.0 + 10.0 * SEED_42_U32[0] / 4294967296.0)
    assert choice(Mulberry32(42), ["a", "b", "c", "d"]) == "c"  # int(0.601 * 4)
    with pytest.raises(ValueError):
        choice(Mulberry32(1), [])


def test_sample_returns_distinct_items():
    picked = sample(Mulberry32(3), list(range(10)), 4)
    assert len(picked) == 4
    assert len(set(picked)) == 4
    assert sample(Mulberry32(3), [1, 2], 5) == sample(Mulberry32(3), [1, 2], 2)


@pytest.mark.parametrize(
    "hsl, rgb",
    [
        ((0.0, 1.0, 0.5), (255, 0, 0)),
        ((120.0, 1.0, 0.5), (0, 255, 0)),
        ((240.0, 1.0, 0.5), (0, 0, 255)),
        ((360.0, 1.0, 0.5), (255, 0, 0)),
        ((0.0, 0.0, 1.0), (255, 255, 255)),
        ((200.0, 0.5, 0.0), (0, 0, 0)),
    ],
)
def test_hsl_to_rgb_reference_colours(hsl, rgb):
    assert hsl_to_rgb(*hsl) == rgb


def test_vectorised_hsl_matches_scalar():
    hues = np.array([0.0, 45.0, 110.0, 180.0, 250.0, 300.0, 359.0])
    sats = np.full_like(hues, 0.7)
    lights = np.linspace(0.2, 0.8, hues.size)
    rgb = hsl_to_rgb_array(hues, sats, lights)
    assert rgb.shape == (hues.size, 3)
    for i, hue in enumerate(hues):
        expected = hsl_to_rgb(hue, 0.7, lights[i])
        assert tuple(int(round(v)) for v in rgb[i]) == expected
