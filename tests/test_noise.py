import numpy as np
import pytest

from starseed.core.noise import (
    fbm,
    lattice_hash,
    period_cells,
    periodic_fbm,
    periodic_noise_2d,
    value_noise_2d,
)


def test_value_noise_hits_lattice_values():
    for seed in (0, 1, 99):
        assert value_noise_2d(3.0, 4.0, seed, 1.0) == pytest.approx(float(lattice_hash(3, 4, seed)))


def test_scalar_in_scalar_out():
    assert isinstance(fbm(10.0, 20.0, 5), float)
    values = fbm(np.arange(4.0), 0.0, 5)
    assert isinstance(values, np.ndarray)
    assert values.shape == (4,)


def test_fbm_range_and_determinism():
    x, y = np.meshgrid(np.linspace(-500, 500, 40), np.linspace(-500, 500, 40))
    first = fbm(x, y, 1234, 0.01, 5)
    second = fbm(x, y, 1234, 0.01, 5)
    assert np.array_equal(first, second)
    assert first.min() >= 0.0
    assert first.max() <= 1.0


def test_evaluation_order_does_not_matter():
    xs = np.linspace(0.0, 300.0, 50)
    batch = value_noise_2d(xs, 7.0, 3, 0.05)
    single = [value_noise_2d(x, 7.0, 3, 0.05) for x in xs[::-1]][::-1]
    assert np.allclose(batch, single)


def test_seeds_change_the_field():
    xs = np.linspace(0.0, 300.0, 50)
    assert not np.allclose(fbm(xs, 1.0, 1), fbm(xs, 1.0, 2))


@pytest.mark.parametrize("scale", [0.0, -0.5])
def test_non_positive_scale_raises(scale):
    with pytest.raises(ValueError):
        value_noise_2d(1.0, 1.0, 0, scale)
    with pytest.raises(ValueError):
        fbm(1.0, 1.0, 0, scale)
    with pytest.raises(ValueError):
        periodic_fbm(1.0, 1.0, 0, scale, 2, 100.0)


def test_zero_octaves_raises():
    with pytest.raises(ValueError):
        fbm(1.0, 1.0, 0, 0.01, 0)
    with pytest.raises(ValueError):
        periodic_fbm(1.0, 1.0, 0, 0.01, 0, 100.0)


def test_period_is_at_least_one_cell():
    assert period_cells(0.5, 0.01) == 1
    assert period_cells(256.0, 0.01) == 2
    with pytest.raises(ValueError):
        period_cells(0.0, 0.01)


def test_periodic_noise_repeats_exactly_on_lattice():
    ys = np.linspace(0.0, 200.0, 11)
    left = periodic_noise_2d(0.0, ys, 8, 0.05, 120.0)
    right = periodic_noise_2d(240.0, ys, 8, 0.05, 120.0)
    assert np.allclose(left, right)


def test_periodic_fbm_seam_over_many_seeds():
    ys = np.linspace(0.0, 512.0, 33)
    for seed in range(50):
        for period in (256.0, 100.0, 37.5):
            left = periodic_fbm(0.0, ys, seed * 7919, 0.006, 5, period)
            right = periodic_fbm(period, ys, seed * 7919, 0.006, 5, period)
            assert np.max(np.abs(left - right)) < 1e-6


def test_degenerate_period_still_seamless():
    # a period shorter than one lattice cell collapses to a single cell
    ys = np.linspace(0.0, 50.0, 5)
    assert np.allclose(periodic_fbm(0.0, ys, 3, 0.01, 3, 10.0), periodic_fbm(10.0, ys, 3, 0.01, 3, 10.0))
