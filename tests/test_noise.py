import numpy as np
import pytest

from ocean_les.noise import rand_fourier_series_1d, rand_fourier_series_3d_lowrank, surface_noise


def grids(n=16):
    x = np.linspace(0, 1, n, endpoint=False)[:, None, None]
    y = np.linspace(0, 1, n, endpoint=False)[None, :, None]
    z = np.linspace(-1, 0, n)[None, None, :]
    return x, y, z


def test_1d_series_is_periodic_and_reproducible():
    x = np.linspace(0, 1, 33)
    f1 = rand_fourier_series_1d(x, kmax=8, rand=np.random.RandomState(1))
    f2 = rand_fourier_series_1d(x, kmax=8, rand=np.random.RandomState(1))
    np.testing.assert_array_equal(f1, f2)
    assert f1[0] == pytest.approx(f1[-1], abs=1e-10)


def test_1d_series_keeps_shape():
    x = np.linspace(0, 1, 10).reshape(2, 5)
    f = rand_fourier_series_1d(x, kmax=4, rand=np.random.RandomState(0))
    assert f.shape == (2, 5)


def test_empty_density_gives_zero():
    x = np.linspace(0, 1, 10)
    f = rand_fourier_series_1d(x, kmax=4, density=0, rand=np.random.RandomState(0))
    np.testing.assert_array_equal(f, 0)


def test_lowrank_broadcasts_over_grids():
    x, y, z = grids()
    f = rand_fourier_series_3d_lowrank(x, y, z, kmax=4, rank=2, rand=np.random.RandomState(3))
    assert f.shape == (16, 16, 16)
    assert np.all(np.isfinite(f))
    assert f.std() > 0


def test_lowrank_rejects_zero_rank():
    x, y, z = grids()
    with pytest.raises(ValueError):
        rand_fourier_series_3d_lowrank(x, y, z, kmax=4, rank=0)


def test_surface_noise_is_seeded_and_decays_with_depth():
    x, y, z = grids()
    Lz = 64
    z = Lz * z
    n1 = surface_noise(x, y, z, 1, 1, Lz, scale=8, kmax=4, seed=7)
    n2 = surface_noise(x, y, z, 1, 1, Lz, scale=8, kmax=4, seed=7)
    np.testing.assert_array_equal(n1, n2)
    raw = rand_fourier_series_3d_lowrank(x, y, z/Lz, kmax=4, rank=4, rand=np.random.RandomState(7))
    np.testing.assert_allclose(n1, raw * np.exp(z / 8))


def test_surface_noise_matches_local_pieces():
    # Same values when evaluated on a subset of the grid, as on one MPI process
    x, y, z = grids()
    full = surface_noise(x, y, z, 1, 1, 1, scale=0.25, kmax=4, seed=11)
    local = surface_noise(x[4:8], y, z, 1, 1, 1, scale=0.25, kmax=4, seed=11)
    np.testing.assert_allclose(local, full[4:8])
