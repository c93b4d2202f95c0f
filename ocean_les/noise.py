"""
Reproducible random perturbations for initial conditions.

Random functions are built as products of 1D random Fourier series with unit
periodicity, so they can be evaluated on any direct-product grid (including
the local pieces of a distributed Dedalus grid) and give the same values on
every process for a given seed.

"""

import numpy as np
from scipy.linalg.blas import daxpy


def rand_fourier_series_1d(x, kmax, density=1, rand=None):
    """
    Parameters
    ----------
    x : array-like
        Array of positions (arbitrary dimension), unit periodicity
    kmax : int
        Maximum wavenumber (integer form)
    density : float (default: 1)
        Fraction of modes up to cutoff to populate
    rand : np.random.RandomState or None (default: None)
        Random state, needed for determinism

    Returns
    -------
    f : array-like
        Values of the random function F(x)
    """
    if rand is None:
        rand = np.random.RandomState()
    x = np.asarray(x, dtype=np.float64)
    shape = x.shape
    x = x.ravel()
    flags = rand.rand(kmax+1)
    amplitudes = rand.randn(kmax+1, 2)
    f = np.zeros_like(x)
    kx = np.zeros_like(x)
    g = np.zeros_like(x)
    n = 0
    for k, (flag, (a, b)) in enumerate(zip(flags, amplitudes)):
        if flag >= density:
            continue
        np.multiply(2*np.pi*k, x, out=kx)
        np.cos(kx, out=g)
        f = daxpy(g, f, a=a)
        np.sin(kx, out=g)
        f = daxpy(g, f, a=b)
        n += 1
    f = f.reshape(shape)
    if n == 0:
        return f
    return f / n**0.5


def rand_fourier_series_3d_lowrank(x, y, z, kmax, density=1, rank=1, rand=None):
    """
    Parameters
    ----------
    x, y, z : array-like
        Broadcastable arrays of positions, unit periodicity
    kmax : int
        Maximum wavenumber (integer form)
    density : float (default: 1)
        Fraction of modes up to cutoff to populate
    rank : int (default: 1)
        Number of separable terms summed together
    rand : np.random.RandomState or None (default: None)
        Random state, needed for determinism

    Returns
    -------
    f : array-like
        Values of the random function F(x,y,z)
    """
    if rank < 1:
        raise ValueError("rank must be positive")
    if rand is None:
        rand = np.random.RandomState()
    f = 0
    for r in range(rank):
        fx = rand_fourier_series_1d(x, kmax, density, rand)
        fy = rand_fourier_series_1d(y, kmax, density, rand)
        fz = rand_fourier_series_1d(z, kmax, density, rand)
        f = f + fx * fy * fz
    return f / rank**0.5


def surface_noise(x, y, z, Lx, Ly, Lz, scale, kmax=16, rank=4, seed=None):
    """
    Random noise decaying away from the surface z = 0.

    Parameters
    ----------
    x, y, z : array-like
        Local grids (broadcastable)
    Lx, Ly, Lz : float
        Domain extents used to normalize the coordinates
    scale : float
        E-folding depth of the noise envelope
    kmax : int (default: 16)
        Maximum wavenumber per direction
    rank : int (default: 4)
        Rank of the random function
    seed : int or None (default: None)
        Seed shared by every process
    """
    rand = np.random.RandomState(seed)
    f = rand_fourier_series_3d_lowrank(x/Lx, y/Ly, z/Lz, kmax=kmax, rank=rank, rand=rand)
    return f * np.exp(z / scale)
