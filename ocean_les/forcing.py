"""
Boundary fluxes, source terms and masks for the boundary-layer experiments.

Everything here is a pointwise function of position and/or time that accepts
scalars or numpy arrays, so the same code fills Dedalus grid data and builds
the time series shown in the plots.

"""

import numpy as np


def delayed_ramp_down(t, start, shutoff):
    """
    Unit signal that ramps linearly to zero.

    Parameters
    ----------
    t : float or array-like
        Time
    start : float
        Time at which the ramp begins
    shutoff : float
        Time at which the signal reaches zero

    Returns
    -------
    r : float or array-like
        1 before `start`, (shutoff - t) / (shutoff - start) until `shutoff`,
        and 0 afterwards. A window with shutoff <= start is a step at `start`.
    """
    t = np.asarray(t, dtype=np.float64)
    if shutoff > start:
        ramp = (shutoff - t) / (shutoff - start)
    else:
        ramp = np.zeros_like(t)
    r = np.where(t < start, 1.0, np.where(t < shutoff, ramp, 0.0))
    if r.ndim == 0:
        return float(r)
    return r


def buoyancy_flux(t, initial_buoyancy_flux, start_ramp_down, shut_off):
    """Surface buoyancy flux (m² s⁻³, positive upward) with a delayed ramp down."""
    return initial_buoyancy_flux * delayed_ramp_down(t, start_ramp_down, shut_off)


def heat_to_buoyancy_flux(Qh, rho, cp, alpha, g):
    """Convert a surface heat loss (W m⁻²) to a buoyancy flux (m² s⁻³)."""
    return alpha * g * Qh / (rho * cp)


def growing_and_grazing(z, P, h, mu0, m):
    """
    Net plankton source: light-limited growth minus linear mortality.

    Parameters
    ----------
    z : float or array-like
        Height (negative below the surface)
    P : float or array-like
        Plankton concentration
    h : float
        Sunlight attenuation length scale
    mu0 : float
        Growth rate at the surface
    m : float
        Mortality rate
    """
    return (mu0 * np.exp(z / h) - m) * P


def steady_stokes_drift(z, a, k, g=9.81):
    """Stokes drift of a deep-water monochromatic wave with amplitude a and wavenumber k."""
    return (a * k)**2 * np.sqrt(g * k) / k * np.exp(2 * k * z)


def steady_stokes_shear(z, a, k, g=9.81):
    """Vertical derivative of `steady_stokes_drift`."""
    return 2 * (a * k)**2 * np.sqrt(g * k) * np.exp(2 * k * z)


def gaussian_mask(z, center, width):
    """Gaussian sponge mask, equal to one at `center`."""
    return np.exp(-(z - center)**2 / (2 * width**2))


def mixed_layer_buoyancy(z, N2, mixed_layer_depth):
    """Uniform stratification N2 below a well-mixed surface layer."""
    return N2 * np.minimum(z, -mixed_layer_depth)
