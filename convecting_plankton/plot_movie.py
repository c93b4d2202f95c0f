"""
Make a movie about plankton from the convecting plankton analysis sets.

Process files must be merged first (see merge.py in the repository root).

Usage:
    plot_movie.py [--data=<dir>] [--output=<file>] [--fps=<n>]

Options:
    --data=<dir>     Directory holding the analysis handlers [default: .]
    --output=<file>  Movie file, .gif or .mp4 [default: ./convecting_plankton.gif]
    --fps=<n>        Frames per second [default: 8]

"""

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib import animation
from matplotlib.gridspec import GridSpec
plt.ioff()

from parameters import *
from ocean_les.forcing import buoyancy_flux
from ocean_les.post import (load_tasks, load_grid, sorted_sets, divergent_levels,
                            sequential_levels, normalize, effective_diffusivity)
from ocean_les.units import prettytime

import logging
logger = logging.getLogger(__name__)

# Plot settings
w_lim = 1e-3
p_clims = (0.9, 2)
κ_lims = (0, 1e-1)


def load_run(data_path):
    """Load slices, horizontal averages and grids, trimmed to common writes."""
    slices_path = data_path.joinpath(prefix + '_slices')
    averages_path = data_path.joinpath(prefix + '_averages')
    slices = load_tasks(slices_path, ['w', 'P'])
    averages = load_tasks(averages_path, ['P', 'wP', 'Pz'])
    first_set = sorted_sets(slices_path)[0]
    x = load_grid(first_set, 'x')
    z = load_grid(first_set, 'z')
    nframes = min(len(slices['sim_time']), len(averages['sim_time']))
    if nframes == 0:
        raise ValueError("No writes found in %s" % data_path)
    return slices, averages, x, z, nframes


def plot_frame(axes, i, slices, averages, x, z, times, flux):
    """Draw frame `i` onto the five panel axes."""
    w_ax, p_ax, profile_ax, κ_ax, flux_ax = axes
    for ax in axes:
        ax.clear()
    w = slices['w'][i][:, 0, :]
    p = slices['P'][i][:, 0, :]
    P = averages['P'][i][0, 0, :] / P0
    wP = averages['wP'][i][0, 0, :]
    Pz = averages['Pz'][i][0, 0, :]
    κ_eff = effective_diffusivity(wP, Pz)

    w_lims, w_levels = divergent_levels(w, w_lim)
    p_lims, p_levels = sequential_levels(p, p_clims)
    t = times[i]
    # Contours in the y = 0 plane
    w_ax.contourf(x, z, w.T, levels=w_levels, vmin=w_lims[0], vmax=w_lims[1], cmap='RdBu_r')
    w_ax.set_title("w(y = 0 m, t = %-16s) (m s⁻¹)" % prettytime(t))
    p_ax.contourf(x, z, p.T, levels=p_levels, vmin=p_lims[0], vmax=p_lims[1], cmap='YlGn')
    p_ax.set_title("P(y = 0 m, t = %-16s) (μM)" % prettytime(t))
    for ax in (w_ax, p_ax):
        ax.set_xlim(0, Lh)
        ax.set_ylim(-Lz, 0)
        ax.set_aspect('equal')
        ax.set_xlabel("x (m)")
        ax.set_ylabel("z (m)")
    # Normalized profiles
    profile_ax.plot(P, z, linewidth=2, label="⟨P⟩ / P₀")
    profile_ax.plot(normalize(wP), z, linewidth=2, label="⟨wP⟩ / max|wP|")
    profile_ax.plot(normalize(Pz), z, linewidth=2, label="⟨∂z P⟩ / max|∂z P|")
    profile_ax.set_xlabel("Normalized plankton statistics")
    profile_ax.set_ylabel("z (m)")
    profile_ax.legend(loc='lower center')
    # Effective diffusivity
    κ_ax.plot(κ_eff, z, linewidth=2)
    κ_ax.set_xlim(*κ_lims)
    κ_ax.set_xlabel("κᵉᶠᶠ (m² s⁻¹)")
    κ_ax.set_ylabel("z (m)")
    # Buoyancy flux history
    flux_ax.plot(times / day, flux, linewidth=1, label="Buoyancy flux time series")
    flux_ax.scatter(times[i:i+1] / day, flux[i:i+1], marker='o', color='r', label="Current buoyancy flux")
    flux_ax.set_ylim(0, 1.1 * buoyancy_flux_parameters['initial_buoyancy_flux'])
    flux_ax.set_xlabel("Time (days)")
    flux_ax.set_ylabel("Buoyancy flux (m² s⁻³)")
    flux_ax.legend(loc='lower left')


def main(data_path, output_path, fps):
    """Render all writes to a movie."""
    slices, averages, x, z, nframes = load_run(data_path)
    times = slices['sim_time'][:nframes]
    flux = buoyancy_flux(times, **buoyancy_flux_parameters)
    # Layout:
    #   [ w contours ]  [ profiles ] [ κ ]
    #   [ P contours ]  [    flux        ]
    fig = plt.figure(figsize=(16, 7))
    gs = GridSpec(2, 3, figure=fig, width_ratios=[2, 1, 1])
    axes = [fig.add_subplot(gs[0, 0]),
            fig.add_subplot(gs[1, 0]),
            fig.add_subplot(gs[0, 1]),
            fig.add_subplot(gs[0, 2]),
            fig.add_subplot(gs[1, 1:])]

    def animate(i):
        logger.info('Plotting frame %i from write %i...' %(i, slices['write_number'][i]))
        plot_frame(axes, i, slices, averages, x, z, times, flux)
        fig.tight_layout()
        return axes

    logger.info('Making a movie about plankton...')
    anim = animation.FuncAnimation(fig, animate, frames=nframes, blit=False)
    if output_path.suffix == '.gif':
        writer = animation.PillowWriter(fps=fps)
    else:
        writer = animation.FFMpegWriter(fps=fps)
    try:
        anim.save(str(output_path), writer=writer)
    finally:
        plt.close(fig)
    logger.info('Saved %s' %output_path)


if __name__ == "__main__":

    import pathlib
    from docopt import docopt
    from dedalus.tools import logging

    args = docopt(__doc__)

    data_path = pathlib.Path(args['--data']).absolute()
    output_path = pathlib.Path(args['--output']).absolute()
    main(data_path, output_path, int(args['--fps']))
