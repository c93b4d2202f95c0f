"""
Plot vertical and surface slices from merged slice sets.

Usage:
    plot_slices.py <files>... [--output=<dir>]

Options:
    --output=<dir>  Output directory [default: ./frames]

"""

import h5py
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
plt.ioff()

from dedalus.extras import plot_tools
from ocean_les.units import prettytime


def main(filename, start, count, output):
    plot_slices(filename, start, count, output)


def plot_slices(filename, start, count, output):
    """Save plot of vertical (y=0) and surface slices for given range of analysis writes."""
    # Plot settings
    fields = ['u', 'w', 'b', 'c']
    planes = {'xz': ((1, 3), lambda index: (index, slice(None), 0, slice(None))),
              'xy': ((1, 2), lambda index: (index, slice(None), slice(None), 0))}
    title_func = lambda sim_time: 't = {:s}'.format(prettytime(sim_time))
    savename_func = lambda write: 'slices_{:06}.png'.format(write)
    # Layout
    nrows = len(planes)
    ncols = len(fields)
    image = plot_tools.Box(2, 1)
    pad = plot_tools.Frame(0.2, 0.2, 0.1, 0.1)
    margin = plot_tools.Frame(0.3, 0.2, 0.1, 0.1)
    scale = 2
    dpi = 100
    # Create multifigure
    mfig = plot_tools.MultiFigure(nrows, ncols, image, pad, margin, scale)
    fig = mfig.figure
    # Plot writes
    with h5py.File(filename, mode='r') as file:
        for index in range(start, start+count):
            for i, (plane, (image_axes, data_slices)) in enumerate(planes.items()):
                for j, field in enumerate(fields):
                    task = '{}_{}'.format(field, plane)
                    dset = file['tasks'][task]
                    axes = mfig.add_axes(i, j, [0, 0, 1, 1])
                    plot_tools.plot_bot(dset, image_axes, data_slices(index), axes=axes, title=task, even_scale=(field in ['u', 'w']))
            # Add time title
            title = title_func(file['scales/sim_time'][index])
            title_height = 1 - 0.5 * mfig.margin.top / mfig.fig.y
            fig.suptitle(title, x=0.48, y=title_height, ha='left')
            # Save figure
            savename = savename_func(file['scales/write_number'][index])
            savepath = output.joinpath(savename)
            fig.savefig(str(savepath), dpi=dpi)
            fig.clear()
    plt.close(fig)


if __name__ == "__main__":

    import pathlib
    from docopt import docopt
    from dedalus.tools import logging
    from dedalus.tools import post
    from dedalus.tools.parallel import Sync

    args = docopt(__doc__)

    output_path = pathlib.Path(args['--output']).absolute()
    # Create output directory if needed
    with Sync() as sync:
        if sync.comm.rank == 0:
            if not output_path.exists():
                output_path.mkdir()
    post.visit_writes(args['<files>'], main, output=output_path)
