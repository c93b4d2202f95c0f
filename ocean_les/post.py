"""
Reading Dedalus analysis sets back and preparing them for plotting.

Analysis handlers write one directory per handler, holding merged set files
named like `<handler>_s<N>.h5`. Each set file stores task data under
`tasks/<name>` with the write index as the first axis, and the write times
under `scales/sim_time`.

"""

import logging
import pathlib
import re

import h5py
import numpy as np

logger = logging.getLogger(__name__)

SET_PATTERN = re.compile(r"_s(\d+)\.h5$")


def set_number(path):
    """Integer set index of a merged set file."""
    match = SET_PATTERN.search(pathlib.Path(path).name)
    if match is None:
        raise ValueError("Not a merged analysis set: %s" % path)
    return int(match.group(1))


def sorted_sets(directory):
    """Merged set files in `directory`, ordered by set number."""
    directory = pathlib.Path(directory)
    paths = [p for p in directory.glob("*_s*.h5") if SET_PATTERN.search(p.name)]
    if not paths:
        raise FileNotFoundError("No merged analysis sets in %s" % directory)
    return sorted(paths, key=set_number)


def unmerged_sets(directory):
    """Per-process set directories in `directory` that have no merged set file."""
    directory = pathlib.Path(directory)
    if not directory.is_dir():
        return []
    pending = []
    for path in directory.iterdir():
        if path.is_dir() and re.search(r"_s\d+$", path.name):
            if not path.with_name(path.name + '.h5').exists():
                pending.append(path)
    return sorted(pending, key=lambda p: set_number(p.name + '.h5'))


def latest_set(directory):
    """Last merged set in `directory`, or None when nothing has been merged."""
    if not pathlib.Path(directory).is_dir():
        return None
    try:
        return sorted_sets(directory)[-1]
    except FileNotFoundError:
        return None


def load_tasks(directory, tasks):
    """
    Concatenate tasks across all sets of an analysis handler.

    Parameters
    ----------
    directory : str or pathlib.Path
        Handler output directory
    tasks : list of str
        Task names to load

    Returns
    -------
    data : dict
        Task arrays keyed by name, plus 'sim_time' and 'write_number'
    """
    pieces = {name: [] for name in tasks}
    pieces['sim_time'] = []
    pieces['write_number'] = []
    for path in sorted_sets(directory):
        logger.debug('Reading %s' %path)
        with h5py.File(path, mode='r') as file:
            for name in tasks:
                if name not in file['tasks']:
                    raise KeyError("Task '%s' not found in %s" % (name, path))
                pieces[name].append(file['tasks'][name][()])
            pieces['sim_time'].append(file['scales/sim_time'][()])
            pieces['write_number'].append(file['scales/write_number'][()])
    return {name: np.concatenate(arrays) for name, arrays in pieces.items()}


def load_grid(path, axis, scale=1):
    """Grid points of `axis` stored in a set file."""
    with h5py.File(path, mode='r') as file:
        return file['scales'][axis][str(float(scale))][()]


def divergent_levels(c, clim, nlevels=31):
    """Symmetric contour limits and levels, widened to cover the data extremes."""
    levels = np.linspace(-clim, clim, nlevels)
    cmax = np.max(np.abs(c))
    if clim < cmax:
        levels = np.concatenate([[-cmax], levels, [cmax]])
    return (-clim, clim), levels


def sequential_levels(c, clims, nlevels=31):
    """Contour limits and levels between `clims`, widened to cover the data range."""
    levels = np.linspace(clims[0], clims[1], nlevels)
    cmin = np.min(c)
    cmax = np.max(c)
    if cmin < clims[0]:
        levels = np.concatenate([[cmin], levels])
    if cmax > clims[1]:
        levels = np.concatenate([levels, [cmax]])
    return tuple(clims), levels


def normalize(profile):
    """Scale a profile by its maximum magnitude."""
    profile = np.asarray(profile, dtype=np.float64)
    scale = np.max(np.abs(profile))
    if scale == 0:
        return profile.copy()
    return profile / scale


def effective_diffusivity(wP, Pz):
    """Flux-gradient diffusivity -<wP>/<dz P>, NaN where the gradient vanishes."""
    wP = np.asarray(wP, dtype=np.float64)
    Pz = np.asarray(Pz, dtype=np.float64)
    kappa = np.full(np.broadcast(wP, Pz).shape, np.nan)
    nonzero = np.broadcast_to(Pz != 0, kappa.shape)
    np.divide(-wP, Pz, out=kappa, where=nonzero)
    return kappa
