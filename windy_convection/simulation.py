"""
LES of an ocean surface boundary layer driven by wind stress and surface
cooling in the presence of surface waves.

The waves enter through a steady Stokes drift uS(z) along x, following the
Craik-Leibovich formulation for the Lagrangian-mean velocity:
    dt(u) + ... = ... + dz(uS) * w
    dt(w) + ... = ... - dz(uS) * u
Subgrid fluxes use a constant eddy viscosity and diffusivity.

Usage (from this directory):
    mpiexec -n 4 python3 simulation.py

"""

import numpy as np
from mpi4py import MPI
import time
import pathlib

from dedalus import public as de
from dedalus.extras import flow_tools
from dedalus.tools import post
from dedalus.tools.parallel import Sync
from parameters import *
from ocean_les.forcing import steady_stokes_shear
from ocean_les.noise import surface_noise
from ocean_les.post import latest_set, unmerged_sets
from ocean_les.units import GiB, prettytime

import logging
logger = logging.getLogger(__name__)

# Boundary conditions, flux convention F = - κ dz(φ), positive upward:
#   b: top flux Qb, bottom gradient N2
#   c: top value 0, bottom value 1
#   u: top flux Qu, bottom free slip
#   v: free slip
#   w: no penetration

logger.info('Output prefix: %s' %prefix)
logger.info('Resolution: (%i, %i, %i), domain: (%g, %g, %g) m' %(Nx, Ny, Nz, Lx, Ly, Lz))
logger.info('Qb = %.2e m² s⁻³, Qu = %.2e m² s⁻², N² = %.2e s⁻²' %(Qb, Qu, N2))

# Output directory
data_path = pathlib.Path(data_directory).absolute()
with Sync() as sync:
    if sync.comm.rank == 0:
        data_path.mkdir(parents=True, exist_ok=True)

# Bases and domain
start_init_time = time.time()
x_basis = de.Fourier('x', Nx, interval=(0, Lx), dealias=3/2)
y_basis = de.Fourier('y', Ny, interval=(0, Ly), dealias=3/2)
z_basis = de.Chebyshev('z', Nz, interval=(-Lz, 0), dealias=3/2)
domain = de.Domain([x_basis, y_basis, z_basis], grid_dtype=np.float64, mesh=mesh)
x, y, z = domain.grids(scales=1)

# Stokes drift shear
uSz = domain.new_field(name='uSz')
uSz['g'] = steady_stokes_shear(z, wave_amplitude, k, g)

# Problem
problem = de.IVP(domain, variables=['p','b','c','u','v','w','bz','cz','uz','vz','wz'])
problem.parameters['Lx'] = Lx
problem.parameters['Ly'] = Ly
problem.parameters['Lz'] = Lz
problem.parameters['ν'] = ν
problem.parameters['κ'] = κ
problem.parameters['f'] = f
problem.parameters['N2'] = N2
problem.parameters['Qb'] = Qb
problem.parameters['Qu'] = Qu
problem.parameters['λc'] = c_relax_rate
problem.parameters['c_target'] = c_target
problem.parameters['uSz'] = uSz
problem.substitutions['Lap(A, Az)'] = "dx(dx(A)) + dy(dy(A)) + dz(Az)"
problem.substitutions['UdotGrad(A, Az)'] = "u*dx(A) + v*dy(A) + w*Az"
problem.substitutions['E'] = "(u*u + v*v + w*w) / 2"
problem.substitutions['ave(A)'] = "integ(A)/(Lx*Ly*Lz)"
problem.substitutions['havg(A)'] = "integ(A, 'x', 'y')/(Lx*Ly)"
problem.add_equation("dx(u) + dy(v) + wz = 0")
problem.add_equation("dt(b) - κ*Lap(b, bz) = - UdotGrad(b, bz)")
problem.add_equation("dt(c) - κ*Lap(c, cz) + λc*c = λc*c_target - UdotGrad(c, cz)")
problem.add_equation("dt(u) - ν*Lap(u, uz) + dx(p) - f*v = - UdotGrad(u, uz) + uSz*w")
problem.add_equation("dt(v) - ν*Lap(v, vz) + dy(p) + f*u = - UdotGrad(v, vz)")
problem.add_equation("dt(w) - ν*Lap(w, wz) + dz(p) - b   = - UdotGrad(w, wz) - uSz*u")
problem.add_equation("bz - dz(b) = 0")
problem.add_equation("cz - dz(c) = 0")
problem.add_equation("uz - dz(u) = 0")
problem.add_equation("vz - dz(v) = 0")
problem.add_equation("wz - dz(w) = 0")
problem.add_bc("left(bz) = N2")
problem.add_bc("right(bz) = - Qb / κ")
problem.add_bc("left(c) = 1")
problem.add_bc("right(c) = 0")
problem.add_bc("left(uz) = 0")
problem.add_bc("right(uz) = - Qu / ν")
problem.add_bc("left(vz) = 0")
problem.add_bc("right(vz) = 0")
problem.add_bc("left(w) = 0")
problem.add_bc("right(w) = 0", condition="(nx != 0) or (ny != 0)")
problem.add_bc("right(p) = 0", condition="(nx == 0) and (ny == 0)")

# Solver
solver = problem.build_solver(timestepper)
solver.stop_sim_time = stop_sim_time
solver.stop_wall_time = np.inf
solver.stop_iteration = np.inf
logger.info('Solver built')

# Initial conditions or restart
checkpoint_path = data_path.joinpath(prefix + '_checkpoint')
# Distributed checkpoints from a previous run must be merged before any handler opens
pending = MPI.COMM_WORLD.bcast(unmerged_sets(checkpoint_path) if MPI.COMM_WORLD.rank == 0 else None, root=0)
if pending:
    logger.info('Merging %i checkpoint sets in %s' %(len(pending), checkpoint_path))
    with Sync():
        post.merge_process_files(str(checkpoint_path), cleanup=False)
restart_file = latest_set(checkpoint_path)
if restart_file is None:
    b = solver.state['b']
    bz = solver.state['bz']
    c = solver.state['c']
    cz = solver.state['cz']
    noise = surface_noise(x, y, z, Lx, Ly, Lz, scale=noise_scale, seed=noise_seed)
    b.set_scales(1)
    b['g'] = N2 * z + noise_amp * N2 * Lz * noise
    b.differentiate('z', out=bz)
    c.set_scales(1)
    c['g'] = 1
    c.differentiate('z', out=cz)
    # Timestepping and output
    dt = initial_dt
    fh_mode = 'overwrite'
else:
    logger.info('Restarting from %s' %restart_file)
    write, dt = solver.load_state(str(restart_file), -1)
    fh_mode = 'append'

# Analysis
checkpoints = solver.evaluator.add_file_handler(str(checkpoint_path), sim_dt=checkpoints_sim_dt, max_writes=1, mode=fh_mode)
checkpoints.add_system(solver.state)
logger.info('Checkpoint size: %.3f GiB per write' %(Nx * Ny * Nz * len(problem.variables) * 8 / GiB))
fields = solver.evaluator.add_file_handler(str(data_path.joinpath(prefix + '_fields')), sim_dt=fields_sim_dt, max_writes=12, mode=fh_mode)
for field in ['u', 'v', 'w', 'b', 'c']:
    fields.add_task(field)
slices = solver.evaluator.add_file_handler(str(data_path.joinpath(prefix + '_slices')), sim_dt=slices_sim_dt, max_writes=50, mode=fh_mode)
for field in ['u', 'w', 'b', 'c']:
    slices.add_task(f"interp({field}, y=0)", name=f"{field}_xz")
    slices.add_task(f"interp({field}, z='right')", name=f"{field}_xy")
profiles = solver.evaluator.add_file_handler(str(data_path.joinpath(prefix + '_averages')), sim_dt=slices_sim_dt, max_writes=100, mode=fh_mode)
for field in ['u', 'v', 'b', 'c']:
    profiles.add_task(f"havg({field})", name=field)
profiles.add_task("havg(w*u)", name='wu')
profiles.add_task("havg(w*v)", name='wv')
profiles.add_task("havg(w*b)", name='wb')
profiles.add_task("ave(E)", name='<E>')

# CFL
CFL = flow_tools.CFL(solver, initial_dt=dt, cadence=10, safety=safety,
                     max_change=max_change, min_change=0.5, max_dt=max_dt, threshold=0.05)
CFL.add_velocities(('u', 'v', 'w'))

# Flow properties
flow = flow_tools.GlobalFlowProperty(solver, cadence=progress_cadence)
flow.add_property("sqrt(u*u + v*v)", name='|uh|')
flow.add_property("abs(w)", name='|w|')

# Main loop
end_init_time = time.time()
logger.info('Initialization time: %f' %(end_init_time-start_init_time))
start_run_time = time.time()
try:
    logger.info('Starting loop')
    while solver.proceed:
        dt = CFL.compute_dt()
        solver.step(dt)
        if (solver.iteration-1) % progress_cadence == 0:
            wmax = flow.max('|w|')
            if not np.isfinite(wmax):
                raise FloatingPointError('Non-finite vertical velocity at iteration %i' %solver.iteration)
            logger.info('i: %i, t: %s, dt: %s, max(|uh|) = %.1e m s⁻¹, max(|w|) = %.1e m s⁻¹, wall time: %s'
                        %(solver.iteration, prettytime(solver.sim_time), prettytime(dt),
                          flow.max('|uh|'), wmax, prettytime(time.time()-start_run_time)))
except Exception:
    logger.error('Exception raised, triggering end of main loop.')
    raise
finally:
    end_run_time = time.time()
    logger.info('Iterations: %i' %solver.iteration)
    logger.info('Sim end time: %s' %prettytime(solver.sim_time))
    logger.info('Run time: %.2f sec' %(end_run_time-start_run_time))
    logger.info('Run time: %f cpu-hr' %((end_run_time-start_run_time)/60/60*domain.dist.comm_cart.size))
