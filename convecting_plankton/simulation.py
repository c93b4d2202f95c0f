"""
Plankton in a convective boundary layer.

Surface cooling drives convection that mixes a plankton population whose
growth is limited by sunlight decaying with depth. The cooling ramps down
after one day and shuts off after two. A Gaussian sponge at the bottom
absorbs internal waves, relaxing velocities to rest and buoyancy to the
initial stratification.

Usage (from this directory):
    mpiexec -n 4 python3 simulation.py
    python3 plot_movie.py

"""

import numpy as np
from mpi4py import MPI
import time

from dedalus import public as de
from dedalus.extras import flow_tools
from parameters import *
from ocean_les.forcing import buoyancy_flux, gaussian_mask, growing_and_grazing, mixed_layer_buoyancy
from ocean_les.noise import surface_noise
from ocean_les.units import prettytime

import logging
logger = logging.getLogger(__name__)

logger.info(""" *** Parameters ***

    Resolution:                        (%i, %i, %i)
    Domain:                            (%g, %g, %g) m
    Initial heat flux:                 %g W m⁻²
    Initial buoyancy flux:             %.2e m² s⁻³
    Initial mixed layer depth:         %g m
    Cooling starts ramping down:       %s
    Cooling shuts off:                 %s
    Simulation stop time:              %s
    Plankton surface growth rate:      %g day⁻¹
    Plankton mortality rate:           %g day⁻¹
    Sunlight attenuation length scale: %g m
""" %(Nh, Nh, Nz, Lh, Lh, Lz, Qh,
      buoyancy_flux_parameters['initial_buoyancy_flux'],
      initial_mixed_layer_depth,
      prettytime(buoyancy_flux_parameters['start_ramp_down']),
      prettytime(buoyancy_flux_parameters['shut_off']),
      prettytime(stop_sim_time),
      day * planktonic_parameters['surface_growth_rate'],
      day * planktonic_parameters['mortality_rate'],
      planktonic_parameters['sunlight_attenuation_scale']))

# Bases and domain
start_init_time = time.time()
x_basis = de.Fourier('x', Nh, interval=(0, Lh), dealias=3/2)
y_basis = de.Fourier('y', Nh, interval=(0, Lh), dealias=3/2)
z_basis = de.Chebyshev('z', Nz, interval=(-Lz, 0), dealias=3/2)
domain = de.Domain([x_basis, y_basis, z_basis], grid_dtype=np.float64, mesh=mesh)
x, y, z = domain.grids(scales=1)

# Forcing
def surface_buoyancy_flux(solver):
    return buoyancy_flux(solver.sim_time, **buoyancy_flux_parameters)

Qb = de.operators.GeneralFunction(domain, 'g', surface_buoyancy_flux, args=[])

# Net growth rate, so that the plankton source is growth * P
growth = domain.new_field(name='growth')
growth['g'] = growing_and_grazing(z, 1,
                                  planktonic_parameters['sunlight_attenuation_scale'],
                                  planktonic_parameters['surface_growth_rate'],
                                  planktonic_parameters['mortality_rate'])
# Sponge layer
mask = domain.new_field(name='mask')
mask['g'] = gaussian_mask(z, sponge_center, sponge_width)
b_target = domain.new_field(name='b_target')
b_target['g'] = N2 * z

# Problem
problem = de.IVP(domain, variables=['p','b','P','u','v','w','bz','Pz','uz','vz','wz'])
problem.parameters['L'] = Lh
problem.parameters['H'] = Lz
problem.parameters['ν'] = ν
problem.parameters['κ'] = κ
problem.parameters['f'] = f
problem.parameters['N2'] = N2
problem.parameters['σ'] = sponge_rate
problem.parameters['Qb'] = Qb
problem.parameters['growth'] = growth
problem.parameters['mask'] = mask
problem.parameters['b_target'] = b_target
problem.substitutions['Lap(A, Az)'] = "dx(dx(A)) + dy(dy(A)) + dz(Az)"
problem.substitutions['UdotGrad(A, Az)'] = "u*dx(A) + v*dy(A) + w*Az"
problem.substitutions['havg(A)'] = "integ(A, 'x', 'y')/(L*L)"
problem.substitutions['ave(A)'] = "integ(A)/(L*L*H)"
problem.add_equation("dx(u) + dy(v) + wz = 0")
problem.add_equation("dt(b) - κ*Lap(b, bz) = - UdotGrad(b, bz) - σ*mask*(b - b_target)")
problem.add_equation("dt(P) - κ*Lap(P, Pz) = - UdotGrad(P, Pz) + growth*P")
problem.add_equation("dt(u) - ν*Lap(u, uz) + dx(p) - f*v = - UdotGrad(u, uz) - σ*mask*u")
problem.add_equation("dt(v) - ν*Lap(v, vz) + dy(p) + f*u = - UdotGrad(v, vz) - σ*mask*v")
problem.add_equation("dt(w) - ν*Lap(w, wz) + dz(p) - b   = - UdotGrad(w, wz) - σ*mask*w")
problem.add_equation("bz - dz(b) = 0")
problem.add_equation("Pz - dz(P) = 0")
problem.add_equation("uz - dz(u) = 0")
problem.add_equation("vz - dz(v) = 0")
problem.add_equation("wz - dz(w) = 0")
problem.add_bc("left(bz) = N2")
problem.add_bc("right(bz) = - right(Qb) / κ")
problem.add_bc("left(Pz) = 0")
problem.add_bc("right(Pz) = 0")
problem.add_bc("left(uz) = 0")
problem.add_bc("right(uz) = 0")
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
Qb.original_args = Qb.args = [solver]
logger.info('Solver built')

# Initial conditions
b = solver.state['b']
bz = solver.state['bz']
P = solver.state['P']
noise = surface_noise(x, y, z, Lh, Lh, Lz, scale=noise_scale, seed=noise_seed)
b.set_scales(1)
b['g'] = mixed_layer_buoyancy(z, N2, initial_mixed_layer_depth) + noise_amp * N2 * Lz * noise
b.differentiate('z', out=bz)
P.set_scales(1)
P['g'] = P0

# Analysis
fields = solver.evaluator.add_file_handler(prefix + '_fields', sim_dt=output_sim_dt, max_writes=10)
for field in ['u', 'v', 'w', 'b', 'P']:
    fields.add_task(field)
slices = solver.evaluator.add_file_handler(prefix + '_slices', sim_dt=output_sim_dt, max_writes=100)
slices.add_task("interp(w, y=0)", name='w')
slices.add_task("interp(P, y=0)", name='P')
averages = solver.evaluator.add_file_handler(prefix + '_averages', sim_dt=output_sim_dt, max_writes=100)
averages.add_task("havg(P)", name='P')
averages.add_task("havg(w*P)", name='wP')
averages.add_task("havg(Pz)", name='Pz')
averages.add_task("ave(P)", name='volume_averaged_P')

# CFL
CFL = flow_tools.CFL(solver, initial_dt=initial_dt, cadence=10, safety=safety,
                     max_change=max_change, min_change=0.5, max_dt=max_dt, threshold=0.05)
CFL.add_velocities(('u', 'v', 'w'))

# Flow properties
flow = flow_tools.GlobalFlowProperty(solver, cadence=progress_cadence)
flow.add_property("abs(w)", name='|w|')
flow.add_property("abs(P)", name='|P|')

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
            Pmax = flow.max('|P|')
            if not np.isfinite(Pmax):
                raise FloatingPointError('Non-finite plankton concentration at iteration %i' %solver.iteration)
            logger.info('i: %4i, t: %12s, dt: %12s, max(|w|) = %.1e m s⁻¹, max(|P|) = %.1e μM, wall time: %s'
                        %(solver.iteration, prettytime(solver.sim_time), prettytime(dt),
                          flow.max('|w|'), Pmax, prettytime(time.time()-start_run_time)))
except Exception:
    logger.error('Exception raised, triggering end of main loop.')
    raise
finally:
    end_run_time = time.time()
    logger.info('Iterations: %i' %solver.iteration)
    logger.info('Sim end time: %s' %prettytime(solver.sim_time))
    logger.info('Run time: %.2f sec' %(end_run_time-start_run_time))
    logger.info('Run time: %f cpu-hr' %((end_run_time-start_run_time)/60/60*domain.dist.comm_cart.size))
