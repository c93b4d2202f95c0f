"""Control parameters for windy convection with surface waves."""

import numpy as np

from ocean_les.units import minute, hour


# Control parameters
Nx, Ny, Nz = 64, 64, 64
mesh = None  # Process mesh, e.g. (8, 8)
Lx, Ly, Lz = 128, 128, 64  # Domain extent (m)
N2 = 1e-5  # Background stratification (s⁻²)
Qb = 1e-8  # Surface buoyancy flux, positive upward (m² s⁻³)
Qu = -1e-4  # Surface momentum flux, positive upward (m² s⁻²)
f = 1e-4  # Coriolis parameter (s⁻¹)
wave_amplitude = 0.8  # Surface wave amplitude (m)
wavelength = 60  # Surface wave length (m)
g = 9.81  # Gravitational acceleration (m s⁻²)
ν = 1e-4  # Eddy viscosity (m² s⁻¹)
Pr = 1  # Turbulent Prandtl number
c_relax_rate = 1 / hour  # Tracer relaxation rate (s⁻¹)
c_target = 1  # Tracer relaxation target
noise_amp = 1e-6  # Initial buoyancy noise, relative to N2 Lz
noise_scale = 8  # Initial noise e-folding depth (m)
noise_seed = 42
timestepper = "RK443"
safety = 0.2  # CFL safety factor
initial_dt = 0.1
max_change = 1.1
max_dt = 10
stop_sim_time = 12 * hour
progress_cadence = 100
checkpoints_sim_dt = 6 * hour
fields_sim_dt = 1 * hour
slices_sim_dt = 10 * minute

# Derived parameters
κ = ν / Pr  # Eddy diffusivity (m² s⁻¹)
k = 2 * np.pi / wavelength  # Surface wavenumber (m⁻¹)
prefix = "windy_convection_Qu%.1e_Qb%.1e_Nsq%.1e_N%d" % (abs(Qu), Qb, N2, Nz)
data_directory = "data/" + prefix
