"""Control parameters for plankton in a convective boundary layer."""

from ocean_les.forcing import heat_to_buoyancy_flux
from ocean_les.units import minute, hour, day


# Control parameters
Nh = 32  # Horizontal resolution
Nz = 32  # Vertical resolution
mesh = None  # Process mesh, e.g. (4, 4)
Lh = 192  # Domain width (m)
Lz = 96  # Domain height (m)
Qh = 10  # Surface heat flux (W m⁻²)
ρ = 1026  # Reference density (kg m⁻³)
cp = 3991  # Heat capacity (J (ᵒC)⁻¹ kg⁻¹)
α = 2e-4  # Thermal expansion coefficient (ᵒC⁻¹)
g = 9.81  # Gravitational acceleration (m s⁻²)
Ninf = 9.5e-3  # Deep buoyancy frequency (s⁻¹)
f = 1e-4  # Coriolis parameter (s⁻¹)
ν = 1e-3  # Eddy viscosity (m² s⁻¹)
Pr = 1  # Turbulent Prandtl number
P0 = 1  # Initial plankton concentration (μM)
initial_mixed_layer_depth = 50  # (m)
noise_amp = 1e-4  # Initial buoyancy noise, relative to Ninf² Lz
noise_scale = 4  # Initial noise e-folding depth (m)
noise_seed = 23
sponge_rate = 4 / hour  # Bottom sponge damping rate (s⁻¹)
timestepper = "RK443"
safety = 1.0  # CFL safety factor
initial_dt = 10
max_change = 1.1
max_dt = 2 * minute
stop_sim_time = 1 * day
output_sim_dt = hour / 2
progress_cadence = 10

buoyancy_flux_parameters = dict(initial_buoyancy_flux=heat_to_buoyancy_flux(Qh, ρ, cp, α, g),  # m² s⁻³
                                start_ramp_down=1 * day,
                                shut_off=2 * day)

planktonic_parameters = dict(sunlight_attenuation_scale=5.0,  # m
                             surface_growth_rate=1 / day,  # s⁻¹
                             mortality_rate=0.1 / day)  # s⁻¹

# Derived parameters
N2 = Ninf**2  # Deep stratification (s⁻²)
κ = ν / Pr  # Eddy diffusivity (m² s⁻¹)
sponge_center = -Lz  # Sponge mask center (m)
sponge_width = Lz / 10  # Sponge mask width (m)
prefix = "convecting_plankton"
