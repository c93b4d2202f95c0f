import pathlib
import runpy

import pytest

from ocean_les.units import minute, hour, day

ROOT = pathlib.Path(__file__).parent.parent


def load(experiment):
    return runpy.run_path(str(ROOT / experiment / 'parameters.py'))


def test_windy_convection_prefix():
    params = load('windy_convection')
    assert params['prefix'] == "windy_convection_Qu1.0e-04_Qb1.0e-08_Nsq1.0e-05_N64"
    assert params['data_directory'] == "data/" + params['prefix']


def test_windy_convection_schedule():
    params = load('windy_convection')
    assert params['stop_sim_time'] == 12 * hour
    assert params['checkpoints_sim_dt'] == 6 * hour
    assert params['fields_sim_dt'] == hour
    assert params['max_dt'] == 10


def test_convecting_plankton_buoyancy_flux():
    params = load('convecting_plankton')
    flux = params['buoyancy_flux_parameters']
    assert flux['initial_buoyancy_flux'] == pytest.approx(2e-4 * 9.81 * 10 / (1026 * 3991))
    assert flux['start_ramp_down'] == day
    assert flux['shut_off'] == 2 * day


def test_convecting_plankton_schedule():
    params = load('convecting_plankton')
    assert params['max_dt'] == 2 * minute
    assert params['output_sim_dt'] == 30 * minute
    assert params['N2'] == pytest.approx(9.5e-3**2)
    assert params['sponge_width'] == pytest.approx(9.6)
    assert params['planktonic_parameters']['surface_growth_rate'] == pytest.approx(1 / day)
