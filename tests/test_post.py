import h5py
import numpy as np
import pytest

from ocean_les import post


def write_set(path, writes, t0, nx=4, nz=3):
    """Write a set file laid out like a merged Dedalus analysis set."""
    with h5py.File(path, mode='w') as file:
        times = t0 + np.arange(writes, dtype=np.float64)
        file['scales/sim_time'] = times
        file['scales/write_number'] = np.arange(writes) + int(t0) + 1
        file['scales/x/1.0'] = np.linspace(0, 1, nx, endpoint=False)
        file['scales/z/1.0'] = np.linspace(-1, 0, nz)
        w = times[:, None, None, None] * np.ones((writes, nx, 1, nz))
        file['tasks/w'] = w
        file['tasks/P'] = 2 * w


@pytest.fixture
def handler(tmp_path):
    directory = tmp_path / 'run_slices'
    directory.mkdir()
    write_set(directory / 'run_slices_s1.h5', 2, 0)
    write_set(directory / 'run_slices_s10.h5', 1, 10)
    write_set(directory / 'run_slices_s2.h5', 3, 2)
    # Unmerged process directories are ignored
    (directory / 'run_slices_s3').mkdir()
    return directory


def test_set_number():
    assert post.set_number('a/b/fields_s12.h5') == 12
    with pytest.raises(ValueError):
        post.set_number('fields_s12_p0.h5')


def test_sorted_sets_orders_numerically(handler):
    names = [p.name for p in post.sorted_sets(handler)]
    assert names == ['run_slices_s1.h5', 'run_slices_s2.h5', 'run_slices_s10.h5']


def test_sorted_sets_empty(tmp_path):
    with pytest.raises(FileNotFoundError):
        post.sorted_sets(tmp_path)


def test_load_tasks_concatenates_sets(handler):
    data = post.load_tasks(handler, ['w', 'P'])
    np.testing.assert_array_equal(data['sim_time'], [0, 1, 2, 3, 4, 10])
    assert data['w'].shape == (6, 4, 1, 3)
    np.testing.assert_array_equal(data['w'][:, 0, 0, 0], data['sim_time'])
    np.testing.assert_array_equal(data['P'], 2 * data['w'])
    assert len(data['write_number']) == 6


def test_load_tasks_missing_task(handler):
    with pytest.raises(KeyError):
        post.load_tasks(handler, ['b'])


def test_load_grid(handler):
    z = post.load_grid(handler / 'run_slices_s1.h5', 'z')
    np.testing.assert_allclose(z, [-1, -0.5, 0])


def test_divergent_levels_within_limit():
    clims, levels = post.divergent_levels(np.array([-0.5, 0.2]), 1, nlevels=5)
    assert clims == (-1, 1)
    np.testing.assert_allclose(levels, [-1, -0.5, 0, 0.5, 1])


def test_divergent_levels_extended():
    clims, levels = post.divergent_levels(np.array([-3, 0.2]), 1, nlevels=3)
    assert clims == (-1, 1)
    np.testing.assert_allclose(levels, [-3, -1, 0, 1, 3])


def test_sequential_levels_extended_on_both_sides():
    c = np.array([0.5, 1.0, 2.5])
    clims, levels = post.sequential_levels(c, (0.9, 2), nlevels=3)
    assert clims == (0.9, 2)
    np.testing.assert_allclose(levels, [0.5, 0.9, 1.45, 2, 2.5])


def test_sequential_levels_within_limits():
    clims, levels = post.sequential_levels(np.array([1.0, 1.5]), (0.9, 2), nlevels=3)
    np.testing.assert_allclose(levels, [0.9, 1.45, 2])


def test_normalize():
    np.testing.assert_allclose(post.normalize([1, -4, 2]), [0.25, -1, 0.5])
    np.testing.assert_array_equal(post.normalize([0, 0]), [0, 0])


def test_effective_diffusivity():
    kappa = post.effective_diffusivity([1e-6, 2e-6, 3e-6], [-1e-4, 0, 1e-4])
    np.testing.assert_allclose(kappa[[0, 2]], [1e-2, -3e-2])
    assert np.isnan(kappa[1])


def test_unmerged_sets_finds_process_directories(tmp_path):
    directory = tmp_path / 'run_checkpoint'
    (directory / 'run_checkpoint_s2').mkdir(parents=True)
    (directory / 'run_checkpoint_s1').mkdir()
    write_set(directory / 'run_checkpoint_s1' / 'run_checkpoint_s1_p0.h5', 1, 0)
    write_set(directory / 'run_checkpoint_s2' / 'run_checkpoint_s2_p0.h5', 1, 1)
    pending = post.unmerged_sets(directory)
    assert [p.name for p in pending] == ['run_checkpoint_s1', 'run_checkpoint_s2']
    # Only distributed output is present, so there is nothing to restart from yet
    assert post.latest_set(directory) is None


def test_unmerged_sets_skips_merged_sets(tmp_path):
    directory = tmp_path / 'run_checkpoint'
    (directory / 'run_checkpoint_s1').mkdir(parents=True)
    write_set(directory / 'run_checkpoint_s1.h5', 1, 0)
    (directory / 'run_checkpoint_s2').mkdir()
    assert [p.name for p in post.unmerged_sets(directory)] == ['run_checkpoint_s2']
    assert post.latest_set(directory).name == 'run_checkpoint_s1.h5'


def test_restart_lookup_without_output(tmp_path):
    assert post.unmerged_sets(tmp_path / 'missing') == []
    assert post.latest_set(tmp_path / 'missing') is None
    assert post.latest_set(tmp_path) is None


def test_latest_set_orders_numerically(handler):
    assert post.latest_set(handler).name == 'run_slices_s10.h5'
