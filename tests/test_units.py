import pytest

from ocean_les.units import minute, hour, day, GiB, prettytime


def test_unit_values():
    assert minute == 60
    assert hour == 3600
    assert day == 86400
    assert GiB == 2**30


@pytest.mark.parametrize("t, expected", [
    (0, "0 seconds"),
    (5e-4, "500.000 μs"),
    (0.25, "250.000 ms"),
    (30, "30.000 seconds"),
    (90, "1.500 minutes"),
    (2 * hour, "2.000 hours"),
    (3 * day, "3.000 days"),
    (-90, "-1.500 minutes"),
])
def test_prettytime(t, expected):
    assert prettytime(t) == expected
