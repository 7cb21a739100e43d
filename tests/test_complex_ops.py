import math

import numpy as np
import pytest

from multibrot.complex_ops import argument, argument_array, magnitude, power, power_array


@pytest.mark.parametrize(
    "z, expected",
    [
        (complex(1, 0), 0.0),
        (complex(-1, 1), 3 * math.pi / 4),
        (complex(-1, -1), -3 * math.pi / 4),
        (complex(0, 1), math.pi / 2),
        (complex(0, -1), -math.pi / 2),
        (complex(0, 0), 0.0),
        (complex(-1, 0), math.pi),
    ],
)
def test_argument_branches(z, expected):
    assert argument(z) == pytest.approx(expected)


def test_argument_stays_in_principal_range():
    rng = np.random.default_rng(7)
    for re, im in rng.uniform(-5, 5, size=(200, 2)):
        angle = argument(complex(re, im))
        assert -math.pi < angle <= math.pi


def test_magnitude():
    assert magnitude(complex(3, 4)) == pytest.approx(5.0)
    assert magnitude(complex(0, 0)) == 0.0


@pytest.mark.parametrize("p", [0.5, 1.0, 2.0, 3.7])
def test_power_of_origin_is_origin_for_positive_exponents(p):
    assert power(complex(0, 0), p) == complex(0, 0)


@pytest.mark.parametrize("p", [0.0, -1.0, -2.5])
def test_power_of_origin_is_nan_for_non_positive_exponents(p):
    result = power(complex(0, 0), p)
    assert math.isnan(result.real) and math.isnan(result.imag)


def test_integer_power_matches_complex_multiplication():
    z = complex(0.3, -1.2)
    result = power(z, 3)
    expected = z * z * z
    assert result.real == pytest.approx(expected.real)
    assert result.imag == pytest.approx(expected.imag)


def test_fractional_power_uses_principal_branch():
    result = power(complex(-4, 0), 0.5)
    # arg(-4) is pi, so the square root lands on the positive imaginary axis.
    assert result.real == pytest.approx(0.0, abs=1e-12)
    assert result.imag == pytest.approx(2.0)


def test_power_overflow_does_not_raise():
    result = power(complex(1e-300, 1e-300), -10)
    assert math.isinf(result.real) or math.isnan(result.real)


def test_array_twins_agree_with_scalar_functions():
    re = np.array([1.0, -1.0, -1.0, 0.0, 0.0, 0.0, 0.5, -0.25])
    im = np.array([0.0, 1.0, -1.0, 1.0, -1.0, 0.0, 1.5, -0.75])
    angles = argument_array(re, im)
    out_re, out_im = power_array(re, im, 2.5)
    for i in range(re.size):
        z = complex(re[i], im[i])
        assert angles[i] == pytest.approx(argument(z))
        expected = power(z, 2.5)
        assert out_re[i] == pytest.approx(expected.real)
        assert out_im[i] == pytest.approx(expected.imag)


def test_array_power_marks_degenerate_origin():
    out_re, out_im = power_array(np.array([0.0, 1.0]), np.array([0.0, 0.0]), -1.0)
    assert np.isnan(out_re[0]) and np.isnan(out_im[0])
    assert out_re[1] == pytest.approx(1.0)


def test_argument_array_propagates_nan():
    assert np.isnan(argument_array(np.array([np.nan]), np.array([1.0]))[0])
