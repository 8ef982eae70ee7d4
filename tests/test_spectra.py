# tests/test_spectra.py
import numpy as np

from iswave_core import derive_impedance_spectra


def test_closed_form_relations_hold_for_random_cells():
    rng = np.random.default_rng(1234)
    shape = (4, 6)
    amplitude = -rng.uniform(1e-6, 1e-2, size=shape)
    phase = rng.uniform(0.0, np.pi / 2, size=shape)
    frequency = np.tile(np.logspace(6, -1, shape[1]), (shape[0], 1))
    delta_v = 1e-3

    spectra = derive_impedance_spectra(delta_v, amplitude, phase, frequency)

    np.testing.assert_allclose(spectra.impedance_abs, -delta_v / amplitude)
    np.testing.assert_allclose(spectra.impedance_re, spectra.impedance_abs * np.cos(phase))
    np.testing.assert_allclose(spectra.impedance_im, spectra.impedance_abs * np.sin(phase))
    np.testing.assert_allclose(
        spectra.capacitance, np.sin(phase) / (2 * np.pi * frequency * spectra.impedance_abs)
    )
    assert np.all(spectra.impedance_abs > 0)
    for matrix in (spectra.impedance_abs, spectra.impedance_re, spectra.impedance_im, spectra.capacitance):
        assert matrix.shape == shape


def test_pure_capacitor_gives_its_capacitance():
    # A capacitor C driven at deltaV draws |J| = w*C*deltaV leading by 90 degrees.
    c = 2.5e-8
    frequency = np.array([[10.0, 1e3, 1e5]])
    delta_v = 1e-3
    amplitude = -(2 * np.pi * frequency * c * delta_v)
    phase = np.full_like(frequency, np.pi / 2)

    spectra = derive_impedance_spectra(delta_v, amplitude, phase, frequency)

    np.testing.assert_allclose(spectra.capacitance, c)
    np.testing.assert_allclose(spectra.impedance_re, 0.0, atol=1e-6 * spectra.impedance_abs.max())
    np.testing.assert_allclose(spectra.impedance_im, 1 / (2 * np.pi * frequency * c))


def test_zero_amplitude_is_degenerate_not_an_error():
    amplitude = np.array([[0.0, -1e-3]])
    phase = np.array([[0.3, 0.3]])
    frequency = np.array([[1e3, 1e3]])

    spectra = derive_impedance_spectra(1e-3, amplitude, phase, frequency)

    assert np.isinf(spectra.impedance_abs[0, 0])
    assert not np.isfinite(spectra.impedance_re[0, 0])
    assert not np.isfinite(spectra.impedance_im[0, 0])
    # sin(phase) / (w * inf) evaluates to zero and is kept as computed.
    assert spectra.capacitance[0, 0] == 0.0
    assert np.isfinite(spectra.impedance_abs[0, 1])


def test_zero_amplitude_and_zero_phase_gives_nan_components():
    spectra = derive_impedance_spectra(1e-3, np.zeros((1, 1)), np.zeros((1, 1)), np.ones((1, 1)))
    assert np.isinf(spectra.impedance_abs[0, 0])
    assert np.isinf(spectra.impedance_re[0, 0])
    assert np.isnan(spectra.impedance_im[0, 0])
