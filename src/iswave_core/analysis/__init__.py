# src/iswave_core/analysis/__init__.py
from .exceptions import ResponseFitError
from .spectra import ImpedanceSpectra, derive_impedance_spectra
from .response import ResponseAnalyzer, demodulate_response, fit_response, normalize_fit

__all__ = [
    "ResponseFitError",
    "ImpedanceSpectra",
    "derive_impedance_spectra",
    "ResponseAnalyzer",
    "demodulate_response",
    "fit_response",
    "normalize_fit",
]
