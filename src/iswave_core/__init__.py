# src/iswave_core/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.info("ISwave Core package initialized.")

from .units import ureg, Quantity
from .base_enums import BoundaryCondition, ExtractionMethod
from .data_structures import (
    DeviceParameters, DeviceState, IntensityEntry, OscillatingSolution,
    FitCoefficients, ResponseAnalysis,
)
from .capabilities import ISimulator, IResponseAnalyzer, IStateSplitter, ISolutionSink, IResultSink
from .sinks import InMemorySink, make_valid_name
from .analysis import ResponseAnalyzer, ResponseFitError, ImpedanceSpectra, derive_impedance_spectra
from .simulation import (
    run_impedance_sweep, run_impedance_sweep_from_config,
    plan_frequencies, SweepSettings, SweepConfig,
    ImpedanceSweepResult, PhaseDiagnostic, LadderStage, ValidityController,
    InvalidRangeError, StateNormalizationError, PhaseOutOfRangeWarning,
)
from .parser import SweepConfigParser, ParsingError, SchemaValidationError
from .errors import ISwaveError, ConfigurationError, DiagnosableError

__all__ = [
    # Units
    "ureg", "Quantity",
    # Data Model
    "BoundaryCondition", "ExtractionMethod",
    "DeviceParameters", "DeviceState", "IntensityEntry", "OscillatingSolution",
    "FitCoefficients", "ResponseAnalysis",
    # Collaborator Contracts
    "ISimulator", "IResponseAnalyzer", "IStateSplitter", "ISolutionSink", "IResultSink",
    # Sinks
    "InMemorySink", "make_valid_name",
    # Analysis
    "ResponseAnalyzer", "ResponseFitError", "ImpedanceSpectra", "derive_impedance_spectra",
    # Sweep
    "run_impedance_sweep", "run_impedance_sweep_from_config",
    "plan_frequencies", "SweepSettings", "SweepConfig",
    "ImpedanceSweepResult", "PhaseDiagnostic", "LadderStage", "ValidityController",
    "InvalidRangeError", "StateNormalizationError", "PhaseOutOfRangeWarning",
    # Configuration
    "SweepConfigParser", "ParsingError", "SchemaValidationError",
    # Top-Level Errors
    "ISwaveError", "ConfigurationError", "DiagnosableError",
]
