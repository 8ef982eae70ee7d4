# src/iswave_core/simulation/execution.py
"""
Provides the public API functions for running impedance spectroscopy sweeps.

This module is a thin facade over the internal services (`SweepContext`,
`SweepEngine`, the planner and the aggregator). Its responsibilities are:
1.  **Expose `run_impedance_sweep`:** validate the sweep range, assemble the
    context, run the engine, and hand the result to the optional sinks and
    graphics collaborators.
2.  **Expose `run_impedance_sweep_from_config`:** the same, driven by a YAML
    run description.
3.  **Keep failures honest:** range and configuration problems are raised
    before any simulation; simulator and analyzer failures are logged and
    propagate unmodified.
"""
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from ..base_enums import BoundaryCondition
from ..capabilities import IResponseAnalyzer, IResultSink, ISimulator, ISolutionSink, IStateSplitter
from ..data_structures import IntensityEntry
from ..errors import ConfigurationError
from ..sinks import result_name
from .config import SweepSettings
from .context import SweepContext
from .engine import SweepEngine
from .exceptions import StateNormalizationError
from .planner import plan_frequencies
from .results import ImpedanceSweepResult

logger = logging.getLogger(__name__)

GraphicsCollaborator = Callable[[ImpedanceSweepResult], None]


def run_impedance_sweep(
    entries: Sequence[IntensityEntry],
    start_freq: float,
    end_freq: float,
    num_points: int,
    delta_v: float,
    bc: Union[BoundaryCondition, int],
    sequential: bool,
    frozen_ions: bool,
    *,
    simulator: ISimulator,
    analyzer: IResponseAnalyzer,
    splitter: Optional[IStateSplitter] = None,
    do_graphics: bool = False,
    graphics: Sequence[GraphicsCollaborator] = (),
    solution_sink: Optional[ISolutionSink] = None,
    result_sink: Optional[IResultSink] = None,
    settings: Optional[SweepSettings] = None,
) -> ImpedanceSweepResult:
    """
    Runs an impedance spectroscopy sweep over light intensities and frequencies.

    Args:
        entries: The intensity entries to sweep, in output row order. Wrap a
                 single state with `[IntensityEntry.from_state(state, name)]`.
        start_freq: First frequency (Hz), usually the highest.
        end_freq: Last frequency (Hz).
        num_points: Number of log-spaced frequencies.
        delta_v: Voltage oscillation amplitude (V); 1 mV is usually enough.
        bc: Boundary-condition mode, also used to split open-circuit states.
        sequential: If True, each frequency starts from the previous
                    frequency's oscillating solution instead of the entry's state.
        frozen_ions: If True, the ionic mobility is set to zero before the sweep.
        simulator: The single-frequency simulator.
        analyzer: The response analyzer.
        splitter: Splits open-circuit states into half cells. Required only
                  when an entry is at open circuit.
        do_graphics: If True, the analyzer runs in full (non-minimal) mode and
                     every `graphics` collaborator receives the result.
        graphics: Callables invoked with the final result when `do_graphics` is set.
        solution_sink: Receives every accepted oscillating solution.
        result_sink: Receives the final result.
        settings: Numerical settings; defaults to `SweepSettings()`.

    Returns:
        The immutable `ImpedanceSweepResult`.

    Raises:
        InvalidRangeError: malformed frequency range or point count.
        StateNormalizationError: no entries, or an open-circuit entry without a splitter.
        Any exception raised by the simulator or the analyzer, unmodified.
    """
    effective_settings = settings if settings is not None else SweepSettings()
    freq_array_hz = plan_frequencies(start_freq, end_freq, num_points)
    entries = tuple(entries)
    if not entries:
        raise StateNormalizationError(entry_name="<none>", details="No intensity entries were given.")

    context = SweepContext(
        entries=entries,
        freq_array_hz=freq_array_hz,
        delta_v=float(delta_v),
        bc=BoundaryCondition(bc),
        sequential=bool(sequential),
        frozen_ions=bool(frozen_ions),
        settings=effective_settings,
        simulator=simulator,
        analyzer=analyzer,
        splitter=splitter,
        solution_sink=solution_sink,
        do_graphics=bool(do_graphics),
    )

    logger.info(
        f"--- Starting impedance sweep for '{entries[0].name}': {len(entries)} entries, "
        f"{num_points} frequencies from {start_freq:.4g} Hz to {end_freq:.4g} Hz ---"
    )
    try:
        result = SweepEngine(context).execute_sweep()
    except Exception as e:
        logger.error(f"Impedance sweep '{entries[0].name}' aborted: {type(e).__name__}: {e}")
        raise

    if result.phase_diagnostics:
        logger.warning(f"{len(result.phase_diagnostics)} cell(s) kept a phase outside [0, pi/2].")
    logger.info(f"Impedance sweep '{result.sol_name}' completed.")

    if result_sink is not None:
        result_sink.on_result_produced(result_name(result.sol_name), result)

    if do_graphics:
        for collaborator in graphics:
            collaborator(result)

    return result


def run_impedance_sweep_from_config(
    config_path: Union[str, Path],
    entries: Sequence[IntensityEntry],
    *,
    simulator: ISimulator,
    analyzer: IResponseAnalyzer,
    splitter: Optional[IStateSplitter] = None,
    graphics: Sequence[GraphicsCollaborator] = (),
    solution_sink: Optional[ISolutionSink] = None,
    result_sink: Optional[IResultSink] = None,
) -> ImpedanceSweepResult:
    """
    Loads a YAML run description and runs the sweep it describes.

    If the run description has a `name`, it replaces the display name of
    the first entry in the result.

    Raises:
        ConfigurationError: the run description could not be loaded. The
                            message is the full diagnostic report.
    """
    # Imported here: the parser depends on this package's config module.
    from ..parser import SweepConfigParser, BaseParsingError

    try:
        config = SweepConfigParser().parse(config_path)
    except BaseParsingError as e:
        logger.error(f"Could not load run description: {e}")
        raise ConfigurationError(e.get_diagnostic_report()) from e

    entries = list(entries)
    if config.name and entries:
        first = entries[0]
        entries[0] = IntensityEntry(state=first.state, name=config.name, light_intensity=first.light_intensity)

    return run_impedance_sweep(
        entries,
        config.start_freq,
        config.end_freq,
        config.num_points,
        config.delta_v,
        config.bc,
        config.sequential,
        config.frozen_ions,
        simulator=simulator,
        analyzer=analyzer,
        splitter=splitter,
        do_graphics=config.do_graphics,
        graphics=graphics,
        solution_sink=solution_sink,
        result_sink=result_sink,
        settings=config.settings,
    )
