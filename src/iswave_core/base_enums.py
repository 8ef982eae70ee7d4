from enum import Enum, IntEnum


class BoundaryCondition(IntEnum):
    """
    Contact selectivity used by the device model. Its main role in the sweep is
    to tell the state splitter how to cut a symmetric open-circuit device in half.
    """
    ZERO_FLUX = 0              # Blocking contacts, no carrier flux.
    SELECTIVE = 1              # Fixed carrier densities, perfectly selective contacts.
    NON_SELECTIVE = 2          # Mixed boundary, contacts not perfectly selective.
    SURFACE_RECOMBINATION = 3  # Finite surface recombination velocity.


class ExtractionMethod(Enum):
    """How a response analyzer obtained amplitude and phase."""
    DEMODULATION = "demodulation"
    FIT = "fit"

    def __str__(self):
        return self.value
