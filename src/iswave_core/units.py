# --- src/iswave_core/units.py ---
import logging
from typing import Union

import pint

logger = logging.getLogger(__name__)
ureg = pint.UnitRegistry()
Quantity = ureg.Quantity
logger.debug("Pint Unit Registry initialized.")


def to_magnitude(value: Union[str, int, float], unit: str) -> float:
    """
    Converts a user value to a plain float in `unit`.

    Strings are parsed as quantities ('1 MHz', '1 mV'); bare numbers are taken
    to already be expressed in `unit`.

    Raises:
        pint.DimensionalityError: if the parsed quantity has the wrong dimension.
        pint.UndefinedUnitError: if the string names an unknown unit.
    """
    if isinstance(value, (int, float)):
        return float(value)
    qty = ureg.Quantity(value)
    if qty.dimensionless:
        # A plain number written as a string ("1e6").
        return float(qty.magnitude)
    return float(qty.to(unit).magnitude)
