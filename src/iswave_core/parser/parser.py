# src/iswave_core/parser/parser.py
import logging
from pathlib import Path
from typing import Any, Dict, Union

import cerberus
import pint
import yaml

from ..base_enums import BoundaryCondition
from ..simulation.config import SweepConfig, SweepSettings
from ..simulation.exceptions import InvalidRangeError
from ..units import to_magnitude
from .exceptions import ParsingError, SchemaValidationError

logger = logging.getLogger(__name__)

_QUANTITY_ERRORS = (pint.errors.PintError, ValueError, TypeError, AttributeError)


class QuantityValidator(cerberus.Validator):
    """Cerberus validator that also checks quantity strings against a target unit."""

    def _validate_quantity_unit(self, unit: str, field: str, value: Any):
        """
        Checks that the value converts to the given unit.
        The rule's arguments are validated against this schema:
        {'type': 'string'}
        """
        try:
            to_magnitude(value, unit)
        except _QUANTITY_ERRORS as e:
            self._error(field, f"'{value}' cannot be read as a quantity in '{unit}': {e}")


class SweepConfigParser:
    """
    Loads and validates a YAML run description and produces a `SweepConfig`.
    """
    _frequency_rule = {"type": ["string", "number"], "required": True, "quantity_unit": "Hz"}

    _schema = {
        "name": {"type": "string", "required": False, "empty": False},
        "sweep": {
            "type": "dict", "required": True, "schema": {
                "start": _frequency_rule,
                "stop": _frequency_rule,
                "num_points": {"type": "integer", "required": True, "min": 1},
            },
        },
        "oscillation": {
            "type": "dict", "required": True, "schema": {
                "amplitude": {"type": ["string", "number"], "required": True, "quantity_unit": "V"},
                "boundary_condition": {"type": "integer", "required": True, "allowed": [int(bc) for bc in BoundaryCondition]},
            },
        },
        "options": {
            "type": "dict", "required": False, "default": {}, "schema": {
                "sequential": {"type": "boolean", "default": False},
                "frozen_ions": {"type": "boolean", "default": False},
                "do_graphics": {"type": "boolean", "default": False},
            },
        },
        "solver": {
            "type": "dict", "required": False, "default": {}, "schema": {
                "periods": {"type": "integer", "min": 1},
                "tpoints_per_period": {"type": "integer", "min": 1},
                # PyYAML reads '1e-6' (no dot) as a string.
                "rel_tol": {"type": ["number", "string"]},
            },
        },
    }

    def __init__(self):
        self._validator = QuantityValidator(self._schema)
        self._validator.allow_unknown = False
        logger.debug("SweepConfigParser initialized.")

    def parse(self, config_path: Union[str, Path]) -> SweepConfig:
        """
        Parses a run description file.

        Raises:
            ParsingError: unreadable file, invalid YAML, or out-of-range solver values.
            SchemaValidationError: the document does not match the schema.
        """
        path = Path(config_path).resolve()
        logger.info(f"Loading run description: {path}")
        content = self._load_yaml(path)
        if not self._validator.validate(content):
            raise SchemaValidationError(self._validator.errors, path)
        document = self._validator.document
        return self._build_config(document, path)

    def _build_config(self, document: Dict[str, Any], path: Path) -> SweepConfig:
        sweep = document["sweep"]
        oscillation = document["oscillation"]
        options = document.get("options", {})
        solver = document.get("solver", {})

        settings_kwargs: Dict[str, Any] = {}
        if "periods" in solver:
            settings_kwargs["periods"] = solver["periods"]
        if "tpoints_per_period" in solver:
            settings_kwargs["tpoints_per_period"] = solver["tpoints_per_period"]
        try:
            if "rel_tol" in solver:
                settings_kwargs["base_rel_tol"] = float(solver["rel_tol"])
            settings = SweepSettings(**settings_kwargs)
        except ValueError as e:
            # InvalidRangeError is a ValueError as well.
            details = e.details if isinstance(e, InvalidRangeError) else str(e)
            raise ParsingError(details=f"Invalid solver settings: {details}", file_path=path) from e

        return SweepConfig(
            start_freq=to_magnitude(sweep["start"], "Hz"),
            end_freq=to_magnitude(sweep["stop"], "Hz"),
            num_points=sweep["num_points"],
            delta_v=to_magnitude(oscillation["amplitude"], "V"),
            bc=BoundaryCondition(oscillation["boundary_condition"]),
            sequential=options.get("sequential", False),
            frozen_ions=options.get("frozen_ions", False),
            do_graphics=options.get("do_graphics", False),
            name=document.get("name"),
            settings=settings,
        )

    def _load_yaml(self, source: Path) -> Dict[str, Any]:
        """Loads and performs basic sanity checks on a YAML file."""
        if not source.is_file():
            raise ParsingError(details=f"Run description not found at path: {source}", file_path=source)
        try:
            with source.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except PermissionError as e:
            raise ParsingError(details=f"Permission denied when trying to read file: {e}", file_path=source) from e
        except yaml.YAMLError as e:
            raise ParsingError(details=f"Invalid YAML syntax: {e}", file_path=source) from e
        if content is None:
            raise ParsingError(details="The YAML file is empty or contains no valid content.", file_path=source)
        if not isinstance(content, dict):
            raise ParsingError(details="The root of the YAML file must be a dictionary (mapping).", file_path=source)
        return content
