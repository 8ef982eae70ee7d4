# src/iswave_core/parser/__init__.py
from .parser import SweepConfigParser
from .exceptions import BaseParsingError, ParsingError, SchemaValidationError

__all__ = [
    "SweepConfigParser",
    "BaseParsingError",
    "ParsingError",
    "SchemaValidationError",
]
