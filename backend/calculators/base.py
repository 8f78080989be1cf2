"""
Abstract base class for the pure calculators.

Calculators take a plain snapshot (dict, pydantic model or ORM object) and
return a fresh result. No database, no I/O, no shared mutable state.
"""

import math
from abc import ABC, abstractmethod


class CalculatorInputError(ValueError):
    """Input a calculator cannot price or score: unknown enum value or degenerate data."""


class BaseCalculator(ABC):
    """All calculators inherit from this."""

    @abstractmethod
    def calculate(self, data):
        """Takes an input snapshot and returns the computed result."""
        pass

    # --- Helper methods for all calculators ---

    def lookup_rate(self, table: dict, key, label: str) -> float:
        """
        Look up `key` in a fixed rate table. Unknown keys raise; a missing
        entry never falls back to a default rate.
        """
        key = self.enum_value(key)
        if key not in table:
            raise CalculatorInputError(
                f"Unknown {label}: {key!r}. "
                f"Expected one of: {', '.join(table.keys())}"
            )
        return table[key]

    def enum_value(self, value):
        """Unwrap str-enums (pydantic / SQLAlchemy) to their plain value."""
        return getattr(value, "value", value)

    def get_field(self, data, name: str, default=None):
        """Read a field from a dict or an attribute-style object."""
        if isinstance(data, dict):
            return data.get(name, default)
        return getattr(data, name, default)

    def round_half_up(self, value: float) -> int:
        """Round to the nearest integer, .5 always going up (not banker's rounding)."""
        return int(math.floor(value + 0.5))
