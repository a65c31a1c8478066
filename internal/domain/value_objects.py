"""
Value Objects for the Product domain.

Value objects are immutable and defined by their attributes.
"""
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


GTIN_PATTERN = re.compile(r"^[0-9]{8,14}$")


def is_valid_gtin(gtin: Any) -> bool:
    """
    Check a Global Trade Item Number.

    Args:
        gtin: Candidate value.

    Returns:
        True if gtin is a string of 8 to 14 decimal digits.
    """
    return isinstance(gtin, str) and GTIN_PATTERN.fullmatch(gtin) is not None


class WeightUnit(str, Enum):
    """Unit of a net weight."""
    GRAM = "GRAM"
    KILOGRAM = "KILOGRAM"
    OUNCE = "OUNCE"
    POUND = "POUND"


@dataclass(frozen=True)
class NetWeight:
    """
    Net weight value object.

    Positivity of value is a product rule and is checked by the entity,
    so that violations come back as failed Results.

    Attributes:
        value: Weight amount.
        unit: Weight unit.
    """
    value: float
    unit: WeightUnit

    def __post_init__(self) -> None:
        # Accept raw unit strings from storage and transport.
        if not isinstance(self.unit, WeightUnit):
            object.__setattr__(self, "unit", WeightUnit(self.unit))

    @property
    def is_positive(self) -> bool:
        """True for a finite amount above zero."""
        return math.isfinite(self.value) and self.value > 0

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "value": self.value,
            "unit": self.unit.value,
        }

    @classmethod
    def from_dict(cls, data: Optional[Union[dict, "NetWeight"]]) -> Optional["NetWeight"]:
        """
        Build a NetWeight from its dictionary form.

        Args:
            data: Dictionary with value and unit, an existing NetWeight or None.

        Returns:
            NetWeight instance or None.
        """
        if data is None or isinstance(data, NetWeight):
            return data
        return cls(value=data["value"], unit=data["unit"])
