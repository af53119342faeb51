"""
Options for survey validation and adjustment.

This module defines the configuration objects used by the validation
engine and the traverse / leveling solvers, including accuracy classes
and the precision each class demands.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ToleranceClass(Enum):
    """
    Survey accuracy classes.

    Each class carries a traverse precision requirement (1:N) and, for
    the leveling orders, an allowable misclosure constant in mm per
    square root of kilometer.
    """
    FIRST_ORDER = "first_order"
    SECOND_ORDER = "second_order"
    THIRD_ORDER = "third_order"
    ENGINEERING = "engineering"
    CONSTRUCTION = "construction"

    @property
    def traverse_precision(self) -> float:
        return TRAVERSE_PRECISION[self]

    @property
    def leveling_constant_mm(self) -> float:
        """mm per sqrt(km); classes without a leveling grade use third order."""
        return LEVELING_CONSTANT_MM.get(self, LEVELING_CONSTANT_MM[ToleranceClass.THIRD_ORDER])

    @classmethod
    def parse(cls, value: Any) -> "ToleranceClass":
        """Accept an enum member or its string value; empty means third order."""
        if isinstance(value, cls):
            return value
        if value is None or value == "":
            return cls.THIRD_ORDER
        return cls(str(value).strip().lower())


TRAVERSE_PRECISION: Dict[ToleranceClass, float] = {
    ToleranceClass.FIRST_ORDER: 25000.0,
    ToleranceClass.SECOND_ORDER: 10000.0,
    ToleranceClass.THIRD_ORDER: 5000.0,
    ToleranceClass.ENGINEERING: 3000.0,
    ToleranceClass.CONSTRUCTION: 1000.0,
}

LEVELING_CONSTANT_MM: Dict[ToleranceClass, float] = {
    ToleranceClass.FIRST_ORDER: 3.0,
    ToleranceClass.SECOND_ORDER: 6.0,
    ToleranceClass.THIRD_ORDER: 12.0,
    ToleranceClass.ENGINEERING: 24.0,
}

DEFAULT_REQUIRED_PRECISION = 5000.0  # 1:5000


@dataclass
class TraverseOptions:
    """
    Configuration for the Bowditch traverse adjustment.

    Attributes:
        required_precision: Minimum relative precision N (as in 1:N) for
            the traverse to pass (default: 5000)
    """

    required_precision: float = DEFAULT_REQUIRED_PRECISION

    def __post_init__(self):
        """Validate options after initialization."""
        if self.required_precision <= 0:
            raise ValueError("required_precision must be positive")

    @classmethod
    def from_tolerance_class(cls, tolerance_class: Any) -> "TraverseOptions":
        return cls(required_precision=ToleranceClass.parse(tolerance_class).traverse_precision)

    def to_dict(self) -> Dict[str, Any]:
        return {"required_precision": self.required_precision}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TraverseOptions":
        """
        Create TraverseOptions from a dictionary.

        A missing or non-positive ``required_precision`` falls back to the
        ``tolerance_class`` precision if given, else the default.
        """
        value = data.get("required_precision")
        if value is not None and float(value) > 0:
            return cls(required_precision=float(value))
        if data.get("tolerance_class"):
            return cls.from_tolerance_class(data["tolerance_class"])
        return cls()


@dataclass
class EngineOptions:
    """
    Configuration for the validation engine.

    Attributes:
        max_workers: Thread pool size for running checks, None lets the
            engine use one worker per registered check
        traverse: Options passed to the traverse adjustment
    """

    max_workers: Optional[int] = None
    traverse: TraverseOptions = field(default_factory=TraverseOptions)

    def __post_init__(self):
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if isinstance(self.traverse, dict):
            self.traverse = TraverseOptions.from_dict(self.traverse)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_workers": self.max_workers,
            "traverse": self.traverse.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineOptions":
        return cls(
            max_workers=data.get("max_workers"),
            traverse=TraverseOptions.from_dict(data.get("traverse", {})),
        )

    @classmethod
    def default(cls) -> "EngineOptions":
        return cls()
