"""Items module - klasyfikacja itemów i ostrzeżenia o kompatybilności."""

from .classifier import classify
from .compatibility import (
    ItemShapeHints,
    CompatibilityRule,
    CompatibilityWarning,
    CompatibilityChecker,
)

__all__ = [
    "classify",
    "ItemShapeHints",
    "CompatibilityRule",
    "CompatibilityWarning",
    "CompatibilityChecker",
]
