"""survey_validator.core.solver

Traverse adjustment and leveling reduction.
"""

from .bowditch import adjust_traverse_bowditch, suggest_fixes
from .leveling import reduce_leveling, reduce_rise_fall, allowable_misclosure, distribute_misclosure

__all__ = [
    "adjust_traverse_bowditch",
    "suggest_fixes",
    "reduce_leveling",
    "reduce_rise_fall",
    "allowable_misclosure",
    "distribute_misclosure",
]
