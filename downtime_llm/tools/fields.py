"""
Field coercion helpers for LLM-produced JSON.

Records coming back from the model are loosely typed: numbers arrive as
strings, lists as single strings, and any field may be missing.
"""

import math
from typing import Any, List


def as_text(value: Any) -> str:
    """Text value of a field, "" when missing."""
    if value is None or value is False:
        return ""
    return value if isinstance(value, str) else str(value)


def as_number(value: Any) -> float:
    """Finite float value of a field, 0.0 when missing or not numeric."""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def equipment_names(value: Any) -> List[str]:
    """Normalize an affectedEquipment field to a list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)):
        return []
    return [as_text(name) for name in value]
