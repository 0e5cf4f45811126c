"""
Segment Classifier

Assigns a root cause, pattern or recommendation to one of the four
business segments: safety, quality, operations, maintenance.

An explicit category always outranks keyword inference. Without a
recognized category the keyword classes are tried in a fixed order
(safety, quality, operations, maintenance) and maintenance is the
catch-all. Items often match several classes, so the order decides.
"""

import re
from typing import Any, List, Mapping, Optional, Tuple

from .fields import as_text, equipment_names

SEGMENT_KEYS: Tuple[str, ...] = ("safety", "quality", "operations", "maintenance")

DEFAULT_SEGMENT = "maintenance"

EQUIPMENT_CATEGORIES = ("mechanical", "electrical")
PROCESS_CATEGORIES = ("process", "planned maintenance")

# Sub-patterns applied when the category is mechanical / electrical
EQUIPMENT_SUBPATTERNS: List[Tuple[str, re.Pattern]] = [
    ("quality", re.compile(r'sensor|alignment|calibration|inspection', re.IGNORECASE)),
    ("safety", re.compile(r'safety|guard|lockout|emergency', re.IGNORECASE)),
]

# Sub-patterns applied when the category is process / planned maintenance
# (sanitation counts as planned maintenance and lands in operations)
PROCESS_SUBPATTERNS: List[Tuple[str, re.Pattern]] = [
    ("operations", re.compile(r'sanitation|cleaning|changeover|setup', re.IGNORECASE)),
    ("quality", re.compile(r'quality|defect|contamination', re.IGNORECASE)),
]

# Keyword fallback, checked in this order
KEYWORD_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ("safety", re.compile(
        r'safety|hazard|injury|incident|guard|lockout|loto|ppe|emergency|fire|spill|leak|exposure|light.?curtain',
        re.IGNORECASE,
    )),
    ("quality", re.compile(
        r'quality|defect|reject|scrap|rework|spec|tolerance|inspection|calibration|contamination|out.?of.?spec|label|misprint',
        re.IGNORECASE,
    )),
    ("operations", re.compile(
        r'changeover|change.?over|setup|operator|training|material|supply|scheduling|throughput|speed|rate|staffing|shift|sanitation|cleaning|process',
        re.IGNORECASE,
    )),
    ("maintenance", re.compile(
        r'belt|motor|bearing|wear|alignment|breakdown|failure|repair|replace|mechanical|hydraulic|pneumatic|sleeve|machine|dough|mixer',
        re.IGNORECASE,
    )),
]


def _first_match(patterns: List[Tuple[str, re.Pattern]], text: str) -> Optional[str]:
    for segment, pattern in patterns:
        if pattern.search(text):
            return segment
    return None


def categorize_item(item: Mapping[str, Any]) -> str:
    """
    Decide which segment an analysis item belongs to.

    Never fails: a missing or malformed item falls through to the
    maintenance default.

    Args:
        item: Root cause, pattern or recommendation record (camelCase keys)

    Returns:
        One of SEGMENT_KEYS
    """
    if not isinstance(item, Mapping):
        item = {}

    category = as_text(item.get("category")).lower()
    text = " ".join(
        as_text(item.get(field))
        for field in ("cause", "title", "description", "evidence")
    ).lower()
    equipment = " ".join(name.lower() for name in equipment_names(item.get("affectedEquipment")))
    combined = f"{category} {text} {equipment}"

    if category in EQUIPMENT_CATEGORIES:
        return _first_match(EQUIPMENT_SUBPATTERNS, text) or "maintenance"

    if category in PROCESS_CATEGORIES:
        return _first_match(PROCESS_SUBPATTERNS, text) or "operations"

    return _first_match(KEYWORD_PATTERNS, combined) or DEFAULT_SEGMENT

