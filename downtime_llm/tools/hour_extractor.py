"""
Hour Extractor

Pulls the downtime hour figure out of free-text impact strings such as
"300 hours (~35% of total downtime)".
"""

import re
from typing import Any

# First number followed by an hour unit; ASCII digits, any Unicode whitespace
HOURS_PATTERN = re.compile(r'([0-9]+(?:\.[0-9]+)?)\s*(?:hours?|hrs?)', re.IGNORECASE)


def extract_hours(text: Any) -> float:
    """
    Extract the first hour quantity mentioned in a text.

    Only the first match counts; several mentions are not summed.

    Args:
        text: Impact text (anything else is stringified)

    Returns:
        Hours as a float, 0.0 when the text is empty or has no hour figure
    """
    if not text:
        return 0.0
    if not isinstance(text, str):
        text = str(text)

    match = HOURS_PATTERN.search(text)
    return float(match.group(1)) if match else 0.0
