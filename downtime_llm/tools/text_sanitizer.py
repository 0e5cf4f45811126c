"""
Text Sanitizer

Strips markdown and formatting artifacts that LLMs leave in report text
before it is shown in the report views or exported.
"""

import re
from typing import Any, Dict, List, Mapping, Tuple

# Applied in order; later rules assume earlier markers are gone
MARKDOWN_RULES: List[Tuple[re.Pattern, str]] = [
    (re.compile(r'^#{1,6}\s*', re.MULTILINE), ''),            # headers
    (re.compile(r'\*\*(.*?)\*\*'), r'\1'),                     # bold
    (re.compile(r'__(.*?)__'), r'\1'),
    (re.compile(r'\*(.*?)\*'), r'\1'),                         # italic
    (re.compile(r'_(.*?)_'), r'\1'),
    (re.compile(r'^\s*[-*+•]\s*', re.MULTILINE), ''),          # bullets
    (re.compile(r'^\s*\d+[.)]\s*', re.MULTILINE), ''),         # numbered lists
    (re.compile(r'\[([^\]]+)\]\([^)]+\)'), r'\1'),             # links
    (re.compile(r'`+([^`]*)`+'), r'\1'),                       # inline code
    (re.compile(r'^>\s*', re.MULTILINE), ''),                  # blockquotes
    (re.compile(r'[“”]'), '"'),
    (re.compile(r'[‘’]'), "'"),
    (re.compile(r'\n{2,}'), ' '),
    (re.compile(r'\s{2,}'), ' '),
]


def sanitize_text(text: Any) -> str:
    """
    Clean LLM text for display and export.

    Args:
        text: Raw text, possibly containing markdown

    Returns:
        Plain single-spaced text, "" for empty input
    """
    if not text:
        return ""
    if not isinstance(text, str):
        text = str(text)

    for pattern, replacement in MARKDOWN_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


# Free-text fields cleaned for export, per record list
EXPORT_TEXT_FIELDS: Dict[str, Tuple[str, ...]] = {
    "findings": ("title", "description", "impact"),
    "rootCauses": ("cause", "evidence"),
    "recommendations": ("title", "description", "expectedOutcome"),
}


def has_exportable_items(segment: Mapping[str, Any]) -> bool:
    """True when a segment has findings, root causes or recommendations."""
    return any(segment.get(field) for field in EXPORT_TEXT_FIELDS)


def sanitize_segment(segment: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Export-ready copy of a segment dict with free text sanitized.

    The input segment is left unchanged.
    """
    cleaned = dict(segment)
    cleaned["executiveSummary"] = sanitize_text(segment.get("executiveSummary"))

    for list_field, text_fields in EXPORT_TEXT_FIELDS.items():
        records = segment.get(list_field)
        if not isinstance(records, list):
            continue
        cleaned[list_field] = [
            {
                **record,
                **{name: sanitize_text(record.get(name)) for name in text_fields if name in record},
            }
            if isinstance(record, Mapping) else record
            for record in records
        ]
    return cleaned
