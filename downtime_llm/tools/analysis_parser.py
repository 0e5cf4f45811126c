"""
Downtime Analysis Parser

Turns the raw text returned by the downtime-analysis LLM call into an
analysis mapping, checks it has the minimum structure, and normalizes the
Path to Excellence (C4) tagging on native segment recommendations.
"""

import copy
import json
import logging
import math
import re
from typing import Any, Dict, List, Mapping, Tuple

from .fields import as_number
from .segment_classifier import SEGMENT_KEYS

logger = logging.getLogger(__name__)

VALID_C4_STEPS: Dict[int, str] = {
    0: "Initial Process Assessment",
    1: "Equipment Criticality Assessment",
    2: "Root Cause Analysis System",
    3: "Storeroom MRO Optimization",
    4: "Preventive Maintenance Excellence",
    5: "Data-Driven Performance Management",
}

DEFAULT_C4_STEP = 4
MAX_RATIONALE_LENGTH = 500

_JSON_OBJECT_RE = re.compile(r'\{[\s\S]*\}')
_LEADING_INT_RE = re.compile(r'^\s*([+-]?\d+)', re.ASCII)
_GARBAGE_RE = re.compile(r'[!@#$%^&*(){}\[\]|\\<>?~`+=]')


class AnalysisParseError(ValueError):
    """LLM output could not be turned into a usable downtime analysis."""


def extract_analysis_json(raw: str) -> Dict[str, Any]:
    """
    Parse an LLM response into an analysis mapping.

    Tries the whole text first, then the outermost {...} block so that
    code fences or prose around the JSON are tolerated.

    Raises:
        AnalysisParseError: If no JSON object can be recovered
    """
    if not raw or not raw.strip():
        raise AnalysisParseError("AI returned an empty response")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        json_match = _JSON_OBJECT_RE.search(raw)
        if not json_match:
            raise AnalysisParseError("No JSON found in AI response")
        try:
            data = json.loads(json_match.group())
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse AI response as JSON: {e}")
            raise AnalysisParseError("AI returned invalid JSON") from e

    if not isinstance(data, dict):
        raise AnalysisParseError(f"AI response is a JSON {type(data).__name__}, expected an object")

    return data


def validate_analysis(analysis: Mapping[str, Any]) -> None:
    """
    Ensure the analysis has the minimum required structure.

    Raises:
        AnalysisParseError: If recordCount, summary and patterns are all missing
    """
    if not analysis.get("recordCount") and not analysis.get("summary") and not analysis.get("patterns"):
        logger.error(f"AI response missing required fields, keys: {sorted(analysis.keys())}")
        raise AnalysisParseError("AI response incomplete - missing required analysis fields")


def _parse_c4_step(value: Any) -> int:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(value) if math.isfinite(value) else DEFAULT_C4_STEP
    match = _LEADING_INT_RE.match(value) if isinstance(value, str) else None
    step = int(match.group(1)) if match else 0
    return step or DEFAULT_C4_STEP


def clean_recommendations(recs: Any) -> List[Dict[str, Any]]:
    """
    Validate and repair C4 step tagging on recommendations.

    Args:
        recs: Recommendation list from a native segment

    Returns:
        New list of recommendation dicts; the input is not modified
    """
    if not isinstance(recs, list):
        return []

    cleaned = []
    for rec in recs:
        if not isinstance(rec, Mapping):
            continue

        step = _parse_c4_step(rec.get("c4Step"))
        if step < 0 or step > 5:
            step = DEFAULT_C4_STEP
        valid_name = VALID_C4_STEPS[step]

        current_name = rec.get("c4StepName") or ""
        is_valid_name = current_name in VALID_C4_STEPS.values()

        rationale = rec.get("c4StepRationale") or ""
        if not isinstance(rationale, str):
            rationale = str(rationale)
        if len(rationale) > MAX_RATIONALE_LENGTH or _GARBAGE_RE.search(rationale[:50]):
            rationale = (
                f"This recommendation aligns with {valid_name} because it addresses "
                f"the identified issue through the step's implementation checklist."
            )

        cleaned.append({
            **rec,
            "c4Step": step,
            "c4StepName": current_name if is_valid_name else valid_name,
            "c4StepRationale": rationale,
        })
    return cleaned


def clean_segment_recommendations(analysis: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of the analysis with every native segment's recommendations cleaned."""
    result = copy.deepcopy(dict(analysis))
    segments = result.get("segments")
    if not isinstance(segments, dict):
        return result

    for segment_key in SEGMENT_KEYS:
        segment = segments.get(segment_key)
        if isinstance(segment, dict) and segment.get("recommendations"):
            segment["recommendations"] = clean_recommendations(segment["recommendations"])
    return result


def resolve_report_totals(analysis: Mapping[str, Any]) -> Tuple[int, float]:
    """
    Record count and total downtime hours reported by the AI.

    Returns:
        (record_count, total_downtime_hours), zeros when absent
    """
    summary = analysis.get("summary")
    summary_hours = summary.get("totalDowntimeHours") if isinstance(summary, Mapping) else None

    record_count = as_number(analysis.get("recordCount"))
    total_hours = as_number(analysis.get("totalDowntimeHours")) or as_number(summary_hours)
    return max(int(record_count), 0), total_hours

