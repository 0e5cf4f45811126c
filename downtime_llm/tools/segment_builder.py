"""
Segment Builder

Rebuilds the four-segment view (safety, quality, operations, maintenance)
from analyses that predate native segmentation. Root causes, patterns and
recommendations are classified into segments, hours found in root-cause
impact text are attributed directly, and the untracked remainder of the
declared total is apportioned by item count.

When the analysis already carries segments they are returned untouched.
"""

import logging
import math
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from ..models.segments import Finding, RootCause, Recommendation, SegmentData
from .hour_extractor import extract_hours
from .fields import as_number, as_text, equipment_names
from .segment_classifier import SEGMENT_KEYS, categorize_item

logger = logging.getLogger(__name__)

DEFAULT_OWNER = "Maintenance Team"
DEFAULT_TIMELINE = "30 days"
DEFAULT_RISK_LEVEL = "medium"

# Severity cutoffs: item count is inclusive, hours share is strict
HIGH_ITEM_COUNT = 3
MEDIUM_ITEM_COUNT = 2
HIGH_HOURS_PERCENT = 30
MEDIUM_HOURS_PERCENT = 15

# Seed content for each segment before any items are distributed
SEGMENT_DEFAULTS = MappingProxyType({
    "safety": MappingProxyType({
        "summary": (
            "Safety-related downtime analysis focusing on incidents that could "
            "impact worker safety or create hazardous conditions."
        ),
        "key_metrics": MappingProxyType({"incidentCount": 0, "nearMissCount": 0, "riskScore": "N/A"}),
    }),
    "quality": MappingProxyType({
        "summary": (
            "Quality-related downtime analysis focusing on defects, rework, "
            "and product specification issues."
        ),
        "key_metrics": MappingProxyType({"defectRate": "0%", "scrapCost": "$0", "firstPassYield": "N/A"}),
    }),
    "operations": MappingProxyType({
        "summary": (
            "Operations-related downtime focusing on throughput, changeovers, "
            "and process inefficiencies."
        ),
        "key_metrics": MappingProxyType({"oeeScore": "N/A", "throughputLoss": "0%", "changeoverTime": "N/A"}),
    }),
    "maintenance": MappingProxyType({
        "summary": (
            "Maintenance-related downtime focusing on equipment failures, "
            "breakdowns, and preventive maintenance gaps."
        ),
        "key_metrics": MappingProxyType({"mtbf": "N/A", "mttr": "N/A", "pmCompliance": "N/A"}),
    }),
})


# ── Field helpers ─────────────────────────────────────────────────────────────

def _as_records(value: Any) -> List[Mapping[str, Any]]:
    """Keep only mapping entries of a list field."""
    if not isinstance(value, (list, tuple)):
        return []
    return [entry for entry in value if isinstance(entry, Mapping)]


def _first_text(record: Mapping[str, Any], *fields: str, default: str = "") -> str:
    """First non-empty text among the given fields."""
    for field in fields:
        text = as_text(record.get(field))
        if text:
            return text
    return default


def round_hours(hours: float) -> float:
    """Round half-up to one decimal. Infinite and NaN values pass through."""
    if not math.isfinite(hours * 10):
        return hours
    return math.floor(hours * 10 + 0.5) / 10


def format_hours(hours: float) -> str:
    """Render hours without a trailing .0 for whole values."""
    if float(hours).is_integer():
        return str(int(hours))
    return str(hours)


def resolve_total_hours(analysis: Mapping[str, Any]) -> float:
    """
    Declared total downtime: summary.totalDowntimeHours, then the
    top-level totalDowntimeHours, then 0.
    """
    summary = analysis.get("summary")
    if isinstance(summary, Mapping):
        from_summary = as_number(summary.get("totalDowntimeHours"))
        if from_summary:
            return from_summary
    return as_number(analysis.get("totalDowntimeHours"))


# ── Record normalization ──────────────────────────────────────────────────────

def _root_cause_from(record: Mapping[str, Any]) -> RootCause:
    return RootCause(
        cause=as_text(record.get("cause")),
        evidence=_first_text(record, "evidence", "estimatedImpact"),
        risk_level=_first_text(record, "priority", default=DEFAULT_RISK_LEVEL),
    )


def _finding_from(record: Mapping[str, Any]) -> Finding:
    return Finding(
        title=as_text(record.get("title")),
        description=as_text(record.get("description")),
        severity=as_text(record.get("severity")),
        affected_equipment=equipment_names(record.get("affectedEquipment")),
        impact=f"Frequency: {as_text(record.get('frequency'))}",
    )


def _recommendation_from(record: Mapping[str, Any]) -> Recommendation:
    return Recommendation(
        title=_first_text(record, "title", "action"),
        description=_first_text(record, "description", "action"),
        priority=as_text(record.get("priority")),
        expected_outcome=as_text(record.get("expectedImpact")),
        timeline=_first_text(record, "timeframe", "implementation", default=DEFAULT_TIMELINE),
        owner=DEFAULT_OWNER,
    )


# ── Derivations ───────────────────────────────────────────────────────────────

def derive_severity(item_count: int, hours_percent: float) -> str:
    """
    Severity from item count and share of total hours.

    Either signal is enough to raise the level.
    """
    if item_count >= HIGH_ITEM_COUNT or hours_percent > HIGH_HOURS_PERCENT:
        return "high"
    if item_count >= MEDIUM_ITEM_COUNT or hours_percent > MEDIUM_HOURS_PERCENT:
        return "medium"
    return "low"


def summarize_segment(segment_key: str, segment: SegmentData) -> str:
    """Executive summary naming the first two findings / root causes."""
    top_items = (list(segment.findings) + list(segment.root_causes))[:2]
    top_issues = ", ".join(
        getattr(item, "title", "") or getattr(item, "cause", "") for item in top_items
    )
    return (
        f"{format_hours(segment.downtime_hours)} hours of downtime attributed to "
        f"{segment_key}-related issues. Primary concerns: {top_issues}."
    )


def create_empty_segments() -> Dict[str, SegmentData]:
    """Fresh seeded segments: zero hours, low severity, boilerplate summary."""
    return {
        key: SegmentData(
            downtime_hours=0.0,
            severity="low",
            executive_summary=SEGMENT_DEFAULTS[key]["summary"],
            key_metrics=dict(SEGMENT_DEFAULTS[key]["key_metrics"]),
        )
        for key in SEGMENT_KEYS
    }


def apportion_hours(
    tracked_hours: Mapping[str, float],
    item_counts: Mapping[str, int],
    total_hours: float,
) -> Dict[str, float]:
    """
    Directly tracked hours plus a count-proportional share of the rest.

    The untracked remainder is not clamped: it goes negative when the
    extracted hours exceed the declared total.
    """
    untracked = total_hours - sum(tracked_hours.values())
    total_count = sum(item_counts.values()) or 1

    return {
        key: round_hours(tracked_hours.get(key, 0.0) + (item_counts.get(key, 0) / total_count) * untracked)
        for key in SEGMENT_KEYS
    }


# ── Builder ───────────────────────────────────────────────────────────────────

def has_native_segments(analysis: Mapping[str, Any]) -> bool:
    """True when the analysis carries a segments field to pass through."""
    native_segments = analysis.get("segments")
    return isinstance(native_segments, (Mapping, list, tuple)) or bool(native_segments)


def construct_segments_from_legacy_data(analysis: Any) -> Optional[Any]:
    """
    Build the segment mapping for a downtime analysis.

    Args:
        analysis: Parsed analysis blob (camelCase keys). Never mutated.

    Returns:
        analysis["segments"] unchanged when present, otherwise a fresh
        mapping of segment key -> SegmentData dict (camelCase keys).
        None when no analysis was given.
    """
    if not isinstance(analysis, Mapping):
        if not analysis:
            return None
        analysis = {}

    if has_native_segments(analysis):
        logger.debug("Analysis carries native segments, skipping reconstruction")
        return analysis["segments"]

    total_hours = resolve_total_hours(analysis)
    segments = create_empty_segments()
    tracked_hours: Dict[str, float] = {key: 0.0 for key in SEGMENT_KEYS}

    # Root causes carry hour-bearing impact text
    for record in _as_records(analysis.get("rootCauseAnalysis")):
        segment_key = categorize_item(record)
        tracked_hours[segment_key] += extract_hours(record.get("estimatedImpact"))
        segments[segment_key].root_causes.append(_root_cause_from(record))

    for record in _as_records(analysis.get("patterns")):
        segments[categorize_item(record)].findings.append(_finding_from(record))

    for record in _as_records(analysis.get("recommendations")):
        segments[categorize_item(record)].recommendations.append(_recommendation_from(record))

    item_counts = {key: segments[key].item_count for key in SEGMENT_KEYS}
    hours = apportion_hours(tracked_hours, item_counts, total_hours)

    for key in SEGMENT_KEYS:
        segment = segments[key]
        segment.downtime_hours = hours[key]

        hours_percent = (segment.downtime_hours / total_hours) * 100 if total_hours > 0 else 0
        segment.severity = derive_severity(segment.item_count, hours_percent)

        if segment.item_count > 0:
            segment.executive_summary = summarize_segment(key, segment)

    logger.debug(
        f"Reconstructed segments from legacy analysis: total={total_hours}h, "
        f"tracked={sum(tracked_hours.values())}h, items={item_counts}"
    )

    return {key: segment.model_dump(by_alias=True) for key, segment in segments.items()}
