"""
Segment Data Models

Defines the output structure of downtime segmentation: one SegmentData
per business segment (safety, quality, operations, maintenance).
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, List, Literal, Union


Severity = Literal["low", "medium", "high"]

# Wire names are camelCase; the report views and PDF export read them as-is.
_CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Finding(BaseModel):
    """Observed downtime pattern assigned to a segment."""
    model_config = _CAMEL_CONFIG

    title: str = Field("", description="Finding title")
    description: str = Field("", description="Detailed description")
    severity: str = Field("", description="Severity as reported upstream")
    affected_equipment: List[str] = Field(default_factory=list, description="Equipment names")
    impact: str = Field("", description="Impact description")


class RootCause(BaseModel):
    """Root cause attributed to a segment."""
    model_config = _CAMEL_CONFIG

    cause: str = Field("", description="Root cause description")
    evidence: str = Field("", description="Evidence, or the estimated impact when none was given")
    risk_level: str = Field("medium", description="Risk level: critical, high, medium, low")


class Recommendation(BaseModel):
    """Actionable recommendation for a segment."""
    model_config = _CAMEL_CONFIG

    title: str = Field("", description="Recommendation title")
    description: str = Field("", description="What should be done")
    priority: str = Field("", description="Priority level")
    owner: str = Field("Maintenance Team", description="Who should implement this")
    timeline: str = Field("30 days", description="Suggested timeframe")
    expected_outcome: str = Field("", description="Expected impact once implemented")


class KPI(BaseModel):
    """Tracked metric with its target."""
    metric: str
    current: str
    target: str
    gap: str


class SegmentData(BaseModel):
    """
    Downtime analysis for a single business segment.

    downtime_hours is rounded to one decimal; severity is derived from the
    number of items in the segment and its share of the total hours.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "downtimeHours": 70.0,
                "severity": "high",
                "executiveSummary": (
                    "70 hours of downtime attributed to maintenance-related issues. "
                    "Primary concerns: Mixer gearbox bearing failure."
                ),
                "keyMetrics": {"mtbf": "N/A", "mttr": "N/A", "pmCompliance": "N/A"},
                "findings": [],
                "rootCauses": [
                    {
                        "cause": "Mixer gearbox bearing failure",
                        "evidence": "40 hours",
                        "riskLevel": "high"
                    }
                ],
                "recommendations": [],
                "kpis": []
            }
        },
    )

    downtime_hours: float = Field(0.0, description="Hours attributed to this segment")
    severity: Severity = Field("low", description="Derived severity")
    executive_summary: str = Field(..., min_length=1, description="One sentence segment summary")
    key_metrics: Dict[str, Union[int, float, str]] = Field(default_factory=dict, description="Segment metric placeholders")
    findings: List[Finding] = Field(default_factory=list)
    root_causes: List[RootCause] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)
    kpis: List[KPI] = Field(default_factory=list)

    @property
    def item_count(self) -> int:
        """Findings plus root causes; drives apportionment and severity."""
        return len(self.findings) + len(self.root_causes)
