"""
Downtime Report Data Model

Defines the stored shape of an AI-generated downtime analysis report.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, Any


class DowntimeReport(BaseModel):
    """
    Downtime analysis report as persisted by the report-generation path.

    analysis_data is the parsed LLM blob. It is the source of truth for the
    report views; segments are derived from it on read when it predates
    native segmentation.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "recordCount": 412,
                "totalDowntimeHours": 100.0,
                "analysisData": {
                    "summary": {"totalDowntimeHours": 100.0},
                    "rootCauseAnalysis": [
                        {
                            "cause": "Mixer gearbox bearing failure",
                            "estimatedImpact": "40 hours (~40% of total downtime)",
                            "priority": "high"
                        }
                    ],
                    "patterns": [],
                    "recommendations": []
                }
            }
        },
    )

    record_count: int = Field(0, ge=0, description="Number of downtime records analyzed")
    total_downtime_hours: float = Field(0.0, description="Declared total downtime in hours")
    analysis_data: Dict[str, Any] = Field(default_factory=dict, description="Parsed LLM analysis blob")
