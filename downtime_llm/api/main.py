"""
Downtime Analysis - FastAPI Server

Exposes downtime report parsing and segmentation via REST API.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import get_settings
from ..downtime_report import DowntimeReportService
from ..tools.analysis_parser import AnalysisParseError
from ..tools.segment_classifier import SEGMENT_KEYS

settings = get_settings()

logger = logging.getLogger(__name__)
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# ── Globals (initialized at startup) ──
service: Optional[DowntimeReportService] = None


# ── Request / Response schemas ──

class SegmentsRequest(BaseModel):
    analysis: Optional[Dict[str, Any]] = None


class ParseReportRequest(BaseModel):
    raw_response: str = Field(..., min_length=1)
    calculated_total_hours: float = Field(0.0, ge=0.0)
    parsed_record_count: int = Field(0, ge=0)


# ── Lifespan: startup / shutdown ──

@asynccontextmanager
async def lifespan(app: FastAPI):
    global service

    logger.info("Starting up, initializing downtime report service...")
    service = DowntimeReportService(settings=settings)

    yield  # app is running

    logger.info("Shutting down")
    service = None


# ── App ──

app = FastAPI(
    title="Downtime Analysis API",
    description="Downtime report parsing and segmentation for maintenance analytics",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _require_service() -> DowntimeReportService:
    if service is None:
        raise HTTPException(status_code=503, detail="Server still initializing")
    return service


# ── Endpoints ──

@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "segments": list(SEGMENT_KEYS),
    }


@app.post("/segments")
async def segments(req: SegmentsRequest):
    """Segment view for an analysis (native or reconstructed)."""
    report_service = _require_service()
    return {"segments": report_service.build_segments(req.analysis)}


@app.post("/segments/{segment_key}/export")
async def export_segment(segment_key: str, req: SegmentsRequest):
    """Sanitized single segment for PDF export."""
    report_service = _require_service()
    if segment_key not in SEGMENT_KEYS:
        raise HTTPException(status_code=404, detail=f"Unknown segment '{segment_key}'")

    exported = report_service.export_segment(req.analysis, segment_key)
    if exported is None:
        raise HTTPException(
            status_code=404,
            detail=f"The {segment_key} segment has no findings, root causes, or recommendations to export.",
        )
    return {"segment": segment_key, "data": exported}


@app.post("/reports/parse")
async def parse_report(req: ParseReportRequest):
    """Parse an LLM analysis response into a report with segments."""
    report_service = _require_service()

    try:
        report = report_service.parse_report(
            raw_response=req.raw_response,
            calculated_total_hours=req.calculated_total_hours,
            parsed_record_count=req.parsed_record_count,
        )
        return report_service.report_with_segments(report)

    except AnalysisParseError as e:
        logger.warning(f"Rejected analysis response: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Report parsing error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


# ── Run ──

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
