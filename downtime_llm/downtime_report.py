"""
Downtime Report Service

Main entry point for downtime reports. Coordinates the report workflow:
parse the LLM analysis, reconcile its totals with the uploaded file,
and derive the four-segment view for the report pages and exports.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from .config import Settings, get_settings
from .models.downtime_report import DowntimeReport
from .tools.analysis_parser import (
    extract_analysis_json,
    validate_analysis,
    clean_segment_recommendations,
    resolve_report_totals,
)
from .tools.segment_builder import construct_segments_from_legacy_data, has_native_segments
from .tools.text_sanitizer import has_exportable_items, sanitize_segment

logger = logging.getLogger(__name__)


class DowntimeReportService:
    """
    Report-side orchestration around the segmentation core.

    Holds no per-report state; one instance can serve any number of
    concurrent requests.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the service.

        Args:
            settings: Service settings (defaults to the environment)
        """
        self.settings = settings or get_settings()
        logger.info("Downtime report service initialized")

    def parse_report(
        self,
        raw_response: str,
        calculated_total_hours: float = 0.0,
        parsed_record_count: int = 0,
    ) -> DowntimeReport:
        """
        Build a report from the raw LLM analysis text.

        Args:
            raw_response: Text returned by the analysis LLM call
            calculated_total_hours: Total hours summed from the uploaded file
            parsed_record_count: Number of records parsed from the uploaded file

        Returns:
            DowntimeReport with reconciled totals

        Raises:
            AnalysisParseError: If the response is not a usable analysis
        """
        analysis = extract_analysis_json(raw_response)
        validate_analysis(analysis)
        analysis = clean_segment_recommendations(analysis)

        record_count, total_hours = resolve_report_totals(analysis)
        logger.debug(f"Parsed AI result: recordCount={record_count}, totalDowntimeHours={total_hours}")

        # Use calculated total hours if AI underreported
        threshold = calculated_total_hours * self.settings.hours_underreport_ratio
        if calculated_total_hours > 0 and total_hours < threshold:
            logger.info(
                f"Correcting total hours from AI: reported={total_hours}, calculated={calculated_total_hours}"
            )
            total_hours = calculated_total_hours
            if isinstance(analysis.get("summary"), dict):
                analysis["summary"]["totalDowntimeHours"] = calculated_total_hours

        # Use actual record count
        if parsed_record_count > record_count:
            logger.info(
                f"Correcting record count from AI: reported={record_count}, parsed={parsed_record_count}"
            )
            record_count = parsed_record_count

        logger.info(f"AI generated report: recordCount={record_count}, totalHours={total_hours:.2f}")

        return DowntimeReport(
            record_count=record_count,
            total_downtime_hours=total_hours,
            analysis_data=analysis,
        )

    def build_segments(self, analysis: Any) -> Optional[Any]:
        """
        Segment view for an analysis: native segments when present,
        otherwise reconstructed from legacy fields.
        """
        if isinstance(analysis, Mapping) and has_native_segments(analysis):
            logger.debug("Using native segments from analysis")
        else:
            logger.debug("Reconstructing segments from legacy analysis fields")
        return construct_segments_from_legacy_data(analysis)

    def report_with_segments(self, report: DowntimeReport) -> Dict[str, Any]:
        """JSON payload of a report with its derived segments attached."""
        payload = report.model_dump(by_alias=True)
        payload["segments"] = self.build_segments(report.analysis_data)
        return payload

    def export_segment(self, analysis: Any, segment_key: str) -> Optional[Dict[str, Any]]:
        """
        Export-ready copy of one segment.

        Returns:
            Sanitized segment dict, or None when the segment is missing
            or has nothing to export
        """
        segments = self.build_segments(analysis)
        if not isinstance(segments, dict):
            return None

        segment = segments.get(segment_key)
        if not isinstance(segment, dict) or not has_exportable_items(segment):
            logger.info(f"No data to export for segment '{segment_key}'")
            return None

        return sanitize_segment(segment)
