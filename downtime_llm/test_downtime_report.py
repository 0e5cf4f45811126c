"""
Unit tests for the downtime report service.

Run: python -m pytest downtime_llm/test_downtime_report.py -v
"""

import json
import logging

import pytest

from downtime_llm.config import Settings
from downtime_llm.downtime_report import DowntimeReportService
from downtime_llm.models import DowntimeReport
from downtime_llm.tools.analysis_parser import AnalysisParseError


LEGACY_RESPONSE = {
    "recordCount": 412,
    "totalDowntimeHours": 100,
    "summary": {"totalDowntimeHours": 100, "primaryCauses": ["Mixer bearing failure"]},
    "rootCauseAnalysis": [
        {"cause": "Mixer bearing failure", "estimatedImpact": "40 hours", "priority": "high"}
    ],
    "patterns": [
        {"title": "Extended changeover on Line 2", "frequency": "Weekly"}
    ],
    "recommendations": [
        {"title": "Retrain operators on **changeover**", "priority": "medium"}
    ],
}


@pytest.fixture
def service():
    return DowntimeReportService(settings=Settings())


class TestParseReport:

    def test_totals_from_analysis(self, service):
        report = service.parse_report(json.dumps(LEGACY_RESPONSE))
        assert isinstance(report, DowntimeReport)
        assert report.record_count == 412
        assert report.total_downtime_hours == 100
        assert report.analysis_data["rootCauseAnalysis"] == LEGACY_RESPONSE["rootCauseAnalysis"]

    def test_underreported_hours_replaced(self, service):
        report = service.parse_report(json.dumps(LEGACY_RESPONSE), calculated_total_hours=250)
        assert report.total_downtime_hours == 250
        assert report.analysis_data["summary"]["totalDowntimeHours"] == 250

    def test_plausible_hours_kept(self, service):
        report = service.parse_report(json.dumps(LEGACY_RESPONSE), calculated_total_hours=150)
        assert report.total_downtime_hours == 100
        assert report.analysis_data["summary"]["totalDowntimeHours"] == 100

    def test_ratio_is_configurable(self):
        strict = DowntimeReportService(settings=Settings(hours_underreport_ratio=0.9))
        report = strict.parse_report(json.dumps(LEGACY_RESPONSE), calculated_total_hours=150)
        assert report.total_downtime_hours == 150

    def test_record_count_floor(self, service):
        report = service.parse_report(json.dumps(LEGACY_RESPONSE), parsed_record_count=500)
        assert report.record_count == 500
        report = service.parse_report(json.dumps(LEGACY_RESPONSE), parsed_record_count=10)
        assert report.record_count == 412

    def test_native_recommendations_cleaned(self, service):
        response = {
            "recordCount": 3,
            "segments": {"maintenance": {"recommendations": [{"title": "PM audit", "c4Step": "12"}]}},
        }
        report = service.parse_report(json.dumps(response))
        rec = report.analysis_data["segments"]["maintenance"]["recommendations"][0]
        assert rec["c4Step"] == 4
        assert rec["c4StepName"] == "Preventive Maintenance Excellence"

    def test_incomplete_response_rejected(self, service):
        with pytest.raises(AnalysisParseError):
            service.parse_report(json.dumps({"recommendations": []}))

    def test_non_json_rejected(self, service):
        with pytest.raises(AnalysisParseError):
            service.parse_report("The model is overloaded, try again later.")


class TestSegments:

    def test_report_payload_has_segments(self, service):
        report = service.parse_report(json.dumps(LEGACY_RESPONSE))
        payload = service.report_with_segments(report)
        assert payload["recordCount"] == 412
        assert payload["totalDowntimeHours"] == 100
        assert payload["segments"]["maintenance"]["downtimeHours"] == 70.0
        assert payload["segments"]["operations"]["downtimeHours"] == 30.0
        assert "segments" not in payload["analysisData"]

    def test_native_segments_returned(self, service):
        native = {"safety": {"downtimeHours": 5}}
        assert service.build_segments({"segments": native}) is native

    def test_empty_native_segments_logged_as_pass_through(self, service, caplog):
        native = {}
        with caplog.at_level(logging.DEBUG, logger="downtime_llm.downtime_report"):
            assert service.build_segments({"segments": native}) is native
        assert "Using native segments from analysis" in caplog.text
        assert "Reconstructing" not in caplog.text

    def test_no_analysis(self, service):
        assert service.build_segments(None) is None

    def test_export_segment_sanitized(self, service):
        exported = service.export_segment(LEGACY_RESPONSE, "operations")
        assert exported["recommendations"][0]["title"] == "Retrain operators on changeover"
        assert exported["findings"][0]["impact"] == "Frequency: Weekly"

    def test_export_empty_segment(self, service):
        assert service.export_segment(LEGACY_RESPONSE, "safety") is None

    def test_export_without_analysis(self, service):
        assert service.export_segment(None, "maintenance") is None
