# Downtime analysis package
from .downtime_report import DowntimeReportService
from .models import DowntimeReport, SegmentData
from .tools import (
    SEGMENT_KEYS,
    AnalysisParseError,
    categorize_item,
    construct_segments_from_legacy_data,
    extract_hours,
    sanitize_text,
)

__all__ = [
    'DowntimeReportService', 'DowntimeReport', 'SegmentData', 'SEGMENT_KEYS',
    'AnalysisParseError', 'categorize_item', 'construct_segments_from_legacy_data',
    'extract_hours', 'sanitize_text',
]
