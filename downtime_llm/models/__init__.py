from .segments import Finding, RootCause, Recommendation, KPI, SegmentData, Severity
from .downtime_report import DowntimeReport

__all__ = [
    'Finding', 'RootCause', 'Recommendation', 'KPI', 'SegmentData', 'Severity',
    'DowntimeReport',
]
