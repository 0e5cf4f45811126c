# Segmentation and parsing tools
from .segment_classifier import SEGMENT_KEYS, categorize_item
from .hour_extractor import extract_hours
from .segment_builder import construct_segments_from_legacy_data
from .analysis_parser import AnalysisParseError
from .text_sanitizer import sanitize_text, sanitize_segment

__all__ = [
    'SEGMENT_KEYS', 'categorize_item', 'extract_hours',
    'construct_segments_from_legacy_data', 'AnalysisParseError',
    'sanitize_text', 'sanitize_segment',
]
