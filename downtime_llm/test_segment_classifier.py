"""
Unit tests for segment classification.

Run: python -m pytest downtime_llm/test_segment_classifier.py -v
"""

import pytest

from downtime_llm.tools.segment_classifier import SEGMENT_KEYS, categorize_item


class TestCategoryBranches:
    """An explicit category is resolved before any keyword fallback."""

    def test_mechanical_sensor_beats_maintenance_keyword(self):
        item = {"category": "mechanical", "cause": "Sensor drift on bearing housing"}
        assert categorize_item(item) == "quality"

    def test_mechanical_guard_is_safety(self):
        item = {"category": "mechanical", "cause": "Guard interlock failure"}
        assert categorize_item(item) == "safety"

    def test_electrical_without_subpattern_is_maintenance(self):
        item = {"category": "electrical", "cause": "Motor overload trip"}
        assert categorize_item(item) == "maintenance"

    def test_category_is_case_insensitive(self):
        item = {"category": "Mechanical", "title": "Conveyor alignment drift"}
        assert categorize_item(item) == "quality"

    def test_process_changeover_is_operations(self):
        item = {"category": "process", "title": "Extended changeover on line 3"}
        assert categorize_item(item) == "operations"

    def test_planned_maintenance_contamination_is_quality(self):
        item = {"category": "planned maintenance", "description": "Product contamination after wash"}
        assert categorize_item(item) == "quality"

    def test_process_without_subpattern_is_operations(self):
        item = {"category": "process", "title": "Slow line"}
        assert categorize_item(item) == "operations"

    def test_category_branch_ignores_equipment_names(self):
        item = {
            "category": "mechanical",
            "title": "Drive failure",
            "affectedEquipment": ["Vision sensor"],
        }
        assert categorize_item(item) == "maintenance"


class TestKeywordFallback:
    """Without a recognized category: safety, quality, operations, maintenance."""

    def test_safety_beats_operations(self):
        assert categorize_item({"title": "Operator injury near conveyor"}) == "safety"

    def test_safety_beats_quality(self):
        assert categorize_item({"cause": "Leak caused product contamination"}) == "safety"

    def test_quality_beats_operations(self):
        assert categorize_item({"title": "Operator rework of rejected cases"}) == "quality"

    def test_quality_keywords(self):
        assert categorize_item({"title": "Label misprint causing rejects"}) == "quality"

    def test_maintenance_keywords(self):
        assert categorize_item({"title": "Mixer bearing replacement"}) == "maintenance"

    def test_equipment_names_are_searched(self):
        item = {"title": "Line stop", "affectedEquipment": ["Light Curtain 4"]}
        assert categorize_item(item) == "safety"

    def test_evidence_is_searched(self):
        item = {"cause": "Unplanned stop", "evidence": "Hydraulic pressure loss"}
        assert categorize_item(item) == "maintenance"

    def test_unrecognized_category_text_is_searched(self):
        assert categorize_item({"category": "Safety", "title": "Line stop"}) == "safety"
        assert categorize_item({"category": "Quality", "title": "Line stop"}) == "quality"

    def test_estimated_impact_is_not_searched(self):
        item = {"cause": "Unplanned stop", "estimatedImpact": "12 hours of safety hold"}
        assert categorize_item(item) == "maintenance"

    def test_recommendation_action_is_not_searched(self):
        assert categorize_item({"action": "Install guard on filler"}) == "maintenance"


class TestDefaults:
    """Classification is total and always yields a known segment."""

    @pytest.mark.parametrize("item", [
        {},
        {"title": "Unknown"},
        None,
        "not a record",
        {"category": None, "title": None, "affectedEquipment": None},
        {"category": 7, "affectedEquipment": "Filler 2"},
    ])
    def test_falls_back_to_known_segment(self, item):
        assert categorize_item(item) in SEGMENT_KEYS

    def test_empty_item_is_maintenance(self):
        assert categorize_item({}) == "maintenance"

    def test_deterministic(self):
        item = {"title": "Operator shift handover", "description": "Mixer bearing wear"}
        assert len({categorize_item(item) for _ in range(5)}) == 1
