#!/usr/bin/env python3
"""
Test Suite for Crop Rotation Analysis
Validates chronological ordering and the three rotation rules
"""

import pytest

from agricultural_config import (
    CONSECUTIVE_CROP_ISSUE, LEGUME_RECOMMENDATION, DIVERSITY_RECOMMENDATION,
    season_index, get_crops_for_category, get_category_for_crop,
)
from crop_rotation import (
    CropEntry, AnalysisResult, sort_crop_plan, analyze_crop_sequence,
    build_timeline, analyze_plan_records,
)


def entry(entry_id, year, season, crop, category):
    return CropEntry(id=entry_id, year=year, season=season, crop=crop, category=category)


# ============================================================================
# SEASONS & CATALOGUE
# ============================================================================

def test_season_index():
    """Test planting-cycle positions, display labels and unknown seasons"""
    assert [season_index(s) for s in ["Kharif", "Rabi", "Zaid"]] == [0, 1, 2]
    assert season_index("Rabi (Winter)") == 1
    assert season_index("rabi") == -1
    assert season_index("") == -1


def test_crop_catalogue():
    """Test category lookups"""
    assert "Chickpea" in get_crops_for_category("Pulses")
    assert get_crops_for_category("Spices") == []
    assert get_category_for_crop("pigeon pea") == "Pulses"
    assert get_category_for_crop("Dragonfruit") is None


# ============================================================================
# CHRONOLOGY SORTER
# ============================================================================

def test_sort_by_year_then_season():
    """Test year first, then Kharif → Rabi → Zaid"""
    plan = [
        entry("1", 2025, "Kharif", "Maize", "Cereals"),
        entry("2", 2024, "Zaid", "Mung Bean", "Pulses"),
        entry("3", 2024, "Kharif", "Rice", "Cereals"),
        entry("4", 2024, "Rabi", "Wheat", "Cereals"),
    ]
    assert [e.id for e in sort_crop_plan(plan)] == ["3", "4", "2", "1"]


def test_sort_unknown_season_first_within_year():
    """Test unrecognised seasons sort before known ones of the same year"""
    plan = [
        entry("1", 2024, "Kharif", "Rice", "Cereals"),
        entry("2", 2024, "Monsoon", "Jute", "Cash Crops"),
        entry("3", 2023, "Zaid", "Okra", "Vegetables"),
        entry("4", 2024, "", "Tomato", "Vegetables"),
    ]
    assert [e.id for e in sort_crop_plan(plan)] == ["3", "2", "4", "1"]


def test_sort_is_stable_and_pure():
    """Test ties keep input order and the input list is untouched"""
    plan = [
        entry("b", 2024, "Rabi", "Wheat", "Cereals"),
        entry("a", 2024, "Rabi", "Mustard", "Oilseeds"),
        entry("c", 2023, "Rabi", "Gram", "Pulses"),
    ]
    original = list(plan)
    result = sort_crop_plan(plan)
    assert [e.id for e in result] == ["c", "b", "a"]
    assert plan == original
    assert result is not plan


def test_sort_accepts_display_labels():
    """Test stored display labels order the same as season names"""
    plan = [
        entry("1", 2024, "Zaid (Summer)", "Cucumber", "Vegetables"),
        entry("2", 2024, "Kharif (Monsoon)", "Cotton", "Cash Crops"),
    ]
    assert [e.id for e in sort_crop_plan(plan)] == ["2", "1"]


# ============================================================================
# RULE ANALYZER
# ============================================================================

def test_empty_plan():
    """Test an empty plan produces no issues and no recommendations"""
    assert analyze_crop_sequence([]) == AnalysisResult(issues=[], recommendations=[])


def test_consecutive_rice_two_entries():
    """Test repeat issue + legume recommendation, no diversity with 2 entries"""
    plan = [
        entry("1", 2024, "Kharif", "Rice", "Cereals"),
        entry("2", 2024, "Rabi", "Rice", "Cereals"),
    ]
    result = analyze_crop_sequence(plan)
    assert result.issues == [CONSECUTIVE_CROP_ISSUE.format(crop="Rice")]
    assert result.recommendations == [LEGUME_RECOMMENDATION]


def test_consecutive_uses_chronological_order():
    """Test repeats are detected after sorting, one issue per adjacent pair"""
    plan = [
        entry("1", 2025, "Kharif", "Rice", "Cereals"),
        entry("2", 2024, "Rabi", "Wheat", "Cereals"),
        entry("3", 2024, "Zaid", "Rice", "Cereals"),
        entry("4", 2024, "Kharif", "Wheat", "Cereals"),
        entry("5", 2025, "Rabi", "Rice", "Cereals"),
    ]
    # Wheat, Wheat, Rice, Rice, Rice
    result = analyze_crop_sequence(plan)
    assert result.issues == [
        CONSECUTIVE_CROP_ISSUE.format(crop="Wheat"),
        CONSECUTIVE_CROP_ISSUE.format(crop="Rice"),
        CONSECUTIVE_CROP_ISSUE.format(crop="Rice"),
    ]
    assert result.recommendations == [LEGUME_RECOMMENDATION, DIVERSITY_RECOMMENDATION]


def test_crop_match_is_case_sensitive():
    """Test "Rice" and "rice" are different crops"""
    plan = [
        entry("1", 2024, "Kharif", "Rice", "Cereals"),
        entry("2", 2024, "Rabi", "rice", "Pulses"),
    ]
    assert analyze_crop_sequence(plan).issues == []


@pytest.mark.parametrize("category", ["Pulses", "Legumes"])
def test_legume_category_suppresses_recommendation(category):
    """Test either legume category satisfies the legume rule"""
    plan = [
        entry("1", 2024, "Kharif", "Rice", "Cereals"),
        entry("2", 2024, "Rabi", "Lentil", category),
    ]
    assert LEGUME_RECOMMENDATION not in analyze_crop_sequence(plan).recommendations


def test_legume_category_exact_match():
    """Test category matching is exact"""
    plan = [entry("1", 2024, "Rabi", "Lentil", "pulses")]
    assert analyze_crop_sequence(plan).recommendations == [LEGUME_RECOMMENDATION]


@pytest.mark.parametrize("categories, expected", [
    (["Cereals", "Cereals", "Cereals"], True),
    (["Pulses", "Pulses", "Pulses", "Pulses"], True),
    (["Cereals", "Pulses", "Cereals"], False),
    (["Cereals", "Cereals"], False),
    (["Cereals"], False),
    (["", "", ""], True),
])
def test_diversity_rule(categories, expected):
    """Test diversity recommendation iff < 2 categories and > 2 entries"""
    plan = [
        entry(str(i), 2020 + i, "Kharif", f"Crop {i}", category)
        for i, category in enumerate(categories)
    ]
    result = analyze_crop_sequence(plan)
    assert (DIVERSITY_RECOMMENDATION in result.recommendations) == expected


def test_blank_entries_tolerated():
    """Test blank crop/category/season rows still run to completion"""
    plan = [
        entry("1", 2024, "", "", ""),
        entry("2", 2024, "", "", ""),
    ]
    result = analyze_crop_sequence(plan)
    assert result.issues == [CONSECUTIVE_CROP_ISSUE.format(crop="")]
    assert result.recommendations == [LEGUME_RECOMMENDATION]


def test_analyze_accepts_generator():
    """Test the plan may be any iterable"""
    plan = (entry(str(i), 2024, s, "Rice", "Cereals") for i, s in enumerate(["Zaid", "Kharif"]))
    assert len(analyze_crop_sequence(plan).issues) == 1


# ============================================================================
# RECORDS & TIMELINE
# ============================================================================

def test_entry_from_dict_tolerant():
    """Test stored records with missing or bad fields"""
    e = CropEntry.from_dict({"id": 17, "year": "2024", "season": "Rabi (Winter)"})
    assert e == CropEntry(id="17", year=2024, season="Rabi (Winter)", crop="", category="")
    assert CropEntry.from_dict({"year": "next"}).year == 0
    assert CropEntry.from_dict({"crop": None}).crop == ""


def test_build_timeline():
    """Test timeline rows are chronological with display labels"""
    plan = [
        entry("1", 2024, "Rabi", "Wheat", "Cereals"),
        entry("2", 2024, "Kharif", "Rice", "Cereals"),
        entry("3", 2024, "Spring", "Okra", "Vegetables"),
    ]
    timeline = build_timeline(plan)
    assert [row["id"] for row in timeline] == ["3", "2", "1"]
    assert [row["position"] for row in timeline] == [1, 2, 3]
    assert timeline[1]["season_label"] == "Kharif (Monsoon)"
    assert timeline[0]["season_label"] == "Spring"


def test_analyze_plan_records():
    """Test records in, JSON-ready analysis out"""
    records = [
        {"id": "1", "year": 2024, "season": "Kharif", "crop": "Rice", "category": "Cereals"},
        {"id": "2", "year": 2024, "season": "Rabi", "crop": "Chickpea", "category": "Pulses"},
    ]
    output = analyze_plan_records(records)
    assert output["issues"] == []
    assert output["recommendations"] == []
    assert [row["crop"] for row in output["timeline"]] == ["Rice", "Chickpea"]
    assert output["version"].startswith("kisansaathi")
