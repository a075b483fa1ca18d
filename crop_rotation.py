"""
Crop Rotation Sequence Analyzer
Orders a farmer's rotation plan chronologically and applies the fixed rotation rules.

Rules (all run, no early exit):
    1. Same crop in two consecutive slots     → issue (one per adjacent pair)
    2. No "Pulses"/"Legumes" category in plan → legume recommendation
    3. < 2 distinct categories over > 2 crops → diversity recommendation

Pure functions: the plan is only read, never modified or stored.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterable, List

from agricultural_config import (
    SEASON_LABELS, LEGUME_CATEGORIES,
    MIN_CATEGORY_DIVERSITY, DIVERSITY_MIN_ENTRIES,
    CONSECUTIVE_CROP_ISSUE, LEGUME_RECOMMENDATION, DIVERSITY_RECOMMENDATION,
    OUTPUT_VERSION, season_index,
)


@dataclass(frozen=True)
class CropEntry:
    id: str
    year: int
    season: str = ""
    crop: str = ""
    category: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CropEntry":
        """
        Build an entry from a stored/JSON record.
        Missing text fields become "" and a non-numeric year becomes 0, so a
        half-filled planner row still sorts and analyzes.
        """
        try:
            year = int(data.get("year", 0))
        except (TypeError, ValueError):
            year = 0
        return cls(
            id=str(data.get("id", "")),
            year=year,
            season=str(data.get("season") or ""),
            crop=str(data.get("crop") or ""),
            category=str(data.get("category") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AnalysisResult:
    issues: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"issues": list(self.issues), "recommendations": list(self.recommendations)}


def _chronology_key(entry: CropEntry):
    return (entry.year, season_index(entry.season))


def sort_crop_plan(plan: Iterable[CropEntry]) -> List[CropEntry]:
    """
    Order a plan by (year, season) without touching the input.

    Seasons follow the planting cycle Kharif → Rabi → Zaid. An unrecognised
    season sorts before every known season of the same year. Entries that tie
    keep their original relative order.
    """
    return sorted(plan, key=_chronology_key)


def analyze_crop_sequence(plan: Iterable[CropEntry]) -> AnalysisResult:
    """
    Apply the rotation rules to a plan (sorted or not).

    Args:
        plan: Crop entries in any order

    Returns:
        AnalysisResult; both lists empty for an empty plan
    """
    entries = list(plan)
    result = AnalysisResult()

    sorted_plan = sort_crop_plan(entries)
    for previous, current in zip(sorted_plan, sorted_plan[1:]):
        if current.crop == previous.crop:
            result.issues.append(CONSECUTIVE_CROP_ISSUE.format(crop=current.crop))

    if entries and not any(entry.category in LEGUME_CATEGORIES for entry in entries):
        result.recommendations.append(LEGUME_RECOMMENDATION)

    unique_categories = {entry.category for entry in entries}
    if len(unique_categories) < MIN_CATEGORY_DIVERSITY and len(entries) > DIVERSITY_MIN_ENTRIES:
        result.recommendations.append(DIVERSITY_RECOMMENDATION)

    return result


def build_timeline(plan: Iterable[CropEntry]) -> List[Dict[str, Any]]:
    """Chronological rows for the crop timeline view."""
    timeline = []
    for position, entry in enumerate(sort_crop_plan(plan), start=1):
        row = entry.to_dict()
        row["position"] = position
        row["season_label"] = SEASON_LABELS.get(entry.season, entry.season)
        timeline.append(row)
    return timeline


def analyze_plan_records(records: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Records in, JSON-ready analysis out (issues, recommendations, timeline).
    """
    plan = [CropEntry.from_dict(record) for record in records]
    result = analyze_crop_sequence(plan)
    output = {"version": OUTPUT_VERSION}
    output.update(result.to_dict())
    output["timeline"] = build_timeline(plan)
    return output
