"""
Severity / Confidence Tier Classifier
Maps free-text values from an analysis report ("Severe", "गंभीर", "High (95%)")
to a fixed presentation tier.

Rule-based only: lower-case the value, test keyword substrings from
agricultural_config.TIER_KEYWORDS, top tier first, then mid tier.
Anything unrecognised falls to the lowest tier - this function never fails.
"""

from enum import Enum
from typing import Dict, List, Optional

from agricultural_config import TIER_KEYWORDS, SEVERITY_BADGES, CONFIDENCE_BADGES


class ClassificationKind(str, Enum):
    SEVERITY = "severity"
    CONFIDENCE = "confidence"


class SeverityTier(str, Enum):
    SEVERE = "Severe"
    MODERATE = "Moderate"
    LOW = "Low"


class ConfidenceTier(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# Tiers in priority order; the last one is the default
TIER_ORDER = {
    ClassificationKind.SEVERITY: [SeverityTier.SEVERE, SeverityTier.MODERATE, SeverityTier.LOW],
    ClassificationKind.CONFIDENCE: [ConfidenceTier.HIGH, ConfidenceTier.MEDIUM, ConfidenceTier.LOW],
}


def collect_keywords(kind: ClassificationKind, keyword_table: Optional[Dict] = None) -> Dict[str, List[str]]:
    """
    Merge the per-language keyword sets of one classification kind.

    Args:
        kind: SEVERITY or CONFIDENCE
        keyword_table: kind -> language -> tier -> keywords (defaults to TIER_KEYWORDS)

    Returns:
        tier name -> lower-case keywords across all languages
    """
    table = TIER_KEYWORDS if keyword_table is None else keyword_table
    merged: Dict[str, List[str]] = {}
    for tiers in table.get(kind.value, {}).values():
        for tier_name, keywords in tiers.items():
            bucket = merged.setdefault(tier_name, [])
            for keyword in keywords:
                keyword = keyword.lower()
                if keyword not in bucket:
                    bucket.append(keyword)
    return merged


def classify(value: Optional[str], kind: ClassificationKind, keyword_table: Optional[Dict] = None):
    """
    Classify a free-text value into a tier.

    Args:
        value: Raw value from a report table (any supported language)
        kind: SEVERITY or CONFIDENCE
        keyword_table: Optional replacement for TIER_KEYWORDS

    Returns:
        SeverityTier or ConfidenceTier; the lowest tier when nothing matches
    """
    kind = ClassificationKind(kind)
    tiers = TIER_ORDER[kind]
    lower = (value or "").lower()
    keywords = collect_keywords(kind, keyword_table)

    for tier in tiers[:-1]:
        if any(keyword in lower for keyword in keywords.get(tier.value, [])):
            return tier
    return tiers[-1]


def classify_severity(value: Optional[str], keyword_table: Optional[Dict] = None) -> SeverityTier:
    return classify(value, ClassificationKind.SEVERITY, keyword_table)


def classify_confidence(value: Optional[str], keyword_table: Optional[Dict] = None) -> ConfidenceTier:
    return classify(value, ClassificationKind.CONFIDENCE, keyword_table)


def badge_variant(tier) -> str:
    """Presentation badge name for a tier ("destructive", "default", ...)."""
    if isinstance(tier, SeverityTier):
        return SEVERITY_BADGES[tier.value]
    return CONFIDENCE_BADGES[ConfidenceTier(tier).value]
