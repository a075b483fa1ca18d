"""
Crop Analysis Report Parser
Turns the markdown report written by the LLM into structured data for display.

🔒 CONTRACT: every function here is total. Malformed or unexpected text never
raises - it degrades to a documented fallback:
    - no "## " headings      → UnstructuredReport (render raw text as-is)
    - no table rows          → empty mapping
    - missing English/local  → field is None
    - unknown severity text  → lowest tier

Expected report conventions (asked for by advisor_chain, NOT guaranteed):
    ## CROP IDENTIFICATION
    | Feature | English | Hindi |
    |:---|:---|:---|
    | Crop | Tomato | टमाटर |

    ## TREATMENT RECOMMENDATIONS
    1. **Apply fungicide**
       - English: Apply copper fungicide
       - Hindi: कवकनाशी डालें
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from agricultural_config import (
    OUTPUT_VERSION, TABLE_HEADER_LABEL, PRIMARY_LANGUAGE_LABEL,
    SECONDARY_LANGUAGE_LABELS, SECTION_KEYWORDS,
    SEVERITY_FIELD_KEYWORD, CONFIDENCE_FIELD_KEYWORD,
)
from tier_classifier import (
    SeverityTier, ConfidenceTier, classify_severity, classify_confidence, badge_variant,
)

# ============================================================================
# PATTERNS
# ============================================================================

# Level-2 heading at the start of a line ("### ..." is not a section)
RE_HEADING = re.compile(r'^##[ \t]+(\S[^\n]*)$', re.MULTILINE)

# Markdown table divider row: only pipes, colons, dashes and spaces ("|:--|-|", "| :-: |")
RE_TABLE_DIVIDER = re.compile(r'^[\s|:]*-[\s|:-]*$')

# Numbered bold treatment marker: "1. **"
RE_TREATMENT_MARKER = re.compile(r'\d+\.\s+\*\*')

RE_PRIMARY_LINE = re.compile(
    r'^\s*(?:[-*•]\s*)?' + re.escape(PRIMARY_LANGUAGE_LABEL) + r'\s*:\s*(.*)$',
    re.IGNORECASE,
)

RE_SECONDARY_LINE = re.compile(
    r'^\s*(?:[-*•]\s*)?(?:'
    + '|'.join(re.escape(label) for label in SECONDARY_LANGUAGE_LABELS)
    + r')\s*:\s*(.*)$',
    re.IGNORECASE,
)


# ============================================================================
# DATA MODEL
# ============================================================================

@dataclass(frozen=True)
class Section:
    title: str
    body: str
    order: int
    start: int = 0  # body offsets in the raw report
    end: int = 0


@dataclass(frozen=True)
class UnstructuredReport:
    """Fallback: no headings were found, display raw_text verbatim."""
    raw_text: str

    def to_dict(self) -> dict:
        return {
            "version": OUTPUT_VERSION,
            "structured": False,
            "raw_text": self.raw_text,
        }


@dataclass(frozen=True)
class BilingualValue:
    primary: str
    secondary: str

    def to_dict(self) -> dict:
        return {"primary": self.primary, "secondary": self.secondary}


@dataclass(frozen=True)
class TreatmentStep:
    index: int
    title: str
    primary_text: Optional[str] = None
    secondary_text: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "title": self.title,
            "primary_text": self.primary_text,
            "secondary_text": self.secondary_text,
        }


@dataclass
class AnalysisReport:
    sections: List[Section]
    tables: Dict[str, Dict[str, BilingualValue]] = field(default_factory=dict)
    treatments: List[TreatmentStep] = field(default_factory=list)
    severity: Optional[SeverityTier] = None
    severity_text: Optional[str] = None
    confidence: Optional[ConfidenceTier] = None
    confidence_text: Optional[str] = None

    def section(self, route: str) -> Optional[Section]:
        """Section for a route name ("symptoms", "treatment", ...) or a raw keyword."""
        return find_section(self.sections, SECTION_KEYWORDS.get(route, route))

    def to_dict(self) -> dict:
        return {
            "version": OUTPUT_VERSION,
            "structured": True,
            "sections": [s.title for s in self.sections],
            "tables": {
                route: {name: value.to_dict() for name, value in rows.items()}
                for route, rows in self.tables.items()
            },
            "treatments": [step.to_dict() for step in self.treatments],
            "severity": {
                "tier": self.severity.value,
                "text": self.severity_text,
                "badge": badge_variant(self.severity),
            } if self.severity else None,
            "confidence": {
                "tier": self.confidence.value,
                "text": self.confidence_text,
                "badge": badge_variant(self.confidence),
            } if self.confidence else None,
        }


# ============================================================================
# SECTION SPLITTER
# ============================================================================

def split_sections(report_text: str) -> Union[List[Section], UnstructuredReport]:
    """
    Split a report on level-2 markdown headings.

    Body of each section runs from the end of its heading line to the start
    of the next heading (or end of text). Titles are trimmed, not case-folded,
    and duplicates are kept.

    Args:
        report_text: Full LLM output

    Returns:
        List of Section in document order, or UnstructuredReport when the
        text has no headings
    """
    text = report_text or ""
    matches = list(RE_HEADING.finditer(text))
    if not matches:
        return UnstructuredReport(raw_text=text)

    sections = []
    for i, match in enumerate(matches):
        start = match.end()
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        sections.append(Section(
            title=match.group(1).strip(),
            body=text[start:end],
            order=i,
            start=start,
            end=end,
        ))
    return sections


def sections_by_title(sections: List[Section]) -> Dict[str, Section]:
    """Title lookup; a later section with a duplicate title overwrites the earlier one."""
    lookup: Dict[str, Section] = {}
    for section in sections:
        lookup[section.title] = section
    return lookup


# ============================================================================
# SECTION ROUTER
# ============================================================================

def find_section(sections: List[Section], keyword: str) -> Optional[Section]:
    """
    First section whose title contains keyword (case-insensitive).

    Titles are looked up like sections_by_title: a duplicate title keeps its
    first position but resolves to the last section carrying it.

    Returns:
        Section, or None when no title matches
    """
    needle = (keyword or "").upper()
    for title, section in sections_by_title(sections).items():
        if needle in title.upper():
            return section
    return None


# ============================================================================
# BILINGUAL TABLE EXTRACTOR
# ============================================================================

def extract_table_data(content: str) -> Dict[str, BilingualValue]:
    """
    Extract "| Field | English | Local |" rows from a section body.

    Header rows (containing TABLE_HEADER_LABEL) and divider rows are skipped,
    as is any row with fewer than 4 pipe-separated pieces. The first piece
    (before the leading pipe) is discarded; pieces past the 4th are ignored.

    Args:
        content: Section body

    Returns:
        field -> BilingualValue; the last row wins for a repeated field
    """
    rows: Dict[str, BilingualValue] = {}
    for line in (content or "").split("\n"):
        if not line.strip() or "|" not in line:
            continue
        if TABLE_HEADER_LABEL in line or RE_TABLE_DIVIDER.match(line):
            continue

        parts = [part.strip() for part in line.split("|")]
        if len(parts) < 4:
            continue
        rows[parts[1]] = BilingualValue(primary=parts[2], secondary=parts[3])
    return rows


# ============================================================================
# TREATMENT LIST PARSER
# ============================================================================

def _labelled_text(lines: List[str], pattern) -> Optional[str]:
    for line in lines:
        match = pattern.match(line.replace("**", ""))
        if match:
            text = match.group(1).strip()
            return text or None
    return None


def parse_treatments(content: str) -> List[TreatmentStep]:
    """
    Parse a numbered, bold-titled treatment list.

    Each "N. **" marker opens a step. Its first non-empty line (bold markers
    removed) is the title; "English:" gives primary_text and a local language
    label (Hindi, Punjabi, Marathi, Telugu, or native script) gives
    secondary_text. Either may be None.

    Returns:
        Steps numbered 1..n in source order
    """
    steps = []
    fragments = [f for f in RE_TREATMENT_MARKER.split(content or "") if f.strip()]
    for fragment in fragments:
        lines = [line for line in fragment.split("\n") if line.strip()]
        steps.append(TreatmentStep(
            index=len(steps) + 1,
            title=lines[0].replace("**", "").strip(),
            primary_text=_labelled_text(lines, RE_PRIMARY_LINE),
            secondary_text=_labelled_text(lines, RE_SECONDARY_LINE),
        ))
    return steps


# ============================================================================
# REPORT BUNDLE
# ============================================================================

def _field_value(rows: Dict[str, BilingualValue], keyword: str) -> Optional[str]:
    for name, value in rows.items():
        if keyword in name.lower():
            return value.primary
    return None


def parse_analysis_report(report_text: str) -> Union[AnalysisReport, UnstructuredReport]:
    """
    Complete workflow: Split → Route → Extract tables/treatments → Classify

    Returns:
        AnalysisReport, or UnstructuredReport when the text has no headings
    """
    sections = split_sections(report_text)
    if isinstance(sections, UnstructuredReport):
        return sections

    report = AnalysisReport(sections=sections)
    for route, keyword in SECTION_KEYWORDS.items():
        section = find_section(sections, keyword)
        if section is None:
            continue
        if route == "treatment":
            report.treatments = parse_treatments(section.body)
        else:
            report.tables[route] = extract_table_data(section.body)

    report.severity_text = _field_value(report.tables.get("symptoms", {}), SEVERITY_FIELD_KEYWORD)
    if report.severity_text is not None:
        report.severity = classify_severity(report.severity_text)

    report.confidence_text = _field_value(report.tables.get("diagnosis", {}), CONFIDENCE_FIELD_KEYWORD)
    if report.confidence_text is not None:
        report.confidence = classify_confidence(report.confidence_text)

    return report
