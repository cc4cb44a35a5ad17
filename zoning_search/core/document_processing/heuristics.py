"""
Text heuristics for zoning and environmental review documents.

Whitespace/page-marker cleanup plus best-effort section and table
detection tuned to San Francisco EIR and planning document layouts.

Dependencies: re (stdlib)
System role: Labeling helpers for the normalizing task
"""

import re

_PAGE_MARKER = re.compile(r"Page\s+\d+\s+of\s+\d+", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")

# (pattern, group holding the section name); first match wins
SECTION_PATTERNS: tuple[tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"(?:SECTION|CHAPTER)\s*(\d+[.\d]*)\s*[-:.]?\s*(.+)", re.IGNORECASE), 2),
    (re.compile(r"^(\d+[.\d]*)\s+([A-Z][A-Z\s]+)$", re.MULTILINE), 2),
    (
        re.compile(
            r"^(EXECUTIVE SUMMARY|INTRODUCTION|BACKGROUND|ENVIRONMENTAL SETTING)",
            re.IGNORECASE | re.MULTILINE,
        ),
        1,
    ),
    (
        re.compile(
            r"^(NOISE|WIND|SHADOW|TRANSPORTATION|AIR QUALITY|AESTHETICS)",
            re.IGNORECASE | re.MULTILINE,
        ),
        1,
    ),
    (re.compile(r"^(GEOTECHNICAL|HAZARDS|HYDROLOGY|UTILITIES)", re.IGNORECASE | re.MULTILINE), 1),
    (
        re.compile(r"^(ALTERNATIVES|MITIGATION|CUMULATIVE IMPACTS)", re.IGNORECASE | re.MULTILINE),
        1,
    ),
    (re.compile(r"^(RTO-C|RESIDENTIAL|ZONING|LAND USE)", re.IGNORECASE | re.MULTILINE), 1),
)

TABLE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\|.*\|.*\|"),  # pipe-delimited columns
    re.compile(r"\t.*\t.*\t"),  # tab-delimited columns
    re.compile(r"^\s*\d+\s+\d+\s+\d+", re.MULTILINE),  # rows of numbers
    re.compile(r"dBA?\s*$", re.MULTILINE),  # noise measurements
    re.compile(r"mph\s*$", re.MULTILINE),  # wind speeds
    re.compile(r"feet\s+\d+", re.IGNORECASE),  # height/setback tables
)


def clean_text(text: str) -> str:
    """Strip "Page N of M" markers and collapse all whitespace runs to one space."""
    if not text:
        return ""
    without_markers = _PAGE_MARKER.sub(" ", text)
    return _WHITESPACE.sub(" ", without_markers).strip()


def detect_section(text: str) -> str | None:
    """
    Guess the section heading a block of text belongs to.

    Run on the raw (uncleaned) text so line anchors still apply.

    Returns:
        str | None: Trimmed heading, or None when no pattern matches
    """
    if not text:
        return None
    for pattern, group in SECTION_PATTERNS:
        match = pattern.search(text)
        if match:
            section = match.group(group).strip()
            if section:
                return section
    return None


def detect_table(text: str) -> bool:
    """Whether text looks like tabular data (delimited columns, numeric rows, units)."""
    if not text:
        return False
    return any(pattern.search(text) for pattern in TABLE_PATTERNS)
