"""
Zoning vocabulary expansion for search queries.

Expands zoning district codes and planning acronyms into their full
names before the query is embedded, so "RTO-C" also matches passages
that only spell out "Residential Transit Oriented Commercial".

Dependencies: re (stdlib)
System role: Query preprocessing for retrieval
"""

import re
from collections.abc import Mapping

ZONING_SYNONYMS: dict[str, str] = {
    "rto": "RTO Residential Transit Oriented",
    "rto-c": "RTO-C Residential Transit Oriented Commercial",
    "rto-m": "RTO-M Residential Transit Oriented Mixed",
    "nc": "NC Neighborhood Commercial",
    "rm": "RM Residential Mixed",
    "rh": "RH Residential House",
    "c-3": "C-3 Downtown Commercial",
    "soma": "South of Market SOMA",
    "builder's remedy": "Builder's Remedy Housing Accountability Act HAA",
    "housing element": "Housing Element General Plan",
    "ceqa": "California Environmental Quality Act CEQA",
    "eir": "Environmental Impact Report EIR",
}


def _compile(synonyms: Mapping[str, str]) -> re.Pattern[str]:
    # Longest first so "rto-c" wins over "rto".
    terms = sorted(synonyms, key=len, reverse=True)
    alternation = "|".join(re.escape(term) for term in terms)
    return re.compile(rf"(?<![\w-])(?:{alternation})(?![\w-])", re.IGNORECASE)


_DEFAULT_PATTERN = _compile(ZONING_SYNONYMS)


def enhance_query(query: str, synonyms: Mapping[str, str] | None = None) -> str:
    """
    Expand known zoning terms in a single left-to-right pass.

    Matching is case-insensitive and whole-word; replaced text is never
    rescanned, and unmatched text keeps its original case.

    Args:
        query: Raw user query
        synonyms: Lowercase term -> expansion mapping (defaults to ZONING_SYNONYMS)

    Returns:
        str: Query with recognized terms expanded
    """
    if not query:
        return query

    table = ZONING_SYNONYMS if synonyms is None else {k.lower(): v for k, v in synonyms.items()}
    if not table:
        return query
    pattern = _DEFAULT_PATTERN if synonyms is None else _compile(table)
    return pattern.sub(lambda match: table[match.group(0).lower()], query)
