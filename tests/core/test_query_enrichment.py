"""Tests for zoning vocabulary query expansion."""

from zoning_search.core.query_enrichment import ZONING_SYNONYMS, enhance_query


class TestEnhanceQuery:
    """Test synonym expansion."""

    def test_longest_code_wins(self) -> None:
        """Should expand RTO-C as a whole rather than its RTO prefix."""
        assert (
            enhance_query("RTO-C height limits")
            == "RTO-C Residential Transit Oriented Commercial height limits"
        )

    def test_case_insensitive_whole_word(self) -> None:
        """Should expand lowercase codes and keep surrounding text as typed."""
        assert enhance_query("rto zoning Near Transit") == (
            "RTO Residential Transit Oriented zoning Near Transit"
        )

    def test_multiple_terms(self) -> None:
        """Should expand every recognized term in one pass."""
        assert enhance_query("Draft EIR for SoMa") == (
            "Draft Environmental Impact Report EIR for South of Market SOMA"
        )

    def test_multi_word_phrase(self) -> None:
        """Should expand phrases containing spaces and apostrophes."""
        assert enhance_query("builder's remedy projects") == (
            "Builder's Remedy Housing Accountability Act HAA projects"
        )

    def test_expansion_is_not_rescanned(self) -> None:
        """Should not expand the acronym inside an expansion again."""
        result = enhance_query("eir")

        assert result == "Environmental Impact Report EIR"
        assert result.count("Environmental Impact Report") == 1

    def test_substrings_are_left_alone(self) -> None:
        """Should not expand terms embedded inside other words."""
        assert enhance_query("their farm rhythm") == "their farm rhythm"

    def test_custom_synonyms(self) -> None:
        """Should accept a caller-supplied table."""
        assert enhance_query("UMU parcels", {"UMU": "UMU Urban Mixed Use"}) == (
            "UMU Urban Mixed Use parcels"
        )

    def test_empty_query(self) -> None:
        """Should return empty input unchanged."""
        assert enhance_query("") == ""

    def test_table_keys_are_lowercase(self) -> None:
        """Should store lookup keys in lowercase."""
        assert all(key == key.lower() for key in ZONING_SYNONYMS)
