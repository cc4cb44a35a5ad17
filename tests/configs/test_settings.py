"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from zoning_search.configs import Settings, get_settings, require_api_key
from zoning_search.configs.database import DatabaseSettings
from zoning_search.configs.embedding import EmbeddingSettings
from zoning_search.configs.extraction import ExtractionSettings
from zoning_search.core.exceptions import ConfigurationError


class TestEnvironmentMapping:
    """Test prefixed environment variables map onto each settings group."""

    def test_service_credentials(self, monkeypatch) -> None:
        monkeypatch.setenv("REDUCTO_API_KEY", "reducto-from-env")
        monkeypatch.setenv("VOYAGE_API_KEY", "voyage-from-env")
        monkeypatch.setenv("VOYAGE_BATCH_SIZE", "64")

        assert ExtractionSettings().api_key == "reducto-from-env"
        embedding = EmbeddingSettings()
        assert embedding.api_key == "voyage-from-env"
        assert embedding.batch_size == 64

    def test_store_url(self, monkeypatch) -> None:
        monkeypatch.setenv("STORE_DATABASE_URL", "postgresql+psycopg2://u:p@db/zoning")

        settings = DatabaseSettings()

        assert settings.database_url == "postgresql+psycopg2://u:p@db/zoning"
        assert settings.is_sqlite is False

    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("VOYAGE_MODEL", raising=False)
        monkeypatch.delenv("PIPELINE_DEFAULT_PDF_LIMIT", raising=False)

        settings = Settings()

        assert settings.embedding.model == "voyage-law-2"
        assert settings.pipeline.default_pdf_limit == 3
        assert settings.pipeline.default_min_score == 0.7
        assert "EIR" in settings.pipeline.default_search_terms

    def test_batch_size_is_capped(self, monkeypatch) -> None:
        """Should reject a batch size above the provider limit."""
        monkeypatch.setenv("VOYAGE_BATCH_SIZE", "500")

        with pytest.raises(PydanticValidationError):
            EmbeddingSettings()

    def test_get_settings_is_cached(self) -> None:
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestRequireApiKey:
    def test_returns_stripped_key(self) -> None:
        assert require_api_key("  abc  ", "VOYAGE_API_KEY") == "abc"

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_missing_key(self, value) -> None:
        with pytest.raises(ConfigurationError, match="REDUCTO_API_KEY is not configured"):
            require_api_key(value, "REDUCTO_API_KEY")
