"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from zoning_search.configs.base import require_api_key
from zoning_search.configs.settings import Settings, get_settings

__all__ = ["Settings", "get_settings", "require_api_key"]
