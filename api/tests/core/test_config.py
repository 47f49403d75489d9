"""Unit tests for core.config module.

Tests cover:
- Settings model_validator checks
- is_sqlite / upload_root properties
- allowed_origins computed property with deduplication
- get_settings / clear_settings_cache lru_cache behavior
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from core.config import Settings, clear_settings_cache, get_settings

DB_URL = "postgresql+asyncpg://localhost/test"


@pytest.fixture(autouse=True)
def _clear_settings():
    """Clear lru_cache between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# ---------------------------------------------------------------------------
# Settings validation
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestSettingsValidation:
    def test_requires_database_config(self):
        with pytest.raises(ValidationError, match="Database configuration"):
            Settings(database_url="")

    def test_page_size_must_fit_maximum(self):
        with pytest.raises(ValidationError, match="DEFAULT_PAGE_SIZE"):
            Settings(database_url=DB_URL, default_page_size=50, max_page_size=20)

    def test_upload_prefix_must_be_absolute(self):
        with pytest.raises(ValidationError, match="UPLOAD_URL_PREFIX"):
            Settings(database_url=DB_URL, upload_url_prefix="uploads")

    def test_defaults(self):
        settings = Settings(database_url=DB_URL, upload_dir="uploads")
        assert settings.default_page_size == 10
        assert settings.max_page_size == 100
        assert settings.max_upload_bytes == 50 * 1024 * 1024
        assert settings.search_unaccent is False


@pytest.mark.unit
class TestDerivedProperties:
    def test_is_sqlite(self):
        assert Settings(database_url="sqlite+aiosqlite:///:memory:").is_sqlite is True
        assert Settings(database_url=DB_URL).is_sqlite is False

    def test_upload_root_is_absolute(self, tmp_path: Path):
        settings = Settings(database_url=DB_URL, upload_dir=str(tmp_path / "files"))
        assert settings.upload_root == (tmp_path / "files").resolve()
        assert settings.upload_root.is_absolute()


# ---------------------------------------------------------------------------
# allowed_origins
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestAllowedOrigins:
    def test_debug_includes_localhost(self):
        s = Settings(debug=True, database_url=DB_URL)
        assert "http://localhost:3000" in s.allowed_origins

    def test_prod_excludes_localhost(self):
        s = Settings(debug=False, database_url=DB_URL)
        assert s.allowed_origins == []

    def test_cors_allowed_origins_csv_parsed(self):
        s = Settings(
            database_url=DB_URL,
            cors_allowed_origins="https://a.com, https://b.com",
        )
        assert s.allowed_origins == ["https://a.com", "https://b.com"]

    def test_deduplication(self):
        s = Settings(
            debug=True,
            database_url=DB_URL,
            cors_allowed_origins="http://localhost:3000,https://a.com",
        )
        assert s.allowed_origins.count("http://localhost:3000") == 1


# ---------------------------------------------------------------------------
# get_settings / clear_settings_cache
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestGetSettings:
    def test_returns_same_instance(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", DB_URL)
        s1 = get_settings()
        s2 = get_settings()
        assert s1 is s2

    def test_clear_cache_resets(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", DB_URL)
        s1 = get_settings()
        clear_settings_cache()
        s2 = get_settings()
        assert s1 is not s2

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", DB_URL)
        monkeypatch.setenv("MAX_PAGE_SIZE", "250")
        assert get_settings().max_page_size == 250
