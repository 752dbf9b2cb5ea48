"""Tests for environment-driven configuration."""

import pytest
from pydantic import ValidationError

from finance_tracker.config import get_settings, validate_all_settings
from finance_tracker.config.settings import AppSettings, GoogleSheetsSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run each test away from any local .env and with a fresh cache."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "GOOGLE_SHEETS_CREDENTIALS_PATH",
        "GOOGLE_SHEETS_SPREADSHEET_ID",
        "GOOGLE_SHEETS_TABLE_NAME",
        "STORAGE_BACKEND",
        "CURRENCY_SYMBOL",
        "DEBUG_MODE",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestAppSettings:
    def test_defaults(self):
        settings = AppSettings()
        assert settings.app_environment == "development"
        assert settings.debug_mode is False
        assert settings.storage_backend == "google_sheets"
        assert settings.currency_symbol == "₱"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        monkeypatch.setenv("CURRENCY_SYMBOL", "$")
        monkeypatch.setenv("DEBUG_MODE", "true")

        settings = get_settings().app

        assert settings.storage_backend == "memory"
        assert settings.currency_symbol == "$"
        assert settings.debug_mode is True

    def test_unknown_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "postgres")
        with pytest.raises(ValidationError):
            AppSettings()


class TestGoogleSheetsSettings:
    def test_requires_credentials_and_spreadsheet(self):
        with pytest.raises(ValidationError):
            GoogleSheetsSettings()

    def test_prefixed_variables(self, monkeypatch, tmp_path):
        credentials = tmp_path / "service-account.json"
        credentials.write_text("{}")
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(credentials))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-123")

        settings = GoogleSheetsSettings()

        assert settings.spreadsheet_id == "sheet-123"
        assert settings.table_name == "finance-tracker"

    def test_missing_credentials_file_warns(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(tmp_path / "nope.json"))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-123")
        with pytest.warns(UserWarning, match="credentials file not found"):
            GoogleSheetsSettings()


class TestValidateAllSettings:
    def test_reports_each_section(self):
        results = validate_all_settings()
        assert results["app"] is True
        assert results["google_sheets"] is False
        assert "google_sheets_error" in results
