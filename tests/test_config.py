"""Tests for FaultSettings, UploadLimits and the message catalogues."""

import pytest

from restfaults.config import FaultSettings, UploadLimits
from restfaults.messages import ENGLISH, RUSSIAN, get_catalogue

_MB = 1024 * 1024


class TestFaultSettings:
    def test_defaults(self, monkeypatch):
        for name in ("MAX_FILE_SIZE", "MAX_REQUEST_SIZE", "LOCALE"):
            monkeypatch.delenv(f"RESTFAULTS_{name}", raising=False)
        app_settings = FaultSettings(_env_file=None)
        assert app_settings.MAX_FILE_SIZE == 1 * _MB
        assert app_settings.MAX_REQUEST_SIZE == 10 * _MB
        assert app_settings.LOCALE == "en"

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("RESTFAULTS_MAX_FILE_SIZE", str(5 * _MB))
        monkeypatch.setenv("RESTFAULTS_LOCALE", "ru")
        app_settings = FaultSettings(_env_file=None)
        assert app_settings.MAX_FILE_SIZE == 5 * _MB
        assert app_settings.LOCALE == "ru"

    def test_negative_limit_rejected(self):
        with pytest.raises(ValueError):
            FaultSettings(MAX_FILE_SIZE=-1, _env_file=None)


class TestUploadLimits:
    def test_from_settings(self):
        limits = UploadLimits.from_settings(
            FaultSettings(MAX_FILE_SIZE=3 * _MB, MAX_REQUEST_SIZE=30 * _MB, _env_file=None)
        )
        assert limits == UploadLimits(max_file_size_mb=3, max_request_size_mb=30)

    def test_partial_megabytes_are_truncated(self):
        limits = UploadLimits.from_bytes(max_file_size=_MB - 1, max_request_size=2 * _MB + 1)
        assert limits.max_file_size_mb == 0
        assert limits.max_request_size_mb == 2


class TestCatalogues:
    @pytest.mark.parametrize("locale,expected", [("en", ENGLISH), ("ru", RUSSIAN), ("EN", ENGLISH)])
    def test_lookup(self, locale, expected):
        assert get_catalogue(locale) is expected

    def test_unknown_locale(self):
        with pytest.raises(ValueError, match="locale"):
            get_catalogue("de")

    @pytest.mark.parametrize("catalogue", [ENGLISH, RUSSIAN])
    def test_messages_never_empty(self, catalogue):
        assert all(value for value in vars(catalogue).values())
