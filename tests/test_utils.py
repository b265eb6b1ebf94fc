"""Tests for settings, password hashing and time helpers."""

from datetime import datetime, timezone

import pytest

from journalmate.config import Settings
from journalmate.utils.password import hash_password, verify_password
from journalmate.utils.timeutils import as_utc, is_valid_timezone, local_today, minutes_to_hhmm, user_zone


class TestSettings:
    def test_postgres_url_uses_asyncpg(self):
        settings = Settings(DATABASE_URL="postgres://u:p@db/journal", SQLALCHEMY_DATABASE_URL=None)
        assert settings.effective_database_url == "postgresql+asyncpg://u:p@db/journal"

    def test_explicit_sqlalchemy_url_wins(self):
        settings = Settings(DATABASE_URL="postgresql://x/y", SQLALCHEMY_DATABASE_URL="sqlite+aiosqlite:///a.db")
        assert settings.effective_database_url == "sqlite+aiosqlite:///a.db"

    def test_cors_origins(self):
        assert Settings(CORS_ORIGINS=None).cors_origins == ["*"]
        assert Settings(CORS_ORIGINS="https://a.app, https://b.app").cors_origins == ["https://a.app", "https://b.app"]


class TestPasswords:
    def test_round_trip(self):
        hashed = hash_password("correct horse")
        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            hash_password("")

    def test_account_without_password(self):
        assert verify_password("anything", None) is False


class TestTimeUtils:
    def test_naive_values_are_utc(self):
        assert as_utc(datetime(2025, 1, 1, 12)) == datetime(2025, 1, 1, 12, tzinfo=timezone.utc)

    def test_unknown_zone_falls_back(self):
        assert user_zone("Nowhere/Land") is timezone.utc
        assert not is_valid_timezone("Nowhere/Land")
        assert is_valid_timezone("America/New_York")

    def test_local_today(self):
        now = datetime(2025, 1, 1, 2, 0, tzinfo=timezone.utc)
        assert local_today("America/New_York", now=now).isoformat() == "2024-12-31"

    def test_minutes_to_hhmm(self):
        assert minutes_to_hhmm(615) == "10:15"
