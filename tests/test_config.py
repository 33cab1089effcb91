"""
Settings tests: environment prefixes, validators and the cached instance.
"""

import pytest
from pydantic import ValidationError

from clinicslots.core.config import (
    BookingSettings,
    CORSSettings,
    DatabaseSettings,
    LoggingSettings,
    Settings,
    get_settings,
    reset_settings,
)


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings()
    yield
    reset_settings()


def test_defaults(monkeypatch):
    for name in ("DB_BACKEND", "BOOKING_DEFAULT_CAPACITY", "BOOKING_LOCK_TIMEOUT_SECONDS", "APP_ENV"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.database.backend == "memory"
    assert settings.booking.default_capacity == 10
    assert settings.booking.lock_timeout_seconds == 5.0
    assert settings.booking.issuance_max_attempts == 8
    assert settings.is_development


def test_prefixed_environment_variables(monkeypatch):
    monkeypatch.setenv("BOOKING_DEFAULT_CAPACITY", "25")
    monkeypatch.setenv("BOOKING_LOCK_TIMEOUT_SECONDS", "0.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FORMAT", "TEXT")
    monkeypatch.setenv("APP_ENV", "Testing")

    settings = get_settings()

    assert settings.booking.default_capacity == 25
    assert settings.booking.lock_timeout_seconds == 0.5
    assert settings.logging.level == "DEBUG"
    assert settings.logging.format == "text"
    assert settings.is_testing


def test_get_settings_is_cached_until_reset(monkeypatch):
    monkeypatch.setenv("BOOKING_DEFAULT_CAPACITY", "3")
    first = get_settings()
    monkeypatch.setenv("BOOKING_DEFAULT_CAPACITY", "4")

    assert get_settings() is first
    reset_settings()
    assert get_settings().booking.default_capacity == 4


def test_mongo_backend_requires_uri(monkeypatch):
    monkeypatch.delenv("DB_URI", raising=False)
    monkeypatch.setenv("DB_BACKEND", "mongo")
    with pytest.raises(ValidationError):
        DatabaseSettings()

    monkeypatch.setenv("DB_URI", "postgres://localhost/db")
    with pytest.raises(ValidationError):
        DatabaseSettings()

    monkeypatch.setenv("DB_URI", "mongodb://localhost:27017")
    assert DatabaseSettings().uri == "mongodb://localhost:27017"


@pytest.mark.parametrize(
    "field,value",
    [
        ("default_capacity", 0),
        ("issuance_max_attempts", -1),
        ("lock_timeout_seconds", 0),
        ("lock_timeout_seconds", 61),
        ("release_retry_interval_seconds", 0),
    ],
)
def test_booking_settings_validation(field, value):
    with pytest.raises(ValidationError):
        BookingSettings(**{field: value})


def test_invalid_values_rejected():
    with pytest.raises(ValidationError):
        DatabaseSettings(backend="sqlite")
    with pytest.raises(ValidationError):
        LoggingSettings(level="LOUD")
    with pytest.raises(ValidationError):
        Settings(app_env="moon")
    with pytest.raises(ValidationError):
        Settings(port=70000)


def test_cors_origins_accept_json_string():
    cors = CORSSettings(allowed_origins='["https://a.example", "https://b.example"]')
    assert cors.allowed_origins == ["https://a.example", "https://b.example"]
    assert CORSSettings(allowed_origins="https://c.example").allowed_origins == ["https://c.example"]
