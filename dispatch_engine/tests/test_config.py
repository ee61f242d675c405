"""
Tests for engine settings.
"""

from dispatch_engine.app.core.config import Settings


def test_settings_cover_engine_concerns_only():
    assert set(Settings.model_fields) == {
        "log_level",
        "database_url",
        "db_echo",
        "db_pool_size",
        "db_max_overflow",
        "hierarchy_max_depth",
    }


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("HIERARCHY_MAX_DEPTH", "8")
    monkeypatch.setenv("log_level", "debug")

    settings = Settings()

    assert settings.hierarchy_max_depth == 8
    assert settings.log_level == "debug"
