"""
Unit tests for Epic Registry configuration.
"""

from epic_registry.config import Settings


class TestSettings:
    """Tests for Settings."""

    def test_composed_postgres_url(self):
        settings = Settings(
            _env_file=None,
            postgres_user="u",
            postgres_password="p",
            postgres_host="db",
            postgres_port=6543,
            postgres_db="epics",
        )

        assert settings.database_url == "postgresql://u:p@db:6543/epics"

    def test_override_wins(self):
        settings = Settings(_env_file=None, database_url_override="sqlite:///./epics.db")

        assert settings.database_url == "sqlite:///./epics.db"

    def test_blank_override_is_ignored(self):
        settings = Settings(_env_file=None, database_url_override="  ")

        assert settings.database_url_override is None
        assert settings.database_url.startswith("postgresql://")

    def test_log_level_is_uppercased(self):
        settings = Settings(_env_file=None, log_level="debug")

        assert settings.log_level == "DEBUG"

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("AUTOCOMPLETE_LIMIT", "25")
        monkeypatch.setenv("DATABASE_URL_OVERRIDE", "sqlite://")

        settings = Settings(_env_file=None)

        assert settings.autocomplete_limit == 25
        assert settings.database_url == "sqlite://"
