"""
Tests for environment and settings loading.
"""

import pytest
from pathlib import Path

from partnercontacts.env import DEFAULT_DATABASE_URL, Settings, load_env, load_settings

ENV_VARS = [
    "PARTNER_CONTACTS_DATABASE_URL",
    "PARTNER_CONTACTS_ENCRYPTION_KEY",
    "PARTNER_CONTACTS_LOG_LEVEL",
    "PARTNER_CONTACTS_LOG_DIR",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run in an empty directory with no partner contact variables set."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestLoadSettings:
    """Test settings resolution."""

    def test_defaults(self, clean_env):
        settings = load_settings()

        assert settings == Settings()
        assert settings.database_url == DEFAULT_DATABASE_URL
        assert settings.encryption_key is None
        assert settings.log_level == "INFO"
        assert settings.log_dir == Path("logs")

    def test_reads_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("PARTNER_CONTACTS_DATABASE_URL", "postgresql://db/contacts")
        monkeypatch.setenv("PARTNER_CONTACTS_ENCRYPTION_KEY", "ab" * 64)
        monkeypatch.setenv("PARTNER_CONTACTS_LOG_LEVEL", "debug")
        monkeypatch.setenv("PARTNER_CONTACTS_LOG_DIR", "/var/log/contacts")

        settings = load_settings()

        assert settings.database_url == "postgresql://db/contacts"
        assert settings.encryption_key == "ab" * 64
        assert settings.log_level == "DEBUG"
        assert settings.log_dir == Path("/var/log/contacts")

    def test_empty_key_is_none(self, clean_env, monkeypatch):
        monkeypatch.setenv("PARTNER_CONTACTS_ENCRYPTION_KEY", "")
        assert load_settings().encryption_key is None

    def test_reads_dotenv_file(self, clean_env, monkeypatch):
        (clean_env / ".env").write_text(
            "# local settings\n"
            "PARTNER_CONTACTS_DATABASE_URL=sqlite:///local.db\n"
        )
        # load_dotenv writes into os.environ; let monkeypatch undo it
        monkeypatch.setenv("PARTNER_CONTACTS_DATABASE_URL", "placeholder")
        monkeypatch.delenv("PARTNER_CONTACTS_DATABASE_URL")

        assert load_settings().database_url == "sqlite:///local.db"

    def test_environment_beats_dotenv(self, clean_env, monkeypatch):
        (clean_env / ".env").write_text("PARTNER_CONTACTS_LOG_LEVEL=DEBUG\n")
        monkeypatch.setenv("PARTNER_CONTACTS_LOG_LEVEL", "ERROR")

        assert load_settings().log_level == "ERROR"


class TestLoadEnv:
    """Test .env loading."""

    def test_missing_file_is_ignored(self, clean_env):
        load_env()  # Should not raise

    def test_explicit_path(self, clean_env, monkeypatch):
        env_file = clean_env / "custom.env"
        env_file.write_text("PARTNER_CONTACTS_LOG_DIR=custom-logs\n")
        monkeypatch.setenv("PARTNER_CONTACTS_LOG_DIR", "placeholder")
        monkeypatch.delenv("PARTNER_CONTACTS_LOG_DIR")

        load_env(env_file)

        assert load_settings().log_dir == Path("custom-logs")
