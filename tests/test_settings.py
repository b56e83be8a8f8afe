import pytest
from pydantic import ValidationError

from server.settings import ServerSettings


class TestServerSettings:
    """Environment-driven server configuration."""

    def test_defaults(self):
        settings = ServerSettings(_env_file=None)

        assert settings.port == 8000
        assert settings.persist_logs is False

    def test_log_level_is_normalized(self):
        assert ServerSettings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            ServerSettings(_env_file=None, log_level="chatty")

    def test_database_url_must_be_async(self):
        with pytest.raises(ValidationError):
            ServerSettings(_env_file=None, database_url="postgresql://localhost/imperial")

    def test_engine_kwargs(self):
        kwargs = ServerSettings(_env_file=None, db_pool_size=3).get_engine_kwargs()

        assert kwargs["pool_size"] == 3
        assert kwargs["pool_pre_ping"] is True
