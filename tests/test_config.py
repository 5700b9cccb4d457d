import pytest
from pydantic import ValidationError

from hallbook.config import Settings


def test_database_url_is_async():
    config = Settings(postgres_host="db", postgres_user="app", postgres_password="pw", postgres_db="halls")

    assert config.database_url == "postgresql+asyncpg://app:pw@db:5432/halls"


def test_redis_url_includes_password_only_when_set():
    assert Settings(redis_host="localhost", redis_password=None).redis_url == "redis://localhost:6379/0"
    assert Settings(redis_host="localhost", redis_password="s3", redis_db=2).redis_url == "redis://:s3@localhost:6379/2"


def test_timezone_must_exist():
    assert Settings(timezone="UTC").timezone == "UTC"

    with pytest.raises(ValidationError, match="Unknown timezone"):
        Settings(timezone="Mars/Olympus_Mons")


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("PENDING_BLOCKS_SLOT", "true")
    monkeypatch.setenv("API_PREFIX", "/api/v2")

    config = Settings()

    assert config.pending_blocks_slot is True
    assert config.api_prefix == "/api/v2"
