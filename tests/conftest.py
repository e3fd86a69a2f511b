import pytest

from moviemax.core.config import Settings, get_settings


@pytest.fixture(autouse=True)
def reset_env(monkeypatch):
    # Keep a developer's .env / shell settings out of the tests
    monkeypatch.setenv("TMDB_API_KEY", "test-key")
    for name in ("TMDB_BASE_URL", "TMDB_LIST_PATH", "TMDB_DETAIL_PATH", "TMDB_IMAGE_BASE", "HTTP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    return Settings(TMDB_API_KEY="test-key")
