import pytest

from docops.core.config import (
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT_SECONDS,
    ApiConfig,
    ConfigError,
    get_client,
    load_config,
    log_level_from_env,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "DOCOPS_API_URL",
        "DOCOPS_TOKEN",
        "DOCOPS_TIMEOUT",
        "DOCOPS_FULL_REFRESH_ON_CREATE",
        "DOCOPS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_load_config_defaults():
    config = load_config()

    assert config.base_url == DEFAULT_API_URL
    assert config.token is None
    assert config.timeout == DEFAULT_TIMEOUT_SECONDS
    assert config.full_refresh_on_create is False


def test_load_config_reads_environment(monkeypatch):
    monkeypatch.setenv("DOCOPS_API_URL", "https://db.example.com/api/?o=1")
    monkeypatch.setenv("DOCOPS_TOKEN", "secret")
    monkeypatch.setenv("DOCOPS_TIMEOUT", "5")
    monkeypatch.setenv("DOCOPS_FULL_REFRESH_ON_CREATE", "yes")

    config = load_config()

    assert config.base_url == "https://db.example.com/api"
    assert config.token == "secret"
    assert config.timeout == 5.0
    assert config.full_refresh_on_create is True


def test_explicit_arguments_win_over_environment(monkeypatch):
    monkeypatch.setenv("DOCOPS_API_URL", "https://env.example.com")
    monkeypatch.setenv("DOCOPS_TOKEN", "env-token")

    config = load_config(api_url="http://cli.example.com/", token="cli-token")

    assert config.base_url == "http://cli.example.com"
    assert config.token == "cli-token"


@pytest.mark.parametrize("value", ["abc", "0", "-1"])
def test_load_config_rejects_bad_timeout(monkeypatch, value: str):
    monkeypatch.setenv("DOCOPS_TIMEOUT", value)

    with pytest.raises(ConfigError, match="timeout"):
        load_config()


def test_load_config_rejects_non_http_url():
    with pytest.raises(ConfigError, match="API URL"):
        load_config(api_url="ftp://db.example.com")


def test_log_level_from_env(monkeypatch):
    assert log_level_from_env() == "WARNING"
    monkeypatch.setenv("DOCOPS_LOG_LEVEL", "debug")
    assert log_level_from_env() == "DEBUG"


def test_get_client_sets_bearer_header():
    adapter = get_client(ApiConfig(base_url="http://db.test", token="t0k", timeout=3))

    assert adapter.base_url == "http://db.test"
    assert adapter.timeout == 3
    assert adapter.session.headers["Authorization"] == "Bearer t0k"


def test_get_client_without_token_sends_no_authorization():
    adapter = get_client(ApiConfig(base_url="http://db.test"))

    assert "Authorization" not in adapter.session.headers
