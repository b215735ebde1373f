import pytest

from opencloud import (
    ApiKeyAuth,
    OAuth2Auth,
    OpenCloud,
    OpenCloudError,
    RetryConfig,
    load_config_from_env,
)

PREFIX = "OCTEST_"


def test_env_api_key_and_urls(monkeypatch):
    monkeypatch.setenv("OCTEST_API_KEY", " key-1 ")
    monkeypatch.setenv("OCTEST_BASE_URL", "https://example.test")
    monkeypatch.setenv("OCTEST_USER_AGENT", "bot/2")
    cfg = load_config_from_env(prefix=PREFIX)
    assert cfg.auth == ApiKeyAuth("key-1")
    assert cfg.base_url == "https://example.test"
    assert cfg.user_agent == "bot/2"
    assert cfg.retry is None


def test_env_access_token_used_without_api_key(monkeypatch):
    monkeypatch.setenv("OCTEST_ACCESS_TOKEN", "tok")
    cfg = load_config_from_env(prefix=PREFIX)
    assert cfg.auth == OAuth2Auth("tok")

    monkeypatch.setenv("OCTEST_API_KEY", "key")
    assert load_config_from_env(prefix=PREFIX).auth == ApiKeyAuth("key")


def test_env_retry_settings(monkeypatch):
    monkeypatch.setenv("OCTEST_RETRY_ATTEMPTS", "2")
    monkeypatch.setenv("OCTEST_RETRY_BACKOFF", "FIXED")
    cfg = load_config_from_env(prefix=PREFIX)
    assert cfg.retry == RetryConfig(attempts=2, backoff="fixed", base_ms=250)


def test_env_invalid_retry_values(monkeypatch):
    monkeypatch.setenv("OCTEST_RETRY_BASE_MS", "fast")
    with pytest.raises(ValueError, match="OCTEST_RETRY_BASE_MS"):
        load_config_from_env(prefix=PREFIX)

    monkeypatch.setenv("OCTEST_RETRY_BASE_MS", "10")
    monkeypatch.setenv("OCTEST_RETRY_BACKOFF", "linear")
    with pytest.raises(ValueError):
        load_config_from_env(prefix=PREFIX)


def test_env_file_augments_and_environment_wins(monkeypatch, tmp_path):
    envp = tmp_path / ".env"
    envp.write_text(
        "# comment\n"
        "OCTEST_API_KEY='file-key'\n"
        'export OCTEST_BASE_URL="https://file.test"\n'
        "not a pair\n"
    )
    cfg = load_config_from_env(prefix=PREFIX, env_path=str(envp))
    assert cfg.auth == ApiKeyAuth("file-key")
    assert cfg.base_url == "https://file.test"

    monkeypatch.setenv("OCTEST_API_KEY", "env-key")
    cfg2 = load_config_from_env(prefix=PREFIX, env_path=str(envp))
    assert cfg2.auth == ApiKeyAuth("env-key")


def test_env_file_strips_only_matching_quotes(tmp_path):
    envp = tmp_path / ".env"
    envp.write_text("OCTEST_USER_AGENT=\"bot/1'\nOCTEST_BASE_URL = 'https://q.test'\n=orphan\n")
    cfg = load_config_from_env(prefix=PREFIX, env_path=str(envp))
    assert cfg.user_agent == "\"bot/1'"
    assert cfg.base_url == "https://q.test"


def test_missing_env_file_is_ignored(tmp_path):
    cfg = load_config_from_env(prefix=PREFIX, env_path=str(tmp_path / "nope.env"))
    assert cfg.auth is None


@pytest.mark.asyncio
async def test_client_from_env(monkeypatch, make_transport):
    monkeypatch.setenv("OCTEST_API_KEY", "env-key")
    monkeypatch.setenv("OCTEST_BASE_URL", "https://example.test")
    monkeypatch.setenv("OCTEST_RETRY_ATTEMPTS", "0")
    transport = make_transport([{"status": 500}])
    client = OpenCloud.from_env(prefix=PREFIX, transport=transport)

    with pytest.raises(OpenCloudError):
        await client.users.get("1")

    assert len(transport.calls) == 1
    assert transport.calls[0].url == "https://example.test/cloud/v2/users/1"
    assert transport.calls[0].headers["x-api-key"] == "env-key"


def test_explicit_kwargs_beat_env(monkeypatch):
    monkeypatch.setenv("OCTEST_USER_AGENT", "env-agent")
    client = OpenCloud.from_env(prefix=PREFIX, user_agent="kw-agent", transport=object())
    assert client.http.options.headers["user-agent"] == "kw-agent"
