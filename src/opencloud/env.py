import os
from dataclasses import dataclass
from typing import Union

from .types import ApiKeyAuth, AuthConfig, OAuth2Auth, RetryConfig

DEFAULT_PREFIX = "OPENCLOUD_"


@dataclass(frozen=True)
class EnvConfig:
    auth: Union[AuthConfig, None] = None
    base_url: Union[str, None] = None
    user_agent: Union[str, None] = None
    retry: Union[RetryConfig, None] = None


def _split_env_line(line: str) -> Union[tuple[str, str], None]:
    # KEY=VALUE, optionally prefixed with `export`; comments and junk yield None
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    key, sep, val = line.partition("=")
    if not sep:
        return None
    key = key.strip()
    if key.startswith("export "):
        key = key[len("export ") :].strip()
    if not key:
        return None
    val = val.strip()
    if len(val) >= 2 and val[0] == val[-1] and val[0] in "\"'":  # noqa: PLR2004
        val = val[1:-1]
    return key, val


def _parse_env_file(env_path: str) -> dict[str, str]:
    """Read KEY=VALUE pairs from a .env file; a missing file reads as empty."""
    try:
        with open(env_path) as f:
            pairs = [_split_env_line(raw) for raw in f]
    except FileNotFoundError:
        return {}
    return dict(p for p in pairs if p is not None)


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_config_from_env(
    prefix: str = DEFAULT_PREFIX,
    env_path: Union[str, None] = None,
) -> EnvConfig:
    """Read client settings from environment variables.

    Recognized names (after `prefix`):
      - API_KEY: API key credential
      - ACCESS_TOKEN: OAuth2 access token (used only when API_KEY is absent)
      - BASE_URL, USER_AGENT
      - RETRY_ATTEMPTS, RETRY_BACKOFF ("fixed" | "exponential"), RETRY_BASE_MS

    If 'env_path' is provided, variables from that .env file augment lookups without
    mutating the process environment; the real environment takes precedence.
    """
    file_env = _parse_env_file(env_path) if env_path else {}
    env_map: dict[str, str] = {**file_env, **os.environ}

    def get(name: str) -> Union[str, None]:
        val = env_map.get(prefix + name)
        return val.strip() if val and val.strip() else None

    auth: Union[AuthConfig, None] = None
    if get("API_KEY"):
        auth = ApiKeyAuth(get("API_KEY"))
    elif get("ACCESS_TOKEN"):
        auth = OAuth2Auth(get("ACCESS_TOKEN"))

    retry = None
    attempts, backoff, base_ms = get("RETRY_ATTEMPTS"), get("RETRY_BACKOFF"), get("RETRY_BASE_MS")
    if attempts or backoff or base_ms:
        defaults = RetryConfig()
        retry = RetryConfig(
            attempts=(
                _parse_int(prefix + "RETRY_ATTEMPTS", attempts) if attempts else defaults.attempts
            ),
            backoff=backoff.lower() if backoff else defaults.backoff,
            base_ms=_parse_int(prefix + "RETRY_BASE_MS", base_ms) if base_ms else defaults.base_ms,
        )

    return EnvConfig(
        auth=auth,
        base_url=get("BASE_URL"),
        user_agent=get("USER_AGENT"),
        retry=retry,
    )
