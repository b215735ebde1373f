import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Union

if TYPE_CHECKING:
    from .adapters import Transport

API_KEY_HEADER = "x-api-key"
AUTHORIZATION_HEADER = "authorization"
CREDENTIAL_HEADERS = (API_KEY_HEADER, AUTHORIZATION_HEADER)

Backoff = Literal["fixed", "exponential"]


@dataclass(frozen=True)
class ApiKeyAuth:
    api_key: str

    def headers(self) -> dict[str, str]:
        return {API_KEY_HEADER: self.api_key}


@dataclass(frozen=True)
class OAuth2Auth:
    access_token: str

    def headers(self) -> dict[str, str]:
        return {AUTHORIZATION_HEADER: f"Bearer {self.access_token}"}


AuthConfig = Union[ApiKeyAuth, OAuth2Auth]


@dataclass(frozen=True)
class RetryConfig:
    # retries after the initial attempt; 0 disables retrying
    attempts: int = 4
    backoff: Backoff = "exponential"
    base_ms: int = 250

    def __post_init__(self):
        if self.attempts < 0:
            raise ValueError("RetryConfig.attempts must be >= 0")
        if self.backoff not in ("fixed", "exponential"):
            raise ValueError("RetryConfig.backoff must be 'fixed' or 'exponential'")
        if self.base_ms < 0:
            raise ValueError("RetryConfig.base_ms must be >= 0")


@dataclass(frozen=True)
class HttpOptions:
    """Immutable settings shared by every request an HttpClient makes.

    Derive variations with dataclasses.replace(); never mutate `headers` in place.
    """

    base_url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    retry: RetryConfig = field(default_factory=RetryConfig)
    transport: Union["Transport", None] = None
    # default credential; a per-call override replaces it
    auth: Union[AuthConfig, None] = None
    # refuse to send a request that carries no credential header
    require_auth: bool = False
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    # optional overall timeout in seconds for one logical request (all attempts)
    deadline: Union[float, None] = None
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("opencloud"))
