from .adapters import AiohttpTransport, HttpxTransport, Transport, TransportResponse
from .client import OpenCloud
from .env import EnvConfig, load_config_from_env
from .errors import AuthError, OpenCloudError, RateLimitError
from .http import HttpClient, next_backoff
from .resources import Groups, Universes, Users
from .types import ApiKeyAuth, AuthConfig, HttpOptions, OAuth2Auth, RetryConfig
from .utils import UNSET, build_field_mask, generate_idempotency_key
from .version import VersionChecker, VersionStatus, __version__

__all__ = [
    "OpenCloud",
    "HttpClient",
    "HttpOptions",
    "RetryConfig",
    "AuthConfig",
    "ApiKeyAuth",
    "OAuth2Auth",
    "OpenCloudError",
    "RateLimitError",
    "AuthError",
    "Transport",
    "TransportResponse",
    "HttpxTransport",
    "AiohttpTransport",
    "Users",
    "Groups",
    "Universes",
    "EnvConfig",
    "load_config_from_env",
    "UNSET",
    "build_field_mask",
    "generate_idempotency_key",
    "next_backoff",
    "VersionChecker",
    "VersionStatus",
    "__version__",
]
