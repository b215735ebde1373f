import contextlib
from typing import Union

from .env import load_config_from_env
from .http import HttpClient
from .resources import Groups, Universes, Users
from .types import ApiKeyAuth, AuthConfig, HttpOptions, RetryConfig
from .version import __version__

DEFAULT_BASE_URL = "https://apis.roblox.com"
DEFAULT_USER_AGENT = f"opencloud-py/{__version__}"


class OpenCloud:
    """Entry point for the Open Cloud API.

    Usage:
        async with OpenCloud(api_key="...") as client:
            user = await client.users.get("123456789")

        # multi-tenant: one scoped client per OAuth2 token, sharing the transport
        scoped = client.with_auth(OAuth2Auth(access_token))
        await scoped.groups.list_memberships("123")

    A credential is required for every call; without `api_key` each request raises
    AuthError until a credential is supplied through with_auth().
    """

    def __init__(
        self,
        api_key: Union[str, None] = None,
        *,
        user_agent: Union[str, None] = None,
        base_url: Union[str, None] = None,
        retry: Union[RetryConfig, None] = None,
        transport=None,
        auth: Union[AuthConfig, None] = None,
        deadline: Union[float, None] = None,
        log_level: Union[int, None] = None,
    ):
        """Initialize an OpenCloud client.

        Args:
            api_key (str | None): default API key credential
            user_agent (str | None): user-agent header (defaults to opencloud-py/<version>)
            base_url (str | None): API root (defaults to https://apis.roblox.com)
            retry (RetryConfig | None): retry policy (defaults to 4 attempts, exponential, 250ms)
            transport: async transport callable (defaults to an owned HttpxTransport)
            auth (AuthConfig | None): default credential, used when api_key is not given
            deadline (float | None): overall timeout in seconds for one logical request
            log_level (int | None): level for the "opencloud" logger
        """
        default_auth = ApiKeyAuth(api_key) if api_key else auth
        http = HttpClient(
            HttpOptions(
                base_url=base_url or DEFAULT_BASE_URL,
                headers={"user-agent": user_agent or DEFAULT_USER_AGENT},
                retry=retry or RetryConfig(),
                transport=transport,
                auth=default_auth,
                require_auth=True,
                deadline=deadline,
            )
        )
        self._bind(http, owns_transport=transport is None)
        if log_level is not None:
            with contextlib.suppress(Exception):
                http.options.logger.setLevel(log_level)

    def _bind(self, http: HttpClient, owns_transport: bool):
        self.http = http
        self._owns_transport = owns_transport
        self.users = Users(http)
        self.groups = Groups(http)
        self.universes = Universes(http)

    def with_auth(self, auth: AuthConfig) -> "OpenCloud":
        """Return a client that uses `auth` instead of the default credential.

        The scoped client shares this client's transport but never its state; the
        parent keeps its own credential.
        """
        scoped = object.__new__(type(self))
        scoped._bind(self.http.with_auth(auth), owns_transport=False)
        return scoped

    # ---------- lifecycle ----------
    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
        return False

    async def aclose(self):
        if not self._owns_transport:
            return
        closer = getattr(self.http.transport, "aclose", None)
        if closer is not None:
            await closer()

    # ---------- convenience: build from env ----------
    @classmethod
    def from_env(
        cls,
        prefix: str = "OPENCLOUD_",
        env_path: Union[str, None] = None,
        **kwargs,
    ) -> "OpenCloud":
        """Create a client from OPENCLOUD_* environment variables.

        Explicit keyword arguments win over values found in the environment.

        Args:
            prefix (str): variable name prefix
            env_path (str | None): optional .env file consulted after the real environment
        """
        cfg = load_config_from_env(prefix=prefix, env_path=env_path)
        kwargs.setdefault("auth", cfg.auth)
        kwargs.setdefault("base_url", cfg.base_url)
        kwargs.setdefault("user_agent", cfg.user_agent)
        kwargs.setdefault("retry", cfg.retry)
        return cls(**kwargs)
