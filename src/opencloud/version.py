import logging
from dataclasses import dataclass
from importlib import metadata
from typing import Union

from .http import HttpClient
from .types import HttpOptions, RetryConfig

__version__ = "0.1.0"

DISTRIBUTION = "opencloud-py"
GITHUB_API_URL = "https://api.github.com"
DEFAULT_REPO = "relatiocc/opencloud"


@dataclass(frozen=True)
class VersionStatus:
    up_to_date: bool
    current_version: str
    installed_version: Union[str, None]


class VersionChecker:
    """Compare the installed distribution against the latest GitHub release.

    Use as an async context manager (or call aclose()) to release the HTTP
    transport the checker opens when no client is supplied.
    """

    def __init__(
        self,
        repo: str = DEFAULT_REPO,
        http: Union[HttpClient, None] = None,
        transport=None,
    ):
        self.repo = repo
        # only close what we opened
        self._owns_transport = http is None and transport is None
        self.http = http or HttpClient(
            HttpOptions(
                base_url=GITHUB_API_URL,
                headers={"accept": "application/vnd.github+json"},
                retry=RetryConfig(attempts=4, backoff="exponential", base_ms=250),
                transport=transport,
            )
        )
        self._logger = logging.getLogger("opencloud")

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

    async def current_version(self) -> str:
        """Name of the latest published release, e.g. "v1.2.0"."""
        release = await self.http.request(f"/repos/{self.repo}/releases/latest")
        if not isinstance(release, dict):
            return "unknown"
        return release.get("name") or "unknown"

    def installed_version(self, distribution: str = DISTRIBUTION) -> Union[str, None]:
        try:
            return metadata.version(distribution)
        except metadata.PackageNotFoundError:
            return None

    async def is_up_to_date(self, distribution: str = DISTRIBUTION) -> VersionStatus:
        try:
            current = await self.current_version()
        except Exception as e:  # noqa: BLE001, any failure means "not up to date"
            self._logger.warning(f"version check failed repo={self.repo}: {e}")
            return VersionStatus(False, "unknown", None)
        if current.startswith("v"):
            current = current[1:]
        installed = self.installed_version(distribution)
        if installed is None or current == "unknown":
            return VersionStatus(False, current, installed)
        return VersionStatus(current == installed, current, installed)
