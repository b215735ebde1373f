import asyncio
import dataclasses
import json
import math
import random
from collections.abc import Iterable, Mapping
from typing import Any, Union
from urllib.parse import urlencode

from .errors import AuthError, OpenCloudError, RateLimitError
from .types import CREDENTIAL_HEADERS, AuthConfig, HttpOptions, RetryConfig

RATE_LIMIT_RESET_HEADER = "x-ratelimit-reset"

# jitter band applied to exponential backoff
JITTER_MIN = 0.75
JITTER_MAX = 1.25

# ---------- Common helpers ----------


def next_backoff(attempt: int, retry: RetryConfig) -> int:
    """Milliseconds to wait after failed attempt `attempt` (0-indexed)."""
    if retry.backoff == "fixed":
        return retry.base_ms
    expo = retry.base_ms * (2**attempt)
    return round(expo * random.uniform(JITTER_MIN, JITTER_MAX))


def _parse_reset(headers) -> Union[float, None]:
    raw = headers.get(RATE_LIMIT_RESET_HEADER)
    if raw is None:
        return None
    try:
        seconds = float(raw)
    except ValueError:
        return None
    # "inf" and "nan" parse but are not usable waits
    if not math.isfinite(seconds):
        return None
    return max(0.0, seconds)


async def _parse_error_details(response) -> Any:
    # error bodies are best-effort; non-JSON yields None
    try:
        return json.loads(await response.text())
    except ValueError:
        return None


def _encode_params(params: Union[Mapping[str, Any], Iterable[tuple[str, Any]], None]) -> str:
    if not params:
        return ""
    # dict() keeps first-seen order and lets later duplicates win
    merged = dict(params.items() if isinstance(params, Mapping) else params)
    return urlencode([(k, str(v)) for k, v in merged.items() if v is not None])


class HttpClient:
    """Issues requests against the Open Cloud API with retries and typed errors.

    Every call is self-contained: headers are rebuilt per request from the immutable
    HttpOptions, so one HttpClient (and anything derived through with_auth) can be
    shared freely between concurrent tasks.
    """

    def __init__(self, options: HttpOptions):
        if options.transport is None:
            from .adapters import HttpxTransport  # noqa: PLC0415

            options = dataclasses.replace(options, transport=HttpxTransport())
        self.options = options
        self._logger = options.logger

    @property
    def transport(self):
        return self.options.transport

    def with_auth(self, auth: AuthConfig) -> "HttpClient":
        """Return an independent client whose default credential is `auth`."""
        return HttpClient(dataclasses.replace(self.options, auth=auth))

    # ---------- request composition ----------
    def resolve_headers(
        self,
        headers: Union[Mapping[str, str], None] = None,
        auth: Union[AuthConfig, None] = None,
    ) -> dict[str, str]:
        resolved = {"content-type": "application/json"}
        for layer in (self.options.headers, headers or {}):
            for k, v in layer.items():
                resolved[k.lower()] = v
        credential = auth if auth is not None else self.options.auth
        if credential is not None:
            # credentials are mutually exclusive on the wire
            for h in CREDENTIAL_HEADERS:
                resolved.pop(h, None)
            resolved.update(credential.headers())
        return resolved

    def build_url(self, path: str, params=None) -> str:
        url = self.options.base_url + path
        query = _encode_params(params)
        if query:
            url += ("&" if "?" in url else "?") + query
        return url

    # ---------- execution ----------
    async def request(
        self,
        path: str,
        method: str = "GET",
        *,
        body: Any = None,
        params=None,
        headers: Union[Mapping[str, str], None] = None,
        auth: Union[AuthConfig, None] = None,
    ) -> Any:
        """Send one logical request and return the decoded JSON payload.

        Args:
            path (str): path appended to the base URL
            method (str): HTTP verb
            body (Any): JSON-serializable request body
            params: mapping or (name, value) pairs for the query string
            headers (Mapping[str, str] | None): call-specific header overrides
            auth (AuthConfig | None): credential replacing the default for this call

        Raises:
            AuthError: on 401/403, or when a credential is required but missing
            RateLimitError: when 429 persists after all retries
            OpenCloudError: for any other non-success status
        """
        url = self.build_url(path, params)
        resolved = self.resolve_headers(headers, auth)
        if self.options.require_auth and not any(h in resolved for h in CREDENTIAL_HEADERS):
            raise AuthError("No authentication provided")
        payload = json.dumps(body) if body is not None else None
        call = self._execute(method.upper(), url, resolved, payload)
        if self.options.deadline is not None:
            return await asyncio.wait_for(call, self.options.deadline)
        return await call

    async def _execute(
        self, method: str, url: str, headers: dict[str, str], payload: Union[str, None]
    ) -> Any:
        retry = self.options.retry
        transport = self.options.transport
        for attempt in range(retry.attempts + 1):
            self._logger.debug(f"req start method={method} url={url} attempt={attempt}")
            response = await transport(url, method, headers, payload)
            status = response.status
            self._logger.debug(f"req done method={method} url={url} status={status}")

            if status in (401, 403):
                details = await _parse_error_details(response)
                self._logger.warning(f"auth failure status={status} url={url}")
                raise AuthError(status=status, details=details)

            if 200 <= status < 300:  # noqa: PLR2004, http status range
                if status == 204:  # noqa: PLR2004
                    return None
                text = await response.text()
                return json.loads(text) if text else None

            if status == 429 or status >= 500:  # noqa: PLR2004
                reset = _parse_reset(response.headers)
                if attempt < retry.attempts:
                    wait_ms = reset * 1000 if reset is not None else next_backoff(attempt, retry)
                    self._logger.info(
                        f"status={status} on url={url}; retrying in {wait_ms:.0f}ms "
                        f"(attempt {attempt + 1}/{retry.attempts})"
                    )
                    await self.options.sleep(wait_ms / 1000)
                    continue
                if status == 429:  # noqa: PLR2004
                    details = await _parse_error_details(response)
                    self._logger.warning(f"rate limited url={url}; retries exhausted")
                    raise RateLimitError(retry_after=reset, details=details)

            details = await _parse_error_details(response)
            code = details.get("code") if isinstance(details, dict) else None
            self._logger.warning(f"request failed status={status} url={url} code={code}")
            raise OpenCloudError(f"HTTP {status}", status, code, details)

        raise OpenCloudError("Exhausted retries without a successful response")
