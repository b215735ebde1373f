"""Typed failures raised by the request engine.

Callers branch on the class: AuthError for 401/403, RateLimitError for a 429 that
outlived its retries, OpenCloudError for everything else.
"""

from typing import Any, Union

RATE_LIMITED_CODE = "rate_limited"
UNAUTHORIZED_CODE = "unauthorized"


class OpenCloudError(Exception):
    """Base error for all Open Cloud API failures.

    Args:
        message (str): human-readable description
        status (int | None): HTTP status code of the failing response
        code (str | None): machine error code taken from the response body
        details (Any): parsed response body, or None when it was not valid JSON
    """

    def __init__(
        self,
        message: str,
        status: Union[int, None] = None,
        code: Union[str, None] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self._message = message
        self._status = status
        self._code = code
        self._details = details

    @property
    def message(self) -> str:
        return self._message

    @property
    def status(self) -> Union[int, None]:
        return self._status

    @property
    def code(self) -> Union[str, None]:
        return self._code

    @property
    def details(self) -> Any:
        return self._details

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self._message!r}, status={self._status!r}, "
            f"code={self._code!r})"
        )


class RateLimitError(OpenCloudError):
    """Rate limit still exceeded after all retries (429)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: Union[float, None] = None,
        details: Any = None,
    ):
        super().__init__(message, 429, RATE_LIMITED_CODE, details)
        self._retry_after = retry_after

    @property
    def retry_after(self) -> Union[float, None]:
        """Seconds until the limit resets, when the server said so."""
        return self._retry_after


class AuthError(OpenCloudError):
    """Invalid, missing or insufficient credentials (401/403)."""

    def __init__(
        self,
        message: str = "Unauthorized: invalid or missing Open Cloud credentials",
        status: int = 401,
        details: Any = None,
    ):
        super().__init__(message, status, UNAUTHORIZED_CODE, details)
