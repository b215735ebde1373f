"""Thin wrappers over the Open Cloud v2 endpoints.

Each method builds a path, query and body and hands them to HttpClient.request;
decoded JSON comes back as plain dicts.
"""

from datetime import datetime, timezone
from typing import Any, Union

from .http import HttpClient
from .utils import build_field_mask, drop_unset, generate_idempotency_key


def _page_params(
    max_page_size: Union[int, None],
    page_token: Union[str, None],
    filter: Union[str, None] = None,  # noqa: A002, matches the API's query name
) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if max_page_size:
        params["maxPageSize"] = max_page_size
    if page_token:
        params["pageToken"] = page_token
    if filter:
        params["filter"] = filter
    return params


class Users:
    def __init__(self, http: HttpClient):
        self.http = http

    async def get(self, user_id: str) -> dict[str, Any]:
        return await self.http.request(f"/cloud/v2/users/{user_id}")

    async def generate_thumbnail(
        self,
        user_id: str,
        size: Union[int, None] = None,
        format: Union[str, None] = None,  # noqa: A002
        shape: Union[str, None] = None,
    ) -> dict[str, Any]:
        """Generate the avatar thumbnail URL for a user.

        size is one of 48, 50, 60, 75, 100, 110, 150, 180, 352, 420 or 720 (API default 420).
        """
        params = {"size": size, "format": format, "shape": shape}
        return await self.http.request(
            f"/cloud/v2/users/{user_id}:generateThumbnail", params=params
        )

    async def list_inventory_items(
        self,
        user_id: str,
        max_page_size: Union[int, None] = None,
        page_token: Union[str, None] = None,
        filter: Union[str, None] = None,  # noqa: A002
    ) -> dict[str, Any]:
        return await self.http.request(
            f"/cloud/v2/users/{user_id}/inventory-items",
            params=_page_params(max_page_size, page_token, filter),
        )

    async def list_asset_quotas(
        self,
        user_id: str,
        max_page_size: Union[int, None] = None,
        page_token: Union[str, None] = None,
    ) -> dict[str, Any]:
        return await self.http.request(
            f"/cloud/v2/users/{user_id}/asset-quotas",
            params=_page_params(max_page_size, page_token),
        )

    async def create_notification(self, user_id: str, body: dict[str, Any]) -> dict[str, Any]:
        return await self.http.request(
            f"/cloud/v2/users/{user_id}/notifications", "POST", body=body
        )


class Groups:
    def __init__(self, http: HttpClient):
        self.http = http

    async def get(self, group_id: str) -> dict[str, Any]:
        return await self.http.request(f"/cloud/v2/groups/{group_id}")

    async def list_join_requests(
        self,
        group_id: str,
        max_page_size: Union[int, None] = None,
        page_token: Union[str, None] = None,
        filter: Union[str, None] = None,  # noqa: A002
    ) -> dict[str, Any]:
        return await self.http.request(
            f"/cloud/v2/groups/{group_id}/join-requests",
            params=_page_params(max_page_size, page_token, filter),
        )

    async def accept_join_request(self, group_id: str, join_request_id: str) -> None:
        await self.http.request(
            f"/cloud/v2/groups/{group_id}/join-requests/{join_request_id}:accept", "POST"
        )

    async def decline_join_request(self, group_id: str, join_request_id: str) -> None:
        await self.http.request(
            f"/cloud/v2/groups/{group_id}/join-requests/{join_request_id}:decline", "POST"
        )

    async def list_memberships(
        self,
        group_id: str,
        max_page_size: Union[int, None] = None,
        page_token: Union[str, None] = None,
        filter: Union[str, None] = None,  # noqa: A002
    ) -> dict[str, Any]:
        return await self.http.request(
            f"/cloud/v2/groups/{group_id}/memberships",
            params=_page_params(max_page_size, page_token, filter),
        )

    async def get_shout(self, group_id: str) -> dict[str, Any]:
        return await self.http.request(f"/cloud/v2/groups/{group_id}/shout")

    async def list_roles(
        self,
        group_id: str,
        max_page_size: Union[int, None] = None,
        page_token: Union[str, None] = None,
    ) -> dict[str, Any]:
        return await self.http.request(
            f"/cloud/v2/groups/{group_id}/roles",
            params=_page_params(max_page_size, page_token),
        )

    async def get_role(self, group_id: str, role_id: str) -> dict[str, Any]:
        return await self.http.request(f"/cloud/v2/groups/{group_id}/roles/{role_id}")

    async def update_membership(
        self, group_id: str, membership_id: str, role_id: str
    ) -> dict[str, Any]:
        """Move a member to another role."""
        return await self.http.request(
            f"/cloud/v2/groups/{group_id}/memberships/{membership_id}",
            "PATCH",
            body={"role": f"groups/{group_id}/roles/{role_id}"},
        )


class Universes:
    def __init__(self, http: HttpClient):
        self.http = http

    async def get(self, universe_id: str) -> dict[str, Any]:
        return await self.http.request(f"/cloud/v2/universes/{universe_id}")

    async def update(self, universe_id: str, body: dict[str, Any]) -> dict[str, Any]:
        """Patch a universe; the update mask is derived from the keys present in `body`."""
        return await self.http.request(
            f"/cloud/v2/universes/{universe_id}",
            "PATCH",
            body=drop_unset(body),
            params={"updateMask": build_field_mask(body)},
        )

    async def list_user_restrictions(
        self,
        universe_id: str,
        max_page_size: Union[int, None] = None,
        page_token: Union[str, None] = None,
    ) -> dict[str, Any]:
        return await self.http.request(
            f"/cloud/v2/universes/{universe_id}/user-restrictions",
            params=_page_params(max_page_size, page_token),
        )

    async def get_user_restriction(
        self, universe_id: str, user_restriction_id: str
    ) -> dict[str, Any]:
        return await self.http.request(
            f"/cloud/v2/universes/{universe_id}/user-restrictions/{user_restriction_id}"
        )

    async def update_user_restriction(
        self, universe_id: str, user_restriction_id: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        """Ban or unban a user; `body` is the game join restriction.

        Requires the `universe.user-restriction:write` scope. Each call carries a fresh
        idempotency key.
        """
        first_sent = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        params = {
            "updateMask": "game_join_restriction",
            "idempotencyKey.key": generate_idempotency_key(),
            "idempotencyKey.firstSent": first_sent.replace("+00:00", "Z"),
        }
        return await self.http.request(
            f"/cloud/v2/universes/{universe_id}/user-restrictions/{user_restriction_id}",
            "PATCH",
            body=body,
            params=params,
        )

    async def list_user_restriction_logs(
        self,
        universe_id: str,
        max_page_size: Union[int, None] = None,
        page_token: Union[str, None] = None,
        filter: Union[str, None] = None,  # noqa: A002
    ) -> dict[str, Any]:
        return await self.http.request(
            f"/cloud/v2/universes/{universe_id}/user-restrictions:listLogs",
            params=_page_params(max_page_size, page_token, filter),
        )

    async def generate_speech_asset(self, universe_id: str, body: dict[str, Any]) -> dict[str, Any]:
        operation = await self.http.request(
            f"/cloud/v2/universes/{universe_id}:generateSpeechAsset", "POST", body=body
        )
        return await self.http.request(f"/assets/v1/{operation['path']}")

    async def publish_message(self, universe_id: str, body: dict[str, Any]) -> None:
        await self.http.request(
            f"/cloud/v2/universes/{universe_id}:publishMessage", "POST", body=body
        )

    async def restart_servers(self, universe_id: str) -> None:
        """Restart active servers, only if a newer version of the experience is published."""
        await self.http.request(
            f"/cloud/v2/universes/{universe_id}:restartServers", "POST", body={}
        )

    async def translate_text(self, universe_id: str, body: dict[str, Any]) -> dict[str, Any]:
        return await self.http.request(
            f"/cloud/v2/universes/{universe_id}:translateText", "POST", body=body
        )
