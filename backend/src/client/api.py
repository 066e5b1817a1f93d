import logging
from urllib.parse import quote

import httpx

from config import settings
from core.errors import ErrorCode, failure

logger = logging.getLogger(__name__)


def _segment(value: str) -> str:
    return quote(value, safe="")


class WatchlistClient:
    """Thin HTTP client for the watchlist API.

    Every call returns the server's JSON body on success or a ``failure``
    dict. Transport errors are not retried.
    """

    def __init__(
        self,
        user_id: str,
        gateway_secret: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.user_id = user_id
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.CLIENT_TIMEOUT,
            headers={"X-Gateway-Secret": gateway_secret, "X-User-Id": user_id},
            transport=transport,
        )

    async def __aenter__(self) -> "WatchlistClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            return failure(ErrorCode.SERVICE_UNAVAILABLE, "Could not reach the watchlist service")

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_success and isinstance(data, dict):
            return data
        if isinstance(data, dict) and data.get("code") in ErrorCode._value2member_map_:
            return failure(ErrorCode(data["code"]), data.get("error", ""))
        if response.status_code >= 500:
            return failure(ErrorCode.SERVICE_UNAVAILABLE, f"Server error ({response.status_code})")

        detail = data.get("detail") if isinstance(data, dict) else None
        return failure(ErrorCode.VALIDATION_FAILED, str(detail or f"Request rejected ({response.status_code})"))

    async def get_watchlist(self) -> dict:
        return await self._request("GET", "/watchlist")

    async def get_stats(self) -> dict:
        return await self._request("GET", "/watchlist/stats")

    async def search(self, query: str) -> dict:
        return await self._request("GET", "/watchlist/search", params={"q": query})

    async def add_item(self, title: str, media_type: str, **attrs) -> dict:
        return await self._request(
            "POST", "/watchlist/items", json={"title": title, "type": media_type, **attrs}
        )

    async def update_item(self, item_id: str, patch: dict) -> dict:
        return await self._request("PUT", f"/watchlist/items/{_segment(item_id)}", json=patch)

    async def remove_item(self, item_id: str) -> dict:
        return await self._request("DELETE", f"/watchlist/items/{_segment(item_id)}")

    async def move_item(self, item_id: str, folder: str) -> dict:
        return await self._request(
            "PUT", f"/watchlist/items/{_segment(item_id)}/folder", json={"folder": folder}
        )

    async def create_folder(self, name: str) -> dict:
        return await self._request("POST", "/watchlist/folders", json={"name": name})

    async def rename_folder(self, folder_id: str, name: str) -> dict:
        return await self._request(
            "PUT", f"/watchlist/folders/{_segment(folder_id)}", json={"name": name}
        )

    async def delete_folder(self, folder_id: str) -> dict:
        return await self._request("DELETE", f"/watchlist/folders/{_segment(folder_id)}")

    async def share_folder(self, name_or_id: str) -> dict:
        return await self._request("POST", f"/watchlist/folders/{_segment(name_or_id)}/share")

    async def unshare_folder(self, name_or_id: str) -> dict:
        return await self._request("DELETE", f"/watchlist/folders/{_segment(name_or_id)}/share")

    async def get_shared_view(self, folder_key: str, owner_user_id: str | None = None) -> dict:
        path = f"/watchlist/shared/{_segment(folder_key)}"
        if owner_user_id:
            path += f"/{_segment(owner_user_id)}"
        return await self._request("GET", path)

    async def get_activities(self, limit: int | None = None) -> dict:
        params = {"limit": limit} if limit else None
        return await self._request("GET", "/activities", params=params)
