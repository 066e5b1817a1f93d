import logging
from collections.abc import Awaitable

from client.api import WatchlistClient
from core.folders import group_by_folder, select_active_tab
from core.types import CustomFolder, WatchlistDocument, WatchlistItem

logger = logging.getLogger(__name__)


class WatchlistCache:
    """Local copy of the server watchlist.

    The snapshot is only ever replaced by ``refresh()``; mutations go to the
    server and are followed by a refresh whether they succeeded or not.
    Grouping and tab selection are recomputed from the snapshot on every read.
    """

    def __init__(self, client: WatchlistClient):
        self.client = client
        self.items: list[WatchlistItem] = []
        self.custom_folders: list[CustomFolder] = []
        self.status_filter: str | None = None
        self.loaded = False
        self.last_error: dict | None = None
        self._active_tab: str | None = None

    async def refresh(self) -> bool:
        result = await self.client.get_watchlist()
        if "error" in result:
            # keep the last known-good snapshot
            logger.warning("Watchlist refresh failed: %s", result["error"])
            self.last_error = result
            return False

        document = WatchlistDocument.model_validate(result["watchlist"])
        self.items = document.items
        self.custom_folders = document.custom_folders
        self.loaded = True
        self.last_error = None
        return True

    @property
    def grouped(self) -> dict[str, list[WatchlistItem]]:
        return group_by_folder(self.items, self.custom_folders, self.status_filter)

    @property
    def active_tab(self) -> str | None:
        self._active_tab = select_active_tab(self._active_tab, self.grouped, self.custom_folders)
        return self._active_tab

    def select_tab(self, name: str) -> None:
        self._active_tab = name

    def set_status_filter(self, status: str | None) -> None:
        self.status_filter = None if status in (None, "All") else status

    def tab_items(self) -> list[WatchlistItem]:
        tab = self.active_tab
        return self.grouped.get(tab, []) if tab else []

    async def _mutate(self, call: Awaitable[dict]) -> dict:
        result = await call
        await self.refresh()
        if "error" in result:
            self.last_error = result
        return result

    async def add_item(self, title: str, media_type: str, **attrs) -> dict:
        return await self._mutate(self.client.add_item(title, media_type, **attrs))

    async def update_item(self, item_id: str, patch: dict) -> dict:
        return await self._mutate(self.client.update_item(item_id, patch))

    async def remove_item(self, item_id: str) -> dict:
        return await self._mutate(self.client.remove_item(item_id))

    async def move_item(self, item_id: str, folder: str) -> dict:
        return await self._mutate(self.client.move_item(item_id, folder))

    async def create_folder(self, name: str) -> dict:
        result = await self._mutate(self.client.create_folder(name))
        if "error" not in result:
            self.select_tab(result["folder"]["name"])
        return result

    async def rename_folder(self, folder_id: str, name: str) -> dict:
        return await self._mutate(self.client.rename_folder(folder_id, name))

    async def delete_folder(self, folder_id: str) -> dict:
        return await self._mutate(self.client.delete_folder(folder_id))

    async def share_folder(self, name_or_id: str) -> dict:
        return await self._mutate(self.client.share_folder(name_or_id))

    async def unshare_folder(self, name_or_id: str) -> dict:
        return await self._mutate(self.client.unshare_folder(name_or_id))
