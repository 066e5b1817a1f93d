import logging
import uuid
from collections.abc import Callable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from core.store import WatchlistStore
from core.types import WatchlistDocument, WatchlistItem
from models.watchlist import Watchlist

logger = logging.getLogger(__name__)


class WatchlistService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_or_create(self, user_id: str) -> Watchlist:
        uid = uuid.UUID(str(user_id))
        watchlist = await self._find(uid)
        if watchlist:
            return watchlist

        watchlist = Watchlist(user_id=uid, items=[], custom_folders=[])
        try:
            async with self.db.begin_nested():
                self.db.add(watchlist)
                await self.db.flush()
        except IntegrityError:
            # a concurrent first request created the row
            logger.info("Watchlist for user %s created concurrently, reloading", uid)
            return await self._find(uid)
        logger.info("Created watchlist for user %s", uid)
        return watchlist

    async def _find(self, uid: uuid.UUID) -> Watchlist | None:
        return await self.db.scalar(select(Watchlist).where(Watchlist.user_id == uid))

    async def get_document(self, user_id: str) -> WatchlistDocument:
        watchlist = await self.get_or_create(user_id)
        return watchlist.to_document()

    async def _mutate(self, user_id: str, operation: Callable[[WatchlistStore], dict]) -> dict:
        """Load the user's document, apply one store operation, persist on success."""
        watchlist = await self.get_or_create(user_id)
        store = WatchlistStore(watchlist.to_document())
        result = operation(store)
        if "error" in result:
            return result
        watchlist.apply_document(store.document)
        await self.db.flush()
        return result

    async def add_item(self, user_id: str, title: str, media_type: str, attrs: dict | None = None) -> dict:
        return await self._mutate(user_id, lambda s: s.add_item(title, media_type, attrs))

    async def update_item(self, user_id: str, item_id: str, patch: dict) -> dict:
        return await self._mutate(user_id, lambda s: s.update_item(item_id, patch))

    async def remove_item(self, user_id: str, item_id: str) -> dict:
        return await self._mutate(user_id, lambda s: s.remove_item(item_id))

    async def assign_item_to_folder(self, user_id: str, item_id: str, folder_name: str) -> dict:
        return await self._mutate(user_id, lambda s: s.assign_item_to_folder(item_id, folder_name))

    async def create_folder(self, user_id: str, name: str) -> dict:
        return await self._mutate(user_id, lambda s: s.create_folder(name))

    async def rename_folder(self, user_id: str, folder_id: str, name: str) -> dict:
        return await self._mutate(user_id, lambda s: s.rename_folder(folder_id, name))

    async def delete_folder(self, user_id: str, folder_id: str) -> dict:
        return await self._mutate(user_id, lambda s: s.delete_folder(folder_id))

    async def share_folder(self, user_id: str, name_or_id: str, origin: str | None = None) -> dict:
        origin = origin or settings.CLIENT_URL
        return await self._mutate(
            user_id, lambda s: s.share_folder(name_or_id, str(uuid.UUID(str(user_id))), origin)
        )

    async def unshare_folder(self, user_id: str, name_or_id: str) -> dict:
        return await self._mutate(user_id, lambda s: s.unshare_folder(name_or_id))

    async def get_stats(self, user_id: str) -> dict:
        document = await self.get_document(user_id)
        return WatchlistStore(document).stats()

    async def search(self, user_id: str, query: str) -> list[WatchlistItem]:
        document = await self.get_document(user_id)
        return WatchlistStore(document).search(query)
