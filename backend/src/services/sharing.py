import logging
import uuid

from sqlalchemy import String, cast, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ErrorCode, failure
from core.folders import is_default_category
from core.types import CustomFolder, WatchlistItem, utcnow
from models.user import User
from models.watchlist import Watchlist

logger = logging.getLogger(__name__)

# Never shown to anonymous viewers
PRIVATE_ITEM_FIELDS = ("notes", "folders")


def project_item(item: WatchlistItem) -> dict:
    data = item.dump()
    for key in PRIVATE_ITEM_FIELDS:
        data.pop(key, None)
    return data


def _parse_uuid(value: str | None) -> uuid.UUID | None:
    if not value:
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class SharingService:
    """Read-only public projections of shared folders."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_shared_view(self, folder_key: str, owner_user_id: str | None = None) -> dict:
        if is_default_category(folder_key):
            return await self._default_view(folder_key, owner_user_id)
        return await self._custom_view(folder_key, owner_user_id)

    async def _default_view(self, category: str, owner_user_id: str | None) -> dict:
        if not owner_user_id:
            return failure(
                ErrorCode.OWNER_REQUIRED,
                "User ID is required for sharing default folders",
            )
        watchlist = await self._load(owner_user_id)
        if not watchlist:
            return failure(ErrorCode.OWNER_NOT_FOUND, "Watchlist not found for this user")

        document = watchlist.to_document()
        items = [i for i in document.items if i.media_type == category]
        return {
            "success": True,
            "folder": {"name": category, "isShared": True, "type": "default"},
            "items": [project_item(i) for i in items],
            "owner": await self._owner_info(watchlist.user_id),
            "sharedDate": utcnow().isoformat(),
        }

    async def _custom_view(self, folder_key: str, owner_user_id: str | None) -> dict:
        watchlist, folder = await self._find_shared_folder(folder_key, owner_user_id)
        if not folder:
            return failure(
                ErrorCode.NOT_SHARED_OR_MISSING,
                "Shared folder not found or no longer shared",
            )

        document = watchlist.to_document()
        items = [i for i in document.items if folder.name in i.folders]
        shared_date = folder.shared_date or folder.created_date
        return {
            "success": True,
            "folder": {
                "id": folder.id,
                "name": folder.name,
                "isShared": True,
                "type": "custom",
                "createdDate": folder.created_date.isoformat(),
            },
            "items": [project_item(i) for i in items],
            "owner": await self._owner_info(watchlist.user_id),
            "sharedDate": shared_date.isoformat(),
        }

    async def _find_shared_folder(
        self, folder_key: str, owner_user_id: str | None
    ) -> tuple[Watchlist | None, CustomFolder | None]:
        if owner_user_id:
            watchlist = await self._load(owner_user_id)
            candidates = [watchlist] if watchlist else []
        elif _parse_uuid(folder_key):
            # Without an owner only globally unique folder ids can be resolved
            result = await self.db.scalars(
                select(Watchlist).where(
                    cast(Watchlist.custom_folders, String).contains(folder_key)
                )
            )
            candidates = list(result.all())
        else:
            candidates = []

        for watchlist in candidates:
            document = watchlist.to_document()
            folder = document.find_folder(folder_key)
            if folder is None and owner_user_id:
                folder = document.find_folder_by_name(folder_key)
            if folder and folder.is_shared:
                return watchlist, folder
        return None, None

    async def _load(self, user_id: str) -> Watchlist | None:
        uid = _parse_uuid(user_id)
        if uid is None:
            return None
        return await self.db.scalar(select(Watchlist).where(Watchlist.user_id == uid))

    async def _owner_info(self, user_id: uuid.UUID) -> dict:
        user = await self.db.get(User, user_id)
        name = user.display_name if user and user.display_name else "Anonymous User"
        return {"id": str(user_id), "name": name}
