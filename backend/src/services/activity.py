import logging
import uuid
from enum import Enum

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from core.database import get_db
from models.activity import Activity

logger = logging.getLogger(__name__)


class ActivityType(str, Enum):
    WATCHLIST_ADD = "watchlist_add"
    WATCHLIST_REMOVE = "watchlist_remove"
    WATCHLIST_UPDATE = "watchlist_update"
    MEDIA_STATUS_CHANGE = "media_status_change"
    MEDIA_RATE = "media_rate"
    FOLDER_CREATE = "folder_create"
    FOLDER_RENAME = "folder_rename"
    FOLDER_DELETE = "folder_delete"
    FOLDER_SHARE = "folder_share"
    FOLDER_UNSHARE = "folder_unshare"
    FOLDER_ITEM_ADD = "folder_item_add"
    FOLDER_ITEM_REMOVE = "folder_item_remove"
    FOLDER_ITEM_MOVE = "folder_item_move"


class ActivityService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(
        self,
        user_id: str,
        type: ActivityType,
        title: str,
        details: dict | None = None,
    ) -> Activity:
        activity = Activity(
            user_id=uuid.UUID(str(user_id)),
            type=ActivityType(type).value,
            title=title,
            details=details or {},
        )
        self.db.add(activity)
        await self.db.flush()
        await self.cleanup(user_id)
        return activity

    async def cleanup(self, user_id: str, keep: int | None = None) -> int:
        """Delete everything but the newest ``keep`` activities of a user.

        Returns the number of deleted rows.
        """
        if keep is None:
            keep = settings.ACTIVITY_HISTORY_LIMIT
        uid = uuid.UUID(str(user_id))
        id_stmt = (
            select(Activity.id)
            .where(Activity.user_id == uid)
            .order_by(Activity.created_at.desc())
            .offset(keep)
        )
        rows = await self.db.execute(id_stmt)
        ids_to_delete = [row[0] for row in rows.all()]
        if not ids_to_delete:
            return 0
        result = await self.db.execute(
            delete(Activity).where(Activity.id.in_(ids_to_delete))
        )
        await self.db.flush()
        return result.rowcount

    async def get_recent(self, user_id: str, limit: int | None = None) -> list[Activity]:
        if limit is None:
            limit = settings.DEFAULT_ACTIVITY_PAGE_SIZE
        stmt = (
            select(Activity)
            .where(Activity.user_id == uuid.UUID(str(user_id)))
            .order_by(Activity.created_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def clear(self, user_id: str) -> int:
        result = await self.db.execute(
            delete(Activity).where(Activity.user_id == uuid.UUID(str(user_id)))
        )
        await self.db.flush()
        return result.rowcount

    async def stats(self, user_id: str) -> dict:
        uid = uuid.UUID(str(user_id))
        rows = await self.db.execute(
            select(Activity.type, func.count(Activity.id), func.max(Activity.created_at))
            .where(Activity.user_id == uid)
            .group_by(Activity.type)
            .order_by(func.count(Activity.id).desc())
        )
        by_type = [
            {
                "type": type_,
                "count": count,
                "lastActivity": last.isoformat() if last else None,
            }
            for type_, count, last in rows.all()
        ]
        return {"total": sum(t["count"] for t in by_type), "byType": by_type}


def serialize_activity(activity: Activity) -> dict:
    return {
        "id": str(activity.id),
        "type": activity.type,
        "title": activity.title,
        "details": activity.details or {},
        "timestamp": activity.created_at.isoformat() if activity.created_at else None,
    }


async def log_activity(
    user_id: str,
    type: ActivityType,
    title: str,
    details: dict | None = None,
) -> None:
    """Record an activity in its own session. Never raises."""
    try:
        async with get_db() as db:
            await ActivityService(db).record(user_id, type, title, details)
    except Exception:
        logger.exception("Failed to log %s activity for user %s", type, user_id)


def update_events(result: dict) -> list[tuple[ActivityType, str, dict]]:
    """Activities describing a successful ``update_item`` result."""
    item = result["item"]
    previous = result.get("previous", {})
    title = item.title
    events = [
        (ActivityType.WATCHLIST_UPDATE, f'Updated "{title}"', {"mediaTitle": title})
    ]
    if previous.get("status") != item.status:
        events.append((
            ActivityType.MEDIA_STATUS_CHANGE,
            f'Changed "{title}" status to {item.status.value}',
            {
                "mediaTitle": title,
                "oldStatus": getattr(previous.get("status"), "value", previous.get("status")),
                "newStatus": item.status.value,
            },
        ))
    if previous.get("rating") != item.rating and item.rating > 0:
        events.append((
            ActivityType.MEDIA_RATE,
            f'Rated "{title}" {item.rating:g}/10',
            {"mediaTitle": title, "rating": item.rating},
        ))
    events.extend(folder_events(title, previous.get("folder"), item.custom_folder))
    return events


def folder_events(title: str, old: str | None, new: str | None) -> list[tuple[ActivityType, str, dict]]:
    if old == new:
        return []
    if old and new:
        return [(
            ActivityType.FOLDER_ITEM_MOVE,
            f'Moved "{title}" from "{old}" to "{new}"',
            {"itemTitle": title, "fromFolder": old, "toFolder": new},
        )]
    if new:
        return [(
            ActivityType.FOLDER_ITEM_ADD,
            f'Added "{title}" to "{new}"',
            {"itemTitle": title, "folderName": new},
        )]
    return [(
        ActivityType.FOLDER_ITEM_REMOVE,
        f'Removed "{title}" from "{old}"',
        {"itemTitle": title, "folderName": old},
    )]
