import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Body, Depends
from pydantic import BaseModel, ConfigDict

from api.dependencies import get_current_user_id, verify_gateway_secret
from api.responses import error_response
from core.database import get_db
from services.activity import ActivityType, folder_events, log_activity, update_events
from services.watchlist import WatchlistService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/watchlist",
    dependencies=[Depends(verify_gateway_secret)],
)


class ItemCreate(BaseModel):
    # Provider fields (status, rating, genre...) arrive loosely typed
    model_config = ConfigDict(extra="allow")

    title: str
    type: str


class FolderCreate(BaseModel):
    name: str


class FolderRename(BaseModel):
    name: str


class FolderAssignment(BaseModel):
    folder: str


@router.get("")
async def get_watchlist(user_id: str = Depends(get_current_user_id)):
    async with get_db() as db:
        document = await WatchlistService(db).get_document(user_id)
    return {"success": True, "watchlist": document.dump()}


@router.get("/stats")
async def get_stats(user_id: str = Depends(get_current_user_id)):
    async with get_db() as db:
        stats = await WatchlistService(db).get_stats(user_id)
    return {"success": True, "stats": stats}


@router.get("/search")
async def search(q: str = "", user_id: str = Depends(get_current_user_id)):
    async with get_db() as db:
        items = await WatchlistService(db).search(user_id, q)
    return {"success": True, "items": [i.dump() for i in items], "count": len(items)}


@router.post("/items")
async def add_item(
    body: ItemCreate,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
):
    async with get_db() as db:
        result = await WatchlistService(db).add_item(
            user_id, body.title, body.type, body.model_extra
        )
    if "error" in result:
        return error_response(result, "add item")

    item = result["item"]
    background_tasks.add_task(
        log_activity,
        user_id,
        ActivityType.WATCHLIST_ADD,
        f'Added "{item.title}" to Watchlist',
        {"mediaTitle": item.title, "mediaType": item.media_type.value},
    )
    return {"success": True, "message": "Item added to Watchlist successfully", "item": item.dump()}


@router.put("/items/{item_id}")
async def update_item(
    item_id: str,
    background_tasks: BackgroundTasks,
    patch: dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
):
    async with get_db() as db:
        result = await WatchlistService(db).update_item(user_id, item_id, patch)
    if "error" in result:
        return error_response(result, "update item")

    for type_, title, details in update_events(result):
        background_tasks.add_task(log_activity, user_id, type_, title, details)
    return {"success": True, "message": "Item updated successfully", "item": result["item"].dump()}


@router.delete("/items/{item_id}")
async def remove_item(
    item_id: str,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
):
    async with get_db() as db:
        result = await WatchlistService(db).remove_item(user_id, item_id)
    if "error" in result:
        return error_response(result, "remove item")

    item = result["item"]
    background_tasks.add_task(
        log_activity,
        user_id,
        ActivityType.WATCHLIST_REMOVE,
        f'Removed "{item.title}" from Watchlist',
        {"mediaTitle": item.title, "mediaType": item.media_type.value},
    )
    return {"success": True, "message": "Item removed from Watchlist successfully"}


@router.put("/items/{item_id}/folder")
async def assign_item_to_folder(
    item_id: str,
    body: FolderAssignment,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
):
    async with get_db() as db:
        result = await WatchlistService(db).assign_item_to_folder(user_id, item_id, body.folder)
    if "error" in result:
        return error_response(result, "move item")

    item = result["item"]
    for type_, title, details in folder_events(item.title, result["previous_folder"], item.custom_folder):
        background_tasks.add_task(log_activity, user_id, type_, title, details)
    return {"success": True, "message": "Item moved successfully", "item": item.dump()}


@router.post("/folders")
async def create_folder(
    body: FolderCreate,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
):
    async with get_db() as db:
        result = await WatchlistService(db).create_folder(user_id, body.name)
    if "error" in result:
        return error_response(result, "create folder")

    folder = result["folder"]
    background_tasks.add_task(
        log_activity,
        user_id,
        ActivityType.FOLDER_CREATE,
        f'Created folder "{folder.name}"',
        {"folderName": folder.name},
    )
    return {"success": True, "message": "Folder created successfully", "folder": folder.dump()}


@router.put("/folders/{folder_id}")
async def rename_folder(
    folder_id: str,
    body: FolderRename,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
):
    async with get_db() as db:
        result = await WatchlistService(db).rename_folder(user_id, folder_id, body.name)
    if "error" in result:
        return error_response(result, "rename folder")

    folder = result["folder"]
    if result["previous_name"] != folder.name:
        background_tasks.add_task(
            log_activity,
            user_id,
            ActivityType.FOLDER_RENAME,
            f'Renamed folder "{result["previous_name"]}" to "{folder.name}"',
            {"oldName": result["previous_name"], "newName": folder.name},
        )
    return {"success": True, "message": "Folder updated successfully", "folder": folder.dump()}


@router.delete("/folders/{folder_id}")
async def delete_folder(
    folder_id: str,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
):
    async with get_db() as db:
        result = await WatchlistService(db).delete_folder(user_id, folder_id)
    if "error" in result:
        return error_response(result, "delete folder")

    folder = result["folder"]
    background_tasks.add_task(
        log_activity,
        user_id,
        ActivityType.FOLDER_DELETE,
        f'Deleted folder "{folder.name}"',
        {"folderName": folder.name, "untaggedItems": result["untagged"]},
    )
    return {"success": True, "message": "Folder deleted successfully"}


@router.post("/folders/{name_or_id}/share")
async def share_folder(
    name_or_id: str,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
):
    async with get_db() as db:
        result = await WatchlistService(db).share_folder(user_id, name_or_id)
    if "error" in result:
        return error_response(result, "share folder")

    folder = result["folder"]
    folder_name = folder["name"] if isinstance(folder, dict) else folder.name
    background_tasks.add_task(
        log_activity,
        user_id,
        ActivityType.FOLDER_SHARE,
        f'Shared folder "{folder_name}"',
        {"folderName": folder_name, "shareUrl": result["share_url"]},
    )
    return {"success": True, "message": "Folder shared successfully", "shareUrl": result["share_url"]}


@router.delete("/folders/{name_or_id}/share")
async def unshare_folder(
    name_or_id: str,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
):
    async with get_db() as db:
        result = await WatchlistService(db).unshare_folder(user_id, name_or_id)
    if "error" in result:
        return error_response(result, "unshare folder")

    folder = result["folder"]
    background_tasks.add_task(
        log_activity,
        user_id,
        ActivityType.FOLDER_UNSHARE,
        f'Stopped sharing folder "{folder.name}"',
        {"folderName": folder.name},
    )
    return {"success": True, "message": "Folder is no longer shared", "folder": folder.dump()}
