import logging

from fastapi import APIRouter

from api.responses import error_response
from core.database import get_db
from services.sharing import SharingService

logger = logging.getLogger(__name__)

# Public: no gateway secret, no user header
router = APIRouter(prefix="/api/watchlist/shared")


@router.get("/{folder_key}")
@router.get("/{folder_key}/{owner_user_id}")
async def get_shared_folder(folder_key: str, owner_user_id: str | None = None):
    async with get_db() as db:
        result = await SharingService(db).get_shared_view(folder_key, owner_user_id)
    if "error" in result:
        return error_response(result, "load shared folder")
    logger.info("Served shared folder %s (%d items)", folder_key, len(result["items"]))
    return result
