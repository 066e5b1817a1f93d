from fastapi import APIRouter, Depends, Query

from api.dependencies import get_current_user_id, verify_gateway_secret
from core.database import get_db
from services.activity import ActivityService, serialize_activity

router = APIRouter(
    prefix="/api/activities",
    dependencies=[Depends(verify_gateway_secret)],
)


@router.get("")
async def get_activities(
    limit: int | None = Query(default=None, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
):
    async with get_db() as db:
        activities = await ActivityService(db).get_recent(user_id, limit)
    return {
        "success": True,
        "activities": [serialize_activity(a) for a in activities],
        "count": len(activities),
    }


@router.get("/stats")
async def get_activity_stats(user_id: str = Depends(get_current_user_id)):
    async with get_db() as db:
        stats = await ActivityService(db).stats(user_id)
    return {"success": True, "stats": stats}


@router.delete("")
async def clear_activities(user_id: str = Depends(get_current_user_id)):
    async with get_db() as db:
        deleted = await ActivityService(db).clear(user_id)
    return {"success": True, "message": "All activities cleared successfully", "deleted": deleted}
