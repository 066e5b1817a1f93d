import uuid

from fastapi import Header, HTTPException

from config import settings


async def verify_gateway_secret(
    x_gateway_secret: str = Header(...),
) -> None:
    if x_gateway_secret != settings.GATEWAY_SECRET:
        raise HTTPException(status_code=401, detail="Invalid gateway secret")


async def get_current_user_id(
    x_user_id: str = Header(...),
) -> str:
    """User identity as authenticated by the gateway."""
    try:
        return str(uuid.UUID(x_user_id))
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid user id")
