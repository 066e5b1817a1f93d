import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from api.activities import router as activities_router
from api.health import router as health_router
from api.shared import router as shared_router
from api.watchlist import router as watchlist_router
from config import settings
from core.database import engine
from core.errors import ErrorCode
from models import Base

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database ready, share links point to %s", settings.CLIENT_URL)

    yield
    await engine.dispose()


app = FastAPI(title="Watchlist", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "X-Gateway-Secret", "X-User-Id"],
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "no-referrer"
        return response


app.add_middleware(SecurityHeadersMiddleware)


@app.exception_handler(SQLAlchemyError)
@app.exception_handler(OSError)
async def storage_unavailable(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Storage failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=503,
        content={
            "success": False,
            "error": "Service temporarily unavailable, please retry",
            "code": ErrorCode.SERVICE_UNAVAILABLE.value,
        },
    )


app.include_router(health_router)
app.include_router(shared_router)
app.include_router(watchlist_router)
app.include_router(activities_router)
