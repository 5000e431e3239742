import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette import status

from core.config import settings
from core.database import engine
from core.errors import StorageUnavailableError
from models.base import Base
# Model modules register their tables on Base.metadata
from models import daily_quota, match, profile, swipe  # noqa: F401
from services import match_events

from routers.profile import router as profile_router
from routers.compatibility import router as compatibility_router
from routers.feed import router as feed_router
from routers.quota import router as quota_router
from routers.swipes import router as swipes_router
from routers.match import router as match_router
from routers.health import router as health_router

app = FastAPI(
    title="InnerMatch Backend",
    version="0.1.0",
    description="Discovery and compatibility matching core for InnerMatch"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger = logging.getLogger("uvicorn.error")


@app.middleware("http")
async def log_request_time(request: Request, call_next):
    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"{request.method} {request.url.path} completed in {process_time:.2f} ms"
    )
    return response


@app.exception_handler(StorageUnavailableError)
@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: Exception):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage unavailable, try again later"},
    )


app.include_router(profile_router)
app.include_router(compatibility_router)
app.include_router(feed_router)
app.include_router(quota_router)
app.include_router(swipes_router)
app.include_router(match_router)
app.include_router(health_router)


@app.on_event("startup")
async def on_startup():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@app.get("/")
async def root():
    return {"message": "InnerMatch Backend"}


@app.on_event("shutdown")
async def shutdown():
    await match_events.drain()
    # Close every pooled connection
    await engine.dispose()
