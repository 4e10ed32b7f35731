import logging
import os
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from .config import get_settings
from .db import close_mongo_connection, connect_to_mongo, is_connected
from .redis_bus import start_consumer as redis_bus_start_consumer, stop as redis_bus_stop
from .routers import blocks, feed, likes, matches, profiles, triggers
from .services.triggers import TRIGGER_TOPICS, trigger_stream_handler

LOGGER = logging.getLogger("uvicorn.error")

app = FastAPI(title="Kindred Python API")

# Build CORS origins list from env (supports CSV). Include both localhost and 127.0.0.1 by default.
_origins_env = os.getenv("CORS_ORIGINS") or os.getenv("CORS_ORIGIN") or "http://localhost:5173,http://127.0.0.1:5173"
_allow_origins = [o.strip() for o in _origins_env.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)
app.add_middleware(GZipMiddleware, minimum_size=512)


@app.middleware("http")
async def log_slow_requests(request, call_next):
    t0 = time.time()
    response = await call_next(request)
    dt = (time.time() - t0) * 1000
    slow_ms = int(os.getenv("SLOW_REQUEST_MS", "800"))
    if dt >= slow_ms:
        LOGGER.warning(
            "[perf] slow request %s %s %dms status=%s",
            request.method,
            request.url.path,
            int(dt),
            response.status_code,
        )
    return response


@app.on_event("startup")
async def startup():
    await connect_to_mongo()
    # Redis pub/sub delivery of like/block triggers (optional)
    if get_settings().redis_pubsub_enabled:
        try:
            await redis_bus_start_consumer(trigger_stream_handler, TRIGGER_TOPICS)
            LOGGER.info("[Events] Redis trigger listener started")
        except Exception as exc:
            LOGGER.error("[Events] listener start failed (non-fatal): %s", exc)
    else:
        LOGGER.info("[Events] Redis pub/sub disabled; triggers delivered in-process")


@app.on_event("shutdown")
async def shutdown():
    await close_mongo_connection()
    await redis_bus_stop()


# Routers
app.include_router(feed.router, prefix="/api", tags=["feed"])
app.include_router(likes.router, prefix="/api", tags=["likes"])
app.include_router(matches.router, prefix="/api", tags=["matches"])
app.include_router(blocks.router, prefix="/api", tags=["blocks"])
app.include_router(profiles.router, prefix="/api", tags=["profiles"])
app.include_router(triggers.router, prefix="/api", tags=["triggers"])


@app.get("/")
async def root():
    return {"status": "python-api-ok"}


@app.get("/api/health/db")
async def db_health():
    return {
        "mongo": "connected" if is_connected() else "disconnected",
        "db": str(get_settings().mongo_db),
    }
