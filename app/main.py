"""
app/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Builds the store / reply / engine graph and registers routes
- No business logic should be written here
- Manages application lifecycle (startup/shutdown)
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import time

import httpx

from app.core.config import settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.db.mongo import (
    connect_to_mongo,
    close_mongo_connection,
    check_database_health,
    get_database,
    get_states_collection,
    get_users_collection,
    get_records_collection,
)
from app.db.indexes import create_indexes
from app.flow.dispatcher import EventDispatcher
from app.flow.engine import ConversationEngine
from app.services.line_service import LineReplyService
from app.services.record_service import MongoRecordStore
from app.services.session_service import MongoStateStore
from app.services.user_service import MongoProfileStore
from app.api import webhook

# Initialize logging first
setup_logging()
logger = get_logger(__name__)

APP_VERSION = "1.0.0"


def build_dispatcher(http_client: httpx.AsyncClient) -> EventDispatcher:
    """
    Wires the conversation engine to MongoDB and the LINE reply API.
    """
    timeout = settings.STORE_TIMEOUT_SECONDS
    engine = ConversationEngine(
        states=MongoStateStore(get_states_collection(), timeout),
        profiles=MongoProfileStore(get_users_collection(), timeout),
        records=MongoRecordStore(get_records_collection(), timeout),
        replier=LineReplyService(
            client=http_client,
            access_token=settings.LINE_CHANNEL_ACCESS_TOKEN,
            base_url=settings.LINE_API_BASE_URL,
            timeout=settings.LINE_API_TIMEOUT,
        ),
        timezone_offset_hours=settings.TIMEZONE_OFFSET_HOURS,
    )
    return EventDispatcher(engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("🚀 Starting report bot...")

    try:
        logger.info("Validating configuration...")
        validate_settings()
        logger.info("✅ Configuration validated")

        logger.info("Connecting to MongoDB...")
        await connect_to_mongo()
        logger.info("✅ MongoDB connected")

        logger.info("Creating database indexes...")
        await create_indexes(get_database())
        logger.info("✅ Database indexes created")

        app.state.http_client = httpx.AsyncClient(timeout=settings.LINE_API_TIMEOUT)
        app.state.dispatcher = build_dispatcher(app.state.http_client)

        logger.info("🎉 Report bot started successfully!")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Debug Mode: {settings.DEBUG}")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    logger.info("🛑 Shutting down report bot...")

    try:
        await app.state.http_client.aclose()
        logger.info("✅ HTTP client closed")

        await close_mongo_connection()
        logger.info("✅ MongoDB connection closed")

        logger.info("👋 Report bot shut down successfully")

    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


app = FastAPI(
    title="Report Bot",
    description="LINE-based activity report wizard",
    version=APP_VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,  # Disable docs in production
    redoc_url="/redoc" if settings.is_development else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    # LINE expects webhook answers within a few seconds
    if process_time > 2.0:
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )

    return response


add_exception_handlers(app)

app.include_router(webhook.router, prefix=settings.API_PREFIX, tags=["Webhook"])


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - basic info."""
    return {
        "name": "Report Bot API",
        "version": APP_VERSION,
        "description": "LINE-based activity report wizard",
        "status": "running",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    The database is required; a missing LINE token only degrades the bot
    (events are still stored, replies fail).
    """
    checks = {
        "database": "healthy" if await check_database_health() else "unhealthy",
        "line_reply": "configured" if settings.LINE_CHANNEL_ACCESS_TOKEN else "not_configured",
    }

    if checks["database"] != "healthy":
        overall = "unhealthy"
    elif checks["line_reply"] != "configured":
        overall = "degraded"
    else:
        overall = "healthy"

    return JSONResponse(
        status_code=503 if overall == "unhealthy" else 200,
        content={
            "status": overall,
            "timestamp": time.time(),
            "environment": settings.ENVIRONMENT,
            "version": APP_VERSION,
            "checks": checks,
        }
    )


@app.get("/ready", tags=["Health"])
async def readiness_check(request: Request):
    """
    Readiness probe - the dispatcher is wired and MongoDB answers.
    """
    if getattr(request.app.state, "dispatcher", None) is None:
        reason = "dispatcher_not_initialized"
    elif not await check_database_health():
        reason = "database_unavailable"
    else:
        return {"status": "ready"}

    return JSONResponse(status_code=503, content={"status": "not_ready", "reason": reason})


@app.get("/live", tags=["Health"])
async def liveness_check():
    """
    Liveness probe - indicates if app is alive.
    """
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
