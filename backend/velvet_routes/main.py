import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from velvet_routes.config import settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "velvet_routes.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("apscheduler").setLevel(logging.WARNING)

from velvet_routes.database import get_db, init_models, ping, utcnow
from velvet_routes.exceptions import StoreError, VelvetError
from velvet_routes.middleware import RequestLoggingMiddleware
from velvet_routes.routers import auth, bookings, hotels, payments, plans, sharing, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        await init_models()

    # Startup: launch housekeeping scheduler
    scheduler = None
    if settings.scheduler_enabled:
        scheduler = AsyncIOScheduler()

        async def _purge_expired_shares():
            from velvet_routes.database import async_session_factory
            from velvet_routes.services.sharing_service import sharing_service
            async with async_session_factory() as db:
                count = await sharing_service.purge_expired(db)
                if count:
                    logger.info(f"Shared trips: {count} expired entries removed")

        scheduler.add_job(
            _purge_expired_shares,
            CronTrigger(hour=settings.share_cleanup_hour, minute=0),
            id="purge_expired_shares",
        )
        scheduler.start()
        logger.info("Background scheduler started")

    yield

    # Shutdown
    if scheduler:
        scheduler.shutdown(wait=False)
        logger.info("Background scheduler stopped")


app = FastAPI(
    title="Velvet Routes",
    description="Travel planning, booking and payment API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)


# ─── Error envelope ───

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(VelvetError)
async def velvet_error_handler(request: Request, exc: VelvetError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        message = str(first.get("msg", message)).removeprefix("Value error, ")
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        if field and first.get("type") != "value_error":
            message = f"{field}: {message}"
    return _error(400, message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        return _error(404, "API endpoint not found")
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"{request.method} {request.url.path} store failure: {exc}")
    return _error(500, StoreError.default_message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error(500, "Internal server error")


app.include_router(auth.router, prefix="/api/users", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(plans.router, prefix="/api/plans", tags=["plans"])
app.include_router(hotels.router, prefix="/api/hotels", tags=["hotels"])
app.include_router(bookings.router, prefix="/api/bookings", tags=["bookings"])
app.include_router(payments.router, prefix="/api", tags=["payments"])
app.include_router(sharing.router, prefix="/api/trips/share", tags=["sharing"])


@app.get("/api/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    connected = await ping(db)
    return {
        "success": True,
        "message": "Velvet Routes API is running!",
        "database": "Connected" if connected else "Disconnected",
        "timestamp": utcnow().isoformat(),
    }
