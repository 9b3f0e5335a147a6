import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from agency_dashboard.config import settings
from agency_dashboard.database import AsyncSessionLocal, init_models
from agency_dashboard.errors import AppError, OperationFailed
from agency_dashboard.logging_setup import setup_logging
from agency_dashboard.routers.announcements import router as announcements_router
from agency_dashboard.routers.auth import router as auth_router
from agency_dashboard.routers.clients import router as clients_router
from agency_dashboard.routers.leaderboard import router as leaderboard_router
from agency_dashboard.routers.tasks import router as tasks_router
from agency_dashboard.routers.users import router as users_router
from agency_dashboard.services.accounts import ensure_admin_account
from agency_dashboard.utils.dates import utcnow

logger = logging.getLogger(__name__)


async def prepare_database():
    await init_models()
    async with AsyncSessionLocal() as db:
        await ensure_admin_account(db)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    await prepare_database()
    logger.info("Agency dashboard API ready")
    yield
    logger.info("Agency dashboard API shutting down")


app = FastAPI(
    lifespan=lifespan,
    title="Agency Dashboard API",
    description="Tasks, points, streaks, announcements and leaderboards for agency staff",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        messages.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return JSONResponse(status_code=400, content={"error": ", ".join(messages)})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": OperationFailed.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": OperationFailed.message})


app.include_router(auth_router)
app.include_router(tasks_router)
app.include_router(users_router)
app.include_router(announcements_router)
app.include_router(leaderboard_router)
app.include_router(clients_router)


@app.get("/health")
def health():
    return {"status": "OK", "timestamp": utcnow().isoformat()}
