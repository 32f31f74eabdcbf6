import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from newsdesk.config import settings
from newsdesk.database import engine
from newsdesk.exceptions import NewsdeskError
from newsdesk.middleware import RequestDiagnosticsMiddleware
from newsdesk.routers import categories, comments, news, users
from newsdesk.schemas import HealthResponse

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Newsdesk API starting (env=%s)", settings.APP_ENV)
    yield
    await engine.dispose()


app = FastAPI(
    title="Newsdesk API",
    description="Content-management backend for a news site: users, categories, news and comments.",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(RequestDiagnosticsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error envelope: {"error": {"code": ..., "message": ...}}
def _error(status_code: int, code: str, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message, **extra}},
    )


@app.exception_handler(NewsdeskError)
async def newsdesk_error_handler(request: Request, exc: NewsdeskError):
    return _error(exc.status_code, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return _error(
        422,
        "VALIDATION_ERROR",
        "Invalid input",
        issues=jsonable_encoder(exc.errors()),
    )


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    # Already logged with traceback by get_db before the rollback.
    return _error(500, "STORE_ERROR", "Unexpected database error")


# Routers
app.include_router(users.router)
app.include_router(categories.router)
app.include_router(news.router)
app.include_router(comments.router)


@app.api_route("/rpc/healthcheck", methods=["GET", "POST"], response_model=HealthResponse)
async def healthcheck():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc)}
