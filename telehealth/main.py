import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware

# .env must be loaded before settings are imported
load_dotenv()

from .core.config import settings
from .database import create_db_and_tables
from .exceptions import http_exception_handler, validation_exception_handler
from .infrastructure.booking.memory_appointments_repo import InMemoryAppointmentsRepository
from .middleware import ErrorHandlingMiddleware, LoggingMiddleware, RequestSizeLimitMiddleware, SecurityMiddleware
from .routers import appointments_router, auth_router, users_router
from .utils import utcnow

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format=settings.LOG_FORMAT,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    app.state.db_init_ok, app.state.db_init_error = True, None
    try:
        create_db_and_tables()
    except Exception as e:
        # Keep serving; /health reports the failure
        logger.exception("Could not create database tables")
        app.state.db_init_ok, app.state.db_init_error = False, str(e)
    else:
        logger.info("Database tables ready")
    if not settings.secret_key_configured:
        logger.warning("JWT_SECRET_KEY is not set; register and login will fail until it is")
    yield
    logger.info(f"{settings.APP_NAME} stopped")


docs_on = settings.DOCS_ENABLED
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    docs_url="/docs" if docs_on else None,
    redoc_url="/redoc" if docs_on else None,
    openapi_url="/openapi.json" if docs_on else None,
)

# Per-session booking state, owned by this app instance
app.state.appointments_repo = InMemoryAppointmentsRepository()

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Last added runs first: CORS, then GZip, size cap, headers, logging, catch-all
for middleware in (ErrorHandlingMiddleware, LoggingMiddleware, SecurityMiddleware, RequestSizeLimitMiddleware):
    app.add_middleware(middleware)
app.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MIN_SIZE)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_methods=settings.allowed_methods_list,
    allow_headers=settings.allowed_headers_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
)

for module in (auth_router, users_router, appointments_router):
    app.include_router(module.router)


@app.get("/health", tags=["Service"])
def health_check():
    db_ok = getattr(app.state, "db_init_ok", True)
    return {
        "status": "healthy" if db_ok else "degraded",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": utcnow().isoformat(),
        "database": {"ok": db_ok, "error": getattr(app.state, "db_init_error", None)},
        "auth": {
            "secret_key_configured": settings.secret_key_configured,
            "token_expiry_minutes": settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("telehealth.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
