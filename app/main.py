import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1.api import api_router
from app.core.config import settings
from app.db.init_db import init_database
from app.db.mongodb import mongodb
from app.exceptions import ErrorKind, PropertyServiceError

# Configure logging
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

# Suppress DEBUG logs from external libraries
logging.getLogger("pymongo").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

STATUS_KINDS = {
    status.HTTP_400_BAD_REQUEST: ErrorKind.BAD_REQUEST,
    status.HTTP_401_UNAUTHORIZED: ErrorKind.UNAUTHORIZED,
    status.HTTP_403_FORBIDDEN: ErrorKind.FORBIDDEN,
    status.HTTP_404_NOT_FOUND: ErrorKind.NOT_FOUND,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting application lifespan")
    await mongodb.connect_to_mongo()
    await init_database()
    logger.info("Database initialized")

    try:
        yield
    finally:
        # Shutdown
        await mongodb.close_mongo_connection()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API for posting, searching and promoting property listings",
    version="0.1.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

if settings.cors_origins_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def error_response(status_code: int, kind: ErrorKind, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "error": kind.value, "message": message},
        headers=headers,
    )


@app.exception_handler(PropertyServiceError)
async def property_error_handler(request: Request, exc: PropertyServiceError):
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.kind.value, exc.message)
    return error_response(exc.status_code, exc.kind, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    kind = STATUS_KINDS.get(exc.status_code, ErrorKind.INTERNAL_ERROR)
    return error_response(exc.status_code, kind, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = ", ".join(".".join(str(loc) for loc in err["loc"]) for err in exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, ErrorKind.BAD_REQUEST, f"Invalid request: {fields}")


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorKind.INTERNAL_ERROR, "Internal server error")


# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)

# Export app for use in other modules
__all__ = ["app"]


@app.get("/")
async def root():
    return {"message": "Property Listing API is running"}


@app.get("/health")
async def health_check():
    """Health check endpoint that verifies system components"""
    health_status = {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat(), "components": {}}

    # Check MongoDB connection
    try:
        await mongodb.client.admin.command("ping")
        health_status["components"]["mongodb"] = "healthy"
    except Exception as e:
        health_status["components"]["mongodb"] = f"unhealthy: {str(e)}"
        health_status["status"] = "unhealthy"

    return health_status
