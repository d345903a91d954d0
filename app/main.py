from typing import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from .config import settings
from .db import Database
from .errors import AppError
from .middleware import ErrorHandlingMiddleware, LoggingMiddleware, SecurityHeadersMiddleware
from .routers.admin import router as admin_router
from .routers.auth import router as auth_router
from .routers.blogs import router as blogs_router

logger = logging.getLogger(__name__)


# Lifespan context manager for startup and shutdown events
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    database = getattr(app.state, "database", None)
    if database is None:
        database = Database(config=settings)
        app.state.database = database

    logger.info("⚡ Initializing database connection...")
    try:
        await database.connect()
        logger.info("✅ Database initialized successfully")
    except Exception as e:
        # Requests retry the init through the get_database dependency
        logger.warning(f"⚠️ Database initialization warning: {str(e)}")

    yield  # App runs here

    database.close()
    logger.info("Database connection closed")


# Initialize FastAPI app with lifespan
app = FastAPI(
    title="Coaching Institute API",
    description="Backend API for the coaching institute site: auth, blog and admin dashboard",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(ErrorHandlingMiddleware)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.message} on {request.method} {request.url.path}")
    else:
        logger.info(f"{exc.status_code} {exc.message} on {request.method} {request.url.path}")
    return error_response(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return error_response(status.HTTP_400_BAD_REQUEST, "; ".join(messages) or "Invalid request")


# Include routers
app.include_router(auth_router)
app.include_router(blogs_router)
app.include_router(admin_router)


# Health check endpoints
@app.get("/")
async def root():
    return {"message": "Coaching Institute API is running!", "status": "healthy"}


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "coaching-api"}


@app.get("/api/v1/db-health")
async def db_health_check(request: Request):
    """Check MongoDB connection health - useful for diagnosing connection issues"""
    database: Database = request.app.state.database
    try:
        ping_ms = await database.ping()
        return {
            "status": "connected",
            "database": database.name,
            "timing": {"ping_ms": round(ping_ms, 2)},
            "server_time": datetime.now().isoformat(),
        }
    except Exception as e:
        logger.warning(f"DB health check failed: {str(e)}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "error",
                "error": str(e),
                "error_type": type(e).__name__,
                "server_time": datetime.now().isoformat(),
            },
        )


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
