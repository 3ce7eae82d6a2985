from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import logging
import time
from typing import Callable
from contextlib import asynccontextmanager
from fastapi.routing import APIRoute
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.exceptions import ChurchServiceError
from app.api.v1.api import api_router
from app.core.database import db

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

FAILURE_DETAIL = "Request could not be processed"

def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique ID for API routes"""
    tag = route.tags[0] if route.tags else "default"
    return f"{tag}-{route.name}"

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle startup and shutdown events for the application
    """
    try:
        # Startup
        logger.info("Starting up application...")

        db.init_app()

        if await db.check_connection():
            logger.info("Successfully connected to database")
        else:
            logger.error("Failed to connect to database")
            raise RuntimeError("Database connection failed")

        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"API Version 1 path: {settings.API_V1_STR}")
        logger.info(f"Backend CORS origins: {settings.BACKEND_CORS_ORIGINS}")

        yield  # Server is running

        # Shutdown
        logger.info("Shutting down application...")
        db.dispose()
        logger.info("Application shutdown complete")

    except Exception as e:
        logger.error(f"Application lifecycle error: {str(e)}")
        raise


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    generate_unique_id_function=custom_generate_unique_id,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    lifespan=lifespan,
)


# Middleware for request timing and logging
@app.middleware("http")
async def add_process_time_header(request: Request, call_next: Callable):
    """Add processing time to response header and log request details"""
    start_time = time.time()

    logger.info(f"Request: {request.method} {request.url}")

    try:
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        logger.info(f"Response: {response.status_code} - Process Time: {process_time:.4f}s")
        return response
    except Exception as e:
        logger.error(f"Request failed: {str(e)}")
        process_time = time.time() - start_time
        logger.info(f"Error Response - Process Time: {process_time:.4f}s")
        raise

# Every rejected church or service operation gets the same 400; only the kind is returned
@app.exception_handler(ChurchServiceError)
async def church_service_exception_handler(request: Request, exc: ChurchServiceError):
    logger.warning(f"{request.method} {request.url.path} rejected ({exc.kind}): {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": FAILURE_DETAIL, "kind": exc.kind},
    )

@app.exception_handler(SQLAlchemyError)
async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"{request.method} {request.url.path} database error: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": FAILURE_DETAIL, "kind": "store"},
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"{request.method} {request.url.path} validation error: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": FAILURE_DETAIL, "kind": "validation"},
    )

# Set all CORS enabled origins
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# API router
app.include_router(api_router, prefix=settings.API_V1_STR)

# Root endpoint
@app.get("/", tags=["root"])
async def root():
    """
    Root endpoint providing API information and documentation links.
    """
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "docs": f"{settings.API_V1_STR}/docs",
        "redoc": f"{settings.API_V1_STR}/redoc"
    }
