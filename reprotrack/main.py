"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging
import time

from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from reprotrack.config import Settings
from reprotrack.database import engine
from reprotrack.exceptions import ReproTrackingError
from reprotrack.routers import auth, mothers, litters, offspring, reports

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses."""
    
    async def dispatch(self, request: Request, call_next):
        """Log request and response details."""
        # Generate request ID for tracing
        request_id = id(request)
        
        start_time = time.time()
        logger.info(
            "Request started",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else None
            }
        )
        
        try:
            response = await call_next(request)
        except Exception as exc:
            duration = time.time() - start_time
            logger.error(
                "Request failed",
                exc_info=True,
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": round(duration * 1000, 2),
                    "error_type": type(exc).__name__,
                    "error_message": str(exc)
                }
            )
            # Re-raise to let exception handlers deal with it
            raise
        
        duration = time.time() - start_time
        logger.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration * 1000, 2)
            }
        )
        return response


# Create settings instance for the application
settings = Settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    logger.info(f"Application started: {settings.app_name}")
    logger.info(f"Debug mode: {settings.debug}")
    if not settings.summarizer_api_key:
        logger.warning("SUMMARIZER_API_KEY is not set; report summaries are unavailable")
    
    yield
    
    await engine.dispose()
    logger.info(f"Application shutdown: {settings.app_name}")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
    Livestock Reproduction Tracking API
    
    This API records reproductive events for breeding females and reports on
    their performance:
    
    * **Mothers**: Breeding females, registered explicitly or on their first litter
    * **Litters**: Births, identified as `<mother_id>-<n>` per mother
    * **Offspring**: Individual animals with weaning and death records
    * **Reports**: Named performance reports merged across mothers and date windows
    * **Summaries**: Narrative analysis of a report, cached until it changes
    
    ## Authentication
    
    All record endpoints require a JWT bearer token:
    
    1. Register a new user at `/api/auth/register`
    2. Login at `/api/auth/jwt/login` to receive a JWT token
    3. Include the token in the `Authorization` header as `Bearer <token>`
    
    Every record belongs to the authenticated user; other users' records are
    invisible.
    
    ## Error Handling
    
    All errors return consistent JSON responses with:
    - `detail`: Human-readable error message
    - `error_code`: Machine-readable error code
    
    Error codes:
    - `NOT_FOUND` (404): Referenced record does not exist
    - `CONFLICT` (409): Duplicate id or name, or a disallowed change
    - `INVALID_STATE` (409): Weaning or death recorded in the wrong lifecycle state
    - `INVALID_INPUT` (400): Malformed input such as an inverted date range
    - `VALIDATION_ERROR` (422): Request body failed schema validation
    - `DEPENDENCY_FAILURE` (502): The report summarizer failed
    - `INTERNAL_ERROR` (500): Unexpected server error
    """,
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "auth",
            "description": "Authentication operations including registration and login.",
        },
        {
            "name": "users",
            "description": "Current user profile.",
        },
        {
            "name": "mothers",
            "description": "Breeding females and their litter history.",
        },
        {
            "name": "litters",
            "description": "Litter records. Create, read, update and delete litters.",
        },
        {
            "name": "offspring",
            "description": "Offspring records, renames, weaning and deaths.",
        },
        {
            "name": "reports",
            "description": "Reproductive performance reports and their narrative summaries.",
        },
    ],
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add logging middleware
app.add_middleware(LoggingMiddleware)


@app.get("/")
async def root() -> dict:
    """Root endpoint returning API information."""
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "status": "operational",
        "docs": "/api/docs"
    }


# Include routers
app.include_router(auth.router, prefix="/api/auth")
app.include_router(mothers.router)
app.include_router(litters.router)
app.include_router(offspring.router)
app.include_router(reports.router)


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app_name": settings.app_name
    }


# Global exception handlers

@app.exception_handler(ReproTrackingError)
async def domain_error_handler(request: Request, exc: ReproTrackingError) -> JSONResponse:
    """Render domain errors as tagged JSON responses."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code}: {request.url.path} - {exc.detail}")
    else:
        logger.info(f"{exc.error_code}: {request.url.path} - {exc.detail}")
    
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error_code": exc.error_code
        }
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request body and parameter validation failures."""
    logger.info(f"Validation error: {request.url.path}")
    return JSONResponse(
        status_code=422,
        content={
            "detail": jsonable_encoder(exc.errors()),
            "error_code": "VALIDATION_ERROR"
        }
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions including authentication errors."""
    if exc.status_code == 403:
        logger.warning(
            f"Authorization failure: {request.url.path} - User attempted to access forbidden resource"
        )
    elif exc.status_code >= 500:
        logger.error(f"HTTP error {exc.status_code}: {request.url.path} - {exc.detail}")
    else:
        logger.info(f"HTTP {exc.status_code}: {request.url.path}")
    
    # Map status codes to error codes
    error_code_map = {
        404: "NOT_FOUND",
        403: "FORBIDDEN",
        401: "UNAUTHORIZED",
        422: "VALIDATION_ERROR",
        400: "BAD_REQUEST",
    }
    
    error_code = error_code_map.get(exc.status_code, f"HTTP_{exc.status_code}")
    
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error_code": error_code
        },
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions."""
    logger.error(
        f"Unhandled exception: {request.url.path}",
        exc_info=True,
        extra={
            "method": request.method,
            "url": str(request.url),
            "client": request.client.host if request.client else None
        }
    )
    
    content = {
        "detail": "Internal server error",
        "error_code": "INTERNAL_ERROR"
    }
    if settings.debug:
        content["error_type"] = type(exc).__name__
        content["error_message"] = str(exc)
    return JSONResponse(status_code=500, content=content)


if __name__ == "__main__":
    import uvicorn
    
    uvicorn.run(
        "reprotrack.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
