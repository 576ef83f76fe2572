"""
Registrar API Server

FastAPI application exposing the student, course and enrollment
integrity layer as a JSON API.
"""
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from registrar.api.routes import courses, enrollments, integrity, students
from registrar.database import create_engine, create_session_factory, init_models
from registrar.exceptions import (
    DanglingReference,
    DuplicateEnrollment,
    NotFound,
    RegistrarError,
    ValidationError,
)
from registrar.services.integrity_auditor import IntegrityAuditor
from registrar.services.integrity_enforcer import IntegrityEnforcer
from registrar.services.query_facade import QueryFacade
from registrar.services.scheduler import start_scheduler, stop_scheduler

VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFound: status.HTTP_404_NOT_FOUND,
    DanglingReference: status.HTTP_409_CONFLICT,
    DuplicateEnrollment: status.HTTP_409_CONFLICT,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Builds the engine and services on startup, disposes them on shutdown.
    """
    # Startup
    logger.info("Starting Registrar API server...")

    engine = create_engine()
    await init_models(engine)
    session_factory = create_session_factory(engine)

    app.state.enforcer = IntegrityEnforcer(session_factory)
    app.state.queries = QueryFacade(session_factory)
    app.state.auditor = IntegrityAuditor(session_factory)

    start_scheduler(app.state.auditor)

    yield

    # Shutdown
    logger.info("Shutting down Registrar API server...")
    stop_scheduler()
    await engine.dispose()


# Create FastAPI application
app = FastAPI(
    title="Registrar API",
    description="Students, courses and enrollments with enforced relational integrity",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing"""
    start_time = time.time()

    response = await call_next(request)

    duration_ms = (time.time() - start_time) * 1000

    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Duration: {duration_ms:.2f}ms"
    )

    return response


# Registrar rule violations
@app.exception_handler(RegistrarError)
async def registrar_exception_handler(request: Request, exc: RegistrarError):
    """Map registrar error kinds to HTTP status codes"""
    status_code = ERROR_STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An internal server error occurred",
                "details": str(exc) if app.debug else None
            }
        }
    )


# Validation error handler
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors"""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": [
                    {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]}
                    for error in exc.errors()
                ]
            }
        }
    )


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns server status and version information.
    """
    return {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "version": VERSION,
        "service": "registrar-api"
    }


# Include routers
app.include_router(students.router)
app.include_router(courses.router)
app.include_router(enrollments.router)
app.include_router(integrity.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
