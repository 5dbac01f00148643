"""
Coursework Grading Backend - FastAPI application entry point.

Wires together:
1. Structured JSON logging
2. CORS and request ID (X-Request-ID) middleware
3. Domain error handlers
4. The assessment and result routers
5. Health check endpoint

Layout:
- routes/: API endpoint handlers
- models/: SQLAlchemy ORM models
- services/: catalog lookups, scoring engine, result reports
- auth.py: caller identity forwarded by the auth gateway
- errors.py: domain exceptions
"""

import os
import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.logging_config import (
    setup_logging, get_logger, log_with_context,
    request_id_var, generate_request_id
)
from app.errors import GradingError
from app.routes import assessments, results
from app.database import DATABASE_URL, create_tables

# Registers every table with Base.metadata
from app import models  # noqa: F401

setup_logging()
logger = get_logger("http")

if DATABASE_URL.startswith("sqlite"):
    logger.info("Using SQLite — creating tables directly")
    create_tables()

app = FastAPI(
    title="Coursework Grading Backend",
    description=(
        "Grades multiple-choice assessment submissions against the course "
        "catalog and reports results to students and instructors."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"]
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Tag the request with a UUID, echo it in X-Request-ID and log start/end with latency."""
    req_id = generate_request_id()
    request_id_var.set(req_id)
    start_time = time.time()

    log_with_context(logger, "INFO",
        f"Request started: {request.method} {request.url.path}",
        context={"request_id": req_id},
        extra_data={
            "ip": request.client.host if request.client else "unknown",
            "user_agent": request.headers.get("user-agent", ""),
            "query_params": dict(request.query_params)
        })

    try:
        response = await call_next(request)
    except Exception as exc:
        log_with_context(logger, "ERROR",
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            context={"request_id": req_id},
            extra_data={"error": type(exc).__name__},
            exc_info=exc)
        response = JSONResponse(status_code=500, content={"detail": "Internal server error"})

    duration_ms = (time.time() - start_time) * 1000
    response.headers["X-Request-ID"] = req_id

    log_with_context(logger, "INFO",
        f"Request completed: {request.method} {request.url.path} → {response.status_code}",
        context={"request_id": req_id},
        extra_data={
            "duration_ms": round(duration_ms, 2),
            "status_code": response.status_code
        })

    return response


@app.exception_handler(GradingError)
async def grading_error_handler(request: Request, exc: GradingError):
    log_with_context(logger, "WARNING" if exc.status_code < 500 else "ERROR",
        f"{request.method} {request.url.path} failed: {exc.message}",
        extra_data={"status_code": exc.status_code, "error": type(exc).__name__})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log_with_context(logger, "ERROR",
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        extra_data={"error": type(exc).__name__},
        exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(assessments.router, tags=["Assessments"])
app.include_router(results.router, tags=["Results"])


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "healthy", "service": "coursework-grading-backend", "version": "1.0.0"}


@app.get("/", tags=["Root"])
def root():
    """Service information and endpoint index."""
    return {
        "service": "Coursework Grading Backend",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "create_assessment": "POST /api/assessments",
            "assessment": "GET /api/assessments/{id}",
            "submit": "POST /api/results/submit",
            "results": "GET /api/results",
            "result": "GET|PUT|DELETE /api/results/{id}",
            "student_result": "GET /api/results/student/{userId}/assessment/{assessmentId}",
            "submissions": "GET /api/results/assessment/{assessmentId}/submissions",
            "submission_detail": "GET /api/results/assessment/{assessmentId}/submission/{resultId}"
        }
    }
