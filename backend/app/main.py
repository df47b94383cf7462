"""
Student Course Registration Service - FastAPI Application Entry Point.

This module:
1. Sets up structured JSON logging
2. Builds the Database gateway and stores it on app.state
3. Implements request ID middleware (X-Request-ID header)
4. Registers the student, course and registration routers
5. Provides health check endpoint

Layout:
- routes/: API endpoint handlers (presentation only)
- services/: student catalog, course catalog, registration ledger
- models/: SQLAlchemy ORM models
- schemas.py: Pydantic request bodies and read projections
- logging_config.py: Structured logging configuration
- database.py: Database gateway
"""

import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.logging_config import (
    setup_logging, get_logger, log_with_context,
    request_id_var, generate_request_id
)
from app.routes import students, courses, registrations
from app.database import DATABASE_URL, Database

# Logging first, so the database setup below is logged as JSON too
setup_logging()
logger = get_logger("http")

database = Database(DATABASE_URL)

# Auto-create tables for SQLite local development
if DATABASE_URL.startswith("sqlite"):
    logger.info("Using SQLite, creating tables directly")
    database.create_tables()

app = FastAPI(
    title="Student Course Registration Service",
    description=(
        "Tracks students, courses and the registrations between them: "
        "enrolment, drops, grades and registration status."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)
app.state.database = database

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"]
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """
    Tag every request with a UUID.

    The id is stored in request_id_var so every log entry produced while
    serving the request carries it, and is echoed in the X-Request-ID
    response header. Start and completion are logged with latency.
    """
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

    response = await call_next(request)

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


app.include_router(students.router, tags=["Students"])
app.include_router(courses.router, tags=["Courses"])
app.include_router(registrations.router, tags=["Registrations"])


@app.get("/health", tags=["Health"])
def health_check(request: Request):
    """Liveness plus a database connectivity check."""
    db_ok = request.app.state.database.check_connection()
    return {
        "status": "healthy" if db_ok else "degraded",
        "database": "connected" if db_ok else "unreachable",
        "service": "student-registration-backend",
        "version": "1.0.0"
    }


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "service": "Student Course Registration Service",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "students": "GET|POST /api/students",
            "student_detail": "GET|PUT|DELETE /api/students/{id}",
            "student_courses": "GET /api/students/{id}/courses",
            "courses": "GET|POST /api/courses",
            "course_detail": "GET|PUT|DELETE /api/courses/{id}",
            "course_students": "GET /api/courses/{id}/students",
            "register": "POST /api/registrations",
            "registrations": "GET /api/registrations",
            "drop": "DELETE /api/registrations/{student_id}/{course_id}",
            "grade": "PUT /api/registrations/{student_id}/{course_id}/grade",
            "status": "PUT /api/registrations/{student_id}/{course_id}/status"
        }
    }
