"""
Student Hub - FastAPI Application Entry Point.

This module:
1. Initializes the FastAPI app with CORS middleware
2. Sets up structured JSON logging
3. Implements request ID middleware (X-Request-ID header)
4. Maps request validation failures to the API's error envelope
5. Registers the students, attendance and badges routers
6. Serves uploaded images from /uploads
7. Owns the database engine lifecycle (table creation on SQLite, disposal on shutdown)

Layout:
- routes/: API endpoint handlers
- services/: Business logic (attendance rules, students, badges, uploads)
- models/: SQLAlchemy ORM models
- repository.py: Student and badge record store
- errors.py: Failure taxonomy mapped to HTTP status codes
"""

import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from student_hub.logging_config import (
    setup_logging, get_logger, log_with_context,
    request_id_var, generate_request_id
)
from student_hub.routes import attendance, badges, students
from student_hub.database import DATABASE_URL, create_tables, dispose_engine
from student_hub.services.uploads import UPLOAD_DIR

# Register all models with Base.metadata
import student_hub.models  # noqa: F401

setup_logging()
logger = get_logger("http")
db_logger = get_logger("db")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if DATABASE_URL.startswith("sqlite"):
        log_with_context(db_logger, "INFO", "Using SQLite, creating tables directly")
        create_tables()
    yield
    dispose_engine()
    log_with_context(db_logger, "INFO", "Database engine disposed")


app = FastAPI(
    title="Student Hub",
    description=(
        "Manage students, their weekly ratings, attendance records and "
        "achievement badges."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

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

    The ID is stored in a context variable so every log entry written
    while serving the request carries it, and it is echoed back in the
    X-Request-ID response header.
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


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and parameters are bad input (400), reported in the usual envelope."""
    details = "; ".join(
        "{}: {}".format(".".join(str(part) for part in error.get("loc", ())), error.get("msg", ""))
        for error in exc.errors()
    )
    log_with_context(logger, "WARNING", "Request validation failed",
                     extra_data={"path": request.url.path, "errors": details})
    return JSONResponse(
        status_code=400,
        content={
            "status": "error",
            "message": "Invalid request data. Please check the input data.",
            "error": details,
        },
    )


app.include_router(students.router, tags=["Students"])
app.include_router(attendance.router, tags=["Attendance"])
app.include_router(badges.router, tags=["Badges"])

UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(UPLOAD_DIR)), name="uploads")


@app.get("/health", tags=["Health"])
def health_check():
    """Liveness probe for container health checks."""
    return {"status": "healthy", "service": "student-hub-backend", "version": "1.0.0"}


@app.get("/api/", tags=["Root"])
def root():
    """API information."""
    return {
        "status": "success",
        "message": "Student Hub API",
        "data": {
            "docs": "/docs",
            "health": "/health",
            "endpoints": {
                "students": "GET|POST /api/students",
                "student": "GET|PUT|DELETE /api/students/{id}",
                "attendance": "GET|POST /api/students/{id}/attendance",
                "attendance_record": "GET|PUT|DELETE /api/students/{id}/attendance/{attendanceId}",
                "attendance_stats": "GET /api/students/{id}/attendance/stats",
                "ratings": "POST /api/students/{id}/ratings",
                "badges": "GET|POST /api/badges"
            }
        }
    }
