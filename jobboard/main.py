"""
FastAPI application entry point for the job board API.

- CORS from ALLOWED_ORIGINS
- MongoDB connection lifecycle
- JSON error payloads for domain errors and validation failures
- all routers
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobboard.config import ALLOWED_ORIGINS
from jobboard.database import connect_to_mongo, close_mongo_connection
from jobboard.routes.application import router as application_router
from jobboard.routes.auth import router as auth_router
from jobboard.routes.job import router as job_router
from jobboard.routes.password_reset import router as password_reset_router
from jobboard.routes.saved_job import router as saved_job_router
from jobboard.utils.errors import JobBoardError, Unauthenticated

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting job board API...")
    await connect_to_mongo()
    yield
    logger.info("Shutting down job board API...")
    await close_mongo_connection()


app = FastAPI(
    title="Job Board API",
    description="Job listings with admin approval, applications and saved jobs",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ===========================
# ERROR HANDLERS
# ===========================

@app.exception_handler(JobBoardError)
async def job_board_error_handler(request: Request, exc: JobBoardError):
    content = {"detail": exc.message}
    if exc.detail:
        content["error"] = exc.detail
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": "Validation failed", "errors": errors})


# ===========================
# REGISTER ROUTERS
# ===========================

app.include_router(auth_router)
app.include_router(password_reset_router)
app.include_router(job_router)
app.include_router(application_router)
app.include_router(saved_job_router)


@app.get("/")
async def root():
    return {
        "status": "Job Board API Running",
        "version": "1.0.0",
        "documentation": "/docs",
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": "1.0.0"}
