"""
FastAPI application for the lecture summarizer.
"""

import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lecture_summarizer.config import config
from lecture_summarizer.api.routes import router
from lecture_summarizer.db.database import init_db
from lecture_summarizer.utils.error_handling import LectureSummarizerError
from lecture_summarizer.utils.logger import logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize components on application startup."""
    init_db()
    logging.info(f"{config.APP_NAME} v{config.APP_VERSION} started, data dir: {config.DATA_DIR}")
    yield


# FastAPI application
app = FastAPI(
    title=config.APP_NAME,
    version=config.APP_VERSION,
    description="An API for extracting, transcribing and summarizing lecture videos",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Middleware to add processing time header to responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.exception_handler(LectureSummarizerError)
async def lecture_summarizer_exception_handler(request: Request, exc: LectureSummarizerError):
    """Translate application errors into JSON error responses."""
    logging.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled exceptions."""
    logging.error(f"Unhandled error on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"detail": f"An unexpected error occurred: {str(exc)}"},
    )


# Include API router
app.include_router(router)


# Root
@app.get("/")
async def root():
    """Root endpoint returning basic API information."""
    return {
        "name": config.APP_NAME,
        "version": config.APP_VERSION,
        "description": "Lecture Video Summarizer API",
    }
