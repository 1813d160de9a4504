"""
FastAPI application for youtube2txt.
"""

import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from youtube2txt.config import config
from youtube2txt.api.routes import router
from youtube2txt.core.transcript_service import TranscriptService, build_extractor_settings
from youtube2txt.utils.error_handling import TranscriptError
from youtube2txt.utils.logger import logging

# FastAPI application
app = FastAPI(
    title=config.APP_NAME,
    version=config.APP_VERSION,
    description="An API for extracting plain text transcripts from YouTube videos",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Resolve yt-dlp and build the shared transcript service."""
    settings = build_extractor_settings()
    app.state.settings = settings
    app.state.transcript_service = TranscriptService(settings)
    logging.info(f"{config.APP_NAME} v{config.APP_VERSION} ready (yt-dlp: {settings.ytdlp_path or 'missing'})")


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Middleware to add processing time header to responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.exception_handler(TranscriptError)
async def transcript_exception_handler(request: Request, exc: TranscriptError):
    """Caller-visible pipeline failures: a message, never a stack trace."""
    if exc.status_code >= 500:
        logging.error(f"Error: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled exceptions."""
    logging.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": f"An unexpected error occurred: {str(exc)}"},
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
        "description": "YouTube transcript extraction API",
        "endpoints": ["/transcript", "/languages", "/health"],
    }


@app.get("/health")
async def health():
    """Report whether yt-dlp was resolved at startup."""
    settings = getattr(app.state, "settings", None)
    return {"status": "ok", "ytdlp": bool(settings and settings.ytdlp_path)}
